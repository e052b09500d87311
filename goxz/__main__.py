"""Allow ``python -m goxz``."""

from goxz.cli import main

if __name__ == "__main__":
    main()
