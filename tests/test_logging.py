"""
Tests for goxz.logging module.
"""

from __future__ import annotations

import io

import pytest

from goxz.logging import DefaultLogger, SilentLogger, get_logger

pytestmark = pytest.mark.unit


class TestDefaultLogger:
    """Tests for DefaultLogger output gating and format."""

    def test_always_shown(self):
        stream = io.StringIO()
        logger = get_logger(stream=stream)

        logger.step(1, 5, "Loading configuration...")
        logger.info("WORK", "working dir: /tmp/x")
        logger.error("BUILD", "linux/arm: failed")

        assert stream.getvalue().splitlines() == [
            "[goxz] [1/5] Loading configuration...",
            "[goxz] [WORK] working dir: /tmp/x",
            "[goxz] [BUILD] [ERROR] linux/arm: failed",
        ]

    def test_verbose_gated(self):
        stream = io.StringIO()
        DefaultLogger(stream=stream).verbose("BUILD", "hidden")
        assert stream.getvalue() == ""

        DefaultLogger(verbose=True, stream=stream).verbose("BUILD", "shown")
        assert stream.getvalue() == "[goxz] [BUILD] shown\n"

    def test_debug_implies_verbose(self):
        stream = io.StringIO()
        logger = DefaultLogger(debug=True, stream=stream)

        logger.verbose("A", "one")
        logger.debug("B", "two")

        assert stream.getvalue().splitlines() == ["[goxz] [A] one", "[goxz] [B] two"]

    def test_verbose_does_not_enable_debug(self):
        stream = io.StringIO()
        DefaultLogger(verbose=True, stream=stream).debug("B", "hidden")
        assert stream.getvalue() == ""


def test_silent_logger_prints_nothing(capsys):
    logger = SilentLogger()
    logger.step(1, 1, "x")
    logger.info("A", "x")
    logger.error("A", "x")
    logger.verbose("A", "x")
    logger.debug("A", "x")

    captured = capsys.readouterr()
    assert captured.out == "" and captured.err == ""
