"""Tests for log level resolution and setup."""

import argparse
import logging

import pytest

from logging_utils import add_logging_args, configure_logging, resolve_log_level


class TestResolveLogLevel:
    @pytest.mark.parametrize(
        "verbose,quiet,expected",
        [
            (0, 0, logging.INFO),
            (1, 0, logging.DEBUG),
            (3, 0, logging.DEBUG),
            (0, 1, logging.WARNING),
            (0, 2, logging.ERROR),
            (0, 5, logging.ERROR),
            (1, 1, logging.INFO),
        ],
    )
    def test_verbosity_counts(self, verbose, quiet, expected):
        assert resolve_log_level(verbose=verbose, quiet=quiet) == expected

    def test_explicit_level_wins(self):
        assert resolve_log_level("Critical", verbose=2) == logging.CRITICAL


class TestLoggingArgs:
    def test_parses_flags(self):
        parser = argparse.ArgumentParser()
        add_logging_args(parser)
        args = parser.parse_args(["-vv", "--log-level", "error"])
        assert args.verbose == 2
        assert args.quiet == 0
        assert args.log_level == "error"

    def test_rejects_unknown_level(self):
        parser = argparse.ArgumentParser()
        add_logging_args(parser)
        with pytest.raises(SystemExit):
            parser.parse_args(["--log-level", "loud"])


def test_configure_logging_keeps_pillow_at_info():
    assert configure_logging(verbose=1) == logging.DEBUG
    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("PIL").level == logging.INFO
    configure_logging()
