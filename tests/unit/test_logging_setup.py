"""Tests for console logging setup."""

import logging

from rich.logging import RichHandler

from composite_builds._internal.logging import setup_logging


def rich_handlers(logger):
    return [h for h in logger.handlers if isinstance(h, RichHandler)]


def test_quiet_attaches_no_handler(clean_logging):
    setup_logging("quiet")
    assert rich_handlers(clean_logging) == []
    assert not clean_logging.isEnabledFor(logging.CRITICAL)


def test_normal_warns(clean_logging):
    setup_logging("normal")
    assert len(rich_handlers(clean_logging)) == 1
    assert clean_logging.level == logging.WARNING


def test_verbose_and_debug(clean_logging):
    setup_logging("verbose")
    assert clean_logging.level == logging.INFO

    setup_logging("DEBUG")
    assert clean_logging.level == logging.DEBUG
    assert len(rich_handlers(clean_logging)) == 1


def test_unknown_level_falls_back_to_normal(clean_logging):
    setup_logging("chatty")
    assert clean_logging.level == logging.WARNING


def test_setup_from_config(clean_logging, isolated_env):
    from composite_builds.settings import load_config

    config = load_config(logging={"level": "verbose"})
    setup_logging(config.logging.level)

    assert clean_logging.level == logging.INFO
