"""Unit tests for loguru sink setup."""

from loguru import logger

from faucet.utils.logging import setup_logging


def test_file_sink_receives_messages(tmp_path):
    log_file = tmp_path / "faucet.log"

    setup_logging("DEBUG", str(log_file))
    logger.debug("debug line")
    logger.info("info line")
    logger.remove()

    content = log_file.read_text(encoding="utf-8")
    assert "debug line" in content
    assert "info line" in content
    setup_logging()


def test_level_filters_file_sink(tmp_path):
    log_file = tmp_path / "faucet.log"

    setup_logging("WARNING", str(log_file))
    logger.info("hidden")
    logger.warning("shown")
    logger.remove()

    content = log_file.read_text(encoding="utf-8")
    assert "hidden" not in content
    assert "shown" in content
    setup_logging()
