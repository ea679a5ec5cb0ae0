"""Tests for the loguru sink setup."""
from analytics_overview.config import Settings
from analytics_overview.utils.logger import log, setup_logger


def test_error_log_level_is_configurable(tmp_path):
    setup_logger(Settings(log_dir=str(tmp_path), error_log_level="WARNING"))
    try:
        log.info("Fetching overview: Today")
        log.warning("Analytics overview update skipped")
    finally:
        log.remove()
        setup_logger()

    [error_log] = tmp_path.glob("errors_*.log")
    content = error_log.read_text()
    assert "Analytics overview update skipped" in content
    assert "Fetching overview" not in content

    [update_log] = tmp_path.glob("analytics_overview_*.log")
    assert "Fetching overview: Today" in update_log.read_text()
