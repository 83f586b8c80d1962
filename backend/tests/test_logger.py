import sys

from loguru import logger

from trainlog.core.config import Settings, settings
from trainlog.core.logger import setup_from_settings, setup_logger


def test_file_sink(tmp_path):
    log_file = tmp_path / "logs" / "trainlog.log"
    setup_logger(level="INFO", log_file=str(log_file))
    try:
        logger.debug("[TEST] hidden")
        logger.info("[TEST] written")
    finally:
        # closes and flushes the file sink
        logger.remove()
        logger.add(sys.stderr)

    content = log_file.read_text()
    assert "[TEST] written" in content
    assert "[TEST] hidden" not in content


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("TRAINLOG_LOG_FILE", "")
    monkeypatch.setenv("TRAINLOG_ACUTE_WINDOW_DAYS", "10")
    s = Settings()
    assert s.log_file is None
    assert s.acute_window_days == 10
    assert s.chronic_window_days == 42


def test_setup_from_settings(monkeypatch, tmp_path):
    log_file = tmp_path / "from_settings.log"
    monkeypatch.setattr(settings, "log_level", "WARNING")
    monkeypatch.setattr(settings, "log_file", str(log_file))
    setup_from_settings()
    try:
        logger.info("[TEST] below level")
        logger.warning("[TEST] kept")
    finally:
        logger.remove()
        logger.add(sys.stderr)

    content = log_file.read_text()
    assert "[TEST] kept" in content
    assert "[TEST] below level" not in content
