import logging

import pytest


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """Drop handlers installed by setup_logging() during a test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture(autouse=True)
def _clean_weightcut_env(monkeypatch):
    for name in (
        "WEIGHTCUT_LOG_FORMAT",
        "WEIGHTCUT_LOG_LEVEL",
        "WEIGHTCUT_TIMEZONE",
        "WEIGHTCUT_HARNESS_SEED",
    ):
        monkeypatch.delenv(name, raising=False)
