"""Unit tests for src/core/config.py and src/core/logging_config.py"""

import logging

import pytest

from src.core.config import Settings, load_settings
from src.core.logging_config import configure_logging


def test_defaults_without_environment() -> None:
    settings = load_settings({})
    assert settings == Settings()
    assert settings.database_url is None
    assert settings.admin is None
    assert settings.log_level == "INFO"
    assert settings.sql_echo is False


def test_reads_prefixed_variables() -> None:
    settings = load_settings(
        {
            "CHESS_DATABASE_URL": "sqlite:///matches.db",
            "CHESS_ADMIN": "peach",
            "CHESS_LOG_LEVEL": "debug",
            "CHESS_SQL_ECHO": "true",
            "UNRELATED": "ignored",
        }
    )
    assert settings.database_url == "sqlite:///matches.db"
    assert settings.admin == "peach"
    assert settings.log_level == "DEBUG"
    assert settings.sql_echo is True


def test_blank_values_count_as_unset() -> None:
    settings = load_settings({"CHESS_DATABASE_URL": "  ", "CHESS_ADMIN": ""})
    assert settings.database_url is None
    assert settings.admin is None


@pytest.mark.parametrize(
    "environ",
    [
        {"CHESS_LOG_LEVEL": "chatty"},
        {"CHESS_SQL_ECHO": "maybe"},
    ],
)
def test_invalid_settings(environ: dict[str, str]) -> None:
    with pytest.raises(ValueError):
        load_settings(environ)


def test_configure_logging_sets_level() -> None:
    configure_logging("WARNING")
    logger = logging.getLogger("src")
    assert logger.level == logging.WARNING
    assert len(logger.handlers) == 1

    # configuring again does not stack handlers
    configure_logging("DEBUG")
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
