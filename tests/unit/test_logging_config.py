"""Unit tests for structlog configuration."""

from __future__ import annotations

import logging

import pytest
import structlog

from config.logging_config import configure_logging


@pytest.fixture(autouse=True)
def _restore_logging():
    levels = {name: logging.getLogger(name).level for name in ("httpx", "httpcore", "openai")}
    yield
    structlog.reset_defaults()
    for name, level in levels.items():
        logging.getLogger(name).setLevel(level)


def _renderer():
    return structlog.get_config()["processors"][-1]


def test_production_renders_json(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    configure_logging()
    assert isinstance(_renderer(), structlog.processors.JSONRenderer)


def test_development_renders_console(monkeypatch):
    monkeypatch.setenv("APP_ENV", "development")
    configure_logging()
    assert isinstance(_renderer(), structlog.dev.ConsoleRenderer)


def test_client_loggers_quieted_unless_debug(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    configure_logging()
    assert logging.getLogger("httpx").level == logging.WARNING
