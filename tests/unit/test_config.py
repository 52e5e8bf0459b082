"""Tests for configuration defaults and env overrides."""

from __future__ import annotations

import os

from ledgerach.core.config import AppSettings, NachaConfig


def test_default_settings():
    settings = AppSettings()
    assert settings.environment == "dev"
    assert settings.log_format == "json"
    assert settings.redis.lock_ttl_seconds == 300


def test_nacha_config_defaults():
    config = NachaConfig()
    assert config.immediate_destination == "021000021"
    assert config.default_file_id_modifier == "A"
    assert config.storage_prefix == "ach-files/"
    assert config.line_terminator == os.linesep


def test_line_separator_choices():
    assert NachaConfig(line_separator="lf").line_terminator == "\n"
    assert NachaConfig(line_separator="crlf").line_terminator == "\r\n"


def test_env_override(monkeypatch):
    monkeypatch.setenv("LEDGERACH_NACHA_IMMEDIATE_ORIGIN_NAME", "ACME PAYABLES")
    monkeypatch.setenv("LEDGERACH_NACHA_LINE_SEPARATOR", "crlf")
    config = NachaConfig()
    assert config.immediate_origin_name == "ACME PAYABLES"
    assert config.line_terminator == "\r\n"
