"""Tests for configuration loading."""

import os

import pytest

from casewrite.utils.config import Config, resolve_api_key
from casewrite.utils.errors import (
    ConfigurationError,
    ErrorType,
    MissingCredentialError,
)

CONFIG_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "config.yaml")

ENV_VARS = (
    "AWS_REGION",
    "BEDROCK_MODEL_ID",
    "MAX_FILE_SIZE_MB",
    "LOG_LEVEL",
    "BEDROCK_API_KEY",
    "AWS_BEARER_TOKEN_BEDROCK",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_load_reads_yaml_defaults():
    config = Config.load(CONFIG_PATH)

    assert config.aws_region == "us-east-1"
    assert config.bedrock.model_id == "amazon.nova-pro-v1:0"
    assert config.intake.max_file_size_mb == 10
    assert config.logging.file is None
    assert config.api_key is None


def test_environment_overrides_file(monkeypatch):
    monkeypatch.setenv("AWS_REGION", "eu-west-1")
    monkeypatch.setenv("BEDROCK_MODEL_ID", "anthropic.claude-3-haiku-20240307-v1:0")
    monkeypatch.setenv("MAX_FILE_SIZE_MB", "5")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("BEDROCK_API_KEY", "secret")

    config = Config.load(CONFIG_PATH)

    assert config.aws_region == "eu-west-1"
    assert config.bedrock.model_id == "anthropic.claude-3-haiku-20240307-v1:0"
    assert config.intake.max_file_size_mb == 5
    assert config.logging.level == "DEBUG"
    assert config.api_key == "secret"


def test_bad_size_override_is_configuration_error(monkeypatch):
    monkeypatch.setenv("MAX_FILE_SIZE_MB", "ten")

    with pytest.raises(ConfigurationError) as exc_info:
        Config.load(CONFIG_PATH)

    assert exc_info.value.error_type == ErrorType.CONFIG_INVALID


def test_missing_file_is_configuration_error(tmp_path):
    with pytest.raises(ConfigurationError) as exc_info:
        Config.load(str(tmp_path / "missing.yaml"))

    assert exc_info.value.error_type == ErrorType.CONFIG_MISSING


def test_validate_requires_api_key():
    config = Config.load(CONFIG_PATH)

    with pytest.raises(MissingCredentialError) as exc_info:
        config.validate()

    assert "BEDROCK_API_KEY or AWS_BEARER_TOKEN_BEDROCK" in str(exc_info.value)


def test_api_key_fallback_variable(monkeypatch):
    monkeypatch.setenv("BEDROCK_API_KEY", "   ")
    monkeypatch.setenv("AWS_BEARER_TOKEN_BEDROCK", "bearer-token")

    assert resolve_api_key() == "bearer-token"


def test_default_config_path_does_not_depend_on_cwd(monkeypatch, tmp_path):
    from casewrite import service

    monkeypatch.chdir(tmp_path)

    assert os.path.isabs(service.DEFAULT_CONFIG_PATH)
    assert os.path.samefile(service.DEFAULT_CONFIG_PATH, CONFIG_PATH)
    assert Config.load(service.DEFAULT_CONFIG_PATH).intake.max_file_size_mb == 10
