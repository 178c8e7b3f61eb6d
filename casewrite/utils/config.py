"""Configuration management for the case intake service."""

import os
import yaml
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigurationError, MissingCredentialError

API_KEY_ENV_VARS = ("BEDROCK_API_KEY", "AWS_BEARER_TOKEN_BEDROCK")


@dataclass
class BedrockConfig:
    """AWS Bedrock configuration."""
    model_id: str
    timeout: int
    max_tokens: int
    temperature: float


@dataclass
class IntakeConfig:
    """Upload limits for the intake form."""
    max_file_size_mb: int


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str
    format: str
    file: Optional[str] = None


@dataclass
class Config:
    """Main configuration class."""
    aws_region: str
    bedrock: BedrockConfig
    intake: IntakeConfig
    logging: LoggingConfig
    api_key: Optional[str] = None

    @classmethod
    def load(cls, config_path: str = "config.yaml") -> "Config":
        """
        Load configuration from file and environment variables.

        Environment variables override config file values:
        - AWS_REGION
        - BEDROCK_MODEL_ID
        - MAX_FILE_SIZE_MB
        - LOG_LEVEL
        - BEDROCK_API_KEY / AWS_BEARER_TOKEN_BEDROCK (credential, never in the file)

        Args:
            config_path: Path to YAML configuration file

        Returns:
            Config instance with loaded settings

        Raises:
            ConfigurationError: If the file is missing or a value is malformed
        """
        try:
            with open(config_path, 'r') as f:
                config_data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            raise ConfigurationError.missing_file(config_path)

        aws_region = os.getenv("AWS_REGION", config_data["aws"]["region"])

        bedrock_data = config_data["aws"]["bedrock"]
        bedrock_config = BedrockConfig(
            model_id=os.getenv("BEDROCK_MODEL_ID", bedrock_data["model_id"]),
            timeout=int(bedrock_data["timeout"]),
            max_tokens=int(bedrock_data["max_tokens"]),
            temperature=float(bedrock_data["temperature"])
        )

        intake_data = config_data["intake"]
        max_file_size = os.getenv("MAX_FILE_SIZE_MB", intake_data["max_file_size_mb"])
        try:
            max_file_size_mb = int(max_file_size)
        except (TypeError, ValueError) as e:
            raise ConfigurationError.invalid_value("MAX_FILE_SIZE_MB", max_file_size, e)

        intake_config = IntakeConfig(
            max_file_size_mb=max_file_size_mb
        )

        logging_data = config_data["logging"]
        logging_config = LoggingConfig(
            level=os.getenv("LOG_LEVEL", logging_data["level"]),
            format=logging_data["format"],
            file=logging_data.get("file") or None
        )

        return cls(
            aws_region=aws_region,
            bedrock=bedrock_config,
            intake=intake_config,
            logging=logging_config,
            api_key=resolve_api_key(),
        )

    def validate(self) -> None:
        """
        Startup-time check that a model credential is configured.

        Raises:
            MissingCredentialError: If no API key was found in the environment
        """
        if not self.api_key:
            raise MissingCredentialError.for_variables(*API_KEY_ENV_VARS)


def resolve_api_key() -> Optional[str]:
    """Return the first non-blank Bedrock API key found in the environment."""
    for env_var in API_KEY_ENV_VARS:
        value = os.getenv(env_var)
        if value and value.strip():
            return value.strip()
    return None
