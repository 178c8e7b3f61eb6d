"""
Service wiring for the intake front end.

Builds the config, model client, request builder and case session once and
hands the session to the web layer.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from dotenv import load_dotenv

from .request_builder import RequestBuilder
from .session import CaseSession
from .utils.bedrock_client import BedrockClient
from .utils.config import Config
from .utils.logging import setup_logging

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

# config.yaml sits at the project root, beside server.py
DEFAULT_CONFIG_PATH = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "config.yaml"
)

# Global instances (initialized on first use)
_config: Optional[Config] = None
_session: Optional[CaseSession] = None


def initialize(config_path: str = DEFAULT_CONFIG_PATH) -> CaseSession:
    """
    Load configuration, validate the credential and build the case session.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        The shared CaseSession

    Raises:
        ConfigurationError: If the configuration cannot be loaded
        MissingCredentialError: If no model API key is configured
    """
    global _config, _session

    if _session is not None:
        return _session

    logger.info("Initializing case intake service")

    _config = Config.load(config_path)
    setup_logging(
        level=_config.logging.level,
        log_format=_config.logging.format,
        log_file=_config.logging.file,
    )
    logger.info(f"Configuration loaded: region={_config.aws_region}, model={_config.bedrock.model_id}")

    _config.validate()

    client = BedrockClient(
        api_key=_config.api_key,
        region=_config.aws_region,
        model_id=_config.bedrock.model_id,
        timeout=_config.bedrock.timeout,
        max_tokens=_config.bedrock.max_tokens,
        temperature=_config.bedrock.temperature,
    )
    _session = CaseSession(RequestBuilder(client, api_key=_config.api_key))

    logger.info("Service initialization complete")
    return _session


def get_session() -> CaseSession:
    """Return the shared session, initializing it on first use."""
    return initialize()


def get_config() -> Optional[Config]:
    return _config


def use_session(session: Optional[CaseSession], config: Optional[Config] = None) -> None:
    """Install a pre-built session (or clear it with None)."""
    global _config, _session
    _session = session
    _config = config
