"""AWS Bedrock client wrapper for constrained-JSON document analysis."""

import asyncio
import base64
import binascii
import json
import logging
import os
from typing import Dict, List, Optional, Any

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError
from dotenv import load_dotenv

from ..models.request import ContentPart, ModelRequest
from ..schema import RESPONSE_TOOL_NAME, build_tool_config
from .errors import EncodingError, RemoteError

# Ensure environment variables are loaded
load_dotenv()

logger = logging.getLogger(__name__)

# MIME type -> (Converse content block kind, format)
CONVERSE_FORMATS: Dict[str, tuple] = {
    "image/jpeg": ("image", "jpeg"),
    "image/png": ("image", "png"),
    "image/webp": ("image", "webp"),
    "application/pdf": ("document", "pdf"),
}

# Converse document names allow only alphanumerics, spaces, hyphens, parentheses and brackets
DOCUMENT_NAME = "case-document"


class BedrockClient:
    """
    Wrapper for the AWS Bedrock Runtime client.

    Issues exactly one Converse call per request; there is no retry.
    Authentication uses a Bedrock API key sent as a bearer token.
    """

    def __init__(
        self,
        api_key: str,
        region: str = "us-east-1",
        model_id: str = "amazon.nova-pro-v1:0",
        timeout: int = 300,
        max_tokens: int = 8192,
        temperature: float = 0.2,
        runtime: Optional[Any] = None
    ):
        """
        Initialize Bedrock client.

        Args:
            api_key: Amazon Bedrock API key (bearer token)
            region: AWS region for Bedrock service
            model_id: Model ID used for document analysis
            timeout: Connect/read timeout in seconds
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            runtime: Pre-built bedrock-runtime client (tests inject a stub here)
        """
        self.region = region
        self.model_id = model_id
        self.max_tokens = max_tokens
        self.temperature = temperature

        if runtime is not None:
            self.runtime = runtime
        else:
            # botocore picks the bearer token up from this variable
            if api_key and not os.getenv("AWS_BEARER_TOKEN_BEDROCK"):
                os.environ["AWS_BEARER_TOKEN_BEDROCK"] = api_key

            config = Config(
                region_name=region,
                connect_timeout=timeout,
                read_timeout=timeout,
                retries={"max_attempts": 1, "mode": "standard"},
                signature_version="bearer",
            )
            self.runtime = boto3.client("bedrock-runtime", config=config)

        logger.info(f"Initialized BedrockClient: region={region}, model={model_id}")

    async def generate_content(self, request: ModelRequest) -> str:
        """
        Send one constrained-JSON request and return the raw JSON body.

        Args:
            request: Provider-neutral request built by the RequestBuilder

        Returns:
            Raw JSON text of the model's reply

        Raises:
            EncodingError: If an inline payload is not valid base64
            RemoteError: If the call fails or the reply carries no content
        """
        params = {
            "modelId": self.model_id,
            "messages": [
                {"role": "user", "content": self._content_blocks(request.parts)}
            ],
            "system": [{"text": request.system_instruction}],
            "inferenceConfig": {
                "temperature": self.temperature,
                "maxTokens": self.max_tokens,
            },
            "toolConfig": build_tool_config(request.response_schema),
        }

        logger.debug(f"Invoking {self.model_id} with {len(request.parts)} content part(s)")

        try:
            response = await asyncio.to_thread(self.runtime.converse, **params)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            logger.error(f"Bedrock API call failed: {error_code} - {e}")
            raise RemoteError.from_client_error(error=e, operation="converse")
        except Exception as e:
            logger.error(f"Unexpected error invoking {self.model_id}: {str(e)}")
            raise RemoteError.unexpected(error=e, operation="converse")

        logger.info(
            f"Model invocation successful: "
            f"stop_reason={response.get('stopReason')}, "
            f"usage={response.get('usage')}"
        )

        return self._extract_json_body(response)

    def _content_blocks(self, parts: List[ContentPart]) -> List[Dict[str, Any]]:
        """
        Translate content parts into Converse content blocks.

        boto3 expects raw bytes for image/document sources and base64-encodes
        them itself, so inline payloads are decoded here.
        """
        blocks: List[Dict[str, Any]] = []
        for part in parts:
            if part.is_text:
                blocks.append({"text": part.text})
                continue

            inline = part.inline_data
            kind, fmt = CONVERSE_FORMATS.get(inline.mime_type, (None, None))
            if kind is None:
                raise EncodingError.conversion_failed(inline.mime_type)

            try:
                raw = base64.b64decode(inline.data, validate=True)
            except (binascii.Error, ValueError) as e:
                raise EncodingError.conversion_failed(inline.mime_type, e)

            if kind == "image":
                blocks.append({"image": {"format": fmt, "source": {"bytes": raw}}})
            else:
                blocks.append({
                    "document": {"format": fmt, "name": DOCUMENT_NAME, "source": {"bytes": raw}}
                })
        return blocks

    def _extract_json_body(self, response: Dict[str, Any]) -> str:
        """
        Pull the reply body out of a Converse response.

        The forced tool's input is the constrained output; a plain text block
        is returned verbatim for the caller to parse.
        """
        message = response.get("output", {}).get("message", {})
        text_parts: List[str] = []

        for block in message.get("content", []):
            tool_use = block.get("toolUse")
            if tool_use and tool_use.get("name") == RESPONSE_TOOL_NAME:
                tool_input = tool_use.get("input")
                if isinstance(tool_input, str):
                    return tool_input
                return json.dumps(tool_input)
            if block.get("text"):
                text_parts.append(block["text"])

        text = "\n".join(text_parts).strip()
        if not text:
            raise RemoteError.empty_response(response.get("stopReason"))
        return text
