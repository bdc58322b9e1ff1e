"""Async oracle invocation and JSON recovery for LLM responses."""

import asyncio
import base64
import json
import re

import structlog
from langchain_core.messages import HumanMessage
from langchain_core.output_parsers import StrOutputParser
from langchain_core.runnables import Runnable

from integrity.models import GatewayFailure

logger = structlog.get_logger(__name__)

_CODE_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)
_TRAILING_COMMA = re.compile(r",(\s*[}\]])")


class LLMChainError(Exception):
    """Error during an oracle call, tagged with the failure kind."""

    def __init__(self, kind: GatewayFailure, message: str):
        super().__init__(message)
        self.kind = kind


def _extract_json_from_text(text: str) -> str | None:
    """Return the first balanced top-level JSON object in text.

    Braces inside string literals are ignored.

    Args:
        text: Text that may contain a JSON object among other content.

    Returns:
        The object substring or None.
    """
    depth = 0
    start = None
    in_string = False
    escaped = False

    for i, char in enumerate(text):
        if escaped:
            escaped = False
            continue
        if in_string:
            if char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            if depth == 0:
                start = i
            depth += 1
        elif char == "}" and depth > 0:
            depth -= 1
            if depth == 0 and start is not None:
                return text[start:i + 1]

    return None


def _clean_json_string(text: str) -> str:
    """Strip BOM/zero-width characters and trailing commas."""
    text = text.strip("\ufeff\u200b\u200c\u200d \n\r\t")
    return _TRAILING_COMMA.sub(r"\1", text)


def parse_json_response(response: str) -> dict:
    """Parse a JSON object from an oracle response.

    Handles markdown code fences and prose around the object.

    Args:
        response: Raw response text.

    Returns:
        Parsed JSON object.

    Raises:
        LLMChainError: If the response is empty or holds no JSON object.
    """
    if not response or not response.strip():
        raise LLMChainError(GatewayFailure.EMPTY_RESPONSE, "Empty response from oracle")

    text = response.strip()
    fenced = _CODE_BLOCK.search(text)
    if fenced and fenced.group(1).lstrip().startswith("{"):
        text = fenced.group(1)

    candidates = [text]
    extracted = _extract_json_from_text(text)
    if extracted and extracted != text:
        candidates.append(extracted)

    for candidate in candidates:
        try:
            parsed = json.loads(_clean_json_string(candidate))
        except json.JSONDecodeError as e:
            logger.debug("json_candidate_rejected", error=str(e))
            continue
        if isinstance(parsed, dict):
            return parsed

    logger.warning("json_parse_error", response_preview=text[:300])
    raise LLMChainError(
        GatewayFailure.INVALID_JSON,
        f"Failed to parse oracle JSON response. Response preview: {text[:150]}",
    )


def to_data_url(payload: bytes, mime_type: str) -> str:
    """Encode binary content as a base64 data URL."""
    encoded = base64.b64encode(payload).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def build_media_message(instruction: str, payload: bytes, mime_type: str) -> HumanMessage:
    """Build one multimodal message: instruction text plus a binary part."""
    return HumanMessage(
        content=[
            {"type": "text", "text": instruction},
            {"type": "image_url", "image_url": {"url": to_data_url(payload, mime_type)}},
        ]
    )


async def run_oracle_chain(
    oracle: Runnable,
    message: HumanMessage,
    timeout: float,
    context_name: str = "oracle",
) -> dict:
    """Invoke the oracle once and return its parsed JSON object.

    Args:
        oracle: Chat model or any runnable accepting a message list.
        message: The request message.
        timeout: Upper bound in seconds for the call.
        context_name: Name for logging context.

    Returns:
        Parsed JSON object from the response.

    Raises:
        LLMChainError: On timeout, transport error, empty or non-JSON response.
    """
    chain = oracle | StrOutputParser()
    logger.debug(f"{context_name}_invoking", timeout=timeout)

    try:
        response = await asyncio.wait_for(chain.ainvoke([message]), timeout=timeout)
    except asyncio.TimeoutError as e:
        raise LLMChainError(GatewayFailure.TIMEOUT, f"Oracle did not answer within {timeout}s") from e
    except LLMChainError:
        raise
    except Exception as e:
        raise LLMChainError(GatewayFailure.TRANSPORT, f"{type(e).__name__}: {e}") from e

    logger.debug(
        f"{context_name}_raw_response",
        response_length=len(response) if response else 0,
        response_preview=response[:200] if response else "EMPTY",
    )

    return parse_json_response(response)
