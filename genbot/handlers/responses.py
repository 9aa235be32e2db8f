# genbot/handlers/responses.py
"""
Request parsing and proxy-integration response shaping shared by the handlers.

Responses follow the API Gateway / Lambda Function URL proxy format:
    {"statusCode": int, "headers": {...}, "body": str, "isBase64Encoded": bool}
"""

import base64
import binascii
import html
import json
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError

from genbot.api.schemas import GenerationRequest
from genbot.config.settings import DEFAULT_FALLBACK_IMAGE_URL, FALLBACK_MESSAGE_PREFIX, Settings
from genbot.utils.error_handler import RequestParseError

ProxyResponse = Dict[str, Any]

ACCESS_DENIED_BODY = "Access Denied"


def read_body(event: Mapping[str, Any]) -> str:
    body = event.get("body")
    if body is None:
        raise RequestParseError("Request has no body")
    if event.get("isBase64Encoded"):
        try:
            return base64.b64decode(body).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise RequestParseError(f"Request body is not valid base64 text: {e}") from e
    return body


def parse_generation_request(event: Mapping[str, Any]) -> GenerationRequest:
    """Parse {"command": ..., "creator": {"company": {"id": ...}}} from the event body."""
    body = read_body(event)
    try:
        return GenerationRequest.model_validate_json(body)
    except ValidationError as e:
        raise RequestParseError(f"Invalid generation request: {e.error_count()} error(s)", details={"errors": json.loads(e.json())}) from e


def text_response(body: str, status_code: int = 200) -> ProxyResponse:
    return {"statusCode": status_code, "body": body}


def access_denied_response() -> ProxyResponse:
    return text_response(ACCESS_DENIED_BODY, status_code=403)


def fallback_response(settings: Optional[Settings] = None) -> ProxyResponse:
    # always 200: callers display any 200 body, so failures still show something
    if settings is None:
        return text_response(f"{FALLBACK_MESSAGE_PREFIX} {DEFAULT_FALLBACK_IMAGE_URL}")
    return text_response(settings.fallback_message)


def image_response(data: bytes, content_type: str) -> ProxyResponse:
    return {
        "statusCode": 200,
        "headers": {"content-type": content_type},
        "body": base64.b64encode(data).decode("ascii"),
        "isBase64Encoded": True,
    }


def redirect_response(location: str) -> ProxyResponse:
    return {"statusCode": 303, "headers": {"Location": location}}


def html_image_tag(url: str, alt: str, size: int) -> str:
    return (
        f'<img src="{html.escape(url, quote=True)}" alt="{html.escape(alt, quote=True)}" '
        f'width="{size}" height="{size}"/>'
    )
