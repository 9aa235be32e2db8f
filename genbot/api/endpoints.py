# genbot/api/endpoints.py
"""
Local HTTP surface for the Lambda handlers.

Each route turns the FastAPI request into a proxy-integration event, runs the
same handler object that Lambda would run, and converts the proxy result back
into a FastAPI response.
"""

import base64
from types import SimpleNamespace
from typing import Any, Dict, Optional
from uuid import uuid4

from fastapi import APIRouter, Query, Request, Response
from fastapi.concurrency import run_in_threadpool

from genbot.api.schemas import DeliveryMode, PathSource
from genbot.dependencies import ImageServiceDep, SettingsDep, StorageServiceDep
from genbot.handlers.generate import GenerateHandler
from genbot.handlers.retrieve import RetrieveHandler
from genbot.utils.logger import get_logger

router = APIRouter(tags=["GenBot"])
logger = get_logger(__name__)


def _lambda_context() -> SimpleNamespace:
    return SimpleNamespace(aws_request_id=str(uuid4()))


def to_fastapi_response(result: Dict[str, Any]) -> Response:
    headers = dict(result.get("headers") or {})
    body = result.get("body")
    if body is None:
        content = b""
    elif result.get("isBase64Encoded"):
        content = base64.b64decode(body)
    else:
        content = body.encode("utf-8")
    media_type = headers.pop("content-type", None) or ("text/plain; charset=utf-8" if body is not None else None)
    return Response(content=content, status_code=result["statusCode"], headers=headers, media_type=media_type)


@router.get("/health", summary="Health check")
def health():
    return {"status": "ok"}


@router.post("/generate", summary="Generate an image from a prompt")
async def generate(
    request: Request,
    settings: SettingsDep,
    image_service: ImageServiceDep,
    storage_service: StorageServiceDep,
    mode: Optional[DeliveryMode] = Query(None, description="Delivery mode, defaults to DELIVERY_MODE"),
):
    raw_body = await request.body()
    event = {
        "rawPath": request.url.path,
        "body": raw_body.decode("utf-8", errors="replace"),
        "isBase64Encoded": False,
    }
    handler = GenerateHandler(
        mode or settings.DELIVERY_MODE,
        settings=settings,
        image_service=image_service,
        storage_service=storage_service,
    )
    # boto3 calls block, keep them off the event loop
    result = await run_in_threadpool(handler, event, _lambda_context())
    logger.info(f"POST /generate ({handler.delivery_mode.value}) -> {result['statusCode']}")
    return to_fastapi_response(result)


@router.get("/images/{image_file_name}", summary="Retrieve a stored image")
def retrieve(image_file_name: str, settings: SettingsDep, storage_service: StorageServiceDep):
    event = {
        "rawPath": f"/images/{image_file_name}",
        "pathParameters": {settings.RETRIEVE_PATH_PARAMETER: image_file_name},
    }
    handler = RetrieveHandler(PathSource.PATH_PARAMETER, settings=settings, storage_service=storage_service)
    return to_fastapi_response(handler(event, _lambda_context()))
