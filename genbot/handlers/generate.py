# genbot/handlers/generate.py
"""
Generator Lambda handlers.

Turns a prompt into an image with the image model and hands it back in one of
four delivery modes (see DeliveryMode):

    inline        binary image body (base64 + isBase64Encoded)
    base64        base64 string body
    signed-url    stores the image and returns an <img> tag with a presigned URL
    retrieve-url  stores the image and returns <RETRIEVE_API>/<file name>

Handler entrypoints (Lambda "Handler" setting):
    genbot.handlers.generate.handler               mode from DELIVERY_MODE
    genbot.handlers.generate.inline_handler
    genbot.handlers.generate.base64_handler
    genbot.handlers.generate.signed_url_handler
    genbot.handlers.generate.retrieve_url_handler
"""

import base64
from typing import Any, Mapping, Optional, Union

from genbot import dependencies
from genbot.api.schemas import DeliveryMode, GeneratedImage, GenerationRequest, StoredImageReference
from genbot.config.settings import Settings
from genbot.handlers.responses import (
    ProxyResponse,
    access_denied_response,
    fallback_response,
    html_image_tag,
    image_response,
    parse_generation_request,
    text_response,
)
from genbot.services.image_service import ImageService
from genbot.services.storage_service import StorageService
from genbot.utils.error_handler import AccessDeniedError, GenBotError
from genbot.utils.logger import get_logger

logger = get_logger(__name__)


def make_image_file_name(request_id: str, extension: str = ".png") -> str:
    """Object key for an invocation: one key per request id, never shared."""
    return f"{request_id}{extension}"


class GenerateHandler:
    def __init__(
            self,
            delivery_mode: Union[DeliveryMode, str],
            settings: Optional[Settings] = None,
            image_service: Optional[ImageService] = None,
            storage_service: Optional[StorageService] = None,
    ):
        self.delivery_mode = DeliveryMode(delivery_mode)
        self._settings = settings
        self._image_service = image_service
        self._storage_service = storage_service

    # services resolve lazily so a handler built at import time picks up the shared clients
    @property
    def settings(self) -> Settings:
        return self._settings or dependencies.get_settings()

    @property
    def image_service(self) -> ImageService:
        return self._image_service or dependencies.get_image_service()

    @property
    def storage_service(self) -> StorageService:
        return self._storage_service or dependencies.get_storage_service()

    def authorize(self, request: GenerationRequest) -> None:
        expected = self.settings.COMPANY_ID
        if expected is None or request.company_id != expected:
            raise AccessDeniedError(request.creator.company.id)

    def __call__(self, event: Mapping[str, Any], context: Any) -> ProxyResponse:
        request_id = getattr(context, "aws_request_id", None) or "N/A"
        log_extra = {"request_id": request_id}
        try:
            request = parse_generation_request(event)
            self.authorize(request)
            image = self.image_service.generate_image(request.prompt, request_id=request_id)
            return self.deliver(image, request, request_id)
        except AccessDeniedError as e:
            logger.info(e.message, extra=log_extra)
            return access_denied_response()
        except GenBotError as e:
            logger.error(f"Error generating image: {e.message}", extra=log_extra)
            logger.debug(f"Failure details: {e.to_dict()}", extra=log_extra)
            return fallback_response(self.settings)
        except Exception as e:
            logger.error(f"Error generating image: {e}", exc_info=True, extra=log_extra)
            return fallback_response(self.settings)

    def deliver(self, image: GeneratedImage, request: GenerationRequest, request_id: str) -> ProxyResponse:
        if self.delivery_mode is DeliveryMode.INLINE:
            return image_response(image.data, image.content_type)
        if self.delivery_mode is DeliveryMode.BASE64:
            return text_response(base64.b64encode(image.data).decode("ascii"))

        reference = self.store(image, request_id)
        if self.delivery_mode is DeliveryMode.SIGNED_URL:
            size = self.settings.IMAGE_SIZE_PX
            return text_response(html_image_tag(reference.signed_url, request.prompt, size))
        logger.info(f"Returning response URL: {reference.retrieve_url}", extra={"request_id": request_id})
        return text_response(reference.retrieve_url)

    def store(self, image: GeneratedImage, request_id: str) -> StoredImageReference:
        file_name = make_image_file_name(request_id, self.settings.IMAGE_FILE_EXTENSION)
        if self.delivery_mode is DeliveryMode.RETRIEVE_URL and not self.settings.RETRIEVE_API:
            raise GenBotError("RETRIEVE_API is not configured")

        self.storage_service.put_image(image, file_name)
        reference = StoredImageReference(file_name=file_name)
        if self.delivery_mode is DeliveryMode.SIGNED_URL:
            reference.signed_url = self.storage_service.generate_presigned_url(file_name)
        else:
            reference.retrieve_url = f"{self.settings.RETRIEVE_API.rstrip('/')}/{file_name}"
        return reference


_inline = GenerateHandler(DeliveryMode.INLINE)
_base64 = GenerateHandler(DeliveryMode.BASE64)
_signed_url = GenerateHandler(DeliveryMode.SIGNED_URL)
_retrieve_url = GenerateHandler(DeliveryMode.RETRIEVE_URL)


def handler(event, context):
    settings = dependencies.load_configuration()
    if settings is None:
        return fallback_response()
    return GenerateHandler(settings.DELIVERY_MODE)(event, context)


def inline_handler(event, context):
    if dependencies.load_configuration() is None:
        return fallback_response()
    return _inline(event, context)


def base64_handler(event, context):
    if dependencies.load_configuration() is None:
        return fallback_response()
    return _base64(event, context)


def signed_url_handler(event, context):
    if dependencies.load_configuration() is None:
        return fallback_response()
    return _signed_url(event, context)


def retrieve_url_handler(event, context):
    if dependencies.load_configuration() is None:
        return fallback_response()
    return _retrieve_url(event, context)
