# genbot/handlers/retrieve.py
"""
Retriever Lambda handlers: stream a stored image back by file name.

    genbot.handlers.retrieve.handler                 file name from the request path (Function URL, /abc.png)
    genbot.handlers.retrieve.path_parameter_handler  file name from a path parameter (API Gateway)

Missing objects and any other storage failure redirect (303) to the fallback image.
"""

from typing import Any, Mapping, Optional, Union

from genbot import dependencies
from genbot.api.schemas import PathSource, RetrievalRequest
from genbot.config.settings import DEFAULT_FALLBACK_IMAGE_URL, Settings
from genbot.handlers.responses import ProxyResponse, image_response, redirect_response
from genbot.services.storage_service import StorageService
from genbot.utils.error_handler import GenBotError, ImageNotFoundError, RequestParseError
from genbot.utils.logger import get_logger

logger = get_logger(__name__)


def _request_path(event: Mapping[str, Any]) -> Optional[str]:
    http = (event.get("requestContext") or {}).get("http") or {}
    return http.get("path") or event.get("rawPath") or event.get("path")


def extract_image_file_name(
        event: Mapping[str, Any],
        path_source: Union[PathSource, str] = PathSource.REQUEST_PATH,
        parameter_name: str = "imageFileName",
) -> RetrievalRequest:
    if PathSource(path_source) is PathSource.PATH_PARAMETER:
        name = (event.get("pathParameters") or {}).get(parameter_name)
    else:
        path = _request_path(event)
        # only the single leading separator is dropped
        name = path[1:] if path and path.startswith("/") else path

    if not name:
        raise RequestParseError("No image file name in request", details={"path_source": str(path_source)})
    return RetrievalRequest(image_file_name=name)


class RetrieveHandler:
    def __init__(
            self,
            path_source: Union[PathSource, str] = PathSource.REQUEST_PATH,
            settings: Optional[Settings] = None,
            storage_service: Optional[StorageService] = None,
    ):
        self.path_source = PathSource(path_source)
        self._settings = settings
        self._storage_service = storage_service

    @property
    def settings(self) -> Settings:
        return self._settings or dependencies.get_settings()

    @property
    def storage_service(self) -> StorageService:
        return self._storage_service or dependencies.get_storage_service()

    def __call__(self, event: Mapping[str, Any], context: Any) -> ProxyResponse:
        log_extra = {"request_id": getattr(context, "aws_request_id", None) or "N/A"}
        try:
            request = extract_image_file_name(event, self.path_source, self.settings.RETRIEVE_PATH_PARAMETER)
            storage = self.storage_service
            logger.info(f"Getting {request.image_file_name} from {storage.bucket_name}", extra=log_extra)
            data = storage.get_image(request.image_file_name)
            return image_response(data, self.settings.RETRIEVE_CONTENT_TYPE)
        except ImageNotFoundError as e:
            logger.warning(f"Redirecting to fallback image, not found: {e.details.get('key')}", extra=log_extra)
        except GenBotError as e:
            logger.error(f"Redirecting to fallback image: {e.message}", extra=log_extra)
            logger.debug(f"Failure details: {e.to_dict()}", extra=log_extra)
        except Exception as e:
            logger.error(f"Redirecting to fallback image: {e}", exc_info=True, extra=log_extra)
        return redirect_response(self.settings.FALLBACK_IMAGE_URL)


_request_path_handler = RetrieveHandler(PathSource.REQUEST_PATH)
_path_parameter_handler = RetrieveHandler(PathSource.PATH_PARAMETER)


def handler(event, context):
    if dependencies.load_configuration() is None:
        return redirect_response(DEFAULT_FALLBACK_IMAGE_URL)
    return _request_path_handler(event, context)


def path_parameter_handler(event, context):
    if dependencies.load_configuration() is None:
        return redirect_response(DEFAULT_FALLBACK_IMAGE_URL)
    return _path_parameter_handler(event, context)
