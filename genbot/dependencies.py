# genbot/dependencies.py
from typing import Annotated, Any, Callable, Dict, Optional

from fastapi import Depends
from pydantic import ValidationError

from genbot.config.settings import Settings
from genbot.services.image_service import ImageService
from genbot.services.storage_service import StorageService
from genbot.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

# Process-wide objects. A warm Lambda container reuses them across invocations.
_shared_state: Dict[str, Any] = {}


def _get_or_create(key: str, factory: Callable[[], Any]) -> Any:
    obj = _shared_state.get(key)
    if obj is None:
        obj = factory()
        _shared_state[key] = obj
    return obj


def set_shared_object(key: str, obj: Any) -> None:
    _shared_state[key] = obj


def reset_shared_state() -> None:
    _shared_state.clear()


# --- settings ---
def get_settings() -> Settings:
    return _get_or_create('settings', Settings)


# --- services ---
def get_image_service() -> ImageService:
    return _get_or_create('image_service', lambda: ImageService(settings=get_settings()))


def get_storage_service() -> StorageService:
    return _get_or_create('storage_service', lambda: StorageService(settings=get_settings()))


SettingsDep = Annotated[Settings, Depends(get_settings)]
ImageServiceDep = Annotated[ImageService, Depends(get_image_service)]
StorageServiceDep = Annotated[StorageService, Depends(get_storage_service)]


def configure_logging() -> None:
    settings = get_settings()
    setup_logging(settings.LOG_CONFIG_PATH, settings.LOG_LEVEL)


def load_configuration() -> Optional[Settings]:
    """Settings for a Lambda invocation, or None when the environment does not validate."""
    try:
        configure_logging()
    except ValidationError as e:
        logger.error(f"Invalid configuration, {e.error_count()} error(s): {e}")
        return None
    return get_settings()
