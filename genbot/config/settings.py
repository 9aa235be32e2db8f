# genbot/config/settings.py
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from genbot.api.schemas import DeliveryMode

# --- project root: genbot/config/settings.py -> two levels up ---
PROJECT_ROOT = Path(__file__).resolve().parents[2]
ENV_FILE_PATH = PROJECT_ROOT / '.env'

SECONDS_PER_DAY = 24 * 60 * 60

DEFAULT_FALLBACK_IMAGE_URL = "https://media.giphy.com/media/l41JNsXAvFvoHvWJW/giphy.gif"
FALLBACK_MESSAGE_PREFIX = "Something went wrong :("


class Settings(BaseSettings):
    """Application settings, read from the environment (and .env when present)."""
    model_config = SettingsConfigDict(env_file=ENV_FILE_PATH, extra='ignore', case_sensitive=False)

    # --- application ---
    APP_NAME: str = "GenBot"
    APP_VERSION: str = "0.1.0"
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 8080

    # --- logging ---
    LOG_LEVEL: str = "INFO"
    LOG_CONFIG_PATH: Optional[str] = Field(str(PROJECT_ROOT / "logging_config.yaml"))

    # --- AWS ---
    AWS_REGION: str = "us-east-1"

    # --- storage (S3) ---
    S3_BUCKET_NAME: str = "case-consulting-mgmt-genbot-images"
    # SigV4 presigned URLs are valid for at most 7 days
    PRESIGNED_URL_EXPIRES_IN_DAYS: int = Field(7, ge=1, le=7)

    # --- image generation (Bedrock) ---
    IMAGE_MODEL_ID: str = "amazon.nova-canvas-v1:0"
    IMAGE_SIZE_PX: int = Field(320, ge=320, le=4096)
    IMAGE_QUALITY: str = "standard"
    IMAGE_PROMPT_ADHERENCE: float = 8.0  # cfgScale, lower values introduce more randomness
    IMAGE_MAX_SEED: int = Field(1048576, ge=1)
    IMAGE_FILE_EXTENSION: str = ".png"
    IMAGE_CONTENT_TYPE: str = "image/png"
    RETRIEVE_CONTENT_TYPE: str = "image/jpg"

    # --- deployment-time values ---
    COMPANY_ID: Optional[str] = Field(None, validation_alias=AliasChoices("COMPANY_ID", "companyId"))
    RETRIEVE_API: Optional[str] = Field(None, validation_alias=AliasChoices("RETRIEVE_API", "retrieveApi"))

    # --- handler behaviour ---
    DELIVERY_MODE: DeliveryMode = DeliveryMode.RETRIEVE_URL
    RETRIEVE_PATH_PARAMETER: str = "imageFileName"
    FALLBACK_IMAGE_URL: str = DEFAULT_FALLBACK_IMAGE_URL

    @property
    def presigned_url_expires_in_seconds(self) -> int:
        return self.PRESIGNED_URL_EXPIRES_IN_DAYS * SECONDS_PER_DAY

    @property
    def fallback_message(self) -> str:
        return f"{FALLBACK_MESSAGE_PREFIX} {self.FALLBACK_IMAGE_URL}"
