# genbot/api/schemas.py
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class DeliveryMode(str, Enum):
    """How the generator hands the image back to the caller."""
    INLINE = "inline"              # binary image body
    BASE64 = "base64"              # base64 string body
    SIGNED_URL = "signed-url"      # <img> tag pointing at a presigned S3 URL
    RETRIEVE_URL = "retrieve-url"  # URL of the retrieve endpoint


class PathSource(str, Enum):
    """Where the retriever reads the image file name from."""
    REQUEST_PATH = "request-path"
    PATH_PARAMETER = "path-parameter"


# --- inbound generation request: {"command": ..., "creator": {"company": {"id": ...}}} ---
class Company(BaseModel):
    model_config = ConfigDict(extra='ignore')
    id: Union[str, int]


class Creator(BaseModel):
    model_config = ConfigDict(extra='ignore')
    company: Company


class GenerationRequest(BaseModel):
    model_config = ConfigDict(extra='ignore')

    command: str = Field(..., description="Free-text prompt for the image model.")
    creator: Creator

    @property
    def prompt(self) -> str:
        return self.command

    @property
    def company_id(self) -> str:
        return str(self.creator.company.id)


class GenerationParameters(BaseModel):
    """imageGenerationConfig sent to the model."""
    number_of_images: int = 1
    height: int
    width: int
    quality: str
    cfg_scale: float
    seed: int

    def to_payload(self) -> dict:
        return {
            "numberOfImages": self.number_of_images,
            "height": self.height,
            "width": self.width,
            "quality": self.quality,
            "cfgScale": self.cfg_scale,
            "seed": self.seed,
        }


class GeneratedImage(BaseModel):
    data: bytes
    content_type: str = "image/png"

    @property
    def size(self) -> int:
        return len(self.data)


class StoredImageReference(BaseModel):
    file_name: str
    signed_url: Optional[str] = None
    retrieve_url: Optional[str] = None


class RetrievalRequest(BaseModel):
    image_file_name: str = Field(..., min_length=1)
