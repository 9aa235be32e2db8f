# tests/conftest.py
import base64
import io
import json
from types import SimpleNamespace
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError
from botocore.response import StreamingBody

from genbot import dependencies
from genbot.config.settings import Settings
from genbot.services.image_service import ImageService
from genbot.services.storage_service import StorageService
from genbot.utils.logger import setup_logging

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + bytes(range(64))
COMPANY_ID = "4242"
RETRIEVE_API = "https://retrieve.example.com/"


def streaming_body(data: bytes) -> StreamingBody:
    return StreamingBody(io.BytesIO(data), len(data))


def model_response(images: Optional[List[str]] = None, error: Optional[str] = None) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"images": images if images is not None else []}
    if error is not None:
        payload["error"] = error
    return {"body": streaming_body(json.dumps(payload).encode("utf-8"))}


def client_error(code: str, operation: str, message: str = "boom") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


def make_event(prompt: str = "a red fox in the snow", company_id: Any = COMPANY_ID) -> Dict[str, Any]:
    body = {"command": prompt, "creator": {"company": {"id": company_id}}}
    return {"body": json.dumps(body), "isBase64Encoded": False}


def make_context(request_id: str = "req-1") -> SimpleNamespace:
    return SimpleNamespace(aws_request_id=request_id)


class InMemoryS3:
    """Stands in for the boto3 S3 client: one bucket kept in a dict."""

    def __init__(self):
        self.objects: Dict[tuple, Dict[str, Any]] = {}

    def put_object(self, Bucket, Key, Body, ContentType=None):
        self.objects[(Bucket, Key)] = {"Body": Body, "ContentType": ContentType}
        return {"ETag": '"etag"'}

    def get_object(self, Bucket, Key):
        if (Bucket, Key) not in self.objects:
            raise client_error("NoSuchKey", "GetObject", "The specified key does not exist.")
        data = self.objects[(Bucket, Key)]["Body"]
        return {"Body": streaming_body(data), "ContentType": self.objects[(Bucket, Key)]["ContentType"]}

    def generate_presigned_url(self, ClientMethod, Params=None, ExpiresIn=3600):
        return f"https://{Params['Bucket']}.s3.amazonaws.com/{Params['Key']}?X-Amz-Expires={ExpiresIn}&X-Amz-Signature=abc"


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    setup_logging()


@pytest.fixture(autouse=True)
def clean_shared_state():
    dependencies.reset_shared_state()
    yield
    dependencies.reset_shared_state()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        COMPANY_ID=COMPANY_ID,
        RETRIEVE_API=RETRIEVE_API,
        S3_BUCKET_NAME="test-genbot-images",
        AWS_REGION="us-east-1",
    )


@pytest.fixture
def bedrock_client() -> MagicMock:
    client = MagicMock()
    encoded = base64.b64encode(PNG_BYTES).decode("ascii")
    client.invoke_model.side_effect = lambda **kwargs: model_response(images=[encoded])
    return client


@pytest.fixture
def s3_store() -> InMemoryS3:
    return InMemoryS3()


@pytest.fixture
def s3_client(s3_store) -> MagicMock:
    return MagicMock(wraps=s3_store)


@pytest.fixture
def image_service(settings, bedrock_client) -> ImageService:
    return ImageService(settings=settings, client=bedrock_client)


@pytest.fixture
def storage_service(settings, s3_client) -> StorageService:
    return StorageService(settings=settings, client=s3_client)


@pytest.fixture
def shared_services(settings, image_service, storage_service):
    """Injects the stubbed services as the process-wide objects."""
    dependencies.set_shared_object('settings', settings)
    dependencies.set_shared_object('image_service', image_service)
    dependencies.set_shared_object('storage_service', storage_service)
    return settings, image_service, storage_service
