# genbot/services/storage_service.py

from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from genbot.api.schemas import GeneratedImage
from genbot.config.settings import Settings
from genbot.utils.error_handler import ImageNotFoundError, StorageError
from genbot.utils.logger import get_logger

NOT_FOUND_CODES = {"NoSuchKey", "404", "NotFound"}


class StorageService:
    """
    Amazon S3 client for generated images: put, presign and get.
    Credentials come from the standard boto3 lookup chain (env vars, IAM role, ...).
    """
    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[Any] = None,
        bucket_name: Optional[str] = None,
        logger_name: str = "StorageService"
    ):
        self.logger = get_logger(logger_name)
        self.settings = settings or Settings()
        self.bucket_name = bucket_name or self.settings.S3_BUCKET_NAME
        self.region_name = self.settings.AWS_REGION
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self.logger.info(f"Creating S3 client (bucket={self.bucket_name}, region={self.region_name})")
            self._client = boto3.client("s3", region_name=self.region_name)
        return self._client

    def put_image(self, image: GeneratedImage, file_name: str) -> str:
        """Write the image under file_name and return the object key."""
        self.logger.info(f"Saving {file_name} image to {self.bucket_name} bucket")
        try:
            self.client.put_object(
                Bucket=self.bucket_name,
                Key=file_name,
                Body=image.data,
                ContentType=image.content_type,
            )
        except ClientError as e:
            error = e.response.get("Error", {})
            self.logger.error(
                f"Error from S3 while uploading object to {self.bucket_name}.  "
                f"{error.get('Code')}: {error.get('Message')}"
            )
            raise StorageError(f"S3 put_object failed: {e}", key=file_name) from e
        except BotoCoreError as e:
            self.logger.error(f"Error while uploading object to {self.bucket_name}: {e}")
            raise StorageError(f"S3 put_object failed: {e}", key=file_name) from e

        self.logger.info(f"Saved {file_name} image to {self.bucket_name} bucket")
        return file_name

    def generate_presigned_url(self, file_name: str, expires_in: Optional[int] = None) -> str:
        expires_in = expires_in or self.settings.presigned_url_expires_in_seconds
        self.logger.info(f"Generating presigned URL that expires in {expires_in} seconds")
        try:
            return self.client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket_name, "Key": file_name},
                ExpiresIn=expires_in,
            )
        except (ClientError, BotoCoreError) as e:
            self.logger.error(f"Presigned URL generation failed: key='{file_name}', error={e}")
            raise StorageError(f"Presigned URL generation failed: {e}", key=file_name) from e

    def get_image(self, file_name: str) -> bytes:
        """
        Read an object from the bucket.

        Raises:
            ImageNotFoundError: the key does not exist.
            StorageError: any other S3 failure.
        """
        try:
            response = self.client.get_object(Bucket=self.bucket_name, Key=file_name)
            return response["Body"].read()
        except ClientError as e:
            error = e.response.get("Error", {})
            code = str(error.get("Code", ""))
            if code in NOT_FOUND_CODES:
                self.logger.error(f"Image file not found: {file_name}")
                raise ImageNotFoundError(f"Image file not found: {file_name}", key=file_name) from e
            self.logger.error(
                f"Error while getting image from {self.bucket_name}.  {code}: {error.get('Message')}"
            )
            raise StorageError(f"S3 get_object failed: {e}", key=file_name) from e
        except BotoCoreError as e:
            self.logger.error(f"Error while getting image from {self.bucket_name}: {e}")
            raise StorageError(f"S3 get_object failed: {e}", key=file_name) from e
