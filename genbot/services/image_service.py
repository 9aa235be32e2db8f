# genbot/services/image_service.py

import base64
import binascii
import json
import random
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from genbot.api.schemas import GeneratedImage, GenerationParameters
from genbot.config.settings import Settings
from genbot.utils.error_handler import ImageGenerationError
from genbot.utils.logger import get_logger, summarize_for_logging


class ImageService:
    """
    Text-to-image client for Amazon Bedrock (Nova Canvas).
    One synchronous invoke_model call per generation, no retries.
    The bedrock-runtime client is created on first use and reused for the life of the instance.
    """

    def __init__(
            self,
            settings: Optional[Settings] = None,
            client: Optional[Any] = None,
            logger_name: str = "ImageService"
    ):
        self.logger = get_logger(logger_name)
        self.settings = settings or Settings()
        self.model_id = self.settings.IMAGE_MODEL_ID
        self.region_name = self.settings.AWS_REGION
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self.logger.info(f"Creating bedrock-runtime client (region={self.region_name})")
            self._client = boto3.client("bedrock-runtime", region_name=self.region_name)
        return self._client

    def build_generation_parameters(self) -> GenerationParameters:
        size = self.settings.IMAGE_SIZE_PX
        return GenerationParameters(
            number_of_images=1,
            height=size,
            width=size,
            quality=self.settings.IMAGE_QUALITY,
            cfg_scale=self.settings.IMAGE_PROMPT_ADHERENCE,
            seed=random.randrange(self.settings.IMAGE_MAX_SEED),
        )

    @staticmethod
    def build_payload(prompt: str, parameters: GenerationParameters) -> Dict[str, Any]:
        return {
            "taskType": "TEXT_IMAGE",
            "textToImageParams": {"text": prompt},
            "imageGenerationConfig": parameters.to_payload(),
        }

    def generate_image(self, prompt: str, request_id: Optional[str] = None) -> GeneratedImage:
        """
        Generate a single image for the prompt.

        Raises:
            ImageGenerationError: the call failed, or the model response carries an
                error field or no image.
        """
        log_extra = {"request_id": request_id or "N/A"}
        self.logger.info(f"Preparing payload for text prompt: {prompt}", extra=log_extra)
        parameters = self.build_generation_parameters()
        payload = self.build_payload(prompt, parameters)
        self.logger.debug(f"Generation config: {summarize_for_logging(payload['imageGenerationConfig'])}", extra=log_extra)

        self.logger.info(f"Generating image with Bedrock model {self.model_id}", extra=log_extra)
        try:
            response = self.client.invoke_model(
                modelId=self.model_id,
                accept="application/json",
                contentType="application/json",
                body=json.dumps(payload),
            )
            response_body = json.loads(response["body"].read())
        except (ClientError, BotoCoreError) as e:
            raise ImageGenerationError(f"Bedrock invoke_model failed: {e}", details={"model_id": self.model_id}) from e
        except (KeyError, ValueError) as e:
            raise ImageGenerationError(f"Unreadable model response: {e}", details={"model_id": self.model_id}) from e

        error = response_body.get("error")
        if error:
            raise ImageGenerationError(f"Image generation error. Error is: {error}", details={"model_id": self.model_id})

        images = response_body.get("images") or []
        if not images:
            raise ImageGenerationError("Model response contains no images", details={"model_id": self.model_id})

        try:
            image_bytes = base64.b64decode(images[0], validate=True)
        except (binascii.Error, TypeError) as e:
            raise ImageGenerationError(f"Model returned an undecodable image: {e}") from e

        image = GeneratedImage(data=image_bytes, content_type=self.settings.IMAGE_CONTENT_TYPE)
        self.logger.info(
            f"Image generated successfully with {self.model_id}. Image size: {image.size} bytes",
            extra=log_extra,
        )
        return image
