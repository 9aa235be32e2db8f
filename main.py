# main.py

import uvicorn
from fastapi import FastAPI

from genbot.api import endpoints
from genbot.config.settings import Settings
from genbot.utils.logger import get_logger, setup_logging

settings = Settings()
setup_logging(settings.LOG_CONFIG_PATH, settings.LOG_LEVEL)
logger = get_logger(__name__)

# --- local development server wrapping the Lambda handlers ---
app = FastAPI(
    title=settings.APP_NAME,
    description="Prompt-to-image generator and image retriever (local runner for the Lambda handlers)",
    version=settings.APP_VERSION,
    docs_url="/swagger",
    redoc_url=None,
)
app.include_router(endpoints.router)

if __name__ == "__main__":
    width = 50
    line = f"+{'-' * (width - 2)}+"
    startup_message = f"""
    {line}
    | {'Application Settings Initialized':^{width - 4}} |
    {line}
    | {'App Name:':<15} {str(settings.APP_NAME):<{width - 22}} |
    | {'App Version:':<15} {str(settings.APP_VERSION):<{width - 22}} |
    | {'Host:':<15} {str(settings.APP_HOST):<{width - 22}} |
    | {'Port:':<15} {str(settings.APP_PORT):<{width - 22}} |
    | {'Delivery:':<15} {settings.DELIVERY_MODE.value:<{width - 22}} |
    | {'Bucket:':<15} {settings.S3_BUCKET_NAME[:width - 22]:<{width - 22}} |
    {line}
    """
    logger.info(startup_message)
    uvicorn.run(
        "main:app",
        host=settings.APP_HOST,
        port=settings.APP_PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
