"""
Webty - webtoon review platform
Review comment API
"""
import os
from fastapi import FastAPI

from webty.api.router import router as api_router
from webty.core.logger import configure_app_logging, get_logger
from webty.core.middleware import SecurityHeadersMiddleware, RequestLoggingMiddleware

configure_app_logging()

logger = get_logger(__name__)

DEBUG = os.getenv("WEBTY_DEBUG", "false").lower() == "true"
app = FastAPI(title="Webty", debug=DEBUG)

app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(api_router)

logger.info("Webty application initialized")


