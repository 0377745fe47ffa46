# api/middleware/cors.py

import logging
from typing import List, Optional, Union
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

logger = logging.getLogger(__name__)


class CORSConfig:
    """
    Configuration class for CORS settings
    """

    def __init__(self,
                 allow_origins: Union[List[str], str] = None,
                 allow_credentials: bool = True,
                 allow_methods: List[str] = None,
                 allow_headers: List[str] = None,
                 expose_headers: List[str] = None,
                 max_age: int = 600):

        if allow_origins is None:
            allow_origins = [
                "http://localhost:3000",
                "http://localhost:5173",
                "http://127.0.0.1:3000",
                "http://127.0.0.1:5173"
            ]
        elif isinstance(allow_origins, str):
            allow_origins = [origin.strip() for origin in allow_origins.split(",") if origin.strip()]

        if allow_methods is None:
            allow_methods = ["GET", "POST", "DELETE", "OPTIONS"]

        if allow_headers is None:
            allow_headers = [
                "Accept",
                "Accept-Language",
                "Content-Language",
                "Content-Type",
                "X-Requested-With",
                "X-Request-ID"
            ]

        # The report download name travels in Content-Disposition
        if expose_headers is None:
            expose_headers = [
                "X-Request-ID",
                "X-Process-Time",
                "Content-Disposition"
            ]

        self.allow_origins = list(allow_origins)
        self.allow_credentials = allow_credentials
        self.allow_methods = allow_methods
        self.allow_headers = allow_headers
        self.expose_headers = expose_headers
        self.max_age = max_age


def setup_cors(app: FastAPI, config: Optional[CORSConfig] = None,
               environment: str = "development") -> None:
    """
    Setup CORS middleware with environment-specific configurations
    """
    if config is None:
        config = CORSConfig()

    if environment == "production":
        if not config.allow_origins:
            logger.warning("⚠️ No production origins specified for CORS. Browser uploads will be rejected.")

    elif environment == "testing":
        # For testing, allow all origins
        config.allow_origins = ["*"]
        config.allow_credentials = False  # Can't use credentials with wildcard

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allow_origins,
        allow_credentials=config.allow_credentials,
        allow_methods=config.allow_methods,
        allow_headers=config.allow_headers,
        expose_headers=config.expose_headers,
        max_age=config.max_age
    )

    logger.info(f"✅ CORS configured for {environment} environment")
    logger.info(f"   Allowed origins: {config.allow_origins}")
    logger.info(f"   Allow credentials: {config.allow_credentials}")


def create_development_cors_config(extra_origins: Optional[List[str]] = None) -> CORSConfig:
    """
    Create a permissive CORS configuration for development
    """
    origins = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8080",
        "http://localhost:8000",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:8080",
        "http://127.0.0.1:8000"
    ]
    for origin in extra_origins or []:
        if origin not in origins:
            origins.append(origin)

    return CORSConfig(
        allow_origins=origins,
        allow_credentials=True,
        max_age=3600  # 1 hour cache for preflight requests
    )


def create_production_cors_config(allowed_domains: List[str]) -> CORSConfig:
    """
    Create a strict CORS configuration for production
    """
    return CORSConfig(
        allow_origins=allowed_domains,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        expose_headers=[
            "X-Request-ID",
            "X-Process-Time",
            "Content-Disposition"
        ],
        max_age=86400  # 24 hours cache for preflight requests
    )
