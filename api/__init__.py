"""
Gourmet Chef API - recipe generation, photo scans, saved recipes and the shopping list
FastAPI service in front of the chef gateway and the local recipe storage.
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import Settings, settings as default_settings
from core.retry import RetryConfig
from services.ai_gateway import ChefGateway
from services.llm_service import LLMService
from storage.blob_store import FileBlobStore
from storage.local_storage import LocalStorage
from . import chef, draft, recipes, shopping_list
from .errors import register_exception_handlers

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


def create_app(
    settings: Optional[Settings] = None,
    storage: Optional[LocalStorage] = None,
    gateway: Optional[ChefGateway] = None
) -> FastAPI:
    """
    Build the FastAPI app

    Args:
        settings: Defaults to the environment settings
        storage: Defaults to JSON files under settings.data_directory
        gateway: Defaults to the configured LLM provider; models are created on first request
    """
    settings = settings or default_settings

    if storage is None:
        storage = LocalStorage(FileBlobStore(settings.data_directory, settings.storage_quota_bytes))
    if gateway is None:
        gateway = ChefGateway(
            retry_config=RetryConfig.from_settings(settings),
            llm_service=LLMService(settings)
        )

    app = FastAPI(
        title="Gourmet Chef API",
        description="Generate recipes from a prompt or a photo, keep a recipe collection and a shopping list.",
        version=API_VERSION,
        debug=settings.debug
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.storage = storage
    app.state.gateway = gateway

    app.include_router(chef.router, prefix="/chef", tags=["chef"])
    app.include_router(recipes.router, prefix="/recipes", tags=["recipes"])
    app.include_router(shopping_list.router, prefix="/shopping-list", tags=["shopping-list"])
    app.include_router(draft.router, prefix="/draft", tags=["draft"])
    register_exception_handlers(app)

    @app.get("/")
    async def root():
        """Health check endpoint"""
        return {
            "service": "Gourmet Chef API",
            "status": "healthy",
            "version": API_VERSION,
            "llmProvider": settings.llm_provider,
            "savedRecipes": storage.count_recipes()
        }

    logger.info(f"Gourmet Chef API created (provider: {settings.llm_provider})")
    return app
