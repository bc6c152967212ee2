"""
This module provides a factory for creating and configuring the application's core components.
"""
from typing import Optional

from affaldsplan.config import CACHE_DIR, RENOWEB_BASE_URL, REQUEST_TIMEOUT
from affaldsplan.facade import CalendarPipeline
from affaldsplan.services.artifact_cache import ArtifactCache
from affaldsplan.services.calendar_service import CalendarService
from affaldsplan.services.renoweb_client import RenowebClient

from .logging_config import setup_logging


def initialize_app(cache_dir: str = CACHE_DIR) -> None:
    """
    Initializes the application by setting up logging and the cache directory.
    """
    setup_logging()
    ArtifactCache(cache_dir).ensure_dir()


def create_pipeline(
    cache_dir: str = CACHE_DIR,
    base_url: str = RENOWEB_BASE_URL,
    timeout: int = REQUEST_TIMEOUT,
) -> CalendarPipeline:
    """
    Initializes and returns the CalendarPipeline with all its dependencies.
    """
    client = RenowebClient(base_url=base_url, timeout=timeout)
    cache = ArtifactCache(cache_dir)
    calendar_service = CalendarService()
    return CalendarPipeline(client=client, cache=cache, calendar_service=calendar_service)


def create_app(pipeline: Optional[CalendarPipeline] = None):
    """
    Returns the Flask app with a pipeline bound to it.
    """
    from webapp.app import app

    app.config["PIPELINE"] = pipeline or create_pipeline()
    return app
