"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import logging

import firebase_admin

from backend.config import Settings, get_settings
from backend.db import DbClient, FirestoreDbClient, InMemoryDbClient
from backend.storage import FirebaseImageStore, ImageStore, InMemoryImageStore

logger = logging.getLogger(__name__)

_db_client: DbClient | None = None
_image_store: ImageStore | None = None


def ensure_firebase_app(settings: Settings | None = None) -> firebase_admin.App:
    """
    Return the default firebase_admin app, initializing it on first use.
    """
    try:
        return firebase_admin.get_app()
    except ValueError:
        settings = settings or get_settings()
        options = {}
        if settings.firebase_project_id:
            options["projectId"] = settings.firebase_project_id
        if settings.firebase_storage_bucket:
            options["storageBucket"] = settings.firebase_storage_bucket
        logger.info("Initializing firebase_admin app (project=%s)", options.get("projectId"))
        return firebase_admin.initialize_app(options=options or None)


def _use_in_memory(settings: Settings) -> bool:
    return settings.use_in_memory_backends or not settings.firebase_project_id


def get_db_client() -> DbClient:
    """
    Return a singleton DB client so profile and log state persists across requests.
    """
    global _db_client
    if _db_client:
        return _db_client

    settings = get_settings()
    if _use_in_memory(settings):
        _db_client = InMemoryDbClient()
    else:
        ensure_firebase_app(settings)
        _db_client = FirestoreDbClient()
    return _db_client


def get_image_store() -> ImageStore | None:
    """
    Return the image store, or None when generated images stay inline.
    """
    global _image_store
    if _image_store:
        return _image_store

    settings = get_settings()
    if settings.use_in_memory_backends:
        _image_store = InMemoryImageStore()
    elif settings.firebase_storage_bucket:
        ensure_firebase_app(settings)
        _image_store = FirebaseImageStore(settings.firebase_storage_bucket)
    return _image_store
