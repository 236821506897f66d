"""
FastAPI dependencies for the long-lived services built in the app lifespan.
"""

from fastapi import Request

from bookshelf.internal.covers import CoverResolver
from bookshelf.internal.rehost import ImageRehoster
from bookshelf.internal.repositories import LibraryRepository
from bookshelf.internal.sources import UnifiedSearch


def get_repository(request: Request) -> LibraryRepository:
    return request.app.state.repository


def get_unified_search(request: Request) -> UnifiedSearch:
    return request.app.state.unified_search


def get_cover_resolver(request: Request) -> CoverResolver:
    return request.app.state.cover_resolver


def get_rehoster(request: Request) -> ImageRehoster | None:
    """None when no file storage is configured."""
    return request.app.state.rehoster
