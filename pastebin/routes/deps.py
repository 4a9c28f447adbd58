"""
Shared route dependencies and error translation.
"""
from fastapi import HTTPException, Request

from pastebin.config import Settings
from pastebin.errors import (
    EmptyText,
    Expired,
    InvalidLength,
    InvalidTTL,
    NotFound,
    PasteError,
    SlugExhausted,
    StorageUnavailable,
)
from pastebin.store import PasteStore

STATUS_CODES = {
    EmptyText: 400,
    InvalidLength: 400,
    InvalidTTL: 400,
    NotFound: 404,
    Expired: 410,
    SlugExhausted: 500,
    StorageUnavailable: 503,
}

DETAILS = {
    EmptyText: "content is required and must be non-empty",
    InvalidLength: "slug length is too short",
    InvalidTTL: "ttl is out of range",
    NotFound: "Paste not found",
    Expired: "Paste has expired",
    SlugExhausted: "Could not allocate a paste id, try again",
    StorageUnavailable: "Storage is unavailable, try again later",
}


def get_store(request: Request) -> PasteStore:
    return request.app.state.store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def http_error(error: PasteError) -> HTTPException:
    """Translate a store error into the matching HTTP error."""
    kind = type(error)
    return HTTPException(
        status_code=STATUS_CODES.get(kind, 500),
        detail=DETAILS.get(kind, "Internal error"),
    )
