"""
Paste API routes.
Handles create, fetch and delete over JSON.
"""
from datetime import timezone

from fastapi import APIRouter, Depends, Response

from pastebin.config import Settings
from pastebin.errors import PasteError
from pastebin.models import PasteCreate, PasteResponse, PasteView
from pastebin.routes.deps import get_settings, get_store, http_error
from pastebin.store import PasteStore

router = APIRouter()


@router.post("/api/pastes", response_model=PasteResponse, status_code=201)
def create_paste(
    paste: PasteCreate,
    store: PasteStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> PasteResponse:
    """
    Create a new paste.

    Args:
        paste: Paste data (content, optional ttl_seconds)

    Returns:
        Paste slug, shareable URL and expiry

    Raises:
        HTTPException: 400 on empty content or bad ttl, 5xx on storage trouble
    """
    ttl_seconds = paste.ttl_seconds or settings.DEFAULT_TTL_SECONDS
    try:
        created = store.create_paste(paste.content, ttl_seconds)
    except PasteError as e:
        raise http_error(e)

    base_url = settings.APP_DOMAIN.rstrip("/")
    return PasteResponse(
        id=created.slug,
        url=f"{base_url}/paste/{created.slug}",
        expires_at=created.expires_at.astimezone(timezone.utc).isoformat(),
    )


@router.get("/api/pastes/{slug}", response_model=PasteView)
def fetch_paste(slug: str, store: PasteStore = Depends(get_store)) -> PasteView:
    """
    Fetch a paste.

    Raises:
        HTTPException: 404 if not found, 410 if expired
    """
    try:
        paste = store.get_paste(slug)
    except PasteError as e:
        raise http_error(e)

    return PasteView(
        content=paste.text,
        expires_at=paste.expires_at.astimezone(timezone.utc).isoformat(),
    )


@router.delete("/api/pastes/{slug}", status_code=204)
def delete_paste(slug: str, store: PasteStore = Depends(get_store)) -> Response:
    """Delete a paste. Deleting an unknown slug also succeeds."""
    try:
        store.delete(slug)
    except PasteError as e:
        raise http_error(e)
    return Response(status_code=204)
