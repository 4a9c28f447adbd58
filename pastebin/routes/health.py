"""
Health check and statistics routes.
"""
from fastapi import APIRouter, Depends

from pastebin.errors import PasteError
from pastebin.models import HealthCheck, StatsResponse
from pastebin.routes.deps import get_store, http_error
from pastebin.store import PasteStore

router = APIRouter()


@router.get("/api/healthz", response_model=HealthCheck)
def health_check(store: PasteStore = Depends(get_store)) -> HealthCheck:
    """
    Health check endpoint.
    Returns 200 with ok=true if application and storage are healthy.
    """
    return HealthCheck(ok=store.is_healthy())


@router.get("/api/stats", response_model=StatsResponse)
def stats(store: PasteStore = Depends(get_store)) -> StatsResponse:
    """Number of pastes currently held."""
    try:
        return StatsResponse(count=store.count())
    except PasteError as e:
        raise http_error(e)
