"""Monitored source management routes."""

import logging
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict

from orderwatch.api.deps import get_checker, get_store
from orderwatch.models import MonitoredSource
from orderwatch.store import SourceNotFoundError, SourceStore
from orderwatch.worker.tasks import SourceChecker

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sources", tags=["sources"])


class SourceCreate(BaseModel):
    name: str
    url: str
    faction: str | None = None
    enabled: bool = True


class SourceUpdate(BaseModel):
    name: str | None = None
    url: str | None = None
    faction: str | None = None
    enabled: bool | None = None


class SourceResponse(BaseModel):
    id: str
    name: str
    url: str
    faction: str | None
    enabled: bool
    last_check: datetime | None
    alert_count: int
    baseline_signature: str | None
    last_buy_count: int
    last_alert_at: int

    model_config = ConfigDict(from_attributes=True)


def _get_or_404(store: SourceStore, source_id: str) -> MonitoredSource:
    try:
        return store.get(source_id)
    except SourceNotFoundError:
        raise HTTPException(status_code=404, detail="Source not found")


@router.get("", response_model=List[SourceResponse])
async def list_sources(store: SourceStore = Depends(get_store)):
    """List all sources."""
    return store.list()


@router.post("", response_model=SourceResponse, status_code=201)
async def create_source(
    source_data: SourceCreate, store: SourceStore = Depends(get_store)
):
    """Create a new source."""
    return store.add(
        name=source_data.name,
        url=source_data.url,
        faction=source_data.faction,
        enabled=source_data.enabled,
    )


@router.get("/{source_id}", response_model=SourceResponse)
async def get_source(source_id: str, store: SourceStore = Depends(get_store)):
    """Get a source by ID."""
    return _get_or_404(store, source_id)


@router.patch("/{source_id}", response_model=SourceResponse)
async def update_source(
    source_id: str,
    source_data: SourceUpdate,
    store: SourceStore = Depends(get_store),
):
    """Update a source. Changing the URL resets its baseline."""
    _get_or_404(store, source_id)
    return store.update(source_id, **source_data.model_dump(exclude_unset=True))


@router.delete("/{source_id}", status_code=204)
async def delete_source(source_id: str, store: SourceStore = Depends(get_store)):
    """Delete a source."""
    _get_or_404(store, source_id)
    store.delete(source_id)
    return None


@router.post("/{source_id}/check", response_model=SourceResponse)
async def check_source_now(
    source_id: str,
    store: SourceStore = Depends(get_store),
    checker: SourceChecker = Depends(get_checker),
):
    """Run an immediate check of one source, outside the poll cycle."""
    source = _get_or_404(store, source_id)

    try:
        await checker.check_source(source)
    except Exception as e:
        logger.exception(f"Manual check failed for {source.name}")
        raise HTTPException(status_code=502, detail=f"Check failed: {e}")

    return source
