"""FastAPI dependencies."""

from fastapi import Request

from orderwatch.store import SourceStore
from orderwatch.worker.tasks import SourceChecker


def get_store(request: Request) -> SourceStore:
    """Dependency for the source store owned by the app."""
    return request.app.state.store


def get_checker(request: Request) -> SourceChecker:
    """Dependency for the source checker owned by the app."""
    return request.app.state.checker
