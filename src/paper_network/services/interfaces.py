"""Service interfaces + default adapters for app-level dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

import httpx

from paper_network.services import document_service as _documents


@runtime_checkable
class DocumentService(Protocol):
    """Interface for fetching the static input documents."""

    async def fetch_json(
        self,
        *,
        client: httpx.AsyncClient | None,
        location: str,
        timeout_seconds: float,
    ) -> Any:
        """Fetch one document and return its decoded JSON value."""
        ...


class DefaultDocumentService:
    """Default adapter that delegates to the function-based document service."""

    async def fetch_json(
        self,
        *,
        client: httpx.AsyncClient | None,
        location: str,
        timeout_seconds: float,
    ) -> Any:
        return await _documents.fetch_json_document(
            client=client,
            location=location,
            timeout_seconds=timeout_seconds,
        )


@dataclass(slots=True)
class AppServices:
    """Aggregated service interfaces consumed by the app layer."""

    documents: DocumentService


def build_default_app_services() -> AppServices:
    """Build default app services backed by the function-based modules."""
    return AppServices(documents=DefaultDocumentService())


__all__ = [
    "AppServices",
    "DefaultDocumentService",
    "DocumentService",
    "build_default_app_services",
]
