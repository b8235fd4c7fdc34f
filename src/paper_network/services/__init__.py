"""Internal service layer for document fetching."""

from paper_network.services.document_service import fetch_json_document, is_remote_location

__all__ = [
    "fetch_json_document",
    "is_remote_location",
]
