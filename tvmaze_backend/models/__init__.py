"""
Domain models shared across the API and the ingestion pipeline.
"""

from tvmaze_backend.models.shows import CastMember, Show

__all__ = [
    "CastMember",
    "Show",
]
