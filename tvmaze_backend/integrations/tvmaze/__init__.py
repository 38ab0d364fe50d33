"""
TVmaze integration client.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tvmaze_backend.integrations.tvmaze.client import (
        TvmazeClient,
        TvmazeClientError,
        TvmazeNotFoundError,
    )

__all__ = [
    "TvmazeClient",
    "TvmazeClientError",
    "TvmazeNotFoundError",
]


def __getattr__(name: str):
    if name in __all__:
        from tvmaze_backend.integrations.tvmaze import client

        return getattr(client, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
