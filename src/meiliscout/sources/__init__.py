"""Data source collaborators that load entities for the driver."""

from meiliscout.sources.base import EntitySource

__all__ = ["EntitySource"]
