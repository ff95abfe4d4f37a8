"""Driver configuration."""

from meiliscout.config.settings import Settings

__all__ = ["Settings"]
