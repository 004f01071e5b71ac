"""Rate card lookup."""

from .rate_catalog import RateCatalog, RateCatalogEntry, load_rate_catalog

__all__ = ["RateCatalog", "RateCatalogEntry", "load_rate_catalog"]
