"""Node catalog access."""

from dagflow.catalog.gateway import (
    CatalogGateway,
    CatalogUnavailableError,
    get_catalog_gateway,
)

__all__ = [
    "CatalogGateway",
    "CatalogUnavailableError",
    "get_catalog_gateway",
]
