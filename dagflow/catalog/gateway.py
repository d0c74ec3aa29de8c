"""Catalog gateway: fetches the node catalog once per process."""

import json
import threading
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from dagflow.models.catalog import (
    DEFAULT_ENTRY_KINDS,
    Catalog,
    CatalogEntry,
    CatalogRecord,
)
from dagflow.utils.config import get_settings
from dagflow.utils.logger import get_logger

logger = get_logger()

_records_adapter = TypeAdapter(list[CatalogRecord])


class CatalogUnavailableError(Exception):
    """Raised when the catalog cannot be fetched or parsed."""

    code = "catalog-unavailable"

    def __init__(self, message: str, source: str):
        super().__init__(message)
        self.source = source


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


class CatalogGateway:
    """Lazily loaded, write-once catalog.

    The first :meth:`load` fetches the source; later calls return the cached
    catalog. :meth:`refresh` is the only way to replace it.
    """

    def __init__(
        self,
        source: str,
        entry_kinds: Iterable[str] = DEFAULT_ENTRY_KINDS,
        timeout: float = 10.0,
    ):
        """Initialize the gateway.

        Args:
            source: ``http(s)://`` URL or path of a JSON list of
                ``{name, label, type}`` records.
            entry_kinds: Record types accepted as a graph's entry point.
            timeout: HTTP timeout in seconds.
        """
        self.source = source
        self.entry_kinds = frozenset(entry_kinds)
        self.timeout = timeout
        self._catalog: Optional[Catalog] = None
        self._lock = threading.Lock()

    @property
    def is_loaded(self) -> bool:
        """Whether the catalog has been fetched."""
        return self._catalog is not None

    def load(self) -> Catalog:
        """Return the catalog, fetching it on first use.

        Raises:
            CatalogUnavailableError: If the cold fetch fails.
        """
        catalog = self._catalog
        if catalog is not None:
            return catalog
        with self._lock:
            if self._catalog is None:
                self._catalog = self._fetch()
            return self._catalog

    def refresh(self) -> Catalog:
        """Re-fetch the catalog; the cached one is kept if this fails."""
        with self._lock:
            self._catalog = self._fetch()
            return self._catalog

    def lookup(self, name: str) -> Optional[CatalogEntry]:
        """Find an entry by name in the loaded catalog."""
        return self.load().lookup(name)

    def _fetch(self) -> Catalog:
        logger.info(f"Fetching node catalog from {self.source}")
        try:
            payload = self._read_source()
            records = _records_adapter.validate_python(payload)
        except (httpx.HTTPError, OSError, ValueError, ValidationError) as e:
            # json.JSONDecodeError is a ValueError
            logger.error(f"Catalog unavailable: {e}")
            raise CatalogUnavailableError(
                f"Unable to fetch node catalog from {self.source}: {e}", self.source
            ) from e

        catalog = Catalog.from_records(records, self.entry_kinds)
        entry_count = sum(1 for e in catalog.entries if e.is_entry_kind)
        logger.info(f"Loaded {len(catalog)} catalog entries ({entry_count} entry kinds)")
        return catalog

    def _read_source(self):
        if _is_url(self.source):
            response = httpx.get(self.source, timeout=self.timeout, follow_redirects=True)
            response.raise_for_status()
            return response.json()
        return json.loads(Path(self.source).read_text(encoding="utf-8"))


@lru_cache
def get_catalog_gateway() -> CatalogGateway:
    """Get the process-wide catalog gateway."""
    settings = get_settings()
    return CatalogGateway(
        source=settings.catalog_source,
        entry_kinds=settings.entry_kind_set(),
        timeout=settings.catalog_timeout,
    )
