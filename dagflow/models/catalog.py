"""Node catalog models."""

from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

# Separator between a node id's catalog name and its instance suffix.
ID_SEPARATOR = "_"

DEFAULT_ENTRY_KINDS = frozenset({"trigger", "webhook", "scheduler"})


def catalog_key(node_id: Optional[str]) -> str:
    """Derive the catalog lookup key from a node id.

    ``"trigger_17"`` resolves to ``"trigger"``; the comparison is
    case-insensitive.
    """
    if not node_id:
        return ""
    return node_id.split(ID_SEPARATOR, 1)[0].lower()


class CatalogRecord(BaseModel):
    """A raw record of the catalog source."""

    model_config = ConfigDict(extra="ignore")

    name: str
    label: Optional[str] = None
    type: Optional[str] = None


class CatalogEntry(BaseModel):
    """A recognized node kind."""

    name: str
    label: str = ""
    kind: str
    is_entry_kind: bool = False


class Catalog(BaseModel):
    """Read-only set of catalog entries indexed by lower-cased name."""

    model_config = ConfigDict(frozen=True)

    entries: tuple[CatalogEntry, ...] = Field(default_factory=tuple)
    entry_kinds: frozenset[str] = DEFAULT_ENTRY_KINDS

    _index: dict[str, CatalogEntry] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context) -> None:
        index: dict[str, CatalogEntry] = {}
        for entry in self.entries:
            # First record wins on duplicate names
            index.setdefault(entry.name.lower(), entry)
        self._index = index

    @classmethod
    def from_records(
        cls,
        records: Iterable[CatalogRecord],
        entry_kinds: Iterable[str] = DEFAULT_ENTRY_KINDS,
    ) -> "Catalog":
        """Build a catalog, flagging records whose type is an entry kind."""
        kinds = frozenset(k.strip().lower() for k in entry_kinds if k.strip())
        entries = tuple(
            CatalogEntry(
                name=record.name,
                label=record.label or "",
                kind=record.type or "",
                is_entry_kind=(record.type or "").lower() in kinds,
            )
            for record in records
        )
        return cls(entries=entries, entry_kinds=kinds)

    def lookup(self, name: str) -> Optional[CatalogEntry]:
        """Find an entry by name, case-insensitively."""
        return self._index.get(name.lower())

    def resolve(self, node_id: Optional[str]) -> Optional[CatalogEntry]:
        """Find the entry a node id refers to."""
        return self.lookup(catalog_key(node_id))

    def records(self) -> list[dict[str, str]]:
        """Entries in the source's ``{name, label, type}`` shape."""
        return [
            {"name": e.name, "label": e.label, "type": e.kind} for e in self.entries
        ]

    def __len__(self) -> int:
        return len(self.entries)
