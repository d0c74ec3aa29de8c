"""Graph validator: entry-node check and structural invariants."""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from dagflow.models.catalog import Catalog, CatalogEntry, catalog_key
from dagflow.models.graph import DagGraph
from dagflow.utils.logger import get_logger

logger = get_logger()


class RejectionReason(str, Enum):
    """Why a candidate graph was rejected."""

    INVALID_ENTRY_NODE = "invalid-entry-node"


@dataclass
class ValidationOutcome:
    """Accepted(candidate) or Rejected(reason)."""

    accepted: bool
    candidate: Optional[DagGraph] = None
    entry: Optional[CatalogEntry] = None
    reason: Optional[RejectionReason] = None

    @classmethod
    def accept(cls, candidate: DagGraph, entry: CatalogEntry) -> "ValidationOutcome":
        return cls(accepted=True, candidate=candidate, entry=entry)

    @classmethod
    def reject(cls, reason: RejectionReason) -> "ValidationOutcome":
        return cls(accepted=False, reason=reason)


def validate(candidate: DagGraph, catalog: Catalog) -> ValidationOutcome:
    """Decide whether a candidate graph may proceed to sanitization and layout.

    Only the entry node is checked: the first node's id must resolve to a
    catalog entry whose kind is an entry kind. Duplicate ids, dangling edges
    and cycles are left to the later stages.
    """
    first = candidate.entry_node
    first_id = first.id if first else None
    entry = catalog.resolve(first_id)

    if entry is None or not entry.is_entry_kind:
        logger.warning(
            f"First node {first_id!r} (catalog key {catalog_key(first_id)!r}) "
            f"is not a valid entry kind; rejecting candidate"
        )
        return ValidationOutcome.reject(RejectionReason.INVALID_ENTRY_NODE)

    logger.info(
        f"Candidate accepted: entry {first_id!r} -> {entry.name} ({entry.kind}), "
        f"{len(candidate.nodes)} nodes / {len(candidate.edges)} edges"
    )
    return ValidationOutcome.accept(candidate, entry)


@dataclass
class InvariantViolation:
    """A single broken structural invariant."""

    code: str
    message: str
    object_id: Optional[str] = None


@dataclass
class InvariantReport:
    violations: list[InvariantViolation] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.violations

    def add(self, code: str, message: str, object_id: Optional[str] = None) -> None:
        self.violations.append(InvariantViolation(code, message, object_id))


def check_invariants(graph: DagGraph) -> InvariantReport:
    """Check the structural invariants a renderable graph must satisfy.

    - node ids are unique and every edge references existing nodes
    - only the first node carries the entry role, and only it lacks a target port
    - every node has a source port and every edge has both ports
    """
    report = InvariantReport()
    node_ids = graph.node_ids

    for node_id, count in Counter(n.id for n in graph.nodes).items():
        if count > 1:
            report.add("duplicate-node-id", f"Node id {node_id!r} appears {count} times", node_id)

    for index, node in enumerate(graph.nodes):
        is_first = index == 0
        if node.entry_role != is_first:
            report.add(
                "entry-role",
                f"Node {node.id!r} at index {index} has entry_role={node.entry_role}",
                node.id,
            )
        if node.source_port is None:
            report.add("missing-port", f"Node {node.id!r} has no source port", node.id)
        if is_first and node.target_port is not None:
            report.add("entry-target-port", f"Entry node {node.id!r} has a target port", node.id)
        if not is_first and node.target_port is None:
            report.add("missing-port", f"Node {node.id!r} has no target port", node.id)

    for edge in graph.edges:
        for end in (edge.source, edge.target):
            if end not in node_ids:
                report.add(
                    "dangling-reference",
                    f"Edge {edge.id!r} references unknown node {end!r}",
                    edge.id,
                )
        if edge.source_port is None or edge.target_port is None:
            report.add("missing-port", f"Edge {edge.id!r} is missing a port", edge.id)

    return report
