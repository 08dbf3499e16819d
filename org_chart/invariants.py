"""
Org Chart — Forest Invariant Checks

Hard-fail validation of a built forest. Every check raises
InvariantViolationError on failure. Bad employee data never trips these;
the builder absorbs it. A failure here means a bug in the caller or the
builder.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Set, Tuple

from .domain_types import OrgNode


class InvariantViolationError(Exception):
    """Raised when a forest violates a structural invariant."""

    def __init__(self, rule: str, detail: str) -> None:
        self.rule = rule
        self.detail = detail
        super().__init__(f"[INVARIANT:{rule}] {detail}")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def validate_forest(forest: Sequence[OrgNode]) -> None:
    """
    Run all forest checks. Raises InvariantViolationError on the first
    failure.
    """
    if not isinstance(forest, (list, tuple)):
        raise InvariantViolationError(
            "forest_type",
            f"Forest must be a list of OrgNode, got {type(forest).__name__}",
        )
    _check_node_types(forest)
    _check_single_occurrence(forest)
    _check_levels(forest)
    _check_parent_links(forest)
    _check_sibling_order(forest)


# ---------------------------------------------------------------------------
# Individual checks (private)
# ---------------------------------------------------------------------------

def _walk(forest: Sequence[OrgNode]) -> List[Tuple[OrgNode, Optional[OrgNode]]]:
    """(node, parent) pairs in pre-order. Stops descending into repeats."""
    pairs: List[Tuple[OrgNode, Optional[OrgNode]]] = []
    seen: Set[int] = set()
    stack: List[Tuple[OrgNode, Optional[OrgNode]]] = [
        (root, None) for root in reversed(forest)
    ]
    while stack:
        node, parent = stack.pop()
        pairs.append((node, parent))
        if id(node) in seen:
            continue
        seen.add(id(node))
        stack.extend((child, node) for child in reversed(node.children))
    return pairs


def _check_node_types(forest: Sequence[OrgNode]) -> None:
    for root in forest:
        if not isinstance(root, OrgNode):
            raise InvariantViolationError(
                "node_type",
                f"Forest entry {root!r} is not an OrgNode",
            )


def _check_single_occurrence(forest: Sequence[OrgNode]) -> None:
    """Every id appears exactly once across the whole forest."""
    seen: Set[str] = set()
    for node, _ in _walk(forest):
        if node.id in seen:
            raise InvariantViolationError(
                "single_occurrence",
                f"Node {node.id!r} is reachable more than once",
            )
        seen.add(node.id)


def _check_levels(forest: Sequence[OrgNode]) -> None:
    """Roots are level 0; every child is one below its parent."""
    for node, parent in _walk(forest):
        expected = 0 if parent is None else parent.level + 1
        if node.level != expected:
            raise InvariantViolationError(
                "level",
                f"Node {node.id!r} has level {node.level}, expected {expected}",
            )


def _check_parent_links(forest: Sequence[OrgNode]) -> None:
    """A child's parent_id names the node it hangs under."""
    for node, parent in _walk(forest):
        if parent is not None and node.parent_id != parent.id:
            raise InvariantViolationError(
                "parent_link",
                f"Node {node.id!r} has parent_id {node.parent_id!r} "
                f"but sits under {parent.id!r}",
            )


def _check_sibling_order(forest: Sequence[OrgNode]) -> None:
    """Children of each node are sorted ascending by id."""
    for node, _ in _walk(forest):
        ids = [child.id for child in node.children]
        if ids != sorted(ids):
            raise InvariantViolationError(
                "sibling_order",
                f"Children of {node.id!r} are not sorted by id: {ids}",
            )
