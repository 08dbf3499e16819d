"""
Org Chart — Tree Builder and Static Tree Queries

build_org_chart turns a flat record list into a forest. Every other
function here is a read-only query whose answer does not depend on the
expand state.

All traversals use explicit stacks; manager chains can be long.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Sequence, Set, Tuple

from .domain_types import EmployeeRecord, OrgNode

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

def build_org_chart(records: Sequence[EmployeeRecord]) -> List[OrgNode]:
    """
    Build the forest for *records*.

    A record whose manager reference is blank, or does not resolve within
    *records*, becomes a root. Which records end up as roots is therefore
    decided by what the caller hands in.

    Roots keep input order; children are sorted ascending by id. Levels are
    assigned top-down once all links exist, so input order never matters.
    Records caught in a manager cycle are made reachable by promoting one
    node per cycle to a root.
    """
    nodes: Dict[str, OrgNode] = {}
    for record in records:
        if record.full_name in nodes:
            logger.warning(
                "Duplicate employee name %r: later record replaces earlier one",
                record.full_name,
            )
        nodes[record.full_name] = OrgNode(
            id=record.full_name,
            record=record,
            parent_id=None if record.has_blank_manager else record.manager,
        )

    roots: List[OrgNode] = []
    for node in nodes.values():
        parent = nodes.get(node.parent_id) if node.parent_id else None
        if parent is not None:
            parent.children.append(node)
        else:
            roots.append(node)

    reached = _reachable_ids(roots)
    if len(reached) < len(nodes):
        for node in nodes.values():
            if node.id in reached:
                continue
            entry = _cycle_entry(node, nodes)
            parent = nodes[entry.parent_id]
            parent.children = [c for c in parent.children if c is not entry]
            roots.append(entry)
            reached |= _reachable_ids([entry])
            logger.warning(
                "Manager cycle through %r: shown as a separate root", entry.id,
            )

    stack: List[Tuple[OrgNode, int]] = [(root, 0) for root in reversed(roots)]
    while stack:
        node, level = stack.pop()
        node.level = level
        node.children.sort(key=lambda c: c.id)
        stack.extend((child, level + 1) for child in node.children)

    return roots


def _reachable_ids(roots: Sequence[OrgNode]) -> Set[str]:
    return {node.id for node in iter_nodes(roots)}


def _cycle_entry(node: OrgNode, nodes: Dict[str, OrgNode]) -> OrgNode:
    """
    Walk up from an unreachable *node* until a node repeats.

    An unreachable node's ancestors all resolve (otherwise one of them
    would be a root), so the walk must close a cycle; the first repeated
    node lies on it.
    """
    seen: Set[str] = set()
    current = node
    while current.id not in seen:
        seen.add(current.id)
        current = nodes[current.parent_id]
    return current


# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------

def iter_nodes(forest: Sequence[OrgNode]) -> Iterator[OrgNode]:
    """Yield every node depth-first, pre-order, left to right."""
    stack = list(reversed(forest))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def count_nodes(forest: Sequence[OrgNode]) -> int:
    return sum(1 for _ in iter_nodes(forest))


def get_max_level(forest: Sequence[OrgNode]) -> int:
    """Number of levels in *forest* (deepest level + 1); 0 when empty."""
    levels = [node.level for node in iter_nodes(forest)]
    return max(levels) + 1 if levels else 0


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

def find_node(forest: Sequence[OrgNode], node_id: str) -> Optional[OrgNode]:
    """First node with *node_id* in pre-order, or None."""
    for node in iter_nodes(forest):
        if node.id == node_id:
            return node
    return None


def get_node_path(forest: Sequence[OrgNode], node_id: str) -> List[OrgNode]:
    """
    Ordered path from a root down to *node_id*, both ends included.
    Empty list if the id is not in *forest*.
    """
    stack: List[Tuple[OrgNode, Tuple[OrgNode, ...]]] = [
        (root, (root,)) for root in reversed(forest)
    ]
    while stack:
        node, path = stack.pop()
        if node.id == node_id:
            return list(path)
        for child in reversed(node.children):
            stack.append((child, path + (child,)))
    return []


def get_descendant_count(node: OrgNode) -> int:
    """Every node below *node*, regardless of expand state."""
    return count_nodes(node.children)
