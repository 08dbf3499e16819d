"""
Org Chart — Expand/Collapse Transitions

ALL expand-state logic lives here. Every transition returns a new map;
the argument is never mutated, so callers can detect change by identity.

Convention: a missing key means expanded. Only an explicit False means
collapsed. Maps are never normalised by filling in True entries.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from .domain_types import ExpandState, OrgNode
from .tree import get_node_path, iter_nodes


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

def is_expanded(state: ExpandState, node_id: str) -> bool:
    return state.get(node_id) is not False


def collapsed_ids(state: ExpandState) -> List[str]:
    """Ids explicitly collapsed in *state*, sorted."""
    return sorted(node_id for node_id, value in state.items() if value is False)


def get_visible_nodes(
    forest: Sequence[OrgNode], state: ExpandState,
) -> List[OrgNode]:
    """
    Flatten *forest* in reading order (pre-order, left to right).
    A node is always included; its children only when it is expanded.
    """
    visible: List[OrgNode] = []
    stack = list(reversed(forest))
    while stack:
        node = stack.pop()
        visible.append(node)
        if is_expanded(state, node.id):
            stack.extend(reversed(node.children))
    return visible


def get_visible_descendant_count(node: OrgNode, state: ExpandState) -> int:
    """
    Descendants reachable through expanded nodes only.
    0 when *node* itself is collapsed; a collapsed child counts as 1.
    """
    if not is_expanded(state, node.id):
        return 0
    count = 0
    stack = list(node.children)
    while stack:
        child = stack.pop()
        count += 1
        if is_expanded(state, child.id):
            stack.extend(child.children)
    return count


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------

def toggle_node_expansion(state: ExpandState, node_id: str) -> ExpandState:
    """
    Write the negation of the current effective state for *node_id*.

    A missing key becomes False; an explicit False becomes True. The key is
    never removed.
    """
    new_state = dict(state)
    new_state[node_id] = not is_expanded(state, node_id)
    return new_state


def expand_all(forest: Sequence[OrgNode]) -> ExpandState:
    """Every node explicitly True."""
    return {node.id: True for node in iter_nodes(forest)}


def collapse_all(forest: Sequence[OrgNode]) -> ExpandState:
    """Roots of *forest* True, every other node False."""
    state: ExpandState = {}
    stack: List[Tuple[OrgNode, int]] = [(root, 0) for root in forest]
    while stack:
        node, depth = stack.pop()
        state[node.id] = depth == 0
        stack.extend((child, depth + 1) for child in node.children)
    return state


def expand_to_depth(forest: Sequence[OrgNode], depth: int) -> ExpandState:
    """
    Nodes with level < *depth* True, others False.

    Uses each node's own level, so a focused subtree keeps the depths of
    the full forest. depth=1 leaves roots expanded: roots and their direct
    reports are visible, nothing deeper.
    """
    if depth < 0:
        raise ValueError(f"depth must be >= 0, got {depth}")
    return {node.id: node.level < depth for node in iter_nodes(forest)}


def expand_path(
    state: ExpandState, forest: Sequence[OrgNode], node_id: str,
) -> ExpandState:
    """
    Expand every node on the path from a root to *node_id*, inclusive.

    Returns *state* itself when the id is unknown or the path is already
    expanded.
    """
    to_open = [
        node.id for node in get_node_path(forest, node_id)
        if not is_expanded(state, node.id)
    ]
    if not to_open:
        return state
    new_state = dict(state)
    for nid in to_open:
        new_state[nid] = True
    return new_state
