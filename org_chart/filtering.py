"""
Org Chart — Filter Engine

Prune a forest down to matching nodes plus every ancestor of a match.
Pure: the input forest is never mutated; retained nodes are copies that
carry only their retained children.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, List, Optional, Sequence, Tuple

from .domain_types import EmployeeRecord, FilterCriteria, FilterResult, OrgNode
from .tree import count_nodes


def node_matches_filter(node: OrgNode, criteria: FilterCriteria) -> bool:
    """
    True when *node* satisfies every active criterion.

    With no active criteria every node matches. Also used by presentation
    to dim ancestors that were kept only for continuity.
    """
    if not criteria.is_active:
        return True

    if criteria.max_level is not None and node.level >= criteria.max_level:
        return False

    if criteria.org_units:
        unit = node.record.organization_unit
        if not unit or unit not in criteria.org_units:
            return False

    if criteria.offices:
        office = node.record.office
        if not office or office not in criteria.offices:
            return False

    return True


def filter_org_tree(
    forest: Sequence[OrgNode], criteria: FilterCriteria,
) -> FilterResult:
    """
    Filter *forest* by *criteria*.

    Inactive criteria pass the input forest straight through with
    match_count == total_count == node count. Otherwise a node is kept iff
    it matches or any child was kept (post-order). match_count counts
    direct matches only; total_count counts every node visited.
    """
    if not criteria.is_active:
        total = count_nodes(forest)
        return FilterResult(
            filtered_tree=forest if isinstance(forest, list) else list(forest),
            match_count=total,
            total_count=total,
        )

    match_count = 0
    total_count = 0

    # Post-order over an explicit stack. Each frame holds the node, whether
    # its children were pushed, and the kept copies of its children.
    kept: Dict[int, List[OrgNode]] = {}
    matched: Dict[int, bool] = {}
    filtered_tree: List[OrgNode] = []

    stack: List[Tuple[OrgNode, Optional[OrgNode], bool]] = [
        (root, None, False) for root in reversed(forest)
    ]
    while stack:
        node, parent, expanded = stack.pop()
        if not expanded:
            total_count += 1
            is_match = node_matches_filter(node, criteria)
            if is_match:
                match_count += 1
            matched[id(node)] = is_match
            kept[id(node)] = []
            stack.append((node, parent, True))
            stack.extend((child, node, False) for child in reversed(node.children))
            continue

        children = kept.pop(id(node))
        if matched.pop(id(node)) or children:
            copy = replace(node, children=children)
            if parent is None:
                filtered_tree.append(copy)
            else:
                kept[id(parent)].append(copy)

    return FilterResult(
        filtered_tree=filtered_tree,
        match_count=match_count,
        total_count=total_count,
    )


def get_filter_options(
    records: Sequence[EmployeeRecord],
) -> Tuple[List[str], List[str]]:
    """Sorted unique non-empty (org_units, offices) present in *records*."""
    org_units = {r.organization_unit for r in records if r.organization_unit}
    offices = {r.office for r in records if r.office}
    return sorted(org_units), sorted(offices)
