"""
Org Chart — Manager-Reference Graph Utilities

Pure dict-based graph analysis over employee records.
Each record points to at most one manager, so the graph is functional:
every walk up the manager chain either ends or closes a cycle.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Set

from .domain_types import EmployeeRecord


# ---------------------------------------------------------------------------
# Indexes
# ---------------------------------------------------------------------------

def index_records(records: Sequence[EmployeeRecord]) -> Dict[str, EmployeeRecord]:
    """Build name -> record. On duplicate names the later record wins."""
    index: Dict[str, EmployeeRecord] = {}
    for record in records:
        index[record.full_name] = record
    return index


def build_children_index(
    records: Sequence[EmployeeRecord],
) -> Dict[str, List[EmployeeRecord]]:
    """Build manager name -> [direct reports], for managers present in *records*."""
    names = {r.full_name for r in records}
    children: Dict[str, List[EmployeeRecord]] = {}
    for record in records:
        if record.manager and record.manager in names:
            children.setdefault(record.manager, []).append(record)
    return children


def resolve_manager(
    name: str, index: Dict[str, EmployeeRecord],
) -> Optional[str]:
    """Return the manager's name if it resolves within *index*, else None."""
    record = index.get(name)
    if record is None or record.has_blank_manager:
        return None
    if record.manager not in index:
        return None
    return record.manager


# ---------------------------------------------------------------------------
# Cycle detection
# ---------------------------------------------------------------------------

def detect_circular_refs(records: Sequence[EmployeeRecord]) -> List[str]:
    """
    Return the sorted ids of every record lying on a manager cycle.

    Self-references count as a cycle of one. Records that merely report
    into a cycle are not participants.

    Walks each manager chain once with explicit colour tracking:
    WHITE = unseen, GREY = on the current walk, BLACK = finished.
    A walk that reaches a GREY node has closed a cycle; every node from
    that point to the end of the walk is on it.
    """
    index = index_records(records)

    WHITE, GREY, BLACK = 0, 1, 2
    colour: Dict[str, int] = {name: WHITE for name in index}
    cyclic: Set[str] = set()

    for start in index:
        if colour[start] != WHITE:
            continue

        path: List[str] = []
        current: Optional[str] = start
        while current is not None and colour[current] == WHITE:
            colour[current] = GREY
            path.append(current)
            current = resolve_manager(current, index)

        if current is not None and colour[current] == GREY:
            cyclic.update(path[path.index(current):])

        for name in path:
            colour[name] = BLACK

    return sorted(cyclic)
