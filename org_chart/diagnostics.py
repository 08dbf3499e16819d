"""
Org Chart — Data-Quality Diagnostics

Classify manager references and summarise dataset health.
Nothing here raises on bad employee data: every condition is returned
as counts, classifications and warning strings.
"""

from __future__ import annotations

from collections import deque
from typing import Deque, List, Sequence, Set

from .domain_types import (
    EmployeeRecord, MappingResult, ValidationResult, ValidationStats,
)
from .graph import build_children_index, detect_circular_refs


def validate_org_data(records: Sequence[EmployeeRecord]) -> ValidationResult:
    """
    Return an advisory report for *records*.

    The records are returned unchanged; the tree builder copes with every
    condition reported here.
    """
    users = list(records)
    names = {r.full_name for r in users}

    circular = detect_circular_refs(users)
    roots = sum(1 for r in users if r.has_blank_manager)
    orphaned = sum(
        1 for r in users if not r.has_blank_manager and r.manager not in names
    )
    duplicates = len(users) - len(names)
    blank_names = sum(1 for r in users if not r.full_name.strip())

    warnings: List[str] = []

    if circular:
        warnings.append(f"Detected {len(circular)} circular reference(s)")
    if orphaned:
        warnings.append(
            f"{orphaned} employee(s) have managers not in the dataset"
        )
    if duplicates:
        warnings.append(
            f"{duplicates} duplicate employee name(s); "
            f"only the last record with each name is shown"
        )
    if blank_names:
        warnings.append(f"{blank_names} employee(s) have a blank name")
    if users and roots == 0:
        warnings.append(
            "No top-level employee found: every record names a manager"
        )
    elif roots > 1:
        warnings.append(f"{roots} top-level employees have no manager")

    return ValidationResult(
        users=users,
        warnings=warnings,
        stats=ValidationStats(
            total_users=len(users),
            root_nodes=roots,
            orphaned_nodes=orphaned,
            circular_refs=len(circular),
            duplicate_names=duplicates,
            blank_names=blank_names,
        ),
    )


def categorize_mapped_users(records: Sequence[EmployeeRecord]) -> MappingResult:
    """
    Partition *records* by how their manager chain resolves.

    true_roots:  blank manager reference
    unmapped:    non-blank manager reference naming nobody in the dataset
    mapped:      reachable from a true root (breadth-first over reports)

    Records whose chain never bottoms out at a true root (cycles, or
    reports of an unmapped record) land in neither mapped nor unmapped;
    they are listed in ``unreachable_users``. Input order is preserved in
    every list.
    """
    names = {r.full_name for r in records}

    true_roots = [r for r in records if r.has_blank_manager]
    unmapped = [
        r for r in records
        if not r.has_blank_manager and r.manager not in names
    ]

    children_by_manager = build_children_index(records)

    mapped: Set[str] = set()
    queue: Deque[EmployeeRecord] = deque(true_roots)
    while queue:
        record = queue.popleft()
        if record.full_name in mapped:
            continue
        mapped.add(record.full_name)
        queue.extend(children_by_manager.get(record.full_name, []))

    mapped_users = [r for r in records if r.full_name in mapped]
    unreachable = [
        r for r in records
        if r.full_name not in mapped
        and not r.has_blank_manager
        and r.manager in names
    ]

    return MappingResult(
        mapped_users=mapped_users,
        unmapped_users=unmapped,
        true_roots=true_roots,
        unreachable_users=unreachable,
    )
