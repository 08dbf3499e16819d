"""
Org Chart — Data-Quality Diagnostics Tests

Covers:
  - Clean-ish dataset: counts and the orphan warning
  - Mutual and self-referencing cycles
  - Duplicate and blank names
  - No top-level employee / several top-level employees
  - Mapped / unmapped / unreachable partition
  - Record parsing from host column keys

Run:  python -m org_chart.test_diagnostics
"""

from __future__ import annotations

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from org_chart.diagnostics import categorize_mapped_users, validate_org_data
from org_chart.domain_types import EmployeeRecord
from org_chart.graph import build_children_index, detect_circular_refs, index_records
from org_chart.sample_data import employee, sample_records


def _names(records) -> list:
    return [r.full_name for r in records]


# ---------------------------------------------------------------------------
# validate_org_data
# ---------------------------------------------------------------------------

def test_sample_dataset_report():
    records = sample_records()
    report = validate_org_data(records)

    assert report.users == records
    assert report.stats.to_dict() == {
        "total_users": 7,
        "root_nodes": 1,
        "orphaned_nodes": 1,
        "circular_refs": 0,
        "duplicate_names": 0,
        "blank_names": 0,
    }
    assert report.warnings == ["1 employee(s) have managers not in the dataset"]


def test_mutual_cycle_counts_both_members():
    report = validate_org_data([employee("X", "Y"), employee("Y", "X")])
    assert report.stats.circular_refs == 2
    assert "Detected 2 circular reference(s)" in report.warnings
    assert report.stats.root_nodes == 0
    assert "No top-level employee found: every record names a manager" in report.warnings


def test_self_reference_is_a_cycle():
    assert detect_circular_refs([employee("Solo", "Solo")]) == ["Solo"]


def test_reports_into_cycle_are_not_participants():
    records = [employee("Z", "X"), employee("X", "Y"), employee("Y", "X")]
    assert detect_circular_refs(records) == ["X", "Y"]


def test_no_cycle_in_plain_chain():
    records = [employee("A"), employee("B", "A"), employee("C", "B")]
    assert detect_circular_refs(records) == []


def test_duplicate_names_counted():
    report = validate_org_data([employee("Amy"), employee("Amy", "Bob"), employee("Bob")])
    assert report.stats.duplicate_names == 1
    assert any("duplicate employee name" in w for w in report.warnings)


def test_blank_names_counted():
    report = validate_org_data([employee("Amy"), employee("   ", "Amy")])
    assert report.stats.blank_names == 1
    assert "1 employee(s) have a blank name" in report.warnings


def test_multiple_top_level_employees_warned():
    report = validate_org_data([employee("A"), employee("B", "  ")])
    assert report.stats.root_nodes == 2
    assert "2 top-level employees have no manager" in report.warnings


def test_empty_dataset_has_no_warnings():
    report = validate_org_data([])
    assert report.warnings == []
    assert report.stats.total_users == 0


# ---------------------------------------------------------------------------
# categorize_mapped_users
# ---------------------------------------------------------------------------

def test_sample_partition():
    mapping = categorize_mapped_users(sample_records())
    assert _names(mapping.mapped_users) == ["Ada", "Ben", "Cleo", "Dev", "Eli", "Fay"]
    assert _names(mapping.unmapped_users) == ["Gus"]
    assert _names(mapping.true_roots) == ["Ada"]
    assert mapping.unreachable_users == []


def test_partition_with_cycle_and_orphan_chain():
    records = [
        employee("Amy"),
        employee("X", "Y"),
        employee("Y", "X"),
        employee("Z", "X"),
        employee("Bob", "Nobody"),
        employee("Kid", "Bob"),
    ]
    mapping = categorize_mapped_users(records)
    assert _names(mapping.mapped_users) == ["Amy"]
    assert _names(mapping.unmapped_users) == ["Bob"]
    assert _names(mapping.unreachable_users) == ["X", "Y", "Z", "Kid"]


def test_mapped_preserves_input_order():
    records = [employee("C", "B"), employee("B", "A"), employee("A")]
    mapping = categorize_mapped_users(records)
    assert _names(mapping.mapped_users) == ["C", "B", "A"]


def test_every_record_lands_in_exactly_one_bucket():
    records = sample_records() + [employee("X", "Y"), employee("Y", "X")]
    mapping = categorize_mapped_users(records)
    buckets = (
        _names(mapping.mapped_users)
        + _names(mapping.unmapped_users)
        + _names(mapping.unreachable_users)
    )
    assert sorted(buckets) == sorted(_names(records))


# ---------------------------------------------------------------------------
# Indexes and record parsing
# ---------------------------------------------------------------------------

def test_index_records_last_wins():
    index = index_records([employee("Amy", job_title="a"), employee("Amy", job_title="b")])
    assert index["Amy"].job_title == "b"


def test_children_index_skips_unknown_managers():
    children = build_children_index(sample_records())
    assert _names(children["Ada"]) == ["Ben", "Cleo"]
    assert "Nobody" not in children


def test_record_from_host_keys():
    record = EmployeeRecord.from_dict({
        "fullName": "Ada",
        "manager": None,
        "jobTitle": "CEO",
        "organizationUnit": "Exec",
    })
    assert record.full_name == "Ada"
    assert record.manager == ""
    assert record.job_title == "CEO"
    assert record.organization_unit == "Exec"
    assert record.has_blank_manager


def test_record_missing_name_becomes_unknown():
    assert EmployeeRecord.from_dict({"manager": "Ada"}).full_name == "Unknown"


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------

def main() -> None:
    tests = [fn for name, fn in list(globals().items()) if name.startswith("test_")]
    failed = 0
    print(f"\nRunning {len(tests)} tests...\n")
    for fn in tests:
        try:
            fn()
            print(f"  [PASS] {fn.__name__}")
        except Exception as exc:
            print(f"  [FAIL] {fn.__name__}: {exc!r}")
            failed += 1

    print(f"\n{'='*60}")
    print(f"  {len(tests) - failed} passed, {failed} failed out of {len(tests)}")
    print(f"{'='*60}")
    if failed:
        sys.exit(1)


if __name__ == "__main__":
    main()
