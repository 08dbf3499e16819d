"""
Sample employee datasets for tests and local experiments.

Small company (sample_records):
    Ada (CEO, Exec, London)
    ├── Ben (VP Engineering, Engineering, London)
    │   ├── Dev (Engineer, Engineering, Berlin)
    │   └── Eli (Engineer, Engineering, London)
    └── Cleo (VP Sales, Sales, Paris)
        └── Fay (Account Exec, Sales, Paris)
    Gus (Contractor)  manager "Nobody" is not in the dataset -> unmapped
"""

from __future__ import annotations

from typing import List

from .domain_types import EmployeeRecord


def employee(name: str, manager: str = "", **fields: str) -> EmployeeRecord:
    return EmployeeRecord(full_name=name, manager=manager, **fields)


def sample_records() -> List[EmployeeRecord]:
    return [
        employee("Ada", "", job_title="CEO", organization_unit="Exec",
                 office="London", email="ada@example.com"),
        employee("Ben", "Ada", job_title="VP Engineering",
                 organization_unit="Engineering", office="London"),
        employee("Cleo", "Ada", job_title="VP Sales",
                 organization_unit="Sales", office="Paris"),
        employee("Dev", "Ben", job_title="Engineer",
                 organization_unit="Engineering", office="Berlin"),
        employee("Eli", "Ben", job_title="Engineer",
                 organization_unit="Engineering", office="London"),
        employee("Fay", "Cleo", job_title="Account Exec",
                 organization_unit="Sales", office="Paris"),
        employee("Gus", "Nobody", job_title="Contractor",
                 organization_unit="Engineering", office="Remote"),
    ]


def chain_records(length: int) -> List[EmployeeRecord]:
    """E00000 -> E00001 -> ... a single reporting line *length* deep."""
    names = [f"E{i:05d}" for i in range(length)]
    return [
        employee(name, names[i - 1] if i else "")
        for i, name in enumerate(names)
    ]


def wide_records(managers: int, reports_per_manager: int) -> List[EmployeeRecord]:
    """One CEO, *managers* direct reports, each with *reports_per_manager* reports."""
    records = [employee("CEO")]
    for m in range(managers):
        manager = f"M{m:03d}"
        records.append(employee(manager, "CEO"))
        for r in range(reports_per_manager):
            records.append(employee(f"{manager}-R{r:03d}", manager))
    return records
