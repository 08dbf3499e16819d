"""
Org Chart — Core Domain Types

Pure data. No traversal, no view logic.

────────────────────────────────────────────────
DOMAIN GLOSSARY
────────────────────────────────────────────────

Display name:
    An employee's full name. Used as the unique identity key of a record
    and of the node wrapping it.

Manager reference:
    Free-text field matched by exact string equality against another
    record's display name. Blank means "top of the organisation".

True root:
    Record whose manager reference is empty or whitespace-only.

Unmapped (orphan):
    Record whose manager reference is non-blank but names nobody in the
    dataset.

Forest:
    Ordered list of root nodes. Treated as an immutable value.

Expand state:
    Map of node id -> bool. A missing key means "expanded"; only an
    explicit ``False`` means collapsed.

────────────────────────────────────────────────
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

from .constants import DEFAULT_INITIAL_EXPAND_DEPTH


# Expand/collapse map. Absence of a key means expanded.
ExpandState = Dict[str, bool]

UNKNOWN_NAME = "Unknown"

# snake_case field -> host (camelCase) column key
_HOST_KEYS: Dict[str, str] = {
    "full_name": "fullName",
    "manager": "manager",
    "email": "email",
    "slack_username": "slackUsername",
    "profile_image": "profileImage",
    "job_title": "jobTitle",
    "organization_unit": "organizationUnit",
    "office": "office",
    "start_date": "startDate",
}


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


# ── Employee Record ───────────────────────────────────────────

@dataclass(frozen=True)
class EmployeeRecord:
    """One row of the externally supplied employee list. Opaque payload."""

    full_name: str
    manager: str = ""
    email: str = ""
    slack_username: str = ""
    profile_image: str = ""
    job_title: str = ""
    organization_unit: str = ""
    office: str = ""
    start_date: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EmployeeRecord":
        """
        Build a record from a plain dict.

        Accepts snake_case keys or the host's camelCase column keys.
        A missing or empty name becomes ``"Unknown"``.
        """
        values: Dict[str, str] = {}
        for attr, host_key in _HOST_KEYS.items():
            raw = data.get(attr, data.get(host_key))
            values[attr] = _text(raw)
        if not values["full_name"]:
            values["full_name"] = UNKNOWN_NAME
        return cls(**values)

    def to_dict(self) -> Dict[str, str]:
        return {attr: getattr(self, attr) for attr in _HOST_KEYS}

    @property
    def has_blank_manager(self) -> bool:
        return not self.manager or not self.manager.strip()


# ── Tree Node ─────────────────────────────────────────────────

@dataclass
class OrgNode:
    """
    A node of the hierarchy, wrapping one employee record.

    id:        the record's display name
    parent_id: the record's manager reference, or None when empty
    level:     0 for roots, otherwise parent.level + 1
    children:  owned exclusively by this node, sorted by id
    """

    id: str
    record: EmployeeRecord
    parent_id: Optional[str] = None
    level: int = 0
    children: List["OrgNode"] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the subtree rooted here to nested plain dicts."""
        return {
            "id": self.id,
            "parent_id": self.parent_id,
            "level": self.level,
            "record": self.record.to_dict(),
            "children": [child.to_dict() for child in self.children],
        }


# ── Filtering ─────────────────────────────────────────────────

@dataclass(frozen=True)
class FilterCriteria:
    """
    Inclusion criteria for the filter engine.

    Within a criterion values are ORed; active criteria are ANDed.
    max_level: nodes with level < max_level match. None (or 0) = no cap.
    """

    org_units: FrozenSet[str] = frozenset()
    offices: FrozenSet[str] = frozenset()
    max_level: Optional[int] = None

    def __post_init__(self) -> None:
        for name in ("org_units", "offices"):
            if isinstance(getattr(self, name), str):
                raise ValueError(
                    f"{name} must be a collection of strings, not a bare string"
                )
        object.__setattr__(self, "org_units", frozenset(self.org_units))
        object.__setattr__(self, "offices", frozenset(self.offices))
        if self.max_level is not None:
            if isinstance(self.max_level, bool) or not isinstance(self.max_level, int):
                raise ValueError(
                    f"max_level must be an int or None, got {self.max_level!r}"
                )
            if self.max_level < 0:
                raise ValueError(f"max_level must be >= 0, got {self.max_level}")
            if self.max_level == 0:
                object.__setattr__(self, "max_level", None)

    @classmethod
    def build(
        cls,
        org_units: Iterable[str] = (),
        offices: Iterable[str] = (),
        max_level: Optional[int] = None,
    ) -> "FilterCriteria":
        return cls(org_units, offices, max_level)

    @property
    def is_active(self) -> bool:
        return bool(self.org_units or self.offices or self.max_level is not None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "org_units": sorted(self.org_units),
            "offices": sorted(self.offices),
            "max_level": self.max_level,
        }


@dataclass(frozen=True)
class FilterResult:
    """
    filtered_tree: pruned forest (new nodes; input untouched)
    match_count:   nodes matching the criteria directly
    total_count:   every node visited
    """

    filtered_tree: List[OrgNode]
    match_count: int
    total_count: int


# ── Validation ────────────────────────────────────────────────

@dataclass(frozen=True)
class ValidationStats:
    total_users: int = 0
    root_nodes: int = 0
    orphaned_nodes: int = 0
    circular_refs: int = 0
    duplicate_names: int = 0
    blank_names: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "total_users": self.total_users,
            "root_nodes": self.root_nodes,
            "orphaned_nodes": self.orphaned_nodes,
            "circular_refs": self.circular_refs,
            "duplicate_names": self.duplicate_names,
            "blank_names": self.blank_names,
        }


@dataclass(frozen=True)
class ValidationResult:
    """Advisory report. ``users`` is the input list, returned as-is."""

    users: List[EmployeeRecord]
    warnings: List[str]
    stats: ValidationStats


@dataclass(frozen=True)
class MappingResult:
    """
    mapped_users:      reachable from a true root through manager links
    unmapped_users:    non-blank manager that names nobody in the dataset
    true_roots:        blank manager reference
    unreachable_users: in neither mapped_users nor unmapped_users
                       (cycle participants and anything hanging below a
                       cycle or an unmapped record)
    """

    mapped_users: List[EmployeeRecord]
    unmapped_users: List[EmployeeRecord]
    true_roots: List[EmployeeRecord]
    unreachable_users: List[EmployeeRecord] = field(default_factory=list)


# ── Navigation / Search / Analytics ───────────────────────────

@dataclass(frozen=True)
class SiblingInfo:
    """Siblings of a node, its index among them, and its parent (None for roots)."""

    siblings: List[OrgNode]
    index: int
    parent: Optional[OrgNode]


@dataclass(frozen=True)
class SearchResult:
    user: EmployeeRecord
    match_type: str   # name | email | title | org
    match_text: str


@dataclass(frozen=True)
class OrgAnalytics:
    max_depth: int
    avg_span_of_control: float
    max_span_of_control: int
    level_distribution: List[Tuple[int, int]]
    managers_count: int
    individual_contributors: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "max_depth": self.max_depth,
            "avg_span_of_control": self.avg_span_of_control,
            "max_span_of_control": self.max_span_of_control,
            "level_distribution": [
                {"level": level, "count": count}
                for level, count in self.level_distribution
            ],
            "managers_count": self.managers_count,
            "individual_contributors": self.individual_contributors,
        }


# ── Engine Options ────────────────────────────────────────────

@dataclass(frozen=True)
class OrgChartOptions:
    """
    initial_expand_depth: nodes with level < depth start expanded.
                          1 = roots expanded, direct reports visible.
    include_unmapped:     build from every record (orphans become extra
                          roots) instead of only the mapped subset.
    """

    initial_expand_depth: int = DEFAULT_INITIAL_EXPAND_DEPTH
    include_unmapped: bool = False

    def __post_init__(self) -> None:
        if self.initial_expand_depth < 0:
            raise ValueError(
                f"initial_expand_depth must be >= 0, got {self.initial_expand_depth}"
            )
