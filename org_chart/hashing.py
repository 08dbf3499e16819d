"""
Org Chart — Canonical Forest Hashing

Deterministic canonical serialization + SHA-256 hashing of a forest.
Used to tell whether a rebuilt forest differs from the one a view state
was made for.

Rules:
  - Nodes in pre-order, exactly as the forest orders them
  - Each node: id, parent_id, level, child count, then its record fields
    in fixed order
  - UTF-8 JSON, no whitespace
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, List, Sequence

from .domain_types import OrgNode
from .tree import iter_nodes


def canonical_serialize(forest: Sequence[OrgNode]) -> bytes:
    """Canonical serialization of *forest* to UTF-8 JSON bytes."""
    rows: List[List[Any]] = []
    for node in iter_nodes(forest):
        record = node.record
        rows.append([
            node.id,
            node.parent_id,
            node.level,
            len(node.children),
            record.full_name,
            record.manager,
            record.email,
            record.slack_username,
            record.profile_image,
            record.job_title,
            record.organization_unit,
            record.office,
            record.start_date,
        ])
    return json.dumps(
        {"roots": len(forest), "nodes": rows},
        ensure_ascii=True,
        separators=(",", ":"),
    ).encode("utf-8")


def forest_hash(forest: Sequence[OrgNode]) -> str:
    """SHA-256 of canonical serialization. Lowercase hex string."""
    return hashlib.sha256(canonical_serialize(forest)).hexdigest()
