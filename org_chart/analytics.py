"""
Org Chart — Organisation Analytics

Span-of-control and level-distribution figures over a forest.
Depth is measured from the roots of the forest given, so a focused
subtree reports its own shape.
"""

from __future__ import annotations

import math
from typing import Dict, List, Sequence, Tuple

from .domain_types import OrgAnalytics, OrgNode


def compute_analytics(forest: Sequence[OrgNode]) -> OrgAnalytics:
    max_depth = 0
    total_direct_reports = 0
    managers = 0
    max_span = 0
    level_counts: Dict[int, int] = {}

    stack: List[Tuple[OrgNode, int]] = [(root, 0) for root in forest]
    while stack:
        node, depth = stack.pop()
        max_depth = max(max_depth, depth)
        level_counts[depth] = level_counts.get(depth, 0) + 1

        reports = len(node.children)
        if reports > 0:
            managers += 1
            total_direct_reports += reports
            max_span = max(max_span, reports)

        stack.extend((child, depth + 1) for child in node.children)

    avg_span = _round_half_up(total_direct_reports / managers) if managers else 0.0
    distribution = sorted(level_counts.items())
    total_people = sum(count for _, count in distribution)

    return OrgAnalytics(
        max_depth=max_depth,
        avg_span_of_control=avg_span,
        max_span_of_control=max_span,
        level_distribution=distribution,
        managers_count=managers,
        individual_contributors=total_people - managers,
    )


def _round_half_up(value: float) -> float:
    """One decimal place, halves rounded up (2.25 -> 2.3)."""
    return math.floor(value * 10 + 0.5) / 10
