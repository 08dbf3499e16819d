"""
Org Chart Hierarchy Engine
Turns a flat, possibly malformed employee list into a navigable forest
and keeps the visible set consistent under expand, collapse, focus and
filter changes.
"""

from .domain_types import (
    EmployeeRecord, OrgNode, FilterCriteria, FilterResult, ValidationStats,
    ValidationResult, MappingResult, SiblingInfo, SearchResult, OrgAnalytics,
    OrgChartOptions, ExpandState,
)
from .graph import detect_circular_refs, index_records, build_children_index
from .diagnostics import validate_org_data, categorize_mapped_users
from .tree import (
    build_org_chart,
    iter_nodes,
    count_nodes,
    get_max_level,
    find_node,
    get_node_path,
    get_descendant_count,
)
from .invariants import InvariantViolationError, validate_forest
from .filtering import node_matches_filter, filter_org_tree, get_filter_options
from .expansion import (
    is_expanded,
    collapsed_ids,
    get_visible_nodes,
    get_visible_descendant_count,
    toggle_node_expansion,
    expand_all,
    collapse_all,
    expand_to_depth,
    expand_path,
)
from .navigation import find_siblings, find_parent, KeyboardNavigator
from .search import search_users
from .analytics import compute_analytics
from .hashing import canonical_serialize, forest_hash
from .engine import OrgChartEngine
from .constants import (
    DEFAULT_INITIAL_EXPAND_DEPTH,
    SEARCH_MIN_QUERY_LENGTH,
    SEARCH_MAX_RESULTS,
    VISIBLE_NODE_WARNING_THRESHOLD,
)

__all__ = [
    "EmployeeRecord",
    "OrgNode",
    "FilterCriteria",
    "FilterResult",
    "ValidationStats",
    "ValidationResult",
    "MappingResult",
    "SiblingInfo",
    "SearchResult",
    "OrgAnalytics",
    "OrgChartOptions",
    "ExpandState",
    "detect_circular_refs",
    "index_records",
    "build_children_index",
    "validate_org_data",
    "categorize_mapped_users",
    "build_org_chart",
    "iter_nodes",
    "count_nodes",
    "get_max_level",
    "find_node",
    "get_node_path",
    "get_descendant_count",
    "InvariantViolationError",
    "validate_forest",
    "node_matches_filter",
    "filter_org_tree",
    "get_filter_options",
    "is_expanded",
    "collapsed_ids",
    "get_visible_nodes",
    "get_visible_descendant_count",
    "toggle_node_expansion",
    "expand_all",
    "collapse_all",
    "expand_to_depth",
    "expand_path",
    "find_siblings",
    "find_parent",
    "KeyboardNavigator",
    "search_users",
    "compute_analytics",
    "canonical_serialize",
    "forest_hash",
    "OrgChartEngine",
    "DEFAULT_INITIAL_EXPAND_DEPTH",
    "SEARCH_MIN_QUERY_LENGTH",
    "SEARCH_MAX_RESULTS",
    "VISIBLE_NODE_WARNING_THRESHOLD",
]
