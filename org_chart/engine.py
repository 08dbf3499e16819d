"""
Org Chart — View-State Engine

Top-level controller. Builds the forest via tree.py, checks it via
invariants.py, reports via diagnostics.py, and delegates every expand
transition to expansion.py.

State is replaced, never mutated in place: each change swaps in a new
expand map / forest / criteria value, so readers holding an old value
keep a consistent snapshot.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .analytics import compute_analytics
from .constants import SEARCH_MAX_RESULTS, VISIBLE_NODE_WARNING_THRESHOLD
from .diagnostics import categorize_mapped_users, validate_org_data
from .domain_types import (
    EmployeeRecord, ExpandState, FilterCriteria, FilterResult, MappingResult,
    OrgAnalytics, OrgChartOptions, OrgNode, SearchResult, ValidationResult,
)
from .expansion import (
    collapse_all, expand_all, expand_path, expand_to_depth, get_visible_nodes,
    get_visible_descendant_count, is_expanded, toggle_node_expansion,
)
from .filtering import filter_org_tree, get_filter_options
from .hashing import forest_hash
from .invariants import validate_forest
from .navigation import find_parent
from .search import search_users
from .tree import (
    build_org_chart, count_nodes, find_node, get_descendant_count,
    get_max_level, get_node_path,
)

logger = logging.getLogger(__name__)


class OrgChartEngine:
    """
    Stateful controller over the pure tree, filter and expand functions.

    Owns:
      - the records and the forest built from them
      - the expand map (missing key = expanded)
      - the focus pointer (subtree root id, or None)
      - the filter criteria

    Lookups with unknown ids return None / [] / 0 and never raise.
    """

    def __init__(
        self,
        records: Sequence[EmployeeRecord] = (),
        options: Optional[OrgChartOptions] = None,
    ) -> None:
        self._options = options or OrgChartOptions()
        self._records: List[EmployeeRecord] = []
        self._source: List[EmployeeRecord] = []
        self._validation: Optional[ValidationResult] = None
        self._mapping: Optional[MappingResult] = None
        self._forest: List[OrgNode] = []
        self._tree_hash: str = ""
        self._expand_state: ExpandState = {}
        self._focused_node_id: Optional[str] = None
        self._filters: FilterCriteria = FilterCriteria()
        self._filter_result: Optional[FilterResult] = None
        self.load(records)

    # -- Dataset ------------------------------------------------------------

    def load(self, records: Sequence[EmployeeRecord]) -> List[OrgNode]:
        """
        Switch to a new dataset:
          1. Validate + categorize the records
          2. Build the forest (mapped records only, unless include_unmapped)
          3. Check forest invariants
          4. Reset expand state to the default depth
          5. Clear focus and filters
        """
        self._records = list(records)
        self._validation = validate_org_data(self._records)
        self._mapping = categorize_mapped_users(self._records)

        if self._options.include_unmapped:
            self._source = list(self._records)
        else:
            self._source = list(self._mapping.mapped_users)

        forest = build_org_chart(self._source)
        validate_forest(forest)

        self._forest = forest
        self._tree_hash = forest_hash(forest)
        self._expand_state = expand_to_depth(
            forest, self._options.initial_expand_depth,
        )
        self._focused_node_id = None
        self._filters = FilterCriteria()
        self._filter_result = None

        logger.info(
            "Loaded %d records: %d mapped, %d unmapped, %d roots in chart",
            len(self._records),
            len(self._mapping.mapped_users),
            len(self._mapping.unmapped_users),
            len(forest),
        )
        for warning in self._validation.warnings:
            logger.info("Data quality: %s", warning)
        return forest

    # -- State access -------------------------------------------------------

    @property
    def options(self) -> OrgChartOptions:
        return self._options

    @property
    def records(self) -> List[EmployeeRecord]:
        return self._records

    @property
    def chart_records(self) -> List[EmployeeRecord]:
        """The records the forest was built from."""
        return self._source

    @property
    def validation(self) -> ValidationResult:
        return self._validation

    @property
    def mapping(self) -> MappingResult:
        return self._mapping

    @property
    def forest(self) -> List[OrgNode]:
        return self._forest

    @property
    def tree_hash(self) -> str:
        return self._tree_hash

    @property
    def expand_state(self) -> ExpandState:
        """Current expand map. Treat as read-only; it is replaced on change."""
        return self._expand_state

    @property
    def focused_node_id(self) -> Optional[str]:
        return self._focused_node_id

    @property
    def filters(self) -> FilterCriteria:
        return self._filters

    # -- Expand / collapse --------------------------------------------------

    def is_node_expanded(self, node_id: str) -> bool:
        return is_expanded(self._expand_state, node_id)

    def toggle_expansion(self, node_id: str) -> ExpandState:
        self._expand_state = toggle_node_expansion(self._expand_state, node_id)
        return self._expand_state

    def expand_all_nodes(self) -> ExpandState:
        self._expand_state = expand_all(self._forest)
        return self._expand_state

    def collapse_all_nodes(self) -> ExpandState:
        self._expand_state = collapse_all(self._forest)
        return self._expand_state

    def expand_to_depth(self, depth: int) -> ExpandState:
        self._expand_state = expand_to_depth(self._forest, depth)
        return self._expand_state

    def reset_to_default_expand(self) -> ExpandState:
        return self.expand_to_depth(self._options.initial_expand_depth)

    def set_expand_state(self, state: Dict[str, bool]) -> ExpandState:
        """Adopt an externally held expand map (copied; values coerced to bool)."""
        self._expand_state = {str(k): bool(v) for k, v in state.items()}
        return self._expand_state

    # -- Focus --------------------------------------------------------------

    def focus(self, node_id: str) -> bool:
        """
        Point focus at *node_id*. Returns whether the node exists.
        An unknown id is kept but the active forest falls back to the full
        forest until it resolves.
        """
        self._focused_node_id = node_id
        self._filter_result = None
        found = find_node(self._forest, node_id) is not None
        if not found:
            logger.debug("Focus set to unknown node %r", node_id)
        return found

    def clear_focus(self) -> None:
        self._focused_node_id = None
        self._filter_result = None

    @property
    def focused_node(self) -> Optional[OrgNode]:
        if self._focused_node_id is None:
            return None
        return find_node(self._forest, self._focused_node_id)

    @property
    def focus_path(self) -> List[OrgNode]:
        """Breadcrumb path from a root to the focused node; [] when unfocused."""
        if self._focused_node_id is None:
            return []
        return get_node_path(self._forest, self._focused_node_id)

    @property
    def active_forest(self) -> List[OrgNode]:
        """[focused node] while focused (looked up fresh), else the full forest."""
        node = self.focused_node
        return [node] if node is not None else self._forest

    # -- Filters ------------------------------------------------------------

    def set_filters(self, criteria: FilterCriteria) -> FilterResult:
        self._filters = criteria
        self._filter_result = None
        return self.filter_result

    def clear_filters(self) -> FilterResult:
        return self.set_filters(FilterCriteria())

    @property
    def filter_result(self) -> FilterResult:
        if self._filter_result is None:
            self._filter_result = filter_org_tree(self.active_forest, self._filters)
        return self._filter_result

    @property
    def rendered_forest(self) -> List[OrgNode]:
        """Active forest with filters applied: what presentation draws."""
        return self.filter_result.filtered_tree

    @property
    def filter_options(self) -> Tuple[List[str], List[str]]:
        return get_filter_options(self._source)

    # -- Derived queries ----------------------------------------------------

    @property
    def visible_nodes(self) -> List[OrgNode]:
        return get_visible_nodes(self.rendered_forest, self._expand_state)

    def get_visible_nodes(
        self, forest: Optional[Sequence[OrgNode]] = None,
    ) -> List[OrgNode]:
        """Visible nodes of *forest* (default: the rendered forest)."""
        if forest is None:
            forest = self.rendered_forest
        return get_visible_nodes(forest, self._expand_state)

    @property
    def max_level(self) -> int:
        """Number of levels in the full forest."""
        return get_max_level(self._forest)

    def find_node(self, node_id: str) -> Optional[OrgNode]:
        return find_node(self._forest, node_id)

    def get_node_path(self, node_id: str) -> List[OrgNode]:
        return get_node_path(self._forest, node_id)

    def get_parent(self, node_id: str) -> Optional[OrgNode]:
        return find_parent(self._forest, node_id)

    def get_node_descendant_count(self, node_id: str) -> int:
        node = self.find_node(node_id)
        return get_descendant_count(node) if node is not None else 0

    def get_node_visible_descendant_count(self, node_id: str) -> int:
        node = self.find_node(node_id)
        if node is None:
            return 0
        return get_visible_descendant_count(node, self._expand_state)

    def has_children(self, node_id: str) -> bool:
        node = self.find_node(node_id)
        return node is not None and len(node.children) > 0

    def get_direct_child_count(self, node_id: str) -> int:
        node = self.find_node(node_id)
        return len(node.children) if node is not None else 0

    # -- Search -------------------------------------------------------------

    def search(self, query: str, limit: int = SEARCH_MAX_RESULTS) -> List[SearchResult]:
        return search_users(self._source, query, limit)

    def select_search_result(self, node_id: str) -> Optional[OrgNode]:
        """Expand the path down to *node_id* and return the node (None if unknown)."""
        node = self.find_node(node_id)
        if node is None:
            return None
        self._expand_state = expand_path(self._expand_state, self._forest, node_id)
        return node

    # -- Reporting ----------------------------------------------------------

    def get_analytics(self) -> OrgAnalytics:
        return compute_analytics(self._forest)

    def get_stats(self) -> Dict[str, Any]:
        """Headline counts for the toolbar."""
        visible = len(self.visible_nodes)
        focused = self.focused_node
        if focused is not None:
            focused_count = get_descendant_count(focused) + 1
        else:
            focused_count = count_nodes(self._forest)
        return {
            "total": len(self._records),
            "mapped": len(self._mapping.mapped_users),
            "unmapped": len(self._mapping.unmapped_users),
            "visible": visible,
            "focused": focused_count,
            "show_performance_warning": visible > VISIBLE_NODE_WARNING_THRESHOLD,
        }
