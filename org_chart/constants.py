"""
Org Chart — Default Values

All magic numbers live here as module-level defaults.
Per-engine values are injected via OrgChartOptions.
"""

# --- Expand state ---
# level < depth starts expanded: 1 = roots expanded, direct reports visible.
DEFAULT_INITIAL_EXPAND_DEPTH: int = 1

# --- Search ---
SEARCH_MIN_QUERY_LENGTH: int = 2
SEARCH_MAX_RESULTS: int = 10

# --- Presentation hints ---
VISIBLE_NODE_WARNING_THRESHOLD: int = 200
