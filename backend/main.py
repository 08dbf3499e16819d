# file: backend/main.py
"""
FastAPI Backend — Org Chart API v1.

Stateless: every request carries the employee records and the client's
view state, rebuilds the forest, and returns the projection.
No in-memory state between requests.

Endpoints:
  POST /validate    — data-quality warnings + counts
  POST /categorize  — mapped / unmapped / true roots / unreachable
  POST /tree        — forest + visible nodes for a view state
  POST /navigate    — apply one navigation key, return the new view
  POST /search      — type-ahead employee search
  POST /analytics   — span of control + level distribution
"""
from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional, Sequence

from dotenv import load_dotenv

env_path = os.path.join(os.path.dirname(__file__), ".env")
if os.path.exists(env_path):
    load_dotenv(env_path)

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from org_chart.constants import DEFAULT_INITIAL_EXPAND_DEPTH, SEARCH_MAX_RESULTS
from org_chart.diagnostics import categorize_mapped_users, validate_org_data
from org_chart.domain_types import EmployeeRecord, FilterCriteria, OrgChartOptions
from org_chart.engine import OrgChartEngine
from org_chart.invariants import InvariantViolationError
from org_chart.navigation import KeyboardNavigator

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

FRONTEND_URL = os.environ.get("FRONTEND_URL", "http://localhost:3000")


def _env_depth(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        value = -1
    if value < 0:
        logger.warning("Ignoring %s=%r: expected an int >= 0, using %d", name, raw, default)
        return default
    return value


INITIAL_EXPAND_DEPTH = _env_depth("ORGCHART_INITIAL_EXPAND_DEPTH", DEFAULT_INITIAL_EXPAND_DEPTH)
INCLUDE_UNMAPPED = os.environ.get("ORGCHART_INCLUDE_UNMAPPED", "").lower() in (
    "1", "true", "yes",
)

# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

app = FastAPI(
    title="OrgChart API",
    version="1.0.0",
    description="Org chart hierarchy engine — stateless view API",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        FRONTEND_URL,
        "http://localhost:3000",
        "http://localhost:3001",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Request / Response models
# ---------------------------------------------------------------------------


class FilterModel(BaseModel):
    org_units: List[str] = []
    offices: List[str] = []
    max_level: Optional[int] = None


class ViewModel(BaseModel):
    expand_state: Optional[Dict[str, bool]] = None
    tree_hash: str = ""
    focused_node_id: Optional[str] = None
    filters: Optional[FilterModel] = None
    initial_expand_depth: Optional[int] = None
    include_unmapped: Optional[bool] = None


class RecordsRequest(BaseModel):
    records: List[Dict[str, Any]]


class TreeRequest(RecordsRequest):
    view: ViewModel = Field(default_factory=ViewModel)


class NavigateRequest(TreeRequest):
    key: str
    selected_node_id: Optional[str] = None


class SearchRequest(TreeRequest):
    query: str
    limit: int = SEARCH_MAX_RESULTS


# ---------------------------------------------------------------------------
# Core helpers
# ---------------------------------------------------------------------------


def _parse_records(raw: List[Dict[str, Any]]) -> List[EmployeeRecord]:
    return [EmployeeRecord.from_dict(row) for row in raw]


def _names(records: Sequence[EmployeeRecord]) -> List[str]:
    return [r.full_name for r in records]


def _build_engine(records: List[EmployeeRecord], view: ViewModel) -> OrgChartEngine:
    """
    Rebuild the engine and re-apply the client's view state.

    A client expand map is only honoured when its tree_hash matches the
    rebuilt forest (or no hash was sent); otherwise the forest changed
    and the default depth stands.
    """
    options = OrgChartOptions(
        initial_expand_depth=(
            view.initial_expand_depth
            if view.initial_expand_depth is not None
            else INITIAL_EXPAND_DEPTH
        ),
        include_unmapped=(
            view.include_unmapped
            if view.include_unmapped is not None
            else INCLUDE_UNMAPPED
        ),
    )
    engine = OrgChartEngine(records, options)

    if view.expand_state is not None:
        if not view.tree_hash or view.tree_hash == engine.tree_hash:
            engine.set_expand_state(view.expand_state)
        else:
            logger.info("Forest changed since client view; expand state reset")

    if view.focused_node_id:
        engine.focus(view.focused_node_id)

    if view.filters is not None:
        engine.set_filters(FilterCriteria.build(
            org_units=view.filters.org_units,
            offices=view.filters.offices,
            max_level=view.filters.max_level,
        ))

    return engine


def _engine_for(req: TreeRequest) -> OrgChartEngine:
    """Build the engine for a request, mapping contract violations to HTTP errors."""
    try:
        return _build_engine(_parse_records(req.records), req.view)
    except InvariantViolationError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


def _project(engine: OrgChartEngine) -> dict:
    """Serialise everything presentation needs for one render."""
    result = engine.filter_result
    org_units, offices = engine.filter_options
    return {
        "tree_hash": engine.tree_hash,
        "forest": [node.to_dict() for node in result.filtered_tree],
        "visible_node_ids": [node.id for node in engine.visible_nodes],
        "expand_state": engine.expand_state,
        "focused_node_id": engine.focused_node_id,
        "focus_path": [node.id for node in engine.focus_path],
        "filters": engine.filters.to_dict(),
        "filter_options": {
            "org_units": org_units,
            "offices": offices,
            "max_level": engine.max_level,
        },
        "match_count": result.match_count,
        "total_count": result.total_count,
        "stats": engine.get_stats(),
        "warnings": engine.validation.warnings,
    }


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.post("/validate")
def validate(req: RecordsRequest):
    """Data-quality report. Never fails on bad employee data."""
    report = validate_org_data(_parse_records(req.records))
    return {"warnings": report.warnings, "stats": report.stats.to_dict()}


@app.post("/categorize")
def categorize(req: RecordsRequest):
    mapping = categorize_mapped_users(_parse_records(req.records))
    return {
        "mapped": _names(mapping.mapped_users),
        "unmapped": _names(mapping.unmapped_users),
        "true_roots": _names(mapping.true_roots),
        "unreachable": _names(mapping.unreachable_users),
    }


@app.post("/tree")
def tree(req: TreeRequest):
    """
    Rebuild forest → apply view state → return projection.
    """
    engine = _engine_for(req)
    return _project(engine)


@app.post("/navigate")
def navigate(req: NavigateRequest):
    """
    Rebuild forest → apply view state → apply one key → return projection.

    The selection cursor lives on the client; it is sent in and returned.
    """
    engine = _engine_for(req)

    navigator = KeyboardNavigator(engine)
    if req.selected_node_id:
        navigator.select(req.selected_node_id)
    handled = navigator.handle_key(req.key)

    payload = _project(engine)
    payload["selected_node_id"] = navigator.selected_node_id
    payload["handled"] = handled
    return payload


@app.post("/search")
def search(req: SearchRequest):
    if req.limit < 1:
        raise HTTPException(status_code=400, detail="limit must be >= 1")
    results = _engine_for(req).search(req.query, req.limit)
    return {
        "results": [
            {
                "id": r.user.full_name,
                "match_type": r.match_type,
                "match_text": r.match_text,
                "record": r.user.to_dict(),
            }
            for r in results
        ]
    }


@app.post("/analytics")
def analytics(req: TreeRequest):
    """Analytics of the forest the view draws (include_unmapped honoured)."""
    return _engine_for(req).get_analytics().to_dict()


@app.get("/health")
def health():
    return {"status": "ok", "version": "1.0.0"}
