"""
Org Chart API — Endpoint Tests

Drives the FastAPI app in-process through TestClient:
  - /health, /validate, /categorize
  - /tree with default view, client expand state, stale tree hash, filters
  - /navigate key handling
  - /search, /analytics (honouring include_unmapped)
  - Env config fallbacks
  - 400 on invalid view parameters

Run:  python -m backend.test_api
"""

from __future__ import annotations

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient

from backend import main as api_main
from backend.main import app
from org_chart.sample_data import sample_records

client = TestClient(app)


def _records() -> list:
    return [r.to_dict() for r in sample_records()]


def _tree(view: dict | None = None) -> dict:
    body = {"records": _records()}
    if view is not None:
        body["view"] = view
    resp = client.post("/tree", json=body)
    assert resp.status_code == 200, resp.text
    return resp.json()


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------

def test_health():
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_validate():
    resp = client.post("/validate", json={"records": _records()})
    assert resp.status_code == 200
    data = resp.json()
    assert data["stats"]["total_users"] == 7
    assert data["stats"]["orphaned_nodes"] == 1
    assert len(data["warnings"]) == 1


def test_categorize_accepts_host_column_keys():
    records = [
        {"fullName": "Ada", "manager": ""},
        {"fullName": "Ben", "manager": "Ada", "jobTitle": "VP"},
        {"fullName": "Gus", "manager": "Nobody"},
        {"fullName": "X", "manager": "Y"},
        {"fullName": "Y", "manager": "X"},
    ]
    resp = client.post("/categorize", json={"records": records})
    assert resp.status_code == 200
    assert resp.json() == {
        "mapped": ["Ada", "Ben"],
        "unmapped": ["Gus"],
        "true_roots": ["Ada"],
        "unreachable": ["X", "Y"],
    }


# ---------------------------------------------------------------------------
# Tree
# ---------------------------------------------------------------------------

def test_tree_default_view():
    data = _tree()
    assert data["visible_node_ids"] == ["Ada", "Ben", "Cleo"]
    assert [root["id"] for root in data["forest"]] == ["Ada"]
    assert data["match_count"] == data["total_count"] == 6
    assert data["stats"]["unmapped"] == 1
    assert data["filter_options"]["max_level"] == 3
    assert data["tree_hash"]


def test_tree_honours_matching_expand_state():
    first = _tree()
    state = dict(first["expand_state"], Ben=True)
    data = _tree({"expand_state": state, "tree_hash": first["tree_hash"]})
    assert data["visible_node_ids"] == ["Ada", "Ben", "Dev", "Eli", "Cleo"]


def test_tree_resets_stale_expand_state():
    data = _tree({"expand_state": {"Ben": True}, "tree_hash": "stale"})
    assert data["visible_node_ids"] == ["Ada", "Ben", "Cleo"]


def test_tree_focus_and_filters():
    data = _tree({
        "expand_state": {},
        "focused_node_id": "Ben",
        "filters": {"offices": ["London"]},
    })
    assert data["focus_path"] == ["Ada", "Ben"]
    assert data["visible_node_ids"] == ["Ben", "Eli"]
    assert (data["match_count"], data["total_count"]) == (2, 3)
    assert data["filters"]["offices"] == ["London"]


def test_tree_rejects_negative_max_level():
    resp = client.post("/tree", json={
        "records": _records(),
        "view": {"filters": {"max_level": -1}},
    })
    assert resp.status_code == 400


def test_tree_rejects_negative_expand_depth():
    resp = client.post("/tree", json={
        "records": _records(),
        "view": {"initial_expand_depth": -2},
    })
    assert resp.status_code == 400


# ---------------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------------

def test_navigate_first_arrow_selects_root():
    resp = client.post("/navigate", json={"records": _records(), "key": "ArrowDown"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["handled"] is True
    assert data["selected_node_id"] == "Ada"


def test_navigate_arrow_right_expands():
    resp = client.post("/navigate", json={
        "records": _records(),
        "key": "ArrowRight",
        "selected_node_id": "Ben",
    })
    data = resp.json()
    assert data["selected_node_id"] == "Dev"
    assert data["expand_state"]["Ben"] is True
    assert "Dev" in data["visible_node_ids"]


def test_navigate_unknown_key():
    resp = client.post("/navigate", json={
        "records": _records(),
        "key": "q",
        "selected_node_id": "Ada",
    })
    assert resp.json()["handled"] is False


# ---------------------------------------------------------------------------
# Search / analytics
# ---------------------------------------------------------------------------

def test_search():
    resp = client.post("/search", json={"records": _records(), "query": "engineer"})
    assert resp.status_code == 200
    results = resp.json()["results"]
    assert [r["id"] for r in results] == ["Ben", "Dev", "Eli"]
    assert results[0]["match_type"] == "title"


def test_search_rejects_bad_limit():
    resp = client.post("/search", json={"records": _records(), "query": "ab", "limit": 0})
    assert resp.status_code == 400


def test_analytics():
    resp = client.post("/analytics", json={"records": _records()})
    assert resp.status_code == 200
    data = resp.json()
    assert data["max_depth"] == 2
    assert data["managers_count"] == 3
    assert data["level_distribution"][0] == {"level": 0, "count": 1}


def test_search_follows_include_unmapped():
    resp = client.post("/search", json={
        "records": _records(),
        "query": "engineer",
        "view": {"include_unmapped": True},
    })
    assert resp.status_code == 200
    results = resp.json()["results"]
    assert [r["id"] for r in results] == ["Ben", "Dev", "Eli", "Gus"]
    assert results[-1]["match_type"] == "org"


def test_analytics_follows_include_unmapped():
    resp = client.post("/analytics", json={
        "records": _records(),
        "view": {"include_unmapped": True},
    })
    assert resp.status_code == 200
    data = resp.json()
    assert data["level_distribution"][0] == {"level": 0, "count": 2}
    assert data["individual_contributors"] == 4


def test_analytics_rejects_negative_expand_depth():
    resp = client.post("/analytics", json={
        "records": _records(),
        "view": {"initial_expand_depth": -1},
    })
    assert resp.status_code == 400


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

def test_env_depth_falls_back_on_bad_values():
    name = "ORGCHART_TEST_DEPTH"
    try:
        for raw, expected in (("", 1), ("3", 3), ("abc", 1), ("-2", 1), (" 0 ", 0)):
            os.environ[name] = raw
            assert api_main._env_depth(name, 1) == expected, raw
    finally:
        os.environ.pop(name, None)


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
