import json

from ethnica.core.config import Settings
from ethnica.jobs import run_search
from ethnica.search.orchestrator import SearchOrchestrator
from ethnica.search.providers import MockBusinessProvider


def _orchestrator():
    return SearchOrchestrator([MockBusinessProvider(count=5)])


def test_run_search_job_returns_serialized_outcome():
    result = run_search.run_search_job(lng=-74.006, lat=40.7128, query=None, radius=5000, limit=3, orchestrator=_orchestrator())

    assert result["source"] == "mock"
    assert len(result["businesses"]) == 3


def test_run_details_job():
    assert run_search.run_details_job("mock2", orchestrator=_orchestrator())["name"] == "Community Bookstore"
    assert run_search.run_details_job("missing", orchestrator=_orchestrator()) is None


def test_main_prints_json(monkeypatch, capsys):
    monkeypatch.setattr(run_search, "get_settings", lambda: Settings())
    monkeypatch.setattr(run_search, "build_orchestrator", _orchestrator)

    exit_code = run_search.main(["--query", "bakery", "--limit", "4"])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert all(b["category"] == "Bakery" for b in payload["businesses"])


def test_main_rejects_invalid_center(monkeypatch):
    monkeypatch.setattr(run_search, "get_settings", lambda: Settings())
    monkeypatch.setattr(run_search, "build_orchestrator", _orchestrator)

    assert run_search.main(["--lng", "500", "--lat", "0"]) == 2
    assert run_search.main(["--details", "missing"]) == 1
