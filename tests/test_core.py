"""Tests for the collect-then-write refresh run"""

from unittest.mock import patch
import duckdb
import pytest
import requests
from datadesk_index.core import RefreshRun, RunState, refresh
from datadesk_index.errors import AuthenticationError, StorageWriteError, UpstreamUnavailable
from datadesk_index.github import ProjectCollector
from datadesk_index.store import ProjectStore


def table_names(path):
    with duckdb.connect(str(path), read_only=True) as conn:
        return [r[0] for r in conn.execute("SELECT name FROM projects ORDER BY name").fetchall()]


class TestRefresh:
    def test_scenario(self, tmp_path, scenario_repos):
        db = tmp_path / "data" / "data.duckdb"
        with patch.object(
            ProjectCollector, "paginate", return_value=iter(scenario_repos)
        ):
            records = refresh("data-desk-eco", db, token="test")
        assert [r.name for r in records] == ["proxy-tool"]
        assert records[0].url == "https://research.datadesk.eco/proxy-tool/"
        assert table_names(db) == ["proxy-tool"]

    def test_idempotent(self, tmp_path, repo):
        db = tmp_path / "data.duckdb"
        raw = [repo("b"), repo("a"), repo("c", private=True)]
        with patch.object(ProjectCollector, "paginate", side_effect=lambda *_a, **_k: iter(raw)):
            refresh("data-desk-eco", db, token="test")
            with ProjectStore(db) as store:
                first = store.fetch_projects()
            refresh("data-desk-eco", db, token="test")
            with ProjectStore(db) as store:
                second = store.fetch_projects()
        assert first == second
        assert [p.name for p in second] == ["a", "b"]

    def test_nothing_publishable(self, tmp_path, repo):
        db = tmp_path / "data.duckdb"
        with patch.object(
            ProjectCollector, "paginate", return_value=iter([repo("x", has_pages=False)])
        ):
            assert refresh("data-desk-eco", db, token="test") == []
        assert table_names(db) == []

    def test_custom_site_and_exclusion(self, tmp_path, repo):
        db = tmp_path / "data.duckdb"
        raw = [repo("data-desk-eco.github.io"), repo("home")]
        with patch.object(ProjectCollector, "paginate", return_value=iter(raw)):
            records = refresh(
                "data-desk-eco",
                db,
                token="test",
                site_url="https://example.org",
                excluded_repo="home",
            )
        assert [(r.name, r.url) for r in records] == [
            ("data-desk-eco.github.io", "https://example.org/data-desk-eco.github.io/")
        ]


class TestRefreshRun:
    def test_states(self, tmp_path, scenario_repos):
        run = RefreshRun(organization="data-desk-eco", database=tmp_path / "db.duckdb", token="test")
        assert run.state is RunState.NOT_RUN
        with patch.object(
            ProjectCollector, "paginate", return_value=iter(scenario_repos)
        ):
            run.run()
        assert run.state is RunState.WRITTEN
        assert [r.name for r in run.records] == ["proxy-tool"]

    def test_cannot_rerun(self, tmp_path):
        run = RefreshRun(organization="data-desk-eco", database=tmp_path / "db.duckdb", token="test")
        with patch.object(ProjectCollector, "paginate", return_value=iter([])):
            run.run()
        with pytest.raises(RuntimeError):
            run.run()

    def test_collection_failure_keeps_old_table(self, tmp_path, repo, http_error):
        db = tmp_path / "data.duckdb"
        with patch.object(ProjectCollector, "paginate", return_value=iter([repo("old")])):
            refresh("data-desk-eco", db, token="test")
        run = RefreshRun(organization="data-desk-eco", database=db, token="test")
        with patch.object(ProjectCollector, "paginate", side_effect=http_error(503)):
            with pytest.raises(UpstreamUnavailable):
                run.run()
        assert run.state is RunState.FAILED
        assert table_names(db) == ["old"]

    def test_authentication_failure(self, tmp_path, http_error):
        db = tmp_path / "data.duckdb"
        run = RefreshRun(organization="data-desk-eco", database=db, token="bad")
        with patch.object(ProjectCollector, "paginate", side_effect=http_error(401)):
            with pytest.raises(AuthenticationError):
                run.run()
        assert run.state is RunState.FAILED
        assert not db.exists()

    def test_network_failure(self, tmp_path):
        run = RefreshRun(organization="data-desk-eco", database=tmp_path / "db.duckdb", token="test")
        with patch.object(
            ProjectCollector, "paginate", side_effect=requests.Timeout("read timed out")
        ):
            with pytest.raises(UpstreamUnavailable):
                run.run()
        assert run.state is RunState.FAILED

    def test_write_failure(self, tmp_path, repo):
        db = tmp_path / "data.duckdb"
        with patch.object(ProjectCollector, "paginate", return_value=iter([repo("old")])):
            refresh("data-desk-eco", db, token="test")
        run = RefreshRun(organization="data-desk-eco", database=db, token="test")
        with patch.object(
            ProjectCollector, "paginate", return_value=iter([repo("new")])
        ), patch.object(
            ProjectStore, "_load_rows", side_effect=duckdb.IOException("disk full")
        ):
            with pytest.raises(StorageWriteError):
                run.run()
        assert run.state is RunState.FAILED
        assert [r.name for r in run.records] == ["new"]
        assert table_names(db) == ["old"]
