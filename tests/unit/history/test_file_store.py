"""Tests for the local JSON file history backend."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from shipctl.history.file import (
    FileHistoryStore,
    get_history_path,
    load_history,
    save_history,
)
from shipctl.lib.errors import StoreCorruptError, StoreUnavailableError
from shipctl.models.history import DeploymentState, HistoryLog

pytestmark = pytest.mark.unit


class TestHistoryPath:
    """Tests for get_history_path."""

    def test_flattens_key(self, tmp_path: Path) -> None:
        path = get_history_path(tmp_path, "/shipctl/prod/api")
        assert path == tmp_path / "shipctl__prod__api.json"

    def test_distinct_services_get_distinct_files(self, tmp_path: Path) -> None:
        assert get_history_path(tmp_path, "/shipctl/prod/api") != get_history_path(
            tmp_path, "/shipctl/prod/worker"
        )


class TestLoadSaveHistory:
    """Tests for load_history and save_history."""

    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        history = load_history(tmp_path / "missing.json")

        assert history.states == []
        assert history.version == "1.0"

    def test_blank_file_is_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "blank.json"
        path.write_text("\n")

        assert load_history(path).states == []

    def test_save_then_load(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "history.json"
        history = HistoryLog(
            states=[
                DeploymentState(revision=5, message="deploy"),
                DeploymentState(revision=7, message="deploy"),
            ]
        )

        save_history(path, history)

        assert load_history(path) == history
        assert json.loads(path.read_text())["states"][1]["revision"] == 7

    def test_save_leaves_no_temp_files(self, tmp_path: Path) -> None:
        path = tmp_path / "history.json"

        save_history(path, HistoryLog())

        assert [p.name for p in tmp_path.iterdir()] == ["history.json"]

    def test_invalid_json_is_corrupt(self, tmp_path: Path) -> None:
        path = tmp_path / "history.json"
        path.write_text("{broken")

        with pytest.raises(StoreCorruptError) as exc_info:
            load_history(path)

        assert str(path) in exc_info.value.message

    def test_undecodable_bytes_are_corrupt(self, tmp_path: Path) -> None:
        path = tmp_path / "history.json"
        path.write_bytes(b"\xff\xfe garbage")

        with pytest.raises(StoreCorruptError) as exc_info:
            load_history(path)

        assert str(path) in exc_info.value.message

    def test_unknown_fields_are_corrupt(self, tmp_path: Path) -> None:
        path = tmp_path / "history.json"
        path.write_text(json.dumps({"states": [], "extra": True}))

        with pytest.raises(StoreCorruptError):
            load_history(path)

    def test_unreadable_file_is_unavailable(self, tmp_path: Path) -> None:
        path = tmp_path / "history.json"
        path.write_text("{}")

        with patch.object(Path, "read_text", side_effect=PermissionError("denied")):
            with pytest.raises(StoreUnavailableError):
                load_history(path)

    def test_write_failure_is_unavailable(self, tmp_path: Path) -> None:
        path = tmp_path / "history.json"

        with patch(
            "shipctl.history.file.tempfile.mkstemp", side_effect=OSError("disk full")
        ):
            with pytest.raises(StoreUnavailableError) as exc_info:
                save_history(path, HistoryLog())

        assert "disk full" in exc_info.value.message
        assert not path.exists()


class TestFileHistoryStore:
    """Tests for FileHistoryStore."""

    def test_pull_without_file_is_empty(self, history_dir: Path) -> None:
        store = FileHistoryStore("prod", "api", state_dir=history_dir)

        assert store.pull() == []
        assert store.path == history_dir / "shipctl__prod__api.json"

    def test_push_appends(self, history_dir: Path) -> None:
        store = FileHistoryStore("prod", "api", state_dir=history_dir)

        store.push_state(5, "deploy")
        store.push_state(7, "deploy")

        states = FileHistoryStore("prod", "api", state_dir=history_dir).pull()
        assert [(s.revision, s.message) for s in states] == [
            (5, "deploy"),
            (7, "deploy"),
        ]
        assert all(s.created_at is not None for s in states)

    def test_push_keeps_existing_entries(self, history_dir: Path) -> None:
        store = FileHistoryStore("prod", "api", state_dir=history_dir)
        store.push_state(5, "deploy")
        first = store.pull()

        store.push_state(7, "deploy")

        assert store.pull()[:1] == first

    def test_services_are_isolated(self, history_dir: Path) -> None:
        FileHistoryStore("prod", "api", state_dir=history_dir).push_state(3, "x")

        assert FileHistoryStore("prod", "worker", state_dir=history_dir).pull() == []
        assert FileHistoryStore("staging", "api", state_dir=history_dir).pull() == []

    def test_accepts_string_state_dir(self, history_dir: Path) -> None:
        store = FileHistoryStore("prod", "api", state_dir=str(history_dir))
        store.push_state(2, "deploy")

        assert store.path.exists()
