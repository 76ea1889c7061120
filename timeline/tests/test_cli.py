"""
Tests for the timeline CLI.
"""

import json
import os
import tempfile

import pytest
from typer.testing import CliRunner

from cli.commands._render import format_timestamp
from cli.commands._source import LOAD_FAILED_MESSAGE
from cli.main import app

runner = CliRunner()

# Quiet logs keep stdout parseable even where the runner mixes streams
ENV = {"TIMELINE_LOG_LEVEL": "ERROR", "TIMELINE_METRICS_ENABLED": "false"}

DOCUMENT = {
    "changes": [
        {"name": "Ada", "photo_url": "", "s": "Hello", "start": 0, "timestamp": 1000, "type": "is", "user_id": "u1"},
        {"name": "Ada", "s": " World", "start": 5, "timestamp": 2000, "type": "is", "user_id": "u1"},
        {"name": "Bob", "start": 0, "end": 1, "timestamp": 4000, "type": "ds", "user_id": "u2"},
        {"start": 0, "timestamp": 500, "type": "is"},
        {"type": "is"},
    ],
    "mass_insertion": [
        {"name": "Bob", "text": "!!! appended block", "timestamp": 3000, "user_id": "u2"},
    ],
    "user_contribution": {
        "u1": {"name": "Ada", "photo_url": "", "contributions": {"2024-01-01": 4}},
        "u2": {"name": "Bob", "contributions": {"2024-01-02": 9}},
    },
}


@pytest.fixture
def source():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "data.json")
        with open(path, "w", encoding="utf-8") as f:
            json.dump(DOCUMENT, f)
        yield path


def invoke(*args):
    return runner.invoke(app, list(args), env=ENV)


def test_replay_json(source):
    result = invoke("replay", "--source", source, "--json")

    assert result.exit_code == 0
    output = json.loads(result.stdout)
    assert output["success"] is True
    assert output["operations"] == 4
    assert output["content"] == "ello World!!! appended block"
    assert output["cursor_position"] == 0
    assert output["change_index"] == 3
    assert output["timestamp"] == 4000
    assert output["change"] == "Deletion"
    assert output["author"]["id"] == "u2"
    assert len(output["state_hash"]) == 64


def test_replay_at_index(source):
    result = invoke("replay", "--source", source, "--at", "1", "--json", "--no-content")

    assert result.exit_code == 0
    output = json.loads(result.stdout)
    assert output["change_index"] == 1
    assert output["cursor_position"] == 11
    assert "content" not in output


def test_replay_state_hash_stable(source):
    first = json.loads(invoke("replay", "--source", source, "--json").stdout)
    second = json.loads(invoke("replay", "--source", source, "--json").stdout)

    assert first["state_hash"] == second["state_hash"]


def test_replay_index_out_of_range(source):
    result = invoke("replay", "--source", source, "--at", "99", "--json")

    assert result.exit_code == 2
    output = json.loads(result.stdout)
    assert "index out of range" in output["error"]
    assert output["operations"] == 4


def test_replay_human_output(source):
    result = invoke("replay", "--source", source)

    assert result.exit_code == 0
    assert "Replayed 4 of 4 operations" in result.stdout
    assert "appended block" in result.stdout


def test_replay_empty_log():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "empty.json")
        with open(path, "w", encoding="utf-8") as f:
            f.write("{}")

        result = invoke("replay", "--source", path, "--json")

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"success": True, "operations": 0}


def test_missing_source():
    with tempfile.TemporaryDirectory() as tmpdir:
        result = invoke("replay", "--source", os.path.join(tmpdir, "missing.json"), "--json")

    assert result.exit_code == 2
    assert json.loads(result.stdout)["error"] == "Document log not found"


def test_unreadable_source():
    """Malformed logs get the generic retryable message."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "broken.json")
        with open(path, "w", encoding="utf-8") as f:
            f.write("[1, 2")

        result = invoke("stats", "--source", path, "--json")

    assert result.exit_code == 2
    output = json.loads(result.stdout)
    assert output["error"] == LOAD_FAILED_MESSAGE
    assert "invalid JSON" in output["detail"]


def test_source_from_env(source):
    result = runner.invoke(app, ["replay", "--json"], env={**ENV, "TIMELINE_SOURCE": source})

    assert result.exit_code == 0
    assert json.loads(result.stdout)["operations"] == 4


def test_log_inspect_filters(source):
    result = invoke("log", "inspect", "--source", source, "--kind", "delete", "--json")

    assert result.exit_code == 0
    output = json.loads(result.stdout)
    assert output["count"] == 1
    assert output["operations"][0]["index"] == 3
    assert output["operations"][0]["length"] == 1


def test_log_inspect_copy_paste(source):
    result = invoke("log", "inspect", "--source", source, "--copy-paste", "--json")

    output = json.loads(result.stdout)
    assert output["count"] == 1
    assert output["operations"][0]["is_mass_insertion"] is True
    assert output["operations"][0]["position"] == -1


def test_log_inspect_range(source):
    result = invoke("log", "inspect", "--source", source, "--from", "1", "--to", "2", "--json")

    output = json.loads(result.stdout)
    assert [op["index"] for op in output["operations"]] == [1, 2]


def test_log_inspect_unknown_kind(source):
    result = invoke("log", "inspect", "--source", source, "--kind", "move", "--json")

    assert result.exit_code == 2
    assert "Unknown operation kind" in json.loads(result.stdout)["error"]


def test_log_tail(source):
    result = invoke("log", "tail", "--source", source, "--lines", "2", "--json")

    assert result.exit_code == 0
    output = json.loads(result.stdout)
    assert [op["index"] for op in output["operations"]] == [2, 3]


def test_stats_json(source):
    result = invoke("stats", "--source", source, "--json")

    assert result.exit_code == 0
    output = json.loads(result.stdout)
    assert output["copy_paste"] == {
        "total_changes": 4,
        "copy_paste_changes": 1,
        "copy_paste_percentage": 25.0,
        "largest_copy_paste": 18,
    }
    assert output["summary"]["insertions"] == 3
    assert output["summary"]["deletions"] == 1
    assert output["summary"]["mass_insertions"] == 1
    assert output["summary"]["editing_days"] == 1
    assert output["largest_copy_paste"][0]["text"] == "!!! appended block"
    assert [c["id"] for c in output["contributors"]] == ["u2", "u1"]
    assert [d["date"] for d in output["contributions_per_day"]] == ["2024-01-01", "2024-01-02"]
    assert output["contributions_available"] is True
    assert output["dropped_entries"] == 1


def test_stats_raw_contribution():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "data.json")
        with open(path, "w", encoding="utf-8") as f:
            json.dump({**DOCUMENT, "user_contribution": "opaque"}, f)

        result = invoke("stats", "--source", path)

    assert result.exit_code == 0
    assert "contributors unavailable" in result.stdout


def test_version():
    result = invoke("version")

    assert result.exit_code == 0
    assert "Timeline CLI" in result.stdout


def test_unreachable_url_source():
    """Network failures get the generic retryable message, not a traceback."""
    result = runner.invoke(
        app,
        ["replay", "--source", "http://127.0.0.1:9/data.json", "--json"],
        env={**ENV, "no_proxy": "*", "NO_PROXY": "*"},
    )

    assert result.exit_code == 2
    assert json.loads(result.stdout)["error"] == LOAD_FAILED_MESSAGE


def test_out_of_range_timestamps():
    """Every command renders timestamps the calendar cannot represent."""
    document = {
        "changes": [
            {"name": "Ada", "s": "Hello", "start": 0, "timestamp": 10**17, "type": "is", "user_id": "u1"},
            {"name": "Ada", "s": "x" * 12, "start": 5, "timestamp": 10**17 + 1, "type": "is", "user_id": "u1"},
        ],
    }
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "data.json")
        with open(path, "w", encoding="utf-8") as f:
            json.dump(document, f)

        replayed = invoke("replay", "--source", path)
        tail = invoke("log", "tail", "--source", path)
        stats = invoke("stats", "--source", path)
        stats_json = invoke("stats", "--source", path, "--json")

    assert replayed.exit_code == 0
    assert "100000000000000001 ms" in replayed.stdout
    assert tail.exit_code == 0
    assert stats.exit_code == 0
    assert json.loads(stats_json.stdout)["summary"]["editing_days"] == 2


def test_format_timestamp():
    assert format_timestamp(0) == "1970-01-01 00:00:00 UTC"
    assert format_timestamp(10**17) == "100000000000000000 ms"
