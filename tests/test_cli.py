"""
Tests for the plan/apply/show/import/upgrade commands.

The run_* functions are exercised directly with capsys; the click group is
driven through CliRunner for option and exit-code handling.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from randkeep.cli import cli
from randkeep.commands.kinds_cmd import run_kind_info, run_kinds_list
from randkeep.commands.resources_cmd import run_apply, run_import, run_plan, run_show, run_upgrade
from randkeep.resources.uuid import UUIDResource
from randkeep.state.store import PersistedState, StateStore


def _write(path: Path, content: str) -> None:
    path.write_text(content, encoding="utf-8")


CONFIG = """
[resources.api_token]
kind = "string"
length = 20
special = false

[resources.db_password]
kind = "password"
length = 24

[resources.port]
kind = "integer"
min = 8000
max = 8999
"""


@pytest.fixture
def project(tmp_path: Path) -> tuple[Path, Path]:
    config = tmp_path / "randkeep.toml"
    _write(config, CONFIG)
    return config, tmp_path / "randkeep.state.json"


# =============================================================================
# kinds
# =============================================================================


def test_kinds_list_json(capsys) -> None:
    assert run_kinds_list(json_output=True) == 0
    data = json.loads(capsys.readouterr().out)
    kinds = {entry["kind"]: entry["schema_version"] for entry in data}
    assert kinds["string"] == 2
    assert kinds["password"] == 3
    assert len(kinds) == 9


def test_kind_info(capsys) -> None:
    assert run_kind_info("password") == 0
    out = capsys.readouterr().out
    assert "password (schema version 3)" in out


def test_kind_info_unknown(capsys) -> None:
    assert run_kind_info("widget") == 1
    assert "Unknown kind: widget" in capsys.readouterr().err


# =============================================================================
# plan / apply
# =============================================================================


def test_plan_on_empty_state(project, capsys) -> None:
    config, state = project
    assert run_plan(config, state, output_json=True) == 0
    data = json.loads(capsys.readouterr().out)
    assert [(entry["address"], entry["action"]) for entry in data] == [
        ("api_token", "create"),
        ("db_password", "create"),
        ("port", "create"),
    ]
    assert not state.exists()


def test_plan_with_errors_exits_1(tmp_path: Path, capsys) -> None:
    config = tmp_path / "randkeep.toml"
    _write(config, '[resources.bad]\nkind = "string"\nlength = 2\nmin_upper = 3\n')
    assert run_plan(config, tmp_path / "state.json") == 1
    assert "Invalid generation settings" in capsys.readouterr().out


def test_apply_writes_state_and_second_apply_keeps_values(project, capsys) -> None:
    config, state = project
    assert run_apply(config, state) == 0
    first = StateStore(state).load()
    assert sorted(first) == ["api_token", "db_password", "port"]
    assert first["db_password"].schema_version == 3

    assert run_apply(config, state) == 0
    second = StateStore(state).load()
    assert second == first

    capsys.readouterr()
    assert run_plan(config, state, output_json=True) == 0
    data = json.loads(capsys.readouterr().out)
    assert {entry["action"] for entry in data} == {"noop"}


def test_apply_with_errors_writes_nothing(tmp_path: Path, capsys) -> None:
    config = tmp_path / "randkeep.toml"
    state = tmp_path / "state.json"
    _write(config, '[resources.bad]\nkind = "string"\nlength = 8\nnumeric = true\nnumber = false\n')
    assert run_apply(config, state) == 1
    assert "state was not changed" in capsys.readouterr().err
    assert not state.exists()


def test_apply_with_unresolved_values_exits_1(tmp_path: Path, monkeypatch, capsys) -> None:
    config = tmp_path / "randkeep.toml"
    state = tmp_path / "state.json"
    _write(config, '[resources.run_id]\nkind = "uuid"\n')

    def create_nothing(self, planned, source=None):
        return dict(planned)

    monkeypatch.setattr(UUIDResource, "create", create_nothing)
    assert run_apply(config, state) == 1
    assert "left attributes unknown" in capsys.readouterr().err
    assert not state.exists()


def test_removed_resource_is_deleted(project, capsys) -> None:
    config, state = project
    run_apply(config, state)
    _write(config, CONFIG.split("[resources.db_password]")[0])
    assert run_apply(config, state) == 0
    assert sorted(StateStore(state).load()) == ["api_token"]
    assert "port: delete" in capsys.readouterr().out


# =============================================================================
# show / import / upgrade
# =============================================================================


def test_show_json_hides_sensitive_values(project, capsys) -> None:
    config, state = project
    run_apply(config, state)
    stored = StateStore(state).load()
    capsys.readouterr()

    assert run_show(state, output_json=True) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["db_password"]["attributes"]["result"] == "<sensitive>"
    assert data["db_password"]["attributes"]["bcrypt_hash"] == "<sensitive>"
    assert data["api_token"]["attributes"]["result"] == stored["api_token"].attributes["result"]


def test_show_unknown_address(tmp_path: Path, capsys) -> None:
    assert run_show(tmp_path / "state.json", "missing") == 1
    assert "Resource not found: missing" in capsys.readouterr().err


def test_import_then_refuse_duplicate(tmp_path: Path, capsys) -> None:
    state = tmp_path / "state.json"
    assert run_import(state, "integer", "port", "8080,1024,65535") == 0
    assert StateStore(state).get("port").attributes["result"] == 8080

    assert run_import(state, "integer", "port", "9090,1024,65535") == 1
    assert "already managed" in capsys.readouterr().err


def test_import_bad_id(tmp_path: Path, capsys) -> None:
    assert run_import(tmp_path / "state.json", "uuid", "u", "nope") == 1
    assert "parsing of the UUID" in capsys.readouterr().err


def test_upgrade_rewrites_old_records(tmp_path: Path, capsys) -> None:
    state = tmp_path / "state.json"
    StateStore(state).save(
        {
            "token": PersistedState(
                kind="string",
                schema_version=0,
                attributes={"result": "abcd", "id": "abcd", "length": 4, "min_upper": ""},
            )
        }
    )
    assert run_upgrade(state) == 0
    record = StateStore(state).get("token")
    assert record.schema_version == 2
    assert record.attributes["min_upper"] == 0
    assert record.attributes["numeric"] is True
    assert "schema version 0 -> 2" in capsys.readouterr().out


# =============================================================================
# click group
# =============================================================================


def test_cli_plan_and_apply(project) -> None:
    config, state = project
    runner = CliRunner()

    result = runner.invoke(cli, ["-c", str(config), "-s", str(state), "apply"])
    assert result.exit_code == 0, result.output
    assert state.exists()

    result = runner.invoke(cli, ["-c", str(config), "-s", str(state), "plan", "--json"])
    assert result.exit_code == 0
    assert {entry["action"] for entry in json.loads(result.output)} == {"noop"}


def test_cli_missing_config(tmp_path: Path) -> None:
    result = CliRunner().invoke(cli, ["-c", str(tmp_path / "nope.toml"), "plan"])
    assert result.exit_code == 2
    assert "does not exist" in result.output


def test_cli_kinds() -> None:
    result = CliRunner().invoke(cli, ["kinds", "--json"])
    assert result.exit_code == 0
    assert "shuffle" in {entry["kind"] for entry in json.loads(result.output)}
