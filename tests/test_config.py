from __future__ import annotations

from pathlib import Path

import pytest

from randkeep.config import load_config, parse_config


def _write(path: Path, content: str) -> None:
    path.write_text(content, encoding="utf-8")


def test_load_config(tmp_path: Path) -> None:
    path = tmp_path / "randkeep.toml"
    _write(
        path,
        """
[resources.db_password]
kind = "Password"
length = 24
override_special = "!#"

[resources.db_password.keepers]
rotation = 3
enabled = true

[resources.port]
kind = "integer"
min = 1024
max = 65535
""",
    )
    decls = load_config(path)
    assert sorted(decls) == ["db_password", "port"]

    password = decls["db_password"]
    assert password.kind == "password"
    assert password.attributes == {
        "length": 24,
        "override_special": "!#",
        "keepers": {"rotation": "3", "enabled": "True"},
    }
    assert decls["port"].attributes == {"min": 1024, "max": 65535}


def test_empty_config_declares_nothing() -> None:
    assert parse_config({}) == {}


@pytest.mark.parametrize(
    ("data", "message"),
    [
        ({"resources": []}, "resources must be a table"),
        ({"resources": {"a": 1}}, "resources.a must be a table"),
        ({"resources": {"a": {"length": 3}}}, "kind is required"),
        ({"resources": {"a": {"kind": "widget"}}}, "unknown kind 'widget'"),
    ],
)
def test_invalid_config(data: dict, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        parse_config(data)
