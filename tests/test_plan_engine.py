from __future__ import annotations

import pytest

from randkeep import lifecycle
from randkeep.errors import InconsistentConfigurationError
from randkeep.plan import Attribute, ResourceSchema, plan_resource
from randkeep.plan.engine import check_conformance
from randkeep.plan.rules import DefaultValue, RequiresReplace, UseStateForUnknown
from randkeep.values import UNKNOWN, is_unknown


def _schema() -> ResourceSchema:
    return ResourceSchema(
        kind="sample",
        version=0,
        attributes=(
            Attribute("size", "int", required=True, rules=(RequiresReplace(),)),
            Attribute("label", "string", optional=True),
            Attribute("mode", "string", optional=True, computed=True, rules=(DefaultValue("fast"), RequiresReplace())),
            Attribute("result", "string", computed=True, sensitive=True, rules=(UseStateForUnknown(),)),
        ),
    )


# =============================================================================
# Conformance
# =============================================================================


def test_conformance_reports_every_problem() -> None:
    effective, diags = check_conformance(_schema(), {"label": 3, "result": "x", "colour": "red"})
    summaries = {(d.path, d.summary) for d in diags}
    assert ("colour", "Unsupported attribute") in summaries
    assert ("result", "Invalid configuration") in summaries
    assert ("size", "Missing required attribute") in summaries
    assert ("label", "Incorrect attribute value type") in summaries
    assert effective == {}


def test_bool_is_not_an_int() -> None:
    _, diags = check_conformance(_schema(), {"size": True})
    assert [d.summary for d in diags] == ["Incorrect attribute value type"]


def test_unknown_config_values_conform() -> None:
    effective, diags = check_conformance(_schema(), {"size": UNKNOWN})
    assert diags == []
    assert effective["size"] is UNKNOWN


# =============================================================================
# Actions
# =============================================================================


def test_create_plans_defaults_and_unknown_result() -> None:
    result = plan_resource(_schema(), {"size": 4}, None)
    assert result.action == "create"
    assert result.planned["mode"] == "fast"
    assert result.planned["label"] is None
    assert is_unknown(result.planned["result"])
    assert result.ok


def test_same_config_is_noop_and_keeps_result() -> None:
    prior = {"size": 4, "label": None, "mode": "fast", "result": "abc"}
    result = plan_resource(_schema(), {"size": 4}, prior)
    assert result.action == "noop"
    assert result.planned == prior


def test_changed_plain_attribute_is_update() -> None:
    prior = {"size": 4, "label": None, "mode": "fast", "result": "abc"}
    result = plan_resource(_schema(), {"size": 4, "label": "web"}, prior)
    assert result.action == "update"
    assert result.planned["result"] == "abc"
    assert result.requires_replace == []


def test_replace_resets_computed_values() -> None:
    prior = {"size": 4, "label": None, "mode": "fast", "result": "abc"}
    result = plan_resource(_schema(), {"size": 8}, prior)
    assert result.action == "replace"
    assert result.requires_replace == ["size"]
    assert result.planned["result"] is UNKNOWN
    assert result.planned["mode"] == "fast"


def test_removed_config_is_delete() -> None:
    prior = {"size": 4, "label": None, "mode": "fast", "result": "abc"}
    assert plan_resource(_schema(), None, prior).action == "delete"
    assert plan_resource(_schema(), None, None).action == "noop"


def test_summary_hides_sensitive_values() -> None:
    prior = {"size": 4, "label": None, "mode": "fast", "result": "topsecret"}
    text = plan_resource(_schema(), {"size": 8}, prior).summary()
    assert "topsecret" not in text
    assert "(forces replacement)" in text
    assert "(known after apply)" in text


# =============================================================================
# String resource planning
# =============================================================================


def test_string_reports_all_errors_in_one_pass() -> None:
    config = {"length": 3, "min_upper": 2, "min_lower": 2, "numeric": True, "number": False, "bogus": 1}
    result = lifecycle.plan("string", config)
    errors = [d for d in result.diagnostics if d.is_error]
    paths = {d.path for d in errors}
    assert {"bogus", "length", "numeric"} <= paths
    assert result.has_errors


def test_number_numeric_conflict_cannot_be_applied() -> None:
    result = lifecycle.plan("string", {"length": 8, "numeric": True, "number": False})
    assert result.has_errors
    with pytest.raises(InconsistentConfigurationError) as exc:
        lifecycle.apply(result, address="string.example")
    assert exc.value.address == "string.example"


def test_deprecated_number_warns_but_plans() -> None:
    result = lifecycle.plan("string", {"length": 8, "number": False})
    assert result.ok
    assert [d.summary for d in result.diagnostics] == ["Deprecated attribute"]
    assert result.planned["numeric"] is False
    assert result.planned["number"] is False


def test_unknown_length_skips_validation() -> None:
    result = lifecycle.plan("string", {"length": UNKNOWN, "min_upper": 50})
    assert result.ok
    assert result.action == "create"


def test_wrong_type_does_not_also_report_missing() -> None:
    result = lifecycle.plan("string", {"length": "ten"})
    assert [d.summary for d in result.diagnostics] == ["Incorrect attribute value type"]


def test_keepers_with_only_null_values_update_in_place(created) -> None:
    record = created("string", {"length": 12})
    result = lifecycle.plan("string", {"length": 12, "keepers": {"rotation": None}}, record)
    assert result.action == "update"
    applied = lifecycle.apply(result)
    assert applied.attributes["result"] == record.attributes["result"]
    assert applied.attributes["keepers"] == {"rotation": None}


def test_changed_keeper_replaces(created) -> None:
    record = created("string", {"length": 12, "keepers": {"rotation": "1"}})
    result = lifecycle.plan("string", {"length": 12, "keepers": {"rotation": "2"}}, record)
    assert result.action == "replace"
    assert result.requires_replace == ["keepers"]


def test_empty_override_special_to_null_is_update(created) -> None:
    record = created("string", {"length": 12})
    record.attributes["override_special"] = ""
    result = lifecycle.plan("string", {"length": 12}, record)
    assert result.action == "update"
    assert result.requires_replace == []
