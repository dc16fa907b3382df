"""Tests for the local-variables payload parser."""

from designkit.figma.models import DesignVariable
from designkit.figma.variables import (
    format_variable_value,
    parse_variables_response,
    variable_default_value,
)


def _response(variables, modes=None):
    modes = modes or [{"modeId": "1:0", "name": "Light"}, {"modeId": "1:1", "name": "Dark"}]
    return {
        "status": 200,
        "meta": {
            "variableCollections": {"VariableCollectionId:1": {"modes": modes}},
            "variables": variables,
        },
    }


class TestParseVariablesResponse:
    def test_mode_ids_resolved_to_names(self):
        [variable] = parse_variables_response(_response({
            "VariableID:1": {
                "id": "VariableID:1",
                "name": "Color/Primary/500",
                "resolvedType": "COLOR",
                "valuesByMode": {
                    "1:0": {"r": 1, "g": 0, "b": 0, "a": 1},
                    "1:1": {"r": 0, "g": 0, "b": 1, "a": 1},
                },
            },
        }))
        assert variable.id == "VariableID:1"
        assert variable.resolved_type == "color"
        assert set(variable.values_by_mode) == {"Light", "Dark"}

    def test_alias_resolved(self):
        variables = parse_variables_response(_response({
            "VariableID:1": {
                "name": "base/space",
                "resolvedType": "FLOAT",
                "valuesByMode": {"1:0": 8},
            },
            "VariableID:2": {
                "name": "gap/sm",
                "resolvedType": "FLOAT",
                "valuesByMode": {"1:0": {"type": "VARIABLE_ALIAS", "id": "VariableID:1"}},
            },
        }))
        gap = {v.name: v for v in variables}["gap/sm"]
        assert gap.values_by_mode == {"Light": 8}
        assert gap.id == "VariableID:2"

    def test_alias_cycle_dropped(self):
        [variable] = parse_variables_response(_response({
            "VariableID:1": {
                "name": "loop",
                "valuesByMode": {"1:0": {"type": "VARIABLE_ALIAS", "id": "VariableID:1"}},
            },
        }))
        assert variable.values_by_mode == {}
        assert variable.resolved_type == "string"

    def test_nameless_entries_skipped(self):
        assert parse_variables_response(_response({"VariableID:1": {"valuesByMode": {}}})) == []

    def test_malformed_response(self):
        assert parse_variables_response({}) == []
        assert parse_variables_response({"meta": {"variables": []}}) == []
        assert parse_variables_response(None) == []


class TestFormatVariableValue:
    def test_color(self):
        assert format_variable_value({"r": 1, "g": 0, "b": 0, "a": 0.5}, "color") == (
            "rgba(255, 0, 0, 0.50)"
        )

    def test_numbers_and_booleans(self):
        assert format_variable_value(16.0, "float") == "16"
        assert format_variable_value(True, "boolean") == "true"
        assert format_variable_value("Inter") == "Inter"

    def test_unrenderable(self):
        assert format_variable_value(None) is None
        assert format_variable_value({"type": "VARIABLE_ALIAS", "id": "x"}) is None

    def test_default_value_is_first_mode(self):
        variable = DesignVariable(
            id="v1", name="space", resolved_type="float",
            values_by_mode={"Light": 4, "Dark": 8},
        )
        assert variable_default_value(variable) == "4"
        assert variable_default_value(DesignVariable(id="v2", name="empty")) is None
