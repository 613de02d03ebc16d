"""Tests for the declarations (types module) emitter."""

from routegen.context_builder import GenerationRun
from routegen.declarations import default_expression, emit_types
from routegen.resolver import resolve
from routegen.schema_parser import build_document
from routegen.type_mapper import EnumCase, EnumType, OptionalType, PrimitiveType

_TRAVEL_TYPES = '''"""Types generated from Travel API 2.1.

Do not edit: regenerate with routegen.
"""

import enum
from dataclasses import dataclass, field
from typing import Optional


@dataclass(kw_only=True)
class Place:
    name: str
    lat: float
    lon: float
    arrival: Optional[int] = None


class AbsoluteDirection(enum.Enum):
    NORTH = "NORTH"
    EAST = "EAST"
    SOUTH = "SOUTH"
    WEST = "WEST"


class LegModeEnum(enum.Enum):
    WALK = "WALK"
    BUS = "BUS"


@dataclass(kw_only=True)
class StepInstruction:
    absolute_direction: Optional[AbsoluteDirection] = field(default=None, metadata={"name": "absoluteDirection"})
    distance: Optional[float] = field(default=None, metadata={"minimum": 0})


@dataclass(kw_only=True)
class Leg:
    from_: Place = field(metadata={"name": "from"})
    to: Place
    mode: Optional[LegModeEnum] = LegModeEnum.WALK
    headsign: Optional[str] = None
    steps: Optional[list[StepInstruction]] = None


@dataclass(kw_only=True)
class RouteNode:
    id: str
    children: Optional[list["RouteNode"]] = None
'''


def _emit(spec: dict) -> str:
    return emit_types(resolve(build_document(spec)))


class TestEmitTypes:
    """Test the rendered types module."""

    def test_travel(self, travel_spec):
        assert _emit(travel_spec) == _TRAVEL_TYPES

    def test_plan(self, plan_spec):
        text = _emit(plan_spec)
        assert "class Itinerary:\n    duration: int = field(metadata={\"minimum\": 0})\n" in text
        assert "class ModeEnum(enum.Enum):\n    WALK = \"WALK\"\n    TRANSIT = \"TRANSIT\"\n" in text

    def test_enum_cases_distinct(self):
        spec = {
            "components": {
                "schemas": {
                    "Mode": {"type": "string", "enum": ["CAR_PARK", "CAR_TO_PARK"]},
                },
            },
        }
        text = _emit(spec)
        assert '    CAR_PARK = "CAR_PARK"\n    CAR_TO_PARK = "CAR_TO_PARK"\n' in text

    def test_aliases_and_minimal_imports(self):
        spec = {
            "info": {"title": "Ids"},
            "components": {"schemas": {"Ids": {"type": "array", "items": {"type": "string"}, "minItems": 1}}},
        }
        assert _emit(spec) == (
            '"""Types generated from Ids.\n'
            "\n"
            'Do not edit: regenerate with routegen.\n'
            '"""\n'
            "\n"
            "\n"
            "Ids = list[str]\n"
        )

    def test_empty_record(self):
        spec = {"components": {"schemas": {"Empty": {"type": "object"}}}}
        assert "@dataclass(kw_only=True)\nclass Empty:\n    pass\n" in _emit(spec)

    def test_array_metadata(self):
        spec = {
            "components": {
                "schemas": {
                    "Trip": {
                        "type": "object",
                        "required": ["stops"],
                        "properties": {
                            "stops": {"type": "array", "items": {"type": "string"}, "minItems": 2, "uniqueItems": True},
                        },
                    },
                },
            },
        }
        text = _emit(spec)
        assert '    stops: list[str] = field(metadata={"min_items": 2, "unique_items": True})\n' in text

    def test_schema_keys_sanitized(self):
        spec = {
            "components": {
                "schemas": {
                    "Trip-Summary": {"type": "object", "properties": {"pod": {"$ref": "#/components/schemas/v1.Pod"}}},
                    "v1.Pod": {"type": "object", "properties": {"name": {"type": "string"}}},
                    "trip-ids": {"type": "array", "items": {"type": "string"}},
                },
            },
        }
        text = _emit(spec)
        assert "class V1Pod:\n" in text
        assert "class TripSummary:\n    pod: Optional[V1Pod] = None\n" in text
        assert "TripIds = list[str]\n" in text
        compile(text, "models.py", "exec")

    def test_generated_module_names_as_properties(self):
        spec = {
            "components": {
                "schemas": {
                    "Item": {
                        "type": "object",
                        "properties": {
                            "field": {"type": "integer", "minimum": 0},
                            "count": {"type": "integer", "minimum": 1},
                        },
                    },
                },
            },
        }
        text = _emit(spec)
        assert '    field_: Optional[int] = field(default=None, metadata={"name": "field", "minimum": 0})\n' in text
        assert '    count: Optional[int] = field(default=None, metadata={"minimum": 1})\n' in text

    def test_number_enum_values_are_floats(self):
        spec = {"components": {"schemas": {"Ratio": {"type": "number", "enum": [1, 2.5]}}}}
        assert "class Ratio(enum.Enum):\n    VALUE_1 = 1.0\n    VALUE_2_5 = 2.5\n" in _emit(spec)

    def test_integer_enum_values_unchanged(self):
        spec = {"components": {"schemas": {"Level": {"type": "integer", "enum": [1, 2]}}}}
        assert "class Level(enum.Enum):\n    VALUE_1 = 1\n    VALUE_2 = 2\n" in _emit(spec)

    def test_generated_code_compiles(self, travel_spec):
        compile(_emit(travel_spec), "models.py", "exec")

    def test_deterministic(self, travel_spec):
        graph = resolve(build_document(travel_spec))
        assert emit_types(graph, GenerationRun(graph)) == emit_types(graph, GenerationRun(graph))


class TestDefaultExpression:
    def test_primitive(self):
        assert default_expression(PrimitiveType(kind="integer", default=5)) == "5"
        assert default_expression(PrimitiveType(kind="string", default="a\"b")) == '"a\\"b"'

    def test_enum(self):
        mode = EnumType(name="ModeEnum", kind="string", cases=(EnumCase("WALK", "WALK"),), default="WALK")
        assert default_expression(OptionalType(mode)) == "ModeEnum.WALK"

    def test_none(self):
        assert default_expression(PrimitiveType(kind="boolean")) is None
