"""Shared OpenAPI documents for generator tests.

Each fixture returns a fresh deep copy so tests can mutate freely.
"""

from __future__ import annotations

import copy
from typing import Any

import pytest

# Journey planner query; minItems sits on the items scalar
PLAN_SPEC: dict[str, Any] = {
    "openapi": "3.0.3",
    "info": {"title": "Routing API", "version": "v1"},
    "paths": {
        "/api/v1/plan": {
            "get": {
                "operationId": "plan",
                "summary": "Computes optimal connections from one place to another.",
                "parameters": [
                    {
                        "name": "fromPlace",
                        "in": "query",
                        "required": True,
                        "schema": {"type": "string"},
                    },
                    {
                        "name": "mode",
                        "in": "query",
                        "required": False,
                        "schema": {
                            "type": "array",
                            "items": {
                                "type": "string",
                                "minItems": 1,
                                "enum": ["WALK", "TRANSIT"],
                            },
                        },
                        "explode": False,
                    },
                ],
                "responses": {
                    "200": {
                        "description": "routing result",
                        "content": {
                            "application/json": {
                                "schema": {
                                    "type": "object",
                                    "properties": {
                                        "itineraries": {
                                            "type": "array",
                                            "items": {"$ref": "#/components/schemas/Itinerary"},
                                        },
                                    },
                                },
                            },
                        },
                    },
                },
            },
        },
    },
    "components": {
        "schemas": {
            "Itinerary": {
                "type": "object",
                "required": ["duration"],
                "properties": {
                    "duration": {"type": "integer", "minimum": 0},
                    "transfers": {"type": "integer"},
                },
            },
        },
    },
}

TRAVEL_SPEC: dict[str, Any] = {
    "openapi": "3.0.3",
    "info": {"title": "Travel API", "version": "2.1"},
    "paths": {
        "/api/v1/stops/{stopId}/departures/{day}": {
            "parameters": [
                {"name": "stopId", "in": "path", "required": True, "schema": {"type": "string"}},
            ],
            "GET": {
                "operationId": "departures",
                "parameters": [
                    {"name": "limit", "in": "query", "schema": {"type": "integer", "default": 5, "maximum": 50}},
                    {"name": "day", "in": "path", "required": True, "schema": {"type": "integer"}},
                    {"name": "direction", "in": "query", "schema": {"$ref": "#/components/schemas/AbsoluteDirection"}},
                    {"name": "X-Trace", "in": "header", "schema": {"type": "string"}},
                ],
                "responses": {
                    "200": {
                        "content": {
                            "application/json": {"schema": {"$ref": "#/components/schemas/Leg"}},
                        },
                    },
                },
            },
        },
        "/api/v1/health": {
            "get": {"responses": {"200": {"description": "OK"}}},
        },
    },
    "components": {
        "schemas": {
            "Place": {
                "type": "object",
                "required": ["name", "lat", "lon"],
                "properties": {
                    "name": {"type": "string", "description": "name of the transit stop"},
                    "lat": {"type": "number"},
                    "lon": {"type": "number"},
                    "arrival": {"type": "integer"},
                },
            },
            "AbsoluteDirection": {
                "type": "string",
                "enum": ["NORTH", "EAST", "SOUTH", "WEST"],
            },
            "Leg": {
                "type": "object",
                "required": ["from", "to"],
                "properties": {
                    "from": {"$ref": "#/components/schemas/Place"},
                    "to": {"$ref": "#/components/schemas/Place"},
                    "mode": {"type": "string", "enum": ["WALK", "BUS"], "default": "WALK"},
                    "headsign": {"type": "string"},
                    "steps": {"type": "array", "items": {"$ref": "#/components/schemas/StepInstruction"}},
                },
            },
            "StepInstruction": {
                "type": "object",
                "properties": {
                    "absoluteDirection": {"$ref": "#/components/schemas/AbsoluteDirection"},
                    "distance": {"type": "number", "minimum": 0},
                },
            },
            "RouteNode": {
                "type": "object",
                "required": ["id"],
                "properties": {
                    "id": {"type": "string"},
                    "children": {"type": "array", "items": {"$ref": "#/components/schemas/RouteNode"}},
                },
            },
        },
    },
}


@pytest.fixture
def plan_spec() -> dict[str, Any]:
    return copy.deepcopy(PLAN_SPEC)


@pytest.fixture
def travel_spec() -> dict[str, Any]:
    return copy.deepcopy(TRAVEL_SPEC)
