"""
MCP Tool definitions for Schema-Form.

Exposes the validation engine as stateless tools: each call receives the
schema as JSON (an array of fields, or its text) along with the values.
"""

import json
import logging
from typing import Any, Awaitable, Callable

from schema_form.form_helpers import coerce_field_value, format_form_response
from schema_form.models.field_definitions import FieldSpec
from schema_form.steps.deriver import create_multi_step_config, finalize_step_config
from schema_form.validation.field_validator import validate_field, validate_values
from schema_form.validation.schema_checks import (
    SchemaCheckResult,
    SchemaStructureError,
    check_schema,
    parse_schema,
    parse_schema_json,
)

logger = logging.getLogger("schema-form-mcp")

_SCHEMA_PROPERTY = {
    "description": "Form schema: an array of field objects, or its JSON text",
    "anyOf": [{"type": "array", "items": {"type": "object"}}, {"type": "string"}],
}


def _load_fields(schema: Any) -> list[FieldSpec]:
    if isinstance(schema, str):
        return parse_schema_json(schema)
    return parse_schema(schema)


def _coerce_values(fields: list[FieldSpec], values: dict[str, Any]) -> dict[str, Any]:
    by_id = {field.id: field for field in fields}
    return {
        key: coerce_field_value(by_id[key], value) if key in by_id else value
        for key, value in values.items()
    }


async def mcp_check_schema(schema: Any) -> dict[str, Any]:
    """Report structural errors and warnings for a schema."""
    if isinstance(schema, str):
        try:
            schema = json.loads(schema)
        except json.JSONDecodeError as e:
            return SchemaCheckResult(is_valid=False, errors=[f"Invalid JSON: {e}"]).model_dump()
    return check_schema(schema).model_dump()


async def mcp_validate_field(schema: Any, field_id: str, value: Any = None) -> dict[str, Any]:
    """Validate one value against one field's rules."""
    fields = _load_fields(schema)
    field = next((f for f in fields if f.id == field_id), None)
    if field is None:
        raise ValueError(f"Unknown field: {field_id}")
    error = validate_field(coerce_field_value(field, value), field.validation)
    return {"field_id": field_id, "is_valid": error is None, "error": error}


async def mcp_validate_form(schema: Any, values: dict[str, Any]) -> dict[str, Any]:
    """Validate a whole value map and report every failing field."""
    fields = _load_fields(schema)
    result = validate_values(fields, _coerce_values(fields, values))
    return result.model_dump(mode="json")


async def mcp_derive_steps(
    schema: Any,
    fields_per_step: int | None = None,
    steps: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Split a schema into steps, automatically or from explicit assignments."""
    fields = _load_fields(schema)
    if steps:
        config = finalize_step_config(fields, steps)
    else:
        config = create_multi_step_config(fields, fields_per_step)
    return config.to_wire()


async def mcp_format_response(values: dict[str, Any]) -> dict[str, Any]:
    """Format a value map for transport."""
    return format_form_response(values)


MCP_TOOL_HANDLERS: dict[str, Callable[..., Awaitable[dict[str, Any]]]] = {
    "check_schema": mcp_check_schema,
    "validate_field": mcp_validate_field,
    "validate_form": mcp_validate_form,
    "derive_steps": mcp_derive_steps,
    "format_response": mcp_format_response,
}


async def call_mcp_tool(name: str, arguments: dict[str, Any]) -> dict[str, Any]:
    """
    Run a tool by name.

    Schema and argument problems come back as ``{"error": ...}`` payloads.
    """
    handler = MCP_TOOL_HANDLERS.get(name)
    if handler is None:
        return {"error": f"Unknown tool: {name}"}
    try:
        return await handler(**arguments)
    except SchemaStructureError as e:
        logger.warning(f"Schema rejected in {name}: {e}")
        return {"error": str(e), "errors": e.errors}
    except (TypeError, ValueError) as e:
        logger.error(f"Error in {name}: {e}")
        return {"error": str(e)}


def get_mcp_tools() -> list[dict[str, Any]]:
    """
    Get MCP tool definitions.

    Returns list of tool definitions in MCP format.
    """
    return [
        {
            "name": "check_schema",
            "description": (
                "Check a form schema for structural errors (malformed JSON, "
                "duplicate ids, choice fields without options, invalid patterns) "
                "and warnings (unknown field or rule types)."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {"schema": _SCHEMA_PROPERTY},
                "required": ["schema"],
            },
        },
        {
            "name": "validate_field",
            "description": (
                "Validate one value against a field's rules. Returns the message "
                "of the first failing rule, or null."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "schema": _SCHEMA_PROPERTY,
                    "field_id": {"type": "string", "description": "Id of the field"},
                    "value": {"description": "Value to validate"},
                },
                "required": ["schema", "field_id"],
            },
        },
        {
            "name": "validate_form",
            "description": (
                "Validate a map of field id to value against a schema. Returns "
                "every failing field and, when valid, the formatted response."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "schema": _SCHEMA_PROPERTY,
                    "values": {"type": "object", "description": "Field id to value"},
                },
                "required": ["schema", "values"],
            },
        },
        {
            "name": "derive_steps",
            "description": (
                "Split a schema into the steps of a multi-step form, either in "
                "pages of fields_per_step or from explicit step assignments "
                "(every field must be assigned)."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "schema": _SCHEMA_PROPERTY,
                    "fields_per_step": {"type": "integer", "minimum": 1},
                    "steps": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {
                                "title": {"type": "string"},
                                "description": {"type": "string"},
                                "fieldIds": {"type": "array", "items": {"type": "string"}},
                            },
                            "required": ["title", "fieldIds"],
                        },
                    },
                },
                "required": ["schema"],
            },
        },
        {
            "name": "format_response",
            "description": "Format a value map for transport (empty lists become empty strings).",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "values": {"type": "object", "description": "Field id to value"},
                },
                "required": ["values"],
            },
        },
    ]
