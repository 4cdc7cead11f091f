from schema_form.data.default_schema import DEFAULT_FORM_SCHEMA, default_fields

__all__ = ["DEFAULT_FORM_SCHEMA", "default_fields"]
