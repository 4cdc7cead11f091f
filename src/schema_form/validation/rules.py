"""
Rule evaluator.

``evaluate(value, rule)`` classifies any value as passing or failing one
``ValidationRule`` and never raises. Values of a type a rule does not
apply to pass vacuously; malformed pattern sources fail.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable

from schema_form.models.field_definitions import FileHandle, RuleKind, ValidationRule
from schema_form.models.validation_result import RuleResult

logger = logging.getLogger("schema-form")

_PASS = RuleResult(valid=True, message=None)


def _is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _number(param: Any, default: float | None) -> float | None:
    """Numeric rule parameter, or ``default`` when absent or not a number."""
    if _is_number(param):
        return param
    if isinstance(param, str):
        try:
            return float(param)
        except ValueError:
            return default
    return default


def _files(value: Any) -> list[FileHandle]:
    items = value if _is_array(value) else [value]
    return [item for item in items if isinstance(item, FileHandle)]


def _parse_date(text: Any) -> datetime | None:
    if not isinstance(text, str) or not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _check_required(value: Any, rule: ValidationRule) -> bool:
    if _is_array(value):
        return len(value) > 0
    return value is not None and not (isinstance(value, str) and value == "")


def _check_min_length(value: Any, rule: ValidationRule) -> bool:
    if not isinstance(value, str):
        return True
    return len(value) >= _number(rule.value, 0)


def _check_max_length(value: Any, rule: ValidationRule) -> bool:
    if not isinstance(value, str):
        return True
    limit = _number(rule.value, None)
    # 0 or missing means no limit
    return not limit or len(value) <= limit


def _check_min(value: Any, rule: ValidationRule) -> bool:
    limit = _number(rule.value, 0)
    if _is_array(value):
        return len(value) >= limit
    if _is_number(value):
        return value >= limit
    return True


def _check_max(value: Any, rule: ValidationRule) -> bool:
    limit = _number(rule.value, None)
    if not limit:
        return True
    if _is_array(value):
        return len(value) <= limit
    if _is_number(value):
        return value <= limit
    return True


def _check_pattern(value: Any, rule: ValidationRule) -> bool:
    if not isinstance(value, str):
        return True
    pattern = rule.compiled_pattern()
    if pattern is None:
        return False
    return pattern.search(value) is not None


def _check_file_size(value: Any, rule: ValidationRule) -> bool:
    if not value:
        return True
    limit = _number(rule.value, 0)
    return all(file.size <= limit for file in _files(value))


def _allowed_types(param: Any) -> list[str]:
    if isinstance(param, str):
        param = param.split(",")
    if not _is_array(param):
        return []
    return [entry.strip() for entry in param if isinstance(entry, str) and entry.strip()]


def _matches_type(file: FileHandle, allowed: str) -> bool:
    if "*" in allowed:
        base = allowed.split("/")[0]
        return file.type.startswith(base + "/")
    if allowed.startswith("."):
        return file.name.lower().endswith(allowed.lower())
    return file.type == allowed


def _check_file_type(value: Any, rule: ValidationRule) -> bool:
    if not value:
        return True
    allowed = _allowed_types(rule.value)
    return all(
        any(_matches_type(file, entry) for entry in allowed)
        for file in _files(value)
    )


def _check_date_range(value: Any, rule: ValidationRule) -> bool:
    if not value or not isinstance(value, str):
        return True
    date = _parse_date(value)
    if date is None:
        return False
    bounds = rule.value if isinstance(rule.value, dict) else {}
    min_date = _parse_date(bounds.get("minDate"))
    max_date = _parse_date(bounds.get("maxDate"))
    if min_date is not None and date < min_date:
        return False
    if max_date is not None and date > max_date:
        return False
    return True


def _check_custom(value: Any, rule: ValidationRule) -> bool:
    if not callable(rule.value):
        return True
    try:
        return bool(rule.value(value))
    except Exception:
        logger.exception("Custom rule raised; treating as failed: %s", rule.message)
        return False


def _check_unknown(value: Any, rule: ValidationRule) -> bool:
    return True


_EVALUATORS: dict[RuleKind, Callable[[Any, ValidationRule], bool]] = {
    RuleKind.REQUIRED: _check_required,
    RuleKind.MIN_LENGTH: _check_min_length,
    RuleKind.MAX_LENGTH: _check_max_length,
    RuleKind.MIN: _check_min,
    RuleKind.MAX: _check_max,
    RuleKind.PATTERN: _check_pattern,
    RuleKind.FILE_SIZE: _check_file_size,
    RuleKind.FILE_TYPE: _check_file_type,
    RuleKind.DATE_RANGE: _check_date_range,
    RuleKind.CUSTOM: _check_custom,
    RuleKind.UNKNOWN: _check_unknown,
}


def evaluate(value: Any, rule: ValidationRule) -> RuleResult:
    """Evaluate one rule against one value."""
    if _EVALUATORS[rule.kind](value, rule):
        return _PASS
    return RuleResult(valid=False, message=rule.message)
