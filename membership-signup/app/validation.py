"""Field validation for the Membership Signup wizard.

Checks a draft value against its field descriptor: required-ness,
text formats (email, number, link), and membership of the option list
for choice fields. Every check for a field is run, so callers get the
full list of messages rather than just the first one.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Any, Iterable

from app.field_catalogue import Catalogue, FieldDescriptor, FieldKind

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_NUMBER_RE = re.compile(r"^[+-]?\d+(\.\d+)?$")
_LINK_RE = re.compile(r"^https?://[^\s/$.?#][^\s]*$", re.IGNORECASE)

_FORMAT_CHECKS: dict[str, tuple[re.Pattern, str]] = {
    "email": (_EMAIL_RE, "must be a valid email address"),
    "number": (_NUMBER_RE, "must be a number"),
    "link": (_LINK_RE, "must be a link starting with http:// or https://"),
}


def is_empty(field_def: FieldDescriptor, value: Any) -> bool:
    """Whether *value* counts as "not filled in" for *field_def*."""
    if value is None:
        return True
    if field_def.is_multi_valued:
        return not value
    if field_def.kind == FieldKind.CHECKBOX:
        return value is not True
    if field_def.kind == FieldKind.DATE:
        return not isinstance(value, date)
    return not str(value).strip()


def validate_field(field_def: FieldDescriptor, value: Any) -> list[str]:
    """Validate a single draft value against its descriptor.

    Args:
        field_def: The field descriptor.
        value: The current draft value (may be None when never set).

    Returns:
        List of validation error messages. Empty list means valid.
    """
    errors: list[str] = []
    label = field_def.label

    if is_empty(field_def, value):
        if field_def.required:
            if field_def.is_multi_valued:
                errors.append(f"{label}: select at least one option.")
            elif field_def.kind == FieldKind.SIGNATURE:
                errors.append(f"{label} is required. Please sign before continuing.")
            else:
                errors.append(f"{label} is required.")
        # Optional and empty: nothing else to check
        return errors

    kind = field_def.kind

    if kind == FieldKind.TEXT and field_def.input_subtype in _FORMAT_CHECKS:
        pattern, message = _FORMAT_CHECKS[field_def.input_subtype]
        if not pattern.match(str(value).strip()):
            errors.append(f"{label} {message}.")

    if kind in (FieldKind.SELECT, FieldKind.RADIO):
        if str(value) not in field_def.option_values:
            errors.append(f"{label} must be one of: {', '.join(field_def.option_values)}.")

    if field_def.is_multi_valued:
        if not isinstance(value, (list, tuple)):
            errors.append(f"{label} must be a list of options.")
        else:
            unknown = [v for v in value if v not in field_def.option_values]
            if unknown:
                errors.append(f"{label} has unknown option(s): {', '.join(map(str, unknown))}.")

    if kind == FieldKind.DATE and not isinstance(value, date):
        errors.append(f"{label} must be a valid date.")

    return errors


def validate_fields(
    catalogue: Catalogue,
    names: Iterable[str],
    draft: dict[str, Any],
) -> dict[str, list[str]]:
    """Validate the named fields against *draft*.

    Returns:
        Dict mapping field name to its error messages, for fields with
        at least one violation only. Empty dict means all valid.
    """
    violations: dict[str, list[str]] = {}
    for name in names:
        field_def = catalogue.field(name)
        errors = validate_field(field_def, draft.get(name))
        if errors:
            violations[name] = errors
    return violations


def check_completeness(catalogue: Catalogue, draft: dict[str, Any]) -> dict:
    """Summarise how complete *draft* is across the whole catalogue.

    Returns:
        Dict with keys:
        - total_fields: total number of fields
        - completed_fields: number of fields with values
        - required_missing: required fields without values
        - completion_pct: percentage complete (0-100)
    """
    all_fields = list(catalogue.fields.values())
    total = len(all_fields)
    completed = sum(1 for f in all_fields if not is_empty(f, draft.get(f.name)))
    required_missing = [
        f.name for f in all_fields
        if f.required and is_empty(f, draft.get(f.name))
    ]
    pct = round((completed / total) * 100) if total > 0 else 0
    return {
        "total_fields": total,
        "completed_fields": completed,
        "required_missing": required_missing,
        "completion_pct": pct,
    }
