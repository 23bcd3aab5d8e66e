"""Field rules shared by the API handlers and the client forms.

The rules are plain data so they can be served as JSON (``/api/validation-rules``)
and applied by the browser forms exactly as the server applies them.
"""
from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from customer_manager.core.errors import ValidationError


@dataclass(frozen=True)
class FieldRule:
    name: str
    required_message: str
    pattern: Optional[str] = None
    pattern_message: Optional[str] = None


@dataclass(frozen=True)
class EntityRules:
    summary_message: str
    fields: Tuple[FieldRule, ...]

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(rule.name for rule in self.fields)


CUSTOMER_RULES = EntityRules(
    summary_message="All fields are required",
    fields=(
        FieldRule("first_name", "First name is required"),
        FieldRule("last_name", "Last name is required"),
        FieldRule(
            "phone_number",
            "Phone number is required",
            pattern=r"^[0-9]{10}$",
            pattern_message="Phone number must be 10 digits",
        ),
    ),
)

ADDRESS_RULES = EntityRules(
    summary_message="All address fields are required",
    fields=(
        FieldRule("address_details", "Address details are required"),
        FieldRule("city", "City is required"),
        FieldRule("state", "State is required"),
        FieldRule("pin_code", "PIN code is required"),
    ),
)


def _clean(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def validate_fields(rules: EntityRules, payload: Mapping[str, Any]) -> Dict[str, str]:
    """Return ``{field: message}`` for every field that breaks a rule."""
    errors: Dict[str, str] = {}
    for rule in rules.fields:
        value = _clean(payload.get(rule.name))
        if not value:
            errors[rule.name] = rule.required_message
        elif rule.pattern and not re.fullmatch(rule.pattern, value):
            errors[rule.name] = rule.pattern_message or f"{rule.name} is invalid"
    return errors


def validate_customer_fields(payload: Mapping[str, Any]) -> Dict[str, str]:
    return validate_fields(CUSTOMER_RULES, payload)


def validate_address_fields(payload: Mapping[str, Any]) -> Dict[str, str]:
    return validate_fields(ADDRESS_RULES, payload)


def require_fields(rules: EntityRules, payload: Mapping[str, Any]) -> Dict[str, str]:
    """Validate ``payload`` and return the trimmed values, or raise ValidationError.

    A missing field reports the entity's summary message; when every field is
    present the first format failure is reported instead.
    """
    errors = validate_fields(rules, payload)
    if errors:
        missing = [rule for rule in rules.fields if not _clean(payload.get(rule.name))]
        if missing:
            raise ValidationError(rules.summary_message, fields=errors)
        first_field = next(iter(errors))
        raise ValidationError(errors[first_field], fields=errors)
    return {name: _clean(payload.get(name)) for name in rules.field_names}


def rules_as_dict() -> Dict[str, Any]:
    return {
        "customer": asdict(CUSTOMER_RULES),
        "address": asdict(ADDRESS_RULES),
    }
