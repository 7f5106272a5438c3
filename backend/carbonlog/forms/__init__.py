"""Schema-driven form visibility and validation."""

from carbonlog.forms.validator import validate, validate_identification
from carbonlog.forms.visibility import is_visible, visible_fields

__all__ = [
    "is_visible",
    "validate",
    "validate_identification",
    "visible_fields",
]
