"""Edit-form validation, applied before an entry reaches the entry manager."""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationError

WORD_MAX_LENGTH = 60
DEFINITION_MAX_LENGTH = 2000
ILLUSTRATION_MAX_LENGTH = 500

_FIELD_LABELS = {
    'word': 'Word',
    'definition': 'Definition',
    'illustration': 'Illustration',
}


class EntryForm(BaseModel):
    """Submitted entry fields: trimmed, required, and length-limited."""
    model_config = ConfigDict(str_strip_whitespace=True)

    word: str = Field(..., min_length=1, max_length=WORD_MAX_LENGTH)
    definition: str = Field(..., min_length=1, max_length=DEFINITION_MAX_LENGTH)
    illustration: str = Field(..., min_length=1, max_length=ILLUSTRATION_MAX_LENGTH)
    recording: Optional[str] = None


def validate_form(**fields) -> tuple[EntryForm | None, dict[str, str]]:
    """Validate form input. Returns (form, {}) or (None, field errors)."""
    try:
        return EntryForm(**fields), {}
    except ValidationError as e:
        return None, {str(err['loc'][0]): _describe(err) for err in e.errors()}


def _describe(err: dict) -> str:
    field = str(err['loc'][0])
    label = _FIELD_LABELS.get(field, field)
    if err['type'] == 'string_too_short' or err['type'] == 'missing':
        return f"{label} is required."
    if err['type'] == 'string_too_long':
        return f"{label} must be at most {err['ctx']['max_length']} characters."
    return f"{label}: {err['msg']}"
