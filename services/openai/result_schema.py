"""Schema check for the AnalysisResult object recovered from the model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from models.errors import ValidationError

REQUIRED_FIELDS: Tuple[str, ...] = ("summary", "tools", "steps", "safetyWarnings", "imageDescriptions")


class AnalysisResultSchema(BaseModel):
    """Required top-level shape of a diagnosis. Extra keys are allowed."""

    model_config = ConfigDict(extra="allow", strict=True)

    summary: str
    tools: List[Any]
    steps: List[Any]
    safetyWarnings: Dict[str, Any]
    imageDescriptions: List[Any]


@dataclass(frozen=True)
class ResultValidation:
    """Tagged outcome of `validate_result`."""

    ok: bool
    result: Optional[Dict[str, Any]] = None
    missing: Tuple[str, ...] = field(default_factory=tuple)
    invalid: Tuple[str, ...] = field(default_factory=tuple)

    def describe(self) -> str:
        parts = []
        if self.missing:
            parts.append("missing field(s): " + ", ".join(self.missing))
        if self.invalid:
            parts.append("invalid field(s): " + ", ".join(self.invalid))
        return "; ".join(parts) or "valid"


def validate_result(value: Any) -> ResultValidation:
    """Check `value` against the AnalysisResult schema without raising."""
    if not isinstance(value, dict):
        return ResultValidation(ok=False, invalid=("<root>",))

    try:
        AnalysisResultSchema.model_validate(value)
    except PydanticValidationError as exc:
        missing, invalid = [], []
        for error in exc.errors():
            name = str(error["loc"][0]) if error.get("loc") else "<root>"
            bucket = missing if error.get("type") == "missing" else invalid
            if name not in bucket:
                bucket.append(name)
        return ResultValidation(ok=False, missing=tuple(missing), invalid=tuple(invalid))

    return ResultValidation(ok=True, result=value)


def ensure_valid_result(value: Any) -> Dict[str, Any]:
    """Return `value` unchanged if it is a complete AnalysisResult.

    Raises:
        ValidationError: Naming every missing or mistyped field.
    """
    outcome = validate_result(value)
    if not outcome.ok:
        raise ValidationError(
            "Invalid response format from model: " + outcome.describe(),
            fields=outcome.missing + outcome.invalid,
        )
    return outcome.result
