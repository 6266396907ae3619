"""JSON interchange format for mechanics: validation, parsing and export."""

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from .model import MechanicData
from .schema import MechanicModel
from .snapshot import Snapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationIssue:
    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


@dataclass(frozen=True)
class ValidationResult:
    errors: tuple[ValidationIssue, ...] = ()
    warnings: tuple[ValidationIssue, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors


class MechanicValidationError(ValueError):
    """Raised when mechanic data cannot be turned into a ``MechanicData``."""

    def __init__(self, issues: list[ValidationIssue] | tuple[ValidationIssue, ...]):
        self.issues = tuple(issues)
        summary = "; ".join(str(issue) for issue in self.issues[:5])
        if len(self.issues) > 5:
            summary += f" (+{len(self.issues) - 5} more)"
        super().__init__(f"Invalid mechanic data: {summary}")


# ============================================
# Validation
# ============================================


def validate_mechanic(data: Any) -> ValidationResult:
    """
    Check raw mechanic data before it reaches the engine.

    Args:
        data: Decoded JSON value

    Returns:
        Errors that prevent parsing and warnings that do not
    """
    _, result = _validate(data)
    return result


def _validate(data: Any) -> tuple[MechanicModel | None, ValidationResult]:
    if not isinstance(data, dict):
        issue = ValidationIssue("root", "Mechanic data must be an object")
        return None, ValidationResult(errors=(issue,))

    warnings = ()
    if not data.get("description"):
        warnings = (ValidationIssue("description", "No description"),)
    try:
        return MechanicModel.model_validate(data), ValidationResult(warnings=warnings)
    except ValidationError as e:
        errors = tuple(_issue(error) for error in e.errors())
        return None, ValidationResult(errors=errors, warnings=warnings)


def _issue(error: dict[str, Any]) -> ValidationIssue:
    """Map a pydantic error onto a JSON path such as ``timeline[2].aoe.type``."""
    loc = error["loc"]
    path = ""
    for index, part in enumerate(loc):
        if isinstance(part, int):
            path += f"[{part}]"
        elif index >= 2 and loc[index - 2] == "timeline" and isinstance(loc[index - 1], int):
            continue  # event type tag
        else:
            path += f".{part}" if path else str(part)

    message = error["msg"]
    if error["type"] == "union_tag_invalid":
        path, message = f"{path}.type", f"Unknown event type: {error['ctx']['tag']!r}"
    elif error["type"] == "union_tag_not_found":
        path, message = f"{path}.type", "Event type is required"
    return ValidationIssue(path or "root", message)


# ============================================
# Parsing
# ============================================


def parse_mechanic(data: Any) -> MechanicData:
    """
    Validate and convert raw mechanic data.

    Missing optional sections fall back to defaults (empty roster lists, a
    circular field, an empty description).

    Raises:
        MechanicValidationError: If the data is structurally invalid
    """
    validated, result = _validate(data)
    if validated is None:
        raise MechanicValidationError(result.errors)
    for warning in result.warnings:
        logger.debug("Mechanic warning: %s", warning)
    return validated.to_model()


# ============================================
# Export
# ============================================


def mechanic_to_dict(mechanic: MechanicData) -> dict[str, Any]:
    """Export a mechanic to its camelCase wire shape, omitting unset fields."""
    return MechanicModel.model_validate(mechanic).model_dump(
        mode="json", by_alias=True, exclude_none=True
    )


def snapshot_to_dict(snapshot: Snapshot) -> dict[str, Any]:
    """Snapshot payload with the same camelCase keys as mechanics."""
    return _camel_keys(asdict(snapshot))


def _camel_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {to_camel(key): _camel_keys(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_camel_keys(item) for item in value]
    return value


# ============================================
# Files
# ============================================


def load_mechanic(path: str | Path) -> MechanicData:
    """
    Load and parse a mechanic JSON file.

    Raises:
        FileNotFoundError: If the file does not exist
        json.JSONDecodeError: If the file is not valid JSON
        MechanicValidationError: If the JSON is not a valid mechanic
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    mechanic = parse_mechanic(data)
    logger.debug("Loaded mechanic %s from %s (%d events)", mechanic.id, path, len(mechanic.timeline))
    return mechanic


def dump_mechanic(mechanic: MechanicData, path: str | Path) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(mechanic_to_dict(mechanic), f, indent=2, ensure_ascii=False)
