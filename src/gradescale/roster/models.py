"""Pydantic and dataclass models for the Roster Store."""

from __future__ import annotations

import json
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationInfo,
    computed_field,
    field_validator,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from gradescale.classifier import AppreciationLabel, classify
from gradescale.roster.exceptions import ValidationError

MIN_GRADE = Decimal("1.0")
MAX_GRADE = Decimal("7.0")
MIN_TEXT_LENGTH = 2

_ONE_DECIMAL = Decimal("0.1")

# (required, too short) per text field
_TEXT_MESSAGES: dict[str, tuple[str, str]] = {
    "name": (
        "El nombre es obligatorio",
        f"El nombre debe tener al menos {MIN_TEXT_LENGTH} caracteres",
    ),
    "subject": (
        "La asignatura es obligatoria",
        f"La asignatura debe tener al menos {MIN_TEXT_LENGTH} caracteres",
    ),
}

GRADE_REQUIRED = "El promedio es obligatorio"
GRADE_NOT_A_NUMBER = "El promedio debe ser un número válido"
GRADE_OUT_OF_RANGE = f"El promedio debe estar entre {MIN_GRADE} y {MAX_GRADE}"

_REQUIRED_MESSAGES = {
    "name": _TEXT_MESSAGES["name"][0],
    "subject": _TEXT_MESSAGES["subject"][0],
    "grade": GRADE_REQUIRED,
}


def generate_id() -> str:
    """Generate a new record ID."""
    return str(uuid.uuid4())


def round_one_decimal(value: Decimal) -> float:
    """Round to one fractional digit, half-up."""
    return float(value.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


def parse_grade(value: object) -> float:
    """Parse and range-check a grade.

    Accepts ints, floats, Decimals and numeric strings. The result is rounded
    to one decimal.

    Args:
        value: Raw grade as supplied by the caller.

    Returns:
        The grade as a float with one fractional digit.

    Raises:
        PydanticCustomError: ``grade_missing`` for None or blank input,
            ``grade_not_a_number`` for anything that is not a finite number,
            ``grade_out_of_range`` outside 1.0 - 7.0. It is a ValueError, so
            callers outside pydantic can catch it as one.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise PydanticCustomError("grade_missing", GRADE_REQUIRED)
    if isinstance(value, bool) or not isinstance(value, int | float | Decimal | str):
        raise PydanticCustomError("grade_not_a_number", GRADE_NOT_A_NUMBER)

    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise PydanticCustomError("grade_not_a_number", GRADE_NOT_A_NUMBER) from None

    if not number.is_finite():
        raise PydanticCustomError("grade_not_a_number", GRADE_NOT_A_NUMBER)
    if not MIN_GRADE <= number <= MAX_GRADE:
        raise PydanticCustomError("grade_out_of_range", GRADE_OUT_OF_RANGE)

    return round_one_decimal(number)


def clean_text(value: object, field_name: str) -> str:
    """Trim a name or subject and enforce the minimum length.

    Raises:
        PydanticCustomError: ``<field>_missing`` or ``<field>_too_short``.
    """
    required, too_short = _TEXT_MESSAGES[field_name]
    if not isinstance(value, str) or not value.strip():
        raise PydanticCustomError(f"{field_name}_missing", required)
    value = value.strip()
    if len(value) < MIN_TEXT_LENGTH:
        raise PydanticCustomError(f"{field_name}_too_short", too_short)
    return value


class StudentInput(BaseModel):
    """Caller-supplied fields for creating or updating a student."""

    model_config = ConfigDict(extra="ignore")

    name: str
    subject: str
    grade: float

    @field_validator("name", "subject", mode="before")
    @classmethod
    def _clean_text(cls, value: Any, info: ValidationInfo) -> str:
        return clean_text(value, info.field_name)

    @field_validator("grade", mode="before")
    @classmethod
    def _parse_grade(cls, value: Any) -> float:
        return parse_grade(value)

    @classmethod
    def parse(cls, data: StudentInput | Mapping[str, Any]) -> StudentInput:
        """Validate raw input, reporting every failing field at once.

        Raises:
            ValidationError: With one message per offending field.
        """
        if isinstance(data, cls):
            return data
        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(_field_errors(e)) from e


def _field_errors(exc: PydanticValidationError) -> dict[str, str]:
    errors: dict[str, str] = {}
    for error in exc.errors():
        loc = error["loc"]
        name = str(loc[0]) if loc else "input"
        if error["type"] == "missing":
            message = _REQUIRED_MESSAGES.get(name, error["msg"])
        else:
            message = error["msg"]
        errors.setdefault(name, message)
    return errors


class StudentRecord(BaseModel):
    """One row of the roster.

    Stored under the keys the browser version of the tool used
    (nombre, asignatura, promedio, escala, fechaCreacion) so older
    blobs remain readable. The label is always derived from the grade.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )

    id: str = Field(frozen=True, min_length=1)
    name: str = Field(alias="nombre")
    subject: str = Field(alias="asignatura")
    grade: float = Field(alias="promedio")
    created_at: str | None = Field(default=None, alias="fechaCreacion", frozen=True)

    # Stored rows obey the same rules as caller input
    @field_validator("name", "subject", mode="before")
    @classmethod
    def _clean_text(cls, value: Any, info: ValidationInfo) -> str:
        return clean_text(value, info.field_name)

    @field_validator("grade", mode="before")
    @classmethod
    def _parse_grade(cls, value: Any) -> float:
        return parse_grade(value)

    @computed_field(alias="escala")  # type: ignore[prop-decorator]
    @property
    def label(self) -> AppreciationLabel:
        return classify(self.grade)

    def apply(self, data: StudentInput) -> None:
        """Replace the editable fields with validated input."""
        self.name = data.name
        self.subject = data.subject
        self.grade = data.grade

    def to_storage(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


_ROSTER_ADAPTER = TypeAdapter(list[StudentRecord])


def dump_roster(records: Iterable[StudentRecord]) -> str:
    """Serialize records to the JSON blob kept in storage."""
    return json.dumps([record.to_storage() for record in records], ensure_ascii=False)


def load_roster(blob: str | bytes) -> list[StudentRecord]:
    """Parse a stored JSON blob into records.

    Raises:
        ValueError: If the blob is not a list of valid records or repeats an ID.
            pydantic's ValidationError is a ValueError.
    """
    records = _ROSTER_ADAPTER.validate_json(blob)
    seen: set[str] = set()
    for record in records:
        if record.id in seen:
            raise ValueError(f"Duplicate record id '{record.id}' in stored roster")
        seen.add(record.id)
    return records


@dataclass
class ClassStats:
    """Aggregated statistics over the roster.

    Attributes:
        total: Number of records.
        mean: Mean grade rounded half-up to one decimal; None when empty.
        label_counts: Records per label, only for labels present, in order of
            first appearance.
    """

    total: int = 0
    mean: float | None = None
    label_counts: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_records(cls, records: Iterable[StudentRecord]) -> ClassStats:
        records = list(records)
        if not records:
            return cls()

        total_grade = sum((Decimal(str(record.grade)) for record in records), Decimal(0))
        label_counts: dict[str, int] = {}
        for record in records:
            label = record.label.value
            label_counts[label] = label_counts.get(label, 0) + 1

        return cls(
            total=len(records),
            mean=round_one_decimal(total_grade / len(records)),
            label_counts=label_counts,
        )
