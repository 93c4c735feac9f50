# -*- coding: utf-8 -*-
"""Record kinds — per-kind field rules, dispatched through one table.

Every field has an explicit parser. Parsers are total: they either return a
clean value or raise ``ValueError`` with a short reason. Nothing is silently
zeroed; the only defaults are the ones declared on the field.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple, Type

from pydantic import BaseModel

from ..errors import ValidationError
from .models import MedicationRecord, MetricRecord, NutritionRecord, WorkoutRecord

_MISSING = object()

# Whole-number fields are stored as SQLite INTEGER and summed per day.
_MAX_INT = 2**31 - 1

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class Kind(str, Enum):
    WORKOUTS = "workouts"
    NUTRITION = "nutrition"
    METRICS = "metrics"
    MEDICATIONS = "medications"


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


# ---- parsers ----

def parse_text(value: Any) -> str:
    if isinstance(value, (dict, list)):
        raise ValueError("must be text")
    return str(value).strip()


def _to_number(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError("must be a number")
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            raise ValueError("is out of range") from None
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            raise ValueError("must be a number") from None
    else:
        raise ValueError("must be a number")
    if math.isnan(number) or math.isinf(number):
        raise ValueError("must be a number")
    return number


def _to_int(value: Any) -> int:
    number = _to_number(value)
    if not number.is_integer():
        raise ValueError("must be a whole number")
    if abs(number) > _MAX_INT:
        raise ValueError("is out of range")
    return int(number)


def parse_positive_int(value: Any) -> int:
    number = _to_int(value)
    if number <= 0:
        raise ValueError("must be a positive integer")
    return number


def parse_non_negative_int(value: Any) -> int:
    number = _to_int(value)
    if number < 0:
        raise ValueError("must be a non-negative integer")
    return number


def parse_non_negative_float(value: Any) -> float:
    number = _to_number(value)
    if number < 0:
        raise ValueError("must be a non-negative number")
    return number


def parse_date(value: Any) -> str:
    if isinstance(value, date):
        return value.isoformat()
    text = str(value).strip()
    if not _ISO_DATE.match(text):
        raise ValueError("must be a date (YYYY-MM-DD)")
    try:
        return date.fromisoformat(text).isoformat()
    except ValueError:
        raise ValueError("must be a date (YYYY-MM-DD)") from None


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        v = value.strip().lower()
        if v in {"true", "1", "yes", "on"}:
            return True
        if v in {"false", "0", "no", "off"}:
            return False
    raise ValueError("must be true or false")


def choice(*options: str) -> Callable[[Any], str]:
    allowed = ", ".join(options)

    def parse(value: Any) -> str:
        v = str(value).strip().lower()
        if v not in options:
            raise ValueError(f"must be one of: {allowed}")
        return v

    return parse


# ---- kind table ----

@dataclass(frozen=True)
class FieldSpec:
    name: str
    parse: Callable[[Any], Any]
    required: bool = False
    default: Any = None


@dataclass(frozen=True)
class KindSpec:
    kind: Kind
    table: str
    label: str
    fields: Tuple[FieldSpec, ...]
    order_by: str
    model: Type[BaseModel]

    @property
    def required_fields(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields if f.required)

    @property
    def columns(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields)


_BY_DATE = "date DESC, created_at DESC, id DESC"

KINDS: Dict[Kind, KindSpec] = {
    Kind.WORKOUTS: KindSpec(
        kind=Kind.WORKOUTS,
        table="workouts",
        label="Workout",
        fields=(
            FieldSpec("type", parse_text, required=True),
            FieldSpec("duration", parse_positive_int, required=True),
            FieldSpec("intensity", choice("low", "medium", "high"), required=True),
            FieldSpec("calories_burned", parse_non_negative_int, default=0),
            FieldSpec("notes", parse_text),
            FieldSpec("date", parse_date, required=True),
        ),
        order_by=_BY_DATE,
        model=WorkoutRecord,
    ),
    Kind.NUTRITION: KindSpec(
        kind=Kind.NUTRITION,
        table="nutrition",
        label="Nutrition entry",
        fields=(
            FieldSpec("meal_type", choice("breakfast", "lunch", "dinner", "snack"), required=True),
            FieldSpec("food_item", parse_text, required=True),
            FieldSpec("calories", parse_non_negative_int, required=True),
            FieldSpec("protein", parse_non_negative_float, default=0.0),
            FieldSpec("carbs", parse_non_negative_float, default=0.0),
            FieldSpec("fats", parse_non_negative_float, default=0.0),
            FieldSpec("date", parse_date, required=True),
        ),
        order_by=_BY_DATE,
        model=NutritionRecord,
    ),
    Kind.METRICS: KindSpec(
        kind=Kind.METRICS,
        table="health_metrics",
        label="Health metrics",
        fields=(
            FieldSpec("weight", parse_non_negative_float, default=0.0),
            FieldSpec("height", parse_non_negative_float, default=0.0),
            FieldSpec("blood_pressure", parse_text),
            FieldSpec("heart_rate", parse_non_negative_int, default=0),
            FieldSpec("sleep_hours", parse_non_negative_float, default=0.0),
            FieldSpec("water_intake", parse_non_negative_int, default=0),
            FieldSpec("mood", choice("excellent", "good", "fair", "poor", "terrible")),
            FieldSpec("notes", parse_text),
            FieldSpec("date", parse_date, required=True),
        ),
        order_by=_BY_DATE,
        model=MetricRecord,
    ),
    Kind.MEDICATIONS: KindSpec(
        kind=Kind.MEDICATIONS,
        table="medications",
        label="Medication",
        fields=(
            FieldSpec("name", parse_text, required=True),
            FieldSpec("dosage", parse_text, required=True),
            FieldSpec("frequency", parse_text, required=True),
            FieldSpec("purpose", parse_text),
            FieldSpec("start_date", parse_date, required=True),
            FieldSpec("end_date", parse_date),
            FieldSpec("is_active", parse_bool, default=True),
        ),
        # Active medications first.
        order_by="is_active DESC, start_date DESC, created_at DESC, id DESC",
        model=MedicationRecord,
    ),
}


def get_kind(name: str) -> Optional[KindSpec]:
    try:
        return KINDS[Kind(name)]
    except ValueError:
        return None


def join_names(names: Tuple[str, ...]) -> str:
    """``("a", "b", "c")`` -> ``"a, b, and c"``."""
    if len(names) <= 1:
        return "".join(names)
    if len(names) == 2:
        return f"{names[0]} and {names[1]}"
    return ", ".join(names[:-1]) + f", and {names[-1]}"


def clean_fields(spec: KindSpec, payload: Dict[str, Any]) -> Dict[str, Any]:
    """Validate and coerce a client payload into column values.

    Keys outside the kind's field set (``id``, ``user_id``, ``created_at``...)
    are dropped. Raises ``ValidationError`` naming every offending field.
    """
    missing = []
    invalid = []
    values: Dict[str, Any] = {}
    for field in spec.fields:
        raw = payload.get(field.name, _MISSING)
        if raw is _MISSING or is_blank(raw):
            if field.required:
                missing.append(field.name)
            values[field.name] = field.default
            continue
        try:
            values[field.name] = field.parse(raw)
        except ValueError as exc:
            invalid.append(f"{field.name} ({exc})")

    if missing:
        raise ValidationError(
            "Missing required fields: {} {} required".format(
                join_names(spec.required_fields), "is" if len(spec.required_fields) == 1 else "are"
            ),
            fields=missing,
        )
    if invalid:
        raise ValidationError(
            "Invalid fields: " + "; ".join(invalid),
            fields=[item.split(" ", 1)[0] for item in invalid],
        )
    return values
