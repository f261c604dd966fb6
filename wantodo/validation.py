"""Field validation for task requests.

Each field is described by a ``FieldSpec``: sanitizers run first, then
checks in order. The first failing check on a field stops that field,
but every field is always visited, so one call reports all independent
violations at once.

Paths may contain ``*`` to address every element of a list, e.g.
``tags.*.tagId`` is checked once per tag and reported as ``tags[0].tagId``.
"""

import copy
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, List, Optional, Sequence, Tuple

from .errors import ValidationFailed
from .models import parse_timestamp

UUID4_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
JWT_PATTERN = re.compile(r"^[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]*$")
INT_PATTERN = re.compile(r"^[+-]?\d+$")

BOOLEAN_STRINGS = {"true": True, "false": False, "1": True, "0": False}

CONTENTS_MIN_LENGTH = 1
CONTENTS_MAX_LENGTH = 50

Check = Tuple[Callable[[Any], bool], str]


@dataclass(frozen=True)
class Violation:
    field: str
    reason: str

    def __str__(self) -> str:
        return f"{self.field}: {self.reason}"


@dataclass
class ValidationResult:
    """Sanitized data plus every violation found."""

    data: dict
    violations: List[Violation] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.violations

    def raise_if_invalid(self) -> None:
        if self.violations:
            raise ValidationFailed(self.violations)


@dataclass(frozen=True)
class FieldSpec:
    """Rules for one field.

    Attributes:
        path: Dotted path into the payload, ``*`` for list elements
        checks: (predicate, reason) pairs, evaluated in order
        optional: None (required), "falsy" (skip None, "", 0, False)
            or "nullable" (skip None only)
        sanitizers: Applied to the raw value before the checks
        coerce: Applied to the value once all checks pass
    """

    path: str
    checks: Sequence[Check] = ()
    optional: Optional[str] = None
    sanitizers: Sequence[Callable[[Any], Any]] = ()
    coerce: Optional[Callable[[Any], Any]] = None

    def is_skipped(self, value: Any) -> bool:
        if self.optional == "nullable":
            return value is None
        if self.optional == "falsy":
            if value is None:
                return True
            # Lists and objects are never falsy
            return not isinstance(value, (list, dict)) and not value
        return False

    def check(self, value: Any) -> Tuple[Any, Optional[str]]:
        """Return the sanitized value and the first failing reason, if any."""
        for sanitize in self.sanitizers:
            value = sanitize(value)
        for predicate, reason in self.checks:
            if not predicate(value):
                return value, reason
        if self.coerce is not None:
            value = self.coerce(value)
        return value, None


def _locate(data: Any, parts: List[str], prefix: str = "") -> Iterator[Tuple[str, Any, Any]]:
    """Yield (display path, container, key) for every match of ``parts``."""
    head, rest = parts[0], parts[1:]
    if head == "*":
        if not isinstance(data, list):
            return
        for index, item in enumerate(data):
            path = f"{prefix}[{index}]"
            if rest:
                yield from _locate(item, rest, path)
            else:
                yield path, data, index
        return

    path = f"{prefix}.{head}" if prefix else head
    if rest:
        child = data.get(head) if isinstance(data, dict) else None
        yield from _locate(child, rest, path)
    else:
        yield path, data, head


def _read(container: Any, key: Any) -> Any:
    if isinstance(container, dict):
        return container.get(key)
    if isinstance(container, list):
        return container[key]
    return None


def validate(fields: Sequence[FieldSpec], payload: dict) -> ValidationResult:
    """Run every field spec against ``payload``.

    The payload is not modified; sanitized and coerced values are written
    into a copy. Optional fields that were skipped are removed from the
    copy so that callers treat them as absent.
    """
    data = copy.deepcopy(payload) if isinstance(payload, dict) else {}
    violations: List[Violation] = []

    for spec in fields:
        for path, container, key in list(_locate(data, spec.path.split("."))):
            value = _read(container, key)
            if spec.is_skipped(value):
                if isinstance(container, dict):
                    container.pop(key, None)
                continue
            value, reason = spec.check(value)
            if reason is not None:
                violations.append(Violation(path, reason))
            elif isinstance(container, (dict, list)):
                container[key] = value

    return ValidationResult(data=data, violations=violations)


# -- predicates -------------------------------------------------------------

def trim(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def strip_bearer(value: Any) -> Any:
    if isinstance(value, str) and value[:7].lower() == "bearer ":
        return value[7:].strip()
    return value


def is_not_empty(value: Any) -> bool:
    return value is not None and value != ""


def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_jwt(value: Any) -> bool:
    return isinstance(value, str) and bool(JWT_PATTERN.match(value))


def is_uuid4(value: Any) -> bool:
    return isinstance(value, str) and bool(UUID4_PATTERN.match(value))


def is_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return True
    if isinstance(value, int):
        return value in (0, 1)
    return isinstance(value, str) and value.lower() in BOOLEAN_STRINGS


def to_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value == 1
    return BOOLEAN_STRINGS[value.lower()]


def is_int(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return value.is_integer()
    return isinstance(value, str) and bool(INT_PATTERN.match(value))


def to_int(value: Any) -> int:
    return int(value)


def int_between(low: int, high: int) -> Callable[[Any], bool]:
    def predicate(value: Any) -> bool:
        return is_int(value) and low <= int(value) <= high
    return predicate


def length_between(low: int, high: int) -> Callable[[Any], bool]:
    def predicate(value: Any) -> bool:
        return isinstance(value, str) and low <= len(value) <= high
    return predicate


def is_list(value: Any) -> bool:
    return isinstance(value, list)


def min_items(count: int) -> Callable[[Any], bool]:
    def predicate(value: Any) -> bool:
        return len(value) >= count
    return predicate


def is_object(value: Any) -> bool:
    return isinstance(value, dict)


def has_period_bounds(value: Any) -> bool:
    return "start" in value and "end" in value


def has_timestamp_bounds(value: Any) -> bool:
    return parse_timestamp(value["start"]) is not None and parse_timestamp(value["end"]) is not None


def is_ordered_period(value: Any) -> bool:
    return parse_timestamp(value["start"]) <= parse_timestamp(value["end"])


def to_period(value: dict) -> dict:
    return {"start": parse_timestamp(value["start"]), "end": parse_timestamp(value["end"])}


# -- field specs --------------------------------------------------------------

NOT_EMPTY: Check = (is_not_empty, "is empty")
NOT_A_NUMBER = "is not Number value"
CONTENTS_LENGTH = (
    length_between(CONTENTS_MIN_LENGTH, CONTENTS_MAX_LENGTH),
    "contents length must be greater than 1 or less than 50",
)

AUTHORIZATION = FieldSpec(
    "authorization",
    sanitizers=(trim, strip_bearer),
    checks=(NOT_EMPTY, (is_jwt, "is not JWT value")),
)

CONTENTS = FieldSpec("contents", sanitizers=(trim,), checks=(NOT_EMPTY, CONTENTS_LENGTH))

OPTIONAL_CONTENTS = FieldSpec(
    "contents", optional="falsy", sanitizers=(trim,), checks=(NOT_EMPTY, CONTENTS_LENGTH),
)

TAGS = FieldSpec(
    "tags",
    optional="falsy",
    checks=(
        (is_list, "is not Array value"),
        (min_items(1), "Array length must be greater than 1"),
    ),
)

TAG_ID = FieldSpec(
    "tags.*.tagId",
    sanitizers=(trim,),
    checks=(
        NOT_EMPTY,
        (is_string, "is not String value"),
        (is_uuid4, "is not UUID version4 value"),
    ),
)

IS_MAIN_TAG = FieldSpec(
    "tags.*.isMainTag",
    sanitizers=(trim,),
    checks=(NOT_EMPTY, (is_boolean, "is not Boolean value")),
    coerce=to_boolean,
)

_PERIOD_SHAPE = (
    (is_object, "is not Object value"),
)
_PERIOD_VALUES = (
    (has_timestamp_bounds, "start and end must be timestamps"),
    (is_ordered_period, "start must not be after end"),
)

PERIOD = FieldSpec(
    "period",
    checks=(NOT_EMPTY,) + _PERIOD_SHAPE + ((has_period_bounds, "properties is empty"),) + _PERIOD_VALUES,
    coerce=to_period,
)

OPTIONAL_PERIOD = FieldSpec(
    "period",
    optional="falsy",
    checks=(NOT_EMPTY,) + _PERIOD_SHAPE + ((has_period_bounds, "not properties"),) + _PERIOD_VALUES,
    coerce=to_period,
)

IMPORTANT = FieldSpec(
    "important",
    optional="nullable",
    checks=(NOT_EMPTY, (int_between(0, 3), NOT_A_NUMBER)),
    coerce=to_int,
)

CHECKED = FieldSpec(
    "checked",
    optional="nullable",
    sanitizers=(trim,),
    checks=(NOT_EMPTY, (is_boolean, "is not Boolean value")),
    coerce=to_boolean,
)

YEAR = FieldSpec(
    "year", sanitizers=(trim,), checks=(NOT_EMPTY, (is_int, NOT_A_NUMBER)), coerce=to_int,
)

MONTH = FieldSpec(
    "month",
    sanitizers=(trim,),
    checks=(
        NOT_EMPTY,
        (is_int, NOT_A_NUMBER),
        (int_between(0, 11), "month size must be greater than 0 or less than 11"),
    ),
    coerce=to_int,
)

DAY = FieldSpec(
    "day",
    optional="falsy",
    sanitizers=(trim,),
    checks=(
        NOT_EMPTY,
        (is_int, NOT_A_NUMBER),
        (int_between(1, 31), "day size must be greater than 1 or less than 31"),
    ),
    coerce=to_int,
)

TASK_ID = FieldSpec(
    "taskId",
    sanitizers=(trim,),
    checks=(NOT_EMPTY, (is_uuid4, "is not UUID version4 value")),
)

CREATE_TASK_FIELDS = (AUTHORIZATION, CONTENTS, TAGS, TAG_ID, IS_MAIN_TAG, PERIOD, IMPORTANT)
UPDATE_TASK_FIELDS = (
    AUTHORIZATION, TASK_ID, OPTIONAL_CONTENTS, TAGS, TAG_ID, IS_MAIN_TAG,
    OPTIONAL_PERIOD, IMPORTANT, CHECKED,
)
LIST_TASKS_FIELDS = (AUTHORIZATION, YEAR, MONTH, DAY)
TASK_ID_FIELDS = (AUTHORIZATION, TASK_ID)
