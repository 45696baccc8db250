from __future__ import annotations

from typing import Literal

RecurringErrorKind = Literal[
    "invalid_field",
    "invalid_pattern",
    "invalid_event_duration",
    "invalid_range",
    "invalid_event",
]


class RecurringError(Exception):
    kind: RecurringErrorKind
    field: str | None
    value: object

    def __init__(
        self,
        kind: RecurringErrorKind,
        message: str,
        field: str | None = None,
        value: object = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.field = field
        self.value = value

    @classmethod
    def invalid_field(cls, field: str, message: str, value: object) -> RecurringError:
        return cls("invalid_field", message, field=field, value=value)

    @classmethod
    def out_of_range(cls, field: str, value: int, min_val: int, max_val: int) -> RecurringError:
        return cls.invalid_field(field, f"{field} must be {min_val}-{max_val}, got {value}", value)

    @classmethod
    def pattern(cls, message: str) -> RecurringError:
        return cls("invalid_pattern", message)

    @classmethod
    def event_duration(cls, value: object) -> RecurringError:
        return cls(
            "invalid_event_duration",
            f"event duration must be positive, got {value}",
            value=value,
        )

    @classmethod
    def range(cls, message: str) -> RecurringError:
        return cls("invalid_range", message)

    @classmethod
    def event(cls, message: str) -> RecurringError:
        return cls("invalid_event", message)
