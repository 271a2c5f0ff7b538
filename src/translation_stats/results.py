"""Result types returned by update steps and by the updater."""

from dataclasses import dataclass, field
from typing import Any, Generic, Optional, TypeVar, Union

from .errors import TranslationError

T = TypeVar("T")


@dataclass
class StepResult(Generic[T]):
    """Outcome of a single update step.

    ``log`` holds the step's human-readable, HTML-escaped messages. Exactly
    one of ``data`` / ``error`` is meaningful, depending on ``ok``.
    """

    log: list[str] = field(default_factory=list)
    data: Optional[T] = None
    error: Optional[TranslationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, log: str | list[str], data: T) -> "StepResult[T]":
        return cls(log=[log] if isinstance(log, str) else list(log), data=data)

    @classmethod
    def failure(cls, log: str | list[str], error: TranslationError) -> "StepResult[T]":
        return cls(log=[log] if isinstance(log, str) else list(log), error=error)


@dataclass(frozen=True)
class UpdateSuccess:
    """Translation was downloaded and compiled."""

    log: tuple[str, ...]
    data: Any = None

    ok = True

    def to_dict(self) -> dict:
        return {"ok": True, "log": list(self.log), "data": self.data}


@dataclass(frozen=True)
class UpdateFailure:
    """Translation update stopped at the first failing step."""

    log: tuple[str, ...]
    error: TranslationError
    step: Optional[str] = None  # Pipeline state that failed

    ok = False

    def to_dict(self) -> dict:
        return {
            "ok": False,
            "log": list(self.log),
            "error": self.error.to_dict(),
            "step": self.step,
        }


UpdateResult = Union[UpdateSuccess, UpdateFailure]
