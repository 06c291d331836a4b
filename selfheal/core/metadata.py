from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from selfheal.core.locator import Locator
from selfheal.core.node import Node

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Scored(Generic[T]):
    value: T
    score: float


@dataclass(frozen=True, slots=True)
class CallerInfo:
    class_name: str
    method_name: str

    @classmethod
    def from_stack(cls, skip: int = 1) -> CallerInfo | None:
        """Describes the frame ``skip`` levels above the caller."""

        frame = inspect.currentframe()
        try:
            for _ in range(skip + 1):
                if frame is None:
                    return None
                frame = frame.f_back
            if frame is None:
                return None
            owner = frame.f_locals.get("self")
            class_name = type(owner).__qualname__ if owner is not None else frame.f_globals.get("__name__", "")
            return cls(class_name=class_name, method_name=frame.f_code.co_name)
        finally:
            del frame


@dataclass(slots=True)
class HealOutcome:
    original: Locator
    healed: Locator
    score: float
    node: Node
    candidates: list[Scored[Locator]] = field(default_factory=list)
    path_persisted: bool = False
    report_saved: bool = False
