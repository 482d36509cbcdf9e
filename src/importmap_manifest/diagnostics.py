from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Literal, TypeVar

T = TypeVar("T")

DiagnosticKind = Literal["config", "network"]


@dataclass(frozen=True)
class Diagnostic:
    kind: DiagnosticKind
    option: str
    message: str

    def __str__(self) -> str:
        return f"[importmap] {self.option}: {self.message}"


@dataclass
class Outcome(Generic[T]):
    value: T
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics
