from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Union

from importmap_manifest.diagnostics import Diagnostic, Outcome


@dataclass(frozen=True)
class LiteralRule:
    value: str

    def matches(self, name: str) -> bool:
        return name == self.value


@dataclass(frozen=True)
class PatternRule:
    pattern: re.Pattern[str]

    def matches(self, name: str) -> bool:
        return self.pattern.search(name) is not None


@dataclass(frozen=True)
class AnyOf:
    rules: tuple[Rule, ...]

    def matches(self, name: str) -> bool:
        return any(rule.matches(name) for rule in self.rules)


@dataclass(frozen=True)
class NeverMatch:
    shape: str

    def matches(self, name: str) -> bool:
        return False


Rule = Union[LiteralRule, PatternRule, AnyOf, NeverMatch]


def compile_rule(raw: Any, option: str) -> Outcome[Rule | None]:
    if raw is None or raw == "":
        return Outcome(value=None)
    if isinstance(raw, (list, tuple)):
        if not raw:
            return Outcome(value=None)
        members: list[Rule] = []
        diagnostics: list[Diagnostic] = []
        for item in raw:
            outcome = _compile_single(item, option)
            members.append(outcome.value)
            diagnostics.extend(outcome.diagnostics)
        return Outcome(value=AnyOf(rules=tuple(members)), diagnostics=diagnostics)
    single = _compile_single(raw, option)
    return Outcome(value=single.value, diagnostics=single.diagnostics)


def _compile_single(raw: Any, option: str) -> Outcome[Rule]:
    if isinstance(raw, re.Pattern):
        return Outcome(value=PatternRule(pattern=raw))
    if isinstance(raw, str):
        return Outcome(value=LiteralRule(value=raw))
    shape = type(raw).__name__
    diagnostic = Diagnostic(
        kind="config",
        option=option,
        message=f"unsupported type provided for {option} option: {shape}",
    )
    return Outcome(value=NeverMatch(shape=shape), diagnostics=[diagnostic])


@dataclass(frozen=True)
class RuleSet:
    include: Rule | None = None
    exclude: Rule | None = None

    def accepts(self, name: str) -> bool:
        if self.include is not None and not self.include.matches(name):
            return False
        if self.exclude is not None and self.exclude.matches(name):
            return False
        return True


def compile_rule_set(include: Any, exclude: Any) -> Outcome[RuleSet]:
    include_outcome = compile_rule(include, "include")
    exclude_outcome = compile_rule(exclude, "exclude")
    return Outcome(
        value=RuleSet(include=include_outcome.value, exclude=exclude_outcome.value),
        diagnostics=[*include_outcome.diagnostics, *exclude_outcome.diagnostics],
    )
