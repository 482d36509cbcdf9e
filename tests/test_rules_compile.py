from __future__ import annotations

import re

from importmap_manifest.rules import (
    AnyOf,
    LiteralRule,
    NeverMatch,
    PatternRule,
    compile_rule,
    compile_rule_set,
)


def test_compile_rule_shapes() -> None:
    assert compile_rule(None, "include").value is None
    assert compile_rule("", "include").value is None
    assert compile_rule([], "include").value is None
    assert compile_rule("one.js", "include").value == LiteralRule("one.js")
    pattern = re.compile("two")
    assert compile_rule(pattern, "include").value == PatternRule(pattern)
    compiled = compile_rule(["one.js", pattern], "exclude")
    assert compiled.ok
    assert isinstance(compiled.value, AnyOf)
    assert compiled.value.matches("two.js")
    assert compiled.value.matches("one.js")
    assert not compiled.value.matches("three.js")


def test_literal_rule_is_exact() -> None:
    rule = LiteralRule("one.js")
    assert rule.matches("one.js")
    assert not rule.matches("one.js.map")


def test_unsupported_rule_reports_and_never_matches() -> None:
    outcome = compile_rule(lambda name: True, "include")
    assert isinstance(outcome.value, NeverMatch)
    assert outcome.value.shape == "function"
    assert not outcome.value.matches("one.js")
    assert [diagnostic.option for diagnostic in outcome.diagnostics] == ["include"]
    assert outcome.diagnostics[0].kind == "config"


def test_unsupported_member_only_disables_itself() -> None:
    outcome = compile_rule(["one.js", 42], "include")
    assert len(outcome.diagnostics) == 1
    assert outcome.value is not None
    assert outcome.value.matches("one.js")
    assert not outcome.value.matches("42")


def test_rule_set_include_then_exclude() -> None:
    outcome = compile_rule_set(re.compile(r"\.js$"), "vendor.js")
    rules = outcome.value
    assert rules.accepts("one.js")
    assert not rules.accepts("vendor.js")
    assert not rules.accepts("one.css")


def test_unsupported_exclude_removes_nothing() -> None:
    outcome = compile_rule_set(None, {"bad": "shape"})
    assert outcome.diagnostics[0].option == "exclude"
    assert outcome.value.accepts("one.js")
