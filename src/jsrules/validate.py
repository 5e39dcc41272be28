# src/jsrules/validate.py
from __future__ import annotations

from typing import Any

from jsrules.config import KIND_JS_IMPORT


def _must_be_list(obj: Any, label: str) -> list[Any]:
    if not isinstance(obj, list):
        raise RuntimeError(f"{label} must be a list, got {type(obj).__name__}")
    return obj


def _check_rule(pkg: str, rule: Any) -> None:
    if not isinstance(rule, dict):
        raise RuntimeError(f"{pkg}: rule entry is not an object: {rule!r}")
    name = rule.get("name")
    attrs = rule.get("attrs") or {}

    srcs = attrs.get("srcs")
    if not isinstance(srcs, list) or not srcs:
        raise RuntimeError(f"{pkg}:{name}: generated rule has no srcs")

    deps = attrs.get("deps")
    if deps is None:
        return
    deps = _must_be_list(deps, f"{pkg}:{name} deps")
    if not deps:
        raise RuntimeError(f"{pkg}:{name}: empty deps must be omitted")
    if deps != sorted(set(deps)):
        raise RuntimeError(f"{pkg}:{name}: deps are not sorted and unique: {deps}")


def validate_report(report: dict[str, Any], known_kinds: set[str]) -> None:
    """
    Report invariants checked before anything is emitted or uploaded:
    - every generated rule has srcs
    - deps, when present, are non-empty, sorted and unique
    - stale entries only name kinds this language generates
    """
    packages = _must_be_list(report.get("packages"), "packages")
    kinds = set(known_kinds) | {KIND_JS_IMPORT}

    for p in packages:
        if not isinstance(p, dict):
            raise RuntimeError(f"package entry is not an object: {p!r}")
        pkg = str(p.get("pkg", ""))

        for rule in _must_be_list(p.get("rules"), f"{pkg} rules"):
            _check_rule(pkg, rule)

        for stale in _must_be_list(p.get("empty"), f"{pkg} empty"):
            kind = stale.get("kind") if isinstance(stale, dict) else None
            if kind not in kinds:
                raise RuntimeError(f"{pkg}: stale rule of unknown kind {kind!r}")
