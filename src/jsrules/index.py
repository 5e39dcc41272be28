# src/jsrules/index.py
from __future__ import annotations

from dataclasses import dataclass

from jsrules.config import LANGUAGE_NAME
from jsrules.labels import Label
from jsrules.rules import Rule
from jsrules.utils import pkg_join, split_ext


@dataclass(frozen=True)
class ImportSpec:
    lang: str
    imp: str


@dataclass(frozen=True)
class FindResult:
    label: Label

    def is_self_import(self, from_label: Label) -> bool:
        return self.label.same_target(from_label)


def imports_for_rule(rule: Rule, pkg: str) -> list[ImportSpec]:
    """
    Import specs under which `rule` can be imported: one per source,
    "<pkg>/<src without extension>", lowercased.
    """
    out: list[ImportSpec] = []
    for src in rule.srcs:
        _, ext = split_ext(src)
        without_suffix = src[: len(src) - len(ext)] if ext else src
        out.append(ImportSpec(lang=LANGUAGE_NAME, imp=pkg_join(pkg, without_suffix).lower()))
    return out


class RuleIndex:
    """
    Workspace-wide import -> rule mapping.

    Built once (add_rule for every rule, then freeze) before any package is resolved;
    resolution only ever reads it.
    """

    def __init__(self) -> None:
        self._by_import: dict[ImportSpec, list[FindResult]] = {}
        self._frozen = False

    def add_rule(self, rule: Rule, pkg: str, repo: str = "") -> None:
        if self._frozen:
            raise RuntimeError("RuleIndex is frozen; rules cannot be added after indexing finished.")
        label = Label(repo=repo, pkg=pkg, name=rule.name)
        for spec in imports_for_rule(rule, pkg):
            results = self._by_import.setdefault(spec, [])
            if any(r.label.same_target(label) for r in results):
                continue
            results.append(FindResult(label=label))

    def freeze(self) -> "RuleIndex":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def find_rules_by_import(self, spec: ImportSpec, lang: str) -> list[FindResult]:
        if spec.lang != lang:
            return []
        return list(self._by_import.get(spec, []))

    def __len__(self) -> int:
        return len(self._by_import)
