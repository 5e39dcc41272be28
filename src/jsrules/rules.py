# src/jsrules/rules.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Rule:
    """
    In-memory build target (one buildable unit of a package) before the host serializes it.

    attrs holds everything else: "srcs", "deps", "config", "visibility".
    """

    kind: str
    name: str
    attrs: dict[str, Any] = field(default_factory=dict)

    def attr(self, key: str) -> Any:
        return self.attrs.get(key)

    def set_attr(self, key: str, value: Any) -> None:
        self.attrs[key] = value

    def del_attr(self, key: str) -> None:
        self.attrs.pop(key, None)

    def attr_strings(self, key: str) -> list[str]:
        """Value of a string-list attribute; [] when missing or not a list of strings."""
        v = self.attrs.get(key)
        if not isinstance(v, list) or not all(isinstance(x, str) for x in v):
            return []
        return list(v)

    @property
    def srcs(self) -> list[str]:
        return self.attr_strings("srcs")

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "name": self.name, "attrs": dict(sorted(self.attrs.items()))}


@dataclass
class BuildFile:
    """Rules already declared in one package's build file, as the host read them."""

    pkg: str
    rules: list[Rule] = field(default_factory=list)

    def rules_of_kind(self, kind: str) -> list[Rule]:
        return [r for r in self.rules if r.kind == kind]
