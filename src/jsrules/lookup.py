# src/jsrules/lookup.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, Union

from jsrules.config import LANGUAGE_NAME
from jsrules.index import FindResult, ImportSpec
from jsrules.labels import Label

SKIP_SELF_IMPORT = "self-import"


class ImportIndex(Protocol):
    def find_rules_by_import(self, spec: ImportSpec, lang: str) -> list[FindResult]: ...


@dataclass(frozen=True)
class Resolved:
    label: Label


@dataclass(frozen=True)
class Skipped:
    reason: str = SKIP_SELF_IMPORT


@dataclass(frozen=True)
class NotFound:
    pass


@dataclass(frozen=True)
class Ambiguous:
    imp: str
    from_label: Label
    candidates: tuple[Label, ...] = field(default_factory=tuple)

    @property
    def message(self) -> str:
        a, b = self.candidates[0], self.candidates[1]
        return f'multiple rules ({a} and {b}) may be imported with "{self.imp}" from {self.from_label}'


ResolutionOutcome = Union[Resolved, Skipped, NotFound, Ambiguous]


def resolve_with_index(ix: ImportIndex, imp: str, from_label: Label) -> ResolutionOutcome:
    """
    Look a canonical import up in the index.

    More than one match is ambiguous even when one of them is the importing rule itself;
    a single match that is the importing rule is skipped.
    """
    matches = ix.find_rules_by_import(ImportSpec(lang=LANGUAGE_NAME, imp=imp), LANGUAGE_NAME)
    if not matches:
        return NotFound()
    if len(matches) > 1:
        return Ambiguous(imp=imp, from_label=from_label, candidates=tuple(m.label for m in matches))
    if matches[0].is_self_import(from_label):
        return Skipped()
    return Resolved(label=matches[0].label)
