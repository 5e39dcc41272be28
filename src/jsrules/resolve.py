# src/jsrules/resolve.py
from __future__ import annotations

import logging

from jsrules.config import KIND_JEST_TEST, JsConfig
from jsrules.external import external_label
from jsrules.labels import Label
from jsrules.locator import find_js_config
from jsrules.lookup import Ambiguous, ImportIndex, NotFound, Resolved, Skipped, resolve_with_index
from jsrules.normalize import normalise_import
from jsrules.rules import Rule

logger = logging.getLogger(__name__)

JEST_CONFIG_NAME = "jest"


def resolve_deps(cfg: JsConfig, ix: ImportIndex, imports: list[str], from_label: Label) -> list[str]:
    """
    Turn raw imports into dependency labels (sorted, unique).

    Unresolvable imports are dropped with a warning; nothing here raises for a single import.
    """
    dep_set: set[str] = set()

    for raw in imports:
        imp = normalise_import(raw, ix, from_label)
        outcome = resolve_with_index(ix, imp, from_label)

        if isinstance(outcome, Skipped):
            continue

        if isinstance(outcome, NotFound):
            # npm packages are not indexed, so "not found" is where they land.
            ext = external_label(imp, cfg.npm_workspace_name)
            if ext is not None:
                dep_set.add(ext)
            else:
                logger.warning("Import %s not found.", imp)
            continue

        if isinstance(outcome, Ambiguous):
            logger.warning("%s", outcome.message)
            continue

        if isinstance(outcome, Resolved):
            dep_set.add(str(outcome.label.rel(from_label.repo, from_label.pkg)))

    return sorted(dep_set)


def resolve_rule(cfg: JsConfig, ix: ImportIndex, rule: Rule, imports: list[str], from_label: Label) -> None:
    """
    Set `deps` (omitted when empty) and, for jest_test rules, `config` on a generated rule.
    """
    rule.del_attr("deps")

    deps = resolve_deps(cfg, ix, imports, from_label)
    if deps:
        rule.set_attr("deps", deps)

    if rule.kind == KIND_JEST_TEST:
        label = find_js_config(JEST_CONFIG_NAME, ix, from_label)
        if label is None:
            logger.debug("Jest config not found for %s", from_label)
        else:
            rule.set_attr("config", str(label.rel(from_label.repo, from_label.pkg)))
