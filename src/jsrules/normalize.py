# src/jsrules/normalize.py
from __future__ import annotations

from typing import Callable

from jsrules.labels import Label
from jsrules.locator import find_js_config
from jsrules.lookup import ImportIndex
from jsrules.utils import pkg_join

# ------------------------------------------------------------
# Alias rules: (name, predicate, transform), first match wins.
# A transform returning None leaves the import unchanged.
# ------------------------------------------------------------

# Framework configs that anchor "~/" imports, in lookup order, with the
# subdirectory the alias points into relative to the config's package.
FRAMEWORK_CONFIGS: tuple[tuple[str, str], ...] = (
    ("nuxt", ""),
    ("vue", "src"),
)

Transform = Callable[[str, ImportIndex, Label], "str | None"]


def _strip_root_alias(prefix: str) -> Transform:
    def transform(imp: str, ix: ImportIndex, from_label: Label) -> str | None:
        return imp[len(prefix) :]

    return transform


def framework_alias_base(ix: ImportIndex, from_label: Label) -> str | None:
    """Package that "~/" points at: the nearest nuxt.config package, else vue.config package + "/src"."""
    for config_name, subdir in FRAMEWORK_CONFIGS:
        label = find_js_config(config_name, ix, from_label)
        if label is not None:
            return pkg_join(label.pkg, subdir)
    return None


def _resolve_framework_alias(imp: str, ix: ImportIndex, from_label: Label) -> str | None:
    base = framework_alias_base(ix, from_label)
    if base is None:
        return None
    return pkg_join(base, imp[2:])


def _relative_to_package(imp: str, ix: ImportIndex, from_label: Label) -> str | None:
    return pkg_join(from_label.pkg, imp)


ALIAS_RULES: list[tuple[str, Callable[[str], bool], Transform]] = [
    ("root_at", lambda imp: imp.startswith("@/"), _strip_root_alias("@/")),
    ("root_tilde_tilde", lambda imp: imp.startswith("~~/"), _strip_root_alias("~~/")),
    ("framework_tilde", lambda imp: imp.startswith("~/"), _resolve_framework_alias),
    ("relative", lambda imp: imp.startswith(("../", "./")), _relative_to_package),
]


def normalise_import(imp: str, ix: ImportIndex, from_label: Label) -> str:
    """
    Rewrite a raw import into the canonical key used for index lookups.

    Alias and relative imports become workspace-root-relative paths; bare module
    names ("lodash", "@scope/pkg") come back unchanged.
    """
    for _name, matches, transform in ALIAS_RULES:
        if not matches(imp):
            continue
        out = transform(imp, ix, from_label)
        return imp if out is None else out
    return imp
