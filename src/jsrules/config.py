# src/jsrules/config.py
from __future__ import annotations

import os
from dataclasses import dataclass, field

from pydantic import BaseModel

from jsrules.utils import bool_from_env

LANGUAGE_NAME = "js"

KIND_JS_LIBRARY = "js_library"
KIND_JEST_TEST = "jest_test"
KIND_JS_IMPORT = "js_import"
KIND_TS_PROJECT = "ts_project"

PUBLIC_VISIBILITY = ["//visibility:public"]


@dataclass(frozen=True)
class KindInfo:
    """How the host merges rules of one kind with what is already declared in a build file."""

    match_any: bool = False
    non_empty_attrs: frozenset[str] = frozenset()
    mergeable_attrs: frozenset[str] = frozenset()
    resolve_attrs: frozenset[str] = frozenset()


@dataclass(frozen=True)
class LoadInfo:
    name: str
    symbols: tuple[str, ...] = field(default_factory=tuple)


_SRCS = frozenset({"srcs"})

KINDS: dict[str, KindInfo] = {
    KIND_JS_LIBRARY: KindInfo(non_empty_attrs=_SRCS, mergeable_attrs=_SRCS, resolve_attrs=frozenset({"deps"})),
    KIND_JEST_TEST: KindInfo(
        non_empty_attrs=_SRCS,
        mergeable_attrs=_SRCS,
        resolve_attrs=frozenset({"deps", "config"}),
    ),
    KIND_JS_IMPORT: KindInfo(
        non_empty_attrs=_SRCS,
        mergeable_attrs=_SRCS,
        resolve_attrs=frozenset({"deps", "config"}),
    ),
    KIND_TS_PROJECT: KindInfo(non_empty_attrs=_SRCS, mergeable_attrs=_SRCS, resolve_attrs=frozenset({"deps"})),
}

# Every kind generated now or in the past must be loadable from here.
LOADS: list[LoadInfo] = [
    LoadInfo(
        name="@benchsci_test_tools_js//:defs.bzl",
        symbols=(KIND_JS_LIBRARY, KIND_TS_PROJECT, KIND_JEST_TEST, KIND_JS_IMPORT),
    ),
]


class JsConfig(BaseModel):
    js_import_extensions: list[str] = []
    generate_tests: bool = True
    js_library_kind: str = KIND_JS_LIBRARY
    npm_workspace_name: str = "npm"

    @classmethod
    def from_env(cls, base: "JsConfig | None" = None) -> "JsConfig":
        """
        Overlay JSRULES_* environment variables on `base` (or defaults).
        Unset or blank variables keep the base value.
        """
        cfg = (base or cls()).model_copy(deep=True)

        exts_raw = os.environ.get("JSRULES_JS_IMPORT_EXTENSIONS", "").strip()
        if exts_raw:
            cfg.js_import_extensions = [e.strip() for e in exts_raw.split(",") if e.strip()]

        cfg.generate_tests = bool_from_env("JSRULES_GENERATE_TESTS", cfg.generate_tests)

        kind = os.environ.get("JSRULES_JS_LIBRARY_KIND", "").strip()
        if kind:
            cfg.js_library_kind = kind

        workspace = os.environ.get("JSRULES_NPM_WORKSPACE", "").strip()
        if workspace:
            cfg.npm_workspace_name = workspace

        return cfg

    def js_kinds(self) -> set[str]:
        return {self.js_library_kind, KIND_JEST_TEST, KIND_TS_PROJECT}
