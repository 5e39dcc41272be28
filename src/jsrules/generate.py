# src/jsrules/generate.py
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from jsrules.analyze import FileAnalyzer
from jsrules.config import (
    KIND_JEST_TEST,
    KIND_JS_IMPORT,
    KIND_TS_PROJECT,
    PUBLIC_VISIBILITY,
    JsConfig,
)
from jsrules.rules import BuildFile, Rule
from jsrules.utils import split_ext

logger = logging.getLogger(__name__)

Analyzer = Callable[[str | Path, str], list[str]]

JS_SOURCE_SUFFIXES: tuple[str, ...] = (".vue", ".js", ".jsx", ".tsx", ".ts")

# Files with a JS suffix that are still not given a rule of their own.
E2E_TEST_SUFFIX = "e2e.test.js"
LOAD_TEST_SUFFIX = "k6.js"
JEST_SUFFIX = ".test.js"


@dataclass
class GenerateArgs:
    config: JsConfig
    rel: str  # package path, "" at the workspace root
    dir: str | Path  # directory on disk
    regular_files: list[str] = field(default_factory=list)
    gen_files: list[str] = field(default_factory=list)
    build_file: BuildFile | None = None
    analyzer: Analyzer | None = None


@dataclass
class GenerateResult:
    # gen[i] is resolved with imports[i]
    gen: list[Rule] = field(default_factory=list)
    imports: list[list[str]] = field(default_factory=list)
    # previously declared rules whose sources are gone
    empty: list[Rule] = field(default_factory=list)


def import_rule_suffix(filename: str) -> str:
    """"_" + extension without dots: "theme.css" -> "_css"."""
    _, ext = split_ext(filename)
    return "_" + ext.replace(".", "")


def is_import_only(filename: str, cfg: JsConfig) -> bool:
    return any(filename.endswith(ext) for ext in cfg.js_import_extensions)


def is_excluded(filename: str, cfg: JsConfig) -> bool:
    """True when a file gets no rule of its own (not a JS source, or an e2e/load/disabled test)."""
    if not filename.endswith(JS_SOURCE_SUFFIXES):
        return True
    if filename.endswith((LOAD_TEST_SUFFIX, E2E_TEST_SUFFIX)):
        return True
    return not cfg.generate_tests and filename.endswith(JEST_SUFFIX)


def _new_rule(kind: str, name: str, src: str, public: bool) -> Rule:
    rule = Rule(kind=kind, name=name)
    rule.set_attr("srcs", [src])
    if public:
        # TODO: derive visibility from package boundaries instead of making everything public
        rule.set_attr("visibility", list(PUBLIC_VISIBILITY))
    return rule


# (predicate, kind, public); first match wins
KIND_TABLE: list[tuple[Callable[[str], bool], Callable[[JsConfig], str], bool]] = [
    (lambda f: f.endswith((JEST_SUFFIX, "test.ts")), lambda cfg: KIND_JEST_TEST, False),
    (lambda f: f.endswith((".ts", ".tsx")), lambda cfg: KIND_TS_PROJECT, True),
    (lambda f: True, lambda cfg: cfg.js_library_kind, True),
]


def classify_file(filename: str, cfg: JsConfig) -> tuple[str, bool]:
    """(kind, public) for a JS source file that passed `is_excluded`."""
    for matches, kind_of, public in KIND_TABLE:
        if matches(filename):
            return kind_of(cfg), public
    raise AssertionError("KIND_TABLE has a catch-all row")


def shared_stems(rel: str, files: list[str]) -> set[str]:
    """Stems carried by more than one file ("Nav.ts" + "Nav.vue"); those rules are named stem + suffix."""
    counts = Counter(split_ext(f)[0] for f in files)
    shared = {stem for stem, n in counts.items() if n > 1}
    for stem in sorted(shared):
        logger.info("%s: several files share the stem %r; naming their rules by extension", rel or "//", stem)
    return shared


def generate_rules(args: GenerateArgs) -> GenerateResult:
    """
    Rules for the files of one package, their raw imports, and stale declared rules.

    No index lookups happen here; imports are resolved later by `resolve_rule`.
    """
    cfg = args.config
    analyze = args.analyzer or FileAnalyzer().analyze
    files = [*args.regular_files, *args.gen_files]

    result = GenerateResult()
    js_files: list[str] = []
    js_import_files: list[str] = []
    shared = shared_stems(args.rel, [f for f in files if not is_import_only(f, cfg) and not is_excluded(f, cfg)])

    for f in files:
        stem, _ = split_ext(f)

        if is_import_only(f, cfg):
            result.gen.append(_new_rule(KIND_JS_IMPORT, stem + import_rule_suffix(f), f, public=True))
            result.imports.append([])
            js_import_files.append(f)
            continue

        if is_excluded(f, cfg):
            js_import_files.append(f)
            continue

        kind, public = classify_file(f, cfg)
        name = stem + import_rule_suffix(f) if stem in shared else stem
        result.gen.append(_new_rule(kind, name, f, public=public))
        result.imports.append(list(analyze(args.dir, f)))
        js_files.append(f)

    result.empty.extend(generate_empty(args.build_file, js_files, cfg.js_kinds()))
    if cfg.js_import_extensions:
        result.empty.extend(generate_empty(args.build_file, js_import_files, {KIND_JS_IMPORT}))

    return result


def generate_empty(build_file: BuildFile | None, files: list[str], known_kinds: set[str]) -> list[Rule]:
    """
    Declared rules of `known_kinds` none of whose sources is in `files`,
    grouped by kind (sorted), declaration order within a kind.

    A rule whose srcs is set but is not a non-empty string list (a glob call, a
    select, a variable) is left alone.
    """
    if build_file is None:
        return []

    known_files = set(files)
    empty: list[Rule] = []
    for r in (r for kind in sorted(known_kinds) for r in build_file.rules_of_kind(kind)):
        srcs = r.attr_strings("srcs")
        if not srcs and r.attr("srcs") is not None:
            continue
        if any(src in known_files for src in srcs):
            continue
        empty.append(Rule(kind=r.kind, name=r.name))
    return empty
