from __future__ import annotations

import logging

from jsrules.config import JsConfig
from jsrules.labels import Label
from jsrules.resolve import resolve_deps, resolve_rule
from jsrules.rules import Rule

CFG = JsConfig()


def _rule(kind: str, name: str, src: str) -> Rule:
    return Rule(kind=kind, name=name, attrs={"srcs": [src]})


def test_sibling_import_resolves_to_relative_label(build_index, caplog):
    ix = build_index({"web": [("ts_project", "a", ["a.ts"]), ("ts_project", "b", ["b.ts"])]})
    rule = _rule("ts_project", "a", "a.ts")

    with caplog.at_level(logging.DEBUG, logger="jsrules"):
        resolve_rule(CFG, ix, rule, ["./b"], Label(pkg="web", name="a"))

    assert rule.attr("deps") == [":b"]
    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]


def test_bare_import_becomes_npm_dependency(build_index, caplog):
    ix = build_index({"web": [("ts_project", "a", ["a.ts"])]})
    rule = _rule("ts_project", "a", "a.ts")

    with caplog.at_level(logging.WARNING, logger="jsrules"):
        resolve_rule(CFG, ix, rule, ["c"], Label(pkg="web", name="a"))

    assert rule.attr("deps") == ["@npm//c"]
    assert caplog.records == []


def test_cross_package_and_alias_imports(build_index):
    ix = build_index(
        {
            "web": [("ts_project", "a", ["a.ts"])],
            "lib": [("js_library", "util", ["util.js"])],
            "components": [("js_library", "Nav", ["Nav.vue"])],
        }
    )

    deps = resolve_deps(CFG, ix, ["../lib/util", "@/components/nav"], Label(pkg="web", name="a"))

    assert deps == ["//components:Nav", "//lib:util"]


def test_deps_are_sorted_and_unique(build_index):
    ix = build_index({"web": [("ts_project", "a", ["a.ts"]), ("ts_project", "b", ["b.ts"])]})
    imports = ["lodash/fp", "./b", "@scope/pkg/sub", "lodash", "./b", "@scope/pkg"]

    deps = resolve_deps(CFG, ix, imports, Label(pkg="web", name="a"))

    assert deps == [":b", "@npm//@scope/pkg", "@npm//lodash"]
    assert deps == resolve_deps(CFG, ix, list(reversed(imports)), Label(pkg="web", name="a"))


def test_self_import_is_silently_skipped(build_index, caplog):
    ix = build_index({"web": [("ts_project", "a", ["a.ts"])]})
    rule = _rule("ts_project", "a", "a.ts")

    with caplog.at_level(logging.DEBUG, logger="jsrules"):
        resolve_rule(CFG, ix, rule, ["./a"], Label(pkg="web", name="a"))

    assert rule.attr("deps") is None
    assert caplog.records == []


def test_ambiguous_import_is_dropped_and_logged(build_index, caplog):
    ix = build_index(
        {
            "web": [
                ("ts_project", "a", ["a.ts"]),
                ("ts_project", "b", ["b.ts"]),
                ("js_library", "b_js", ["b.js"]),
            ]
        }
    )

    with caplog.at_level(logging.WARNING, logger="jsrules"):
        deps = resolve_deps(CFG, ix, ["./b", "react"], Label(pkg="web", name="a"))

    assert deps == ["@npm//react"]
    assert len(caplog.records) == 1
    msg = caplog.records[0].getMessage()
    assert "//web:b" in msg and "//web:b_js" in msg and '"web/b"' in msg


def test_unresolved_alias_is_logged_not_external(build_index, caplog):
    ix = build_index({"web": [("ts_project", "a", ["a.ts"])]})

    with caplog.at_level(logging.WARNING, logger="jsrules"):
        deps = resolve_deps(CFG, ix, ["~/store"], Label(pkg="web", name="a"))

    assert deps == []
    messages = [r.getMessage() for r in caplog.records]
    assert messages == ["Import ~/store not found."]


def test_missing_local_file_falls_back_to_external(build_index):
    # "not indexed" is read as "external": a relative import of a missing file
    # normalises to "web/missing" and is taken for the npm package "web".
    ix = build_index({"web": [("ts_project", "a", ["a.ts"])]})

    assert resolve_deps(CFG, ix, ["./missing"], Label(pkg="web", name="a")) == ["@npm//web"]


def test_existing_deps_are_replaced_and_empty_deps_omitted(build_index):
    ix = build_index({"web": [("ts_project", "a", ["a.ts"])]})
    rule = _rule("ts_project", "a", "a.ts")
    rule.set_attr("deps", [":stale"])

    resolve_rule(CFG, ix, rule, [], Label(pkg="web", name="a"))

    assert "deps" not in rule.attrs


def test_jest_test_gets_config_from_ancestor(build_index):
    ix = build_index(
        {
            "web": [("js_library", "jest.config", ["jest.config.js"]), ("ts_project", "a", ["a.ts"])],
            "web/tests/unit/deep": [("jest_test", "a.test", ["a.test.js"])],
        }
    )
    rule = _rule("jest_test", "a.test", "a.test.js")

    resolve_rule(CFG, ix, rule, ["../../../a"], Label(pkg="web/tests/unit/deep", name="a.test"))

    assert rule.attr("config") == "//web:jest.config"
    assert rule.attr("deps") == ["//web:a"]


def test_jest_test_config_in_same_package_is_relative(build_index):
    ix = build_index({"web": [("js_library", "jest.config", ["jest.config.js"])]})
    rule = _rule("jest_test", "a.test", "a.test.js")

    resolve_rule(CFG, ix, rule, [], Label(pkg="web", name="a.test"))

    assert rule.attr("config") == ":jest.config"


def test_jest_test_without_config_has_no_config_attr(build_index, caplog):
    ix = build_index({})
    rule = _rule("jest_test", "a.test", "a.test.js")

    with caplog.at_level(logging.WARNING, logger="jsrules"):
        resolve_rule(CFG, ix, rule, [], Label(pkg="web", name="a.test"))

    assert "config" not in rule.attrs
    assert caplog.records == []


def test_non_test_rules_never_get_config(build_index):
    ix = build_index({"web": [("js_library", "jest.config", ["jest.config.js"])]})
    rule = _rule("ts_project", "a", "a.ts")

    resolve_rule(CFG, ix, rule, [], Label(pkg="web", name="a"))

    assert "config" not in rule.attrs


def test_custom_npm_workspace(build_index):
    cfg = JsConfig(npm_workspace_name="deps")

    assert resolve_deps(cfg, build_index({}), ["vue"], Label(pkg="", name="x")) == ["@deps//vue"]
