from __future__ import annotations

import pytest

from jsrules.labels import Label
from jsrules.normalize import ALIAS_RULES, normalise_import

WEB_A = Label(pkg="web/a", name="a")


@pytest.mark.parametrize(
    "imp, expected",
    [
        ("@/components/Button", "components/Button"),
        ("~~/lib/util", "lib/util"),
        ("./b", "web/a/b"),
        ("../shared/c", "web/shared/c"),
        ("../../top", "top"),
        ("lodash", "lodash"),
        ("lodash/fp", "lodash/fp"),
        ("@scope/pkg/sub", "@scope/pkg/sub"),
        ("/abs/path", "/abs/path"),
    ],
)
def test_prefix_rules(build_index, imp, expected):
    ix = build_index({})
    assert normalise_import(imp, ix, WEB_A) == expected


def test_relative_from_root_package(build_index):
    assert normalise_import("./b", build_index({}), Label(pkg="", name="a")) == "b"


def test_tilde_uses_nuxt_config_package(build_index):
    ix = build_index({"app": [("js_library", "nuxt.config", ["nuxt.config.js"])]})

    out = normalise_import("~/components/Nav", ix, Label(pkg="app/pages/blog", name="index"))

    assert out == "app/components/Nav"


def test_tilde_uses_vue_config_src_dir(build_index):
    ix = build_index({"web": [("js_library", "vue.config", ["vue.config.js"])]})

    out = normalise_import("~/components/Nav", ix, Label(pkg="web/src/views", name="Home"))

    assert out == "web/src/components/Nav"


def test_tilde_prefers_nuxt_over_vue(build_index):
    ix = build_index(
        {
            "": [("js_library", "nuxt.config", ["nuxt.config.js"])],
            "web": [("js_library", "vue.config", ["vue.config.js"])],
        }
    )

    assert normalise_import("~/store", ix, Label(pkg="web/x", name="y")) == "store"


def test_tilde_without_config_is_left_unresolved(build_index):
    assert normalise_import("~/store", build_index({}), WEB_A) == "~/store"


def test_normalise_is_pure(build_index):
    ix = build_index({"app": [("js_library", "nuxt.config", ["nuxt.config.js"])]})
    origin = Label(pkg="app/pages", name="index")

    for imp in ("~/a", "./b", "@/c", "d"):
        assert normalise_import(imp, ix, origin) == normalise_import(imp, ix, origin)


def test_alias_rule_order():
    assert [name for name, _, _ in ALIAS_RULES] == ["root_at", "root_tilde_tilde", "framework_tilde", "relative"]
