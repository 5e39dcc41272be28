from __future__ import annotations

import pytest

from jsrules.labels import Label
from jsrules.utils import norm_relpath, pkg_join, split_ext


def test_label_string_forms():
    assert str(Label(pkg="web", name="b")) == "//web:b"
    assert str(Label(pkg="lib/util", name="util")) == "//lib/util"
    assert str(Label(pkg="", name="jest.config")) == "//:jest.config"
    assert str(Label(repo="npm", pkg="lodash", name="lodash")) == "@npm//lodash"
    assert str(Label(name="b", relative=True)) == ":b"


def test_label_rel_shortens_same_package_only():
    lbl = Label(pkg="web", name="b")
    assert str(lbl.rel("", "web")) == ":b"
    assert str(lbl.rel("", "web/a")) == "//web:b"
    assert lbl.rel("other", "web") is lbl


@pytest.mark.parametrize("s", [":b", "//web:b", "//lib/util", "@npm//lodash", "@r//p:n", "//:root"])
def test_label_parse_round_trip(s):
    assert str(Label.parse(s)) == s


def test_label_parse_rejects_garbage():
    with pytest.raises(ValueError):
        Label.parse("")
    with pytest.raises(ValueError):
        Label.parse("@npm")


def test_same_target_ignores_relative_form():
    assert Label(pkg="web", name="a").same_target(Label(pkg="web", name="a", relative=True))
    assert not Label(pkg="web", name="a").same_target(Label(pkg="web", name="b"))


@pytest.mark.parametrize(
    "elems, expected",
    [
        (("", ".."), ".."),
        (("a", ".."), "."),
        ((".", ".."), ".."),
        (("a/b", ".."), "a"),
        (("web", "./b"), "web/b"),
        (("", "./b"), "b"),
        (("web/a", "../shared/c"), "web/shared/c"),
        (("", "jest.config"), "jest.config"),
        (("/", ".."), "/"),
        ((), ""),
        (("", ""), ""),
    ],
)
def test_pkg_join_matches_go_path_join(elems, expected):
    assert pkg_join(*elems) == expected


def test_norm_relpath_root_is_empty():
    assert norm_relpath(".") == ""
    assert norm_relpath("./web/") == "web"
    assert norm_relpath("web\\a") == "web/a"


def test_split_ext():
    assert split_ext("a.test.js") == ("a.test", ".js")
    assert split_ext("dir/theme.css") == ("theme", ".css")
    assert split_ext("Makefile") == ("Makefile", "")
    assert split_ext(".eslintrc") == ("", ".eslintrc")
