from __future__ import annotations

import pytest

from jsrules.index import RuleIndex
from jsrules.rules import Rule


@pytest.fixture(autouse=True)
def _clean_jsrules_env(monkeypatch: pytest.MonkeyPatch):
    for name in (
        "JSRULES_JS_IMPORT_EXTENSIONS",
        "JSRULES_GENERATE_TESTS",
        "JSRULES_JS_LIBRARY_KIND",
        "JSRULES_NPM_WORKSPACE",
        "JSRULES_REQUEST_JSON",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def build_index():
    """{pkg: [(kind, name, [srcs...]), ...]} -> frozen RuleIndex"""

    def _build(rules_by_pkg: dict[str, list[tuple[str, str, list[str]]]]) -> RuleIndex:
        ix = RuleIndex()
        for pkg, rules in rules_by_pkg.items():
            for kind, name, srcs in rules:
                ix.add_rule(Rule(kind=kind, name=name, attrs={"srcs": list(srcs)}), pkg)
        return ix.freeze()

    return _build
