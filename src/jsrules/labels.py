# src/jsrules/labels.py
from __future__ import annotations

import posixpath
import re
from dataclasses import dataclass

_LABEL_RE = re.compile(
    r"""^
    (?:@(?P<repo>[A-Za-z0-9_.\-]*))?
    (?://(?P<pkg>[^:]*))?
    (?::(?P<name>.+))?
    $""",
    re.X,
)


@dataclass(frozen=True)
class Label:
    """
    Build label: "@repo//pkg:name", "//pkg:name", or the package-relative ":name".

    Equality used for self-import checks ignores `relative` (see `same_target`).
    """

    repo: str = ""
    pkg: str = ""
    name: str = ""
    relative: bool = False

    def __str__(self) -> str:
        if self.relative:
            return f":{self.name}"
        repo = f"@{self.repo}" if self.repo else ""
        if self.pkg and posixpath.basename(self.pkg) == self.name:
            return f"{repo}//{self.pkg}"
        return f"{repo}//{self.pkg}:{self.name}"

    def rel(self, repo: str, pkg: str) -> "Label":
        """Shorten to ":name" when the label lives in (repo, pkg); otherwise unchanged."""
        if self.relative or self.repo != repo:
            return self
        if self.pkg == pkg:
            return Label(name=self.name, relative=True)
        return Label(pkg=self.pkg, name=self.name)

    def same_target(self, other: "Label") -> bool:
        return (self.repo, self.pkg, self.name) == (other.repo, other.pkg, other.name)

    @classmethod
    def parse(cls, s: str) -> "Label":
        raw = (s or "").strip()
        m = _LABEL_RE.match(raw)
        if not raw or not m:
            raise ValueError(f"Invalid label: {s!r}")

        repo = m.group("repo") or ""
        pkg = m.group("pkg")
        name = m.group("name")

        if pkg is None:
            if repo or not name:
                raise ValueError(f"Invalid label: {s!r}")
            return cls(name=name, relative=True)

        pkg = pkg.rstrip("/")
        if name is None:
            name = posixpath.basename(pkg)
            if not name:
                raise ValueError(f"Label has no target name: {s!r}")
        return cls(repo=repo, pkg=pkg, name=name)
