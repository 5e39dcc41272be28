# src/jsrules/external.py
from __future__ import annotations

# Node's module resolution prefixes plus the common bundler aliases, so an
# unresolved alias import is never mistaken for an npm package.
SOURCE_PREFIXES: tuple[str, ...] = ("./", "/", "../", "~/", "@/", "~~/")


def is_npm_dependency(imp: str) -> bool:
    return not imp.startswith(SOURCE_PREFIXES)


def npm_package_name(imp: str) -> str | None:
    """
    "lodash/fp" -> "lodash", "@scope/pkg/sub" -> "@scope/pkg".
    None for path-like imports and for specs with no usable package name ("", "@scope").
    """
    s = (imp or "").strip()
    if not s or not is_npm_dependency(s):
        return None

    parts = s.split("/")
    name = parts[0]
    if name.startswith("@"):
        if len(parts) < 2 or not parts[1] or name == "@":
            return None
        name = f"{name}/{parts[1]}"
    return name or None


def external_label(imp: str, workspace: str) -> str | None:
    """Dependency label for an npm import, e.g. "@npm//lodash"; None when `imp` is not a package."""
    name = npm_package_name(imp)
    if name is None:
        return None
    return f"@{workspace}//{name}"
