# src/jsrules/analyze.py
from __future__ import annotations

import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------------------------
# JS/TS import extraction (regex + comment stripping; deterministic)
# --------------------------------------------------------------------------------------

JS_ANY_IMPORT_EXPORT_FROM_RE = re.compile(
    r"""(?msx)
    ^\s*
    (?:import|export)\s+
    (?:type\s+)?                 # "import type ..." / "export type ..."
    (?:[^;"'`]*?)                # bindings (may be multiline)
    \sfrom\s*
    ["'](?P<spec>[^"']+)["']
    """
)

JS_IMPORT_SIDE_EFFECT_RE = re.compile(
    r"""(?mx)
    ^\s*import\s*["'](?P<spec>[^"']+)["']
    """
)

JS_DYNAMIC_IMPORT_RE = re.compile(r"""\bimport\s*\(\s*["'](?P<spec>[^"']+)["']\s*\)""")
JS_REQUIRE_RE = re.compile(r"""\brequire\s*\(\s*["'](?P<spec>[^"']+)["']\s*\)""")

VUE_SCRIPT_BLOCK_RE = re.compile(r"""(?is)<script\b[^>]*>(?P<body>.*?)</script\s*>""")

IMPORT_PATTERNS = (
    JS_IMPORT_SIDE_EFFECT_RE,
    JS_ANY_IMPORT_EXPORT_FROM_RE,
    JS_DYNAMIC_IMPORT_RE,
    JS_REQUIRE_RE,  # also covers TS "import X = require(...)"
)


def strip_js_ts_comments(text: str) -> str:
    """
    Remove // and /* */ comments while preserving newlines and string contents.
    Offsets are preserved so match positions still order imports by source position.
    """
    out: list[str] = []
    i = 0
    n = len(text)
    quote = ""  # active string delimiter: ', " or `
    esc = False

    while i < n:
        c = text[i]
        nxt = text[i + 1] if i + 1 < n else ""

        if quote:
            out.append(c)
            if esc:
                esc = False
            elif c == "\\":
                esc = True
            elif c == quote:
                quote = ""
            i += 1
            continue

        if c == "/" and nxt == "/":
            end = text.find("\n", i)
            end = n if end < 0 else end
            out.append(" " * (end - i))
            i = end
            continue

        if c == "/" and nxt == "*":
            end = text.find("*/", i + 2)
            end = n if end < 0 else end + 2
            out.append("".join("\n" if ch == "\n" else " " for ch in text[i:end]))
            i = end
            continue

        if c in ("'", '"', "`"):
            quote = c

        out.append(c)
        i += 1

    return "".join(out)


def script_sources(text: str, filename: str) -> list[str]:
    """Chunks of JS/TS to scan: the <script> blocks of a .vue SFC, otherwise the whole file."""
    if filename.endswith(".vue"):
        return [m.group("body") for m in VUE_SCRIPT_BLOCK_RE.finditer(text)]
    return [text]


def parse_js_ts_imports(text: str) -> list[str]:
    """Import specs in source order, each listed once."""
    cleaned = strip_js_ts_comments(text)
    found: list[tuple[int, str]] = []
    for rx in IMPORT_PATTERNS:
        for m in rx.finditer(cleaned):
            spec = (m.group("spec") or "").strip()
            if spec:
                found.append((m.start("spec"), spec))

    found.sort(key=lambda t: t[0])
    return list(dict.fromkeys(spec for _, spec in found))


class FileAnalyzer:
    """Default file-analysis collaborator: raw import strings of one file in a directory."""

    def __init__(self, *, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def analyze(self, directory: str | Path, filename: str) -> list[str]:
        path = Path(directory) / filename
        if not path.is_file():
            # generated files need not exist on disk yet
            return []

        try:
            text = path.read_text(encoding=self.encoding, errors="replace")
        except OSError as e:
            logger.warning("Could not read %s: %s", path, e)
            return []

        imports: list[str] = []
        for chunk in script_sources(text, filename):
            imports.extend(parse_js_ts_imports(chunk))
        return list(dict.fromkeys(imports))

    __call__ = analyze
