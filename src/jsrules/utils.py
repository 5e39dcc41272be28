# src/jsrules/utils.py
from __future__ import annotations

import hashlib
import json
import os
import posixpath
import re
from datetime import datetime, timezone
from typing import Any


def utc_ts() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%SZ")


def sha256_bytes(b: bytes) -> str:
    h = hashlib.sha256()
    h.update(b)
    return h.hexdigest()


def sha256_text(s: str) -> str:
    return sha256_bytes(s.encode("utf-8"))


def bool_from_env(name: str, default: bool) -> bool:
    v = os.environ.get(name, "").strip()
    if not v:
        return default
    return v not in ("0", "false", "False", "no", "NO", "off", "OFF")


# -----------------------------
# Stable fingerprint helpers
# -----------------------------
# Used for deterministic request ids and report fingerprints.
# They MUST be stable across processes/reruns for the same logical input.

VOLATILE_KEYS_DEFAULT: set[str] = {
    "generated_at",
    "request_id",
}


def _strip_volatile(obj: Any, volatile_keys: set[str]) -> Any:
    if isinstance(obj, dict):
        out: dict[str, Any] = {}
        for k, v in obj.items():
            if k in volatile_keys:
                continue
            out[k] = _strip_volatile(v, volatile_keys)
        return out
    if isinstance(obj, list):
        return [_strip_volatile(x, volatile_keys) for x in obj]
    return obj


def stable_json_dumps(obj: Any) -> str:
    """
    Deterministic JSON serialization for JSON-like objects.
    - sort keys
    - stable separators
    - no ASCII-forcing (keep unicode stable)
    """
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def stable_json_fingerprint_sha256(obj: Any, volatile_keys: set[str] | None = None) -> str:
    vk = set(VOLATILE_KEYS_DEFAULT) if volatile_keys is None else set(volatile_keys)
    return sha256_text(stable_json_dumps(_strip_volatile(obj, vk)))


# -----------------------------
# Package path helpers
# -----------------------------

_PATH_SEP_RE = re.compile(r"[\\]+")


def norm_relpath(path: str) -> str:
    """
    Workspace-relative package path for a directory.
    - converts backslashes to forward slashes
    - strips leading "./" and leading "/"
    - collapses duplicate slashes
    - the workspace root itself is "" (not ".")
    """
    p = (path or "").strip()
    p = _PATH_SEP_RE.sub("/", p)
    while p.startswith("./"):
        p = p[2:]
    p = p.lstrip("/")
    p = re.sub(r"/{2,}", "/", p)
    p = p.rstrip("/")
    return "" if p == "." else p


def pkg_join(*elems: str) -> str:
    """
    Slash-separated join of package path elements:
    empty elements are ignored, an all-empty join is "", and the result is cleaned
    ("a/../.." -> "..", "" + ".." -> "..", "/" + ".." -> "/").
    """
    joined = "/".join(e for e in elems if e)
    if not joined:
        return ""
    cleaned = posixpath.normpath(joined)
    # normpath keeps a leading "//"
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def split_ext(filename: str) -> tuple[str, str]:
    """("a.test.js") -> ("a.test", ".js"); extension is the last dot segment of the base name."""
    base = posixpath.basename(filename)
    idx = base.rfind(".")
    if idx < 0:
        return base, ""
    # ".eslintrc" -> ("", ".eslintrc")
    return base[:idx], base[idx:]
