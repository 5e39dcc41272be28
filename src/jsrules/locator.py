# src/jsrules/locator.py
from __future__ import annotations

import logging

from jsrules.labels import Label
from jsrules.lookup import ImportIndex, Resolved, resolve_with_index
from jsrules.utils import pkg_join

logger = logging.getLogger(__name__)

# pkg_join("", "..") == ".." : one step past the workspace root.
ROOT_SENTINEL = ".."


def find_js_config(config_name: str, ix: ImportIndex, from_label: Label) -> Label | None:
    """
    Walk up from the importing package looking for a "<config_name>.config" rule.

    Checks from_label.pkg, its parent, ... up to and including the workspace root.
    Returns the nearest match, or None when the root was checked without a match.
    """
    pkg_dir = from_label.pkg
    while pkg_dir != ROOT_SENTINEL:
        imp = pkg_join(pkg_dir, config_name + ".config")
        outcome = resolve_with_index(ix, imp, from_label)
        if isinstance(outcome, Resolved):
            return outcome.label

        parent = pkg_join(pkg_dir, "..")
        if parent == pkg_dir:
            # absolute package path: "/" + ".." stays "/"
            break
        pkg_dir = parent

    logger.debug("%s.config not found above %s", config_name, from_label)
    return None
