"""jsrules - JS/TS build target generation and import dependency resolution."""

__version__ = "0.1.0"

__all__ = (
    "GenerateArgs",
    "GenerateResult",
    "JsConfig",
    "Label",
    "RuleIndex",
    "generate_rules",
    "resolve_rule",
)

from .config import JsConfig
from .generate import GenerateArgs, GenerateResult, generate_rules
from .index import RuleIndex
from .labels import Label
from .resolve import resolve_rule
