# src/jsrules/request.py
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from jsrules.config import JsConfig
from jsrules.rules import BuildFile, Rule
from jsrules.utils import norm_relpath, stable_json_fingerprint_sha256


class Filters(BaseModel):
    deny_dirs: list[str] = [
        "node_modules",
        ".git",
        ".next",
        ".nuxt",
        "dist",
        "build",
        "coverage",
        ".venv",
    ]


class Output(BaseModel):
    s3_bucket: str
    s3_prefix: str


class DeclaredRule(BaseModel):
    kind: str
    name: str
    # whatever the build file says; not necessarily a list of strings
    srcs: Any = None

    def to_rule(self) -> Rule:
        attrs: dict[str, Any] = {}
        if self.srcs is not None:
            attrs["srcs"] = self.srcs
        return Rule(kind=self.kind, name=self.name, attrs=attrs)


class GenerateRequest(BaseModel):
    request_id: str | None = None
    workspace_dir: str
    config: JsConfig = Field(default_factory=JsConfig)
    filters: Filters = Field(default_factory=Filters)
    # package path -> rules currently declared in that package's build file
    existing_rules: dict[str, list[DeclaredRule]] = Field(default_factory=dict)
    # package path -> files other tools will generate there (not on disk yet)
    generated_files: dict[str, list[str]] = Field(default_factory=dict)
    output: Output | None = None

    def finalize(self) -> "GenerateRequest":
        """
        Contract:
        - Package keys are normalized ("./web/" -> "web", "." -> "").
        - If request_id is not provided, derive a deterministic id from the request content.
        """
        self.existing_rules = {norm_relpath(k): v for k, v in self.existing_rules.items()}
        self.generated_files = {norm_relpath(k): v for k, v in self.generated_files.items()}
        if not self.request_id:
            fp = stable_json_fingerprint_sha256(self.model_dump(mode="json"))
            self.request_id = fp[:12]
        return self

    def build_file_for(self, pkg: str) -> BuildFile | None:
        declared = self.existing_rules.get(pkg)
        if declared is None:
            return None
        return BuildFile(pkg=pkg, rules=[d.to_rule() for d in declared])
