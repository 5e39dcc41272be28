# src/jsrules/graph.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, TypedDict

from jsrules.config import JsConfig
from jsrules.generate import GenerateArgs, GenerateResult, generate_rules
from jsrules.index import RuleIndex
from jsrules.labels import Label
from jsrules.request import GenerateRequest
from jsrules.resolve import resolve_rule
from jsrules.publish import ReportPublisher
from jsrules.utils import norm_relpath, stable_json_fingerprint_sha256, utc_ts
from jsrules.validate import validate_report

try:
    from langgraph.graph import END, StateGraph
except Exception as e:  # pragma: no cover
    raise RuntimeError("LangGraph is required. Install 'langgraph'.") from e


# -----------------------------
# Stages (canonical)
# -----------------------------
STAGE_INIT = "init"
STAGE_LOAD_REQUEST = "load_request"
STAGE_SCAN = "scan_workspace"
STAGE_GENERATE = "generate_rules"
STAGE_INDEX = "build_index"
STAGE_RESOLVE = "resolve_imports"
STAGE_VALIDATE = "validate_report"
STAGE_UPLOAD = "upload_report"
STAGE_EMIT_RESULT = "emit_result"
STAGE_DONE = "done"
STAGE_DONE_DRY_RUN = "done_dry_run"


class JsRulesStageError(RuntimeError):
    def __init__(self, stage: str, inner: Exception):
        super().__init__(str(inner))
        self.stage = stage
        self.inner = inner


@dataclass(frozen=True)
class RuntimeConfig:
    dry_run: bool
    aws_region: str | None


class PackageFiles(TypedDict):
    dir: str
    files: list[str]


class JsRulesState(TypedDict, total=False):
    payload: dict[str, Any]
    payload_src: str
    config: RuntimeConfig
    stage: str

    request: GenerateRequest
    js_config: JsConfig

    # package path ("" = workspace root) -> directory + sorted file names
    packages: dict[str, PackageFiles]
    generated: dict[str, GenerateResult]
    index: RuleIndex

    report: dict[str, Any]
    report_s3_uri: Optional[str]
    result: dict[str, Any]


def scan_workspace(workspace_dir: str, deny_dirs: set[str]) -> dict[str, PackageFiles]:
    root_dir = Path(workspace_dir)
    if not root_dir.is_dir():
        raise RuntimeError(f"Workspace directory does not exist: {workspace_dir}")

    packages: dict[str, PackageFiles] = {}
    for root, dirs, filenames in os.walk(root_dir):
        dirs[:] = sorted(d for d in dirs if d not in deny_dirs)
        rel = norm_relpath(os.path.relpath(root, root_dir))
        packages[rel] = {"dir": root, "files": sorted(filenames)}
    return packages


def build_report(state: JsRulesState) -> dict[str, Any]:
    packages_out: list[dict[str, Any]] = []
    n_rules = n_empty = n_deps = 0

    for pkg in sorted(state["generated"]):
        res = state["generated"][pkg]
        rules = [r.to_dict() for r in res.gen]
        empty = [{"kind": r.kind, "name": r.name} for r in res.empty]
        if not rules and not empty:
            continue
        n_rules += len(rules)
        n_empty += len(empty)
        n_deps += sum(len(r.attr_strings("deps")) for r in res.gen)
        packages_out.append({"pkg": pkg, "rules": rules, "empty": empty})

    report: dict[str, Any] = {
        "generated_at": utc_ts(),
        "request_id": state["request"].request_id,
        "counts": {
            "packages_scanned": len(state.get("packages", {})),
            "packages_with_rules": len(packages_out),
            "rules_generated": n_rules,
            "rules_stale": n_empty,
            "deps_resolved": n_deps,
        },
        "packages": packages_out,
    }
    report["run_fingerprint_sha256"] = stable_json_fingerprint_sha256(report)
    return report


def node_load_request(state: JsRulesState) -> JsRulesState:
    stage = STAGE_LOAD_REQUEST
    try:
        request = GenerateRequest.model_validate(state["payload"]).finalize()
        state["stage"] = stage
        state["request"] = request
        state["js_config"] = JsConfig.from_env(request.config)
        return state
    except Exception as e:
        raise JsRulesStageError(stage, e) from e


def node_scan_workspace(state: JsRulesState) -> JsRulesState:
    stage = STAGE_SCAN
    try:
        request = state["request"]
        state["packages"] = scan_workspace(request.workspace_dir, set(request.filters.deny_dirs))
        state["stage"] = stage
        return state
    except Exception as e:
        raise JsRulesStageError(stage, e) from e


def node_generate_rules(state: JsRulesState) -> JsRulesState:
    stage = STAGE_GENERATE
    try:
        request = state["request"]
        generated: dict[str, GenerateResult] = {}
        for pkg, pf in state["packages"].items():
            generated[pkg] = generate_rules(
                GenerateArgs(
                    config=state["js_config"],
                    rel=pkg,
                    dir=pf["dir"],
                    regular_files=pf["files"],
                    gen_files=request.generated_files.get(pkg, []),
                    build_file=request.build_file_for(pkg),
                )
            )
        state["generated"] = generated
        state["stage"] = stage
        return state
    except Exception as e:
        raise JsRulesStageError(stage, e) from e


def node_build_index(state: JsRulesState) -> JsRulesState:
    """
    Index every generated rule, plus declared rules that survive the merge
    (not regenerated under the same name and not stale).
    """
    stage = STAGE_INDEX
    try:
        request = state["request"]
        ix = RuleIndex()
        for pkg in sorted(state["generated"]):
            res = state["generated"][pkg]
            for rule in res.gen:
                ix.add_rule(rule, pkg)

            build_file = request.build_file_for(pkg)
            if build_file is None:
                continue
            replaced = {r.name for r in res.gen} | {r.name for r in res.empty}
            for rule in build_file.rules:
                if rule.name not in replaced:
                    ix.add_rule(rule, pkg)

        state["index"] = ix.freeze()
        state["stage"] = stage
        return state
    except Exception as e:
        raise JsRulesStageError(stage, e) from e


def node_resolve_imports(state: JsRulesState) -> JsRulesState:
    stage = STAGE_RESOLVE
    try:
        cfg = state["js_config"]
        ix = state["index"]
        for pkg, res in state["generated"].items():
            for rule, imports in zip(res.gen, res.imports):
                resolve_rule(cfg, ix, rule, imports, Label(pkg=pkg, name=rule.name))

        state["report"] = build_report(state)
        state["stage"] = stage
        return state
    except Exception as e:
        raise JsRulesStageError(stage, e) from e


def node_validate_report(state: JsRulesState) -> JsRulesState:
    stage = STAGE_VALIDATE
    try:
        validate_report(state["report"], state["js_config"].js_kinds())
        state["stage"] = stage
        return state
    except Exception as e:
        raise JsRulesStageError(stage, e) from e


def node_upload_report(state: JsRulesState) -> JsRulesState:
    stage = STAGE_UPLOAD
    try:
        request = state["request"]
        cfg = state["config"]

        state["stage"] = stage
        state["report_s3_uri"] = None
        if cfg.dry_run or request.output is None:
            return state

        publisher = ReportPublisher(
            bucket=request.output.s3_bucket,
            prefix=request.output.s3_prefix,
            region=cfg.aws_region,
        )
        state["report_s3_uri"] = publisher.publish(state["report"])
        return state
    except Exception as e:
        raise JsRulesStageError(stage, e) from e


def node_emit_result(state: JsRulesState) -> JsRulesState:
    stage = STAGE_EMIT_RESULT
    try:
        request = state["request"]
        cfg = state["config"]
        report = state["report"]

        state["result"] = {
            "ok": True,
            "stage": STAGE_DONE_DRY_RUN if cfg.dry_run else STAGE_DONE,
            "request_id": request.request_id,
            "workspace_dir": request.workspace_dir,
            "request_payload_source": state.get("payload_src", "unknown"),
            "counts": report["counts"],
            "report_s3_uri": state.get("report_s3_uri"),
            "run_fingerprint_sha256": report["run_fingerprint_sha256"],
            "report": report,
        }
        state["stage"] = stage
        return state
    except Exception as e:
        raise JsRulesStageError(stage, e) from e


def build_jsrules_graph():
    g = StateGraph(JsRulesState)

    g.add_node("load_request", node_load_request)
    g.add_node("scan_workspace", node_scan_workspace)
    g.add_node("generate_rules", node_generate_rules)
    g.add_node("build_index", node_build_index)
    g.add_node("resolve_imports", node_resolve_imports)
    g.add_node("validate_report", node_validate_report)
    g.add_node("upload_report", node_upload_report)
    g.add_node("emit_result", node_emit_result)

    g.set_entry_point("load_request")
    g.add_edge("load_request", "scan_workspace")
    g.add_edge("scan_workspace", "generate_rules")
    g.add_edge("generate_rules", "build_index")
    g.add_edge("build_index", "resolve_imports")
    g.add_edge("resolve_imports", "validate_report")
    g.add_edge("validate_report", "upload_report")
    g.add_edge("upload_report", "emit_result")
    g.add_edge("emit_result", END)

    return g.compile()


def run_jsrules_graph(
        *,
        payload: dict[str, Any],
        payload_src: str,
        dry_run: bool,
        aws_region: str | None,
) -> dict[str, Any]:
    app = build_jsrules_graph()
    state: JsRulesState = {
        "payload": payload,
        "payload_src": payload_src,
        "config": RuntimeConfig(dry_run=dry_run, aws_region=aws_region),
        "stage": STAGE_INIT,
    }
    final_state = app.invoke(state)
    return final_state["result"]
