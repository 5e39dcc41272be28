# src/jsrules/cli.py
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

from . import __version__

STAGE_LOAD_REQUEST = "load_request"

REQUEST_ENV = "JSRULES_REQUEST_JSON"


def _read_request_payload(request_path: str | None, workspace: str | None) -> tuple[dict[str, Any], str]:
    """
    Request sources, first match wins:
      - --request PATH (JSON file)
      - JSRULES_REQUEST_JSON (env JSON string)
      - a bare positional workspace: {"workspace_dir": workspace}
    A positional workspace always overrides workspace_dir in the payload.

    Returns: (payload_dict, payload_src_string)
    """
    if request_path:
        raw = Path(request_path).read_text(encoding="utf-8")
        src = f"file:{request_path}"
    else:
        raw = os.environ.get(REQUEST_ENV, "")
        src = f"env:{REQUEST_ENV}"

    if raw.strip():
        payload = json.loads(raw)
        if not isinstance(payload, dict):
            raise TypeError(f"{src} must decode to a JSON object (dict).")
    elif workspace:
        payload = {}
        src = "args:workspace"
    else:
        raise RuntimeError(f"Missing request: pass a workspace, --request PATH, or set {REQUEST_ENV}.")

    if workspace:
        payload["workspace_dir"] = workspace
    return payload, src


def _discover_aws_region(explicit: str | None = None) -> str | None:
    if explicit:
        return explicit
    return os.environ.get("AWS_REGION") or os.environ.get("AWS_DEFAULT_REGION") or None


def _print_success(obj: dict[str, Any]) -> None:
    print(json.dumps(obj, separators=(",", ":")), file=sys.stdout)


def _print_failure(stage: str, err: Exception) -> None:
    out = {
        "ok": False,
        "stage": stage,
        "error": type(err).__name__,
        "error_code": f"JSRULES_FAILED_{stage.upper()}",
        "error_message": str(err),
    }
    print(json.dumps(out, separators=(",", ":")), file=sys.stdout)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="jsrules",
        description="Generate JS/TS build targets and resolve their import dependencies",
    )
    parser.add_argument(
        "workspace",
        nargs="?",
        default=None,
        help="Workspace root to scan (overrides workspace_dir from the request).",
    )
    parser.add_argument(
        "--request",
        metavar="PATH",
        default=None,
        help=f"JSON request file (otherwise {REQUEST_ENV} is used).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Run in dry-run mode (no report upload).",
    )
    parser.add_argument(
        "--aws-region",
        dest="aws_region",
        metavar="REGION",
        help="Optional AWS region override (otherwise AWS_REGION/AWS_DEFAULT_REGION are used).",
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("JSRULES_LOG_LEVEL", "WARNING"),
        help="Diagnostics level on stderr (default: WARNING).",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"jsrules {__version__}",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    try:
        # stdout carries the JSON result only; diagnostics go to stderr.
        # An unknown level raises ValueError and is reported like a bad request.
        logging.basicConfig(
            stream=sys.stderr,
            level=str(args.log_level).upper(),
            format="%(levelname)s %(name)s: %(message)s",
        )

        payload, payload_src = _read_request_payload(args.request, args.workspace)

        from jsrules.graph import run_jsrules_graph

        # JsRulesStageError bubbles up here so the failure JSON names the stage.
        result = run_jsrules_graph(
            payload=payload,
            payload_src=payload_src,
            dry_run=bool(args.dry_run),
            aws_region=_discover_aws_region(args.aws_region),
        )
        _print_success(result)
        return 0

    except Exception as e:  # noqa: BLE001 - top-level CLI error handler
        from jsrules.graph import JsRulesStageError

        if isinstance(e, JsRulesStageError):
            _print_failure(e.stage, e.inner)
            return 1

        # Payload / argument issues are load_request (JSONDecodeError is a ValueError)
        if isinstance(e, (ValueError, OSError, RuntimeError, TypeError)):
            _print_failure(STAGE_LOAD_REQUEST, e)
            return 1

        _print_failure("unknown", e)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
