# src/jsrules/publish.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import boto3

from jsrules.utils import stable_json_dumps

logger = logging.getLogger(__name__)

REPORT_KEY = "jsrules_report.json"
SUMMARY_KEY = "summary.json"


@dataclass
class ReportPublisher:
    """
    Writes a finished report under s3://<bucket>/<prefix>/<request_id>/.

    Two objects per run: the full report, and a small summary (counts + fingerprint)
    that can be listed without downloading every rule.
    """

    bucket: str
    prefix: str
    region: str | None = None
    client: Any = field(default=None, repr=False)

    def __post_init__(self):
        if self.client is None:
            # region may be None; boto3 falls back to env/config
            self.client = boto3.client("s3", region_name=self.region)

    def run_prefix(self, request_id: str) -> str:
        return f"{self.prefix.strip('/')}/{request_id}"

    def _put_json(self, key: str, obj: Any) -> str:
        self.client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=stable_json_dumps(obj).encode("utf-8"),
            ContentType="application/json",
            ServerSideEncryption="AES256",
        )
        return f"s3://{self.bucket}/{key}"

    def publish(self, report: dict[str, Any]) -> str:
        """Upload report + summary; returns the report's s3:// URI."""
        base = self.run_prefix(report["request_id"])
        uri = self._put_json(f"{base}/{REPORT_KEY}", report)
        self._put_json(
            f"{base}/{SUMMARY_KEY}",
            {
                "request_id": report["request_id"],
                "generated_at": report["generated_at"],
                "counts": report["counts"],
                "run_fingerprint_sha256": report["run_fingerprint_sha256"],
                "report": uri,
            },
        )
        logger.info("Published report %s", uri)
        return uri
