# qrscan/scan_service.py

"""
Scan pipeline: classify a decoded payload, persist it through the remote
history service and, for URLs, attach a safety verdict.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from qrscan.api_client import ScanApiClient, ScanApiError
from qrscan.config import Settings
from qrscan.qr_scanner import classify_payload, ClassifiedResult, Precedence
from qrscan.unlock import UnlockGate
from qrscan.url_scanner import analyze_url, to_safety_summary
from qrscan.utils.share_text import share_message

logger = logging.getLogger("qrscan.scan")


class ScanService:
    def __init__(
        self,
        settings: Settings,
        api: Optional[ScanApiClient] = None,
        gate: Optional[UnlockGate] = None,
    ) -> None:
        self.settings = settings
        self.api = api or ScanApiClient(settings.api_url, timeout=settings.http_timeout)
        self.gate = gate or UnlockGate(settings.secret_key, required=settings.unlock_required)

    def classify(self, raw: str, precedence: Optional[Precedence] = None) -> ClassifiedResult:
        mode = Precedence(precedence or self.settings.precedence)
        result = classify_payload(raw, mode)
        logger.info(json.dumps({
            "event": "qr_classification",
            "kind": result.kind,
            "precedence": mode.value,
            "content_preview": raw[:140],
        }))
        return result

    def describe(self, result: ClassifiedResult) -> Dict[str, Any]:
        payload = result.to_dict()
        payload["share_text"] = share_message(result)
        return payload

    def url_safety(self, url: str, scan_id: Optional[int]) -> Dict[str, Any]:
        """Remote `urlSafety` block when the service returns one, local rule verdict otherwise."""
        if scan_id is not None:
            try:
                remote = self.api.check_url_safety(url, scan_id)
                verdict = remote.get("urlSafety") if isinstance(remote, dict) else None
                if isinstance(verdict, dict):
                    return verdict
                logger.warning(json.dumps({"event": "url_safety_missing", "scan_id": scan_id}))
            except ScanApiError:
                logger.warning(json.dumps({"event": "url_safety_fallback", "scan_id": scan_id}))
        return to_safety_summary(analyze_url(url))

    def process(self, raw: str, user_id: Optional[int] = None) -> Dict[str, Any]:
        """
        Full scan flow. Returns:

        {
            "success": bool,
            "message": str,
            "result": {kind, fields, raw, share_text},
            "scan_id": int | None,
            "url_safety": {...} | None,
        }
        """
        uid = self.settings.default_user_id if user_id is None else user_id
        result = self.classify(raw)

        saved = self.api.save_scan(result, uid)
        scan_id = saved.get("scan_id") if saved.get("success") else None

        url_safety = None
        if result.kind == "URL":
            url_safety = saved.get("url_safety") or self.url_safety(result.raw, scan_id)

        return {
            "success": bool(saved.get("success")),
            "message": saved.get("message", ""),
            "result": self.describe(result),
            "scan_id": scan_id,
            "url_safety": url_safety,
        }

    def analyse_url(self, url: str, scan_id: int) -> Dict[str, Any]:
        return self.url_safety(url, scan_id)
