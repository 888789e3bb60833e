# qrscan/api_client.py

"""
HTTP client for the remote scan history / favorites service.

Every call returns an ApiResult dict:

    {"success": bool, "message": str, ...extra keys}

Transport errors, non-JSON bodies and non-2xx statuses are reported through
`success=False` instead of exceptions. The one exception is
check_url_safety(), which raises ScanApiError. No retries.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, Optional

import requests

from qrscan.qr_scanner.payloads import ClassifiedResult

logger = logging.getLogger("qrscan.api")

ApiResult = Dict[str, Any]


class ScanApiError(Exception):
    pass


def _is_json(response: requests.Response) -> bool:
    return "application/json" in (response.headers.get("content-type") or "")


class ScanApiClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _url(self, route: str) -> str:
        return f"{self.base_url}/api/{route.lstrip('/')}"

    def _call(
        self,
        method: str,
        route: str,
        action: str,
        on_json: Callable[[requests.Response, Any], ApiResult],
        body: Optional[Dict[str, Any]] = None,
    ) -> ApiResult:
        """Send one request and funnel every failure into an ApiResult."""
        url = self._url(route)
        try:
            response = self.session.request(
                method,
                url,
                json=body,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
            if not _is_json(response):
                logger.error(json.dumps({
                    "event": "api_unexpected_format",
                    "url": url,
                    "status": response.status_code,
                    "body_preview": response.text[:200],
                }))
                return {"success": False, "message": "Unexpected response format"}

            return on_json(response, response.json())

        except (requests.RequestException, ValueError) as exc:
            logger.error(json.dumps({"event": "api_error", "url": url, "action": action, "error": str(exc)}))
            return {"success": False, "message": f"Error {action}: {exc}"}

    @staticmethod
    def _status_failure(response: requests.Response) -> ApiResult:
        return {
            "success": False,
            "message": f"Request failed with status {response.status_code}",
        }

    # -----------------------------------------------------------
    # GENERIC CALLS
    # -----------------------------------------------------------

    def fetch_data(self, route: str) -> ApiResult:
        def on_json(response, data):
            if not response.ok:
                return self._status_failure(response)
            return {"success": True, "message": "Successfully got data!", "data": data}

        return self._call("GET", route, "fetching data", on_json)

    def post_data(self, route: str, body: Dict[str, Any]) -> ApiResult:
        if not route or "undefined" in route:
            logger.error(json.dumps({"event": "api_invalid_route", "route": route}))
            return {"success": False, "message": "Invalid route"}

        def on_json(response, data):
            if not response.ok:
                return self._status_failure(response)
            if not isinstance(data, dict) or not data.get("success"):
                message = data.get("message", "") if isinstance(data, dict) else ""
                return {"success": False, "message": f"Request failed. {message}"}
            return {
                "success": True,
                "message": f"Request success! {data.get('message', '')}",
                "scan_id": data.get("scanId"),
                "url_safety": data.get("urlSafety"),
                "image_url": data.get("imageUrl"),
            }

        return self._call("POST", route, "submitting form", on_json, body=body)

    def _message_call(self, method: str, route: str, action: str,
                      body: Optional[Dict[str, Any]] = None) -> ApiResult:
        def on_json(response, data):
            if not response.ok:
                return self._status_failure(response)
            message = data.get("message", "") if isinstance(data, dict) else ""
            return {"success": True, "message": message}

        return self._call(method, route, action, on_json, body=body)

    # -----------------------------------------------------------
    # SCAN RECORDS
    # -----------------------------------------------------------

    def save_scan(self, result: ClassifiedResult, user_id: int) -> ApiResult:
        return self.post_data("scans", {"type": result.kind, "data": result.raw, "userId": user_id})

    def fetch_history(self, user_id: int) -> ApiResult:
        return self.fetch_data(f"scans/history/{user_id}")

    def fetch_favorites(self, user_id: int) -> ApiResult:
        return self.fetch_data(f"scans/favorites/{user_id}")

    def toggle_favorite(self, scan_id: int, is_favorite: bool) -> ApiResult:
        """Flip the favorite flag; `is_favorite` is the CURRENT state."""
        action = "unfavorite" if is_favorite else "favorite"
        return self._message_call("POST", f"scans/{scan_id}/{action}", "toggling favorite")

    def delete_scan(self, scan_id: int) -> ApiResult:
        return self._message_call("DELETE", f"scans/{scan_id}", "deleting scan")

    def delete_all_scans(self, user_id: int) -> ApiResult:
        return self._message_call("DELETE", "scans", "deleting all scans", body={"userId": user_id})

    # -----------------------------------------------------------
    # URL SAFETY
    # -----------------------------------------------------------

    def check_url_safety(self, url: str, scan_id: int) -> Dict[str, Any]:
        """Ask the remote service to analyse `url`; returns its JSON verbatim."""
        endpoint = self._url("scans/analyse")
        try:
            response = self.session.post(
                endpoint,
                json={"url": url, "scanId": scan_id},
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.error(json.dumps({"event": "url_safety_error", "url": url, "error": str(exc)}))
            raise ScanApiError("Error checking URL safety") from exc
