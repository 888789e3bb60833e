# qrscan/main.py

from __future__ import annotations

from typing import Optional

import json
import time
import secrets
import logging

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from qrscan.config import Settings, load_settings
from qrscan.models import (
    ClassifyRequest,
    ScanRequest,
    AnalyseRequest,
    UnlockRequest,
    FavoriteRequest,
)
from qrscan.scan_service import ScanService
from qrscan.unlock import UNLOCK_HEADER

logger = logging.getLogger("qrscan")
logging.basicConfig(level=logging.INFO, format="%(message)s")


def _locked():
    return JSONResponse({"error": "Unlock required."}, status_code=401)


def _upstream(result: dict):
    """Map an ApiResult to a response; failed upstream calls become 502."""
    if result.get("success"):
        return result
    return JSONResponse({"error": result.get("message", "Upstream request failed.")}, status_code=502)


def create_app(
    settings: Optional[Settings] = None,
    service: Optional[ScanService] = None,
) -> FastAPI:
    settings = settings or load_settings()
    service = service or ScanService(settings)

    if settings.sentry_dsn:
        sentry_sdk.init(dsn=settings.sentry_dsn, traces_sample_rate=0.2)

    app = FastAPI(title="QR Scan API")
    app.state.settings = settings
    app.state.service = service

    # Return JSON for unexpected errors/validation failures
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.error(json.dumps({"event": "error", "path": str(request.url), "error": str(exc)}))
        return JSONResponse({"error": "Internal server error."}, status_code=500)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse({"error": "Invalid request.", "detail": exc.errors()}, status_code=422)

    @app.middleware("http")
    async def request_log(request: Request, call_next):
        request_id = secrets.token_hex(8)
        request.state.request_id = request_id
        start_time = time.time()
        response = await call_next(request)
        duration = round((time.time() - start_time) * 1000, 2)
        logger.info(json.dumps({
            "event": "request",
            "request_id": request_id,
            "path": request.url.path,
            "method": request.method,
            "status": response.status_code,
            "duration_ms": duration,
        }))
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Content-Type-Options"] = "nosniff"
        return response

    def unlocked(request: Request, user_id: Optional[int] = None) -> bool:
        return service.gate.allows(request.headers.get(UNLOCK_HEADER), user_id)

    # ---------------------------------------------------------
    # CLASSIFICATION
    # ---------------------------------------------------------

    @app.get("/health")
    def health():
        return {"status": "ok", "precedence": settings.precedence.value}

    @app.post("/classify")
    def classify(body: ClassifyRequest):
        result = service.classify(body.content, body.precedence)
        return service.describe(result)

    @app.post("/scans")
    def create_scan(body: ScanRequest):
        outcome = service.process(body.content, body.user_id)
        if not outcome["success"]:
            return JSONResponse(
                {"error": outcome["message"], "result": outcome["result"]},
                status_code=502,
            )
        return outcome

    @app.post("/scans/{scan_id}/analyse")
    def analyse_scan(scan_id: int, body: AnalyseRequest):
        return {"scan_id": scan_id, "url_safety": service.analyse_url(body.url, scan_id)}

    # ---------------------------------------------------------
    # UNLOCK + HISTORY
    # ---------------------------------------------------------

    @app.post("/unlock")
    def unlock(body: UnlockRequest):
        token = service.gate.issue(body.user_id)
        return {"token": token, "expires_in": service.gate.max_age}

    @app.get("/history/{user_id}")
    def history(user_id: int, request: Request):
        if not unlocked(request, user_id):
            return _locked()
        return _upstream(service.api.fetch_history(user_id))

    @app.get("/favorites/{user_id}")
    def favorites(user_id: int, request: Request):
        if not unlocked(request, user_id):
            return _locked()
        return _upstream(service.api.fetch_favorites(user_id))

    @app.post("/scans/{scan_id}/favorite")
    def favorite(scan_id: int, body: FavoriteRequest, request: Request):
        if not unlocked(request):
            return _locked()
        return _upstream(service.api.toggle_favorite(scan_id, body.is_favorite))

    @app.delete("/scans/{scan_id}")
    def delete_scan(scan_id: int, request: Request):
        if not unlocked(request):
            return _locked()
        return _upstream(service.api.delete_scan(scan_id))

    @app.delete("/users/{user_id}/scans")
    def delete_all_scans(user_id: int, request: Request):
        if not unlocked(request, user_id):
            return _locked()
        return _upstream(service.api.delete_all_scans(user_id))

    return app
