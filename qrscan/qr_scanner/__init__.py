# qrscan/qr_scanner/__init__.py

"""
QR payload classifier package.

Exposes a high-level function:

    classify_payload(raw: str, precedence=Precedence.LEGACY) -> ClassifiedResult

which:
- Recognizes URL, WiFi, vCard, SMS, Email and Geo payloads
- Extracts their structured fields
- Falls back to plain Text for anything else (never raises on str input)
"""

from .classifier import classify_payload, Precedence
from .payloads import (
    ClassifiedResult,
    PAYLOAD_KINDS,
    UrlPayload,
    WifiPayload,
    VCardPayload,
    SmsPayload,
    EmailPayload,
    GeoPayload,
    TextPayload,
)
