# qrscan/qr_scanner/classifier.py

"""
QR payload dispatcher.

Runs the recognizers in a fixed priority order and returns the first match.
Every input produces exactly one ClassifiedResult; anything that is not
recognized, or whose structured parse fails, comes back as Text with the
original string preserved.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, List, Optional, Tuple

from . import recognizers as rec
from .payloads import ClassifiedResult, Payload


class Precedence(str, Enum):
    # URL, WiFi heuristic, vCard, SMS, Email, Geo (original app order)
    LEGACY = "legacy"
    # URL, vCard, SMS, Email, Geo, WiFi heuristic
    PREFIX_FIRST = "prefix_first"


Trigger = Callable[[str], bool]
Parser = Callable[[str], Optional[Payload]]

_URL: Tuple[Trigger, Parser] = (rec.is_valid_url, rec.parse_url)
_WIFI: Tuple[Trigger, Parser] = (rec.is_potential_wifi, rec.parse_wifi)
_VCARD: Tuple[Trigger, Parser] = (rec.is_vcard, rec.parse_vcard)
_SMS: Tuple[Trigger, Parser] = (rec.is_sms, rec.parse_sms)
_EMAIL: Tuple[Trigger, Parser] = (rec.is_email, rec.parse_email)
_GEO: Tuple[Trigger, Parser] = (rec.is_geo, rec.parse_geo)

RECOGNIZER_ORDER = {
    Precedence.LEGACY: [_URL, _WIFI, _VCARD, _SMS, _EMAIL, _GEO],
    Precedence.PREFIX_FIRST: [_URL, _VCARD, _SMS, _EMAIL, _GEO, _WIFI],
}


def recognizers_for(precedence: Precedence) -> List[Tuple[Trigger, Parser]]:
    return RECOGNIZER_ORDER[Precedence(precedence)]


def classify_payload(
    raw: str,
    precedence: Precedence = Precedence.LEGACY,
) -> ClassifiedResult:
    """
    Classify a decoded QR payload.

    The first recognizer whose trigger fires decides the outcome: later
    recognizers are not consulted even if its parse fails. A failed parse
    degrades to Text.

    Under the default LEGACY order the whitespace WiFi heuristic runs before
    the SMS/Email/Geo/vCard prefixes, so "SMSTO:+15551234567:Hello there"
    comes back as WiFi; pass Precedence.PREFIX_FIRST to get SMS.
    """
    if not isinstance(raw, str):
        raise TypeError(f"QR payload must be str, got {type(raw).__name__}")

    for trigger, parser in recognizers_for(precedence):
        if not trigger(raw):
            continue
        parsed = parser(raw)
        if parsed is None:
            return ClassifiedResult.text(raw)
        return ClassifiedResult.of(parsed, raw)

    return ClassifiedResult.text(raw)
