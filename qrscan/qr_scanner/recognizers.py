# qrscan/qr_scanner/recognizers.py

"""
Pattern recognizers for decoded QR payloads.

Each recognizer owns one payload kind. Trigger checks (`is_*`) are cheap
predicates used by the dispatcher; parsers (`parse_*`) return a payload
dataclass, or None when the trigger fired but the full pattern did not match.
"""

from __future__ import annotations

import re
from typing import Optional

from .payloads import (
    UrlPayload,
    WifiPayload,
    VCardPayload,
    SmsPayload,
    EmailPayload,
    GeoPayload,
)


# Any character except line terminators. Payload fields never span lines.
_L = r"[^\n\r\u2028\u2029]"

# Separator whitespace: excludes \x1c-\x1f and \x85, includes U+FEFF.
_WS = r"[\t\n\v\f\r \u00a0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000\ufeff]"

VCARD_MARKER = "BEGIN:VCARD"
SMS_PREFIX = "SMSTO:"
EMAIL_PREFIX = "mailto:"
GEO_PREFIX = "geo:"
WIFI_PREFIX = "WIFI:"

DEFAULT_WIFI_TYPE = "WPA"


# -------------------------------------------------------------------
# PATTERNS
# -------------------------------------------------------------------

URL_PATTERN = re.compile(
    r"(?:https?://)?"                                   # protocol
    r"(?:(?:[a-z\d](?:[a-z\d-]*[a-z\d])?\.)+[a-z]{2,}"  # domain
    r"|(?:\d{1,3}\.){3}\d{1,3})"                        # IPv4
    r"(?::\d+)?(?:/[-a-z\d%_.~+]*)*"                    # port + path
    r"(?:\?[;&a-z\d%_.~+=-]*)?"                         # query
    r"(?:#[-a-z\d_]*)?",                                # fragment
    re.IGNORECASE | re.ASCII,
)

# "<first token><whitespace><rest>"
WHITESPACE_PAIR_PATTERN = re.compile(rf"({_L}+?){_WS}({_L}+)")

WIFI_STANDARD_PATTERN = re.compile(
    rf"WIFI:T:({_L}*?);S:({_L}*?);P:({_L}*?);H:({_L}*?);;"
)

SMS_PATTERN = re.compile(rf"SMSTO:({_L}*?):({_L}*)")

EMAIL_PATTERN = re.compile(
    rf"mailto:({_L}*?)(?:\?subject=({_L}*?)&body=({_L}*))?"
)

GEO_PATTERN = re.compile(rf"geo:({_L}*?),({_L}*)")


# -------------------------------------------------------------------
# TRIGGERS
# -------------------------------------------------------------------

def is_valid_url(data: str) -> bool:
    return URL_PATTERN.fullmatch(data) is not None


def is_potential_wifi(data: str) -> bool:
    """
    Loose WiFi trigger.

    Fires for the ZXing "WIFI:" prefix and for ANY single-line pair of
    whitespace-separated chunks, so two-word sentences land here too.
    """
    if data.startswith(WIFI_PREFIX):
        return True
    return WHITESPACE_PAIR_PATTERN.fullmatch(data) is not None


def is_vcard(data: str) -> bool:
    return VCARD_MARKER in data


def is_sms(data: str) -> bool:
    return data.startswith(SMS_PREFIX)


def is_email(data: str) -> bool:
    return data.startswith(EMAIL_PREFIX)


def is_geo(data: str) -> bool:
    return data.startswith(GEO_PREFIX)


# -------------------------------------------------------------------
# PARSERS
# -------------------------------------------------------------------

def parse_url(data: str) -> UrlPayload:
    # kept verbatim: no lowercasing, no trailing slash stripping
    return UrlPayload(text=data)


def parse_wifi(data: str) -> Optional[WifiPayload]:
    """
    Two-tier WiFi parse:

    1. WIFI:T:<type>;S:<ssid>;P:<password>;H:<hidden>;;
    2. "<ssid> <password>" where the SSID is the first token
    """
    standard = WIFI_STANDARD_PATTERN.fullmatch(data)
    if standard:
        auth_type, ssid, password, hidden = standard.groups()
        return WifiPayload(
            ssid=ssid,
            password=password,
            type=auth_type,
            hidden=hidden == "true",
        )

    loose = WHITESPACE_PAIR_PATTERN.fullmatch(data)
    if loose:
        return WifiPayload(
            ssid=loose.group(1),
            password=loose.group(2),
            type=DEFAULT_WIFI_TYPE,
        )

    return None


def parse_vcard(data: str) -> VCardPayload:
    return VCardPayload(raw=data)


def parse_sms(data: str) -> Optional[SmsPayload]:
    match = SMS_PATTERN.fullmatch(data)
    if not match:
        return None
    return SmsPayload(phone_number=match.group(1), message=match.group(2))


def parse_email(data: str) -> Optional[EmailPayload]:
    match = EMAIL_PATTERN.fullmatch(data)
    if not match:
        return None
    return EmailPayload(
        address=match.group(1),
        subject=match.group(2) or "",
        body=match.group(3) or "",
    )


def parse_geo(data: str) -> Optional[GeoPayload]:
    match = GEO_PATTERN.fullmatch(data)
    if not match:
        return None
    return GeoPayload(latitude=match.group(1), longitude=match.group(2))
