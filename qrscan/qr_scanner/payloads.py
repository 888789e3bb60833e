# qrscan/qr_scanner/payloads.py

"""
Result types for QR payload classification.

Every scan produces exactly one ClassifiedResult whose `fields` is one of the
payload dataclasses below. Results are frozen: build a new one per scan.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Literal, Optional, Union, Dict, Any


PayloadKind = Literal[
    "URL",
    "WiFi",
    "vCard",
    "SMS",
    "Email",
    "Geo",
    "Text",
]

PAYLOAD_KINDS = ("URL", "WiFi", "vCard", "SMS", "Email", "Geo", "Text")


@dataclass(frozen=True)
class UrlPayload:
    text: str


@dataclass(frozen=True)
class WifiPayload:
    ssid: str
    password: str
    type: Optional[str] = None      # WPA / WEP / nopass ...
    hidden: Optional[bool] = None


@dataclass(frozen=True)
class VCardPayload:
    raw: str


@dataclass(frozen=True)
class SmsPayload:
    phone_number: str
    message: str


@dataclass(frozen=True)
class EmailPayload:
    address: str
    subject: str = ""
    body: str = ""


@dataclass(frozen=True)
class GeoPayload:
    latitude: str
    longitude: str


@dataclass(frozen=True)
class TextPayload:
    text: str


Payload = Union[
    UrlPayload,
    WifiPayload,
    VCardPayload,
    SmsPayload,
    EmailPayload,
    GeoPayload,
    TextPayload,
]

_KIND_BY_TYPE = {
    UrlPayload: "URL",
    WifiPayload: "WiFi",
    VCardPayload: "vCard",
    SmsPayload: "SMS",
    EmailPayload: "Email",
    GeoPayload: "Geo",
    TextPayload: "Text",
}

# Optional fields dropped from the wire shape when they were never captured.
_OMIT_WHEN_NONE = {"type", "hidden"}


@dataclass(frozen=True)
class ClassifiedResult:
    kind: PayloadKind
    fields: Payload
    raw: str

    @classmethod
    def of(cls, fields: Payload, raw: str) -> "ClassifiedResult":
        return cls(kind=_KIND_BY_TYPE[type(fields)], fields=fields, raw=raw)

    @classmethod
    def text(cls, raw: str) -> "ClassifiedResult":
        """Fallback result: the whole payload as plain text."""
        return cls(kind="Text", fields=TextPayload(text=raw), raw=raw)

    def fields_dict(self) -> Dict[str, Any]:
        data = asdict(self.fields)
        return {
            k: v for k, v in data.items()
            if not (k in _OMIT_WHEN_NONE and v is None)
        }

    def to_dict(self) -> Dict[str, Any]:
        """
        Normalized JSON shape:

        {
            "kind": "URL" | "WiFi" | ...,
            "fields": {...},
            "raw": "<original payload>"
        }
        """
        return {
            "kind": self.kind,
            "fields": self.fields_dict(),
            "raw": self.raw,
        }
