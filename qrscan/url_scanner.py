# ---------------------------------------------------------
# URL Scanner: local rule engine for QR-derived links
# ---------------------------------------------------------

"""
Rule-based risk assessment for URLs decoded from QR codes.

Used when the remote analysis service cannot be reached, so a URL result
always carries some safety verdict. Scores add up per rule:
0 = SAFE, 1-5 = SUSPICIOUS, 6+ = DANGEROUS.
"""

from __future__ import annotations

import re
import math
import unicodedata
from urllib.parse import urlparse
from typing import Dict, List, Any

import idna
import tldextract
import validators


# ---------------------------------------------------------
# TRUST LISTS
# ---------------------------------------------------------

HARD_TRUSTED_DOMAINS = {
    "google.com", "youtube.com", "gmail.com",
    "microsoft.com", "live.com", "outlook.com",
    "amazon.com", "apple.com", "icloud.com",
    "github.com", "linkedin.com", "wikipedia.org",
}

SOFT_TRUSTED_DOMAINS = {
    "amazonaws.com", "googleusercontent.com", "cloudfront.net",
    "firebaseapp.com", "githubusercontent.com", "sharepoint.com",
}

URL_SHORTENERS = {
    "bit.ly", "t.co", "tinyurl.com", "goo.gl", "cutt.ly",
    "is.gd", "v.gd", "ow.ly", "shorturl.at", "qrco.de",
}

SUSPICIOUS_TLDS = {
    "xyz", "top", "club", "link", "click", "info", "work",
    "gq", "tk", "ml", "cf", "ga", "rest", "monster", "zip",
}

SUSPICIOUS_KEYWORDS = {
    "login", "verify", "update", "secure", "confirm",
    "reset", "account", "unlock", "password", "wallet", "pay",
}

BRAND_KEYWORDS = {
    "paypal": {"paypal.com"},
    "google": {"google.com"},
    "apple": {"apple.com", "icloud.com"},
    "amazon": {"amazon.com"},
    "microsoft": {"microsoft.com", "live.com", "outlook.com"},
    "netflix": {"netflix.com"},
}

# bundled public suffix snapshot only, no network fetch
_extract = tldextract.TLDExtract(suffix_list_urls=())

HOMOGLYPH_MAP = str.maketrans({
    "а": "a", "ɑ": "a",
    "е": "e",
    "ο": "o", "о": "o",
    "р": "p", "ρ": "p",
    "с": "c",
    "ԁ": "d",
    "һ": "h",
    "ӏ": "l",
    "ɡ": "g",
})


# ---------------------------------------------------------
# HELPERS
# ---------------------------------------------------------

def normalize_homoglyphs(text: str) -> str:
    text = unicodedata.normalize("NFKD", text)
    text = "".join(c for c in text if not unicodedata.combining(c))
    return text.translate(HOMOGLYPH_MAP)


def _entropy(s: str) -> float:
    if not s:
        return 0.0
    freq = [s.count(c) / len(s) for c in set(s)]
    return -sum(p * math.log2(p) for p in freq)


def _is_ip(host: str) -> bool:
    if not re.fullmatch(r"(?:\d{1,3}\.){3}\d{1,3}", host):
        return False
    return all(0 <= int(part) <= 255 for part in host.split("."))


def extract_root(url: str) -> str:
    ext = _extract(url)
    if not ext.suffix:
        return ext.domain.lower()
    return f"{ext.domain}.{ext.suffix}".lower()


def score_to_verdict(score: int) -> str:
    if score == 0:
        return "SAFE"
    if score <= 5:
        return "SUSPICIOUS"
    return "DANGEROUS"


def detect_unicode_spoof(host: str, root: str) -> List[str]:
    reasons: List[str] = []

    if any(ord(c) > 127 for c in host):
        reasons.append("Hostname contains Unicode characters.")

    try:
        if idna.decode(host) != host:
            reasons.append("Punycode detected (possible Unicode spoof).")
    except UnicodeError:
        reasons.append("Invalid IDNA encoding in hostname.")

    normalized_root = normalize_homoglyphs(root)
    for legit_set in BRAND_KEYWORDS.values():
        for legit in legit_set:
            if normalized_root == legit and root != legit:
                reasons.append(f"Homoglyph spoof detected: mimics '{legit}'.")
                return reasons

    return reasons


def _result(score: int, verdict: str, explanation: str, reasons: List[str],
            url: str, host: str, root: str) -> Dict[str, Any]:
    return {
        "score": score,
        "verdict": verdict,
        "explanation": explanation,
        "reasons": reasons,
        "details": {"url": url, "host": host, "root": root},
    }


# ---------------------------------------------------------
# MAIN SCANNER ENGINE
# ---------------------------------------------------------

def analyze_url(url_raw: str) -> Dict[str, Any]:
    reasons: List[str] = []
    score = 0

    url_raw = url_raw.strip()

    if not re.match(r"^[a-zA-Z][a-zA-Z0-9+\-.]*://", url_raw):
        url_raw = "http://" + url_raw
        reasons.append("URL missing scheme, assumed http://")
        score += 1

    parsed = urlparse(url_raw)
    host = (parsed.hostname or "").lower()
    root = extract_root(url_raw)

    if not host:
        return _result(
            10, "DANGEROUS",
            "The URL could not be parsed as a valid hostname.",
            ["Invalid or unparseable hostname."],
            url_raw, host, root,
        )

    if not validators.url(url_raw):
        score += 2
        reasons.append("URL is not well-formed.")

    unicode_hits = detect_unicode_spoof(host, root)
    if unicode_hits:
        score += 10
        reasons.extend(unicode_hits)

    if root in HARD_TRUSTED_DOMAINS and not unicode_hits:
        return _result(
            0, "SAFE",
            "Recognized as a well-known trusted domain.",
            [], url_raw, host, root,
        )

    if root in URL_SHORTENERS:
        score += 5
        reasons.append("URL shortener hides the real destination.")

    if parsed.scheme != "https":
        score += 3
        reasons.append("Not using HTTPS.")

    if root in SOFT_TRUSTED_DOMAINS:
        verdict = "SUSPICIOUS" if score > 0 else "SAFE"
        return _result(
            score, verdict,
            "Cloud / storage provider URL; content depends on owner.",
            reasons, url_raw, host, root,
        )

    if _is_ip(host):
        score += 6
        reasons.append("Uses raw IP address, common in phishing.")

    tld = root.rsplit(".", 1)[-1]
    if tld in SUSPICIOUS_TLDS:
        score += 8
        reasons.append(f"Suspicious TLD '.{tld}'.")

    if host.count(".") > 3:
        score += 6
        reasons.append("Deep subdomain chain.")

    if host.count("-") >= 3:
        score += 5
        reasons.append("Excessive hyphens in hostname.")

    combo = parsed.path + parsed.query
    if combo:
        ent = _entropy(combo)
        if len(combo) > 80 and ent > 4.5:
            score += 3
            reasons.append("Long, random-looking URL path.")
        elif ent > 5:
            score += 1
            reasons.append("Some randomness in URL.")

    lower_combo = combo.lower()
    for kw in sorted(SUSPICIOUS_KEYWORDS):
        if kw in lower_combo:
            score += 6
            reasons.append(f"Phishing keyword detected: '{kw}'.")
            break

    for brand, legit_domains in BRAND_KEYWORDS.items():
        if brand in host and root not in legit_domains:
            score += 10
            reasons.append(f"Brand impersonation attempt: '{brand}'.")
            break

    if len(url_raw) > 150:
        score += 2
        reasons.append("URL extremely long.")

    verdict = score_to_verdict(score)
    if verdict == "SAFE":
        explanation = "No major phishing or scam patterns detected."
    elif verdict == "SUSPICIOUS":
        explanation = "Some potential scam indicators are present in this URL."
    else:
        explanation = "Strong indicators of phishing or scam activity in this URL."

    return _result(score, verdict, explanation, reasons, url_raw, host, root)


def to_safety_summary(report: Dict[str, Any]) -> Dict[str, Any]:
    """
    Reshape an analyze_url() report into the url_safety block the result
    screen renders:

    {
        "safe": bool,
        "message": str,
        "stats": {"malicious": int, "suspicious": int, "harmless": int},
        "source": "local",
    }
    """
    verdict = report.get("verdict", "SAFE")
    return {
        "safe": verdict == "SAFE",
        "message": report.get("explanation", ""),
        "stats": {
            "malicious": 1 if verdict == "DANGEROUS" else 0,
            "suspicious": 1 if verdict == "SUSPICIOUS" else 0,
            "harmless": 1 if verdict == "SAFE" else 0,
        },
        "source": "local",
    }
