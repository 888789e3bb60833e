# qrscan/utils/share_text.py

"""
Plain-English share messages for classified QR payloads.
One formatter per payload kind; unknown kinds fall back to the raw payload.
"""

from qrscan.qr_scanner.payloads import ClassifiedResult


SHARE_MAP = {
    "URL": lambda f:
        f"Check out this URL: {f['text']}",
    "WiFi": lambda f:
        f"WiFi SSID: {f['ssid']}\nPassword: {f['password']}",
    "SMS": lambda f:
        f"SMS to {f['phone_number']}: {f['message']}",
    "Email": lambda f:
        f"Email {f['address']}\nSubject: {f['subject']}\n\n{f['body']}".rstrip(),
    "Geo": lambda f:
        f"Location: {f['latitude']}, {f['longitude']}",
    "vCard": lambda f:
        f['raw'],
    "Text": lambda f:
        f['text'],
}


def share_message(result: ClassifiedResult) -> str:
    """Return the text a user would share for a single scan result."""
    handler = SHARE_MAP.get(result.kind)
    if handler is None:
        return result.raw
    return handler(result.fields_dict())
