import pytest

from qrscan.qr_scanner import (
    classify_payload,
    Precedence,
    PAYLOAD_KINDS,
    UrlPayload,
    WifiPayload,
    VCardPayload,
    SmsPayload,
    EmailPayload,
    GeoPayload,
    TextPayload,
)

BOTH = [Precedence.LEGACY, Precedence.PREFIX_FIRST]

VCARD = "BEGIN:VCARD\nVERSION:3.0\nFN:Jane Doe\nEND:VCARD"

SAMPLES = [
    "",
    " ",
    "hello",
    "just a plain note",
    "https://example.com/path?q=1",
    "WIFI:T:WPA;S:MyNet;P:secret123;H:false;;",
    "WIFI:S:broken",
    "MyNet secret123",
    VCARD,
    "SMSTO:+15551234567:Hello there",
    "SMSTO:nocolon",
    "mailto:a@b.com?subject=Hi&body=Test",
    "geo:48.8566,2.3522",
    "geo:nocomma",
    "\x00\x01\x02",
    "line one\nline two\nline three",
    "ünïcödé ✓",
]


@pytest.mark.parametrize("precedence", BOTH)
def test_every_input_gets_exactly_one_known_kind(precedence):
    for raw in SAMPLES:
        result = classify_payload(raw, precedence)
        assert result.kind in PAYLOAD_KINDS
        assert result.raw == raw


@pytest.mark.parametrize("precedence", BOTH)
def test_classification_is_repeatable(precedence):
    for raw in SAMPLES:
        assert classify_payload(raw, precedence) == classify_payload(raw, precedence)


def test_default_precedence_is_legacy():
    raw = "SMSTO:+15551234567:Hello there"
    assert classify_payload(raw) == classify_payload(raw, Precedence.LEGACY)


def test_precedence_accepts_plain_strings():
    assert classify_payload("SMSTO:1:a b", "prefix_first").kind == "SMS"


def test_non_string_input_is_rejected():
    with pytest.raises(TypeError):
        classify_payload(b"https://example.com")


# ---------------------------------------------------------
# URL
# ---------------------------------------------------------

@pytest.mark.parametrize("precedence", BOTH)
def test_url_kept_verbatim(precedence):
    result = classify_payload("https://example.com/path?q=1", precedence)
    assert result.kind == "URL"
    assert result.fields == UrlPayload(text="https://example.com/path?q=1")


@pytest.mark.parametrize("raw", [
    "example.com",
    "HTTPS://Example.COM/Some/Path/",
    "http://192.168.0.1:8080/admin",
    "https://sub.domain.co.uk/a/b?x=1&y=2#top",
])
def test_url_variants(raw):
    result = classify_payload(raw)
    assert result.kind == "URL"
    assert result.fields.text == raw


def test_host_without_tld_is_not_a_url():
    assert classify_payload("http://localhost").kind == "Text"


# ---------------------------------------------------------
# WIFI
# ---------------------------------------------------------

@pytest.mark.parametrize("precedence", BOTH)
def test_standard_wifi(precedence):
    result = classify_payload("WIFI:T:WPA;S:MyNet;P:secret123;H:false;;", precedence)
    assert result.kind == "WiFi"
    assert result.fields == WifiPayload(ssid="MyNet", password="secret123", type="WPA", hidden=False)


def test_standard_wifi_hidden_only_for_literal_true():
    assert classify_payload("WIFI:T:WEP;S:a;P:b;H:true;;").fields.hidden is True
    assert classify_payload("WIFI:T:WEP;S:a;P:b;H:TRUE;;").fields.hidden is False


def test_standard_wifi_ssid_with_space():
    result = classify_payload("WIFI:T:WPA;S:My Net;P:pw;H:false;;")
    assert result.fields.ssid == "My Net"
    assert result.fields.password == "pw"


@pytest.mark.parametrize("precedence", BOTH)
def test_nonstandard_wifi_defaults_to_wpa(precedence):
    result = classify_payload("MyNet secret123", precedence)
    assert result.kind == "WiFi"
    assert result.fields == WifiPayload(ssid="MyNet", password="secret123", type="WPA")
    assert result.to_dict()["fields"] == {"ssid": "MyNet", "password": "secret123", "type": "WPA"}


def test_nonstandard_wifi_ssid_is_first_token():
    result = classify_payload("Home Network pass word")
    assert result.fields.ssid == "Home"
    assert result.fields.password == "Network pass word"


@pytest.mark.parametrize("precedence", BOTH)
def test_wifi_prefix_that_fails_to_parse_is_text(precedence):
    # reordered fields, no whitespace: neither tier matches
    raw = "WIFI:S:MyNet;T:WPA;P:pw;;"
    result = classify_payload(raw, precedence)
    assert result.kind == "Text"
    assert result.fields == TextPayload(text=raw)


@pytest.mark.parametrize("raw,kind", [
    ("a\x1cb", "Text"),
    ("a\x1fb", "Text"),
    ("a\x85b", "Text"),
    ("a\ufeffb", "WiFi"),
])
def test_wifi_separator_whitespace_set(raw, kind):
    assert classify_payload(raw).kind == kind


@pytest.mark.parametrize("precedence", BOTH)
def test_two_word_sentence_lands_in_wifi(precedence):
    result = classify_payload("just a plain note", precedence)
    assert result.kind == "WiFi"
    assert result.fields.ssid == "just"
    assert result.fields.password == "a plain note"


# ---------------------------------------------------------
# VCARD
# ---------------------------------------------------------

@pytest.mark.parametrize("precedence", BOTH)
def test_multiline_vcard_passthrough(precedence):
    result = classify_payload(VCARD, precedence)
    assert result.kind == "vCard"
    assert result.fields == VCardPayload(raw=VCARD)


def test_single_line_vcard_depends_on_precedence():
    raw = "BEGIN:VCARD FN:Jane END:VCARD"
    assert classify_payload(raw, Precedence.LEGACY).kind == "WiFi"
    assert classify_payload(raw, Precedence.PREFIX_FIRST).kind == "vCard"


def test_vcard_marker_anywhere():
    assert classify_payload("xxBEGIN:VCARDyy").kind == "vCard"


# ---------------------------------------------------------
# SMS
# ---------------------------------------------------------

def test_sms_with_space_legacy_goes_to_wifi():
    result = classify_payload("SMSTO:+15551234567:Hello there", Precedence.LEGACY)
    assert result.kind == "WiFi"
    assert result.fields.ssid == "SMSTO:+15551234567:Hello"
    assert result.fields.password == "there"


def test_sms_with_space_prefix_first():
    result = classify_payload("SMSTO:+15551234567:Hello there", Precedence.PREFIX_FIRST)
    assert result.kind == "SMS"
    assert result.fields == SmsPayload(phone_number="+15551234567", message="Hello there")


@pytest.mark.parametrize("precedence", BOTH)
def test_sms_without_space(precedence):
    result = classify_payload("SMSTO:+15551234567:Hi", precedence)
    assert result.fields == SmsPayload(phone_number="+15551234567", message="Hi")


def test_sms_message_keeps_later_colons():
    result = classify_payload("SMSTO:123:a:b:c")
    assert result.fields == SmsPayload(phone_number="123", message="a:b:c")


@pytest.mark.parametrize("precedence", BOTH)
def test_malformed_sms_is_text(precedence):
    result = classify_payload("SMSTO:12345", precedence)
    assert result.kind == "Text"
    assert result.fields.text == "SMSTO:12345"


# ---------------------------------------------------------
# EMAIL
# ---------------------------------------------------------

@pytest.mark.parametrize("precedence", BOTH)
def test_email_with_subject_and_body(precedence):
    result = classify_payload("mailto:a@b.com?subject=Hi&body=Test", precedence)
    assert result.kind == "Email"
    assert result.fields == EmailPayload(address="a@b.com", subject="Hi", body="Test")


def test_email_without_query():
    result = classify_payload("mailto:a@b.com")
    assert result.fields == EmailPayload(address="a@b.com", subject="", body="")


def test_email_partial_query_stays_in_address():
    result = classify_payload("mailto:a@b.com?subject=Hi")
    assert result.fields.address == "a@b.com?subject=Hi"
    assert result.fields.subject == ""


# ---------------------------------------------------------
# GEO
# ---------------------------------------------------------

@pytest.mark.parametrize("precedence", BOTH)
def test_geo(precedence):
    result = classify_payload("geo:48.8566,2.3522", precedence)
    assert result.kind == "Geo"
    assert result.fields == GeoPayload(latitude="48.8566", longitude="2.3522")


def test_geo_values_are_not_validated():
    result = classify_payload("geo:999,abc,def")
    assert result.fields == GeoPayload(latitude="999", longitude="abc,def")


def test_geo_without_comma_is_text():
    assert classify_payload("geo:48.8566").kind == "Text"


# ---------------------------------------------------------
# TEXT + SHAPE
# ---------------------------------------------------------

@pytest.mark.parametrize("raw", ["", "hello", "\x00\x01", "line one\nline two\nline three"])
def test_text_fallback(raw):
    result = classify_payload(raw)
    assert result.kind == "Text"
    assert result.fields == TextPayload(text=raw)


def test_to_dict_shape():
    result = classify_payload("WIFI:T:WPA;S:MyNet;P:secret123;H:false;;")
    assert result.to_dict() == {
        "kind": "WiFi",
        "fields": {"ssid": "MyNet", "password": "secret123", "type": "WPA", "hidden": False},
        "raw": "WIFI:T:WPA;S:MyNet;P:secret123;H:false;;",
    }
