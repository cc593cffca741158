from __future__ import annotations

from pysteamguard._redact import redact_for_log


def test_redact_for_log_redacts_sensitive_keys() -> None:
    payload = {
        "p": "android:device",
        "a": "76561198000000001",
        "k": "c2lnbmF0dXJl",
        "tag": "conf",
        "shared_secret": "seed",
        "nested": {"steamLoginSecure": "token", "Cookie": "sessionid=1"},
    }

    redacted = redact_for_log(payload)
    assert redacted["p"] == "android:device"
    assert redacted["tag"] == "conf"
    assert redacted["k"] == "<redacted>"
    assert redacted["shared_secret"] == "<redacted>"
    assert redacted["nested"]["steamLoginSecure"] == "<redacted>"
    assert redacted["nested"]["Cookie"] == "<redacted>"


def test_redact_for_log_handles_form_pairs() -> None:
    form = [("op", "allow"), ("cid[]", "1"), ("ck[]", "nonce-1")]
    assert redact_for_log(form) == [("op", "allow"), ("cid[]", "1"), ("ck[]", "<redacted>")]


def test_redact_for_log_truncates_long_strings() -> None:
    long_value = "x" * 600
    redacted = redact_for_log({"value": long_value}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]
