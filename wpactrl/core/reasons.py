"""Disconnect reason decoding."""

from __future__ import annotations

import re

_REASON_RE = re.compile(r"CTRL-EVENT-DISCONNECTED.*?reason=([0-9]+)")

# IEEE Std 802.11-2016, 9.4.1.7, Table 9-45
REASON_CODES: dict[str, str] = {
    "2": "invalid-auth",
    "3": "sta-left-ess",
    "4": "inactivity",
    "5": "ap-overloaded",
    "6": "class-2-nonauth",
    "7": "class-3-nonassoc",
    "8": "sta-left-bss",
    "9": "not-authenticated-responder",
    "10": "bad-power-cap",
    "11": "bad-channels",
    "14": "mic-failure",
    "15": "four-way-handshake-timeout",
    "16": "group-key-handshake-timeout",
    "17": "four-way-handshake-mismatch",
    "18": "invalid-group-cipher",
    "19": "invalid-pairwise-cipher",
    "20": "invalid-akmp",
    "21": "unsupported-rsn",
    "22": "invalid-rsn",
    "23": "8021x-auth-failed",
    "24": "cipher-rejected-due-to-policy",
    "32": "qos",
    "33": "qos-bandwidth",
    "34": "noisy-channel-cant-ack",
    "35": "outside-txop-limits",
    "36": "peer-leaving-bss",
    "37": "peer-rejects-mechanism",
    "38": "peer-mechanism-needs-setup",
    "39": "peer-timeout",
    "45": "peer-cipher-suite-not-supported",
}


def parse_reason(message: str) -> str:
    """Return the digits following ``reason=``, or "0" when there are none."""
    match = _REASON_RE.search(message)
    if match is None:
        return "0"
    return match.group(1)


def format_reason(code: str) -> str:
    return f"{code}:{REASON_CODES.get(code, '')}"
