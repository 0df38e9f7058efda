"""Gym check-in QR codes.

A gym's code carries ``{"gymId": "<id>", "type": "check-in"}``. Older printed
codes hold the bare gym id, so anything that is not such a JSON object is
taken as the gym id itself.
"""
from __future__ import annotations

import io
import json

import qrcode

CHECKIN_PAYLOAD_TYPE = "check-in"


def decode_scan_payload(raw: str) -> str:
    text = (raw or "").strip()
    try:
        data = json.loads(text)
    except ValueError:
        return text

    if isinstance(data, dict):
        gym_id = data.get("gymId")
        if isinstance(gym_id, str) and gym_id.strip():
            return gym_id.strip()
    return text


def build_checkin_payload(gym_id: str) -> str:
    return json.dumps({"gymId": gym_id, "type": CHECKIN_PAYLOAD_TYPE})


def render_qr_png(data: str) -> io.BytesIO:
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=2,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return buf
