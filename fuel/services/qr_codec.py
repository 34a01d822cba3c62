# fuel/services/qr_codec.py
"""
QR token codec.

Token format: ``<hex iv>:<hex ciphertext>``, AES-256-CBC with PKCS7 padding
over a compact JSON payload. The key is the first 32 characters of
``settings.QR_SECRET_KEY`` right-padded with ``"0"``.

Decoding enforces its own freshness window on the embedded ``timestamp``,
independent of the ``qr_code_expiry`` stored on the transaction.
"""
import base64
import io
import json
import os
import time

import qrcode
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from django.conf import settings

from core.conf import fleet_setting
from core.exceptions import ExpiredError, InvalidTokenError

IV_BYTES = 16


def _key(secret: str | None = None) -> bytes:
    secret = secret if secret is not None else settings.QR_SECRET_KEY
    return secret[:32].ljust(32, "0").encode("utf-8")[:32]


def _ms(now=None) -> int:
    if now is None:
        return int(time.time() * 1000)
    return int(now.timestamp() * 1000)


def build_payload(*, transaction_code, driver_id, fuel_card_id, amount, vehicle_number, now=None) -> dict:
    return {
        "transactionId": transaction_code,
        "driverId": driver_id,
        "fuelCardId": fuel_card_id,
        "amount": str(amount),
        "vehicleNumber": vehicle_number,
        "timestamp": _ms(now),
    }


def encode(payload: dict, *, secret: str | None = None) -> str:
    iv = os.urandom(IV_BYTES)
    padder = padding.PKCS7(algorithms.AES.block_size).padder()
    data = padder.update(json.dumps(payload, separators=(",", ":")).encode("utf-8")) + padder.finalize()
    encryptor = Cipher(algorithms.AES(_key(secret)), modes.CBC(iv)).encryptor()
    ciphertext = encryptor.update(data) + encryptor.finalize()
    return f"{iv.hex()}:{ciphertext.hex()}"


def decode(token: str, *, now=None, secret: str | None = None, ttl_seconds: int | None = None) -> dict:
    """Decrypt and check freshness. Raises InvalidTokenError or ExpiredError."""
    try:
        iv_hex, ct_hex = (token or "").split(":")
        iv, ciphertext = bytes.fromhex(iv_hex), bytes.fromhex(ct_hex)
        if len(iv) != IV_BYTES or not ciphertext:
            raise ValueError("bad token shape")
        decryptor = Cipher(algorithms.AES(_key(secret)), modes.CBC(iv)).decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()
        unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
        payload = json.loads((unpadder.update(padded) + unpadder.finalize()).decode("utf-8"))
        if not isinstance(payload, dict) or not isinstance(payload.get("timestamp"), int):
            raise ValueError("bad payload")
    except (ValueError, TypeError, AttributeError):
        raise InvalidTokenError("Invalid QR code")

    ttl = fleet_setting("QR_TTL_SECONDS") if ttl_seconds is None else ttl_seconds
    if payload["timestamp"] < _ms(now) - ttl * 1000:
        raise ExpiredError("QR code has expired")
    return payload


def render_data_url(token: str) -> str:
    """PNG of the token as a base64 data URL, for immediate display to the driver."""
    qr = qrcode.QRCode(
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=1,
    )
    qr.add_data(token)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")
