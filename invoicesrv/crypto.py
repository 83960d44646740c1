"""AES-GCM encryption of short strings, encoded as standard base64."""

import base64
import binascii
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

NONCE_SIZE = 12


def _cipher(key: str) -> AESGCM:
    # Raises ValueError unless the key is 16, 24 or 32 bytes long.
    return AESGCM(key.encode("utf-8"))


def encrypt(plaintext: str, key: str) -> str:
    """Encrypt ``plaintext`` and return base64 of nonce followed by sealed data."""
    cipher = _cipher(key)
    nonce = os.urandom(NONCE_SIZE)
    sealed = cipher.encrypt(nonce, plaintext.encode("utf-8"), None)
    return base64.b64encode(nonce + sealed).decode("ascii")


def decrypt(encrypted_text: str, key: str) -> str:
    """Reverse :func:`encrypt`; raise ValueError when the text cannot be opened."""
    cipher = _cipher(key)
    try:
        raw = base64.b64decode(encrypted_text, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError("invalid base64 ciphertext") from exc
    if len(raw) < NONCE_SIZE:
        raise ValueError("ciphertext too short")
    nonce, body = raw[:NONCE_SIZE], raw[NONCE_SIZE:]
    try:
        plaintext = cipher.decrypt(nonce, body, None)
    except InvalidTag as exc:
        raise ValueError("message authentication failed") from exc
    return plaintext.decode("utf-8")