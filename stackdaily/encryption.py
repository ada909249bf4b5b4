"""
encryption.py — Fernet symmetric encryption for applicant contact fields
=========================================================================
Encrypts contact handles (telegram, X profile) before they are stored in
the submissions table. Decrypts on read.

When STACKDAILY_ENCRYPTION_KEY is not set, storage falls back to plain
text (development mode). In production, set this to a Fernet key:

    python -c "from cryptography.fernet import Fernet; print(Fernet.generate_key().decode())"
"""
from __future__ import annotations

import hashlib
import hmac
import logging

from cryptography.fernet import Fernet, InvalidToken

logger = logging.getLogger("stackdaily.encryption")

_fernet = None
_initialized = False

# Key for hash_value when no encryption key is configured (development only)
_DEV_HASH_KEY = b"stackdaily-dev-hash-key"


def _get_fernet():
    """Lazily initialise Fernet cipher from settings."""
    global _fernet, _initialized
    if _initialized:
        return _fernet
    _initialized = True
    try:
        from .config import settings
        key = settings.encryption_key
        if key:
            _fernet = Fernet(key.encode() if isinstance(key, str) else key)
            logger.info("Encryption enabled for applicant contact fields.")
        else:
            logger.warning(
                "STACKDAILY_ENCRYPTION_KEY not set — contact fields stored in plain text. "
                "Set this in production."
            )
    except Exception as exc:
        logger.warning("Failed to initialise encryption: %s", exc)
    return _fernet


def reset_cipher() -> None:
    """Forget the cached cipher so the next call re-reads settings."""
    global _fernet, _initialized
    _fernet = None
    _initialized = False


def encrypt_value(plain_text: str) -> str:
    """Encrypt a string value. Returns the encrypted token or plain text if no key."""
    if not plain_text:
        return ""
    f = _get_fernet()
    if f is None:
        return plain_text
    return f.encrypt(plain_text.encode()).decode()


def decrypt_value(encrypted_text: str) -> str:
    """Decrypt a string value. Returns the input unchanged if it is not a token."""
    if not encrypted_text:
        return ""
    f = _get_fernet()
    if f is None:
        return encrypted_text
    try:
        return f.decrypt(encrypted_text.encode()).decode()
    except InvalidToken:
        # Plain text stored before encryption was enabled
        return encrypted_text


def hash_value(text: str) -> str:
    """Keyed one-way digest for lookups that never need the original value."""
    if not text:
        return ""
    from .config import settings
    key = settings.encryption_key.encode() if settings.encryption_key else _DEV_HASH_KEY
    return hmac.new(key, text.encode(), hashlib.sha256).hexdigest()
