"""Encryption of provider tokens carried inside the session cookie.

The Google access token travels inside the signed session JWT. Signing keeps
it tamper-proof but not secret, so the token is encrypted with Fernet before
it is placed in the payload.

## Key Derivation

The encryption key is derived from the application secret using PBKDF2:
- Salt: Configurable, should be unique per deployment
- Iterations: 480,000 (OWASP recommendation for PBKDF2-HMAC-SHA256)
- Key length: 32 bytes (256 bits)

## Usage

```python
from calendar_dashboard.auth.encryption import get_fernet, encrypt_token, decrypt_token

fernet = get_fernet(settings.secret_key, settings.encryption_salt)
encrypted = encrypt_token("ya29.provider-token", fernet)
decrypted = decrypt_token(encrypted, fernet)
```
"""

from __future__ import annotations

import base64
import logging
from functools import lru_cache

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

logger = logging.getLogger(__name__)


def create_fernet(secret_key: str, salt: str) -> Fernet:
    """Create a Fernet cipher from the secret key and salt.

    Args:
        secret_key: Application secret key
        salt: Unique salt for this deployment

    Returns:
        Configured Fernet cipher
    """
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt.encode("utf-8"),
        iterations=480_000,
    )

    key = base64.urlsafe_b64encode(kdf.derive(secret_key.encode("utf-8")))
    return Fernet(key)


def encrypt_token(plaintext: str, fernet: Fernet) -> str:
    """Encrypt a provider token for the session payload.

    Args:
        plaintext: The token to encrypt
        fernet: Cipher from get_fernet()

    Returns:
        Base64-encoded encrypted token, or "" for an empty token
    """
    if not plaintext:
        return ""

    return fernet.encrypt(plaintext.encode("utf-8")).decode("utf-8")


def decrypt_token(ciphertext: str, fernet: Fernet) -> str:
    """Decrypt a provider token taken from a session payload.

    Raises:
        ValueError: If decryption fails (tampered payload or rotated key)
    """
    if not ciphertext:
        return ""

    try:
        return fernet.decrypt(ciphertext.encode("utf-8")).decode("utf-8")
    except InvalidToken as e:
        logger.error("Failed to decrypt provider token: invalid token or key")
        raise ValueError("Failed to decrypt token") from e


@lru_cache(maxsize=8)
def get_fernet(secret_key: str, salt: str) -> Fernet:
    """Cipher for a secret and salt, derived once per pair."""
    return create_fernet(secret_key, salt)
