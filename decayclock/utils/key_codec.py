"""API key obfuscation for provider records at rest.

Repeating-key XOR followed by base64. This is obfuscation against casual
reading of the providers file, not a substitute for a secrets manager.

The key material is supplied by a KeyProvider so that code decrypting
credentials never reads process environment directly.
"""

from __future__ import annotations

import base64
import binascii
import os
from typing import Protocol

from config.defaults import DEFAULT_ENCRYPTION_KEY, ENCRYPTION_KEY_ENV_VAR


class KeyProvider(Protocol):
    """Anything that can hand out the obfuscation key bytes."""

    def get_key(self) -> bytes:
        ...


class StaticKeyProvider:
    """Key provider backed by a fixed string."""

    def __init__(self, key: str) -> None:
        if not key:
            raise ValueError("Encryption key must not be empty")
        self._key = key.encode("utf-8")

    def get_key(self) -> bytes:
        return self._key


class EnvKeyProvider:
    """Key provider that reads an environment variable on each call."""

    def __init__(
        self,
        env_var: str = ENCRYPTION_KEY_ENV_VAR,
        default: str = DEFAULT_ENCRYPTION_KEY,
    ) -> None:
        self.env_var = env_var
        self.default = default

    def get_key(self) -> bytes:
        return (os.getenv(self.env_var) or self.default).encode("utf-8")


def _xor(data: bytes, key: bytes) -> bytes:
    return bytes(b ^ key[i % len(key)] for i, b in enumerate(data))


def encrypt_api_key(api_key: str, key_provider: KeyProvider) -> str:
    """Obfuscate an API key for storage.

    Args:
        api_key: Plaintext credential.
        key_provider: Source of the obfuscation key.

    Returns:
        Base64 text safe to write to the providers file.
    """
    return base64.b64encode(_xor(api_key.encode("utf-8"), key_provider.get_key())).decode("ascii")


def decrypt_api_key(encrypted: str, key_provider: KeyProvider) -> str:
    """Recover a plaintext API key from its stored form.

    Args:
        encrypted: Base64 text produced by encrypt_api_key().
        key_provider: Source of the obfuscation key (must match the one used to encrypt).

    Returns:
        Plaintext credential.

    Raises:
        ValueError: If the stored value is not valid base64 or does not decode
            to UTF-8 with this key.
    """
    try:
        raw = base64.b64decode(encrypted.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise ValueError("Stored API key is not valid base64") from exc
    try:
        return _xor(raw, key_provider.get_key()).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ValueError("Stored API key does not decode with the configured key") from exc
