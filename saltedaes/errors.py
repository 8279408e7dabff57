"""
Exception types raised by the saltedaes entry points.

`encrypt` only ever raises `EncryptionFailure` and `decrypt` only ever raises
`DecryptionFailure`. `MalformedInputError` is the `DecryptionFailure` raised
when the input is not a well-formed ``Salted__`` frame at all, so callers can
catch either the broad or the specific type.
"""

from __future__ import annotations

from typing import Optional


class SaltedAESError(RuntimeError):
    """Base class for saltedaes failures."""


class EncryptionFailure(SaltedAESError):
    """Raised when a plaintext could not be encrypted.

    The failing plaintext is attached as ``plaintext`` for debugging. It is
    never part of the message.
    """

    def __init__(self, message: str, *, plaintext: Optional[str] = None) -> None:
        super().__init__(message)
        self.plaintext = plaintext


class DecryptionFailure(SaltedAESError):
    """Raised when a ciphertext could not be decrypted.

    A wrong password and corrupted data look the same to CBC without
    authentication, so both end up here.
    """

    def __init__(self, message: str, *, ciphertext: Optional[str] = None) -> None:
        super().__init__(message)
        self.ciphertext = ciphertext


class MalformedInputError(DecryptionFailure, ValueError):
    """Raised for invalid base64, a short frame or a missing ``Salted__`` marker."""
