"""Password protection helpers for PDF PageKit."""

from __future__ import annotations

from typing import Optional

from .backends.base import DocumentCodec
from .exceptions import EncryptionStateError, PasswordRequired, WrongPassword
from .types import OutputFile

PROTECTED_NAME = "protected.pdf"
UNLOCKED_NAME = "unlocked.pdf"


def protect_pdf(
    codec: DocumentCodec,
    data: bytes,
    password: str,
    *,
    owner_password: Optional[str] = None,
) -> OutputFile:
    """Encrypt ``data`` with ``password``."""

    if not password:
        raise PasswordRequired("Please enter a password.")

    document = codec.open(data)
    if document.was_encrypted:
        raise EncryptionStateError("Input PDF is already encrypted")

    protected = codec.save(
        document,
        user_password=password,
        owner_password=owner_password or password,
    )
    return OutputFile(PROTECTED_NAME, protected)


def unprotect_pdf(codec: DocumentCodec, data: bytes, password: str) -> OutputFile:
    """Decrypt ``data`` using ``password``."""

    if not password:
        raise PasswordRequired("Please enter the PDF password.")

    try:
        document = codec.open(data, password=password)
    except WrongPassword as exc:
        raise WrongPassword("Failed to unlock PDF. The password might be incorrect.") from exc

    if not document.was_encrypted:
        raise EncryptionStateError("Input PDF is not encrypted")

    return OutputFile(UNLOCKED_NAME, codec.save(document))


__all__ = ["protect_pdf", "unprotect_pdf", "PROTECTED_NAME", "UNLOCKED_NAME"]
