"""
Custom exceptions for PDF PageKit.

This module defines all custom exceptions used throughout the library.
Every exception derives from :class:`PageKitError` so callers can present a
single terminal failure per operation.
"""

from __future__ import annotations

from typing import Optional


class PageKitError(Exception):
    """Base exception for all PDF PageKit errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.operation: Optional[str] = None

    @property
    def default_message(self) -> str:
        return "An unknown PDF PageKit error occurred."

    def for_operation(self, operation: str) -> "PageKitError":
        """Tag the error with the high-level operation it aborted."""
        if self.operation is None:
            self.operation = operation
        return self

    def __str__(self) -> str:
        if self.operation:
            return f"{self.operation} failed: {self.message}"
        return self.message


class PageRangeError(PageKitError):
    """Base class for page selection errors."""

    @property
    def default_message(self) -> str:
        return "Invalid page selection."


class InvalidRangeSyntax(PageRangeError):
    """Raised when a range token is not ``N`` or ``A-B`` with ``A <= B``."""

    @property
    def default_message(self) -> str:
        return "Invalid page range syntax."


class OutOfBounds(PageRangeError):
    """Raised when a page number falls outside the document."""

    @property
    def default_message(self) -> str:
        return "Requested page number is out of bounds."


class EmptyRangeSet(PageRangeError):
    """Raised when a page selection yields no usable range."""

    @property
    def default_message(self) -> str:
        return "Page selection does not contain any valid range."


class TransformError(PageKitError):
    """Raised when a page transform cannot be applied."""

    @property
    def default_message(self) -> str:
        return "Page transform failed."


class InvalidAngle(TransformError):
    """Raised when a rotation angle is not a multiple of 90 degrees."""

    @property
    def default_message(self) -> str:
        return "Rotation angle must be a multiple of 90 degrees."


class DegenerateCropBox(TransformError):
    """Raised when crop margins leave no visible area."""

    @property
    def default_message(self) -> str:
        return "Crop margins remove the entire page."


class InvalidTransformParameters(TransformError):
    """Raised when a transform carries malformed parameters."""

    @property
    def default_message(self) -> str:
        return "Invalid transform parameters."


class DecodeError(PageKitError):
    """Raised when input bytes cannot be opened as a PDF document."""

    @property
    def default_message(self) -> str:
        return "Invalid, corrupted or password-protected PDF file."


class WrongPassword(PageKitError):
    """Raised when a supplied password does not open the document."""

    @property
    def default_message(self) -> str:
        return "The password is incorrect."


class PasswordRequired(PageKitError):
    """Raised when a password operation is given an empty password."""

    @property
    def default_message(self) -> str:
        return "A non-empty password is required."


class EncryptionStateError(PageKitError):
    """Raised when a document is (or is not) encrypted, contrary to the request."""

    @property
    def default_message(self) -> str:
        return "Unexpected PDF encryption state."


class NoFillableFields(PageKitError):
    """Raised when a document has no AcroForm fields."""

    @property
    def default_message(self) -> str:
        return "No fillable fields detected."


class NoTableDetected(PageKitError):
    """Raised when the table heuristic finds no tabular line."""

    @property
    def default_message(self) -> str:
        return "No tables detected."


class ReassemblyFailed(PageKitError):
    """Raised when copying or rendering any page of a reassembly fails."""

    def __init__(self, message: str = "", *, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause

    @property
    def default_message(self) -> str:
        return "Document reassembly failed."


class OperationCancelled(PageKitError):
    """Raised when an operation is cancelled between two pages."""

    @property
    def default_message(self) -> str:
        return "Operation cancelled."


class OperationFailed(PageKitError):
    """Raised when an unexpected error escapes a high-level operation."""

    def __init__(self, message: str = "", *, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause

    @property
    def default_message(self) -> str:
        return "Unexpected error while processing the PDF."
