"""
Typed errors raised by the Voice2Action core.

Every failure is scoped to one request. Routes never see raw storage
exceptions for the cases below; main.py maps each class to an HTTP status.
"""

from typing import Optional


class Voice2ActionError(Exception):
    """Base class for all domain errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(Voice2ActionError):
    """Required input is missing or malformed (rejected before any processing)."""

    status_code = 400


class NotFoundError(Voice2ActionError):
    """Unknown tracking id, issue id or organization code."""

    status_code = 404

    def __init__(self, kind: str, key: Optional[str]):
        super().__init__(f"{kind} {key} not found")
        self.kind = kind
        self.key = key


class InvalidStateError(Voice2ActionError):
    """
    Status value outside the fixed enumeration.

    Never surfaced to callers: the lifecycle engine catches it and leaves
    the status field untouched.
    """

    status_code = 400

    def __init__(self, value):
        super().__init__(f"Invalid status value: {value!r}")
        self.value = value
