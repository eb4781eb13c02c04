"""
Error taxonomy for storefront tools

Every tool catches these at its boundary and converts them into a failure
envelope; the kind ends up in the envelope's ``errorKind`` field.

Author: TM3
Date: 2026-10-14
"""
from enum import Enum


class ErrorKind(str, Enum):
    """Failure categories reported in tool envelopes"""
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    HTTP = "http"
    NETWORK = "network"
    CONFLICT = "conflict"
    LOCAL_STATE = "local_state"
    INTERNAL = "internal"


class ToolError(Exception):
    """Base class for errors raised inside a tool"""
    kind: ErrorKind = ErrorKind.INTERNAL


class ToolValidationError(ToolError):
    """Missing or invalid argument, detected before any network call"""
    kind = ErrorKind.VALIDATION


class StoreApiError(ToolError):
    """Non-OK response from the storefront API"""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code

    @property
    def kind(self) -> ErrorKind:
        return ErrorKind.NOT_FOUND if self.status_code == 404 else ErrorKind.HTTP


class StoreConnectionError(ToolError):
    """Transport failure talking to the storefront API"""
    kind = ErrorKind.NETWORK


class ConflictError(ToolError):
    """Product changed since the caller last read it"""
    kind = ErrorKind.CONFLICT


class LocalStateError(ToolError):
    """Persisted client state is missing or malformed"""
    kind = ErrorKind.LOCAL_STATE


def error_kind_for(error: Exception) -> ErrorKind:
    """Map any exception to the envelope error kind"""
    if isinstance(error, ToolError):
        return error.kind
    return ErrorKind.INTERNAL

