#!/usr/bin/env python3
"""
MyAdmin Error Hierarchy
Canonical exception classes for the administrative helpers.
"""

from enum import Enum

class ErrorCode(Enum):
    UNKNOWN = "UNKNOWN_ERROR"
    NOT_FOUND = "NOT_FOUND"
    QUERY_FAILED = "QUERY_FAILED"
    CONFIRMATION_FAILED = "CONFIRMATION_FAILED"
    EMPTY_RESULT = "EMPTY_RESULT"
    CONFIG_MISMATCH = "CONFIG_MISMATCH"
    MAIL_ERROR = "MAIL_ERROR"

class MyAdminError(Exception):
    """Base class for all MyAdmin exceptions"""
    def __init__(self, message: str, code: ErrorCode = ErrorCode.UNKNOWN, details: dict = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

class NotFoundError(MyAdminError):
    """Raised when a system variable does not exist on the server"""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, ErrorCode.NOT_FOUND, details)

class QueryFailedError(MyAdminError):
    """Raised when a statement fails to execute or its result cannot be read"""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, ErrorCode.QUERY_FAILED, details)

class ConfirmationFailedError(MyAdminError):
    """Raised when a write succeeded but reading it back did not confirm it"""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, ErrorCode.CONFIRMATION_FAILED, details)

class EmptyResultError(MyAdminError):
    """Raised when a bulk read returned no usable rows"""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, ErrorCode.EMPTY_RESULT, details)

class ConfigMismatchError(MyAdminError):
    """Raised when a server setting does not hold the required value"""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, ErrorCode.CONFIG_MISMATCH, details)

class MailError(MyAdminError):
    """Raised when a notification could not be delivered"""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, ErrorCode.MAIL_ERROR, details)

def mysql_error_code(exc: BaseException):
    """Return the numeric MySQL error code carried by a driver error, if any.

    PyMySQL (and MySQLdb) raise errors whose first argument is the server or
    client error number, e.g. ``OperationalError(1193, "Unknown system variable 'x'")``.
    """
    args = getattr(exc, 'args', ())
    if args and isinstance(args[0], int):
        return args[0]
    return None
