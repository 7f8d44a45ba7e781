"""
Severity Levels and Error-Code Translation.

This module defines the fixed set of event levels and the translator
that maps platform error codes onto them. Callers may register an
override map that takes precedence over the built-in classification.
"""

from __future__ import annotations

import logging
from enum import Enum, IntEnum
from typing import Dict, Mapping, Optional, Union


class Severity(Enum):
    """
    Levels understood by the collector.

    Ordered from least to most severe:
    - DEBUG: Development-time diagnostics
    - INFO: Informational messages
    - WARNING: Potential issues that don't stop execution
    - ERROR: Errors that affect execution
    - FATAL: Errors the process cannot recover from
    """
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"

    @classmethod
    def coerce(cls, value: Union["Severity", str]) -> "Severity":
        """
        Accept either a Severity or its string value.

        Raises:
            ValueError: If the string is not a known level
        """
        if isinstance(value, cls):
            return value
        return cls(str(value).lower())

    @classmethod
    def from_logging_level(cls, levelno: int) -> "Severity":
        """Map a stdlib logging level number onto a Severity."""
        if levelno >= logging.CRITICAL:
            return cls.FATAL
        if levelno >= logging.ERROR:
            return cls.ERROR
        if levelno >= logging.WARNING:
            return cls.WARNING
        if levelno >= logging.INFO:
            return cls.INFO
        return cls.DEBUG


class ErrorCode(IntEnum):
    """Classic bit-valued error codes reported by error handlers."""
    ERROR = 1
    WARNING = 2
    PARSE = 4
    NOTICE = 8
    CORE_ERROR = 16
    CORE_WARNING = 32
    COMPILE_ERROR = 64
    COMPILE_WARNING = 128
    USER_ERROR = 256
    USER_WARNING = 512
    USER_NOTICE = 1024
    STRICT = 2048
    RECOVERABLE_ERROR = 4096
    DEPRECATED = 8192
    USER_DEPRECATED = 16384


# Built-in classification, consulted after the override map
_CLASSIFICATION: Dict[ErrorCode, Severity] = {
    ErrorCode.DEPRECATED: Severity.WARNING,
    ErrorCode.USER_DEPRECATED: Severity.WARNING,
    ErrorCode.WARNING: Severity.WARNING,
    ErrorCode.USER_WARNING: Severity.WARNING,
    ErrorCode.RECOVERABLE_ERROR: Severity.WARNING,
    ErrorCode.ERROR: Severity.FATAL,
    ErrorCode.PARSE: Severity.FATAL,
    ErrorCode.CORE_ERROR: Severity.FATAL,
    ErrorCode.CORE_WARNING: Severity.FATAL,
    ErrorCode.COMPILE_ERROR: Severity.FATAL,
    ErrorCode.COMPILE_WARNING: Severity.FATAL,
    ErrorCode.USER_ERROR: Severity.ERROR,
    ErrorCode.NOTICE: Severity.INFO,
    ErrorCode.USER_NOTICE: Severity.INFO,
    ErrorCode.STRICT: Severity.INFO,
}

SeverityMap = Mapping[Union[ErrorCode, int], Union[Severity, str]]


class SeverityTranslator:
    """
    Translate error codes into event levels.

    Lookup order:
    1. The registered override map, if it contains the code
    2. The built-in classification table
    3. Severity.ERROR

    Example:
        translator = SeverityTranslator()
        translator.translate(ErrorCode.USER_NOTICE)   # Severity.INFO

        translator.register_severity_map({ErrorCode.USER_NOTICE: "debug"})
        translator.translate(ErrorCode.USER_NOTICE)   # Severity.DEBUG
    """

    def __init__(self, severity_map: Optional[SeverityMap] = None):
        self._severity_map: Optional[Dict[int, Severity]] = None
        self.register_severity_map(severity_map)

    @property
    def severity_map(self) -> Optional[Dict[int, Severity]]:
        """Get a copy of the override map, or None if none is registered."""
        if self._severity_map is None:
            return None
        return dict(self._severity_map)

    def register_severity_map(self, severity_map: Optional[SeverityMap]) -> None:
        """
        Replace the override map wholesale.

        Previously registered entries are discarded, not merged.
        Passing None clears the override map.

        Args:
            severity_map: Mapping of error code to level
        """
        if severity_map is None:
            self._severity_map = None
            return
        self._severity_map = {
            int(code): Severity.coerce(level)
            for code, level in severity_map.items()
        }

    def translate(self, code: int) -> Severity:
        """
        Translate an error code into a level.

        Args:
            code: The error code (ErrorCode or plain int)

        Returns:
            The resolved Severity
        """
        code = int(code)
        if self._severity_map is not None and code in self._severity_map:
            return self._severity_map[code]

        try:
            return _CLASSIFICATION.get(ErrorCode(code), Severity.ERROR)
        except ValueError:
            return Severity.ERROR


def code_for_warning(category: type) -> ErrorCode:
    """
    Map a Python warning category onto an error code.

    Args:
        category: The warning class (e.g. DeprecationWarning)

    Returns:
        The matching ErrorCode
    """
    if issubclass(category, (DeprecationWarning, PendingDeprecationWarning)):
        return ErrorCode.USER_DEPRECATED
    if issubclass(category, SyntaxWarning):
        return ErrorCode.COMPILE_WARNING
    if issubclass(category, RuntimeWarning):
        return ErrorCode.WARNING
    return ErrorCode.USER_WARNING
