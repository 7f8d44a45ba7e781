"""
Warnings Integration.

Captures Python warnings as events. The warning category is mapped to
an error code and translated through the client's severity
translator, so a registered severity map applies to warnings too.
"""

from __future__ import annotations

import logging
import warnings
from typing import Any, Callable, Optional

from ..client import Client
from ..scope import Scope
from ..severity import code_for_warning

logger = logging.getLogger(__name__)


class WarningsIntegration:
    """
    Hook ``warnings.showwarning`` to capture warnings.

    The previous hook still runs, so warnings keep being displayed.

    Example:
        integration = WarningsIntegration(client).install()
        warnings.warn("old API", DeprecationWarning)   # captured at "warning"
        integration.uninstall()
    """

    def __init__(self, client: Client, scope: Optional[Scope] = None):
        self.client = client
        self.scope = scope
        self._previous: Optional[Callable[..., Any]] = None

    @property
    def installed(self) -> bool:
        return self._previous is not None

    def install(self) -> "WarningsIntegration":
        if self._previous is None:
            self._previous = warnings.showwarning
            warnings.showwarning = self._showwarning
        return self

    def uninstall(self) -> None:
        if self._previous is not None:
            warnings.showwarning = self._previous
            self._previous = None

    def capture(self, message: Any, category: type, filename: str, lineno: int) -> Optional[str]:
        """
        Capture a single warning.

        Returns:
            The transport's event identifier, or None if dropped
        """
        code = code_for_warning(category)
        payload = {
            "message": str(message),
            "level": self.client.translate_severity(code),
            "logger": "py.warnings",
            "tags": {"warning_category": category.__name__},
            "extra": {"filename": filename, "lineno": lineno, "code": int(code)},
        }
        return self.client.capture_event(payload, self.scope)

    def _showwarning(self, message, category, filename, lineno, file=None, line=None):
        try:
            self.capture(message, category, filename, lineno)
        except Exception as exc:
            logger.warning("Failed to capture warning: %s", exc)

        if self._previous is not None:
            self._previous(message, category, filename, lineno, file, line)
