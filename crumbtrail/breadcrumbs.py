"""
Breadcrumb Definitions and Recording.

Breadcrumbs are the trail of occurrences leading up to a captured event.
They are immutable once created and are stored on a Scope, which keeps
only the most recent ones.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, UTC
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional

from .severity import Severity

if TYPE_CHECKING:
    from .options import Options
    from .scope import Scope

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Breadcrumb:
    """
    A single entry in the breadcrumb trail.

    Attributes:
        category: Dotted category, e.g. "http" or "db.query"
        message: Human-readable description
        level: Severity of the occurrence
        type: Rendering hint for the collector ("default", "http", "navigation", ...)
        timestamp: When the occurrence happened
        data: Additional structured data
    """
    category: str
    message: Optional[str] = None
    level: Severity = Severity.INFO
    type: str = "default"
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    data: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "level", Severity.coerce(self.level))
        object.__setattr__(self, "data", MappingProxyType(dict(self.data)))

    def __hash__(self) -> int:
        # data is a mapping view and stays out of the hash
        return hash((self.category, self.message, self.level, self.type, self.timestamp))

    def with_message(self, message: Optional[str]) -> Breadcrumb:
        return replace(self, message=message)

    def with_level(self, level: Severity) -> Breadcrumb:
        return replace(self, level=level)

    def with_data(self, **kwargs) -> Breadcrumb:
        """
        Create a new breadcrumb with updated data.

        Args:
            **kwargs: Key-value pairs to add/update in data

        Returns:
            New Breadcrumb with merged data
        """
        return replace(self, data={**self.data, **kwargs})

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        result: Dict[str, Any] = {
            "type": self.type,
            "category": self.category,
            "level": self.level.value,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.message is not None:
            result["message"] = self.message
        if self.data:
            result["data"] = dict(self.data)
        return result


class BreadcrumbRecorder:
    """
    Admit breadcrumbs into a scope.

    The recorder applies the configured limits and the user's
    before-breadcrumb callback. It holds no breadcrumbs itself: without
    a scope there is nowhere to store one and it is discarded.

    Example:
        recorder = BreadcrumbRecorder(Options(max_breadcrumbs=10))
        recorder.record(Breadcrumb(category="auth", message="login"), scope)
    """

    def __init__(self, options: "Options"):
        self._options = options

    def record(self, breadcrumb: Breadcrumb, scope: Optional["Scope"] = None) -> bool:
        """
        Record a breadcrumb on a scope.

        Args:
            breadcrumb: Breadcrumb to record
            scope: Scope that stores the trail

        Returns:
            True if the breadcrumb was stored on the scope
        """
        max_breadcrumbs = self._options.max_breadcrumbs
        if max_breadcrumbs <= 0:
            return False

        kept = self._options.before_breadcrumb(breadcrumb)
        if kept is None:
            logger.debug("Breadcrumb %r dropped by before_breadcrumb", breadcrumb.category)
            return False

        if scope is None:
            return False

        scope.add_breadcrumb(kept, max_breadcrumbs)
        return True
