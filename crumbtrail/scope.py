"""
Scope Management.

A Scope holds the ambient context of one logical unit of work (a
request, a job, a command): tags, user, extra data and the breadcrumb
trail. It is owned by the caller and merged into every event captured
with it.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional

from .breadcrumbs import Breadcrumb
from .event import Event
from .severity import Severity


class Scope:
    """
    Caller-owned ambient context merged into events.

    Example:
        scope = Scope()
        scope.set_tag("region", "eu-west-1")
        scope.set_user({"id": "42"})
        client.capture_message("disk full", scope=scope)
    """

    def __init__(self):
        self._tags: Dict[str, str] = {}
        self._user: Dict[str, Any] = {}
        self._extra: Dict[str, Any] = {}
        self._fingerprint: List[str] = []
        self._level: Optional[Severity] = None
        self._breadcrumbs: List[Breadcrumb] = []

    @property
    def tags(self) -> Dict[str, str]:
        return self._tags.copy()

    @property
    def user(self) -> Dict[str, Any]:
        return self._user.copy()

    @property
    def extra(self) -> Dict[str, Any]:
        return self._extra.copy()

    @property
    def fingerprint(self) -> List[str]:
        return self._fingerprint.copy()

    @property
    def level(self) -> Optional[Severity]:
        return self._level

    @property
    def breadcrumbs(self) -> List[Breadcrumb]:
        """Get the breadcrumb trail, oldest first."""
        return self._breadcrumbs.copy()

    def set_tag(self, key: str, value: Any) -> "Scope":
        self._tags[key] = str(value)
        return self

    def set_tags(self, tags: Dict[str, Any]) -> "Scope":
        for key, value in tags.items():
            self.set_tag(key, value)
        return self

    def set_user(self, user: Dict[str, Any], merge: bool = False) -> "Scope":
        """
        Set the user context.

        Args:
            user: User attributes (id, email, username, ...)
            merge: Merge into the existing user instead of replacing it

        Returns:
            Self for chaining
        """
        if merge:
            self._user.update(user)
        else:
            self._user = dict(user)
        return self

    def set_extra(self, key: str, value: Any) -> "Scope":
        self._extra[key] = value
        return self

    def set_fingerprint(self, fingerprint: List[str]) -> "Scope":
        self._fingerprint = list(fingerprint)
        return self

    def set_level(self, level: Optional[Severity]) -> "Scope":
        self._level = Severity.coerce(level) if level is not None else None
        return self

    def add_breadcrumb(self, breadcrumb: Breadcrumb, max_breadcrumbs: int) -> "Scope":
        """
        Append a breadcrumb, evicting the oldest ones beyond capacity.

        Args:
            breadcrumb: Breadcrumb to append
            max_breadcrumbs: Capacity of the trail

        Returns:
            Self for chaining
        """
        self._breadcrumbs.append(breadcrumb)
        overflow = len(self._breadcrumbs) - max_breadcrumbs
        if overflow > 0:
            del self._breadcrumbs[:overflow]
        return self

    def clear_breadcrumbs(self) -> "Scope":
        self._breadcrumbs.clear()
        return self

    def clear(self) -> "Scope":
        """Reset the scope to its initial, empty state."""
        self.__init__()
        return self

    def copy(self) -> "Scope":
        """Create an independent copy of this scope."""
        new_scope = Scope()
        new_scope._tags = self._tags.copy()
        new_scope._user = copy.deepcopy(self._user)
        new_scope._extra = copy.deepcopy(self._extra)
        new_scope._fingerprint = self._fingerprint.copy()
        new_scope._level = self._level
        new_scope._breadcrumbs = self._breadcrumbs.copy()
        return new_scope

    def apply_to_event(self, event: Event) -> Event:
        """
        Merge this scope onto an event.

        Scope tags, user and extra override values of the same key on
        the event. The scope level replaces the event level when set,
        the fingerprint only fills an empty one, and the breadcrumb
        trail replaces the event's breadcrumbs.

        Args:
            event: Event to enrich

        Returns:
            The same event
        """
        if self._level is not None:
            event.level = self._level

        event.tags.update(self._tags)
        event.user.update(self._user)
        event.extra.update(self._extra)

        if not event.fingerprint and self._fingerprint:
            event.fingerprint = self._fingerprint.copy()

        if self._breadcrumbs:
            event.breadcrumbs = self._breadcrumbs.copy()

        return event
