"""
Inbound Request Snapshot and Capture Context.

The client never reads request state from globals. Code that serves
requests builds a RequestSnapshot and passes it explicitly to the
capture call; command-line code passes nothing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

# WSGI environ keys copied into RequestSnapshot.env
_ENV_KEYS = ("REMOTE_ADDR", "SERVER_NAME", "SERVER_PORT")


@dataclass(frozen=True)
class RequestSnapshot:
    """
    Read-only view of the request being served.

    Attributes:
        method: HTTP method
        url: Absolute URL without the query string
        path_info: Path of the request, used as the initial transaction name
        query_string: Raw query string
        headers: Request headers
        env: Selected server environment values
        data: Parsed request body, if the caller has one
        cookies: Request cookies
    """
    method: str = "GET"
    url: str = ""
    path_info: Optional[str] = None
    query_string: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)
    env: Mapping[str, str] = field(default_factory=dict)
    data: Any = None
    cookies: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        for name in ("headers", "env", "cookies"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    @classmethod
    def from_wsgi_environ(cls, environ: Mapping[str, Any], data: Any = None) -> RequestSnapshot:
        """
        Build a snapshot from a WSGI environ.

        Args:
            environ: The WSGI environ of the current request
            data: Parsed request body, if available

        Returns:
            RequestSnapshot instance
        """
        headers = {}
        for key, value in environ.items():
            if key.startswith("HTTP_") and key != "HTTP_COOKIE":
                headers[key[5:].replace("_", "-").title()] = value
            elif key in ("CONTENT_TYPE", "CONTENT_LENGTH") and value:
                headers[key.replace("_", "-").title()] = value

        cookies = {}
        for chunk in environ.get("HTTP_COOKIE", "").split(";"):
            name, sep, value = chunk.strip().partition("=")
            if sep:
                cookies[name] = value

        scheme = environ.get("wsgi.url_scheme", "http")
        host = environ.get("HTTP_HOST") or environ.get("SERVER_NAME", "localhost")
        path = environ.get("SCRIPT_NAME", "") + environ.get("PATH_INFO", "")

        return cls(
            method=environ.get("REQUEST_METHOD", "GET"),
            url=f"{scheme}://{host}{path}",
            path_info=environ.get("PATH_INFO") or None,
            query_string=environ.get("QUERY_STRING", ""),
            headers=headers,
            env={key: str(environ[key]) for key in _ENV_KEYS if key in environ},
            data=data,
            cookies=cookies,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the request interface of an event."""
        result: Dict[str, Any] = {
            "method": self.method,
            "url": self.url,
        }
        if self.query_string:
            result["query_string"] = self.query_string
        if self.headers:
            result["headers"] = dict(self.headers)
        if self.env:
            result["env"] = dict(self.env)
        if self.cookies:
            result["cookies"] = dict(self.cookies)
        if self.data is not None:
            result["data"] = self.data
        return result


@dataclass(frozen=True)
class CaptureContext:
    """
    Per-call context handed to every middleware step.

    Attributes:
        request: The inbound request, or None outside a request
        exception: The exception being captured, if any
        payload: The raw capture payload
    """
    request: Optional[RequestSnapshot] = None
    exception: Optional[BaseException] = None
    payload: Mapping[str, Any] = field(default_factory=dict)
