"""Runtime and server OS contexts attached to events."""

from __future__ import annotations

import platform
import sys
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional


def _runtime_version() -> str:
    return ".".join(str(part) for part in sys.version_info[:3])


@dataclass
class RuntimeContext:
    """The interpreter the client runs in."""
    name: str = field(default_factory=platform.python_implementation)
    version: str = field(default_factory=_runtime_version)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ServerOsContext:
    """The operating system of the host."""
    name: str = field(default_factory=platform.system)
    version: str = field(default_factory=platform.release)
    build: str = field(default_factory=platform.version)
    kernel_version: Optional[str] = field(default_factory=lambda: platform.platform() or None)

    def to_dict(self) -> Dict[str, Any]:
        return {key: value for key, value in asdict(self).items() if value}
