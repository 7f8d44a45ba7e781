"""
Client Options.

This module provides the configuration read by the client and its
pipeline: static identity stamped onto events, breadcrumb limits,
sampling and serialization switches.
"""

from __future__ import annotations

import socket
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .breadcrumbs import Breadcrumb


def _keep_breadcrumb(breadcrumb: Breadcrumb) -> Optional[Breadcrumb]:
    return breadcrumb


class Options(BaseModel):
    """
    Configuration for a Client.

    Options are read-only from the pipeline's point of view. Use
    from_dict() to build them from plain data, optionally starting
    from a preset.

    Attributes:
        server_name: Host name stamped on every event
        release: Application release stamped on every event
        environment: Environment name stamped on every event
        max_breadcrumbs: Breadcrumb trail capacity; 0 or less disables breadcrumbs
        before_breadcrumb: Callback returning a (possibly modified) breadcrumb, or None to drop it
        serialize_all_objects: Serialize object attributes instead of a type marker
        sample_rate: Fraction of events to send (1.0 = all)
        default_middlewares: Install the built-in enrichment steps
        tags: Tags added to every event
        ignore_exceptions: Exception class names whose events are dropped
        excluded_loggers: Logger names the logging integration ignores
        max_value_length: Maximum length of serialized string values
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, validate_assignment=True)

    server_name: Optional[str] = Field(default_factory=socket.gethostname)
    release: Optional[str] = None
    environment: Optional[str] = None

    max_breadcrumbs: int = 100
    before_breadcrumb: Callable[[Breadcrumb], Optional[Breadcrumb]] = _keep_breadcrumb

    serialize_all_objects: bool = False
    max_value_length: int = Field(default=1024, gt=0)

    sample_rate: float = Field(default=1.0, ge=0.0, le=1.0)
    default_middlewares: bool = True

    tags: Dict[str, str] = Field(default_factory=dict)
    ignore_exceptions: List[str] = Field(default_factory=list)
    excluded_loggers: List[str] = Field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Options":
        """
        Create Options from a dictionary (e.g., from JSON).

        A "preset" key selects the base configuration; every other key
        overrides it:

        ```json
        {
          "preset": "production",
          "release": "shop@1.4.2",
          "max_breadcrumbs": 50
        }
        ```

        Args:
            data: Dictionary with option values

        Returns:
            Options instance

        Raises:
            ValueError: If the preset name is unknown
            pydantic.ValidationError: If a value is invalid
        """
        if not data:
            return cls()

        data = dict(data)
        preset_name = data.pop("preset", None)
        base_options = get_preset(preset_name) if preset_name else cls()

        return cls.model_validate({**base_options.model_dump(), **data})

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the Options to a dictionary (for JSON serialization).

        The before_breadcrumb callback is not serializable and is left out.
        """
        return self.model_dump(exclude={"before_breadcrumb"})


def default_options() -> Options:
    """
    Get the default options.

    Returns:
        Options with sensible defaults
    """
    return Options()


def development_options() -> Options:
    """Everything captured, labelled as development."""
    return Options(environment="development", max_breadcrumbs=200)


def production_options() -> Options:
    """
    Get production options.

    Keeps a shorter breadcrumb trail and labels events as production.
    """
    return Options(environment="production", max_breadcrumbs=50)


def silent_options() -> Options:
    """
    Get options that send nothing.

    Breadcrumbs are disabled and every event is sampled out.
    """
    return Options(max_breadcrumbs=0, sample_rate=0.0)


# Named option sets accepted by get_preset and Options.from_dict
PRESETS = {
    "default": default_options,
    "development": development_options,
    "production": production_options,
    "silent": silent_options,
}


def get_preset(name: str) -> Options:
    """
    Build the Options registered under a preset name.

    Each call returns a fresh instance, so callers may change it freely.

    Raises:
        ValueError: If no preset has that name
    """
    factory = PRESETS.get(name)
    if factory is None:
        choices = ", ".join(sorted(PRESETS))
        raise ValueError(f"No preset named {name!r} (choose from {choices})")
    return factory()
