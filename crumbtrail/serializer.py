"""
Value Serialization.

Turns arbitrary Python values attached to events (extra data, request
bodies, exception arguments) into JSON-safe structures with bounded
depth and size.
"""

from __future__ import annotations

from typing import Any, Dict, List


class Serializer:
    """
    Convert values into JSON-safe structures.

    Containers are walked up to ``max_depth`` levels. Objects are
    rendered as a short ``"Object <qualified name>"`` marker unless
    all-object serialization is enabled, in which case their public
    attributes are serialized like a dict.

    Example:
        serializer = Serializer(max_depth=2)
        serializer.serialize({"a": {"b": {"c": 1}}})
        # {"a": {"b": "Array of length 1"}}
    """

    def __init__(
        self,
        max_depth: int = 3,
        max_string_length: int = 1024,
        max_list_items: int = 50,
        serialize_all_objects: bool = False,
    ):
        """
        Initialize the serializer.

        Args:
            max_depth: Maximum container nesting to walk
            max_string_length: Maximum length for string values
            max_list_items: Maximum number of items kept per container
            serialize_all_objects: Serialize object attributes instead of a marker
        """
        self.max_depth = max_depth
        self.max_string_length = max_string_length
        self.max_list_items = max_list_items
        self._serialize_all_objects = serialize_all_objects

    def set_all_object_serialize(self, value: bool) -> None:
        self._serialize_all_objects = bool(value)

    def get_all_object_serialize(self) -> bool:
        return self._serialize_all_objects

    def serialize(self, value: Any, depth: int = 0) -> Any:
        """
        Serialize a value.

        Args:
            value: Value to serialize
            depth: Current nesting depth

        Returns:
            JSON-safe representation
        """
        if value is None or isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return self._serialize_number(value)
        if isinstance(value, bytes):
            value = value.decode("utf-8", errors="replace")
        if isinstance(value, str):
            return self._serialize_string(value)

        if isinstance(value, dict):
            if depth >= self.max_depth:
                return f"Array of length {len(value)}"
            return self._serialize_dict(value, depth)
        if isinstance(value, (list, tuple, set, frozenset)):
            if depth >= self.max_depth:
                return f"Array of length {len(value)}"
            return self._serialize_list(list(value), depth)

        return self._serialize_object(value, depth)

    def _serialize_dict(self, data: Dict[Any, Any], depth: int) -> Dict[str, Any]:
        result = {}
        for index, (key, item) in enumerate(data.items()):
            if index >= self.max_list_items:
                break
            result[str(key)] = self.serialize(item, depth + 1)
        return result

    def _serialize_list(self, data: List[Any], depth: int) -> List[Any]:
        return [self.serialize(item, depth + 1) for item in data[:self.max_list_items]]

    def _serialize_object(self, value: Any, depth: int) -> Any:
        if self._serialize_all_objects and hasattr(value, "__dict__"):
            if depth >= self.max_depth:
                return f"Object {self._qualified_name(value)}"
            public = {k: v for k, v in vars(value).items() if not k.startswith("_")}
            return self._serialize_dict(public, depth)
        return f"Object {self._qualified_name(value)}"

    def _serialize_number(self, value: Any) -> Any:
        return value

    def _serialize_string(self, value: str) -> str:
        if len(value) > self.max_string_length:
            return value[:self.max_string_length] + "..."
        return value

    @staticmethod
    def _qualified_name(value: Any) -> str:
        cls = type(value)
        return f"{cls.__module__}.{cls.__qualname__}"


class ReprSerializer(Serializer):
    """
    Serializer producing display representations.

    Scalars are rendered as their ``repr`` so that the collector can
    show ``None``, ``True`` and numbers distinctly from strings.
    """

    def serialize(self, value: Any, depth: int = 0) -> Any:
        if value is None or isinstance(value, bool):
            return repr(value)
        return super().serialize(value, depth)

    def _serialize_number(self, value: Any) -> str:
        return repr(value)
