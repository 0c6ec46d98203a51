"""Configuration classes for tagtree.

Configuration objects are frozen dataclasses that validate themselves on
construction, so a ``ParserConfig`` can be shared freely between parser
instances.
"""

import codecs
import json
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Optional

from tagtree.shared.errors import ConfigValidationError

DEFAULT_ROOT_TAG = "#document"
DEFAULT_MAX_DEPTH = 1000


@dataclass(frozen=True)
class ScannerConfig:
    """Configuration for the markup scanner and tree builder."""

    max_depth: int = DEFAULT_MAX_DEPTH
    strict_end_tags: bool = False
    root_tag: str = DEFAULT_ROOT_TAG

    def __post_init__(self) -> None:
        """Validate scanner configuration."""
        if self.max_depth <= 0:
            raise ConfigValidationError("max_depth must be > 0", field_name="max_depth")
        if not self.root_tag:
            raise ConfigValidationError(
                "root_tag cannot be empty", field_name="root_tag"
            )


@dataclass(frozen=True)
class ReaderConfig:
    """Configuration for turning caller input into a text buffer.

    ``max_input_size`` is measured in bytes for binary and file input and in
    characters for text input.
    """

    encoding: str = "utf-8"
    max_input_size: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate reader configuration."""
        try:
            codecs.lookup(self.encoding)
        except LookupError as e:
            raise ConfigValidationError(
                f"Unknown encoding: {self.encoding}",
                field_name="encoding",
                suggestions=["utf-8", "latin-1"],
            ) from e
        if self.max_input_size is not None and self.max_input_size <= 0:
            raise ConfigValidationError(
                "max_input_size must be > 0 or None", field_name="max_input_size"
            )


_COMPONENTS = {"scanner": ScannerConfig, "reader": ReaderConfig}


@dataclass(frozen=True)
class ParserConfig:
    """Complete configuration for a parse operation."""

    scanner: ScannerConfig = field(default_factory=ScannerConfig)
    reader: ReaderConfig = field(default_factory=ReaderConfig)
    correlation_id: Optional[str] = None
    name: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate component types."""
        for component, component_class in _COMPONENTS.items():
            if not isinstance(getattr(self, component), component_class):
                raise ConfigValidationError(
                    f"{component} must be a {component_class.__name__}",
                    field_name=component,
                )

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Component fields use double-underscore notation.

        Example:
            >>> config = ParserConfig().override(scanner__strict_end_tags=True)
            >>> config.scanner.strict_end_tags
            True
        """
        nested_overrides: Dict[str, Dict[str, Any]] = {}
        top_level: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=sorted(_COMPONENTS),
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                top_level[key] = value

        new_fields: Dict[str, Any] = dict(top_level)
        for component, values in nested_overrides.items():
            try:
                new_fields[component] = replace(getattr(self, component), **values)
            except ConfigValidationError:
                raise
            except (TypeError, ValueError) as e:
                raise ConfigValidationError(str(e), field_name=component) from e
        try:
            return replace(self, **new_fields)
        except ConfigValidationError:
            raise
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a plain dictionary."""
        result: Dict[str, Any] = {}
        for config_field in fields(self):
            value = getattr(self, config_field.name)
            if config_field.name in _COMPONENTS:
                value = {f.name: getattr(value, f.name) for f in fields(value)}
            result[config_field.name] = value
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected rather than silently dropped.
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration keys: {', '.join(sorted(unknown))}",
                suggestions=sorted(known),
            )

        values: Dict[str, Any] = {}
        for key, value in data.items():
            component_class = _COMPONENTS.get(key)
            if component_class is not None:
                if not isinstance(value, dict):
                    raise ConfigValidationError(
                        f"Configuration section {key!r} must be an object",
                        field_name=key,
                    )
                try:
                    value = component_class(**value)
                except TypeError as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            values[key] = value
        return cls(**values)

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def permissive(cls) -> "ParserConfig":
        """Mismatched and unclosed tags are reported as warnings."""
        return cls(name="permissive")

    @classmethod
    def strict(cls) -> "ParserConfig":
        """Mismatched, extra and unclosed tags fail the parse."""
        return cls(scanner=ScannerConfig(strict_end_tags=True), name="strict")
