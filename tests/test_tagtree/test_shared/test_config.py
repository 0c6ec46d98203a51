"""Tests for configuration objects."""

import json

import pytest

from tagtree.shared import (
    ConfigValidationError,
    ParserConfig,
    ReaderConfig,
    ScannerConfig,
)


class TestScannerConfig:
    """Test scanner configuration validation."""

    def test_defaults(self) -> None:
        """Test default scanner settings."""
        config = ScannerConfig()

        assert config.max_depth == 1000
        assert config.strict_end_tags is False
        assert config.root_tag == "#document"

    def test_invalid_max_depth(self) -> None:
        """Test a non-positive depth limit is rejected."""
        with pytest.raises(ConfigValidationError, match="max_depth must be > 0") as exc_info:
            ScannerConfig(max_depth=0)
        assert exc_info.value.field_name == "max_depth"

    def test_empty_root_tag(self) -> None:
        """Test the synthetic root needs a tag."""
        with pytest.raises(ConfigValidationError, match="root_tag cannot be empty"):
            ScannerConfig(root_tag="")


class TestReaderConfig:
    """Test reader configuration validation."""

    def test_unknown_encoding(self) -> None:
        """Test an encoding Python does not know is rejected with suggestions."""
        with pytest.raises(ConfigValidationError, match="Unknown encoding") as exc_info:
            ReaderConfig(encoding="no-such-codec")
        assert "utf-8" in exc_info.value.suggestions

    def test_invalid_size_limit(self) -> None:
        """Test a non-positive size limit is rejected."""
        with pytest.raises(ConfigValidationError):
            ReaderConfig(max_input_size=0)

    def test_config_error_is_value_error(self) -> None:
        """Test validation errors can be caught as ValueError."""
        with pytest.raises(ValueError):
            ReaderConfig(max_input_size=-1)


class TestParserConfig:
    """Test the complete parser configuration."""

    def test_configuration_is_frozen(self) -> None:
        """Test configuration objects cannot be modified in place."""
        config = ParserConfig()

        with pytest.raises(AttributeError):
            config.name = "changed"  # type: ignore[misc]

    def test_override_nested_fields(self) -> None:
        """Test double-underscore overrides replace component fields."""
        base = ParserConfig()

        config = base.override(
            scanner__strict_end_tags=True,
            reader__encoding="latin-1",
            name="custom",
        )

        assert config.scanner.strict_end_tags is True
        assert config.reader.encoding == "latin-1"
        assert config.name == "custom"
        assert base.scanner.strict_end_tags is False

    def test_override_unknown_component(self) -> None:
        """Test overriding a component that does not exist fails."""
        with pytest.raises(ConfigValidationError, match="Unknown configuration component"):
            ParserConfig().override(cache__size=1)

    def test_override_unknown_field(self) -> None:
        """Test overriding an unknown field fails with the component named."""
        with pytest.raises(ConfigValidationError) as exc_info:
            ParserConfig().override(scanner__colour="blue")
        assert exc_info.value.field_name == "scanner"

    def test_override_invalid_value_keeps_field_name(self) -> None:
        """Test component validation errors pass through unchanged."""
        with pytest.raises(ConfigValidationError) as exc_info:
            ParserConfig().override(scanner__max_depth=-5)
        assert exc_info.value.field_name == "max_depth"

    def test_json_round_trip(self) -> None:
        """Test a configuration survives conversion to JSON and back."""
        config = ParserConfig().override(
            scanner__max_depth=50, reader__max_input_size=1024, name="small"
        )

        data = json.loads(config.to_json())
        assert data["scanner"]["max_depth"] == 50
        assert ParserConfig.from_json(config.to_json()) == config

    def test_from_dict_partial(self) -> None:
        """Test missing components fall back to defaults."""
        config = ParserConfig.from_dict({"scanner": {"strict_end_tags": True}})

        assert config.scanner.strict_end_tags is True
        assert config.reader == ReaderConfig()

    def test_from_dict_unknown_keys(self) -> None:
        """Test unknown top-level keys are rejected."""
        with pytest.raises(ConfigValidationError, match="Unknown configuration keys: extra"):
            ParserConfig.from_dict({"extra": 1})

    def test_from_dict_unknown_component_field(self) -> None:
        """Test unknown component fields are rejected."""
        with pytest.raises(ConfigValidationError):
            ParserConfig.from_dict({"reader": {"buffer": 10}})

    @pytest.mark.parametrize(
        "payload, field_name",
        [
            ('{"scanner": 5}', "scanner"),
            ('{"reader": null}', "reader"),
            ('{"scanner": [1]}', "scanner"),
        ],
    )
    def test_from_json_component_not_an_object(self, payload: str, field_name: str) -> None:
        """Test a component section that is not an object is rejected."""
        with pytest.raises(ConfigValidationError, match="must be an object") as exc_info:
            ParserConfig.from_json(payload)
        assert exc_info.value.field_name == field_name

    def test_component_type_is_checked(self) -> None:
        """Test components of the wrong type are rejected on construction and override."""
        with pytest.raises(ConfigValidationError, match="scanner must be a ScannerConfig"):
            ParserConfig(scanner=5)  # type: ignore[arg-type]
        with pytest.raises(ConfigValidationError) as exc_info:
            ParserConfig().override(reader=None)
        assert exc_info.value.field_name == "reader"

    def test_from_json_invalid(self) -> None:
        """Test malformed JSON and non-object JSON are rejected."""
        with pytest.raises(ConfigValidationError, match="Invalid configuration JSON"):
            ParserConfig.from_json("{not json")
        with pytest.raises(ConfigValidationError, match="must be an object"):
            ParserConfig.from_json("[1, 2]")

    def test_presets(self) -> None:
        """Test the permissive and strict presets."""
        assert ParserConfig.permissive().scanner.strict_end_tags is False
        assert ParserConfig.permissive().name == "permissive"
        assert ParserConfig.strict().scanner.strict_end_tags is True
        assert ParserConfig.strict().name == "strict"
