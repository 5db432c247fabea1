"""Tests for parse options."""

import pytest

from styled_markup.shared import (
    DEFAULT_BASE_FONT_SIZE,
    NewlineStripping,
    OptionsError,
    OptionsValidationError,
    ParseOptions,
)


class TestParseOptions:
    """Test ParseOptions defaults and validation."""

    def test_defaults(self):
        """Test default values."""
        options = ParseOptions()

        assert options.base_font_size == DEFAULT_BASE_FONT_SIZE
        assert options.newline_stripping is NewlineStripping.BEFORE_REPLACERS
        assert options.line_spacing is None
        assert options.proxies == {}

    @pytest.mark.parametrize("kwargs", [
        {"line_spacing": -1},
        {"character_spacing": "wide"},
        {"base_font_size": 0},
        {"font_transform": {"bold": "heavy"}},
        {"link_handler": "open"},
        {"callback": 1},
        {"newline_stripping": "sometimes"},
    ])
    def test_invalid_values(self, kwargs):
        """Test that invalid values raise ValueError."""
        with pytest.raises(ValueError):
            ParseOptions(**kwargs)

    def test_newline_stripping_from_string(self):
        """Test enum names given as strings."""
        options = ParseOptions(newline_stripping="after_replacers")

        assert options.newline_stripping is NewlineStripping.AFTER_REPLACERS

    def test_effective_font_transform(self):
        """Test that caller patches replace the default per style name."""
        options = ParseOptions(font_transform={"bold": {"font_weight": "900"}})

        assert options.effective_font_transform == {
            "italic": {"font_style": "italic"},
            "bold": {"font_weight": "900"},
        }

    def test_override(self):
        """Test deriving options."""
        options = ParseOptions(line_spacing=4)
        derived = options.override(character_spacing=1.5)

        assert derived.line_spacing == 4
        assert derived.character_spacing == 1.5
        assert options.character_spacing is None

    def test_override_invalid(self):
        """Test that invalid overrides raise OptionsValidationError."""
        with pytest.raises(OptionsValidationError):
            ParseOptions().override(base_font_size=-2)
        with pytest.raises(OptionsError):
            ParseOptions().override(unknown=True)


class TestOptionsFromDict:
    """Test dictionary conversion."""

    def test_camel_case_keys(self):
        """Test camelCase aliases."""
        options = ParseOptions.from_dict({
            "lineSpacing": 2,
            "characterSpacing": 1,
            "textStyle": {"color": "red"},
            "newlineStripping": "AFTER_REPLACERS",
        })

        assert options.line_spacing == 2
        assert options.character_spacing == 1
        assert options.text_style == {"color": "red"}
        assert options.newline_stripping is NewlineStripping.AFTER_REPLACERS

    def test_unknown_key(self):
        """Test that unknown keys are rejected with suggestions."""
        with pytest.raises(OptionsValidationError) as excinfo:
            ParseOptions.from_dict({"lineHeight": 2})

        assert excinfo.value.field_name == "lineHeight"
        assert "line_spacing" in excinfo.value.suggestions

    def test_to_dict_round_trip(self):
        """Test that to_dict output is accepted by from_dict."""
        options = ParseOptions(line_spacing=3, correlation_id="req")

        assert ParseOptions.from_dict(options.to_dict()) == options

    def test_coerce(self):
        """Test accepted option shapes."""
        options = ParseOptions()

        assert ParseOptions.coerce(options) is options
        assert ParseOptions.coerce(None) == ParseOptions()
        assert ParseOptions.coerce({"line_spacing": 1}).line_spacing == 1
        with pytest.raises(OptionsValidationError):
            ParseOptions.coerce(3)
