"""Configuration objects for styled markup compilation.

:class:`ParseOptions` gathers every per-call option of ``process()``. It can
be built directly, from a plain dictionary (both snake_case and the camelCase
keys used by markup authors coming from the JavaScript toolkit are accepted)
or derived from another instance with :meth:`ParseOptions.override`.
"""

from dataclasses import dataclass, field, fields, replace
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional

DEFAULT_BASE_FONT_SIZE = 14

DEFAULT_FONT_TRANSFORM: Dict[str, Dict[str, Any]] = {
    "italic": {"font_style": "italic"},
    "bold": {"font_weight": "bold"},
}

# camelCase spellings accepted by ParseOptions.from_dict
_OPTION_ALIASES = {
    "fontTransform": "font_transform",
    "lineSpacing": "line_spacing",
    "characterSpacing": "character_spacing",
    "textStyle": "text_style",
    "linkHandler": "link_handler",
    "baseFontSize": "base_font_size",
    "newlineStripping": "newline_stripping",
    "correlationId": "correlation_id",
}


class NewlineStripping(Enum):
    """When raw newlines are removed from the markup."""

    BEFORE_REPLACERS = auto()  # Replacer output may still contain newlines
    AFTER_REPLACERS = auto()   # No raw newline reaches the compiler


class OptionsError(Exception):
    """Base exception for option errors."""


class OptionsValidationError(OptionsError):
    """Exception raised when option validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass
class ParseOptions:
    """Per-call options of a compile pass.

    Attributes:
        font_transform: Style-name to font patch, merged over
            ``DEFAULT_FONT_TRANSFORM`` ("italic" and "bold")
        proxies: Proxy overrides for this call only
        replacers: Replacer overrides for this call only
        container: Output sink; falls back to the parser's stored container
        line_spacing: Paragraph line spacing applied to every finalized run
        character_spacing: Kerning applied to every finalized run
        text_style: Patch applied to the base properties of every label
        link_handler: Called with the link event instead of opening the URL
        callback: Called once after the whole pass completed
        base_font_size: Font size of the label base properties
        newline_stripping: Ordering of newline stripping and replacers
        correlation_id: Tag attached to every log record and diagnostic
    """

    font_transform: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    proxies: Dict[str, Any] = field(default_factory=dict)
    replacers: Dict[str, Any] = field(default_factory=dict)
    container: Optional[Any] = None
    line_spacing: Optional[float] = None
    character_spacing: Optional[float] = None
    text_style: Dict[str, Any] = field(default_factory=dict)
    link_handler: Optional[Callable[[Dict[str, Any]], Any]] = None
    callback: Optional[Callable[[], Any]] = None
    base_font_size: float = DEFAULT_BASE_FONT_SIZE
    newline_stripping: NewlineStripping = NewlineStripping.BEFORE_REPLACERS
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate options."""
        if self.line_spacing is not None and self.line_spacing < 0:
            raise ValueError("line_spacing must be >= 0 or None")
        if self.character_spacing is not None and not isinstance(
            self.character_spacing, (int, float)
        ):
            raise ValueError("character_spacing must be a number or None")
        if self.base_font_size <= 0:
            raise ValueError("base_font_size must be > 0")
        for name, patch in self.font_transform.items():
            if not isinstance(patch, dict):
                raise ValueError(f"font_transform[{name!r}] must be a dict")
        if self.link_handler is not None and not callable(self.link_handler):
            raise ValueError("link_handler must be callable or None")
        if self.callback is not None and not callable(self.callback):
            raise ValueError("callback must be callable or None")
        if isinstance(self.newline_stripping, str):
            try:
                self.newline_stripping = NewlineStripping[
                    self.newline_stripping.upper()
                ]
            except KeyError as e:
                valid = [member.name for member in NewlineStripping]
                raise ValueError(f"newline_stripping must be one of {valid}") from e

    @property
    def effective_font_transform(self) -> Dict[str, Dict[str, Any]]:
        """Font transform with the caller's patches merged over the defaults."""
        merged = {name: dict(patch) for name, patch in DEFAULT_FONT_TRANSFORM.items()}
        for name, patch in self.font_transform.items():
            merged[name] = dict(patch)
        return merged

    def override(self, **kwargs: Any) -> "ParseOptions":
        """Create new options with specific fields replaced.

        Example:
            >>> options = ParseOptions(line_spacing=4)
            >>> options.override(character_spacing=1.5).line_spacing
            4
        """
        try:
            return replace(self, **kwargs)
        except (TypeError, ValueError) as e:
            raise OptionsValidationError(str(e)) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a snake_case dictionary accepted by :meth:`from_dict`."""
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["newline_stripping"] = self.newline_stripping.name
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ParseOptions":
        """Create options from a dictionary.

        Args:
            data: Option mapping, snake_case or camelCase keys

        Returns:
            ParseOptions instance

        Raises:
            OptionsValidationError: On unknown keys or invalid values
        """
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in (data or {}).items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in known:
                raise OptionsValidationError(
                    f"Unknown option: {key}",
                    field_name=key,
                    suggestions=sorted(known),
                )
            values[name] = value

        try:
            return cls(**values)
        except ValueError as e:
            raise OptionsValidationError(str(e)) from e

    @classmethod
    def coerce(cls, options: Any) -> "ParseOptions":
        """Accept a ParseOptions, a dictionary or None."""
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        if isinstance(options, dict):
            return cls.from_dict(options)
        raise OptionsValidationError(
            f"Options must be ParseOptions or dict, got {type(options).__name__}"
        )
