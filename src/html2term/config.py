# =============================================================================
# Configuration Management
# =============================================================================
# Two layers of configuration:
#
#   1. The defaults file, a small TOML file that lets users change the
#      built-in defaults (column width, colour on/off, ...) without typing
#      flags every time.
#        $XDG_CONFIG_HOME/html2term/config.toml  (default: ~/.config/html2term/)
#
#   2. RenderConfig, the immutable set of options for one invocation,
#      assembled from command-line flags on top of the defaults file by
#      build_render_config().
#
# Example config.toml:
#
#   [rendering]
#   width = 100
#   colour = true
#   hyperlinks = true
# =============================================================================

import logging
import os
import tomllib  # Built into Python 3.11+
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w  # For writing TOML (tomllib is read-only)

from html2term.core import ConversionError, ErrorKind

logger = logging.getLogger(__name__)


# Application identifier used in XDG paths
APP_NAME = "html2term"

# Column width used when neither a flag nor the defaults file gives one
DEFAULT_WIDTH = 80


def get_xdg_config_home() -> Path:
    """
    Returns the XDG config directory for html2term.

    Respects $XDG_CONFIG_HOME if set, otherwise uses ~/.config/html2term/
    """
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        base = Path(xdg_config)
    else:
        base = Path.home() / ".config"
    return base / APP_NAME


# =============================================================================
# Defaults File
# =============================================================================

@dataclass
class RenderingDefaults:
    """
    User-adjustable defaults for rendering.

    Attributes:
        width: Column width to format to.
        wrap_width: Maximum text wrap width (0 = same as width).
        colour: Render with terminal colours by default.
        hyperlinks: Emit clickable hyperlinks by default.
        css: Apply the document's CSS by default.
        css_support: Whether CSS handling is available at all. When false,
                     every CSS-related option is rejected.
    """
    width: int = DEFAULT_WIDTH
    wrap_width: int = 0                 # 0 = no separate wrap width
    colour: bool = False
    hyperlinks: bool = False
    css: bool = False
    css_support: bool = True


@dataclass
class Config:
    """
    Contents of the defaults file.

    Usage:
        >>> config = Config.load()
        >>> config.rendering.width
        80
    """
    rendering: RenderingDefaults = field(default_factory=RenderingDefaults)

    @staticmethod
    def config_file_path() -> Path:
        """Returns the path to the defaults file."""
        return get_xdg_config_home() / "config.toml"

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """
        Load the defaults file.

        A missing file is not an error: the built-in defaults are returned.

        Args:
            path: File to read. Defaults to the XDG location.

        Returns:
            Loaded Config object.

        Raises:
            ConversionError: If the file exists but can't be read or parsed.
        """
        config_path = path or cls.config_file_path()

        if not config_path.exists():
            logger.debug(f"No config file at {config_path}, using defaults")
            return cls()

        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConversionError(
                ErrorKind.CONFIG, f"invalid config file {config_path}", e
            ) from e
        except OSError as e:
            raise ConversionError(
                ErrorKind.CONFIG, f"reading config file {config_path}", e
            ) from e

        logger.debug(f"Loaded config from {config_path}")
        return cls._from_dict(data)

    def save(self, path: Path | None = None) -> Path:
        """
        Write the defaults file, creating its directory if needed.

        Returns:
            The path written to.
        """
        config_path = path or self.config_file_path()
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(config_path, "wb") as f:
                tomli_w.dump(self._to_dict(), f)
        except OSError as e:
            raise ConversionError(
                ErrorKind.CONFIG, f"writing config file {config_path}", e
            ) from e
        return config_path

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "Config":
        """Create a Config from parsed TOML."""
        rendering = data.get("rendering", {})
        return cls(
            rendering=RenderingDefaults(
                width=rendering.get("width", DEFAULT_WIDTH),
                wrap_width=rendering.get("wrap_width", 0),
                colour=rendering.get("colour", False),
                hyperlinks=rendering.get("hyperlinks", False),
                css=rendering.get("css", False),
                css_support=rendering.get("css_support", True),
            )
        )

    def _to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary for TOML serialization."""
        return {
            "rendering": {
                "width": self.rendering.width,
                "wrap_width": self.rendering.wrap_width,
                "colour": self.rendering.colour,
                "hyperlinks": self.rendering.hyperlinks,
                "css": self.rendering.css,
                "css_support": self.rendering.css_support,
            }
        }


# =============================================================================
# Per-Invocation Options
# =============================================================================

@dataclass(frozen=True)
class RenderConfig:
    """
    Validated options for a single conversion. Immutable once built.

    Attributes:
        width: Target column width.
        wrap_width: Optional maximum text wrap width.
        use_colour: Produce terminal colour output.
        hyperlinks: Render links and images as clickable anchors.
        use_css: Apply the document's CSS (colours, display: none).
        use_css_colours: Honour CSS colour annotations when colouring.
        use_only_css: Don't use the default non-CSS colours.
        show_dom: Dump the parsed DOM instead of rendering.
        show_render: Dump the render tree instead of rendering.
        show_css: Dump the parsed document CSS instead of rendering.
        literal: Plain text without any decorations.
        css_supported: Whether CSS handling is available.
    """
    width: int = DEFAULT_WIDTH
    wrap_width: int | None = None
    use_colour: bool = False
    hyperlinks: bool = False
    use_css: bool = False
    use_css_colours: bool = True
    use_only_css: bool = False
    show_dom: bool = False
    show_render: bool = False
    show_css: bool = False
    literal: bool = False
    css_supported: bool = True

    @property
    def text_width(self) -> int:
        """Width used for wrapping text, honouring wrap_width."""
        if self.wrap_width is not None:
            return min(self.width, self.wrap_width)
        return self.width


def build_render_config(
    width: int | None = None,
    wrap_width: int | None = None,
    *,
    literal: bool = False,
    colour: bool = False,
    css: bool = False,
    ignore_css_colour: bool = False,
    only_css: bool = False,
    show_dom: bool = False,
    show_render: bool = False,
    show_css: bool = False,
    hyperlinks: bool = False,
    defaults: RenderingDefaults | None = None,
) -> RenderConfig:
    """
    Assemble a RenderConfig from flag values.

    Flags given explicitly win over the defaults file; boolean flags can
    only switch features on. Numeric values are passed through as-is.

    Args:
        width: Column width, or None for the default.
        wrap_width: Maximum wrap width, or None.
        defaults: Defaults from the config file.
        (remaining keyword arguments mirror the command-line flags)

    Returns:
        The assembled RenderConfig.

    Raises:
        ConversionError: If a CSS option is used while CSS support is
                         unavailable.
    """
    defaults = defaults or RenderingDefaults()
    css_supported = defaults.css_support

    if not css_supported:
        requested = [
            name for name, value in (
                ("--css", css),
                ("--ignore-css-colour", ignore_css_colour),
                ("--only-css", only_css),
                ("--show-css", show_css),
            ) if value
        ]
        if requested:
            raise ConversionError(
                ErrorKind.CONFIG,
                "building render options",
                f"{', '.join(requested)} requires CSS support, which is disabled",
            )

    if wrap_width is None and defaults.wrap_width:
        wrap_width = defaults.wrap_width

    config = RenderConfig(
        width=width if width is not None else defaults.width,
        wrap_width=wrap_width,
        use_colour=colour or defaults.colour,
        hyperlinks=hyperlinks or defaults.hyperlinks,
        use_css=css_supported and (css or defaults.css),
        use_css_colours=css_supported and not ignore_css_colour,
        use_only_css=css_supported and only_css,
        show_dom=show_dom,
        show_render=show_render,
        show_css=show_css,
        literal=literal,
        css_supported=css_supported,
    )
    logger.debug(f"Render options: {config}")
    return config


def print_paths() -> None:
    """Print the configuration paths, for users wondering where things live."""
    print(f"Config:       {get_xdg_config_home()}")
    print(f"Config file:  {Config.config_file_path()}")
