# =============================================================================
# html2term Core Module
# =============================================================================
# Pure data types shared by every other module. No third-party imports, so
# these can be imported anywhere without pulling in the parsing stack:
#   - Annotation kinds and Fragment: what a piece of text means
#   - ConversionError / ErrorKind: how failures are reported
# =============================================================================

from html2term.core.annotation import (
    Annotation,
    BackgroundColour,
    Code,
    Colour,
    Default,
    Emphasis,
    Fragment,
    Image,
    Link,
    Other,
    Preformat,
    Strikeout,
    Strong,
)
from html2term.core.errors import ConversionError, ErrorKind

__all__ = [
    "Annotation",
    "BackgroundColour",
    "Code",
    "Colour",
    "ConversionError",
    "Default",
    "Emphasis",
    "ErrorKind",
    "Fragment",
    "Image",
    "Link",
    "Other",
    "Preformat",
    "Strikeout",
    "Strong",
]
