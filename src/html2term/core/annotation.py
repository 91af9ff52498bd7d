# =============================================================================
# Annotation Model
# =============================================================================
# Semantic styling tags attached to runs of text.
#
# An annotation says what a piece of text *is* (a link, emphasised, code,
# coloured by the document's CSS...), never how it looks. Turning
# annotations into terminal attributes is the job of the style mapper in
# html2term.rendering.styles.
#
# Fragments carry their annotations ordered from the outermost markup scope
# to the innermost one, e.g. for
#
#   <a href="x"><b>hi</b></a>
#
# the fragment "hi" carries (Link("x"), Strong()).
# =============================================================================

from dataclasses import dataclass


@dataclass(frozen=True)
class Annotation:
    """Base class for all annotation kinds. Carries no behaviour."""


@dataclass(frozen=True)
class Default(Annotation):
    """Plain text, no particular semantics."""


@dataclass(frozen=True)
class Link(Annotation):
    """Text inside a hyperlink."""
    url: str


@dataclass(frozen=True)
class Image(Annotation):
    """Alternative text standing in for an image."""
    src: str


@dataclass(frozen=True)
class Emphasis(Annotation):
    """Emphasised text (<em>, <i>)."""


@dataclass(frozen=True)
class Strong(Annotation):
    """Strongly emphasised text (<strong>, <b>)."""


@dataclass(frozen=True)
class Strikeout(Annotation):
    """Struck-through text (<s>, <del>, <strike>)."""


@dataclass(frozen=True)
class Code(Annotation):
    """Inline code (<code>, <kbd>, ...)."""


@dataclass(frozen=True)
class Preformat(Annotation):
    """
    Preformatted text (<pre>).

    Attributes:
        continuation: True when the fragment continues a line that was
                      already started by an earlier fragment of the block.
    """
    continuation: bool = False


@dataclass(frozen=True)
class Colour(Annotation):
    """Foreground colour declared by the document's CSS."""
    r: int
    g: int
    b: int


@dataclass(frozen=True)
class BackgroundColour(Annotation):
    """Background colour declared by the document's CSS."""
    r: int
    g: int
    b: int


@dataclass(frozen=True)
class Other(Annotation):
    """Any annotation kind the renderer does not know about."""
    name: str = ""


@dataclass(frozen=True)
class Fragment:
    """
    A contiguous run of text sharing one ordered set of annotations.

    Attributes:
        text: The raw text.
        annotations: Active annotations, outermost first. Empty means
                     "no styling".
    """
    text: str
    annotations: tuple[Annotation, ...] = ()
