# =============================================================================
# Rendering Module
# =============================================================================
# HTML to terminal text.
#
# The rendering pipeline:
#   1. Parse the HTML (BeautifulSoup + lxml)
#   2. Optionally read the document's CSS
#   3. Pick an output mode (engine.select_mode)
#   4. Produce it:
#        - colour:  render tree -> lines of fragments -> style mapper
#        - text:    inscriptis plain/literal extraction
#        - dumps:   DOM, render tree or CSS as text
# =============================================================================

from html2term.rendering.engine import OutputMode, RenderEngine, select_mode
from html2term.rendering.styles import StyleMapper, StyleSet

__all__ = ["OutputMode", "RenderEngine", "StyleMapper", "StyleSet", "select_mode"]
