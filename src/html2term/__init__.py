# =============================================================================
# html2term: HTML to Terminal Text
# =============================================================================
#
# html2term renders HTML documents for the terminal:
#
#   - Plain text, with links and images shown inline
#   - Literal text, with no decorations at all
#   - Colourful text using ANSI attributes, optionally honouring the
#     document's own CSS colours and emitting clickable hyperlinks
#   - Diagnostic dumps of the parsed DOM, render tree and CSS
#
# =============================================================================

__version__ = "0.1.0"
__app_name__ = "html2term"

# Main entry point - this is what gets called by the 'html2term' command
from html2term.app import main

__all__ = ["main", "__version__", "__app_name__"]
