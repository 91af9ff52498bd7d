# =============================================================================
# html2term Entry Point for `python -m html2term`
# =============================================================================
# Equivalent to running the 'html2term' command after installation.
# =============================================================================

import sys

from html2term.app import main

if __name__ == "__main__":
    sys.exit(main())
