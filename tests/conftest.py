# =============================================================================
# Pytest Configuration and Fixtures
# =============================================================================
# Shared fixtures for the html2term test suite.
# =============================================================================

import pytest
import tempfile
from pathlib import Path


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def isolated_config(temp_dir, monkeypatch):
    """Keep tests away from the user's real config file."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(temp_dir / "xdg-config"))
    return temp_dir / "xdg-config" / "html2term" / "config.toml"


@pytest.fixture
def sample_html():
    """Sample HTML document exercising the common markup."""
    return """
    <!DOCTYPE html>
    <html>
    <head>
        <title>Newsletter</title>
        <style>
            .warning { color: #ff0000; }
            .secret { display: none; }
        </style>
    </head>
    <body>
        <h1>Welcome</h1>
        <p>Hello <strong>User</strong>, this is <em>important</em>.</p>
        <p class="warning">Careful now</p>
        <p class="secret">Hidden text</p>
        <ul>
            <li>Links: <a href="https://example.com">Click here</a></li>
            <li>Code: <code>print()</code></li>
        </ul>
        <img src="logo.png" alt="Company Logo">
    </body>
    </html>
    """


@pytest.fixture
def sample_file(temp_dir, sample_html):
    """The sample document written to disk."""
    path = temp_dir / "sample.html"
    path.write_text(sample_html, encoding="utf-8")
    return path
