"""
Pytest configuration and fixtures for fontify tests.
"""

import json
import tempfile
from pathlib import Path
from unittest.mock import Mock

import pytest
import requests

from fontify.catalog.client import CatalogClient
from fontify.core.config import (
    AppConfig,
    BundleConfig,
    CatalogConfig,
    DetectionConfig,
    InstallConfig,
)
from fontify.core.models import CatalogEntry

ROBOTO_STYLESHEET = """
/* cyrillic */
@font-face {
  font-family: 'Roboto';
  font-style: normal;
  font-weight: 400;
  font-display: swap;
  src: url(https://fonts.gstatic.com/s/roboto/v30/roboto-400-cyrillic.woff2) format('woff2');
}
/* latin */
@font-face {
  font-family: 'Roboto';
  font-style: normal;
  font-weight: 400;
  font-display: swap;
  src: url(https://fonts.gstatic.com/s/roboto/v30/roboto-400-latin.woff2) format('woff2');
}
/* cyrillic */
@font-face {
  font-family: 'Roboto';
  font-style: normal;
  font-weight: 700;
  font-display: swap;
  src: url(https://fonts.gstatic.com/s/roboto/v30/roboto-700-cyrillic.woff2) format('woff2');
}
/* latin */
@font-face {
  font-family: 'Roboto';
  font-style: normal;
  font-weight: 700;
  font-display: swap;
  src: url(https://fonts.gstatic.com/s/roboto/v30/roboto-700-latin.woff2) format('woff2');
}
"""

CATALOG_LISTING = {
    "kind": "webfonts#webfontList",
    "items": [
        {
            "family": "Roboto",
            "category": "sans-serif",
            "variants": ["100", "300", "regular", "italic", "500", "700"],
            "subsets": ["cyrillic", "latin"],
            "files": {"regular": "https://fonts.gstatic.com/s/roboto/Roboto-Regular.ttf"},
        },
        {
            "family": "Open Sans",
            "category": "sans-serif",
            "variants": ["300", "regular", "600", "700"],
            "subsets": ["latin"],
            "files": {},
        },
        {
            "family": "IBM Plex Mono",
            "category": "monospace",
            "variants": ["regular", "500", "700"],
            "subsets": ["latin"],
            "files": {},
        },
    ],
}


@pytest.fixture
def temp_dir():
    """Create temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def sample_project(temp_dir):
    """Create a small web project with stylesheets, a tailwind config and a manifest."""
    (temp_dir / "src" / "styles").mkdir(parents=True)
    (temp_dir / "src" / "styles" / "main.css").write_text(
        "body { font-family: 'Inter', -apple-system, sans-serif; }\n"
        "code { font-family: \"Fira Code\", monospace; }\n"
    )
    (temp_dir / "src" / "styles" / "theme.scss").write_text(
        "$heading: 'Playfair Display';\nh1 { font-family: $heading, Georgia, serif; }\n"
        "h2 { font-family: 'Playfair Display', serif; }\n"
    )
    (temp_dir / "tailwind.config.js").write_text(
        "module.exports = {\n"
        "  theme: {\n"
        "    extend: {\n"
        "      fontFamily: {\n"
        "        sans: ['Inter', 'system-ui'],\n"
        "        display: ['\"Lexend\"', ...defaultTheme.fontFamily.sans],\n"
        "      },\n"
        "    },\n"
        "  },\n"
        "};\n"
    )
    (temp_dir / "package.json").write_text(
        json.dumps(
            {
                "name": "sample",
                "dependencies": {"react": "^18.2.0", "@fontsource/open-sans": "^5.0.0"},
                "devDependencies": {"vite": "^5.0.0"},
            }
        )
    )
    (temp_dir / "node_modules" / "pkg").mkdir(parents=True)
    (temp_dir / "node_modules" / "pkg" / "vendor.css").write_text(
        "p { font-family: 'Vendor Font'; }"
    )
    return temp_dir


@pytest.fixture
def roboto_stylesheet():
    """Catalog stylesheet declaring Roboto 400 and 700 in two subsets."""
    return ROBOTO_STYLESHEET


@pytest.fixture
def catalog_listing():
    """Catalog listing response body."""
    return CATALOG_LISTING


@pytest.fixture
def catalog_entries():
    """Parsed catalog listing."""
    return [CatalogEntry.model_validate(item) for item in CATALOG_LISTING["items"]]


@pytest.fixture
def catalog_config():
    """Catalog configuration that never reads the environment."""
    return CatalogConfig(_env_file=None, api_key="test-key", timeout_seconds=5)


@pytest.fixture
def detection_config():
    """Detection configuration for testing."""
    return DetectionConfig(_env_file=None)


@pytest.fixture
def bundle_config():
    """Bundle configuration with no delay between fonts."""
    return BundleConfig(_env_file=None, inter_font_delay_seconds=0)


@pytest.fixture
def install_config(temp_dir):
    """Install configuration writing into a temporary fonts directory."""
    return InstallConfig(
        _env_file=None,
        inter_font_delay_seconds=0,
        fonts_dir=temp_dir / "user-fonts",
        refresh_font_cache=False,
    )


@pytest.fixture
def app_config(temp_dir, catalog_config, detection_config, bundle_config, install_config):
    """Application configuration for testing."""
    return AppConfig(
        _env_file=None,
        project_root=temp_dir,
        catalog=catalog_config,
        detection=detection_config,
        bundle=bundle_config,
        install=install_config,
    )


@pytest.fixture
def mock_session():
    """requests.Session stand-in; tests set ``get`` side effects."""
    return Mock()


@pytest.fixture
def catalog_client(catalog_config, mock_session, catalog_entries):
    """CatalogClient with a preloaded catalog listing and a mocked session."""
    client = CatalogClient(catalog_config, session=mock_session)
    client._fonts_cache = list(catalog_entries)
    return client


@pytest.fixture
def make_response():
    """Factory for mock requests.Response objects."""

    def _make(text="", content=b"", json_data=None, status_code=200):
        response = Mock()
        response.status_code = status_code
        response.text = text
        response.content = content
        response.json.return_value = json_data
        if status_code >= 400:
            response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Error")
        else:
            response.raise_for_status.return_value = None
        return response

    return _make


def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers."""
    for item in items:
        if "integration" in item.nodeid:
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)
