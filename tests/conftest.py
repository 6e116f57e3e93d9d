"""Pytest configuration and shared fixtures for testing"""

import sys
from pathlib import Path
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import Page, async_playwright

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.config.settings import AutomationSettings, PortalSettings, TimingSettings


MOCK_PORTAL_URL = "https://portal.test"


def make_locator(visible: bool = False) -> MagicMock:
    """Locator double: every interaction is an AsyncMock, chaining returns itself"""
    locator = MagicMock()
    for name in ("wait_for", "click", "fill", "check"):
        setattr(locator, name, AsyncMock())
    locator.is_visible = AsyncMock(return_value=visible)
    locator.first = locator
    locator.locator.return_value = locator
    return locator


class FakePage:
    """Page double that hands out one stable locator per (kind, selector)"""

    def __init__(self):
        self.locators = {}
        self.url = f"{MOCK_PORTAL_URL}/#/auth"
        self.goto = AsyncMock()
        self.wait_for_load_state = AsyncMock()
        self.wait_for_selector = AsyncMock()
        self.wait_for_timeout = AsyncMock()

    def _get(self, key) -> MagicMock:
        if key not in self.locators:
            self.locators[key] = make_locator()
        return self.locators[key]

    def get_by_role(self, role, name=None):
        return self._get(("role", role, name))

    def get_by_text(self, text):
        return self._get(("text", text))

    def locator(self, selector):
        return self._get(("css", selector))


class FakeBrowser:
    """Stand-in for PortalBrowser that records lifecycle calls"""

    def __init__(self, page=None, start_error: Exception = None):
        self.page = page or FakePage()
        self.start_error = start_error
        self.start_count = 0
        self.close_count = 0

    async def start_browser(self):
        self.start_count += 1
        if self.start_error:
            raise self.start_error
        return self.page

    async def close_browser(self):
        self.close_count += 1


@pytest.fixture
def fake_page() -> FakePage:
    return FakePage()


@pytest.fixture
def fake_browser(fake_page: FakePage) -> FakeBrowser:
    return FakeBrowser(fake_page)


@pytest.fixture
def browser_factory():
    return FakeBrowser


@pytest.fixture
def fast_timing() -> TimingSettings:
    """Timing profile with no real waiting between retries"""
    return TimingSettings(
        retry_delay=0,
        search_results_fallback=0,
        after_review_pause=0,
        between_records_pause=0,
        observation_delay=0,
        slow_mo=0,
    )


@pytest.fixture
def write_csv(tmp_path: Path):
    """Write CSV text to a temp file and return its path"""
    def _write(content: str, name: str = "videos.csv") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path
    return _write


@pytest.fixture
def make_settings(fast_timing: TimingSettings):
    def _make(csv_path, timing: TimingSettings = None) -> AutomationSettings:
        return AutomationSettings(
            portal=PortalSettings(url=MOCK_PORTAL_URL, username="reviewer@example.com", password="s3cret!pw"),
            timing=timing or fast_timing,
            csv_path=str(csv_path),
            headless=True,
        )
    return _make


@pytest.fixture
def test_fixture_path() -> Path:
    """Return the path to the test fixtures directory"""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def mock_portal_html(test_fixture_path: Path) -> str:
    return (test_fixture_path / "mock_portal.html").read_text(encoding="utf-8")


@pytest.fixture
async def chromium_page() -> AsyncGenerator[Page, None]:
    """Headless Chromium page; skips the test when no browser is installed"""
    async with async_playwright() as p:
        try:
            browser = await p.chromium.launch(headless=True)
        except Exception as e:
            pytest.skip(f"Chromium not available: {e}")
        context = await browser.new_context(viewport={"width": 1280, "height": 720}, locale="en-US")
        page = await context.new_page()
        yield page
        await browser.close()


# Pytest async configuration
def pytest_configure(config):
    """Configure custom markers"""
    config.addinivalue_line(
        "markers", "slow: mark test as slow (can be skipped with -m 'not slow')"
    )
