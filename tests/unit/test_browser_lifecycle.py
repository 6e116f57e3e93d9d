"""Unit tests for browser lifecycle management"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from src.browser.session import PortalBrowser


def playwright_stub():
    """async_playwright() stand-in returning mock browser/context/page"""
    page = MagicMock(name="page")
    context = MagicMock(name="context")
    context.new_page = AsyncMock(return_value=page)
    context.close = AsyncMock()
    browser = MagicMock(name="browser")
    browser.new_context = AsyncMock(return_value=context)
    browser.close = AsyncMock()
    playwright = MagicMock(name="playwright")
    playwright.chromium.launch = AsyncMock(return_value=browser)
    playwright.stop = AsyncMock()

    manager = MagicMock()
    manager.start = AsyncMock(return_value=playwright)
    return manager, playwright, browser, context, page


class TestBrowserLifecycle:
    """Test browser launch and close"""

    def test_initial_state(self):
        session = PortalBrowser(headless=True)

        assert session.browser is None
        assert session.page is None
        assert session.is_open is False

    def test_headless_from_env(self, monkeypatch):
        monkeypatch.setenv('HEADLESS', 'true')
        assert PortalBrowser().headless is True

        monkeypatch.setenv('HEADLESS', 'no')
        assert PortalBrowser().headless is False

    @pytest.mark.asyncio
    async def test_start_browser(self):
        manager, playwright, browser, context, page = playwright_stub()
        session = PortalBrowser(headless=True, slow_mo=250)

        with patch('src.browser.session.async_playwright', return_value=manager):
            result = await session.start_browser()

        assert result is page
        assert session.page is page
        assert session.is_open is True
        playwright.chromium.launch.assert_awaited_once_with(headless=True, slow_mo=250)

    @pytest.mark.asyncio
    async def test_close_browser_releases_everything(self):
        manager, playwright, browser, context, page = playwright_stub()
        session = PortalBrowser(headless=True)

        with patch('src.browser.session.async_playwright', return_value=manager):
            await session.start_browser()
        await session.close_browser()

        context.close.assert_awaited_once()
        browser.close.assert_awaited_once()
        playwright.stop.assert_awaited_once()
        assert session.page is None
        assert session.is_open is False

    @pytest.mark.asyncio
    async def test_close_browser_only_once(self):
        manager, playwright, browser, context, page = playwright_stub()
        session = PortalBrowser(headless=True)

        with patch('src.browser.session.async_playwright', return_value=manager):
            await session.start_browser()
        await session.close_browser()
        await session.close_browser()

        browser.close.assert_awaited_once()
        playwright.stop.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_close_without_start_is_noop(self):
        session = PortalBrowser(headless=True)

        await session.close_browser()

        assert session.is_open is False
        assert session.browser is None

    @pytest.mark.asyncio
    async def test_close_error_swallowed(self):
        manager, playwright, browser, context, page = playwright_stub()
        context.close.side_effect = RuntimeError("Target closed")
        session = PortalBrowser(headless=True)

        with patch('src.browser.session.async_playwright', return_value=manager):
            await session.start_browser()
        await session.close_browser()

        assert session.is_open is False
        browser.close.assert_not_awaited()
        playwright.stop.assert_not_awaited()
