import asyncio
import os
import sys

# Add project root to path
sys.path.append(os.getcwd())

from src.browser.session import PortalBrowser
from src.config.settings import ConfigurationError, load_settings
from src.portal.auth import login, open_team_inspections
from src.portal.contract import SEARCH_CONTROLS, control


async def verify_session():
    """Log in, open Team Inspections, and report whether the search box shows up"""
    try:
        settings = load_settings()
    except ConfigurationError as e:
        print(f"Error: {e}")
        return 1

    browser = PortalBrowser(headless=settings.headless, slow_mo=settings.timing.slow_mo)
    try:
        page = await browser.start_browser()
        await login(page, settings.portal, settings.timing)
        await open_team_inspections(page, settings.timing)

        print(f"Current URL: {page.url}")
        print(f"Page Title: {await page.title()}")

        if await control(page, SEARCH_CONTROLS, "search").is_visible():
            print("✅ SUCCESS: Team Inspections search box is visible. Login works.")
            return 0

        if "auth" in page.url.lower():
            print("❌ FAILED: Still on the auth page. Check PORTAL_USERNAME / PORTAL_PASSWORD.")
        else:
            print(f"❓ UNKNOWN: Landed on {page.url} without a search box. Please interpret manually.")
        return 1

    except Exception as e:
        print(f"Error during verification: {e}")
        return 1
    finally:
        await browser.close_browser()


if __name__ == "__main__":
    sys.exit(asyncio.run(verify_session()))
