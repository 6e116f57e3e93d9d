"""Portal login and navigation to the Team Inspections list"""

from loguru import logger
from playwright.async_api import Page

from src.browser.resilience import perform_with_retry, wait_for_condition, wait_until_ready
from src.config.settings import PortalSettings, TimingSettings
from src.portal.contract import (
    LOGIN_CONTROLS,
    LOGIN_FIELD_WRAPPER_SELECTOR,
    NAVIGATION_CONTROLS,
    SEARCH_CONTROLS,
    TEAM_INSPECTIONS_TEXT,
    auth_url,
    control,
)


async def login(page: Page, portal: PortalSettings, timing: TimingSettings):
    """
    Log into the portal with email, password and "Remember Me"

    Raises on failure; login problems are fatal for the run.
    """
    retry = dict(max_retries=timing.max_retries, retry_delay=timing.retry_delay)
    wait = dict(retry, timeout=timing.element_timeout)

    url = auth_url(portal.url)
    logger.info(f"Opening portal login at {url}")
    await page.goto(url)
    await wait_until_ready(page, timeout=timing.page_ready_timeout)

    email_field = control(page, LOGIN_CONTROLS, "email")
    await wait_for_condition(email_field, **wait)

    async def fill_email():
        await page.locator(LOGIN_FIELD_WRAPPER_SELECTOR).first.click()
        await email_field.click()
        await email_field.fill(portal.username)

    await perform_with_retry(fill_email, **retry)

    password_field = control(page, LOGIN_CONTROLS, "password")
    await wait_for_condition(password_field, **wait)

    async def fill_password():
        await password_field.click()
        await password_field.fill(portal.password)

    await perform_with_retry(fill_password, **retry)

    remember_me = control(page, LOGIN_CONTROLS, "remember_me")
    await wait_for_condition(remember_me, **wait)
    await perform_with_retry(remember_me.check, **retry)

    login_button = control(page, LOGIN_CONTROLS, "log_in")
    await wait_for_condition(login_button, **wait)
    await perform_with_retry(login_button.click, **retry)

    logger.success(f"Logged in as {portal.username}")


async def open_team_inspections(page: Page, timing: TimingSettings):
    """Navigate from the dashboard to the Team Inspections list view"""
    retry = dict(max_retries=timing.max_retries, retry_delay=timing.retry_delay)
    wait = dict(retry, timeout=timing.element_timeout)

    await wait_until_ready(page, timeout=timing.page_ready_timeout)

    nav_menu = control(page, NAVIGATION_CONTROLS, "menu")
    await wait_for_condition(nav_menu, **wait)
    await perform_with_retry(nav_menu.click, **retry)

    team_inspections = page.get_by_text(TEAM_INSPECTIONS_TEXT)
    await wait_for_condition(team_inspections, **wait)
    await perform_with_retry(team_inspections.click, **retry)

    await wait_until_ready(page, timeout=timing.page_ready_timeout)

    try:
        search_field = control(page, SEARCH_CONTROLS, "search")
        await wait_for_condition(search_field, **dict(wait, timeout=timing.search_field_timeout))
    except Exception:
        logger.warning("Search field not immediately visible, continuing...")

    logger.success("Navigated to Team Inspections")
