"""Bounded retry and readiness helpers for portal interaction.

Portal timing is owned by a third-party Angular app, so every interaction
goes through one of these helpers:
- wait_for_condition: poll a locator until it is visible
- perform_with_retry: re-run a side-effecting action on failure
- wait_until_ready: best-effort "page settled" probe that never raises
"""

from typing import Any, Awaitable, Callable

from loguru import logger
from playwright.async_api import Locator, Page
from tenacity import AsyncRetrying, RetryCallState, stop_after_attempt, wait_fixed


DEFAULT_MAX_RETRIES = 3
DEFAULT_TIMEOUT_MS = 10000
DEFAULT_RETRY_DELAY_MS = 1000
DEFAULT_READY_TIMEOUT_MS = 30000
LOADING_INDICATOR_SELECTOR = '[data-loading="true"]'
LOADING_INDICATOR_TIMEOUT_MS = 5000


def _log_retry(label: str, max_retries: int, retry_delay: int) -> Callable[[RetryCallState], None]:
    """Build a tenacity before_sleep hook that logs the failed attempt"""
    def before_sleep(retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.debug(
            f"{label} attempt {retry_state.attempt_number}/{max_retries} failed "
            f"({error}), retrying in {retry_delay}ms"
        )
    return before_sleep


async def wait_for_condition(
    probe: Locator,
    max_retries: int = DEFAULT_MAX_RETRIES,
    timeout: int = DEFAULT_TIMEOUT_MS,
    retry_delay: int = DEFAULT_RETRY_DELAY_MS,
) -> bool:
    """
    Wait for a locator to become visible, retrying on timeout.

    Args:
        probe: Playwright locator to wait for
        max_retries: Total number of attempts
        timeout: Per-attempt timeout in ms
        retry_delay: Delay between attempts in ms

    Returns:
        True once the locator is visible

    Raises:
        The last attempt's exception when every attempt failed
    """
    try:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(max_retries),
            wait=wait_fixed(retry_delay / 1000),
            before_sleep=_log_retry("Wait", max_retries, retry_delay),
            reraise=True,
        ):
            with attempt:
                await probe.wait_for(state="visible", timeout=timeout)
    except Exception as e:
        logger.error(f"Element not visible after {max_retries} attempts: {e}")
        raise

    logger.debug("Element found and visible")
    return True


async def perform_with_retry(
    action: Callable[[], Awaitable[Any]],
    max_retries: int = DEFAULT_MAX_RETRIES,
    retry_delay: int = DEFAULT_RETRY_DELAY_MS,
) -> bool:
    """
    Run an async action, retrying it when it raises.

    Args:
        action: Zero-argument coroutine function performing the UI interaction
        max_retries: Total number of attempts
        retry_delay: Delay between attempts in ms

    Returns:
        True once the action completed

    Raises:
        The last attempt's exception when every attempt failed
    """
    try:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(max_retries),
            wait=wait_fixed(retry_delay / 1000),
            before_sleep=_log_retry("Action", max_retries, retry_delay),
            reraise=True,
        ):
            with attempt:
                await action()
    except Exception as e:
        logger.error(f"Action failed after {max_retries} attempts: {e}")
        raise

    logger.debug("Action completed successfully")
    return True


async def wait_until_ready(page: Page, timeout: int = DEFAULT_READY_TIMEOUT_MS) -> bool:
    """
    Wait for the page to settle: network idle, DOM parsed, no loading spinner.

    Never raises. A timeout is logged and the caller carries on.

    Returns:
        True if the page settled, False on timeout
    """
    try:
        await page.wait_for_load_state("networkidle", timeout=timeout)
        await page.wait_for_load_state("domcontentloaded", timeout=timeout)

        try:
            await page.wait_for_selector(
                LOADING_INDICATOR_SELECTOR,
                state="hidden",
                timeout=LOADING_INDICATOR_TIMEOUT_MS,
            )
        except Exception:
            # No loading indicator on this view
            pass

        logger.debug("Page is loaded and ready")
        return True
    except Exception as e:
        logger.warning(f"Page loading timeout, continuing anyway: {e}")
        return False
