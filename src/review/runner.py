"""Top-level review run: login, navigate, process every record, tear down"""

from typing import Optional

from loguru import logger

from src.browser.session import PortalBrowser
from src.config.settings import AutomationSettings
from src.data.records import load_video_records
from src.portal.auth import login, open_team_inspections
from src.portal.contract import PORTAL_UI_VERSION
from .models import BatchReport
from .workflow import VideoReviewer


async def run_review_batch(
    settings: AutomationSettings,
    browser: Optional[PortalBrowser] = None,
) -> BatchReport:
    """
    Run one review batch against the portal

    The browser is closed exactly once whatever happens. A failure outside
    the per-record boundary (login, navigation, unreadable CSV schema) ends
    the run and is recorded on the report instead of being raised.

    Args:
        settings: Validated automation settings
        browser: Pre-built session, mainly for tests

    Returns:
        BatchReport with one result per processed record
    """
    timing = settings.timing
    browser = browser or PortalBrowser(headless=settings.headless, slow_mo=timing.slow_mo)
    report = BatchReport()

    try:
        logger.info("Starting video review automation...")
        logger.info(f"Portal UI contract version {PORTAL_UI_VERSION}")
        page = await browser.start_browser()

        await login(page, settings.portal, timing)
        await open_team_inspections(page, timing)

        records = load_video_records(settings.csv_path)
        if not records:
            logger.error(f"No videos found in {settings.csv_path}. Please check the file.")
            report.finish()
            return report

        logger.info(f"Found {len(records)} videos to process")
        reviewer = VideoReviewer(page, timing)

        for index, record in enumerate(records, start=1):
            logger.info(f"Processing video {index}/{len(records)}: {record.file_name}")
            report.add(await reviewer.process_video(record))

            if index < len(records):
                await page.wait_for_timeout(timing.between_records_pause)

        logger.success("All videos processed")
        logger.info(f"Keeping browser open {timing.observation_delay}ms for review")
        await page.wait_for_timeout(timing.observation_delay)
        report.finish()

    except Exception as e:
        logger.exception(f"Error during automation: {e}")
        report.finish(fatal_error=str(e))

    finally:
        await browser.close_browser()

    return report
