"""Search-result status classification"""

from loguru import logger
from playwright.async_api import Page

from src.portal.contract import STATUS_MARKER_XPATHS
from .models import VideoStatus


async def check_video_status(page: Page, file_name: str) -> VideoStatus:
    """
    Classify the searched video by its status badge

    REJECTED is checked before COMPLETED. No badge, or any failure while
    inspecting the page, counts as PROCESSING so the record is still reviewed.
    """
    try:
        rejected = page.locator(STATUS_MARKER_XPATHS["rejected"]).first
        if await rejected.is_visible():
            logger.info(f"Video {file_name} is already REJECTED, skipping")
            return VideoStatus.REJECTED

        completed = page.locator(STATUS_MARKER_XPATHS["completed"]).first
        if await completed.is_visible():
            logger.info(f"Video {file_name} is already COMPLETED, skipping")
            return VideoStatus.COMPLETED

        return VideoStatus.PROCESSING
    except Exception as e:
        logger.warning(f"Could not determine status of {file_name} ({e}), processing anyway")
        return VideoStatus.PROCESSING
