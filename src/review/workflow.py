"""Per-video review workflow.

Search -> Classify -> (Skip | Open review) -> (Approve | Reject) -> Done

Each step runs through _run_step, which records a StepResult. A step that
still fails after its retries raises ReviewStepError, and process_video turns
that into a FAILED ReviewResult so the batch can move on.
"""

from typing import Any, Awaitable, Callable, List

from loguru import logger
from playwright.async_api import Page

from src.browser.resilience import perform_with_retry, wait_for_condition, wait_until_ready
from src.config.settings import TimingSettings
from src.data.records import VideoRecord
from src.portal.contract import (
    APPROVE_DIALOG_CLOSE_XPATH,
    REJECT_DIALOG_CLOSE_TEXT,
    REVIEW_CONTROLS,
    REVIEW_FORM_SELECTOR,
    SEARCH_CONTROLS,
    SEARCH_RESULT_SELECTOR,
    control,
)
from .models import ReviewOutcome, ReviewResult, StepResult, VideoStatus
from .reasons import ReviewAction, ReviewPlan, plan_review
from .status import check_video_status


SKIP_OUTCOMES = {
    VideoStatus.REJECTED: ReviewOutcome.SKIPPED_REJECTED,
    VideoStatus.COMPLETED: ReviewOutcome.SKIPPED_COMPLETED,
}


class ReviewStepError(Exception):
    """A workflow step failed after exhausting its retries"""

    def __init__(self, step: str, cause: Exception):
        super().__init__(f"{step}: {cause}")
        self.step = step
        self.cause = cause


class VideoReviewer:
    """Drives the review of one video at a time on an already logged-in page"""

    def __init__(self, page: Page, timing: TimingSettings = None):
        self.page = page
        self.timing = timing or TimingSettings()
        self._steps: List[StepResult] = []

    @property
    def _retry(self):
        return dict(max_retries=self.timing.max_retries, retry_delay=self.timing.retry_delay)

    @property
    def _wait(self):
        return dict(self._retry, timeout=self.timing.element_timeout)

    async def _pause(self, ms: int):
        await self.page.wait_for_timeout(ms)

    async def _run_step(self, name: str, step: Callable[[], Awaitable[Any]]) -> Any:
        try:
            value = await step()
        except Exception as e:
            self._steps.append(StepResult(name=name, success=False, reason=str(e)))
            raise ReviewStepError(name, e) from e
        self._steps.append(StepResult(name=name, success=True))
        return value

    async def process_video(self, record: VideoRecord) -> ReviewResult:
        """
        Review one video record end to end

        Never raises: a failed step is logged with the file name and returned
        as a FAILED result.
        """
        self._steps = []
        plan = plan_review(record)
        logger.info(f"=== Processing video: {record.file_name} ===")

        try:
            await self._run_step("search", lambda: self.search(record.file_name))
            status = await self._run_step(
                "classify", lambda: check_video_status(self.page, record.file_name)
            )
            if status in SKIP_OUTCOMES:
                return ReviewResult(
                    file_name=record.file_name,
                    outcome=SKIP_OUTCOMES[status],
                    steps=list(self._steps),
                )

            await self._run_step("open_review", self.open_review)

            if plan.action == ReviewAction.APPROVE:
                logger.info(f"Bow number {plan.bow_number} present, approving")
                await self._run_step("approve", lambda: self.approve(plan))
                outcome = ReviewOutcome.APPROVED
            else:
                logger.info(f"No bow number, rejecting as '{plan.reason_code.value}'")
                await self._run_step("reject", lambda: self.reject(plan))
                outcome = ReviewOutcome.REJECTED

            await self._pause(self.timing.after_review_pause)
        except ReviewStepError as e:
            logger.error(f"Error processing video {record.file_name} at step {e.step}: {e.cause}")
            return ReviewResult(
                file_name=record.file_name,
                outcome=ReviewOutcome.FAILED,
                plan=plan,
                steps=list(self._steps),
                failed_step=e.step,
                error=str(e.cause),
            )

        logger.success(f"Video {record.file_name} {outcome.value}")
        return ReviewResult(
            file_name=record.file_name,
            outcome=outcome,
            plan=plan,
            steps=list(self._steps),
        )

    async def search(self, file_name: str):
        """Type the file name into the list search and wait for results"""
        await wait_until_ready(self.page, timeout=self.timing.page_ready_timeout)

        search_field = control(self.page, SEARCH_CONTROLS, "search")
        await wait_for_condition(search_field, **self._wait)

        async def fill_search():
            await search_field.click()
            await search_field.fill(file_name)

        await perform_with_retry(fill_search, **self._retry)

        logger.debug("Waiting for search results...")
        await self.page.wait_for_load_state("networkidle")
        try:
            await self.page.wait_for_selector(
                SEARCH_RESULT_SELECTOR,
                state="visible",
                timeout=self.timing.search_results_timeout,
            )
        except Exception:
            logger.debug("Search result marker not found, giving results extra time")
            await self._pause(self.timing.search_results_fallback)

    async def open_review(self):
        """Open Actions -> Review for the searched video"""
        actions = control(self.page, SEARCH_CONTROLS, "actions")
        await wait_for_condition(actions, **self._wait)
        await perform_with_retry(actions.click, **self._retry)

        review = control(self.page, SEARCH_CONTROLS, "review")
        await wait_for_condition(review, **self._wait)
        await perform_with_retry(review.click, **self._retry)

        logger.debug("Waiting for review page to load...")
        await wait_until_ready(self.page, timeout=self.timing.page_ready_timeout)
        await self.page.wait_for_selector(
            REVIEW_FORM_SELECTOR,
            state="visible",
            timeout=self.timing.review_form_timeout,
        )

    async def approve(self, plan: ReviewPlan):
        """Enter the bow number, approve, and close the dialog"""
        bow_number_field = control(self.page, REVIEW_CONTROLS, "bow_number")

        async def fill_bow_number():
            await bow_number_field.click()
            await bow_number_field.fill(plan.bow_number)

        await perform_with_retry(fill_bow_number, **self._retry)
        logger.debug(f"Bow number entered: {plan.bow_number}")

        await perform_with_retry(control(self.page, REVIEW_CONTROLS, "approve").click, **self._retry)
        await self.page.wait_for_load_state("networkidle", timeout=self.timing.approve_settle_timeout)

        close_icon = self.page.locator(APPROVE_DIALOG_CLOSE_XPATH)
        await perform_with_retry(close_icon.click, **self._retry)

    async def reject(self, plan: ReviewPlan):
        """Pick the reason code, enter the reason text, save, and close the dialog"""
        await perform_with_retry(control(self.page, REVIEW_CONTROLS, "reject").click, **self._retry)

        reason_dropdown = control(self.page, REVIEW_CONTROLS, "reason_code").locator("span")
        await perform_with_retry(reason_dropdown.click, **self._retry)

        option = self.page.get_by_role("option", name=plan.reason_code.value)
        await wait_for_condition(option, **self._wait)
        await perform_with_retry(option.click, **self._retry)
        logger.debug(f"Rejection reason selected: {plan.reason_code.value}")

        reason_field = control(self.page, REVIEW_CONTROLS, "reason_text")

        async def fill_reason():
            await reason_field.click()
            await reason_field.fill(plan.reason_text)

        await perform_with_retry(fill_reason, **self._retry)

        await perform_with_retry(control(self.page, REVIEW_CONTROLS, "save").click, **self._retry)

        close_text = self.page.get_by_text(REJECT_DIALOG_CLOSE_TEXT)
        await perform_with_retry(close_text.click, **self._retry)
