"""Typed results for review steps, records and batches"""

import csv
from collections import Counter
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Union

from loguru import logger
from pydantic import BaseModel, Field

from .reasons import ReviewPlan


class VideoStatus(str, Enum):
    REJECTED = "rejected"
    COMPLETED = "completed"
    PROCESSING = "processing"


class ReviewOutcome(str, Enum):
    APPROVED = "approved"
    REJECTED = "rejected"
    SKIPPED_REJECTED = "skipped_rejected"
    SKIPPED_COMPLETED = "skipped_completed"
    FAILED = "failed"


class StepResult(BaseModel):
    """Result of one workflow step (search, classify, open_review, ...)"""
    name: str
    success: bool
    reason: Optional[str] = None


class ReviewResult(BaseModel):
    """Result of processing one video record"""
    file_name: str
    outcome: ReviewOutcome
    plan: Optional[ReviewPlan] = None
    steps: List[StepResult] = Field(default_factory=list)
    failed_step: Optional[str] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.outcome != ReviewOutcome.FAILED


class BatchReport(BaseModel):
    """All record results of one run, in file order"""
    started_at: datetime = Field(default_factory=datetime.now)
    finished_at: Optional[datetime] = None
    results: List[ReviewResult] = Field(default_factory=list)
    fatal_error: Optional[str] = None

    def add(self, result: ReviewResult):
        self.results.append(result)

    def finish(self, fatal_error: Optional[str] = None):
        self.finished_at = datetime.now()
        if fatal_error:
            self.fatal_error = fatal_error

    def counts(self) -> Dict[str, int]:
        """Number of records per outcome; every outcome is present"""
        tally = Counter(result.outcome for result in self.results)
        return {outcome.value: tally.get(outcome, 0) for outcome in ReviewOutcome}

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds()

    @property
    def failures(self) -> List[ReviewResult]:
        return [result for result in self.results if not result.succeeded]

    def log_summary(self):
        """Log the batch summary and every failed record"""
        counts = self.counts()
        logger.info(
            f"Batch summary: {len(self.results)} records | "
            + " | ".join(f"{name}={count}" for name, count in counts.items())
        )
        if self.duration_seconds is not None:
            logger.info(f"Run took {self.duration_seconds:.1f}s (started {self.started_at:%Y-%m-%d %H:%M:%S})")
        for result in self.failures:
            logger.warning(f"  {result.file_name}: failed at {result.failed_step}: {result.error}")
        if self.fatal_error:
            logger.error(f"Run aborted: {self.fatal_error}")

    def save_csv(self, csv_file: Union[str, Path]):
        """Save one row per record"""
        csv_file = Path(csv_file)
        csv_file.parent.mkdir(parents=True, exist_ok=True)
        with open(csv_file, 'w', newline='') as f:
            writer = csv.writer(f)
            writer.writerow(['FileName', 'Outcome', 'Action', 'BOWNumber', 'ReasonCode', 'FailedStep', 'Error'])
            for result in self.results:
                plan = result.plan
                writer.writerow([
                    result.file_name,
                    result.outcome.value,
                    plan.action.value if plan else '',
                    (plan.bow_number or '') if plan else '',
                    plan.reason_code.value if plan and plan.reason_code else '',
                    result.failed_step or '',
                    result.error or '',
                ])
        logger.info(f"CSV report saved to {csv_file}")
