"""
Full pipeline smoke test.

CSV file -> settings -> login -> per-video review -> batch report -> CSV report,
with the portal replaced by a page double.
"""

import csv

import pytest

from src.review.models import ReviewOutcome
from src.review.reasons import ReasonCode, ReviewAction
from src.review.runner import run_review_batch


SCENARIO_CSV = (
    "FileName,BOWNumber,Comment\n"
    "vid1,123,\n"
    "vid2,,blur\n"
    "vid3,,unknown\n"
)


@pytest.mark.asyncio
async def test_full_pipeline_scenario(write_csv, make_settings, fake_browser, fake_page, tmp_path):
    """
    vid1 is approved with bow number 123, vid2 and vid3 are rejected with the
    default reason code and their comment as reason text.
    """
    settings = make_settings(write_csv(SCENARIO_CSV))

    report = await run_review_batch(settings, browser=fake_browser)

    by_name = {result.file_name: result for result in report.results}
    assert list(by_name) == ["vid1", "vid2", "vid3"]

    vid1 = by_name["vid1"]
    assert vid1.outcome == ReviewOutcome.APPROVED
    assert vid1.plan.action == ReviewAction.APPROVE
    assert vid1.plan.bow_number == "123"

    vid2 = by_name["vid2"]
    assert vid2.outcome == ReviewOutcome.REJECTED
    assert vid2.plan.reason_code == ReasonCode.NOT_VISIBLE
    assert vid2.plan.reason_code.value == "Bow number not visible"
    assert vid2.plan.reason_text == "blur"

    vid3 = by_name["vid3"]
    assert vid3.outcome == ReviewOutcome.REJECTED
    assert vid3.plan.reason_code == ReasonCode.NOT_VISIBLE
    assert vid3.plan.reason_text == "unknown"

    # What actually reached the portal
    search = fake_page.get_by_role("textbox", name="Search by Name or Address")
    assert [call.args[0] for call in search.fill.await_args_list] == ["vid1", "vid2", "vid3"]

    bow_number = fake_page.get_by_role("textbox", name="Bow Number Detected Bow")
    assert [call.args[0] for call in bow_number.fill.await_args_list] == ["123"]

    option = fake_page.get_by_role("option", name="Bow number not visible")
    assert option.click.await_count == 2

    reason = fake_page.get_by_role("textbox", name="Reason")
    assert [call.args[0] for call in reason.fill.await_args_list] == ["blur", "unknown"]

    assert report.counts()["approved"] == 1
    assert report.counts()["rejected"] == 2
    assert fake_browser.close_count == 1

    report_file = tmp_path / "report.csv"
    report.save_csv(report_file)
    with open(report_file, newline="") as f:
        rows = list(csv.DictReader(f))
    assert [(row["FileName"], row["Action"]) for row in rows] == [
        ("vid1", "approve"), ("vid2", "reject"), ("vid3", "reject"),
    ]
