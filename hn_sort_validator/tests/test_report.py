from datetime import datetime, timezone

from hn_sort_validator.tests.conftest import make_config, make_items
from hn_sort_validator.exceptions import CollectionShortfallError
from hn_sort_validator.services.report import (
    build_report_payload,
    format_console_report,
    render_report_html,
    save_report,
)
from hn_sort_validator.services.validator import validate_sort_order
from hn_sort_validator.types import CollectionResult, Item, RunResult, StopReason


def _result(items, success=True, error=None, duration_ms=12345.0):
    config = make_config(target_count=len(items) if success else len(items) + 5)
    return RunResult(
        items=items,
        violations=validate_sort_order(items),
        duration_ms=duration_ms,
        success=success,
        config=config,
        collection=CollectionResult(
            items=items,
            target_count=config.target_count,
            stop_reason=StopReason.QUOTA_MET if success else StopReason.NO_NEXT_PAGE,
        ),
        error=error,
    )


def test_payload_shape_and_violation_rows():
    result = _result(make_items(0, 1, 2, 9, 4))
    payload = build_report_payload(result)

    assert payload["passed"] is False
    assert payload["complete"] is True
    assert payload["itemCount"] == 5
    assert payload["violationCount"] == 1
    assert payload["durationSeconds"] == 12.3
    assert payload["configSnapshot"] == {
        "sourceUrl": "https://news.ycombinator.com/newest",
        "maxRetries": 3,
        "navigationTimeoutMs": 15000,
    }
    assert [row["position"] for row in payload["rows"]] == [1, 2, 3, 4, 5]
    assert [row["isViolation"] for row in payload["rows"]] == [False, False, False, True, False]
    assert set(payload["rows"][0]) == {"position", "title", "timestamp", "relativeAgeText", "isViolation"}


def test_console_report_pass():
    items = make_items(0, 1, 2)
    text = format_console_report(_result(items, duration_ms=1500))

    assert "Items checked:     3" in text
    assert "Time elapsed:      1.5s" in text
    assert f"Oldest item:       {items[-1].timestamp}" in text
    assert f"Newest item:       {items[0].timestamp}" in text
    assert "PASS: All 3 items are correctly sorted newest to oldest." in text
    assert "FAIL" not in text


def test_console_report_lists_each_violation():
    items = make_items(0, 5, 1)
    text = format_console_report(_result(items))

    assert "FAIL: 1 sort order violation(s) detected." in text
    violation_lines = [line for line in text.splitlines() if line.strip().startswith("#")]
    assert violation_lines == [
        f'  #2: "Story 2" {items[1].timestamp} should come before {items[2].timestamp}'
    ]


def test_console_report_is_deterministic():
    result = _result(make_items(0, 5, 1))
    assert format_console_report(result) == format_console_report(result)


def test_console_report_for_empty_shortfall():
    error = CollectionShortfallError(0, 5, StopReason.EMPTY_PAGE.value)
    text = format_console_report(_result([], success=False, error=error))

    assert "Items checked:     0" in text
    assert "Oldest item:       n/a" in text
    assert "FAIL: Only collected 0/5 items (stopped: empty_page)" in text
    assert "PASS" not in text


def test_html_report_escapes_titles_and_marks_violations():
    items = [
        Item(title="<script>alert(1)</script>", timestamp="2025-01-15T11:00:00", relative_age_text="1 hour ago"),
        Item(title="Newer & better", timestamp="2025-01-15T12:00:00", relative_age_text="just now"),
    ]
    payload = build_report_payload(_result(items))
    html = render_report_html(payload, generated_at=datetime(2025, 1, 15, tzinfo=timezone.utc))

    assert "<script>alert(1)</script>" not in html
    assert "&lt;script&gt;" in html
    assert "Newer &amp; better" in html
    assert html.count("OUT OF ORDER") == 1
    assert "FAIL" in html
    assert "__onRerun" in html
    assert "2025-01-15T00:00:00+00:00" in html


def test_save_report_writes_file(tmp_path):
    target = tmp_path / "nested" / "report.html"
    assert save_report("<html></html>", str(target)) == target
    assert target.read_text(encoding="utf-8") == "<html></html>"


def test_save_report_failure_is_not_raised(tmp_path):
    # a directory cannot be overwritten as a file
    assert save_report("<html></html>", str(tmp_path)) is None
