"""
Report assembly: structured payload, console block and the HTML report.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from html import escape
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..types import RunResult
from .bridge import RERUN_ENDPOINT
from .views import BASE_CSS


logger = logging.getLogger(__name__)

RULE_WIDTH = 70


def build_report_payload(result: RunResult) -> Dict[str, Any]:
    """Structured report consumed by the HTML renderer."""
    violation_positions = {v.position for v in result.violations}
    config = result.config
    collection = result.collection

    rows: List[Dict[str, Any]] = [
        {
            "position": index,
            "title": item.title,
            "timestamp": item.timestamp,
            "relativeAgeText": item.relative_age_text,
            "isViolation": index in violation_positions,
        }
        for index, item in enumerate(result.items, start=1)
    ]

    return {
        "passed": result.passed,
        "complete": result.success,
        "itemCount": len(result.items),
        "targetCount": config.target_count if config else None,
        "violationCount": len(result.violations),
        "durationSeconds": round(result.duration_ms / 1000, 1),
        "stopReason": collection.stop_reason.value if collection else None,
        "error": str(result.error) if result.error else None,
        "configSnapshot": {
            "sourceUrl": config.source_url if config else None,
            "maxRetries": config.max_retries if config else None,
            "navigationTimeoutMs": config.navigation_timeout_ms if config else None,
        },
        "rows": rows,
    }


def format_console_report(result: RunResult, title: str = "Hacker News Sort Order - Validation Report") -> str:
    items = result.items
    seconds = result.duration_ms / 1000
    lines = [
        "=" * RULE_WIDTH,
        f"  {title}",
        "=" * RULE_WIDTH,
        f"  Items checked:     {len(items)}",
        f"  Time elapsed:      {seconds:.1f}s",
        f"  Oldest item:       {items[-1].timestamp if items else 'n/a'}",
        f"  Newest item:       {items[0].timestamp if items else 'n/a'}",
        "-" * RULE_WIDTH,
    ]

    if not result.success:
        lines.append(f"  FAIL: {result.error or 'collection did not complete'}")
    if result.violations:
        lines.append(f"  FAIL: {len(result.violations)} sort order violation(s) detected.")
        lines.append("")
        for v in result.violations:
            lines.append(
                f'  #{v.position}: "{v.item.title}" '
                f"{v.item.timestamp} should come before {v.next_item.timestamp}"
            )
    elif result.success:
        lines.append(f"  PASS: All {len(items)} items are correctly sorted newest to oldest.")

    lines.append("=" * RULE_WIDTH)
    return "\n".join(lines)


REPORT_CSS = """
  .container { max-width: 960px; margin: 0 auto; }
  .header { display: flex; align-items: center; justify-content: space-between; margin-bottom: 1.5rem; gap: .75rem; }
  .summary { display: flex; gap: 1rem; flex-wrap: wrap; margin-bottom: 1rem; }
  .card { background: #fff; border-radius: 8px; padding: 1rem 1.25rem; flex: 1; min-width: 140px; box-shadow: 0 1px 3px rgba(0,0,0,.1); }
  .card .label { font-size: .75rem; text-transform: uppercase; letter-spacing: .05em; color: #888; margin-bottom: .25rem; }
  .card .value { font-size: 1.25rem; font-weight: 600; }
  .status-pass { color: #16a34a; }
  .status-fail { color: #dc2626; }
  .notice { background: #fef2f2; color: #991b1b; border-radius: 8px; padding: .75rem 1rem; margin-bottom: 1rem; font-size: .85rem; }
  .config-summary { display: flex; gap: 1.5rem; flex-wrap: wrap; font-size: .75rem; color: #999; margin-bottom: 1.5rem; }
  table { width: 100%; border-collapse: collapse; background: #fff; border-radius: 8px; overflow: hidden; box-shadow: 0 1px 3px rgba(0,0,0,.1); }
  th { background: #ff6600; color: #fff; text-align: left; padding: .625rem .75rem; font-size: .8rem; text-transform: uppercase; }
  td { padding: .5rem .75rem; border-bottom: 1px solid #eee; font-size: .85rem; }
  tr.violation { background: #fef2f2; }
  .badge { background: #dc2626; color: #fff; font-size: .65rem; padding: .15rem .4rem; border-radius: 4px; font-weight: 600; margin-left: .5rem; }
  .footer { margin-top: 1.5rem; font-size: .75rem; color: #aaa; text-align: center; }
"""


def _card(label: str, value: Any, css_class: str = "") -> str:
    return (
        f'<div class="card"><div class="label">{escape(label)}</div>'
        f'<div class="value {css_class}">{escape(str(value))}</div></div>'
    )


def render_report_html(
    payload: Dict[str, Any],
    generated_at: Optional[datetime] = None,
    title: str = "Hacker News Sort Validation Report",
) -> str:
    generated_at = generated_at or datetime.now(timezone.utc)
    passed = payload["passed"]

    rows_html = ""
    for row in payload["rows"]:
        badge = '<span class="badge">OUT OF ORDER</span>' if row["isViolation"] else ""
        row_class = ' class="violation"' if row["isViolation"] else ""
        rows_html += (
            f"\n        <tr{row_class}><td>{row['position']}</td>"
            f"<td>{escape(row['title'])}</td>"
            f"<td>{escape(row['timestamp'] or '')}</td>"
            f"<td>{escape(row['relativeAgeText'])} {badge}</td></tr>"
        )

    notice = ""
    if not payload["complete"]:
        notice = f'<div class="notice">{escape(payload["error"] or "Collection did not complete")}</div>'

    snapshot = payload["configSnapshot"]
    cards = "".join(
        [
            _card("Result", "PASS" if passed else "FAIL", "status-pass" if passed else "status-fail"),
            _card("Items Checked", payload["itemCount"]),
            _card("Violations", payload["violationCount"], "status-fail" if payload["violationCount"] else ""),
            _card("Duration", f"{payload['durationSeconds']}s"),
        ]
    )

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<title>{escape(title)}</title>
<style>{BASE_CSS}{REPORT_CSS}</style>
</head>
<body>
  <div class="container">
    <div class="header">
      <h1>{escape(title)}</h1>
      <button id="rerun-btn" class="primary" onclick="window.{RERUN_ENDPOINT} && window.{RERUN_ENDPOINT}()">Run Again</button>
    </div>
    <div class="summary">{cards}</div>
    {notice}
    <div class="config-summary">
      <span>URL: {escape(str(snapshot['sourceUrl']))}</span>
      <span>Retries: {snapshot['maxRetries']}</span>
      <span>Timeout: {snapshot['navigationTimeoutMs']}ms</span>
    </div>
    <table>
      <thead>
        <tr><th>#</th><th>Title</th><th>Timestamp (UTC)</th><th>Age</th></tr>
      </thead>
      <tbody>{rows_html}
      </tbody>
    </table>
    <div class="footer">Generated on {generated_at.isoformat()}</div>
  </div>
</body>
</html>"""


def save_report(html: str, path: str) -> Optional[Path]:
    """Write the HTML report; failures are logged, never raised."""
    target = Path(path).expanduser()
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(html, encoding="utf-8")
    except OSError as exc:
        logger.error(f"❌ Could not save HTML report to {target}: {exc}")
        return None
    logger.info(f"HTML report saved to {target.resolve()}")
    return target
