#!/usr/bin/env python3
"""
Formatting utilities for check results and run summaries.
"""

import csv
import io
import json
from pathlib import Path
from typing import Iterable, Union

from core.models.result import Result
from core.models.run_state import RunSummary

CSV_FIELDS = ['url', 'status', 'status_code', 'reason', 'attempts', 'method']


def format_result(result: Result) -> str:
    """Format a single result for display."""
    code = f" {result.status_code}" if result.status_code else ""
    return f"[{result.status.value.upper()}{code}] {result.url}\n    {result.reason}\n"


def format_summary(summary: RunSummary) -> str:
    """Format a run summary for console display."""
    lines = [
        "\n=== Link Check Summary ===",
        f"🔗 Links: {summary.total}",
        f"✅ OK: {summary.ok}",
        f"❌ Broken: {summary.broken}",
        f"⏭️  Skipped: {summary.skipped}",
        f"⏱️  Duration: {summary.duration:.2f}s",
    ]

    if summary.broken_links:
        lines.extend(["", "Broken links:"])
        for link in summary.broken_links:
            lines.append(f"  - {link.url} (reason: {link.reason})")

    lines.extend(["", summary.headline()])
    return "\n".join(lines) + "\n"


def results_to_csv_bytes(results: Iterable[Result]) -> bytes:
    """Serialize results into CSV and return the encoded bytes."""
    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=CSV_FIELDS)
    writer.writeheader()
    for result in results:
        row = result.to_dict()
        row['status_code'] = row['status_code'] if row['status_code'] is not None else ""
        row['method'] = row['method'] or ""
        writer.writerow(row)
    return output.getvalue().encode('utf-8')


def summary_to_json(summary: RunSummary) -> str:
    return json.dumps(summary.to_dict(), indent=2, ensure_ascii=False)


def write_report(summary: RunSummary, path: Union[str, Path]) -> Path:
    """
    Write a report file; the format follows the suffix (.csv or .json).

    Raises:
        ValueError: If the suffix is not supported
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == '.csv':
        path.write_bytes(results_to_csv_bytes(summary.results))
    elif suffix == '.json':
        path.write_text(summary_to_json(summary), encoding='utf-8')
    else:
        raise ValueError(f"Unsupported report format '{suffix}' (use .json or .csv)")
    return path
