# app/core/reports.py

"""
Plain-text and CSV reporting summaries.

Renders one system's reconciliation results, keyed by location, in the
formats the reports page exports.
"""

import csv
import io
from datetime import datetime

from app.core.reconciliation import ReconciliationResult

WIDTH = 80


def render_text_report(
    system: str,
    results: dict[str, ReconciliationResult],
    generated_at: datetime,
) -> str:
    """Render a human-readable facility reporting summary."""
    generated = generated_at.strftime("%Y-%m-%d %H:%M")
    inner = WIDTH - 2

    lines = [
        "╔" + "═" * inner + "╗",
        "║" + "FACILITY REPORTING SUMMARY".center(inner) + "║",
        "║" + " " * inner + "║",
        "║" + f"  System: {system}".ljust(inner) + "║",
        "║" + f"  Generated: {generated}".ljust(inner) + "║",
        "╚" + "═" * inner + "╝",
        "",
    ]

    # ============================================
    # Summary table
    # ============================================
    lines.append("SUMMARY")
    lines.append("=" * WIDTH)
    lines.append(
        f"{'Location':<15}{'Total':<10}{'Matched':<12}{'Unmatched':<12}"
        f"{'Total Rep':<12}{'Missing':<10}Progress"
    )
    lines.append("-" * WIDTH)
    for location, result in results.items():
        unmatched = len(result.unmatched_reported)
        lines.append(
            f"{location:<15}{result.total_master:<10}{result.reported_count:<12}{unmatched:<12}"
            f"{result.reported_count + unmatched:<12}{len(result.missing):<10}{result.progress:.1f}%"
        )
    lines.append("")

    # ============================================
    # Per-location detail
    # ============================================
    for location, result in results.items():
        lines.extend(_location_section(location, result))

    lines.append("═" * WIDTH)
    lines.append(f"End of Report - Generated on {generated}")
    lines.append("═" * WIDTH)

    return "\n".join(lines) + "\n"


def _location_section(location: str, result: ReconciliationResult) -> list[str]:
    name = location.upper()
    unmatched = len(result.unmatched_reported)

    lines = [
        "=" * WIDTH,
        f"LOCATION: {name}",
        "=" * WIDTH,
        f"Total Facilities in Master List: {result.total_master}",
        f"Reported (Matched with Master): {result.reported_count}",
    ]
    if unmatched:
        lines.append(f"Unmatched Reported (Not in Master List): {unmatched}")
    lines.append(f"Total Reported Facilities: {result.reported_count + unmatched}")
    lines.append(f"Missing Facilities: {len(result.missing)}")
    lines.append(f"Progress: {result.progress:.1f}%")
    lines.append("")

    if result.reported_count or unmatched:
        lines.append("─" * WIDTH)
        lines.append(f"REPORTED FACILITIES - {name}")
        lines.append("─" * WIDTH)

        if result.reported_count:
            lines.append(f"Matched Facilities ({result.reported_count}):")
            index = 0
            for index, facility in enumerate(result.matched, start=1):
                lines.append(f"  {index:>3}. {facility}")
            # Notes follow the match, never the name; a master name can appear in both buckets
            for index, item in enumerate(result.matched_with_comment, start=index + 1):
                lines.append(f"  {index:>3}. {item.facility}")
                lines.append(f"      [Note: {item.comment}]")

        if unmatched:
            lines.append(f"Unmatched Reported Facilities ({unmatched}):")
            lines.append("  [These facilities were reported but are not in the master list]")
            for index, item in enumerate(result.unmatched_reported, start=1):
                lines.append(f"  {index:>3}. {item.facility}")
                lines.append(f"      [Note: {item.comment}]")
        lines.append("")

    lines.append("─" * WIDTH)
    lines.append(f"MISSING FACILITIES - {name}")
    lines.append("─" * WIDTH)
    if result.missing:
        lines.append(
            f"The following {len(result.missing)} facility/facilities from the master list "
            f"have NOT been reported:"
        )
        for index, facility in enumerate(result.missing, start=1):
            lines.append(f"  {index:>3}. {facility}")
    else:
        lines.append("✓ All facilities in the master list have been reported!")
    lines.append("")

    return lines


def render_csv_report(system: str, results: dict[str, ReconciliationResult]) -> str:
    """Render the detailed CSV export."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")

    writer.writerow([f"FACILITY REPORT - {system}"])
    writer.writerow([])
    writer.writerow(["Location", "Total", "Matched", "Unmatched", "Total Reported", "Missing", "Progress"])
    for location, result in results.items():
        unmatched = len(result.unmatched_reported)
        writer.writerow([
            location,
            result.total_master,
            result.reported_count,
            unmatched,
            result.reported_count + unmatched,
            len(result.missing),
            f"{result.progress:.1f}%",
        ])
    writer.writerow([])

    for location, result in results.items():
        name = location.upper()

        writer.writerow([f"REPORTED FACILITIES - {name}"])
        writer.writerow(["Facility Name", "Status", "Category", "Notes"])
        for facility in result.matched:
            writer.writerow([facility, "Has Reported", "Matched", "Has reported"])
        for item in result.matched_with_comment:
            writer.writerow([item.facility, "Has Reported", "Matched", f"Matched with variation: {item.comment}"])
        for item in result.unmatched_reported:
            writer.writerow([item.facility, "Has Reported", "Unmatched", item.comment])
        writer.writerow([])

        writer.writerow([f"MISSING FACILITIES - {name}"])
        writer.writerow(["Facility Name", "Status", "Category", "Notes"])
        if result.missing:
            for facility in result.missing:
                writer.writerow([facility, "Has Not Reported", "Missing", "Facility in master list but has not reported"])
        else:
            writer.writerow(["All facilities reported", "Complete", "N/A", "No missing facilities"])
        writer.writerow([])

    return buffer.getvalue()
