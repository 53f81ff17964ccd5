"""Selectors over collections of observation reports."""

from __future__ import annotations

from collections.abc import Iterable

from src.schemas.report import ICTReport


def get_school_reports(school_id: int, reports: Iterable[ICTReport]) -> list[ICTReport]:
    """Return the reports belonging to *school_id*, oldest first."""
    return sorted((r for r in reports if r.school_id == school_id), key=lambda r: r.date)


def get_latest_report(school_id: int, reports: Iterable[ICTReport]) -> ICTReport | None:
    """Return the most recent report for *school_id*, or ``None`` if it has none.

    Ties on date resolve to whichever tied report comes first in *reports*.
    """
    school_reports = [r for r in reports if r.school_id == school_id]
    if not school_reports:
        return None
    return max(school_reports, key=lambda r: r.date)


def report_has_internet(report: ICTReport) -> bool:
    """Return True when the report records any internet connection.

    An unrecorded connection counts as no connection.
    """
    connection = report.infrastructure.internet_connection if report.infrastructure else None
    return connection not in (None, "None")


def latest_period(reports: Iterable[ICTReport]) -> str | None:
    """Return the period label of the most recent report, or ``None`` if there are none."""
    reports = list(reports)
    if not reports:
        return None
    return max(reports, key=lambda r: r.date).period


def group_reports_by_school(reports: Iterable[ICTReport]) -> dict[int, list[ICTReport]]:
    """Index reports by ``school_id`` preserving input order within each school."""
    grouped: dict[int, list[ICTReport]] = {}
    for report in reports:
        grouped.setdefault(report.school_id, []).append(report)
    return grouped
