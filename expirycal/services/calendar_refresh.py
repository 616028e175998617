"""Background service keeping the presented calendar current."""

import logging
import typing as t

from expirycal.schemas.calendar import CalendarSnapshot, LegendCounts
from expirycal.services.calendar_pipeline import CalendarPipeline
from expirycal.services.presentation_sink import SnapshotSink

LOGGER = logging.getLogger(__name__)


def format_legend_report(legend: LegendCounts) -> str:
    """Format legend counts into a readable report.

    Args:
        legend (LegendCounts): The legend counts.

    Returns:
        str: The formatted report.
    """
    lines: t.List[str] = [
        "=" * 40,
        "EXPIRY CALENDAR",
        "=" * 40,
        f"  Total items:     {legend.total}",
        f"  Expired:         {legend.expired}",
        f"  Expiring today:  {legend.today}",
        f"  Expiring soon:   {legend.soon}",
        f"  Safe:            {legend.safe}",
        f"  No expiry date:  {legend.unscheduled}",
        f"  Within a week:   {legend.this_week}",
    ]
    if legend.urgent_action_required:
        lines.append("Action required: items are expired or expire today.")
    return "\n".join(lines)


async def refresh_calendar_task(pipeline: CalendarPipeline) -> None:
    """Scheduled task rebuilding the calendar.

    Running it periodically moves items across the "today" and
    "expired" boundaries once the date changes; the render gate keeps
    unchanged calendars from being republished.

    Args:
        pipeline (CalendarPipeline): The application's pipeline.
    """
    LOGGER.debug("Running calendar refresh...")

    try:
        if not await pipeline.refresh_now():
            return

        sink = pipeline.sink
        if isinstance(sink, SnapshotSink) and sink.snapshot is not None:
            snapshot: CalendarSnapshot = sink.snapshot
            LOGGER.info("\n%s", format_legend_report(snapshot.legend))

    except Exception:  # pylint: disable=broad-except
        LOGGER.exception("Error in calendar refresh task")
