"""
This module defines the CalendarService that turns pickup schedules into an
iCalendar document.

It uses the icalendar library to build the document.
"""
import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Mapping, Sequence

from icalendar import Alarm, Calendar, Event

from ..config import (
    ALARM_TIME_HOUR,
    CALENDAR_NAME,
    CALENDAR_PRODID,
    REMINDER_DAYS_BEFORE,
    UID_DOMAIN,
)
from ..models import CalendarEvent

# Get a logger instance for this module
logger = logging.getLogger(__name__)


class CalendarService:
    """Builds all-day waste pickup calendars with a reminder the evening before."""

    def __init__(
        self,
        calendar_name: str = CALENDAR_NAME,
        uid_domain: str = UID_DOMAIN,
        reminder_days_before: int = REMINDER_DAYS_BEFORE,
        reminder_hour: int = ALARM_TIME_HOUR,
    ):
        self.calendar_name = calendar_name
        self.uid_domain = uid_domain
        self.reminder_days_before = reminder_days_before
        self.reminder_hour = reminder_hour

    def build_event(self, material: str, pickup_date: date) -> CalendarEvent:
        """
        Derives the attributes of the event for one pickup.

        Every attribute is a pure function of (material, pickup_date), so a
        regenerated calendar contains the same events as the previous one.
        """
        created = datetime(pickup_date.year, 1, 1, tzinfo=timezone.utc)
        alarm_day = pickup_date - timedelta(days=self.reminder_days_before)
        alarm_at = datetime.combine(alarm_day, time(self.reminder_hour, 0))
        return CalendarEvent(
            title=material,
            date=pickup_date,
            uid=CalendarEvent.compute_uid(material, pickup_date, self.uid_domain),
            created=created,
            alarm_at=alarm_at,
        )

    def to_component(self, event: CalendarEvent) -> Event:
        """Converts a CalendarEvent into an icalendar VEVENT with its VALARM."""
        component = Event()
        component.add("summary", event.title)
        component.add("uid", event.uid)
        component.add("dtstamp", event.created)
        component.add("created", event.created)
        component.add("dtstart", event.date)
        # DTEND is exclusive for all-day events
        component.add("dtend", event.date + timedelta(days=1))
        component.add("class", "PUBLIC")
        component.add("transp", "TRANSPARENT")
        component.add("fbtype", "FREE")

        alarm = Alarm()
        alarm.add("action", "DISPLAY")
        alarm.add("description", f"Affaldsafhentning: {event.title}")
        alarm.add("trigger", event.alarm_at)
        component.add_component(alarm)
        return component

    def build_calendar(self, schedules: Mapping[str, Sequence[date]]) -> Calendar:
        """Creates the calendar with one event per (material, date) pair."""
        cal = Calendar()
        cal.add("prodid", CALENDAR_PRODID)
        cal.add("version", "2.0")
        cal.add("calscale", "GREGORIAN")
        cal.add("name", self.calendar_name)
        cal.add("x-wr-calname", self.calendar_name)

        for material, dates in schedules.items():
            for pickup_date in dates:
                cal.add_component(self.to_component(self.build_event(material, pickup_date)))
        return cal

    def assemble(self, schedules: Mapping[str, Sequence[date]]) -> bytes:
        """
        Serializes the calendar for the given schedules.

        Args:
            schedules: Pickup dates keyed by material name, in the order the
                events should appear.

        Returns:
            The complete iCalendar document as bytes.
        """
        cal = self.build_calendar(schedules)
        event_count = sum(len(dates) for dates in schedules.values())
        logger.info(
            f"Assembled calendar '{self.calendar_name}' with {event_count} events "
            f"for {len(schedules)} materials."
        )
        return cal.to_ical()
