"""
Scheduling service - calendar grouping and bucket counts over a user's clients

Appointment times are stored without an offset and read as wall-clock time
in the viewing user's timezone. "Now" is converted into that timezone before
comparing, so upcoming/completed follows the user's clock.
"""

import logging
from collections import defaultdict
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from dateutil.relativedelta import relativedelta
from google.cloud.firestore import Client

from ...config import DEFAULT_TIMEZONE
from ...shared.timezones import resolve_timezone, timezone_label
from ...shared.validators import LOCAL_DATETIME_FORMAT
from ..clients.schemas import ClientRecord
from ..clients.service import ClientService
from ..settings.repository import SettingsRepository
from ..settings.schemas import UserSettings
from .schemas import (
    AnalyticsResponse,
    AppointmentEntry,
    CalendarDay,
    CalendarResponse,
    CountBucket,
    DashboardResponse,
    StatusBucket,
)

logger = logging.getLogger(__name__)

WEEKS_SHOWN = 6
MONTHS_SHOWN = 6


def parse_appointment(value: Optional[str]) -> Optional[datetime]:
    """Parse a stored YYYY-MM-DDTHH:mm value; malformed values are ignored"""
    if not value:
        return None
    try:
        return datetime.strptime(value[:16], LOCAL_DATETIME_FORMAT)
    except ValueError:
        logger.debug(f"Ignoring malformed appointment time: {value!r}")
        return None


def local_now(tz_name: str, now: Optional[datetime] = None) -> datetime:
    """Current wall-clock time in the given zone, without tzinfo"""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(resolve_timezone(tz_name)).replace(tzinfo=None)


def created_local_date(client: ClientRecord, tz_name: str) -> Optional[date]:
    if client.createdAt is None:
        return None
    created_at = client.createdAt
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return created_at.astimezone(resolve_timezone(tz_name)).date()


def start_of_week(day: date) -> date:
    """Weeks start on Sunday"""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def to_entry(client: ClientRecord, appointment: datetime) -> AppointmentEntry:
    return AppointmentEntry(
        clientId=client.id,
        name=client.name,
        email=client.email,
        phone=client.phone,
        appointmentDateTime=client.appointmentDateTime,
        time=appointment.strftime("%H:%M"),
    )


def group_appointments(clients: list[ClientRecord]) -> dict[str, list[AppointmentEntry]]:
    """Group clients with an appointment by date, each day in time order"""
    grouped = defaultdict(list)
    for client in clients:
        appointment = parse_appointment(client.appointmentDateTime)
        if appointment is None:
            continue
        grouped[appointment.date().isoformat()].append((appointment, client))

    return {
        day: [to_entry(client, appt) for appt, client in sorted(items, key=lambda pair: pair[0])]
        for day, items in sorted(grouped.items())
    }


def split_appointments(clients: list[ClientRecord], now_local: datetime) -> tuple[list, list]:
    """(upcoming, completed) appointments as (datetime, client) pairs"""
    upcoming, completed = [], []
    for client in clients:
        appointment = parse_appointment(client.appointmentDateTime)
        if appointment is None:
            continue
        if appointment > now_local:
            upcoming.append((appointment, client))
        else:
            completed.append((appointment, client))
    upcoming.sort(key=lambda pair: pair[0])
    return upcoming, completed


def weekly_new_clients(
    clients: list[ClientRecord], tz_name: str, now_local: datetime
) -> list[CountBucket]:
    """New clients per week for the last six weeks, oldest week first"""
    current_week = start_of_week(now_local.date())
    week_starts = [current_week - timedelta(weeks=WEEKS_SHOWN - 1 - i) for i in range(WEEKS_SHOWN)]
    counts = [0] * WEEKS_SHOWN

    for client in clients:
        created = created_local_date(client, tz_name)
        if created is None:
            continue
        for index, week_start in enumerate(week_starts):
            if week_start <= created < week_start + timedelta(days=7):
                counts[index] += 1
                break

    return [
        CountBucket(label=f"{week_start.strftime('%b')} {week_start.day}", clients=count)
        for week_start, count in zip(week_starts, counts)
    ]


def monthly_new_clients(
    clients: list[ClientRecord], tz_name: str, now_local: datetime
) -> list[CountBucket]:
    """New clients per calendar month for the last six months, oldest first"""
    this_month = now_local.date().replace(day=1)
    months = [this_month - relativedelta(months=MONTHS_SHOWN - 1 - i) for i in range(MONTHS_SHOWN)]
    counts = {(m.year, m.month): 0 for m in months}

    for client in clients:
        created = created_local_date(client, tz_name)
        if created is None:
            continue
        key = (created.year, created.month)
        if key in counts:
            counts[key] += 1

    return [
        CountBucket(label=m.strftime("%b %Y"), clients=counts[(m.year, m.month)]) for m in months
    ]


class SchedulingService:
    """Read-only views built from the client list and the user's timezone"""

    def __init__(self, db: Client):
        self.db = db
        self.client_service = ClientService(db)
        self.settings_repo = SettingsRepository()

    def _load(self, user_id: str) -> tuple[list[ClientRecord], Optional[UserSettings], str]:
        clients = self.client_service.get_clients(user_id)
        settings = self.settings_repo.get(self.db, user_id)
        tz_name = settings.timezone if settings and settings.timezone else DEFAULT_TIMEZONE
        return clients, settings, tz_name

    def calendar(self, user_id: str, day: Optional[date] = None) -> CalendarResponse:
        clients, _, tz_name = self._load(user_id)
        grouped = group_appointments(clients)
        if day is not None:
            key = day.isoformat()
            grouped = {key: grouped.get(key, [])}

        return CalendarResponse(
            timezone=tz_name,
            days=[CalendarDay(date=d, appointments=entries) for d, entries in grouped.items()],
        )

    def dashboard(self, user_id: str, now: Optional[datetime] = None) -> DashboardResponse:
        clients, settings, tz_name = self._load(user_id)
        now_local = local_now(tz_name, now)

        upcoming, _ = split_appointments(clients, now_local)
        next_appointment = to_entry(upcoming[0][1], upcoming[0][0]) if upcoming else None

        return DashboardResponse(
            totalClients=len(clients),
            nextAppointment=next_appointment,
            weeklyNewClients=weekly_new_clients(clients, tz_name, now_local),
            companyName=settings.companyName if settings else None,
            accountType=settings.accountType if settings else None,
            timezone=tz_name,
            timezoneLabel=timezone_label(tz_name),
        )

    def analytics(self, user_id: str, now: Optional[datetime] = None) -> AnalyticsResponse:
        clients, _, tz_name = self._load(user_id)
        now_local = local_now(tz_name, now)

        upcoming, completed = split_appointments(clients, now_local)
        status_buckets = [
            StatusBucket(name="Completed", value=len(completed)),
            StatusBucket(name="Upcoming", value=len(upcoming)),
        ]

        return AnalyticsResponse(
            totalClients=len(clients),
            upcomingAppointments=len(upcoming),
            completedAppointments=len(completed),
            monthlyNewClients=monthly_new_clients(clients, tz_name, now_local),
            appointmentStatus=[b for b in status_buckets if b.value > 0],
        )
