"""Scheduling domain schemas - calendar, dashboard and analytics views"""

from typing import Optional

from pydantic import BaseModel


class AppointmentEntry(BaseModel):
    clientId: str
    name: str
    email: str
    phone: Optional[str] = None
    appointmentDateTime: str
    time: str


class CalendarDay(BaseModel):
    date: str
    appointments: list[AppointmentEntry]


class CalendarResponse(BaseModel):
    timezone: str
    days: list[CalendarDay]


class CountBucket(BaseModel):
    label: str
    clients: int


class StatusBucket(BaseModel):
    name: str
    value: int


class DashboardResponse(BaseModel):
    totalClients: int
    nextAppointment: Optional[AppointmentEntry] = None
    weeklyNewClients: list[CountBucket]
    companyName: Optional[str] = None
    accountType: Optional[str] = None
    timezone: str
    timezoneLabel: str


class AnalyticsResponse(BaseModel):
    totalClients: int
    upcomingAppointments: int
    completedAppointments: int
    monthlyNewClients: list[CountBucket]
    appointmentStatus: list[StatusBucket]
