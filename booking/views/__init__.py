# booking/views/__init__.py
"""
Views package for the School Lab Booking API.

This file is part of the School Lab Booking.
Copyright (C) 2025 School Lab Booking Contributors

This software is licensed under the GNU General Public License v3.0 (GPL-3.0).
For license terms, see LICENSE file.
"""

from .auth import (
    RegisterView, LoginView, LogoutView, SessionView,
    AdminUserViewSet, AdminTeacherViewSet,
)
from .bookings import BookingViewSet, AdminBookingViewSet
from .reference import (
    TeacherViewSet, GradeViewSet, ClassGroupViewSet, LabViewSet, TimeSlotViewSet,
    StudentViewSet, ScheduleViewSet,
)
from .reports import AdminStatsView, BookingReportView
