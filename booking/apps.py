# booking/apps.py
"""
App configuration for the booking app.

This file is part of the School Lab Booking.
Copyright (C) 2025 School Lab Booking Contributors

This software is licensed under the GNU General Public License v3.0 (GPL-3.0).
For license terms, see LICENSE file.
"""

from django.apps import AppConfig


class BookingConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'booking'
    verbose_name = 'School Lab Booking'

    def ready(self):
        """Initialize the app when Django starts."""
        import booking.signals  # noqa: F401
