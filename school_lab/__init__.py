"""
School Lab Booking - lab booking and approval for schools

This file is part of School Lab Booking.
Copyright (C) 2025 School Lab Booking Contributors

This software is licensed under the GNU General Public License v3.0 (GPL-3.0).
For license terms, see LICENSE file.
"""

__version__ = "1.0.0"
__version_info__ = (1, 0, 0)
