# booking/signals.py
"""
Django signals for the School Lab Booking.

This file is part of the School Lab Booking.
Copyright (C) 2025 School Lab Booking Contributors

This software is licensed under the GNU General Public License v3.0 (GPL-3.0).
For license terms, see LICENSE file.
"""

import logging

from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
from django.contrib.auth.models import User
from .models import UserProfile, Booking

logger = logging.getLogger(__name__)


@receiver(post_save, sender=User)
def create_user_profile(sender, instance, created, **kwargs):
    """Create UserProfile when User is created."""
    if created:
        role = UserProfile.ADMIN if instance.is_superuser else UserProfile.STUDENT
        UserProfile.objects.create(user=instance, role=role)


@receiver(post_save, sender=Booking)
def log_booking_changes(sender, instance, created, **kwargs):
    """Log booking creation."""
    if created:
        logger.info(
            f"Booking {instance.pk} created for room {instance.room_id} on {instance.date} "
            f"slot {instance.time_slot_id} ({instance.status})"
        )


@receiver(post_delete, sender=Booking)
def log_booking_deletion(sender, instance, **kwargs):
    """Log booking deletion."""
    logger.info(
        f"Booking {instance.pk} deleted (room {instance.room_id} on {instance.date} "
        f"slot {instance.time_slot_id}, {instance.status})"
    )
