# booking/workflow.py
"""
Booking workflow engine for the School Lab Booking.

Bookings start out pending and are approved or rejected by an administrator.
Only approved bookings occupy a (room, date, time slot) slot, and a slot can
hold at most one approved booking: both creating a booking for an occupied
slot and approving a second booking for it are refused with a conflict.

This file is part of the School Lab Booking.
Copyright (C) 2025 School Lab Booking Contributors

This software is licensed under the GNU General Public License v3.0 (GPL-3.0).
For license terms, see LICENSE file.
"""

import logging
from datetime import date as date_type, timedelta

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone
from django.utils.dateparse import parse_date

from .exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from .models import Booking, BookingStatus, TimeSlot, UserProfile
from .permissions import get_role

logger = logging.getLogger(__name__)


ALLOWED_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.APPROVED, BookingStatus.REJECTED},
    BookingStatus.APPROVED: {BookingStatus.REJECTED},
    BookingStatus.REJECTED: set(),
}

# Statuses an administrator may move a booking into
DECISION_STATUSES = (BookingStatus.APPROVED, BookingStatus.REJECTED)


def coerce_date(value):
    """Accept a date or an ISO ``YYYY-MM-DD`` string."""
    if isinstance(value, date_type):
        return value
    if not value or not isinstance(value, str):
        raise ValidationError('Date is required.', {'date': 'This field is required.'})
    try:
        parsed = parse_date(value.strip())
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationError(
            'Date must be in YYYY-MM-DD format.', {'date': f"Invalid date '{value}'."}
        )
    return parsed


def coerce_status(value):
    try:
        return BookingStatus(value)
    except ValueError:
        raise ValidationError(
            f"Unknown booking status '{value}'.",
            {'status': [choice for choice, _ in BookingStatus.choices]},
        )


def can_transition(current, new):
    """Return True if a booking may move from ``current`` to ``new``."""
    return BookingStatus(new) in ALLOWED_TRANSITIONS[BookingStatus(current)]


def is_slot_occupied(room_id, date, time_slot_id, exclude_booking_id=None):
    """True iff an approved booking holds the (room, date, time slot) slot."""
    queryset = Booking.objects.approved().for_slot(room_id, coerce_date(date), time_slot_id)
    if exclude_booking_id is not None:
        queryset = queryset.exclude(pk=exclude_booking_id)
    return queryset.exists()


def _lock_slot(room_id, date, time_slot_id):
    """Lock every booking row of a slot for the rest of the transaction."""
    return list(
        Booking.objects.select_for_update()
        .for_slot(room_id, date, time_slot_id)
        .values_list('pk', flat=True)
    )


def _get_locked_booking(booking_id):
    try:
        return Booking.objects.select_for_update().get(pk=booking_id)
    except (Booking.DoesNotExist, ValueError, TypeError):
        raise NotFoundError('Booking', booking_id)


def _ensure_slot_free(booking):
    _lock_slot(booking.room_id, booking.date, booking.time_slot_id)
    if is_slot_occupied(booking.room_id, booking.date, booking.time_slot_id,
                        exclude_booking_id=booking.pk):
        logger.warning(
            f"Slot conflict for room {booking.room_id} on {booking.date} "
            f"slot {booking.time_slot_id}"
        )
        raise ConflictError(
            'This room is already booked for that date and time slot.',
            {
                'roomId': booking.room_id,
                'date': booking.date.isoformat(),
                'timeSlotId': booking.time_slot_id,
            },
        )


def _save(booking):
    try:
        booking.save()
    except IntegrityError as exc:
        raise ConflictError(
            'This room is already booked for that date and time slot.',
            {'constraint': str(exc)},
        )


def create_booking(teacher, grade, room, time_slot, date, requested_by=None):
    """
    Create a pending booking request.

    Args:
        teacher, grade, room, time_slot: resolved model instances
        date: ``datetime.date`` or ISO date string
        requested_by: the user submitting the request, if any

    Returns:
        The saved Booking with its relations loaded.

    Raises:
        ValidationError: a required value is missing or malformed
        ConflictError: an approved booking already occupies the slot
    """
    missing = [
        name for name, value in (
            ('teacherId', teacher), ('gradeId', grade),
            ('roomId', room), ('timeSlotId', time_slot),
        ) if value is None
    ]
    if missing:
        raise ValidationError(
            'Missing required fields.', {name: 'This field is required.' for name in missing}
        )
    booking_date = coerce_date(date)

    with transaction.atomic():
        booking = Booking(
            teacher=teacher,
            grade=grade,
            room=room,
            time_slot=time_slot,
            date=booking_date,
            status=BookingStatus.PENDING,
            requested_by=requested_by,
        )
        _ensure_slot_free(booking)
        _save(booking)

    return Booking.objects.select_related('teacher', 'grade', 'room', 'time_slot').get(pk=booking.pk)


def _apply_status(booking, new_status, actor):
    if not can_transition(booking.status, new_status):
        raise ValidationError(
            f"Cannot change booking status from '{booking.status}' to '{new_status}'.",
            {'from': booking.status, 'to': str(new_status)},
        )
    if new_status == BookingStatus.APPROVED:
        _ensure_slot_free(booking)
    previous = booking.status
    booking.status = new_status
    booking.decided_by = actor if actor is not None and actor.is_authenticated else None
    booking.decided_at = timezone.now()
    return previous


def transition_status(booking_id, new_status, actor):
    """
    Approve or reject a booking.

    Only administrators may decide bookings. Approving checks, under a lock on
    the slot, that no other approved booking already holds it.
    """
    if get_role(actor) != UserProfile.ADMIN:
        raise AuthorizationError('Only administrators can approve or reject bookings.')
    new_status = coerce_status(new_status)
    if new_status not in DECISION_STATUSES:
        raise ValidationError(
            f"Status can only be set to {', '.join(DECISION_STATUSES)}.",
            {'status': str(new_status)},
        )

    with transaction.atomic():
        booking = _get_locked_booking(booking_id)
        previous = _apply_status(booking, new_status, actor)
        _save(booking)

    logger.info(f"Booking {booking.pk} {previous} -> {booking.status} by user {actor.pk}")
    return Booking.objects.select_related('teacher', 'grade', 'room', 'time_slot').get(pk=booking.pk)


def update_booking(booking_id, changes, actor):
    """
    Apply an administrator's edit to a booking.

    ``changes`` may hold any of teacher, grade, room, time_slot, date and
    status. Re-submitting the current status is a no-op; a different status
    goes through the transition table.
    """
    if get_role(actor) != UserProfile.ADMIN:
        raise AuthorizationError('Only administrators can edit bookings.')
    if not changes:
        raise ValidationError('Nothing to update.')
    changes = dict(changes)
    new_status = changes.pop('status', None)
    if new_status is not None:
        new_status = coerce_status(new_status)
    if 'date' in changes:
        changes['date'] = coerce_date(changes['date'])

    with transaction.atomic():
        booking = _get_locked_booking(booking_id)
        for field, value in changes.items():
            setattr(booking, field, value)

        if new_status is not None and new_status != booking.status:
            previous = _apply_status(booking, new_status, actor)
            logger.info(f"Booking {booking.pk} {previous} -> {new_status} by user {actor.pk}")
        elif booking.is_approved and changes:
            _ensure_slot_free(booking)
        _save(booking)

    return Booking.objects.select_related('teacher', 'grade', 'room', 'time_slot').get(pk=booking.pk)


def delete_booking(booking_id):
    """Permanently remove a booking."""
    try:
        booking = Booking.objects.get(pk=booking_id)
    except (Booking.DoesNotExist, ValueError, TypeError):
        raise NotFoundError('Booking', booking_id)
    booking.delete()


def list_bookings(status=None, teacher_id=None, room_id=None, start=None, end=None):
    """Bookings with relations loaded, ordered by date then time slot."""
    queryset = Booking.objects.select_related('teacher', 'grade', 'room', 'time_slot')
    if status:
        queryset = queryset.filter(status=coerce_status(status))
    if teacher_id:
        queryset = queryset.filter(teacher_id=teacher_id)
    if room_id:
        queryset = queryset.filter(room_id=room_id)
    if start:
        queryset = queryset.filter(date__gte=coerce_date(start))
    if end:
        queryset = queryset.filter(date__lte=coerce_date(end))
    return queryset.chronological()


def weekly_grid(room, start=None, days=None):
    """
    Build the occupancy grid of a room.

    Rows are time slots ordered by time, columns the ``days`` dates from
    ``start`` (today by default). A cell is occupied only by an approved booking.
    """
    start = coerce_date(start) if start else timezone.localdate()
    days = days or getattr(settings, 'SCHEDULE_GRID_DAYS', 7)
    dates = [start + timedelta(days=offset) for offset in range(days)]

    approved = (
        Booking.objects.approved()
        .filter(room=room, date__in=dates)
        .select_related('teacher', 'grade')
    )
    occupied = {(booking.date, booking.time_slot_id): booking for booking in approved}

    rows = []
    for slot in TimeSlot.objects.order_by('time'):
        cells = []
        for day in dates:
            booking = occupied.get((day, slot.pk))
            cell = {'date': day.isoformat(), 'occupied': booking is not None}
            if booking is not None:
                cell['booking'] = {
                    'id': booking.pk,
                    'teacher': booking.teacher.name,
                    'grade': booking.grade.name,
                }
            cells.append(cell)
        rows.append({
            'timeSlot': {'id': slot.pk, 'name': slot.name, 'time': slot.time},
            'cells': cells,
        })

    return {
        'room': {'id': room.pk, 'name': room.name},
        'dates': [day.isoformat() for day in dates],
        'slots': rows,
    }
