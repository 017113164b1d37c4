# booking/models.py
"""
Core models for the School Lab Booking.

This file is part of the School Lab Booking.
Copyright (C) 2025 School Lab Booking Contributors

This software is licensed under the GNU General Public License v3.0 (GPL-3.0).
For license terms, see LICENSE file.
"""

from django.db import models
from django.contrib.auth.models import User


class UserProfile(models.Model):
    """Role information attached to every login account."""
    ADMIN = 'admin'
    TEACHER = 'teacher'
    STUDENT = 'student'
    ROLE_CHOICES = [
        (ADMIN, 'Administrator'),
        (TEACHER, 'Teacher'),
        (STUDENT, 'Student'),
    ]

    user = models.OneToOneField(User, on_delete=models.CASCADE)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=STUDENT)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'booking_userprofile'

    def __str__(self):
        return f"{self.user.get_full_name() or self.user.email} ({self.role})"

    @property
    def is_admin(self):
        return self.role == self.ADMIN

    @property
    def is_teacher(self):
        return self.role == self.TEACHER


class Teacher(models.Model):
    """A teacher who can request lab bookings and teach scheduled classes."""
    name = models.CharField(max_length=200, unique=True)
    user = models.OneToOneField(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name='teacher'
    )

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class Grade(models.Model):
    name = models.CharField(max_length=100, unique=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class ClassGroup(models.Model):
    name = models.CharField(max_length=100, unique=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class Lab(models.Model):
    """A bookable laboratory room."""
    name = models.CharField(max_length=200, unique=True)
    room_number = models.CharField(max_length=50, blank=True, null=True)
    capacity = models.PositiveIntegerField(null=True, blank=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class TimeSlot(models.Model):
    """A teaching period, e.g. "Period 1" at "08:30-09:20"."""
    name = models.CharField(max_length=100, unique=True)
    time = models.CharField(max_length=50, unique=True, help_text="Label such as 08:30-09:20")

    class Meta:
        ordering = ['time']

    def __str__(self):
        return f"{self.name} ({self.time})"


class Student(models.Model):
    name = models.CharField(max_length=200)
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='student')
    class_group = models.ForeignKey(
        ClassGroup, on_delete=models.PROTECT, null=True, blank=True, related_name='students'
    )

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class Schedule(models.Model):
    """Recurring weekly class-to-lab assignment."""
    subject = models.CharField(max_length=200)
    time = models.CharField(max_length=100)
    teacher = models.ForeignKey(Teacher, on_delete=models.PROTECT, related_name='schedules')
    lab = models.ForeignKey(Lab, on_delete=models.PROTECT, related_name='schedules')
    class_group = models.ForeignKey(ClassGroup, on_delete=models.PROTECT, related_name='schedules')

    class Meta:
        ordering = ['time', 'id']

    def __str__(self):
        return f"{self.subject} - {self.lab.name} ({self.time})"


class BookingStatus(models.TextChoices):
    PENDING = 'pending', 'Pending Approval'
    APPROVED = 'approved', 'Approved'
    REJECTED = 'rejected', 'Rejected'


class BookingQuerySet(models.QuerySet):

    def chronological(self):
        return self.order_by('date', 'time_slot__time', 'id')

    def approved(self):
        return self.filter(status=BookingStatus.APPROVED)

    def pending(self):
        return self.filter(status=BookingStatus.PENDING)

    def for_slot(self, room_id, date, time_slot_id):
        return self.filter(room_id=room_id, date=date, time_slot_id=time_slot_id)


class Booking(models.Model):
    """An ad-hoc request to use a lab at a date and time slot."""
    teacher = models.ForeignKey(Teacher, on_delete=models.PROTECT, related_name='bookings')
    grade = models.ForeignKey(Grade, on_delete=models.PROTECT, related_name='bookings')
    room = models.ForeignKey(Lab, on_delete=models.PROTECT, related_name='bookings')
    time_slot = models.ForeignKey(TimeSlot, on_delete=models.PROTECT, related_name='bookings')
    date = models.DateField()
    status = models.CharField(
        max_length=20, choices=BookingStatus.choices, default=BookingStatus.PENDING
    )

    requested_by = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name='requested_bookings'
    )
    decided_by = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name='decided_bookings'
    )
    decided_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = BookingQuerySet.as_manager()

    class Meta:
        db_table = 'booking_booking'
        ordering = ['date', 'time_slot__time', 'id']
        constraints = [
            models.UniqueConstraint(
                fields=['room', 'date', 'time_slot'],
                condition=models.Q(status='approved'),
                name='booking_one_approved_per_slot',
            )
        ]
        indexes = [
            models.Index(fields=['room', 'date', 'time_slot'], name='booking_slot_idx'),
        ]

    def __str__(self):
        return f"{self.room.name} {self.date} {self.time_slot.time} ({self.status})"

    def save(self, *args, **kwargs):
        # The one-approved-per-slot constraint is enforced by the database
        self.full_clean(validate_constraints=False)
        super().save(*args, **kwargs)

    @property
    def is_approved(self):
        return self.status == BookingStatus.APPROVED

    def occupies_slot(self):
        """Only approved bookings block their slot."""
        return self.is_approved
