"""Test cases for booking models."""
import pytest
from datetime import date
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import ProtectedError

from booking.models import Booking, BookingStatus, UserProfile
from booking.tests.factories import (
    UserFactory, UserProfileFactory, TeacherFactory, LabFactory, TimeSlotFactory,
    BookingFactory, ScheduleFactory,
)


@pytest.mark.django_db
class TestUserProfile:
    """Test UserProfile model functionality."""

    def test_profile_created_by_signal(self):
        user = UserFactory()
        assert user.userprofile.role == UserProfile.STUDENT

    def test_superuser_gets_admin_role(self):
        from django.contrib.auth.models import User
        user = User.objects.create_superuser('root@test.com', 'root@test.com', 'secret123')
        assert user.userprofile.role == UserProfile.ADMIN

    def test_user_profile_str(self):
        profile = UserProfileFactory(user__first_name="Somchai", role=UserProfile.TEACHER)
        assert str(profile) == "Somchai (teacher)"

    def test_role_helpers(self):
        assert UserProfileFactory(role=UserProfile.ADMIN).is_admin
        assert UserProfileFactory(role=UserProfile.TEACHER).is_teacher
        assert not UserProfileFactory().is_admin


@pytest.mark.django_db
class TestBooking:
    """Test Booking model functionality."""

    def test_default_status_is_pending(self):
        booking = BookingFactory()
        assert booking.status == BookingStatus.PENDING
        assert not booking.occupies_slot()

    def test_approved_booking_occupies_slot(self):
        booking = BookingFactory(status=BookingStatus.APPROVED)
        assert booking.is_approved
        assert booking.occupies_slot()

    def test_default_ordering_by_date_then_slot_time(self):
        room = LabFactory()
        late = TimeSlotFactory(time='13:00-13:50')
        early = TimeSlotFactory(time='08:30-09:20')
        third = BookingFactory(room=room, time_slot=late, date=date(2024, 6, 11))
        second = BookingFactory(room=room, time_slot=late, date=date(2024, 6, 10))
        first = BookingFactory(room=room, time_slot=early, date=date(2024, 6, 10))

        assert list(Booking.objects.all()) == [first, second, third]

    def test_save_rejects_unknown_status(self):
        with pytest.raises(ValidationError):
            BookingFactory(status='cancelled')

    def test_second_approved_booking_for_slot_is_rejected(self):
        first = BookingFactory(status=BookingStatus.APPROVED)
        with pytest.raises((ValidationError, IntegrityError)):
            with transaction.atomic():
                BookingFactory(
                    room=first.room, time_slot=first.time_slot, date=first.date,
                    status=BookingStatus.APPROVED,
                )

    def test_pending_duplicates_are_allowed(self):
        first = BookingFactory()
        BookingFactory(room=first.room, time_slot=first.time_slot, date=first.date)
        assert Booking.objects.for_slot(first.room_id, first.date, first.time_slot_id).count() == 2


@pytest.mark.django_db
class TestReferentialIntegrity:
    """Referenced rows cannot be deleted."""

    def test_lab_with_booking_is_protected(self):
        booking = BookingFactory()
        with pytest.raises(ProtectedError):
            booking.room.delete()

    def test_lab_with_schedule_is_protected(self):
        schedule = ScheduleFactory()
        with pytest.raises(ProtectedError):
            schedule.lab.delete()

    def test_teacher_survives_user_deletion(self):
        teacher = TeacherFactory(user=UserFactory())
        teacher.user.delete()
        teacher.refresh_from_db()
        assert teacher.user is None
