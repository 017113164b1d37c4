"""Test cases for dashboard statistics and booking reports."""
import csv
import io
import pytest
from datetime import date
from django.urls import reverse
from rest_framework.test import APIClient
from rest_framework import status

from booking.models import BookingStatus
from booking.tests.factories import (
    AdminProfileFactory, TeacherProfileFactory, UserProfileFactory, TeacherFactory,
    LabFactory, ScheduleFactory, BookingFactory,
)


@pytest.mark.django_db
class TestAdminStats:

    def test_counts(self):
        client = APIClient()
        client.force_authenticate(user=AdminProfileFactory().user)
        ScheduleFactory()
        BookingFactory.create_batch(2)
        BookingFactory(status=BookingStatus.APPROVED)

        response = client.get(reverse('api:admin-stats'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['schedules'] == 1
        assert response.data['pendingBookings'] == 2
        assert response.data['bookingsByStatus'] == {'pending': 2, 'approved': 1, 'rejected': 0}
        assert response.data['labs'] == 4

    def test_admin_only(self):
        client = APIClient()
        client.force_authenticate(user=TeacherProfileFactory().user)
        assert client.get(reverse('api:admin-stats')).status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestBookingReport:

    def setup_method(self):
        self.client = APIClient()
        self.client.force_authenticate(user=AdminProfileFactory().user)

    def test_filter_by_teacher_and_range(self):
        teacher = TeacherFactory()
        keep = BookingFactory(teacher=teacher, date=date(2024, 6, 10))
        BookingFactory(teacher=teacher, date=date(2024, 8, 1))
        BookingFactory(date=date(2024, 6, 10))

        response = self.client.get(reverse('api:booking-report'), {
            'teacherId': teacher.pk, 'start': '2024-06-01', 'end': '2024-06-30',
        })

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1
        assert response.data['results'][0]['id'] == keep.pk

    def test_csv_export(self):
        room = LabFactory(name='Lab A')
        BookingFactory(room=room, date=date(2024, 6, 10), status=BookingStatus.APPROVED)

        response = self.client.get(reverse('api:booking-report'), {'export': 'csv'})

        assert response.status_code == status.HTTP_200_OK
        assert response['Content-Type'] == 'text/csv'
        rows = list(csv.reader(io.StringIO(response.content.decode())))
        assert rows[0][0] == 'ID'
        assert rows[1][1] == '2024-06-10'
        assert rows[1][4] == 'Lab A'
        assert rows[1][7] == 'Approved'

    def test_teacher_sees_only_own_bookings(self):
        user = TeacherProfileFactory().user
        teacher = TeacherFactory(user=user)
        own = BookingFactory(teacher=teacher)
        other = BookingFactory()
        client = APIClient()
        client.force_authenticate(user=user)

        response = client.get(reverse('api:booking-report'), {'teacherId': other.teacher_id})

        assert [item['id'] for item in response.data['results']] == [own.pk]

    def test_students_forbidden(self):
        client = APIClient()
        client.force_authenticate(user=UserProfileFactory().user)
        assert client.get(reverse('api:booking-report')).status_code == status.HTTP_403_FORBIDDEN

    def test_bad_date_filter(self):
        response = self.client.get(reverse('api:booking-report'), {'start': 'yesterday'})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
