"""Test cases for the reference data endpoints."""
import pytest
from django.contrib.auth.models import User
from django.urls import reverse
from rest_framework.test import APIClient
from rest_framework import status

from booking.models import Grade, Lab, Student, TimeSlot
from booking.tests.factories import (
    AdminProfileFactory, TeacherProfileFactory, TeacherFactory, GradeFactory,
    ClassGroupFactory, LabFactory, TimeSlotFactory, StudentFactory, ScheduleFactory,
    BookingFactory,
)


@pytest.mark.django_db
class TestReferenceData:
    """CRUD, uniqueness and referential integrity of the lookup tables."""

    def setup_method(self):
        self.client = APIClient()
        self.client.force_authenticate(user=AdminProfileFactory().user)

    def test_lists_are_public(self):
        LabFactory.create_batch(2)
        anonymous = APIClient()

        for name in ('api:room-list', 'api:lab-list', 'api:grade-list', 'api:teacher-list',
                     'api:time-slot-list', 'api:class-group-list'):
            response = anonymous.get(reverse(name))
            assert response.status_code == status.HTTP_200_OK, name

    def test_labs_ordered_by_name(self):
        LabFactory(name='Science Lab')
        LabFactory(name='Computer Lab')

        response = self.client.get(reverse('api:room-list'))

        assert [lab['name'] for lab in response.data] == ['Computer Lab', 'Science Lab']

    def test_time_slots_ordered_by_time(self):
        TimeSlotFactory(name='Afternoon', time='13:00-13:50')
        TimeSlotFactory(name='Morning', time='08:30-09:20')

        response = self.client.get(reverse('api:time-slot-list'))

        assert [slot['name'] for slot in response.data] == ['Morning', 'Afternoon']

    def test_create_lab(self):
        response = self.client.post(
            reverse('api:room-list'), {'name': 'Lab A', 'roomNumber': 'B101', 'capacity': 40},
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert Lab.objects.get(name='Lab A').room_number == 'B101'

    @pytest.mark.parametrize('route,factory', [
        ('api:teacher-list', TeacherFactory),
        ('api:grade-list', GradeFactory),
        ('api:room-list', LabFactory),
        ('api:class-group-list', ClassGroupFactory),
    ])
    def test_duplicate_name_conflicts(self, route, factory):
        factory(name='Duplicate')

        response = self.client.post(reverse(route), {'name': 'Duplicate'}, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['error'] == 'CONFLICT'

    def test_names_are_case_sensitive(self):
        GradeFactory(name='M.1')
        response = self.client.post(reverse('api:grade-list'), {'name': 'm.1'}, format='json')
        assert response.status_code == status.HTTP_201_CREATED

    def test_duplicate_time_slot_name_conflicts(self):
        TimeSlotFactory(name='Period 1', time='08:30-09:20')

        response = self.client.post(
            reverse('api:time-slot-list'), {'name': 'Period 1', 'time': '09:20-10:10'},
            format='json',
        )

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_rename_collision_conflicts(self):
        GradeFactory(name='M.1')
        other = GradeFactory(name='M.2')

        response = self.client.put(
            reverse('api:grade-detail', args=[other.pk]), {'name': 'M.1'}, format='json'
        )

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_update_by_query_id(self):
        grade = GradeFactory(name='M.1')

        response = self.client.put(
            f"{reverse('api:grade-list')}?id={grade.pk}", {'name': 'M.1 (new)'}, format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        grade.refresh_from_db()
        assert grade.name == 'M.1 (new)'

    def test_update_unknown_id(self):
        response = self.client.put(
            reverse('api:grade-detail', args=[999999]), {'name': 'x'}, format='json'
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert "Grade with id '999999' not found" == response.data['message']

    def test_delete_unreferenced_lab(self):
        lab = LabFactory()
        response = self.client.delete(f"{reverse('api:lab-list')}?id={lab.pk}")
        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Lab.objects.filter(pk=lab.pk).exists()

    def test_delete_referenced_rows_conflict(self):
        booking = BookingFactory()

        for route, pk in (('api:room-detail', booking.room_id),
                          ('api:grade-detail', booking.grade_id),
                          ('api:time-slot-detail', booking.time_slot_id),
                          ('api:teacher-detail', booking.teacher_id)):
            response = self.client.delete(reverse(route, args=[pk]))
            assert response.status_code == status.HTTP_409_CONFLICT, route
            assert 'bookings' in response.data['details']['referenced_by']

        assert Grade.objects.filter(pk=booking.grade_id).exists()
        assert TimeSlot.objects.filter(pk=booking.time_slot_id).exists()

    def test_teacher_cannot_write(self):
        client = APIClient()
        client.force_authenticate(user=TeacherProfileFactory().user)

        response = client.post(reverse('api:grade-list'), {'name': 'M.9'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_anonymous_cannot_write(self):
        response = APIClient().post(reverse('api:grade-list'), {'name': 'M.9'}, format='json')
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_room_grid(self):
        lab = LabFactory()
        TimeSlotFactory.create_batch(2)

        response = APIClient().get(
            reverse('api:room-grid', args=[lab.pk]), {'start': '2024-06-10', 'days': 5}
        )

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['dates']) == 5
        assert len(response.data['slots']) == 2

    def test_room_grid_rejects_bad_days(self):
        lab = LabFactory()
        response = APIClient().get(reverse('api:room-grid', args=[lab.pk]), {'days': 90})
        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestStudents:

    def setup_method(self):
        self.client = APIClient()
        self.client.force_authenticate(user=AdminProfileFactory().user)

    def test_students_are_admin_only(self):
        client = APIClient()
        client.force_authenticate(user=TeacherProfileFactory().user)
        assert client.get(reverse('api:student-list')).status_code == status.HTTP_403_FORBIDDEN

    def test_create_student_with_login(self):
        group = ClassGroupFactory()

        response = self.client.post(reverse('api:student-list'), {
            'name': 'Malee Sukjai', 'email': 'malee@school.test', 'password': 'secret12',
            'classGroupId': group.pk,
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        student = Student.objects.get(pk=response.data['id'])
        assert student.class_group == group
        assert student.user.userprofile.role == 'student'
        assert student.user.check_password('secret12')

    def test_create_student_without_email(self):
        response = self.client.post(reverse('api:student-list'), {'name': 'Niran Dee'}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['email'].endswith('@student.example.com')

    def test_create_student_with_taken_email(self):
        StudentFactory(user__username='taken@school.test', user__email='taken@school.test')

        response = self.client.post(reverse('api:student-list'), {
            'name': 'Someone', 'email': 'taken@school.test',
        }, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert Student.objects.count() == 1

    def test_rename_student_renames_login(self):
        student = StudentFactory(name='Old Name', user__first_name='Old Name')

        response = self.client.patch(
            reverse('api:student-detail', args=[student.pk]), {'name': 'New Name'}, format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['name'] == 'New Name'
        student.refresh_from_db()
        assert student.name == 'New Name'
        assert User.objects.get(pk=student.user_id).first_name == 'New Name'

        account = self.client.get(reverse('api:admin-user-detail', args=[student.user_id]))
        assert account.data['name'] == 'New Name'

    def test_delete_student_removes_login(self):
        student = StudentFactory()
        user_id = student.user_id

        response = self.client.delete(reverse('api:student-detail', args=[student.pk]))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not User.objects.filter(pk=user_id).exists()

    def test_class_group_with_students_is_protected(self):
        student = StudentFactory()
        response = self.client.delete(reverse('api:class-group-detail', args=[student.class_group_id]))
        assert response.status_code == status.HTTP_409_CONFLICT


@pytest.mark.django_db
class TestSchedules:

    def setup_method(self):
        self.user = TeacherProfileFactory().user
        self.teacher = TeacherFactory(user=self.user)
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

    def test_teacher_creates_schedule(self):
        lab = LabFactory()
        group = ClassGroupFactory()

        response = self.client.post(reverse('api:schedule-list'), {
            'subject': 'Physics', 'time': 'Wed 13:00-14:00',
            'teacherId': self.teacher.pk, 'labId': lab.pk, 'classGroupId': group.pk,
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['lab']['id'] == lab.pk

    def test_schedules_require_authentication(self):
        response = APIClient().get(reverse('api:schedule-list'))
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_filter_by_lab(self):
        schedule = ScheduleFactory()
        ScheduleFactory()

        response = self.client.get(reverse('api:schedule-list'), {'labId': schedule.lab_id})

        assert [item['id'] for item in response.data] == [schedule.pk]

    def test_own_schedule(self):
        ScheduleFactory(teacher=self.teacher, time='Tue 10:00')
        ScheduleFactory(teacher=self.teacher, time='Mon 09:00')
        ScheduleFactory()

        response = self.client.get(reverse('api:teacher-schedule'))

        assert response.status_code == status.HTTP_200_OK
        assert [item['time'] for item in response.data] == ['Mon 09:00', 'Tue 10:00']

    def test_own_schedule_is_for_teachers(self):
        client = APIClient()
        client.force_authenticate(user=AdminProfileFactory().user)
        assert client.get(reverse('api:teacher-schedule')).status_code == status.HTTP_403_FORBIDDEN
