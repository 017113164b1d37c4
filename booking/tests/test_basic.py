"""Basic test to validate Django setup."""
from io import StringIO

from django.core.management import call_command
from django.test import TestCase
from django.contrib.auth.models import User
from booking.models import ClassGroup, Lab, Schedule, Teacher, TimeSlot, UserProfile


class TestBasicSetup(TestCase):
    """Test basic Django setup and model creation."""

    def test_user_creation(self):
        """Test creating a basic user."""
        user = User.objects.create_user(
            username='testuser@example.com',
            email='testuser@example.com',
            password='testpass123'
        )
        self.assertEqual(user.username, 'testuser@example.com')
        self.assertEqual(user.email, 'testuser@example.com')

    def test_user_profile_creation(self):
        """Test that user profile is automatically created via signal."""
        user = User.objects.create_user(
            username='testuser2@example.com',
            email='testuser2@example.com',
            password='testpass123',
            first_name='Test User',
        )

        self.assertTrue(hasattr(user, 'userprofile'))
        profile = user.userprofile
        profile.role = UserProfile.TEACHER
        profile.save()

        self.assertEqual(str(profile), "Test User (teacher)")

    def test_api_root_is_routed(self):
        response = self.client.get('/api/')
        self.assertIn(response.status_code, (200, 403))


class TestSeedDemoData(TestCase):
    """The demo data command is idempotent."""

    def test_seed_twice(self):
        call_command('seed_demo_data', stdout=StringIO())
        call_command('seed_demo_data', stdout=StringIO())

        admin = User.objects.get(username='admin@example.com')
        self.assertEqual(admin.userprofile.role, UserProfile.ADMIN)
        self.assertTrue(admin.check_password('admin1234'))
        teacher = Teacher.objects.get(user__username='teacher@example.com')
        self.assertEqual(teacher.user.userprofile.role, UserProfile.TEACHER)

        self.assertEqual(ClassGroup.objects.count(), 12)
        self.assertEqual(Lab.objects.count(), 5)
        self.assertEqual(TimeSlot.objects.count(), 7)
        self.assertEqual(Schedule.objects.count(), 5)

    def test_skip_schedules(self):
        call_command('seed_demo_data', '--skip-schedules', stdout=StringIO())
        self.assertEqual(Schedule.objects.count(), 0)
