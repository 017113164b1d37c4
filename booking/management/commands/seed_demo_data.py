"""
Management command to load demo accounts and reference data.

Creates an administrator and a teacher login, class groups, grades, labs,
time slots and a few weekly schedules. Running it again updates the demo
logins and leaves existing rows alone.

Usage:
    python manage.py seed_demo_data
    python manage.py seed_demo_data --skip-schedules
"""

from django.contrib.auth.models import User
from django.core.management.base import BaseCommand
from django.db import transaction

from booking.models import ClassGroup, Grade, Lab, Schedule, Teacher, TimeSlot, UserProfile


DEMO_ACCOUNTS = [
    # email, password, name, role
    ('admin@example.com', 'admin1234', 'System Administrator', UserProfile.ADMIN),
    ('teacher@example.com', 'teacher1234', 'Demo Teacher', UserProfile.TEACHER),
]

CLASS_GROUPS = [f'M.{year}/{room}' for year in range(1, 7) for room in (1, 2)]

GRADES = [f'M.{year}' for year in range(1, 7)]

LABS = [
    ('Computer Lab 1', 'B101', 40),
    ('Science Lab 1', 'B201', 36),
    ('Language Lab', 'C105', 30),
    ('Music Lab', 'D001', 25),
    ('Mathematics Lab', 'C210', 35),
]

TIME_SLOTS = [
    ('Period 1', '08:30-09:20'),
    ('Period 2', '09:20-10:10'),
    ('Period 3', '10:20-11:10'),
    ('Period 4', '11:10-12:00'),
    ('Period 5', '13:00-13:50'),
    ('Period 6', '13:50-14:40'),
    ('Period 7', '14:50-15:40'),
]

SCHEDULES = [
    # subject, time, lab index, class group index
    ('Computing Science', 'Mon 09:00-10:00', 0, 0),
    ('Biology', 'Tue 10:30-11:30', 1, 1),
    ('Physics', 'Wed 13:00-14:00', 1, 2),
    ('Chemistry', 'Thu 14:30-15:30', 1, 3),
    ('Thai Language', 'Fri 10:00-11:00', 2, 4),
]


class Command(BaseCommand):
    help = 'Load demo logins, class groups, grades, labs, time slots and schedules'

    def add_arguments(self, parser):
        parser.add_argument(
            '--skip-schedules',
            action='store_true',
            help='Do not create the example weekly schedules',
        )

    def handle(self, *args, **options):
        self.stdout.write('Seeding demo data...')

        with transaction.atomic():
            teacher = self._seed_accounts()
            class_groups = [
                self._get_or_create(ClassGroup, name=name) for name in CLASS_GROUPS
            ]
            for name in GRADES:
                self._get_or_create(Grade, name=name)
            labs = [
                self._get_or_create(Lab, name=name, defaults={'room_number': room, 'capacity': capacity})
                for name, room, capacity in LABS
            ]
            for name, time in TIME_SLOTS:
                self._get_or_create(TimeSlot, name=name, defaults={'time': time})

            if not options['skip_schedules']:
                for subject, time, lab_index, group_index in SCHEDULES:
                    self._get_or_create(
                        Schedule,
                        subject=subject,
                        time=time,
                        teacher=teacher,
                        lab=labs[lab_index],
                        class_group=class_groups[group_index],
                    )

        self.stdout.write(self.style.SUCCESS('Demo data ready.'))

    def _seed_accounts(self):
        teacher = None
        for email, password, name, role in DEMO_ACCOUNTS:
            user, created = User.objects.get_or_create(
                username=email, defaults={'email': email, 'first_name': name}
            )
            user.email = email
            user.first_name = name
            user.is_staff = role == UserProfile.ADMIN
            user.set_password(password)
            user.save()
            UserProfile.objects.update_or_create(user=user, defaults={'role': role})

            if role == UserProfile.TEACHER:
                teacher, _ = Teacher.objects.update_or_create(name=name, defaults={'user': user})

            action = 'Created' if created else 'Updated'
            self.stdout.write(self.style.SUCCESS(f'{action} {role} login {email}'))
        return teacher

    def _get_or_create(self, model, defaults=None, **lookup):
        obj, created = model.objects.get_or_create(defaults=defaults, **lookup)
        if created:
            self.stdout.write(f'  Added {model._meta.verbose_name} {obj}')
        return obj
