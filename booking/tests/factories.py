"""Test factories for creating test data."""
import factory
from django.contrib.auth.models import User
from django.utils import timezone
from datetime import timedelta
from booking.models import (
    UserProfile, Teacher, Grade, ClassGroup, Lab, TimeSlot, Student, Schedule, Booking,
)


class UserFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = User

    username = factory.Sequence(lambda n: f"user{n}@test.com")
    email = factory.LazyAttribute(lambda obj: obj.username)
    first_name = factory.Faker('name')
    is_active = True


class UserProfileFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = UserProfile

    user = factory.SubFactory(UserFactory)
    role = UserProfile.STUDENT

    @classmethod
    def _create(cls, model_class, *args, **kwargs):
        """Override creation to handle existing profiles from signals."""
        user = kwargs.get('user')
        if user:
            try:
                profile = model_class.objects.get(user=user)
                for key, value in kwargs.items():
                    if key != 'user':
                        setattr(profile, key, value)
                profile.save()
                user.userprofile = profile
                return profile
            except model_class.DoesNotExist:
                pass

        return super()._create(model_class, *args, **kwargs)


class AdminProfileFactory(UserProfileFactory):
    role = UserProfile.ADMIN


class TeacherProfileFactory(UserProfileFactory):
    role = UserProfile.TEACHER


class TeacherFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Teacher

    name = factory.Sequence(lambda n: f"Teacher {n}")
    user = None


class GradeFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Grade

    name = factory.Sequence(lambda n: f"Grade {n}")


class ClassGroupFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = ClassGroup

    name = factory.Sequence(lambda n: f"M.{n}/1")


class LabFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Lab

    name = factory.Sequence(lambda n: f"Lab {n}")
    room_number = factory.Sequence(lambda n: f"R{n:03d}")
    capacity = 30


class TimeSlotFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = TimeSlot

    name = factory.Sequence(lambda n: f"Period {n}")
    time = factory.Sequence(lambda n: f"{7 + n // 4:02d}:{(n % 4) * 15:02d}")


class StudentFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Student

    name = factory.Faker('name')
    user = factory.SubFactory(UserFactory)
    class_group = factory.SubFactory(ClassGroupFactory)


class ScheduleFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Schedule

    subject = factory.Faker('word')
    time = factory.Sequence(lambda n: f"Mon {8 + n % 8:02d}:00")
    teacher = factory.SubFactory(TeacherFactory)
    lab = factory.SubFactory(LabFactory)
    class_group = factory.SubFactory(ClassGroupFactory)


class BookingFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Booking

    teacher = factory.SubFactory(TeacherFactory)
    grade = factory.SubFactory(GradeFactory)
    room = factory.SubFactory(LabFactory)
    time_slot = factory.SubFactory(TimeSlotFactory)
    date = factory.LazyFunction(lambda: timezone.localdate() + timedelta(days=2))
    status = 'pending'
