# booking/serializers.py
"""
DRF serializers for the School Lab Booking.

Field names follow the camelCase keys used by the web client
(``teacherId``, ``timeSlotId``, ``roomNumber`` ...).

This file is part of the School Lab Booking.
Copyright (C) 2025 School Lab Booking Contributors

This software is licensed under the GNU General Public License v3.0 (GPL-3.0).
For license terms, see LICENSE file.
"""

from rest_framework import serializers
from django.contrib.auth.models import User

from .exceptions import ConflictError
from .models import (
    UserProfile, Teacher, Grade, ClassGroup, Lab, TimeSlot, Student, Schedule,
    Booking, BookingStatus,
)
from .permissions import get_role, get_teacher_id


class ConflictCheckedSerializer(serializers.ModelSerializer):
    """
    Model serializer that reports duplicate values of unique fields as conflicts.

    The automatic ``UniqueValidator`` would answer 400; a duplicate name is a
    409 in this API, so the check is done here instead.
    """
    conflict_fields = ('name',)

    def get_extra_kwargs(self):
        extra_kwargs = super().get_extra_kwargs()
        for field_name in self.conflict_fields:
            kwargs = extra_kwargs.setdefault(field_name, {})
            kwargs['validators'] = []
        return extra_kwargs

    def validate(self, attrs):
        model = self.Meta.model
        for field_name in self.conflict_fields:
            if field_name not in attrs:
                continue
            value = attrs[field_name]
            queryset = model.objects.filter(**{field_name: value})
            if self.instance is not None:
                queryset = queryset.exclude(pk=self.instance.pk)
            if queryset.exists():
                resource = model._meta.verbose_name.title()
                raise ConflictError(
                    f"{resource} with {field_name} '{value}' already exists",
                    {'resource': resource, 'field': field_name, 'value': value},
                )
        return super().validate(attrs)


class TeacherSerializer(ConflictCheckedSerializer):
    userId = serializers.IntegerField(source='user_id', read_only=True)

    class Meta:
        model = Teacher
        fields = ['id', 'name', 'userId']
        read_only_fields = ['id']


class GradeSerializer(ConflictCheckedSerializer):
    class Meta:
        model = Grade
        fields = ['id', 'name']
        read_only_fields = ['id']


class ClassGroupSerializer(ConflictCheckedSerializer):
    class Meta:
        model = ClassGroup
        fields = ['id', 'name']
        read_only_fields = ['id']


class LabSerializer(ConflictCheckedSerializer):
    roomNumber = serializers.CharField(
        source='room_number', required=False, allow_null=True, allow_blank=True, max_length=50
    )

    class Meta:
        model = Lab
        fields = ['id', 'name', 'roomNumber', 'capacity']
        read_only_fields = ['id']


class TimeSlotSerializer(ConflictCheckedSerializer):
    conflict_fields = ('name', 'time')

    class Meta:
        model = TimeSlot
        fields = ['id', 'name', 'time']
        read_only_fields = ['id']


class StudentSerializer(serializers.ModelSerializer):
    userId = serializers.IntegerField(source='user_id', read_only=True)
    email = serializers.EmailField(source='user.email', read_only=True)
    classGroupId = serializers.PrimaryKeyRelatedField(
        source='class_group', queryset=ClassGroup.objects.all(),
        required=False, allow_null=True,
    )
    classGroup = ClassGroupSerializer(source='class_group', read_only=True)

    class Meta:
        model = Student
        fields = ['id', 'name', 'userId', 'email', 'classGroupId', 'classGroup']
        read_only_fields = ['id']
        # Mirrored into User.first_name
        extra_kwargs = {'name': {'max_length': 150}}


class StudentCreateSerializer(serializers.Serializer):
    """Request body for creating a student together with their login."""
    name = serializers.CharField(max_length=150)
    email = serializers.EmailField(required=False, allow_blank=True)
    password = serializers.CharField(required=False, allow_blank=True, write_only=True, min_length=6)
    classGroupId = serializers.PrimaryKeyRelatedField(
        queryset=ClassGroup.objects.all(), required=False, allow_null=True,
    )


class ScheduleSerializer(serializers.ModelSerializer):
    teacherId = serializers.PrimaryKeyRelatedField(source='teacher', queryset=Teacher.objects.all())
    labId = serializers.PrimaryKeyRelatedField(source='lab', queryset=Lab.objects.all())
    classGroupId = serializers.PrimaryKeyRelatedField(
        source='class_group', queryset=ClassGroup.objects.all()
    )
    teacher = TeacherSerializer(read_only=True)
    lab = LabSerializer(read_only=True)
    classGroup = ClassGroupSerializer(source='class_group', read_only=True)

    class Meta:
        model = Schedule
        fields = [
            'id', 'subject', 'time', 'teacherId', 'labId', 'classGroupId',
            'teacher', 'lab', 'classGroup',
        ]
        read_only_fields = ['id']


class BookingSerializer(serializers.ModelSerializer):
    """Booking as returned to clients, with its relations attached."""
    teacherId = serializers.IntegerField(source='teacher_id', read_only=True)
    gradeId = serializers.IntegerField(source='grade_id', read_only=True)
    roomId = serializers.IntegerField(source='room_id', read_only=True)
    timeSlotId = serializers.IntegerField(source='time_slot_id', read_only=True)
    teacher = TeacherSerializer(read_only=True)
    grade = GradeSerializer(read_only=True)
    room = LabSerializer(read_only=True)
    timeSlot = TimeSlotSerializer(source='time_slot', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Booking
        fields = [
            'id', 'teacherId', 'gradeId', 'roomId', 'timeSlotId', 'date', 'status',
            'teacher', 'grade', 'room', 'timeSlot', 'createdAt', 'updatedAt',
        ]
        read_only_fields = fields


class AdminBookingSerializer(BookingSerializer):
    """Booking with the request and decision audit fields for administrators."""
    requestedBy = serializers.SerializerMethodField()
    decidedBy = serializers.SerializerMethodField()
    decidedAt = serializers.DateTimeField(source='decided_at', read_only=True)

    class Meta(BookingSerializer.Meta):
        fields = BookingSerializer.Meta.fields + ['requestedBy', 'decidedBy', 'decidedAt']
        read_only_fields = fields

    def _user_summary(self, user):
        if user is None:
            return None
        return {'id': user.pk, 'name': user.get_full_name(), 'email': user.email}

    def get_requestedBy(self, obj):
        return self._user_summary(obj.requested_by)

    def get_decidedBy(self, obj):
        return self._user_summary(obj.decided_by)


class BookingCreateSerializer(serializers.Serializer):
    """Request body for a new booking."""
    teacherId = serializers.PrimaryKeyRelatedField(queryset=Teacher.objects.all())
    gradeId = serializers.PrimaryKeyRelatedField(queryset=Grade.objects.all())
    roomId = serializers.PrimaryKeyRelatedField(queryset=Lab.objects.all())
    timeSlotId = serializers.PrimaryKeyRelatedField(queryset=TimeSlot.objects.all())
    date = serializers.DateField(input_formats=['%Y-%m-%d'])


class BookingUpdateSerializer(serializers.Serializer):
    """Request body for editing a booking; every field is optional."""
    status = serializers.ChoiceField(choices=BookingStatus.choices, required=False)
    teacherId = serializers.PrimaryKeyRelatedField(
        source='teacher', queryset=Teacher.objects.all(), required=False
    )
    gradeId = serializers.PrimaryKeyRelatedField(
        source='grade', queryset=Grade.objects.all(), required=False
    )
    roomId = serializers.PrimaryKeyRelatedField(
        source='room', queryset=Lab.objects.all(), required=False
    )
    timeSlotId = serializers.PrimaryKeyRelatedField(
        source='time_slot', queryset=TimeSlot.objects.all(), required=False
    )
    date = serializers.DateField(input_formats=['%Y-%m-%d'], required=False)


class UserSerializer(serializers.ModelSerializer):
    """Login account with its role and linked teacher."""
    name = serializers.CharField(source='first_name', read_only=True)
    role = serializers.SerializerMethodField()
    teacherId = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'name', 'email', 'role', 'teacherId']
        read_only_fields = fields

    def get_role(self, obj):
        return get_role(obj)

    def get_teacherId(self, obj):
        return get_teacher_id(obj)


class UserRoleSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=UserProfile.ROLE_CHOICES)


class LoginSerializer(serializers.Serializer):
    email = serializers.CharField()
    password = serializers.CharField(trim_whitespace=False, write_only=True)


class AccountSerializer(serializers.Serializer):
    """Name, email and password of a new login account."""
    name = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(min_length=6, trim_whitespace=False, write_only=True)


class RegisterSerializer(AccountSerializer):
    role = serializers.ChoiceField(choices=[UserProfile.TEACHER, UserProfile.STUDENT])
