# booking/views/reference.py
"""
Reference data endpoints: teachers, grades, class groups, labs, time slots,
students and weekly schedules.

This file is part of the School Lab Booking.
Copyright (C) 2025 School Lab Booking Contributors

This software is licensed under the GNU General Public License v3.0 (GPL-3.0).
For license terms, see LICENSE file.
"""

import logging

from django.db.models import ProtectedError
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from booking import workflow
from booking.exceptions import ConflictError, ValidationError
from booking.models import ClassGroup, Grade, Lab, Schedule, Student, Teacher, TimeSlot
from booking.permissions import (
    IsAdminOrReadOnly, IsAdminOrTeacher, IsAdminRole, IsTeacherRole, get_teacher_id,
)
from booking.serializers import (
    ClassGroupSerializer, GradeSerializer, LabSerializer, ScheduleSerializer,
    StudentCreateSerializer, StudentSerializer, TeacherSerializer, TimeSlotSerializer,
)
from booking.services import accounts
from .base import QueryIdMixin, int_param

logger = logging.getLogger(__name__)


class ReferenceViewSet(QueryIdMixin, viewsets.ModelViewSet):
    """Read for everyone, write for administrators; referenced rows cannot be deleted."""
    permission_classes = [IsAdminOrReadOnly]

    def perform_create(self, serializer):
        instance = serializer.save()
        logger.info(f"Created {instance._meta.verbose_name} {instance.pk}")

    def perform_destroy(self, instance):
        try:
            instance.delete()
        except ProtectedError as exc:
            referenced_by = sorted({
                str(obj._meta.verbose_name_plural) for obj in exc.protected_objects
            })
            resource = instance._meta.verbose_name
            raise ConflictError(
                f"Cannot delete {resource} '{instance}' because it is referenced by "
                f"{', '.join(referenced_by)}.",
                {'referenced_by': referenced_by},
            )
        logger.info(f"Deleted {instance._meta.verbose_name} {instance.pk}")


class TeacherViewSet(ReferenceViewSet):
    queryset = Teacher.objects.all()
    serializer_class = TeacherSerializer

    def get_permissions(self):
        if self.action == 'schedule':
            return [IsTeacherRole()]
        return super().get_permissions()

    @action(detail=False, methods=['get'])
    def schedule(self, request):
        """Weekly schedule of the signed-in teacher."""
        teacher_id = get_teacher_id(request.user)
        schedules = Schedule.objects.filter(teacher_id=teacher_id).select_related(
            'teacher', 'lab', 'class_group'
        )
        return Response(ScheduleSerializer(schedules, many=True).data)


class GradeViewSet(ReferenceViewSet):
    queryset = Grade.objects.all()
    serializer_class = GradeSerializer


class ClassGroupViewSet(ReferenceViewSet):
    queryset = ClassGroup.objects.all()
    serializer_class = ClassGroupSerializer


class LabViewSet(ReferenceViewSet):
    """Labs (rooms) with their weekly occupancy grid."""
    queryset = Lab.objects.all()
    serializer_class = LabSerializer

    @action(detail=True, methods=['get'])
    def grid(self, request, pk=None):
        """Approved bookings of this lab, one row per time slot and one column per day."""
        lab = self.get_object()
        days = int_param(request.query_params, 'days')
        if days is not None and not 1 <= days <= 31:
            raise ValidationError('days must be between 1 and 31.', {'days': days})
        return Response(workflow.weekly_grid(lab, start=request.query_params.get('start'), days=days))


class TimeSlotViewSet(ReferenceViewSet):
    queryset = TimeSlot.objects.all()
    serializer_class = TimeSlotSerializer


class StudentViewSet(QueryIdMixin, viewsets.ModelViewSet):
    """Students and their logins; administrators only."""
    queryset = Student.objects.select_related('user', 'class_group')
    serializer_class = StudentSerializer
    permission_classes = [IsAdminRole]

    def get_queryset(self):
        queryset = super().get_queryset()
        class_group_id = int_param(self.request.query_params, 'classGroupId')
        if class_group_id:
            queryset = queryset.filter(class_group_id=class_group_id)
        return queryset

    def create(self, request, *args, **kwargs):
        serializer = StudentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        student = accounts.create_student(
            name=data['name'],
            class_group=data.get('classGroupId'),
            email=data.get('email'),
            password=data.get('password'),
        )
        return Response(self.get_serializer(student).data, status=status.HTTP_201_CREATED)

    def perform_update(self, serializer):
        serializer.instance = accounts.update_student(serializer.instance, serializer.validated_data)

    def perform_destroy(self, instance):
        accounts.delete_student(instance)


class ScheduleViewSet(QueryIdMixin, viewsets.ModelViewSet):
    """Weekly class schedules; admins and teachers may edit."""
    queryset = Schedule.objects.select_related('teacher', 'lab', 'class_group')
    serializer_class = ScheduleSerializer

    def get_permissions(self):
        if self.action in ['list', 'retrieve']:
            return [permissions.IsAuthenticated()]
        return [IsAdminOrTeacher()]

    def get_queryset(self):
        """Filter schedules by teacher, lab or class group."""
        queryset = super().get_queryset()
        params = self.request.query_params
        for param, field in (('teacherId', 'teacher_id'), ('labId', 'lab_id'),
                             ('classGroupId', 'class_group_id')):
            value = int_param(params, param)
            if value:
                queryset = queryset.filter(**{field: value})
        return queryset
