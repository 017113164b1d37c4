# booking/permissions.py
"""
Role-based permission classes for the booking API.

This file is part of the School Lab Booking.
Copyright (C) 2025 School Lab Booking Contributors

This software is licensed under the GNU General Public License v3.0 (GPL-3.0).
For license terms, see LICENSE file.
"""

from rest_framework import permissions

from .models import UserProfile


def get_role(user):
    """Return the caller's role, or None for anonymous users and users without a profile."""
    if not user or not user.is_authenticated:
        return None
    try:
        return user.userprofile.role
    except UserProfile.DoesNotExist:
        return None


def get_teacher_id(user):
    """Return the id of the Teacher record linked to a user, if any."""
    if not user or not user.is_authenticated:
        return None
    teacher = getattr(user, 'teacher', None)
    return teacher.pk if teacher is not None else None


class IsAdminRole(permissions.BasePermission):
    """Admins only."""
    message = 'Administrator role required.'

    def has_permission(self, request, view):
        return get_role(request.user) == UserProfile.ADMIN


class IsAdminOrTeacher(permissions.BasePermission):
    """Admins and teachers."""
    message = 'Administrator or teacher role required.'

    def has_permission(self, request, view):
        return get_role(request.user) in (UserProfile.ADMIN, UserProfile.TEACHER)


class IsTeacherRole(permissions.BasePermission):
    message = 'Teacher role required.'

    def has_permission(self, request, view):
        return get_role(request.user) == UserProfile.TEACHER


class IsAdminOrReadOnly(permissions.BasePermission):
    """Anyone may read; only admins may write."""
    message = 'Administrator role required.'

    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return True
        return get_role(request.user) == UserProfile.ADMIN


class IsAdminOrBookingOwner(permissions.BasePermission):
    """Admins, or the teacher the booking was made for."""
    message = 'Only administrators or the booking teacher may do this.'

    def has_object_permission(self, request, view, obj):
        if get_role(request.user) == UserProfile.ADMIN:
            return True
        teacher_id = get_teacher_id(request.user)
        return teacher_id is not None and obj.teacher_id == teacher_id
