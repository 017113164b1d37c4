# booking/admin.py
"""
Django admin configuration for the School Lab Booking.

This file is part of the School Lab Booking.
Copyright (C) 2025 School Lab Booking Contributors

This software is licensed under the GNU General Public License v3.0 (GPL-3.0).
For license terms, see LICENSE file.
"""

import csv

from django.contrib import admin, messages
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.models import User
from django.http import HttpResponse

from . import workflow
from .exceptions import BookingAppError
from .models import (
    UserProfile, Teacher, Grade, ClassGroup, Lab, TimeSlot, Student, Schedule,
    Booking, BookingStatus,
)


class UserProfileInline(admin.StackedInline):
    model = UserProfile
    can_delete = False
    verbose_name_plural = 'Profile'


class UserAdmin(BaseUserAdmin):
    inlines = (UserProfileInline,)
    list_display = ('username', 'email', 'first_name', 'get_role', 'is_staff')

    def get_role(self, obj):
        try:
            return obj.userprofile.get_role_display()
        except UserProfile.DoesNotExist:
            return '-'
    get_role.short_description = 'Role'


admin.site.unregister(User)
admin.site.register(User, UserAdmin)


@admin.register(Teacher)
class TeacherAdmin(admin.ModelAdmin):
    list_display = ('name', 'user')
    search_fields = ('name', 'user__email')
    raw_id_fields = ('user',)


@admin.register(Grade)
class GradeAdmin(admin.ModelAdmin):
    list_display = ('name',)
    search_fields = ('name',)


@admin.register(ClassGroup)
class ClassGroupAdmin(admin.ModelAdmin):
    list_display = ('name',)
    search_fields = ('name',)


@admin.register(Lab)
class LabAdmin(admin.ModelAdmin):
    list_display = ('name', 'room_number', 'capacity')
    search_fields = ('name', 'room_number')


@admin.register(TimeSlot)
class TimeSlotAdmin(admin.ModelAdmin):
    list_display = ('name', 'time')
    ordering = ('time',)


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ('name', 'class_group', 'user')
    list_filter = ('class_group',)
    search_fields = ('name', 'user__email')
    raw_id_fields = ('user',)


@admin.register(Schedule)
class ScheduleAdmin(admin.ModelAdmin):
    list_display = ('subject', 'time', 'teacher', 'lab', 'class_group')
    list_filter = ('lab', 'teacher', 'class_group')
    search_fields = ('subject',)


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ('date', 'time_slot', 'room', 'teacher', 'grade', 'status', 'decided_by')
    list_filter = ('status', 'room', 'time_slot')
    search_fields = ('teacher__name', 'room__name', 'grade__name')
    # Status only changes through the approve/reject actions
    readonly_fields = ('status', 'requested_by', 'decided_by', 'decided_at', 'created_at', 'updated_at')
    date_hierarchy = 'date'

    fieldsets = (
        ('Basic Information', {
            'fields': ('teacher', 'grade', 'room', 'time_slot', 'date', 'status')
        }),
        ('Approval', {
            'fields': ('requested_by', 'decided_by', 'decided_at'),
            'classes': ('collapse',)
        }),
        ('System Fields', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        })
    )

    actions = ['approve_selected', 'reject_selected', 'export_bookings_csv']

    def _decide(self, request, queryset, new_status):
        count = 0
        for booking in queryset:
            try:
                workflow.transition_status(booking.pk, new_status, request.user)
                count += 1
            except BookingAppError as exc:
                self.message_user(request, f'Booking {booking.pk}: {exc.message}', level=messages.WARNING)
        return count

    def approve_selected(self, request, queryset):
        """Approve selected bookings through the workflow engine."""
        count = self._decide(request, queryset, BookingStatus.APPROVED)
        self.message_user(request, f'Approved {count} bookings.')
    approve_selected.short_description = 'Approve selected bookings'

    def reject_selected(self, request, queryset):
        """Reject selected bookings."""
        count = self._decide(request, queryset, BookingStatus.REJECTED)
        self.message_user(request, f'Rejected {count} bookings.')
    reject_selected.short_description = 'Reject selected bookings'

    def export_bookings_csv(self, request, queryset):
        """Export selected bookings to CSV format."""
        response = HttpResponse(content_type='text/csv')
        response['Content-Disposition'] = 'attachment; filename="bookings_export.csv"'

        writer = csv.writer(response)
        writer.writerow(['date', 'time_slot', 'time', 'room', 'teacher', 'grade', 'status'])
        for booking in queryset.select_related('teacher', 'grade', 'room', 'time_slot'):
            writer.writerow([
                booking.date.isoformat(),
                booking.time_slot.name,
                booking.time_slot.time,
                booking.room.name,
                booking.teacher.name,
                booking.grade.name,
                booking.status,
            ])
        return response
    export_bookings_csv.short_description = 'Export selected bookings as CSV'
