# booking/views/reports.py
"""
Dashboard statistics and booking reports.

This file is part of the School Lab Booking.
Copyright (C) 2025 School Lab Booking Contributors

This software is licensed under the GNU General Public License v3.0 (GPL-3.0).
For license terms, see LICENSE file.
"""

import csv

from django.db.models import Count
from django.http import HttpResponse
from django.utils import timezone
from rest_framework.response import Response
from rest_framework.views import APIView

from booking import workflow
from booking.models import Booking, BookingStatus, ClassGroup, Lab, Schedule, Teacher, UserProfile
from booking.permissions import IsAdminOrTeacher, IsAdminRole, get_role, get_teacher_id
from booking.serializers import BookingSerializer
from .base import int_param


class AdminStatsView(APIView):
    """Totals shown on the administrator dashboard."""
    permission_classes = [IsAdminRole]

    def get(self, request):
        by_status = {choice: 0 for choice in BookingStatus.values}
        for row in Booking.objects.values('status').annotate(total=Count('id')):
            by_status[row['status']] = row['total']

        return Response({
            'schedules': Schedule.objects.count(),
            'teachers': Teacher.objects.count(),
            'classGroups': ClassGroup.objects.count(),
            'labs': Lab.objects.count(),
            'pendingBookings': by_status[BookingStatus.PENDING],
            'bookingsByStatus': by_status,
        })


class BookingReportView(APIView):
    """
    Bookings filtered by teacher, status and date range.

    Teachers only ever see their own bookings. ``?export=csv`` returns the
    same rows as a CSV download.
    """
    permission_classes = [IsAdminOrTeacher]

    def get(self, request):
        params = request.query_params
        teacher_id = int_param(params, 'teacherId')
        if get_role(request.user) == UserProfile.TEACHER:
            teacher_id = get_teacher_id(request.user) or -1

        bookings = workflow.list_bookings(
            status=params.get('status'),
            teacher_id=teacher_id,
            start=params.get('start'),
            end=params.get('end'),
        )

        if params.get('export') == 'csv':
            return self._csv_response(bookings)
        return Response({
            'count': len(bookings),
            'results': BookingSerializer(bookings, many=True).data,
        })

    def _csv_response(self, bookings):
        filename = f"bookings_{timezone.localdate():%Y%m%d}.csv"
        response = HttpResponse(content_type='text/csv')
        response['Content-Disposition'] = f'attachment; filename="{filename}"'

        writer = csv.writer(response)
        writer.writerow(['ID', 'Date', 'Time Slot', 'Time', 'Room', 'Teacher', 'Grade', 'Status', 'Created'])
        for booking in bookings:
            writer.writerow([
                booking.pk,
                booking.date.isoformat(),
                booking.time_slot.name,
                booking.time_slot.time,
                booking.room.name,
                booking.teacher.name,
                booking.grade.name,
                booking.get_status_display(),
                booking.created_at.strftime('%Y-%m-%d %H:%M'),
            ])
        return response
