# booking/views/bookings.py
"""
Booking endpoints: requests, edits, approval decisions and slot occupancy.

This file is part of the School Lab Booking.
Copyright (C) 2025 School Lab Booking Contributors

This software is licensed under the GNU General Public License v3.0 (GPL-3.0).
For license terms, see LICENSE file.
"""

from rest_framework import mixins, permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from booking import workflow
from booking.models import BookingStatus
from booking.permissions import IsAdminOrBookingOwner, IsAdminOrTeacher, IsAdminRole
from booking.serializers import (
    AdminBookingSerializer, BookingCreateSerializer, BookingSerializer,
    BookingUpdateSerializer,
)
from .base import QueryIdMixin, int_param

EDIT_ACTIONS = ['update', 'partial_update', 'update_by_query', 'partial_update_by_query']
DELETE_ACTIONS = ['destroy', 'destroy_by_query']


class BaseBookingViewSet(QueryIdMixin,
                         mixins.ListModelMixin,
                         mixins.RetrieveModelMixin,
                         viewsets.GenericViewSet):
    """Listing, editing and deleting bookings through the workflow engine."""
    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        """Filter bookings by the query parameters."""
        params = self.request.query_params
        return workflow.list_bookings(
            status=params.get('status'),
            teacher_id=int_param(params, 'teacherId'),
            room_id=int_param(params, 'roomId'),
            start=params.get('start'),
            end=params.get('end'),
        )

    def update(self, request, *args, **kwargs):
        booking = self.get_object()
        serializer = BookingUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        booking = workflow.update_booking(booking.pk, serializer.validated_data, request.user)
        return Response(self.get_serializer(booking).data)

    def partial_update(self, request, *args, **kwargs):
        return self.update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        booking = self.get_object()
        workflow.delete_booking(booking.pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


class BookingViewSet(BaseBookingViewSet):
    """
    Lab bookings.

    Anyone signed in may list bookings; admins and teachers may request one;
    only admins may edit; admins and the booking's teacher may delete.
    """

    def get_permissions(self):
        """Different permissions for different actions."""
        if self.action == 'occupancy':
            return [permissions.AllowAny()]
        if self.action == 'create':
            return [IsAdminOrTeacher()]
        if self.action in EDIT_ACTIONS:
            return [IsAdminRole()]
        if self.action in DELETE_ACTIONS:
            return [permissions.IsAuthenticated(), IsAdminOrBookingOwner()]
        return super().get_permissions()

    def create(self, request, *args, **kwargs):
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        booking = workflow.create_booking(
            teacher=data['teacherId'],
            grade=data['gradeId'],
            room=data['roomId'],
            time_slot=data['timeSlotId'],
            date=data['date'],
            requested_by=request.user,
        )
        return Response(self.get_serializer(booking).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['get'])
    def occupancy(self, request):
        """Report whether an approved booking holds a room, date and time slot."""
        params = request.query_params
        room_id = int_param(params, 'roomId', required=True)
        time_slot_id = int_param(params, 'timeSlotId', required=True)
        booking_date = workflow.coerce_date(params.get('date'))
        occupied = workflow.is_slot_occupied(room_id, booking_date, time_slot_id)
        return Response({
            'roomId': room_id,
            'date': booking_date.isoformat(),
            'timeSlotId': time_slot_id,
            'occupied': occupied,
        })


class AdminBookingViewSet(BaseBookingViewSet):
    """Administrator view of every booking, with approve and reject."""
    serializer_class = AdminBookingSerializer
    permission_classes = [IsAdminRole]

    def _decide(self, request, new_status):
        booking = self.get_object()
        booking = workflow.transition_status(booking.pk, new_status, request.user)
        return Response(self.get_serializer(booking).data)

    @action(detail=True, methods=['post', 'put'])
    def approve(self, request, pk=None):
        """Approve a booking."""
        return self._decide(request, BookingStatus.APPROVED)

    @action(detail=True, methods=['post', 'put'])
    def reject(self, request, pk=None):
        """Reject a booking."""
        return self._decide(request, BookingStatus.REJECTED)
