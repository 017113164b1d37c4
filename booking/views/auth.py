# booking/views/auth.py
"""
Account endpoints: registration, token sign-in, session lookup and the
administrator's user and teacher-account management.

This file is part of the School Lab Booking.
Copyright (C) 2025 School Lab Booking Contributors

This software is licensed under the GNU General Public License v3.0 (GPL-3.0).
For license terms, see LICENSE file.
"""

from django.contrib.auth.models import User
from rest_framework import mixins, permissions, status, viewsets
from rest_framework.response import Response
from rest_framework.views import APIView

from booking.exceptions import ValidationError
from booking.models import UserProfile
from booking.permissions import IsAdminRole
from booking.serializers import (
    AccountSerializer, LoginSerializer, RegisterSerializer, UserRoleSerializer, UserSerializer,
)
from booking.services import accounts


class RegisterView(APIView):
    """Self-service sign-up for teachers and students."""
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = accounts.register_account(**serializer.validated_data)
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)


class LoginView(APIView):
    """Exchange an email and password for an API token."""
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = accounts.verify_credentials(**serializer.validated_data)
        return Response({
            'token': accounts.issue_token(user),
            'user': UserSerializer(user).data,
        })


class LogoutView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        accounts.revoke_token(request.user)
        return Response({'message': 'Signed out.'})


class SessionView(APIView):
    """The signed-in caller."""
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(UserSerializer(request.user).data)


class AdminUserViewSet(mixins.ListModelMixin,
                       mixins.RetrieveModelMixin,
                       viewsets.GenericViewSet):
    """Login accounts with their roles; administrators may change a role."""
    serializer_class = UserSerializer
    permission_classes = [IsAdminRole]

    def get_queryset(self):
        queryset = User.objects.select_related('userprofile', 'teacher').order_by('first_name', 'id')
        role = self.request.query_params.get('role')
        if role:
            if role not in dict(UserProfile.ROLE_CHOICES):
                raise ValidationError(f"Unknown role '{role}'.", {'role': role})
            queryset = queryset.filter(userprofile__role=role)
        return queryset

    def update(self, request, pk=None):
        serializer = UserRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = accounts.change_role(pk, serializer.validated_data['role'], request.user)
        return Response(UserSerializer(user).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)


class AdminTeacherViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """Teacher logins; creating one also creates its Teacher record."""
    serializer_class = UserSerializer
    permission_classes = [IsAdminRole]

    def get_queryset(self):
        return (
            User.objects.filter(userprofile__role=UserProfile.TEACHER)
            .select_related('userprofile', 'teacher')
            .order_by('first_name', 'id')
        )

    def create(self, request):
        serializer = AccountSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = accounts.create_teacher_account(**serializer.validated_data)
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)
