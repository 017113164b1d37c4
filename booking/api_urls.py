# booking/api_urls.py
"""
API URL configuration for the booking app.

This file is part of the School Lab Booking.
Copyright (C) 2025 School Lab Booking Contributors

This software is licensed under the GNU General Public License v3.0 (GPL-3.0).
For license terms, see LICENSE file.
"""

from django.urls import path, include
from . import views
from .routers import QueryIdRouter

router = QueryIdRouter()
router.register(r'bookings', views.BookingViewSet, basename='booking')
router.register(r'admin/bookings', views.AdminBookingViewSet, basename='admin-booking')
router.register(r'admin/users', views.AdminUserViewSet, basename='admin-user')
router.register(r'admin/teachers', views.AdminTeacherViewSet, basename='admin-teacher')

# Reference data
router.register(r'teachers', views.TeacherViewSet, basename='teacher')
router.register(r'grades', views.GradeViewSet, basename='grade')
router.register(r'time-slots', views.TimeSlotViewSet, basename='time-slot')
router.register(r'rooms', views.LabViewSet, basename='room')
router.register(r'labs', views.LabViewSet, basename='lab')
router.register(r'class-groups', views.ClassGroupViewSet, basename='class-group')
router.register(r'students', views.StudentViewSet, basename='student')
router.register(r'schedules', views.ScheduleViewSet, basename='schedule')

app_name = 'api'

urlpatterns = [
    path('', include(router.urls)),

    # Accounts
    path('register/', views.RegisterView.as_view(), name='register'),
    path('auth/login/', views.LoginView.as_view(), name='login'),
    path('auth/logout/', views.LogoutView.as_view(), name='logout'),
    path('auth/session/', views.SessionView.as_view(), name='session'),

    # Dashboard and reports
    path('admin/stats/', views.AdminStatsView.as_view(), name='admin-stats'),
    path('reports/bookings/', views.BookingReportView.as_view(), name='booking-report'),
]
