# booking/services/accounts.py
"""
Account service: credential verification, registration and linked records.

A login is a Django ``User`` whose username is its email address, plus a
``UserProfile`` carrying the role. Teacher and student logins are created
together with their Teacher/Student row in one transaction.

This file is part of the School Lab Booking.
Copyright (C) 2025 School Lab Booking Contributors

This software is licensed under the GNU General Public License v3.0 (GPL-3.0).
For license terms, see LICENSE file.
"""

import logging
import secrets
import uuid

from django.contrib.auth import authenticate
from django.contrib.auth.models import User
from django.db import IntegrityError, transaction
from rest_framework.authtoken.models import Token

from booking.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from booking.models import Student, Teacher, UserProfile

logger = logging.getLogger(__name__)

STUDENT_EMAIL_DOMAIN = 'student.example.com'


def _normalise_email(email):
    return (email or '').strip()


def _ensure_email_free(email):
    if User.objects.filter(username=email).exists() or User.objects.filter(email=email).exists():
        raise ConflictError(
            f"User with email '{email}' already exists",
            {'resource': 'User', 'field': 'email', 'value': email},
        )


def _create_user(name, email, password, role):
    """Create the login and its profile; call inside a transaction."""
    _ensure_email_free(email)
    # No password leaves the account unusable until one is set
    user = User.objects.create_user(
        username=email, email=email, password=password or None, first_name=name
    )
    profile, _ = UserProfile.objects.update_or_create(user=user, defaults={'role': role})
    user.userprofile = profile
    return user


def register_account(name, email, password, role):
    """
    Self-service registration for teachers and students.

    Returns:
        The created ``User``.

    Raises:
        ValidationError: role is not teacher or student
        ConflictError: the email, or for teachers the name, is already taken
    """
    name = name.strip()
    email = _normalise_email(email)
    if role not in (UserProfile.TEACHER, UserProfile.STUDENT):
        raise ValidationError('Only teacher and student accounts can be registered.', {'role': role})

    try:
        with transaction.atomic():
            user = _create_user(name, email, password, role)
            if role == UserProfile.TEACHER:
                _create_teacher_record(user, name)
            else:
                Student.objects.create(name=name, user=user)
    except IntegrityError as exc:
        raise ConflictError('Account could not be created because it already exists.', {'constraint': str(exc)})

    logger.info(f"Registered {role} account {user.pk} ({email})")
    return user


def _create_teacher_record(user, name):
    if Teacher.objects.filter(name=name).exists():
        raise ConflictError(
            f"Teacher with name '{name}' already exists",
            {'resource': 'Teacher', 'field': 'name', 'value': name},
        )
    return Teacher.objects.create(name=name, user=user)


def create_teacher_account(name, email, password):
    """Administrator-created teacher login plus its Teacher row."""
    name = name.strip()
    email = _normalise_email(email)
    with transaction.atomic():
        user = _create_user(name, email, password, UserProfile.TEACHER)
        teacher = _create_teacher_record(user, name)
    logger.info(f"Created teacher account {user.pk} for teacher {teacher.pk}")
    return user


def create_student(name, class_group=None, email=None, password=None):
    """
    Create a Student together with its login in a single transaction.

    Without an email a unique placeholder address is generated, and without a
    password a random one is set, mirroring how students are enrolled by
    administrators before they ever sign in.
    """
    name = name.strip()
    if not name:
        raise ValidationError('Student name is required.', {'name': 'This field is required.'})
    email = _normalise_email(email)
    if not email:
        slug = '.'.join(name.lower().split())
        email = f"{slug}-{uuid.uuid4().hex[:8]}@{STUDENT_EMAIL_DOMAIN}"
    password = password or secrets.token_urlsafe(12)

    with transaction.atomic():
        user = _create_user(name, email, password, UserProfile.STUDENT)
        student = Student.objects.create(name=name, user=user, class_group=class_group)

    logger.info(f"Created student {student.pk} with account {user.pk}")
    return student


def update_student(student, changes):
    """Apply changes to a student, keeping the login's name in step with the record."""
    with transaction.atomic():
        for field, value in changes.items():
            setattr(student, field, value)
        student.save()
        if 'name' in changes and student.user.first_name != student.name:
            student.user.first_name = student.name
            student.user.save(update_fields=['first_name'])
    logger.info(f"Updated student {student.pk}")
    return student


def delete_student(student):
    """Remove a student and the login that belongs to it."""
    with transaction.atomic():
        user = student.user
        student.delete()
        user.delete()


def verify_credentials(email, password):
    """
    Check an email/password pair.

    Raises:
        ValidationError: the pair does not match an active account
    """
    email = _normalise_email(email)
    user = authenticate(username=email, password=password)
    if user is None:
        logger.info(f"Failed sign-in for {email}")
        raise ValidationError('Invalid email or password.')
    return user


def issue_token(user):
    token, _ = Token.objects.get_or_create(user=user)
    return token.key


def revoke_token(user):
    Token.objects.filter(user=user).delete()


def change_role(user_id, role, actor):
    """Change a user's role; administrators cannot demote themselves."""
    if role not in dict(UserProfile.ROLE_CHOICES):
        raise ValidationError(f"Unknown role '{role}'.", {'role': role})
    try:
        user = User.objects.select_related('userprofile').get(pk=user_id)
    except (User.DoesNotExist, ValueError, TypeError):
        raise NotFoundError('User', user_id)
    if user.pk == actor.pk and role != UserProfile.ADMIN:
        raise AuthorizationError('You cannot change your own role.')

    try:
        profile = user.userprofile
    except UserProfile.DoesNotExist:
        profile = UserProfile(user=user)
    profile.role = role
    profile.save()
    logger.info(f"User {user.pk} role set to {role} by user {actor.pk}")
    return user
