# booking/views/base.py
"""
Shared viewset behaviour for the booking API.

This file is part of the School Lab Booking.
Copyright (C) 2025 School Lab Booking Contributors

This software is licensed under the GNU General Public License v3.0 (GPL-3.0).
For license terms, see LICENSE file.
"""

from django.http import Http404

from booking.exceptions import NotFoundError, ValidationError


class QueryIdMixin:
    """
    Let collection URLs address a single record with ``?id=<pk>``.

    ``QueryIdRouter`` maps ``PUT``, ``PATCH`` and ``DELETE`` on the list URL to
    the ``*_by_query`` handlers below. ``PUT`` may also carry the id in its body.
    Missing records are reported with the resource name and the id asked for.
    """

    def _lookup_key(self):
        return self.lookup_url_kwarg or self.lookup_field

    def _take_query_id(self, request, allow_body=False):
        pk = request.query_params.get('id')
        if not pk and allow_body and hasattr(request.data, 'get'):
            pk = request.data.get('id')
        if pk in (None, ''):
            raise ValidationError('Id is required.', {'id': 'This query parameter is required.'})
        self.kwargs[self._lookup_key()] = str(pk)

    def get_object(self):
        try:
            return super().get_object()
        except Http404:
            resource = self.get_queryset().model._meta.verbose_name.title()
            raise NotFoundError(resource, self.kwargs.get(self._lookup_key()))

    def update_by_query(self, request, *args, **kwargs):
        self._take_query_id(request, allow_body=True)
        return self.update(request, *args, **kwargs)

    def partial_update_by_query(self, request, *args, **kwargs):
        self._take_query_id(request, allow_body=True)
        return self.partial_update(request, *args, **kwargs)

    def destroy_by_query(self, request, *args, **kwargs):
        self._take_query_id(request)
        return self.destroy(request, *args, **kwargs)


def int_param(params, name, required=False):
    """Read an integer query parameter, answering 400 when it is malformed."""
    value = params.get(name)
    if value in (None, ''):
        if required:
            raise ValidationError(
                'Missing required query parameters.', {name: 'This query parameter is required.'}
            )
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer.", {name: value})
