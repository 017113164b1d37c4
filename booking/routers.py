# booking/routers.py
"""
API router for the booking app.

This file is part of the School Lab Booking.
Copyright (C) 2025 School Lab Booking Contributors

This software is licensed under the GNU General Public License v3.0 (GPL-3.0).
For license terms, see LICENSE file.
"""

from rest_framework.routers import DefaultRouter, Route


class QueryIdRouter(DefaultRouter):
    """
    DefaultRouter whose list routes also accept ``PUT``/``DELETE ?id=<pk>``.

    The collection URL maps those methods to ``update_by_query`` and
    ``destroy_by_query`` on viewsets that define them.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        routes = list(self.routes)
        list_route = routes[0]
        mapping = dict(list_route.mapping)
        mapping.update({
            'put': 'update_by_query',
            'patch': 'partial_update_by_query',
            'delete': 'destroy_by_query',
        })
        routes[0] = Route(
            url=list_route.url,
            mapping=mapping,
            name=list_route.name,
            detail=list_route.detail,
            initkwargs=list_route.initkwargs,
        )
        self.routes = routes
