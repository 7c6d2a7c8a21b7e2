"""
Page-number pagination with ``page``/``limit`` query parameters and the
``{success, data, pagination}`` response envelope used by every list endpoint.
"""

import math

from django.conf import settings
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class StandardResultsPagination(PageNumberPagination):
    page_query_param = "page"
    page_size_query_param = "limit"

    @property
    def page_size(self):
        return getattr(settings, "API_LIST_DEFAULT_LIMIT", 10)

    @property
    def max_page_size(self):
        return getattr(settings, "API_LIST_MAX_LIMIT", 100)

    def get_paginated_response(self, data):
        total = self.page.paginator.count
        limit = self.page.paginator.per_page
        return Response(
            {
                "success": True,
                "data": data,
                "pagination": {
                    "page": self.page.number,
                    "limit": limit,
                    "total": total,
                    "pages": math.ceil(total / limit) if limit else 0,
                },
            }
        )
