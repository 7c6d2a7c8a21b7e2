# finance/mixins/list_query.py
"""
Search and sorting for list endpoints.

Query parameters: ``search`` (case-insensitive substring over
``search_fields``), ``sortBy`` (one of ``ordering_fields``) and
``sortOrder`` (``asc`` or ``desc``). Unknown sort keys fall back to
``default_ordering``.
"""

from django.db.models import Q


class ListQueryMixin:
    search_fields = []
    ordering_fields = []
    default_ordering = None

    def apply_search(self, queryset):
        term = self.request.query_params.get("search", "").strip()
        if not term or not self.search_fields:
            return queryset

        condition = Q()
        for field in self.search_fields:
            condition |= Q(**{f"{field}__icontains": term})
        return queryset.filter(condition)

    def apply_ordering(self, queryset):
        sort_by = self.request.query_params.get("sortBy")
        sort_order = self.request.query_params.get("sortOrder", "").lower()

        if sort_by not in self.ordering_fields:
            return queryset.order_by(self.default_ordering) if self.default_ordering else queryset

        if sort_order not in ("asc", "desc"):
            # No explicit order: keep the direction of the default ordering
            sort_order = "desc" if (self.default_ordering or "").startswith("-") else "asc"
        prefix = "-" if sort_order == "desc" else ""
        return queryset.order_by(f"{prefix}{sort_by}")

    def filter_list_queryset(self, queryset):
        if self.action != "list":
            return queryset
        return self.apply_ordering(self.apply_search(queryset))
