# finance/mixins/__init__.py
from .list_query import ListQueryMixin
from .owner_scope import (OwnerAssignmentMixin, OwnerScopedQuerysetMixin, is_elevated,
                          requested_owner_id)
from .service_exception_handler import ServiceExceptionHandlerMixin

__all__ = [
    "ListQueryMixin",
    "OwnerAssignmentMixin",
    "OwnerScopedQuerysetMixin",
    "ServiceExceptionHandlerMixin",
    "is_elevated",
    "requested_owner_id",
]
