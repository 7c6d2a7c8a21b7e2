"""
Service exception handler mixin.
Translates service layer exceptions into DRF exceptions with structured logging.
"""

import logging

from django.core.exceptions import ObjectDoesNotExist
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework.exceptions import APIException, NotFound
from rest_framework.exceptions import PermissionDenied as DRFPermissionDenied
from rest_framework.exceptions import ValidationError as DRFValidationError

logger = logging.getLogger(__name__)


class ServiceExceptionHandlerMixin:
    """
    Mixin for calling services from views.

    - DRF exceptions pass through unchanged
    - Django ``ValidationError`` (including invalid month periods) -> 400
    - ``PermissionError`` -> 403
    - ``ObjectDoesNotExist`` (including missing budgets) -> 404
    - anything else is logged with a traceback and becomes a generic 500

    Usage:
        transaction, warning = self.handle_service_call(
            TransactionService.create_transaction, data, user
        )
    """

    def handle_service_call(self, service_call, *args, **kwargs):
        """
        Execute service call with exception translation and logging.

        Returns:
            Any: Result from service call

        Raises:
            DRFValidationError: For business rule violations
            DRFPermissionDenied: For authorization failures
            NotFound: For missing objects
            APIException: For unexpected service errors
        """
        service_name = getattr(service_call, "__qualname__", str(service_call))
        request = getattr(self, "request", None)
        user_id = getattr(getattr(request, "user", None), "id", None) if request else None
        log_context = {
            "service_name": service_name,
            "user_id": user_id,
            "component": "ServiceExceptionHandlerMixin",
        }

        logger.debug(
            "Service call execution initiated",
            extra={
                **log_context,
                "args_count": len(args),
                "kwargs_keys": list(kwargs.keys()),
                "action": "service_call_start",
            },
        )

        try:
            result = service_call(*args, **kwargs)

        except DRFValidationError as e:
            logger.warning(
                "Service validation error (DRF)",
                extra={
                    **log_context,
                    "error_type": "DRFValidationError",
                    "error_detail": e.detail,
                    "action": "service_validation_error_drf",
                    "severity": "medium",
                },
            )
            raise

        except DjangoValidationError as e:
            error_messages = e.messages if hasattr(e, "messages") else [str(e)]
            logger.warning(
                "Service validation error (Django)",
                extra={
                    **log_context,
                    "error_type": type(e).__name__,
                    "error_messages": error_messages,
                    "action": "service_validation_error_django",
                    "severity": "medium",
                },
            )
            raise DRFValidationError(error_messages)

        except DRFPermissionDenied as e:
            logger.warning(
                "Service permission denied (DRF)",
                extra={
                    **log_context,
                    "error_type": "DRFPermissionDenied",
                    "error_detail": e.detail,
                    "action": "service_permission_denied_drf",
                    "severity": "high",
                },
            )
            raise

        except PermissionError as e:
            logger.warning(
                "Service permission denied (Python)",
                extra={
                    **log_context,
                    "error_type": "PermissionError",
                    "error_message": str(e),
                    "action": "service_permission_denied_python",
                    "severity": "high",
                },
            )
            raise DRFPermissionDenied(str(e))

        except ObjectDoesNotExist as e:
            logger.info(
                "Service object not found",
                extra={
                    **log_context,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                    "action": "service_object_not_found",
                },
            )
            raise NotFound(str(e) or "Not found.")

        except APIException as e:
            logger.error(
                "Service API exception",
                extra={
                    **log_context,
                    "error_type": type(e).__name__,
                    "error_detail": e.detail,
                    "status_code": e.status_code,
                    "action": "service_api_exception",
                    "severity": "high",
                },
            )
            raise

        except Exception as e:
            logger.error(
                "Service operation failed unexpectedly",
                extra={
                    **log_context,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                    "action": "service_unexpected_error",
                    "severity": "critical",
                },
                exc_info=True,
            )
            # Generic message only, internals stay in the log
            raise APIException(detail="Service operation failed", code="service_error")

        logger.debug(
            "Service call completed successfully",
            extra={
                **log_context,
                "result_type": type(result).__name__,
                "action": "service_call_success",
            },
        )
        return result
