# finance/tests/unit/test_service_exception_handler.py

from unittest.mock import Mock, patch

import pytest
from django.core.exceptions import ObjectDoesNotExist
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError
from rest_framework.exceptions import APIException, NotFound
from rest_framework.exceptions import PermissionDenied as DRFPermissionDenied
from rest_framework.exceptions import ValidationError as DRFValidationError

from finance.exceptions import BudgetNotFoundError, InvalidPeriodError
from finance.mixins.service_exception_handler import ServiceExceptionHandlerMixin


class MockService:
    """A mock service to simulate different exception scenarios."""

    def method_success(self):
        return "success"

    def method_drf_validation_error(self):
        raise DRFValidationError("DRF validation error")

    def method_django_validation_error(self):
        raise DjangoValidationError("Django validation error")

    def method_invalid_period(self):
        raise InvalidPeriodError("2024-13")

    def method_drf_permission_denied(self):
        raise DRFPermissionDenied("DRF permission denied")

    def method_python_permission_error(self):
        raise PermissionError("Python permission error")

    def method_object_does_not_exist(self):
        raise ObjectDoesNotExist("Thing not found")

    def method_budget_not_found(self):
        raise BudgetNotFoundError("Monthly budget not found")

    def method_api_exception(self):
        raise APIException("API exception")

    def method_database_error(self):
        raise DatabaseError("connection refused to db-host-01")


class TestServiceExceptionHandlerMixin:
    """Tests for ServiceExceptionHandlerMixin."""

    def setup_method(self, method):
        self.mixin_instance = ServiceExceptionHandlerMixin()
        self.mixin_instance.request = Mock()
        self.mixin_instance.request.user = Mock(id=1)
        self.mock_service = MockService()

    @patch("finance.mixins.service_exception_handler.logger")
    def test_handle_service_call_success(self, mock_logger):
        """Test successful service call."""
        result = self.mixin_instance.handle_service_call(self.mock_service.method_success)
        assert result == "success"
        found_success_log = False
        for call_args, call_kwargs in mock_logger.debug.call_args_list:
            if call_args[0] == "Service call completed successfully":
                assert call_kwargs["extra"]["service_name"] == "MockService.method_success"
                assert call_kwargs["extra"]["user_id"] == 1
                assert call_kwargs["extra"]["component"] == "ServiceExceptionHandlerMixin"
                assert call_kwargs["extra"]["result_type"] == "str"
                assert call_kwargs["extra"]["action"] == "service_call_success"
                found_success_log = True
                break
        assert found_success_log, "Expected 'Service call completed successfully' log not found."

    @patch("finance.mixins.service_exception_handler.logger")
    def test_handle_service_call_passes_arguments(self, mock_logger):
        def service(*args, **kwargs):
            return args, kwargs

        result = self.mixin_instance.handle_service_call(service, 1, key="value")
        assert result == ((1,), {"key": "value"})

    @patch("finance.mixins.service_exception_handler.logger")
    def test_handle_service_call_drf_validation_error(self, mock_logger):
        """Test DRFValidationError handling."""
        with pytest.raises(DRFValidationError, match="DRF validation error"):
            self.mixin_instance.handle_service_call(
                self.mock_service.method_drf_validation_error
            )
        mock_logger.warning.assert_called_once()
        assert "DRFValidationError" in mock_logger.warning.call_args[1]["extra"]["error_type"]

    @patch("finance.mixins.service_exception_handler.logger")
    def test_handle_service_call_django_validation_error(self, mock_logger):
        """Test DjangoValidationError handling."""
        with pytest.raises(DRFValidationError, match="Django validation error"):
            self.mixin_instance.handle_service_call(
                self.mock_service.method_django_validation_error
            )
        mock_logger.warning.assert_called_once()
        assert "ValidationError" in mock_logger.warning.call_args[1]["extra"]["error_type"]

    @patch("finance.mixins.service_exception_handler.logger")
    def test_invalid_period_becomes_validation_error(self, mock_logger):
        with pytest.raises(DRFValidationError, match="expected YYYY-MM"):
            self.mixin_instance.handle_service_call(self.mock_service.method_invalid_period)
        assert mock_logger.warning.call_args[1]["extra"]["error_type"] == "InvalidPeriodError"

    @patch("finance.mixins.service_exception_handler.logger")
    def test_handle_service_call_drf_permission_denied(self, mock_logger):
        """Test DRFPermissionDenied handling."""
        with pytest.raises(DRFPermissionDenied, match="DRF permission denied"):
            self.mixin_instance.handle_service_call(
                self.mock_service.method_drf_permission_denied
            )
        mock_logger.warning.assert_called_once()
        assert "DRFPermissionDenied" in mock_logger.warning.call_args[1]["extra"]["error_type"]

    @patch("finance.mixins.service_exception_handler.logger")
    def test_handle_service_call_python_permission_error(self, mock_logger):
        """Test Python PermissionError handling."""
        with pytest.raises(DRFPermissionDenied, match="Python permission error"):
            self.mixin_instance.handle_service_call(
                self.mock_service.method_python_permission_error
            )
        mock_logger.warning.assert_called_once()
        assert "PermissionError" in mock_logger.warning.call_args[1]["extra"]["error_type"]

    @patch("finance.mixins.service_exception_handler.logger")
    def test_object_does_not_exist_becomes_not_found(self, mock_logger):
        with pytest.raises(NotFound, match="Thing not found"):
            self.mixin_instance.handle_service_call(
                self.mock_service.method_object_does_not_exist
            )
        mock_logger.info.assert_called_once()

    @patch("finance.mixins.service_exception_handler.logger")
    def test_budget_not_found_becomes_not_found(self, mock_logger):
        with pytest.raises(NotFound, match="Monthly budget not found"):
            self.mixin_instance.handle_service_call(self.mock_service.method_budget_not_found)

    @patch("finance.mixins.service_exception_handler.logger")
    def test_handle_service_call_api_exception(self, mock_logger):
        """Test APIException handling."""
        with pytest.raises(APIException, match="API exception"):
            self.mixin_instance.handle_service_call(
                self.mock_service.method_api_exception
            )
        mock_logger.error.assert_called_once()
        assert "APIException" in mock_logger.error.call_args[1]["extra"]["error_type"]

    @patch("finance.mixins.service_exception_handler.logger")
    def test_database_error_becomes_generic_500(self, mock_logger):
        with pytest.raises(APIException) as exc_info:
            self.mixin_instance.handle_service_call(self.mock_service.method_database_error)

        assert exc_info.value.status_code == 500
        assert str(exc_info.value.detail) == "Service operation failed"
        assert "db-host-01" not in str(exc_info.value.detail)
        mock_logger.error.assert_called_once()
        call_kwargs = mock_logger.error.call_args[1]
        assert call_kwargs["extra"]["error_type"] == "DatabaseError"
        assert call_kwargs["extra"]["severity"] == "critical"
        assert call_kwargs["exc_info"] is True
