# core/exceptions.py

"""
CUSTOM EXCEPTIONS

Application-specific exceptions with proper error handling.
Services raise these; the DRF exception handler below renders them.
"""

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.views import exception_handler


class BusinessLogicException(APIException):
    """Base exception for business logic errors"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "A business rule was violated."
    default_code = "business_error"


class NotAuthenticated(BusinessLogicException):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Authentication required."
    default_code = "not_authenticated"


class PermissionDeniedError(BusinessLogicException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You do not have permission."
    default_code = "permission_denied"


class ResourceNotFound(BusinessLogicException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found."
    default_code = "not_found"


class ValidationFailed(BusinessLogicException):
    default_detail = "Invalid input."
    default_code = "validation_failed"


class ConflictError(BusinessLogicException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource already exists."
    default_code = "conflict"


class PaymentException(BusinessLogicException):
    """Payment-related errors"""
    default_detail = "Payment processing failed."
    default_code = "payment_error"


class AmountMismatch(PaymentException):
    default_detail = "Payment amount does not match"
    default_code = "amount_mismatch"


class PaymentApprovalFailed(PaymentException):
    status_code = status.HTTP_402_PAYMENT_REQUIRED
    default_detail = "Payment approval failed"
    default_code = "payment_approval_failed"


class PaymentConfigurationError(PaymentException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Payment configuration error"
    default_code = "payment_configuration_error"


class ExternalServiceError(BusinessLogicException):
    """Identity provider / storage failures"""
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "External service request failed."
    default_code = "external_service_error"


# Exception handler for DRF
def custom_exception_handler(exc, context):
    """
    Custom exception handler for consistent error responses.

    Shape: {"success": false, "message": ..., "error_code": ...}
    Field errors stay under their field keys.
    """
    if isinstance(exc, DjangoValidationError):
        exc = ValidationError(
            exc.message_dict if hasattr(exc, "error_dict") else {"detail": exc.messages}
        )

    response = exception_handler(exc, context)

    if response is not None:
        if isinstance(response.data, list):
            response.data = {"errors": response.data}

        response.data["error_code"] = getattr(exc, "default_code", "error")

        if "detail" in response.data:
            detail = response.data.pop("detail")
            if isinstance(detail, list) and len(detail) == 1:
                detail = detail[0]
            response.data["message"] = detail

        response.data["success"] = False

    return response
