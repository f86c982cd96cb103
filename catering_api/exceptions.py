class CateringError(Exception):
    """Base class for errors raised by the service layer."""

    status_code = 400

    def __init__(self, message: str, *, status_code: int | None = None, details=None):
        super().__init__(message)
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code


class NotFoundError(CateringError):
    status_code = 404


class OrderStateError(CateringError):
    status_code = 400


class PaymentGatewayError(CateringError):
    status_code = 502


class ExternalServiceError(CateringError):
    status_code = 502
