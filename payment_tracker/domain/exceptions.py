"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class PaymentValidationError(DomainException):
    """Payment form is missing a required field or holds an invalid value"""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class PaymentNotFoundError(DomainException):
    """No payment record exists with the given id"""

    pass


class StoreError(DomainException):
    """Record store call failed (network, access or malformed response)"""

    pass


class ReportParameterError(DomainException):
    """Report request parameters are missing or malformed"""

    pass
