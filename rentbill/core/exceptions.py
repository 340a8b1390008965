"""
Billing Errors

Every failure the order and invoice services report is a BillingError
subclass, so the HTTP layer can turn them into one response shape.
"""


class BillingError(Exception):
    """Base class for reported billing failures"""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BillingError):
    """Request is missing required data"""
    status_code = 400


class NotFound(BillingError):
    """Requested record does not exist"""
    status_code = 404


class PersistenceError(BillingError):
    """The store rejected or failed the transaction"""
    status_code = 500
