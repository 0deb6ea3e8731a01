"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidTransactionDataError(DomainException):
    """Transaction data is malformed or invalid"""

    pass


class InvalidInstallmentPlanError(InvalidTransactionDataError):
    """Installment metadata violates the plan contract (periods out of range, missing plan)"""

    pass


class InvalidPeriodError(DomainException):
    """Requested year/month does not exist"""

    pass
