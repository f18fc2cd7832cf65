"""Custom exceptions for the demurrage billing system."""


class DemurrageBillingException(Exception):
    """Base exception for demurrage billing errors."""
    pass


class TariffValidationError(DemurrageBillingException):
    """Raised when a tariff's tier list breaks the contiguity rules."""
    pass


class InvoicingPreconditionError(DemurrageBillingException):
    """Raised when a billing item cannot be invoiced."""
    pass


class LedgerError(DemurrageBillingException):
    """Raised when the ledger entry for an invoice cannot be created."""
    pass


class ValidationError(DemurrageBillingException):
    """Raised when data validation fails."""
    pass


class ContainerNotFoundError(DemurrageBillingException):
    """Raised when container is not found."""
    pass


class BillingItemNotFoundError(DemurrageBillingException):
    """Raised when no billing item exists for a key."""
    pass


class TariffNotFoundError(DemurrageBillingException):
    """Raised when a tariff ID is not registered."""
    pass


class ConfigurationError(DemurrageBillingException):
    """Raised when configuration is invalid or missing."""
    pass


class DatabaseError(DemurrageBillingException):
    """Raised when database operations fail."""
    pass
