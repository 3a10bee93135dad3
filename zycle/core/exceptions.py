"""
Domain exceptions for the Zycle back office.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class ZycleError(Exception):
    """Base exception for all Zycle errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(ZycleError):
    """Base exception for storage operations."""

    pass


class DocumentNotFoundError(StorageError):
    """A write targeted a document that does not exist."""

    def __init__(self, collection: str, doc_id: str):
        super().__init__(
            f"Document not found: {collection}/{doc_id}",
            code="DOCUMENT_NOT_FOUND",
            details={"collection": collection, "doc_id": doc_id},
        )


class BatchCommitError(StorageError):
    """A write batch was rejected by the store; nothing was applied."""

    def __init__(self, reason: str, writes: int = 0):
        super().__init__(
            f"Batch commit failed: {reason}",
            code="BATCH_COMMIT_FAILED",
            details={"reason": reason, "writes": writes},
        )


class PreconditionFailedError(StorageError):
    """A batch precondition did not hold at commit time."""

    def __init__(self, precondition: str, reason: str):
        super().__init__(
            f"Precondition failed ({precondition}): {reason}",
            code="PRECONDITION_FAILED",
            details={"precondition": precondition, "reason": reason},
        )


class UniqueConstraintError(StorageError):
    """A write collided with a unique index; the batch was rolled back."""

    def __init__(self, collection: str, doc_id: str, reason: str):
        super().__init__(
            f"Unique constraint violated writing {collection}/{doc_id}",
            code="UNIQUE_CONSTRAINT",
            details={"collection": collection, "doc_id": doc_id, "reason": reason},
        )


class DuplicateInvoiceNumberError(StorageError):
    """Another invoice of the same type already holds this number."""

    def __init__(self, invoice_type: str, number: int):
        super().__init__(
            f"Invoice number {number} is already taken for {invoice_type} invoices",
            code="DUPLICATE_INVOICE_NUMBER",
            details={"invoice_type": invoice_type, "number": number},
        )


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


# Lookup Exceptions
class NotFoundError(ZycleError):
    """Base exception for missing domain records."""

    pass


class MaterialNotFoundError(NotFoundError):
    """Material not found in the tenant catalog."""

    def __init__(self, material_id: str):
        super().__init__(
            f"Material not found: {material_id}",
            code="MATERIAL_NOT_FOUND",
            details={"material_id": material_id},
        )


class InvoiceNotFoundError(NotFoundError):
    """Invoice not found in storage."""

    def __init__(self, invoice_type: str, invoice_id: str):
        super().__init__(
            f"{invoice_type.capitalize()} invoice not found: {invoice_id}",
            code="INVOICE_NOT_FOUND",
            details={"invoice_type": invoice_type, "invoice_id": invoice_id},
        )


class LoanNotFoundError(NotFoundError):
    """Loan not found in storage."""

    def __init__(self, loan_id: str):
        super().__init__(
            f"Loan not found: {loan_id}",
            code="LOAN_NOT_FOUND",
            details={"loan_id": loan_id},
        )


# Validation Exceptions
class ValidationError(ZycleError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class EmptyInvoiceError(ValidationError):
    """An invoice must carry at least one line item."""

    def __init__(self) -> None:
        super().__init__(field="items", message="an invoice needs at least one line item")
        self.code = "EMPTY_INVOICE"


class InvalidLineItemError(ValidationError):
    """A line item has a non-positive or non-finite weight or unit price."""

    def __init__(self, index: int, field: str, value: Any):
        super().__init__(
            field=f"items[{index}].{field}",
            message=f"{field} must be a finite number greater than zero",
            value=value,
        )
        self.code = "INVALID_LINE_ITEM"
        self.details["index"] = index


class InsufficientStockError(ValidationError):
    """A sale would take more weight than the material has on hand."""

    def __init__(self, material_id: str, requested: float, available: float):
        super().__init__(
            field="weight",
            message=(
                f"only {available:g} kg available for material {material_id}, "
                f"{requested:g} kg requested"
            ),
        )
        self.code = "INSUFFICIENT_STOCK"
        self.details.update(
            {
                "material_id": material_id,
                "requested": requested,
                "available": available,
            }
        )


class InitialInventoryNotAllowedError(ValidationError):
    """Initial inventory can only be loaded while aggregate stock is zero."""

    def __init__(self, current_total: float | None = None):
        super().__init__(
            field="quantities",
            message="initial inventory can only be set while total stock is zero",
            value=current_total,
        )
        self.code = "INITIAL_INVENTORY_NOT_ALLOWED"


class LoanPaymentError(ValidationError):
    """A loan payment is missing its loan or exceeds what is owed."""

    def __init__(self, message: str, value: Any = None):
        super().__init__(field="loan_payment", message=message, value=value)
        self.code = "INVALID_LOAN_PAYMENT"


class TenantRequiredError(ValidationError):
    """A tenant-scoped request arrived without a tenant id."""

    def __init__(self, header_name: str):
        super().__init__(field=header_name, message="tenant header is required")
        self.code = "TENANT_REQUIRED"


class ConfigurationError(ZycleError):
    """Configuration error."""

    pass
