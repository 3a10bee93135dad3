"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from zycle.application.dto.requests import (
    CartCheckRequest,
    CartItemRequest,
    CreateInvoiceRequest,
    CreateLoanRequest,
    CreateMaterialRequest,
    InitialInventoryRequest,
    LineItemRequest,
    LoanPaymentRequest,
    UpdateInvoiceRequest,
    UpdateMaterialRequest,
)
from zycle.application.dto.responses import (
    CartCheckResponse,
    ErrorResponse,
    HealthResponse,
    InitialInventoryResponse,
    InventoryReportResponse,
    InvoiceListResponse,
    InvoiceResponse,
    LineItemResponse,
    LoanListResponse,
    LoanPaymentResponse,
    LoanResponse,
    MaterialListResponse,
    MaterialResponse,
    NextNumberResponse,
    ProviderHealthResponse,
    SeedMaterialsResponse,
)

__all__ = [
    # Requests
    "CartCheckRequest",
    "CartItemRequest",
    "CreateInvoiceRequest",
    "CreateLoanRequest",
    "CreateMaterialRequest",
    "InitialInventoryRequest",
    "LineItemRequest",
    "LoanPaymentRequest",
    "UpdateInvoiceRequest",
    "UpdateMaterialRequest",
    # Responses
    "CartCheckResponse",
    "ErrorResponse",
    "HealthResponse",
    "InitialInventoryResponse",
    "InventoryReportResponse",
    "InvoiceListResponse",
    "InvoiceResponse",
    "LineItemResponse",
    "LoanListResponse",
    "LoanPaymentResponse",
    "LoanResponse",
    "MaterialListResponse",
    "MaterialResponse",
    "NextNumberResponse",
    "ProviderHealthResponse",
    "SeedMaterialsResponse",
]
