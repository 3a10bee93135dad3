"""Purchase and sale invoice endpoints."""

from fastapi import APIRouter, Depends, Query, status

from zycle.api.dependencies import (
    get_check_cart_use_case,
    get_create_invoice_use_case,
    get_inv_store,
    get_tenant_id,
    get_update_invoice_use_case,
)
from zycle.application.dto.requests import (
    CartCheckRequest,
    CreateInvoiceRequest,
    UpdateInvoiceRequest,
)
from zycle.application.dto.responses import (
    CartCheckResponse,
    ErrorResponse,
    InvoiceListResponse,
    InvoiceResponse,
    NextNumberResponse,
)
from zycle.application.use_cases import (
    CheckCartUseCase,
    CreateInvoiceUseCase,
    UpdateInvoiceUseCase,
)
from zycle.core.entities.invoice import InvoiceType
from zycle.core.exceptions import InvoiceNotFoundError
from zycle.core.services.invoice_numbering import InvoiceNumberingService
from zycle.infrastructure.storage.documents import DocumentInvoiceStore

router = APIRouter(prefix="/api/invoices", tags=["invoices"])


@router.post(
    "/sale/cart/check",
    response_model=CartCheckResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def check_sale_cart(
    request: CartCheckRequest,
    tenant_id: str = Depends(get_tenant_id),
    use_case: CheckCartUseCase = Depends(get_check_cart_use_case),
) -> CartCheckResponse:
    """Check whether a weight still fits in a sale cart given current stock."""
    result = await use_case.execute(tenant_id, request)
    return use_case.to_response(result)


@router.get("/{invoice_type}", response_model=InvoiceListResponse)
async def list_recent_invoices(
    invoice_type: InvoiceType,
    limit: int = Query(default=5, ge=1, le=100),
    tenant_id: str = Depends(get_tenant_id),
    store: DocumentInvoiceStore = Depends(get_inv_store),
) -> InvoiceListResponse:
    """List the most recent invoices of a type, newest first."""
    invoices = await store.list_recent(tenant_id, invoice_type, limit=limit)
    return InvoiceListResponse(
        invoices=[InvoiceResponse.from_entity(i) for i in invoices],
        total=len(invoices),
    )


@router.get("/{invoice_type}/next-number", response_model=NextNumberResponse)
async def get_next_number(
    invoice_type: InvoiceType,
    tenant_id: str = Depends(get_tenant_id),
    store: DocumentInvoiceStore = Depends(get_inv_store),
) -> NextNumberResponse:
    """Preview the number the next invoice of this type will get."""
    number = await InvoiceNumberingService(store).next_number(tenant_id, invoice_type)
    return NextNumberResponse(invoice_type=invoice_type.value, number=number)


@router.post(
    "/{invoice_type}",
    response_model=InvoiceResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def create_invoice(
    invoice_type: InvoiceType,
    request: CreateInvoiceRequest,
    tenant_id: str = Depends(get_tenant_id),
    use_case: CreateInvoiceUseCase = Depends(get_create_invoice_use_case),
) -> InvoiceResponse:
    """
    Save a new invoice.

    Assigns the next number and applies the stock change of every line in
    the same batch. Sales are rejected when a material lacks the stock.
    """
    result = await use_case.execute(tenant_id, invoice_type, request)
    return use_case.to_response(result)


@router.get(
    "/{invoice_type}/{invoice_id}",
    response_model=InvoiceResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_invoice(
    invoice_type: InvoiceType,
    invoice_id: str,
    tenant_id: str = Depends(get_tenant_id),
    store: DocumentInvoiceStore = Depends(get_inv_store),
) -> InvoiceResponse:
    """Get an invoice by ID."""
    invoice = await store.get(tenant_id, invoice_type, invoice_id)
    if invoice is None:
        raise InvoiceNotFoundError(invoice_type.value, invoice_id)
    return InvoiceResponse.from_entity(invoice)


@router.put(
    "/{invoice_type}/{invoice_id}",
    response_model=InvoiceResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def update_invoice(
    invoice_type: InvoiceType,
    invoice_id: str,
    request: UpdateInvoiceRequest,
    tenant_id: str = Depends(get_tenant_id),
    use_case: UpdateInvoiceUseCase = Depends(get_update_invoice_use_case),
) -> InvoiceResponse:
    """
    Replace an invoice's header and lines.

    Only the difference against the stored lines moves stock; the number
    never changes.
    """
    result = await use_case.execute(tenant_id, invoice_type, invoice_id, request)
    return use_case.to_response(result)
