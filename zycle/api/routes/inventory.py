"""Inventory endpoints."""

from fastapi import APIRouter, Depends, Query

from zycle.api.dependencies import (
    get_inventory_report_use_case,
    get_set_initial_inventory_use_case,
    get_tenant_id,
)
from zycle.application.dto.requests import InitialInventoryRequest
from zycle.application.dto.responses import (
    ErrorResponse,
    InitialInventoryResponse,
    InventoryReportResponse,
)
from zycle.application.use_cases import GetInventoryReportUseCase, SetInitialInventoryUseCase

router = APIRouter(prefix="/api/inventory", tags=["inventory"])


@router.get("", response_model=InventoryReportResponse)
async def get_inventory(
    top: int | None = Query(default=None, ge=1, le=50),
    recent: int | None = Query(default=None, ge=1, le=50),
    tenant_id: str = Depends(get_tenant_id),
    use_case: GetInventoryReportUseCase = Depends(get_inventory_report_use_case),
) -> InventoryReportResponse:
    """Stock on hand per material with totals and the latest invoices."""
    report = await use_case.execute(tenant_id, top_n=top, recent_limit=recent)
    return use_case.to_response(report)


@router.post(
    "/initial",
    response_model=InitialInventoryResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)
async def set_initial_inventory(
    request: InitialInventoryRequest,
    tenant_id: str = Depends(get_tenant_id),
    use_case: SetInitialInventoryUseCase = Depends(get_set_initial_inventory_use_case),
) -> InitialInventoryResponse:
    """Load opening stock. Only allowed while total stock is zero."""
    result = await use_case.execute(tenant_id, request.quantities)
    return use_case.to_response(result)
