"""Inventory Report Use Case: stock on hand and latest invoices."""

from dataclasses import dataclass, field

from zycle.application.dto.responses import (
    InventoryReportResponse,
    InvoiceResponse,
    MaterialResponse,
)
from zycle.config import get_logger, get_settings
from zycle.core.entities.invoice import Invoice, InvoiceType
from zycle.core.entities.material import Material
from zycle.core.interfaces.invoice_store import IInvoiceStore
from zycle.core.interfaces.material_store import IMaterialStore

logger = get_logger(__name__)


@dataclass
class InventoryReport:
    materials: list[Material]
    total_weight: float
    top_materials: list[Material]
    recent_purchases: list[Invoice] = field(default_factory=list)
    recent_sales: list[Invoice] = field(default_factory=list)


class GetInventoryReportUseCase:
    """Summarize stock by material with the most recent purchases and sales."""

    def __init__(
        self,
        material_store: IMaterialStore | None = None,
        invoice_store: IInvoiceStore | None = None,
    ):
        self._material_store = material_store
        self._invoice_store = invoice_store

    async def _get_material_store(self) -> IMaterialStore:
        if self._material_store is None:
            from zycle.infrastructure.storage.documents import get_material_store

            self._material_store = await get_material_store()
        return self._material_store

    async def _get_invoice_store(self) -> IInvoiceStore:
        if self._invoice_store is None:
            from zycle.infrastructure.storage.documents import get_invoice_store

            self._invoice_store = await get_invoice_store()
        return self._invoice_store

    async def execute(
        self,
        tenant_id: str,
        top_n: int | None = None,
        recent_limit: int | None = None,
    ) -> InventoryReport:
        settings = get_settings().inventory
        top_n = settings.top_materials_limit if top_n is None else top_n
        recent_limit = settings.recent_invoices_limit if recent_limit is None else recent_limit

        material_store = await self._get_material_store()
        materials = await material_store.list_by_stock(tenant_id)

        invoice_store = await self._get_invoice_store()
        recent_purchases = await invoice_store.list_recent(
            tenant_id, InvoiceType.PURCHASE, limit=recent_limit
        )
        recent_sales = await invoice_store.list_recent(
            tenant_id, InvoiceType.SALE, limit=recent_limit
        )

        report = InventoryReport(
            materials=materials,
            total_weight=sum(m.stock for m in materials),
            top_materials=[m for m in materials if m.stock > 0][:top_n],
            recent_purchases=recent_purchases,
            recent_sales=recent_sales,
        )
        logger.debug(
            "inventory_report_built",
            tenant_id=tenant_id,
            materials=len(materials),
            total_weight=report.total_weight,
        )
        return report

    def to_response(self, report: InventoryReport) -> InventoryReportResponse:
        """Convert report to API response."""
        return InventoryReportResponse(
            materials=[MaterialResponse.from_entity(m) for m in report.materials],
            total_weight=report.total_weight,
            top_materials=[MaterialResponse.from_entity(m) for m in report.top_materials],
            recent_purchases=[InvoiceResponse.from_entity(i) for i in report.recent_purchases],
            recent_sales=[InvoiceResponse.from_entity(i) for i in report.recent_sales],
        )
