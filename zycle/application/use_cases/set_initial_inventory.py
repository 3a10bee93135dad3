"""Set Initial Inventory Use Case: one-time opening stock load."""

import math
from dataclasses import dataclass, field

from zycle.application.dto.responses import InitialInventoryResponse
from zycle.config import get_logger
from zycle.core.exceptions import (
    InitialInventoryNotAllowedError,
    MaterialNotFoundError,
    PreconditionFailedError,
    ValidationError,
)
from zycle.core.interfaces.document_store import IDocumentStore, WriteBatch
from zycle.core.interfaces.material_store import IMaterialStore

logger = get_logger(__name__)


@dataclass
class InitialInventoryResult:
    """Opening quantities that were applied, by material ID."""

    applied: dict[str, float] = field(default_factory=dict)

    @property
    def total_weight(self) -> float:
        return sum(self.applied.values())


class SetInitialInventoryUseCase:
    """
    Load opening stock while aggregate stock is still zero.

    Quantities are applied as atomic increments in one batch guarded by a
    zero-total-stock precondition, so the load can happen at most once and
    never races with an invoice that already moved stock.
    """

    def __init__(
        self,
        document_store: IDocumentStore | None = None,
        material_store: IMaterialStore | None = None,
    ):
        self._document_store = document_store
        self._material_store = material_store

    async def _get_document_store(self) -> IDocumentStore:
        if self._document_store is None:
            from zycle.infrastructure.storage.sqlite import get_document_store

            self._document_store = await get_document_store()
        return self._document_store

    async def _get_material_store(self) -> IMaterialStore:
        if self._material_store is None:
            from zycle.infrastructure.storage.documents import get_material_store

            self._material_store = await get_material_store()
        return self._material_store

    async def execute(
        self, tenant_id: str, quantities: dict[str, float | None]
    ) -> InitialInventoryResult:
        """Execute initial inventory use case."""
        logger.info(
            "set_initial_inventory_started",
            tenant_id=tenant_id,
            materials=len(quantities),
        )

        # 1. Validate: skip empty entries, reject negatives and unknown IDs
        applied: dict[str, float] = {}
        for material_id, quantity in quantities.items():
            if quantity is None or quantity == 0:
                continue
            if math.isnan(quantity) or quantity < 0:
                raise ValidationError(
                    f"quantities.{material_id}", "must be zero or positive", quantity
                )
            applied[material_id] = quantity

        material_store = await self._get_material_store()
        known = await material_store.get_many(tenant_id, list(quantities))
        for material_id in quantities:
            if material_id not in known:
                raise MaterialNotFoundError(material_id)

        if not applied:
            logger.info("set_initial_inventory_empty", tenant_id=tenant_id)
            return InitialInventoryResult()

        # 2. One guarded batch of increments
        batch = WriteBatch()
        material_store.require_zero_total_stock(batch, tenant_id)
        for material_id, quantity in applied.items():
            material_store.stage_stock_increment(batch, tenant_id, material_id, quantity)

        document_store = await self._get_document_store()
        try:
            await document_store.commit_batch(batch)
        except PreconditionFailedError as e:
            raise InitialInventoryNotAllowedError(e.details.get("actual")) from e

        result = InitialInventoryResult(applied=applied)
        logger.info(
            "set_initial_inventory_complete",
            tenant_id=tenant_id,
            materials=len(applied),
            total_weight=result.total_weight,
        )
        return result

    def to_response(self, result: InitialInventoryResult) -> InitialInventoryResponse:
        """Convert result to API response."""
        return InitialInventoryResponse(
            applied=result.applied,
            total_weight=result.total_weight,
        )
