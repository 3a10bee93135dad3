"""Abstract interface for material catalog storage."""

from abc import ABC, abstractmethod
from typing import Any

from zycle.core.entities.material import Material
from zycle.core.interfaces.document_store import WriteBatch


class IMaterialStore(ABC):
    """
    Interface for tenant material reads and staged material writes.

    Reads hit the store directly. Writes are only staged onto a WriteBatch
    so the caller can commit them together with invoice and loan writes.
    """

    @abstractmethod
    async def get(self, tenant_id: str, material_id: str) -> Material | None:
        """Get material by ID."""
        pass

    @abstractmethod
    async def get_many(self, tenant_id: str, material_ids: list[str]) -> dict[str, Material]:
        """Get the materials that exist among ``material_ids``, keyed by ID."""
        pass

    @abstractmethod
    async def list_materials(self, tenant_id: str) -> list[Material]:
        """List the catalog ordered by name."""
        pass

    @abstractmethod
    async def list_by_stock(self, tenant_id: str) -> list[Material]:
        """List the catalog ordered by stock on hand, largest first."""
        pass

    @abstractmethod
    def stage_create(self, batch: WriteBatch, tenant_id: str, material: Material) -> str:
        """Stage a new material document. Returns its ID."""
        pass

    @abstractmethod
    def stage_update(
        self, batch: WriteBatch, tenant_id: str, material_id: str, fields: dict[str, Any]
    ) -> None:
        """Stage a change to catalog fields of an existing material."""
        pass

    @abstractmethod
    def stage_delete(self, batch: WriteBatch, tenant_id: str, material_id: str) -> None:
        pass

    @abstractmethod
    def stage_stock_increment(
        self, batch: WriteBatch, tenant_id: str, material_id: str, delta: float
    ) -> None:
        """Stage an atomic increment of a material's stock."""
        pass

    @abstractmethod
    def require_empty_catalog(self, batch: WriteBatch, tenant_id: str) -> None:
        """Make the batch fail unless the catalog has no documents."""
        pass

    @abstractmethod
    def require_zero_total_stock(self, batch: WriteBatch, tenant_id: str) -> None:
        """Make the batch fail unless aggregate stock is zero."""
        pass
