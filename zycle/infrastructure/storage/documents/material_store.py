"""Document-store implementation of material catalog storage."""

from typing import Any

from zycle.core.entities.material import Material
from zycle.core.interfaces.document_store import (
    SERVER_TIMESTAMP,
    CollectionEmpty,
    DocumentSnapshot,
    FieldTotalEquals,
    IDocumentStore,
    WriteBatch,
)
from zycle.core.interfaces.material_store import IMaterialStore
from zycle.infrastructure.storage.documents.paths import materials_path

# Catalog fields an edit may change; stock is never among them
EDITABLE_FIELDS = frozenset({"name", "code", "price"})


class DocumentMaterialStore(IMaterialStore):
    """Materials stored as documents under ``tenants/{tenant}/materials``."""

    def __init__(self, document_store: IDocumentStore):
        self._documents = document_store

    async def get(self, tenant_id: str, material_id: str) -> Material | None:
        snapshot = await self._documents.get_document(materials_path(tenant_id), material_id)
        return self._snapshot_to_material(snapshot) if snapshot else None

    async def get_many(self, tenant_id: str, material_ids: list[str]) -> dict[str, Material]:
        found: dict[str, Material] = {}
        for material_id in dict.fromkeys(material_ids):
            material = await self.get(tenant_id, material_id)
            if material is not None:
                found[material_id] = material
        return found

    async def list_materials(self, tenant_id: str) -> list[Material]:
        snapshots = await self._documents.query_collection(
            materials_path(tenant_id), order_by="name"
        )
        return [self._snapshot_to_material(s) for s in snapshots]

    async def list_by_stock(self, tenant_id: str) -> list[Material]:
        snapshots = await self._documents.query_collection(
            materials_path(tenant_id), order_by="stock", descending=True
        )
        return [self._snapshot_to_material(s) for s in snapshots]

    def stage_create(self, batch: WriteBatch, tenant_id: str, material: Material) -> str:
        material_id = material.id or self._documents.new_id()
        batch.set(
            materials_path(tenant_id),
            material_id,
            {
                "name": material.name,
                "code": material.code,
                "price": material.price,
                "stock": material.stock,
                "created_at": SERVER_TIMESTAMP,
                "updated_at": SERVER_TIMESTAMP,
            },
        )
        return material_id

    def stage_update(
        self, batch: WriteBatch, tenant_id: str, material_id: str, fields: dict[str, Any]
    ) -> None:
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Material fields are not editable: {sorted(unknown)}")
        batch.update(
            materials_path(tenant_id),
            material_id,
            {**fields, "updated_at": SERVER_TIMESTAMP},
        )

    def stage_delete(self, batch: WriteBatch, tenant_id: str, material_id: str) -> None:
        batch.delete(materials_path(tenant_id), material_id)

    def stage_stock_increment(
        self, batch: WriteBatch, tenant_id: str, material_id: str, delta: float
    ) -> None:
        batch.increment(materials_path(tenant_id), material_id, "stock", delta)

    def require_empty_catalog(self, batch: WriteBatch, tenant_id: str) -> None:
        batch.require(CollectionEmpty(materials_path(tenant_id)))

    def require_zero_total_stock(self, batch: WriteBatch, tenant_id: str) -> None:
        batch.require(FieldTotalEquals(materials_path(tenant_id), "stock", 0.0))

    def _snapshot_to_material(self, snapshot: DocumentSnapshot) -> Material:
        data = snapshot.data
        return Material(
            id=snapshot.id,
            name=data["name"],
            code=data.get("code"),
            price=data["price"],
            stock=data.get("stock") or 0.0,
            created_at=data.get("created_at") or snapshot.created_at,
            updated_at=data.get("updated_at") or snapshot.updated_at,
        )
