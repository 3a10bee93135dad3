"""Seed Default Materials Use Case: load the default catalog into an empty tenant."""

from zycle.config import get_logger
from zycle.core.exceptions import PreconditionFailedError
from zycle.core.interfaces.document_store import IDocumentStore, WriteBatch
from zycle.core.interfaces.material_store import IMaterialStore
from zycle.core.services.default_materials import default_catalog

logger = get_logger(__name__)


class SeedDefaultMaterialsUseCase:
    """
    Write the default material catalog in one batch.

    The batch carries an empty-catalog precondition checked inside the
    commit transaction, so two sessions seeding at once produce exactly one
    catalog. No process-wide flag is involved.
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

    async def execute(self, tenant_id: str) -> int:
        """
        Seed the catalog.

        Returns:
            Number of materials created, 0 if the catalog already had documents
        """
        logger.info("seed_default_materials_started", tenant_id=tenant_id)

        material_store = await self._get_material_store()
        batch = WriteBatch()
        material_store.require_empty_catalog(batch, tenant_id)
        catalog = default_catalog()
        for material in catalog:
            material_store.stage_create(batch, tenant_id, material)

        document_store = await self._get_document_store()
        try:
            await document_store.commit_batch(batch)
        except PreconditionFailedError:
            logger.info("seed_default_materials_skipped", tenant_id=tenant_id)
            return 0

        logger.info(
            "seed_default_materials_complete",
            tenant_id=tenant_id,
            created=len(catalog),
        )
        return len(catalog)
