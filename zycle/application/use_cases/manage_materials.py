"""Material catalog use cases: list, create, update and delete."""

from zycle.application.dto.requests import CreateMaterialRequest, UpdateMaterialRequest
from zycle.application.use_cases.seed_default_materials import SeedDefaultMaterialsUseCase
from zycle.config import get_logger
from zycle.core.entities.material import Material
from zycle.core.exceptions import MaterialNotFoundError
from zycle.core.interfaces.document_store import IDocumentStore, WriteBatch
from zycle.core.interfaces.material_store import IMaterialStore

logger = get_logger(__name__)


class _MaterialUseCase:
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

    async def _require(self, tenant_id: str, material_id: str) -> Material:
        material_store = await self._get_material_store()
        material = await material_store.get(tenant_id, material_id)
        if material is None:
            raise MaterialNotFoundError(material_id)
        return material


class ListMaterialsUseCase(_MaterialUseCase):
    """List the catalog by name, seeding the default catalog into an empty one."""

    def __init__(
        self,
        document_store: IDocumentStore | None = None,
        material_store: IMaterialStore | None = None,
        seed_when_empty: bool | None = None,
    ):
        super().__init__(document_store, material_store)
        if seed_when_empty is None:
            from zycle.config import get_settings

            seed_when_empty = get_settings().inventory.seed_default_materials
        self._seed_when_empty = seed_when_empty

    async def execute(self, tenant_id: str) -> list[Material]:
        material_store = await self._get_material_store()
        materials = await material_store.list_materials(tenant_id)
        if materials or not self._seed_when_empty:
            return materials

        seeder = SeedDefaultMaterialsUseCase(
            document_store=await self._get_document_store(),
            material_store=material_store,
        )
        await seeder.execute(tenant_id)
        return await material_store.list_materials(tenant_id)


class CreateMaterialUseCase(_MaterialUseCase):
    """Add a material to the catalog with zero stock."""

    async def execute(self, tenant_id: str, request: CreateMaterialRequest) -> Material:
        logger.info("create_material_started", tenant_id=tenant_id, name=request.name)

        material = Material(name=request.name, code=request.code, price=request.price)
        material_store = await self._get_material_store()
        batch = WriteBatch()
        material_id = material_store.stage_create(batch, tenant_id, material)

        document_store = await self._get_document_store()
        await document_store.commit_batch(batch)

        saved = await self._require(tenant_id, material_id)
        logger.info("create_material_complete", tenant_id=tenant_id, material_id=material_id)
        return saved


class UpdateMaterialUseCase(_MaterialUseCase):
    """Edit name, code or price. Stock is never changed here."""

    async def execute(
        self, tenant_id: str, material_id: str, request: UpdateMaterialRequest
    ) -> Material:
        logger.info("update_material_started", tenant_id=tenant_id, material_id=material_id)

        existing = await self._require(tenant_id, material_id)
        changes = {
            name: value
            for name, value in request.model_dump(exclude_unset=True).items()
            if value is not None or name == "code"
        }
        if not changes:
            return existing

        # Normalize through the entity (strip, round) before writing
        normalized = Material.model_validate({**existing.model_dump(), **changes})
        fields = {name: getattr(normalized, name) for name in changes}

        material_store = await self._get_material_store()
        batch = WriteBatch()
        material_store.stage_update(batch, tenant_id, material_id, fields)
        document_store = await self._get_document_store()
        await document_store.commit_batch(batch)

        saved = await self._require(tenant_id, material_id)
        logger.info(
            "update_material_complete",
            tenant_id=tenant_id,
            material_id=material_id,
            fields=sorted(fields),
        )
        return saved


class DeleteMaterialUseCase(_MaterialUseCase):
    """
    Remove a material from the catalog.

    Invoices that reference it keep their denormalized name and code; a
    later edit that moves its stock fails the batch.
    """

    async def execute(self, tenant_id: str, material_id: str) -> None:
        await self._require(tenant_id, material_id)

        material_store = await self._get_material_store()
        batch = WriteBatch()
        material_store.stage_delete(batch, tenant_id, material_id)
        document_store = await self._get_document_store()
        await document_store.commit_batch(batch)

        logger.info("material_deleted", tenant_id=tenant_id, material_id=material_id)
