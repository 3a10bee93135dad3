"""Material catalog endpoints."""

from fastapi import APIRouter, Depends, Response, status

from zycle.api.dependencies import (
    get_create_material_use_case,
    get_delete_material_use_case,
    get_list_materials_use_case,
    get_mat_store,
    get_seed_default_materials_use_case,
    get_tenant_id,
    get_update_material_use_case,
)
from zycle.application.dto.requests import CreateMaterialRequest, UpdateMaterialRequest
from zycle.application.dto.responses import (
    ErrorResponse,
    MaterialListResponse,
    MaterialResponse,
    SeedMaterialsResponse,
)
from zycle.application.use_cases import (
    CreateMaterialUseCase,
    DeleteMaterialUseCase,
    ListMaterialsUseCase,
    SeedDefaultMaterialsUseCase,
    UpdateMaterialUseCase,
)
from zycle.core.exceptions import MaterialNotFoundError
from zycle.infrastructure.storage.documents import DocumentMaterialStore

router = APIRouter(prefix="/api/materials", tags=["materials"])


@router.get("", response_model=MaterialListResponse)
async def list_materials(
    tenant_id: str = Depends(get_tenant_id),
    use_case: ListMaterialsUseCase = Depends(get_list_materials_use_case),
) -> MaterialListResponse:
    """List the catalog by name. An empty catalog gets the default materials first."""
    materials = await use_case.execute(tenant_id)
    return MaterialListResponse(
        materials=[MaterialResponse.from_entity(m) for m in materials],
        total=len(materials),
    )


@router.post(
    "",
    response_model=MaterialResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
)
async def create_material(
    request: CreateMaterialRequest,
    tenant_id: str = Depends(get_tenant_id),
    use_case: CreateMaterialUseCase = Depends(get_create_material_use_case),
) -> MaterialResponse:
    """Add a material with zero stock."""
    material = await use_case.execute(tenant_id, request)
    return MaterialResponse.from_entity(material)


@router.post("/seed-defaults", response_model=SeedMaterialsResponse)
async def seed_default_materials(
    tenant_id: str = Depends(get_tenant_id),
    use_case: SeedDefaultMaterialsUseCase = Depends(get_seed_default_materials_use_case),
) -> SeedMaterialsResponse:
    """Load the default catalog. Does nothing when the tenant already has materials."""
    created = await use_case.execute(tenant_id)
    return SeedMaterialsResponse(created=created)


@router.get(
    "/{material_id}",
    response_model=MaterialResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_material(
    material_id: str,
    tenant_id: str = Depends(get_tenant_id),
    store: DocumentMaterialStore = Depends(get_mat_store),
) -> MaterialResponse:
    """Get a material by ID."""
    material = await store.get(tenant_id, material_id)
    if material is None:
        raise MaterialNotFoundError(material_id)
    return MaterialResponse.from_entity(material)


@router.put(
    "/{material_id}",
    response_model=MaterialResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def update_material(
    material_id: str,
    request: UpdateMaterialRequest,
    tenant_id: str = Depends(get_tenant_id),
    use_case: UpdateMaterialUseCase = Depends(get_update_material_use_case),
) -> MaterialResponse:
    """Edit a material's name, code or price."""
    material = await use_case.execute(tenant_id, material_id, request)
    return MaterialResponse.from_entity(material)


@router.delete(
    "/{material_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_material(
    material_id: str,
    tenant_id: str = Depends(get_tenant_id),
    use_case: DeleteMaterialUseCase = Depends(get_delete_material_use_case),
) -> Response:
    """Remove a material from the catalog."""
    await use_case.execute(tenant_id, material_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
