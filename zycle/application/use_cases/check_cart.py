"""Check Cart Use Case: stateless stock check for a sale cart line."""

from dataclasses import dataclass

from zycle.application.dto.requests import CartCheckRequest
from zycle.application.dto.responses import CartCheckResponse
from zycle.config import get_logger
from zycle.core.entities.material import Material
from zycle.core.exceptions import InvalidLineItemError, MaterialNotFoundError
from zycle.core.interfaces.material_store import IMaterialStore
from zycle.core.services.cart import can_add, reserved_weight

logger = get_logger(__name__)


@dataclass
class CartCheckResult:
    allowed: bool
    material: Material
    requested: float
    reserved: float


class CheckCartUseCase:
    """
    Tell a caller whether a weight of a material still fits in its cart.

    The cart lives with the caller; this only reads the material's current
    stock. A positive answer is advisory and reserves nothing.
    """

    def __init__(self, material_store: IMaterialStore | None = None):
        self._material_store = material_store

    async def _get_material_store(self) -> IMaterialStore:
        if self._material_store is None:
            from zycle.infrastructure.storage.documents import get_material_store

            self._material_store = await get_material_store()
        return self._material_store

    async def execute(self, tenant_id: str, request: CartCheckRequest) -> CartCheckResult:
        if request.weight <= 0:
            raise InvalidLineItemError(len(request.cart), "weight", request.weight)

        material_store = await self._get_material_store()
        material = await material_store.get(tenant_id, request.material_id)
        if material is None:
            raise MaterialNotFoundError(request.material_id)

        allowed = can_add(material, request.weight, request.cart, request.editing_item_id)
        reserved = reserved_weight(
            request.cart, request.material_id, excluding=request.editing_item_id
        )
        logger.debug(
            "cart_checked",
            tenant_id=tenant_id,
            material_id=request.material_id,
            requested=request.weight,
            reserved=reserved,
            allowed=allowed,
        )
        return CartCheckResult(
            allowed=allowed,
            material=material,
            requested=request.weight,
            reserved=reserved,
        )

    def to_response(self, result: CartCheckResult) -> CartCheckResponse:
        """Convert result to API response."""
        return CartCheckResponse(
            allowed=result.allowed,
            material_id=result.material.id or "",
            requested=result.requested,
            reserved=result.reserved,
            stock=result.material.stock,
            available=result.material.stock - result.reserved,
        )
