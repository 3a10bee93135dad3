"""End-to-end invoice, inventory and loan flows over a real SQLite database."""

import asyncio

import pytest

from zycle.application.dto.requests import (
    CreateInvoiceRequest,
    CreateLoanRequest,
    LineItemRequest,
    LoanPaymentRequest,
    UpdateInvoiceRequest,
)
from zycle.application.use_cases import (
    CreateInvoiceUseCase,
    CreateLoanUseCase,
    ListMaterialsUseCase,
    RegisterLoanPaymentUseCase,
    SeedDefaultMaterialsUseCase,
    SetInitialInventoryUseCase,
    UpdateInvoiceUseCase,
)
from zycle.core.entities import InvoiceType, LoanStatus
from zycle.core.exceptions import (
    DocumentNotFoundError,
    DuplicateInvoiceNumberError,
    InitialInventoryNotAllowedError,
    InsufficientStockError,
    LoanPaymentError,
    MaterialNotFoundError,
)
from zycle.core.interfaces.document_store import WriteBatch
from zycle.core.services.default_materials import DEFAULT_MATERIALS
from zycle.core.services.invoice_numbering import InvoiceNumberingService
from zycle.infrastructure.storage.documents import DocumentInvoiceStore, invoices_path
from zycle.infrastructure.storage.sqlite import SQLiteDocumentStore


class FailingDocumentStore(SQLiteDocumentStore):
    """Adds a write that cannot apply to the end of every batch."""

    async def commit_batch(self, batch):
        batch.increment("tenants/acme/materials", "vanished", "stock", 1)
        await super().commit_batch(batch)


class StaleInvoiceStore(DocumentInvoiceStore):
    """Reads the last number as if no invoice had been saved yet."""

    async def get_last_number(self, tenant_id, invoice_type):
        return None


@pytest.fixture
def create_uc(document_store, material_store, invoice_store, loan_store):
    return CreateInvoiceUseCase(
        document_store=document_store,
        material_store=material_store,
        invoice_store=invoice_store,
        loan_store=loan_store,
    )


@pytest.fixture
def update_uc(document_store, material_store, invoice_store):
    return UpdateInvoiceUseCase(
        document_store=document_store,
        material_store=material_store,
        invoice_store=invoice_store,
    )


def lines(*items: tuple[str, float, float | None]) -> list[LineItemRequest]:
    return [
        LineItemRequest(material_id=material_id, weight=weight, unit_price=price)
        for material_id, weight, price in items
    ]


async def stock_of(material_store, tenant_id, material_id) -> float:
    material = await material_store.get(tenant_id, material_id)
    return material.stock


class TestInvoiceFlow:
    async def test_purchase_create_then_edit(
        self, create_uc, update_uc, material_store, add_material, tenant_id
    ):
        pet = await add_material("PET", price=900)
        carton = await add_material("CARTON", price=500)

        created = await create_uc.execute(
            tenant_id,
            InvoiceType.PURCHASE,
            CreateInvoiceRequest(items=lines((pet, 50, 900))),
        )
        assert created.invoice.total == 45000
        assert created.invoice.number == 1
        assert created.stock_deltas == {pet: 50}
        assert await stock_of(material_store, tenant_id, pet) == 50

        updated = await update_uc.execute(
            tenant_id,
            InvoiceType.PURCHASE,
            created.invoice.id,
            UpdateInvoiceRequest(items=lines((pet, 30, 900), (carton, 20, 500))),
        )
        assert updated.invoice.total == 37000
        assert updated.invoice.number == 1
        assert updated.stock_deltas == {pet: -20, carton: 20}
        assert await stock_of(material_store, tenant_id, pet) == 30
        assert await stock_of(material_store, tenant_id, carton) == 20

    async def test_resave_unchanged_moves_no_stock(
        self, create_uc, update_uc, material_store, add_material, tenant_id
    ):
        pet = await add_material("PET", price=900, stock=40)
        created = await create_uc.execute(
            tenant_id, InvoiceType.SALE, CreateInvoiceRequest(items=lines((pet, 40, None)))
        )
        assert await stock_of(material_store, tenant_id, pet) == 0

        resaved = await update_uc.execute(
            tenant_id,
            InvoiceType.SALE,
            created.invoice.id,
            UpdateInvoiceRequest(items=lines((pet, 40, None)), notes="checked"),
        )
        assert resaved.stock_deltas == {}
        assert resaved.invoice.notes == "checked"
        assert await stock_of(material_store, tenant_id, pet) == 0

    async def test_header_edit_keeps_line_snapshot(
        self, create_uc, update_uc, document_store, material_store, add_material, tenant_id
    ):
        pet = await add_material("PET", price=900, code="303")
        created = await create_uc.execute(
            tenant_id, InvoiceType.PURCHASE, CreateInvoiceRequest(items=lines((pet, 50, None)))
        )

        batch = WriteBatch()
        material_store.stage_update(
            batch, tenant_id, pet, {"name": "PET CRISTAL", "code": "999", "price": 1200}
        )
        await document_store.commit_batch(batch)

        updated = await update_uc.execute(
            tenant_id,
            InvoiceType.PURCHASE,
            created.invoice.id,
            UpdateInvoiceRequest(items=lines((pet, 50, None)), notes="header only"),
        )

        line = updated.invoice.items[0]
        assert (line.material_name, line.material_code) == ("PET", "303")
        assert line.unit_price == 900
        assert updated.invoice.total == 45000
        assert updated.invoice.notes == "header only"
        assert updated.stock_deltas == {}

    async def test_header_edit_after_material_deleted(
        self, create_uc, update_uc, document_store, material_store, add_material, tenant_id
    ):
        lata = await add_material("LATA", price=700)
        created = await create_uc.execute(
            tenant_id, InvoiceType.PURCHASE, CreateInvoiceRequest(items=lines((lata, 10, None)))
        )
        batch = WriteBatch()
        material_store.stage_delete(batch, tenant_id, lata)
        await document_store.commit_batch(batch)

        updated = await update_uc.execute(
            tenant_id,
            InvoiceType.PURCHASE,
            created.invoice.id,
            UpdateInvoiceRequest(items=lines((lata, 10, None)), counterparty_name="Recicla SAS"),
        )
        assert updated.invoice.counterparty_name == "Recicla SAS"
        assert updated.invoice.items[0].material_name == "LATA"

        with pytest.raises(MaterialNotFoundError):
            await update_uc.execute(
                tenant_id,
                InvoiceType.PURCHASE,
                created.invoice.id,
                UpdateInvoiceRequest(items=lines((lata, 12, None))),
            )

    async def test_sale_oversell_rejected_before_any_write(
        self, create_uc, material_store, invoice_store, add_material, tenant_id
    ):
        aluminio = await add_material("ALUMINIO", price=6000, stock=12)

        with pytest.raises(InsufficientStockError):
            await create_uc.execute(
                tenant_id,
                InvoiceType.SALE,
                CreateInvoiceRequest(items=lines((aluminio, 15, None))),
            )

        assert await stock_of(material_store, tenant_id, aluminio) == 12
        assert await invoice_store.list_recent(tenant_id, InvoiceType.SALE) == []

    async def test_store_failure_leaves_everything_unchanged(
        self, pool, material_store, invoice_store, loan_store, add_material, tenant_id
    ):
        pet = await add_material("PET", price=900, stock=5)
        failing = FailingDocumentStore(pool)
        use_case = CreateInvoiceUseCase(
            document_store=failing,
            material_store=material_store,
            invoice_store=invoice_store,
            loan_store=loan_store,
        )

        with pytest.raises(DocumentNotFoundError):
            await use_case.execute(
                tenant_id,
                InvoiceType.PURCHASE,
                CreateInvoiceRequest(items=lines((pet, 50, None))),
            )

        assert await stock_of(material_store, tenant_id, pet) == 5
        assert await invoice_store.list_recent(tenant_id, InvoiceType.PURCHASE) == []

    async def test_concurrent_increments_compose(
        self, document_store, material_store, add_material, tenant_id
    ):
        pet = await add_material("PET", price=900, stock=100)
        deltas = [5, -7.5, 12, 0.5, -3]

        async def apply(delta: float) -> None:
            batch = WriteBatch()
            material_store.stage_stock_increment(batch, tenant_id, pet, delta)
            await document_store.commit_batch(batch)

        await asyncio.gather(*(apply(delta) for delta in deltas))

        assert await stock_of(material_store, tenant_id, pet) == pytest.approx(
            100 + sum(deltas)
        )

    async def test_numbering_is_independent_per_type(
        self, create_uc, invoice_store, add_material, tenant_id
    ):
        numbering = InvoiceNumberingService(invoice_store)
        pet = await add_material("PET", price=900)

        assert await numbering.next_number(tenant_id, InvoiceType.PURCHASE) == 1
        created = await create_uc.execute(
            tenant_id, InvoiceType.PURCHASE, CreateInvoiceRequest(items=lines((pet, 1, None)))
        )
        assert created.invoice.number == 1
        assert await numbering.next_number(tenant_id, InvoiceType.PURCHASE) == 2
        assert await numbering.next_number(tenant_id, InvoiceType.SALE) == 1

    async def test_number_collision_is_rejected(
        self, create_uc, document_store, material_store, loan_store, add_material, tenant_id
    ):
        pet = await add_material("PET", price=900)
        await create_uc.execute(
            tenant_id, InvoiceType.PURCHASE, CreateInvoiceRequest(items=lines((pet, 1, None)))
        )

        stale = CreateInvoiceUseCase(
            document_store=document_store,
            material_store=material_store,
            invoice_store=StaleInvoiceStore(document_store),
            loan_store=loan_store,
        )
        with pytest.raises(DuplicateInvoiceNumberError):
            await stale.execute(
                tenant_id,
                InvoiceType.PURCHASE,
                CreateInvoiceRequest(items=lines((pet, 4, None))),
            )

        snapshots = await document_store.query_collection(
            invoices_path(tenant_id, InvoiceType.PURCHASE)
        )
        assert len(snapshots) == 1
        assert await stock_of(material_store, tenant_id, pet) == 1


class TestSeedingAndInitialInventory:
    async def test_seed_runs_once(self, document_store, material_store, tenant_id):
        use_case = SeedDefaultMaterialsUseCase(document_store, material_store)

        first, second = await asyncio.gather(
            use_case.execute(tenant_id), use_case.execute(tenant_id)
        )

        assert sorted([first, second]) == [0, len(DEFAULT_MATERIALS)]
        materials = await material_store.list_materials(tenant_id)
        assert len(materials) == len(DEFAULT_MATERIALS)

    async def test_list_seeds_empty_catalog(self, document_store, material_store, tenant_id):
        use_case = ListMaterialsUseCase(document_store, material_store, seed_when_empty=True)
        materials = await use_case.execute(tenant_id)
        assert len(materials) == len(DEFAULT_MATERIALS)

    async def test_initial_inventory_only_while_stock_is_zero(
        self, document_store, material_store, add_material, tenant_id
    ):
        pet = await add_material("PET", price=900)
        carton = await add_material("CARTON", price=500)
        use_case = SetInitialInventoryUseCase(document_store, material_store)

        result = await use_case.execute(tenant_id, {pet: 120.5, carton: None})
        assert result.applied == {pet: 120.5}
        assert await stock_of(material_store, tenant_id, pet) == 120.5

        with pytest.raises(InitialInventoryNotAllowedError):
            await use_case.execute(tenant_id, {carton: 10})
        assert await stock_of(material_store, tenant_id, carton) == 0


class TestLoanFlow:
    async def test_purchase_withholds_loan_payment(
        self, create_uc, document_store, loan_store, add_material, tenant_id
    ):
        pet = await add_material("PET", price=900)
        loan = await CreateLoanUseCase(document_store, loan_store).execute(
            tenant_id,
            CreateLoanRequest(beneficiary_type="associate", beneficiary_name="Ana", amount=50000),
        )

        created = await create_uc.execute(
            tenant_id,
            InvoiceType.PURCHASE,
            CreateInvoiceRequest(
                items=lines((pet, 50, 900)),
                loan_payment=20000,
                loan_id=loan.id,
            ),
        )
        assert created.invoice.net_paid == 25000

        saved = await loan_store.get(tenant_id, loan.id)
        assert saved.outstanding_balance == 30000
        assert saved.payments[0].invoice_id == created.invoice.id

    async def test_loan_payment_over_balance_rejected(
        self, create_uc, document_store, loan_store, add_material, tenant_id
    ):
        pet = await add_material("PET", price=900)
        loan = await CreateLoanUseCase(document_store, loan_store).execute(
            tenant_id,
            CreateLoanRequest(beneficiary_type="associate", beneficiary_name="Ana", amount=1000),
        )

        with pytest.raises(LoanPaymentError):
            await create_uc.execute(
                tenant_id,
                InvoiceType.PURCHASE,
                CreateInvoiceRequest(
                    items=lines((pet, 50, 900)), loan_payment=2000, loan_id=loan.id
                ),
            )

    async def test_standalone_payments_settle_loan(self, document_store, loan_store, tenant_id):
        loan = await CreateLoanUseCase(document_store, loan_store).execute(
            tenant_id,
            CreateLoanRequest(
                beneficiary_type="collaborator", beneficiary_name="Luis", amount=300
            ),
        )
        pay = RegisterLoanPaymentUseCase(document_store, loan_store)

        await pay.execute(tenant_id, loan.id, LoanPaymentRequest(amount=100))
        settled = await pay.execute(tenant_id, loan.id, LoanPaymentRequest(amount=200))

        assert settled.outstanding_balance == 0
        assert settled.status is LoanStatus.PAID
        assert settled.total_paid == 300
        with pytest.raises(LoanPaymentError):
            await pay.execute(tenant_id, loan.id, LoanPaymentRequest(amount=1))
