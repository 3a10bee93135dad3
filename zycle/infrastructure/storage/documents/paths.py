"""Collection paths for tenant-scoped documents."""

from zycle.core.entities.invoice import InvoiceType
from zycle.core.exceptions import ValidationError


def tenant_root(tenant_id: str) -> str:
    tenant_id = tenant_id.strip()
    if not tenant_id or "/" in tenant_id:
        raise ValidationError("tenant_id", "must be a non-empty id without '/'", tenant_id)
    return f"tenants/{tenant_id}"


def materials_path(tenant_id: str) -> str:
    return f"{tenant_root(tenant_id)}/materials"


def invoices_path(tenant_id: str, invoice_type: InvoiceType) -> str:
    # purchase_invoices / sale_invoices
    return f"{tenant_root(tenant_id)}/{invoice_type.value}_invoices"


def loans_path(tenant_id: str) -> str:
    return f"{tenant_root(tenant_id)}/loans"
