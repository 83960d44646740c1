"""JSON bodies returned by the invoice API."""

from datetime import datetime
from typing import Any, Dict, Iterable

from invoicesrv.models import InvoiceStatus, account_type_label
from invoicesrv.timeutil import to_jst


def error_response(error_type: str, message: str, code: int) -> Dict[str, Any]:
    """Body reporting an error to the client."""
    return {"error": {"type": error_type, "code": int(code), "message": message}}


def post_response() -> Dict[str, int]:
    """Body acknowledging a successful write."""
    return {"ok": 1}


def _date_only(moment: datetime) -> str:
    return f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"


def _rfc3339_jst(moment: datetime) -> str:
    return to_jst(moment).replace(microsecond=0).isoformat()


def _status_label(status) -> str:
    if isinstance(status, InvoiceStatus):
        return status.label()
    return InvoiceStatus(status).label() if InvoiceStatus.is_valid(status) else ""


def _required(value, name: str) -> int:
    if value is None:
        raise ValueError(f"{name} is not set")
    return value


def _bank_account_item(account) -> Dict[str, str]:
    if account is None:
        return {
            "bankName": "",
            "branchName": "",
            "accountType": "",
            "accountNumber": "",
            "accountHolderName": "",
        }
    return {
        "bankName": account.bank_name,
        "branchName": account.branch_name,
        "accountType": account_type_label(account.account_type),
        "accountNumber": account.account_number,
        "accountHolderName": account.account_holder_name,
    }


def get_invoices_response(invoices: Iterable, partner_companies: Iterable) -> Dict[str, Any]:
    """Body listing invoices together with their partner companies' details."""
    partners = {partner.id: partner for partner in partner_companies}

    items = []
    for invoice in invoices:
        partner = partners.get(invoice.partner_company_id)
        items.append(
            {
                "id": invoice.id,
                "publishedDate": _date_only(invoice.published_date),
                "paidDueDate": _rfc3339_jst(invoice.paid_due_date),
                "invoiceStatus": _status_label(invoice.invoice_status),
                "paidAmount": invoice.paid_amount,
                "billedAmount": _required(invoice.billed_amount, "billed amount"),
                "commission": _required(invoice.commission, "commission"),
                "tax": _required(invoice.tax, "tax"),
                "partnerCompanyID": partner.id if partner is not None else "",
                "partnerCompanyName": partner.name if partner is not None else "",
                "partnerCompanyBankAccount": _bank_account_item(
                    partner.bank_account if partner is not None else None
                ),
            }
        )
    return {"invoices": items}