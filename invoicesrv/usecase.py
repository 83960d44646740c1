"""Invoice use cases: registering invoices and listing them for a user's company."""

from datetime import datetime
from typing import Callable, List, Optional, Protocol, Tuple, TypeVar

from invoicesrv.config import DEFAULT_COMMISSION_RATE, DEFAULT_TAX_RATE
from invoicesrv.ids import generate_ulid
from invoicesrv.models import Invoice, InvoiceStatus, PartnerCompany, unique_partner_company_ids
from invoicesrv.repositories import (
    CompanyRepository,
    InvoiceRepository,
    PartnerCompanyRepository,
    UserRepository,
)

T = TypeVar("T")


class TransactionRunner(Protocol):
    """Anything able to run a unit of work inside one transaction."""

    def run_txn(self, tx_func: Callable[[], T]) -> T:
        """Call ``tx_func`` in a transaction, committing on return and rolling back on error."""


class InvoiceUseCase:
    """Application logic for invoices of the company a user belongs to."""

    def __init__(
        self,
        invoice_repository: InvoiceRepository,
        user_repository: UserRepository,
        company_repository: CompanyRepository,
        partner_company_repository: PartnerCompanyRepository,
        transaction: TransactionRunner,
        encrypt_key: str,
    ) -> None:
        self.invoice_repository = invoice_repository
        self.user_repository = user_repository
        self.company_repository = company_repository
        self.partner_company_repository = partner_company_repository
        self.transaction = transaction
        self.encrypt_key = encrypt_key

    def create_invoice(
        self,
        payment_amount: int,
        partner_company_id: str,
        user_id: str,
        invoice_due_date: datetime,
        now: datetime,
    ) -> Invoice:
        """Register an invoice issued by the user's company to a partner company.

        Raises a not-found AppError when the user, the company or the partner
        company does not exist. Returns the stored invoice.
        """

        def work() -> Invoice:
            user = self.user_repository.find_by_user_id(user_id)
            self.company_repository.find_by_company_id(user.company_id)
            self.partner_company_repository.find_by_partner_company_id(partner_company_id)

            invoice = Invoice(
                id=generate_ulid(),
                company_id=user.company_id,
                partner_company_id=partner_company_id,
                paid_amount=payment_amount,
                published_date=now,
                paid_due_date=invoice_due_date,
                commission_rate=DEFAULT_COMMISSION_RATE,
                tax_rate=DEFAULT_TAX_RATE,
                created_by=user_id,
                invoice_status=InvoiceStatus.OPEN,
            )
            invoice.commission = invoice.calc_commission()
            invoice.billed_amount, invoice.tax = invoice.calc_billed_amount(DEFAULT_TAX_RATE)

            self.invoice_repository.create_invoice(invoice)
            return invoice

        return self.transaction.run_txn(work)

    def get_invoices(
        self,
        user_id: str,
        start_date: Optional[datetime],
        end_date: Optional[datetime],
    ) -> Tuple[List[Invoice], List[PartnerCompany]]:
        """Invoices of the user's company due in the range, and their partner companies.

        Bank account numbers and holder names of the partner companies are
        decrypted in place.
        """
        user = self.user_repository.find_by_user_id(user_id)
        company = self.company_repository.find_by_company_id(user.company_id)

        invoices = self.invoice_repository.find_invoices_by_company_id_and_paid_due_date_range(
            company.id, start_date, end_date
        )
        partner_companies = self.partner_company_repository.find_with_bank_accounts(
            unique_partner_company_ids(invoices)
        )

        for partner_company in partner_companies:
            account = partner_company.bank_account
            if account is not None:
                account.decrypt_account_number(self.encrypt_key)
                account.decrypt_account_holder_name(self.encrypt_key)

        return invoices, partner_companies