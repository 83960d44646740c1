"""Storage interfaces the use cases depend on."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Sequence

from invoicesrv.models import Company, Invoice, PartnerCompany, User


class CompanyRepository(ABC):
    """Lookup of companies."""

    @abstractmethod
    def find_by_company_id(self, company_id: str) -> Company:
        """Return the company; raise a not-found AppError when it does not exist."""


class InvoiceRepository(ABC):
    """Storage of invoices."""

    @abstractmethod
    def create_invoice(self, invoice: Invoice) -> None:
        """Store a new invoice."""

    @abstractmethod
    def find_invoices_by_company_id_and_paid_due_date_range(
        self,
        company_id: str,
        start_date: Optional[datetime],
        end_date: Optional[datetime],
    ) -> List[Invoice]:
        """Invoices of a company whose due date lies in the inclusive, open-ended range."""


class PartnerCompanyRepository(ABC):
    """Lookup of partner companies."""

    @abstractmethod
    def find_by_partner_company_id(self, partner_company_id: str) -> PartnerCompany:
        """Return the partner company; raise a not-found AppError when it does not exist."""

    @abstractmethod
    def find_with_bank_accounts(
        self, partner_company_ids: Sequence[str]
    ) -> List[PartnerCompany]:
        """Partner companies with the given ids, their bank accounts loaded."""


class UserRepository(ABC):
    """Lookup of users."""

    @abstractmethod
    def find_by_user_id(self, user_id: str) -> User:
        """Return the user; raise a not-found AppError when it does not exist."""