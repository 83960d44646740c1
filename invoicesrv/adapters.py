"""SQL implementations of the repositories."""

from datetime import datetime, timezone
from typing import List, Optional, Sequence, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from invoicesrv.database import Database
from invoicesrv.errors import not_found
from invoicesrv.models import (
    Company,
    Invoice,
    PartnerCompany,
    PartnerCompanyBankAccount,
    User,
)
from invoicesrv.repositories import (
    CompanyRepository,
    InvoiceRepository,
    PartnerCompanyRepository,
    UserRepository,
)

M = TypeVar("M")


def _as_utc_naive(moment: datetime) -> datetime:
    # Stored timestamps are naive UTC.
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


def _first_by_id(db: Database, model: Type[M], record_id: str) -> M:
    statement = (
        select(model)
        .where(model.id == record_id, model.deleted_at.is_(None))
        .order_by(model.id)
        .limit(1)
    )
    with db.session() as session:
        found = session.scalars(statement).first()
    if found is None:
        raise not_found(LookupError(f"{model.__tablename__}: record {record_id!r} not found"))
    return found


def _insert(db: Database, record) -> None:
    with db.session() as session:
        session.add(record)
        session.flush()


class SqlCompanyRepository(CompanyRepository):
    """Companies stored in the ``companies`` table."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def find_by_company_id(self, company_id: str) -> Company:
        return _first_by_id(self.db, Company, company_id)


class SqlInvoiceRepository(InvoiceRepository):
    """Invoices stored in the ``invoices`` table."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def create_invoice(self, invoice: Invoice) -> None:
        if invoice.published_date is not None:
            invoice.published_date = _as_utc_naive(invoice.published_date)
        if invoice.paid_due_date is not None:
            invoice.paid_due_date = _as_utc_naive(invoice.paid_due_date)
        _insert(self.db, invoice)

    def find_invoices_by_company_id_and_paid_due_date_range(
        self,
        company_id: str,
        start_date: Optional[datetime],
        end_date: Optional[datetime],
    ) -> List[Invoice]:
        statement = select(Invoice)
        if start_date is not None:
            statement = statement.where(Invoice.paid_due_date >= _as_utc_naive(start_date))
        if end_date is not None:
            statement = statement.where(Invoice.paid_due_date <= _as_utc_naive(end_date))
        statement = statement.where(
            Invoice.company_id == company_id, Invoice.deleted_at.is_(None)
        )
        with self.db.session() as session:
            return list(session.scalars(statement))


class SqlPartnerCompanyRepository(PartnerCompanyRepository):
    """Partner companies and their bank accounts."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def find_by_partner_company_id(self, partner_company_id: str) -> PartnerCompany:
        return _first_by_id(self.db, PartnerCompany, partner_company_id)

    def find_with_bank_accounts(
        self, partner_company_ids: Sequence[str]
    ) -> List[PartnerCompany]:
        statement = (
            select(PartnerCompany)
            .where(
                PartnerCompany.id.in_(list(partner_company_ids)),
                PartnerCompany.deleted_at.is_(None),
            )
            .options(selectinload(PartnerCompany.bank_account))
        )
        with self.db.session() as session:
            return list(session.scalars(statement))

    def create_partner_company(self, partner_company: PartnerCompany) -> None:
        """Store a new partner company."""
        _insert(self.db, partner_company)

    def create_partner_company_bank_account(self, account: PartnerCompanyBankAccount) -> None:
        """Store a new bank account of a partner company."""
        _insert(self.db, account)


class SqlUserRepository(UserRepository):
    """Users stored in the ``users`` table."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def find_by_user_id(self, user_id: str) -> User:
        return _first_by_id(self.db, User, user_id)