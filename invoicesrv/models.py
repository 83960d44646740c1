"""Domain entities mapped to database tables."""

from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, List, Optional

from sqlalchemy import DateTime, Float, Integer, String, Text, and_
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import DeclarativeBase, Mapped, foreign, mapped_column, relationship

from invoicesrv import crypto

COMMISSION_RATE_DEFAULT = 0.04


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Declarative base shared by every table."""


class _SoftModel:
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow, onupdate=_utcnow)
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime, default=None)


class InvoiceStatus(str, Enum):
    """Processing state of an invoice."""

    OPEN = "open"
    PROCESSING = "processing"
    PAID = "paid"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value

    def label(self) -> str:
        """Human-readable label shown to clients."""
        return _INVOICE_STATUS_LABELS.get(self, "")

    @classmethod
    def is_valid(cls, value) -> bool:
        """Whether ``value`` names one of the statuses."""
        try:
            cls(value)
        except ValueError:
            return False
        return True


_INVOICE_STATUS_LABELS = {
    InvoiceStatus.OPEN: "未処理",
    InvoiceStatus.PROCESSING: "処理中",
    InvoiceStatus.PAID: "支払い済み",
    InvoiceStatus.ERROR: "エラー",
}


class AccountType(str, Enum):
    """Kind of bank account."""

    CHECKING = "checking"
    SAVINGS = "savings"

    def __str__(self) -> str:
        return self.value


_ACCOUNT_TYPE_LABELS = {
    AccountType.CHECKING: "当座預金",
    AccountType.SAVINGS: "普通預金",
}


def account_type_label(value) -> str:
    """Label of a stored account type, or an empty string when it is unknown."""
    try:
        return _ACCOUNT_TYPE_LABELS[AccountType(value)]
    except ValueError:
        return ""


class Company(_SoftModel, Base):
    """A company whose users issue invoices."""

    __tablename__ = "companies"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), default="")
    representative_name: Mapped[str] = mapped_column(String(255), default="")
    tel: Mapped[str] = mapped_column(String(32), default="")
    postal_code: Mapped[str] = mapped_column(String(16), default="")
    address: Mapped[str] = mapped_column(String(255), default="")


class PartnerCompanyBankAccount(_SoftModel, Base):
    """Bank account of a partner company; number and holder are stored encrypted."""

    __tablename__ = "partner_company_bank_accounts"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    partner_company_id: Mapped[str] = mapped_column(String(64), index=True)
    bank_name: Mapped[str] = mapped_column(String(255), default="")
    branch_name: Mapped[str] = mapped_column(String(255), default="")
    account_type: Mapped[str] = mapped_column(String(32), default="")
    account_number: Mapped[str] = mapped_column(Text, default="")
    account_holder_name: Mapped[str] = mapped_column(Text, default="")

    def decrypt_account_number(self, key: str) -> str:
        """Replace the stored account number with its decrypted value and return it."""
        self.account_number = crypto.decrypt(self.account_number, key)
        return self.account_number

    def encrypt_account_number(self, key: str) -> None:
        """Replace the account number with its encrypted form."""
        self.account_number = crypto.encrypt(self.account_number, key)

    def decrypt_account_holder_name(self, key: str) -> str:
        """Replace the stored holder name with its decrypted value and return it."""
        self.account_holder_name = crypto.decrypt(self.account_holder_name, key)
        return self.account_holder_name

    def encrypt_account_holder_name(self, key: str) -> None:
        """Replace the holder name with its encrypted form."""
        self.account_holder_name = crypto.encrypt(self.account_holder_name, key)


class PartnerCompany(_SoftModel, Base):
    """A business partner that invoices are paid to."""

    __tablename__ = "partner_companies"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), default="")
    representative_name: Mapped[str] = mapped_column(String(255), default="")
    tel: Mapped[str] = mapped_column(String(32), default="")
    postal_code: Mapped[str] = mapped_column(String(16), default="")
    address: Mapped[str] = mapped_column(String(255), default="")

    bank_account: Mapped[Optional[PartnerCompanyBankAccount]] = relationship(
        primaryjoin=lambda: and_(
            PartnerCompany.id == foreign(PartnerCompanyBankAccount.partner_company_id),
            PartnerCompanyBankAccount.deleted_at.is_(None),
        ),
        uselist=False,
        viewonly=True,
    )


class User(_SoftModel, Base):
    """A user belonging to a company."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    company_id: Mapped[str] = mapped_column(String(64), index=True)
    email: Mapped[str] = mapped_column(String(255), default="")
    password: Mapped[str] = mapped_column(String(255), default="")


class Invoice(_SoftModel, Base):
    """An invoice for a payment from a company to a partner company."""

    __tablename__ = "invoices"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    company_id: Mapped[str] = mapped_column(String(64), index=True)
    partner_company_id: Mapped[str] = mapped_column(String(64))
    published_date: Mapped[datetime] = mapped_column(DateTime)
    commission: Mapped[Optional[int]] = mapped_column(Integer)
    commission_rate: Mapped[Optional[float]] = mapped_column(Float)
    tax_rate: Mapped[Optional[float]] = mapped_column(Float)
    tax: Mapped[Optional[int]] = mapped_column(Integer)
    paid_amount: Mapped[int] = mapped_column(Integer, default=0)
    # Paid amount plus commission plus the tax on the commission.
    billed_amount: Mapped[Optional[int]] = mapped_column(Integer)
    paid_due_date: Mapped[datetime] = mapped_column(DateTime, index=True)
    invoice_status: Mapped[InvoiceStatus] = mapped_column(
        SAEnum(
            InvoiceStatus,
            values_callable=lambda members: [member.value for member in members],
            native_enum=False,
            length=20,
            name="invoice_status",
        ),
        default=InvoiceStatus.OPEN,
    )
    created_by: Mapped[str] = mapped_column(String(64), default="")

    def calc_commission(self) -> int:
        """Commission on the paid amount, truncated to a whole amount."""
        if self.commission_rate is None:
            raise ValueError("commission rate is not set")
        return int(self.paid_amount * self.commission_rate)

    def calc_billed_amount(self, tax_rate: float) -> tuple:
        """Return ``(billed_amount, tax)`` where tax is levied on the commission."""
        if self.commission is None:
            raise ValueError("commission is not set")
        tax = int(self.commission * tax_rate)
        return self.paid_amount + self.commission + tax, tax


def unique_partner_company_ids(invoices: Iterable[Invoice]) -> List[str]:
    """Partner company ids of the invoices, without repeats, in first-seen order."""
    return list(dict.fromkeys(invoice.partner_company_id for invoice in invoices))