from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from invoicesrv.adapters import (
    SqlCompanyRepository,
    SqlInvoiceRepository,
    SqlPartnerCompanyRepository,
    SqlUserRepository,
)
from invoicesrv.database import Database, Transaction
from invoicesrv.errors import AppError, ERR_TYPE_NOT_FOUND
from invoicesrv.models import (
    Company,
    Invoice,
    InvoiceStatus,
    PartnerCompany,
    PartnerCompanyBankAccount,
    User,
)


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    yield eng
    eng.dispose()


@pytest.fixture
def db(engine):
    database = Database(engine)
    database.create_all()
    return database


def _invoice(invoice_id, company_id, due):
    return Invoice(
        id=invoice_id,
        company_id=company_id,
        partner_company_id="54321",
        paid_amount=1000,
        billed_amount=1040,
        commission_rate=0.04,
        commission=40,
        tax=40,
        tax_rate=0.1,
        paid_due_date=due,
        published_date=datetime(2021, 1, 1),
        invoice_status=InvoiceStatus.OPEN,
        created_by="user12345",
    )


def test_find_by_company_id(db):
    with db.session() as session:
        session.add(Company(id="12345", name="Test Company"))
    company = SqlCompanyRepository(db).find_by_company_id("12345")
    assert company.name == "Test Company"


def test_find_by_company_id_not_found(db):
    with pytest.raises(AppError) as info:
        SqlCompanyRepository(db).find_by_company_id("cp99999")
    assert info.value.code == 404
    assert info.value.error_type == ERR_TYPE_NOT_FOUND


def test_soft_deleted_company_is_not_found(db):
    with db.session() as session:
        session.add(Company(id="12345", name="Test Company", deleted_at=datetime(2021, 1, 1)))
    with pytest.raises(AppError):
        SqlCompanyRepository(db).find_by_company_id("12345")


def test_create_invoice(db):
    repo = SqlInvoiceRepository(db)
    repo.create_invoice(_invoice("inv12345", "12345", datetime(2021, 1, 1)))
    found = repo.find_invoices_by_company_id_and_paid_due_date_range("12345", None, None)
    assert [inv.id for inv in found] == ["inv12345"]
    stored = found[0]
    assert stored.billed_amount == 1040
    assert stored.commission == 40
    assert stored.tax == 40
    assert stored.invoice_status is InvoiceStatus.OPEN
    assert stored.created_by == "user12345"


@pytest.fixture
def seeded(db):
    repo = SqlInvoiceRepository(db)
    repo.create_invoice(_invoice("before", "cp001", datetime(2020, 12, 31)))
    repo.create_invoice(_invoice("start", "cp001", datetime(2021, 1, 1)))
    repo.create_invoice(_invoice("end", "cp001", datetime(2021, 1, 31)))
    repo.create_invoice(_invoice("after", "cp001", datetime(2021, 2, 1)))
    repo.create_invoice(_invoice("other", "cp002", datetime(2021, 1, 15)))
    return repo


def _ids(invoices):
    return sorted(inv.id for inv in invoices)


def test_range_start_and_end(seeded):
    found = seeded.find_invoices_by_company_id_and_paid_due_date_range(
        "cp001", datetime(2021, 1, 1, tzinfo=timezone.utc), datetime(2021, 1, 31, tzinfo=timezone.utc)
    )
    assert _ids(found) == ["end", "start"]


def test_range_start_only(seeded):
    found = seeded.find_invoices_by_company_id_and_paid_due_date_range(
        "cp001", datetime(2021, 1, 1, tzinfo=timezone.utc), None
    )
    assert _ids(found) == ["after", "end", "start"]


def test_range_end_only(seeded):
    found = seeded.find_invoices_by_company_id_and_paid_due_date_range(
        "cp001", None, datetime(2021, 1, 31, tzinfo=timezone.utc)
    )
    assert _ids(found) == ["before", "end", "start"]


def test_range_none(seeded):
    found = seeded.find_invoices_by_company_id_and_paid_due_date_range("cp001", None, None)
    assert _ids(found) == ["after", "before", "end", "start"]


def test_range_offset_dates_compare_as_instants(seeded):
    jst = timezone(timedelta(hours=9))
    found = seeded.find_invoices_by_company_id_and_paid_due_date_range(
        "cp001", datetime(2021, 1, 1, 9, 0, tzinfo=jst), datetime(2021, 1, 1, 9, 0, tzinfo=jst)
    )
    assert _ids(found) == ["start"]


def test_create_invoice_rolled_back_with_transaction(db, engine):
    repo = SqlInvoiceRepository(db)

    def work():
        repo.create_invoice(_invoice("inv1", "cp001", datetime(2021, 1, 1)))
        raise RuntimeError("abort")

    with pytest.raises(RuntimeError):
        Transaction(engine).run_txn(work)
    assert repo.find_invoices_by_company_id_and_paid_due_date_range("cp001", None, None) == []


def test_partner_company_lookup_and_bank_accounts(db):
    repo = SqlPartnerCompanyRepository(db)
    repo.create_partner_company(PartnerCompany(id="pc001", name="partnerCompany"))
    repo.create_partner_company(PartnerCompany(id="pc002", name="other"))
    repo.create_partner_company_bank_account(
        PartnerCompanyBankAccount(
            id="pcba001",
            partner_company_id="pc001",
            bank_name="bankName",
            branch_name="branchName",
            account_type="savings",
            account_number="0000000",
            account_holder_name="accountHolderName",
        )
    )

    assert repo.find_by_partner_company_id("pc001").name == "partnerCompany"

    found = {pc.id: pc for pc in repo.find_with_bank_accounts(["pc001", "pc002", "missing"])}
    assert sorted(found) == ["pc001", "pc002"]
    assert found["pc001"].bank_account.bank_name == "bankName"
    assert found["pc001"].bank_account.account_number == "0000000"
    assert found["pc002"].bank_account is None


def test_find_with_bank_accounts_empty_ids(db):
    assert SqlPartnerCompanyRepository(db).find_with_bank_accounts([]) == []


def test_partner_company_not_found(db):
    with pytest.raises(AppError) as info:
        SqlPartnerCompanyRepository(db).find_by_partner_company_id("pc999")
    assert info.value.code == 404


def test_find_by_user_id(db):
    with db.session() as session:
        session.add(User(id="u0001", company_id="cp0001", email="someone@example.com"))
    user = SqlUserRepository(db).find_by_user_id("u0001")
    assert user.company_id == "cp0001"
    with pytest.raises(AppError):
        SqlUserRepository(db).find_by_user_id("u9999")