"""Command that fills the database with sample partner company data."""

import argparse
import logging
from typing import Optional, Sequence

from invoicesrv.adapters import SqlPartnerCompanyRepository
from invoicesrv.config import load_env_config
from invoicesrv.crypto import encrypt
from invoicesrv.database import Database, Transaction
from invoicesrv.models import PartnerCompany, PartnerCompanyBankAccount

logger = logging.getLogger(__name__)

SEED_PARTNER_COMPANY_ID = "pc001"
SEED_BANK_ACCOUNT_ID = "pcba001"


def seed(database: Database, transaction: Transaction, encrypt_key: str) -> None:
    """Store a sample partner company and its encrypted bank account in one transaction."""
    repository = SqlPartnerCompanyRepository(database)

    def work() -> None:
        repository.create_partner_company(
            PartnerCompany(id=SEED_PARTNER_COMPANY_ID, name="partnerCompany")
        )
        account_number = encrypt("accountNumber", encrypt_key)
        account_holder_name = encrypt("accountHolderName", encrypt_key)
        repository.create_partner_company_bank_account(
            PartnerCompanyBankAccount(
                id=SEED_BANK_ACCOUNT_ID,
                partner_company_id=SEED_PARTNER_COMPANY_ID,
                bank_name="bankName",
                branch_name="branchName",
                account_type="accountType",
                account_number=account_number,
                account_holder_name=account_holder_name,
            )
        )

    transaction.run_txn(work)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Load the settings and seed the configured database."""
    parser = argparse.ArgumentParser(
        prog="invoicesrv-initdata", description="Insert sample partner company data."
    )
    parser.add_argument("--config", default=None, help="path of the settings file")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    try:
        config = load_env_config(args.config)
    except (OSError, ValueError) as exc:
        raise SystemExit(f"Failed to read config: {exc}") from exc
    if not config.db_dsn:
        raise SystemExit("DB ERROR: DB_DSN is not set")

    try:
        database = Database.from_dsn(config.db_dsn)
        transaction = Transaction.from_dsn(config.db_dsn)
    except Exception as exc:
        raise SystemExit(f"DB ERROR: {exc}") from exc

    try:
        seed(database, transaction, config.encrypt_key)
    except Exception as exc:
        raise SystemExit(f"RunTxn ERROR: {exc}") from exc
    logger.info("Success")