"""HTTP application exposing the invoice API."""

import functools
import logging
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Callable

from flask import Blueprint, Flask, g, jsonify, request

from invoicesrv.adapters import (
    SqlCompanyRepository,
    SqlInvoiceRepository,
    SqlPartnerCompanyRepository,
    SqlUserRepository,
)
from invoicesrv.database import Database, Transaction
from invoicesrv.errors import ERR_MSG_INTERNAL_SERVER, ERR_TYPE_INTERNAL_SERVER, AppError
from invoicesrv.usecase import InvoiceUseCase
from invoicesrv.web.requests import CreateInvoiceRequest, GetInvoicesRequest
from invoicesrv.web.responses import error_response, get_invoices_response, post_response

logger = logging.getLogger(__name__)

# Every API request currently acts as this user until real sessions exist.
DEBUG_USER_ID = "test1"


def _handle_errors(view: Callable) -> Callable:
    """Turn errors raised by a view into JSON error bodies."""

    @functools.wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except AppError as exc:
            code = int(exc.code)
            return jsonify(error_response(exc.error_type, exc.message, code)), code
        except Exception:
            logger.exception("unhandled error while serving %s", request.path)
            code = int(HTTPStatus.INTERNAL_SERVER_ERROR)
            body = error_response(ERR_TYPE_INTERNAL_SERVER, ERR_MSG_INTERNAL_SERVER, code)
            return jsonify(body), code

    return wrapper


def create_app(database: Database, transaction: Transaction, encrypt_key: str) -> Flask:
    """Build the application with its repositories bound to ``database``."""
    invoice_use_case = InvoiceUseCase(
        SqlInvoiceRepository(database),
        SqlUserRepository(database),
        SqlCompanyRepository(database),
        SqlPartnerCompanyRepository(database),
        transaction,
        encrypt_key,
    )

    api = Blueprint("api", __name__, url_prefix="/api")

    @api.before_request
    def authenticate() -> None:
        g.user_id = DEBUG_USER_ID

    @api.post("/invoices")
    @_handle_errors
    def create_invoice():
        req = CreateInvoiceRequest.from_json(request.get_json(silent=True))
        paid_due_date = req.parse_paid_due_date()
        invoice_use_case.create_invoice(
            req.paid_amount,
            req.partner_company_id,
            g.user_id,
            paid_due_date,
            datetime.now(timezone.utc),
        )
        return jsonify(post_response()), int(HTTPStatus.OK)

    @api.get("/invoices")
    @_handle_errors
    def get_invoices():
        req = GetInvoicesRequest.from_query(request.args)
        start_date, end_date = req.date_range()
        invoices, partner_companies = invoice_use_case.get_invoices(
            g.user_id, start_date, end_date
        )
        return jsonify(get_invoices_response(invoices, partner_companies)), int(HTTPStatus.OK)

    app = Flask(__name__)
    app.json.ensure_ascii = False
    app.register_blueprint(api)
    return app