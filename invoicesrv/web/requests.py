"""Parsing and validation of the invoice API's request data."""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Optional, Tuple

from invoicesrv.errors import validation_error

_RFC3339 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})"
)


def _parse_rfc3339(text: str) -> datetime:
    """Parse an RFC 3339 timestamp into an aware datetime; raise ValueError if invalid."""
    match = _RFC3339.fullmatch(text)
    if match is None:
        raise ValueError(f"not an RFC 3339 timestamp: {text!r}")
    year, month, day, hour, minute, second, fraction, offset = match.groups()

    if offset == "Z":
        tz = timezone.utc
    else:
        sign = -1 if offset[0] == "-" else 1
        offset_hours, offset_minutes = int(offset[1:3]), int(offset[4:6])
        if offset_hours > 23 or offset_minutes > 59:
            raise ValueError(f"time zone offset out of range: {offset!r}")
        tz = timezone(sign * timedelta(hours=offset_hours, minutes=offset_minutes))

    microsecond = int(fraction[:6].ljust(6, "0")) if fraction else 0
    return datetime(
        int(year), int(month), int(day),
        int(hour), int(minute), int(second),
        microsecond, tzinfo=tz,
    )


def _parse_field(text: str, name: str) -> datetime:
    try:
        return _parse_rfc3339(text)
    except ValueError:
        raise validation_error(name) from None


@dataclass
class CreateInvoiceRequest:
    """Body of a request registering an invoice."""

    partner_company_id: str = ""
    paid_due_date: str = ""
    paid_amount: int = 0

    @classmethod
    def from_json(cls, payload: Any) -> "CreateInvoiceRequest":
        """Build the request from a decoded JSON body; absent fields keep empty values."""
        if not isinstance(payload, Mapping):
            raise validation_error("request")

        partner_company_id = payload.get("partnerCompanyID", "")
        if not isinstance(partner_company_id, str):
            raise validation_error("partnerCompanyID")
        paid_due_date = payload.get("paidDueDate", "")
        if not isinstance(paid_due_date, str):
            raise validation_error("paidDueDate")
        paid_amount = payload.get("paidAmount", 0)
        if isinstance(paid_amount, bool) or not isinstance(paid_amount, int):
            raise validation_error("paidAmount")

        return cls(
            partner_company_id=partner_company_id,
            paid_due_date=paid_due_date,
            paid_amount=paid_amount,
        )

    def parse_paid_due_date(self) -> datetime:
        """The due date as a datetime; a validation AppError unless it is RFC 3339."""
        return _parse_field(self.paid_due_date, "paidDueDate")


@dataclass
class GetInvoicesRequest:
    """Query of a request listing invoices."""

    start_date: str = ""
    end_date: str = ""

    @classmethod
    def from_query(cls, args: Mapping[str, str]) -> "GetInvoicesRequest":
        """Build the request from query-string arguments."""
        return cls(
            start_date=args.get("startDate", "") or "",
            end_date=args.get("endDate", "") or "",
        )

    def date_range(self) -> Tuple[Optional[datetime], Optional[datetime]]:
        """The start and end of the range; an empty bound is None."""
        start = _parse_field(self.start_date, "startDate") if self.start_date else None
        end = _parse_field(self.end_date, "endDate") if self.end_date else None
        return start, end