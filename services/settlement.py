"""
Settles an advance payment: tiered discount, gateway routing and currency conversion.
The discount schedule and conversion rates are plain data tables; compute_settlement is
pure, settle adds input checks, the audit trail and a transaction id.
"""
from __future__ import annotations

import logging
import uuid
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING

from schemas.payment import PaymentOutcome

if TYPE_CHECKING:
    from services.collaborators import AuditLog

logger = logging.getLogger(__name__)

DOMESTIC_GATEWAY = "DomesticGateway"
USD_GATEWAY = "USDGateway"
INTERNATIONAL_GATEWAY = "InternationalGateway"

# (exclusive lower bound, currency -> rate), highest tier first. Unlisted currencies get 0.
DISCOUNT_SCHEDULE: list[tuple[Decimal, dict[str, Decimal]]] = [
    (
        Decimal("1000"),
        {"USD": Decimal("0.05"), "EUR": Decimal("0.04"), "GBP": Decimal("0.03")},
    ),
    (
        Decimal("500"),
        {"USD": Decimal("0.02"), "AUD": Decimal("0.015")},
    ),
]

CONVERSION_RATES: dict[str, Decimal] = {
    "EUR": Decimal("1.1"),
    "GBP": Decimal("1.3"),
    "AUD": Decimal("0.7"),
    "INR": Decimal("0.012"),
}

# Only these are multiplied through CONVERSION_RATES on the international route
CONVERTED_CURRENCIES = frozenset({"EUR", "GBP"})
INR_SURCHARGE = Decimal("10")


class PaymentError(ValueError):
    pass


class InvalidPayment(PaymentError):
    pass


class UnsupportedCurrency(PaymentError):
    pass


def parse_amount(value) -> Decimal | None:
    """Decimal for a finite numeric value, None for anything unusable."""
    if value is None:
        return None
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    return amount if amount.is_finite() else None


def normalize_currency(currency: str | None) -> str:
    return (currency or "").strip().upper()


def discount_rate(amount: Decimal, currency: str) -> Decimal:
    """Rate of the first tier whose floor the amount exceeds; 0 below every tier."""
    currency = normalize_currency(currency)
    for floor, rates in DISCOUNT_SCHEDULE:
        if amount > floor:
            return rates.get(currency, Decimal("0"))
    return Decimal("0")


def compute_settlement(
    amount: Decimal,
    currency: str = "GBP",
    international: bool = False,
) -> tuple[Decimal, str, Decimal]:
    """
    Return (final_amount, gateway, discount) for a positive amount.
    Raises UnsupportedCurrency when an international payment has no route for its currency.
    """
    currency = normalize_currency(currency)
    discount = amount * discount_rate(amount, currency)
    final_amount = amount - discount

    if not international:
        return final_amount, DOMESTIC_GATEWAY, discount
    if currency == "USD":
        return final_amount, USD_GATEWAY, discount
    if currency in CONVERTED_CURRENCIES:
        return final_amount * CONVERSION_RATES[currency], INTERNATIONAL_GATEWAY, discount
    if currency == "INR":
        return final_amount + INR_SURCHARGE, INTERNATIONAL_GATEWAY, discount
    if currency in CONVERSION_RATES:
        # AUD is routed internationally but charged unconverted
        return final_amount, INTERNATIONAL_GATEWAY, discount
    raise UnsupportedCurrency(f"Unsupported currency: {currency or '<blank>'}")


def settle(
    card_number: str,
    card_expiry: str,
    security_code: str,
    amount: Decimal | int | str | None,
    currency: str = "GBP",
    international: bool = False,
    audit: AuditLog | None = None,
) -> PaymentOutcome:
    """
    Validate the card details, settle the amount and issue a transaction id.
    No money moves; the gateway is a stub.
    """
    def _audit(message: str) -> None:
        if audit is not None:
            audit.log(message)
        else:
            logger.info(message)

    amount = parse_amount(amount)
    if (
        not (card_number or "").strip()
        or not (card_expiry or "").strip()
        or amount is None
        or amount <= 0
    ):
        _audit("Invalid payment details.")
        raise InvalidPayment("Invalid payment details.")

    currency = normalize_currency(currency)
    try:
        final_amount, gateway, discount = compute_settlement(amount, currency, international)
    except UnsupportedCurrency:
        _audit(f"Unsupported currency: {currency}")
        raise

    _audit(f"Applying discount of {discount}. Final amount: {final_amount}")
    if gateway == INTERNATIONAL_GATEWAY and currency in CONVERTED_CURRENCIES:
        _audit("Converting payment to USD for international transaction.")
    elif gateway == INTERNATIONAL_GATEWAY and currency == "INR":
        _audit("INR transactions incur additional conversion fees.")
    _audit(f"Processing payment through {gateway}.")

    return PaymentOutcome(
        transaction_id=str(uuid.uuid4()),
        final_amount=final_amount,
        gateway=gateway,
        discount=discount,
    )
