# lambdas/process_sale/webhook_parser.py
import re
import time
from urllib.parse import parse_qsl

from pydantic import ValidationError

from lambdas.common.models import ParsedSale, WebhookSale

NOT_PROVIDED = "Not provided"
MAX_PRICE_DIGITS = 38
_URL_PREFIX = re.compile(r"^(https?://)?(www\.)?")


class InvalidRequestError(ValueError):
    """Custom exception for webhook bodies we cannot process."""
    pass


def parse_form_body(body: str) -> dict:
    """
    Parses a URL-encoded body into a flat dict. Repeated keys keep the last value.
    Parsing is lenient: stray '&' separators are skipped and a bare key gets an empty value.

    Raises:
        InvalidRequestError: If the body is empty.
    """
    if not body or not body.strip():
        raise InvalidRequestError("Request body cannot be empty.")
    pairs = parse_qsl(body.strip(), keep_blank_values=True)
    return dict(pairs)


def normalize_business_url(url: str) -> str:
    """Strips an optional http(s) scheme and an optional 'www.' prefix."""
    return _URL_PREFIX.sub("", url.strip(), count=1)


def derive_order_id(sale: WebhookSale) -> str:
    """Prefers sale_id, then the nested resource id, else a millisecond timestamp."""
    order_id = sale.sale_id or sale.resource_id or sale.resource_dot_id
    if order_id:
        return order_id
    return f"ORD-{int(time.time() * 1000)}"


def derive_amount(price: str | None) -> str:
    """
    Converts an integer minor-unit price to a two-decimal string, "4999" -> "49.99".
    A missing price is "0.00". Integer arithmetic only, so large prices stay exact.
    """
    if not price:
        return "0.00"
    try:
        cents = int(price.strip())
    except ValueError as e:
        raise InvalidRequestError(f"Invalid price: {price!r}") from e
    # DynamoDB numbers hold at most 38 significant digits
    if len(str(abs(cents))) > MAX_PRICE_DIGITS:
        raise InvalidRequestError(f"Price has more than {MAX_PRICE_DIGITS} digits")
    units, minor = divmod(abs(cents), 100)
    sign = "-" if cents < 0 else ""
    return f"{sign}{units}.{minor:02d}"


def parse_sale(body: str, default_currency: str = "ZAR") -> ParsedSale:
    """
    Parses the webhook body and derives the normalized sale attributes.

    Raises:
        InvalidRequestError: If the body cannot be parsed or lacks a customer email.
    """
    fields = parse_form_body(body)
    try:
        sale = WebhookSale.model_validate(fields)
    except ValidationError as e:
        raise InvalidRequestError(f"Invalid data format: {e}") from e

    email = (sale.email or "").strip()
    if not email:
        raise InvalidRequestError("Missing required field: email")

    business_url = normalize_business_url(sale.custom_website or sale.website or NOT_PROVIDED)

    return ParsedSale(
        order_id=derive_order_id(sale),
        customer_email=email,
        customer_name=email.split("@")[0],
        business_url=business_url,
        amount=derive_amount(sale.price),
        currency=sale.currency or default_currency,
    )
