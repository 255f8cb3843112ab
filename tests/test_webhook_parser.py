# tests/test_webhook_parser.py
import pytest
from unittest.mock import patch

from lambdas.process_sale.webhook_parser import (
    NOT_PROVIDED,
    InvalidRequestError,
    derive_amount,
    normalize_business_url,
    parse_form_body,
    parse_sale,
)


def test_parse_form_body_decodes_gumroad_fields():
    body = "email=jane%40acme.co&sale_id=abc123&custom_fields%5Bwebsite%5D=https%3A%2F%2Facme.co&price=4999"
    fields = parse_form_body(body)

    assert fields["email"] == "jane@acme.co"
    assert fields["sale_id"] == "abc123"
    assert fields["custom_fields[website]"] == "https://acme.co"
    assert fields["price"] == "4999"


@pytest.mark.parametrize("body", ["", "   "])
def test_parse_form_body_rejects_empty_bodies(body):
    with pytest.raises(InvalidRequestError):
        parse_form_body(body)


@pytest.mark.parametrize("body, expected", [
    ("email=a%40b.co&sale_id=S-1&price=4999&", {"email": "a@b.co", "sale_id": "S-1", "price": "4999"}),
    ("email=a%40b.co&&price=1", {"email": "a@b.co", "price": "1"}),
    ("email=a%40b.co&sale_id=S-1&test", {"email": "a@b.co", "sale_id": "S-1", "test": ""}),
])
def test_parse_form_body_is_lenient_like_a_browser(body, expected):
    assert parse_form_body(body) == expected


@pytest.mark.parametrize("raw, expected", [
    ("https://www.example.com", "example.com"),
    ("http://example.com/pricing", "example.com/pricing"),
    ("www.example.com", "example.com"),
    ("example.com", "example.com"),
    (NOT_PROVIDED, NOT_PROVIDED),
])
def test_normalize_business_url(raw, expected):
    assert normalize_business_url(raw) == expected
    # Normalizing twice changes nothing
    assert normalize_business_url(normalize_business_url(raw)) == expected


def test_derive_amount():
    assert derive_amount("4999") == "49.99"
    assert derive_amount("100") == "1.00"
    assert derive_amount(None) == "0.00"
    assert derive_amount("") == "0.00"


def test_derive_amount_rejects_non_integer_price():
    with pytest.raises(InvalidRequestError):
        derive_amount("49.99")


def test_parse_sale_prefers_custom_website_and_sale_id():
    body = (
        "email=jane%40acme.co&sale_id=S-1&resource%5Bid%5D=R-1"
        "&custom_fields%5Bwebsite%5D=https%3A%2F%2Fwww.acme.co&website=other.com"
        "&price=4999&currency=USD"
    )
    sale = parse_sale(body)

    assert sale.order_id == "S-1"
    assert sale.customer_email == "jane@acme.co"
    assert sale.customer_name == "jane"
    assert sale.business_url == "acme.co"
    assert sale.amount == "49.99"
    assert sale.currency == "USD"


def test_parse_sale_falls_back_to_resource_id_and_plain_website():
    sale = parse_sale("email=bob%40shop.io&resource%5Bid%5D=R-77&website=www.shop.io")

    assert sale.order_id == "R-77"
    assert sale.business_url == "shop.io"


def test_parse_sale_applies_defaults():
    sale = parse_sale("email=bob%40shop.io", default_currency="ZAR")

    assert sale.business_url == NOT_PROVIDED
    assert sale.amount == "0.00"
    assert sale.currency == "ZAR"
    assert sale.order_id.startswith("ORD-")


def test_generated_order_ids_differ_between_calls():
    with patch("lambdas.process_sale.webhook_parser.time.time", side_effect=[1700000000.000, 1700000000.250]):
        first = parse_sale("email=bob%40shop.io").order_id
        second = parse_sale("email=bob%40shop.io").order_id

    assert first == "ORD-1700000000000"
    assert second == "ORD-1700000000250"
    assert first != second


def test_parse_sale_requires_email():
    with pytest.raises(InvalidRequestError):
        parse_sale("sale_id=S-1&price=100")


def test_derive_amount_is_exact_for_large_prices():
    assert derive_amount("123456789012345678901") == "1234567890123456789.01"
    assert derive_amount("5") == "0.05"
    assert derive_amount("-250") == "-2.50"


def test_derive_amount_rejects_prices_too_long_to_store():
    assert derive_amount("9" * 38) == "9" * 36 + ".99"
    with pytest.raises(InvalidRequestError):
        derive_amount("9" * 39)
    with pytest.raises(InvalidRequestError):
        derive_amount("1" * 400)


def test_parse_sale_reads_dotted_resource_id():
    sale = parse_sale("email=bob%40shop.io&resource.id=R-9")

    assert sale.order_id == "R-9"


def test_bracketed_resource_id_wins_over_dotted():
    sale = parse_sale("email=bob%40shop.io&resource.id=R-9&resource%5Bid%5D=R-1")

    assert sale.order_id == "R-1"


def test_field_names_are_not_accepted_in_place_of_form_keys():
    sale = parse_sale("email=bob%40shop.io&resource_id=R-5&custom_website=acme.co")

    assert sale.order_id.startswith("ORD-")
    assert sale.business_url == NOT_PROVIDED
