# lambdas/process_sale/app.py
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict

import boto3

from lambdas.common.http import build_response, get_body, get_http_method
from lambdas.common.models import SaleRecord
from lambdas.common.sales_table import SalesTable
from lambdas.common.settings import AppSettings, get_settings
from lambdas.process_sale.audit_generator import BedrockAuditGenerator
from lambdas.process_sale.email_sender import send_audit_email
from lambdas.process_sale.webhook_parser import parse_sale


@dataclass
class ServiceClients:
    """Everything a sale invocation talks to, built once per Lambda container."""
    settings: AppSettings
    audit_generator: BedrockAuditGenerator
    ses: Any
    sales_table: SalesTable


def build_clients(settings: AppSettings) -> ServiceClients:
    bedrock_runtime = boto3.client(service_name="bedrock-runtime", region_name=settings.aws_region)
    return ServiceClients(
        settings=settings,
        audit_generator=BedrockAuditGenerator(
            bedrock_runtime,
            settings.bedrock_model_id,
            brand_name=settings.brand_name,
            max_tokens=settings.audit_max_tokens,
            temperature=settings.audit_temperature,
        ),
        ses=boto3.client('ses', region_name=settings.aws_region),
        sales_table=SalesTable.from_settings(settings),
    )


# initialize all clients and load config outside of handler so warm invocations reuse them
CLIENTS = build_clients(get_settings())


def process_sale(event: Dict[str, Any], clients: ServiceClients) -> Dict[str, Any]:
    settings = clients.settings
    origin = settings.allowed_origin

    # 1. Validate request
    if get_http_method(event) != 'POST':
        return build_response(405, {'error': 'Method not allowed'}, origin)

    # 2. Parse the webhook and derive the sale attributes
    try:
        sale = parse_sale(get_body(event), default_currency=settings.default_currency)
    except ValueError as e:
        # InvalidRequestError, or a body that is not valid base64/UTF-8
        print(f"❌ Parse error: {e}")
        return build_response(400, {'error': 'Invalid data format'}, origin)
    print(f"✅ Processing order: {sale.order_id}")

    # 3. Generate the audit and email it
    audit_content = clients.audit_generator.generate_audit(sale.business_url)
    email_result = send_audit_email(
        clients.ses,
        settings.sender_email,
        settings.brand_name,
        sale.customer_email,
        sale.customer_name,
        sale.business_url,
        audit_content,
        sale.order_id,
    )

    # 4. Record the sale, whatever happened to the email
    record = SaleRecord(
        order_id=sale.order_id,
        customer_email=sale.customer_email,
        business_url=sale.business_url,
        amount=Decimal(sale.amount),
        currency=sale.currency,
        audit_generated=True,
        email_delivered=email_result.success,
    )
    try:
        clients.sales_table.put_sale(record)
    except Exception as e:
        # The email is already out; a failed write must not turn into a webhook retry
        print(f"⚠️ Sale log error (non-critical): {e!r}")

    # 5. Delivery failures are reported in the body, never as a transport error
    return build_response(200, {
        'success': email_result.success,
        'message': 'Audit delivered.' if email_result.success else 'Audit generated, check logs.',
        'order_id': sale.order_id,
        'logged_to_firebase': True,
    }, origin)


def handler(event: Dict[str, Any], context: object) -> Dict[str, Any]:
    """
    API Gateway handler for the payment platform's sale webhook.
    """
    print("🚀 Sale webhook received")
    return process_sale(event, CLIENTS)
