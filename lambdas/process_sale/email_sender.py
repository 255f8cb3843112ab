# lambdas/process_sale/email_sender.py
import re

from botocore.exceptions import BotoCoreError, ClientError

from lambdas.common.models import EmailResult
from lambdas.process_sale.formatter import format_audit_html, format_audit_text, format_subject

_TAG_UNSAFE = re.compile(r"[^a-zA-Z0-9\-_]")


def sanitize_tag_value(order_id: str) -> str:
    """SES message tags only accept letters, digits, '-' and '_'."""
    return _TAG_UNSAFE.sub("_", order_id)


def send_audit_email(ses, sender: str, brand_name: str, customer_email: str, customer_name: str,
                     business_url: str, audit_content: str, order_id: str) -> EmailResult:
    """
    Sends the audit to the customer through SES.

    Never raises for delivery problems; the outcome is returned as an EmailResult.
    """
    print(f"📧 Sending audit to: {customer_email}")

    html_body = format_audit_html(customer_name, business_url, audit_content, brand_name, order_id)
    text_body = format_audit_text(business_url, audit_content, brand_name)

    try:
        response = ses.send_email(
            Destination={'ToAddresses': [customer_email]},
            Message={
                'Body': {'Html': {'Charset': "UTF-8", 'Data': html_body}, 'Text': {'Charset': "UTF-8", 'Data': text_body}},
                'Subject': {'Charset': "UTF-8", 'Data': format_subject(business_url, brand_name)},
            },
            Source=f"{brand_name} <{sender}>",
            Tags=[{'Name': 'audit', 'Value': sanitize_tag_value(order_id)}],
        )
    except ClientError as e:
        message = e.response['Error']['Message']
        print(f"❌ Critical email failure, AWS SES error: {message}")
        return EmailResult(success=False, error=message)
    except BotoCoreError as e:
        print(f"❌ Critical email failure: {e}")
        return EmailResult(success=False, error=str(e))

    email_id = response.get('MessageId')
    print(f"✅ Email delivered! SES MessageId: {email_id}")
    return EmailResult(success=True, email_id=email_id)
