# lambdas/common/models.py
"""
Data models shared by the sale processor and the dashboard reader.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# Constant partition key of the index that sorts every sale by timestamp.
SALE_RECORD_PK = "SALE_RECORD"


class WebhookSale(BaseModel):
    """
    The fields we consume from a payment webhook form body.
    Every field is optional; the defaults are applied when deriving a ParsedSale.
    """
    model_config = ConfigDict(extra='ignore')

    email: Optional[str] = None
    sale_id: Optional[str] = None
    # Nested resource id, sent either bracketed or dotted
    resource_id: Optional[str] = Field(None, alias='resource[id]')
    resource_dot_id: Optional[str] = Field(None, alias='resource.id')
    custom_website: Optional[str] = Field(None, alias='custom_fields[website]')
    website: Optional[str] = None
    # Integer price in minor units, e.g. "4999" for 49.99
    price: Optional[str] = None
    currency: Optional[str] = None


@dataclass
class ParsedSale:
    """Normalized attributes derived from a webhook."""
    order_id: str
    customer_email: str
    customer_name: str
    business_url: str
    amount: str
    currency: str


@dataclass
class EmailResult:
    """Outcome of one email send: either an email id or an error message."""
    success: bool
    email_id: Optional[str] = None
    error: Optional[str] = None


@dataclass
class SaleRecord:
    """
    A persisted sale. Keyed by order_id, so writing the same order twice overwrites it.
    """
    order_id: str
    customer_email: str
    business_url: str
    amount: Decimal
    currency: str
    audit_generated: bool
    email_delivered: bool
    # Assigned when the record is built, right before the write.
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_item(self) -> dict:
        """Returns the DynamoDB item for this record."""
        return {
            "orderId": self.order_id,
            "customerEmail": self.customer_email,
            "businessUrl": self.business_url,
            "amount": self.amount,
            "currency": self.currency,
            "auditGenerated": self.audit_generated,
            "emailDelivered": self.email_delivered,
            "timestamp": self.timestamp,
            "gsi1pk": SALE_RECORD_PK,
        }
