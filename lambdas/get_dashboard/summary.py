# lambdas/get_dashboard/summary.py
"""
Projects stored sale items for display and aggregates the dashboard summary.
"""
from datetime import datetime, timezone
from decimal import Decimal
from zoneinfo import ZoneInfo


def format_timestamp(iso_string: str, display_timezone: str = "UTC") -> str:
    """
    Converts an ISO 8601 timestamp to "YYYY/MM/DD, HH:MM:SS" in the display timezone.
    Returns "N/A" when missing and the original string if parsing fails.
    """
    if not iso_string:
        return "N/A"
    try:
        dt_object = datetime.fromisoformat(str(iso_string).replace('Z', '+00:00'))
    except (ValueError, TypeError):
        return str(iso_string)
    if dt_object.tzinfo is None:
        dt_object = dt_object.replace(tzinfo=timezone.utc)
    tz = timezone.utc if display_timezone.upper() == "UTC" else ZoneInfo(display_timezone)
    return dt_object.astimezone(tz).strftime('%Y/%m/%d, %H:%M:%S')


def project_sale(item: dict, default_currency: str = "ZAR", display_timezone: str = "UTC") -> dict:
    """Shapes one DynamoDB sale item for the dashboard, filling display defaults."""
    order_id = item.get("orderId")
    amount = item.get("amount")
    return {
        "id": order_id or "N/A",
        "orderId": order_id or "N/A",
        "customerEmail": item.get("customerEmail") or "N/A",
        "businessUrl": item.get("businessUrl") or "N/A",
        # DynamoDB numbers come back as Decimal, which json cannot encode
        "amount": float(amount) if amount is not None else "N/A",
        "currency": item.get("currency") or default_currency,
        "auditGenerated": bool(item.get("auditGenerated", False)),
        "emailDelivered": bool(item.get("emailDelivered", False)),
        "timestamp": format_timestamp(item.get("timestamp"), display_timezone),
    }


def summarize_sales(items: list[dict]) -> dict:
    total_revenue = Decimal("0")
    successful_deliveries = 0
    for item in items:
        if item.get("amount"):
            total_revenue += Decimal(str(item["amount"]))
        if item.get("emailDelivered") is True:
            successful_deliveries += 1

    total_sales = len(items)
    # Percentage with one decimal; a plain 0 when there is nothing to divide by
    success_rate = f"{successful_deliveries / total_sales * 100:.1f}" if total_sales > 0 else 0

    return {
        "totalRevenue": f"{total_revenue:.2f}",
        "totalSales": total_sales,
        "successRate": success_rate,
        "successfulDeliveries": successful_deliveries,
        "lastUpdated": datetime.now(timezone.utc).isoformat(),
    }
