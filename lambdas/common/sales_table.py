# lambdas/common/sales_table.py
import boto3
from boto3.dynamodb.conditions import Key

from lambdas.common.models import SALE_RECORD_PK, SaleRecord


class SalesTable:
    """
    Thin wrapper around the DynamoDB table holding one item per sale, keyed by orderId.
    """
    def __init__(self, table, index_name: str = "SortByTimestamp"):
        self.table = table
        self.index_name = index_name

    @classmethod
    def from_settings(cls, settings) -> "SalesTable":
        dynamodb = boto3.resource('dynamodb', region_name=settings.aws_region)
        return cls(dynamodb.Table(settings.sales_table_name), settings.sales_index_name)

    def put_sale(self, record: SaleRecord) -> None:
        """
        Upserts a sale. put_item replaces any existing item with the same orderId.
        Errors are left for the caller to handle.
        """
        self.table.put_item(Item=record.to_item())
        print(f"Saved sale {record.order_id} to DynamoDB.")

    def recent_sales(self, limit: int = 50) -> list[dict]:
        """Returns up to `limit` sale items, newest first."""
        response = self.table.query(
            IndexName=self.index_name,
            KeyConditionExpression=Key('gsi1pk').eq(SALE_RECORD_PK),
            ScanIndexForward=False,  # Sort by timestamp descending (newest first)
            Limit=limit
        )
        return response.get('Items', [])
