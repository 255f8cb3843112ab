# run_live.py
import json
import os
import boto3
from botocore.exceptions import ClientError

from cli.push_sale import build_sale_body
from lambdas.common.settings import get_settings


def setup_sales_table():
    """Checks for and creates the sales table and its timestamp index if they don't exist."""
    settings = get_settings()
    dynamodb = boto3.resource('dynamodb', region_name=settings.aws_region)

    table_name = settings.sales_table_name
    try:
        dynamodb.meta.client.describe_table(TableName=table_name)
        print(f"DynamoDB table '{table_name}' already exists.")
    except ClientError as e:
        if e.response['Error']['Code'] == 'ResourceNotFoundException':
            print(f"DynamoDB table '{table_name}' not found. Creating it now...")
            dynamodb.create_table(
                TableName=table_name,
                KeySchema=[{'AttributeName': 'orderId', 'KeyType': 'HASH'}],
                AttributeDefinitions=[
                    {'AttributeName': 'orderId', 'AttributeType': 'S'},
                    {'AttributeName': 'gsi1pk', 'AttributeType': 'S'},
                    {'AttributeName': 'timestamp', 'AttributeType': 'S'}
                ],
                GlobalSecondaryIndexes=[{
                    'IndexName': settings.sales_index_name,
                    'KeySchema': [
                        {'AttributeName': 'gsi1pk', 'KeyType': 'HASH'},
                        {'AttributeName': 'timestamp', 'KeyType': 'RANGE'}
                    ],
                    'Projection': {'ProjectionType': 'ALL'}
                }],
                BillingMode='PAY_PER_REQUEST'
            )
            dynamodb.Table(table_name).wait_until_exists()
            print(f"Table '{table_name}' created successfully.")
        else: raise e


def run_live():
    """Runs both handlers using your live AWS credentials (Bedrock, SES and DynamoDB)."""
    print("--- Starting LIVE Run of the sale handlers ---")

    try:
        setup_sales_table()
    except ClientError as e:
        print(f"Could not complete setup. Aborting run. Error: {e}")
        return

    # Imported here so the handler modules build their clients after the table exists
    from lambdas.process_sale.app import handler as process_sale_handler
    from lambdas.get_dashboard.app import handler as dashboard_handler

    # IMPORTANT: SES in sandbox mode only delivers to verified addresses
    recipient = os.environ.get("TEST_CUSTOMER_EMAIL", get_settings().sender_email)
    sale_event = {
        "requestContext": {"http": {"method": "POST"}},
        "body": build_sale_body(recipient, "https://www.example.com", 4999),
        "isBase64Encoded": False,
    }

    print("\n--- Invoking process_sale handler (this will call AWS Bedrock, SES and DynamoDB) ---")
    result = process_sale_handler(sale_event, {})
    print(json.dumps(json.loads(result['body']), indent=2))

    print("\n--- Invoking get_dashboard handler ---")
    dashboard_event = {
        "requestContext": {"http": {"method": "GET"}},
        "queryStringParameters": {"key": get_settings().dashboard_secret_key or ""},
    }
    result = dashboard_handler(dashboard_event, {})
    print(f"Status Code: {result['statusCode']}")
    print(json.dumps(json.loads(result['body']), indent=2))


if __name__ == "__main__":
    run_live()
