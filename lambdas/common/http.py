# lambdas/common/http.py
import base64
import json
from typing import Optional


def build_response(status_code: int, body: dict, allowed_origin: str = "*") -> dict:
    """Helper function to build the API Gateway proxy response."""
    return {
        'statusCode': status_code,
        'headers': {
            'Content-Type': 'application/json',
            'Access-Control-Allow-Origin': allowed_origin
        },
        'body': json.dumps(body)
    }


def get_http_method(event: dict) -> Optional[str]:
    """Reads the method from either a REST API (v1) or an HTTP API (v2) event."""
    method = event.get('httpMethod')
    if not method:
        method = event.get('requestContext', {}).get('http', {}).get('method')
    return method.upper() if method else None


def get_body(event: dict) -> str:
    """Returns the request body as text, decoding it if API Gateway base64-encoded it."""
    body = event.get('body') or ""
    if event.get('isBase64Encoded') and body:
        body = base64.b64decode(body).decode('utf-8')
    return body


def get_query_params(event: dict) -> dict:
    return event.get('queryStringParameters') or {}
