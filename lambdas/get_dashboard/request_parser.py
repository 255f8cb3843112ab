# lambdas/get_dashboard/request_parser.py
import hmac
from typing import Optional

from lambdas.common.http import get_query_params


class UnauthorizedError(Exception):
    """Raised when the dashboard key is missing or wrong."""
    pass


def authorize_request(event: dict, expected_key: Optional[str]) -> None:
    """
    Checks the `key` query parameter against the configured dashboard secret.

    Raises:
        UnauthorizedError: If the key does not match exactly, or no secret is configured.
    """
    supplied_key = get_query_params(event).get('key')
    if not expected_key or not supplied_key:
        raise UnauthorizedError('Unauthorized. Invalid or missing dashboard key.')
    if not hmac.compare_digest(supplied_key.encode('utf-8'), expected_key.encode('utf-8')):
        raise UnauthorizedError('Unauthorized. Invalid or missing dashboard key.')
