# lambdas/get_dashboard/app.py
import json
from dataclasses import dataclass

from lambdas.common.http import build_response
from lambdas.common.sales_table import SalesTable
from lambdas.common.settings import AppSettings, get_settings
from lambdas.get_dashboard.request_parser import UnauthorizedError, authorize_request
from lambdas.get_dashboard.summary import project_sale, summarize_sales


@dataclass
class DashboardClients:
    settings: AppSettings
    sales_table: SalesTable


# Initialize resources once for Lambda container reuse
CLIENTS = DashboardClients(settings=get_settings(), sales_table=SalesTable.from_settings(get_settings()))


def get_dashboard(event: dict, clients: DashboardClients) -> dict:
    """
    Orchestrates auth, querying, and aggregation for the sales dashboard.
    """
    settings = clients.settings
    origin = settings.allowed_origin

    # --- 1. Check the dashboard key before touching any data ---
    try:
        authorize_request(event, settings.dashboard_secret_key)
    except UnauthorizedError as e:
        print(f"⚠️ Dashboard request rejected: {e}")
        return build_response(401, {'error': str(e)}, origin)

    try:
        print("📊 Dashboard data request received")

        # --- 2. Query the most recent sales ---
        items = clients.sales_table.recent_sales(settings.dashboard_limit)

        # --- 3. Project and aggregate ---
        recent_sales = [
            project_sale(item, settings.default_currency, settings.display_timezone)
            for item in items
        ]
        summary = summarize_sales(items)
        print(f"✅ Summarized {summary['totalSales']} sales.")

        return build_response(200, {'summary': summary, 'recentSales': recent_sales}, origin)

    except Exception as e:
        print(f"❌ Dashboard Function Error: {e}")
        return build_response(500, {
            'error': 'Failed to fetch dashboard data',
            'message': str(e),
        }, origin)


def handler(event: dict, context: object) -> dict:
    """
    API Gateway handler backing the sales dashboard UI.
    """
    print(f"Received event: {json.dumps(event.get('requestContext', {}), default=str)}")
    return get_dashboard(event, CLIENTS)
