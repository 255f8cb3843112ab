import os
import requests
import time
from urllib.parse import urlencode
from dotenv import load_dotenv

# Load environment variables from a .env file for local testing
load_dotenv()

# The deployed /process-sale endpoint
API_ENDPOINT = os.environ.get("SALE_API")

def build_sale_body(email: str, website: str, price_cents: int, currency: str = "ZAR", sale_id: str | None = None) -> str:
    """
    Builds a form-encoded body shaped like a Gumroad sale ping.
    """
    fields = {
        "sale_id": sale_id or f"TEST-{int(time.time())}",
        "email": email,
        "custom_fields[website]": website,
        "price": str(price_cents),
        "currency": currency,
    }
    return urlencode(fields)

def send_sale_to_api(body: str):
    """
    Posts a form-encoded sale body to the API.
    """
    if not API_ENDPOINT:
        print("❌ ERROR: SALE_API environment variable not set. Please create a .env file.")
        return

    print("--- Attempting to send sale webhook ---")
    print(body)
    print("---------------------------------------")

    try:
        response = requests.post(
            API_ENDPOINT,
            data=body.encode('utf-8'),
            headers={'Content-Type': 'application/x-www-form-urlencoded'},
            timeout=60  # Bedrock and SES both run inside the request
        )
        response.raise_for_status()
        print("\n✅ Success! Sale webhook sent.")
        print(f"Status Code: {response.status_code}")
        print(f"Response Body: {response.json()}")

    except requests.exceptions.RequestException as e:
        print(f"\n❌ Failed to send sale webhook.")
        print(f"Error: {e}")

if __name__ == "__main__":
    print("--- Sale Webhook Test CLI ---")

    recipient = os.environ.get("TEST_CUSTOMER_EMAIL", "customer@example.com")
    sale_body = build_sale_body(recipient, "https://www.example.com", 4999)

    send_sale_to_api(sale_body)
