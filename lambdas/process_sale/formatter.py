# lambdas/process_sale/formatter.py
from html import escape


def _build_html_styles() -> str:
    """Returns the CSS styles for the HTML email."""
    return """
    <style>
        body { font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, Helvetica, Arial, sans-serif; line-height: 1.6; color: #24292e; max-width: 600px; margin: auto; padding: 20px; }
        h1 { color: #4f46e5; font-size: 26px; }
        .audit { background-color: #f8fafc; padding: 20px; border-left: 4px solid #4f46e5; }
        .footer { font-size: 13px; color: #6a737d; margin-top: 24px; }
    </style>
    """


def format_audit_html(customer_name: str, business_url: str, audit_content: str,
                      brand_name: str, order_id: str) -> str:
    """Builds the HTML audit email. Newlines in the audit become <br> tags."""
    # Use html.escape on everything that came from the webhook or the model
    safe_audit = escape(audit_content).replace("\n", "<br>")

    return f"""<!DOCTYPE html>
    <html><head><title>Your AI-Powered Business Audit</title>{_build_html_styles()}</head>
    <body>
        <h1>🚀 Your AI-Powered Business Audit</h1>
        <p>Hi {escape(customer_name)},</p>
        <p>Your automation analysis for <strong>{escape(business_url)}</strong> is ready.</p>
        <div class="audit">{safe_audit}</div>
        <p>Best regards,<br>The {escape(brand_name)} Team</p>
        <div class="footer">Order ID: {escape(order_id)}</div>
    </body></html>
    """


def format_audit_text(business_url: str, audit_content: str, brand_name: str) -> str:
    """Creates the plain text version of the audit email."""
    lines = [
        f"{brand_name.upper()} AUDIT",
        "",
        f"For: {business_url}",
        "",
        audit_content,
    ]
    return "\n".join(lines)


def format_subject(business_url: str, brand_name: str) -> str:
    return f"Your AI-Powered Business Automation Audit for {business_url} | {brand_name}"
