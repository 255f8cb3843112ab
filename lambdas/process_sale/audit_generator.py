# lambdas/process_sale/audit_generator.py
import json
from pathlib import Path
from typing import Any, Dict, Optional

from botocore.exceptions import BotoCoreError, ClientError

PROMPT_PATH = Path(__file__).parent / "audit_prompt.txt"


class BedrockAuditGenerator:
    """
    Uses AWS Bedrock to write an automation audit for a customer's business website.

    The request body is built for the configured model family (Amazon Nova or
    Anthropic Claude), so the model can be swapped through BEDROCK_MODEL_ID alone.
    """
    def __init__(self, bedrock_runtime, model_id: str, brand_name: str = "Cyrnel Origin",
                 max_tokens: int = 2500, temperature: float = 0.7):
        self.bedrock_runtime = bedrock_runtime
        self.model_id = model_id
        self.brand_name = brand_name
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.prompt_template = PROMPT_PATH.read_text()

    def generate_audit(self, business_url: str) -> str:
        """
        Returns the audit text for business_url.

        Never raises: one invoke_model call is made and any failure falls back
        to a deterministic placeholder naming the business URL.
        """
        print(f"🤖 Analyzing business website: {business_url}")
        user_prompt = self.prompt_template.format(brand_name=self.brand_name, business_url=business_url)
        request_body = self._build_request_body(user_prompt)

        try:
            response = self.bedrock_runtime.invoke_model(
                modelId=self.model_id,
                body=json.dumps(request_body),
                accept="application/json",
                contentType="application/json",
            )
            response_body = json.loads(response["body"].read())

            audit_text = self._extract_text_from_response(response_body)
            if not audit_text:
                raise ValueError(f"Could not find audit text in Bedrock response: {response_body}")

            print("✅ AI audit generated successfully")
            return audit_text.strip()

        except (BotoCoreError, ClientError, ValueError, KeyError, IndexError, TypeError) as e:
            print(f"❌ Audit generation failed: {e}. Falling back to placeholder audit.")
            return self.generate_fallback_audit(business_url)

    def _build_request_body(self, user_prompt: str) -> Dict[str, Any]:
        """Returns the JSON payload required by the current model family."""
        system_prompt = (
            f"You are a senior automation consultant at {self.brand_name}. "
            "Write clear, practical audits for small business owners."
        )

        if self.model_id.startswith("amazon.nova"):
            return {
                "system": [{"text": system_prompt}],
                "messages": [{"role": "user", "content": [{"text": user_prompt}]}],
                "inferenceConfig": {
                    "maxTokens": self.max_tokens,
                    "temperature": self.temperature,
                },
            }
        return {
            "system": system_prompt,
            "messages": [{"role": "user", "content": [{"type": "text", "text": user_prompt}]}],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "anthropic_version": "bedrock-2023-05-31",
        }

    @staticmethod
    def _extract_text_from_response(body: Dict[str, Any]) -> Optional[str]:
        # Amazon Nova
        if "output" in body:
            blocks = body.get("output", {}).get("message", {}).get("content", [])
            for block in blocks:
                if isinstance(block, dict) and block.get("text"):
                    return block["text"]

        # Anthropic Claude
        if isinstance(body.get("content"), list) and body["content"]:
            first = body["content"][0]
            if isinstance(first, dict) and first.get("text"):
                return first["text"]
        return None

    def generate_fallback_audit(self, business_url: str) -> str:
        """Placeholder used when Bedrock cannot be reached or its reply cannot be read."""
        return (
            f"**AI-Powered Business Automation Audit for {business_url}**\n\n"
            f"Thank you for choosing {self.brand_name}. "
            "Your audit is being finalized and will be delivered shortly."
        )
