# tests/test_audit_generator.py
import io
import json
import unittest
from unittest.mock import MagicMock

from botocore.exceptions import ClientError, EndpointConnectionError

from lambdas.process_sale.audit_generator import BedrockAuditGenerator


def _bedrock_reply(payload: dict) -> dict:
    """Mimics the invoke_model response, whose body is a streaming object."""
    return {"body": io.BytesIO(json.dumps(payload).encode("utf-8"))}


class TestBedrockAuditGenerator(unittest.TestCase):

    def setUp(self):
        self.runtime = MagicMock()
        self.generator = BedrockAuditGenerator(self.runtime, "amazon.nova-micro-v1:0", brand_name="Acme Audits")

    def test_returns_nova_reply_text(self):
        self.runtime.invoke_model.return_value = _bedrock_reply({
            "output": {"message": {"content": [{"text": "  1. EXECUTIVE SUMMARY: automate invoicing.  "}]}}
        })

        audit = self.generator.generate_audit("example.com")

        self.assertEqual(audit, "1. EXECUTIVE SUMMARY: automate invoicing.")
        self.runtime.invoke_model.assert_called_once()

    def test_request_uses_prompt_sections_and_output_bound(self):
        self.runtime.invoke_model.return_value = _bedrock_reply({
            "output": {"message": {"content": [{"text": "ok"}]}}
        })

        self.generator.generate_audit("example.com")

        kwargs = self.runtime.invoke_model.call_args.kwargs
        self.assertEqual(kwargs["modelId"], "amazon.nova-micro-v1:0")
        body = json.loads(kwargs["body"])
        prompt = body["messages"][0]["content"][0]["text"]
        self.assertIn("example.com", prompt)
        self.assertIn("Acme Audits", prompt)
        for section in ("EXECUTIVE SUMMARY", "IDENTIFIED PROCESSES", "QUICK-WIN AUTOMATIONS",
                        "TECHNOLOGY RECOMMENDATIONS", "90-DAY ROADMAP", "ROI ANALYSIS"):
            self.assertIn(section, prompt)
        self.assertEqual(body["inferenceConfig"]["maxTokens"], 2500)

    def test_claude_models_get_anthropic_body(self):
        generator = BedrockAuditGenerator(self.runtime, "anthropic.claude-3-haiku-20240307-v1:0")
        self.runtime.invoke_model.return_value = _bedrock_reply({"content": [{"type": "text", "text": "claude audit"}]})

        self.assertEqual(generator.generate_audit("example.com"), "claude audit")
        body = json.loads(self.runtime.invoke_model.call_args.kwargs["body"])
        self.assertEqual(body["anthropic_version"], "bedrock-2023-05-31")
        self.assertEqual(body["max_tokens"], 2500)

    def test_service_error_falls_back_to_placeholder(self):
        self.runtime.invoke_model.side_effect = ClientError(
            {"Error": {"Code": "ThrottlingException", "Message": "Too many requests"},
             "ResponseMetadata": {"HTTPStatusCode": 429}},
            "InvokeModel",
        )

        audit = self.generator.generate_audit("example.com")

        self.assertTrue(audit)
        self.assertIn("example.com", audit)
        self.assertIn("being finalized", audit)

    def test_connection_error_falls_back_to_placeholder(self):
        self.runtime.invoke_model.side_effect = EndpointConnectionError(endpoint_url="https://bedrock-runtime")

        audit = self.generator.generate_audit("shop.io")

        self.assertEqual(audit, self.generator.generate_fallback_audit("shop.io"))

    def test_empty_reply_falls_back_to_placeholder(self):
        self.runtime.invoke_model.return_value = _bedrock_reply({"output": {"message": {"content": []}}})

        audit = self.generator.generate_audit("shop.io")

        self.assertIn("shop.io", audit)
        self.assertIn("being finalized", audit)


if __name__ == '__main__':
    unittest.main()
