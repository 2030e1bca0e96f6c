"""Tests for the AI-assist client and endpoints.

Outbound completion calls are mocked with respx.
"""

import json
from datetime import datetime

import httpx
import pytest
import respx

from bid_management import models
from bid_management.ai import AIClient
from bid_management.database.base import TENDERS
from bid_management.errors import AIServiceError
from bid_management.tests.conftest import make_tender

COMPLETIONS_URL = "https://api.openai.com/v1/chat/completions"


def completion(content: str) -> dict:
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "gpt-4o",
        "choices": [
            {"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"}
        ],
        "usage": {"prompt_tokens": 10, "completion_tokens": 10, "total_tokens": 20},
    }


class TestAIClient:
    @respx.mock
    def test_analyze_relays_json_and_uses_json_mode(self):
        payload = {"score": 130, "reasons": ["Strong fit"], "recommendations": [], "extra": "kept"}
        route = respx.post(COMPLETIONS_URL).mock(
            return_value=httpx.Response(200, json=completion(json.dumps(payload)))
        )

        result = AIClient(api_key="k").analyze_tender("Road works", ["civil", "roads"])

        assert result == payload
        sent = json.loads(route.calls.last.request.content)
        assert sent["model"] == "gpt-4o"
        assert sent["response_format"] == {"type": "json_object"}
        assert "civil, roads" in sent["messages"][1]["content"]

    @respx.mock
    def test_upstream_error_is_not_retried(self):
        route = respx.post(COMPLETIONS_URL).mock(
            return_value=httpx.Response(500, json={"error": {"message": "overloaded"}})
        )

        with pytest.raises(AIServiceError, match="Failed to analyze tender match"):
            AIClient(api_key="k").analyze_tender("x", [])

        assert route.call_count == 1

    def test_missing_api_key(self):
        with pytest.raises(AIServiceError, match="OPENAI_API_KEY"):
            AIClient(api_key=None).optimize_bid("draft", "reqs")

    @respx.mock
    def test_invalid_json_response(self):
        respx.post(COMPLETIONS_URL).mock(return_value=httpx.Response(200, json=completion("not json")))

        with pytest.raises(AIServiceError, match="invalid JSON"):
            AIClient(api_key="k").assess_risk("x", datetime(2030, 1, 1), 100)

    @respx.mock
    def test_pricing_prompt_uses_rupees(self):
        route = respx.post(COMPLETIONS_URL).mock(
            return_value=httpx.Response(200, json=completion('{"suggestedPrice": 1}'))
        )

        AIClient(api_key="k").suggest_pricing("Bridge", 500000)

        sent = json.loads(route.calls.last.request.content)
        assert "₹5,000.00" in sent["messages"][1]["content"]
        assert "Not available" in sent["messages"][1]["content"]

    @respx.mock
    def test_generate_bid_is_plain_text(self):
        route = respx.post(COMPLETIONS_URL).mock(
            return_value=httpx.Response(200, json=completion("Dear Sir, ..."))
        )

        text = AIClient(api_key="k").generate_bid("Tender", "We build roads", ["EMD", "ISO"])

        assert text == "Dear Sir, ..."
        assert "response_format" not in json.loads(route.calls.last.request.content)


class TestAIEndpoints:
    def test_routes_registered(self, app):
        paths = {route.path for route in app.routes}
        assert {
            "/api/ai/analyze-tender",
            "/api/ai/generate-bid",
            "/api/ai/optimize-bid",
            "/api/ai/pricing-suggestion",
            "/api/ai/risk-assessment",
        } <= paths

    def test_request_bodies_exported(self):
        assert models.AnalyzeTenderRequest is models.ai.AnalyzeTenderRequest
        assert {"AnalyzeTenderRequest", "GenerateBidRequest", "OptimizeBidRequest", "PricingRequest",
                "RiskRequest"} <= set(models.__all__)

    @respx.mock
    def test_analyze_stores_clamped_score(self, client, store, bidder_headers):
        tender = make_tender(store)
        respx.post(COMPLETIONS_URL).mock(
            return_value=httpx.Response(200, json=completion('{"score": 140, "reasons": []}'))
        )

        resp = client.post("/api/ai/analyze-tender", headers=bidder_headers, json={
            "tenderDescription": "Road works", "companyCapabilities": ["roads"], "tenderId": tender.id,
        })

        assert resp.status_code == 200
        assert resp.json() == {"score": 140, "reasons": []}
        assert store.get(TENDERS, tender.id)["ai_score"] == 100

    @respx.mock
    def test_upstream_failure_is_500(self, client, bidder_headers):
        respx.post(COMPLETIONS_URL).mock(return_value=httpx.Response(401, json={"error": {"message": "bad key"}}))

        resp = client.post("/api/ai/optimize-bid", headers=bidder_headers, json={"currentContent": "draft"})

        assert resp.status_code == 500
        assert resp.json()["error"].startswith("Failed to optimize bid content")

    @respx.mock
    def test_generate_bid_endpoint(self, client, bidder_headers):
        respx.post(COMPLETIONS_URL).mock(return_value=httpx.Response(200, json=completion("Proposal text")))

        resp = client.post("/api/ai/generate-bid", headers=bidder_headers,
                           json={"tenderDescription": "Road", "requirements": ["EMD"]})

        assert resp.json() == {"content": "Proposal text"}

    @respx.mock
    def test_risk_assessment_endpoint(self, client, bidder_headers):
        payload = {"riskLevel": "extreme", "riskFactors": ["short deadline"], "riskScore": 91}
        respx.post(COMPLETIONS_URL).mock(return_value=httpx.Response(200, json=completion(json.dumps(payload))))

        resp = client.post("/api/ai/risk-assessment", headers=bidder_headers, json={
            "tenderDescription": "Road", "deadline": "2030-01-01T00:00:00Z", "tenderValue": 500000,
        })

        assert resp.json() == payload

    def test_body_validation(self, client, bidder_headers):
        resp = client.post("/api/ai/pricing-suggestion", headers=bidder_headers, json={"tenderDescription": "x"})
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["field"] == "estimatedCosts"
