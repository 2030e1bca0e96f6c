"""Client for an OpenAI-compatible chat completion API.

Responses are relayed as parsed; nothing is cached and failed calls are not
retried.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import openai

from ..errors import AIServiceError
from ..formatting import format_inr
from . import prompts

logger = logging.getLogger(__name__)


class AIClient:
    """Thin wrapper around ``openai.OpenAI`` for the bid-assist prompts."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gpt-4o",
        base_url: Optional[str] = None,
        timeout: float = 120.0,
    ):
        """Initialize client.

        Args:
            api_key: API key. When missing every call fails with AIServiceError.
            model: Chat model name
            base_url: Override for OpenAI-compatible gateways
            timeout: Request timeout in seconds
        """
        self.model = model
        self._client = None
        if api_key:
            self._client = openai.OpenAI(
                api_key=api_key,
                base_url=base_url,
                timeout=timeout,
                max_retries=0,
            )

    @classmethod
    def from_config(cls, config) -> "AIClient":
        return cls(
            api_key=config.openai_api_key,
            model=config.ai_model,
            base_url=config.ai_base_url,
            timeout=config.ai_timeout_seconds,
        )

    def _complete(self, operation: str, system: str, user: str, json_mode: bool) -> str:
        if self._client is None:
            raise AIServiceError(f"Failed to {operation}: OPENAI_API_KEY is not configured")

        kwargs: Dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = self._client.chat.completions.create(**kwargs)
        except openai.OpenAIError as e:
            logger.error(f"AI request failed ({operation}): {e}")
            raise AIServiceError(f"Failed to {operation}: {e}") from e

        return response.choices[0].message.content or ""

    def _complete_json(self, operation: str, system: str, user: str) -> Dict[str, Any]:
        content = self._complete(operation, system, user, json_mode=True)
        try:
            return json.loads(content or "{}")
        except json.JSONDecodeError as e:
            logger.error(f"AI response was not valid JSON ({operation}): {e}")
            raise AIServiceError(f"Failed to {operation}: invalid JSON in response") from e

    def analyze_tender(self, tender_description: str, company_capabilities: List[str]) -> Dict[str, Any]:
        return self._complete_json(
            "analyze tender match",
            prompts.ANALYZE_TENDER_SYSTEM,
            prompts.ANALYZE_TENDER_USER.format(
                tender_description=tender_description,
                capabilities=", ".join(company_capabilities),
            ),
        )

    def optimize_bid(self, current_content: str, tender_requirements: str) -> Dict[str, Any]:
        return self._complete_json(
            "optimize bid content",
            prompts.OPTIMIZE_BID_SYSTEM,
            prompts.OPTIMIZE_BID_USER.format(
                current_content=current_content,
                tender_requirements=tender_requirements,
            ),
        )

    def suggest_pricing(self, tender_description: str, estimated_costs: int,
                        market_data: Optional[str] = None) -> Dict[str, Any]:
        """``estimated_costs`` is in minor units."""
        return self._complete_json(
            "suggest pricing",
            prompts.PRICING_SYSTEM,
            prompts.PRICING_USER.format(
                tender_description=tender_description,
                estimated_costs=format_inr(estimated_costs),
                market_data=market_data or "Not available",
            ),
        )

    def assess_risk(self, tender_description: str, deadline: datetime, tender_value: int,
                    now: Optional[datetime] = None) -> Dict[str, Any]:
        now = now or datetime.now(timezone.utc)
        if deadline.tzinfo is None:
            deadline = deadline.replace(tzinfo=timezone.utc)
        days = (deadline - now).days
        return self._complete_json(
            "assess risk",
            prompts.RISK_SYSTEM,
            prompts.RISK_USER.format(
                tender_description=tender_description,
                days_until_deadline=days,
                tender_value=format_inr(tender_value),
            ),
        )

    def generate_bid(self, tender_description: str, company_profile: str, requirements: List[str]) -> str:
        return self._complete(
            "generate bid content",
            prompts.GENERATE_BID_SYSTEM,
            prompts.GENERATE_BID_USER.format(
                tender_description=tender_description,
                company_profile=company_profile,
                requirements=", ".join(requirements),
            ),
            json_mode=False,
        )
