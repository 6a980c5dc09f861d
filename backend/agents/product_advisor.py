"""
Product Advisor: impartial pros/cons for a product, produced by the AI proxy.
The proxy answers {"advice": ...} where advice is either a JSON string or an
already-decoded object with advantages / considerations / summary.
"""
import asyncio
from typing import Any

from pydantic import ValidationError

from errors import AdviceUnavailableError
from models import ExpertAdvice, Product
from .base import BaseAgent


class ProductAdvisorAgent(BaseAgent):
    agent_type = "product_advisor"

    async def advise(self, product: Product | str) -> dict:
        return await self.process(product)

    def _build_request(self, payload: Product | str) -> dict:
        if isinstance(payload, Product):
            return {"product": payload.model_dump()}
        return {"product": payload}

    def _parse_response(self, data: Any) -> ExpertAdvice:
        if not isinstance(data, dict) or "advice" not in data:
            raise AdviceUnavailableError("Response has no 'advice' field")
        advice = data["advice"]
        try:
            if isinstance(advice, str):
                return ExpertAdvice.model_validate_json(advice)
            return ExpertAdvice.model_validate(advice)
        except ValidationError as e:
            raise AdviceUnavailableError(f"Advice does not have the expected shape: {e.error_count()} error(s)") from e

    async def _mock_process(self, payload: Product | str) -> dict:
        """Canned advice so the overlay can be exercised without the proxy."""
        await asyncio.sleep(0.05)
        name = payload.name if isinstance(payload, Product) else str(payload)
        price = payload.price if isinstance(payload, Product) else ""

        advantages = [f"{name} is one of the most viewed items in its category."]
        if isinstance(payload, Product) and payload.description:
            advantages.append(payload.description)
        considerations = [f"Compare the price ({price}) with similar products before buying."] if price else [
            "Compare with similar products before buying."
        ]
        advice = ExpertAdvice(
            advantages=advantages,
            considerations=considerations,
            summary=f"{name} is a solid choice if its features match your needs.",
        )
        return {"available": True, "advice": advice, "message": None}
