"""Cost accounting for model calls.

Costs are only logged; they never reach the response body.
"""

from typing import Dict, Optional

# USD per 1,000 tokens. Keep in step with the provider's published pricing.
MODEL_PRICING: Dict[str, Dict[str, float]] = {
	"gpt-4.1": {"input_per_1k": 0.002, "output_per_1k": 0.008},
	"gpt-4.1-mini": {"input_per_1k": 0.0004, "output_per_1k": 0.0016},
	"gpt-4o": {"input_per_1k": 0.0025, "output_per_1k": 0.01},
	"gpt-4o-mini": {"input_per_1k": 0.00015, "output_per_1k": 0.0006},
}


def estimate_cost(
	input_tokens: Optional[int],
	output_tokens: Optional[int],
	model: str,
	pricing: Optional[Dict[str, Dict[str, float]]] = None,
) -> Optional[float]:
	"""Estimate the USD cost of one call.

	Returns None when the model has no known price or usage is missing.

	Raises:
		ValueError: If a token count is negative.
	"""
	if input_tokens is None or output_tokens is None:
		return None
	if input_tokens < 0 or output_tokens < 0:
		raise ValueError("Token counts must be non-negative integers.")

	rates = (pricing or MODEL_PRICING).get(model.lower())
	if rates is None:
		return None
	input_cost = (input_tokens / 1000.0) * rates["input_per_1k"]
	output_cost = (output_tokens / 1000.0) * rates["output_per_1k"]
	return round(input_cost + output_cost, 8)
