"""Recover a JSON value from free-form model output.

The model is asked for bare JSON but sometimes wraps it in markdown or
surrounds it with prose. Strategies run in a fixed order and the first one
that parses wins:

1. the whole text,
2. the interior of the first fenced code block,
3. the span from the first ``{`` to the last ``}``.

The brace span can succeed on text that only looks like an object, e.g.
prose wrapped around two separate objects. That is accepted; the result
validator is the backstop.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

from models.errors import ExtractionError

LOGGER = logging.getLogger(__name__)

FENCED_BLOCK = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)


@dataclass(frozen=True)
class ExtractionAttempt:
	"""Outcome of one strategy: a parsed value or the reason it failed."""

	strategy: str
	value: Any = None
	error: Optional[str] = None

	@property
	def ok(self) -> bool:
		return self.error is None


def _reject_constant(name: str) -> Any:
	raise ValueError(f"non-standard JSON constant {name}")


def _parse(strategy: str, candidate: str) -> ExtractionAttempt:
	try:
		return ExtractionAttempt(strategy, value=json.loads(candidate, parse_constant=_reject_constant))
	except ValueError as exc:
		return ExtractionAttempt(strategy, error=str(exc))


def parse_direct(text: str) -> ExtractionAttempt:
	"""Parse the entire text as JSON."""
	return _parse("direct", text)


def parse_fenced_block(text: str) -> ExtractionAttempt:
	"""Parse the interior of the first ``` or ```json block."""
	match = FENCED_BLOCK.search(text)
	if match is None:
		return ExtractionAttempt("fenced_block", error="no fenced code block found")
	return _parse("fenced_block", match.group(1))


def parse_brace_span(text: str) -> ExtractionAttempt:
	"""Parse from the first '{' through the last '}'."""
	start = text.find("{")
	end = text.rfind("}")
	if start == -1 or end == -1 or end < start:
		return ExtractionAttempt("brace_span", error="no JSON object delimiters found")
	return _parse("brace_span", text[start : end + 1])


STRATEGIES: Tuple[Callable[[str], ExtractionAttempt], ...] = (
	parse_direct,
	parse_fenced_block,
	parse_brace_span,
)


def extract_json(text: str) -> Any:
	"""Return the first JSON value any strategy recovers from `text`.

	Raises:
		ExtractionError: If every strategy fails; carries each failure reason.
	"""
	failures = []
	for strategy in STRATEGIES:
		attempt = strategy(text or "")
		if attempt.ok:
			if failures:
				LOGGER.info("Recovered model JSON with the %s strategy", attempt.strategy)
			return attempt.value
		failures.append(f"{attempt.strategy}: {attempt.error}")

	LOGGER.error("No JSON recoverable from model output (%d chars)", len(text or ""))
	raise ExtractionError("Failed to parse model response: " + "; ".join(failures), reasons=failures)
