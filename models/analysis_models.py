"""Domain models for a single analysis call."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class InteractionMode(str, Enum):
	"""How the request relates to earlier turns of the conversation."""

	INITIAL = "initial"
	FOLLOW_UP = "follow_up"


@dataclass(frozen=True)
class AnalysisRequest:
	"""Validated request, built fresh for each call from the HTTP body.

	Attributes:
		images: Image references in submission order (data URIs or HTTP URLs).
		description: Optional user context, or the follow-up question.
		mode: Interaction mode derived from the request shape.
		prior_image_descriptions: Per-image descriptions returned by an earlier call.
		prior_analysis: The previous AnalysisResult object, resent by the caller.
	"""

	images: Tuple[str, ...]
	description: Optional[str] = None
	mode: InteractionMode = InteractionMode.INITIAL
	prior_image_descriptions: Tuple[str, ...] = ()
	prior_analysis: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class PromptPayload:
	"""One instructional text block plus the images to attach to it."""

	text: str
	images: Tuple[str, ...] = field(default_factory=tuple)


class AnalyzeBody(BaseModel):
	"""JSON body accepted by the analyze route. Unknown keys are ignored."""

	model_config = ConfigDict(extra="ignore")

	images: Optional[List[Any]] = None
	image: Optional[str] = None
	description: Optional[str] = None
	priorImageDescriptions: Optional[List[str]] = None
	previousAnalysis: Optional[Dict[str, Any]] = Field(
		default=None, validation_alias=AliasChoices("previousAnalysis", "priorAnalysis")
	)
