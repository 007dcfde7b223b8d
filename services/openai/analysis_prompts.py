"""Prompt builders for home repair image analysis."""

import json
from typing import Any, Dict, Iterable, Optional

from models.analysis_models import AnalysisRequest, InteractionMode, PromptPayload
from services.openai.hazard_table import format_hazard_table

RESULT_SHAPE = (
    "{\n"
    '  "summary": "string",\n'
    '  "tools": ["string"],\n'
    '  "steps": ["string"],\n'
    '  "safetyWarnings": {\n'
    '    "hazardousMaterials": ["string"],\n'
    '    "ageRelated": true,\n'
    '    "generalWarnings": ["string"]\n'
    "  },\n"
    '  "imageDescriptions": ["string"]\n'
    "}"
)


def build_initial_prompt(description: Optional[str], image_count: int) -> str:
    """Return the instructions for a first analysis of fresh images."""
    subject = "image" if image_count == 1 else f"{image_count} images"
    if description:
        question = (
            f'The homeowner added this context or question: "{description}". '
            "Treat it as a question and answer it directly in the summary and steps."
        )
    else:
        question = "The homeowner did not add any context; base the analysis on the images alone."

    return (
        f"You are a home repair expert. Analyze the attached {subject} of a home repair issue.\n\n"
        f"{question}\n\n"
        "Work through the following:\n"
        "1. For each image, in order, write a detailed technical description of what is visible: "
        "materials, fixtures, damage, dimensions, colors and condition. The description must be "
        "complete enough to answer later questions without seeing the image again.\n"
        "2. Estimate the era in which the home was built from visible materials and styles. "
        "Set ageRelated to true if the home appears to have been built before 1990.\n"
        "3. Cross-reference every visible material against this hazardous materials list and "
        "name any likely matches in hazardousMaterials:\n"
        f"{format_hazard_table()}\n"
        "4. Provide a brief summary of the issue, the list of required tools, and step-by-step "
        "repair instructions. Put any other safety concerns in generalWarnings.\n\n"
        "Return ONLY a JSON object with exactly these fields:\n"
        f"{RESULT_SHAPE}\n"
        "imageDescriptions must contain one entry per image, in the order the images were given. "
        "Do not include markdown formatting, code fences or any explanation outside the JSON object."
    )


def _format_prior_descriptions(descriptions: Iterable[str]) -> str:
    lines = [f"Image {index}: {text}" for index, text in enumerate(descriptions, start=1)]
    return "\n".join(lines) if lines else "No image descriptions were provided."


def _format_items(items: Any) -> str:
    if isinstance(items, list) and items:
        return "\n".join(f"- {item}" for item in items)
    return "- None"


def _format_prior_analysis(analysis: Dict[str, Any]) -> str:
    """Restate the previous result field by field."""
    warnings = analysis.get("safetyWarnings")
    if not isinstance(warnings, dict):
        warnings = {}
    lines = [
        f"Summary: {analysis.get('summary', 'Not provided')}",
        "Tools:",
        _format_items(analysis.get("tools")),
        "Steps:",
        _format_items(analysis.get("steps")),
        "Safety warnings:",
        "Hazardous materials:",
        _format_items(warnings.get("hazardousMaterials")),
        f"Age related: {json.dumps(bool(warnings.get('ageRelated', False)))}",
        "General warnings:",
        _format_items(warnings.get("generalWarnings")),
        "Image descriptions:",
        _format_items(analysis.get("imageDescriptions")),
    ]
    return "\n".join(lines)


def build_follow_up_prompt(
    question: Optional[str],
    prior_image_descriptions: Iterable[str],
    prior_analysis: Dict[str, Any],
) -> str:
    """Return the instructions for a question about an earlier analysis."""
    descriptions = list(prior_image_descriptions)
    asked = question or "(no question text was provided; clarify the previous analysis)"
    return (
        "You are a home repair expert continuing a conversation about a home repair issue. "
        "You can no longer see the images; rely on the technical descriptions below.\n\n"
        f"Follow-up question: {asked}\n\n"
        "Image descriptions from the earlier analysis:\n"
        f"{_format_prior_descriptions(descriptions)}\n\n"
        "Previous analysis:\n"
        f"{_format_prior_analysis(prior_analysis)}\n\n"
        "Answer the follow-up question directly. Begin the summary with "
        '"Regarding your question about ..." and update tools, steps and safety warnings '
        "only where the answer changes them.\n\n"
        "Return ONLY a JSON object with exactly these fields:\n"
        f"{RESULT_SHAPE}\n"
        "Copy imageDescriptions unchanged from the image descriptions above so the context "
        "is preserved for later questions. Do not include markdown formatting, code fences "
        "or any explanation outside the JSON object."
    )


def build_prompt(request: AnalysisRequest) -> PromptPayload:
    """Select the template for the request mode and attach images where needed."""
    if request.mode is InteractionMode.FOLLOW_UP:
        text = build_follow_up_prompt(
            request.description,
            request.prior_image_descriptions,
            request.prior_analysis or {},
        )
        return PromptPayload(text=text)

    text = build_initial_prompt(request.description, len(request.images))
    return PromptPayload(text=text, images=request.images)
