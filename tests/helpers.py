from __future__ import annotations

import json

from models.errors import ModelError

PNG_DATA_URI = "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8z8BQDwAEhQGAhKmMIQAAAABJRU5ErkJggg=="


def complete_result(**overrides):
    result = {
        "summary": "Water damage around the base of the toilet.",
        "tools": ["Adjustable wrench", "Putty knife"],
        "steps": ["Shut off the water supply", "Replace the wax ring"],
        "safetyWarnings": {
            "hazardousMaterials": [],
            "ageRelated": False,
            "generalWarnings": ["Wear gloves"],
        },
        "imageDescriptions": ["Close-up of a white toilet base with stained vinyl flooring."],
    }
    result.update(overrides)
    return result


class StubGateway:
    """Stands in for ModelGateway and counts calls."""

    def __init__(self, text: str | None = None, error: Exception | None = None) -> None:
        self.text = text if text is not None else json.dumps(complete_result())
        self.error = error
        self.calls = 0
        self.prompts = []

    async def complete(self, prompt):
        self.calls += 1
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        if not self.text:
            raise ModelError("empty output")
        return self.text
