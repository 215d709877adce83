"""Turn raw design payloads into validated models."""

from __future__ import annotations

import logging
from typing import Any, List, Mapping

from pydantic import ValidationError

from ..errors import InvalidModelError
from .models import DesignBlockModel, SynthesisOptions

LOGGER = logging.getLogger(__name__)

STARTER_PAYLOAD: Mapping[str, Any] = {
    "layout": {"type": "single-column"},
    "style": "modern",
    "components": [
        {"type": "heading", "text": "Production Ready", "level": 1, "style": {"text-align": "center"}},
        {
            "type": "text",
            "text": "This template was generated by the production engine.",
        },
        {"type": "button", "text": "Get started", "href": "https://example.com"},
    ],
}


def starter_model() -> DesignBlockModel:
    """Canonical heading + paragraph + button model used when no design is supplied."""
    return DesignBlockModel.model_validate(STARTER_PAYLOAD)


def load_model(payload: Mapping[str, Any] | DesignBlockModel) -> DesignBlockModel:
    """
    Validate a design payload.

    Raises:
        InvalidModelError: with the dotted paths of every missing or invalid field.
    """
    if isinstance(payload, DesignBlockModel):
        return payload
    try:
        return DesignBlockModel.model_validate(payload)
    except ValidationError as exc:
        fields = _error_fields(exc)
        LOGGER.warning("Rejected design model: %s", ", ".join(fields))
        raise InvalidModelError(fields) from exc


def load_options(payload: Mapping[str, Any] | SynthesisOptions | None) -> SynthesisOptions:
    if payload is None:
        return SynthesisOptions()
    if isinstance(payload, SynthesisOptions):
        return payload
    try:
        return SynthesisOptions.model_validate(payload)
    except ValidationError as exc:
        raise InvalidModelError(_error_fields(exc), "Invalid synthesis options: " + ", ".join(_error_fields(exc))) from exc


def _error_fields(exc: ValidationError) -> List[str]:
    fields: List[str] = []
    for error in exc.errors():
        loc = _strip_block_tags(error["loc"])
        path = ".".join(loc) or "<root>"
        if path not in fields:
            fields.append(path)
    return fields


_BLOCK_TAGS = {"heading", "text", "button", "image", "divider", "spacer", "dataRow"}


def _strip_block_tags(loc: tuple) -> List[str]:
    """Drop the union tag pydantic inserts after a block index (components.0.image.src)."""
    parts: List[str] = []
    previous: object = None
    for part in loc:
        if isinstance(previous, int) and part in _BLOCK_TAGS:
            previous = part
            continue
        parts.append(str(part))
        previous = part
    return parts
