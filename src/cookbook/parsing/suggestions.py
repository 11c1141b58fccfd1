"""Decoding of AI suggestion output into Recipe records.

The model is asked for a bare JSON array of
`{name, timeMinutes, description, region}` objects. Anything else (prose,
wrong shape, empty text) decodes to `Malformed` and an empty recipe list.
`parse_suggestions` and `parse` never raise.
"""

import uuid

from pydantic import TypeAdapter, ValidationError

from cookbook.errors import ParseError
from cookbook.models.models import (
    AI_ID_PREFIX,
    AI_SUGGESTED_OWNER,
    AISuggestedRecipeDTO,
    Malformed,
    Ok,
    ParseResult,
    Recipe,
)
from cookbook.utils.logger import logger


_DTO_LIST = TypeAdapter(list[AISuggestedRecipeDTO])


def new_suggestion_id() -> str:
    """Generate a unique id marked as AI provenance."""
    return f"{AI_ID_PREFIX}{uuid.uuid4()}"


def to_recipe(dto: AISuggestedRecipeDTO) -> Recipe:
    """Map one wire DTO to a Recipe owned by the AI sentinel, with no image."""
    return Recipe(
        id=new_suggestion_id(),
        name=dto.name,
        image="",
        instructions=dto.description,
        time=dto.timeMinutes,
        user_id=AI_SUGGESTED_OWNER,
    )


def decode_suggestions(raw_text: str) -> list[AISuggestedRecipeDTO]:
    """Strictly decode the whole text as a JSON array of suggestion DTOs.

    Raises:
        ParseError: If the text is not a JSON array of well-typed objects.
    """
    if not isinstance(raw_text, str) or not raw_text.strip():
        raise ParseError("Empty response text")
    try:
        return _DTO_LIST.validate_json(raw_text)
    except ValidationError as e:
        raise ParseError(f"{e.error_count()} validation error(s): {e.errors()[0]['msg']}") from e


def parse_suggestions(raw_text: str) -> ParseResult:
    """Decode AI output into a tagged result.

    Returns:
        Ok with mapped recipes, or Malformed with the raw text and reason.
    """
    try:
        dtos = decode_suggestions(raw_text)
    except ParseError as e:
        logger.warning(f"Failed to parse AI suggestions JSON ({e}), raw: {raw_text!r}")
        return Malformed(raw_text=raw_text if isinstance(raw_text, str) else repr(raw_text), reason=str(e))

    return Ok(recipes=tuple(to_recipe(dto) for dto in dtos))


def parse(raw_text: str) -> list[Recipe]:
    """Decode AI output into recipes, degrading to an empty list."""
    result = parse_suggestions(raw_text)
    if isinstance(result, Ok):
        return list(result.recipes)
    return []
