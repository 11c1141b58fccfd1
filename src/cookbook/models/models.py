"""Data models for the recipe suggestion engine.

Defines Pydantic models for domain records (recipes, suggestion contexts,
drafts) and the tagged result of decoding AI output.
All models use Pydantic v2.
"""

from enum import Enum
from typing import Annotated, List, Literal, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field

from cookbook.errors import DraftValidationError


# Owner id carried by recipes that came from the model rather than a user
AI_SUGGESTED_OWNER = "ai_suggested"
# Prefix of generated ids for AI suggestions
AI_ID_PREFIX = "ai-"


class Recipe(BaseModel):
    """Domain model for a recipe.

    Identity is by `id`: two records with equal ids are the same recipe.
    `image` is a URL or the empty string (render a placeholder).
    `user_id` is the owner; AI suggestions carry AI_SUGGESTED_OWNER.
    Stored documents use the key `userId`.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1, description="Opaque unique recipe id")
    name: str = Field(description="Recipe name")
    image: str = Field("", description="Image URL, empty when there is none")
    instructions: str = Field("", description="Preparation instructions")
    time: int = Field(0, description="Preparation time in minutes")
    user_id: str = Field(alias="userId", description="Owning user id")

    @property
    def is_ai_suggested(self) -> bool:
        return self.user_id == AI_SUGGESTED_OWNER

    def to_document(self) -> dict:
        """Serialize with the document-store key names."""
        return self.model_dump(by_alias=True)


class SaveAction(str, Enum):
    """Outcome of toggling a recipe's saved state."""

    SAVED = "saved"
    UNSAVED = "unsaved"


class SuggestionContext(BaseModel):
    """Immutable snapshot of what the model sees for one suggestion request."""

    model_config = ConfigDict(frozen=True)

    location_description: str
    own_recipes: tuple[Recipe, ...] = ()
    saved_recipes: tuple[Recipe, ...] = ()

    @classmethod
    def build(
        cls,
        location_description: str,
        own_recipes: Sequence[Recipe],
        saved_recipes: Sequence[Recipe],
        limit: int = 5,
    ) -> "SuggestionContext":
        """Snapshot the first `limit` own and saved recipes."""
        return cls(
            location_description=location_description,
            own_recipes=tuple(own_recipes[:limit]),
            saved_recipes=tuple(saved_recipes[:limit]),
        )


class AISuggestedRecipeDTO(BaseModel):
    """Wire shape of one suggestion in the model's JSON output.

    Strict: `timeMinutes` must be a JSON integer and text fields JSON strings.
    Unknown keys are ignored.
    """

    model_config = ConfigDict(strict=True, extra="ignore")

    name: str
    timeMinutes: int
    description: str
    region: Optional[str] = None


class InstructionContext(BaseModel):
    """Input for rewriting a recipe draft's instructions."""

    model_config = ConfigDict(frozen=True)

    name: str
    ingredients: List[str] = Field(default_factory=list)
    time: int = 0
    current_instructions: str = ""
    image: Optional[bytes] = None


class RecipeDraft(BaseModel):
    """A recipe being authored, before it has an id or owner."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = ""
    instructions: str = ""
    time: int = 0
    image: str = ""

    def check(self) -> None:
        """Apply the creation rules.

        Raises:
            DraftValidationError: With a title and message for the first rule violated.
        """
        if len(self.name) < 2:
            raise DraftValidationError(
                "Invalid Recipe Name", "Recipe name must be 2 or more characters long."
            )
        if len(self.instructions) < 5:
            raise DraftValidationError(
                "Invalid Instructions", "Instructions must be 5 or more characters long."
            )
        if self.time <= 0:
            raise DraftValidationError(
                "Invalid Preparation Time", "Preparation time must be greater than 0 minutes."
            )

    def to_recipe(self, recipe_id: str, user_id: str) -> Recipe:
        return Recipe(
            id=recipe_id,
            name=self.name,
            image=self.image,
            instructions=self.instructions,
            time=self.time,
            user_id=user_id,
        )


class Alert(BaseModel):
    """User-facing alert with a title and message."""

    model_config = ConfigDict(frozen=True)

    title: str
    message: str


class Ok(BaseModel):
    """AI output decoded into recipes."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["ok"] = "ok"
    recipes: tuple[Recipe, ...]


class Malformed(BaseModel):
    """AI output that could not be decoded; keeps the raw text for diagnostics."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["malformed"] = "malformed"
    raw_text: str
    reason: str


ParseResult = Annotated[Union[Ok, Malformed], Field(discriminator="kind")]
