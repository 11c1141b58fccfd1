"""Suggestion engine: prompt → Gemini → parser → CollectionStore.suggested.

`refresh` never raises for AI failures. Missing configuration, transport
errors, error statuses, empty replies and unexpected client exceptions all
degrade the suggestion list to empty. Concurrent refreshes are allowed and
not cancelled; whichever AI call completes last writes the list.
"""

from typing import Protocol

from cookbook.errors import AIClientError
from cookbook.models.models import Recipe, SuggestionContext
from cookbook.parsing.suggestions import parse
from cookbook.prompts.prompts import build_suggestion_prompt
from cookbook.state.collection_store import CollectionStore
from cookbook.utils.logger import logger


class TextGenerator(Protocol):
    """What the engine needs from an AI client."""

    async def generate(self, prompt: str, image_bytes: bytes | None = None) -> str: ...


class SuggestionEngine:
    """Orchestrates one suggestion round and publishes the result."""

    def __init__(
        self,
        client: TextGenerator,
        store: CollectionStore,
        max_suggestions: int = 3,
        max_context_recipes: int = 5,
    ) -> None:
        self.client = client
        self.store = store
        self.max_suggestions = max_suggestions
        self.max_context_recipes = max_context_recipes
        self._in_flight = 0

    @property
    def in_flight(self) -> int:
        """Number of refreshes currently awaiting the AI backend."""
        return self._in_flight

    @property
    def is_refreshing(self) -> bool:
        return self._in_flight > 0

    async def refresh(self, context: SuggestionContext) -> list[Recipe]:
        """Recompute suggestions for a context snapshot.

        Args:
            context: Immutable snapshot of location and recent recipes.

        Returns:
            The recipes written to `store.suggested` (empty on any AI failure
            or malformed output).
        """
        prompt = build_suggestion_prompt(
            context,
            max_suggestions=self.max_suggestions,
            max_recipes=self.max_context_recipes,
        )

        self._in_flight += 1
        try:
            raw_text = await self.client.generate(prompt)
        except AIClientError as e:
            logger.warning(f"Error getting AI suggestions ({type(e).__name__}): {e}")
            self.store.set_suggested(())
            return []
        except Exception as e:
            logger.error(f"Unexpected error getting AI suggestions: {e}", exc_info=True)
            self.store.set_suggested(())
            return []
        finally:
            self._in_flight -= 1

        suggestions = parse(raw_text)
        self.store.set_suggested(suggestions)
        logger.info(
            f"AI suggested {len(suggestions)} new recipes for '{context.location_description}'"
        )
        return suggestions
