"""Document-store interface for recipes and saved-recipe references.

The store itself is an external collaborator. `RecipeRepository` is the
contract the sync controller depends on; `InMemoryRecipeRepository` backs
development runs and tests.

Layout mirrored by the in-memory version:
- "recipes": every recipe, queried by owner id
- "users/{user_id}/savedRecipes/{recipe_id}": per-user saved copies
"""

import uuid
from typing import Protocol

from cookbook.errors import PersistenceError
from cookbook.models.models import Recipe


class RecipeRepository(Protocol):
    """Async access to the recipe document store.

    Every method raises PersistenceError on failure.
    """

    def new_recipe_id(self) -> str: ...

    async def fetch_own(self, user_id: str) -> list[Recipe]: ...

    async def fetch_all(self) -> list[Recipe]: ...

    async def fetch_saved(self, user_id: str) -> list[Recipe]: ...

    async def save_recipe(self, user_id: str, recipe: Recipe) -> None: ...

    async def delete_saved(self, user_id: str, recipe_id: str) -> None: ...

    async def add_recipe(self, recipe: Recipe) -> None: ...


class InMemoryRecipeRepository:
    """Dictionary-backed repository preserving insertion order."""

    def __init__(self, recipes: list[Recipe] | None = None) -> None:
        self._recipes: dict[str, Recipe] = {r.id: r for r in recipes or []}
        self._saved: dict[str, dict[str, Recipe]] = {}

    def new_recipe_id(self) -> str:
        return uuid.uuid4().hex

    async def fetch_own(self, user_id: str) -> list[Recipe]:
        return [r for r in self._recipes.values() if r.user_id == user_id]

    async def fetch_all(self) -> list[Recipe]:
        return list(self._recipes.values())

    async def fetch_saved(self, user_id: str) -> list[Recipe]:
        return list(self._saved.get(user_id, {}).values())

    async def save_recipe(self, user_id: str, recipe: Recipe) -> None:
        self._saved.setdefault(user_id, {})[recipe.id] = recipe

    async def delete_saved(self, user_id: str, recipe_id: str) -> None:
        saved = self._saved.get(user_id, {})
        if recipe_id not in saved:
            raise PersistenceError(
                "Could Not Update Saved Recipes", f"Recipe {recipe_id} is not saved."
            )
        del saved[recipe_id]

    async def add_recipe(self, recipe: Recipe) -> None:
        if recipe.id in self._recipes:
            raise PersistenceError(
                "Could Not Save Recipe", "We could not save your recipe right now, please try later."
            )
        self._recipes[recipe.id] = recipe
