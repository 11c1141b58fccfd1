"""Unit tests for location descriptions and the in-memory repository."""

import pytest

from cookbook.errors import PersistenceError
from cookbook.models.models import Recipe
from cookbook.sync.location import UNKNOWN_LOCATION, describe_location
from cookbook.sync.repository import InMemoryRecipeRepository


class TestDescribeLocation:
    """Test reverse-geocode formatting."""

    def test_full_description(self):
        assert describe_location("Nashville", "Tennessee", "United States") == "Nashville, Tennessee, United States"

    def test_city_falls_back_to_county(self):
        assert describe_location(None, "Tennessee", "United States", "Davidson County") == (
            "Davidson County, Tennessee, United States"
        )

    def test_blank_parts_skipped(self):
        assert describe_location("Lyon", "  ", "France") == "Lyon, France"

    def test_nothing_known(self):
        assert describe_location() == UNKNOWN_LOCATION


class TestInMemoryRepository:
    """Test the development repository."""

    @pytest.mark.asyncio
    async def test_fetch_by_owner(self):
        mine = Recipe(id="r1", name="Crepes", user_id="u1")
        theirs = Recipe(id="r2", name="Gumbo", user_id="u2")
        repository = InMemoryRecipeRepository([mine, theirs])

        assert await repository.fetch_own("u1") == [mine]
        assert await repository.fetch_all() == [mine, theirs]

    @pytest.mark.asyncio
    async def test_saved_references_are_per_user(self):
        recipe = Recipe(id="r1", name="Crepes", user_id="u1")
        repository = InMemoryRecipeRepository([recipe])

        await repository.save_recipe("u2", recipe)

        assert await repository.fetch_saved("u2") == [recipe]
        assert await repository.fetch_saved("u1") == []

    @pytest.mark.asyncio
    async def test_delete_missing_reference_fails(self):
        with pytest.raises(PersistenceError):
            await InMemoryRecipeRepository().delete_saved("u1", "nope")

    @pytest.mark.asyncio
    async def test_duplicate_id_fails(self):
        recipe = Recipe(id="r1", name="Crepes", user_id="u1")
        repository = InMemoryRecipeRepository([recipe])

        with pytest.raises(PersistenceError) as exc:
            await repository.add_recipe(recipe)
        assert exc.value.title == "Could Not Save Recipe"

    def test_new_ids_unique(self):
        repository = InMemoryRecipeRepository()
        assert repository.new_recipe_id() != repository.new_recipe_id()
