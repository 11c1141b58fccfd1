"""Unit tests for prompt builders."""

from cookbook.models.models import InstructionContext, Recipe, SuggestionContext
from cookbook.prompts.prompts import (
    NO_INGREDIENTS_PLACEHOLDER,
    NO_RECIPES_PLACEHOLDER,
    build_instruction_prompt,
    build_suggestion_prompt,
    summarize_recipes,
)


def make_recipe(i: int) -> Recipe:
    return Recipe(id=f"r{i}", name=f"Dish {i}", time=i * 5, user_id="u1")


class TestSuggestionPrompt:
    """Test the JSON-only suggestion prompt."""

    def test_empty_lists_render_placeholder(self):
        prompt = build_suggestion_prompt(SuggestionContext.build("Unknown", [], []))

        assert prompt.count(NO_RECIPES_PLACEHOLDER) == 2
        assert "SAVED:\n- (none yet)" in prompt
        assert "CREATED:\n- (none yet)" in prompt

    def test_recipes_rendered_as_name_and_minutes(self):
        context = SuggestionContext.build("Nashville, Tennessee", [make_recipe(1)], [make_recipe(2)])
        prompt = build_suggestion_prompt(context)

        assert "- Dish 1 (5 mins)" in prompt
        assert "- Dish 2 (10 mins)" in prompt
        assert NO_RECIPES_PLACEHOLDER not in prompt
        assert "Nashville, Tennessee" in prompt

    def test_at_most_five_recipes_per_list(self):
        own = [make_recipe(i) for i in range(1, 8)]
        prompt = build_suggestion_prompt(SuggestionContext(location_description="X", own_recipes=tuple(own)))

        assert "- Dish 5 (25 mins)" in prompt
        assert "Dish 6" not in prompt

    def test_output_format_rules(self):
        prompt = build_suggestion_prompt(SuggestionContext.build("X", [], []), max_suggestions=3)

        assert "up to 3 NEW recipe" in prompt
        assert "valid JSON" in prompt
        for field in ('"name"', '"timeMinutes"', '"description"', '"region"'):
            assert field in prompt
        assert "no backticks" in prompt

    def test_deterministic(self):
        context = SuggestionContext.build("X", [make_recipe(1)], [])
        assert build_suggestion_prompt(context) == build_suggestion_prompt(context)

    def test_summarize_empty(self):
        assert summarize_recipes([]) == NO_RECIPES_PLACEHOLDER


class TestInstructionPrompt:
    """Test the instruction-rewrite prompt."""

    def test_includes_draft_details(self):
        context = InstructionContext(
            name="Pancakes",
            ingredients=["flour", "milk", "egg"],
            time=20,
            current_instructions="mix stuff then fry",
        )
        prompt = build_instruction_prompt(context)

        assert "Recipe Name: Pancakes" in prompt
        assert "Ingredients: flour, milk, egg" in prompt
        assert "Estimated Time: 20 minutes" in prompt
        assert "mix stuff then fry" in prompt
        assert "numbered" in prompt
        assert "no markdown" in prompt
        assert "imperative" in prompt

    def test_without_ingredients_or_image(self):
        prompt = build_instruction_prompt(InstructionContext(name="Toast"))

        assert NO_INGREDIENTS_PLACEHOLDER in prompt
        assert "image" not in prompt.lower()

    def test_image_rule_only_with_image(self):
        prompt = build_instruction_prompt(InstructionContext(name="Toast", image=b"\xff\xd8\xff"))
        assert "visual cues" in prompt
