"""Prompt builders for the suggestion and instruction-rewrite flows.

Pure functions: they render a context into a prompt string, never call the
network and never raise. Output-format rules are spelled out in the prompt
because the caller parses the reply strictly.
"""

from typing import Sequence

from cookbook.models.models import InstructionContext, Recipe, SuggestionContext


# Rendered in place of an empty recipe list
NO_RECIPES_PLACEHOLDER = "- (none yet)"
# Rendered in place of an empty ingredient list
NO_INGREDIENTS_PLACEHOLDER = "(not specified)"


def summarize_recipes(recipes: Sequence[Recipe], limit: int = 5) -> str:
    """Render up to `limit` recipes as `- <name> (<time> mins)` lines."""
    lines = [f"- {r.name} ({r.time} mins)" for r in recipes[:limit]]
    return "\n".join(lines) if lines else NO_RECIPES_PLACEHOLDER


def build_suggestion_prompt(
    context: SuggestionContext,
    max_suggestions: int = 3,
    max_recipes: int = 5,
) -> str:
    """Render a suggestion context into a JSON-only recommendation prompt.

    Args:
        context: Location plus the user's own and saved recipes.
        max_suggestions: Upper bound on new recipes the model should invent.
        max_recipes: Number of own/saved recipes summarized per list.

    Returns:
        Prompt string asking for a JSON array of
        `{name, timeMinutes, description, region}` objects.
    """
    created_summary = summarize_recipes(context.own_recipes, max_recipes)
    saved_summary = summarize_recipes(context.saved_recipes, max_recipes)

    return f"""You are a professional chef and recipe recommendation engine.

The user is currently located in: {context.location_description}

Recipes this user has COOKED / CREATED:
{created_summary}

Recipes this user has SAVED:
{saved_summary}

Based on this, invent up to {max_suggestions} NEW recipe ideas that:
- Feel appropriate for the user's location (cuisine, climate, culture).
- Match or nicely complement the styles above.
- Are NOT already in the lists above.

Respond ONLY with valid JSON, as an array of objects like:

[
  {{
    "name": "Butter Chicken Nashville Style",
    "timeMinutes": 50,
    "description": "Short, friendly one-paragraph description of the dish and why they'd like it.",
    "region": "Indian-American fusion"
  }}
]

Rules:
- "timeMinutes" is a whole number of minutes.
- No extra text, no markdown, no backticks, no explanation. Just the JSON array."""


def build_instruction_prompt(context: InstructionContext) -> str:
    """Render a recipe draft into an instruction-rewrite prompt.

    The reply is expected to be a plain-text numbered list that can replace
    the draft instructions verbatim.
    """
    ingredients = ", ".join(context.ingredients) if context.ingredients else NO_INGREDIENTS_PLACEHOLDER
    image_rule = (
        "- An image of the dish is attached. Use visual cues from it to refine the steps "
        '(e.g., "until golden brown like the image").\n'
        if context.image is not None
        else ""
    )

    return f'''You are a professional chef helper.

Context:
- Recipe Name: {context.name}
- Ingredients: {ingredients}
- Estimated Time: {context.time} minutes

Current Draft Instructions:
"""
{context.current_instructions}
"""

Task:
Rewrite the instructions into a clear, numbered step-by-step list.
- Keep it concise.
- Start every step with an imperative verb (e.g., "Chop," "Sauté," "Bake").
{image_rule}- Use plain text only: no markdown, no bold, no headings, no bullet symbols.
- Format each step as "1. ...", "2. ..." on its own line.
- Do not include conversational filler like "Here are your instructions." and no closing remarks. Just give the list.'''
