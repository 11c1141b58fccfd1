#!/usr/bin/env python3
"""Diagnostics runner for the suggestion engine.

Talk to Gemini directly without the app around it.

Usage:
    python -m cookbook.cli models
    python -m cookbook.cli suggest --location "Nashville, Tennessee, United States"
    python -m cookbook.cli suggest --location "Lyon, France" --own "Ratatouille:60" --saved "Crepes:20"
    python -m cookbook.cli rewrite --name "Pancakes" --time 20 --instructions "mix stuff, fry" --image pancakes.jpg
"""

import argparse
import asyncio
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from cookbook.ai.gemini_client import GeminiClient
from cookbook.engine.instruction_assistant import InstructionAssistant
from cookbook.engine.suggestion_engine import SuggestionEngine
from cookbook.errors import AIClientError, CookbookError
from cookbook.models.models import InstructionContext, Recipe
from cookbook.state.collection_store import CollectionStore
from cookbook.sync.controller import SyncController
from cookbook.sync.repository import InMemoryRecipeRepository
from cookbook.utils.config import config
from cookbook.utils.logger import logger

console = Console()

CLI_USER = "cli-user"


def parse_recipe_arg(value: str, index: int, owner: str) -> Recipe:
    """Parse "Name:minutes" (minutes optional) into a Recipe."""
    name, _, minutes = value.rpartition(":")
    if not name or not minutes.strip().isdigit():
        name, minutes = value, "0"
    return Recipe(id=f"{owner}-{index}", name=name.strip(), time=int(minutes), user_id=owner)


async def run_models(client: GeminiClient) -> None:
    models = await client.list_models()
    table = Table(title=f"Gemini models ({len(models)})")
    table.add_column("Name", style="cyan")
    table.add_column("Display name")
    table.add_column("Methods", style="dim")
    for model in models:
        table.add_row(
            model.name,
            model.displayName or "",
            ", ".join(model.supportedGenerationMethods or []),
        )
    console.print(table)


async def run_suggest(client: GeminiClient, location: str, own: list[str], saved: list[str]) -> None:
    own_recipes = [parse_recipe_arg(v, i, CLI_USER) for i, v in enumerate(own)]
    saved_recipes = [parse_recipe_arg(v, i, "someone-else") for i, v in enumerate(saved)]
    repository = InMemoryRecipeRepository(own_recipes + saved_recipes)
    for recipe in saved_recipes:
        await repository.save_recipe(CLI_USER, recipe)

    store = CollectionStore()
    engine = SuggestionEngine(
        client,
        store,
        max_suggestions=config.MAX_SUGGESTIONS,
        max_context_recipes=config.MAX_CONTEXT_RECIPES,
    )
    controller = SyncController(
        store,
        engine,
        repository,
        current_user=lambda: CLI_USER,
        location_description=location,
        max_context_recipes=config.MAX_CONTEXT_RECIPES,
    )
    suggestions = await controller.session_started()

    if not suggestions:
        console.print("[yellow]No suggestions (the AI call failed or returned malformed output)[/yellow]")
        return

    table = Table(title=f"Suggested for you in {location}")
    table.add_column("Name", style="cyan")
    table.add_column("Time", justify="right")
    table.add_column("Description")
    for recipe in suggestions:
        table.add_row(recipe.name, f"{recipe.time} mins", recipe.instructions)
    console.print(table)


async def run_rewrite(client: GeminiClient, args: argparse.Namespace) -> None:
    image = None
    if args.image:
        image_file = Path(args.image)
        if not image_file.exists():
            console.print(f"[red]✗ Error: Image file not found: {args.image}[/red]")
            sys.exit(1)
        image = image_file.read_bytes()

    context = InstructionContext(
        name=args.name,
        ingredients=args.ingredient or [],
        time=args.time,
        current_instructions=args.instructions,
        image=image,
    )
    assistant = InstructionAssistant(client, use_retries=True)
    console.print(await assistant.suggest_instructions(context))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cookbook", description="Recipe suggestion diagnostics")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("models", help="List models available to GEMINI_API_KEY")

    suggest = sub.add_parser("suggest", help="Run one suggestion round")
    suggest.add_argument("--location", default="Unknown")
    suggest.add_argument("--own", action="append", default=[], metavar="NAME:MINUTES")
    suggest.add_argument("--saved", action="append", default=[], metavar="NAME:MINUTES")

    rewrite = sub.add_parser("rewrite", help="Rewrite draft instructions")
    rewrite.add_argument("--name", required=True)
    rewrite.add_argument("--time", type=int, default=0)
    rewrite.add_argument("--instructions", required=True)
    rewrite.add_argument("--ingredient", action="append")
    rewrite.add_argument("--image")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config.validate(require_api_key=True)
    except ValueError as e:
        console.print(f"[red]✗ {e}[/red]")
        return 1

    client = GeminiClient.from_config(config)
    try:
        if args.command == "models":
            asyncio.run(run_models(client))
        elif args.command == "suggest":
            asyncio.run(run_suggest(client, args.location, args.own, args.saved))
        else:
            asyncio.run(run_rewrite(client, args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user.")
        return 0
    except AIClientError as e:
        console.print(f"[red]✗ AI Error ({type(e).__name__}): {e}[/red]")
        return 1
    except CookbookError as e:
        console.print(f"[red]✗ {e}[/red]")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
