"""Wires the services together and generates a plan from the command line.

    python main.py --name "Next week" --days 3 --diet vegetarian
"""
import argparse
import asyncio
from datetime import date
import logging

from databases import Database
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

import config
import db
from domain.cache import CacheStore
from domain.generator import PlanGenerator
from domain.plan import DietaryRestriction, UserPreferences, create_plan
from domain.recipe_api import RecipeAPI, api_client_factory
from domain.repository import RecipeRepository
from domain.shopping import ShoppingList, aggregate_shopping_list


logger = logging.getLogger(__name__)


class Services:
    """One of each service per process."""

    def __init__(self, cfg: config.Config, database: Database) -> None:
        self.config = cfg
        self.db = database
        self.cache = CacheStore(
            directory=cfg.cache_dir,
            memory_limit=cfg.cache_memory_limit,
            hash_filenames=cfg.cache_hash_filenames,
        )
        self.api = RecipeAPI(
            http_client=api_client_factory(cfg),
            api_key=cfg.spoonacular_api_key,
        )
        self.favorites = db.FavoritesRepository(database)
        self.recipes = RecipeRepository(
            api=self.api,
            cache=self.cache,
            favorites=self.favorites,
            search_ttl=cfg.search_ttl,
            detail_ttl=cfg.detail_ttl,
        )
        self.plans = db.PlansRepository(database)
        self.shopping_lists = db.ShoppingListsRepository(database)
        self.generator = PlanGenerator(source=self.recipes, store=self.plans)

    async def aclose(self) -> None:
        await self.api.http_client.aclose()


def build_services(cfg: config.Config | None = None) -> Services:
    cfg = config.Config() if cfg is None else cfg
    return Services(cfg, Database(cfg.db_url))


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )


def render(shopping_list: ShoppingList) -> Table:
    table = Table(title=shopping_list.name)
    table.add_column("Ingredient")
    table.add_column("Amount", justify="right")
    table.add_column("Unit")
    for item in sorted(shopping_list.items, key=lambda i: i.name):
        table.add_row(item.name, f"{item.amount:g}", item.unit)
    return table


async def run(args: argparse.Namespace) -> None:
    services = build_services()
    setup_logging(services.config.log_level)
    console = Console()

    await services.db.connect()
    try:
        await db.create_tables(services.db)
        plan = create_plan(args.name, date.fromisoformat(args.start), days=args.days)
        await services.plans.save(plan)

        preferences = UserPreferences(
            dietary_restrictions=[DietaryRestriction(d) for d in args.diet],
            allergies=args.allergy,
            max_cooking_time=args.max_time,
        )
        await services.generator.generate(plan, preferences)

        for day in plan.days:
            for slot in day.meals:
                title = slot.recipe.title if slot.recipe else "-"
                console.print(f"{day.date.isoformat()} {slot.type.value:<9} {title}")

        shopping_list = aggregate_shopping_list(plan)
        await services.shopping_lists.save(shopping_list)
        console.print(render(shopping_list))
    finally:
        await services.aclose()
        await services.db.disconnect()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a meal plan and its shopping list.")
    parser.add_argument("--name", default="Meal Plan")
    parser.add_argument("--start", default=date.today().isoformat())
    parser.add_argument("--days", type=int, default=7)
    parser.add_argument(
        "--diet",
        action="append",
        default=[],
        choices=[d.value for d in DietaryRestriction],
    )
    parser.add_argument("--allergy", action="append", default=[])
    parser.add_argument("--max-time", type=int, default=None)
    return parser.parse_args(argv)


def main() -> None:
    asyncio.run(run(parse_args()))


if __name__ == "__main__":
    main()
