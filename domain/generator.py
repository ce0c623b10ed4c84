"""Concurrent recipe selection for every slot of a plan.

A run asks the recipe source for one recipe per slot, all at once. The plan
is only touched after every request came back; if any request fails, the
outstanding ones are cancelled and the plan stays as it was.
"""
import asyncio
from enum import Enum
import logging
from typing import Protocol

from domain.errors import GenerationError
from domain.models import Recipe
from domain.plan import MealSlot, Plan, UserPreferences, fingerprint_for
from domain.repository import RecipeSource


logger = logging.getLogger(__name__)


class GenerationState(Enum):
    idle = "idle"
    running = "running"
    succeeded = "succeeded"
    failed = "failed"


class PlanStore(Protocol):
    async def save(self, plan: Plan) -> None:
        ...


def assign(plan: Plan, recipes: dict[str, Recipe]) -> None:
    for _, slot in plan.slots():
        if slot.id in recipes:
            slot.recipe = recipes[slot.id]


class GenerationRun:
    def __init__(
        self,
        *,
        plan: Plan,
        preferences: UserPreferences,
        source: RecipeSource,
        store: PlanStore | None = None,
    ) -> None:
        self.plan = plan
        self.preferences = preferences
        self.source = source
        self.store = store
        self.state = GenerationState.idle
        self.error: Exception | None = None

    async def select(self, slot: MealSlot, offset: int = 0) -> tuple[MealSlot, Recipe | None]:
        fingerprint = fingerprint_for(slot, self.preferences)
        # The day index picks a different search hit for each day.
        recipes = await self.source.search(fingerprint, number=1, offset=offset)
        return slot, recipes[0] if recipes else None

    async def commit(self, selections: list[tuple[MealSlot, Recipe | None]]) -> None:
        recipes = {slot.id: recipe for slot, recipe in selections if recipe is not None}
        if self.store is not None:
            staged = Plan.from_dict(self.plan.to_dict())
            assign(staged, recipes)
            await self.store.save(staged)
        # No await between here and the end, readers see all slots or none.
        assign(self.plan, recipes)

    def fail(self, e: Exception) -> GenerationError:
        self.state = GenerationState.failed
        self.error = e
        logger.warning("Generating plan %s failed: %s", self.plan.id, e)
        return GenerationError(f"Could not generate plan {self.plan.name!r}: {e}")

    async def execute(self) -> Plan:
        if self.state is not GenerationState.idle:
            raise GenerationError(f"Run is already {self.state.value}.")
        self.state = GenerationState.running

        slots = [
            (slot, offset) for offset, day in enumerate(self.plan.days) for slot in day.meals
        ]
        logger.info("Generating %d slots for plan %s", len(slots), self.plan.id)
        tasks = [asyncio.create_task(self.select(slot, offset)) for slot, offset in slots]
        try:
            selections = await asyncio.gather(*tasks)
        except asyncio.CancelledError:
            self.state = GenerationState.failed
            raise
        except Exception as e:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise self.fail(e) from e

        try:
            await self.commit(selections)
        except Exception as e:
            raise self.fail(e) from e

        self.state = GenerationState.succeeded
        filled = sum(1 for _, recipe in selections if recipe is not None)
        logger.info("Plan %s generated, %d of %d slots filled", self.plan.id, filled, len(slots))
        return self.plan


class PlanGenerator:
    def __init__(self, *, source: RecipeSource, store: PlanStore | None = None) -> None:
        self.source = source
        self.store = store

    def new_run(self, plan: Plan, preferences: UserPreferences) -> GenerationRun:
        return GenerationRun(
            plan=plan,
            preferences=preferences,
            source=self.source,
            store=self.store,
        )

    async def generate(self, plan: Plan, preferences: UserPreferences) -> Plan:
        return await self.new_run(plan, preferences).execute()
