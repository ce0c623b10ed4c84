from databases import Database

from domain import codec
from domain.errors import PlanNotFound
from domain.models import Recipe
from domain.plan import Plan
from domain.shopping import ShoppingList


CREATE_PLANS_TABLE = """
CREATE TABLE IF NOT EXISTS Plans (id VARCHAR(64) PRIMARY KEY, name VARCHAR(256), body TEXT)
"""


CREATE_SHOPPING_LISTS_TABLE = """
CREATE TABLE IF NOT EXISTS ShoppingLists (
    id VARCHAR(64) PRIMARY KEY, plan_id VARCHAR(64), name VARCHAR(256), body TEXT
)
"""


SAVE_PLAN = """
INSERT OR REPLACE INTO Plans(id, name, body) VALUES (:id, :name, :body)
"""


GET_PLAN = "SELECT * FROM Plans WHERE id = :id"


LIST_PLANS = "SELECT * FROM Plans ORDER BY rowid DESC"


DELETE_PLAN = "DELETE FROM Plans WHERE id = :id"


SAVE_SHOPPING_LIST = """
INSERT OR REPLACE INTO ShoppingLists(id, plan_id, name, body)
VALUES (:id, :plan_id, :name, :body)
"""


LIST_SHOPPING_LISTS = "SELECT * FROM ShoppingLists WHERE plan_id = :plan_id"


DELETE_SHOPPING_LISTS = "DELETE FROM ShoppingLists WHERE plan_id = :plan_id"


CREATE_FAVORITES_TABLE = """
CREATE TABLE IF NOT EXISTS Favorites (id INTEGER PRIMARY KEY, title VARCHAR(256), body TEXT)
"""


SAVE_FAVORITE = """
INSERT OR REPLACE INTO Favorites(id, title, body) VALUES (:id, :title, :body)
"""


GET_FAVORITE = "SELECT * FROM Favorites WHERE id = :id"


LIST_FAVORITES = "SELECT * FROM Favorites ORDER BY title"


DELETE_FAVORITE = "DELETE FROM Favorites WHERE id = :id"


async def create_tables(db: Database) -> None:
    await db.execute(query=CREATE_PLANS_TABLE)  # pyright: ignore[reportUnknownMemberType]
    await db.execute(  # pyright: ignore[reportUnknownMemberType]
        query=CREATE_SHOPPING_LISTS_TABLE
    )
    await db.execute(query=CREATE_FAVORITES_TABLE)  # pyright: ignore[reportUnknownMemberType]


class PlansRepository:
    """Plans stored whole, as one encoded document per row."""

    def __init__(self, db: Database) -> None:
        self.db = db

    async def save(self, plan: Plan) -> None:
        await self.db.execute(  # pyright: ignore[reportUnknownMemberType]
            SAVE_PLAN,
            values={"id": plan.id, "name": plan.name, "body": codec.encode(plan).decode()},
        )

    async def get(self, id: str) -> Plan:
        result = await self.db.fetch_one(  # pyright: ignore[reportUnknownMemberType]
            GET_PLAN, values={"id": id}
        )
        if result is None:
            raise PlanNotFound(f"{id}")
        return codec.decode(result["body"].encode(), Plan.from_dict)

    async def list(self) -> tuple[Plan, ...]:
        result = await self.db.fetch_all(LIST_PLANS)  # pyright: ignore[reportUnknownMemberType]
        return tuple(codec.decode(r["body"].encode(), Plan.from_dict) for r in result)

    async def delete(self, id: str) -> None:
        async with self.db.transaction():
            await self.db.execute(  # pyright: ignore[reportUnknownMemberType]
                DELETE_SHOPPING_LISTS, values={"plan_id": id}
            )
            await self.db.execute(  # pyright: ignore[reportUnknownMemberType]
                DELETE_PLAN, values={"id": id}
            )

    async def update_slot_recipe(self, id: str, slot_id: str, recipe: Recipe | None) -> Plan:
        """Swap the recipe of one slot in a stored plan and save it back."""
        plan = await self.get(id)
        plan.replace_recipe(slot_id, recipe)
        await self.save(plan)
        return plan


class ShoppingListsRepository:
    def __init__(self, db: Database) -> None:
        self.db = db

    async def save(self, shopping_list: ShoppingList) -> None:
        plan = shopping_list.source_plan
        await self.db.execute(  # pyright: ignore[reportUnknownMemberType]
            SAVE_SHOPPING_LIST,
            values={
                "id": shopping_list.id,
                "plan_id": None if plan is None else plan.id,
                "name": shopping_list.name,
                "body": codec.encode(shopping_list).decode(),
            },
        )

    async def list_for_plan(self, plan: Plan) -> tuple[ShoppingList, ...]:
        result = await self.db.fetch_all(  # pyright: ignore[reportUnknownMemberType]
            LIST_SHOPPING_LISTS, values={"plan_id": plan.id}
        )
        lists = [codec.decode(r["body"].encode(), ShoppingList.from_dict) for r in result]
        for shopping_list in lists:
            shopping_list.source_plan = plan
        return tuple(lists)


class FavoritesRepository:
    """Recipes the user kept, stored locally so they outlive the cache."""

    def __init__(self, db: Database) -> None:
        self.db = db

    async def save(self, recipe: Recipe) -> None:
        recipe.is_favorite = True
        await self.db.execute(  # pyright: ignore[reportUnknownMemberType]
            SAVE_FAVORITE,
            values={"id": recipe.id, "title": recipe.title, "body": codec.encode(recipe).decode()},
        )

    async def get(self, id: int) -> Recipe | None:
        result = await self.db.fetch_one(  # pyright: ignore[reportUnknownMemberType]
            GET_FAVORITE, values={"id": id}
        )
        if result is None:
            return None
        return codec.decode(result["body"].encode(), Recipe.from_dict)

    async def list(self) -> tuple[Recipe, ...]:
        result = await self.db.fetch_all(LIST_FAVORITES)  # pyright: ignore[reportUnknownMemberType]
        return tuple(codec.decode(r["body"].encode(), Recipe.from_dict) for r in result)

    async def remove(self, id: int) -> None:
        await self.db.execute(  # pyright: ignore[reportUnknownMemberType]
            DELETE_FAVORITE, values={"id": id}
        )
