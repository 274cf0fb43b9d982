"""Recipe CRUD and price refresh endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.models import Recipe
from app.schemas.recipe import (
    RecipeCreate,
    RecipeUpdate,
    RecipeResponse,
    RecipeWithDetails,
    RecipeList,
    RecipeIngredientResponse,
    RecomputeAllResponse,
    RecomputeOneResponse,
    SkippedRecipeResponse,
)
from app.services.recipe_store import RecipeStore
from app.services.recompute import RecomputeEngine
from app.services.staleness import StalenessTracker

router = APIRouter(prefix="/recipes", tags=["recipes"])


def recipe_to_response(recipe: Recipe) -> RecipeResponse:
    return RecipeResponse(
        id=recipe.id,
        name=recipe.name,
        customer_id=recipe.customer_id,
        customer_name=recipe.customer.name if recipe.customer else None,
        density=recipe.density,
        total_cost=recipe.total_cost,
        is_price_updated=recipe.is_price_updated,
        last_price_update=recipe.last_price_update,
        packages=recipe.package_ids,
        created_at=recipe.created_at,
        updated_at=recipe.updated_at,
    )


def recipe_to_details(recipe: Recipe, store: RecipeStore) -> RecipeWithDetails:
    ingredients_response = []
    for ri in recipe.ingredients:
        material = ri.raw_material
        ingredients_response.append(
            RecipeIngredientResponse(
                id=ri.id,
                stock_id=ri.stock_id,
                name=ri.name,
                quantity=ri.quantity,
                price=ri.price,
                total=ri.total,
                stock_code=material.code if material else None,
                unit=material.unit if material else None,
                current_price=material.price if material else None,
            )
        )

    return RecipeWithDetails(
        **recipe_to_response(recipe).model_dump(),
        ingredients=ingredients_response,
        nutrients=store.nutrients(recipe),
    )


# ============================================================================
# Recipe Endpoints
# ============================================================================


@router.get("", response_model=RecipeList)
def list_recipes(db: Session = Depends(get_db)):
    """List live recipes with their package ids, newest first."""
    recipes = RecipeStore(db).list_recipes()
    return RecipeList(recipes=[recipe_to_response(r) for r in recipes], count=len(recipes))


@router.get("/check-price-updates", response_model=RecipeList)
def check_price_updates(db: Session = Depends(get_db)):
    """List recipes whose stored cost does not reflect current prices."""
    recipes = StalenessTracker(db).stale_recipes()
    return RecipeList(recipes=[recipe_to_response(r) for r in recipes], count=len(recipes))


@router.post("/update-prices", response_model=RecomputeAllResponse)
def update_prices(db: Session = Depends(get_db)):
    """
    Recompute the cost of every live recipe from current raw material prices.

    Recipes whose calculation fails are skipped and listed; they stay stale.
    """
    result = RecomputeEngine(db).recompute_all()
    return RecomputeAllResponse(
        message="Recipe prices updated",
        updated_count=result.updated_count,
        skipped=[SkippedRecipeResponse.model_validate(s) for s in result.skipped],
    )


@router.get("/{recipe_id}", response_model=RecipeWithDetails)
def get_recipe(recipe_id: int, db: Session = Depends(get_db)):
    """Get a recipe with ingredients and nutrient profile."""
    store = RecipeStore(db)
    return recipe_to_details(store.get_recipe(recipe_id), store)


@router.post("", response_model=RecipeWithDetails, status_code=201)
def create_recipe(data: RecipeCreate, db: Session = Depends(get_db)):
    """Create a recipe. Ingredient prices are snapshotted from current stock prices."""
    store = RecipeStore(db)
    recipe = store.create_recipe(data)
    return recipe_to_details(store.get_recipe(recipe.id), store)


@router.put("/{recipe_id}", response_model=RecipeWithDetails)
def update_recipe(recipe_id: int, data: RecipeUpdate, db: Session = Depends(get_db)):
    """Replace a recipe's fields, packages and ingredients."""
    store = RecipeStore(db)
    recipe = store.update_recipe(recipe_id, data)
    return recipe_to_details(store.get_recipe(recipe.id), store)


@router.delete("/{recipe_id}", status_code=204)
def delete_recipe(recipe_id: int, db: Session = Depends(get_db)):
    """Soft delete a recipe."""
    RecipeStore(db).delete_recipe(recipe_id)
    return None


@router.post("/{recipe_id}/copy", response_model=RecipeWithDetails, status_code=201)
def copy_recipe(recipe_id: int, db: Session = Depends(get_db)):
    """Duplicate a recipe with its ingredients and packages."""
    store = RecipeStore(db)
    copy = store.copy_recipe(recipe_id)
    return recipe_to_details(store.get_recipe(copy.id), store)


@router.post("/{recipe_id}/recompute", response_model=RecomputeOneResponse)
def recompute_recipe(recipe_id: int, db: Session = Depends(get_db)):
    """Recompute one recipe's cost from current prices."""
    total = RecomputeEngine(db).recompute_one(recipe_id)
    recipe = db.get(Recipe, recipe_id)
    return RecomputeOneResponse(
        recipe_id=recipe_id,
        total_cost=total,
        is_price_updated=bool(recipe.is_price_updated),
        last_price_update=recipe.last_price_update,
    )
