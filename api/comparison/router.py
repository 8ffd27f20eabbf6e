"""
Comparison API endpoints. Every route acts on the signed-in user's data.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from auth import dependencies as auth_dependencies
from catalog.store import CatalogStore, get_store

from . import schemas, service

router = APIRouter()


@router.post("")
async def compare(
    payload: schemas.CompareRequest,
    store: CatalogStore = Depends(get_store),
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    comparison = await service.run_comparison(store, payload, user_id=int(current_user["id"]))
    return {"comparison": comparison}


@router.get("/history")
async def comparison_history(
    store: CatalogStore = Depends(get_store),
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    comparisons = await service.history(store, user_id=int(current_user["id"]))
    return {"comparisons": comparisons, "count": len(comparisons)}


@router.get("/{comparison_id}")
async def get_comparison(
    comparison_id: int,
    store: CatalogStore = Depends(get_store),
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    comparison = await service.get_comparison(store, comparison_id, user_id=int(current_user["id"]))
    return {"comparison": comparison}
