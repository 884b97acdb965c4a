from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from app.core.dependencies import get_current_admin, get_item_service
from app.models.auth import AdminIdentity
from app.models.item import Item, ItemCreate, ItemPage, ItemUpdate
from app.services.item_service import ItemService

router = APIRouter(prefix="/items", tags=["items"])


@router.get("", response_model=ItemPage)
async def list_items(
    page: int | None = None,
    limit: int | None = None,
    q: str | None = None,
    admin: AdminIdentity = Depends(get_current_admin),  # noqa: B008
    service: ItemService = Depends(get_item_service),  # noqa: B008
):
    return await service.list(q=q, page=page, limit=limit)


@router.post("", response_model=Item, status_code=status.HTTP_201_CREATED)
async def create_item(
    payload: ItemCreate,
    admin: AdminIdentity = Depends(get_current_admin),  # noqa: B008
    service: ItemService = Depends(get_item_service),  # noqa: B008
):
    return await service.create(payload)


@router.get("/{item_id}", response_model=Item)
async def get_item(
    item_id: str,
    admin: AdminIdentity = Depends(get_current_admin),  # noqa: B008
    service: ItemService = Depends(get_item_service),  # noqa: B008
):
    return await service.get(item_id)


@router.patch("/{item_id}", response_model=Item)
async def update_item(
    item_id: str,
    payload: ItemUpdate,
    admin: AdminIdentity = Depends(get_current_admin),  # noqa: B008
    service: ItemService = Depends(get_item_service),  # noqa: B008
):
    return await service.update(item_id, payload)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    item_id: str,
    admin: AdminIdentity = Depends(get_current_admin),  # noqa: B008
    service: ItemService = Depends(get_item_service),  # noqa: B008
):
    await service.delete(item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
