"""Registry router: listeners nested under their bot (sync handlers, see bots)."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from api.models.registry import ApiResponse
from api.services.registry_service import get_registry_service
from core.models import ListenerFilter, ListenerInsertArgs, ListenerPatch, ListenerView
from core.registry import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT, LocalRegistryClient

router = APIRouter()


def listener_filters(
    listener_id: Optional[str] = Query(None),
    service: Optional[str] = Query(None),
) -> ListenerFilter:
    return ListenerFilter(listener_id=listener_id, service=service)


@router.post("/{bot_id}/listeners", status_code=201, response_model=ApiResponse[ListenerView])
def add_listener(
    bot_id: str,
    args: ListenerInsertArgs,
    registry: LocalRegistryClient = Depends(get_registry_service),
):
    return ApiResponse[ListenerView](data=registry.add_listener(bot_id, args))


@router.get("/{bot_id}/listeners", response_model=ApiResponse[List[ListenerView]])
def list_listeners(
    bot_id: str,
    filters: ListenerFilter = Depends(listener_filters),
    page: int = Query(DEFAULT_PAGE),
    limit: int = Query(DEFAULT_PAGE_LIMIT),
    registry: LocalRegistryClient = Depends(get_registry_service),
):
    listeners = registry.list_listeners(bot_id, filters, page=page, limit=limit)
    return ApiResponse[List[ListenerView]](data=listeners)


@router.delete("/{bot_id}/listeners", response_model=ApiResponse[List[ListenerView]])
def delete_listeners(
    bot_id: str,
    filters: ListenerFilter = Depends(listener_filters),
    registry: LocalRegistryClient = Depends(get_registry_service),
):
    return ApiResponse[List[ListenerView]](data=registry.delete_listeners(bot_id, filters))


@router.get("/{bot_id}/listeners/{listener_id}", response_model=ApiResponse[ListenerView])
def get_listener(
    bot_id: str,
    listener_id: str,
    registry: LocalRegistryClient = Depends(get_registry_service),
):
    return ApiResponse[ListenerView](data=registry.get_listener(bot_id, listener_id))


@router.put("/{bot_id}/listeners/{listener_id}", response_model=ApiResponse[ListenerView])
def update_listener(
    bot_id: str,
    listener_id: str,
    patch: ListenerPatch,
    registry: LocalRegistryClient = Depends(get_registry_service),
):
    return ApiResponse[ListenerView](data=registry.update_listener(bot_id, listener_id, patch))


@router.delete("/{bot_id}/listeners/{listener_id}", response_model=ApiResponse[ListenerView])
def delete_listener(
    bot_id: str,
    listener_id: str,
    registry: LocalRegistryClient = Depends(get_registry_service),
):
    return ApiResponse[ListenerView](data=registry.delete_listener(bot_id, listener_id))
