"""Registry router: bots.

Handlers are plain functions: registry calls block on a lock and file I/O, so
FastAPI runs them in its threadpool.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from pydantic import ValidationError as SchemaError

from api.models.registry import ApiResponse
from api.services.registry_service import get_registry_service
from core.errors import ValidationError
from core.models import BotFilter, BotInsertArgs, BotPatch, BotView
from core.registry import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT, LocalRegistryClient

router = APIRouter()


def bot_filters(
    bot_id: Optional[str] = Query(None),
    name: Optional[str] = Query(None),
    exchange: Optional[str] = Query(None),
    api_key: Optional[str] = Query(None),
    rest_endpoint: Optional[str] = Query(None),
    rpc_endpoint: Optional[str] = Query(None),
    trading_fee: Optional[float] = Query(None),
    private_key: Optional[str] = Query(None),
    contract_address: Optional[str] = Query(None),
) -> BotFilter:
    try:
        return BotFilter(
            bot_id=bot_id,
            name=name,
            exchange=exchange,
            api_key=api_key,
            rest_endpoint=rest_endpoint,
            rpc_endpoint=rpc_endpoint,
            trading_fee=trading_fee,
            private_key=private_key,
            contract_address=contract_address,
        )
    except SchemaError as exc:
        raise ValidationError(f"Invalid bot filter: {exc.errors()[0]['msg']}") from exc


@router.post("", status_code=201, response_model=ApiResponse[BotView])
def create_bot(
    args: BotInsertArgs,
    response: Response,
    registry: LocalRegistryClient = Depends(get_registry_service),
):
    view = registry.create_bot(args)
    response.headers["Location"] = f"/bots/{view.bot_id}"
    return ApiResponse[BotView](data=view)


@router.get("", response_model=ApiResponse[List[BotView]])
def list_bots(
    filters: BotFilter = Depends(bot_filters),
    page: int = Query(DEFAULT_PAGE),
    limit: int = Query(DEFAULT_PAGE_LIMIT),
    registry: LocalRegistryClient = Depends(get_registry_service),
):
    return ApiResponse[List[BotView]](data=registry.list_bots(filters, page=page, limit=limit))


@router.get("/{bot_id}", response_model=ApiResponse[BotView])
def get_bot(bot_id: str, registry: LocalRegistryClient = Depends(get_registry_service)):
    return ApiResponse[BotView](data=registry.get_bot(bot_id))


@router.put("/{bot_id}", response_model=ApiResponse[BotView])
def update_bot(
    bot_id: str,
    patch: BotPatch,
    registry: LocalRegistryClient = Depends(get_registry_service),
):
    return ApiResponse[BotView](data=registry.update_bot(bot_id, patch))


@router.delete("/{bot_id}", response_model=ApiResponse[BotView])
def delete_bot(bot_id: str, registry: LocalRegistryClient = Depends(get_registry_service)):
    return ApiResponse[BotView](data=registry.delete_bot(bot_id))
