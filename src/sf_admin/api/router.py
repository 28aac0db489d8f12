# src/sf_admin/api/router.py
"""Admin REST API. Any admin role may read; VIEWER may not modify."""
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sf_admin.application.service import AdminOrderService
from src.sf_common.database import get_db_session
from src.sf_common.response import ApiResponse, success_response, with_request_id
from src.sf_gateway.auth.dependencies import Principal, require_admin, require_order_editor
from src.sf_order.application.schemas import UpdateStatusRequest

router = APIRouter(prefix="/admin", tags=["admin"])
_service = AdminOrderService()


def get_admin_service() -> AdminOrderService:
    return _service


@router.get("/orders")
async def list_orders(
    principal: Annotated[Principal, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[AdminOrderService, Depends(get_admin_service)],
    request: Request,
    status: str | None = Query(None, description="Filter by order status"),
    customer_id: str | None = Query(None, description="Filter by customer"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
    cursor: str | None = Query(None, description="Pagination cursor (order ID)"),
) -> ApiResponse:
    data = await service.list_orders(db, status, customer_id, limit, cursor)
    return with_request_id(success_response(data.model_dump(mode="json")), request)


@router.get("/orders/{order_id}")
async def get_order(
    order_id: str,
    principal: Annotated[Principal, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[AdminOrderService, Depends(get_admin_service)],
    request: Request,
) -> ApiResponse:
    data = await service.get_order(db, order_id)
    return with_request_id(success_response(data.model_dump(mode="json")), request)


@router.put("/orders/{order_id}/status")
async def update_status(
    order_id: str,
    body: UpdateStatusRequest,
    principal: Annotated[Principal, Depends(require_order_editor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[AdminOrderService, Depends(get_admin_service)],
    request: Request,
) -> ApiResponse:
    data = await service.set_status(db, order_id, body.status, body.cancel_reason)
    return with_request_id(success_response(data.model_dump(mode="json")), request)


@router.post("/orders/{order_id}/paid")
async def mark_paid(
    order_id: str,
    principal: Annotated[Principal, Depends(require_order_editor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[AdminOrderService, Depends(get_admin_service)],
    request: Request,
) -> ApiResponse:
    data = await service.mark_paid(db, order_id)
    return with_request_id(success_response(data.model_dump(mode="json")), request)
