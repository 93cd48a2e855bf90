"""HTTP adapter (FastAPI).

Authentication happens upstream; the gateway forwards the authenticated
user as ``X-User-Id`` and their role as ``X-User-Role``.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Literal

import structlog
from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from storefront.domain.exceptions import (
    DomainException,
    EntityNotFoundError,
    InsufficientStockError,
    InternalFailureError,
    ValidationError,
)
from storefront.infrastructure.bootstrap import Container

logger = structlog.get_logger(__name__)

# ---- HTTP DTOs -----------------------------------------------------------------


class CreateOrderRequest(BaseModel):
    payment_method: Literal["card", "cash"]
    payment_details: dict[str, Any] | None = None
    notes: str | None = Field(None, max_length=500)


class AddToCartRequest(BaseModel):
    product_id: str = Field(min_length=1)
    quantity: int = Field(ge=1)
    variant_ids: list[str] = Field(default_factory=list)


class UpdateCartItemRequest(BaseModel):
    quantity: int = Field(ge=1)


class UpdateStatusRequest(BaseModel):
    status: Literal["pending", "processing", "completed", "cancelled"]


class ErrorResponse(BaseModel):
    error: str
    message: str
    details: Any = None


def _error_body(exc: DomainException) -> dict[str, Any]:
    details = None
    if isinstance(exc, InsufficientStockError):
        details = {
            "product_id": exc.product_id,
            "available": exc.available,
            "requested": exc.requested,
        }
    return ErrorResponse(
        error=type(exc).__name__, message=str(exc), details=details
    ).model_dump()


def _status_for(exc: DomainException) -> int:
    if isinstance(exc, EntityNotFoundError):
        return 404
    if isinstance(exc, ValidationError):
        return 400
    return 500


# ---- Auth headers --------------------------------------------------------------


def current_user(x_user_id: str | None = Header(None, alias="X-User-Id")) -> str:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Authentication required")
    return x_user_id


def require_admin(
    user_id: str = Depends(current_user),
    x_user_role: str | None = Header(None, alias="X-User-Role"),
) -> str:
    if x_user_role != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return user_id


def create_app(container: Container) -> FastAPI:
    app = FastAPI(title="storefront")

    # --- exception handlers ----------------------------------------------------

    @app.exception_handler(DomainException)
    async def handle_domain_error(_: Request, exc: DomainException) -> JSONResponse:
        status = _status_for(exc)
        if isinstance(exc, InternalFailureError):
            # Cause already logged where it happened; never echo it back.
            body = ErrorResponse(error="InternalFailureError", message="Internal server error")
            return JSONResponse(status_code=status, content=body.model_dump())
        return JSONResponse(status_code=status, content=_error_body(exc))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(_: Request, exc: RequestValidationError) -> JSONResponse:
        body = ErrorResponse(
            error="RequestValidationError",
            message="Invalid request",
            details=jsonable_encoder(exc.errors()),
        )
        return JSONResponse(status_code=400, content=body.model_dump())

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error", path=request.url.path)
        body = ErrorResponse(error="InternalFailureError", message="Internal server error")
        return JSONResponse(status_code=500, content=body.model_dump())

    # --- routes ----------------------------------------------------------------

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    # Orders

    @app.post("/orders/create", status_code=201)
    def create_order(req: CreateOrderRequest, user_id: str = Depends(current_user)) -> dict[str, Any]:
        placed = container.place_order().handle(
            user_id=user_id,
            payment_method=req.payment_method,
            payment_details=req.payment_details,
            notes=req.notes,
        )
        return {
            "message": "Order created successfully",
            "orderId": placed.order_id,
            "totalAmount": placed.total_amount,
            "paymentStatus": placed.payment_status,
        }

    @app.get("/orders/my-orders")
    def my_orders(
        limit: int = Query(10, ge=1, le=100),
        offset: int = Query(0, ge=0),
        user_id: str = Depends(current_user),
    ) -> list[dict[str, Any]]:
        orders = container.list_orders().for_user(user_id, limit=limit, offset=offset)
        return [asdict(o) for o in orders]

    @app.get("/orders/admin/all")
    def all_orders(
        status: Literal["pending", "processing", "completed", "cancelled"] | None = None,
        limit: int = Query(50, ge=1, le=100),
        offset: int = Query(0, ge=0),
        _: str = Depends(require_admin),
    ) -> list[dict[str, Any]]:
        orders = container.list_orders().all(status=status, limit=limit, offset=offset)
        return [asdict(o) for o in orders]

    @app.put("/orders/admin/{order_id}/status")
    def update_order_status(
        order_id: int, req: UpdateStatusRequest, _: str = Depends(require_admin)
    ) -> dict[str, str]:
        container.update_order_status().handle(order_id, req.status)
        return {"message": "Order status updated successfully"}

    @app.get("/orders/{order_id}")
    def get_order(order_id: int, user_id: str = Depends(current_user)) -> dict[str, Any]:
        return asdict(container.show_order().handle(user_id, order_id))

    @app.post("/orders/{order_id}/reorder")
    def reorder(order_id: int, user_id: str = Depends(current_user)) -> dict[str, Any]:
        lines = container.reorder().handle(user_id, order_id)
        return {"message": "Items added to cart successfully", "lines": len(lines)}

    # Cart

    @app.get("/cart")
    def get_cart(user_id: str = Depends(current_user)) -> dict[str, Any]:
        return asdict(container.show_cart().handle(user_id))

    @app.post("/cart/add")
    def add_to_cart(req: AddToCartRequest, user_id: str = Depends(current_user)) -> dict[str, Any]:
        line = container.add_to_cart().handle(
            user_id, req.product_id, req.quantity, req.variant_ids
        )
        return {"message": "Item added to cart successfully", "lineId": line.id}

    @app.put("/cart/update/{line_id}")
    def update_cart_item(
        line_id: int, req: UpdateCartItemRequest, user_id: str = Depends(current_user)
    ) -> dict[str, str]:
        container.update_cart_item().handle(user_id, line_id, req.quantity)
        return {"message": "Cart item updated successfully"}

    @app.delete("/cart/remove/{line_id}")
    def remove_cart_item(line_id: int, user_id: str = Depends(current_user)) -> dict[str, str]:
        container.remove_cart_item().handle(user_id, line_id)
        return {"message": "Item removed from cart successfully"}

    @app.delete("/cart/clear")
    def clear_cart(user_id: str = Depends(current_user)) -> dict[str, str]:
        container.clear_cart().handle(user_id)
        return {"message": "Cart cleared successfully"}

    return app
