from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Awaitable, Callable

from fastapi import APIRouter, Depends, FastAPI, Header, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from returns.maybe import Maybe, Nothing, Some
from returns.result import Failure, Success
from starlette.exceptions import HTTPException as StarletteHTTPException

from marketplace.core.domain.model.errors import (
    AuthError,
    Forbidden,
    MarketplaceError,
    NotFound,
    PersistenceError,
    RateLimited,
    ValidationError,
)
from marketplace.core.ports.inbound.admin_auth import AdminAuthUseCase, LoginCommand
from marketplace.core.ports.inbound.catalog import (
    CatalogUseCase,
    ProductDraft,
    ProductPatch,
)
from marketplace.core.ports.inbound.order_admin import (
    OrderAdminUseCase,
    UpdateOrderStatusCommand,
)
from marketplace.core.ports.inbound.place_order import (
    PlaceOrderCommand,
    PlaceOrderLine,
    PlaceOrderUseCase,
)
from marketplace.core.ports.outbound.documents import Document
from marketplace.core.ports.outbound.rate_limit import RateLimiter
from marketplace.core.ports.outbound.tokens import AdminClaims

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
}

# ---- HTTP DTOs (adapter layer) ---------------------------------------------


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CartLineIn(CamelModel):
    product_id: str | None = Field(None, examples=["3f1c..."])
    qty: int | float | None = Field(None, examples=[1])


class PlaceOrderRequest(CamelModel):
    customer_name: str | None = Field(None, examples=["Ada Lovelace"])
    customer_email: str | None = Field(None, examples=["ada@example.com"])
    customer_phone: str | None = Field(None, examples=["+44 20 7946 0000"])
    customer_address: str | None = Field(None, examples=["12 St James's Sq, London"])
    items: list[CartLineIn] = Field(default_factory=list)


class ProductIn(CamelModel):
    name: str | None = Field(None, examples=["Aurora Headphones"])
    price: float | str | None = Field(None, examples=[129.99])
    logo: str | None = None
    description: str | None = None


class StatusIn(CamelModel):
    status: str | None = Field(None, examples=["PROCESSING"])


class LoginIn(CamelModel):
    username: str | None = None
    password: str | None = None


class DocumentResponse(CamelModel):
    items: list[dict[str, Any]]
    updated_at: str | None


class OrderReceiptResponse(CamelModel):
    ok: bool = True
    order_id: str
    total: float


class LoginResponse(CamelModel):
    ok: bool = True
    token: str
    expires_in: int


class ItemResponse(CamelModel):
    ok: bool = True
    item: dict[str, Any]


class OkResponse(CamelModel):
    ok: bool = True


class ErrorResponse(BaseModel):
    error: str


def _map_error_to_http(err: MarketplaceError) -> tuple[int, ErrorResponse]:
    if isinstance(err, ValidationError):
        return 400, ErrorResponse(error=str(err))

    if isinstance(err, NotFound):
        return 404, ErrorResponse(error=str(err))

    if isinstance(err, Forbidden):
        return 403, ErrorResponse(error=str(err))

    if isinstance(err, AuthError):
        return 401, ErrorResponse(error=str(err))

    if isinstance(err, RateLimited):
        return 429, ErrorResponse(error=str(err))

    if isinstance(err, PersistenceError):
        return 500, ErrorResponse(error="Internal error")

    return 500, ErrorResponse(error="Internal server error")


def _error_response(err: MarketplaceError) -> JSONResponse:
    status, body = _map_error_to_http(err)
    response = JSONResponse(status_code=status, content=body.model_dump())
    if isinstance(err, RateLimited):
        response.headers["Retry-After"] = str(err.retry_after)
    return response


def _describe_validation(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    if first.get("type") == "json_invalid":
        return "Invalid JSON body"
    loc = [str(p) for p in first.get("loc", ()) if p != "body"]
    if not loc:
        return "Invalid request body"
    return f"Invalid request field: {'.'.join(loc)}"


def _client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def _document_response(document: Document) -> DocumentResponse:
    return DocumentResponse(
        items=[dict(it) for it in document.items], updated_at=document.updated_at
    )


def _present(model: BaseModel, name: str) -> Maybe[object]:
    # absent fields keep the stored value; explicit nulls are sanitized like any value
    if name in model.model_fields_set:
        return Some(getattr(model, name))
    return Nothing


# ---- App factory -----------------------------------------------------------


def create_app(
    place_order_uc: PlaceOrderUseCase,
    catalog_uc: CatalogUseCase,
    order_admin_uc: OrderAdminUseCase,
    admin_auth_uc: AdminAuthUseCase,
    *,
    limiter: RateLimiter,
    login_limiter: RateLimiter,
    max_body_bytes: int = 1024 * 1024,
    public_dir: Path | None = None,
    admin_dir: Path | None = None,
) -> FastAPI:
    app = FastAPI(title="marketplace")

    # --- exception handlers ---------------------------------------------------

    @app.exception_handler(MarketplaceError)
    async def handle_domain_error(_: Request, exc: MarketplaceError) -> JSONResponse:
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        _: Request, exc: RequestValidationError
    ) -> JSONResponse:
        body = ErrorResponse(error=_describe_validation(exc))
        return JSONResponse(status_code=400, content=body.model_dump())

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(
        _: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        message = "Not found" if exc.status_code == 404 else str(exc.detail)
        body = ErrorResponse(error=message)
        return JSONResponse(
            status_code=exc.status_code,
            content=body.model_dump(),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled error on %s %s", request.method, request.url.path)
        body = ErrorResponse(error="Internal server error")
        return JSONResponse(status_code=500, content=body.model_dump())

    # --- boundary: body size, request budget, headers -------------------------

    @app.middleware("http")
    async def boundary(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        length = request.headers.get("content-length", "")
        if length.isdigit() and int(length) > max_body_bytes:
            response: Response = JSONResponse(
                status_code=413,
                content=ErrorResponse(error="Payload too large").model_dump(),
            )
        else:
            budget = limiter.hit(_client_key(request))
            if isinstance(budget, Failure):
                logger.warning("rate limit hit by %s", _client_key(request))
                response = _error_response(budget.failure())
            else:
                try:
                    response = await call_next(request)
                except Exception as e:
                    response = await handle_unexpected(request, e)

        for name, value in SECURITY_HEADERS.items():
            response.headers[name] = value
        return response

    # --- dependencies ---------------------------------------------------------

    def require_admin(authorization: str | None = Header(None)) -> AdminClaims:
        result = admin_auth_uc.authorize(authorization)
        if isinstance(result, Success):
            return result.unwrap()
        raise result.failure()

    def login_budget(request: Request) -> None:
        budget = login_limiter.hit(_client_key(request))
        if isinstance(budget, Failure):
            logger.warning("login rate limit hit by %s", _client_key(request))
            raise budget.failure()

    # --- public routes --------------------------------------------------------

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/products", response_model=DocumentResponse)
    def list_products() -> Any:
        return _document_response(catalog_uc.list_products())

    @app.get(
        "/api/products/{product_id}",
        responses={404: {"model": ErrorResponse}},
    )
    def get_product(product_id: str) -> Any:
        result = catalog_uc.get_product(product_id)
        if isinstance(result, Success):
            return dict(result.unwrap())
        raise result.failure()

    @app.post(
        "/api/orders",
        response_model=OrderReceiptResponse,
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    def place_order(req: PlaceOrderRequest) -> Any:
        cmd = PlaceOrderCommand(
            customer_name=req.customer_name,
            customer_email=req.customer_email,
            customer_phone=req.customer_phone,
            customer_address=req.customer_address,
            lines=tuple(
                PlaceOrderLine(product_id=ln.product_id or "", qty=ln.qty)
                for ln in req.items
            ),
        )

        result = place_order_uc.place_order(cmd)

        if isinstance(result, Success):
            receipt = result.unwrap()
            return OrderReceiptResponse(
                order_id=receipt.order_id.value, total=receipt.total.to_json()
            )

        raise result.failure()

    # --- admin routes ---------------------------------------------------------

    @app.post(
        "/admin/api/login",
        response_model=LoginResponse,
        responses={401: {"model": ErrorResponse}, 429: {"model": ErrorResponse}},
        dependencies=[Depends(login_budget)],
    )
    def login(req: LoginIn) -> Any:
        result = admin_auth_uc.login(
            LoginCommand(username=req.username or "", password=req.password or "")
        )
        if isinstance(result, Success):
            session = result.unwrap()
            return LoginResponse(token=session.token, expires_in=session.expires_in)
        raise result.failure()

    admin = APIRouter(
        prefix="/admin/api",
        dependencies=[Depends(require_admin)],
        responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
    )

    @admin.get("/products", response_model=DocumentResponse)
    def admin_list_products() -> Any:
        return _document_response(catalog_uc.list_products())

    @admin.post(
        "/products",
        response_model=ItemResponse,
        responses={400: {"model": ErrorResponse}},
    )
    def create_product(req: ProductIn) -> Any:
        result = catalog_uc.create_product(
            ProductDraft(
                name=req.name,
                price=req.price,
                logo=req.logo,
                description=req.description,
            )
        )
        if isinstance(result, Success):
            return ItemResponse(item=dict(result.unwrap()))
        raise result.failure()

    @admin.put(
        "/products/{product_id}",
        response_model=ItemResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    )
    def update_product(product_id: str, req: ProductIn) -> Any:
        result = catalog_uc.update_product(
            ProductPatch(
                product_id=product_id,
                name=_present(req, "name"),
                price=_present(req, "price"),
                logo=_present(req, "logo"),
                description=_present(req, "description"),
            )
        )
        if isinstance(result, Success):
            return ItemResponse(item=dict(result.unwrap()))
        raise result.failure()

    @admin.delete(
        "/products/{product_id}",
        response_model=OkResponse,
        responses={404: {"model": ErrorResponse}},
    )
    def delete_product(product_id: str) -> Any:
        result = catalog_uc.delete_product(product_id)
        if isinstance(result, Success):
            return OkResponse()
        raise result.failure()

    @admin.get("/orders", response_model=DocumentResponse)
    def list_orders() -> Any:
        return _document_response(order_admin_uc.list_orders())

    @admin.put(
        "/orders/{order_id}/status",
        response_model=ItemResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    )
    def update_order_status(order_id: str, req: StatusIn) -> Any:
        result = order_admin_uc.update_status(
            UpdateOrderStatusCommand(order_id=order_id, status=req.status)
        )
        if isinstance(result, Success):
            return ItemResponse(item=dict(result.unwrap()))
        raise result.failure()

    app.include_router(admin)

    # --- static sites (mounted last so API routes win) ------------------------

    if admin_dir is not None:
        app.mount("/admin", StaticFiles(directory=admin_dir, html=True), name="admin")
    if public_dir is not None:
        app.mount("/", StaticFiles(directory=public_dir, html=True), name="public")

    return app
