"""
FastAPI Application Entry Point

Food Ordering Service - customer and owner API.

Endpoints:
    - POST /api/auth/register, /api/auth/login: Accounts
    - GET /api/food/items, POST /api/food/add, DELETE /api/food/delete/{id}: Catalog
    - POST /api/orders/create: Place an order
    - GET /api/orders/customer/{id}, /api/orders/all: Order history
    - PUT /api/orders/update-status, /api/orders/feedback: Lifecycle
    - GET /dashboard: Owner dashboard UI
    - GET /health: System health check

Every JSON response is an envelope: {"success": bool, "message": str, ...}.
Business-rule failures come back as HTTP 200 with success=false and an
"error" code; an unreachable record store is a 503.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from redis import asyncio as aioredis
from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy import exc as sa_exc
from sqlalchemy.ext.asyncio import AsyncSession

from foodorder.core.config import Settings, get_settings, setup_logging
from foodorder.database import RecordStore, get_db
from foodorder.exceptions import FoodOrderError, StoreUnavailable
from foodorder.models import Order, OrderStatus
from foodorder.schemas import (
    AuthResponse,
    CategoryListResponse,
    Envelope,
    FeedbackRequest,
    FoodResponse,
    HealthResponse,
    ItemListResponse,
    LedgerResponse,
    LoginRequest,
    MenuItemCreate,
    MenuItemResponse,
    OrderCreate,
    OrderEnvelope,
    OrderListEnvelope,
    OrderResponse,
    RegisterRequest,
    StatusUpdateRequest,
    UserPublic,
)
from foodorder.services import AccountService, CatalogService, OrderService
from foodorder.services.excel_manager import ExcelManager
from foodorder.services.orders import LineItem, next_statuses
from foodorder.tasks import export_order_to_ledger

setup_logging()
logger = logging.getLogger(__name__)

# Template configuration
templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

router = APIRouter()


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_account_service(db: AsyncSession = Depends(get_db)) -> AccountService:
    return AccountService(db)


def get_catalog_service(db: AsyncSession = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


def get_order_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> OrderService:
    return OrderService(
        db,
        enforce_transitions=settings.enforce_transitions,
        validate_totals=settings.validate_order_totals,
        tolerance=settings.total_tolerance,
    )


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def order_to_wire(order: Order) -> dict[str, Any]:
    """Order as the JSON clients receive."""
    return OrderResponse.model_validate(order).model_dump(mode="json", by_alias=True)


def queue_ledger_export(order: Order, settings: Settings) -> None:
    """Hand a finished order to the Celery worker for the Excel ledger."""
    if not (settings.ledger_export_enabled and order.status.is_terminal):
        return
    try:
        export_order_to_ledger.delay(order_to_wire(order))
    except Exception as e:
        # the order change is already committed; the ledger is best-effort
        logger.warning(f"Could not queue ledger export for order #{order.id}: {e}")


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@router.get("/", tags=["Root"])
async def root(settings: Settings = Depends(get_app_settings)) -> dict[str, str]:
    """API root with navigation links."""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.env_mode.value,
        "documentation": "/docs",
        "dashboard": "/dashboard",
        "health": "/health",
    }


@router.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(
    request: Request,
    settings: Settings = Depends(get_app_settings),
) -> HealthResponse:
    """Verify the record store and the Celery broker are reachable."""
    db_status = "healthy"
    try:
        await request.app.state.store.ping()
    except Exception as e:
        db_status = f"unhealthy: {str(e)}"
        logger.error(f"Database health check failed: {e}")

    redis_status = "healthy"
    try:
        r = aioredis.from_url(settings.redis_url, socket_timeout=2)
        try:
            await r.ping()
        finally:
            await r.aclose()
    except Exception as e:
        redis_status = f"unhealthy: {str(e)}"
        logger.error(f"Redis health check failed: {e}")

    # Redis only carries ledger exports, so it only counts when they are on
    required = [db_status]
    if settings.ledger_export_enabled:
        required.append(redis_status)
    overall = "operational" if all(s == "healthy" for s in required) else "degraded"

    return HealthResponse(
        status=overall,
        database=db_status,
        redis=redis_status,
        timestamp=datetime.now(),
    )


# =============================================================================
# AUTH ENDPOINTS
# =============================================================================

@router.post("/api/auth/register", response_model=AuthResponse, tags=["Auth"])
async def register(
    payload: RegisterRequest,
    accounts: AccountService = Depends(get_account_service),
) -> AuthResponse:
    """Create a customer or owner account."""
    user = await accounts.register(
        name=payload.name,
        email=payload.email,
        password=payload.password,
        phone=payload.phone,
        address=payload.address,
        role=payload.role,
        restaurant_name=payload.restaurant_name,
    )
    return AuthResponse(
        message="Registration successful",
        user=UserPublic.model_validate(user),
    )


@router.post("/api/auth/login", response_model=AuthResponse, tags=["Auth"])
async def login(
    payload: LoginRequest,
    accounts: AccountService = Depends(get_account_service),
) -> AuthResponse:
    """Check credentials and return the profile for the client to cache."""
    user = await accounts.login(payload.email, payload.password, payload.role)
    return AuthResponse(
        message="Login successful",
        user=UserPublic.model_validate(user),
    )


@router.get("/api/auth/users/{user_id}", response_model=AuthResponse, tags=["Auth"])
async def get_user(
    user_id: str,
    accounts: AccountService = Depends(get_account_service),
) -> AuthResponse:
    """Fetch a profile by id (used to refresh a cached session)."""
    user = await accounts.get_user(user_id)
    return AuthResponse(user=UserPublic.model_validate(user))


# =============================================================================
# CATALOG ENDPOINTS
# =============================================================================

@router.get("/api/food/items", response_model=ItemListResponse, tags=["Catalog"])
async def list_items(
    category: Optional[str] = Query(None),
    catalog: CatalogService = Depends(get_catalog_service),
) -> ItemListResponse:
    """List menu items in the order they were added."""
    items = await catalog.list_items(category=category)
    return ItemListResponse(items=[MenuItemResponse.model_validate(i) for i in items])


@router.get("/api/food/categories", response_model=CategoryListResponse, tags=["Catalog"])
async def list_categories(
    catalog: CatalogService = Depends(get_catalog_service),
) -> CategoryListResponse:
    return CategoryListResponse(categories=await catalog.categories())


@router.post("/api/food/add", response_model=FoodResponse, tags=["Catalog"])
async def add_item(
    payload: MenuItemCreate,
    catalog: CatalogService = Depends(get_catalog_service),
) -> FoodResponse:
    """Add a menu item."""
    item = await catalog.add_item(payload.model_dump())
    return FoodResponse(
        message="Food item added",
        food=MenuItemResponse.model_validate(item),
    )


@router.delete("/api/food/delete/{item_id}", response_model=Envelope, tags=["Catalog"])
async def delete_item(
    item_id: str,
    catalog: CatalogService = Depends(get_catalog_service),
) -> Envelope:
    """Delete a menu item. Unknown ids also report success."""
    await catalog.delete_item(item_id)
    return Envelope(message="Food item deleted")


# =============================================================================
# ORDER ENDPOINTS
# =============================================================================

@router.post("/api/orders/create", response_model=OrderEnvelope, tags=["Orders"])
async def create_order(
    payload: OrderCreate,
    orders: OrderService = Depends(get_order_service),
) -> OrderEnvelope:
    """Place an order. The total is recomputed from the line items."""
    logger.info(f"Creating order for customer {payload.customer_id}")

    order = await orders.create_order(
        customer_id=payload.customer_id,
        customer_name=payload.customer_name,
        customer_phone=payload.customer_phone,
        customer_address=payload.customer_address,
        items=[
            LineItem(
                name=item.name,
                price=item.price,
                quantity=item.quantity,
                food_id=item.food_id,
            )
            for item in payload.items
        ],
        payment_method=payload.payment_method,
        total_amount=payload.total_amount,
    )
    return OrderEnvelope(
        message="Order placed successfully",
        order=OrderResponse.model_validate(order),
    )


@router.get(
    "/api/orders/customer/{customer_id}",
    response_model=OrderListEnvelope,
    tags=["Orders"],
)
async def list_customer_orders(
    customer_id: str,
    orders: OrderService = Depends(get_order_service),
) -> OrderListEnvelope:
    """A customer's orders, newest first."""
    result = await orders.list_orders_for_customer(customer_id)
    return OrderListEnvelope(orders=[OrderResponse.model_validate(o) for o in result])


@router.get("/api/orders/all", response_model=OrderListEnvelope, tags=["Orders"])
async def list_all_orders(
    status: Optional[OrderStatus] = Query(None),
    orders: OrderService = Depends(get_order_service),
) -> OrderListEnvelope:
    """Every order, newest first (owner view). An unknown status is a 422."""
    result = await orders.list_all_orders(status=status)
    return OrderListEnvelope(orders=[OrderResponse.model_validate(o) for o in result])


@router.get("/api/orders/{order_id}", response_model=OrderEnvelope, tags=["Orders"])
async def get_order(
    order_id: str,
    orders: OrderService = Depends(get_order_service),
) -> OrderEnvelope:
    order = await orders.get_order(order_id)
    return OrderEnvelope(order=OrderResponse.model_validate(order))


@router.put("/api/orders/update-status", response_model=OrderEnvelope, tags=["Orders"])
async def update_status(
    payload: StatusUpdateRequest,
    orders: OrderService = Depends(get_order_service),
    settings: Settings = Depends(get_app_settings),
) -> OrderEnvelope:
    """Advance an order along the fulfillment pipeline."""
    order = await orders.update_status(payload.order_id, payload.status)
    queue_ledger_export(order, settings)
    return OrderEnvelope(
        message="Order status updated",
        order=OrderResponse.model_validate(order),
    )


@router.put("/api/orders/feedback", response_model=OrderEnvelope, tags=["Orders"])
async def submit_feedback(
    payload: FeedbackRequest,
    orders: OrderService = Depends(get_order_service),
) -> OrderEnvelope:
    """Rate a delivered order (once)."""
    order = await orders.submit_feedback(payload.order_id, payload.rating, payload.comment)
    return OrderEnvelope(
        message="Feedback submitted",
        order=OrderResponse.model_validate(order),
    )


# =============================================================================
# DASHBOARD & REPORT ENDPOINTS
# =============================================================================

@router.get("/api/dashboard-data", tags=["Dashboard"])
async def dashboard_data(
    orders: OrderService = Depends(get_order_service),
    settings: Settings = Depends(get_app_settings),
) -> dict[str, Any]:
    """Get aggregated dashboard statistics."""
    summary = await orders.dashboard_summary()
    summary["recent_orders"] = [order_to_wire(o) for o in summary["recent_orders"]]
    return {"success": True, "environment": settings.env_mode.value, **summary}


@router.get("/dashboard", response_class=HTMLResponse, tags=["Dashboard"])
async def dashboard_page(
    request: Request,
    orders: OrderService = Depends(get_order_service),
    settings: Settings = Depends(get_app_settings),
) -> HTMLResponse:
    """Owner dashboard: live orders with their next actions."""
    summary = await orders.dashboard_summary(recent=50)
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "app_name": settings.app_name,
            "currency": settings.currency_symbol,
            "summary": summary,
            "next_statuses": next_statuses,
        },
    )


@router.get("/api/reports/ledger", response_model=LedgerResponse, tags=["Dashboard"])
def ledger_rows(settings: Settings = Depends(get_app_settings)) -> LedgerResponse:
    """Rows exported to the Excel ledger so far."""
    manager = ExcelManager(
        data_dir=settings.data_directory,
        filename=settings.ledger_filename,
        lock_timeout=settings.ledger_lock_timeout,
    )
    return LedgerResponse(rows=manager.get_all_orders())


# =============================================================================
# ERROR HANDLERS
# =============================================================================

async def food_order_error_handler(request: Request, exc: FoodOrderError) -> JSONResponse:
    """Business-rule failures: HTTP 200 with success=false."""
    status_code = 503 if isinstance(exc, StoreUnavailable) else 200
    return JSONResponse(status_code=status_code, content=exc.to_dict())


async def store_error_handler(request: Request, exc: sa_exc.DBAPIError) -> JSONResponse:
    """Connection-level database failures."""
    logger.error(f"Record store unavailable: {exc}")
    return JSONResponse(status_code=503, content=StoreUnavailable().to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "message": "Invalid request",
            "error": "ValidationError",
            "detail": jsonable_encoder(exc.errors()),
        },
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")
    debug = request.app.state.settings.debug

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": "Internal Server Error",
            "detail": str(exc) if debug else "An unexpected error occurred",
        },
    )


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    settings: Settings = app.state.settings
    store: RecordStore = app.state.store

    logger.info("=" * 60)
    logger.info(f"Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Transitions enforced: {settings.enforce_transitions}")
    logger.info(f"   Totals validated: {settings.validate_order_totals}")
    logger.info("=" * 60)

    await store.init()

    if settings.seed_catalog:
        async with store.session() as session:
            await CatalogService(session).seed_if_empty()

    logger.info("Application ready!")

    yield  # Application runs

    logger.info("Shutting down...")
    await store.dispose()
    logger.info("Cleanup complete")


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[RecordStore] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Configuration (defaults to environment settings)
        store: Record store handle (defaults to one built from settings.database_url)
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Food ordering API: catalog, accounts and the order fulfillment pipeline.",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
    )
    app.state.settings = settings
    app.state.store = store or RecordStore(settings.database_url, echo=settings.database_echo)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials="*" not in settings.allowed_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(FoodOrderError, food_order_error_handler)
    app.add_exception_handler(sa_exc.OperationalError, store_error_handler)
    app.add_exception_handler(sa_exc.InterfaceError, store_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run("foodorder.main:app", host=_settings.api_host, port=_settings.api_port)
