"""Blom admin FastAPI application.

Multi-domain web server that processes commands synchronously via HTTP.
Each request is wrapped in the correct domain context based on URL prefix.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Domains are initialized at module level so uvicorn workers share them.
# PROTEAN_ENV controls which config overlay is applied:
#   - "test"       → event_processing = "sync"  (projectors fire in UoW)
#   - "production" → event_processing = "async" (projectors fire via Engine)
from catalogue.domain import catalogue  # noqa: E402
from contacts.domain import contacts  # noqa: E402
from courses.domain import courses  # noqa: E402
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from finance.domain import finance  # noqa: E402
from ordering.domain import ordering  # noqa: E402
from ordering.notifier import configure_notifier  # noqa: E402
from promotions.domain import promotions  # noqa: E402
from shared.api.errors import register_exception_handlers  # noqa: E402
from shared.settings import load_settings  # noqa: E402
from shared.utils.logging import add_context, clear_context, configure_logging, get_logger  # noqa: E402

configure_logging()
logger = get_logger(__name__)

ordering.init()
catalogue.init()
promotions.init()
contacts.init()
courses.init()
finance.init()

settings = load_settings()
configure_notifier(settings)

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    "/orders": ordering,
    "/analytics": ordering,
    "/products": catalogue,
    "/bundles": catalogue,
    "/stock-movements": catalogue,
    "/specials": promotions,
    "/coupons": promotions,
    "/contacts": contacts,
    "/courses": courses,
    "/course-purchases": courses,
    "/finance": finance,
}


def _resolve_domain(path: str):
    """Return the domain for the given request path, or None."""
    for prefix, domain in _ROUTE_DOMAIN_MAP.items():
        if path.startswith(prefix):
            return domain
    return None


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Blom Admin API",
    description="Store admin backend: orders, catalogue, promotions, contacts, courses & finance",
)
app.state.settings = settings

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the correct Protean domain context for each request."""
    domain = _resolve_domain(request.url.path)
    clear_context()
    add_context(method=request.method, path=request.url.path)
    if domain is not None:
        add_context(domain=domain.name)
        with domain.domain_context():
            response = await call_next(request)
        return response
    # No domain match: pass through (health check, docs, etc.)
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from catalogue.api import bundle_router, movement_router, product_router  # noqa: E402
from contacts.api import router as contact_router  # noqa: E402
from courses.api import course_router, purchase_router  # noqa: E402
from finance.api import router as finance_router  # noqa: E402
from ordering.api import analytics_router, order_router  # noqa: E402
from promotions.api import coupon_router, special_router  # noqa: E402

app.include_router(order_router)
app.include_router(analytics_router)
app.include_router(product_router)
app.include_router(bundle_router)
app.include_router(movement_router)
app.include_router(special_router)
app.include_router(coupon_router)
app.include_router(contact_router)
app.include_router(course_router)
app.include_router(purchase_router)
app.include_router(finance_router)

logger.info("Admin API ready", store=settings.store_name, routes=len(app.routes))


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "store": settings.store_name,
            "domains": {
                "ordering": {"name": ordering.name},
                "catalogue": {"name": catalogue.name},
                "promotions": {"name": promotions.name},
                "contacts": {"name": contacts.name},
                "courses": {"name": courses.name},
                "finance": {"name": finance.name},
            },
        }
    )
