"""Ordering FastAPI application.

Processes cart and order commands synchronously over HTTP. Every request runs
inside the ordering domain context; order notifications go to the domain's
default broker through a background publisher.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV controls which config overlay is applied.
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from identity.api.routes import auth_router, register_auth_exception_handlers
from identity.auth.fake_adapter import InMemoryCredentialVerifier, StaticClaimsExtractor
from identity.auth.rate_limiter import LoginRateLimiter
from ordering.api.errors import register_ordering_exception_handlers
from ordering.api.routes import cart_router, order_router, stats_router
from ordering.domain import ordering
from ordering.publishing import build_background_publisher, set_publisher
from ordering.publishing.sinks import BrokerSink
from ordering.utils.logging import add_context, clear_context, configure_logging
from protean.integrations.fastapi import register_exception_handlers

configure_logging()
ordering.init()

with ordering.domain_context():
    set_publisher(build_background_publisher(BrokerSink.for_domain(ordering)))

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Ordering API",
    description="Carts, orders, order statistics and login protection",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Collaborators owned by this app instance. The in-memory auth adapters are
# replaced by the deployment with ones backed by the auth service.
app.state.login_rate_limiter = LoginRateLimiter()
app.state.claims_extractor = StaticClaimsExtractor()
app.state.credential_verifier = InMemoryCredentialVerifier()


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the ordering domain context and bind request details to logs."""
    add_context(method=request.method, path=request.url.path)
    try:
        with ordering.domain_context():
            return await call_next(request)
    finally:
        clear_context()


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
register_exception_handlers(app)
register_ordering_exception_handlers(app)
register_auth_exception_handlers(app)

app.include_router(auth_router)
app.include_router(cart_router)
app.include_router(stats_router)
app.include_router(order_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": ordering.name})
