"""Campus canteen FastAPI application.

Processes commands synchronously via HTTP. Each request runs inside the
canteen domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV controls which config overlay is applied.
from canteen.domain import canteen  # noqa: E402
from canteen.utils.logging import bind_request_context, clear_request_context  # noqa: E402
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

canteen.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Campus Canteen API",
    description="Students order from campus shops; shopkeepers run the order lifecycle",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the canteen domain context and bind request details for logging."""
    clear_request_context()
    bind_request_context(
        method=request.method,
        path=request.url.path,
        actor_id=request.headers.get("x-actor-id"),
        actor_role=request.headers.get("x-actor-role"),
    )
    try:
        with canteen.domain_context():
            response = await call_next(request)
    finally:
        clear_request_context()
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from canteen.api import (  # noqa: E402
    order_router,
    register_exception_handlers,
    shop_router,
    student_router,
)

app.include_router(student_router)
app.include_router(shop_router)
app.include_router(order_router)
register_exception_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": canteen.name})
