import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from auth import gate
from auth import router as auth_router
from core import cache, config, db
from customers import router as customers_router
from invoices import router as invoices_router

logging.basicConfig(
    level=config.log_level(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Initialize the DB pool once per process.
    await db.init_pool()
    try:
        yield
    finally:
        await db.close_pool()
        cache.views.close()


def create_app() -> FastAPI:
    """
    Build the app with routers mounted under the configured paths.

    The gate and the routes read the same prefixes, so every dashboard
    route is behind the gate whatever `PROTECTED_PREFIX` is.
    """
    app = FastAPI(lifespan=lifespan)

    # Every navigation passes the authorization gate before reaching a route.
    app.add_middleware(gate.AuthGateMiddleware)

    protected_prefix = config.protected_prefix()
    app.include_router(auth_router.router, prefix=config.login_path(), tags=["auth"])
    app.include_router(auth_router.protected_router, prefix=protected_prefix, tags=["auth"])
    app.include_router(invoices_router.router, prefix=protected_prefix, tags=["invoices"])
    app.include_router(customers_router.router, prefix=protected_prefix, tags=["customers"])

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.get("/")
    def root() -> dict:
        return {"message": "invoice dashboard api"}

    return app


app = create_app()
