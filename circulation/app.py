#!/usr/bin/env python3

from contextlib import asynccontextmanager
from fastapi import FastAPI
from circulation.routes import api
from circulation.configs import OPTIONS, DB_URI, LOAN_LIMIT
from circulation.core import Database, LoanService, build_service
from circulation import __version__ as VERSION


def create_app(service: LoanService, lifespan=None) -> FastAPI:
    app = FastAPI(
        title="Circulation API",
        description="Circulation: loan lifecycle management for a small library",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.service = service
    app.include_router(api.router, prefix="/v1/api")
    return app


def app_from_config() -> FastAPI:
    """Entry point factory; owns the store handle for the app's lifetime."""
    db = Database(DB_URI)
    db.init()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        db.dispose()

    return create_app(
        build_service(db, max_active_loans_per_member=LOAN_LIMIT),
        lifespan=lifespan)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("circulation.app:app_from_config", factory=True, **OPTIONS)
