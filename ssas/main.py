from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from ssas.api.corporate import router as corporate_router
from ssas.api.individual import router as individual_router
from ssas.api.reference import router as reference_router
from ssas.config import settings


def create_app() -> FastAPI:
    logging.basicConfig(level=settings.log_level)
    app = FastAPI(title=settings.app_name)

    @app.get("/", include_in_schema=False)
    def root() -> RedirectResponse:
        return RedirectResponse(url="/docs")

    app.include_router(reference_router)
    app.include_router(corporate_router)
    app.include_router(individual_router)
    return app


app = create_app()
