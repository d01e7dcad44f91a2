"""
api/server.py
-------------
FastAPI application entry point.

Run dev server:
    cd backend
    uvicorn api.server:app --reload --port 8000

Endpoints:
    GET   /v1/health
    POST  /v1/users                         GET /v1/users/{id}
    PATCH /v1/users/{id}                    PUT /v1/users/{id}/location
    PATCH /v1/guides/{id}/profile
    GET   /v1/guides                        GET /v1/guides/nearby    GET /v1/guides/{id}
    POST  /v1/places                        GET /v1/places           GET /v1/places/nearby
    GET   /v1/places/{id}
    POST  /v1/itineraries                   GET /v1/itineraries/{id}
    POST  /v1/itineraries/{id}/stops        GET /v1/users/{id}/itineraries
    POST  /v1/connections                   PATCH /v1/connections/{id}
    POST  /v1/connections/{id}/withdraw     GET /v1/users/{id}/connections
    POST  /v1/bookings                      GET /v1/users/{id}/bookings?type=
    POST  /v1/saved-places                  GET /v1/users/{id}/saved-places
    DELETE /v1/saved-places/{id}?userId=
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import config
from api import errors
from api.routes import bookings, connections, health, itineraries, places, saved_places, users

logging.basicConfig(
    level=config.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    yield
    if config.STORE_BACKEND == "postgres":
        from db.pool import close_pool
        close_pool()


app = FastAPI(
    lifespan=lifespan,
    title="GuideConnect API",
    version="1.0.0",
    description=(
        "Tourist ↔ local guide marketplace backend: guide discovery, "
        "places catalogue, itineraries, bookings, saved places and "
        "connection requests."
    ),
    docs_url="/docs",
    redoc_url="/redoc",
)

# Allow the web / mobile clients (any origin during development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

errors.install(app)

app.include_router(health.router,       prefix="/v1",        tags=["Health"])
app.include_router(users.router,        prefix="/v1",        tags=["Users"])
app.include_router(places.router,       prefix="/v1/places", tags=["Places"])
app.include_router(itineraries.router,  prefix="/v1",        tags=["Itineraries"])
app.include_router(connections.router,  prefix="/v1",        tags=["Connections"])
app.include_router(bookings.router,     prefix="/v1",        tags=["Bookings"])
app.include_router(saved_places.router, prefix="/v1",        tags=["Saved places"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("api.server:app", host="0.0.0.0", port=8000, reload=True)
