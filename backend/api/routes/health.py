"""
api/routes/health.py
--------------------
Health-check endpoint for load balancers and container orchestrators.

With STORE_BACKEND=postgres the database is pinged as well; an unreachable
database reports 503 so the instance is taken out of rotation.
"""
from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import JSONResponse

import config

router = APIRouter()


@router.get("/health", summary="Health check")
def health():
    body = {"status": "ok", "service": "guideconnect-backend", "store": config.STORE_BACKEND}
    if config.STORE_BACKEND != "postgres":
        return body

    from db.pool import ping
    if ping():
        return {**body, "database": "ok"}
    return JSONResponse(status_code=503, content={**body, "status": "degraded", "database": "unreachable"})
