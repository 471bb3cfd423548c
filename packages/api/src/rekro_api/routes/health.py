# This project was developed with assistance from AI tools.
"""Liveness endpoint."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from rekro_db import DatabaseService, get_db_service

router = APIRouter()


class ServiceHealth(BaseModel):
    name: str
    status: str


@router.get("/", response_model=list[ServiceHealth])
async def health(db: DatabaseService = Depends(get_db_service)) -> list[ServiceHealth]:
    """Report API liveness and whether the database answers."""
    db_ok = await db.health_check()
    return [
        ServiceHealth(name="API", status="healthy"),
        ServiceHealth(name="Database", status="healthy" if db_ok else "unhealthy"),
    ]
