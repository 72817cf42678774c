"""Schemas for the health endpoint."""
from pydantic import BaseModel


class HealthOut(BaseModel):
    ok: bool
    message: str
