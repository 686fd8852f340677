"""Pydantic schemas for account callable responses."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class AccountResult(BaseModel):
    """Result of createUser, updateUser and deleteUser.

    ``id`` is omitted from the serialized body when the operation has
    nothing to report (deleteUser).
    """

    id: Optional[str] = None
    message: str
