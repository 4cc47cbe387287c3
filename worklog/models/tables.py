"""
Table definitions used to create the schema.

Reads and writes go through the query gateway with plain SQL; these SQLModel
classes only describe the persisted shape so ``create_all`` can build it.
"""

from datetime import date, datetime
from typing import Optional

from sqlmodel import Field, SQLModel


class UserTable(SQLModel, table=True):
    """Row shape of ``users``. Emails are stored lower-cased."""

    __tablename__ = "users"  # type: ignore

    id: Optional[int] = Field(default=None, primary_key=True)
    full_name: str = Field(max_length=255)
    role_id: int = Field(default=1)
    email: str = Field(unique=True, index=True, max_length=255)
    pwd_hash: str = Field(max_length=255)
    max_hours: Optional[int] = Field(default=None)


class WorkTable(SQLModel, table=True):
    """Row shape of ``work``. Users that still own rows here cannot be deleted."""

    __tablename__ = "work"  # type: ignore

    id: Optional[int] = Field(default=None, primary_key=True)
    dt_created: datetime
    user_id: int = Field(foreign_key="users.id", index=True)
    dt_day: date = Field(index=True)
    duration_sec: int
    note: str
