# minimarket/models/user.py
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    Registered shopper.

    Identity:
      - id: "user-<epoch ms>-<random>" assigned at signup; this is the value
        carried in the JWT "sub" claim and stamped on orders as owner_id.

    The password is never stored in clear; `password_hash` holds a salted
    PBKDF2 digest (see minimarket.core.auth.hash_password).
    """

    __tablename__ = "users"

    id: str = Field(
        primary_key=True,
        index=True,
    )

    email: str = Field(
        unique=True,
        index=True,
        description="Login email, stored lower-cased",
    )

    name: str = Field(
        max_length=100,
        description="Customer display name",
    )

    password_hash: str

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
