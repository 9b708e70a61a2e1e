"""User record model."""

import time
from typing import Any, Optional

from pydantic import BaseModel, model_validator


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


class User(BaseModel):
    """A registered user, keyed by email in the credential store.

    ``id`` is assigned by the store on first save. Timestamps are epoch
    milliseconds; a freshly built record has ``created_at == updated_at``.
    """

    id: Optional[str] = None
    email: str
    password_hash: str
    first_name: str = ""
    last_name: str = ""
    is_active: bool = True
    created_at: int
    updated_at: int

    @model_validator(mode="before")
    @classmethod
    def default_timestamps(cls, data: Any) -> Any:
        """Stamp both timestamps with the same instant when omitted."""
        if isinstance(data, dict):
            data = dict(data)
            if data.get("created_at") is None:
                data["created_at"] = now_ms()
            if data.get("updated_at") is None:
                data["updated_at"] = data["created_at"]
        return data
