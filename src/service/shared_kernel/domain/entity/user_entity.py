from datetime import datetime
from typing import Optional

import attrs


@attrs.define
class UserEntity:
    """Passenger account. Issued and verified by the external auth service, read-only here."""

    id: Optional[int]
    name: str
    email: str
    phone: Optional[str] = None
    created_at: Optional[datetime] = None
