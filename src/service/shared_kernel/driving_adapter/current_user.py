from fastapi import Header

from src.platform.exception.exceptions import InvalidInputError


async def get_current_user_id(x_user_id: int | None = Header(default=None)) -> int:
    """User id asserted by the upstream auth gateway (OTP/token checks happen there)."""
    if x_user_id is None or x_user_id <= 0:
        raise InvalidInputError('X-User-Id header is required')
    return x_user_id
