from typing import Any

from fastapi import Depends, Request

from notetaker.errors import ValidationFailed
from notetaker.utils.identity import get_user_id


async def json_body(request: Request) -> Any:
    """Parsed JSON body, or None when the body is empty."""
    raw = await request.body()
    if not raw.strip():
        return None
    try:
        return await request.json()
    except ValueError:
        raise ValidationFailed([{"field": "", "message": "Malformed JSON body"}])


async def owned_json_body(request: Request, user_id: str = Depends(get_user_id)) -> Any:
    # identity is resolved first, so an anonymous caller gets 401 whatever it sent
    return await json_body(request)
