from typing import Optional

from fastapi import Header

from showgo_service.errors import NotAuthenticated


async def get_owner_id(x_user_id: Optional[str] = Header(None)) -> str:
  """Caller identity as verified by the upstream session layer.

  Sessions are issued and checked outside this service; it only trusts the
  owner id forwarded in the X-User-Id header.
  """
  owner_id = (x_user_id or "").strip()
  if not owner_id:
    raise NotAuthenticated("Not authenticated")
  return owner_id
