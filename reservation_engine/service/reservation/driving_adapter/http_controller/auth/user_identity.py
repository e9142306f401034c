"""
Caller identity

Authentication happens upstream; the gateway forwards the authenticated user id in
a header (X-User-Id by default). The value is opaque to the reservation engine.
"""

from typing import Optional

from fastapi import Security
from fastapi.security import APIKeyHeader
from opentelemetry import trace

from reservation_engine.platform.config.core_setting import settings
from reservation_engine.platform.exception.exceptions import AuthenticationError


user_id_header = APIKeyHeader(
    name=settings.USER_ID_HEADER,
    auto_error=False,
    scheme_name='UserIdHeader',
    description='Identity of the caller, injected by the upstream gateway',
)


async def get_current_user_id(raw_user_id: Optional[str] = Security(user_id_header)) -> str:
    user_id = (raw_user_id or '').strip()
    if not user_id:
        raise AuthenticationError(f'Missing {settings.USER_ID_HEADER} header')

    trace.get_current_span().set_attribute('user.id', user_id)
    return user_id
