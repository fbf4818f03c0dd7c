"""Shared service singletons and request dependencies."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Header

from condowater.config import settings
from condowater.core.errors import AuthError
from condowater.core.repositories.reading import ReadingRepository
from condowater.core.repositories.room import RoomRepository
from condowater.services.export import ExportService
from condowater.services.readings import ReadingService
from condowater.services.rollover import RolloverService
from condowater.services.rooms import RoomService
from condowater.services.summary import SummaryService

room_repo = RoomRepository()
reading_repo = ReadingRepository()

room_service = RoomService(room_repo, reading_repo)
reading_service = ReadingService(room_repo, reading_repo)
rollover_service = RolloverService(reading_repo)
summary_service = SummaryService(reading_repo)
export_service = ExportService(room_repo, reading_repo, reading_service)


def current_admin(
    x_authenticated_user: Annotated[str | None, Header()] = None,
) -> str:
    """
    Returns the caller identity forwarded by the upstream auth provider.

    When ``ADMIN_USERS`` is configured the caller must be listed there.
    """
    user = (x_authenticated_user or "").strip()
    if not user:
        raise AuthError("Authentication required", "AUTH_REQUIRED")
    if settings.ADMIN_USERS and user not in settings.ADMIN_USERS:
        raise AuthError("Administrator access required", "FORBIDDEN", status_code=403)
    return user


AdminUser = Annotated[str, Depends(current_admin)]
