"""Status repository (read-only reference data)."""

from projectdesk.models import Status
from projectdesk.repositories.base import BaseRepository


class StatusRepository(BaseRepository[Status]):
    model = Status


status_repository = StatusRepository()
