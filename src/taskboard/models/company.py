from src.taskboard.models.base import EntityModel


class Company(EntityModel):
    """Tenant boundary. ``admin_id`` points at an ADMIN or MASTER user."""

    id: str
    name: str
    description: str | None = None
    logo_url: str | None = None
    admin_id: str | None = None
