# Import every model module so the declarative metadata is complete before
# mappers are configured or tables are created.
from app.api.volunteers.models import Volunteers  # noqa: F401
from app.api.categories.models import EventCategories  # noqa: F401
from app.api.events.models import EventParticipation, Events  # noqa: F401
from app.api.roles.models import RoleDefinitions, UserRoles  # noqa: F401
