"""Profile update — command and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.accounts.user import User
from marketplace.domain import marketplace

_PROFILE_FIELDS = ("name", "phone", "location", "stall_name", "business_type")


@marketplace.command(part_of="User")
class UpdateProfile:
    """Partially update a user's contact and business details."""

    user_id = Identifier(required=True)
    name = String(max_length=150)
    phone = String(max_length=30)
    location = String(max_length=255)
    stall_name = String(max_length=150)
    business_type = String(max_length=20)


@marketplace.command_handler(part_of=User)
class UpdateProfileHandler:
    @handle(UpdateProfile)
    def update_profile(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        changes = {field: getattr(command, field) for field in _PROFILE_FIELDS if getattr(command, field) is not None}
        user.update_profile(**changes)
        repo.add(user)
