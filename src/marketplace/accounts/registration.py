"""User registration — command and handler.

Creates the marketplace record for a vendor or supplier. Credentials and
session tokens are issued by the external auth service; only the profile is
kept here.
"""

import structlog
from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from marketplace.accounts.user import User
from marketplace.domain import marketplace
from marketplace.shared.errors import Conflict

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="User")
class RegisterUser:
    """Create a new vendor or supplier account."""

    email = String(required=True, max_length=254)
    name = String(required=True, max_length=150)
    phone = String(required=True, max_length=30)
    location = String(required=True, max_length=255)
    role = String(required=True, max_length=20)
    stall_name = String(max_length=150)
    business_type = String(max_length=20)


@marketplace.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)

        if repo.find_by_email(command.email) is not None:
            logger.warning("Registration refused, email already in use", email=command.email)
            raise Conflict("User with this email already exists")

        user = User.register(
            email=command.email,
            name=command.name,
            phone=command.phone,
            location=command.location,
            role=command.role,
            stall_name=command.stall_name,
            business_type=command.business_type,
        )
        repo.add(user)

        logger.info("User registered", user_id=str(user.id), role=user.role)
        return str(user.id)
