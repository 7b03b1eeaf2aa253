"""Repository for the User aggregate."""

from marketplace.accounts.user import User
from marketplace.domain import marketplace


@marketplace.repository(part_of=User)
class UserRepository:
    def find_by_email(self, email: str) -> User | None:
        """Find a user by email, ignoring case and surrounding whitespace."""
        if not email:
            return None
        users = self._dao.query.filter(email=email.strip().lower()).all().items
        return users[0] if users else None
