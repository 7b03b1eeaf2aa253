"""Domain events for the User aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.event(part_of="User")
class UserRegistered:
    """A vendor or supplier record was created at registration."""

    __version__ = 1

    user_id = Identifier(required=True)
    email = String(required=True)
    name = String(required=True)
    role = String(required=True)
    registered_at = DateTime(required=True)


@marketplace.event(part_of="User")
class ProfileUpdated:
    """Contact or business details of a user were changed."""

    __version__ = 1

    user_id = Identifier(required=True)
    name = String()
    phone = String()
    location = String()
    stall_name = String()
    business_type = String()
    updated_at = DateTime(required=True)


@marketplace.event(part_of="User")
class SupplierRatingRecalculated:
    """A supplier's average rating was recomputed after a new rating."""

    __version__ = 1

    supplier_id = Identifier(required=True)
    rating = Float(required=True)
    total_ratings = Integer(required=True)
    recalculated_at = DateTime(required=True)
