"""User aggregate — vendors who buy and suppliers who sell.

A single aggregate covers both sides of the marketplace; the role decides
which business attribute applies (stall name for vendors, business type for
suppliers) and whether the derived rating fields are meaningful.

Email and role are fixed at registration. The rating summary is written only
by the rating engine through ``record_rating_summary``.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Integer, String

from marketplace.accounts.events import ProfileUpdated, SupplierRatingRecalculated, UserRegistered
from marketplace.domain import marketplace

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


class Role(Enum):
    VENDOR = "vendor"
    SUPPLIER = "supplier"


class BusinessType(Enum):
    WHOLESALER = "wholesaler"
    FARM = "farm"
    KIRANA = "kirana"
    DISTRIBUTOR = "distributor"


@marketplace.aggregate
class User:
    """A registered vendor or supplier."""

    email = String(required=True, max_length=254)
    name = String(required=True, max_length=150)
    phone = String(required=True, max_length=30)
    location = String(required=True, max_length=255)
    role = String(choices=Role, required=True)

    # Role-specific attributes
    stall_name = String(max_length=150)
    business_type = String(choices=BusinessType)

    # Derived, suppliers only
    rating = Float()
    total_ratings = Integer(default=0)

    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def email_must_look_like_an_address(self):
        if self.email and (self.email.count("@") != 1 or "." not in self.email.split("@")[1]):
            raise ValidationError({"email": [f"Invalid email address: {self.email!r}"]})

    @invariant.post
    def stall_name_is_for_vendors_only(self):
        if self.stall_name and self.role != Role.VENDOR.value:
            raise ValidationError({"stall_name": ["Only vendors have a stall name"]})

    @invariant.post
    def business_type_is_for_suppliers_only(self):
        if self.business_type and self.role != Role.SUPPLIER.value:
            raise ValidationError({"business_type": ["Only suppliers have a business type"]})

    @property
    def is_vendor(self):
        return self.role == Role.VENDOR.value

    @property
    def is_supplier(self):
        return self.role == Role.SUPPLIER.value

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def register(cls, email, name, phone, location, role, stall_name=None, business_type=None):
        """Create the user record. Attributes of the other role are dropped."""
        now = datetime.now(UTC)
        is_vendor = role == Role.VENDOR.value

        user = cls(
            email=email.strip().lower() if email else email,
            name=name,
            phone=phone,
            location=location,
            role=role,
            stall_name=stall_name if is_vendor else None,
            business_type=None if is_vendor else business_type,
            total_ratings=0,
            created_at=now,
            updated_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=str(user.id),
                email=user.email,
                name=name,
                role=role,
                registered_at=now,
            )
        )
        return user

    # -------------------------------------------------------------------
    # Profile
    # -------------------------------------------------------------------
    def update_profile(
        self,
        name=_UNSET,
        phone=_UNSET,
        location=_UNSET,
        stall_name=_UNSET,
        business_type=_UNSET,
    ):
        """Merge the provided fields into the profile. Email and role never change here."""
        now = datetime.now(UTC)

        with atomic_change(self):
            if name is not _UNSET:
                self.name = name
            if phone is not _UNSET:
                self.phone = phone
            if location is not _UNSET:
                self.location = location
            if stall_name is not _UNSET:
                self.stall_name = stall_name
            if business_type is not _UNSET:
                self.business_type = business_type
            self.updated_at = now

        self.raise_(
            ProfileUpdated(
                user_id=str(self.id),
                name=self.name,
                phone=self.phone,
                location=self.location,
                stall_name=self.stall_name,
                business_type=self.business_type,
                updated_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Rating summary
    # -------------------------------------------------------------------
    def record_rating_summary(self, scores):
        """Replace the rating summary with the mean of ``scores`` (one decimal)."""
        if not self.is_supplier:
            raise ValidationError({"role": ["Only suppliers carry a rating"]})

        now = datetime.now(UTC)
        self.total_ratings = len(scores)
        self.rating = round(sum(scores) / len(scores), 1) if scores else None
        self.updated_at = now

        self.raise_(
            SupplierRatingRecalculated(
                supplier_id=str(self.id),
                rating=self.rating or 0.0,
                total_ratings=self.total_ratings,
                recalculated_at=now,
            )
        )
