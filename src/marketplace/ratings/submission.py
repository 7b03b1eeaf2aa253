"""Rating submission — command and handler.

The new rating and the supplier's recomputed summary are committed together.
The summary is recomputed from every stored rating of the supplier rather
than adjusted incrementally, so it always equals the mean of the ratings.
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain

from marketplace.accounts.access import get_supplier, require_vendor
from marketplace.accounts.user import User
from marketplace.domain import marketplace
from marketplace.ordering.order import Order, OrderStatus
from marketplace.ratings.rating import MAX_SCORE, MIN_SCORE, Rating
from marketplace.shared.errors import Conflict, Forbidden

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Rating")
class SubmitRating:
    vendor_id = Identifier(required=True)  # the calling vendor
    order_id = Identifier(required=True)
    supplier_id = Identifier(required=True)
    score = Integer(required=True)
    comment = Text()


@marketplace.command_handler(part_of=Rating)
class SubmitRatingHandler:
    @handle(SubmitRating)
    def submit_rating(self, command):
        vendor = require_vendor(command.vendor_id, "submit ratings")
        if not MIN_SCORE <= command.score <= MAX_SCORE:
            raise ValidationError({"score": [f"Rating must be between {MIN_SCORE} and {MAX_SCORE}"]})

        order = current_domain.repository_for(Order).get(command.order_id)
        if str(order.vendor_id) != str(vendor.id):
            raise Forbidden("You can only rate your own orders")
        if str(order.supplier_id) != str(command.supplier_id):
            raise ValidationError({"supplier_id": ["Order was not placed with this supplier"]})
        if order.status != OrderStatus.DELIVERED.value:
            raise Conflict("You can only rate delivered orders")

        supplier = get_supplier(command.supplier_id)

        rating = Rating.submit(
            vendor_id=vendor.id,
            supplier_id=supplier.id,
            order_id=order.id,
            score=command.score,
            comment=command.comment,
        )
        rating_repo = current_domain.repository_for(Rating)
        rating_repo.add(rating)

        # Include the new rating even if the query does not see uncommitted writes
        scores = [r.score for r in rating_repo.for_supplier(supplier.id) if str(r.id) != str(rating.id)]
        supplier.record_rating_summary(scores + [rating.score])
        current_domain.repository_for(User).add(supplier)

        logger.info(
            "Rating submitted",
            rating_id=str(rating.id),
            supplier_id=str(supplier.id),
            score=rating.score,
            supplier_rating=supplier.rating,
            total_ratings=supplier.total_ratings,
        )
        return str(rating.id)
