"""Rating aggregate — a vendor's 1-5 score for a supplier after delivery.

Ratings are immutable once submitted. The supplier's summary (mean score and
count) lives on the User aggregate and is recomputed by the submission
handler in the same unit of work.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, Text

from marketplace.domain import marketplace
from marketplace.ratings.events import RatingSubmitted

MIN_SCORE = 1
MAX_SCORE = 5


@marketplace.aggregate
class Rating:
    vendor_id = Identifier(required=True)
    supplier_id = Identifier(required=True)
    order_id = Identifier(required=True)
    score = Integer(required=True)
    comment = Text()
    created_at = DateTime()

    @invariant.post
    def score_must_be_in_range(self):
        if self.score is not None and not MIN_SCORE <= self.score <= MAX_SCORE:
            raise ValidationError({"score": [f"Rating must be between {MIN_SCORE} and {MAX_SCORE}"]})

    @classmethod
    def submit(cls, vendor_id, supplier_id, order_id, score, comment=None):
        now = datetime.now(UTC)
        rating = cls(
            vendor_id=vendor_id,
            supplier_id=supplier_id,
            order_id=order_id,
            score=score,
            comment=comment,
            created_at=now,
        )
        rating.raise_(
            RatingSubmitted(
                rating_id=str(rating.id),
                vendor_id=str(vendor_id),
                supplier_id=str(supplier_id),
                order_id=str(order_id),
                score=score,
                comment=comment,
                submitted_at=now,
            )
        )
        return rating
