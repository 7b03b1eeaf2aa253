"""Domain events for the Rating aggregate."""

from protean.fields import DateTime, Identifier, Integer, Text

from marketplace.domain import marketplace


@marketplace.event(part_of="Rating")
class RatingSubmitted:
    """A vendor rated the supplier of one of their delivered orders."""

    __version__ = 1

    rating_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    supplier_id = Identifier(required=True)
    order_id = Identifier(required=True)
    score = Integer(required=True)
    comment = Text()
    submitted_at = DateTime(required=True)
