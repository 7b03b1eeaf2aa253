"""Helpers for running repository queries."""


def fetch_all(query):
    """Return every record matching ``query``.

    ``QuerySet.all()`` applies a default page size; when the total exceeds it
    the query is re-run with a limit covering the whole result.
    """
    result = query.all()
    if result.total > len(result.items):
        result = query.limit(result.total).all()
    return result.items
