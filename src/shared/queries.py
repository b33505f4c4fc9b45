"""Query helpers over Protean DAO querysets."""

PAGE_SIZE = 100


def iter_all(query, page_size: int = PAGE_SIZE):
    """Yield every record of ``query``, fetching ``page_size`` rows at a time.

    Protean querysets return a bounded page by default; callers that need the
    whole result (rebuilds, aggregations) walk the pages with this.
    """
    offset = 0
    while True:
        items = query.limit(page_size).offset(offset).all().items
        yield from items
        if len(items) < page_size:
            return
        offset += page_size
