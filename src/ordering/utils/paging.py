"""Read every row of a Protean query.

``QuerySet.all()`` returns at most one page (Protean's default limit is 100).
"""

PAGE_SIZE = 100


def fetch_all(queryset, page_size: int = PAGE_SIZE) -> list:
    """Collect all matching rows, walking the result pages in query order."""
    rows = []
    offset = 0
    while True:
        page = queryset.offset(offset).limit(page_size).all()
        rows.extend(page.items)
        offset += page_size
        if not page.items or offset >= page.total:
            return rows
