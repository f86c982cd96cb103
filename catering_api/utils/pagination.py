from sqlalchemy import func
from sqlmodel import select

MAX_PAGE_SIZE = 100


def paginate(*, session, query, page: int = 1, limit: int = 10, serializer=None):
    """
    Offset pagination for admin/partner/consumer list endpoints.

    ``limit`` is clamped to 1..MAX_PAGE_SIZE; ``serializer`` maps each
    row before it is returned.
    """
    page = max(page, 1)
    limit = min(limit, MAX_PAGE_SIZE) if limit >= 1 else 10

    total = session.exec(select(func.count()).select_from(query.subquery())).one()
    rows = session.exec(query.offset((page - 1) * limit).limit(limit)).all()

    return {
        "total_items": total,
        "total_pages": (total + limit - 1) // limit,
        "current_page": page,
        "limit": limit,
        "results": [serializer(r) for r in rows] if serializer else rows,
    }
