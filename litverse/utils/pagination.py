import math
from sqlalchemy import func
from sqlmodel import select

from litverse.errors import ValidationError


def paginate(
    *,
    session,
    query,
    page: int = 1,
    limit: int = 12,
):
    if page < 1 or limit < 1:
        raise ValidationError(
            "Invalid pagination",
            details=["page and limit must be positive integers"],
        )

    offset = (page - 1) * limit

    total = session.exec(
        select(func.count()).select_from(query.order_by(None).subquery())
    ).one()

    # a page past the end is just empty
    results = session.exec(
        query.offset(offset).limit(limit)
    ).all()

    return results, {
        "currentPage": page,
        "totalPages": math.ceil(total / limit),
        "totalBooks": total,
        "hasNext": offset + len(results) < total,
        "hasPrev": page > 1,
    }
