DEFAULT_LIMIT = 25
MAX_LIMIT = 100


def normalize_pagination(limit_raw, offset_raw):
    try:
        limit = int(limit_raw) if limit_raw not in (None, '') else DEFAULT_LIMIT
        offset = int(offset_raw) if offset_raw not in (None, '') else 0
    except ValueError:
        raise ValueError('limit/offset must be int')
    return max(1, min(limit, MAX_LIMIT)), max(0, offset)


def paginate(query, limit_raw, offset_raw, order_by):
    """Apply limit/offset to a SQLAlchemy query; returns (rows, pagination meta)."""
    limit, offset = normalize_pagination(limit_raw, offset_raw)
    total = query.count()
    rows = query.order_by(order_by).offset(offset).limit(limit).all()
    return rows, {
        'total': total,
        'limit': limit,
        'offset': offset,
        'returned': len(rows),
    }
