import math
from typing import Any, Dict, List, Sequence, Tuple


def paginate(items: Sequence[Any], limit: int, page: int) -> Tuple[List[Any], Dict[str, int]]:
    """Slice one page out of ``items``; pages are 1-based."""
    total = len(items)
    start = (page - 1) * limit
    return list(items[start:start + limit]), {
        'page': page,
        'limit': limit,
        'total': total,
        'pages': math.ceil(total / limit) if limit else 0,
    }
