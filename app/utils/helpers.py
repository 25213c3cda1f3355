from flask import current_app

from ..models.base_model import BaseModel, to_object_id


def make_log_tag(file, resource, method, ip, subject_id, role, target_vendor_id, **kwargs):
    # Base tag
    log_tag = (
        f"[{file}]"
        f"[{resource}]"
        f"[{method}]"
        f"[ip:{ip}]"
        f"[subject:{subject_id}]"
        f"[role:{role}]"
        f"[target_vendor:{target_vendor_id}]"
    )

    # Append extra context fields
    for key, value in kwargs.items():
        log_tag += f"[{key}:{value}]"

    return log_tag


def build_list_query(args, base_filter=None, id_fields=()):
    """
    Turn parsed list-query arguments into store parameters.

    `sort`, `limit` and `offset` drive pagination; every other non-null argument
    is an equality filter (ids converted to ObjectId). `base_filter` (the vendor
    scope) always wins over client filters.
    """
    args = dict(args)
    sort = BaseModel.parse_sort(args.pop("sort", None))

    default_limit = current_app.config.get("DEFAULT_PAGINATION_LIMIT", 10)
    max_limit = current_app.config.get("MAX_PAGINATION_LIMIT", 100)
    limit = min(args.pop("limit", None) or default_limit, max_limit)
    offset = args.pop("offset", 0) or 0

    query = {}
    for key, value in args.items():
        if value is None:
            continue
        query[key] = to_object_id(value) if key in id_fields else value
    query.update(base_filter or {})

    return query, sort, limit, offset
