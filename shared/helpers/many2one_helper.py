from typing import Any, Optional


# Odoo many2one fields come back as [id, display_name], a bare id,
# or False when empty.

def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def m2o_id(value: Any) -> Optional[int]:
    if value is None or value is False:
        return None
    if isinstance(value, (list, tuple)):
        return value[0] if value and _is_int(value[0]) else None
    return value if _is_int(value) else None


def m2o_name(value: Any) -> Optional[str]:
    if isinstance(value, (list, tuple)) and len(value) > 1:
        return value[1] if isinstance(value[1], str) else None
    return None
