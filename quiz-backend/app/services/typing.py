from datetime import datetime
from typing import Any, Optional

def to_iso(value: Any) -> Optional[str]:
    # Supabase returns either an ISO string or a datetime
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)
