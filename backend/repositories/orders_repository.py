from typing import Any, Dict

from config import settings
from supabase_client import get_supabase


def insert_order(record: Dict[str, Any]) -> Dict[str, Any]:
    response = get_supabase().table(settings.orders_table).insert(record).execute()
    if not response.data:
        raise RuntimeError("Failed to store order")
    return response.data[0]
