"""
Dashboard statistics, folded from the full entity collections.

No cross-collection transaction is taken: the four reads may see slightly
different points in time.
"""
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any

from spartec.storage.base import Storage
from spartec.utils.constants import INVOICE_CONCEPT, MONTH_LABELS


def _as_datetime(value) -> Optional[datetime]:
    """Naive datetime; aware values are converted to UTC first"""
    if value is None:
        return None
    if not isinstance(value, datetime):
        value = datetime.fromisoformat(str(value))
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def count_by_status(records: List[Dict[str, Any]], keys: Dict[str, str]) -> Dict[str, int]:
    """Count records per status; `keys` maps status value -> output key"""
    counts = {key: 0 for key in keys.values()}
    for record in records:
        key = keys.get(record.get("status"))
        if key:
            counts[key] += 1
    return counts


def low_stock_materials(materials: List[Dict[str, Any]], limit: Optional[int] = None) -> List[Dict[str, Any]]:
    """Materials at or below their minimum stock; both values must be set"""
    low = [
        m for m in materials
        if m.get("stock") is not None and m.get("min_stock") is not None
        and m["stock"] <= m["min_stock"]
    ]
    return low[:limit]


def recent_invoices(invoices: List[Dict[str, Any]], limit: int) -> List[Dict[str, Any]]:
    dated = [inv for inv in invoices if inv.get("date") is not None]
    return sorted(dated, key=lambda inv: _as_datetime(inv["date"]), reverse=True)[:limit]


def monthly_revenue(invoices: List[Dict[str, Any]], year: int) -> List[Dict[str, Any]]:
    """Per-month sum of non-Concept invoice amounts in `year`, by invoice date"""
    totals = [0.0] * 12
    for inv in invoices:
        if inv.get("status") == INVOICE_CONCEPT:
            continue
        date = _as_datetime(inv.get("date"))
        if date is None or date.year != year:
            continue
        totals[date.month - 1] += float(inv.get("amount") or 0)

    return [
        {"month": label, "amount": round(amount, 2)}
        for label, amount in zip(MONTH_LABELS, totals)
    ]


def build_dashboard_stats(storage: Storage, limit: int = 5, today: Optional[datetime] = None) -> Dict[str, Any]:
    today = today or datetime.now()

    work_orders = storage.work_orders.get_all()
    customers = storage.customers.get_all()
    materials = storage.materials.get_all()
    invoices = storage.invoices.get_all()

    return {
        "total_work_orders": len(work_orders),
        "total_customers": len(customers),
        "total_materials": len(materials),
        "total_invoices": len(invoices),
        "work_orders_by_status": count_by_status(work_orders, {
            "Ingepland": "ingepland",
            "In uitvoering": "in_uitvoering",
            "Voltooid": "voltooid",
            "Geannuleerd": "geannuleerd",
        }),
        "invoices_by_status": count_by_status(invoices, {
            "Concept": "concept",
            "Verzonden": "verzonden",
            "Betaald": "betaald",
            "Te laat": "te_laat",
        }),
        "recent_invoices": recent_invoices(invoices, limit),
        "low_stock_materials": low_stock_materials(materials, limit),
        "monthly_revenue": monthly_revenue(invoices, today.year),
    }
