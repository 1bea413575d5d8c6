"""
Work order lifecycle.

    Ingepland --> In uitvoering --> Voltooid
        |               |
        +---------------+--> Geannuleerd

Voltooid and Geannuleerd are terminal. By default callers are trusted and any
status may be written directly; with `strict=True` only the moves above (plus
Ingepland -> Voltooid, which is what `complete` does for unstarted jobs) are
accepted.

Material lines are snapshotted on write: a line without a name or unit price
gets the material's current values, so later price changes never alter
recorded work orders.
"""
import logging
from datetime import datetime
from typing import Optional, List, Dict, Any

from spartec.storage.base import Storage
from spartec.utils.constants import (
    WO_SCHEDULED, WO_IN_PROGRESS, WO_COMPLETED, WO_CANCELLED,
    WORK_ORDER_STATUSES, WORK_ORDER_TERMINAL_STATUSES,
)

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    WO_SCHEDULED: {WO_IN_PROGRESS, WO_COMPLETED, WO_CANCELLED},
    WO_IN_PROGRESS: {WO_COMPLETED, WO_CANCELLED},
    WO_COMPLETED: set(),
    WO_CANCELLED: set(),
}


class InvalidTransition(Exception):
    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot change work order status from '{current}' to '{target}'")


def check_transition(current: Optional[str], target: str, strict: bool = False):
    """Raise InvalidTransition if `target` may not follow `current`"""
    if target not in WORK_ORDER_STATUSES:
        raise InvalidTransition(current or "", target)
    if not strict or current == target or current is None:
        return
    if target not in ALLOWED_TRANSITIONS.get(current, set()):
        raise InvalidTransition(current, target)


def is_terminal(status: str) -> bool:
    return status in WORK_ORDER_TERMINAL_STATUSES


class WorkOrderLifecycle:

    def __init__(self, storage: Storage, strict: bool = False):
        self.storage = storage
        self.strict = strict

    def snapshot_materials(self, lines: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Fill in missing name/price from the current material records"""
        snapshot = []
        for line in lines:
            line = dict(line)
            if line.get("name") is None or line.get("price") is None:
                material = self.storage.materials.get_by_id(line["material_id"])
                if material:
                    if line.get("name") is None:
                        line["name"] = material["name"]
                    if line.get("price") is None:
                        line["price"] = material["price"]
                else:
                    logger.warning(f"Material {line['material_id']} not found while snapshotting work order line")
            snapshot.append(line)
        return snapshot

    def create(self, draft: Dict[str, Any]) -> Dict[str, Any]:
        draft = dict(draft)
        if draft.get("date") is None:
            draft["date"] = datetime.now()
        draft["materials"] = self.snapshot_materials(draft.get("materials") or [])
        # photos are only attached by complete()
        draft.pop("photos", None)
        return self.storage.work_orders.create(draft)

    def update(self, work_order_id: int, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        changes = dict(changes)
        changes.pop("photos", None)

        if changes.get("status") is not None:
            current = self.storage.work_orders.get_by_id(work_order_id)
            if current is None:
                return None
            check_transition(current["status"], changes["status"], self.strict)

        if changes.get("materials") is not None:
            changes["materials"] = self.snapshot_materials(changes["materials"])

        work_order = self.storage.work_orders.update(work_order_id, changes)
        if work_order:
            logger.info(f"Work order {work_order['order_number']} updated")
        return work_order

    def change_status(self, work_order_id: int, status: str) -> Optional[Dict[str, Any]]:
        current = self.storage.work_orders.get_by_id(work_order_id)
        if current is None:
            return None

        check_transition(current["status"], status, self.strict)
        work_order = self.storage.work_orders.update(work_order_id, {"status": status})
        if work_order:
            logger.info(f"Work order {work_order['order_number']} status {current['status']} -> {status}")
        return work_order

    def complete(
        self,
        work_order_id: int,
        labor_hours: float,
        notes: Optional[str] = None,
        photos: Optional[List[str]] = None,
    ) -> Optional[Dict[str, Any]]:
        """Mark a work order Voltooid with labour hours, notes and photos; None if not found"""
        if labor_hours is None:
            raise ValueError("Labor hours are required")
        if labor_hours < 0:
            raise ValueError("Labor hours cannot be negative")

        current = self.storage.work_orders.get_by_id(work_order_id)
        if current is None:
            return None

        check_transition(current["status"], WO_COMPLETED, self.strict)

        work_order = self.storage.work_orders.update(work_order_id, {
            "status": WO_COMPLETED,
            "notes": notes,
            "labor_hours": labor_hours,
            "photos": list(photos or []),
        })
        if work_order:
            logger.info(
                f"Work order {work_order['order_number']} completed "
                f"({labor_hours}h, {len(work_order['photos'])} photos)"
            )
        return work_order
