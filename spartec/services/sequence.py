"""
Sequential document codes (klantnummer, artikelnummer, werkbonnummer, factuurnummer).

Each entity class has a fixed prefix and zero-padded width. Year-scoped classes
restart at 1 every calendar year, materials share one global sequence:

    customer   KL-2025-0001
    material   ART-000001
    workorder  WB-2025-0001
    invoice    F-2025-0001

The functions here are pure. Atomic allocation (counter row locking, retry on
unique violations) lives in the storage backends, which call `seed_value` to
seed or cross-check their counters against the codes already stored in a scope.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Callable, Iterable

logger = logging.getLogger(__name__)

GLOBAL_SCOPE = "global"


@dataclass(frozen=True)
class CodeFormat:
    entity: str
    prefix_template: str  # may contain {scope}
    width: int
    year_scoped: bool

    def prefix(self, scope: str) -> str:
        return self.prefix_template.format(scope=scope)

    def format(self, scope: str, value: int) -> str:
        return f"{self.prefix(scope)}{value:0{self.width}d}"


CODE_FORMATS = {
    "customer": CodeFormat("customer", "KL-{scope}-", 4, True),
    "material": CodeFormat("material", "ART-", 6, False),
    "workorder": CodeFormat("workorder", "WB-{scope}-", 4, True),
    "invoice": CodeFormat("invoice", "F-{scope}-", 4, True),
}


def get_format(entity: str) -> CodeFormat:
    try:
        return CODE_FORMATS[entity]
    except KeyError:
        raise ValueError(f"Unknown code entity: {entity}")


def current_scope(entity: str, clock: Optional[Callable[[], datetime]] = None) -> str:
    """Scope key for new codes: the calendar year, or GLOBAL_SCOPE"""
    fmt = get_format(entity)
    if not fmt.year_scoped:
        return GLOBAL_SCOPE
    now = clock() if clock else datetime.now()
    return str(now.year)


def parse_sequence(code: Optional[str], prefix: str) -> Optional[int]:
    """Numeric suffix of `code` after `prefix`, or None if it does not parse"""
    if not code or not code.startswith(prefix):
        return None
    suffix = code[len(prefix):]
    if not suffix.isdigit():
        return None
    return int(suffix)


def seed_value(entity: str, scope: str, codes: Iterable[Optional[str]]) -> int:
    """
    Value that follows every parseable code in `scope`.

    Codes that do not parse are skipped with a warning, so a malformed row
    never blocks creation and never makes the sequence collide with the
    well-formed codes around it.
    """
    prefix = get_format(entity).prefix(scope)
    highest = 0
    for code in codes:
        value = parse_sequence(code, prefix)
        if value is None:
            logger.warning(f"Skipping unparseable {entity} code '{code}' in scope {scope}")
            continue
        highest = max(highest, value)
    return highest + 1


def next_code(entity: str, scope: str, codes: Iterable[Optional[str]]) -> str:
    """Code that follows `codes` in `scope`, formatted for `entity`"""
    return get_format(entity).format(scope, seed_value(entity, scope, codes))
