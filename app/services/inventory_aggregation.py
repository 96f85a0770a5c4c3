"""
Stock aggregation for inventory rows.

Several physical rows may share one catalog entry (same department and name,
e.g. laptops tracked individually by serial number). Every view that reports
stock levels (dashboard headline, department overview, department detail,
admin dashboard, low-stock report) groups rows through this module so the
arithmetic is identical everywhere.

Records may be ORM objects or plain mappings; only ``department``, ``name``,
``quantity`` and ``low_stock_threshold`` are read, plus the free-text fields
when a search term is supplied.
"""
import enum
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

DEFAULT_LOW_STOCK_THRESHOLD = 5

SEARCH_FIELDS = ("name", "category", "model", "serial_number", "cabin_number")

SummaryKey = Tuple[str, str]


class StockStatus(str, enum.Enum):
    OUT_OF_STOCK = "out_of_stock"
    LOW_STOCK = "low_stock"
    IN_STOCK = "in_stock"


@dataclass
class ItemSummary:
    department: str
    name: str
    total_quantity: int = 0
    low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD
    items: List[Any] = field(default_factory=list)

    @property
    def status(self) -> StockStatus:
        return classify(self)


def _get(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def _department_key(value: Any) -> str:
    # Department enum members carry their display value ("AI&DS")
    return getattr(value, "value", value) if value is not None else ""


def _threshold(record: Any) -> int:
    value = _get(record, "low_stock_threshold")
    return DEFAULT_LOW_STOCK_THRESHOLD if value is None else int(value)


def matches_search(record: Any, search: Optional[str]) -> bool:
    """Case-insensitive substring match over name/category/model/serial/cabin."""
    if not search:
        return True
    needle = search.strip().lower()
    if not needle:
        return True
    for field_name in SEARCH_FIELDS:
        value = _get(record, field_name)
        if value and needle in str(value).lower():
            return True
    return False


def aggregate_items(
    items: Iterable[Any],
    department: Optional[Any] = None,
    search: Optional[str] = None,
) -> "OrderedDict[SummaryKey, ItemSummary]":
    """Group rows by (department, name) and sum their quantities.

    The threshold of a group is the one carried by the first row seen for
    it; later rows are not checked against it. Output keeps first-occurrence
    order. The input is never mutated.
    """
    wanted_department = _department_key(department) if department is not None else None
    summaries: "OrderedDict[SummaryKey, ItemSummary]" = OrderedDict()

    for item in items:
        item_department = _department_key(_get(item, "department"))
        if wanted_department is not None and item_department != wanted_department:
            continue
        if not matches_search(item, search):
            continue

        key = (item_department, _get(item, "name"))
        summary = summaries.get(key)
        if summary is None:
            summary = ItemSummary(
                department=item_department,
                name=key[1],
                low_stock_threshold=_threshold(item),
            )
            summaries[key] = summary
        summary.total_quantity += int(_get(item, "quantity") or 0)
        summary.items.append(item)

    return summaries


def summaries_by_name(
    items: Iterable[Any],
    department: Any,
    search: Optional[str] = None,
) -> "OrderedDict[str, ItemSummary]":
    """Single-department view of aggregate_items keyed by item name."""
    return OrderedDict(
        (key[1], summary)
        for key, summary in aggregate_items(items, department=department, search=search).items()
    )


def classify(summary: ItemSummary) -> StockStatus:
    total = summary.total_quantity
    if total <= 0:
        return StockStatus.OUT_OF_STOCK
    if total <= summary.low_stock_threshold:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


def filter_summaries(summaries: Iterable[ItemSummary], status: Optional[Any] = None) -> List[ItemSummary]:
    """Keep summaries whose classification equals status ("all"/None keeps everything)."""
    if status is None or status == "all":
        return list(summaries)
    wanted = StockStatus(status)
    return [summary for summary in summaries if classify(summary) == wanted]


def count_low_stock(items: Iterable[Any], department: Optional[Any] = None) -> int:
    """Number of distinct (department, name) groups currently in LOW_STOCK."""
    return sum(
        1 for summary in aggregate_items(items, department=department).values()
        if classify(summary) == StockStatus.LOW_STOCK
    )


def low_stock_counts_by_department(items: Iterable[Any]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for (department, _name), summary in aggregate_items(items).items():
        counts.setdefault(department, 0)
        if classify(summary) == StockStatus.LOW_STOCK:
            counts[department] += 1
    return counts


def department_totals(items: Iterable[Any]) -> "OrderedDict[str, int]":
    """Total quantity held per department, in first-occurrence order."""
    totals: "OrderedDict[str, int]" = OrderedDict()
    for item in items:
        department = _department_key(_get(item, "department"))
        totals[department] = totals.get(department, 0) + int(_get(item, "quantity") or 0)
    return totals


def total_quantity(items: Iterable[Any]) -> int:
    return sum(int(_get(item, "quantity") or 0) for item in items)


def items_needing_restock(items: Iterable[Any], department: Optional[Any] = None) -> List[Any]:
    """Rows belonging to a group that is low or out of stock, grouped by catalog entry."""
    rows: List[Any] = []
    for summary in aggregate_items(items, department=department).values():
        if classify(summary) != StockStatus.IN_STOCK:
            rows.extend(summary.items)
    return rows
