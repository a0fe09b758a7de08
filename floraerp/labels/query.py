from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Optional, Union

from ..models import ITEM_TYPES
from .resolver import ItemResolver, resolve_all
from .sheet import ResolvedItem


class LabelRequestError(ValueError):
    pass


@dataclass(frozen=True)
class LabelRequestItem:
    id: str
    quantity: int = 1


@dataclass(frozen=True)
class PerItemQuantities:
    """`items=P001:3,P002:2` - each id carries its own label count."""

    items: tuple[LabelRequestItem, ...]


@dataclass(frozen=True)
class SharedQuantity:
    """`ids=P001,P002&quantity=5` - one quantity for the whole selection."""

    ids: tuple[str, ...]
    quantity: int = 1


LabelRequest = Union[PerItemQuantities, SharedQuantity]


@dataclass(frozen=True)
class LabelQuery:
    item_type: str
    start: int
    request: LabelRequest


@dataclass
class LabelExpansion:
    labels: list[ResolvedItem] = field(default_factory=list)
    unresolved: list[str] = field(default_factory=list)


LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_int(raw: Optional[str], default: int) -> int:
    """Read the leading integer of raw ("2.5" -> 2, "3abc" -> 3), else default."""
    if raw is None:
        return default
    match = LEADING_INT.match(str(raw))
    if match is None:
        return default
    return int(match.group(1))


def parse_quantity(raw: Optional[str]) -> int:
    quantity = parse_int(raw, 1)
    return quantity if quantity > 0 else 1


def parse_items(raw: str) -> PerItemQuantities:
    items = []
    for token in raw.split(','):
        code, _, quantity = token.partition(':')
        code = code.strip()
        if not code:
            continue
        items.append(LabelRequestItem(id=code, quantity=parse_quantity(quantity or None)))
    return PerItemQuantities(items=tuple(items))


def parse_ids(raw: Union[str, Iterable[str], None], quantity: Optional[str] = None) -> SharedQuantity:
    if raw is None:
        values: Iterable[str] = ()
    elif isinstance(raw, str):
        values = (raw,)
    else:
        values = raw
    ids = tuple(
        code.strip()
        for value in values
        for code in value.split(',')
        if code.strip()
    )
    return SharedQuantity(ids=ids, quantity=parse_quantity(quantity))


def parse_item_type(raw: Optional[str]) -> str:
    item_type = (raw or 'product').strip().lower()
    if item_type not in ITEM_TYPES:
        raise LabelRequestError(f"Unsupported item type: {raw!r}")
    return item_type


def parse_label_query(args) -> LabelQuery:
    """Normalise print-label query parameters (a werkzeug MultiDict or plain dict)."""
    item_type = parse_item_type(args.get('type'))
    start = parse_int(args.get('start'), 1)

    items_raw = (args.get('items') or '').strip()
    if items_raw:
        return LabelQuery(item_type=item_type, start=start, request=parse_items(items_raw))

    if hasattr(args, 'getlist'):
        ids_raw = args.getlist('ids')
    else:
        ids_raw = args.get('ids')
    return LabelQuery(
        item_type=item_type,
        start=start,
        request=parse_ids(ids_raw, args.get('quantity')),
    )


def expand_labels(request: LabelRequest, item_type: str, resolver: ItemResolver,
                  max_workers: int = 4) -> LabelExpansion:
    expansion = LabelExpansion()

    if isinstance(request, PerItemQuantities):
        codes = [item.id for item in request.items]
        resolved = resolve_all(resolver, codes, item_type, max_workers=max_workers)
        for req, item in zip(request.items, resolved):
            if item is None or not item.id:
                expansion.unresolved.append(req.id)
                continue
            expansion.labels.extend([item] * req.quantity)
        return expansion

    resolved = resolve_all(resolver, list(request.ids), item_type, max_workers=max_workers)
    valid = []
    for code, item in zip(request.ids, resolved):
        if item is None:
            expansion.unresolved.append(code)
        else:
            valid.append(item)

    if len(request.ids) == 1 and request.quantity > 1 and valid:
        expansion.labels.extend([valid[0]] * request.quantity)
    else:
        expansion.labels.extend(valid)
    return expansion
