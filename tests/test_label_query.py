import threading
import time

import pytest
from werkzeug.datastructures import MultiDict

from floraerp.labels.query import (
    LabelRequestError,
    LabelRequestItem,
    PerItemQuantities,
    SharedQuantity,
    expand_labels,
    parse_items,
    parse_label_query,
)
from floraerp.labels.resolver import ItemResolver, MappingResolver, resolve_all
from floraerp.labels.service import build_label_sheet

CATALOG = {
    "product": {"P001": "Rose bouquet", "P002": "Tulip basket", "P003": "Orchid pot"},
    "material": {"M001": "Kraft paper"},
}


@pytest.fixture()
def resolver():
    return MappingResolver(CATALOG)


def codes(expansion):
    return [item.id for item in expansion.labels]


def test_parse_items_quantities():
    request = parse_items("P001:3, P002:x,P003,:4,P004:0,P005:-2,P006:2.5,P007:3abc,P008: 4 ")
    assert request == PerItemQuantities(items=(
        LabelRequestItem("P001", 3),
        LabelRequestItem("P002", 1),
        LabelRequestItem("P003", 1),
        LabelRequestItem("P004", 1),
        LabelRequestItem("P005", 1),
        LabelRequestItem("P006", 2),
        LabelRequestItem("P007", 3),
        LabelRequestItem("P008", 4),
    ))


def test_query_reads_leading_integer():
    query = parse_label_query(MultiDict({"ids": "P001", "quantity": "5.9", "start": "3.0"}))
    assert query.start == 3
    assert query.request == SharedQuantity(ids=("P001",), quantity=5)


def test_query_prefers_items_over_ids():
    query = parse_label_query(MultiDict({"type": "product", "items": "P001:2", "ids": "P002"}))
    assert isinstance(query.request, PerItemQuantities)
    assert query.start == 1


def test_query_ids_string_and_repeated():
    query = parse_label_query(MultiDict({"type": "material", "ids": "M001,,M002", "quantity": "4", "start": "7"}))
    assert query.item_type == "material"
    assert query.start == 7
    assert query.request == SharedQuantity(ids=("M001", "M002"), quantity=4)

    query = parse_label_query(MultiDict([("ids", "P001"), ("ids", "P002,P003"), ("quantity", "zz")]))
    assert query.item_type == "product"
    assert query.request == SharedQuantity(ids=("P001", "P002", "P003"), quantity=1)


def test_query_defaults_and_plain_dict():
    query = parse_label_query({"start": "abc"})
    assert query.start == 1
    assert query.request == SharedQuantity(ids=(), quantity=1)


def test_query_rejects_unknown_type():
    with pytest.raises(LabelRequestError):
        parse_label_query(MultiDict({"type": "bouquet", "ids": "P001"}))


def test_per_item_quantities_expand_in_order(resolver):
    expansion = expand_labels(parse_items("P001:3,P002:2"), "product", resolver)
    assert codes(expansion) == ["P001"] * 3 + ["P002"] * 2


def test_unresolved_ids_contribute_nothing(resolver):
    expansion = expand_labels(parse_items("P001:2,BADID:1,P003:1"), "product", resolver)
    assert codes(expansion) == ["P001", "P001", "P003"]
    assert expansion.unresolved == ["BADID"]


def test_duplicate_tokens_stay_separate_runs(resolver):
    expansion = expand_labels(parse_items("P001:2,P002:1,P001:3"), "product", resolver)
    assert codes(expansion) == ["P001", "P001", "P002", "P001", "P001", "P001"]


def test_shared_quantity_ignored_for_several_ids(resolver):
    expansion = expand_labels(SharedQuantity(ids=("P001", "P002"), quantity=5), "product", resolver)
    assert codes(expansion) == ["P001", "P002"]


def test_shared_quantity_replicates_single_id(resolver):
    expansion = expand_labels(SharedQuantity(ids=("P001",), quantity=5), "product", resolver)
    assert len(expansion.labels) == 5
    assert all(item == expansion.labels[0] for item in expansion.labels)
    assert expansion.labels[0].name == "Rose bouquet"


def test_shared_quantity_drops_unknown(resolver):
    expansion = expand_labels(SharedQuantity(ids=("P002", "NOPE", "P001"), quantity=1), "product", resolver)
    assert codes(expansion) == ["P002", "P001"]
    assert expansion.unresolved == ["NOPE"]

    expansion = expand_labels(SharedQuantity(ids=("NOPE",), quantity=3), "product", resolver)
    assert expansion.labels == []


def test_shared_quantity_counts_supplied_ids_not_resolved(resolver):
    expansion = expand_labels(SharedQuantity(ids=("P001", "NOPE"), quantity=5), "product", resolver)
    assert codes(expansion) == ["P001"]
    assert expansion.unresolved == ["NOPE"]


def test_item_type_selects_collection(resolver):
    expansion = expand_labels(SharedQuantity(ids=("P001",)), "material", resolver)
    assert expansion.labels == []


def test_empty_request_gives_empty_sheet(resolver):
    query = parse_label_query(MultiDict({"type": "product", "ids": ""}))
    sheet = build_label_sheet(query, resolver)
    assert sheet.slots == [None] * 24


class SlowFirstResolver(ItemResolver):
    """Earlier codes answer later, so completion order is the reverse of request order."""

    def __init__(self, codes):
        self.delays = {code: 0.02 * (len(codes) - i) for i, code in enumerate(codes)}
        self.threads = set()
        self.lock = threading.Lock()

    def resolve(self, code, item_type):
        with self.lock:
            self.threads.add(threading.get_ident())
        time.sleep(self.delays[code])
        return MappingResolver(CATALOG).resolve(code, item_type)


def test_resolve_all_preserves_request_order():
    request = ["P003", "P001", "P002", "P001"]
    slow = SlowFirstResolver(request)
    results = resolve_all(slow, request, "product", max_workers=4)
    assert [item.id for item in results] == request
    assert len(slow.threads) > 1


def test_resolve_all_is_idempotent(resolver):
    first, second = resolve_all(resolver, ["P002", "P002"], "product", max_workers=2)
    assert first == second
    assert first.name == "Tulip basket"


class FlakyResolver(ItemResolver):
    def resolve(self, code, item_type):
        if code == "BOOM":
            raise RuntimeError("backend unavailable")
        return MappingResolver(CATALOG).resolve(code, item_type)


def test_resolver_failure_is_treated_as_not_found():
    expansion = expand_labels(parse_items("P001:1,BOOM:4,P002:1"), "product", FlakyResolver(), max_workers=3)
    assert codes(expansion) == ["P001", "P002"]
    assert expansion.unresolved == ["BOOM"]


def test_sequential_resolution_when_single_worker(resolver):
    results = resolve_all(resolver, ["P001", "X", "P003"], "product", max_workers=1)
    assert [item.id if item else None for item in results] == ["P001", None, "P003"]
