from __future__ import annotations

from flask import current_app

from .query import LabelQuery, expand_labels, parse_label_query
from .resolver import CatalogResolver, ItemResolver
from .sheet import LabelSheet, assign_slots


def build_label_sheet(query: LabelQuery, resolver: ItemResolver, max_workers: int = 4) -> LabelSheet:
    expansion = expand_labels(query.request, query.item_type, resolver, max_workers=max_workers)
    return assign_slots(expansion.labels, query.start, unresolved=expansion.unresolved)


def sheet_from_args(args) -> tuple[LabelQuery, LabelSheet]:
    """Parse request args and build the sheet against the catalog of the current app."""
    query = parse_label_query(args)
    app = current_app._get_current_object()
    sheet = build_label_sheet(
        query,
        CatalogResolver(app),
        max_workers=app.config.get('LABEL_RESOLVE_WORKERS', 4),
    )
    if sheet.dropped_unresolved:
        app.logger.info("Unresolved %s codes skipped: %s", query.item_type, ", ".join(sheet.dropped_unresolved))
    if sheet.dropped_overflow:
        app.logger.info("%s labels did not fit on the sheet", sheet.dropped_overflow)
    return query, sheet
