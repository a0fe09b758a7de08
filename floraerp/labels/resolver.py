from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Mapping, Optional, Sequence

from flask import Flask
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models import catalog_model
from .sheet import ResolvedItem

logger = logging.getLogger(__name__)


class ItemResolver:
    """Looks up the display name for an item code within one catalog collection."""

    def resolve(self, code: str, item_type: str) -> Optional[ResolvedItem]:
        raise NotImplementedError


class CatalogResolver(ItemResolver):
    def __init__(self, app: Flask):
        self.app = app

    def resolve(self, code: str, item_type: str) -> Optional[ResolvedItem]:
        model = catalog_model(item_type)
        # Own app context so lookups can run on worker threads.
        with self.app.app_context():
            try:
                row = db.session.execute(
                    db.select(model.code, model.name).filter_by(code=code).limit(1)
                ).first()
            except SQLAlchemyError as exc:
                logger.warning("Catalog lookup failed for %s %s: %s", item_type, code, exc)
                return None
        if row is None:
            return None
        return ResolvedItem(id=row.code, name=row.name)


class MappingResolver(ItemResolver):
    def __init__(self, mapping: Mapping[str, Mapping[str, str]]):
        self.mapping = mapping

    def resolve(self, code: str, item_type: str) -> Optional[ResolvedItem]:
        name = self.mapping.get(item_type, {}).get(code)
        if name is None:
            return None
        return ResolvedItem(id=code, name=name)


def _safe_resolve(resolver: ItemResolver, code: str, item_type: str) -> Optional[ResolvedItem]:
    try:
        return resolver.resolve(code, item_type)
    except Exception:
        logger.exception("Resolver raised for %s %s; treating as not found", item_type, code)
        return None


def resolve_all(resolver: ItemResolver, codes: Sequence[str], item_type: str,
                max_workers: int = 4) -> list[Optional[ResolvedItem]]:
    """Resolve every code, returning results in request order."""
    if not codes:
        return []
    if max_workers <= 1 or len(codes) == 1:
        return [_safe_resolve(resolver, code, item_type) for code in codes]

    workers = min(max_workers, len(codes))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="label-resolve") as pool:
        return list(pool.map(lambda code: _safe_resolve(resolver, code, item_type), codes))
