from datetime import datetime

from .extensions import db


class CatalogItemMixin:
    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(64), unique=True, nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    price = db.Column(db.Float, default=0)
    current_stock = db.Column(db.Integer, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Product(CatalogItemMixin, db.Model):
    __tablename__ = 'products'

    category = db.Column(db.String(100))


class Material(CatalogItemMixin, db.Model):
    __tablename__ = 'materials'

    unit = db.Column(db.String(16), default='ea')


ITEM_TYPES = ('product', 'material')

CATALOG_MODELS = {
    'product': Product,
    'material': Material,
}


def catalog_model(item_type: str):
    try:
        return CATALOG_MODELS[item_type]
    except KeyError:
        raise ValueError(f"Unknown item type: {item_type!r}") from None


DEFAULT_CATALOG: dict[str, tuple[dict[str, object], ...]] = {
    'product': (
        {"code": "P00001", "name": "릴리 화이트 셔츠", "category": "apparel"},
        {"code": "P00002", "name": "맥 데님 팬츠", "category": "apparel"},
        {"code": "P00003", "name": "오렌지 포인트 스커트", "category": "apparel"},
        {"code": "P00004", "name": "그린 스트라이프 티", "category": "apparel"},
        {"code": "P00005", "name": "베이직 블랙 슬랙스", "category": "apparel"},
    ),
    'material': (
        {"code": "M00001", "name": "마르시아 장미", "unit": "stem"},
        {"code": "M00002", "name": "레드 카네이션", "unit": "stem"},
        {"code": "M00003", "name": "몬스테라", "unit": "pot"},
        {"code": "M00004", "name": "만천홍", "unit": "pot"},
        {"code": "M00005", "name": "포장용 크라프트지", "unit": "sheet"},
    ),
}


def seed_catalog() -> int:
    """Insert the default products and materials, skipping codes already present."""
    created = 0
    for item_type, rows in DEFAULT_CATALOG.items():
        model = catalog_model(item_type)
        existing = {code for (code,) in db.session.query(model.code).all()}
        for row in rows:
            if row["code"] in existing:
                continue
            db.session.add(model(**row))
            created += 1
    db.session.commit()
    return created
