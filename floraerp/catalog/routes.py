from __future__ import annotations

from datetime import datetime

from flask import Blueprint, Response, abort, flash, redirect, render_template, request, url_for
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..labels.barcode import is_code39
from ..labels.sheet import SLOT_COUNT
from ..models import ITEM_TYPES, catalog_model
from ..utils.exports import build_catalog_csv

catalog_bp = Blueprint('catalog', __name__)


def _model_or_404(item_type: str):
    try:
        return catalog_model(item_type)
    except ValueError:
        abort(404)


@catalog_bp.route('/')
def index():
    return redirect(url_for('catalog.items', item_type='product'))


@catalog_bp.route('/catalog/<item_type>', methods=['GET', 'POST'])
def items(item_type: str):
    model = _model_or_404(item_type)

    if request.method == 'POST':
        code = (request.form.get('code') or '').strip()
        name = (request.form.get('name') or '').strip()
        if not code or not name:
            flash('Code and name are required.', 'warning')
            return redirect(url_for('catalog.items', item_type=item_type))
        if not is_code39(code):
            flash('Code may only use A-Z, 0-9, space and - . $ / + % (Code 39).', 'warning')
            return redirect(url_for('catalog.items', item_type=item_type))
        try:
            price = float(request.form.get('price') or 0)
            stock = int(request.form.get('stock') or 0)
        except (TypeError, ValueError):
            flash('Price and stock must be numbers.', 'warning')
            return redirect(url_for('catalog.items', item_type=item_type))

        extra = {}
        if item_type == 'product':
            extra['category'] = (request.form.get('category') or '').strip() or None
        else:
            extra['unit'] = (request.form.get('unit') or '').strip() or 'ea'

        try:
            db.session.add(model(code=code, name=name, price=price, current_stock=stock, **extra))
            db.session.commit()
            flash('Item added.', 'success')
        except IntegrityError:
            db.session.rollback()
            flash('An item with that code already exists.', 'warning')
        return redirect(url_for('catalog.items', item_type=item_type))

    rows = db.session.scalars(db.select(model).order_by(model.code)).all()
    return render_template(
        'catalog/items.html',
        items=rows,
        item_type=item_type,
        item_types=ITEM_TYPES,
        slot_count=SLOT_COUNT,
    )


@catalog_bp.route('/catalog/<item_type>/add_stock', methods=['POST'])
def add_stock(item_type: str):
    model = _model_or_404(item_type)
    code = (request.form.get('code') or '').strip()
    quantity_raw = request.form.get('quantity')

    if not code:
        flash('Select an item to update.', 'warning')
        return redirect(url_for('catalog.items', item_type=item_type))

    try:
        quantity = int(quantity_raw or '')
    except (TypeError, ValueError):
        flash('Provide a valid quantity.', 'warning')
        return redirect(url_for('catalog.items', item_type=item_type))

    if quantity <= 0:
        flash('Quantity must be greater than zero.', 'warning')
        return redirect(url_for('catalog.items', item_type=item_type))

    item = db.session.scalars(db.select(model).filter_by(code=code)).first()
    if not item:
        flash('Item not found.', 'warning')
        return redirect(url_for('catalog.items', item_type=item_type))

    item.current_stock = (item.current_stock or 0) + quantity
    item.updated_at = datetime.utcnow()
    db.session.commit()
    flash(f'Added {quantity} units to {item.name}.', 'success')
    return redirect(url_for('catalog.items', item_type=item_type))


@catalog_bp.route('/catalog/<item_type>/export.csv')
def export_csv(item_type: str):
    model = _model_or_404(item_type)
    rows = db.session.scalars(db.select(model).order_by(model.code)).all()
    stamp = datetime.utcnow().strftime('%Y%m%d')
    return Response(
        build_catalog_csv(rows),
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename={item_type}s_{stamp}.csv'},
    )
