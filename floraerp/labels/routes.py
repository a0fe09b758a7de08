from __future__ import annotations

import io
from urllib.parse import urlencode

from flask import Blueprint, abort, flash, redirect, render_template, request, send_file, url_for

from ..models import ITEM_TYPES
from .barcode import barcode_to_base64
from .pdf import create_label_sheet_pdf
from .query import LabelRequestError, parse_int
from .service import sheet_from_args
from .sheet import COLUMNS, SLOT_COUNT

labels_bp = Blueprint('labels', __name__)


def _load_sheet():
    try:
        return sheet_from_args(request.args)
    except LabelRequestError as exc:
        abort(400, description=str(exc))


@labels_bp.route('/print-labels')
def print_labels():
    query, sheet = _load_sheet()
    barcodes = {item.id: barcode_to_base64(item.id) for item in sheet.slots if item}
    return render_template(
        'labels/sheet.html',
        sheet=sheet,
        rows=sheet.rows(COLUMNS),
        barcodes=barcodes,
        item_type=query.item_type,
        pdf_url=url_for('labels.print_labels_pdf', **request.args.to_dict(flat=False)),
    )


@labels_bp.route('/print-labels.pdf')
def print_labels_pdf():
    query, sheet = _load_sheet()
    outline = request.args.get('outline') in ('1', 'true', 'yes')
    pdf_bytes = create_label_sheet_pdf(sheet, outline=outline)
    return send_file(
        io.BytesIO(pdf_bytes),
        mimetype='application/pdf',
        as_attachment=request.args.get('download') == '1',
        download_name=f'labels_{query.item_type}.pdf',
    )


@labels_bp.route('/print-labels/options', methods=['POST'])
def print_options():
    item_type = (request.form.get('type') or 'product').strip().lower()
    if item_type not in ITEM_TYPES:
        flash('Unknown item type.', 'warning')
        return redirect(url_for('catalog.items', item_type='product'))
    back = url_for('catalog.items', item_type=item_type)

    ids = [code.strip() for code in request.form.getlist('ids') if code.strip()]
    if not ids:
        flash('Select at least one item to print.', 'warning')
        return redirect(back)

    copies = parse_int(request.form.get('copies'), 0)
    if copies < 1:
        flash('Copies must be 1 or more.', 'warning')
        return redirect(back)

    start = parse_int(request.form.get('start'), 0)
    if not 1 <= start <= SLOT_COUNT:
        flash(f'Start position must be between 1 and {SLOT_COUNT}.', 'warning')
        return redirect(back)

    if len(ids) > 1:
        copies = 1

    params = urlencode({
        'type': item_type,
        'ids': ','.join(ids),
        'quantity': copies,
        'start': start,
    })
    return redirect(f"{url_for('labels.print_labels')}?{params}")
