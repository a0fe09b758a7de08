from pathlib import Path

import click
from flask import current_app

from .labels.pdf import create_label_sheet_pdf
from .labels.query import LabelQuery, LabelRequestError, parse_ids, parse_item_type, parse_items
from .labels.resolver import CatalogResolver
from .labels.service import build_label_sheet
from .models import seed_catalog


def register_cli(app):
    @app.cli.command('seed-catalog')
    def seed_catalog_command():
        """Insert the default products and materials."""
        created = seed_catalog()
        click.echo(f'Catalog seeded ({created} new items).')

    @app.cli.command('print-labels')
    @click.option('--type', 'item_type', default='product', show_default=True)
    @click.option('--items', default=None, help='Per-item quantities, e.g. "P00001:3,P00002:2".')
    @click.option('--ids', default=None, help='Comma separated codes sharing --quantity.')
    @click.option('--quantity', default='1', show_default=True)
    @click.option('--start', default=1, show_default=True, type=int)
    @click.option('--output', default='labels.pdf', show_default=True, type=click.Path(dir_okay=False))
    @click.option('--outline', is_flag=True, help='Draw dashed cell borders.')
    def print_labels_command(item_type, items, ids, quantity, start, output, outline):
        """Render a 24-slot label sheet to PDF."""
        if items and ids:
            raise click.UsageError('Use either --items or --ids, not both.')
        try:
            parsed_type = parse_item_type(item_type)
        except LabelRequestError as exc:
            raise click.BadParameter(str(exc), param_hint='--type')

        request = parse_items(items) if items else parse_ids(ids, quantity)
        query = LabelQuery(item_type=parsed_type, start=start, request=request)
        sheet = build_label_sheet(
            query,
            CatalogResolver(current_app._get_current_object()),
            max_workers=current_app.config.get('LABEL_RESOLVE_WORKERS', 4),
        )

        Path(output).write_bytes(create_label_sheet_pdf(sheet, outline=outline))
        click.echo(f'Wrote {output}: {sheet.placed} labels placed from slot {sheet.start_position}.')
        if sheet.dropped_overflow:
            click.echo(f'Dropped {sheet.dropped_overflow} labels past slot 24.')
        if sheet.dropped_unresolved:
            click.echo(f'Unknown codes skipped: {", ".join(sheet.dropped_unresolved)}')
