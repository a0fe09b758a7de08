from __future__ import annotations

import base64
import logging
import re

from reportlab.graphics import renderSVG
from reportlab.graphics.barcode import code39, createBarcodeDrawing
from reportlab.lib.units import mm

logger = logging.getLogger(__name__)

BAR_WIDTH = 0.28 * mm
BAR_HEIGHT = 10 * mm

# Standard (non-extended) Code 39 alphabet.
CODE39_PATTERN = re.compile(r'^[A-Z0-9\-. $/+%]+$')


def is_code39(value: str) -> bool:
    return bool(value) and CODE39_PATTERN.match(value) is not None


def code39_widget(value: str, bar_width: float = BAR_WIDTH, bar_height: float = BAR_HEIGHT):
    # Plain Code 39: no mod-43 check character, text printed under the bars.
    return code39.Standard39(
        value,
        barWidth=bar_width,
        barHeight=bar_height,
        checksum=0,
        humanReadable=True,
        quiet=1,
    )


def encodable_widget(value: str):
    """Return a Code 39 widget for value, or None when it cannot be encoded as-is."""
    if not is_code39(value):
        logger.warning("Code %r is not valid Code 39; label printed without barcode", value)
        return None
    widget = code39_widget(value)
    widget.validate()
    if not getattr(widget, 'valid', True):
        logger.warning("Code %r rejected by barcode encoder; label printed without barcode", value)
        return None
    return widget


def barcode_svg(value: str) -> str:
    drawing = createBarcodeDrawing(
        'Standard39',
        value=value,
        barWidth=BAR_WIDTH,
        barHeight=BAR_HEIGHT,
        checksum=0,
        humanReadable=True,
    )
    return renderSVG.drawToString(drawing)


def barcode_to_base64(value: str) -> str:
    if encodable_widget(value) is None:
        return ""
    return base64.b64encode(barcode_svg(value).encode("utf-8")).decode("ascii")
