import io

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfbase.pdfmetrics import registerFont, stringWidth
from reportlab.pdfbase.cidfonts import UnicodeCIDFont
from reportlab.pdfgen import canvas

from .barcode import encodable_widget
from .sheet import COLUMNS, SLOT_COUNT, LabelSheet

# Formtec 3108: A4, 3 x 8 labels.
MARGIN_X = 6.5 * mm
MARGIN_Y = 13.5 * mm
ROWS = SLOT_COUNT // COLUMNS
NAME_FONT = 'HYSMyeongJo-Medium'
NAME_FONT_SIZE = 8

registerFont(UnicodeCIDFont(NAME_FONT))


def _fit_lines(text: str, max_width: float, max_lines: int = 2) -> list[str]:
    lines: list[str] = []
    current = ''
    for char in text:
        candidate = current + char
        if stringWidth(candidate, NAME_FONT, NAME_FONT_SIZE) <= max_width:
            current = candidate
            continue
        lines.append(current)
        current = char
        if len(lines) == max_lines:
            break
    if len(lines) < max_lines and current:
        lines.append(current)
    elif len(lines) == max_lines and current:
        last = lines[-1]
        while last and stringWidth(last + '…', NAME_FONT, NAME_FONT_SIZE) > max_width:
            last = last[:-1]
        lines[-1] = last + '…'
    return lines


def create_label_sheet_pdf(sheet: LabelSheet, outline: bool = False) -> bytes:
    buf = io.BytesIO()
    pdf = canvas.Canvas(buf, pagesize=A4)
    width, height = A4
    cell_w = (width - 2 * MARGIN_X) / COLUMNS
    cell_h = (height - 2 * MARGIN_Y) / ROWS

    for index, item in enumerate(sheet.slots):
        row, col = divmod(index, COLUMNS)
        x = MARGIN_X + col * cell_w
        y = height - MARGIN_Y - (row + 1) * cell_h

        if outline:
            pdf.setStrokeColor(colors.HexColor('#cccccc'))
            pdf.setDash(2, 2)
            pdf.rect(x, y, cell_w, cell_h, fill=0, stroke=1)
            pdf.setDash()

        if item is None:
            continue

        pdf.setFillColor(colors.black)
        pdf.setFont(NAME_FONT, NAME_FONT_SIZE)
        text_y = y + cell_h - 4 * mm
        for line in _fit_lines(item.name, cell_w - 4 * mm):
            pdf.drawCentredString(x + cell_w / 2, text_y, line)
            text_y -= NAME_FONT_SIZE + 1.5

        barcode = encodable_widget(item.id)
        if barcode is None:
            continue
        bc_x = x + max((cell_w - barcode.width) / 2, 1 * mm)
        barcode.drawOn(pdf, bc_x, y + 4 * mm)

    pdf.showPage()
    pdf.save()
    return buf.getvalue()
