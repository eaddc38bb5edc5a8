# FILE: rxdesk/services/pdfs/writer.py
from __future__ import annotations

import logging
from io import BytesIO

from reportlab.lib import colors
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from rxdesk.services.pdfs.layout import (
    ImageOp,
    LineOp,
    Op,
    PagePlan,
    RectOp,
    TextOp,
)

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"


def _draw(c: canvas.Canvas, op: Op, page_h: float) -> None:
    # plan is top-down, reportlab is bottom-up
    if isinstance(op, TextOp):
        c.setFont(op.font, op.size)
        c.setFillColor(colors.HexColor(op.color))
        y = page_h - op.y
        if op.align == "center":
            c.drawCentredString(op.x, y, op.text)
        elif op.align == "right":
            c.drawRightString(op.x, y, op.text)
        else:
            c.drawString(op.x, y, op.text)

    elif isinstance(op, RectOp):
        c.saveState()
        c.setLineWidth(op.line_width)
        if op.dash:
            c.setDash(*op.dash)
        if op.stroke:
            c.setStrokeColor(colors.HexColor(op.stroke))
        if op.fill:
            c.setFillColor(colors.HexColor(op.fill))
        c.rect(op.x,
               page_h - op.y - op.h,
               op.w,
               op.h,
               stroke=1 if op.stroke else 0,
               fill=1 if op.fill else 0)
        c.restoreState()

    elif isinstance(op, LineOp):
        c.saveState()
        c.setStrokeColor(colors.HexColor(op.color))
        c.setLineWidth(op.width)
        if op.dash:
            c.setDash(*op.dash)
        c.line(op.x1, page_h - op.y1, op.x2, page_h - op.y2)
        c.restoreState()

    elif isinstance(op, ImageOp):
        c.drawImage(ImageReader(BytesIO(op.data)),
                    op.x,
                    page_h - op.y - op.h,
                    width=op.w,
                    height=op.h,
                    preserveAspectRatio=True,
                    anchor="e",
                    mask="auto")

    else:
        raise TypeError(f"Unknown draw op: {type(op).__name__}")


def write_pdf(plan: PagePlan) -> bytes:
    """
    Serialise a PagePlan to PDF bytes.

    invariant=1 drops the creation timestamp and random document id, so the
    same plan always produces the same bytes.
    """
    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=(plan.width, plan.height), invariant=1)
    c.setTitle(plan.title)
    c.setCreator("RxDesk")

    for page in plan.pages:
        for op in page.ops:
            _draw(c, op, plan.height)
        c.showPage()

    c.save()
    logger.debug("Wrote prescription PDF: %d page(s)", len(plan.pages))
    return buf.getvalue()
