# FILE: rxdesk/services/pdfs/layout.py
"""
Prescription page layout.

Pure and deterministic: turns a RenderModel into a PagePlan (a list of pages,
each a list of drawing ops) without touching reportlab's canvas or the
filesystem. Coordinates are top-down: ``y`` is the distance from the top edge
of the page, text ``y`` is the baseline. writer.py flips them for the PDF.

Every region function takes the plan and a Cursor and returns the Cursor for
the next region, so each region can be laid out (and tested) on its own.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics

from rxdesk.services.errors import AssetLoadError
from rxdesk.services.render_model import (
    ClinicView,
    MedicineLine,
    PatientView,
    PractitionerView,
    RenderModel,
)
from rxdesk.services.vitals import BMI_PLACEHOLDER, format_bmi

# -------------------------------
# Page geometry
# -------------------------------
PAGE_W, PAGE_H = A4
MARGIN = 14 * mm
CONTENT_W = PAGE_W - 2 * MARGIN
LEFT = MARGIN
RIGHT = PAGE_W - MARGIN
TOP = MARGIN
FOOTER_H = 8 * mm
BOTTOM = PAGE_H - MARGIN - FOOTER_H  # flow limit
GAP = 4 * mm

CAPTION_H = 7 * mm  # continuation caption on pages 2..n
LABEL_H = 6 * mm  # section label above diagnosis / tables

HEADER_H = 14 * mm
PRACTITIONER_H = 12 * mm
PATIENT_PANEL_H = 16 * mm
VITALS_PANEL_H = 10 * mm

DIAG_PAD_TOP = 3 * mm
DIAG_PAD_BOTTOM = 3 * mm
DIAG_PAD_X = 3 * mm
DIAG_LEADING = 4.4 * mm
DIAG_FONT = ("Helvetica", 9.5)

TABLE_HEADER_H = 7.5 * mm
ROW_H = 7 * mm
CELL_PAD = 1.8 * mm

SIGNATURE_W = 60 * mm
SIGNATURE_H = 28 * mm
SIGNATURE_TOP = BOTTOM - SIGNATURE_H
SIGNATURE_IMG_H = 16 * mm

# -------------------------------
# Palette
# -------------------------------
INK = "#0f172a"
MUTED = "#475569"
SOFT = "#f8fafc"
LINE = "#cbd5e1"
BAR = "#0b1220"
WHITE = "#ffffff"

PLACEHOLDER = BMI_PLACEHOLDER
ELLIPSIS = "..."

MEDICINE_COLUMNS: Tuple[Tuple[str, float], ...] = (
    ("#", 9 * mm),
    ("Medicine", CONTENT_W - (9 + 24 + 26 + 20 + 36) * mm),
    ("Dose", 24 * mm),
    ("Frequency", 26 * mm),
    ("Duration", 20 * mm),
    ("Remarks", 36 * mm),
)

TEST_COLUMNS: Tuple[Tuple[str, float], ...] = (
    ("#", 9 * mm),
    ("Test", CONTENT_W - 9 * mm),
)


# -------------------------------
# Plan types
# -------------------------------
@dataclass(frozen=True)
class TextOp:
    x: float
    y: float
    text: str
    font: str = "Helvetica"
    size: float = 9.0
    align: str = "left"  # left | center | right
    color: str = INK


@dataclass(frozen=True)
class RectOp:
    x: float
    y: float
    w: float
    h: float
    stroke: Optional[str] = LINE
    fill: Optional[str] = None
    dash: Optional[Tuple[float, float]] = None
    line_width: float = 0.8


@dataclass(frozen=True)
class LineOp:
    x1: float
    y1: float
    x2: float
    y2: float
    color: str = LINE
    width: float = 0.8
    dash: Optional[Tuple[float, float]] = None


@dataclass(frozen=True)
class ImageOp:
    x: float
    y: float
    w: float
    h: float
    data: bytes


Op = Union[TextOp, RectOp, LineOp, ImageOp]


@dataclass
class Page:
    number: int
    flow_top: float
    used_to: float
    ops: List[Op] = field(default_factory=list)


@dataclass(frozen=True)
class Cursor:
    page: int
    y: float


@dataclass
class PagePlan:
    width: float = PAGE_W
    height: float = PAGE_H
    continuation_caption: str = ""
    title: str = ""
    pages: List[Page] = field(default_factory=list)

    @property
    def extent(self) -> float:
        """Total vertical space consumed by flowed regions, across pages."""
        return sum(p.used_to - p.flow_top for p in self.pages)

    def start(self) -> Cursor:
        self.pages.append(Page(number=1, flow_top=TOP, used_to=TOP))
        return Cursor(page=0, y=TOP)

    def new_page(self) -> Cursor:
        idx = len(self.pages)
        flow_top = TOP + CAPTION_H
        page = Page(number=idx + 1, flow_top=flow_top, used_to=flow_top)
        if self.continuation_caption:
            page.ops.append(
                TextOp(LEFT,
                       TOP + 4 * mm,
                       _fit(self.continuation_caption, "Helvetica-Oblique",
                            8.5, CONTENT_W),
                       font="Helvetica-Oblique",
                       size=8.5,
                       color=MUTED))
        page.ops.append(LineOp(LEFT, TOP + 5.5 * mm, RIGHT, TOP + 5.5 * mm))
        self.pages.append(page)
        return Cursor(page=idx, y=flow_top)

    def ops(self, cur: Cursor) -> List[Op]:
        return self.pages[cur.page].ops

    def is_fresh(self, cur: Cursor) -> bool:
        return cur.y <= self.pages[cur.page].flow_top


# -------------------------------
# Text helpers
# -------------------------------
def text_width(text: str, font: str, size: float) -> float:
    return pdfmetrics.stringWidth(text or "", font, size)


def _fit(text: str, font: str, size: float, max_w: float) -> str:
    """
    Clip ``text`` with an ellipsis so it fits ``max_w``.

    Standard-font widths are additive per glyph, so the prefix is measured
    one character at a time and the scan stops at the first overflow.
    """
    s = (text or "").strip()
    if text_width(s, font, size) <= max_w:
        return s
    room = max_w - text_width(ELLIPSIS, font, size)
    used = 0.0
    n = 0
    for ch in s:
        used += text_width(ch, font, size)
        if used > room:
            break
        n += 1
    s = s[:n].rstrip()
    return (s + ELLIPSIS) if s else ""


def _break_word(word: str, font: str, size: float,
                max_w: float) -> List[str]:
    parts: List[str] = []
    cur = ""
    cur_w = 0.0
    for ch in word:
        w = text_width(ch, font, size)
        if cur and cur_w + w > max_w:
            parts.append(cur)
            cur, cur_w = ch, w
        else:
            cur += ch
            cur_w += w
    if cur:
        parts.append(cur)
    return parts


def wrap_text(text: str, font: str, size: float, max_w: float) -> List[str]:
    """
    Greedy word wrap of one logical line. Always returns at least one line
    (an empty string for blank input) so a blank line still takes space.
    """
    words = (text or "").split()
    if not words:
        return [""]
    lines: List[str] = []
    cur = ""
    for w in words:
        if text_width(w, font, size) > max_w:
            if cur:
                lines.append(cur)
                cur = ""
            chunks = _break_word(w, font, size, max_w)
            lines.extend(chunks[:-1])
            cur = chunks[-1]
            continue
        cand = (cur + " " + w).strip()
        if text_width(cand, font, size) <= max_w:
            cur = cand
        else:
            lines.append(cur)
            cur = w
    if cur:
        lines.append(cur)
    return lines


def diagnosis_lines(diagnosis: Sequence[str]) -> List[str]:
    """Each diagnosis entry (and each embedded newline) starts a new line."""
    font, size = DIAG_FONT
    max_w = CONTENT_W - 2 * DIAG_PAD_X
    out: List[str] = []
    for entry in diagnosis:
        for logical in (entry or "").split("\n"):
            out.extend(wrap_text(logical, font, size, max_w))
    return out or [""]


def diagnosis_box_height(n_lines: int) -> float:
    return DIAG_PAD_TOP + max(n_lines, 1) * DIAG_LEADING + DIAG_PAD_BOTTOM


# -------------------------------
# Flow helpers
# -------------------------------
def _advance(plan: PagePlan, cur: Cursor, bottom: float) -> Cursor:
    page = plan.pages[cur.page]
    page.used_to = max(page.used_to, bottom)
    return Cursor(page=cur.page, y=bottom + GAP)


def ensure_space(plan: PagePlan, cur: Cursor, needed: float) -> Cursor:
    """Start a new page when ``needed`` does not fit below the cursor."""
    if cur.y + needed <= BOTTOM or plan.is_fresh(cur):
        return cur
    return plan.new_page()


def _label(plan: PagePlan, cur: Cursor, text: str) -> float:
    plan.ops(cur).append(
        TextOp(LEFT, cur.y + 4.2 * mm, text, font="Helvetica-Bold", size=10))
    return cur.y + LABEL_H


def _field(ops: List[Op], x: float, y: float, w: float, label: str,
           value: str) -> None:
    label_txt = f"{label}:"
    lw = text_width(label_txt, "Helvetica-Bold", 8.6)
    pad = 1.5 * mm
    ops.append(
        TextOp(x, y, label_txt, font="Helvetica-Bold", size=8.6,
               color=MUTED))
    ops.append(
        TextOp(x + lw + pad,
               y,
               _fit(value, "Helvetica", 9.2, max(w - lw - pad - 2 * mm, 0)),
               font="Helvetica",
               size=9.2))


def _join(parts: Sequence[str], sep: str) -> str:
    return sep.join(p for p in parts if p)


# -------------------------------
# Regions
# -------------------------------
def layout_header(plan: PagePlan, cur: Cursor, clinic: ClinicView) -> Cursor:
    cur = ensure_space(plan, cur, HEADER_H)
    ops = plan.ops(cur)
    cx = PAGE_W / 2

    ops.append(
        TextOp(cx,
               cur.y + 6 * mm,
               _fit(clinic.name, "Helvetica-Bold", 17, CONTENT_W),
               font="Helvetica-Bold",
               size=17,
               align="center"))

    address = _join([clinic.address_line1, clinic.city, clinic.state], ", ")
    if clinic.pincode:
        address = _join([address, clinic.pincode], " - ")
    ops.append(
        TextOp(cx,
               cur.y + 11.5 * mm,
               _fit(address, "Helvetica", 9.5, CONTENT_W),
               size=9.5,
               align="center",
               color=MUTED))
    return _advance(plan, cur, cur.y + HEADER_H)


def layout_practitioner(plan: PagePlan, cur: Cursor,
                        practitioner: PractitionerView) -> Cursor:
    cur = ensure_space(plan, cur, PRACTITIONER_H)
    ops = plan.ops(cur)
    cx = PAGE_W / 2

    ops.append(
        TextOp(cx,
               cur.y + 4.5 * mm,
               _fit(practitioner.display_name, "Helvetica-Bold", 11,
                    CONTENT_W),
               font="Helvetica-Bold",
               size=11,
               align="center"))
    contact = _join([practitioner.email, practitioner.phone], "  |  ")
    ops.append(
        TextOp(cx,
               cur.y + 9 * mm,
               _fit(contact, "Helvetica", 9, CONTENT_W),
               size=9,
               align="center",
               color=MUTED))

    rule_y = cur.y + PRACTITIONER_H
    ops.append(LineOp(LEFT, rule_y, RIGHT, rule_y, color=INK, width=0.8))
    return _advance(plan, cur, rule_y)


def layout_patient_panel(plan: PagePlan, cur: Cursor,
                         patient: PatientView) -> Cursor:
    cur = ensure_space(plan, cur, PATIENT_PANEL_H)
    ops = plan.ops(cur)
    ops.append(
        RectOp(LEFT, cur.y, CONTENT_W, PATIENT_PANEL_H, stroke=LINE,
               fill=SOFT))

    inner_x = LEFT + 3 * mm
    inner_w = CONTENT_W - 6 * mm
    cols = (0.0, 0.44, 0.60, 0.76, 1.0)
    row1 = cur.y + 6 * mm
    row2 = cur.y + 12 * mm

    values = (
        ("Name", patient.name),
        ("Age", str(patient.age) if patient.age > 0 else PLACEHOLDER),
        ("Sex", patient.sex),
        ("Phone", patient.phone),
    )
    for i, (label, value) in enumerate(values):
        x0 = inner_x + cols[i] * inner_w
        w = (cols[i + 1] - cols[i]) * inner_w
        _field(ops, x0, row1, w, label, value)

    _field(ops, inner_x, row2, inner_w, "Address", patient.address_line1)
    return _advance(plan, cur, cur.y + PATIENT_PANEL_H)


def _with_unit(value: str, unit: str) -> str:
    return f"{value} {unit}" if value else PLACEHOLDER


def layout_vitals_panel(plan: PagePlan, cur: Cursor,
                        patient: PatientView) -> Cursor:
    cur = ensure_space(plan, cur, VITALS_PANEL_H)
    ops = plan.ops(cur)
    ops.append(
        RectOp(LEFT, cur.y, CONTENT_W, VITALS_PANEL_H, stroke=LINE,
               fill=SOFT))

    cells = (
        ("Height", _with_unit(patient.height, "cm")),
        ("Weight", _with_unit(patient.weight, "kg")),
        ("BMI", format_bmi(patient.bmi)),
        ("BP", patient.blood_pressure or PLACEHOLDER),
        ("Pulse", _with_unit(patient.pulse, "bpm")),
    )
    inner_x = LEFT + 3 * mm
    col_w = (CONTENT_W - 6 * mm) / len(cells)
    base = cur.y + 6.2 * mm
    for i, (label, value) in enumerate(cells):
        _field(ops, inner_x + i * col_w, base, col_w, label, value)
    return _advance(plan, cur, cur.y + VITALS_PANEL_H)


def _diagnosis_box(plan: PagePlan, cur: Cursor, title: str,
                   lines: Sequence[str]) -> Cursor:
    y = _label(plan, cur, title)
    # box height comes from the measured lines; the box op needs it up front
    box_h = diagnosis_box_height(len(lines))
    ops = plan.ops(cur)
    ops.append(
        RectOp(LEFT,
               y,
               CONTENT_W,
               box_h,
               stroke=MUTED,
               fill=None,
               dash=(3, 2)))
    font, size = DIAG_FONT
    base = y + DIAG_PAD_TOP + DIAG_LEADING - 1.2 * mm
    for i, ln in enumerate(lines):
        ops.append(
            TextOp(LEFT + DIAG_PAD_X,
                   base + i * DIAG_LEADING,
                   ln,
                   font=font,
                   size=size))
    return _advance(plan, cur, y + box_h)


def layout_diagnosis(plan: PagePlan, cur: Cursor,
                     diagnosis: Sequence[str]) -> Cursor:
    lines = diagnosis_lines(diagnosis)
    title = "Diagnosis"

    while True:
        needed = LABEL_H + diagnosis_box_height(len(lines))
        cur = ensure_space(plan, cur, needed)
        if cur.y + needed <= BOTTOM:
            return _diagnosis_box(plan, cur, title, lines)

        # taller than a whole page: split at a line boundary
        room = BOTTOM - cur.y - LABEL_H - DIAG_PAD_TOP - DIAG_PAD_BOTTOM
        fit = max(int(room // DIAG_LEADING), 1)
        _diagnosis_box(plan, cur, title, lines[:fit])
        lines = lines[fit:]
        title = "Diagnosis (contd.)"
        cur = plan.new_page()


def _column_edges(columns: Sequence[Tuple[str, float]]) -> List[float]:
    edges = [LEFT]
    for _, w in columns:
        edges.append(edges[-1] + w)
    return edges


def _table_header(ops: List[Op], y: float,
                  columns: Sequence[Tuple[str, float]]) -> float:
    ops.append(
        RectOp(LEFT, y, CONTENT_W, TABLE_HEADER_H, stroke=BAR, fill=BAR))
    edges = _column_edges(columns)
    for (title, w), x0 in zip(columns, edges):
        ops.append(
            TextOp(x0 + w / 2,
                   y + TABLE_HEADER_H / 2 + 1.2 * mm,
                   _fit(title, "Helvetica-Bold", 8.8, w - 2 * CELL_PAD),
                   font="Helvetica-Bold",
                   size=8.8,
                   align="center",
                   color=WHITE))
    return y + TABLE_HEADER_H


def _close_segment(ops: List[Op], top: float, bottom: float,
                   columns: Sequence[Tuple[str, float]], boxed: bool) -> None:
    for x in _column_edges(columns):
        ops.append(LineOp(x, top, x, bottom, color=LINE))
    if boxed:
        ops.append(
            RectOp(LEFT, top, CONTENT_W, bottom - top, stroke=INK,
                   fill=None))


def _table_row(ops: List[Op], y: float, idx: int, cells: Sequence[str],
               columns: Sequence[Tuple[str, float]]) -> float:
    if idx % 2 == 0:
        ops.append(RectOp(LEFT, y, CONTENT_W, ROW_H, stroke=None, fill=SOFT))
    edges = _column_edges(columns)
    base = y + ROW_H / 2 + 1.2 * mm
    for (title, w), x0, value in zip(columns, edges, cells):
        if title == "#":
            ops.append(
                TextOp(x0 + w / 2, base, value, size=9, align="center"))
        else:
            ops.append(
                TextOp(x0 + CELL_PAD,
                       base,
                       _fit(value, "Helvetica", 9, w - 2 * CELL_PAD),
                       size=9))
    ops.append(LineOp(LEFT, y + ROW_H, RIGHT, y + ROW_H, color=LINE))
    return y + ROW_H


def layout_table(plan: PagePlan,
                 cur: Cursor,
                 title: str,
                 columns: Sequence[Tuple[str, float]],
                 rows: Sequence[Sequence[str]],
                 *,
                 boxed: bool = False) -> Cursor:
    """
    Label + header row + fixed-height body rows. Rows never split; when the
    next row does not fit, the segment is closed and the table continues on a
    new page under a repeated header row.
    """
    first = TABLE_HEADER_H + (ROW_H if rows else 0)
    cur = ensure_space(plan, cur, LABEL_H + first)

    y = _label(plan, cur, title)
    seg_top = y
    y = _table_header(plan.ops(cur), y, columns)

    for i, cells in enumerate(rows, start=1):
        if y + ROW_H > BOTTOM:
            _close_segment(plan.ops(cur), seg_top, y, columns, boxed)
            _advance(plan, cur, y)
            cur = plan.new_page()
            y = _label(plan, cur, f"{title} (contd.)")
            seg_top = y
            y = _table_header(plan.ops(cur), y, columns)
        y = _table_row(plan.ops(cur), y, i, cells, columns)

    _close_segment(plan.ops(cur), seg_top, y, columns, boxed)
    return _advance(plan, cur, y)


def medicine_rows(lines: Sequence[MedicineLine]) -> List[Tuple[str, ...]]:
    rows = []
    for i, m in enumerate(lines, start=1):
        days = f"{m.duration_days} days" if m.duration_days else PLACEHOLDER
        rows.append((str(i), m.name, m.dose, m.frequency, days, m.remarks))
    return rows


def layout_medicines(plan: PagePlan, cur: Cursor,
                     lines: Sequence[MedicineLine]) -> Cursor:
    return layout_table(plan, cur, "Medicines", MEDICINE_COLUMNS,
                        medicine_rows(lines))


def layout_tests(plan: PagePlan, cur: Cursor,
                 tests: Sequence[str]) -> Cursor:
    if not tests:
        return cur
    rows = [(str(i), t) for i, t in enumerate(tests, start=1)]
    return layout_table(plan,
                        cur,
                        "Tests Advised",
                        TEST_COLUMNS,
                        rows,
                        boxed=True)


def layout_signature(plan: PagePlan, cur: Cursor,
                     practitioner: PractitionerView,
                     signature: Union[bytes, AssetLoadError, None]) -> Cursor:
    """
    Fixed block at the bottom-right of the last page. Needs the flow to end
    above SIGNATURE_TOP, otherwise it moves to a fresh page.
    """
    if cur.y - GAP > SIGNATURE_TOP:
        cur = plan.new_page()
    ops = plan.ops(cur)

    x0 = RIGHT - SIGNATURE_W
    img_top = SIGNATURE_TOP + 2 * mm
    if isinstance(signature, (bytes, bytearray)) and signature:
        ops.append(
            ImageOp(x0, img_top, SIGNATURE_W, SIGNATURE_IMG_H,
                    bytes(signature)))
    else:
        fallback = (f"Signed: {practitioner.display_name}"
                    if practitioner.display_name else "Signature")
        ops.append(
            TextOp(x0 + SIGNATURE_W / 2,
                   img_top + SIGNATURE_IMG_H / 2 + 1.5 * mm,
                   _fit(fallback, "Helvetica-Oblique", 10, SIGNATURE_W),
                   font="Helvetica-Oblique",
                   size=10,
                   align="center",
                   color=MUTED))

    line_y = img_top + SIGNATURE_IMG_H + 2 * mm
    ops.append(LineOp(x0, line_y, RIGHT, line_y, color=INK, width=1))
    ops.append(
        TextOp(RIGHT,
               line_y + 4.5 * mm,
               _fit(practitioner.display_name or "Doctor Signatory",
                    "Helvetica-Bold", 9, SIGNATURE_W),
               font="Helvetica-Bold",
               size=9,
               align="right"))
    return cur


def _page_footers(plan: PagePlan) -> None:
    total = len(plan.pages)
    y = PAGE_H - MARGIN - 1 * mm
    for page in plan.pages:
        page.ops.append(
            TextOp(RIGHT,
                   y,
                   f"Page {page.number} of {total}",
                   size=8,
                   align="right",
                   color=MUTED))


# -------------------------------
# Public API
# -------------------------------
def layout_prescription(
    model: RenderModel,
    signature: Union[bytes, AssetLoadError, None] = None,
) -> PagePlan:
    """
    Lay out the whole prescription, top to bottom:
    header, practitioner, patient panel, vitals, diagnosis, medicines,
    tests (only when present), then the signature block.
    """
    name = model.patient.name
    plan = PagePlan(
        continuation_caption=f"{name} (contd.)" if name else "(contd.)",
        title=f"Prescription - {name}" if name else "Prescription",
    )
    cur = plan.start()
    cur = layout_header(plan, cur, model.clinic)
    cur = layout_practitioner(plan, cur, model.practitioner)
    cur = layout_patient_panel(plan, cur, model.patient)
    cur = layout_vitals_panel(plan, cur, model.patient)
    cur = layout_diagnosis(plan, cur, model.diagnosis)
    cur = layout_medicines(plan, cur, model.medicine_lines)
    cur = layout_tests(plan, cur, model.test_lines)
    layout_signature(plan, cur, model.practitioner, signature)
    _page_footers(plan)
    return plan
