"""Printable reports for the Membership Signup tool.

Two Word documents are produced with python-docx:

- the staff membership report: summary statistics (counts per tier and
  total revenue) followed by a table of members, built from the admin
  listing projection;
- the member's confirmation report, shown after a successful signup.

The listing projection only carries a subset of fields, so
``expand_list_item`` fills in defaults for the rest before rendering.
"""

from __future__ import annotations

import io
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Inches, Pt

from app.draft_store import parse_iso_date
from app.field_catalogue import MEMBERSHIP_CATALOGUE, MEMBERSHIP_TIERS, Catalogue, FieldKind
from app.schema import AdminListItem

HOTEL_NAME = "Coastal Grand Hotel"
REPORT_TIERS = tuple(t.value for t in MEMBERSHIP_TIERS)

_INT_PREFIX_RE = re.compile(r"^\s*([+-]?\d+)")


def parse_price(value: Any) -> int:
    """Leading integer of *value*; missing or unparseable prices count as 0."""
    if value is None:
        return 0
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    m = _INT_PREFIX_RE.match(str(value))
    return int(m.group(1)) if m else 0


def format_inr(amount: int) -> str:
    """Format rupees with Indian digit grouping, e.g. 150000 -> ₹1,50,000."""
    sign = "-" if amount < 0 else ""
    digits = str(abs(int(amount)))
    if len(digits) > 3:
        head, tail = digits[:-3], digits[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        digits = ",".join(groups) + "," + tail
    return f"{sign}₹{digits}"


def format_timestamp(value: str) -> str:
    """Render an ISO timestamp as e.g. "15 Jan 2025, 10:30"; "" if unparseable."""
    if not value:
        return ""
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return ""
    return dt.strftime("%d %b %Y, %H:%M")


def expand_list_item(item: AdminListItem) -> dict[str, Any]:
    """Full report record from a listing item, defaulting absent fields."""
    parts = item.name.split(" ")
    return {
        "id": item.membershipId,
        "memberType": "individual",
        "salutation": "",
        "firstName": parts[0] if parts else "",
        "lastName": " ".join(parts[1:]),
        "dateOfBirth": "",
        "occupation": "",
        "profession": "",
        "annualIncome": "",
        "contactEmail": item.email,
        "contactMobile": item.mobile,
        "premisesName": "",
        "roadStreetLane": "",
        "city": item.city,
        "state": item.state,
        "country": "India",
        "postalCode": "",
        "membershipCategory": item.membershipCategory,
        "membershipYears": item.membershipYears,
        "membershipPrice": item.membershipPrice,
        "paymentMode": item.paymentMode,
        "status": item.status,
        "submittedAt": item.submittedAt,
    }


@dataclass
class ReportDocument:
    generated_at: datetime
    members: list[dict[str, Any]] = field(default_factory=list)
    total_members: int = 0
    category_counts: dict[str, int] = field(default_factory=dict)
    total_revenue: int = 0


def build_report(items: list[AdminListItem], generated_at: datetime | None = None) -> ReportDocument:
    """Aggregate listing items into a report: counts per tier and revenue."""
    members = [expand_list_item(i) for i in items]
    counts = {tier: 0 for tier in REPORT_TIERS}
    for m in members:
        if m["membershipCategory"] in counts:
            counts[m["membershipCategory"]] += 1
    return ReportDocument(
        generated_at=generated_at or datetime.now(),
        members=members,
        total_members=len(members),
        category_counts=counts,
        total_revenue=sum(parse_price(m["membershipPrice"]) for m in members),
    )


# ---------------------------------------------------------------------------
# Word rendering
# ---------------------------------------------------------------------------

def _new_document() -> Document:
    doc = Document()
    for section in doc.sections:
        section.top_margin = Inches(0.5)
        section.bottom_margin = Inches(0.5)
        section.left_margin = Inches(0.5)
        section.right_margin = Inches(0.5)
    return doc


def _add_line(doc: Document, text: str, size: int = 10, bold: bool = False,
              center: bool = False, space_after: int = 4) -> None:
    para = doc.add_paragraph()
    run = para.add_run(text)
    run.font.name = "Arial"
    run.font.size = Pt(size)
    run.bold = bold
    if center:
        para.alignment = WD_ALIGN_PARAGRAPH.CENTER
    para.paragraph_format.space_after = Pt(space_after)


def _style_table(table, header_bold: bool = True) -> None:
    for r_idx, row in enumerate(table.rows):
        for cell in row.cells:
            for paragraph in cell.paragraphs:
                for run in paragraph.runs:
                    run.font.name = "Arial"
                    run.font.size = Pt(8)
                    run.bold = header_bold and r_idx == 0


def _save(doc: Document) -> bytes:
    buf = io.BytesIO()
    doc.save(buf)
    return buf.getvalue()


_MEMBER_COLUMNS = (
    ("ID", "id"),
    ("Name", None),
    ("Email", "contactEmail"),
    ("Mobile", "contactMobile"),
    ("Category", "membershipCategory"),
    ("Years", "membershipYears"),
    ("Price", "membershipPrice"),
    ("Payment", "paymentMode"),
    ("City", "city"),
    ("Submitted", "submittedAt"),
)


def _member_cell(member: dict[str, Any], key: str | None) -> str:
    if key is None:
        return f"{member['firstName']} {member['lastName']}".strip()
    value = str(member.get(key, "") or "")
    if key == "membershipPrice":
        return format_inr(parse_price(value))
    if key == "submittedAt":
        return format_timestamp(value)
    if key == "membershipCategory":
        return value.title()
    return value


def render_report_docx(report: ReportDocument) -> bytes:
    """Render the staff membership report as a Word document."""
    doc = _new_document()

    _add_line(doc, HOTEL_NAME, size=16, bold=True, center=True)
    _add_line(doc, "Membership Report", size=12, bold=True, center=True)
    _add_line(doc, f"Generated on: {report.generated_at.strftime('%d %B %Y, %H:%M')}",
              size=9, center=True)
    _add_line(doc, f"Total Members: {report.total_members}", size=9, center=True,
              space_after=12)

    _add_line(doc, "Summary Statistics", size=11, bold=True)
    labels = ["Total Members"] + [t.title() for t in REPORT_TIERS] + ["Total Revenue"]
    values = (
        [str(report.total_members)]
        + [str(report.category_counts.get(t, 0)) for t in REPORT_TIERS]
        + [format_inr(report.total_revenue)]
    )
    summary = doc.add_table(rows=2, cols=len(labels))
    summary.style = "Table Grid"
    for i, (label, value) in enumerate(zip(labels, values)):
        summary.cell(0, i).text = label
        summary.cell(1, i).text = value
    _style_table(summary)

    _add_line(doc, "", space_after=6)
    _add_line(doc, "Member Details", size=11, bold=True)
    table = doc.add_table(rows=1 + len(report.members), cols=len(_MEMBER_COLUMNS))
    table.style = "Table Grid"
    for c, (header, _key) in enumerate(_MEMBER_COLUMNS):
        table.cell(0, c).text = header
    for r, member in enumerate(report.members, start=1):
        for c, (_header, key) in enumerate(_MEMBER_COLUMNS):
            table.cell(r, c).text = _member_cell(member, key)
    _style_table(table)

    return _save(doc)


def _display_value(catalogue: Catalogue, name: str, value: Any) -> str:
    if value is None or value == "" or value == []:
        return "--"
    field_def = catalogue.field(name)
    if field_def.kind == FieldKind.SIGNATURE:
        return "Signed"
    if field_def.kind == FieldKind.CHECKBOX and not field_def.options:
        return "Yes" if value is True or str(value).lower() == "true" else "No"
    if field_def.kind == FieldKind.DATE:
        parsed = value if isinstance(value, date) else parse_iso_date(value)
        return parsed.strftime("%d %b %Y") if parsed else str(value)
    if field_def.options:
        if isinstance(value, list):
            return ", ".join(field_def.option_label(v) for v in value)
        return field_def.option_label(str(value))
    return str(value)


def render_confirmation_docx(
    submission: dict[str, Any],
    catalogue: Catalogue = MEMBERSHIP_CATALOGUE,
) -> bytes:
    """Render the member's confirmation of a stored submission."""
    doc = _new_document()

    _add_line(doc, HOTEL_NAME, size=16, bold=True, center=True)
    _add_line(doc, "Membership Confirmation Report", size=12, bold=True, center=True)
    _add_line(doc, f"Membership ID: {submission.get('id', '')}", size=10, bold=True,
              center=True)
    _add_line(doc, f"Submitted: {format_timestamp(str(submission.get('submittedAt', '')))}"
                   f"    Status: {str(submission.get('status', 'pending')).title()}",
              size=9, center=True, space_after=12)

    for step in catalogue.steps:
        filled = [n for n in step.field_names if submission.get(n) not in (None, "", [])]
        if not filled:
            continue
        _add_line(doc, step.title, size=11, bold=True, space_after=2)
        table = doc.add_table(rows=len(filled), cols=2)
        table.style = "Table Grid"
        for i, name in enumerate(filled):
            table.cell(i, 0).text = catalogue.field(name).label
            table.cell(i, 1).text = _display_value(catalogue, name, submission.get(name))
        _style_table(table, header_bold=False)
        _add_line(doc, "", space_after=4)

    return _save(doc)
