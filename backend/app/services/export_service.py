"""Export service: iCalendar, PDF and CSV downloads for a trip."""

import csv
import io
import logging
from datetime import date, datetime, timedelta
from xml.sax.saxutils import escape as xml_escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.budget import Expense
from app.models.itinerary import ItineraryItem, ItinerarySection
from app.models.profile import Profile
from app.models.trip import Trip
from app.utils import utcnow

logger = logging.getLogger(__name__)

CRLF = "\r\n"
MAX_LINE_OCTETS = 75


def escape_text(value: str | None) -> str:
    """Escape a TEXT value per RFC 5545 section 3.3.11."""
    if not value:
        return ""
    return (
        value.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
        .replace("\r", "\\n")
    )


def fold_line(line: str) -> str:
    """Fold a content line at 75 octets without splitting a UTF-8 character."""
    if len(line.encode("utf-8")) <= MAX_LINE_OCTETS:
        return line
    parts, current, size, limit = [], "", 0, MAX_LINE_OCTETS
    for ch in line:
        width = len(ch.encode("utf-8"))
        if size + width > limit:
            parts.append(current)
            # continuation lines start with a space, which counts toward the limit
            current, size, limit = ch, width, MAX_LINE_OCTETS - 1
        else:
            current += ch
            size += width
    parts.append(current)
    return (CRLF + " ").join(parts)


def _date_value(d: date) -> str:
    return d.strftime("%Y%m%d")


def _datetime_value(dt: datetime) -> str:
    return dt.strftime("%Y%m%dT%H%M%S")


def _item_date(item: ItineraryItem, sections: dict, trip: Trip) -> date | None:
    if item.date:
        return item.date
    section = sections.get(item.section_id)
    if section is not None and section.date:
        return section.date
    day = item.day_number or (section.day_number if section is not None else None)
    if day and trip.start_date:
        return trip.start_date + timedelta(days=day - 1)
    return None


def build_calendar(trip: Trip, items: list[ItineraryItem], sections: list[ItinerarySection]) -> str:
    stamp = utcnow().strftime("%Y%m%dT%H%M%SZ")
    trip_url = f"{settings.public_base_url.rstrip('/')}/trips/{trip.id}"
    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "PRODID:-//withme.travel//Trip Calendar//EN",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
        f"X-WR-CALNAME:{escape_text(trip.name)}",
    ]

    if trip.start_date:
        end = trip.end_date or trip.start_date
        lines += [
            "BEGIN:VEVENT",
            f"UID:trip-{trip.id}@withme.travel",
            f"DTSTAMP:{stamp}",
            f"DTSTART;VALUE=DATE:{_date_value(trip.start_date)}",
            f"DTEND;VALUE=DATE:{_date_value(end + timedelta(days=1))}",
            f"SUMMARY:{escape_text(trip.name)}",
        ]
        if trip.description:
            lines.append(f"DESCRIPTION:{escape_text(trip.description)}")
        if trip.destination_name:
            lines.append(f"LOCATION:{escape_text(trip.destination_name)}")
        lines += [f"URL:{trip_url}", "END:VEVENT"]

    by_section = {s.id: s for s in sections}
    for item in items:
        day = _item_date(item, by_section, trip)
        if day is None:
            continue
        lines += [
            "BEGIN:VEVENT",
            f"UID:item-{item.id}@withme.travel",
            f"DTSTAMP:{stamp}",
        ]
        if item.start_time:
            start = datetime.combine(day, item.start_time)
            end = datetime.combine(day, item.end_time) if item.end_time else start + timedelta(hours=1)
            if end <= start:
                end = start + timedelta(hours=1)
            lines += [f"DTSTART:{_datetime_value(start)}", f"DTEND:{_datetime_value(end)}"]
        else:
            lines += [
                f"DTSTART;VALUE=DATE:{_date_value(day)}",
                f"DTEND;VALUE=DATE:{_date_value(day + timedelta(days=1))}",
            ]
        lines.append(f"SUMMARY:{escape_text(item.title)}")
        description = item.description or item.notes
        if description:
            lines.append(f"DESCRIPTION:{escape_text(description)}")
        location = item.address or item.place_name
        if location:
            lines.append(f"LOCATION:{escape_text(location)}")
        if item.category:
            lines.append(f"CATEGORIES:{escape_text(item.category)}")
        lines.append("END:VEVENT")

    lines.append("END:VCALENDAR")
    return CRLF.join(fold_line(line) for line in lines) + CRLF


class ExportService:
    """Generates calendar, PDF and CSV exports."""

    async def _itinerary(self, db: AsyncSession, trip: Trip):
        sections = await db.execute(
            select(ItinerarySection)
            .where(ItinerarySection.trip_id == trip.id)
            .order_by(ItinerarySection.position)
        )
        items = await db.execute(
            select(ItineraryItem)
            .where(ItineraryItem.trip_id == trip.id)
            .order_by(ItineraryItem.day_number, ItineraryItem.position)
        )
        return list(sections.scalars().all()), list(items.scalars().all())

    async def generate_ics(self, db: AsyncSession, trip: Trip) -> str:
        sections, items = await self._itinerary(db, trip)
        return build_calendar(trip, items, sections)

    async def generate_itinerary_pdf(self, db: AsyncSession, trip: Trip) -> bytes:
        sections, items = await self._itinerary(db, trip)

        buf = io.BytesIO()
        doc = SimpleDocTemplate(buf, pagesize=letter, topMargin=0.5 * inch)
        styles = getSampleStyleSheet()
        elements = []

        elements.append(Paragraph(xml_escape(trip.name), styles["Title"]))
        info = []
        if trip.destination_name:
            info.append(f"<b>Destination:</b> {xml_escape(trip.destination_name)}")
        if trip.start_date:
            info.append(f"<b>Dates:</b> {trip.start_date.isoformat()} to {(trip.end_date or trip.start_date).isoformat()}")
        info.append(f"<b>Generated:</b> {date.today().isoformat()}")
        for line in info:
            elements.append(Paragraph(line, styles["Normal"]))
        elements.append(Spacer(1, 12))

        groups: list[tuple[str, list[ItineraryItem]]] = []
        for section in sections:
            section_items = [i for i in items if i.section_id == section.id]
            if section_items:
                heading = section.title or f"Day {section.day_number}"
                if section.date:
                    heading = f"{heading} ({section.date.isoformat()})"
                groups.append((heading, section_items))
        unscheduled = [i for i in items if i.section_id is None]
        if unscheduled:
            groups.append(("Unscheduled", unscheduled))

        if not groups:
            elements.append(Paragraph("No itinerary items yet.", styles["Normal"]))

        for heading, section_items in groups:
            elements.append(Paragraph(f"<b>{xml_escape(heading)}</b>", styles["Heading2"]))
            data = [["Time", "Item", "Category", "Location"]]
            for item in section_items:
                time_label = item.start_time.strftime("%H:%M") if item.start_time else ""
                data.append([
                    time_label,
                    Paragraph(xml_escape(item.title), styles["Normal"]),
                    item.category or item.item_type,
                    Paragraph(xml_escape(item.address or item.place_name or ""), styles["Normal"]),
                ])
            table = Table(data, colWidths=[0.8 * inch, 2.6 * inch, 1.3 * inch, 2.3 * inch])
            table.setStyle(TableStyle([
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#4F46E5")),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
                ("FONTSIZE", (0, 0), (-1, -1), 9),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ]))
            elements.append(table)
            elements.append(Spacer(1, 12))

        doc.build(elements)
        return buf.getvalue()

    async def generate_expenses_csv(self, db: AsyncSession, trip: Trip) -> str:
        result = await db.execute(
            select(Expense, Profile)
            .join(Profile, Profile.id == Expense.paid_by)
            .where(Expense.trip_id == trip.id)
            .order_by(Expense.date, Expense.created_at)
        )
        buf = io.StringIO()
        writer = csv.writer(buf)
        writer.writerow(["date", "title", "category", "amount", "currency", "paid_by", "notes"])
        for expense, payer in result.all():
            writer.writerow([
                expense.date.isoformat() if expense.date else "",
                expense.title,
                expense.category,
                f"{float(expense.amount):.2f}",
                expense.currency,
                payer.display_name,
                expense.notes or "",
            ])
        return buf.getvalue()


export_service = ExportService()
