"""
Export utilities for CSV and PDF generation.
"""
import csv
import io
import logging
from datetime import datetime
from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle
from xml.sax.saxutils import escape

from healthflow.utils.bmi import bmi_status, format_bmi
from healthflow.utils.bp_analysis import classify, summarize

logger = logging.getLogger(__name__)

READING_FIELDS = ['date', 'time', 'systolic', 'diastolic', 'pulse', 'category']

# Base-14 PDF fonts cannot draw emoji or math symbols
_EMOJI = ('✅', '⚠️', '⚠', '🚨')


def _plain(text: str) -> str:
    for mark in _EMOJI:
        text = text.replace(mark, '')
    text = text.replace('≥', '>=')
    return escape(text.strip())


def generate_readings_csv(readings):
    """Generate CSV export of a patient's blood pressure history.

    Args:
        readings: BloodPressureReading model objects, most recent first

    Returns:
        str containing CSV data
    """
    output = io.StringIO()

    writer = csv.DictWriter(output, fieldnames=READING_FIELDS)
    writer.writeheader()

    for reading in readings:
        writer.writerow({
            'date': reading.reading_date.isoformat() if reading.reading_date else '',
            'time': reading.reading_time.strftime('%H:%M') if reading.reading_time else '',
            'systolic': reading.systolic,
            'diastolic': reading.diastolic,
            'pulse': reading.pulse if reading.pulse is not None else '',
            'category': classify(reading.systolic, reading.diastolic).value,
        })

    return output.getvalue()


def _label_table(rows):
    table = Table(rows, colWidths=[2*inch, 4.5*inch])
    table.setStyle(TableStyle([
        ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
        ('ALIGN', (0, 0), (0, -1), 'RIGHT'),
        ('ALIGN', (1, 0), (1, -1), 'LEFT'),
        ('VALIGN', (0, 0), (-1, -1), 'TOP'),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 5),
    ]))
    return table


def generate_dashboard_pdf(user, readings, max_rows=20):
    """Generate a PDF version of the patient dashboard.

    Args:
        user: User model object
        readings: engine Reading records, most recent first
        max_rows: how many history rows to include

    Returns:
        BytesIO object containing PDF data
    """
    output = io.BytesIO()
    doc = SimpleDocTemplate(output, pagesize=letter, topMargin=0.5*inch, bottomMargin=0.5*inch)

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        'CustomTitle',
        parent=styles['Heading1'],
        fontSize=18,
        spaceAfter=20,
    )
    heading_style = ParagraphStyle(
        'CustomHeading',
        parent=styles['Heading2'],
        fontSize=14,
        spaceBefore=15,
        spaceAfter=10,
    )
    normal_style = styles['Normal']

    summary = summarize(readings)
    elements = []

    patient_name = user.name or user.email
    elements.append(Paragraph(f"HealthFlow Report: {escape(patient_name)}", title_style))
    elements.append(Paragraph(f"Generated: {datetime.now().strftime('%B %d, %Y at %H:%M')}", normal_style))
    elements.append(Spacer(1, 20))

    # Profile
    elements.append(Paragraph("Profile", heading_style))
    bmi = user.bmi
    elements.append(_label_table([
        ['Name:', user.name or 'Not set'],
        ['Age:', str(user.age) if user.age else 'Not set'],
        ['Gender:', user.gender or 'Not set'],
        ['Height:', f"{user.height_cm:g} cm" if user.height_cm else 'Not set'],
        ['Weight:', f"{user.weight_kg:g} kg" if user.weight_kg else 'Not set'],
        ['BMI:', f"{format_bmi(bmi)} - {bmi_status(bmi)}" if bmi is not None else 'Not calculated'],
    ]))

    # Latest reading
    elements.append(Paragraph("Latest Reading", heading_style))
    latest = summary['latest']
    if latest:
        reading = latest['reading']
        elements.append(_label_table([
            ['Reading:', f"{reading.systolic}/{reading.diastolic} mmHg ({latest['category'].value})"],
            ['Advice:', Paragraph(_plain(latest['tip']), normal_style)],
        ]))
    else:
        elements.append(Paragraph("No record yet", normal_style))

    # Short-term trend and kidney risk
    elements.append(Paragraph("Kidney BP Stability", heading_style))
    trend = summary['trend']
    elements.append(_label_table([
        ['Trend:', trend.trend.value],
        ['Kidney Risk:', Paragraph(_plain(trend.risk) or '-', normal_style)],
        ['Notes:', Paragraph(_plain(trend.message), normal_style)],
    ]))

    # Long-term progress
    elements.append(Paragraph("Long-Term Progress", heading_style))
    elements.append(Paragraph(_plain(summary['progress'].narrative), normal_style))

    if readings:
        elements.append(Paragraph(f"Recent Readings (Last {max_rows})", heading_style))

        reading_data = [['Date', 'Time', 'Systolic', 'Diastolic', 'Pulse', 'Category']]
        for r in readings[:max_rows]:
            reading_data.append([
                r.date.strftime('%m/%d/%Y') if r.date else 'N/A',
                r.time.strftime('%H:%M') if r.time else 'N/A',
                str(r.systolic),
                str(r.diastolic),
                str(r.pulse) if r.pulse is not None else 'N/A',
                classify(r.systolic, r.diastolic).value,
            ])

        reading_table = Table(
            reading_data,
            colWidths=[1*inch, 0.8*inch, 0.9*inch, 0.9*inch, 0.8*inch, 1.8*inch],
        )
        reading_table.setStyle(TableStyle([
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('BACKGROUND', (0, 0), (-1, 0), colors.grey),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
            ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.black),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 5),
            ('TOPPADDING', (0, 0), (-1, -1), 5),
        ]))
        elements.append(reading_table)

    doc.build(elements)
    output.seek(0)
    logger.debug('Built dashboard PDF for user_id=%s with %d readings', user.id, len(readings))
    return output
