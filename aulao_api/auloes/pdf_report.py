from io import BytesIO

from django.http import HttpResponse
from django.utils import timezone
from reportlab.lib import colors
from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

HEADER_BLUE = HexColor("#2563EB")
GRID_GREY = HexColor("#B3B6B7")


def format_brl(value):
    text = f"{value:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    return f"R$ {text}"


def generate_finance_report_pdf(summary, filename=None):
    """Render ``transparency.finance_summary()`` as a downloadable PDF."""
    buffer = BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4, rightMargin=20, leftMargin=20, topMargin=20, bottomMargin=20)
    elements = []
    styles = getSampleStyleSheet()
    table_width = A4[0] - doc.leftMargin - doc.rightMargin
    generated_on = timezone.localdate()

    elements.append(Paragraph("Aulão Solidário: Relatório Financeiro", styles['Heading1']))
    elements.append(Paragraph(f"Gerado em {generated_on.strftime('%d/%m/%Y')}", styles['Normal']))
    elements.append(Spacer(1, 15))

    # Totals
    totals_data = [
        ["Total arrecadado", format_brl(summary['total_money_donations'])],
        ["Aulões com doações", str(summary['classes_with_donations'])],
    ]
    t_totals = Table(totals_data, colWidths=[table_width * 0.5, table_width * 0.5], hAlign='CENTER')
    t_totals.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (0, -1), HEADER_BLUE),
        ('TEXTCOLOR', (0, 0), (0, -1), colors.white),
        ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
        ('GRID', (0, 0), (-1, -1), 0.3, GRID_GREY),
        ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
        ('TOPPADDING', (0, 0), (-1, -1), 8),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 8),
    ]))
    elements.append(t_totals)
    elements.append(Spacer(1, 15))

    # Per class
    elements.append(Paragraph("Doações por aulão", styles['Heading2']))
    rows = [["Aulão", "Data", "Valor"]]
    for row in summary['donations_by_class']:
        class_date = row['class_date'].strftime('%d/%m/%Y') if row['class_date'] else '-'
        rows.append([row['class_title'], class_date, format_brl(row['money_amount'])])

    t_classes = Table(
        rows, colWidths=[table_width * 0.5, table_width * 0.25, table_width * 0.25], hAlign='CENTER'
    )
    t_classes.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), HEADER_BLUE),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('GRID', (0, 0), (-1, -1), 0.3, GRID_GREY),
        ('ROWBACKGROUNDS', (0, 1), (-1, -1), [HexColor("#F8F9F9"), HexColor("#EBF5FB")]),
        ('ALIGN', (1, 0), (-1, -1), 'CENTER'),
        ('TOPPADDING', (0, 0), (-1, -1), 6),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
    ]))
    elements.append(t_classes)

    doc.build(elements)
    buffer.seek(0)

    filename = filename or f"relatorio_financeiro_{generated_on.isoformat()}.pdf"
    response = HttpResponse(buffer, content_type='application/pdf')
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response
