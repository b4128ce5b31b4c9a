"""
PDF generation service for stock list exports.
"""
from datetime import datetime, timezone
from decimal import Decimal
from io import BytesIO
from typing import Iterable, Optional
import logging

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

from toystock.core.config import settings
from toystock.models.stock import StockRecord
from toystock.services.valuation import format_money

logger = logging.getLogger(__name__)

ACCENT = colors.HexColor("#e87957")


class PDFService:
    """Service for generating PDF stock reports."""

    def __init__(self, currency_symbol: Optional[str] = None) -> None:
        self._symbol = currency_symbol or settings.CURRENCY_SYMBOL

    def generate_stock_list(
        self,
        records: Iterable[StockRecord],
        generated_at: Optional[datetime] = None,
        title: Optional[str] = None,
    ) -> BytesIO:
        """
        Generate a paginated PDF table of the given stock records.

        Args:
            records: The visible stock records, in display order
            generated_at: Timestamp printed under the title (defaults to now)
            title: Document title (defaults to the configured export title)

        Returns:
            BytesIO buffer containing the PDF
        """
        records = list(records)
        generated_at = generated_at or datetime.now(tz=timezone.utc)
        title = title or settings.EXPORT_TITLE
        logger.info("Generating stock PDF rows=%s", len(records))

        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=0.5 * inch,
            leftMargin=0.5 * inch,
            topMargin=0.5 * inch,
            bottomMargin=0.5 * inch,
            title=title,
            invariant=1,
        )

        styles = getSampleStyleSheet()
        elements = [
            Paragraph(title, styles['Heading1']),
            Paragraph(f"Generated: {generated_at:%Y-%m-%d %H:%M}", styles['Normal']),
            Spacer(1, 0.3 * inch),
        ]

        if not records:
            elements.append(Paragraph("No stocks found.", styles['Normal']))
            doc.build(elements)
            buffer.seek(0)
            return buffer

        table_data = [['Item Name', 'Item Code', 'Purchase', 'Selling', 'Qty', 'Value']]
        total_value = Decimal('0')
        for record in records:
            table_data.append([
                record.item_name,
                record.item_code,
                format_money(record.purchase_price, self._symbol),
                format_money(record.selling_price, self._symbol),
                str(record.quantity),
                format_money(record.stock_value, self._symbol),
            ])
            total_value += record.stock_value

        table_data.append([
            f'Total Items: {len(records)}',
            '',
            '',
            '',
            '',
            format_money(total_value, self._symbol),
        ])

        table = Table(table_data, repeatRows=1, hAlign='LEFT')
        table_style = TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), ACCENT),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
            ('ALIGN', (0, 0), (-1, 0), 'CENTER'),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, 0), 10),
            ('BOTTOMPADDING', (0, 0), (-1, 0), 8),

            ('TEXTCOLOR', (0, 1), (-1, -2), colors.black),
            ('ALIGN', (2, 1), (-1, -1), 'RIGHT'),
            ('FONTNAME', (0, 1), (-1, -2), 'Helvetica'),
            ('FONTSIZE', (0, 1), (-1, -1), 9),
            ('BOTTOMPADDING', (0, 1), (-1, -1), 6),

            ('SPAN', (0, -1), (4, -1)),
            ('BACKGROUND', (0, -1), (-1, -1), colors.HexColor('#fdf1ec')),
            ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),

            ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
        ])

        for i in range(2, len(table_data) - 1, 2):
            table_style.add('BACKGROUND', (0, i), (-1, i), colors.HexColor('#f7f9fb'))

        table.setStyle(table_style)
        elements.append(table)

        doc.build(elements)
        buffer.seek(0)

        logger.info("Stock PDF generated successfully")
        return buffer
