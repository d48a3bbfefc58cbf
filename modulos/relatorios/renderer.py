"""
Renderizador de Relatórios PDF
==============================

Layout fixo em A4 (coordenadas medidas a partir do topo da página):

- faixa de cabeçalho com logo (opcional) e título
- caixa de resumo com 2 a 4 pares rótulo/valor
- título da tabela, linha de cabeçalho colorida e linhas zebradas

As colunas chegam declaradas (posição x, largura, alinhamento); o
renderizador não calcula larguras. Os valores das linhas já chegam como
texto formatado. Linhas que não cabem na primeira página continuam nas
páginas seguintes, repetindo o cabeçalho da tabela.
"""

import logging
import os
from dataclasses import dataclass
from io import BytesIO
from typing import List, Mapping, Optional, Sequence

from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

logger = logging.getLogger(__name__)

COLORS = {
    'primary': HexColor('#2c3e50'),
    'success': HexColor('#27ae60'),
    'danger': HexColor('#e74c3c'),
    'light': HexColor('#f5f5f5'),
    'white': HexColor('#ffffff'),
}

FONT = 'Helvetica'
FONT_BOLD = 'Helvetica-Bold'

PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 40
CONTENT_WIDTH = 515

LOGO_X, LOGO_TOP, LOGO_WIDTH = 40, 30, 80
TITLE_X, TITLE_TOP, TITLE_SIZE = 130, 45, 18

SUMMARY_TOP, SUMMARY_HEIGHT = 90, 60
SUMMARY_COL_WIDTH = 150
MIN_SUMMARY_FIELDS, MAX_SUMMARY_FIELDS = 2, 4

TABLE_TITLE_TOP = 165
TABLE_HEADER_TOP = TABLE_TITLE_TOP + 30
CONTINUATION_HEADER_TOP = MARGIN
ROW_HEIGHT = 20
TABLE_BOTTOM = PAGE_HEIGHT - MARGIN
FOOTER_TOP = PAGE_HEIGHT - 28

FIRST_PAGE_CAPACITY = int((TABLE_BOTTOM - (TABLE_HEADER_TOP + ROW_HEIGHT)) // ROW_HEIGHT)
PAGE_CAPACITY = int((TABLE_BOTTOM - (CONTINUATION_HEADER_TOP + ROW_HEIGHT)) // ROW_HEIGHT)


@dataclass(frozen=True)
class Column:
    key: str
    label: str
    x: float
    width: float
    align: str = 'left'  # left | center | right
    # Chave da linha cujo valor é o nome da cor da célula (ex.: '_cor')
    color_key: Optional[str] = None


@dataclass(frozen=True)
class SummaryField:
    label: str
    value: str
    color: str = 'primary'


def paginate_rows(rows: Sequence, first_page_capacity: int = FIRST_PAGE_CAPACITY,
                  page_capacity: int = PAGE_CAPACITY) -> List[list]:
    """Divide as linhas em páginas: a primeira comporta menos linhas."""
    if first_page_capacity < 1 or page_capacity < 1:
        raise ValueError("Capacidade de página deve ser positiva")
    rows = list(rows)
    if not rows:
        return []
    pages = [rows[:first_page_capacity]]
    for start in range(first_page_capacity, len(rows), page_capacity):
        pages.append(rows[start:start + page_capacity])
    return pages


def _top(top: float, height: float = 0) -> float:
    """Converte coordenada medida do topo para a origem inferior do PDF."""
    return PAGE_HEIGHT - top - height


def _baseline(top: float, size: float) -> float:
    return PAGE_HEIGHT - top - size * 0.8


def fit_text(text: str, width: float, font: str = FONT, size: float = 9) -> str:
    """Corta o texto com reticências para caber na largura da coluna."""
    text = str(text or '')
    if stringWidth(text, font, size) <= width:
        return text
    while text and stringWidth(text + '...', font, size) > width:
        text = text[:-1]
    return text + '...'


class ReportRenderer:
    def __init__(self, logo_path: Optional[str] = None, compress: bool = True):
        self.logo_path = logo_path
        self.compress = compress

    def render(self, title: str, summary_fields: Sequence[SummaryField], rows: Sequence[Mapping[str, str]],
               columns: Sequence[Column], table_title: str, empty_message: str) -> BytesIO:
        self._check_layout(summary_fields, columns)

        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=A4, pageCompression=1 if self.compress else 0)
        c.setTitle(title)

        self._draw_header(c, title)
        self._draw_summary(c, summary_fields)

        c.setFont(FONT_BOLD, 14)
        c.setFillColor(COLORS['primary'])
        c.drawString(MARGIN, _baseline(TABLE_TITLE_TOP, 14), table_title)

        pages = paginate_rows(rows)
        if not pages:
            c.setFont(FONT, 12)
            c.drawString(50, _baseline(TABLE_HEADER_TOP + ROW_HEIGHT, 12), empty_message)
            self._draw_footer(c, 1)
        else:
            row_index = 0
            for page_number, page_rows in enumerate(pages, start=1):
                if page_number > 1:
                    c.showPage()
                header_top = TABLE_HEADER_TOP if page_number == 1 else CONTINUATION_HEADER_TOP
                self._draw_table_header(c, columns, header_top)
                top = header_top + ROW_HEIGHT
                for row in page_rows:
                    self._draw_row(c, columns, row, top, shaded=row_index % 2 == 1)
                    top += ROW_HEIGHT
                    row_index += 1
                self._draw_footer(c, page_number)

        c.save()
        buffer.seek(0)
        logger.debug("Relatório '%s' gerado: %d linhas, %d páginas", title, len(rows), max(len(pages), 1))
        return buffer

    def _check_layout(self, summary_fields, columns) -> None:
        if not MIN_SUMMARY_FIELDS <= len(summary_fields) <= MAX_SUMMARY_FIELDS:
            raise ValueError(
                f"Resumo deve ter de {MIN_SUMMARY_FIELDS} a {MAX_SUMMARY_FIELDS} campos (recebeu {len(summary_fields)})"
            )
        for column in columns:
            if column.x < MARGIN or column.x + column.width > MARGIN + CONTENT_WIDTH:
                raise ValueError(f"Coluna '{column.label}' fora da área útil da página")
            if column.align not in ('left', 'center', 'right'):
                raise ValueError(f"Alinhamento inválido na coluna '{column.label}': {column.align}")

    def _draw_header(self, c, title: str) -> None:
        if self.logo_path and os.path.exists(self.logo_path):
            try:
                logo = ImageReader(self.logo_path)
                img_width, img_height = logo.getSize()
                height = LOGO_WIDTH * img_height / img_width
                c.drawImage(logo, LOGO_X, _top(LOGO_TOP, height), width=LOGO_WIDTH, height=height, mask='auto')
            except OSError as e:
                logger.warning("Logo do relatório ignorado (%s): %s", self.logo_path, e)

        c.setFont(FONT_BOLD, TITLE_SIZE)
        c.setFillColor(COLORS['primary'])
        c.drawString(TITLE_X, _baseline(TITLE_TOP, TITLE_SIZE), title)

    def _draw_summary(self, c, summary_fields) -> None:
        c.setFillColor(COLORS['light'])
        c.setStrokeColor(COLORS['primary'])
        c.rect(MARGIN, _top(SUMMARY_TOP, SUMMARY_HEIGHT), CONTENT_WIDTH, SUMMARY_HEIGHT, fill=1, stroke=1)

        c.setFont(FONT_BOLD, 12)
        c.setFillColor(COLORS['primary'])
        c.drawString(50, _baseline(SUMMARY_TOP + 10, 12), 'RESUMO')

        for index, field in enumerate(summary_fields):
            x = 50 + SUMMARY_COL_WIDTH * index
            c.setFont(FONT, 10)
            c.setFillColor(COLORS['primary'])
            c.drawString(x, _baseline(SUMMARY_TOP + 30, 10), field.label)
            c.setFont(FONT_BOLD, 12)
            c.setFillColor(COLORS.get(field.color, COLORS['primary']))
            c.drawString(x, _baseline(SUMMARY_TOP + 45, 12), field.value)

    def _draw_table_header(self, c, columns, top: float) -> None:
        c.setFillColor(COLORS['primary'])
        c.rect(MARGIN, _top(top, ROW_HEIGHT), CONTENT_WIDTH, ROW_HEIGHT, fill=1, stroke=0)
        c.setFillColor(COLORS['white'])
        for column in columns:
            self._draw_cell(c, column, column.label, top + 5, FONT_BOLD, 10)

    def _draw_row(self, c, columns, row: Mapping[str, str], top: float, shaded: bool) -> None:
        c.setFillColor(COLORS['light'] if shaded else COLORS['white'])
        c.rect(MARGIN, _top(top, ROW_HEIGHT), CONTENT_WIDTH, ROW_HEIGHT, fill=1, stroke=0)
        for column in columns:
            color = row.get(column.color_key) if column.color_key else None
            c.setFillColor(COLORS.get(color or 'primary', COLORS['primary']))
            self._draw_cell(c, column, row.get(column.key, ''), top + 5, FONT, 9)

    def _draw_cell(self, c, column: Column, text: str, top: float, font: str, size: float) -> None:
        text = fit_text(text, column.width, font, size)
        baseline = _baseline(top, size)
        c.setFont(font, size)
        if column.align == 'right':
            c.drawRightString(column.x + column.width, baseline, text)
        elif column.align == 'center':
            c.drawCentredString(column.x + column.width / 2, baseline, text)
        else:
            c.drawString(column.x, baseline, text)

    def _draw_footer(self, c, page_number: int) -> None:
        c.setFont(FONT, 8)
        c.setFillColor(COLORS['primary'])
        c.drawCentredString(PAGE_WIDTH / 2, _baseline(FOOTER_TOP, 8), f'Página {page_number}')
