"""XLSX export generator using openpyxl."""

import io

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from portal.modules.reporting.generators.base import BaseReportGenerator


class XLSXGenerator(BaseReportGenerator):
    """Generate a workbook with a cover sheet and one sheet per section."""

    CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

    def generate(self, data: dict, sections: list[dict]) -> tuple[bytes, str]:
        wb = Workbook()
        self._create_cover_sheet(wb, data)

        for section in sections:
            self._create_section_sheet(wb, section, data)

        buf = io.BytesIO()
        wb.save(buf)
        return buf.getvalue(), self.CONTENT_TYPE

    def _fill(self) -> PatternFill:
        color = self.brand_color.lstrip("#")
        return PatternFill(start_color=color, end_color=color, fill_type="solid")

    def _create_cover_sheet(self, wb: Workbook, data: dict) -> None:
        ws = wb.active
        ws.title = "Cover"

        ws.merge_cells("A1:D1")
        ws["A1"] = self.title
        ws["A1"].font = Font(color="FFFFFF", bold=True, size=16)
        ws["A1"].fill = self._fill()
        ws["A1"].alignment = Alignment(horizontal="center")
        ws.row_dimensions[1].height = 40

        ws["A3"] = "Generated"
        ws["B3"] = self.generated_at
        row = 4
        for key, val in (data.get("summary") or {}).items():
            ws[f"A{row}"] = self._header_label(key)
            ws[f"B{row}"] = val
            row += 1

        for col in range(1, 5):
            ws.column_dimensions[get_column_letter(col)].width = 25

    def _create_section_sheet(self, wb: Workbook, section: dict, data: dict) -> None:
        name = section.get("name", "Section")
        # Excel sheet names max 31 chars
        ws = wb.create_sheet(title=section.get("title", name)[:31])

        section_data = data.get(name, {})
        header_fill = self._fill()
        header_font = Font(color="FFFFFF", bold=True)

        if isinstance(section_data, list) and section_data:
            headers = list(section_data[0].keys())
            for col_idx, header in enumerate(headers, 1):
                cell = ws.cell(row=1, column=col_idx, value=self._header_label(header))
                cell.font = header_font
                cell.fill = header_fill
                cell.alignment = Alignment(horizontal="center")

            for row_idx, row_data in enumerate(section_data, 2):
                for col_idx, header in enumerate(headers, 1):
                    ws.cell(row=row_idx, column=col_idx, value=row_data.get(header))

            # Auto-width
            for col_idx in range(1, len(headers) + 1):
                max_len = max(
                    len(str(ws.cell(row=r, column=col_idx).value or ""))
                    for r in range(1, len(section_data) + 2)
                )
                ws.column_dimensions[get_column_letter(col_idx)].width = min(max_len + 4, 50)

        elif isinstance(section_data, dict) and section_data:
            ws.cell(row=1, column=1, value="Setting").font = header_font
            ws["A1"].fill = header_fill
            ws.cell(row=1, column=2, value="Value").font = header_font
            ws["B1"].fill = header_fill

            for row_idx, (key, val) in enumerate(section_data.items(), 2):
                ws.cell(row=row_idx, column=1, value=self._header_label(key))
                ws.cell(row=row_idx, column=2, value=val)

            ws.column_dimensions["A"].width = 30
            ws.column_dimensions["B"].width = 30

        else:
            ws["A1"] = f"No data for {name}"
