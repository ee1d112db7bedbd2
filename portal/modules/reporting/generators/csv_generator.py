"""CSV export generator using the stdlib csv module."""

import csv
import io

from portal.modules.reporting.generators.base import BaseReportGenerator


class CSVGenerator(BaseReportGenerator):
    """Flatten table sections into one CSV.

    CSV has no sheets, so only list-of-row sections are written; a blank
    line separates consecutive tables.
    """

    CONTENT_TYPE = "text/csv"

    def generate(self, data: dict, sections: list[dict]) -> tuple[bytes, str]:
        output = io.StringIO()
        writer = csv.writer(output)

        first = True
        for section in sections:
            rows = data.get(section.get("name", ""), [])
            if not isinstance(rows, list) or not rows:
                continue
            if not first:
                writer.writerow([])
            first = False

            headers = list(rows[0].keys())
            writer.writerow([self._header_label(h) for h in headers])
            for row in rows:
                writer.writerow(["" if row.get(h) is None else row.get(h) for h in headers])

        return output.getvalue().encode("utf-8"), self.CONTENT_TYPE
