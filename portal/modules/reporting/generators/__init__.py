"""Export generators: CSV, XLSX."""

from portal.modules.reporting.generators.csv_generator import CSVGenerator
from portal.modules.reporting.generators.xlsx_generator import XLSXGenerator

__all__ = ["CSVGenerator", "XLSXGenerator"]
