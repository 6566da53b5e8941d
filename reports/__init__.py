# Reports: matplotlib charts + reportlab PDF summary.
from .charts import generate_charts
from .paths import prepare_output
from .pdf_report import generate_pdf_report

__all__ = ["generate_charts", "generate_pdf_report", "prepare_output"]
