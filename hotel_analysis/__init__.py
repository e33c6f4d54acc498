from .cli import run_analysis
from .models import AnalysisReport, BookingRecord, GroupMetrics, GroupScore

__all__ = ["run_analysis", "AnalysisReport", "BookingRecord", "GroupMetrics", "GroupScore"]
