"""Adaptive scan cycle: learning panel, universe sweep, report."""

from core.scanner.cycle import run_scan_cycle, select_learning_panel
from core.scanner.evaluate import evaluate_symbol, score_candles
from core.scanner.pool import run_bounded
from core.scanner.report import format_report, rank_results
from core.scanner.runner import RunnerState, ScanRunner
from core.scanner.state import ScannerState

__all__ = [
    "RunnerState",
    "ScanRunner",
    "ScannerState",
    "evaluate_symbol",
    "format_report",
    "rank_results",
    "run_bounded",
    "run_scan_cycle",
    "score_candles",
    "select_learning_panel",
]
