"""Markdown scan report for Telegram."""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from core.signals.weights import OBI_WEIGHT, IndicatorWeights
from core.types import ScanResult

TOP_N = 5


def rank_results(results: Sequence[ScanResult], top_n: int = TOP_N) -> tuple[list[ScanResult], list[ScanResult]]:
    """Split results into the strongest bullish and bearish candidates.

    Bullish: score > 0, highest first. Bearish: score < 0, lowest first.
    Zero scores are in neither list.
    """
    bullish = sorted((r for r in results if r.score > 0), key=lambda r: r.score, reverse=True)
    bearish = sorted((r for r in results if r.score < 0), key=lambda r: r.score)
    return bullish[:top_n], bearish[:top_n]


def _format_line(rank: int, result: ScanResult) -> str:
    return f"{rank}. *{result.symbol}* | Conf: {result.confidence:g}% | DWOBI: {result.obi_pct:.1f}%"


def format_report(
    results: Sequence[ScanResult],
    accuracy: str,
    weights: IndicatorWeights,
    *,
    now: datetime,
    interval: str = "1h",
    panel_size: int = 5,
) -> str:
    bullish, bearish = rank_results(results)

    lines = [
        f"*Adaptive {interval} Scan Report (ADAPTIVE + DWOBI)*",
        f"_Time: {now.strftime('%H:%M:%S')} UTC_",
        f"_Learned Accuracy: {accuracy}% (Avg. across {panel_size} market caps)_",
        "_Active Weights (Total 100):_",
        f"_  *Learned:* OBV {weights.obv:g} | STOCH {weights.stoch:g} | OI {weights.oi_proxy:g} | MACD {weights.macd:g}_",
        f"_  *Static:* DWOBI {OBI_WEIGHT} (Depth-Weighted Order Book Pressure)_",
        "",
        "*🟢 TOP 5 POTENTIAL GAINERS (LONG)*",
    ]
    if bullish:
        lines.extend(_format_line(i, r) for i, r in enumerate(bullish, start=1))
    else:
        lines.append("_No strong bullish candidates found (Volatile & Confident)_")

    lines += ["", "*🔴 TOP 5 POTENTIAL LOSERS (SHORT)*"]
    if bearish:
        lines.extend(_format_line(i, r) for i, r in enumerate(bearish, start=1))
    else:
        lines.append("_No strong bearish candidates found (Volatile & Confident)_")

    lines += ["", "_Model adapts weights based on recent performance. DWOBI provides real-time confirmation._"]
    return "\n".join(lines)
