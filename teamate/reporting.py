"""
Presentation and export of matching results.

Text rendering of matches and run summaries, plus CSV (via pandas) and JSON
export. Nothing here feeds back into a run.
"""

from pathlib import Path
from typing import Union

import pandas as pd

from teamate.data.models import Match, MatchingResult
from teamate.utils.logger import get_logger

logger = get_logger(__name__)

CSV_COLUMNS = [
    "Rank",
    "Seeker ID",
    "Seeker Name",
    "Provider ID",
    "Provider Name",
    "Final Score",
    "FRQ Score",
    "Quant Score",
    "Confidence",
]

_RULE = "=" * 60


def format_match(match: Match) -> str:
    """Multi-line text block describing one match."""
    return "\n".join([
        f"Match #{match.rank if match.rank is not None else '?'}:",
        f"  Seeker: {match.left_name} ({match.left_id})",
        f"  Provider: {match.right_name} ({match.right_id})",
        f"  Final Score: {match.scores.final:.4f}",
        f"  FRQ Score: {match.scores.frq:.4f}",
        f"  Quant Score: {match.scores.quant:.4f}",
        f"  Confidence: {match.confidence.value.upper()}",
    ])


def generate_summary_report(result: MatchingResult) -> str:
    """
    Plain-text summary of a run: configuration, statistics and confidence tiers.

    Unmatched and excluded participants are listed when present.
    """
    statistics = result.statistics
    distribution = statistics.confidence_distribution

    lines = [
        _RULE,
        "MATCHING RESULTS SUMMARY",
        _RULE,
        "",
        "Configuration:",
        f"  FRQ Weight: {result.config.frq_weight}",
        f"  Quant Weight: {result.config.quant_weight}",
        "",
        "Statistics:",
        f"  Total Matches: {statistics.total_matches}",
        f"  Average Score: {statistics.average_score}",
        f"  Score Range: {statistics.min_score} - {statistics.max_score}",
        f"  Standard Deviation: {statistics.standard_deviation}",
        f"  Average FRQ Score: {statistics.average_frq_score}",
        f"  Average Quant Score: {statistics.average_quant_score}",
        "",
        "Confidence Distribution:",
        f"  High Confidence: {distribution.high} matches",
        f"  Medium Confidence: {distribution.medium} matches",
        f"  Low Confidence: {distribution.low} matches",
    ]

    if result.unmatched_left or result.unmatched_right:
        lines += ["", "Unmatched:"]
        if result.unmatched_left:
            lines.append(f"  Seekers: {', '.join(result.unmatched_left)}")
        if result.unmatched_right:
            lines.append(f"  Providers: {', '.join(result.unmatched_right)}")

    if result.excluded_participants:
        lines += ["", "Excluded:"]
        lines += [f"  {p.id}: {p.reason}" for p in result.excluded_participants]

    lines += ["", _RULE, ""]
    return "\n".join(lines)


def matches_to_dataframe(matches: list[Match]) -> pd.DataFrame:
    """
    Tabulate matches, one row per match.

    Returns:
        DataFrame with the CSV_COLUMNS columns; scores rounded to 4 decimals.
    """
    rows = [
        {
            "Rank": match.rank,
            "Seeker ID": match.left_id,
            "Seeker Name": match.left_name,
            "Provider ID": match.right_id,
            "Provider Name": match.right_name,
            "Final Score": round(match.scores.final, 4),
            "FRQ Score": round(match.scores.frq, 4),
            "Quant Score": round(match.scores.quant, 4),
            "Confidence": match.confidence.value,
        }
        for match in matches
    ]
    return pd.DataFrame(rows, columns=CSV_COLUMNS)


def export_matches_csv(matches: list[Match], path: Union[str, Path]) -> Path:
    """Write matches to a CSV file and return its path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    df = matches_to_dataframe(matches)
    df.to_csv(path, index=False)
    logger.info(f"Exported {len(df)} matches to {path}")
    return path


def export_result_json(result: MatchingResult, path: Union[str, Path]) -> Path:
    """Write a full result as camelCase JSON and return its path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    path.write_text(result.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
    logger.info(f"Exported matching result to {path}")
    return path
