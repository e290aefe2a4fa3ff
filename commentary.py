import os
import logging

from scoring_breakdown import CATEGORIES, POINT_COLUMNS, SHARE_COLUMNS

logger = logging.getLogger(__name__)

CATEGORY_PHRASES = {
    '2PT': 'two-point field goals',
    '3PT': 'three-pointers',
    'FT': 'free throws',
}


def build_commentary(breakdown, season_label=''):
    """
    Plain-English notes on the top scorers' breakdown, one sentence per line.

    Players with zero points are left out of the reliance notes since they
    have no share to compare.
    """
    if breakdown.empty:
        return []

    n = len(breakdown)
    when = f"In {season_label}, " if season_label else ""
    leader = breakdown.iloc[0]
    lines = [
        f"{when}{leader['player_name']} led the top {n} scorers at {leader['ppg']:.1f} points per game "
        f"({int(leader['total_pts']):,} points over {int(leader['games_played'])} games)."
    ]

    scored = breakdown[breakdown['total_pts'] > 0]
    if scored.empty:
        lines.append("None of the selected players recorded a point.")
        return lines

    # idxmax keeps the first row on ties, which is the higher-ranked player
    for category in CATEGORIES:
        share_col = SHARE_COLUMNS[category]
        top = scored.loc[scored[share_col].idxmax()]
        lines.append(
            f"{top['player_name']} leaned hardest on {CATEGORY_PHRASES[category]}: "
            f"{top[share_col]:.1%} of {top['player_name']}'s points ({int(top[POINT_COLUMNS[category]]):,})."
        )

    group_total = scored['total_pts'].sum()
    pooled = {c: scored[POINT_COLUMNS[c]].sum() / group_total for c in CATEGORIES}
    lines.append(
        f"As a group, the top {n} scored {pooled['2PT']:.1%} of their points on twos, "
        f"{pooled['3PT']:.1%} on threes and {pooled['FT']:.1%} at the line."
    )
    return lines


def write_commentary(lines, outfile):
    out_dir = os.path.dirname(outfile)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)

    with open(outfile, 'w', encoding='utf-8') as f:
        f.write("\n".join(lines) + "\n")

    logger.info(f"Commentary saved to: {outfile}")
    return outfile
