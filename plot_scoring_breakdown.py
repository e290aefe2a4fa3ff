import os
import logging
from dataclasses import dataclass, field

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import seaborn as sns

from scoring_breakdown import CATEGORIES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChartTheme:
    """
    Everything that styles a chart, passed into each plot call.

    Applied through seaborn's style/context managers for the duration of one
    call, so rendering one chart never changes how the next one looks.
    """
    style: str = 'whitegrid'
    context: str = 'notebook'
    font_scale: float = 1.0
    figsize: tuple = (11, 7)
    dpi: int = 120
    colors: dict = field(default_factory=lambda: {
        '2PT': '#1d428a',
        '3PT': '#c8102e',
        'FT': '#fdb927',
    })


DEFAULT_THEME = ChartTheme()


def _stack_frame(long_df, value):
    """Long table -> players x categories, players in ranking order."""
    flat = long_df.assign(category=long_df['category'].astype(str))
    wide = flat.pivot(index='player_name', columns='category', values=value)
    return wide.reindex(columns=CATEGORIES)


def _draw_stacked(wide, outfile, theme, title, xlabel, label_fmt, min_label, xlim=None):
    out_dir = os.path.dirname(outfile)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)

    with sns.axes_style(theme.style), sns.plotting_context(theme.context, font_scale=theme.font_scale):
        fig, ax = plt.subplots(figsize=theme.figsize)
        wide.plot(
            kind='barh',
            stacked=True,
            ax=ax,
            color=[theme.colors[c] for c in wide.columns],
            width=0.75,
            edgecolor='white',
        )

        # Segment labels, skipping slivers too thin to read
        for container in ax.containers:
            labels = [label_fmt(v) if v > 0 and v >= min_label else '' for v in container.datavalues]
            ax.bar_label(container, labels=labels, label_type='center', color='white', fontsize='small')

        # Rank 1 on top
        ax.invert_yaxis()
        ax.set_title(title)
        ax.set_xlabel(xlabel)
        if xlim:
            ax.set_xlim(*xlim)
        ax.set_ylabel('')
        ax.legend(title='Category', loc='lower right')
        sns.despine(ax=ax, left=True)

        fig.tight_layout()
        fig.savefig(outfile, dpi=theme.dpi)
        plt.close(fig)

    logger.info(f"Chart saved to: {outfile}")
    return outfile


def plot_points_breakdown(long_points, outfile, theme=DEFAULT_THEME, season_label=''):
    """Stacked bars of raw points per category for each player."""
    wide = _stack_frame(long_points, 'points')
    title = f"Scoring Breakdown of the Top {len(wide)} Scorers"
    if season_label:
        title += f" ({season_label})"

    return _draw_stacked(
        wide, outfile, theme, title,
        xlabel='Points',
        label_fmt=lambda v: f"{v:,.0f}",
        min_label=wide.sum(axis=1).max() * 0.04 if len(wide) else 0,
    )


def plot_share_breakdown(long_percent, outfile, theme=DEFAULT_THEME, season_label=''):
    """Stacked bars of each category's share of the player's points (0-100%)."""
    wide = _stack_frame(long_percent, 'percent') * 100
    title = f"Share of Points by Category, Top {len(wide)} Scorers"
    if season_label:
        title += f" ({season_label})"

    return _draw_stacked(
        wide, outfile, theme, title,
        xlabel="Share of Total Points (%)",
        label_fmt=lambda v: f"{v:.0f}%",
        min_label=6,
        xlim=(0, 100),
    )
