"""Fixed-width terminal rendering of the account x date cost matrix."""
from __future__ import annotations

import datetime
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Sequence

from rich.cells import set_cell_size
from rich.text import Text

from account_cost_trends.classify import ColorTier, Trend, classify
from account_cost_trends.models import AccountRow, DailyTotal, sort_rows

ACCOUNT_WIDTH = 40
AMOUNT_WIDTH = 13

GLYPHS = {Trend.UP: "↑", Trend.DOWN: "↓", Trend.FLAT: " "}


@dataclass(frozen=True)
class ColorScheme:
    """rich styles per color tier. A disabled scheme styles nothing."""
    enabled: bool = True
    low: str = "green"
    medium: str = "bold yellow"
    high: str = "red"
    total: str = "cyan"

    def tier_style(self, tier: ColorTier) -> Optional[str]:
        if not self.enabled:
            return None
        return {ColorTier.LOW: self.low, ColorTier.MEDIUM: self.medium, ColorTier.HIGH: self.high}.get(tier)

    def total_style(self, tier: Optional[ColorTier] = None) -> Optional[str]:
        if not self.enabled:
            return None
        if tier is None or tier is ColorTier.NONE:
            return self.total
        return self.tier_style(tier)


PLAIN = ColorScheme(enabled=False)


def format_amount(amount: Optional[Decimal], trend: Trend = Trend.FLAT) -> str:
    """Right-align amount with its trend glyph in one AMOUNT_WIDTH field, or "-" if amount is None."""
    if amount is None:
        return "-".rjust(AMOUNT_WIDTH)
    return f"{amount:>{AMOUNT_WIDTH - 1}.2f}{GLYPHS[trend]}"


def format_date(date: str) -> str:
    return datetime.date.fromisoformat(date).strftime("%m-%d")


def header_line(dates: Sequence[str]) -> str:
    return "Account".ljust(ACCOUNT_WIDTH) + "".join(format_date(d).ljust(AMOUNT_WIDTH) for d in dates)


def rule_line(dates: Sequence[str]) -> str:
    return "-" * (ACCOUNT_WIDTH + AMOUNT_WIDTH * len(dates))


def account_label(name: str) -> str:
    """Truncate and pad by terminal cells so wide characters keep the columns aligned."""
    return set_cell_size(name, ACCOUNT_WIDTH - 1) + " "


def render_row(row: AccountRow, colors: ColorScheme = PLAIN) -> Text:
    line = Text(account_label(row.display_name))
    prev = None
    for point in row.points:
        if point.amount is None:
            line.append(format_amount(None))
            prev = None
            continue
        trend, tier = classify(prev, point.amount)
        line.append(format_amount(point.amount, trend), style=colors.tier_style(tier))
        prev = point.amount
    return line


def render_totals(totals: Sequence[DailyTotal], colors: ColorScheme = PLAIN) -> Text:
    line = Text(account_label("TOTAL"), style=colors.total_style() or "")
    prev = None
    for total in totals:
        trend, tier = classify(prev, total.amount)
        line.append(format_amount(total.amount, trend), style=colors.total_style(tier))
        prev = total.amount
    return line


def render(dates: Sequence[str], rows: Sequence[AccountRow], totals: Sequence[DailyTotal],
           colors: ColorScheme = PLAIN) -> Text:
    """Lay out header, one line per account (sorted by display name), and the totals line."""
    rule = rule_line(dates)
    lines: List[Text] = [Text(header_line(dates)), Text(rule)]
    lines.extend(render_row(row, colors) for row in sort_rows(rows))
    lines.append(Text(rule))
    lines.append(render_totals(totals, colors))
    return Text("\n").join(lines)
