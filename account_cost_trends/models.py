"""In-memory shapes for one run's cost data."""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional, Sequence, Tuple

import pandas as pd

ZERO = Decimal("0")


@dataclass
class CostData:
    """What a cost source returns: the reported dates and (date, account_id, amount) triples."""
    dates: List[str]
    records: List[Tuple[str, str, str]] = field(default_factory=list)


@dataclass(frozen=True)
class CostPoint:
    account_id: str
    date: str
    # None means the provider sent something that is not a non-negative number
    amount: Optional[Decimal]


@dataclass
class AccountRow:
    account_id: str
    display_name: str
    points: List[CostPoint]


@dataclass(frozen=True)
class DailyTotal:
    date: str
    amount: Decimal


def parse_amount(value) -> Optional[Decimal]:
    """Parse a provider amount string. Returns None for anything but a finite non-negative number."""
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ZERO
    text = str(value).strip().replace("$", "").replace(",", "")
    if not text:
        return ZERO
    try:
        amount = Decimal(text)
    except InvalidOperation:
        return None
    if not amount.is_finite() or amount < 0:
        return None
    return amount


def build_cost_table(data: CostData) -> pd.DataFrame:
    """Pivot the source triples into an account x date table of raw amount strings.

    Dates the provider reported with no spend for an account are NaN.
    """
    df = pd.DataFrame(data.records, columns=["date", "account_id", "amount"])
    if df.empty:
        return pd.DataFrame(index=pd.Index([], name="account_id"), columns=data.dates, dtype=object)
    df = df.drop_duplicates(subset=["account_id", "date"], keep="last")
    table = df.pivot(index="account_id", columns="date", values="amount")
    return table.reindex(columns=data.dates).sort_index()


def build_rows(table: pd.DataFrame, names: Dict[str, str]) -> List[AccountRow]:
    """Turn the cost table into rows ordered by display name."""
    rows = []
    for account_id in table.index:
        points = [
            CostPoint(account_id=account_id, date=date, amount=parse_amount(table.at[account_id, date]))
            for date in table.columns
        ]
        rows.append(AccountRow(account_id=account_id, display_name=names.get(account_id, account_id), points=points))
    return sort_rows(rows)


def sort_rows(rows: Sequence[AccountRow]) -> List[AccountRow]:
    return sorted(rows, key=lambda r: (r.display_name, r.account_id))


def daily_totals(dates: Sequence[str], rows: Sequence[AccountRow]) -> List[DailyTotal]:
    """Sum each date across all accounts. Missing and malformed amounts count as zero."""
    sums = {d: ZERO for d in dates}
    for row in rows:
        for point in row.points:
            if point.amount is not None and point.date in sums:
                sums[point.date] += point.amount
    return [DailyTotal(date=d, amount=sums[d]) for d in dates]
