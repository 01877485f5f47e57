"""Shared fixtures: a fixed two-account, two-day dataset."""

import pytest

from account_cost_trends.models import CostData

DATES = ["2024-03-01", "2024-03-02"]


@pytest.fixture
def cost_data():
    # alpha has the larger id but sorts first by name
    return CostData(
        dates=list(DATES),
        records=[
            ("2024-03-01", "111111111111", "100"),
            ("2024-03-01", "222222222222", "10.00"),
            ("2024-03-02", "111111111111", "80.5"),
            ("2024-03-02", "222222222222", "15.00"),
        ],
    )


@pytest.fixture
def names():
    return {"111111111111": "beta", "222222222222": "alpha"}
