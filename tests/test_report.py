from decimal import Decimal

from rich.cells import cell_len

from account_cost_trends.classify import Trend
from account_cost_trends.models import AccountRow, CostPoint, DailyTotal, build_cost_table, build_rows, daily_totals
from account_cost_trends.report import (
    ACCOUNT_WIDTH,
    AMOUNT_WIDTH,
    PLAIN,
    ColorScheme,
    format_amount,
    header_line,
    render,
    render_row,
    render_totals,
    rule_line,
)

D = Decimal


def _cell(value, glyph=" "):
    return value.rjust(AMOUNT_WIDTH - 1) + glyph


FOUR_DAYS = ("2024-03-01", "2024-03-02", "2024-03-03", "2024-03-04")


def _row(name, amounts, dates=("2024-03-01", "2024-03-02", "2024-03-03")):
    return AccountRow(
        account_id=name,
        display_name=name,
        points=[CostPoint(account_id=name, date=d, amount=a) for d, a in zip(dates, amounts)],
    )


class TestFormatAmount:
    def test_value_and_glyph_fill_the_column(self):
        assert format_amount(D("12.5"), Trend.UP) == " " * 7 + "12.50↑"
        assert format_amount(D("12.5"), Trend.DOWN) == " " * 7 + "12.50↓"
        assert format_amount(D("12.5"), Trend.FLAT) == " " * 7 + "12.50 "
        assert len(format_amount(D("12.5"), Trend.UP)) == AMOUNT_WIDTH

    def test_rounds_to_cents(self):
        assert format_amount(D("0.004")).strip() == "0.00"
        assert format_amount(D("1234567.891")).strip() == "1234567.89"

    def test_unparseable_amount_is_dash(self):
        assert format_amount(None) == " " * (AMOUNT_WIDTH - 1) + "-"


class TestLayout:
    def test_header(self):
        assert header_line(["2024-03-01", "2024-12-31"]) == "Account".ljust(40) + "03-01" + " " * 8 + "12-31" + " " * 8

    def test_rule_length(self):
        assert rule_line(["2024-03-01"] * 5) == "-" * (ACCOUNT_WIDTH + AMOUNT_WIDTH * 5)
        assert rule_line([]) == "-" * ACCOUNT_WIDTH

    def test_long_names_are_truncated(self):
        line = render_row(_row("x" * 60, [D("1")])).plain
        assert line.startswith("x" * 39 + " ")
        assert len(line) == ACCOUNT_WIDTH + AMOUNT_WIDTH

    def test_wide_names_keep_columns_aligned(self):
        dates = ("2024-03-01", "2024-03-02")
        line = render_row(_row("生产环境账户" * 10, [D("1"), D("2")], dates=dates)).plain
        assert cell_len(line) == cell_len(header_line(dates)) == ACCOUNT_WIDTH + 2 * AMOUNT_WIDTH
        assert cell_len(line[:line.index(" ")]) <= ACCOUNT_WIDTH - 1
        assert line.endswith(_cell("1.00") + _cell("2.00", "↑"))

    def test_rows_sorted_by_display_name(self):
        rows = [_row("zulu", [D("1")]), _row("alpha", [D("2")])]
        lines = render(["2024-03-01"], rows, [DailyTotal("2024-03-01", D("3"))]).plain.split("\n")
        assert lines[2].startswith("alpha")
        assert lines[3].startswith("zulu")


class TestRowTrends:
    def test_first_cell_has_no_arrow(self):
        line = render_row(_row("a", [D("5"), D("6"), D("4")])).plain
        assert line[ACCOUNT_WIDTH:] == _cell("5.00") + _cell("6.00", "↑") + _cell("4.00", "↓")

    def test_zero_previous_is_baseline(self):
        line = render_row(_row("a", [D("0"), D("6"), D("6")])).plain
        assert line[ACCOUNT_WIDTH:] == _cell("0.00") + _cell("6.00") + _cell("6.00")

    def test_malformed_cell_renders_dash_and_resets_baseline(self):
        line = render_row(_row("a", [D("5"), None, D("9")])).plain
        assert line[ACCOUNT_WIDTH:] == _cell("5.00") + "-".rjust(AMOUNT_WIDTH) + _cell("9.00")


class TestColors:
    def test_cells_styled_by_tier(self):
        line = render_row(_row("a", [D("100"), D("110"), D("140"), D("400")], dates=FOUR_DAYS), ColorScheme())
        # baseline cell carries no style
        assert [span.style for span in line.spans] == ["green", "bold yellow", "red"]
        start = ACCOUNT_WIDTH + AMOUNT_WIDTH
        assert (line.spans[0].start, line.spans[0].end) == (start, start + AMOUNT_WIDTH)

    def test_dash_cell_is_unstyled(self):
        line = render_row(_row("a", [D("100"), None, D("500")]), ColorScheme())
        assert line.spans == []

    def test_totals_use_total_tone(self):
        totals = [DailyTotal("2024-03-01", D("100")), DailyTotal("2024-03-02", D("105")),
                  DailyTotal("2024-03-03", D("105"))]
        line = render_totals(totals, ColorScheme())
        assert line.style == "cyan"
        assert [span.style for span in line.spans] == ["cyan", "green", "cyan"]

    def test_disabled_scheme_styles_nothing(self):
        line = render_row(_row("a", [D("100"), D("110"), D("400")]), PLAIN)
        assert line.spans == []
        totals = render_totals([DailyTotal("2024-03-01", D("1"))], PLAIN)
        assert totals.spans == [] and not totals.style

    def test_plain_text_is_identical_with_and_without_color(self):
        row = _row("a", [D("100"), D("110"), D("400")])
        assert render_row(row, ColorScheme()).plain == render_row(row, PLAIN).plain


class TestRender:
    def test_two_accounts_two_days(self, cost_data, names):
        rows = build_rows(build_cost_table(cost_data), names)
        totals = daily_totals(cost_data.dates, rows)
        text = render(cost_data.dates, rows, totals, PLAIN).plain

        expected = "\n".join([
            "Account" + " " * 33 + "03-01" + " " * 8 + "03-02" + " " * 8,
            "-" * 66,
            "alpha" + " " * 35 + " " * 7 + "10.00" + " " + " " * 7 + "15.00" + "↑",
            "beta" + " " * 36 + " " * 6 + "100.00" + " " + " " * 7 + "80.50" + "↓",
            "-" * 66,
            "TOTAL" + " " * 35 + " " * 6 + "110.00" + " " + " " * 7 + "95.50" + "↓",
        ])
        assert text == expected

    def test_totals_classified_independently_of_rows(self):
        # each account moves a lot, the total does not move at all
        rows = [_row("a", [D("100"), D("300")]), _row("b", [D("300"), D("100")])]
        totals = [DailyTotal("2024-03-01", D("400")), DailyTotal("2024-03-02", D("400"))]
        text = render(["2024-03-01", "2024-03-02"], rows, totals, ColorScheme())
        assert text.plain.split("\n")[-1].endswith(_cell("400.00") + _cell("400.00"))
