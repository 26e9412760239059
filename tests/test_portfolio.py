import unittest
from datetime import datetime, timezone
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src'))

from cryptomind.constants import CHART_COLORS
from cryptomind.formatting import (
    format_balance, format_percent, format_timestamp, format_usd, truncate_address
)
from cryptomind.models import Token
from cryptomind.portfolio import (
    DEFI_RECOMMENDATIONS, generate_chart_data, relevant_recommendations, summarize_portfolio
)


def token(symbol, usd_value=0.0, balance="0", change=0.0):
    return Token(symbol=symbol, name=symbol, balance=balance,
                 usd_value=usd_value, price_change_24h=change)


class TestChartData(unittest.TestCase):
    def test_empty_portfolio(self):
        self.assertEqual(generate_chart_data([]), [])
        self.assertEqual(generate_chart_data([token("ETH")]), [])

    def test_sorted_filtered_and_coloured(self):
        points = generate_chart_data([token("DAI", 100.0), token("ETH", 300.0), token("UNI", 0.0)])

        self.assertEqual([p.name for p in points], ["ETH", "DAI"])
        self.assertEqual(points[0].color, CHART_COLORS[0])
        self.assertAlmostEqual(points[0].percent, 75.0)
        self.assertAlmostEqual(points[1].percent, 25.0)

    def test_palette_wraps(self):
        tokens = [token(f"T{i}", float(100 - i)) for i in range(12)]
        points = generate_chart_data(tokens)
        self.assertEqual(points[10].color, CHART_COLORS[0])
        self.assertEqual(points[11].color, CHART_COLORS[1])


class TestSummary(unittest.TestCase):
    def test_top_holding(self):
        summary = summarize_portfolio([token("ETH", 750.0, change=2.0), token("DAI", 250.0)])

        self.assertEqual(summary.top_holding, "ETH")
        self.assertAlmostEqual(summary.top_holding_percent, 75.0)
        self.assertAlmostEqual(summary.change_24h_percent, 1.5)
        self.assertEqual(summary.token_count, 2)

    def test_no_tokens(self):
        summary = summarize_portfolio([])
        self.assertEqual(summary.top_holding, "N/A")
        self.assertEqual(summary.top_holding_percent, 0.0)


class TestRecommendations(unittest.TestCase):
    def test_no_tokens_returns_everything(self):
        self.assertEqual(len(relevant_recommendations([])), len(DEFI_RECOMMENDATIONS))

    def test_eth_holder(self):
        recs = relevant_recommendations([token("ETH", balance="0.5")])
        assets = {r.asset for r in recs}
        self.assertEqual(assets, {"ETH", "ETH/USDC"})

    def test_thresholds_are_strict(self):
        recs = relevant_recommendations([token("USDC", balance="100"), token("DAI", balance="50.5")])
        self.assertEqual([r.id for r in recs], ["compound-dai"])

    def test_nothing_qualifies_falls_back_to_full_list(self):
        recs = relevant_recommendations([token("ETH", balance="0.001")])
        self.assertEqual(len(recs), len(DEFI_RECOMMENDATIONS))


class TestFormatting(unittest.TestCase):
    def test_format_usd(self):
        self.assertEqual(format_usd(2_500_000), "$2.50M")
        self.assertEqual(format_usd(1234.5), "$1.23K")
        self.assertEqual(format_usd(999.5), "$999.50")
        self.assertEqual(format_usd(0.1234, decimals=3), "$0.123")

    def test_format_percent(self):
        self.assertEqual(format_percent(1.234), "+1.23%")
        self.assertEqual(format_percent(0), "+0.00%")
        self.assertEqual(format_percent(-2.5), "-2.50%")

    def test_format_balance(self):
        self.assertEqual(format_balance("abc"), "0")
        self.assertEqual(format_balance("0"), "0")
        self.assertEqual(format_balance("0.0000001"), "<0.000001")
        self.assertEqual(format_balance("0.5"), "0.5")
        self.assertEqual(format_balance("12.34567"), "12.3457")
        self.assertEqual(format_balance("1234567.891"), "1,234,567.89")
        self.assertEqual(format_balance("5000"), "5,000")

    def test_truncate_address(self):
        self.assertEqual(truncate_address(""), "")
        self.assertEqual(truncate_address("0x1234567890abcdef"), "0x1234...cdef")

    def test_format_timestamp(self):
        now = datetime(2024, 1, 10, 12, 0, tzinfo=timezone.utc)
        ts = int(now.timestamp())
        self.assertEqual(format_timestamp(str(ts - 5 * 60), now=now), "5m ago")
        self.assertEqual(format_timestamp(str(ts - 3 * 3600), now=now), "3h ago")
        self.assertEqual(format_timestamp(str(ts - 2 * 86400), now=now), "2d ago")
        self.assertEqual(format_timestamp(str(ts - 30 * 86400), now=now), "Dec 11, 2023")


if __name__ == '__main__':
    unittest.main()
