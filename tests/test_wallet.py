import unittest
from unittest.mock import MagicMock
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src'))

from cryptomind.errors import InvalidAddressError
from cryptomind.models import CoinGeckoPrice, Token
from cryptomind.wallet import WalletLoader, get_chain_info, is_valid_address

ADDRESS = "0x" + "ab" * 20

TEST_TOKENS = [
    {"address": "0x" + "01" * 20, "symbol": "USDC", "name": "USD Coin",
     "decimals": 6, "coingecko_id": "usd-coin"},
    {"address": "0x" + "02" * 20, "symbol": "DAI", "name": "Dai Stablecoin",
     "decimals": 18, "coingecko_id": "dai"},
]


class TestAddressAndChain(unittest.TestCase):
    def test_address_validation(self):
        self.assertTrue(is_valid_address(ADDRESS))
        self.assertTrue(is_valid_address("0x" + "AbCdEf0123" * 4))
        self.assertFalse(is_valid_address("0x123"))
        self.assertFalse(is_valid_address("ab" * 21))
        self.assertFalse(is_valid_address("0x" + "zz" * 20))
        self.assertFalse(is_valid_address(None))

    def test_chain_names(self):
        self.assertEqual(get_chain_info(1)["chainName"], "Ethereum Mainnet")
        self.assertEqual(get_chain_info(8453)["chainName"], "Base")
        self.assertEqual(get_chain_info(999), {"chainId": 999, "chainName": "Chain 999"})


class TestWalletLoader(unittest.TestCase):
    def setUp(self):
        self.etherscan = MagicMock()
        self.etherscan.chain_id = 1
        self.prices = MagicMock()
        self.loader = WalletLoader(self.etherscan, self.prices, known_tokens=TEST_TOKENS)

    def test_token_balances_skip_empty_and_failed(self):
        self.etherscan.get_token_balance.side_effect = [2500000, None]
        tokens = self.loader.get_token_balances(ADDRESS)

        self.assertEqual(len(tokens), 1)
        self.assertEqual(tokens[0].symbol, "USDC")
        self.assertEqual(tokens[0].balance, "2.5")
        self.assertEqual(tokens[0].usd_value, 0.0)

    def test_load_wallet_state_totals(self):
        """ETH comes first and the 24h change is weighted by USD value"""
        self.etherscan.get_eth_balance.return_value = "1"
        self.etherscan.get_token_balance.side_effect = [1000 * 10 ** 6, 0]
        self.prices.get_eth_price.return_value = CoinGeckoPrice(usd=3000.0, usd_24h_change=4.0)

        def enrich(tokens):
            return [Token(symbol=t.symbol, name=t.name, balance=t.balance,
                          usd_value=1000.0, usd_price=1.0, price_change_24h=0.0)
                    for t in tokens]
        self.prices.enrich_tokens_with_prices.side_effect = enrich

        state = self.loader.load_wallet_state(ADDRESS)

        self.assertIsNone(state.error)
        self.assertEqual(state.chain_name, "Ethereum Mainnet")
        self.assertEqual([t.symbol for t in state.tokens], ["ETH", "USDC"])
        self.assertEqual(state.tokens[0].usd_value, 3000.0)
        self.assertEqual(state.total_usd_value, 4000.0)
        self.assertAlmostEqual(state.total_change_24h, 3.0)

    def test_zero_value_portfolio_has_zero_change(self):
        self.etherscan.get_eth_balance.return_value = "0"
        self.etherscan.get_token_balance.return_value = None
        self.prices.get_eth_price.return_value = CoinGeckoPrice(usd=3000.0, usd_24h_change=4.0)
        self.prices.enrich_tokens_with_prices.return_value = []

        state = self.loader.load_wallet_state(ADDRESS)

        self.assertEqual(state.total_usd_value, 0.0)
        self.assertEqual(state.total_change_24h, 0.0)

    def test_upstream_failure_sets_error(self):
        self.etherscan.get_eth_balance.side_effect = RuntimeError("node unavailable")
        self.etherscan.get_token_balance.return_value = None
        self.prices.get_eth_price.return_value = CoinGeckoPrice()

        state = self.loader.load_wallet_state(ADDRESS)

        self.assertEqual(state.error, "node unavailable")
        self.assertEqual(state.tokens, [])
        self.assertEqual(state.address, ADDRESS)

    def test_invalid_address_raises(self):
        with self.assertRaises(InvalidAddressError):
            self.loader.load_wallet_state("not-an-address")
        self.etherscan.get_eth_balance.assert_not_called()


if __name__ == '__main__':
    unittest.main()
