"""
Wallet Loader
Aggregates the ETH balance, curated ERC-20 balances and live prices of an
address into a WalletState
"""

import re
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional

from .coingecko import CoinGeckoClient
from .constants import CHAIN_NAMES, ETH_LOGO_URL, KNOWN_TOKENS
from .errors import InvalidAddressError
from .etherscan import EtherscanClient, scale_units
from .formatting import format_usd, truncate_address
from .models import Token, WalletState
from .portfolio import weighted_change_24h

logger = logging.getLogger(__name__)

ADDRESS_PATTERN = re.compile(r'^0x[a-fA-F0-9]{40}$')


def is_valid_address(address) -> bool:
    return isinstance(address, str) and bool(ADDRESS_PATTERN.match(address))


def get_chain_info(chain_id: int) -> Dict:
    return {
        'chainId': chain_id,
        'chainName': CHAIN_NAMES.get(chain_id, f"Chain {chain_id}"),
    }


class WalletLoader:
    """Builds portfolio snapshots for wallet addresses"""

    def __init__(self,
                 etherscan: EtherscanClient,
                 prices: CoinGeckoClient,
                 known_tokens: Optional[List[Dict]] = None,
                 max_workers: int = 4):
        self.etherscan = etherscan
        self.prices = prices
        self.known_tokens = known_tokens if known_tokens is not None else KNOWN_TOKENS
        self.max_workers = max_workers

    def get_token_balances(self, address: str) -> List[Token]:
        """
        Fetch balances for the curated ERC-20 list.

        Tokens with a zero balance or a failed lookup are skipped.
        """
        tokens = []
        for info in self.known_tokens:
            raw_balance = self.etherscan.get_token_balance(address, info['address'])
            if not raw_balance:
                continue
            tokens.append(Token(
                symbol=info['symbol'],
                name=info['name'],
                contract_address=info['address'],
                balance=scale_units(raw_balance, info['decimals']),
                decimals=info['decimals'],
                logo_url=info.get('logo_url'),
                coingecko_id=info.get('coingecko_id'),
            ))
        return tokens

    def load_wallet_state(self, address: str) -> WalletState:
        """
        Load balances, prices and totals for an address.

        Upstream failures are reported in WalletState.error rather than raised.

        Raises:
            InvalidAddressError: if the address is malformed
        """
        if not is_valid_address(address):
            raise InvalidAddressError(address)

        chain = get_chain_info(self.etherscan.chain_id)
        state = WalletState(address=address,
                            chain_id=chain['chainId'],
                            chain_name=chain['chainName'])

        try:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                eth_future = executor.submit(self.etherscan.get_eth_balance, address)
                tokens_future = executor.submit(self.get_token_balances, address)
                price_future = executor.submit(self.prices.get_eth_price)

                eth_balance = eth_future.result()
                raw_tokens = tokens_future.result()
                eth_price = price_future.result()

            eth_token = Token(
                symbol='ETH',
                name='Ethereum',
                contract_address=None,
                balance=eth_balance,
                decimals=18,
                usd_price=eth_price.usd,
                usd_value=float(eth_balance) * eth_price.usd,
                price_change_24h=eth_price.usd_24h_change,
                logo_url=ETH_LOGO_URL,
                coingecko_id='ethereum',
            )

            tokens = [eth_token] + self.prices.enrich_tokens_with_prices(raw_tokens)
        except Exception as e:
            logger.error(f"Portfolio refresh error for {address}: {e}")
            state.error = str(e) or 'Failed to refresh portfolio'
            return state

        state.eth_balance = eth_balance
        state.tokens = tokens
        state.total_usd_value = sum(t.usd_value for t in tokens)
        state.total_change_24h = weighted_change_24h(tokens)
        logger.info(f"Loaded {len(tokens)} tokens for {truncate_address(address)}: {format_usd(state.total_usd_value)}")
        return state
