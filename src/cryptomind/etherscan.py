"""
Etherscan Client
Fetches transaction history and balances for Ethereum addresses, and
classifies transactions relative to the wallet that owns them
"""

import re
import logging
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import List, Optional

import requests

from .constants import ETHERSCAN_BASE_URL, SWAP_SIGNATURES
from .errors import UpstreamAPIError
from .http_client import get_json
from .models import Transaction, TransactionType

logger = logging.getLogger(__name__)

_TRAILING_ZEROS = re.compile(r'\.?0+$')


def _strip_zeros(value: str) -> str:
    if '.' not in value:
        return value
    return _TRAILING_ZEROS.sub('', value) or '0'


def scale_units(raw: int, decimals: int) -> str:
    """Convert integer base units to a plain decimal string"""
    # Exact for any number of digits
    amount = Decimal(f"{int(raw)}E-{int(decimals)}")
    return _strip_zeros(format(amount, 'f'))


class EtherscanClient:
    """Thin client over the Etherscan account API"""

    def __init__(self,
                 api_key: Optional[str] = None,
                 chain_id: int = 1,
                 base_url: str = ETHERSCAN_BASE_URL,
                 session: Optional[requests.Session] = None):
        """
        Initialize the Etherscan client

        Args:
            api_key: Etherscan API key (requests are sent without one if unset,
                     which the free tier heavily rate-limits)
            chain_id: EVM chain id for the V2 multichain API (1 = mainnet)
        """
        self.api_key = api_key
        self.chain_id = chain_id
        self.base_url = base_url
        self.session = session

    def _params(self, **params) -> dict:
        params = {"chainid": str(self.chain_id), **params}
        if self.api_key:
            params["apikey"] = self.api_key
        return params

    def _call(self, **params):
        return get_json(self.base_url, params=self._params(**params),
                        service="Etherscan", session=self.session)

    def get_transactions(self, address: str, limit: int = 10) -> List[Transaction]:
        """
        Fetch the newest N normal transactions for an address.

        Returns [] when the account has no history or the API fails.
        """
        try:
            data = self._call(
                module="account",
                action="txlist",
                address=address,
                startblock="0",
                endblock="99999999",
                page="1",
                offset=str(limit),
                sort="desc",
            )
        except UpstreamAPIError as e:
            logger.error(f"Etherscan fetch error: {e}")
            return []

        if data.get("status") != "1":
            if data.get("message") != "No transactions found":
                logger.warning(f"Etherscan message: {data.get('message')}")
            return []

        return [
            Transaction(
                hash=tx.get("hash", ""),
                from_address=tx.get("from", ""),
                to_address=tx.get("to") or "",
                value=tx.get("value", "0"),
                timestamp=tx.get("timeStamp", "0"),
                gas=tx.get("gas", "0"),
                gas_price=tx.get("gasPrice", "0"),
                gas_used=tx.get("gasUsed", "0"),
                is_error=tx.get("isError", "0"),
                input=tx.get("input") or "0x",
                function_name=tx.get("functionName") or None,
            )
            for tx in data.get("result") or []
        ]

    def get_eth_balance(self, address: str) -> str:
        """ETH balance as a decimal string, "0" on failure"""
        try:
            data = self._call(module="account", action="balance",
                              address=address, tag="latest")
            if data.get("status") != "1":
                logger.error(f"Error fetching ETH balance: {data.get('message', 'Unknown error')}")
                return "0"
            return scale_units(int(data["result"]), 18)
        except (UpstreamAPIError, KeyError, ValueError) as e:
            logger.error(f"Error fetching ETH balance: {e}")
            return "0"

    def get_token_balance(self, address: str, token_contract: str) -> Optional[int]:
        """Raw ERC-20 balance in base units, None on failure"""
        try:
            data = self._call(module="account", action="tokenbalance",
                              contractaddress=token_contract,
                              address=address, tag="latest")
            if data.get("status") != "1":
                # status 0 with result "0" is a normal empty balance
                if data.get("result") not in ("0", None):
                    logger.warning(f"Error fetching token balance: {data.get('message', 'Unknown error')}")
                return None
            return int(data["result"])
        except (UpstreamAPIError, KeyError, ValueError) as e:
            logger.error(f"Error fetching ERC-20 balance for {token_contract}: {e}")
            return None


def infer_transaction_type(tx: Transaction, wallet_address: str) -> TransactionType:
    """Classify a transaction as send / receive / swap / contract / unknown"""
    addr = wallet_address.lower()
    sender = (tx.from_address or "").lower()
    recipient = (tx.to_address or "").lower()

    if sender == addr and recipient == addr:
        return TransactionType.UNKNOWN

    if tx.has_input:
        if tx.input[:10].lower() in SWAP_SIGNATURES:
            return TransactionType.SWAP
        return TransactionType.CONTRACT

    if sender == addr:
        return TransactionType.SEND
    if recipient == addr:
        return TransactionType.RECEIVE

    return TransactionType.UNKNOWN


def wei_to_eth_amount(wei_value: str) -> Decimal:
    try:
        return Decimal(f"{int(wei_value)}E-18")
    except (TypeError, ValueError, InvalidOperation):
        return Decimal(0)


def wei_to_eth(wei_value: str) -> str:
    """Format a wei value as ETH with up to 6 decimal places"""
    eth = wei_to_eth_amount(wei_value)
    if eth == 0:
        return "0"
    if eth < Decimal("0.000001"):
        return "<0.000001"
    return _strip_zeros(f"{eth:.6f}")


def format_transaction_date(timestamp: str) -> str:
    """Unix timestamp string -> 'Jan 5, 2024, 03:04 PM' (UTC)"""
    dt = datetime.fromtimestamp(int(timestamp), tz=timezone.utc)
    return f"{dt.strftime('%b')} {dt.day}, {dt.year}, {dt.strftime('%I:%M %p')}"
