"""
Data Models
Data models for wallet balances, prices, transactions and dashboard widgets
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class TransactionType(Enum):
    """Direction / kind of an on-chain transaction relative to the wallet"""
    SEND = "send"
    RECEIVE = "receive"
    SWAP = "swap"
    CONTRACT = "contract"
    UNKNOWN = "unknown"


class RecommendationType(Enum):
    STAKING = "staking"
    LENDING = "lending"
    YIELD = "yield"
    LIQUIDITY = "liquidity"


@dataclass
class Token:
    """A token holding of the wallet"""
    symbol: str
    name: str
    contract_address: Optional[str] = None  # None for ETH
    balance: str = "0"  # Decimal string, already scaled by decimals
    decimals: int = 18
    usd_value: float = 0.0
    usd_price: float = 0.0
    price_change_24h: float = 0.0  # Percentage
    logo_url: Optional[str] = None
    coingecko_id: Optional[str] = None

    @property
    def balance_amount(self) -> float:
        try:
            return float(self.balance)
        except (TypeError, ValueError):
            return 0.0

    def to_dict(self) -> Dict:
        return {
            'symbol': self.symbol,
            'name': self.name,
            'contractAddress': self.contract_address,
            'balance': self.balance,
            'decimals': self.decimals,
            'usdValue': self.usd_value,
            'usdPrice': self.usd_price,
            'priceChange24h': self.price_change_24h,
            'logoUrl': self.logo_url,
            'coingeckoId': self.coingecko_id,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'Token':
        """Build a token from the camelCase payload sent by the front end"""
        return cls(
            symbol=data.get('symbol', ''),
            name=data.get('name', ''),
            contract_address=data.get('contractAddress'),
            balance=str(data.get('balance', '0')),
            decimals=int(data.get('decimals', 18)),
            usd_value=float(data.get('usdValue') or 0.0),
            usd_price=float(data.get('usdPrice') or 0.0),
            price_change_24h=float(data.get('priceChange24h') or 0.0),
            logo_url=data.get('logoUrl'),
            coingecko_id=data.get('coingeckoId'),
        )


@dataclass
class CoinGeckoPrice:
    """USD price snapshot returned by CoinGecko /simple/price"""
    usd: float = 0.0
    usd_24h_change: float = 0.0
    usd_market_cap: Optional[float] = None
    usd_24h_vol: Optional[float] = None

    def to_dict(self) -> Dict:
        result = {'usd': self.usd, 'usd_24h_change': self.usd_24h_change}
        if self.usd_market_cap is not None:
            result['usd_market_cap'] = self.usd_market_cap
        if self.usd_24h_vol is not None:
            result['usd_24h_vol'] = self.usd_24h_vol
        return result


@dataclass
class Transaction:
    """A normal (external) Ethereum transaction from Etherscan txlist"""
    hash: str
    from_address: str
    to_address: str
    value: str = "0"  # Wei as decimal string
    timestamp: str = "0"  # Unix seconds as string
    gas: str = "0"
    gas_price: str = "0"
    gas_used: str = "0"
    is_error: str = "0"  # "0" = success, "1" = failed
    input: str = "0x"
    function_name: Optional[str] = None
    label: Optional[str] = None
    type: TransactionType = TransactionType.UNKNOWN

    @property
    def failed(self) -> bool:
        return self.is_error == "1"

    @property
    def has_input(self) -> bool:
        return bool(self.input) and self.input != "0x" and len(self.input) > 2

    def to_dict(self) -> Dict:
        return {
            'hash': self.hash,
            'from': self.from_address,
            'to': self.to_address,
            'value': self.value,
            'timeStamp': self.timestamp,
            'gas': self.gas,
            'gasPrice': self.gas_price,
            'gasUsed': self.gas_used,
            'isError': self.is_error,
            'input': self.input,
            'functionName': self.function_name,
            'label': self.label,
            'type': self.type.value,
        }


@dataclass
class ChatMessage:
    role: str  # "user" or "assistant"
    content: str


@dataclass
class WalletState:
    """Balances, prices and totals for a single wallet address"""
    address: Optional[str] = None
    chain_id: Optional[int] = None
    chain_name: Optional[str] = None
    eth_balance: Optional[str] = None
    tokens: List[Token] = field(default_factory=list)
    total_usd_value: float = 0.0
    total_change_24h: float = 0.0
    error: Optional[str] = None

    @property
    def is_connected(self) -> bool:
        return self.address is not None

    def to_dict(self) -> Dict:
        return {
            'address': self.address,
            'isConnected': self.is_connected,
            'chainId': self.chain_id,
            'chainName': self.chain_name,
            'ethBalance': self.eth_balance,
            'tokens': [t.to_dict() for t in self.tokens],
            'totalUsdValue': self.total_usd_value,
            'totalChange24h': self.total_change_24h,
            'error': self.error,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'WalletState':
        """Build from the walletData / walletContext payload of the AI endpoints"""
        return cls(
            address=data.get('address'),
            chain_id=data.get('chainId'),
            chain_name=data.get('chainName'),
            eth_balance=data.get('ethBalance'),
            tokens=[Token.from_dict(t) for t in data.get('tokens') or []],
            total_usd_value=float(data.get('totalUsdValue') or 0.0),
            total_change_24h=float(data.get('totalChange24h') or 0.0),
        )


@dataclass
class PortfolioSummary:
    total_usd_value: float
    change_24h_percent: float
    top_holding: str
    top_holding_percent: float
    token_count: int

    def to_dict(self) -> Dict:
        return {
            'totalUsdValue': self.total_usd_value,
            'change24hPercent': self.change_24h_percent,
            'topHolding': self.top_holding,
            'topHoldingPercent': self.top_holding_percent,
            'tokenCount': self.token_count,
        }


@dataclass
class ChartDataPoint:
    name: str
    value: float
    color: str
    percent: float

    def to_dict(self) -> Dict:
        return {
            'name': self.name,
            'value': self.value,
            'color': self.color,
            'percent': self.percent,
        }


@dataclass
class Recommendation:
    """A DeFi staking / lending opportunity shown next to the portfolio"""
    id: str
    protocol: str
    asset: str
    type: RecommendationType
    apy: float
    min_amount: str
    risk_level: str  # "Low", "Medium", "High"
    description: str
    url: Optional[str] = None
    logo_url: Optional[str] = None
    tags: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'protocol': self.protocol,
            'asset': self.asset,
            'type': self.type.value,
            'apy': self.apy,
            'minAmount': self.min_amount,
            'riskLevel': self.risk_level,
            'description': self.description,
            'logoUrl': self.logo_url,
            'url': self.url,
            'tags': list(self.tags),
        }
