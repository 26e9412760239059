"""
CryptoMind Package
Wallet portfolio loading, price enrichment and AI insights for the
CryptoMind dashboard
"""

__version__ = "1.0.0"

from .models import (
    Token,
    Transaction,
    TransactionType,
    CoinGeckoPrice,
    ChatMessage,
    WalletState,
    PortfolioSummary,
    ChartDataPoint,
    Recommendation,
    RecommendationType
)

from .coingecko import CoinGeckoClient

from .etherscan import EtherscanClient, infer_transaction_type, wei_to_eth

from .wallet import WalletLoader, get_chain_info, is_valid_address

from .portfolio import generate_chart_data, relevant_recommendations, summarize_portfolio

from .ai_advisor import AIAdvisor, fallback_label

from .transactions import get_labeled_transactions

from .config import Config, load_config

__all__ = [
    'Token',
    'Transaction',
    'TransactionType',
    'CoinGeckoPrice',
    'ChatMessage',
    'WalletState',
    'PortfolioSummary',
    'ChartDataPoint',
    'Recommendation',
    'RecommendationType',
    'CoinGeckoClient',
    'EtherscanClient',
    'infer_transaction_type',
    'wei_to_eth',
    'WalletLoader',
    'get_chain_info',
    'is_valid_address',
    'generate_chart_data',
    'relevant_recommendations',
    'summarize_portfolio',
    'AIAdvisor',
    'fallback_label',
    'get_labeled_transactions',
    'Config',
    'load_config'
]
