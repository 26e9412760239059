"""
Constants and configuration for the CryptoMind portfolio dashboard
"""

# CoinGecko API endpoint
COINGECKO_BASE_URL = "https://api.coingecko.com/api/v3"

# Etherscan API endpoint (V2 multichain API)
ETHERSCAN_BASE_URL = "https://api.etherscan.io/v2/api"

# Price cache lifetime (CoinGecko free tier allows ~30-60 calls/min)
PRICE_CACHE_TTL_SECONDS = 60

# API configuration
API_RETRY_COUNT = 3
API_TIMEOUT = 10
API_RATE_LIMIT_BACKOFF_BASE = 2  # Base seconds for linear backoff

# Config file
DEFAULT_CONFIG_PATH = "wallet_config.json"
PLACEHOLDER_VALUES = (
    "YOUR_ETHERSCAN_API_KEY_HERE",
    "YOUR_GEMINI_API_KEY_HERE",
)

# Gemini model settings
DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"
SUMMARY_MAX_TOKENS = 200
CHAT_MAX_TOKENS = 400
LABEL_MAX_TOKENS = 30
SUMMARY_TEMPERATURE = 0.7
CHAT_TEMPERATURE = 0.7
LABEL_TEMPERATURE = 0.3
CHAT_HISTORY_LIMIT = 20  # Messages kept for chat context

# Transaction history
DEFAULT_TRANSACTION_LIMIT = 10
DEFAULT_AI_LABEL_LIMIT = 5  # Only the newest N get an LLM label

# Chain ID -> display name
CHAIN_NAMES = {
    1: "Ethereum Mainnet",
    5: "Goerli Testnet",
    11155111: "Sepolia Testnet",
    137: "Polygon Mainnet",
    80001: "Mumbai Testnet",
    56: "BNB Smart Chain",
    43114: "Avalanche C-Chain",
    42161: "Arbitrum One",
    10: "Optimism",
    8453: "Base",
}

ETH_LOGO_URL = "https://coin-images.coingecko.com/coins/images/279/small/ethereum.png"

# Curated ERC-20 tokens on Ethereum mainnet checked for every wallet
KNOWN_TOKENS = [
    {
        "address": "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48",
        "symbol": "USDC",
        "name": "USD Coin",
        "decimals": 6,
        "coingecko_id": "usd-coin",
        "logo_url": "https://coin-images.coingecko.com/coins/images/6319/small/usdc.png",
    },
    {
        "address": "0xdAC17F958D2ee523a2206206994597C13D831ec7",
        "symbol": "USDT",
        "name": "Tether USD",
        "decimals": 6,
        "coingecko_id": "tether",
        "logo_url": "https://coin-images.coingecko.com/coins/images/325/small/Tether.png",
    },
    {
        "address": "0x2260FAC5E5542a773Aa44fBCfeDf7C193bc2C599",
        "symbol": "WBTC",
        "name": "Wrapped Bitcoin",
        "decimals": 8,
        "coingecko_id": "wrapped-bitcoin",
        "logo_url": "https://coin-images.coingecko.com/coins/images/7598/small/wrapped_bitcoin_wbtc.png",
    },
    {
        "address": "0x514910771AF9Ca656af840dff83E8264EcF986CA",
        "symbol": "LINK",
        "name": "Chainlink",
        "decimals": 18,
        "coingecko_id": "chainlink",
        "logo_url": "https://coin-images.coingecko.com/coins/images/877/small/chainlink-new-logo.png",
    },
    {
        "address": "0x7D1AfA7B718fb893dB30A3aBc0Cfc608AaCfeBB0",
        "symbol": "MATIC",
        "name": "Polygon",
        "decimals": 18,
        "coingecko_id": "matic-network",
        "logo_url": "https://coin-images.coingecko.com/coins/images/4713/small/matic-token-icon.png",
    },
    {
        "address": "0x1f9840a85d5aF5bf1D1762F925BDADdC4201F984",
        "symbol": "UNI",
        "name": "Uniswap",
        "decimals": 18,
        "coingecko_id": "uniswap",
        "logo_url": "https://coin-images.coingecko.com/coins/images/12504/small/uniswap-logo.png",
    },
    {
        "address": "0x6B175474E89094C44Da98b954EedeAC495271d0F",
        "symbol": "DAI",
        "name": "Dai Stablecoin",
        "decimals": 18,
        "coingecko_id": "dai",
        "logo_url": "https://coin-images.coingecko.com/coins/images/9956/small/Badge_Dai.png",
    },
    {
        "address": "0xae7ab96520DE3A18E5e111B5EaAb095312D7fE84",
        "symbol": "stETH",
        "name": "Lido Staked ETH",
        "decimals": 18,
        "coingecko_id": "staked-ether",
        "logo_url": "https://coin-images.coingecko.com/coins/images/13442/small/steth_logo.png",
    },
]

# Function selectors of common DEX router swap calls
SWAP_SIGNATURES = (
    "0x38ed1739",  # swapExactTokensForTokens
    "0x7ff36ab5",  # swapExactETHForTokens
    "0x18cbafe5",  # swapExactTokensForETH
    "0xd9627aa4",  # sellToUniswap
    "0x2e95b6c8",  # unoswap
)

# Chart palette
CHART_COLORS = [
    "#3b82f6",  # blue
    "#8b5cf6",  # purple
    "#06b6d4",  # cyan
    "#10b981",  # emerald
    "#f59e0b",  # amber
    "#f43f5e",  # rose
    "#84cc16",  # lime
    "#ec4899",  # pink
    "#14b8a6",  # teal
    "#a855f7",  # violet
]

# Recommendation filter thresholds (minimum balance held)
RECOMMENDATION_MIN_BALANCES = {
    "ETH": 0.01,
    "USDC": 100.0,
    "DAI": 50.0,
}
