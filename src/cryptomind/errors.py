"""
Exception types shared by the API clients and the dashboard API
"""


class CryptoMindError(Exception):
    """Base class for CryptoMind errors"""


class InvalidRequestError(CryptoMindError, ValueError):
    """Request payload failed validation"""


class InvalidAddressError(InvalidRequestError):
    """Address is not a 0x-prefixed 40 hex character Ethereum address"""

    def __init__(self, address: str = ""):
        super().__init__("Invalid Ethereum address")
        self.address = address


class UpstreamAPIError(CryptoMindError):
    """A third-party API (CoinGecko, Etherscan) returned an error"""

    def __init__(self, service: str, message: str, status_code: int = None):
        super().__init__(f"{service} API error: {message}")
        self.service = service
        self.status_code = status_code


class AIUnavailableError(CryptoMindError):
    """The LLM is not configured or could not be initialised"""
