"""
AI Advisor Module
Handles interactions with Google's Gemini AI to generate portfolio summaries,
chat answers and plain-English transaction labels.
"""

import logging
from datetime import datetime
from typing import Iterable, Iterator, List, Optional

import google.generativeai as genai

from .constants import (
    DEFAULT_GEMINI_MODEL, SUMMARY_MAX_TOKENS, CHAT_MAX_TOKENS, LABEL_MAX_TOKENS,
    SUMMARY_TEMPERATURE, CHAT_TEMPERATURE, LABEL_TEMPERATURE, CHAT_HISTORY_LIMIT
)
from .errors import AIUnavailableError
from .etherscan import wei_to_eth_amount
from .models import ChatMessage, Transaction, TransactionType, WalletState

logger = logging.getLogger(__name__)

SUMMARY_SYSTEM_PROMPT = """You are a friendly, knowledgeable crypto portfolio analyst.
You explain things in plain English, avoiding jargon when possible.
Always be honest and objective. Do NOT give specific financial advice or tell users to buy/sell.
Keep your summary to exactly 3-4 sentences, conversational and insightful."""

CHAT_RULES = """IMPORTANT RULES:
- Always add a disclaimer that you are NOT providing financial advice for investment decisions
- Be concise - keep responses under 3 paragraphs unless a detailed explanation is necessary
- Use emojis sparingly but effectively to make responses friendly
- When referencing specific coins, always use their common name AND ticker (e.g., "Ethereum (ETH)")
- If the user asks about something risky, always mention the risks clearly"""


def _signed(value: float, decimals: int = 2) -> str:
    return f"{'+' if value >= 0 else ''}{value:.{decimals}f}"


def _short_address(address: Optional[str]) -> str:
    return f"{(address or '')[:10]}..."


def build_summary_prompt(wallet: WalletState) -> str:
    """User prompt describing the wallet for the 3-4 sentence summary"""
    tokens = sorted(wallet.tokens, key=lambda t: t.usd_value, reverse=True)
    top = tokens[0] if tokens else None
    if wallet.total_usd_value > 0 and top:
        top_percent = f"{top.usd_value / wallet.total_usd_value * 100:.1f}"
    else:
        top_percent = "0"

    holdings = ", ".join(
        f"{t.symbol}: {t.balance_amount:.4f} tokens worth ${t.usd_value:.2f} "
        f"({t.price_change_24h:.1f}% 24h change)"
        for t in tokens if t.usd_value > 0
    )

    return f"""Analyze this crypto wallet and provide a 3-4 sentence plain English summary:

Wallet: {_short_address(wallet.address)}
Network: {wallet.chain_name}
Total Portfolio Value: ${wallet.total_usd_value:.2f}
24h Change: {wallet.total_change_24h:.2f}%
Top Holding: {top.symbol if top else 'N/A'} ({top_percent}% of portfolio)
Holdings: {holdings or 'No token data available'}

Write a concise, plain-English summary covering: total value, top holdings, 24h performance, and one observation about portfolio composition. Be conversational and friendly."""


def build_chat_system_prompt(wallet: Optional[WalletState], today: Optional[datetime] = None) -> str:
    """System instruction for the chat assistant, personalised when a wallet is given"""
    today = today or datetime.now()
    date_text = f"{today.strftime('%A')}, {today.strftime('%B')} {today.day}, {today.year}"

    prompt = f"""You are CryptoMind AI, a friendly and knowledgeable crypto assistant.
You explain cryptocurrency, DeFi, and blockchain concepts in plain English without using excessive jargon.
You are helpful, direct, and honest. Today is {date_text}.

{CHAT_RULES}"""

    if wallet is None:
        return prompt + "\n\nNote: No wallet is currently connected. Give general crypto advice."

    top_holdings = "\n  - ".join(
        f"{t.symbol}: {t.balance_amount:.4f} tokens = ${t.usd_value:.2f} USD "
        f"({_signed(t.price_change_24h)}% 24h)"
        for t in sorted(wallet.tokens, key=lambda t: t.usd_value, reverse=True)[:5]
    )

    return prompt + f"""

WALLET CONTEXT (for personalized responses):
- Address: {_short_address(wallet.address)} on {wallet.chain_name}
- Total Portfolio Value: ${wallet.total_usd_value:.2f} USD
- 24h Change: {_signed(wallet.total_change_24h)}%
- Holdings:
  - {top_holdings or 'No token data'}

Use this wallet data to give personalized, relevant answers. When users ask "should I..." questions, reference their actual holdings."""


def build_label_prompt(tx: Transaction, wallet_address: str) -> str:
    is_outgoing = tx.from_address.lower() == wallet_address.lower()
    eth_value = f"{wei_to_eth_amount(tx.value):.6f}".rstrip('0').rstrip('.') or '0'

    lines = [
        "Describe this Ethereum transaction in one short, plain-English sentence (max 12 words):",
        "",
        f"Direction: {'Outgoing' if is_outgoing else 'Incoming'}",
        f"ETH Value: {eth_value} ETH",
    ]
    if tx.function_name:
        lines.append(f"Contract Function: {tx.function_name}")
    lines.append('Has contract interaction data' if tx.has_input else 'Simple ETH transfer')
    lines.append(f"Status: {'FAILED' if tx.failed else 'Success'}")
    lines.append("")
    lines.append('Example outputs: "Sent 0.5 ETH to a DeFi swap contract", '
                 '"Received 1.2 ETH payment", "Failed contract interaction"')
    lines.append("Label:")
    return "\n".join(lines)


def fallback_label(tx: Transaction, wallet_address: str) -> str:
    """Rule-based label used when the LLM is unavailable or fails"""
    is_outgoing = tx.from_address.lower() == wallet_address.lower()
    eth_value = float(wei_to_eth_amount(tx.value))

    if tx.failed:
        return 'Failed transaction'
    if tx.type == TransactionType.SWAP:
        return 'Swapped tokens via DeFi protocol'
    if tx.type == TransactionType.CONTRACT:
        return 'Interacted with smart contract'
    if is_outgoing and eth_value > 0:
        return f"Sent {eth_value:.4f} ETH"
    if not is_outgoing and eth_value > 0:
        return f"Received {eth_value:.4f} ETH"
    return 'Contract interaction'


def prepare_chat_history(messages: Iterable) -> List[ChatMessage]:
    """
    Validate raw chat messages and keep the most recent ones.

    Messages without a known role or with non-string content are dropped.
    """
    valid = []
    for m in messages:
        if not isinstance(m, dict):
            continue
        role = m.get('role')
        content = m.get('content')
        if role not in ('user', 'assistant') or not isinstance(content, str) or not content:
            continue
        valid.append(ChatMessage(role=role, content=content))
    history = valid[-CHAT_HISTORY_LIMIT:]

    # Gemini conversations have to open with a user turn
    while history and history[0].role != 'user':
        history.pop(0)
    return history


def _chunk_text(chunk) -> str:
    try:
        return chunk.text or ""
    except ValueError:
        # Chunk without text parts (e.g. blocked by safety filters)
        return ""


class AIAdvisor:
    """
    Manages interactions with Gemini AI Model for portfolio insights.
    """

    def __init__(self, api_key: Optional[str], model_name: str = DEFAULT_GEMINI_MODEL):
        """
        Initialize the AI Advisor.

        Args:
            api_key: Google Generative AI API Key
            model_name: Model version to use (e.g. 'gemini-1.5-flash')
        """
        self.api_key = api_key
        self.model_name = model_name
        self.configured = False
        self._configure_api()

    def _configure_api(self):
        """Configure the Gemini API with provided key"""
        if not self.api_key:
            logger.warning("No API Key provided for AI Advisor")
            return

        try:
            genai.configure(api_key=self.api_key)
            self.configured = True
        except Exception as e:
            logger.error(f"Failed to configure Gemini API: {e}")

    @property
    def available(self) -> bool:
        return self.configured

    def _get_model(self, system_instruction: Optional[str] = None):
        if not self.configured:
            raise AIUnavailableError("Gemini API key is not configured")
        return genai.GenerativeModel(self.model_name, system_instruction=system_instruction)

    def _stream(self, response, context: str) -> Iterator[str]:
        try:
            for chunk in response:
                text = _chunk_text(chunk)
                if text:
                    yield text
        except Exception as e:
            logger.error(f"[{context}] Stream error: {e}")

    def stream_portfolio_summary(self, wallet: WalletState) -> Iterator[str]:
        """
        Start a streamed 3-4 sentence summary of the wallet.

        The request is sent before returning, so configuration and request
        errors raise here; errors mid-stream end the stream quietly.
        """
        model = self._get_model(SUMMARY_SYSTEM_PROMPT)
        response = model.generate_content(
            build_summary_prompt(wallet),
            generation_config=genai.types.GenerationConfig(
                max_output_tokens=SUMMARY_MAX_TOKENS,
                temperature=SUMMARY_TEMPERATURE,
            ),
            stream=True,
        )
        return self._stream(response, "AI Summary")

    def stream_chat_response(self,
                             messages: List[ChatMessage],
                             wallet: Optional[WalletState]) -> Iterator[str]:
        """Start a streamed chat reply given the conversation so far"""
        model = self._get_model(build_chat_system_prompt(wallet))
        contents = [
            {'role': 'model' if m.role == 'assistant' else 'user', 'parts': [m.content]}
            for m in messages
        ]

        logger.info(f"Sending chat request to {self.model_name} ({len(contents)} messages)")
        response = model.generate_content(
            contents,
            generation_config=genai.types.GenerationConfig(
                max_output_tokens=CHAT_MAX_TOKENS,
                temperature=CHAT_TEMPERATURE,
            ),
            stream=True,
        )
        return self._stream(response, "Chat Stream")

    def label_transaction(self, tx: Transaction, wallet_address: str) -> str:
        """Short LLM description of a transaction, falling back to rules"""
        if not self.configured:
            return fallback_label(tx, wallet_address)

        try:
            model = self._get_model()
            response = model.generate_content(
                build_label_prompt(tx, wallet_address),
                generation_config=genai.types.GenerationConfig(
                    max_output_tokens=LABEL_MAX_TOKENS,
                    temperature=LABEL_TEMPERATURE,
                ),
            )
            label = _chunk_text(response).strip()
            return label or fallback_label(tx, wallet_address)
        except Exception as e:
            logger.error(f"Transaction label error for {tx.hash}: {e}")
            return fallback_label(tx, wallet_address)
