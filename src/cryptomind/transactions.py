"""
Transaction history pipeline: fetch, classify and label recent transactions
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import List

from .ai_advisor import AIAdvisor, fallback_label
from .constants import DEFAULT_AI_LABEL_LIMIT, DEFAULT_TRANSACTION_LIMIT
from .errors import InvalidAddressError
from .etherscan import EtherscanClient, infer_transaction_type
from .models import Transaction
from .wallet import is_valid_address

logger = logging.getLogger(__name__)


def get_labeled_transactions(address: str,
                             etherscan: EtherscanClient,
                             advisor: AIAdvisor,
                             limit: int = DEFAULT_TRANSACTION_LIMIT,
                             ai_label_limit: int = DEFAULT_AI_LABEL_LIMIT) -> List[Transaction]:
    """
    Fetch the newest transactions of an address with type and label set.

    Only the first ai_label_limit transactions are labelled by the LLM (in
    parallel); the rest get rule-based labels. Order is preserved.

    Raises:
        InvalidAddressError: if the address is malformed
    """
    if not is_valid_address(address):
        raise InvalidAddressError(address)

    raw = etherscan.get_transactions(address, limit)
    if not raw:
        return []

    typed = [replace(tx, type=infer_transaction_type(tx, address)) for tx in raw]
    to_label = typed[:ai_label_limit]
    rest = typed[ai_label_limit:]

    labeled_top: List[Transaction] = []
    if to_label:
        with ThreadPoolExecutor(max_workers=len(to_label)) as executor:
            labels = list(executor.map(lambda tx: advisor.label_transaction(tx, address), to_label))
        labeled_top = [replace(tx, label=label) for tx, label in zip(to_label, labels)]

    labeled_rest = [replace(tx, label=fallback_label(tx, address)) for tx in rest]

    logger.info(f"Labelled {len(typed)} transactions for {address} ({len(labeled_top)} via AI)")
    return labeled_top + labeled_rest
