import unittest
from unittest.mock import MagicMock
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src'))

from cryptomind.errors import InvalidAddressError
from cryptomind.models import Transaction, TransactionType
from cryptomind.transactions import get_labeled_transactions

WALLET = "0x" + "ab" * 20
OTHER = "0x" + "cd" * 20


def make_txs(count):
    return [
        Transaction(hash=f"0x{i}", from_address=WALLET if i % 2 else OTHER,
                    to_address=OTHER if i % 2 else WALLET, value=str(10 ** 18))
        for i in range(count)
    ]


class TestLabeledTransactions(unittest.TestCase):
    def setUp(self):
        self.etherscan = MagicMock()
        self.advisor = MagicMock()
        self.advisor.label_transaction.side_effect = lambda tx, addr: f"AI label {tx.hash}"

    def test_first_five_labelled_by_ai(self):
        self.etherscan.get_transactions.return_value = make_txs(8)

        result = get_labeled_transactions(WALLET, self.etherscan, self.advisor)

        self.etherscan.get_transactions.assert_called_once_with(WALLET, 10)
        self.assertEqual([tx.hash for tx in result], [f"0x{i}" for i in range(8)])
        self.assertEqual(self.advisor.label_transaction.call_count, 5)
        self.assertEqual(result[0].label, "AI label 0x0")
        self.assertEqual(result[5].label, "Sent 1.0000 ETH")
        self.assertEqual(result[6].label, "Received 1.0000 ETH")

    def test_types_are_inferred(self):
        self.etherscan.get_transactions.return_value = make_txs(2)

        result = get_labeled_transactions(WALLET, self.etherscan, self.advisor)

        self.assertEqual(result[0].type, TransactionType.RECEIVE)
        self.assertEqual(result[1].type, TransactionType.SEND)
        # The labeller sees the inferred type
        labelled_tx = self.advisor.label_transaction.call_args_list[0][0][0]
        self.assertNotEqual(labelled_tx.type, TransactionType.UNKNOWN)

    def test_limits_are_configurable(self):
        self.etherscan.get_transactions.return_value = make_txs(3)

        result = get_labeled_transactions(WALLET, self.etherscan, self.advisor,
                                          limit=3, ai_label_limit=0)

        self.etherscan.get_transactions.assert_called_once_with(WALLET, 3)
        self.advisor.label_transaction.assert_not_called()
        self.assertTrue(all(tx.label for tx in result))

    def test_empty_history(self):
        self.etherscan.get_transactions.return_value = []
        self.assertEqual(get_labeled_transactions(WALLET, self.etherscan, self.advisor), [])

    def test_invalid_address(self):
        with self.assertRaises(InvalidAddressError):
            get_labeled_transactions("0x123", self.etherscan, self.advisor)
        self.etherscan.get_transactions.assert_not_called()


if __name__ == '__main__':
    unittest.main()
