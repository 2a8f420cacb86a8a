import unittest
from dataclasses import FrozenInstanceError
from multisig_vault.ledger import TransactionLedger, TransactionStatus
from multisig_vault.exceptions import NotFound

class TestTransactionLedger(unittest.TestCase):

    def setUp(self):
        self.ledger = TransactionLedger()

    def test_append_assigns_sequential_indices(self):
        self.assertEqual(self.ledger.count(), 0)
        self.assertEqual(self.ledger.append("aa" * 20, 5, b""), 0)
        self.assertEqual(self.ledger.append("bb" * 20, 0, b"\x01\x02"), 1)
        self.assertEqual(self.ledger.count(), 2)
        self.assertEqual(len(self.ledger), 2)

    def test_new_record_is_pending(self):
        index = self.ledger.append("aa" * 20, 5, b"call")
        tx = self.ledger.get(index)

        self.assertEqual(tx.index, 0)
        self.assertEqual(tx.target, "aa" * 20)
        self.assertEqual(tx.value, 5)
        self.assertEqual(tx.payload, b"call")
        self.assertEqual(tx.status, TransactionStatus.PENDING)
        self.assertFalse(tx.executed)
        self.assertEqual(tx.confirmation_count, 0)
        self.assertEqual(tx.confirmations, ())

    def test_get_out_of_range(self):
        with self.assertRaises(NotFound):
            self.ledger.get(0)

        self.ledger.append("aa" * 20, 1, b"")
        for index in (1, -1, "0", None, True):
            with self.assertRaises(NotFound):
                self.ledger.get(index)

    def test_snapshot_is_detached(self):
        index = self.ledger.append("aa" * 20, 1, b"")
        before = self.ledger.get(index)

        self.ledger.add_confirmation(index, "owner-a")
        self.ledger.mark_executed(index)

        self.assertEqual(before.confirmation_count, 0)
        self.assertFalse(before.executed)
        self.assertTrue(self.ledger.get(index).executed)

        with self.assertRaises(FrozenInstanceError):
            before.value = 100

    def test_confirmations_keep_order(self):
        index = self.ledger.append("aa" * 20, 1, b"")
        self.assertEqual(self.ledger.add_confirmation(index, "owner-b"), 1)
        self.assertEqual(self.ledger.add_confirmation(index, "owner-a"), 2)

        self.assertEqual(self.ledger.confirmations(index), ("owner-b", "owner-a"))
        self.assertTrue(self.ledger.is_confirmed(index, "owner-a"))
        self.assertFalse(self.ledger.is_confirmed(index, "owner-c"))
        self.assertEqual(self.ledger.confirmation_count(index), 2)

    def test_indices_filtering(self):
        for _ in range(3):
            self.ledger.append("aa" * 20, 1, b"")
        self.ledger.mark_executed(1)

        self.assertEqual(self.ledger.indices(), [0, 1, 2])
        self.assertEqual(self.ledger.indices(executed=False), [0, 2])
        self.assertEqual(self.ledger.indices(pending=False), [1])
        self.assertEqual(self.ledger.indices(pending=False, executed=False), [])

    def test_to_dict(self):
        index = self.ledger.append("aa" * 20, 7, b"\xde\xad")
        self.ledger.add_confirmation(index, "owner-a")
        data = self.ledger.get(index).to_dict()

        self.assertEqual(data['payload'], "dead")
        self.assertEqual(data['status'], "pending")
        self.assertEqual(data['confirmations'], ["owner-a"])
        self.assertEqual(data['confirmation_count'], 1)

if __name__ == '__main__':
    unittest.main()
