import unittest
from multisig_vault.owners import OwnerRegistry
from multisig_vault.config import WalletConfig
from multisig_vault.exceptions import InvalidConfiguration
from multisig_vault.identity import OwnerKey, NULL_IDENTITY

class TestOwnerRegistry(unittest.TestCase):

    def setUp(self):
        """Set up test fixtures"""
        self.owners = [OwnerKey.generate_key_pair()[1] for _ in range(3)]

    def test_registry_creation(self):
        """Test valid registry construction"""
        registry = OwnerRegistry(self.owners, 2)
        self.assertEqual(registry.owner_count(), 3)
        self.assertEqual(registry.threshold, 2)
        self.assertEqual(registry.owners, tuple(self.owners))

    def test_membership(self):
        registry = OwnerRegistry(self.owners, 1)
        for owner in self.owners:
            self.assertTrue(registry.is_owner(owner))
        self.assertFalse(registry.is_owner("invalid_key"))
        self.assertFalse(registry.is_owner(None))
        self.assertFalse(registry.is_owner(["unhashable"]))
        self.assertIn(self.owners[0], registry)

    def test_threshold_bounds(self):
        """Threshold must satisfy 1 <= threshold <= owners"""
        OwnerRegistry(self.owners, 1)
        OwnerRegistry(self.owners, 3)

        for threshold in (0, -1, 4):
            with self.assertRaises(InvalidConfiguration):
                OwnerRegistry(self.owners, threshold)

        with self.assertRaises(InvalidConfiguration):
            OwnerRegistry(self.owners, 1.5)
        with self.assertRaises(InvalidConfiguration):
            OwnerRegistry(self.owners, True)

    def test_empty_owner_list(self):
        with self.assertRaises(InvalidConfiguration):
            OwnerRegistry([], 1)

    def test_null_owner(self):
        for null in (NULL_IDENTITY, "", None, "0x0", "0000"):
            with self.assertRaises(InvalidConfiguration):
                OwnerRegistry([self.owners[0], null], 1)

    def test_duplicate_owner(self):
        with self.assertRaises(InvalidConfiguration) as ctx:
            OwnerRegistry([self.owners[0], self.owners[1], self.owners[0]], 2)
        self.assertEqual(ctx.exception.details['position'], 2)

    def test_registry_is_immutable(self):
        registry = OwnerRegistry(self.owners, 2)
        with self.assertRaises(AttributeError):
            registry.threshold = 1
        with self.assertRaises(AttributeError):
            registry.extra = 1

        self.owners.append("ab" * 33)
        self.assertEqual(registry.owner_count(), 3)

class TestWalletConfig(unittest.TestCase):

    def setUp(self):
        self.owners = [OwnerKey.generate_key_pair()[1] for _ in range(4)]

    def test_presets(self):
        self.assertEqual(WalletConfig.unanimous(self.owners).threshold, 4)
        self.assertEqual(WalletConfig.majority(self.owners).threshold, 3)
        self.assertEqual(WalletConfig.majority(self.owners[:3]).threshold, 2)
        self.assertEqual(WalletConfig.majority(self.owners[:1]).threshold, 1)

    def test_invalid_config(self):
        with self.assertRaises(InvalidConfiguration):
            WalletConfig(owners=self.owners, threshold=5)
        with self.assertRaises(InvalidConfiguration):
            WalletConfig()

    def test_dict_round_trip(self):
        config = WalletConfig(owners=self.owners, threshold=2)
        restored = WalletConfig.from_dict(config.to_dict())
        self.assertEqual(restored, config)
        self.assertEqual(restored.wallet_id(), config.wallet_id())

    def test_from_dict_validation(self):
        with self.assertRaises(InvalidConfiguration):
            WalletConfig.from_dict({'owners': 'abc', 'threshold': 1})
        with self.assertRaises(InvalidConfiguration):
            WalletConfig.from_dict(['not', 'a', 'dict'])

        # Missing threshold defaults to a majority
        config = WalletConfig.from_dict({'owners': self.owners})
        self.assertEqual(config.threshold, 3)

    def test_wallet_id_depends_on_threshold(self):
        a = WalletConfig(owners=self.owners, threshold=2)
        b = WalletConfig(owners=self.owners, threshold=3)
        self.assertNotEqual(a.wallet_id(), b.wallet_id())

if __name__ == '__main__':
    unittest.main()
