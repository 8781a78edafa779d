from unittest import TestCase
from collections import Counter
from nftregistry.client import RegistryClient
from nftregistry.contracts.registry import NonFungibleRegistry
from nftregistry.exceptions import (
    ZeroAddress, Unminted, AlreadyMinted, NotOwner, Unauthorized,
    InsufficientPayment, MintLimitReached, PrivateMethodError, InvalidAccount
)
from nftregistry import config

NULL = config.NULL_ACCOUNT


def deploy(client, mint_price=100, mint_limit=10):
    return client.submit(NonFungibleRegistry, name='nft', signer='admin', constructor_args={
        'collection_name': 'Test Tokens',
        'symbol': 'TT',
        'mint_price': mint_price,
        'mint_limit': mint_limit,
        'base_uri': 'ipfs://tokens/'
    })


class RegistryTestCase(TestCase):
    def setUp(self):
        self.c = RegistryClient(signer='stu')
        self.c.flush()
        self.nft = deploy(self.c)

    def tearDown(self):
        self.c.flush()

    def internal_mint(self, to, token_id):
        self.nft.run_private_function('_mint', to=to, token_id=token_id)

    def assert_balances_consistent(self):
        owners = self.c.raw_driver.items(prefix='nft.owners:')
        balances = self.c.raw_driver.items(prefix='nft.balances:')

        counted = Counter(owners.values())
        recorded = {k.split(':', 1)[1]: v for k, v in balances.items() if v != 0}

        self.assertNotIn(NULL, counted)
        self.assertDictEqual(dict(counted), recorded)


class TestOwnershipLedger(RegistryTestCase):
    def test_balance_of_null_account_fails(self):
        with self.assertRaises(ZeroAddress):
            self.nft.balance_of(account=NULL)

    def test_balance_of_unknown_account_is_zero(self):
        self.assertEqual(self.nft.balance_of(account='0xBEEF'), 0)

    def test_owner_of_unminted_fails(self):
        with self.assertRaises(Unminted):
            self.nft.owner_of(token_id=1337)

    def test_owner_of_negative_or_non_int_id_is_unminted(self):
        with self.assertRaises(Unminted):
            self.nft.owner_of(token_id=-1)

        with self.assertRaises(Unminted):
            self.nft.owner_of(token_id='1')

    def test_internal_mint_sets_owner_and_balance(self):
        self.internal_mint('0xBEEF', 1337)

        self.assertEqual(self.nft.owner_of(token_id=1337), '0xBEEF')
        self.assertEqual(self.nft.balance_of(account='0xBEEF'), 1)
        self.assert_balances_consistent()

    def test_internal_mint_emits_transfer_from_null(self):
        self.internal_mint('0xBEEF', 1337)

        event = self.c.events[-1]
        self.assertEqual(event['event'], 'Transfer')
        self.assertDictEqual(event['data'], {'from': NULL, 'to': '0xBEEF', 'token_id': 1337})

    def test_internal_mint_twice_fails(self):
        self.internal_mint('0xBEEF', 1337)

        with self.assertRaises(AlreadyMinted):
            self.internal_mint('0xCAFE', 1337)

        self.assertEqual(self.nft.owner_of(token_id=1337), '0xBEEF')
        self.assertEqual(self.nft.balance_of(account='0xCAFE'), 0)

    def test_internal_mint_to_null_fails(self):
        with self.assertRaises(ZeroAddress):
            self.internal_mint(NULL, 1337)

        with self.assertRaises(Unminted):
            self.nft.owner_of(token_id=1337)

    def test_internal_mint_is_not_exported(self):
        output = self.c.executor.execute('stu', 'nft', '_mint', kwargs={'to': '0xBEEF', 'token_id': 1})

        self.assertEqual(output['status_code'], 1)
        self.assertIsInstance(output['result'], PrivateMethodError)


class TestDelegation(RegistryTestCase):
    def test_approve_unminted_fails_with_unminted(self):
        with self.assertRaises(Unminted):
            self.nft.approve(operator='0xBEEF', token_id=1337)

        with self.assertRaises(Unminted):
            self.nft.get_approved(token_id=1337)

        self.assertIsNone(self.c.get_var('nft', 'approvals', [1337]))

    def test_approve_by_owner(self):
        self.internal_mint('stu', 1)
        self.nft.approve(operator='0xBEEF', token_id=1)

        self.assertEqual(self.nft.get_approved(token_id=1), '0xBEEF')

        event = self.c.events[-1]
        self.assertEqual(event['event'], 'Approval')
        self.assertDictEqual(event['data'], {'owner': 'stu', 'operator': '0xBEEF', 'token_id': 1})

    def test_approve_by_operator(self):
        self.internal_mint('stu', 1)
        self.nft.set_approval_for_all(operator='raghu', approved=True)

        self.nft.approve(operator='0xBEEF', token_id=1, signer='raghu')

        self.assertEqual(self.nft.get_approved(token_id=1), '0xBEEF')

    def test_approve_by_stranger_fails(self):
        self.internal_mint('stu', 1)

        with self.assertRaises(Unauthorized):
            self.nft.approve(operator='0xBEEF', token_id=1, signer='raghu')

    def test_delegate_cannot_approve(self):
        self.internal_mint('stu', 1)
        self.nft.approve(operator='raghu', token_id=1)

        with self.assertRaises(Unauthorized):
            self.nft.approve(operator='raghu', token_id=1, signer='raghu')

    def test_approve_null_clears_delegate(self):
        self.internal_mint('stu', 1)
        self.nft.approve(operator='0xBEEF', token_id=1)
        self.nft.approve(operator=NULL, token_id=1)

        self.assertEqual(self.nft.get_approved(token_id=1), NULL)

    def test_get_approved_defaults_to_null(self):
        self.internal_mint('stu', 1)
        self.assertEqual(self.nft.get_approved(token_id=1), NULL)

    def test_set_approval_for_all_records_and_emits(self):
        self.assertFalse(self.nft.is_approved_for_all(owner='stu', operator='raghu'))

        self.nft.set_approval_for_all(operator='raghu', approved=True)
        self.assertTrue(self.nft.is_approved_for_all(owner='stu', operator='raghu'))
        self.assertFalse(self.nft.is_approved_for_all(owner='raghu', operator='stu'))

        event = self.c.events[-1]
        self.assertEqual(event['event'], 'ApprovalForAll')
        self.assertDictEqual(event['data'], {'owner': 'stu', 'operator': 'raghu', 'approved': True})

        self.nft.set_approval_for_all(operator='raghu', approved=False)
        self.assertFalse(self.nft.is_approved_for_all(owner='stu', operator='raghu'))


class TestTransfer(RegistryTestCase):
    def test_owner_transfers(self):
        self.internal_mint('stu', 1)
        self.nft.transfer_from(sender='stu', to='0xCAFE', token_id=1)

        self.assertEqual(self.nft.owner_of(token_id=1), '0xCAFE')
        self.assertEqual(self.nft.balance_of(account='stu'), 0)
        self.assertEqual(self.nft.balance_of(account='0xCAFE'), 1)
        self.assert_balances_consistent()

        event = self.c.events[-1]
        self.assertEqual(event['event'], 'Transfer')
        self.assertDictEqual(event['data'], {'from': 'stu', 'to': '0xCAFE', 'token_id': 1})

    def test_approved_delegate_transfers_and_approval_is_cleared(self):
        self.internal_mint('stu', 1337)
        self.nft.approve(operator='0xBEEF', token_id=1337)

        self.nft.transfer_from(sender='stu', to='0xCAFE', token_id=1337, signer='0xBEEF')

        self.assertEqual(self.nft.owner_of(token_id=1337), '0xCAFE')
        self.assertEqual(self.nft.get_approved(token_id=1337), NULL)

    def test_operator_transfers_and_keeps_operator_status(self):
        self.internal_mint('stu', 1)
        self.internal_mint('stu', 2)
        self.nft.set_approval_for_all(operator='raghu', approved=True)

        self.nft.transfer_from(sender='stu', to='0xCAFE', token_id=1, signer='raghu')

        self.assertTrue(self.nft.is_approved_for_all(owner='stu', operator='raghu'))
        self.nft.transfer_from(sender='stu', to='0xCAFE', token_id=2, signer='raghu')

        self.assertEqual(self.nft.balance_of(account='0xCAFE'), 2)
        self.assert_balances_consistent()

    def test_transfer_unminted_fails(self):
        with self.assertRaises(Unminted):
            self.nft.transfer_from(sender='stu', to='0xCAFE', token_id=1)

    def test_transfer_from_wrong_owner_fails(self):
        self.internal_mint('stu', 1)

        with self.assertRaises(NotOwner):
            self.nft.transfer_from(sender='raghu', to='0xCAFE', token_id=1, signer='raghu')

    def test_transfer_to_null_fails(self):
        self.internal_mint('stu', 1)

        with self.assertRaises(ZeroAddress):
            self.nft.transfer_from(sender='stu', to=NULL, token_id=1)

    def test_unauthorized_transfer_fails_for_every_stranger(self):
        self.internal_mint('stu', 1)
        self.internal_mint('raghu', 2)
        self.nft.approve(operator='0xBEEF', token_id=1)

        for token_id, owner in ((1, 'stu'), (2, 'raghu')):
            for stranger in ('colin', '0xCAFE', NULL):
                if stranger == owner:
                    continue
                with self.assertRaises(Unauthorized):
                    self.nft.transfer_from(sender=owner, to='0xCAFE', token_id=token_id, signer=stranger)

        # A delegate of one token has no authority over another
        with self.assertRaises(Unauthorized):
            self.nft.transfer_from(sender='raghu', to='0xCAFE', token_id=2, signer='0xBEEF')

        self.assertEqual(self.nft.owner_of(token_id=1), 'stu')
        self.assertEqual(self.nft.owner_of(token_id=2), 'raghu')

    def test_self_transfer_keeps_balance(self):
        self.internal_mint('stu', 1)
        self.nft.transfer_from(sender='stu', to='stu', token_id=1)

        self.assertEqual(self.nft.balance_of(account='stu'), 1)
        self.assert_balances_consistent()

    def test_delegate_loses_authority_after_transfer(self):
        self.internal_mint('stu', 1)
        self.nft.approve(operator='0xBEEF', token_id=1)
        self.nft.transfer_from(sender='stu', to='raghu', token_id=1)

        with self.assertRaises(Unauthorized):
            self.nft.transfer_from(sender='raghu', to='0xBEEF', token_id=1, signer='0xBEEF')

    def test_safe_transfer_to_plain_account_is_a_transfer(self):
        self.internal_mint('stu', 1)
        self.nft.safe_transfer_from(sender='stu', to='0xCAFE', token_id=1, data=b'hello')

        self.assertEqual(self.nft.owner_of(token_id=1), '0xCAFE')
        self.assert_balances_consistent()


class TestMint(RegistryTestCase):
    def test_mint_to_beef(self):
        token_id = self.nft.mint(to='0xBEEF', value=100)

        self.assertEqual(token_id, 0)
        self.assertEqual(self.nft.owner_of(token_id=0), '0xBEEF')
        self.assertEqual(self.nft.balance_of(account='0xBEEF'), 1)

        names = [e['event'] for e in self.c.events if e['contract'] == 'nft']
        self.assertEqual(names[-2:], ['Transfer', 'Mint'])
        self.assertDictEqual(self.c.events[-1]['data'], {'to': '0xBEEF', 'token_id': 0})

    def test_mint_ids_are_sequential(self):
        ids = [self.nft.mint(to='0xBEEF', value=100) for _ in range(3)]

        self.assertListEqual(ids, [0, 1, 2])
        self.assertEqual(self.nft.total_minted(), 3)
        self.assert_balances_consistent()

    def test_mint_with_insufficient_payment_fails(self):
        with self.assertRaises(InsufficientPayment):
            self.nft.mint(to='0xBEEF', value=99)

        self.assertEqual(self.nft.total_minted(), 0)
        self.assertEqual(self.nft.proceeds(), 0)

    def test_mint_with_non_numeric_payment_fails(self):
        for payment in (None, '100', True, [100]):
            with self.assertRaises(InsufficientPayment):
                self.nft.mint(to='0xBEEF', value=payment)

        self.assertEqual(self.nft.total_minted(), 0)
        self.assertEqual(self.nft.proceeds(), 0)

    def test_mint_overpayment_is_kept(self):
        self.nft.mint(to='0xBEEF', value=250)
        self.assertEqual(self.nft.proceeds(), 250)

    def test_mint_to_null_fails_and_does_not_advance_counter(self):
        with self.assertRaises(ZeroAddress):
            self.nft.mint(to=NULL, value=100)

        self.assertEqual(self.nft.total_minted(), 0)
        self.assertEqual(self.nft.proceeds(), 0)

    def test_mint_limit(self):
        self.c.flush()
        self.nft = deploy(self.c, mint_limit=2)

        self.assertEqual(self.nft.mint(to='0xBEEF', value=100), 0)
        self.assertEqual(self.nft.mint(to='0xBEEF', value=100), 1)

        with self.assertRaises(MintLimitReached):
            self.nft.mint(to='0xBEEF', value=100)

        self.assertEqual(self.nft.total_minted(), 2)

    def test_payment_is_checked_before_the_limit(self):
        self.c.flush()
        self.nft = deploy(self.c, mint_limit=0)

        with self.assertRaises(InsufficientPayment):
            self.nft.mint(to='0xBEEF', value=0)

        with self.assertRaises(MintLimitReached):
            self.nft.mint(to='0xBEEF', value=100)

    def test_minted_id_never_reissued_after_internal_mint_collision(self):
        self.internal_mint('stu', 0)

        with self.assertRaises(AlreadyMinted):
            self.nft.mint(to='0xBEEF', value=100)

        self.assertEqual(self.nft.owner_of(token_id=0), 'stu')
        self.assertEqual(self.nft.total_minted(), 0)


class TestAccountNames(RegistryTestCase):
    BAD_NAMES = ('alice.eth', 'did:key:abc', '', 42)

    def test_balance_of_unkeyable_account_fails(self):
        for account in self.BAD_NAMES:
            with self.assertRaises(InvalidAccount):
                self.nft.balance_of(account=account)

    def test_mint_to_unkeyable_account_fails(self):
        for account in self.BAD_NAMES:
            with self.assertRaises(InvalidAccount):
                self.nft.mint(to=account, value=100)

        self.assertEqual(self.nft.total_minted(), 0)
        self.assertEqual(self.nft.proceeds(), 0)

    def test_transfer_to_unkeyable_account_fails(self):
        self.internal_mint('stu', 1)

        with self.assertRaises(InvalidAccount):
            self.nft.transfer_from(sender='stu', to='alice.eth', token_id=1)

        self.assertEqual(self.nft.owner_of(token_id=1), 'stu')
        self.assert_balances_consistent()

    def test_unkeyable_caller_has_no_authority(self):
        self.internal_mint('stu', 1)

        with self.assertRaises(Unauthorized):
            self.nft.transfer_from(sender='stu', to='0xCAFE', token_id=1, signer='alice.eth')

        with self.assertRaises(InvalidAccount):
            self.nft.set_approval_for_all(operator='raghu', approved=True, signer='alice.eth')

    def test_unkeyable_operator_fails(self):
        self.internal_mint('stu', 1)

        with self.assertRaises(InvalidAccount):
            self.nft.approve(operator='did:key:abc', token_id=1)

        with self.assertRaises(InvalidAccount):
            self.nft.set_approval_for_all(operator='alice.eth', approved=True)

        self.assertEqual(self.nft.get_approved(token_id=1), NULL)
        self.assertFalse(self.nft.is_approved_for_all(owner='stu', operator='alice.eth'))

    def test_operator_grant_to_null_is_recorded(self):
        self.nft.set_approval_for_all(operator=NULL, approved=True)
        self.assertTrue(self.nft.is_approved_for_all(owner='stu', operator=NULL))


class TestExecutorRollback(RegistryTestCase):
    def test_failed_call_leaves_no_writes_or_events(self):
        self.internal_mint('stu', 1)
        before = dict(self.c.raw_driver.driver.db)
        events = len(self.c.events)

        output = self.c.executor.execute('raghu', 'nft', 'transfer_from',
                                         kwargs={'sender': 'stu', 'to': 'raghu', 'token_id': 1},
                                         auto_commit=True)

        self.assertEqual(output['status_code'], 1)
        self.assertIsInstance(output['result'], Unauthorized)
        self.assertListEqual(output['events'], [])
        self.assertDictEqual(output['writes'], {})
        self.assertDictEqual(dict(self.c.raw_driver.driver.db), before)
        self.assertEqual(len(self.c.events), events)
