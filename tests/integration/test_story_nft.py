from unittest import TestCase
from storyledger.client import ContractingClient
from storyledger.db.driver import ContractDriver
from storyledger.exceptions import (
    Unauthorized, NotFound, MintLimitReached, InvalidMetadata,
    NotTokenOwner, SelfTransfer, TokenDoesNotExist, CompilationException
)

STATE_THIEF = '''
@export
def steal():
    Variable(contract='story_nft', name='admin').set('mallory')
    Hash('story_nft', 'owners')[1] = 'mallory'
'''

STATE_SHADOW = '''
admin = Variable()
owners = Hash()

@export
def steal():
    admin.set('mallory')
    owners[1] = 'mallory'
'''


class TestStoryNFT(TestCase):
    def setUp(self):
        self.client = ContractingClient(signer='alice', driver=ContractDriver())
        self.client.flush()

        self.story = self.client.submit_story_nft()

    def tearDown(self):
        self.client.flush()

    def mint(self, title='A', description='B', media_uri='uri1', signer='alice'):
        return self.story.mint(title=title, description=description, media_uri=media_uri, signer=signer)

    def test_deployer_is_admin(self):
        self.assertEqual(self.story.get_admin(), 'alice')

    def test_nothing_minted_after_deploy(self):
        self.assertEqual(self.story.get_total_minted(), 0)
        self.assertEqual(self.story.get_mint_capacity(), 1000)

    def test_mint_returns_first_id(self):
        self.assertEqual(self.mint(), 1)

    def test_mint_sets_owner_and_metadata(self):
        self.mint()

        self.assertEqual(self.story.get_owner(token_id=1), 'alice')
        self.assertEqual(self.story.get_metadata(token_id=1), {
            'title': 'A',
            'description': 'B',
            'media_uri': 'uri1',
            'creator': 'alice'
        })

    def test_mint_ids_are_sequential(self):
        ids = [self.mint(signer='alice'), self.mint(signer='bob'), self.mint(signer='carol')]

        self.assertEqual(ids, [1, 2, 3])
        self.assertEqual(self.story.get_total_minted(), 3)
        self.assertEqual(self.story.get_owner(token_id=2), 'bob')

    def test_anyone_can_mint(self):
        self.mint(signer='dave')

        self.assertEqual(self.story.get_metadata(token_id=1)['creator'], 'dave')

    def test_empty_title_rejected(self):
        with self.assertRaises(InvalidMetadata):
            self.mint(title='')

        self.assertEqual(self.story.get_total_minted(), 0)

    def test_empty_description_rejected(self):
        with self.assertRaises(InvalidMetadata):
            self.mint(description='')

        self.assertEqual(self.story.get_total_minted(), 0)

    def test_empty_media_uri_rejected(self):
        with self.assertRaises(InvalidMetadata):
            self.mint(media_uri='')

        self.assertEqual(self.story.get_total_minted(), 0)

    def test_fields_at_max_length_accepted(self):
        token_id = self.mint(title='t' * 100, description='d' * 500, media_uri='u' * 256)

        self.assertEqual(token_id, 1)

    def test_title_too_long_rejected(self):
        with self.assertRaises(InvalidMetadata):
            self.mint(title='t' * 101)

        self.assertEqual(self.story.get_total_minted(), 0)

    def test_description_too_long_rejected(self):
        with self.assertRaises(InvalidMetadata):
            self.mint(description='d' * 501)

    def test_media_uri_too_long_rejected(self):
        with self.assertRaises(InvalidMetadata):
            self.mint(media_uri='u' * 257)

    def test_non_string_field_rejected(self):
        with self.assertRaises(InvalidMetadata):
            self.mint(title=5)

    def test_failed_mint_writes_nothing(self):
        self.mint()

        output = self.client.executor.execute('alice', 'story_nft', 'mint',
                                              kwargs={'title': 'A', 'description': '', 'media_uri': 'uri'})

        self.assertEqual(output['status_code'], 1)
        self.assertEqual(output['error_code'], 406)
        self.assertEqual(output['writes'], {})
        self.assertIsNone(self.story.get_owner(token_id=2))
        self.assertEqual(self.story.get_total_minted(), 1)

    def test_mint_limit_reached(self):
        for i in range(1000):
            self.mint(title='Story {}'.format(i))

        self.assertEqual(self.story.get_total_minted(), 1000)

        with self.assertRaises(MintLimitReached):
            self.mint()

        self.assertEqual(self.story.get_total_minted(), 1000)
        self.assertIsNone(self.story.get_owner(token_id=1001))

    def test_small_capacity(self):
        small = self.client.submit_story_nft(capacity=2, name='small')

        small.mint(title='A', description='B', media_uri='uri')
        small.mint(title='A', description='B', media_uri='uri')

        output = self.client.executor.execute('alice', 'small', 'mint',
                                              kwargs={'title': 'A', 'description': 'B', 'media_uri': 'uri'})

        self.assertEqual(output['error_code'], 405)
        self.assertEqual(small.get_total_minted(), 2)

    def test_zero_capacity_never_mints(self):
        empty = self.client.submit_story_nft(capacity=0, name='empty')

        with self.assertRaises(MintLimitReached):
            empty.mint(title='A', description='B', media_uri='uri')

    def test_negative_capacity_rejected(self):
        with self.assertRaises(AssertionError):
            self.client.submit_story_nft(capacity=-1, name='broken')

        self.assertNotIn('broken', self.client.get_contracts())

    def test_owner_transfers(self):
        self.mint()

        self.story.transfer(token_id=1, sender='alice', recipient='bob')

        self.assertEqual(self.story.get_owner(token_id=1), 'bob')

    def test_transfer_keeps_creator(self):
        self.mint()

        self.story.transfer(token_id=1, sender='alice', recipient='bob')

        self.assertEqual(self.story.get_metadata(token_id=1)['creator'], 'alice')

    def test_new_owner_can_transfer_again(self):
        self.mint()

        self.story.transfer(token_id=1, sender='alice', recipient='bob')
        self.story.transfer(token_id=1, sender='bob', recipient='carol', signer='bob')

        self.assertEqual(self.story.get_owner(token_id=1), 'carol')

    def test_transfer_by_third_party_unauthorized(self):
        self.mint()

        with self.assertRaises(Unauthorized):
            self.story.transfer(token_id=1, sender='alice', recipient='bob', signer='carol')

        self.assertEqual(self.story.get_owner(token_id=1), 'alice')

    def test_transfer_by_admin_for_someone_else_unauthorized(self):
        self.mint(signer='bob')

        with self.assertRaises(Unauthorized):
            self.story.transfer(token_id=1, sender='bob', recipient='carol', signer='alice')

        self.assertEqual(self.story.get_owner(token_id=1), 'bob')

    def test_transfer_error_code_unauthorized(self):
        self.mint()

        output = self.client.executor.execute('carol', 'story_nft', 'transfer',
                                              kwargs={'token_id': 1, 'sender': 'alice', 'recipient': 'bob'})

        self.assertEqual(output['error_code'], 403)

    def test_transfer_of_token_not_owned(self):
        self.mint()

        output = self.client.executor.execute('bob', 'story_nft', 'transfer',
                                              kwargs={'token_id': 1, 'sender': 'bob', 'recipient': 'carol'})

        self.assertIsInstance(output['result'], NotTokenOwner)
        self.assertEqual(output['error_code'], 1)
        self.assertEqual(self.story.get_owner(token_id=1), 'alice')

    def test_transfer_to_self(self):
        self.mint()

        with self.assertRaises(SelfTransfer) as e:
            self.story.transfer(token_id=1, sender='alice', recipient='alice')

        self.assertEqual(e.exception.code, 2)

    def test_transfer_of_missing_token(self):
        with self.assertRaises(TokenDoesNotExist) as e:
            self.story.transfer(token_id=1, sender='alice', recipient='bob')

        self.assertEqual(e.exception.code, 3)

    def test_missing_token_checked_before_self_transfer(self):
        with self.assertRaises(TokenDoesNotExist):
            self.story.transfer(token_id=7, sender='alice', recipient='alice')

    def test_transfer_to_empty_recipient_rejected(self):
        self.mint()

        with self.assertRaises(AssertionError):
            self.story.transfer(token_id=1, sender='alice', recipient='')

        self.assertEqual(self.story.get_owner(token_id=1), 'alice')

    def test_transfer_writes_only_owner(self):
        self.mint()

        output = self.client.executor.execute('alice', 'story_nft', 'transfer',
                                              kwargs={'token_id': 1, 'sender': 'alice', 'recipient': 'bob'})

        self.assertEqual(output['writes'], {'story_nft.owners:1': 'bob'})

    def test_queries_of_unminted_token(self):
        self.mint()

        self.assertIsNone(self.story.get_owner(token_id=2))
        self.assertIsNone(self.story.get_metadata(token_id=2))

    def test_queries_of_malformed_token_id(self):
        self.mint()

        self.assertIsNone(self.story.get_owner(token_id=0))
        self.assertIsNone(self.story.get_owner(token_id=-1))
        self.assertIsNone(self.story.get_owner(token_id='1'))
        self.assertIsNone(self.story.get_metadata(token_id=True))

    def test_get_media_uri(self):
        self.mint(media_uri='ipfs://story')

        self.assertEqual(self.story.get_media_uri(token_id=1), 'ipfs://story')

    def test_get_media_uri_of_unminted_token_not_found(self):
        with self.assertRaises(NotFound):
            self.story.get_media_uri(token_id=1)

    def test_get_media_uri_not_found_is_reported(self):
        output = self.client.executor.execute('bob', 'story_nft', 'get_media_uri', kwargs={'token_id': 9})

        self.assertEqual(output['status_code'], 1)
        self.assertEqual(output['error_code'], 404)
        self.assertEqual(output['writes'], {})

    def test_queries_do_not_write(self):
        self.mint()

        for function_name, kwargs in [('get_owner', {'token_id': 1}),
                                      ('get_metadata', {'token_id': 1}),
                                      ('get_media_uri', {'token_id': 1}),
                                      ('get_total_minted', {}),
                                      ('get_admin', {}),
                                      ('get_mint_capacity', {})]:
            output = self.client.executor.execute('bob', 'story_nft', function_name, kwargs=kwargs)
            self.assertEqual(output['status_code'], 0)
            self.assertEqual(output['writes'], {})

    def test_admin_hands_over(self):
        self.story.set_admin(new_admin='bob')

        self.assertEqual(self.story.get_admin(), 'bob')

    def test_old_admin_loses_rights(self):
        self.story.set_admin(new_admin='bob')

        with self.assertRaises(Unauthorized):
            self.story.set_admin(new_admin='carol')

        self.assertEqual(self.story.get_admin(), 'bob')

    def test_new_admin_can_set_admin(self):
        self.story.set_admin(new_admin='bob')
        self.story.set_admin(new_admin='carol', signer='bob')

        self.assertEqual(self.story.get_admin(), 'carol')

    def test_non_admin_cannot_set_admin(self):
        with self.assertRaises(Unauthorized):
            self.story.set_admin(new_admin='mallory', signer='mallory')

        self.assertEqual(self.story.get_admin(), 'alice')

    def test_admin_has_no_mint_or_transfer_rights(self):
        self.mint(signer='bob')

        with self.assertRaises(Unauthorized):
            self.story.transfer(token_id=1, sender='bob', recipient='alice')

    def test_private_helpers_not_exposed(self):
        self.assertFalse(hasattr(self.story, 'check_field'))
        self.assertFalse(hasattr(self.story, 'is_minted'))

    def test_state_visible_through_contract_attributes(self):
        self.mint()

        self.assertEqual(self.story.owners[1], 'alice')
        self.assertEqual(self.story.last_token_id.get(), 1)

    def test_bool_capacity_rejected(self):
        with self.assertRaises(AssertionError):
            self.client.submit_story_nft(capacity=True, name='broken')

        self.assertNotIn('broken', self.client.get_contracts())

    def test_other_contract_cannot_reach_ledger_state(self):
        self.mint()

        with self.assertRaises(CompilationException):
            self.client.submit(STATE_THIEF, name='evil', signer='mallory')

        self.assertNotIn('evil', self.client.get_contracts())
        self.assertEqual(self.story.get_admin(), 'alice')
        self.assertEqual(self.story.get_owner(token_id=1), 'alice')

    def test_same_variable_names_stay_in_own_contract(self):
        self.mint()

        shadow = self.client.submit(STATE_SHADOW, name='shadow', signer='mallory')
        shadow.steal(signer='mallory')

        self.assertEqual(self.client.get_var('shadow', 'admin'), 'mallory')
        self.assertEqual(self.story.get_admin(), 'alice')
        self.assertEqual(self.story.get_owner(token_id=1), 'alice')

    def test_returned_metadata_cannot_change_record(self):
        self.client.executor.execute('alice', 'story_nft', 'mint',
                                     kwargs={'title': 'A', 'description': 'B', 'media_uri': 'uri1'},
                                     auto_commit=False)

        output = self.client.executor.execute('bob', 'story_nft', 'get_metadata', kwargs={'token_id': 1},
                                              auto_commit=False)
        output['result']['creator'] = 'mallory'

        again = self.client.executor.execute('bob', 'story_nft', 'get_metadata', kwargs={'token_id': 1},
                                             auto_commit=False)
        self.assertEqual(again['result']['creator'], 'alice')

    def test_returned_writes_cannot_change_record(self):
        output = self.client.executor.execute('alice', 'story_nft', 'mint',
                                              kwargs={'title': 'A', 'description': 'B', 'media_uri': 'uri1'},
                                              auto_commit=False)
        output['writes']['story_nft.stories:1']['creator'] = 'mallory'

        self.assertEqual(self.story.get_metadata(token_id=1)['creator'], 'alice')
