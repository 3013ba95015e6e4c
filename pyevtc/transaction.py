import datetime
import json
import logging
import zlib

from . import api, base, config, evtc_exception

logger = logging.getLogger(__name__)

ZERO_CHAIN_ID = '0' * 64
TIME_FORMAT = '%Y-%m-%dT%H:%M:%S'


def parse_time(s):
    s = s.rstrip('Z').split('.')[0]
    return datetime.datetime.strptime(s, TIME_FORMAT)


def reply_field(reply, field, kind=None, service='node'):
    if not isinstance(reply, dict) or field not in reply:
        raise evtc_exception.RemoteRejectionException(service, None, {
            'message': 'Malformed reply: missing field {}'.format(field)
        })
    value = reply[field]
    if kind is not None and not isinstance(value, kind):
        raise evtc_exception.RemoteRejectionException(service, None, {
            'message': 'Malformed reply: unexpected type of field {}'.format(field)
        })
    return value


class Transaction:
    def __init__(self):
        self.chain_id = ZERO_CHAIN_ID
        self.ref_block_id = None

        self.expiration = None
        self.ref_block_num = 0
        self.ref_block_prefix = 0
        self.actions = []
        self.transaction_extensions = []

        self.signatures = []

    def add_action(self, _action):
        self.actions.append(_action.dict())

    def set_expiration(self, head_block_time, seconds):
        expiration = parse_time(head_block_time) + datetime.timedelta(seconds=seconds)
        self.expiration = expiration.strftime(TIME_FORMAT)

    def set_reference_block(self, block_id):
        block_id = base.BlockId.from_string(block_id)
        self.ref_block_id = str(block_id)
        self.ref_block_num = block_id.ref_block_num()
        self.ref_block_prefix = block_id.ref_block_prefix()

    def set_signatures(self, signatures):
        self.signatures = list(signatures)

    def dict(self):
        return {
            'expiration': self.expiration,
            'ref_block_num': self.ref_block_num,
            'ref_block_prefix': self.ref_block_prefix,
            'actions': self.actions,
            'transaction_extensions': self.transaction_extensions
        }

    def signed_dict(self):
        ret = self.dict()
        ret['signatures'] = self.signatures
        return ret


class TrxAssembler:
    """Turns a list of actions into an unsigned transaction anchored to
    live chain state (expiration and TAPOS reference block)."""

    def __init__(self, evtapi, conf):
        self.api = evtapi
        self.conf = conf

    def resolve_ref_block(self, info):
        # Default to the last irreversible block
        block_num_or_id = self.conf.ref_block or reply_field(info, 'last_irreversible_block_num')
        try:
            block = self.api.get_block(block_num_or_id)
            return base.BlockId.from_string(block['id'])
        except (evtc_exception.RemoteRejectionException, KeyError, TypeError, ValueError) as e:
            raise evtc_exception.InvalidRefBlockException(block_num_or_id, str(e)) from e

    def assemble(self, actions):
        info = self.api.get_info()

        trx = Transaction()
        for act in actions:
            trx.add_action(act)

        head_block_time = reply_field(info, 'head_block_time', str)
        trx.chain_id = info.get('chain_id') or ZERO_CHAIN_ID
        try:
            trx.set_expiration(head_block_time, self.conf.expiration)
        except ValueError as e:
            raise evtc_exception.RemoteRejectionException('node', None, {
                'message': 'Malformed head_block_time: {}'.format(head_block_time)
            }) from e

        block_id = self.resolve_ref_block(info)
        trx.set_reference_block(str(block_id))

        logger.debug('Assembled transaction with %d action(s), expiration %s, ref block %s',
                     len(trx.actions), trx.expiration, trx.ref_block_id)
        return trx


class AvailableKeys:
    def __init__(self, keys):
        self.keys = list(keys)

    def __contains__(self, key):
        return key in self.keys


class RequiredKeys:
    def __init__(self, keys, available):
        self.keys = list(keys)
        self.available = available

    def check(self):
        # The node may only require keys that the wallet reported
        unknown = [key for key in self.keys if key not in self.available]
        if unknown:
            raise evtc_exception.StaleKeySetException(unknown)
        if not self.keys:
            raise evtc_exception.RemoteRejectionException(
                'node', None, {'message': 'No available key satisfies the transaction authorization'})
        return self


class TrxSigner:
    """Signs a transaction in place: wallet keys -> node required keys ->
    wallet signatures."""

    def __init__(self, evtapi, wallet_api):
        self.api = evtapi
        self.wallet = wallet_api

    def available_keys(self):
        keys = self.wallet.list_public_keys()
        if not isinstance(keys, list):
            raise evtc_exception.RemoteRejectionException('wallet', None, {
                'message': 'Malformed reply: expected a list of public keys'
            })
        logger.debug('Wallet reports %d unlocked key(s)', len(keys))
        return AvailableKeys(keys)

    def required_keys(self, trx, available):
        resp = self.api.get_required_keys(trx.dict(), available.keys)
        required = RequiredKeys(reply_field(resp, 'required_keys', list), available).check()
        logger.debug('Node requires key(s): %s', ', '.join(required.keys))
        return required

    def sign(self, trx):
        available = self.available_keys()
        required = self.required_keys(trx, available)

        signed = self.wallet.sign_transaction(trx.dict(), required.keys, trx.chain_id)
        signatures = signed.get('signatures', []) if isinstance(signed, dict) else []
        if len(signatures) != len(required.keys):
            raise evtc_exception.RemoteRejectionException('wallet', None, {
                'message': 'Wallet returned {} signature(s) for {} required key(s)'.format(
                    len(signatures), len(required.keys))
            })
        trx.set_signatures(signatures)
        return trx


def pack(trx_dict, signatures, compression='none'):
    packed = {
        'signatures': signatures,
        'compression': compression
    }
    if compression == 'none':
        packed['transaction'] = trx_dict
    else:
        raw = json.dumps(trx_dict, sort_keys=True, separators=(',', ':')).encode('utf-8')
        packed['packed_trx'] = zlib.compress(raw).hex()
    return packed


class Broadcaster:
    def __init__(self, evtapi, conf):
        self.api = evtapi
        self.conf = conf

    def broadcast(self, trx):
        if self.conf.dont_broadcast:
            return trx.signed_dict()
        packed = pack(trx.dict(), trx.signatures, self.conf.compression)
        logger.debug('Pushing transaction (compression: %s)', self.conf.compression)
        return self.api.push_transaction(packed)


def push_transaction(actions, conf, evtapi=None, wallet_api=None):
    evtapi = evtapi or api.Api(conf.url, conf.timeout)

    trx = TrxAssembler(evtapi, conf).assemble(actions)
    if not conf.skip_sign:
        wallet_api = wallet_api or api.WalletApi(conf.wallet_url, conf.timeout)
        TrxSigner(evtapi, wallet_api).sign(trx)

    return Broadcaster(evtapi, conf).broadcast(trx)


def push_actions(actions, conf=None, evtapi=None, wallet_api=None):
    return push_transaction(actions, conf or config.Config(), evtapi, wallet_api)


def push_raw(trxs, conf, evtapi=None):
    """Forward pre-built transactions: an object goes to push_transaction,
    an array goes unmodified to push_transactions in one call."""
    evtapi = evtapi or api.Api(conf.url, conf.timeout)
    if isinstance(trxs, list):
        return evtapi.push_transactions(trxs)

    if 'transaction' in trxs or 'packed_trx' in trxs:
        return evtapi.push_transaction(trxs)
    body = dict(trxs)
    signatures = body.pop('signatures', [])
    return evtapi.push_transaction(pack(body, signatures))
