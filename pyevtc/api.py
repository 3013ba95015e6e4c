import json
import logging

import requests

from . import config, evtc_exception

logger = logging.getLogger(__name__)


class HttpApi:
    service = None
    urls = {}

    def __init__(self, host, timeout=config.DEFAULT_TIMEOUT):
        self.host = host.rstrip('/')
        self.timeout = timeout

    def __getattr__(self, api_name):
        if api_name.startswith('_') or api_name not in self.urls:
            raise AttributeError(api_name)

        def ret_func(data=None):
            return self.call(self.urls[api_name], data)
        return ret_func

    def call(self, path, data=None, method='POST'):
        url = self.host + path
        logger.debug('%s %s -> %s', method, url, self.service)
        try:
            if method == 'GET':
                resp = requests.get(url, timeout=self.timeout)
            else:
                resp = requests.post(url, data=json.dumps(data), timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise evtc_exception.EvtcConnectionException(self.service, self.host, str(e)) from e

        try:
            body = resp.json()
        except ValueError:
            body = None

        if resp.status_code // 100 != 2:
            logger.debug('%s responded %d: %s', url, resp.status_code, resp.text)
            raise evtc_exception.RemoteRejectionException(
                self.service, resp.status_code, resp.text if body is None else body)
        if body is None:
            raise evtc_exception.RemoteRejectionException(self.service, resp.status_code, {
                'message': 'Malformed reply from {}: {}'.format(path, resp.text[:200])
            })
        return body


class Api(HttpApi):
    service = 'node'
    urls = {
        'get_required_keys': '/v1/chain/get_required_keys',
        'push_transaction': '/v1/chain/push_transaction',
        'push_transactions': '/v1/chain/push_transactions',
        'get_block': '/v1/chain/get_block',
        'get_transaction': '/v1/history/get_transaction',
        'get_transactions': '/v1/history/get_transactions',
        'get_domain': '/v1/evt/get_domain',
        'get_token': '/v1/evt/get_token',
        'get_group': '/v1/evt/get_group',
        'get_account': '/v1/evt/get_account',
        'net_connect': '/v1/net/connect',
        'net_disconnect': '/v1/net/disconnect',
        'net_status': '/v1/net/status',
        'net_connections': '/v1/net/connections'
    }

    def get_info(self):
        return self.call('/v1/chain/get_info', method='GET')

    def get_block(self, block_num_or_id):
        return self.call(self.urls['get_block'], {'block_num_or_id': str(block_num_or_id)})

    def get_required_keys(self, transaction, available_keys):
        return self.call(self.urls['get_required_keys'], {
            'transaction': transaction,
            'available_keys': available_keys
        })


class WalletApi(HttpApi):
    service = 'wallet'
    urls = {
        'create': '/v1/wallet/create',
        'open': '/v1/wallet/open',
        'lock': '/v1/wallet/lock',
        'lock_all': '/v1/wallet/lock_all',
        'unlock': '/v1/wallet/unlock',
        'import_key': '/v1/wallet/import_key',
        'list_wallets': '/v1/wallet/list_wallets',
        'list_keys': '/v1/wallet/list_keys',
        'get_public_keys': '/v1/wallet/get_public_keys',
        'sign_transaction': '/v1/wallet/sign_transaction'
    }

    def list_public_keys(self):
        return self.call(self.urls['get_public_keys'])

    def sign_transaction(self, transaction, required_keys, chain_id):
        return self.call(self.urls['sign_transaction'], [transaction, required_keys, chain_id])
