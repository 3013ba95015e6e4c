#!/usr/bin/env python3

import logging

import click

from . import __version__, action, api, config, evtc_exception, permission, transaction, utils

logger = logging.getLogger(__name__)

AG = action.ActionGenerator()


def green(text):
    return click.style(text, fg='green')


def red(text):
    return click.style(text, fg='red')


def echo_json(value):
    click.echo(utils.pretty(value))


class EvtcGroup(click.Group):
    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except evtc_exception.EvtcException as e:
            conf = ctx.obj
            verbose = conf is not None and conf.verbose
            click.echo('{} {}'.format(red('Error:'), e.detail() if verbose else e.message), err=True)
            ctx.exit(1)


def node_api(ctx):
    conf = ctx.obj
    return api.Api(conf.url, conf.timeout)


def wallet_api(ctx):
    conf = ctx.obj
    return api.WalletApi(conf.wallet_url, conf.timeout)


def transaction_options(func):
    options = [
        click.option('--expiration', '-x', type=float, default=None,
                     help='Set the time in seconds before a transaction expires, defaults to 30s'),
        click.option('--skip-sign', '-s', is_flag=True,
                     help='Specify if unlocked wallet keys should be used to sign transaction'),
        click.option('--dont-broadcast', '-d', is_flag=True,
                     help="Don't broadcast transaction to the network (just print to stdout)"),
        click.option('--ref-block', '-r', default='',
                     help='Set the reference block num or block id used for TAPOS (Transaction as Proof-of-Stake)'),
        click.option('--compression', '-c', type=click.Choice(config.COMPRESSIONS), default='none',
                     show_default=True,
                     help='Packing of the pushed transaction; zlib compresses the JSON form client-side '
                          'and needs a node that accepts JSON packed_trx')
    ]
    for option in reversed(options):
        func = option(func)
    return func


def send_actions(ctx, actions, expiration, skip_sign, dont_broadcast, ref_block, compression):
    conf = ctx.obj.copy(skip_sign=skip_sign,
                        dont_broadcast=dont_broadcast,
                        ref_block=ref_block,
                        compression=compression)
    if expiration is not None:
        conf.set_args('expiration', int(expiration))

    evtapi = api.Api(conf.url, conf.timeout)
    wallet = api.WalletApi(conf.wallet_url, conf.timeout)
    echo_json(transaction.push_actions(actions, conf, evtapi, wallet))


@click.group('evtc', cls=EvtcGroup, context_settings=dict(auto_envvar_prefix='EVTC'))
@click.option('--url', '-u', default=config.DEFAULT_URL, show_default=True,
              help='The http/https URL where evtd is running')
@click.option('--wallet-url', default=config.DEFAULT_WALLET_URL, show_default=True,
              help='The http/https URL where evtwd is running')
@click.option('--verbose', '-v', is_flag=True, help='Output verbose actions on error')
@click.pass_context
def cli(ctx, url, wallet_url, verbose):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING,
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    ctx.obj = config.Config(url=url, wallet_url=wallet_url, verbose=verbose)
    logger.debug('Using evtd at %s, evtwd at %s', url, wallet_url)


# version


@cli.group()
def version():
    """Retrieve version information"""


@version.command('client')
def version_client():
    """Retrieve version information of the client"""
    click.echo('Build version: {}'.format(green(__version__)))


# get


@cli.group()
def get():
    """Retrieve various items and information from the blockchain"""


@get.command('info')
@click.pass_context
def get_info(ctx):
    """Get current blockchain information"""
    echo_json(node_api(ctx).get_info())


@get.command('block')
@click.argument('block')
@click.pass_context
def get_block(ctx, block):
    """Retrieve a full block from the blockchain"""
    echo_json(node_api(ctx).get_block(block))


@get.command('transaction')
@click.argument('id')
@click.pass_context
def get_transaction(ctx, id):
    """Retrieve a transaction from the blockchain"""
    echo_json(node_api(ctx).get_transaction({'transaction_id': id}))


@get.command('transactions')
@click.argument('account_name')
@click.argument('skip_seq', required=False)
@click.argument('num_seq', required=False)
@click.pass_context
def get_transactions(ctx, account_name, skip_seq, num_seq):
    """Retrieve all transactions with specific account name referenced in their scope"""
    arg = {'account_name': account_name}
    if skip_seq is not None:
        arg['skip_seq'] = skip_seq
        if num_seq is not None:
            arg['num_seq'] = num_seq

    result = node_api(ctx).get_transactions(arg)
    echo_json(result)

    trxs = result.get('transactions', []) if isinstance(result, dict) else []
    for t in trxs:
        data = t.get('transaction', {}).get('data', {})
        click.echo('{}] {}  {}'.format(t.get('seq_num'), t.get('transaction_id'), data.get('expiration')))


@get.command('domain')
@click.argument('name')
@click.pass_context
def get_domain(ctx, name):
    """Retrieve a domain information"""
    echo_json(node_api(ctx).get_domain({'name': name}))


@get.command('token')
@click.argument('domain')
@click.argument('name')
@click.pass_context
def get_token(ctx, domain, name):
    """Retrieve a token information"""
    echo_json(node_api(ctx).get_token({'domain': domain, 'name': name}))


@get.command('group')
@click.argument('gid', metavar='ID', required=False)
@click.option('--id', '-i', 'id_opt', help='Id of group to be retrieved')
@click.option('--key', '-k', help='Key of group to be retrieved')
@click.pass_context
def get_group(ctx, gid, id_opt, key):
    """Retrieve a permission group information"""
    gid = permission.resolve_group_id(gid or id_opt, key)
    if key:
        click.echo('Group id: {}'.format(green(gid)))
    echo_json(node_api(ctx).get_group({'id': gid}))


@get.command('account')
@click.argument('name')
@click.pass_context
def get_account(ctx, name):
    """Retrieve an account information"""
    echo_json(node_api(ctx).get_account({'name': name}))


# net


@cli.group()
def net():
    """Interact with local p2p network connections"""


@net.command('connect')
@click.argument('host')
@click.pass_context
def net_connect(ctx, host):
    """Start a new connection to a peer"""
    echo_json(node_api(ctx).net_connect(host))


@net.command('disconnect')
@click.argument('host')
@click.pass_context
def net_disconnect(ctx, host):
    """Close an existing connection"""
    echo_json(node_api(ctx).net_disconnect(host))


@net.command('status')
@click.argument('host')
@click.pass_context
def net_status(ctx, host):
    """Status of existing connection"""
    echo_json(node_api(ctx).net_status(host))


@net.command('peers')
@click.pass_context
def net_peers(ctx):
    """Status of all existing peers"""
    echo_json(node_api(ctx).net_connections())


# domain


@cli.group()
def domain():
    """Create or update a domain"""


@domain.command('create')
@click.argument('name')
@click.argument('issuer')
@click.argument('issue', default=permission.DEFAULT)
@click.argument('transfer', default=permission.DEFAULT)
@click.argument('manage', default=permission.DEFAULT)
@transaction_options
@click.pass_context
def domain_create(ctx, name, issuer, issue, transfer, manage, **trx_opts):
    """Create new domain

    ISSUE, TRANSFER and MANAGE are JSON strings or filenames defining the
    permissions, 'default' if omitted.
    """
    act = AG.newdomain(name, issuer, issue=issue, transfer=transfer, manage=manage)
    send_actions(ctx, [act], **trx_opts)


@domain.command('update')
@click.argument('name')
@click.option('--issue', '-i', default=permission.DEFAULT, help='JSON string or filename defining ISSUE permission')
@click.option('--transfer', '-t', default=permission.DEFAULT, help='JSON string or filename defining TRANSFER permission')
@click.option('--manage', '-m', default=permission.DEFAULT, help='JSON string or filename defining MANAGE permission')
@transaction_options
@click.pass_context
def domain_update(ctx, name, issue, transfer, manage, **trx_opts):
    """Update existing domain"""
    act = AG.updatedomain(name, issue=issue, transfer=transfer, manage=manage)
    send_actions(ctx, [act], **trx_opts)


# token


@cli.group()
def token():
    """Issue or transfer tokens"""


@token.command('issue')
@click.argument('domain')
@click.option('--names', '-n', multiple=True, required=True, help='Names of tokens will be issued')
@click.argument('owner', nargs=-1, required=True)
@transaction_options
@click.pass_context
def token_issue(ctx, domain, names, owner, **trx_opts):
    """Issue new tokens in specific domain"""
    act = AG.issuetoken(domain, list(names), list(owner))
    send_actions(ctx, [act], **trx_opts)


@token.command('transfer')
@click.argument('domain')
@click.argument('name')
@click.argument('to', nargs=-1, required=True)
@transaction_options
@click.pass_context
def token_transfer(ctx, domain, name, to, **trx_opts):
    """Transfer token"""
    act = AG.transfer(domain, name, list(to))
    send_actions(ctx, [act], **trx_opts)


# group


@cli.group()
def group():
    """Create or update permission groups"""


@group.command('create')
@click.argument('json')
@transaction_options
@click.pass_context
def group_create(ctx, json, **trx_opts):
    """Create new group from a JSON string or filename"""
    act = AG.newgroup(json)
    send_actions(ctx, [act], **trx_opts)


@group.command('update')
@click.argument('gid', metavar='[ID]', nargs=-1)
@click.argument('json')
@click.option('--key', '-k', help='Key of permission group to be updated')
@transaction_options
@click.pass_context
def group_update(ctx, gid, json, key, **trx_opts):
    """Update specific permission group, id or key must provide at least one."""
    if len(gid) > 1:
        raise click.UsageError('Only one group id may be given')
    act = AG.updategroup(json, id=gid[0] if gid else None, key=key)
    if key:
        click.echo('Group id: {}'.format(green(act.key)))
    send_actions(ctx, [act], **trx_opts)


@group.command('getid')
@click.argument('key')
def group_getid(key):
    """Get group id from group key"""
    click.echo('Group id: {}'.format(green(permission.resolve_group_id(key=key))))


# account


@cli.group()
def account():
    """Create or update account and transfer EVT between accounts"""


@account.command('create')
@click.argument('name')
@click.argument('owner', nargs=-1, required=True)
@transaction_options
@click.pass_context
def account_create(ctx, name, owner, **trx_opts):
    """Create new account"""
    act = AG.newaccount(name, list(owner))
    send_actions(ctx, [act], **trx_opts)


@account.command('transfer')
@click.argument('_from', metavar='FROM')
@click.argument('to')
@click.argument('amount')
@transaction_options
@click.pass_context
def account_transfer(ctx, _from, to, amount, **trx_opts):
    """Transfer EVT between accounts"""
    act = AG.transferevt(_from, to, amount)
    send_actions(ctx, [act], **trx_opts)


@account.command('update')
@click.argument('name')
@click.argument('owner', nargs=-1, required=True)
@transaction_options
@click.pass_context
def account_update(ctx, name, owner, **trx_opts):
    """Update owner for specific account"""
    act = AG.updateowner(name, list(owner))
    send_actions(ctx, [act], **trx_opts)


# wallet


@cli.group()
def wallet():
    """Interact with local wallet"""


@wallet.command('create')
@click.option('--name', '-n', default='default', show_default=True, help='The name of the new wallet')
@click.pass_context
def wallet_create(ctx, name):
    """Create a new wallet locally"""
    password = wallet_api(ctx).create(name)
    click.echo('Creating wallet: {}'.format(green(name)))
    click.echo('Save password to use in the future to unlock this wallet.')
    click.echo('Without password imported keys will not be retrievable.')
    echo_json(password)


@wallet.command('open')
@click.option('--name', '-n', default='default', help='The name of the wallet to open')
@click.pass_context
def wallet_open(ctx, name):
    """Open an existing wallet"""
    wallet_api(ctx).open(name)
    click.echo('Opened: {}'.format(green(name)))


@wallet.command('lock')
@click.option('--name', '-n', default='default', help='The name of the wallet to lock')
@click.pass_context
def wallet_lock(ctx, name):
    """Lock wallet"""
    wallet_api(ctx).lock(name)
    click.echo('Locked: {}'.format(green(name)))


@wallet.command('lock_all')
@click.pass_context
def wallet_lock_all(ctx):
    """Lock all unlocked wallets"""
    wallet_api(ctx).lock_all()
    click.echo('Locked All Wallets')


@wallet.command('unlock')
@click.option('--name', '-n', default='default', help='The name of the wallet to unlock')
@click.option('--password', help='The password returned by wallet create')
@click.pass_context
def wallet_unlock(ctx, name, password):
    """Unlock wallet"""
    if not password:
        password = click.prompt('password', hide_input=True)
    wallet_api(ctx).unlock([name, password])
    click.echo('Unlocked: {}'.format(green(name)))


@wallet.command('import')
@click.option('--name', '-n', default='default', help='The name of the wallet to import key into')
@click.argument('key')
@click.pass_context
def wallet_import(ctx, name, key):
    """Import private key into wallet"""
    wallet_api(ctx).import_key([name, key])
    click.echo('Imported private key into: {}'.format(green(name)))


@wallet.command('list')
@click.pass_context
def wallet_list(ctx):
    """List opened wallets, * = unlocked"""
    click.echo('Wallets:')
    echo_json(wallet_api(ctx).list_wallets())


@wallet.command('keys')
@click.pass_context
def wallet_keys(ctx):
    """List of private keys from all unlocked wallets in wif format."""
    echo_json(wallet_api(ctx).list_keys())


# push


@cli.group()
def push():
    """Push arbitrary transactions to the blockchain"""


@push.command('transaction')
@click.argument('trx', metavar='TRANSACTION')
@click.pass_context
def push_transaction(ctx, trx):
    """Push an arbitrary JSON transaction (JSON string or filename)"""
    trxs = action.load_transactions(trx)
    echo_json(transaction.push_raw(trxs, ctx.obj, node_api(ctx)))


@push.command('transactions')
@click.argument('transactions')
@click.pass_context
def push_transactions(ctx, transactions):
    """Push an array of arbitrary JSON transactions (JSON string or filename)"""
    trxs = action.load_transactions(transactions)
    if not isinstance(trxs, list):
        raise evtc_exception.TransactionTypeException(transactions, 'expected a JSON array')
    echo_json(node_api(ctx).push_transactions(trxs))


def main():
    cli(prog_name='evtc')


if __name__ == '__main__':
    main()
