import re

from . import evtc_exception, utils

# Type and Structures

ZERO_PUBLIC_KEY = 'EVT' + '0' * 50
OWNER_GROUP = '.OWNER'

PUBLIC_KEY_PATTERN = re.compile(r'^EVT[1-9A-HJ-NP-Za-km-z]{50}$')
ASSET_PATTERN = re.compile(r'^\d+(\.\d+)? ([A-Z]{1,7}|S#\d+)$')


class BaseType:
    def __init__(self, **kwargs):
        self.kwargs = kwargs

    def dict(self):
        return self.kwargs

    @classmethod
    def from_dict(cls, d):
        obj = cls.__new__(cls)
        BaseType.__init__(obj, **d)
        return obj

    def __eq__(self, other):
        return type(self) is type(other) and self.dict() == other.dict()


def is_zero_key(key):
    return key is None or str(key) in ('', ZERO_PUBLIC_KEY)


def check_public_key(key):
    key = str(key)
    if PUBLIC_KEY_PATTERN.match(key) is None and key != ZERO_PUBLIC_KEY:
        raise evtc_exception.NameFormatException('public key', key)
    return key


def check_asset(amount):
    if not isinstance(amount, str) or ASSET_PATTERN.match(amount) is None:
        raise evtc_exception.NameFormatException('asset', amount)
    return amount


class AuthorizerRef:
    ACCOUNT = 'A'
    GROUP = 'G'

    def __init__(self, _type, key):
        self.key = key
        self.type = _type

    def value(self):
        return '[%s] %s' % (self.type, self.key)

    @staticmethod
    def from_string(ref):
        m = re.match(r'^\[(A|G)\] (\S+)$', ref)
        if m is None:
            raise ValueError('Invalid authorizer ref: {}'.format(ref))
        return AuthorizerRef(m.group(1), m.group(2))


class AuthorizerWeight(BaseType):
    def __init__(self, ref, weight):
        super().__init__(ref=ref.value(), weight=weight)


class PermissionDef(BaseType):
    # name: permission_name
    # threshold: uint32
    # authorizers: authorizer_weight[]
    def __init__(self, name, threshold, authorizers=None):
        super().__init__(name=name, threshold=threshold,
                         authorizers=[auth.dict() for auth in authorizers or []])

    def add_authorizer(self, auth, weight):
        self.kwargs['authorizers'].append(
            AuthorizerWeight(auth, weight).dict())

    @classmethod
    def from_dict(cls, d):
        if not isinstance(d, dict):
            raise ValueError('Permission must be an object')
        name = d.get('name')
        threshold = d.get('threshold')
        authorizers = d.get('authorizers')
        if not isinstance(name, str) or not name:
            raise ValueError('Permission field "name" is required')
        if not is_uint(threshold):
            raise ValueError('Permission field "threshold" must be an unsigned integer')
        if not isinstance(authorizers, list):
            raise ValueError('Permission field "authorizers" must be a list')

        perm = PermissionDef(name, threshold)
        for i, auth in enumerate(authorizers):
            if not isinstance(auth, dict):
                raise ValueError('authorizers[{}] must be an object'.format(i))
            if not is_uint(auth.get('weight')):
                raise ValueError('authorizers[{}].weight must be an unsigned integer'.format(i))
            ref = AuthorizerRef.from_string(str(auth.get('ref')))
            perm.add_authorizer(ref, auth['weight'])
        return perm


def is_uint(value):
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


# Special Type: group
MAX_GROUP_DEPTH = 32


class Node(BaseType):
    def __init__(self, **kwargs):
        super().__init__(**kwargs)


class RootNode(Node):
    def __init__(self, threshold, nodes):
        super().__init__(threshold=threshold,
                         nodes=[node.dict() for node in nodes])


class NonLeafNode(Node):
    def __init__(self, threshold, weight, nodes):
        super().__init__(threshold=threshold,
                         weight=weight,
                         nodes=[node.dict() for node in nodes])


class LeafNode(Node):
    def __init__(self, key, weight):
        super().__init__(key=key, weight=weight)


def node_from_dict(d, depth=0):
    if depth == 0:
        return RootNode(d['threshold'], [node_from_dict(n, 1) for n in d['nodes']])
    if 'key' in d:
        return LeafNode(d['key'], d['weight'])
    return NonLeafNode(d['threshold'], d['weight'], [node_from_dict(n, depth + 1) for n in d['nodes']])


def validate_group_tree(root):
    """Check a group tree given as nested dicts.

    Every node is either a leaf ({key, weight}) or a branch
    ({threshold, weight, nodes}); the root may omit weight. Trees deeper
    than MAX_GROUP_DEPTH or containing a node twice on one path are rejected.
    Returns the number of leaves.
    """
    path = set()

    def visit(node, depth, where):
        if depth > MAX_GROUP_DEPTH:
            raise ValueError('Group is nested deeper than {} levels'.format(MAX_GROUP_DEPTH))
        if not isinstance(node, dict):
            raise ValueError('{} must be an object'.format(where))
        if id(node) in path:
            raise ValueError('{} refers back to one of its ancestors'.format(where))

        if depth > 0 and not is_uint(node.get('weight')):
            raise ValueError('{}.weight must be an unsigned integer'.format(where))

        if 'key' in node:
            if 'nodes' in node:
                raise ValueError('{} cannot have both key and nodes'.format(where))
            if depth == 0:
                raise ValueError('root cannot be a key node')
            check_public_key(node['key'])
            return 1

        if not is_uint(node.get('threshold')):
            raise ValueError('{}.threshold must be an unsigned integer'.format(where))
        nodes = node.get('nodes')
        if not isinstance(nodes, list) or len(nodes) == 0:
            raise ValueError('{}.nodes must be a non-empty list'.format(where))

        path.add(id(node))
        leaves = sum(visit(n, depth + 1, '{}.nodes[{}]'.format(where, i))
                     for i, n in enumerate(nodes))
        path.discard(id(node))
        return leaves

    return visit(root, 0, 'root')


class Group(BaseType):
    def __init__(self, name, key, root):
        super().__init__(name=name, key=key, root=root.dict())

    def key(self):
        return self.kwargs['key']

    @classmethod
    def from_dict(cls, d):
        if not isinstance(d, dict):
            raise ValueError('Group must be an object')
        if 'key' not in d:
            raise ValueError('Group field "key" is required')
        check_public_key(d['key'])
        if 'root' not in d:
            raise ValueError('Group field "root" is required')
        validate_group_tree(d['root'])
        return Group(d.get('name', ''), d['key'], node_from_dict(d['root']))


class BlockId:
    def __init__(self, block_id):
        self.id = block_id
        self.raw = bytes.fromhex(block_id)
        if len(self.raw) != 32:
            raise ValueError('Block id must be 32 bytes: {}'.format(block_id))

    @staticmethod
    def from_string(block_id):
        return BlockId(block_id)

    def block_num(self):
        return int.from_bytes(self.raw[:4], 'big')

    def ref_block_num(self):
        return self.block_num() & 0xffff

    def ref_block_prefix(self):
        return int.from_bytes(self.raw[8:12], 'little')

    def __str__(self):
        return self.id


# Abi jsons of Actions


class NewDomainAbi(BaseType):
    def __init__(self, name, issuer, issue, transfer, manage):
        super().__init__(name=name,
                         issuer=issuer,
                         issue=issue.dict(),
                         transfer=transfer.dict(),
                         manage=manage.dict())


class UpdateDomainAbi(BaseType):
    def __init__(self, name, issue, transfer, manage):
        super().__init__(name=name,
                         issue=None if issue is None else issue.dict(),
                         transfer=None if transfer is None else transfer.dict(),
                         manage=None if manage is None else manage.dict())


class IssueTokenAbi(BaseType):
    def __init__(self, domain, names, owner):
        super().__init__(domain=domain,
                         names=names,
                         owner=owner)


class TransferAbi(BaseType):
    def __init__(self, domain, name, to):
        super().__init__(domain=domain,
                         name=name,
                         to=to)


class NewGroupAbi(BaseType):
    def __init__(self, id, group):
        super().__init__(id=id, group=group.dict())


class UpdateGroupAbi(BaseType):
    def __init__(self, id, group):
        super().__init__(id=id, group=group.dict())


class NewAccountAbi(BaseType):
    def __init__(self, name, owner):
        super().__init__(name=name, owner=owner)


class TransferEvtAbi(BaseType):
    def __init__(self, _from, to, amount):
        args = {'from': _from, 'to': to, 'amount': amount}
        super().__init__(**args)


class UpdateOwnerAbi(BaseType):
    def __init__(self, name, owner):
        super().__init__(name=name, owner=owner)


ABIS = {
    'newdomain': NewDomainAbi,
    'updatedomain': UpdateDomainAbi,
    'issuetoken': IssueTokenAbi,
    'transfer': TransferAbi,
    'newgroup': NewGroupAbi,
    'updategroup': UpdateGroupAbi,
    'newaccount': NewAccountAbi,
    'transferevt': TransferEvtAbi,
    'updateowner': UpdateOwnerAbi,
}


def check_names(names, field='name'):
    return [utils.check_name128(name, field) for name in names]
