from . import base, evtc_exception, permission, utils


class Action(base.BaseType):
    def __init__(self, name, domain, key, data):
        super().__init__(name=name,
                         domain=domain,
                         key=key,
                         data=data.dict() if isinstance(data, base.BaseType) else data)

    @property
    def name(self):
        return self.kwargs['name']

    @property
    def domain(self):
        return self.kwargs['domain']

    @property
    def key(self):
        return self.kwargs['key']

    @property
    def data(self):
        return self.kwargs['data']

    def payload(self):
        return base.ABIS[self.name].from_dict(self.data)


class NewDomainAction(Action):
    # key: name of new domain
    def __init__(self, domain, data):
        super().__init__('newdomain', 'domain', domain, data)


class UpdateDomainAction(Action):
    # key: name of updating domain
    def __init__(self, domain, data):
        super().__init__('updatedomain', 'domain', domain, data)


class NewGroupAction(Action):
    # key: id of new group
    def __init__(self, key, data):
        super().__init__('newgroup', 'group', key, data)


class UpdateGroupAction(Action):
    # key: id of updating group
    def __init__(self, key, data):
        super().__init__('updategroup', 'group', key, data)


class IssueTokenAction(Action):
    # domain: name of domain
    def __init__(self, domain, data):
        super().__init__('issuetoken', domain, 'issue', data)


class TransferAction(Action):
    # domain: name of domain token belongs to
    # key: name of token
    def __init__(self, domain, key, data):
        super().__init__('transfer', domain, key, data)


class NewAccountAction(Action):
    # key: name of new account
    def __init__(self, key, data):
        super().__init__('newaccount', 'account', key, data)


class TransferEvtAction(Action):
    # key: name of the paying account
    def __init__(self, key, data):
        super().__init__('transferevt', 'account', key, data)


class UpdateOwnerAction(Action):
    # key: name of updating account
    def __init__(self, key, data):
        super().__init__('updateowner', 'account', key, data)


class ActionTypeErrorException(evtc_exception.EvtcException):
    def __init__(self, name):
        super().__init__('Unknown action type: {}'.format(name))


def action_from_dict(d):
    try:
        name = d['name']
        if name not in base.ABIS:
            raise ActionTypeErrorException(name)
        return Action(name, d['domain'], d['key'], d['data'])
    except (KeyError, TypeError) as e:
        raise evtc_exception.TransactionTypeException(d, 'missing action field {}'.format(e)) from e


def load_transactions(json_or_file):
    """Raw transaction (object) or transaction list (array) from inline JSON
    or a JSON file."""
    try:
        trxs = utils.json_from_file_or_string(json_or_file)
    except (ValueError, OSError) as e:
        raise evtc_exception.TransactionTypeException(json_or_file, str(e)) from e
    if not isinstance(trxs, (dict, list)):
        raise evtc_exception.TransactionTypeException(
            json_or_file, 'expected a JSON object or array')
    return trxs


def _permission(name, value, key=None):
    if isinstance(value, base.PermissionDef):
        return value
    return permission.resolve_permission(name, value, key)


def _keys(keys):
    return [base.check_public_key(key) for key in keys]


class ActionGenerator:
    def newdomain(self, name, issuer, issue=permission.DEFAULT,
                  transfer=permission.DEFAULT, manage=permission.DEFAULT):
        utils.check_name128(name, 'domain name')
        issuer = base.check_public_key(issuer)
        abi = base.NewDomainAbi(name=name,
                                issuer=issuer,
                                issue=_permission('issue', issue, issuer),
                                transfer=_permission('transfer', transfer),
                                manage=_permission('manage', manage, issuer))
        return NewDomainAction(name, abi)

    def updatedomain(self, name, issue=None, transfer=None, manage=None):
        utils.check_name128(name, 'domain name')

        def optional(pname, value):
            if value is None or value == permission.DEFAULT:
                return None
            return _permission(pname, value)

        abi = base.UpdateDomainAbi(name=name,
                                   issue=optional('issue', issue),
                                   transfer=optional('transfer', transfer),
                                   manage=optional('manage', manage))
        return UpdateDomainAction(name, abi)

    def issuetoken(self, domain, names, owner):
        utils.check_name128(domain, 'domain name')
        abi = base.IssueTokenAbi(domain,
                                 base.check_names(names, 'token name'),
                                 owner=_keys(owner))
        return IssueTokenAction(domain, abi)

    def transfer(self, domain, name, to):
        utils.check_name128(domain, 'domain name')
        utils.check_name128(name, 'token name')
        abi = base.TransferAbi(domain, name, to=_keys(to))
        return TransferAction(domain, name, abi)

    def _group(self, group):
        if isinstance(group, base.Group):
            try:
                base.validate_group_tree(group.dict()['root'])
            except ValueError as e:
                raise evtc_exception.GroupTypeException('group', str(e)) from e
            return group
        return permission.parse_group(group)

    def newgroup(self, group):
        group = self._group(group)
        gid = permission.group_id_from_key(group.key())
        return NewGroupAction(gid, base.NewGroupAbi(gid, group))

    def updategroup(self, group, id=None, key=None):
        gid = permission.resolve_group_id(id, key)
        group = self._group(group)
        return UpdateGroupAction(gid, base.UpdateGroupAbi(gid, group))

    def newaccount(self, name, owner):
        utils.check_name128(name, 'account name')
        return NewAccountAction(name, base.NewAccountAbi(name, _keys(owner)))

    def transferevt(self, _from, to, amount):
        utils.check_name128(_from, 'account name')
        utils.check_name128(to, 'account name')
        abi = base.TransferEvtAbi(_from, to, base.check_asset(amount))
        return TransferEvtAction(_from, abi)

    def updateowner(self, name, owner):
        utils.check_name128(name, 'account name')
        return UpdateOwnerAction(name, base.UpdateOwnerAbi(name, _keys(owner)))

    def new_action(self, action, **args):
        if action not in base.ABIS:
            raise ActionTypeErrorException(action)
        func = getattr(self, action)
        return func(**args)
