import hashlib
import logging

from . import base, evtc_exception, utils

logger = logging.getLogger(__name__)

DEFAULT = 'default'


def get_default_permission(name, key):
    # Without a key the permission refers to the owner group
    if base.is_zero_key(key):
        ref = base.AuthorizerRef(base.AuthorizerRef.GROUP, base.OWNER_GROUP)
    else:
        ref = base.AuthorizerRef(base.AuthorizerRef.ACCOUNT, base.check_public_key(key))
    return base.PermissionDef(name, 1, [base.AuthorizerWeight(ref, 1)])


def parse_permission(json_or_file):
    try:
        return base.PermissionDef.from_dict(utils.json_from_file_or_string(json_or_file))
    except (ValueError, OSError, evtc_exception.NameFormatException) as e:
        raise evtc_exception.PermissionTypeException(json_or_file, str(e)) from e


def resolve_permission(name, value, key=None):
    if value == DEFAULT:
        return get_default_permission(name, key)
    return parse_permission(value)


def parse_group(json_or_file):
    try:
        return base.Group.from_dict(utils.json_from_file_or_string(json_or_file))
    except (ValueError, KeyError, TypeError, OSError, evtc_exception.NameFormatException) as e:
        raise evtc_exception.GroupTypeException(json_or_file, str(e)) from e


def group_id_from_key(key):
    digest = hashlib.sha256(str(key).encode('utf-8')).digest()
    return utils.b58encode(digest[:16])


def check_group_id(gid):
    try:
        raw = utils.b58decode(gid)
    except ValueError as e:
        raise evtc_exception.GroupTypeException(gid, str(e)) from e
    if len(raw) == 0 or len(raw) > 16:
        raise evtc_exception.GroupTypeException(gid, 'group id must encode 1 to 16 bytes')
    return gid


def resolve_group_id(id=None, key=None):
    """Group id from an explicit base58 id or from the group key.

    The key takes precedence when both are given.
    """
    if not id and not key:
        raise evtc_exception.MissingIdentifierException()
    if key:
        gid = group_id_from_key(base.check_public_key(key))
        logger.debug('Group id derived from key %s: %s', key, gid)
        return gid
    return check_group_id(id)
