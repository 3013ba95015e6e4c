class EvtcErrCode:
    EVTC_CONNECTION_ERROR = 'EVTC_CONNECTION_ERROR'
    EVTC_TRANSACTION_TYPE_ERROR = 'EVTC_TRANSACTION_TYPE_ERROR'
    EVTC_PERMISSION_TYPE_ERROR = 'EVTC_PERMISSION_TYPE_ERROR'
    EVTC_GROUP_TYPE_ERROR = 'EVTC_GROUP_TYPE_ERROR'
    EVTC_NAME_FORMAT_ERROR = 'EVTC_NAME_FORMAT_ERROR'
    EVTC_MISSING_IDENTIFIER = 'EVTC_MISSING_IDENTIFIER'
    EVTC_INVALID_REF_BLOCK = 'EVTC_INVALID_REF_BLOCK'
    EVTC_REMOTE_REJECTION = 'EVTC_REMOTE_REJECTION'
    EVTC_STALE_KEY_SET = 'EVTC_STALE_KEY_SET'


class EvtcException(Exception):
    code = None

    def __init__(self, message):
        self.message = message
        super().__init__(message)

    def detail(self):
        return '{}: {}'.format(self.code, self.message)


class EvtcConnectionException(EvtcException):
    code = EvtcErrCode.EVTC_CONNECTION_ERROR

    daemons = {
        'node': 'evtd',
        'wallet': 'evtwd'
    }

    def __init__(self, service, url, reason=None):
        self.service = service
        self.url = url
        self.reason = reason
        daemon = self.daemons.get(service, service)
        super().__init__(
            'Failed to connect to {} at {}; is {} running?'.format(daemon, url, daemon))

    def detail(self):
        return '{}: {} ({})'.format(self.code, self.message, self.reason)


class ParseException(EvtcException):
    kind = None

    def __init__(self, source, reason=None):
        self.source = source
        self.reason = reason
        message = 'Fail to parse {} JSON: {}'.format(self.kind, source)
        if reason:
            message = '{} ({})'.format(message, reason)
        super().__init__(message)


class TransactionTypeException(ParseException):
    code = EvtcErrCode.EVTC_TRANSACTION_TYPE_ERROR
    kind = 'transaction'


class PermissionTypeException(ParseException):
    code = EvtcErrCode.EVTC_PERMISSION_TYPE_ERROR
    kind = 'Permission'


class GroupTypeException(ParseException):
    code = EvtcErrCode.EVTC_GROUP_TYPE_ERROR
    kind = 'Group'


class NameFormatException(EvtcException):
    code = EvtcErrCode.EVTC_NAME_FORMAT_ERROR

    def __init__(self, field, name):
        self.field = field
        self.name = name
        super().__init__('Invalid {}: {!r}'.format(field, name))


class MissingIdentifierException(EvtcException):
    code = EvtcErrCode.EVTC_MISSING_IDENTIFIER

    def __init__(self):
        super().__init__('Must provide either id or key')


class InvalidRefBlockException(EvtcException):
    code = EvtcErrCode.EVTC_INVALID_REF_BLOCK

    def __init__(self, block_num_or_id, reason=None):
        self.block_num_or_id = block_num_or_id
        self.reason = reason
        super().__init__(
            'Invalid reference block num or id: {}'.format(block_num_or_id))

    def detail(self):
        return '{}: {} ({})'.format(self.code, self.message, self.reason)


class RemoteRejectionException(EvtcException):
    code = EvtcErrCode.EVTC_REMOTE_REJECTION

    def __init__(self, service, status, body):
        self.service = service
        self.status = status
        self.body = body
        super().__init__('{} rejected the request: {}'.format(
            service, self.summary()))

    def summary(self):
        # Both services report errors as {"code", "message", "error": {...}}
        if isinstance(self.body, dict):
            error = self.body.get('error')
            if isinstance(error, dict) and 'what' in error:
                return error['what']
            if 'message' in self.body:
                return self.body['message']
        return str(self.body)

    def detail(self):
        return '{}: {} [{}] {}'.format(self.code, self.service, self.status, self.body)


class StaleKeySetException(EvtcException):
    code = EvtcErrCode.EVTC_STALE_KEY_SET

    def __init__(self, unknown_keys):
        self.unknown_keys = unknown_keys
        super().__init__(
            'Required keys are not held by the wallet: {}'.format(', '.join(unknown_keys)))
