DEFAULT_URL = 'http://localhost:8888'
DEFAULT_WALLET_URL = 'http://localhost:9999'
DEFAULT_EXPIRATION = 30
DEFAULT_TIMEOUT = 30

COMPRESSIONS = ['none', 'zlib']


class Config:
    def __init__(self, url=DEFAULT_URL, wallet_url=DEFAULT_WALLET_URL, **kwargs):
        self.url = url
        self.wallet_url = wallet_url
        self.verbose = False
        self.timeout = DEFAULT_TIMEOUT

        # Standard transaction options
        self.expiration = DEFAULT_EXPIRATION
        self.ref_block = ''
        self.skip_sign = False
        self.dont_broadcast = False
        self.compression = 'none'

        for attr, value in kwargs.items():
            self.set_args(attr, value)

    def set_args(self, attr, value):
        if not hasattr(self, attr):
            raise AttributeError('Unknown config option: {}'.format(attr))
        if attr == 'compression' and value not in COMPRESSIONS:
            raise ValueError('Unknown compression: {}'.format(value))
        self.__setattr__(attr, value)

    def copy(self, **kwargs):
        conf = Config(**self.dict())
        for attr, value in kwargs.items():
            conf.set_args(attr, value)
        return conf

    def dict(self):
        return {
            'url': self.url,
            'wallet_url': self.wallet_url,
            'verbose': self.verbose,
            'timeout': self.timeout,
            'expiration': self.expiration,
            'ref_block': self.ref_block,
            'skip_sign': self.skip_sign,
            'dont_broadcast': self.dont_broadcast,
            'compression': self.compression
        }
