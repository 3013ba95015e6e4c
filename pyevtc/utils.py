import json
import re

from . import evtc_exception

JSON_PREFIX = re.compile(r'^\s*[\{\[]')

NAME128_MAX_LEN = 21
NAME128_PATTERN = re.compile(r'^[A-Za-z0-9.\-]+$')

B58_ALPHABET = '123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz'


def looks_like_json(file_or_str):
    # A file literally named like '{foo}' is read as inline JSON
    return JSON_PREFIX.match(file_or_str) is not None


def json_from_file_or_string(file_or_str):
    """Parse `file_or_str` as inline JSON if it starts with '{' or '['
    (leading whitespace ignored), otherwise as the path of a JSON file.

    Raises ValueError for malformed JSON and OSError for unreadable files.
    """
    if looks_like_json(file_or_str):
        return json.loads(file_or_str)
    with open(file_or_str, 'r') as f:
        return json.load(f)


def pretty(value):
    return json.dumps(value, indent=2, ensure_ascii=False)


def check_name128(name, field='name'):
    if not isinstance(name, str) or len(name) == 0 or len(name) > NAME128_MAX_LEN:
        raise evtc_exception.NameFormatException(field, name)
    if NAME128_PATTERN.match(name) is None:
        raise evtc_exception.NameFormatException(field, name)
    return name


def b58encode(data):
    num = int.from_bytes(data, 'big')
    out = ''
    while num > 0:
        num, rem = divmod(num, 58)
        out = B58_ALPHABET[rem] + out
    pad = len(data) - len(data.lstrip(b'\0'))
    return B58_ALPHABET[0] * pad + out


def b58decode(text):
    num = 0
    for ch in text:
        idx = B58_ALPHABET.find(ch)
        if idx < 0:
            raise ValueError('Invalid base58 character: {!r}'.format(ch))
        num = num * 58 + idx
    pad = len(text) - len(text.lstrip(B58_ALPHABET[0]))
    body = num.to_bytes((num.bit_length() + 7) // 8, 'big') if num else b''
    return b'\0' * pad + body
