"""
Encrypted persistence for the session envelope.

:class:`EncryptedStorage` sits on top of a key-value medium and encrypts every
value it writes. Reads never raise on bad data: a value that cannot be
decrypted or parsed is logged and reported as absent, so a corrupted envelope
only costs the user a new login.

The cipher key is derived from a configured secret. When that secret is the
default bundled with the code this is obfuscation, not confidentiality.

Media implement ``get``, ``set``, ``delete`` and ``commit``:

- :class:`CookieStorage` keeps values in the browser cookie jar. Writes are
  recorded and applied to the response in :meth:`CookieStorage.commit`.
- :class:`RedisStorage` keeps values in redis under a per-browser namespace.
- :class:`MemoryStorage` keeps values in a dict.
"""

import base64
import hashlib
import json
import uuid
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import jwt
import redis
from cryptography.fernet import Fernet, InvalidToken
from flask import Response

import logging

logger = logging.getLogger(__name__)

Raw = Union[str, bytes]


def _derive_key(secret: str) -> bytes:
    digest = hashlib.sha256(secret.encode('utf-8')).digest()
    return base64.urlsafe_b64encode(digest)


class EncryptedStorage(object):
    """Encrypts values on write and decrypts them on read."""

    def __init__(self, medium: Any, secret: str) -> None:
        self.medium = medium
        self._fernet = Fernet(_derive_key(secret))

    def read(self, key: str) -> Optional[Any]:
        """
        Read and decrypt the value stored under ``key``.

        Returns
        -------
        object or None
            ``None`` if nothing is stored, or if the stored value cannot be
            decrypted or parsed.

        """
        encrypted: Optional[Raw] = self.medium.get(key)
        if not encrypted:
            return None
        try:
            plaintext = self._fernet.decrypt(encrypted)
            return json.loads(plaintext.decode('utf-8'))
        except (InvalidToken, TypeError, ValueError) as e:
            logger.error('Could not decrypt value at %s: %r', key, e)
            return None

    def write(self, key: str, value: Any) -> None:
        """Serialize, encrypt and store ``value`` under ``key``."""
        stringified = json.dumps(value, sort_keys=True, separators=(',', ':'))
        encrypted = self._fernet.encrypt(stringified.encode('utf-8'))
        self.medium.set(key, encrypted.decode('ascii'))

    def remove(self, key: str) -> None:
        """Delete the value at ``key``; absent keys are fine."""
        self.medium.delete(key)


class MemoryStorage(object):
    """Dict-backed medium."""

    def __init__(self, data: Optional[Dict[str, Raw]] = None) -> None:
        self.data: Dict[str, Raw] = data if data is not None else {}

    def get(self, key: str) -> Optional[Raw]:
        return self.data.get(key)

    def set(self, key: str, value: Raw) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)

    def commit(self, response: Response) -> None:
        return None


class CookieStorage(object):
    """
    The browser cookie jar as a key-value medium.

    Reads see the request cookies overlaid with the writes made during this
    request. Writes reach the browser when :meth:`commit` is called with the
    outgoing response.
    """

    def __init__(self, cookies: Mapping[str, str], max_age: int,
                 secure: bool = False) -> None:
        self._cookies = cookies
        self._max_age = max_age
        self._secure = secure
        self._pending: Dict[str, Optional[str]] = {}

    def get(self, key: str) -> Optional[str]:
        if key in self._pending:
            return self._pending[key]
        return self._cookies.get(key)

    def set(self, key: str, value: Raw) -> None:
        if isinstance(value, bytes):
            value = value.decode('ascii')
        self._pending[key] = value

    def delete(self, key: str) -> None:
        self._pending[key] = None

    def commit(self, response: Response) -> None:
        for key, value in self._pending.items():
            if value is None:
                if key in self._cookies:
                    logger.debug('Delete cookie %s', key)
                    response.delete_cookie(key, httponly=True)
                continue
            logger.debug('Set cookie %s', key)
            params: Dict[str, Any] = dict(httponly=True, samesite='Lax')
            if self._secure:
                params['secure'] = True
            response.set_cookie(key, value, max_age=self._max_age, **params)
        self._pending.clear()


class RedisStorage(object):
    """
    A redis namespace as a key-value medium.

    The namespace is named by a browser id that travels in a signed cookie,
    so each browser has its own envelope under the same fixed key.
    """

    def __init__(self, r: redis.StrictRedis, browser_id: str,
                 max_age: int, new_browser_cookie: Optional[Tuple[str, str]] = None,
                 secure: bool = False) -> None:
        self.r = r
        self.browser_id = browser_id
        self._max_age = max_age
        self._new_browser_cookie = new_browser_cookie
        self._secure = secure

    def _key(self, key: str) -> str:
        return f'{self.browser_id}:{key}'

    def get(self, key: str) -> Optional[bytes]:
        value: Optional[bytes] = self.r.get(self._key(key))
        return value

    def set(self, key: str, value: Raw) -> None:
        self.r.set(self._key(key), value, ex=self._max_age)

    def delete(self, key: str) -> None:
        self.r.delete(self._key(key))

    def commit(self, response: Response) -> None:
        if self._new_browser_cookie is None:
            return None
        name, value = self._new_browser_cookie
        params: Dict[str, Any] = dict(httponly=True, samesite='Lax')
        if self._secure:
            params['secure'] = True
        response.set_cookie(name, value, max_age=self._max_age, **params)
        self._new_browser_cookie = None


def pack_browser_cookie(browser_id: str, secret: str) -> str:
    """Sign a browser id for use as a cookie value."""
    token = jwt.encode({'browser_id': browser_id}, secret, algorithm='HS256')
    if isinstance(token, bytes):
        return token.decode('ascii')
    return token


def unpack_browser_cookie(cookie: Optional[str], secret: str) -> Optional[str]:
    """Get the browser id from a signed cookie, or None if it is not valid."""
    if not cookie:
        return None
    try:
        data = jwt.decode(cookie, secret, algorithms=['HS256'])
    except jwt.exceptions.InvalidTokenError as e:
        logger.debug('Browser cookie is not valid: %s', e)
        return None
    browser_id: Optional[str] = data.get('browser_id')
    return browser_id


def redis_storage(r: redis.StrictRedis, cookies: Mapping[str, str],
                  cookie_name: str, secret: str, max_age: int,
                  secure: bool = False) -> RedisStorage:
    """Bind a :class:`RedisStorage` to the browser making this request."""
    browser_id = unpack_browser_cookie(cookies.get(cookie_name), secret)
    new_cookie = None
    if browser_id is None:
        browser_id = str(uuid.uuid4())
        new_cookie = (cookie_name, pack_browser_cookie(browser_id, secret))
        logger.debug('New browser id %s', browser_id)
    return RedisStorage(r, browser_id, max_age,
                        new_browser_cookie=new_cookie, secure=secure)
