# rxcouch: live streams from a lightweight Couch
# Copyright (C) 2011-2026 Novacut Inc
#
# This file is part of `rxcouch`.
#
# `rxcouch` is free software: you can redistribute it and/or modify it under
# the terms of the GNU Lesser General Public License as published by the Free
# Software Foundation, either version 3 of the License, or (at your option) any
# later version.
#
# `rxcouch` is distributed in the hope that it will be useful, but WITHOUT
# ANY WARRANTY; without even the implied warranty of MERCHANTABILITY or FITNESS
# FOR A PARTICULAR PURPOSE.  See the GNU Lesser General Public License for more
# details.
#
# You should have received a copy of the GNU Lesser General Public License along
# with `rxcouch`.  If not, see <http://www.gnu.org/licenses/>.
#
# Authors:
#   Jason Gerard DeRose <jderose@novacut.com>
#

"""
`rxcouch` - live streams from a lightweight Couch.

RxCouch is a small client for the CouchDB REST API.  Point operations (get,
put, delete, listing databases, and so on) are plain blocking calls that return
the decoded JSON response.  On top of those, RxCouch offers two kinds of
long-lived subscriptions:

    * `Database.changes()` - the ``_changes`` feed, optionally as a long-poll
      loop that runs until you cancel it

    * `Database.observe()` - a live, de-duplicated view of a single document

Both subscriptions are `rxcouch.feed.Feed` instances: iterate over them, or
call ``Feed.get()`` with a timeout, and call ``Feed.cancel()`` when you're done.

Finally, `Database.update()` and `Database.replace()` provide a convenient
read-modify-write cycle that discovers the current revision for you and skips
the write entirely when nothing would change.
"""

import json
import re
import threading
import platform
import logging
from urllib.parse import urlparse, urlencode, quote

import requests


__all__ = (
    'Context',
    'Server',
    'Database',

    'InvalidArgument',
    'InvalidConfiguration',
    'TransportFailure',
    'RemoteError',
    'BadRequest',
    'Unauthorized',
    'Forbidden',
    'NotFound',
    'MethodNotAllowed',
    'NotAcceptable',
    'Conflict',
    'PreconditionFailed',
    'BadContentType',
    'BadRangeRequest',
    'ExpectationFailed',

    'ServerError',
)

__version__ = '26.10.0'
log = logging.getLogger()
USER_AGENT = 'RxCouch/{} ({} {}; {})'.format(__version__,
    platform.system(), platform.release(), platform.machine()
)

HTTP_IPv4_URL = 'http://127.0.0.1:5984/'
HTTPS_IPv4_URL = 'https://127.0.0.1:6984/'
HTTP_IPv6_URL = 'http://[::1]:5984/'
HTTPS_IPv6_URL = 'https://[::1]:6984/'
URL_CONSTANTS = (
    HTTP_IPv4_URL,
    HTTPS_IPv4_URL,
    HTTP_IPv6_URL,
    HTTPS_IPv6_URL,
)
DEFAULT_URL = HTTP_IPv4_URL

DBNAME_RE = re.compile('[a-z][a-z0-9_$()+/-]*')
SPECIAL_PREFIXES = ('_design/', '_local/')


class InvalidArgument(ValueError):
    """
    Raised when a caller-supplied argument fails local validation.

    Always raised before any request is made.
    """


class InvalidConfiguration(ValueError):
    """
    Raised by `Context` when the server URL or SSL config is malformed.
    """


class TransportFailure(Exception):
    """
    Raised when the request never got an HTTP response (connection refused,
    connection reset, etc).

    The ``requests`` exception is available as ``__cause__``.
    """

    def __init__(self, error, method, url):
        self.error = error
        self.method = method
        self.url = url
        super().__init__('{}: {} {}'.format(error, method, url))


class RemoteError(Exception):
    """
    Base class for exceptions raised based on HTTP response status.
    """

    def __init__(self, response, method, url):
        self.response = response
        self.status = response.status_code
        self.reason = response.reason
        self.data = (b'' if response.content is None else response.content)
        self.method = method
        self.url = url
        super().__init__()

    def __str__(self):
        return '{} {}: {} {}'.format(
            self.status, self.reason, self.method, self.url
        )


class ClientError(RemoteError):
    """
    Base class for all 4xx Client Error exceptions.
    """


class BadRequest(ClientError):
    '400 Bad Request'

class Unauthorized(ClientError):
    '401 Unauthorized'

class Forbidden(ClientError):
    '403 Forbidden'

class NotFound(ClientError):
    '404 Not Found'

class MethodNotAllowed(ClientError):
    '405 Method Not Allowed'

class NotAcceptable(ClientError):
    '406 Not Acceptable'

class Conflict(ClientError):
    '409 Conflict'

class Gone(ClientError):
    '410 Gone'

class LengthRequired(ClientError):
    '411 Length Required'

class PreconditionFailed(ClientError):
    '412 Precondition Failed'

class BadContentType(ClientError):
    '415 Unsupported Media Type'

class BadRangeRequest(ClientError):
    '416 Requested Range Not Satisfiable'

class ExpectationFailed(ClientError):
    '417 Expectation Failed'


class ServerError(RemoteError):
    """
    Used to raise exceptions for any 5xx Server Errors.
    """


errors = {
    400: BadRequest,
    401: Unauthorized,
    403: Forbidden,
    404: NotFound,
    405: MethodNotAllowed,
    406: NotAcceptable,
    409: Conflict,
    410: Gone,
    411: LengthRequired,
    412: PreconditionFailed,
    415: BadContentType,
    416: BadRangeRequest,
    417: ExpectationFailed,
}


def dumps(obj, pretty=False):
    """
    Safe and opinionated use of ``json.dumps()``.

    This function always calls ``json.dumps()`` with *ensure_ascii=False* and
    *sort_keys=True*.

    For example:

    >>> doc = {
    ...     'hello': 'мир',
    ...     'welcome': 'все',
    ... }
    >>> dumps(doc)
    '{"hello":"мир","welcome":"все"}'

    By default compact encoding is used, but if you supply *pretty=True*,
    4-space indentation will be used:

    >>> print(dumps(doc, pretty=True))
    {
        "hello": "мир",
        "welcome": "все"
    }

    """
    if pretty:
        return json.dumps(obj,
            ensure_ascii=False,
            sort_keys=True,
            separators=(',',': '),
            indent=4,
        )
    return json.dumps(obj,
        ensure_ascii=False,
        sort_keys=True,
        separators=(',',':'),
    )


def _json_body(obj):
    if obj is None:
        return None
    if isinstance(obj, bytes):
        return obj
    return dumps(obj).encode()


def _queryiter(options):
    """
    Return appropriately encoded (key, value) pairs sorted by key.

    An ``str`` value is used verbatim, anything else is JSON encoded (so a
    ``list`` becomes a JSON array and ``True`` becomes ``'true'``).
    """
    for key in sorted(options):
        value = options[key]
        if not isinstance(value, str):
            value = json.dumps(value, sort_keys=True, separators=(',',':'))
        yield (key, value)


def _quote_strings(options):
    """
    Wrap ``str`` values in double quotes unless they are already quoted.

    CouchDB wants JSON encoded values for keys like "startkey" in the
    ``_all_docs`` query string.  For example:

    >>> _quote_strings({'startkey': 'foo', 'endkey': '"bar"', 'limit': 5})
    {'startkey': '"foo"', 'endkey': '"bar"', 'limit': 5}

    """
    quoted = {}
    for (key, value) in options.items():
        if isinstance(value, str) and not (
            value.startswith('"') and value.endswith('"')
        ):
            value = '"' + value + '"'
        quoted[key] = value
    return quoted


def validate_dbname(name, api):
    """
    Return *name* if it's a legal database name, else raise `InvalidArgument`.

    For example:

    >>> validate_dbname('my-db', 'db')
    'my-db'
    >>> validate_dbname('_users', 'db')
    Traceback (most recent call last):
      ...
    rxcouch.InvalidArgument: db: illegal name: '_users'

    """
    if not isinstance(name, str):
        raise InvalidArgument(
            '{}: name must be a string; got {!r}'.format(api, name)
        )
    if not DBNAME_RE.fullmatch(name):
        raise InvalidArgument('{}: illegal name: {!r}'.format(api, name))
    return name


def dbname_path(name):
    return quote(name, safe='')


def doc_path(doc_id):
    """
    Percent-escape *doc_id* for use in a request path.

    For example:

    >>> doc_path('foo/bar')
    'foo%2Fbar'

    The slash after a "_design" or "_local" prefix is kept:

    >>> doc_path('_design/foo')
    '_design/foo'

    """
    for prefix in SPECIAL_PREFIXES:
        if doc_id.startswith(prefix):
            return prefix + quote(doc_id[len(prefix):], safe='')
    return quote(doc_id, safe='')


def _check_string(value, api, label):
    if value is None or value == '':
        raise InvalidArgument('{}: missing {}'.format(api, label))
    if not isinstance(value, str):
        raise InvalidArgument(
            '{}: invalid {}; got {!r}'.format(api, label, value)
        )


def _check_doc(value, api):
    if value is None:
        raise InvalidArgument('{}: missing document value'.format(api))
    if not isinstance(value, dict):
        raise InvalidArgument(
            '{}: invalid document value; got {!r}'.format(api, value)
        )


def json_equal(a, b):
    """
    Return True if JSON values *a* and *b* are structurally equal.

    Unlike ``==``, a ``bool`` is never equal to a number:

    >>> json_equal({'a': [1, 2.0]}, {'a': [1.0, 2]})
    True
    >>> json_equal({'a': True}, {'a': 1})
    False

    """
    if isinstance(a, dict):
        if not isinstance(b, dict) or a.keys() != b.keys():
            return False
        return all(json_equal(a[key], b[key]) for key in a)
    if isinstance(a, (list, tuple)):
        if not isinstance(b, (list, tuple)) or len(a) != len(b):
            return False
        return all(json_equal(x, y) for (x, y) in zip(a, b))
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return a == b
    return type(a) is type(b) and a == b


def deep_merge(base, override):
    """
    Return a new ``dict`` with *override* recursively merged into *base*.

    Values in *override* win, except that when both sides hold a JSON object
    the two objects are merged.  Neither argument is modified.

    >>> deep_merge({'a': 1, 'b': {'c': 2, 'd': 3}}, {'b': {'c': 4}, 'e': 5})
    {'a': 1, 'b': {'c': 4, 'd': 3}, 'e': 5}

    """
    merged = dict(base)
    for (key, value) in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _replace_doc(old, value):
    new = dict(value)
    if '_rev' in old:
        new['_rev'] = old['_rev']
    return new


def build_ssl_options(config):
    """
    Map an ``env['ssl']`` config onto ``requests`` *verify* and *cert* options.

    A *ca_file* means the server certificate is checked against it, so it
    can't be combined with ``verify=False``.

    >>> build_ssl_options({})
    (True, None)
    >>> build_ssl_options({'ca_file': '/my/ca.pem', 'cert_file': '/my/cert.pem'})
    ('/my/ca.pem', '/my/cert.pem')

    """
    if not isinstance(config, dict):
        raise TypeError(
            'ssl config must be a `dict`; got {!r}'.format(config)
        )
    if 'ca_file' in config and config.get('verify') is False:
        raise InvalidConfiguration(
            'ssl: ca_file cannot be combined with verify=False'
        )
    verify = config.get('ca_file', config.get('verify', True))
    cert = config.get('cert_file')
    if cert is not None and config.get('key_file') is not None:
        cert = (cert, config['key_file'])
    return (verify, cert)


def create_session(ssl_options=None):
    """
    Create a ``requests.Session``, optionally configured for SSL.
    """
    session = requests.Session()
    if ssl_options is not None:
        (session.verify, session.cert) = ssl_options
    return session


class Context:
    """
    Shared connection state for `Server` and `Database` instances.

    A `Context` holds the validated server URL and the HTTP sessions used to
    talk to it.  Each thread transparently gets its own thread-local
    ``requests.Session``, which matters because every live feed runs in its
    own worker thread.

    A `Server` and every `Database` created from it share one `Context`:

    >>> server = Server('http://localhost:5984')
    >>> server.url
    'http://localhost:5984/'
    >>> server.db('foo').ctx is server.ctx
    True

    The server URL must not carry a path or a query string:

    >>> Context('http://localhost:5984/foo')
    Traceback (most recent call last):
      ...
    rxcouch.InvalidConfiguration: server url must not contain a path or query string; got 'http://localhost:5984/foo'

    Pass *session* to use a single session-like object for every thread
    instead (anything with a ``requests.Session.request()`` compatible
    method will do).
    """

    __slots__ = ('env', 'basepath', 't', 'url', 'threadlocal', 'session',
        'ssl_options'
    )

    def __init__(self, env=None, session=None):
        if env is None:
            env = DEFAULT_URL
        if not isinstance(env, (dict, str)):
            raise TypeError(
                'env must be a `dict` or `str`; got {!r}'.format(env)
            )
        self.env = ({'url': env} if isinstance(env, str) else env)
        url = self.env.get('url', DEFAULT_URL)
        t = urlparse(url)
        if t.scheme not in ('http', 'https'):
            raise InvalidConfiguration(
                'url scheme must be http or https; got {!r}'.format(url)
            )
        if not t.netloc:
            raise InvalidConfiguration('bad url: {!r}'.format(url))
        if t.path not in ('', '/') or t.params or t.query:
            raise InvalidConfiguration(
                'server url must not contain a path or query string; '
                'got {!r}'.format(url)
            )
        self.basepath = '/'
        self.t = t
        self.url = self.full_url(self.basepath)
        self.threadlocal = threading.local()
        self.session = session
        if t.scheme == 'https':
            self.ssl_options = build_ssl_options(self.env.get('ssl', {}))
        else:
            self.ssl_options = None

    def full_url(self, path):
        return ''.join([self.t.scheme, '://', self.t.netloc, path])

    def get_threadlocal_session(self):
        if self.session is not None:
            return self.session
        session = getattr(self.threadlocal, 'session', None)
        if session is None:
            session = create_session(self.ssl_options)
            self.threadlocal.session = session
        return session


class CouchBase:
    """
    Base class for `Server` and `Database`.

    Request bodies are empty or JSON, and response bodies are JSON.  Any
    response status of 400 or higher is raised as the matching `RemoteError`
    subclass, so callers only ever see successful responses.
    """

    def __init__(self, env=None, ctx=None):
        self.ctx = (Context(env) if ctx is None else ctx)
        self.env = self.ctx.env
        self.basepath = self.ctx.basepath
        self.url = self.ctx.url

    def raw_request(self, method, path, body, headers):
        session = self.ctx.get_threadlocal_session()
        url = self.ctx.full_url(path)
        try:
            return session.request(method, url, data=body, headers=headers)
        except requests.RequestException as e:
            raise TransportFailure(e, method, url) from e

    def request(self, method, parts, options, body=None, headers=None):
        h = {'user-agent': USER_AGENT}
        if headers:
            h.update(headers)
        path = (self.basepath + '/'.join(parts) if parts else self.basepath)
        if options:
            path = '?'.join([path, urlencode(tuple(_queryiter(options)))])
        response = self.raw_request(method, path, body, h)
        if response.status_code >= 500:
            raise ServerError(response, method, self.ctx.full_url(path))
        if response.status_code >= 400:
            E = errors.get(response.status_code, ClientError)
            raise E(response, method, self.ctx.full_url(path))
        return response

    def recv_json(self, method, parts, options, body=None, headers=None):
        if headers is None:
            headers = {}
        headers['accept'] = 'application/json'
        if body is not None:
            headers['content-type'] = 'application/json'
        response = self.request(method, parts, options, body, headers)
        data = (b'' if response.content is None else response.content)
        return json.loads(data.decode())


class Server(CouchBase):
    """
    Server-level operations.

    For example:

    >>> s = Server('http://localhost:5984/')
    >>> s
    Server('http://localhost:5984/')
    >>> s.url
    'http://localhost:5984/'

    """

    def __repr__(self):
        return '{}({!r})'.format(self.__class__.__name__, self.url)

    def db(self, name):
        """
        Create a `Database` with the same `Context` as this `Server`.

        This makes no request, so the database doesn't need to exist yet.
        """
        return Database(name, ctx=self.ctx)

    def all_databases(self):
        """
        Return a list with the names of all databases on the server.
        """
        return self.recv_json('GET', ('_all_dbs',), None)

    def create_database(self, name, fail_if_exists=False):
        """
        Create the database *name*.

        If the database already exists, the `PreconditionFailed` error from
        CouchDB is quietly consumed, unless you call with
        ``fail_if_exists=True``.
        """
        validate_dbname(name, 'create_database')
        if not isinstance(fail_if_exists, bool):
            raise InvalidArgument(
                'create_database: fail_if_exists must be a bool; '
                'got {!r}'.format(fail_if_exists)
            )
        try:
            self.recv_json('PUT', (dbname_path(name),), None)
            log.info('created database %r at %s', name, self.url)
        except PreconditionFailed:
            if fail_if_exists:
                raise
            log.warning('database %r already exists at %s', name, self.url)

    def delete_database(self, name):
        """
        Delete the database *name*, which is fine if it doesn't exist.
        """
        validate_dbname(name, 'delete_database')
        try:
            self.recv_json('DELETE', (dbname_path(name),), None)
            log.info('deleted database %r at %s', name, self.url)
        except NotFound:
            pass

    def replicate(self, obj):
        """
        POST *obj* to ``/_replicate`` and return the replication status.

        For details on what *obj* can contain, see:

            http://docs.couchdb.org/en/latest/api/server/common.html#replicate
        """
        if not isinstance(obj, dict):
            raise InvalidArgument(
                'replicate: options must be a dict; got {!r}'.format(obj)
            )
        log.info('replicating %r => %r', obj.get('source'), obj.get('target'))
        return self.recv_json('POST', ('_replicate',), None, _json_body(obj))


class Database(CouchBase):
    """
    Database-level operations, plus live feeds.

    For example:

    >>> db = Database('dmedia', 'http://localhost:5984/')
    >>> db
    Database('dmedia', 'http://localhost:5984/')
    >>> db.name
    'dmedia'
    >>> db.dburl
    'http://localhost:5984/dmedia'
    >>> db.basepath
    '/dmedia/'

    Each instance also holds the state shared by every `Database.observe()`
    subscription made through it:

        * ``filter_unsupported`` - set once the server has refused a
          ``filter=_doc_ids`` change feed, never reset

        * ``shared_feed`` - the `rxcouch.feed.SharedFeed` used as fallback, or
          ``None`` when no observer needs one

    Both are only touched while holding ``lock``.
    """

    def __init__(self, name, env=None, ctx=None):
        validate_dbname(name, 'db')
        super().__init__(env, ctx)
        self.name = name
        self.basepath += (dbname_path(name) + '/')
        self.dburl = self.ctx.full_url(self.basepath[:-1])
        self.lock = threading.Lock()
        self.filter_unsupported = False
        self.shared_feed = None

    def __repr__(self):
        return '{}({!r}, {!r})'.format(
            self.__class__.__name__, self.name, self.url
        )

    def server(self):
        """
        Create a `Server` with the same `Context` as this `Database`.
        """
        return Server(ctx=self.ctx)

    def get(self, doc_id=None, **options):
        """
        Return the doc with *doc_id*.

        Any keyword arguments are passed as query parameters, for example to
        get a specific revision:

        >>> db = Database('foo')
        >>> db.get('bar', rev='1-967a00dff5e02add41819138abb3284d')  #doctest: +SKIP
        {'_id': 'bar', '_rev': '1-967a00dff5e02add41819138abb3284d'}

        """
        _check_string(doc_id, 'get', 'document ID')
        return self.recv_json('GET', (doc_path(doc_id),), options)

    def put(self, value=None):
        """
        Create or update the doc *value*.

        If *value* has an "_id", the doc is PUT to that ID, otherwise it's
        POSTed and CouchDB assigns the ID.  When *value* has a "_rev", it's
        sent in an "If-Match" header, so updating an existing doc requires its
        current revision.

        *value* is not modified:

        >>> db = Database('foo')
        >>> doc = {'_id': 'bar', 'micro': 'fiber'}
        >>> db.put(doc)  #doctest: +SKIP
        {'id': 'bar', 'ok': True, 'rev': '1-fae0708c46b4a6c9c497c3a687170ad6'}
        >>> doc
        {'_id': 'bar', 'micro': 'fiber'}

        """
        _check_doc(value, 'put')
        doc = dict(value)
        if '_id' in doc:
            _check_string(doc['_id'], 'put', 'document ID')
        headers = {}
        if '_rev' in doc:
            _check_string(doc['_rev'], 'put', 'revision ID')
            headers['if-match'] = doc.pop('_rev')
        doc_id = doc.pop('_id', None)
        body = _json_body(doc)
        if doc_id is not None:
            return self.recv_json('PUT', (doc_path(doc_id),), None, body,
                headers
            )
        return self.recv_json('POST', None, None, body, headers)

    def delete(self, doc_id=None, rev=None):
        """
        Delete revision *rev* of the doc with *doc_id*.

        Returns the response with the revision of the new deletion tombstone.
        """
        _check_string(doc_id, 'delete', 'document ID')
        _check_string(rev, 'delete', 'revision ID')
        return self.recv_json('DELETE', (doc_path(doc_id),), None, None,
            {'if-match': rev}
        )

    def all_docs(self, **options):
        """
        GET ``/db/_all_docs``, JSON-quoting any ``str`` options.

        So this:

            ``db.all_docs(startkey='foo', endkey='foo\\ufff0')``

        Is the same as:

            ``db.all_docs(startkey='"foo"', endkey='"foo\\ufff0"')``
        """
        return self.recv_json('GET', ('_all_docs',), _quote_strings(options))

    def update(self, value=None):
        """
        Merge *value* into the current doc and save the result.

        *value* needs an "_id" but must not have a "_rev", as the current
        revision is retrieved first.  If the doc doesn't exist, it is created.
        Nested objects are merged recursively, with *value* winning.

        When the merge wouldn't change anything, nothing is saved and the
        current revision is returned along with ``'noop': True``.

        If someone else saves the doc between our GET and PUT, the `Conflict`
        is raised.  No retry is attempted.
        """
        return self._merge_and_put(value, 'update', deep_merge)

    def replace(self, value=None):
        """
        Replace the current doc with *value*.

        Exactly like `Database.update()`, except the fields in *value* become
        the whole new doc instead of being merged.
        """
        return self._merge_and_put(value, 'replace', _replace_doc)

    def _merge_and_put(self, value, api, merge):
        _check_doc(value, api)
        if '_id' not in value:
            raise InvalidArgument('{}: _id is missing'.format(api))
        if '_rev' in value:
            raise InvalidArgument('{}: _rev is not allowed'.format(api))
        doc_id = value['_id']
        _check_string(doc_id, api, 'document ID')
        try:
            old = self.get(doc_id)
        except NotFound:
            old = {'_id': doc_id}
        new = merge(old, value)
        if json_equal(new, old):
            return {'id': doc_id, 'ok': True, 'rev': old.get('_rev'), 'noop': True}
        return self.put(new)

    def replicate_from(self, obj):
        """
        Start a replication into this database.

        *obj* is the replication request minus the "target", which is set to
        this database.
        """
        if not isinstance(obj, dict):
            raise InvalidArgument(
                'replicate_from: options must be a dict; got {!r}'.format(obj)
            )
        if 'target' in obj:
            raise InvalidArgument(
                'replicate_from: options must not contain a target'
            )
        body = dict(obj)
        body['target'] = self.dburl
        return self.server().replicate(body)

    def changes(self, **options):
        """
        Return a `rxcouch.feed.Feed` of change records from ``/db/_changes``.

        The keyword arguments become the query.  With ``feed='longpoll'`` the
        request is repeated forever, each time from the "last_seq" of the
        previous response, until you cancel the feed.  Otherwise a single
        request is made and the feed ends after its results.

        For example:

        >>> db = Database('foo')
        >>> feed = db.changes(feed='longpoll', include_docs=True)  #doctest: +SKIP
        >>> for change in feed:  #doctest: +SKIP
        ...     print(change['id'])
        ...

        ``feed='continuous'`` isn't supported and raises `InvalidArgument`.
        """
        from .feed import start_changes
        return start_changes(self, options)

    def observe(self, doc_id=None):
        """
        Return a `rxcouch.feed.DocumentFeed` for the doc with *doc_id*.

        The first value is the current doc, or ``{'_id': doc_id, '_empty':
        True}`` when it doesn't exist yet.  After that, every new revision is
        delivered, without repeats of the same revision.
        """
        _check_string(doc_id, 'observe', 'document ID')
        from .feed import start_observe
        return start_observe(self, doc_id)
