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
Live change feeds and document observers.

Every subscription is a `Feed`: a worker thread makes the blocking requests and
puts what it finds into a queue, and the consumer takes items out by iterating
over the feed or by calling `Feed.get()`.  An exception raised in the worker is
put into the queue too, and is raised in the consumer when it reaches it,
after which the feed is finished.


Change feeds
------------

`iter_changes()` is the request loop behind `Database.changes()`.  With
``feed='longpoll'`` it GETs ``/db/_changes`` over and over, each time picking
up at the "last_seq" of the previous response:

    1. GET /db/_changes?feed=longpoll&since=<since>

    2. Yield each record in "results", in order

    3. Set *since* to "last_seq" and go back to 1, unless cancelled

Any other feed style makes exactly one request.  The ``continuous`` style
(a single never-ending response) isn't supported.


Document observers
------------------

`Database.observe()` first delivers the current doc (or a placeholder when it
doesn't exist yet) and then follows the doc using a dedicated long-poll feed
with ``filter=_doc_ids``.

Some servers don't support that filter.  The first time one refuses it with a
400 or 404, the `Database` remembers so, and from then on every observer on it
listens to one `SharedFeed` instead: a single long-poll feed over the whole
database, started at ``since=now``, whose docs are handed to every observer.
The `SharedFeed` is created by the first observer that needs it and stopped
when the last one is cancelled.

Either way, a `DocumentFeed` only delivers docs with its own "_id", and never
delivers the same "_rev" twice in a row.
"""

import logging
import threading
import time
from queue import Queue, Empty

from . import InvalidArgument, BadRequest, NotFound


log = logging.getLogger()

UNSUPPORTED_FEEDS = ('continuous',)
FILTER_ERRORS = (BadRequest, NotFound)
_END = object()
_NOTHING = object()


def _start_thread(target, *args):
    thread = threading.Thread(target=target, args=args)
    thread.daemon = True
    thread.start()
    return thread


class SmartQueue(Queue):
    """
    Queue with custom get() that raises exception instances from the queue.
    """

    def get(self, block=True, timeout=None):
        item = super().get(block, timeout)
        if isinstance(item, Exception):
            raise item
        return item


def check_options(options):
    feed = options.get('feed')
    if feed in UNSUPPORTED_FEEDS:
        raise InvalidArgument(
            'changes: feed={!r} is not supported'.format(feed)
        )


def doc_options(doc_id):
    """
    Return the ``_changes`` query for a dedicated feed on *doc_id*.

    >>> doc_options('foo')['doc_ids']
    ['foo']

    """
    return {
        'feed': 'longpoll',
        'filter': '_doc_ids',
        'doc_ids': [doc_id],
        'include_docs': True,
    }


def change_to_doc(record):
    """
    Return the doc carried by a ``_changes`` *record*, or ``None``.

    A deleted doc without an embedded body becomes a tombstone:

    >>> change_to_doc({'id': 'foo', 'deleted': True, 'changes': [{'rev': '2-a'}]})
    {'_id': 'foo', '_rev': '2-a', '_deleted': True}

    """
    doc = record.get('doc')
    if doc is None and record.get('deleted') and record.get('changes'):
        doc = {
            '_id': record['id'],
            '_rev': record['changes'][0]['rev'],
            '_deleted': True,
        }
    return doc


def iter_changes(db, options, cancelled):
    """
    Yield change records from *db* until done or until *cancelled* is set.
    """
    options = dict(options)
    while not cancelled.is_set():
        result = db.recv_json('GET', ('_changes',), options)
        for record in result['results']:
            yield record
        if options.get('feed') != 'longpoll':
            break
        options['since'] = result['last_seq']


class Feed:
    """
    A live subscription fed by a worker thread.

    The worker calls `Feed.put()` for each item, then `Feed.finish()`.  The
    consumer iterates:

    >>> feed = Feed()
    >>> feed.put('one')
    >>> feed.put('two')
    >>> feed.finish()
    >>> list(feed)
    ['one', 'two']

    Call `Feed.cancel()` to end the subscription early.  Cancelling is
    idempotent, and once cancelled no further items are delivered.  A `Feed`
    is also a context manager that cancels on exit.
    """

    def __init__(self):
        self.queue = SmartQueue()
        self.cancelled = threading.Event()
        self.thread = None
        self._lock = threading.Lock()
        self._cleanups = []
        self._done = False

    def __iter__(self):
        return self

    def __next__(self):
        return self.get()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.cancel()

    def start(self, target, *args):
        assert self.thread is None
        self.thread = _start_thread(target, self, *args)
        return self

    def put(self, item):
        self.queue.put(item)

    def finish(self):
        self.queue.put(_END)

    def on_cancel(self, func, *args):
        """
        Call ``func(*args)`` when this feed is cancelled.

        If it already has been, *func* is called right away.
        """
        with self._lock:
            if not self.cancelled.is_set():
                self._cleanups.append((func, args))
                return
        func(*args)

    def cancel(self):
        with self._lock:
            if self.cancelled.is_set():
                return
            self.cancelled.set()
            cleanups = self._cleanups
            self._cleanups = []
        self.queue.put(_END)
        for (func, args) in cleanups:
            func(*args)

    def join(self, timeout=None):
        if self.thread is not None:
            self.thread.join(timeout)

    def accept(self, item):
        return True

    def get(self, timeout=None):
        """
        Return the next item, waiting at most *timeout* seconds.

        Raises ``queue.Empty`` when the timeout is reached, and
        ``StopIteration`` once the feed has finished or was cancelled.
        """
        if timeout is not None:
            deadline = time.monotonic() + timeout
        while True:
            if self._done or self.cancelled.is_set():
                raise StopIteration
            remaining = None
            if timeout is not None:
                remaining = max(0, deadline - time.monotonic())
            try:
                item = self.queue.get(timeout=remaining)
            except Empty:
                raise
            except Exception:
                self._done = True
                raise
            if item is _END:
                self._done = True
                raise StopIteration
            if self.accept(item):
                return item


class DocumentFeed(Feed):
    """
    A `Feed` that only delivers new revisions of one doc.
    """

    def __init__(self, doc_id):
        super().__init__()
        self.doc_id = doc_id
        self.last_rev = _NOTHING

    def accept(self, doc):
        if doc.get('_id') != self.doc_id:
            return False
        rev = doc.get('_rev')
        if rev == self.last_rev:
            return False
        self.last_rev = rev
        return True


class SharedFeed:
    """
    One long-poll feed over a whole database, fanned out to many listeners.

    Each doc from the feed is put into every listening `Feed`.  If the feed
    fails, the exception is put into every listener and the `SharedFeed`
    detaches itself from its `Database`, so the next observer starts a new
    one.
    """

    def __init__(self, db):
        self.db = db
        self.listeners = set()
        self.cancelled = threading.Event()
        self.lock = threading.Lock()
        self.thread = None

    def __repr__(self):
        return '{}({!r})'.format(self.__class__.__name__, self.db)

    def start(self):
        assert self.thread is None
        self.thread = _start_thread(self.run)

    def add(self, feed):
        with self.lock:
            self.listeners.add(feed)
            return len(self.listeners)

    def remove(self, feed):
        with self.lock:
            self.listeners.discard(feed)
            return len(self.listeners)

    def dispatch(self, item):
        with self.lock:
            listeners = list(self.listeners)
        for feed in listeners:
            feed.put(item)

    def cancel(self):
        self.cancelled.set()

    def run(self):
        options = {'feed': 'longpoll', 'include_docs': True, 'since': 'now'}
        log.info('starting %r', self)
        try:
            for record in iter_changes(self.db, options, self.cancelled):
                doc = change_to_doc(record)
                if doc is not None:
                    self.dispatch(doc)
        except Exception as e:
            log.warning('%r failed: %r', self, e)
            self.cancel()
            with self.db.lock:
                if self.db.shared_feed is self:
                    self.db.shared_feed = None
            self.dispatch(e)
        else:
            log.info('stopped %r', self)


def attach_shared_feed(db, feed):
    """
    Add *feed* as a listener on the `SharedFeed` for *db*, starting it if
    needed.
    """
    with db.lock:
        shared = db.shared_feed
        if shared is None:
            shared = SharedFeed(db)
            db.shared_feed = shared
            shared.start()
        shared.add(feed)
    feed.on_cancel(release_shared_feed, db, shared, feed)
    return shared


def release_shared_feed(db, shared, feed):
    with db.lock:
        if shared.remove(feed) > 0:
            return
        shared.cancel()
        if db.shared_feed is shared:
            db.shared_feed = None


def mark_filter_unsupported(db, error):
    with db.lock:
        if db.filter_unsupported:
            return
        db.filter_unsupported = True
    log.warning('%r: filter=_doc_ids refused (%s), using a shared feed',
        db, error
    )


def get_or_placeholder(db, doc_id):
    try:
        return db.get(doc_id)
    except NotFound:
        return {'_id': doc_id, '_empty': True}


def _changes_worker(feed, db, options):
    try:
        for record in iter_changes(db, options, feed.cancelled):
            feed.put(record)
    except Exception as e:
        log.warning('changes feed for %r failed: %r', db, e)
        feed.put(e)
    else:
        feed.finish()


def _observe_worker(feed, db, doc_id):
    try:
        feed.put(get_or_placeholder(db, doc_id))
        if not db.filter_unsupported:
            try:
                records = iter_changes(db, doc_options(doc_id), feed.cancelled)
                for record in records:
                    doc = change_to_doc(record)
                    if doc is not None:
                        feed.put(doc)
                return
            except FILTER_ERRORS as e:
                mark_filter_unsupported(db, e)
        if not feed.cancelled.is_set():
            attach_shared_feed(db, feed)
    except Exception as e:
        log.warning('observer for %r in %r failed: %r', doc_id, db, e)
        feed.put(e)


def start_changes(db, options):
    check_options(options)
    return Feed().start(_changes_worker, db, options)


def start_observe(db, doc_id):
    return DocumentFeed(doc_id).start(_observe_worker, db, doc_id)
