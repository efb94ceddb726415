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
Unit tests for `rxcouch` package.

The tests run against `FakeCouch`, an in-memory CouchDB.  Tests derived from
`LiveTestCase` also need a real CouchDB and are skipped unless the
RXCOUCH_TEST_URL environment variable is set.
"""

from unittest import TestCase
from uuid import uuid4
import os
import time

import rxcouch

from .fakecouch import FakeCouch


FAKE_URL = 'http://fake.example.com:5984/'


def random_id():
    return uuid4().hex


def random_dbname():
    return 'db-' + uuid4().hex


def fake_server(**kw):
    couch = FakeCouch(**kw)
    ctx = rxcouch.Context(FAKE_URL, session=couch)
    return (couch, rxcouch.Server(ctx=ctx))


def fake_database(**kw):
    (couch, server) = fake_server(**kw)
    name = random_dbname()
    server.create_database(name)
    return (couch, server.db(name))


def wait_for(predicate, timeout=5):
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError('timeout waiting for {!r}'.format(predicate))
        time.sleep(0.005)


class LiveTestCase(TestCase):
    """
    Base class for tests that need a live CouchDB.

    These are skipped unless the RXCOUCH_TEST_URL environment variable is set
    to the URL of a server the tests may freely create and delete databases
    on, for example::

        RXCOUCH_TEST_URL=http://127.0.0.1:5984/ ./setup.py test

    Sub-classes should call ``super().setUp()`` first thing in their
    ``setUp()`` methods.
    """

    def setUp(self):
        url = os.environ.get('RXCOUCH_TEST_URL')
        if not url:
            self.skipTest('RXCOUCH_TEST_URL not set')
        self.server = rxcouch.Server(url)
        self.name = random_dbname()
        self.server.create_database(self.name)
        self.db = self.server.db(self.name)

    def tearDown(self):
        self.server.delete_database(self.name)
        self.server = None
        self.db = None
