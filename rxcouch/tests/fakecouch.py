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
An in-memory CouchDB for unit tests.

`FakeCouch` implements enough of the CouchDB REST API for the `rxcouch` tests,
and has a ``requests.Session`` compatible `FakeCouch.request()` method, so it
can be passed as the *session* to `rxcouch.Context`.
"""

from collections import namedtuple
from hashlib import md5
from urllib.parse import urlparse, parse_qsl, unquote
from uuid import uuid4
import json
import re
import threading


FakeResponse = namedtuple('FakeResponse', 'status_code reason headers content')
FakeRequest = namedtuple('FakeRequest', 'method path query headers body')

REASONS = {
    200: 'OK',
    201: 'Created',
    400: 'Bad Request',
    404: 'Not Found',
    405: 'Method Not Allowed',
    409: 'Conflict',
    412: 'Precondition Failed',
    500: 'Internal Server Error',
}

REV_RE = re.compile('[1-9][0-9]*-[0-9a-f]+')


def json_response(status, obj):
    return FakeResponse(
        status,
        REASONS[status],
        {'content-type': 'application/json'},
        json.dumps(obj).encode(),
    )


def not_found(reason='missing'):
    return json_response(404, {'error': 'not_found', 'reason': reason})


class FakeDatabase:
    def __init__(self):
        self.docs = {}
        self.seqs = {}
        self.revs = {}
        self.update_seq = 0
        self.deleted = False


class FakeCouch:
    """
    Thread-safe in-memory CouchDB.

    *doc_ids_filter* controls whether ``filter=_doc_ids`` change feeds are
    supported; when False they get a 400 response.  An empty long-poll request
    waits at most *longpoll_timeout* seconds (or its "timeout" parameter, in
    milliseconds) before returning an empty result.

    Every request is recorded in ``requests``, and ``failures`` can map a
    ``(method, path)`` pair to a status to return instead.
    """

    def __init__(self, doc_ids_filter=True, longpoll_timeout=0.05):
        self.doc_ids_filter = doc_ids_filter
        self.longpoll_timeout = longpoll_timeout
        self.databases = {}
        self.requests = []
        self.replications = []
        self.failures = {}
        self.cond = threading.Condition()

    def changes_requests(self, db_name=None, **query):
        with self.cond:
            return [
                r for r in self.requests
                if r.path.endswith('/_changes')
                and (db_name is None or r.path == '/{}/_changes'.format(db_name))
                and all(r.query.get(k) == v for (k, v) in query.items())
            ]

    def request(self, method, url, data=None, headers=None):
        t = urlparse(url)
        query = dict(parse_qsl(t.query))
        headers = dict((k.lower(), v) for (k, v) in (headers or {}).items())
        body = (json.loads(data.decode()) if data else None)
        pieces = t.path.split('/')[1:]
        if pieces and pieces[-1] == '':
            pieces.pop()
        parts = [unquote(p) for p in pieces]
        with self.cond:
            self.requests.append(FakeRequest(method, t.path, query, headers, body))
            status = self.failures.get((method, t.path))
            if status is not None:
                return json_response(status, {'error': 'injected'})
            return self.dispatch(method, parts, query, headers, body)

    def dispatch(self, method, parts, query, headers, body):
        if not parts:
            return json_response(200, {'couchdb': 'Welcome'})
        if parts == ['_all_dbs']:
            return json_response(200, sorted(self.databases))
        if parts == ['_replicate']:
            if method != 'POST':
                return json_response(405, {'error': 'method_not_allowed'})
            self.replications.append(body)
            return json_response(200, {'ok': True, 'history': []})
        name = parts[0]
        if len(parts) == 1:
            return self.database_request(method, name, body, headers)
        db = self.databases.get(name)
        if db is None:
            return not_found('no_db_file')
        rest = parts[1:]
        if rest == ['_all_docs']:
            return self.all_docs(db, query)
        if rest == ['_changes']:
            return self.changes(db, query)
        doc_id = '/'.join(rest)
        if method == 'GET':
            return self.get(db, doc_id, query)
        if method == 'PUT':
            return self.save(db, doc_id, body, headers.get('if-match'), 201)
        if method == 'DELETE':
            rev = headers.get('if-match', query.get('rev'))
            return self.save(db, doc_id, {'_deleted': True}, rev, 200)
        return json_response(405, {'error': 'method_not_allowed'})

    def database_request(self, method, name, body, headers):
        db = self.databases.get(name)
        if method == 'PUT':
            if db is not None:
                return json_response(412, {'error': 'file_exists'})
            self.databases[name] = FakeDatabase()
            return json_response(201, {'ok': True})
        if db is None:
            return not_found('no_db_file')
        if method == 'DELETE':
            del self.databases[name]
            db.deleted = True
            self.cond.notify_all()
            return json_response(200, {'ok': True})
        if method == 'GET':
            return json_response(200,
                {'db_name': name, 'update_seq': db.update_seq}
            )
        if method == 'POST':
            doc_id = body.pop('_id', None) or uuid4().hex
            return self.save(db, doc_id, body, headers.get('if-match'), 201)
        return json_response(405, {'error': 'method_not_allowed'})

    def get(self, db, doc_id, query):
        if 'rev' in query:
            doc = db.revs.get((doc_id, query['rev']))
        else:
            doc = db.docs.get(doc_id)
        if doc is None or doc.get('_deleted'):
            return not_found('deleted' if doc else 'missing')
        return json_response(200, doc)

    def save(self, db, doc_id, body, rev, status):
        if rev is not None and not REV_RE.fullmatch(rev):
            return json_response(400,
                {'error': 'bad_request', 'reason': 'Invalid rev format'}
            )
        current = db.docs.get(doc_id)
        live = (current is not None and not current.get('_deleted'))
        if body.get('_deleted') and not live:
            return not_found('missing')
        if live and rev != current['_rev']:
            return json_response(409,
                {'error': 'conflict', 'reason': 'Document update conflict.'}
            )
        if not live and rev is not None and (current is None or rev != current['_rev']):
            return json_response(409,
                {'error': 'conflict', 'reason': 'Document update conflict.'}
            )
        body = dict((k, v) for (k, v) in body.items() if k not in ('_id', '_rev'))
        gen = (int(current['_rev'].split('-')[0]) + 1 if current else 1)
        digest = md5(
            json.dumps([rev, body], sort_keys=True).encode()
        ).hexdigest()
        new_rev = '{}-{}'.format(gen, digest)
        if body.get('_deleted'):
            doc = {'_id': doc_id, '_rev': new_rev, '_deleted': True}
        else:
            doc = dict(body, _id=doc_id, _rev=new_rev)
        db.docs[doc_id] = doc
        db.revs[(doc_id, new_rev)] = doc
        db.update_seq += 1
        db.seqs[doc_id] = db.update_seq
        self.cond.notify_all()
        return json_response(status, {'id': doc_id, 'ok': True, 'rev': new_rev})

    def all_docs(self, db, query):
        startkey = json.loads(query.get('startkey', 'null'))
        endkey = json.loads(query.get('endkey', 'null'))
        include_docs = (query.get('include_docs') == 'true')
        rows = []
        for doc_id in sorted(db.docs):
            doc = db.docs[doc_id]
            if doc.get('_deleted'):
                continue
            if startkey is not None and doc_id < startkey:
                continue
            if endkey is not None and doc_id > endkey:
                continue
            row = {'id': doc_id, 'key': doc_id, 'value': {'rev': doc['_rev']}}
            if include_docs:
                row['doc'] = doc
            rows.append(row)
        if 'limit' in query:
            rows = rows[:int(query['limit'])]
        return json_response(200,
            {'offset': 0, 'rows': rows, 'total_rows': len(rows)}
        )

    def changes(self, db, query):
        feed = query.get('feed', 'normal')
        since = query.get('since', '0')
        since = (db.update_seq if since == 'now' else int(since))
        doc_ids = None
        if query.get('filter') == '_doc_ids':
            if not self.doc_ids_filter:
                return json_response(400,
                    {'error': 'bad_request', 'reason': 'unknown filter'}
                )
            doc_ids = json.loads(query['doc_ids'])
        include_docs = (query.get('include_docs') == 'true')
        results = self.results(db, since, doc_ids, include_docs)
        if not results and feed == 'longpoll':
            timeout = self.longpoll_timeout
            if 'timeout' in query:
                timeout = int(query['timeout']) / 1000
            self.cond.wait(timeout)
            if db.deleted:
                return not_found('no_db_file')
            results = self.results(db, since, doc_ids, include_docs)
        return json_response(200,
            {'results': results, 'last_seq': db.update_seq}
        )

    def results(self, db, since, doc_ids, include_docs):
        results = []
        for doc_id in sorted(db.seqs, key=db.seqs.get):
            seq = db.seqs[doc_id]
            if seq <= since:
                continue
            if doc_ids is not None and doc_id not in doc_ids:
                continue
            doc = db.docs[doc_id]
            record = {
                'seq': seq,
                'id': doc_id,
                'changes': [{'rev': doc['_rev']}],
            }
            if doc.get('_deleted'):
                record['deleted'] = True
            if include_docs:
                record['doc'] = doc
            results.append(record)
        return results
