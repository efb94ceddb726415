#!/usr/bin/env python3
#
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
Install `rxcouch`.
"""

import sys
if sys.version_info < (3, 6):
    sys.exit('RxCouch requires Python 3.6 or newer')

from setuptools import setup, Command
import os
from os import path
import re


def read_version():
    tree = path.dirname(path.abspath(__file__))
    with open(path.join(tree, 'rxcouch', '__init__.py')) as fp:
        match = re.search(r"^__version__ = '([^']+)'", fp.read(), re.M)
    return match.group(1)


class Test(Command):
    description = 'run unit tests and doc tests'

    user_options = [
        ('skip-all', None, 'skip all tests'),
        ('no-live', None, 'skip live tests even when RXCOUCH_TEST_URL is set'),
    ]

    def initialize_options(self):
        self.skip_all = 0
        self.no_live = 0

    def finalize_options(self):
        pass

    def run(self):
        if self.skip_all:
            sys.exit(0)
        if self.no_live:
            os.environ.pop('RXCOUCH_TEST_URL', None)
        from rxcouch.tests.run import run_tests
        if not run_tests():
            raise SystemExit('2')


setup(
    name='rxcouch',
    description='live streams from a lightweight Couch',
    version=read_version(),
    author='Jason Gerard DeRose',
    author_email='jderose@novacut.com',
    license='LGPLv3+',
    packages=['rxcouch', 'rxcouch.tests'],
    install_requires=['requests'],
    cmdclass={'test': Test},
)
