# SPDX-FileCopyrightText: 2019-2025 Valéry Febvre
# SPDX-License-Identifier: GPL-3.0-or-later
# Author: Valéry Febvre <vfebvre@easter-eggs.com>

from functools import wraps
import json

import pytest


def do_server_test(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        server = list(kwargs.values())[0]

        if server.status == 'disabled':
            pytest.skip('Server is disabled')

        return func(*args, **kwargs)

    return wrapper


def fake_mime_type(buffer):
    """Replacement of `get_buffer_mime_type` which doesn't depend on libmagic"""
    if buffer.startswith(b'\xff\xd8'):
        return 'image/jpeg'
    if buffer.lstrip().startswith((b'{', b'[')):
        return 'application/json'

    return 'text/html'


class FakeResponse:
    def __init__(self, content=b'', status_code=200, url=None):
        if isinstance(content, (dict, list)):
            content = json.dumps(content)
        if isinstance(content, str):
            content = content.encode()

        self.content = content
        self.history = []
        self.status_code = status_code
        self.url = url

    @property
    def ok(self):
        return self.status_code < 400

    @property
    def text(self):
        return self.content.decode()

    def json(self):
        return json.loads(self.content)


class FakeSession:
    """
    Session returning canned responses

    `routes` maps (method, url) to a response or to a callable receiving the request kwargs.
    Unknown routes get a 404 response.
    """

    def __init__(self, routes):
        self.calls = []
        self.headers = {}
        self.routes = routes

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))

        response = self.routes.get((method, url))
        if response is None:
            return FakeResponse(status_code=404, url=url)
        if callable(response):
            response = response(**kwargs)
        response.url = url

        return response

    def get(self, url, **kwargs):
        return self.request('GET', url, **kwargs)

    def post(self, url, **kwargs):
        return self.request('POST', url, **kwargs)
