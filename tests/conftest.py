"""
Shared fixtures for the translation gateway tests.
"""

import base64
from urllib.parse import urlparse

import pytest
from unittest.mock import Mock, patch

from translation_gateway.config import AppConfig, RepositoryConfig
from translation_gateway.github.client import GitHubClient


SAMPLE_YAML = """\
version: 2
labels:
  - name: "temperature"
    description: "Weather screen"
    translations:
      - fr: "chaleur"
      - en: "temperature"
  - name: "humidity"
    translations:
      - fr: "humidité"
        en: "humidity"
      - "no": "fuktighet"
"""


def encode_contents(text, sha="blob-sha", path="terms/weather.yml"):
    """GitHub contents payload for ``text``."""
    encoded = base64.b64encode(text.encode('utf-8')).decode('ascii')
    # GitHub wraps base64 content at 60 characters
    wrapped = '\n'.join(encoded[i:i + 60] for i in range(0, len(encoded), 60))
    return {'type': 'file', 'path': path, 'sha': sha, 'encoding': 'base64', 'content': wrapped}


@pytest.fixture
def sample_yaml():
    return SAMPLE_YAML


@pytest.fixture
def contents():
    """Factory for GitHub contents payloads."""
    return encode_contents


@pytest.fixture
def mock_client():
    """GitHub client stand-in; every remote call is a Mock."""
    client = Mock(spec=GitHubClient)
    client.owner = "translators"
    return client


@pytest.fixture
def app_config():
    return AppConfig(repository=RepositoryConfig(owner="translators"))


def make_response(status_code=200, json_data=None):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.json.return_value = json_data
    response.content = b'' if json_data is None else b'{}'
    response.text = ''
    response.headers = {'X-RateLimit-Remaining': '4999'}
    return response


class FakeGitHub:
    """
    Routes ``requests.Session.request`` calls to canned GitHub responses.

    Routes are keyed by method and URL path, optionally narrowed by the
    ``ref`` query parameter. Unknown routes answer 404.
    """

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, method, path, json_data=None, status=200, ref=None):
        self.routes[(method, path, ref)] = (status, json_data)

    def add_contents(self, repo, path, text, ref, sha="blob-sha"):
        self.add('GET', f'/repos/translators/{repo}/contents/{path}', encode_contents(text, sha, path), ref=ref)

    def fail(self, method, path, error):
        self.routes[(method, path, None)] = error

    def called(self, method, path):
        return [call for call in self.calls if call[0] == method and call[1] == path]

    def __call__(self, method, url, **kwargs):
        path = urlparse(url).path
        ref = (kwargs.get('params') or {}).get('ref')
        self.calls.append((method, path, kwargs))

        route = self.routes.get((method, path, ref), self.routes.get((method, path, None)))
        if route is None:
            return make_response(404, {'message': 'Not Found'})
        if isinstance(route, Exception):
            raise route

        status, json_data = route
        return make_response(status, json_data)


@pytest.fixture
def fake_github():
    fake = FakeGitHub()
    with patch('requests.Session.request', side_effect=fake):
        yield fake
