"""
Unit tests for GitHub Integration Layer.
"""

import base64
import time

import pytest
from unittest.mock import Mock, patch
import requests

from translation_gateway.github.client import (
    GitHubClient,
    GitHubAPIError,
    GitHubTimeoutError,
    RateLimitExceeded,
)
from translation_gateway.github.parser import GitHubResponseParser


def make_response(status_code=200, json_data=None, headers=None):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.json.return_value = json_data if json_data is not None else {}
    response.content = b'{}' if json_data is not None else b''
    response.text = ''
    response.headers = headers or {
        "X-RateLimit-Remaining": "4999",
        "X-RateLimit-Reset": str(int(time.time()) + 3600),
    }
    return response


class TestGitHubClient:
    """Unit tests for GitHubClient class."""

    def test_client_initialization(self):
        """Test GitHubClient initialization."""
        token = "ghp_test_token_123456789"
        client = GitHubClient(token, "translators")

        assert client.token == token
        assert client.owner == "translators"
        assert client.base_url == "https://api.github.com"
        assert client.headers["Authorization"] == f"token {token}"
        assert client.headers["Accept"] == "application/vnd.github+json"
        assert client.headers["X-GitHub-Api-Version"] == "2022-11-28"

    def test_client_initialization_validation(self):
        with pytest.raises(ValueError):
            GitHubClient("", "translators")

        with pytest.raises(ValueError):
            GitHubClient(None, "translators")

        with pytest.raises(ValueError):
            GitHubClient("token", "")

    @patch('requests.Session.request')
    def test_make_request_success(self, mock_request):
        mock_request.return_value = make_response(json_data={"number": 1})
        client = GitHubClient("token", "translators", timeout=12)

        assert client.get_pull_request("terms", 1) == {"number": 1}

        args, kwargs = mock_request.call_args
        assert args == ('GET', 'https://api.github.com/repos/translators/terms/pulls/1')
        assert kwargs['timeout'] == 12
        assert client.rate_limit_remaining == 4999

    @patch('requests.Session.request')
    def test_api_error_keeps_status(self, mock_request):
        response = make_response(404, {"message": "Not Found"})
        mock_request.return_value = response
        client = GitHubClient("token", "translators")

        with pytest.raises(GitHubAPIError) as exc_info:
            client.get_contents("terms", "missing.yml", "main")

        assert exc_info.value.status_code == 404
        assert exc_info.value.api_message == "Not Found"

    @patch('requests.Session.request')
    def test_rate_limit_response(self, mock_request):
        mock_request.return_value = make_response(429, headers={"X-RateLimit-Reset": str(int(time.time()) + 60)})
        client = GitHubClient("token", "translators")

        with pytest.raises(RateLimitExceeded) as exc_info:
            client.compare("terms", "main", "feature")

        assert exc_info.value.status_code == 429

    @patch('requests.Session.request')
    def test_rate_limit_floor_refuses_requests(self, mock_request):
        mock_request.return_value = make_response(json_data=[], headers={
            "X-RateLimit-Remaining": "3",
            "X-RateLimit-Reset": str(int(time.time()) + 600),
        })
        client = GitHubClient("token", "translators", rate_limit_floor=10)

        client.list_review_comments("terms", 1)

        with pytest.raises(RateLimitExceeded):
            client.list_review_comments("terms", 1)
        assert mock_request.call_count == 1

    @patch('requests.Session.request')
    def test_timeout_is_distinct(self, mock_request):
        mock_request.side_effect = requests.Timeout("read timed out")
        client = GitHubClient("token", "translators")

        with pytest.raises(GitHubTimeoutError):
            client.get_pull_request("terms", 1)

    @patch('requests.Session.request')
    def test_connection_error_is_timeout(self, mock_request):
        mock_request.side_effect = requests.ConnectionError("refused")
        client = GitHubClient("token", "translators")

        with pytest.raises(GitHubTimeoutError):
            client.get_pull_request("terms", 1)

    @patch('requests.Session.request')
    def test_no_retries(self, mock_request):
        mock_request.return_value = make_response(502, {"message": "Bad Gateway"})
        client = GitHubClient("token", "translators")

        with pytest.raises(GitHubAPIError):
            client.get_pull_request("terms", 1)
        assert mock_request.call_count == 1

    @patch('requests.Session.request')
    def test_list_pull_requests_filters(self, mock_request):
        mock_request.return_value = make_response(json_data=[])
        client = GitHubClient("token", "translators")

        client.list_pull_requests("terms", "feature", "main")

        params = mock_request.call_args[1]['params']
        assert params['head'] == "translators:feature"
        assert params['base'] == "main"
        assert params['state'] == "open"

    @patch('requests.Session.request')
    def test_pagination(self, mock_request):
        first_page = [{'filename': f'f{i}.yml'} for i in range(100)]
        mock_request.side_effect = [
            make_response(json_data=first_page),
            make_response(json_data=[{'filename': 'last.yml'}]),
        ]
        client = GitHubClient("token", "translators")

        files = client.get_pull_request_files("terms", 3)

        assert len(files) == 101
        assert mock_request.call_args_list[1][1]['params']['page'] == 2

    @patch('requests.Session.request')
    def test_put_file_encodes_content(self, mock_request):
        mock_request.return_value = make_response(json_data={'commit': {'sha': 'c1'}})
        client = GitHubClient("token", "translators")

        client.put_file("terms", "weather.yml", "fr: \"été\"\n", "Update", "feature", "sha-1")

        args, kwargs = mock_request.call_args
        assert args == ('PUT', 'https://api.github.com/repos/translators/terms/contents/weather.yml')
        body = kwargs['json']
        assert base64.b64decode(body['content']).decode('utf-8') == "fr: \"été\"\n"
        assert body['sha'] == "sha-1"
        assert body['branch'] == "feature"

    @patch('requests.Session.request')
    def test_delete_branch(self, mock_request):
        mock_request.return_value = make_response(204)
        client = GitHubClient("token", "translators")

        client.delete_branch("terms", "feature")

        args = mock_request.call_args[0]
        assert args == ('DELETE', 'https://api.github.com/repos/translators/terms/git/refs/heads/feature')

    @patch('requests.Session.request')
    def test_refs_and_paths_are_url_encoded(self, mock_request):
        """Test that ``#``, ``?`` and spaces in refs and paths do not end the URL path."""
        mock_request.return_value = make_response(json_data={'files': []})
        client = GitHubClient("token", "translators")

        client.compare("terms", "main", "fix#1")
        assert mock_request.call_args[0][1] == 'https://api.github.com/repos/translators/terms/compare/main...fix%231'

        client.get_contents("terms", "marine terms/tide?.yml", "fix#1")
        args, kwargs = mock_request.call_args
        assert args[1] == 'https://api.github.com/repos/translators/terms/contents/marine%20terms/tide%3F.yml'
        assert kwargs['params'] == {'ref': 'fix#1'}

        client.delete_branch("terms", "fix#1")
        assert mock_request.call_args[0][1] == 'https://api.github.com/repos/translators/terms/git/refs/heads/fix%231'

    def test_graphql_url(self):
        assert GitHubClient("t", "o")._graphql_url() == "https://api.github.com/graphql"
        assert GitHubClient("t", "o", base_url="https://ghe.example.com/api/v3")._graphql_url() == \
            "https://ghe.example.com/api/graphql"

    @patch('requests.Session.request')
    def test_mark_ready_for_review(self, mock_request):
        mock_request.return_value = make_response(json_data={'data': {'markPullRequestReadyForReview': {}}})
        client = GitHubClient("token", "translators")

        client.mark_ready_for_review("PR_node")

        args, kwargs = mock_request.call_args
        assert args == ('POST', 'https://api.github.com/graphql')
        assert kwargs['json']['variables'] == {'pullRequestId': 'PR_node'}

    @patch('requests.Session.request')
    def test_graphql_errors(self, mock_request):
        mock_request.return_value = make_response(json_data={'errors': [{'message': 'Not a draft'}]})
        client = GitHubClient("token", "translators")

        with pytest.raises(GitHubAPIError) as exc_info:
            client.mark_ready_for_review("PR_node")

        assert exc_info.value.status_code is None
        assert exc_info.value.api_message == "Not a draft"


class TestGitHubResponseParser:
    """Unit tests for GitHubResponseParser class."""

    def setup_method(self):
        self.parser = GitHubResponseParser()

    def test_parse_pull_request(self):
        pr = self.parser.parse_pull_request({
            'number': 5,
            'node_id': 'PR_5',
            'draft': True,
            'mergeable': True,
            'head': {'ref': 'feature'},
            'base': {'ref': 'main'},
            'updated_at': '2024-01-01T00:00:00Z',
        })

        assert pr.number == 5
        assert pr.draft
        assert pr.head_ref == "feature"
        assert pr.base_ref == "main"

    def test_parse_file_content(self, contents):
        content = self.parser.parse_file_content(contents("labels: []\n", sha="abc"), "a.yml")

        assert content.text == "labels: []\n"
        assert content.sha == "abc"

    def test_parse_directory_is_rejected(self):
        with pytest.raises(ValueError):
            self.parser.parse_file_content([{'name': 'a.yml'}], "dir")

        with pytest.raises(ValueError):
            self.parser.parse_file_content({'type': 'dir', 'path': 'dir'})

    def test_unknown_status(self):
        summary = self.parser.parse_file_change({'filename': 'a.yml', 'status': 'exotic'})

        assert summary.status == "modified"

    def test_parse_comparison(self):
        comparison = self.parser.parse_comparison(
            {'status': 'ahead', 'ahead_by': 3, 'behind_by': 0, 'files': [{'filename': 'a.yml', 'status': 'added'}]},
            "main", "feature",
        )

        assert comparison.has_changes
        assert comparison.files[0].status == "added"

    def test_review_comment_line_falls_back_to_position(self):
        comment = self.parser.parse_review_comment(
            {'id': 1, 'path': 'a.yml', 'body': 'x', 'user': {'login': 'alice'}, 'line': None, 'position': 4}
        )

        assert comment.line == 4
        assert comment.user == "alice"

    def test_translation_file_detection(self):
        assert self.parser.is_translation_file("terms/weather.yml")
        assert self.parser.is_translation_file("terms/WEATHER.YAML")
        assert not self.parser.is_translation_file("README.md")
        assert not self.parser.is_translation_file("Makefile")
        assert self.parser.get_file_extension("dir.v2/file") is None
