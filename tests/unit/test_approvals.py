"""
Unit tests for the reviewer allow-list and approval scanning.
"""

import json

import pytest

from translation_gateway.errors import ReviewersManifestError, ReviewersManifestNotFoundError
from translation_gateway.github.client import GitHubAPIError
from translation_gateway.review.approvals import (
    ApprovalScanner,
    approval_token,
    comment_matches,
    find_label_lines,
    label_name_from_line,
)
from translation_gateway.review.reviewers import parse_reviewers_manifest


TWO_LABELS = """\
labels:
  - name: "labelone"
    translations:
      - fr: "un"
  - name: labeltwo
    translations:
      - fr: "deux"
"""

REVIEWERS = json.dumps([{"alice": {"languages": ["fr"]}}, {"bob": {}}])


def comment(comment_id, body, login="alice", path="terms/weather.yml"):
    return {
        'id': comment_id,
        'path': path,
        'body': body,
        'user': {'login': login},
        'line': 1,
        'created_at': '2024-03-01T12:00:00Z',
        'html_url': f'https://github.com/translators/terms/pull/3#discussion_r{comment_id}',
    }


class TestLabelLines:
    """Unit tests for label line detection."""

    def test_find_label_lines(self):
        assert find_label_lines(TWO_LABELS) == [(2, "labelone"), (5, "labeltwo")]

    def test_no_labels(self):
        assert find_label_lines("labels: []\n") == []

    def test_label_name_variants(self):
        assert label_name_from_line('  - name: "Hello World"') == "Hello World"
        assert label_name_from_line("- name: 'single'") == "single"
        assert label_name_from_line("- name:plain") == "plain"

    def test_approval_token(self):
        assert approval_token("LabelOne") == "approved-labelone"

    def test_comment_matching(self):
        token = approval_token("labelone")

        assert comment_matches("  Approved-LabelOne: fr ", token)
        assert comment_matches("approved-labelone-extended: fr", token)
        assert not comment_matches("approved-labelone-extended: fr", token, exact=True)
        assert comment_matches("approved-labelone: fr", token, exact=True)
        assert not comment_matches("looks fine", token)

    def test_exact_matching_with_colon_in_label(self):
        """Test that only the text after the last colon is taken as the language."""
        assert comment_matches("approved-a: b: fr", approval_token("a: b"), exact=True)
        assert comment_matches("Approved-Depth: Sea: ko", approval_token("depth: sea"), exact=True)
        assert not comment_matches("approved-a: b: fr", approval_token("a"), exact=True)
        assert comment_matches("approved-a: b", approval_token("a: b"), exact=True)


class TestReviewersManifest:
    """Unit tests for reviewers manifest parsing."""

    def test_usernames_in_order(self):
        assert parse_reviewers_manifest(REVIEWERS) == ["alice", "bob"]

    def test_empty_objects_are_skipped(self):
        assert parse_reviewers_manifest('[{}, {"carol": 1}]') == ["carol"]

    def test_tab_indented_json(self):
        assert parse_reviewers_manifest('[\n\t{"alice": {}},\n\t{"bob": {"languages": ["fr"]}}\n]\n') == ["alice", "bob"]

    def test_yaml_manifest(self):
        assert parse_reviewers_manifest("- alice: {}\n- bob:\n    languages: [fr]\n") == ["alice", "bob"]

    def test_not_an_array(self):
        with pytest.raises(ReviewersManifestError):
            parse_reviewers_manifest('{"alice": {}}')

    def test_no_usernames(self):
        with pytest.raises(ReviewersManifestError) as exc_info:
            parse_reviewers_manifest('[{}]')

        assert "No valid reviewers found" in exc_info.value.message

    def test_unparsable(self):
        with pytest.raises(ReviewersManifestError):
            parse_reviewers_manifest('[{"alice": ')


class TestApprovalScanner:
    """Unit tests for ApprovalScanner."""

    def setup_repository(self, mock_client, contents, text, comments, reviewers=REVIEWERS):
        def get_contents(repo, path, ref):
            if path == "reviewers.json":
                if reviewers is None:
                    raise GitHubAPIError("Not Found", status_code=404)
                return contents(reviewers, path=path)
            return contents(text, path=path)

        mock_client.get_contents.side_effect = get_contents
        mock_client.list_review_comments.return_value = comments

    def test_one_of_two_labels_approved(self, mock_client, contents):
        """Test that a file with an unapproved label is not approved."""
        self.setup_repository(mock_client, contents, TWO_LABELS, [comment(10, "approved-labelone: fr")])
        scanner = ApprovalScanner(mock_client)

        status = scanner.check_file_approval("terms", 3, "terms/weather.yml", "feature")

        assert [record.label for record in status.approved_labels] == ["labelone"]
        assert [label.label for label in status.unapproved_labels] == ["labeltwo"]
        assert status.approved is False

        record = status.approved_labels[0]
        assert record.line_number == 2
        assert record.reviewer == "alice"
        assert record.comment_id == 10
        assert record.timestamp == '2024-03-01T12:00:00Z'
        assert status.eligible_reviewers == ["alice", "bob"]

    def test_all_labels_approved(self, mock_client, contents):
        self.setup_repository(mock_client, contents, TWO_LABELS, [
            comment(10, "approved-labelone: fr"),
            comment(11, "Approved-LabelTwo: fr", login="bob"),
        ])
        scanner = ApprovalScanner(mock_client)

        status = scanner.check_file_approval("terms", 3, "terms/weather.yml", "feature")

        assert status.approved is True
        assert status.to_dict()["approved"] is True

    def test_zero_labels_never_approved(self, mock_client, contents):
        self.setup_repository(mock_client, contents, "labels: []\n", [comment(10, "approved-anything")])
        scanner = ApprovalScanner(mock_client)

        status = scanner.check_file_approval("terms", 3, "terms/weather.yml", "feature")

        assert status.approved is False
        assert status.approved_labels == []
        assert status.unapproved_labels == []

    def test_comment_must_match_path_and_reviewer(self, mock_client, contents):
        self.setup_repository(mock_client, contents, TWO_LABELS, [
            comment(10, "approved-labelone: fr", login="mallory"),
            comment(11, "approved-labelone: fr", path="terms/other.yml"),
        ])
        scanner = ApprovalScanner(mock_client)

        status = scanner.check_file_approval("terms", 3, "terms/weather.yml", "feature")

        assert status.approved_labels == []
        assert len(status.unapproved_labels) == 2

    def test_encoded_path_is_decoded(self, mock_client, contents):
        self.setup_repository(mock_client, contents, TWO_LABELS, [comment(10, "approved-labelone: fr")])
        scanner = ApprovalScanner(mock_client)

        status = scanner.check_file_approval("terms", 3, "terms%2Fweather.yml", "feature")

        assert status.checked_file == "terms/weather.yml"
        assert len(status.approved_labels) == 1
        mock_client.get_contents.assert_any_call("terms", "terms/weather.yml", "feature")

    def test_exact_matching(self, mock_client, contents):
        text = 'labels:\n  - name: "one"\n    translations: []\n'
        self.setup_repository(mock_client, contents, text, [comment(10, "approved-one-more: fr")])

        assert ApprovalScanner(mock_client).check_file_approval("terms", 3, "terms/weather.yml", "f").approved
        assert not ApprovalScanner(mock_client, exact_match=True).check_file_approval(
            "terms", 3, "terms/weather.yml", "f"
        ).approved

    def test_missing_manifest(self, mock_client, contents):
        self.setup_repository(mock_client, contents, TWO_LABELS, [], reviewers=None)
        scanner = ApprovalScanner(mock_client)

        with pytest.raises(ReviewersManifestNotFoundError) as exc_info:
            scanner.check_file_approval("terms", 3, "terms/weather.yml", "feature")

        assert exc_info.value.message == "reviewers.json file not found in the main branch"
        assert exc_info.value.status_code == 404

    def test_manifest_read_from_stable_branch(self, mock_client, contents):
        self.setup_repository(mock_client, contents, TWO_LABELS, [])
        scanner = ApprovalScanner(mock_client, stable_branch="develop")

        assert scanner.get_reviewers("terms") == ["alice", "bob"]
        mock_client.get_contents.assert_called_once_with("terms", "reviewers.json", "develop")

    def test_approve_file(self, mock_client):
        mock_client.create_review_comment.return_value = {'id': 99}
        scanner = ApprovalScanner(mock_client)

        response = scanner.approve_file("terms", 3, "terms%2Fweather.yml", "abc123", "fr", "labelone")

        assert response == {'id': 99}
        mock_client.create_review_comment.assert_called_once_with(
            "terms",
            3,
            body="approved-labelone: fr",
            commit_id="abc123",
            path="terms/weather.yml",
            line=1,
            side="RIGHT",
        )
