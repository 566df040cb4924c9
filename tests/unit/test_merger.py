"""
Unit tests for the translation merger.
"""

import pytest

from translation_gateway.documents.codec import parse_document
from translation_gateway.errors import DocumentFormatError, StaleFileError
from translation_gateway.github.client import GitHubAPIError
from translation_gateway.translations.merger import apply_translations, TranslationUpdater


class TestApplyTranslations:
    """Unit tests for apply_translations."""

    def test_updates_named_slots_only(self, sample_yaml):
        document = parse_document(sample_yaml)

        updated = apply_translations(document, {"temperature": {"fr": "chaud"}})

        assert updated.terms()["temperature"] == {"fr": "chaud", "en": "temperature"}
        assert updated.terms()["humidity"] == document.terms()["humidity"]

    def test_input_document_is_not_modified(self, sample_yaml):
        document = parse_document(sample_yaml)

        apply_translations(document, {"temperature": {"fr": "chaud"}})

        assert document.find_label("temperature").find_entry("fr").term == "chaleur"

    def test_missing_language_is_skipped(self, sample_yaml, caplog):
        """Test that no new language slot is created."""
        document = parse_document(sample_yaml)

        with caplog.at_level("WARNING"):
            updated = apply_translations(document, {"temperature": {"de": "Temperatur"}})

        assert updated.find_label("temperature").languages == ["fr", "en"]
        assert "Language de not found for label temperature" in caplog.text

    def test_unknown_label_is_ignored(self, sample_yaml):
        document = parse_document(sample_yaml)

        updated = apply_translations(document, {"pressure": {"fr": "pression"}})

        assert updated.terms() == document.terms()

    def test_empty_translations(self, sample_yaml):
        document = parse_document(sample_yaml)

        assert apply_translations(document, {}) == document


class TestTranslationUpdater:
    """Unit tests for TranslationUpdater."""

    def test_commits_updated_file(self, mock_client, contents, sample_yaml):
        mock_client.get_contents.return_value = contents(sample_yaml, sha="sha-current", path="weather.yml")
        mock_client.put_file.return_value = {'commit': {'sha': 'new-commit'}}
        updater = TranslationUpdater(mock_client)

        response = updater.update_file_with_translations(
            "terms", {"temperature": {"fr": "chaud"}}, "feature", "weather.yml"
        )

        assert response == {'commit': {'sha': 'new-commit'}}
        mock_client.get_contents.assert_called_once_with("terms", "weather.yml", "feature")

        args, kwargs = mock_client.put_file.call_args
        assert args[:2] == ("terms", "weather.yml")
        assert kwargs['sha'] == "sha-current"
        assert kwargs['branch'] == "feature"
        assert kwargs['message'] == "Update translations for weather.yml"

        written = parse_document(args[2])
        assert written.find_label("temperature").find_entry("fr").term == "chaud"
        assert written.find_label("humidity").find_entry("no").term == "fuktighet"
        assert '- fr: "chaud"' in args[2]

    def test_stale_write(self, mock_client, contents, sample_yaml):
        """Test that a rejected stale write is reported as retryable."""
        mock_client.get_contents.return_value = contents(sample_yaml)
        mock_client.put_file.side_effect = GitHubAPIError("sha does not match", status_code=409)
        updater = TranslationUpdater(mock_client)

        with pytest.raises(StaleFileError) as exc_info:
            updater.update_file_with_translations("terms", {"temperature": {"fr": "x"}}, "feature", "weather.yml")

        assert exc_info.value.status_code == 409
        assert exc_info.value.retryable
        assert mock_client.put_file.call_count == 1

    def test_other_errors_propagate(self, mock_client, contents, sample_yaml):
        mock_client.get_contents.return_value = contents(sample_yaml)
        mock_client.put_file.side_effect = GitHubAPIError("Forbidden", status_code=403)
        updater = TranslationUpdater(mock_client)

        with pytest.raises(GitHubAPIError):
            updater.update_file_with_translations("terms", {"temperature": {"fr": "x"}}, "feature", "weather.yml")

    def test_not_a_translation_file(self, mock_client, contents):
        mock_client.get_contents.return_value = contents("just: data\n")
        updater = TranslationUpdater(mock_client)

        with pytest.raises(DocumentFormatError):
            updater.update_file_with_translations("terms", {"x": {"fr": "y"}}, "feature", "data.yml")

        mock_client.put_file.assert_not_called()

    def test_written_content_keeps_unicode(self, mock_client, contents, sample_yaml):
        mock_client.get_contents.return_value = contents(sample_yaml)
        updater = TranslationUpdater(mock_client)

        updater.update_file_with_translations("terms", {"temperature": {"fr": "température"}}, "feature", "w.yml")

        text = mock_client.put_file.call_args[0][2]
        assert 'fr: "température"' in text

    def test_written_content_keeps_comments(self, mock_client, contents):
        """Test that a commit changes the targeted line and nothing else."""
        original = (
            "# Weather screen terms\n"
            "labels:\n"
            '  - name: "temperature"  # shown in the header\n'
            "    translations:\n"
            '      - fr: "chaleur"\n'
            "      - de: 12:30\n"
        )
        mock_client.get_contents.return_value = contents(original)
        updater = TranslationUpdater(mock_client)

        updater.update_file_with_translations("terms", {"temperature": {"fr": "chaud"}}, "feature", "w.yml")

        text = mock_client.put_file.call_args[0][2]
        assert text == original.replace('"chaleur"', '"chaud"')
