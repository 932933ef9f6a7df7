"""
Tests for the Supabase-backed submissions repository.

The Supabase client is a MagicMock; tests assert on the query builder chain.
"""

from unittest.mock import MagicMock

import pytest
from postgrest.exceptions import APIError

from submissions_bot.services.submissions import (
    DocumentSide,
    Submission,
    SubmissionQueryError,
    SubmissionRepository,
)

ROW = {
    "id": 7,
    "winner_id": "W42",
    "full_name": "Ana Diaz",
    "driver_license_front": "https://x/a.jpg",
    "driver_license_back": None,
    "created_at": "2024-05-01T10:20:30+00:00",
    "some_new_column": "ignored",
}


def _client_returning(rows):
    client = MagicMock()
    builder = MagicMock()
    client.table.return_value.select.return_value = builder
    # Every builder step returns the same builder so any chain order works
    builder.eq.return_value = builder
    builder.order.return_value = builder
    builder.limit.return_value = builder
    builder.execute.return_value = MagicMock(data=rows)
    return client, builder


class TestFetchAll:

    def test_orders_newest_first_with_cap(self):
        client, builder = _client_returning([ROW])
        repo = SubmissionRepository(client)

        result = repo.fetch_all()

        client.table.assert_called_once_with("submissions")
        client.table.return_value.select.assert_called_once_with("*")
        builder.order.assert_called_once_with("created_at", desc=True)
        builder.limit.assert_called_once_with(999)
        assert result == [Submission.model_validate(ROW)]

    def test_custom_table_and_limit(self):
        client, builder = _client_returning([])
        repo = SubmissionRepository(client, table="entries")

        assert repo.fetch_all(limit=5) == []
        client.table.assert_called_once_with("entries")
        builder.limit.assert_called_once_with(5)

    def test_none_data_is_empty(self):
        client, _ = _client_returning(None)
        assert SubmissionRepository(client).fetch_all() == []


class TestFetchByWinnerId:

    def test_filters_and_orders_without_cap(self):
        client, builder = _client_returning([ROW, ROW])
        repo = SubmissionRepository(client)

        result = repo.fetch_by_winner_id("W42")

        builder.eq.assert_called_once_with("winner_id", "W42")
        builder.order.assert_called_once_with("created_at", desc=True)
        builder.limit.assert_not_called()
        assert len(result) == 2


class TestFetchById:

    def test_found(self):
        client, builder = _client_returning([ROW])
        submission = SubmissionRepository(client).fetch_by_id("7")

        builder.eq.assert_called_once_with("id", "7")
        assert submission.full_name == "Ana Diaz"

    def test_absent(self):
        client, _ = _client_returning([])
        assert SubmissionRepository(client).fetch_by_id("8") is None


class TestQueryErrors:

    def test_api_error_is_wrapped(self):
        client, builder = _client_returning([])
        builder.execute.side_effect = APIError({"message": "permission denied", "code": "42501"})

        with pytest.raises(SubmissionQueryError, match="permission denied"):
            SubmissionRepository(client).fetch_all()


class TestSubmissionModel:

    def test_unknown_columns_ignored(self):
        submission = Submission.model_validate(ROW)
        assert not hasattr(submission, "some_new_column")

    def test_document_url_by_side(self):
        submission = Submission.model_validate(ROW)
        assert submission.document_url(DocumentSide.FRONT) == "https://x/a.jpg"
        assert submission.document_url(DocumentSide.BACK) is None

    def test_blank_url_is_missing(self):
        submission = Submission(id=1, driver_license_back="")
        assert submission.document_url(DocumentSide.BACK) is None
