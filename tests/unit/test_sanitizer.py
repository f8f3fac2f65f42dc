# ABOUTME: Unit tests for the record sanitizer.
# ABOUTME: Validates dropping unchanged fields, explicit clears, local cover hold-back, and lending rules.

from readtrack.books.sanitizer import sanitize_new_book, sanitize_patch
from readtrack.books.types import CLEAR, BookPatch, BookStatus, CoverSlot, NewBook, SetTo

TS = "2024-05-01T12:00:00.000000Z"


class TestSanitizePatch:
    """Tests for sanitize_patch."""

    def test_omitted_fields_are_not_written(self) -> None:
        """Updating only the title never writes author."""
        result = sanitize_patch(BookPatch.of(title="New"), timestamp=TS)
        assert result.fields == {"title": "New"}
        assert "author" not in result.fields

    def test_clear_writes_explicit_null(self) -> None:
        """CLEAR becomes None under the record field name."""
        result = sanitize_patch(BookPatch(genre=CLEAR), timestamp=TS)
        assert result.fields == {"genre": None}

    def test_enum_values_are_serialized(self) -> None:
        """Status enums are written as their string value."""
        result = sanitize_patch(BookPatch(status=SetTo(BookStatus.READING)), timestamp=TS)
        assert result.fields == {"status": "reading"}

    def test_uses_camel_case_record_names(self) -> None:
        """Python attribute names map to the stored camelCase names."""
        result = sanitize_patch(
            BookPatch.of(expected_return_at="2024-06-01", is_lent=True, lent_to="Ana"),
            timestamp=TS,
        )
        assert result.fields["expectedReturnAt"] == "2024-06-01"
        assert result.fields["lentTo"] == "Ana"

    def test_remote_cover_is_written(self) -> None:
        """An https cover URL goes straight into the record."""
        url = "https://storage.example.com/front.jpg"
        result = sanitize_patch(BookPatch.of(front_cover_uri=url), timestamp=TS)
        assert result.fields == {"frontCoverUri": url}
        assert result.pending_covers == {}

    def test_local_cover_is_held_back(self) -> None:
        """A local cover reference is never written, only queued for upload."""
        result = sanitize_patch(
            BookPatch.of(front_cover_uri="/tmp/front.jpg", back_cover_uri="content://media/1"),
            timestamp=TS,
        )
        assert "frontCoverUri" not in result.fields
        assert "backCoverUri" not in result.fields
        assert result.pending_covers == {
            CoverSlot.FRONT: "/tmp/front.jpg",
            CoverSlot.BACK: "content://media/1",
        }

    def test_cleared_cover_is_written_as_null(self) -> None:
        """Clearing a cover removes the stored URL."""
        result = sanitize_patch(BookPatch(back_cover_uri=CLEAR), timestamp=TS)
        assert result.fields == {"backCoverUri": None}


class TestLendingRules:
    """Tests for the lending invariants applied by the sanitizer."""

    def test_not_lent_clears_all_lending_fields(self) -> None:
        """is_lent False nulls lentTo, lentAt and expectedReturnAt."""
        result = sanitize_patch(BookPatch.of(is_lent=False), timestamp=TS)
        assert result.fields == {
            "isLent": False,
            "lentTo": None,
            "lentAt": None,
            "expectedReturnAt": None,
        }

    def test_not_lent_overrides_supplied_lending_values(self) -> None:
        """Stale lending values in the same patch are discarded."""
        result = sanitize_patch(
            BookPatch.of(is_lent=False, lent_to="Bob", expected_return_at="2024-01-01"),
            timestamp=TS,
        )
        assert result.fields["lentTo"] is None
        assert result.fields["expectedReturnAt"] is None

    def test_clearing_is_lent_counts_as_not_lent(self) -> None:
        """CLEAR on is_lent is stored as False with lending fields cleared."""
        result = sanitize_patch(BookPatch(is_lent=CLEAR), timestamp=TS)
        assert result.fields["isLent"] is False
        assert result.fields["lentTo"] is None

    def test_lending_stamps_lent_at(self) -> None:
        """Starting a lending episode without lentAt stamps the mutation time."""
        result = sanitize_patch(BookPatch.of(is_lent=True, lent_to="Ana"), timestamp=TS)
        assert result.fields["lentAt"] == TS

    def test_explicit_lent_at_is_kept(self) -> None:
        """A supplied lentAt is not overwritten."""
        result = sanitize_patch(
            BookPatch.of(is_lent=True, lent_at="2024-04-01T00:00:00Z"), timestamp=TS
        )
        assert result.fields["lentAt"] == "2024-04-01T00:00:00Z"

    def test_already_lent_book_keeps_its_lent_at(self) -> None:
        """Resaving a lent book does not restart the lending episode."""
        result = sanitize_patch(BookPatch.of(is_lent=True), timestamp=TS, was_lent=True)
        assert "lentAt" not in result.fields

    def test_lending_fields_untouched_without_is_lent(self) -> None:
        """Patches that don't mention is_lent leave lending alone."""
        result = sanitize_patch(BookPatch.of(title="X"), timestamp=TS)
        assert "isLent" not in result.fields
        assert "lentAt" not in result.fields

    def test_lending_fields_nulled_on_unlent_book(self) -> None:
        """Setting lentTo without is_lent on a book that isn't lent writes nulls."""
        result = sanitize_patch(
            BookPatch.of(lent_to="Bob", expected_return_at="2025-01-01"),
            timestamp=TS,
            was_lent=False,
        )
        assert result.fields == {"lentTo": None, "expectedReturnAt": None}

    def test_lending_fields_kept_on_lent_book(self) -> None:
        """A lent book can change its borrower without restating is_lent."""
        result = sanitize_patch(
            BookPatch.of(lent_to="Bob", expected_return_at="2025-01-01"),
            timestamp=TS,
            was_lent=True,
        )
        assert result.fields == {"lentTo": "Bob", "expectedReturnAt": "2025-01-01"}


class TestSanitizeNewBook:
    """Tests for sanitize_new_book."""

    def test_absent_optionals_are_omitted(self) -> None:
        """A minimal book writes only required fields and isLent."""
        result = sanitize_new_book(NewBook(title="Dune", author="Frank Herbert"), timestamp=TS)
        assert result.fields == {
            "title": "Dune",
            "author": "Frank Herbert",
            "status": "to-read",
            "isLent": False,
        }

    def test_lending_fields_dropped_when_not_lent(self) -> None:
        """lentTo on a book that is not lent is discarded."""
        book = NewBook(title="Dune", author="Frank Herbert", lent_to="Ana")
        result = sanitize_new_book(book, timestamp=TS)
        assert "lentTo" not in result.fields

    def test_lent_book_gets_lent_at(self) -> None:
        """A book added as lent is stamped with lentAt."""
        book = NewBook(title="Dune", author="Frank Herbert", is_lent=True, lent_to="Ana")
        result = sanitize_new_book(book, timestamp=TS)
        assert result.fields["isLent"] is True
        assert result.fields["lentTo"] == "Ana"
        assert result.fields["lentAt"] == TS

    def test_local_covers_pending(self) -> None:
        """Local covers on a new book are queued, not written."""
        book = NewBook(title="Dune", author="Frank Herbert", front_cover_uri="file:///tmp/f.jpg")
        result = sanitize_new_book(book, timestamp=TS)
        assert "frontCoverUri" not in result.fields
        assert result.pending_covers == {CoverSlot.FRONT: "file:///tmp/f.jpg"}
