"""Unit tests for date range resolution."""

import pytest
from datetime import datetime
import sys
import os

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', 'src'))

from analytics.date_range import resolve_date_range
from shared.exceptions import InvalidRangeError, ValidationError

NOW = datetime(2024, 6, 15, 14, 30, 0)


class TestResolveDateRange:
    """Test cases for resolve_date_range."""

    def test_defaults(self):
        """Test that missing bounds default to Jan 1 of this year and now."""
        date_range = resolve_date_range(now=NOW)

        assert date_range.start == datetime(2024, 1, 1, 0, 0, 0)
        assert date_range.end == NOW

    def test_empty_strings_use_defaults(self):
        """Test that empty query values behave like missing ones."""
        date_range = resolve_date_range('', '', now=NOW)

        assert date_range.start == datetime(2024, 1, 1)
        assert date_range.end == NOW

    def test_date_only_values(self):
        """Test plain calendar dates."""
        date_range = resolve_date_range('2024-03-01', '2024-03-31', now=NOW)

        assert date_range.start == datetime(2024, 3, 1)
        assert date_range.end == datetime(2024, 3, 31)

    def test_utc_designator_and_offsets(self):
        """Test that offset-aware values are normalized to naive UTC."""
        date_range = resolve_date_range('2024-03-01T00:00:00.000Z', '2024-03-31T23:00:00+02:00', now=NOW)

        assert date_range.start == datetime(2024, 3, 1)
        assert date_range.end == datetime(2024, 3, 31, 21, 0, 0)
        assert date_range.start.tzinfo is None

    def test_only_start_given(self):
        """Test that a given start keeps the default end."""
        date_range = resolve_date_range('2023-11-05', None, now=NOW)

        assert date_range.start == datetime(2023, 11, 5)
        assert date_range.end == NOW

    @pytest.mark.parametrize('raw_start,raw_end', [
        ('not-a-date', None),
        (None, 'yesterday'),
        ('2024-13-01', None),
        ('2024-02-30', None),
        (None, '2024-01-01T25:00:00'),
    ])
    def test_malformed_values(self, raw_start, raw_end):
        """Test that malformed or out-of-range values are rejected."""
        with pytest.raises(InvalidRangeError, match="Invalid date range"):
            resolve_date_range(raw_start, raw_end, now=NOW)

    def test_invalid_range_is_client_error(self):
        """Test that the error maps to a 400 response."""
        with pytest.raises(ValidationError) as exc_info:
            resolve_date_range('garbage', now=NOW)

        assert exc_info.value.status_code == 400

    def test_inverted_range_is_allowed(self):
        """Test that start after end is not rejected."""
        date_range = resolve_date_range('2024-05-01', '2024-04-01', now=NOW)

        assert date_range.start > date_range.end

    def test_contains_is_inclusive(self):
        """Test both bounds are part of the range."""
        date_range = resolve_date_range('2024-03-01', '2024-03-31', now=NOW)

        assert date_range.contains(datetime(2024, 3, 1))
        assert date_range.contains(datetime(2024, 3, 31))
        assert not date_range.contains(datetime(2024, 3, 31, 0, 0, 1))

    def test_metadata(self):
        """Test the metadata block echoed to the caller."""
        date_range = resolve_date_range('2024-03-01', '2024-03-31T12:00:00', now=NOW)

        assert date_range.to_metadata() == {
            'startDate': '2024-03-01T00:00:00Z',
            'endDate': '2024-03-31T12:00:00Z'
        }


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
