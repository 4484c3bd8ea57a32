"""Unit tests for the aggregation engine."""

import pytest
import locale
import sys
import os

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', 'src'))

from analytics import engine
from analytics.models import ExpenseRecord


def make_record(amount, date, category='Food', payment_source='Card', expense_id=None):
    return ExpenseRecord(
        expense_id=expense_id or f"exp-{date}-{amount}",
        user_id='user123',
        title='Expense',
        amount=amount,
        date=date,
        category=category,
        payment_source=payment_source
    )


class TestCategoryTotals:
    """Test cases for category_totals."""

    def test_groups_and_sums_by_category(self):
        """Test the Food/Rent example."""
        records = [
            make_record(50, '2024-01-15T10:00:00', category='Food'),
            make_record(30, '2024-01-16T10:00:00', category='Food'),
            make_record(60, '2024-01-17T10:00:00', category='Rent'),
        ]

        result = [item.to_dict() for item in engine.category_totals(records)]

        assert result == [
            {'category': 'Food', 'totalAmount': 80},
            {'category': 'Rent', 'totalAmount': 60},
        ]

    def test_totals_add_up_to_record_sum(self):
        """Test that category totals account for every record."""
        records = [
            make_record(12.5, '2024-02-01T09:00:00', category='Groceries'),
            make_record(7.25, '2024-02-02T09:00:00', category='Transport'),
            make_record(100.0, '2024-02-03T09:00:00', category='Rent'),
            make_record(0.25, '2024-02-04T09:00:00', category='Groceries'),
        ]

        totals = engine.category_totals(records)

        assert sum(item.total_amount for item in totals) == pytest.approx(sum(r.amount for r in records))

    def test_category_labels_are_not_normalized(self):
        """Test that casing and spacing make distinct categories."""
        records = [
            make_record(10, '2024-01-15T10:00:00', category='food'),
            make_record(10, '2024-01-15T11:00:00', category='Food'),
            make_record(10, '2024-01-15T12:00:00', category='Food '),
        ]

        labels = [item.category for item in engine.category_totals(records)]

        assert labels == ['Food', 'Food ', 'food']

    def test_empty_input(self):
        """Test that no records yield no totals."""
        assert engine.category_totals([]) == []
        assert engine.category_totals(None) == []


class TestBucketTotals:
    """Test cases for bucket_totals."""

    def test_daily_buckets_discard_time_and_sort_by_date(self):
        """Test day buckets."""
        records = [
            make_record(20, '2024-03-14T18:30:00'),
            make_record(10, '2024-03-13T08:00:00'),
            make_record(5, '2024-03-13T23:59:59'),
        ]

        result = [item.to_dict('day') for item in engine.bucket_totals(records, 'day')]

        assert result == [
            {'day': '2024-03-13', 'totalAmount': 15},
            {'day': '2024-03-14', 'totalAmount': 20},
        ]

    def test_wednesday_falls_in_sunday_anchored_week(self):
        """Test that 2024-03-13 lands in the week of Sunday 2024-03-10."""
        result = engine.bucket_totals([make_record(42, '2024-03-13T12:00:00')], 'week')

        assert result[0].bucket_label == '2024-03-10 to 2024-03-16'

    def test_week_boundaries(self):
        """Test that Sunday opens a week and Saturday closes it."""
        records = [
            make_record(1, '2024-03-10T00:00:00'),  # Sunday
            make_record(2, '2024-03-16T23:00:00'),  # Saturday
            make_record(4, '2024-03-17T00:00:00'),  # next Sunday
            make_record(8, '2024-03-09T12:00:00'),  # previous Saturday
        ]

        result = [(item.bucket_label, item.total_amount) for item in engine.bucket_totals(records, 'week')]

        assert result == [
            ('2024-03-03 to 2024-03-09', 8),
            ('2024-03-10 to 2024-03-16', 3),
            ('2024-03-17 to 2024-03-23', 4),
        ]

    def test_week_spanning_year_end(self):
        """Test a week that starts in one year and ends in the next."""
        result = engine.bucket_totals([make_record(5, '2025-01-01T10:00:00')], 'week')

        assert result[0].bucket_label == '2024-12-29 to 2025-01-04'

    def test_same_month_of_different_years_collapses(self):
        """Test the known cross-year month collision."""
        records = [
            make_record(100, '2023-01-15T10:00:00'),
            make_record(50, '2024-01-20T10:00:00'),
        ]

        result = [item.to_dict('month') for item in engine.bucket_totals(records, 'month')]

        assert result == [{'month': 'January', 'totalAmount': 150}]

    def test_months_ordered_by_first_occurrence(self):
        """Test that month buckets follow chronology, not the alphabet."""
        records = [
            make_record(3, '2024-03-05T10:00:00'),
            make_record(1, '2023-01-15T10:00:00'),
            make_record(2, '2023-12-01T10:00:00'),
            make_record(4, '2024-01-20T10:00:00'),
        ]

        result = [(item.bucket_label, item.total_amount) for item in engine.bucket_totals(records, 'month')]

        assert result == [('January', 5), ('December', 2), ('March', 3)]

    def test_month_labels_are_english_names(self):
        """Test the label of every month."""
        records = [make_record(1, f"2024-{month:02d}-10T10:00:00") for month in range(1, 13)]

        labels = [item.bucket_label for item in engine.bucket_totals(records, 'month')]

        assert labels == [
            'January', 'February', 'March', 'April', 'May', 'June',
            'July', 'August', 'September', 'October', 'November', 'December',
        ]

    def test_month_labels_ignore_process_locale(self):
        """Test that a non-English LC_TIME does not change month labels."""
        saved = locale.setlocale(locale.LC_TIME)
        try:
            locale.setlocale(locale.LC_TIME, 'de_DE.UTF-8')
        except locale.Error:
            pytest.skip('de_DE.UTF-8 locale not available')

        try:
            result = engine.bucket_totals([make_record(5, '2024-03-05T10:00:00')], 'month')
        finally:
            locale.setlocale(locale.LC_TIME, saved)

        assert result[0].bucket_label == 'March'

    @pytest.mark.parametrize('granularity', ['day', 'week', 'month'])
    def test_empty_input(self, granularity):
        """Test that no records yield no buckets."""
        assert engine.bucket_totals([], granularity) == []

    def test_unknown_granularity(self):
        """Test that an unsupported granularity is rejected."""
        with pytest.raises(ValueError, match="Unsupported granularity"):
            engine.bucket_totals([], 'year')


class TestPaymentSourceDistribution:
    """Test cases for payment_source_distribution."""

    def test_counts_records_not_amounts(self):
        """Test counting per payment source."""
        records = [
            make_record(500, '2024-01-15T10:00:00', payment_source='Card'),
            make_record(1, '2024-01-16T10:00:00', payment_source='Cash'),
            make_record(2, '2024-01-17T10:00:00', payment_source='Cash'),
        ]

        result = [item.to_dict() for item in engine.payment_source_distribution(records)]

        assert result == [
            {'paymentSource': 'Card', 'count': 1},
            {'paymentSource': 'Cash', 'count': 2},
        ]

    def test_missing_source_is_unknown(self):
        """Test that absent and empty sources are grouped as Unknown."""
        records = [
            make_record(10, '2024-01-15T10:00:00', payment_source=None),
            make_record(10, '2024-01-16T10:00:00', payment_source=''),
            make_record(10, '2024-01-17T10:00:00', payment_source='UPI'),
        ]

        result = {item.payment_source: item.count for item in engine.payment_source_distribution(records)}

        assert result == {'UPI': 1, 'Unknown': 2}

    def test_empty_input(self):
        """Test that no records yield no distribution."""
        assert engine.payment_source_distribution([]) == []


class TestTrendSeries:
    """Test cases for trend_series."""

    def test_one_point_per_record_in_date_order(self):
        """Test that same-day records are kept as separate points."""
        records = [
            make_record(30, '2024-01-17T10:00:00'),
            make_record(10, '2024-01-15T10:00:00'),
            make_record(20, '2024-01-15T18:00:00'),
        ]

        result = [item.to_dict() for item in engine.trend_series(records)]

        assert result == [
            {'date': '2024-01-15', 'amount': 10},
            {'date': '2024-01-15', 'amount': 20},
            {'date': '2024-01-17', 'amount': 30},
        ]
        assert len(result) == len(records)

    def test_ties_keep_input_order(self):
        """Test that records with the same timestamp keep store order."""
        records = [
            make_record(7, '2024-01-15T10:00:00', expense_id='b'),
            make_record(3, '2024-01-15T10:00:00', expense_id='a'),
        ]

        amounts = [point.amount for point in engine.trend_series(records)]

        assert amounts == [7, 3]

    def test_series_is_non_decreasing(self):
        """Test chronological ordering over a shuffled input."""
        dates = ['2024-05-01T00:00:00', '2024-02-11T09:00:00', '2024-02-10T23:00:00', '2024-04-30T12:00:00']
        series = engine.trend_series([make_record(1, d) for d in dates])

        labels = [point.date for point in series]
        assert labels == sorted(labels)


class TestSummary:
    """Test cases for summary."""

    def test_summary(self):
        """Test the Food/Rent example."""
        records = [
            make_record(50, '2024-01-15T10:00:00', category='Food', payment_source='Card'),
            make_record(30, '2024-01-16T10:00:00', category='Food', payment_source='Cash'),
            make_record(60, '2024-01-17T10:00:00', category='Rent', payment_source='Cash'),
        ]

        result = engine.summary(records).to_dict()

        assert result == {
            'totalAmount': 140,
            'totalCategories': 2,
            'mostSpentCategory': 'Food',
            'mostUsedPaymentSource': 'Cash',
        }

    def test_empty_summary(self):
        """Test the summary of an empty snapshot."""
        result = engine.summary([])

        assert result.total_amount == 0
        assert result.total_categories == 0
        assert result.most_spent_category == 'N/A'
        assert result.most_used_payment_source == 'N/A'

    def test_ties_resolve_to_smallest_label(self):
        """Test the tie-break on equal totals and equal counts."""
        records = [
            make_record(50, '2024-01-15T10:00:00', category='Travel', payment_source='Wallet'),
            make_record(50, '2024-01-16T10:00:00', category='Books', payment_source='Card'),
        ]

        result = engine.summary(records)

        assert result.most_spent_category == 'Books'
        assert result.most_used_payment_source == 'Card'

    def test_unknown_source_can_be_most_used(self):
        """Test that records without a source count towards Unknown."""
        records = [
            make_record(10, '2024-01-15T10:00:00', payment_source=None),
            make_record(10, '2024-01-16T10:00:00', payment_source=None),
            make_record(10, '2024-01-17T10:00:00', payment_source='Card'),
        ]

        assert engine.summary(records).most_used_payment_source == 'Unknown'


class TestAllViews:
    """Test cases for all_views."""

    def test_all_views_share_one_snapshot(self):
        """Test that every view is present and computed over the same records."""
        records = [
            make_record(50, '2024-01-15T10:00:00', category='Food'),
            make_record(60, '2024-02-17T10:00:00', category='Rent', payment_source=None),
        ]

        views = engine.all_views(records)

        assert set(views) == {
            'categoryWise', 'dailyTotals', 'weeklyTotals', 'monthlyTotals',
            'paymentSourceDistribution', 'expenseTrends', 'summary'
        }
        assert views['monthlyTotals'] == [
            {'month': 'January', 'totalAmount': 50},
            {'month': 'February', 'totalAmount': 60},
        ]
        assert len(views['expenseTrends']) == 2
        assert views['summary']['totalAmount'] == 110

    def test_all_views_of_empty_snapshot(self):
        """Test that an empty snapshot yields empty views."""
        views = engine.all_views([])

        assert views['categoryWise'] == []
        assert views['weeklyTotals'] == []
        assert views['summary'] == {
            'totalAmount': 0,
            'totalCategories': 0,
            'mostSpentCategory': 'N/A',
            'mostUsedPaymentSource': 'N/A',
        }


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
