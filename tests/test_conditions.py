"""Tests for QueryConditions composition."""

from sample_models import SimpleItem

from sluggable_finder import QueryConditions


class TestQueryConditions:
    """Tests for QueryConditions."""

    def test_empty_is_falsy(self):
        """Test empty conditions mean no restriction."""
        conditions = QueryConditions()
        assert not conditions
        assert len(conditions) == 0

    def test_and_is_immutable(self):
        """Test combining returns a new value and leaves the original alone."""
        base = QueryConditions.where(SimpleItem.published == True)  # noqa: E712
        combined = base & (SimpleItem.slug == "hello-world")
        assert len(base) == 1
        assert len(combined) == 2

    def test_and_accepts_conditions_and_none(self):
        """Test and_ flattens other conditions and skips None."""
        first = QueryConditions.match(SimpleItem, published=True)
        second = QueryConditions.match(SimpleItem, slug="a", title="b")
        combined = first.and_(second, None)
        assert len(combined) == 3

    def test_match_none_uses_is_null(self):
        """Test None values compare with IS NULL."""
        conditions = QueryConditions.match(SimpleItem, slug=None)
        assert "IS NULL" in str(conditions.clause())
