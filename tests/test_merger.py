"""
Tests for merging mandatory and observed categories.

The merged list must always start with food, education, health, housing in
that order, followed by every other observed category in strictly increasing
case-sensitive order, with no name repeated.
"""

from hypothesis import given, settings, strategies as st

from cost_api.schemas.reports import CategoryEntry
from cost_api.services.merger import MANDATORY_CATEGORIES, merge_categories


def entry(amount: float = 1.0, description: str = "x", day: int = 1) -> CategoryEntry:
    return CategoryEntry(amount=amount, description=description, day=day)


category_names = st.one_of(
    st.sampled_from(MANDATORY_CATEGORIES),
    st.text(min_size=1, max_size=12),
)
groupings = st.dictionaries(
    keys=category_names,
    values=st.lists(
        st.builds(
            entry,
            amount=st.floats(min_value=0.01, max_value=10_000, allow_nan=False),
            day=st.integers(min_value=1, max_value=31),
        ),
        max_size=3,
    ),
    max_size=10,
)


class TestMergeCategories:
    def test_empty_aggregation_yields_only_mandatory_categories(self):
        merged = merge_categories({})

        assert merged == [{"food": []}, {"education": []}, {"health": []}, {"housing": []}]

    def test_mandatory_category_uses_aggregated_entries_once(self):
        food = [entry(12, "choco", 3)]
        merged = merge_categories({"food": food, "dairy": [entry(3.5, "milk", 5)]})

        names = [name for block in merged for name in block]
        assert names == ["food", "education", "health", "housing", "dairy"]
        assert merged[0]["food"] == food

    def test_extra_categories_sorted_case_sensitively(self):
        merged = merge_categories({"travel": [], "Books": [], "sport": [], "apps": []})

        names = [name for block in merged for name in block][4:]
        assert names == ["Books", "apps", "sport", "travel"]

    @given(grouped=groupings)
    @settings(max_examples=200)
    def test_mandatory_prefix_and_sorted_suffix(self, grouped):
        merged = merge_categories(grouped)
        names = [name for block in merged for name in block]

        assert tuple(names[:4]) == MANDATORY_CATEGORIES
        rest = names[4:]
        assert all(a < b for a, b in zip(rest, rest[1:]))
        assert len(names) == len(set(names))
        assert set(names) == set(MANDATORY_CATEGORIES) | set(grouped)

    @given(grouped=groupings)
    @settings(max_examples=100)
    def test_entries_are_carried_over_unchanged(self, grouped):
        merged = merge_categories(grouped)

        for block in merged:
            ((name, entries),) = block.items()
            assert entries == list(grouped.get(name, []))
