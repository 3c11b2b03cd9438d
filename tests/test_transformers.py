"""
RestBuddy: Built-in Transformer Tests
=======================================

What we test:
    ✅ Each factory renders the expected SQL fragment
    ✅ Blank values produce None (dropped by the condition builder)
    ✅ Values are coerced to the column type
"""

import pytest

from restbuddy.exceptions import ValidationError
from restbuddy.models import Post, User
from restbuddy.services.transformers import (
    at_least,
    at_most,
    between,
    contains,
    icontains,
    one_of,
    starts_with,
)


def sql(clause) -> str:
    return str(clause.compile(compile_kwargs={"literal_binds": True}))


class TestPatternTransformers:

    def test_contains(self):
        rendered = sql(contains(User.name)("li"))
        assert "users.name LIKE '%li%'" in rendered

    def test_icontains_is_case_insensitive(self):
        rendered = sql(icontains(User.name)("LI"))
        assert "lower(users.name)" in rendered
        assert "%LI%" in rendered

    def test_starts_with(self):
        assert "'Al%'" in sql(starts_with(User.name)("Al"))

    def test_wildcards_are_escaped(self):
        clause = contains(User.name)("50%_off")
        assert clause.right.value == "%50\\%\\_off%"

    @pytest.mark.parametrize("factory", [contains, icontains, starts_with])
    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_blank_is_none(self, factory, raw):
        assert factory(User.name)(raw) is None


class TestOneOf:

    def test_in_list(self):
        rendered = sql(one_of(Post.status)("draft, published"))
        assert "posts.status IN ('draft', 'published')" in rendered

    def test_values_are_coerced(self):
        assert "posts.user_id IN (1, 2)" in sql(one_of(Post.user_id)("1,2"))

    def test_only_commas_is_none(self):
        assert one_of(Post.status)(",,") is None


class TestRanges:

    def test_between(self):
        assert sql(between(User.age)("18,30")) == "users.age BETWEEN 18 AND 30"

    def test_open_upper(self):
        assert sql(between(User.age)("18,")) == "users.age >= 18"

    def test_open_lower(self):
        assert sql(between(User.age)(",30")) == "users.age <= 30"

    def test_single_value_is_lower_bound(self):
        assert sql(between(User.age)("18")) == "users.age >= 18"

    def test_both_empty(self):
        assert between(User.age)(",") is None

    def test_at_least_and_at_most(self):
        assert sql(at_least(User.age)("21")) == "users.age >= 21"
        assert sql(at_most(User.age)("65")) == "users.age <= 65"

    def test_bad_bound_raises(self):
        with pytest.raises(ValidationError):
            between(User.age)("young,old")

    def test_out_of_range_bound_raises(self):
        with pytest.raises(ValidationError):
            at_least(User.age)("99999999999999999999999")
