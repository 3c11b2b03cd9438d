"""
RestBuddy: Request Classifier Tests
=====================================

What we test:
    ✅ Every method/route-shape combination maps to the right request type
    ✅ GET on any item path is show, on any collection path is list
    ✅ Placeholder detection for ":id" and "{id}" templates
"""

import pytest

from restbuddy.services.request_classifier import (
    RequestType,
    classify_request,
    is_item_path,
    is_param_segment,
)


class TestClassifyRequest:

    @pytest.mark.parametrize(
        "method, is_item_route, expected",
        [
            ("GET", True, RequestType.SHOW),
            ("GET", False, RequestType.LIST),
            ("POST", False, RequestType.CREATE),
            ("PUT", True, RequestType.UPDATE),
            ("PATCH", True, RequestType.UPDATE),
            ("DELETE", True, RequestType.DESTROY),
            ("POST", True, RequestType.UNKNOWN),
            ("PUT", False, RequestType.UNKNOWN),
            ("PATCH", False, RequestType.UNKNOWN),
            ("DELETE", False, RequestType.UNKNOWN),
            ("OPTIONS", True, RequestType.UNKNOWN),
        ],
    )
    def test_combinations(self, method, is_item_route, expected):
        assert classify_request(method, is_item_route) is expected

    def test_method_is_case_insensitive(self):
        assert classify_request("patch", True) is RequestType.UPDATE

    @pytest.mark.parametrize(
        "path",
        ["/users/:id", "/users/{id}", "/api/v1/posts/{post_id:int}", "/a/b/c/:slug"],
    )
    def test_get_on_item_paths_is_show(self, path):
        assert classify_request("GET", is_item_path(path)) is RequestType.SHOW

    @pytest.mark.parametrize(
        "path",
        ["/users", "/users/", "/api/v1/posts", "/users/:id/comments", "/"],
    )
    def test_get_on_collection_paths_is_list(self, path):
        assert classify_request("GET", is_item_path(path)) is RequestType.LIST


class TestParamSegments:

    @pytest.mark.parametrize("segment", [":id", "{id}", "{id:int}", ":"])
    def test_placeholders(self, segment):
        assert is_param_segment(segment) is True

    @pytest.mark.parametrize("segment", ["users", "", "id:", "{id", None])
    def test_literal_segments(self, segment):
        assert is_param_segment(segment) is False
