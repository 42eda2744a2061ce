import pytest

from rangeserve import (
    AppliedRange,
    CacheControl,
    CallbackContent,
    EmptyContent,
    FileContent,
    JsonContent,
    NotModifiedContent,
    Response,
    ResponseError,
    Status,
    StringContent,
)


class TestStatus:
    def test_default_reason_phrase(self):
        assert Status(200).reason_phrase == "OK"
        assert Status(206).reason_phrase == "Partial Content"

    def test_custom_reason_phrase(self):
        assert Status(200, "Fine").reason_phrase == "Fine"

    def test_str(self):
        assert str(Status(404)) == "404 Not Found"

    def test_invalid_code(self):
        with pytest.raises(ResponseError, match="Invalid status code: 999"):
            Status(999)


class TestResponse:
    def test_defaults(self):
        response = Response()

        assert response.status == Status(200)
        assert isinstance(response.content, EmptyContent)
        assert len(response.headers) == 0
        assert response.cache == CacheControl.never_cached()

    def test_int_status_is_coerced(self):
        assert Response(404).status == Status(404)

    @pytest.mark.parametrize(
        "value, expected_type",
        [
            ("text", StringContent),
            (b"bytes", StringContent),
            ({"a": 1}, JsonContent),
            ([1, 2], JsonContent),
            (None, EmptyContent),
        ],
    )
    def test_content_is_coerced(self, value, expected_type):
        assert isinstance(Response(content=value).content, expected_type)

    def test_content_instances_are_kept(self):
        content = StringContent("x")
        assert Response(content=content).content is content

    def test_unsupported_content(self):
        with pytest.raises(TypeError):
            Response(content=42)  # type: ignore[arg-type]

    def test_headers_are_not_shared(self):
        first = Response()
        first.headers["X-A"] = "1"

        assert "X-A" not in Response().headers

    def test_json(self):
        response = Response.json({"a": 1}, status=201)

        assert response.status.code == 201
        assert isinstance(response.content, JsonContent)
        assert response.content.data == {"a": 1}

    def test_file(self, make_file):
        response = Response.file(str(make_file(b"data", "a.txt")))

        assert isinstance(response.content, FileContent)
        assert response.content.filename() == "a.txt"

    @pytest.mark.parametrize(
        "permanent, preserve_method, status_code",
        [(False, False, 302), (False, True, 307), (True, False, 301), (True, True, 308)],
    )
    def test_redirect(self, permanent, preserve_method, status_code):
        response = Response.redirect("/login", permanent=permanent, preserve_method=preserve_method)

        assert response.status.code == status_code
        assert response.headers["Location"] == "/login"

    def test_cache_shortcuts(self):
        response = Response()

        assert response.cache_public_content().cache == CacheControl.public_content()
        assert response.cache_public_media().cache == CacheControl.public_media()
        assert response.cache_private_content().cache == CacheControl.private_content()
        assert response.cache_private_media().cache == CacheControl.private_media()
        assert response.cache_never().cache == CacheControl.never_cached()

    def test_setters_are_fluent(self):
        response = Response().set_status(201).set_content("created")

        assert response.status.code == 201
        assert isinstance(response.content, StringContent)


class TestApplyRange:
    def test_satisfiable(self):
        response = Response(content="0123456789").apply_range(2, 5)

        assert isinstance(response.content, AppliedRange)
        assert response.content.content_range_header() == "bytes 2-5/10"

    def test_unsatisfiable_becomes_416(self):
        response = Response(content="0123456789").apply_range(20, 25)

        assert response.status.code == 416
        assert isinstance(response.content, EmptyContent)
        assert response.headers["Content-Range"] == "bytes */10"

    def test_content_without_range_support(self):
        response = Response(content=CallbackContent(lambda: b"x"))

        with pytest.raises(ResponseError, match="CallbackContent does not support range requests"):
            response.apply_range(0, 1)


class TestApplyRangeHeader:
    def test_satisfiable(self):
        response = Response(content="0123456789").apply_range_header("bytes=-3")

        assert isinstance(response.content, AppliedRange)
        assert b"".join(response.content.render()) == b"789"

    def test_unsatisfiable(self):
        response = Response(content="0123456789").apply_range_header("bytes=10-")

        assert response.status.code == 416
        assert response.headers["Content-Range"] == "bytes */10"

    @pytest.mark.parametrize("value", [None, "", "items=0-1", "bytes=0-1,3-4", "bytes=x-y"])
    def test_ignored_headers(self, value):
        response = Response(content="0123456789").apply_range_header(value)

        assert response.status.code == 200
        assert isinstance(response.content, StringContent)

    def test_content_without_range_support(self):
        response = Response(content={"a": 1}).apply_range_header("bytes=0-1")

        assert response.status.code == 200
        assert isinstance(response.content, JsonContent)


def test_not_modified():
    content = StringContent("Hello", etag="v1")
    response = Response(content=content).not_modified()

    assert response.status.code == 304
    assert isinstance(response.content, NotModifiedContent)
    assert response.content.etag() == "v1"
    assert list(response.content.render()) == []
