from rangeserve import (
    AppliedRange,
    BodySent,
    Complete,
    HeadersPrepared,
    HeadersSent,
    Initial,
    RenderOptions,
    Response,
    StringContent,
)


def test_states_move_forward_in_order():
    response = Response(content=StringContent("0123456789", etag="v1"))

    prepared = Initial(response=response).next()
    assert isinstance(prepared, HeadersPrepared)
    assert prepared.status.code == 200
    assert prepared.headers["Content-Length"] == "10"

    sent = prepared.next()
    assert isinstance(sent, HeadersSent)
    body = b"".join(sent.iter_body())
    assert body == b"0123456789"

    body_sent = sent.next(len(body))
    assert isinstance(body_sent, BodySent)

    complete = body_sent.next()
    assert isinstance(complete, Complete)
    assert complete.bytes_sent == 10
    assert complete.next() is None


def test_applied_range_is_prepared_as_partial_content():
    response = Response(content=AppliedRange(StringContent("0123456789"), 5, None))

    prepared = Initial(response=response).next()

    assert prepared.status.code == 206
    assert prepared.headers["Content-Range"] == "bytes 5-9/10"
    assert b"".join(prepared.next().iter_body()) == b"56789"


def test_headers_are_a_snapshot():
    response = Response(content="Hello")
    prepared = Initial(response=response).next()

    response.headers["X-Late"] = "1"
    response.set_status(500)

    sent = prepared.next()
    assert "X-Late" not in sent.headers
    assert sent.status.code == 200


def test_head_keeps_headers_and_skips_body():
    response = Response(content="Hello")

    prepared = Initial(response=response, options=RenderOptions(include_body=False)).next()
    sent = prepared.next()

    assert prepared.headers["Content-Length"] == "5"
    assert list(sent.iter_body()) == []


def test_fallback_content_type_option():
    response = Response(content=StringContent(b"\x00", filename=None))
    options = RenderOptions(fallback_content_type="application/x-raw")

    prepared = Initial(response=response, options=options).next()

    assert prepared.headers["Content-Type"] == "application/x-raw"


def test_raw_values_assigned_after_construction_are_coerced():
    response = Response(content="Hello")
    response.status = 201
    response.content = "Created"

    prepared = Initial(response=response).next()

    assert prepared.status.code == 201
    assert prepared.status.reason_phrase == "Created"
    assert prepared.headers["Content-Length"] == "7"
    assert b"".join(prepared.next().iter_body()) == b"Created"
