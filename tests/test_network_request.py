import pytest
import requests
import responses

from calaos_home.network_request import (
    HttpMethod,
    NetworkRequest,
    RequestStatus,
    ResultType,
)

URL = "http://example.com/api"


def _collect(signal):
    results = []
    signal.connect(lambda *args: results.append(args))
    return results


def test_json_success():
    req = NetworkRequest(URL)
    results = _collect(req.finished_json)
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, URL, json={"a": 1})
        assert req.start() is True
    assert results == [(RequestStatus.SUCCESS, {"a": 1})]
    assert req.last_error == ""


def test_json_empty_body_is_success():
    req = NetworkRequest(URL)
    results = _collect(req.finished_json)
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, URL, body=b"")
        req.start()
    assert results == [(RequestStatus.SUCCESS, None)]


def test_json_parse_error():
    req = NetworkRequest(URL)
    results = _collect(req.finished_json)
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, URL, body=b"not json")
        req.start()
    assert results == [(RequestStatus.JSON_PARSE_ERROR, None)]
    assert req.last_error.startswith("JSON parse error")


def test_json_http_error_keeps_body_document():
    req = NetworkRequest(URL)
    results = _collect(req.finished_json)
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, URL, json={"error": "missing"}, status=404)
        req.start()
    assert results == [(RequestStatus.HTTP_ERROR, {"error": "missing"})]
    assert "404" in req.last_error


def test_raw_post_sends_data():
    req = NetworkRequest(URL, HttpMethod.POST)
    req.result_type = ResultType.RAW_DATA
    req.post_data = b"payload"
    results = _collect(req.finished_data)
    with responses.RequestsMock() as rsps:
        rsps.add(responses.POST, URL, body=b"hello")
        req.start()
        assert rsps.calls[0].request.body == b"payload"
    assert results == [(RequestStatus.SUCCESS, b"hello")]


def test_raw_error_gives_empty_data():
    req = NetworkRequest(URL)
    req.result_type = ResultType.RAW_DATA
    results = _collect(req.finished_data)
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, URL, body=b"oops", status=500)
        req.start()
    assert results == [(RequestStatus.HTTP_ERROR, b"")]


def test_custom_header_is_sent():
    req = NetworkRequest(URL)
    req.set_header("X-Test", "value")
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, URL, json={})
        req.start()
        assert rsps.calls[0].request.headers["X-Test"] == "value"


@pytest.mark.parametrize(
    "method, mock_method",
    [
        (HttpMethod.PUT, responses.PUT),
        (HttpMethod.DELETE, responses.DELETE),
        (HttpMethod.HEAD, responses.HEAD),
    ],
)
def test_methods(method, mock_method):
    req = NetworkRequest(URL, method)
    results = _collect(req.finished_json)
    with responses.RequestsMock() as rsps:
        rsps.add(mock_method, URL, body=b"")
        req.start()
        assert rsps.calls[0].request.method == method.value
    assert results == [(RequestStatus.SUCCESS, None)]


def test_file_download(tmp_path):
    target = tmp_path / "out.bin"
    req = NetworkRequest(URL)
    req.result_type = ResultType.FILE
    req.file = target
    results = _collect(req.finished)
    chunks = _collect(req.data_ready_read)
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, URL, body=b"file content")
        req.start()
    assert results == [(RequestStatus.SUCCESS,)]
    assert target.read_bytes() == b"file content"
    assert b"".join(c[0] for c in chunks) == b"file content"


def test_file_missing_aborts():
    req = NetworkRequest(URL)
    req.result_type = ResultType.FILE
    assert req.start() is False
    assert req.last_error == "dlFile is invalid!, aborting request."


def test_connection_error():
    req = NetworkRequest(URL)
    results = _collect(req.finished_json)
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, URL, body=requests.ConnectionError("boom"))
        req.start()
    assert results == [(RequestStatus.HTTP_ERROR, None)]
    assert req.last_error == "boom"


def test_cancel_during_transfer():
    req = NetworkRequest(URL)
    req.result_type = ResultType.RAW_DATA
    req.data_ready_read.connect(lambda data: req.cancel())
    results = _collect(req.finished_data)
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, URL, body=b"x" * 20000)
        req.start()
    assert results == [(RequestStatus.HTTP_ERROR, b"")]
    assert req.last_error == "Operation canceled"


def test_start_while_in_progress_is_refused():
    req = NetworkRequest(URL)
    nested = []
    req.data_ready_read.connect(lambda data: nested.append(req.start()))
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, URL, json={"a": 1})
        assert req.start() is True
    assert nested == [False]
    assert req.in_progress is False