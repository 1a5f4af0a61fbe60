from typing import Dict, List

import pytest

from coinbase_core.errors import CoinbaseAPIError, CoinbaseClientError, CoinbaseHttpError, CoinbaseServiceError
from coinbase_core.response import RawResponse, resolve
from coinbase_core.serialization import CoinbaseModel


class Order(CoinbaseModel):
    id: str


def test_expected_status_deserializes_body():
    order = resolve(RawResponse(200, {}, '{"id":"42"}'), [200], Order)
    assert order == Order(id="42")


def test_expected_status_into_plain_types():
    assert resolve(RawResponse(200, {}, '{"id":"42"}'), [200], Dict[str, str]) == {"id": "42"}
    assert resolve(RawResponse(201, {}, '[{"id":"1"}]'), (200, 201), List[Order]) == [Order(id="1")]


def test_no_response_type_returns_none():
    assert resolve(RawResponse(204, {}, ""), [204]) is None


def test_shape_mismatch_is_client_error():
    with pytest.raises(CoinbaseClientError):
        resolve(RawResponse(200, {}, '{"name":"x"}'), [200], Order)


def test_structured_error_body_raises_service_error():
    with pytest.raises(CoinbaseServiceError) as exc_info:
        resolve(RawResponse(404, {}, '{"message":"not found"}'), [200], Order)
    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "not found"
    assert str(exc_info.value) == "404: not found"


def test_unstructured_error_body_raises_http_error():
    body = "<html><body>Bad Gateway</body></html>"
    with pytest.raises(CoinbaseHttpError) as exc_info:
        resolve(RawResponse(502, {}, body), [200], Order)
    assert exc_info.value.status_code == 502
    assert exc_info.value.body == body


@pytest.mark.parametrize("body", ["", "[]", '{"error": "x"}', '{"message": 5}'])
def test_other_error_bodies_are_http_errors(body):
    with pytest.raises(CoinbaseHttpError):
        resolve(RawResponse(500, {}, body), [200])


def test_success_status_not_in_expected_set_is_an_error():
    with pytest.raises(CoinbaseAPIError):
        resolve(RawResponse(200, {}, '{"message":"ok"}'), [201], Order)
