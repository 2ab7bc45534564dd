import pytest

from starkperp.types import Market
from tests.mock_executors import MockSuccessfulOutput, ok
from tests.unit.conftest import is_request, is_signed_by


def test_cancel_order(mock_http_client):
    client, mock_http = mock_http_client

    mock_http.stage_output(
        MockSuccessfulOutput(
            output=ok({"cancelOrder": {"id": "o-1", "status": "CANCELED"}}),
            call_validation=is_request("DELETE", "/v3/orders/o-1"),
        )
    )

    response = client.cancel_order("o-1")

    assert response["cancelOrder"]["status"] == "CANCELED"
    assert mock_http.call_log[0].arg_pack[3] is None
    assert is_signed_by(client.authenticator)(mock_http.call_log[0])


@pytest.mark.parametrize(
    "market, expected_path",
    [
        (None, "/v3/orders"),
        (Market.BTC_USD, "/v3/orders?market=BTC-USD"),
        ("ETH-USD", "/v3/orders?market=ETH-USD"),
    ],
)
def test_cancel_all_orders(mock_http_client, market, expected_path):
    client, mock_http = mock_http_client

    mock_http.stage_output(
        MockSuccessfulOutput(
            output=ok({"cancelOrders": []}),
            call_validation=is_request("DELETE", expected_path),
        )
    )

    assert client.cancel_all_orders(market) == {"cancelOrders": []}
    assert is_signed_by(client.authenticator)(mock_http.call_log[0])
