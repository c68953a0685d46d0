from unittest.mock import MagicMock

import pytest
import requests

from resonance_optimizer.core.config import OptimizerSettings
from resonance_optimizer.core.errors import RemoteSolveError
from resonance_optimizer.core.srs_client import SRSClient, default_config


def make_response(status=200, body=None, json_error=False):
    response = MagicMock()
    response.status_code = status
    response.ok = 200 <= status < 300
    response.reason = "Error"
    response.text = "" if body is None else str(body)
    if json_error:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = body
    return response


def make_client(response=None, error=None, **kwargs):
    session = MagicMock()
    if error is not None:
        session.post.side_effect = error
    else:
        session.post.return_value = response
    return SRSClient("http://srs.local/v1/", session=session, **kwargs), session


def test_solve_subset_sum_request_shape():
    client, session = make_client(make_response(body={"feasible": True}),
                                  api_key="k", api_token="t", timeout=7)
    assert client.solve_subset_sum([3, 5], 8) == {"feasible": True}

    args, kwargs = session.post.call_args
    assert args[0] == "http://srs.local/v1/srs/solve"
    assert kwargs["json"] == {"Problem": "subsetsum", "Spec": {"weights": [3, 5], "target": 8}}
    assert kwargs["timeout"] == 7
    headers = kwargs["headers"]
    assert headers["X-API-Key"] == "k"
    assert headers["Authorization"] == "Bearer t"
    assert headers["Idempotency-Key"]


def test_idempotency_key_changes_per_request():
    client, session = make_client(make_response(body={"feasible": True}))
    client.solve_subset_sum([1], 1)
    client.solve_subset_sum([1], 1)
    keys = [c.kwargs["headers"]["Idempotency-Key"] for c in session.post.call_args_list]
    assert keys[0] != keys[1]


def test_no_auth_headers_without_credentials():
    client, session = make_client(make_response(body={"feasible": True}))
    client.solve_subset_sum([1], 1)
    headers = session.post.call_args.kwargs["headers"]
    assert "Authorization" not in headers
    assert "X-API-Key" not in headers


def test_config_is_forwarded():
    client, session = make_client(make_response(body={"feasible": True}))
    client.solve_subset_sum([1], 1, config=default_config("subsetsum"))
    assert session.post.call_args.kwargs["json"]["Config"]["schedules"]["eta0"] == 0.25


def test_data_wrapper_is_unwrapped():
    client, _ = make_client(make_response(body={"data": {"feasible": False}}))
    assert client.solve_subset_sum([1], 2) == {"feasible": False}


def test_transport_error():
    client, _ = make_client(error=requests.ConnectionError("refused"))
    with pytest.raises(RemoteSolveError, match="refused"):
        client.solve_subset_sum([1], 1)


def test_timeout_is_remote_error():
    client, _ = make_client(error=requests.Timeout("slow"))
    with pytest.raises(RemoteSolveError):
        client.solve_subset_sum([1], 1)


def test_http_error_keeps_status():
    client, _ = make_client(make_response(status=503, body={"detail": "overloaded"}))
    with pytest.raises(RemoteSolveError) as excinfo:
        client.solve_subset_sum([1], 1)
    assert excinfo.value.status_code == 503
    assert "overloaded" in str(excinfo.value)


def test_non_json_body():
    client, _ = make_client(make_response(body="<html>", json_error=True))
    with pytest.raises(RemoteSolveError):
        client.solve_subset_sum([1], 1)


def test_non_object_body():
    client, _ = make_client(make_response(body=[1, 2]))
    with pytest.raises(RemoteSolveError):
        client.solve_subset_sum([1], 1)


def test_unsupported_problem_not_sent():
    client, session = make_client(make_response(body={}))
    with pytest.raises(RemoteSolveError):
        client.solve({"Problem": "tsp", "Spec": {}})
    session.post.assert_not_called()


def test_from_settings():
    settings = OptimizerSettings(api_base_url="http://x/v1", api_key="a", request_timeout=3)
    client = SRSClient.from_settings(settings)
    assert client.base_url == "http://x/v1"
    assert client.api_key == "a"
    assert client.timeout == 3
    client.close()


def test_default_config_presets():
    assert default_config("3sat")["schedules"]["eta0"] == 0.3
    assert "schedules" not in default_config("clique")
    assert default_config("subsetsum")["stop"]["iterMax"] == 20000
