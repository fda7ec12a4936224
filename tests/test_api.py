import pytest
from fastapi.testclient import TestClient

from sensorcal import __version__
from sensorcal import config as config_module
from sensorcal.api.main import app, create_app


@pytest.fixture
def client():
    return TestClient(app)


def _payload(**parameters):
    return {
        "time": [0.0, 1.0, 2.0, 3.0, 4.0],
        "samples": [[1.0, 1.0], [2.0, 2.0], [3.0, 3.0], [4.0, 4.0], [5.0, 5.0]],
        "parameters": parameters,
    }


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_process_returns_clean_data_and_coefficients(client):
    response = client.post(
        "/calibration/process",
        json=_payload(window_size=3, outlier_method="iqr", filter_type="moving_average", calib_method="lsq"),
    )
    assert response.status_code == 200
    body = response.json()

    assert body["samples_clean"][0] == pytest.approx([1.5, 1.5])
    assert body["samples_clean"][4] == pytest.approx([4.5, 4.5])
    assert body["coeffs_median"] == pytest.approx([3.0, 3.0])
    assert body["coeffs_lsq"] == pytest.approx([1.0, 1.0])
    assert body["calib_method"] == "lsq"
    assert body["selected_coefficients"] == pytest.approx(body["coeffs_lsq"])
    assert body["outlier_counts"] == [0, 0]
    assert [s["channel"] for s in body["statistics"]] == [1, 2]


def test_process_accepts_null_readings(client):
    payload = _payload(window_size=1, outlier_method="zscore")
    payload["samples"][2][1] = None

    response = client.post("/calibration/process", json=payload)
    assert response.status_code == 200
    body = response.json()
    assert body["samples_clean"][2][1] == 4.0
    assert body["outlier_counts"] == [0, 1]


def test_empty_matrix_is_rejected(client):
    response = client.post("/calibration/process", json={"time": [], "samples": []})
    assert response.status_code == 422
    assert "zero rows" in response.json()["detail"]


def test_mismatched_time_is_rejected(client):
    payload = _payload()
    payload["time"] = [0.0, 1.0]
    response = client.post("/calibration/process", json=payload)
    assert response.status_code == 422


def test_invalid_window_size_is_rejected(client):
    response = client.post("/calibration/process", json=_payload(window_size=0))
    assert response.status_code == 422


def test_export_returns_csv(client):
    response = client.post("/calibration/export", json=_payload(window_size=1))
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.text.startswith("time,sensor_1_raw,sensor_1_calib")
    assert "coefficients,," in response.text


def test_methods_flag_placeholder_filters(client):
    body = client.get("/calibration/methods").json()
    filters = {f["name"]: f for f in body["filter_types"]}

    assert body["outlier_methods"] == ["zscore", "iqr", "mad"]
    assert filters["savgol"]["is_placeholder"] is True
    assert filters["savgol"]["implementation"] == "moving_average"
    assert filters["median"]["is_placeholder"] is False
    assert body["calib_methods"] == ["median", "lsq"]


def test_root_reports_version(client):
    body = client.get("/").json()
    assert body["version"] == __version__
    assert body["methods"] == "/calibration/methods"


def test_cors_allows_any_origin_without_credentials(client):
    response = client.get("/health", headers={"Origin": "http://dashboard.example"})
    assert response.headers["access-control-allow-origin"] == "*"
    assert "access-control-allow-credentials" not in response.headers


def test_cors_origins_come_from_config(monkeypatch):
    monkeypatch.setenv("API_CORS_ORIGINS", "http://lab.local, http://bench.local")
    config_module.reset_config()
    try:
        custom = TestClient(create_app())
    finally:
        config_module.reset_config()

    response = custom.get("/calibration/methods", headers={"Origin": "http://bench.local"})
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://bench.local"
