import pytest

from upload_analytics.app import _services


@pytest.fixture
def uploaded(test_client, sales_csv):
    response = test_client.post(
        "/api/datasets/upload",
        files={"file": ("sales.csv", sales_csv, "text/csv")},
        data={"chart_type": "auto", "color_scheme": "blue", "animation_duration": "750"},
    )
    assert response.status_code == 200
    return response.json()


def test_root_and_health(test_client):
    root = test_client.get("/")
    assert root.status_code == 200
    assert root.json()["message"] == "Upload Analytics API"

    health = test_client.get("/health")
    assert health.status_code == 200
    assert health.json()["status"] == "healthy"
    assert "X-Process-Time" in health.headers


def test_upload_runs_full_analysis(uploaded):
    assert uploaded["success"] is True
    assert uploaded["summary"]["total_records"] == 4
    assert uploaded["summary"]["data_quality"] == 88
    assert uploaded["classification"]["numeric"] == ["sales", "units"]
    assert [chart["chart_id"] for chart in uploaded["charts"]] == [
        "chart_sales_0", "chart_units_1", "correlation_chart", "categorical_chart"
    ]
    assert all(chart["config"] is not None for chart in uploaded["charts"])
    assert uploaded["notifications"][0] == {
        "severity": "success",
        "message": "Successfully loaded 4 records from sales.csv",
    }
    assert "stdDev" in uploaded["statistics"]["sales"]


def test_upload_with_overlong_number_cell(test_client):
    for digits in (400, 5000):
        content = ("a,b\n" + "9" * digits + ",x\n2,y\n3,z\n").encode()
        response = test_client.post(
            "/api/datasets/upload",
            files={"file": ("big.csv", content, "text/csv")},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["classification"]["numeric"] == []
        assert "a" in body["classification"]["categorical"]


def test_upload_unsupported_type(test_client):
    response = test_client.post(
        "/api/datasets/upload",
        files={"file": ("notes.txt", b"a,b\n1,2\n", "text/plain")},
    )
    assert response.status_code == 415
    assert response.json()["error"]["type"] == "unsupported_file_type"


def test_upload_too_large(test_client, sales_csv, monkeypatch):
    ingestion_service = _services["analytics_service"].ingestion_service
    monkeypatch.setattr(ingestion_service, "max_size_bytes", 10)

    response = test_client.post(
        "/api/datasets/upload",
        files={"file": ("sales.csv", sales_csv, "text/csv")},
    )
    assert response.status_code == 413


def test_upload_header_only(test_client):
    response = test_client.post(
        "/api/datasets/upload",
        files={"file": ("empty.csv", b"a,b,c\n", "text/csv")},
    )
    assert response.status_code == 422
    assert response.json()["error"]["type"] == "empty_table"


def test_unknown_palette_is_rejected(test_client, sales_csv):
    response = test_client.post(
        "/api/datasets/upload",
        files={"file": ("sales.csv", sales_csv, "text/csv")},
        data={"color_scheme": "neon"},
    )
    assert response.status_code == 400
    assert response.json()["error"]["type"] == "configuration_error"


def test_analyze_records_without_numeric_columns(test_client):
    response = test_client.post(
        "/api/datasets/analyze",
        json={"records": [{"name": "a"}, {"name": "b"}], "source_name": "names"},
    )
    body = response.json()

    assert response.status_code == 200
    assert body["charts"] == []
    assert {"severity": "warning", "message": "No numeric columns found for visualization"} in body["notifications"]


def test_analyze_requires_records(test_client):
    response = test_client.post("/api/datasets/analyze", json={})
    assert response.status_code == 422
    assert response.json()["error"]["type"] == "validation_error"


def test_refresh_changes_chart_variants(test_client, uploaded):
    session_id = uploaded["session_id"]
    response = test_client.post(
        f"/api/datasets/{session_id}/refresh",
        json={"chart_type": "pie", "color_scheme": "vibrant", "animation_duration": 0},
    )
    body = response.json()

    assert response.status_code == 200
    assert body["session_id"] == session_id
    assert body["charts"][0]["variant"] == "pie"
    assert body["charts"][0]["config"]["options"]["animation"] == {"duration": 0}
    assert body["notifications"][0]["message"] == "Visualizations refreshed"


def test_preview_and_statistics(test_client, uploaded):
    session_id = uploaded["session_id"]

    preview = test_client.get(f"/api/datasets/{session_id}/preview").json()
    assert preview["columns"] == ["region", "sales", "units", "note"]
    assert len(preview["rows"]) == 4
    assert preview["more_rows"] is False

    statistics = test_client.get(f"/api/datasets/{session_id}/statistics").json()
    assert list(statistics["statistics"]) == ["sales", "units"]
    assert statistics["statistics"]["sales"]["max"] == 150


def test_preview_caps_rows_and_columns(test_client):
    records = [{f"c{j}": i * j for j in range(12)} for i in range(30)]
    body = test_client.post("/api/datasets/analyze", json={"records": records}).json()

    assert len(body["preview"]["rows"]) == 10
    assert len(body["preview"]["columns"]) == 8
    assert body["preview"]["more_rows"] is True
    assert body["preview"]["more_columns"] is True
    assert len(body["statistics"]) == 6


def test_report_download(test_client, uploaded):
    session_id = uploaded["session_id"]
    response = test_client.get(f"/api/datasets/{session_id}/report", params={"sample_size": 2})
    report = response.json()

    assert response.status_code == 200
    assert "analytics_report_" in response.headers["content-disposition"]
    assert report["summary"]["totalRecords"] == 4
    assert len(report["sampleData"]) == 2

    without_sample = test_client.get(
        f"/api/datasets/{session_id}/report", params={"include_sample": "false"}
    ).json()
    assert "sampleData" not in without_sample


def test_delete_session(test_client, uploaded):
    session_id = uploaded["session_id"]

    assert test_client.delete(f"/api/datasets/{session_id}").status_code == 200

    response = test_client.get(f"/api/datasets/{session_id}/preview")
    assert response.status_code == 404
    assert response.json()["error"]["type"] == "session_not_found"


def test_palettes(test_client):
    body = test_client.get("/api/charts/palettes").json()

    assert set(body["palettes"]) == {"blue", "gradient", "vibrant", "monochrome"}
    assert all(len(colors) == 7 for colors in body["palettes"].values())
    assert body["default"] == "blue"
