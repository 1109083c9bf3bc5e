"""Upload endpoint tests."""

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def _upload(client, project_id, filename="logo.png", content=PNG, content_type="image/png", category="logo"):
    return client.post(
        "/v1/uploads",
        data={"project_id": project_id, "category": category},
        files={"file": (filename, content, content_type)},
    )


def test_upload(client, sample_project, settings):
    resp = _upload(client, sample_project)
    assert resp.status_code == 201
    data = resp.json()
    assert data["project_id"] == sample_project
    assert data["category"] == "logo"
    assert data["file"]["name"] == "logo.png"
    assert data["file"]["size"] == len(PNG)

    project = client.get(f"/v1/projects/{sample_project}").json()
    files = project["step7_data"]["uploaded_files"][0]["files"]
    assert files[0]["upload_path"] == data["file"]["upload_path"]
    assert project["progress"]["step7"] is False


def test_upload_too_large(client, sample_project):
    resp = _upload(client, sample_project, filename="huge.png", content=b"\x00" * (15 * 1024 * 1024))
    assert resp.status_code == 413
    assert resp.json()["detail"]["code"] == "FILE_TOO_LARGE"
    assert client.get(f"/v1/projects/{sample_project}").json()["step7_data"] is None


def test_upload_executable(client, sample_project):
    resp = _upload(client, sample_project, filename="setup.exe", content=b"MZ", content_type="application/octet-stream")
    assert resp.status_code == 415
    assert resp.json()["detail"]["code"] == "UNSUPPORTED_FILE_TYPE"
    assert client.get(f"/v1/projects/{sample_project}").json()["step7_data"] is None


def test_upload_unknown_project(client):
    resp = _upload(client, "missing")
    assert resp.status_code == 404


def test_delete_upload(client, sample_project):
    path = _upload(client, sample_project).json()["file"]["upload_path"]
    resp = client.request("DELETE", "/v1/uploads", json={"project_id": sample_project, "path": path})
    assert resp.status_code == 200
    assert resp.json()["status"] == "deleted"
    project = client.get(f"/v1/projects/{sample_project}").json()
    assert project["step7_data"]["uploaded_files"][0]["files"] == []


def test_delete_missing_file(client, sample_project):
    resp = client.request(
        "DELETE", "/v1/uploads", json={"project_id": sample_project, "path": f"{sample_project}/logo/x.png"}
    )
    assert resp.status_code == 404
    assert resp.json()["detail"]["code"] == "FILE_NOT_FOUND"


def test_upload_over_small_limit_reports_real_size(settings, mail, mirror, clock):
    from fastapi.testclient import TestClient

    from services.api.app.context import build_context
    from services.api.app.main import create_app

    small = settings.model_copy(update={"max_upload_bytes": 1024})
    client = TestClient(create_app(context=build_context(small, clock=clock, mail_transport=mail, mirror=mirror)))
    pid = client.post(
        "/v1/projects",
        json={"company_name": "Acme", "manager_name": "Kim Minsu", "email": "minsu@acme.co.kr", "phone": "010-1234-5678"},
    ).json()["id"]

    resp = _upload(client, pid, filename="big.png", content=b"\x00" * 5000)
    assert resp.status_code == 413
    assert "5000 bytes" in resp.json()["detail"]["message"]
    assert client.get(f"/v1/projects/{pid}").json()["step7_data"] is None
