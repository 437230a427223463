"""
tests/api/test_upload_controller.py

End-to-end tests for the /files endpoints through the TestClient.

Every test that touches the controller takes the ``upload_service``
fixture, which swaps in a service storing under tmp_path.
"""

import io
import os
import tempfile

from fastapi.testclient import TestClient


def _file(name: str, content: bytes, mime: str) -> dict:
    return {"file": (name, io.BytesIO(content), mime)}


def _form(**overrides) -> dict:
    data = {
        "tenant_id": "5",
        "entity_type": "customer",
        "entity_id": "42",
        "category": "customer-photo",
        "tenant_name": "Manta Point",
    }
    data.update(overrides)
    return data


class TestCategories:

    def test_lists_all_categories(self, client: TestClient) -> None:
        response = client.get("/files/categories")

        assert response.status_code == 200
        categories = {c["name"]: c for c in response.json()["categories"]}
        assert len(categories) == 7
        assert categories["customer-photo"]["min_dimensions"] == [200, 200]
        assert categories["dive-site-map"]["max_size_mb"] == 15
        assert categories["invoice"]["extensions"] == ["pdf", "jpeg", "jpg", "png"]


class TestValidateEndpoint:

    def test_valid_invoice(self, client, upload_service, pdf_bytes) -> None:
        response = client.post(
            "/files/validate",
            data={"category": "invoice"},
            files=_file("inv.pdf", pdf_bytes, "application/pdf"),
        )

        assert response.status_code == 200
        assert response.json() == {"valid": True, "message": None}

    def test_spoofed_png_reports_content_mismatch(self, client, upload_service, image_bytes) -> None:
        response = client.post(
            "/files/validate",
            data={"category": "customer-photo"},
            files=_file("photo.png", image_bytes("JPEG"), "image/png"),
        )

        assert response.json() == {"valid": False, "message": "File type does not match file content."}

    def test_unknown_category(self, client, upload_service, pdf_bytes) -> None:
        response = client.post(
            "/files/validate",
            data={"category": "logbook"},
            files=_file("inv.pdf", pdf_bytes, "application/pdf"),
        )

        assert response.json()["message"] == "Invalid file category: logbook"

    def test_temp_files_are_removed(self, client, upload_service, pdf_bytes) -> None:
        def spooled() -> set:
            return {n for n in os.listdir(tempfile.gettempdir()) if n.startswith("upload-")}

        before = spooled()
        client.post(
            "/files/validate",
            data={"category": "invoice"},
            files=_file("inv.pdf", pdf_bytes, "application/pdf"),
        )

        assert spooled() - before == set()


class TestUploadEndpoint:

    def test_upload_returns_201_with_file(self, client, upload_service, image_bytes) -> None:
        response = client.post(
            "/files/",
            data=_form(),
            files=_file("diver.jpg", image_bytes("JPEG", (400, 400)), "image/jpeg"),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["file"]["originalName"] == "diver.jpg"
        assert body["file"]["category"] == "customer-photo"
        assert body["file"]["storagePath"].startswith(
            "uploads/tenants/manta-point/customer/42/customer-photo/"
        )

    def test_rejection_returns_422_with_message(self, client, upload_service, image_bytes) -> None:
        response = client.post(
            "/files/",
            data=_form(),
            files=_file("diver.jpg", image_bytes("JPEG", (150, 150)), "image/jpeg"),
        )

        assert response.status_code == 422
        assert response.json() == {"success": False, "message": "Image must be at least 200x200 pixels"}

    def test_unknown_entity_type_returns_400(self, client, upload_service, pdf_bytes) -> None:
        response = client.post(
            "/files/",
            data=_form(entity_type="boat", category="invoice"),
            files=_file("inv.pdf", pdf_bytes, "application/pdf"),
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid entity type: boat"

    def test_missing_category_is_a_request_error(self, client, upload_service, pdf_bytes) -> None:
        data = _form()
        del data["category"]

        response = client.post("/files/", data=data, files=_file("inv.pdf", pdf_bytes, "application/pdf"))

        assert response.status_code == 422


class TestStoredFileEndpoints:

    def _upload(self, client, pdf_bytes, tenant_id: str = "5") -> dict:
        response = client.post(
            "/files/",
            data=_form(tenant_id=tenant_id, entity_type="invoice", entity_id="77", category="invoice"),
            files=_file("INV-77.pdf", pdf_bytes, "application/pdf"),
        )
        assert response.status_code == 201
        return response.json()["file"]

    def test_show(self, client, upload_service, pdf_bytes) -> None:
        stored = self._upload(client, pdf_bytes)

        response = client.get(f"/files/{stored['id']}", params={"tenant_id": 5})

        assert response.status_code == 200
        assert response.json()["file"]["id"] == stored["id"]

    def test_show_other_tenant_is_403(self, client, upload_service, pdf_bytes) -> None:
        stored = self._upload(client, pdf_bytes)

        response = client.get(f"/files/{stored['id']}", params={"tenant_id": 6})

        assert response.status_code == 403

    def test_show_unknown_is_404(self, client, upload_service) -> None:
        assert client.get("/files/999", params={"tenant_id": 5}).status_code == 404

    def test_download_returns_original_bytes(self, client, upload_service, pdf_bytes) -> None:
        stored = self._upload(client, pdf_bytes)

        response = client.get(f"/files/{stored['id']}/download", params={"tenant_id": 5})

        assert response.status_code == 200
        assert response.content == pdf_bytes
        assert "INV-77.pdf" in response.headers["content-disposition"]

    def test_list_for_entity(self, client, upload_service, pdf_bytes) -> None:
        first = self._upload(client, pdf_bytes)
        second = self._upload(client, pdf_bytes)
        self._upload(client, pdf_bytes, tenant_id="6")

        response = client.get("/files/invoice/77", params={"tenant_id": 5})

        assert response.status_code == 200
        assert {f["id"] for f in response.json()["files"]} == {first["id"], second["id"]}

    def test_list_unknown_entity_type_is_400(self, client, upload_service) -> None:
        assert client.get("/files/boat/1", params={"tenant_id": 5}).status_code == 400

    def test_delete_and_usage(self, client, upload_service, pdf_bytes) -> None:
        stored = self._upload(client, pdf_bytes)
        usage = client.get("/files/usage/5").json()["usage"]
        assert usage["fileCount"] == 1
        assert usage["storageBytes"] == len(pdf_bytes)

        response = client.delete(f"/files/{stored['id']}", params={"tenant_id": 5})

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "File deleted successfully"}
        assert client.get("/files/usage/5").json()["usage"]["fileCount"] == 0
        assert client.get(f"/files/{stored['id']}", params={"tenant_id": 5}).status_code == 404


class TestRouting:

    def test_entity_id_named_download_is_listed(self, client, upload_service, pdf_bytes) -> None:
        stored = client.post(
            "/files/",
            data=_form(tenant_id="1", entity_id="download", category="invoice"),
            files=_file("inv.pdf", pdf_bytes, "application/pdf"),
        )
        assert stored.status_code == 201

        response = client.get("/files/customer/download", params={"tenant_id": 1})

        assert response.status_code == 200
        assert [f["id"] for f in response.json()["files"]] == [stored.json()["file"]["id"]]

    def test_non_numeric_file_id_falls_through_to_list(self, client, upload_service) -> None:
        response = client.get("/files/customer/abc", params={"tenant_id": 1})

        assert response.status_code == 200
        assert response.json() == {"success": True, "files": []}

    def test_error_body_shape_is_documented(self, client) -> None:
        schema = client.get("/openapi.json").json()
        upload_responses = schema["paths"]["/files/"]["post"]["responses"]

        assert "ErrorResponse" in upload_responses["422"]["content"]["application/json"]["schema"]["$ref"]
        assert "/files/{file_id}/download" in schema["paths"]
