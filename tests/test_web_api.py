"""
Tests for the HTTP API

Tests covering:
1. Record create/update/read with field mapping
2. Error responses (unknown fields, empty creates, constraints, not found)
3. Property document upload, listing, delete
4. NAS proxy and storage health
"""

from __future__ import annotations

from urllib.parse import quote

import pytest
from fastapi.testclient import TestClient

from core.storage import StorageConnectionError
from utils.config import Config
from web.app import create_app
from web.dependencies import get_config, get_gateway, get_store

from conftest import BASE_PATH


ROOT = f"{BASE_PATH}/Klingenweg 15, 73312 Geislingen an der Steige"


@pytest.fixture
def config():
    return Config(nas_public_domain="https://nas.example.de", storage_backend="webdav")


@pytest.fixture
def client(store, gateway, config):
    app = create_app()
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_gateway] = lambda: gateway
    app.dependency_overrides[get_config] = lambda: config
    return TestClient(app)


@pytest.fixture
def property_id(client):
    response = client.post("/api/properties", json={"data": {
        "title": "Einfamilienhaus",
        "propertyType": "haus",
        "marketingType": "kauf",
        "street": "Klingenweg",
        "houseNumber": "15",
        "zipCode": "73312",
        "city": "Geislingen an der Steige",
        "price": 135000,
    }})
    assert response.status_code == 201
    return response.json()["id"]


# =============================================================================
# Records
# =============================================================================


class TestRecordRoutes:

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}

    def test_create_maps_fields(self, client, property_id):
        record = client.get(f"/api/properties/{property_id}").json()

        assert record["purchasePrice"] == 135000
        assert "price" not in record
        assert record["status"] == "available"

    def test_unknown_fields_rejected(self, client):
        response = client.post("/api/properties", json={"data": {
            "title": "x", "heatingKind": "gas",
        }})

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "unknown_fields"
        assert body["fields"] == ["heatingKind"]

    def test_empty_create_rejected(self, client):
        response = client.post("/api/properties", json={"data": {"price": None, "title": ""}})

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    def test_missing_required_column(self, client):
        response = client.post("/api/properties", json={"data": {"title": "x"}})

        assert response.status_code == 409
        assert "propertyType" in response.json()["detail"]

    def test_body_without_data(self, client):
        assert client.post("/api/properties", json={"title": "x"}).status_code == 422

    def test_update_clears_with_null(self, client, property_id):
        response = client.patch(f"/api/properties/{property_id}", json={"data": {
            "price": None, "coldRent": 800,
        }})

        assert response.status_code == 200
        record = response.json()["record"]
        assert record["purchasePrice"] is None
        assert record["baseRent"] == 800

    def test_update_empty_diff(self, client, property_id):
        response = client.patch(f"/api/properties/{property_id}", json={"data": {}})
        assert response.status_code == 200

    def test_update_missing_record(self, client):
        response = client.patch("/api/properties/99", json={"data": {"title": "x"}})
        assert response.status_code == 404

    def test_read_only_field(self, client, property_id):
        response = client.patch(f"/api/properties/{property_id}", json={"data": {"id": 5}})
        assert response.status_code == 400

    def test_get_missing_record(self, client):
        assert client.get("/api/properties/42").status_code == 404

    def test_contacts(self, client):
        response = client.post("/api/contacts", json={"data": {
            "firstName": "Erika", "lastName": "Musterfrau", "birthDate": "1980-05-17",
        }})

        assert response.status_code == 201
        record = client.get(f"/api/contacts/{response.json()['id']}").json()
        assert record["birthDate"] == "1980-05-17 00:00:00"


# =============================================================================
# Files
# =============================================================================


def upload_file(client, property_id, category="Bilder", name="front.jpg", data=b"jpeg"):
    return client.post(
        f"/api/properties/{property_id}/files/{quote(category)}",
        files={"file": (name, data, "image/jpeg")},
    )


class TestFileRoutes:

    def test_upload(self, client, property_id, remote):
        response = upload_file(client, property_id)

        assert response.status_code == 200
        body = response.json()
        assert body["path"] == f"{ROOT}/Bilder/front.jpg"
        assert body["url"] == (
            "https://nas.example.de/Daten/Allianz/Agentur Jaeger/Beratung/Immobilienmakler/"
            "Verkauf/Klingenweg 15, 73312 Geislingen an der Steige/Bilder/front.jpg"
        )
        assert remote.files[body["path"]] == b"jpeg"

    def test_upload_category_with_space(self, client, property_id):
        response = upload_file(client, property_id, category="Sensible Daten", name="ausweis.pdf")
        assert response.json()["path"].endswith("/Sensible Daten/ausweis.pdf")

    def test_upload_invalid_category(self, client, property_id, remote):
        response = upload_file(client, property_id, category="Fotos")

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_category"
        assert remote.sessions_opened == 0

    def test_upload_empty_file(self, client, property_id):
        assert upload_file(client, property_id, data=b"").status_code == 400

    def test_upload_unknown_property(self, client):
        assert upload_file(client, 99).status_code == 404

    def test_list(self, client, property_id):
        upload_file(client, property_id, name="a.jpg")
        upload_file(client, property_id, name="b.jpg")

        files = client.get(f"/api/properties/{property_id}/files/Bilder").json()["files"]

        assert [f["name"] for f in files] == ["a.jpg", "b.jpg"]

    def test_list_empty_category(self, client, property_id):
        response = client.get(f"/api/properties/{property_id}/files/Vertragsunterlagen")
        assert response.json() == {"files": []}

    def test_create_folders(self, client, property_id, remote):
        response = client.post(f"/api/properties/{property_id}/folders")

        assert response.json()["path"] == ROOT
        assert f"{ROOT}/Objektunterlagen" in remote.directories

    def test_delete(self, client, property_id, remote):
        path = upload_file(client, property_id).json()["path"]

        assert client.delete("/api/files", params={"path": path}).status_code == 200
        assert path not in remote.files

        response = client.delete("/api/files", params={"path": path})
        assert response.status_code == 404
        assert response.json()["kind"] == "not_found"
        assert response.json()["operation"] == "delete"

    @pytest.mark.parametrize("path", ["/etc/passwd", f"{BASE_PATH}/../secret.txt", ""])
    def test_delete_outside_storage(self, client, path):
        assert client.delete("/api/files", params={"path": path}).status_code == 400

    def test_storage_error_is_bad_gateway(self, client, property_id, remote):
        remote.connect_error = StorageConnectionError("refused")

        response = upload_file(client, property_id)

        assert response.status_code == 502
        assert response.json() == {
            "error": "storage_error",
            "kind": "connection",
            "operation": "upload",
            "path": f"{ROOT}/Bilder/front.jpg",
            "message": "refused",
        }


@pytest.fixture
def contact_id(client):
    response = client.post("/api/contacts", json={"data": {
        "firstName": "Erika", "lastName": "Musterfrau",
    }})
    assert response.status_code == 201
    return response.json()["id"]


CONTACT_FOLDER = "/Daten/Allianz/Agentur Jaeger/Versicherungen/Erika Musterfrau"


class TestContactFileRoutes:

    def test_upload_and_list(self, client, contact_id, remote):
        response = client.post(
            f"/api/contacts/{contact_id}/files/versicherungen",
            files={"file": ("police.pdf", b"pdf", "application/pdf")},
            data={"category": "Policen"},
        )

        assert response.status_code == 200
        path = response.json()["path"]
        assert path == f"{CONTACT_FOLDER}/Policen/police.pdf"
        assert remote.files[path] == b"pdf"

        listing = client.get(
            f"/api/contacts/{contact_id}/files/versicherungen", params={"category": "Policen"}
        )
        assert [f["name"] for f in listing.json()["files"]] == ["police.pdf"]

    def test_download_and_delete_through_file_routes(self, client, contact_id, remote):
        path = client.post(
            f"/api/contacts/{contact_id}/files/versicherungen",
            files={"file": ("police.pdf", b"pdf", "application/pdf")},
        ).json()["path"]

        assert client.get("/api/nas-proxy", params={"path": path}).content == b"pdf"
        assert client.delete("/api/files", params={"path": path}).status_code == 200
        assert path not in remote.files

    def test_list_missing_folder_is_empty(self, client, contact_id):
        response = client.get(f"/api/contacts/{contact_id}/files/immobilienmakler")
        assert response.json() == {"files": []}

    def test_unknown_module(self, client, contact_id, remote):
        response = client.get(f"/api/contacts/{contact_id}/files/buchhaltung")

        assert response.status_code == 400
        assert remote.sessions_opened == 0

    def test_unknown_contact(self, client):
        assert client.get("/api/contacts/99/files/versicherungen").status_code == 404

    @pytest.mark.parametrize("category", ["../Vertraege", "a/b", ".."])
    def test_category_must_be_single_folder(self, client, contact_id, category, remote):
        response = client.post(
            f"/api/contacts/{contact_id}/files/versicherungen",
            files={"file": ("police.pdf", b"pdf", "application/pdf")},
            data={"category": category},
        )

        assert response.status_code == 400
        assert remote.files == {}


class TestProxyAndHealth:

    def test_nas_proxy(self, client, property_id):
        path = upload_file(client, property_id, data=b"\xff\xd8jpeg").json()["path"]

        response = client.get("/api/nas-proxy", params={"path": path})

        assert response.status_code == 200
        assert response.content == b"\xff\xd8jpeg"
        assert response.headers["content-type"] == "image/jpeg"
        assert response.headers["cache-control"] == "public, max-age=3600"

    def test_nas_proxy_missing_file(self, client):
        response = client.get("/api/nas-proxy", params={"path": f"{BASE_PATH}/x.pdf"})
        assert response.status_code == 404

    def test_storage_health(self, client, remote):
        response = client.get("/api/storage/health")
        assert response.status_code == 200
        assert response.json()["connected"] is True

        remote.connect_error = StorageConnectionError("refused")
        response = client.get("/api/storage/health")
        assert response.status_code == 503
        assert response.json()["backend"] == "webdav"
