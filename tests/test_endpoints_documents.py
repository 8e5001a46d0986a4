from fastapi.testclient import TestClient
from unittest.mock import patch

from benefits_portal.core.exceptions import NotFoundError
from benefits_portal.models.document_model import Documents
from benefits_portal.schemas.document_schema import DocumentUploadError


def _document(**overrides):
    data = dict(
        id=1,
        company_id=1,
        file_name="0f3c.pdf",
        original_name="plan.pdf",
        mime_type="application/pdf",
        size=1024,
        content="[Document pending extraction: plan.pdf]",
        title="Medical Plan",
        is_public=True,
    )
    data.update(overrides)
    return Documents(**data)


def test_get_documents_endpoint(authenticated_client: TestClient):
    with patch('benefits_portal.modules.documents.service.list_documents_service', return_value=[_document()]) as mock_list:
        response = authenticated_client.get("/api/documents")
        assert response.status_code == 200
        assert len(response.json()) == 1
        assert response.json()[0]["originalName"] == "plan.pdf"
        assert mock_list.await_args.args[1] == 1


def test_get_single_document_endpoint(authenticated_client: TestClient):
    with patch('benefits_portal.modules.documents.service.get_document_service', return_value=_document()):
        response = authenticated_client.get("/api/documents/1")
        assert response.status_code == 200
        assert response.json()["id"] == 1
        assert response.json()["isPublic"] is True


def test_get_missing_document(authenticated_client: TestClient):
    with patch('benefits_portal.modules.documents.service.get_document_service', side_effect=NotFoundError("Document")):
        response = authenticated_client.get("/api/documents/42")
        assert response.status_code == 404
        assert response.json() == {"message": "Document not found", "code": 404}


def test_upload_documents_endpoint(admin_client: TestClient):
    results = [
        _document(id=1, original_name="plan.pdf"),
        DocumentUploadError(original_name="photo.png", error="Unsupported file type: image/png"),
    ]
    with patch('benefits_portal.modules.documents.service.ingest_documents_service', return_value=results) as mock_ingest:
        response = admin_client.post(
            "/api/documents",
            files=[
                ("documents", ("plan.pdf", b"%PDF-1.4", "application/pdf")),
                ("documents", ("photo.png", b"\x89PNG", "image/png")),
            ],
            data={"title": "Benefits", "category": "medical", "isPublic": "false"},
        )
        assert response.status_code == 201
        body = response.json()
        assert body[0]["id"] == 1
        assert body[1] == {"originalName": "photo.png", "error": "Unsupported file type: image/png"}

        kwargs = mock_ingest.await_args.kwargs
        assert len(kwargs["files"]) == 2
        assert kwargs["title"] == "Benefits"
        assert kwargs["is_public"] is False


def test_employee_cannot_upload(authenticated_client: TestClient):
    response = authenticated_client.post(
        "/api/documents",
        files=[("documents", ("plan.txt", b"text", "text/plain"))],
    )
    assert response.status_code == 403


def test_update_document_metadata(admin_client: TestClient):
    with patch('benefits_portal.modules.documents.service.update_document_service',
               return_value=_document(title="Renamed")) as mock_update:
        response = admin_client.patch("/api/documents/1", json={"title": "Renamed"})
        assert response.status_code == 200
        assert response.json()["title"] == "Renamed"
        assert mock_update.await_args.args[3].title == "Renamed"


def test_extract_document_endpoint(admin_client: TestClient):
    with patch('benefits_portal.modules.documents.service.extract_document_service',
               return_value=_document(content="## Summary")):
        response = admin_client.post("/api/documents/1/extract")
        assert response.status_code == 200
        assert response.json()["content"] == "## Summary"


def test_delete_document_endpoint(admin_client: TestClient):
    with patch('benefits_portal.modules.documents.service.delete_document_service', return_value=None):
        response = admin_client.delete("/api/documents/1")
        assert response.status_code == 200
        assert response.json() == {"message": "Document deleted successfully"}
