"""Tests for document upload, listing, download and deletion."""

import io

import pytest

from bid_management.errors import InvalidRequestError
from bid_management.services import DocumentService
from bid_management.services.documents import check_file_type, format_size
from bid_management.tests.conftest import make_tender

PDF = "application/pdf"


class TestFileTypeCheck:
    def test_allowed(self):
        assert check_file_type("RFP.PDF", PDF) == ".pdf"

    def test_extension_not_allowed(self):
        with pytest.raises(InvalidRequestError):
            check_file_type("script.exe", "application/octet-stream")

    def test_mime_must_match_extension(self):
        with pytest.raises(InvalidRequestError):
            check_file_type("rfp.pdf", "text/html")

    def test_format_size(self):
        assert format_size(512) == "512 B"
        assert format_size(2048) == "2.0 KB"
        assert format_size(3 * 1024 * 1024) == "3.0 MB"


class TestTenderDocuments:
    def test_upload_list_download_delete(self, client, store, config, bidder_headers):
        tender = make_tender(store)

        resp = client.post(
            f"/api/tenders/{tender.id}/documents",
            headers=bidder_headers,
            files={"file": ("rfp.pdf", b"%PDF-1.4 test", PDF)},
            data={"category": "bid_document"},
        )
        assert resp.status_code == 201
        doc = resp.json()
        assert doc["originalName"] == "rfp.pdf"
        assert doc["size"] == len(b"%PDF-1.4 test")
        assert doc["category"] == "bid_document"

        listed = client.get(f"/api/tenders/{tender.id}/documents", headers=bidder_headers).json()
        assert [d["id"] for d in listed] == [doc["id"]]

        download = client.get(f"/api/tenders/{tender.id}/documents/{doc['id']}/download", headers=bidder_headers)
        assert download.status_code == 200
        assert download.content == b"%PDF-1.4 test"

        activity = client.get(f"/api/tenders/{tender.id}/activity", headers=bidder_headers).json()
        assert activity[0]["activityType"] == "document_uploaded"

        assert client.delete(f"/api/tenders/{tender.id}/documents/{doc['id']}",
                             headers=bidder_headers).status_code == 200
        assert client.get(f"/api/tenders/{tender.id}/documents", headers=bidder_headers).json() == []

    def test_disallowed_type(self, client, store, bidder_headers):
        tender = make_tender(store)
        resp = client.post(f"/api/tenders/{tender.id}/documents", headers=bidder_headers,
                           files={"file": ("evil.html", b"<script>", "text/html")})
        assert resp.status_code == 400

    def test_unknown_tender(self, client, bidder_headers):
        resp = client.post("/api/tenders/nope/documents", headers=bidder_headers,
                           files={"file": ("rfp.pdf", b"x", PDF)})
        assert resp.status_code == 404


class TestSizeLimit:
    def test_oversize_upload_rejected_and_removed(self, services, store, config, bidder_user, tmp_path):
        service = DocumentService(store, services.activity, str(tmp_path / "small"), max_bytes=100)
        tender = make_tender(store)

        with pytest.raises(InvalidRequestError, match="too large"):
            service.upload(io.BytesIO(b"x" * 101), "big.pdf", PDF, bidder_user, tender_id=tender.id)

        assert list((tmp_path / "small" / "documents").iterdir()) == []
        assert service.list_documents(tender.id) == []

    def test_exact_limit_accepted(self, services, store, bidder_user, tmp_path):
        service = DocumentService(store, services.activity, str(tmp_path / "small"), max_bytes=100)

        document = service.upload(io.BytesIO(b"x" * 100), "ok.pdf", PDF, bidder_user)

        assert document.size == 100
        assert document.category.value == "company_document"


class TestCompanyDocuments:
    def test_company_documents_are_separate(self, client, store, admin_headers):
        tender = make_tender(store)
        client.post(f"/api/tenders/{tender.id}/documents", headers=admin_headers,
                    files={"file": ("rfp.pdf", b"a", PDF)})

        resp = client.post("/api/company-documents", headers=admin_headers,
                           files={"file": ("iso.pdf", b"b", PDF)})
        assert resp.status_code == 201

        listed = client.get("/api/company-documents", headers=admin_headers).json()
        assert [d["originalName"] for d in listed] == ["iso.pdf"]
        assert listed[0]["tenderId"] is None

        download = client.get(f"/api/company-documents/{listed[0]['id']}/download", headers=admin_headers)
        assert download.content == b"b"
