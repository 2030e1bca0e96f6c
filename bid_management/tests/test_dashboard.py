"""Tests for dashboard statistics, health and company settings."""

from datetime import datetime, timedelta, timezone

from bid_management import __version__
from bid_management.database.base import FINANCE_REQUESTS
from bid_management.models import FinanceRequest
from bid_management.services import compute_stats
from bid_management.tests.conftest import make_tender


def seed(store):
    now = datetime.now(timezone.utc)
    make_tender(store, status="published", value=100000, ai_score=80, deadline=now + timedelta(days=3))
    make_tender(store, status="in_progress", value=200000, ai_score=60, deadline=now + timedelta(days=20))
    make_tender(store, status="draft", not_relevant_status="pending")
    make_tender(store, status="won", ai_score=90)
    make_tender(store, status="won")
    make_tender(store, status="lost", ai_score=None)
    for status in ("pending", "approved"):
        request = FinanceRequest(tender_id="t1", requester_id="u1", type="emd", amount=100, status=status)
        store.insert(FINANCE_REQUESTS, request.to_record())


class TestStats:
    def test_empty(self, store):
        stats = compute_stats(store)

        assert stats.active_tenders == 0
        assert stats.win_rate == 0.0
        assert stats.average_ai_score == 0.0

    def test_compute(self, store):
        seed(store)

        stats = compute_stats(store)

        assert stats.active_tenders == 3
        assert stats.total_value == 800000
        assert stats.total_won == 2
        assert stats.total_lost == 1
        assert stats.win_rate == 66.7
        # unscored (None) rows are skipped, zero scores count
        assert stats.average_ai_score == 46.0
        assert stats.pending_approvals == 1
        assert stats.pending_finance_requests == 1
        assert stats.upcoming_deadlines == 1

    def test_endpoint(self, client, store, bidder_headers):
        seed(store)

        resp = client.get("/api/dashboard/stats", headers=bidder_headers)

        assert resp.status_code == 200
        assert resp.json()["activeTenders"] == 3
        assert resp.json()["pendingFinanceRequests"] == 1

    def test_requires_login(self, client):
        assert client.get("/api/dashboard/stats").status_code == 401


def test_health(client):
    resp = client.get("/api/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "version": __version__, "storage": "memory"}


class TestCompanySettings:
    def test_defaults(self, client, bidder_headers):
        resp = client.get("/api/company-settings", headers=bidder_headers)

        assert resp.status_code == 200
        assert resp.json()["companyName"] == ""
        assert resp.json()["businessSectors"] == []

    def test_admin_update(self, client, admin_headers, admin_login):
        resp = client.put("/api/company-settings", headers=admin_headers, json={
            "companyName": "Acme Infra",
            "turnoverCriteria": "5 Cr",
            "businessSectors": ["road"],
        })

        assert resp.status_code == 200
        assert resp.json()["updatedBy"] == admin_login.user.id

        again = client.put("/api/company-settings", headers=admin_headers, json={"certifications": ["ISO 9001"]})
        settings = again.json()
        assert settings["companyName"] == "Acme Infra"
        assert settings["certifications"] == ["ISO 9001"]

    def test_manager_cannot_update(self, client, manager_headers):
        resp = client.put("/api/company-settings", headers=manager_headers, json={"companyName": "X"})
        assert resp.status_code == 403
