"""Tests for the company match scorer."""

import json

import pytest

from bid_management.database.base import TENDERS
from bid_management.models import CompanySettings, CompanySettingsUpdate, Tender
from bid_management.scorer import DEFAULT_WEIGHTS, ScoringWeights, load_weights, parse_amount, score_tender
from bid_management.tests.conftest import make_tender

DEADLINE = "2030-01-01T00:00:00Z"


@pytest.fixture
def company():
    return CompanySettings(
        company_name="Acme Infra",
        turnover_criteria="5 Cr",
        business_sectors=["road", "bridge"],
        certifications=["ISO 9001"],
    )


def tender(**fields) -> Tender:
    base = {"title": "Road widening", "organization": "NHAI", "deadline": DEADLINE}
    base.update(fields)
    return Tender(**base)


class TestParseAmount:
    @pytest.mark.parametrize("text,expected", [
        ("5 Cr", 50_000_000),
        ("2.5 crore", 25_000_000),
        ("50 Lakhs", 5_000_000),
        ("Rs. 2,50,000", 250_000),
        (1200, 1200.0),
    ])
    def test_units(self, text, expected):
        assert parse_amount(text) == expected

    def test_no_number(self):
        assert parse_amount("as per RFP") is None
        assert parse_amount(None) is None


class TestScoreTender:
    def test_full_match(self, company):
        result = score_tender(tender(description="ISO 9001 certified bidders only",
                                     metadata={"turnover": "2 Cr"}), company)

        assert result.turnover.score == 100
        assert result.sector.score == 100
        assert result.certification.score == 100
        assert result.composite_score == 100
        assert result.scoring_weights_version == DEFAULT_WEIGHTS.version

    def test_turnover_shortfall_is_proportional(self, company):
        result = score_tender(tender(metadata={"turnover": "10 Cr"}), company)

        assert result.turnover.score == 40.0
        assert "below requirement" in result.turnover.evidence_citations[0]

    def test_turnover_in_requirement_rows(self, company):
        result = score_tender(tender(requirements=[{"turnover": "20 Cr"}]), company)
        assert result.turnover.score == 20.0

    def test_unparseable_turnover_needs_review(self, company):
        result = score_tender(tender(metadata={"turnover": "as per RFP"}), company)
        assert result.turnover.score == 85.0

    def test_no_sector_or_certification_match(self, company):
        result = score_tender(tender(title="Catering services"), company)

        assert result.sector.score == 60
        assert result.certification.score == 70
        # 100*0.40 + 60*0.35 + 70*0.25 = 78.5
        assert result.composite_score == 78

    def test_empty_profile_uses_turnover_only(self):
        result = score_tender(tender(metadata={"turnover": "1 Cr"}), CompanySettings(turnover_criteria="50 lakh"))

        assert result.sector.applicable is False
        assert result.certification.applicable is False
        assert result.composite_score == 40

    def test_custom_weights(self, company):
        weights = ScoringWeights(turnover=0.0, sector=1.0, certification=0.0, version="sector-only")

        result = score_tender(tender(title="Catering"), company, weights)

        assert result.composite_score == 60
        assert result.scoring_weights_version == "sector-only"


class TestWeights:
    def test_must_sum_to_one(self):
        with pytest.raises(ValueError):
            ScoringWeights(turnover=0.5, sector=0.5, certification=0.5)

    def test_range(self):
        with pytest.raises(ValueError):
            ScoringWeights(turnover=1.5, sector=-0.25, certification=-0.25)

    def test_defaults_when_no_path(self):
        assert load_weights(None) is DEFAULT_WEIGHTS

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "weights.yaml"
        path.write_text("turnover: 0.5\nsector: 0.3\ncertification: 0.2\nversion: custom\n")

        weights = load_weights(str(path))

        assert weights.turnover == 0.5
        assert weights.version == "custom"

    def test_load_json(self, tmp_path):
        path = tmp_path / "weights.json"
        path.write_text(json.dumps({"turnover": 0.2, "sector": 0.4, "certification": 0.4}))

        assert load_weights(str(path)).sector == 0.4

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_weights(str(tmp_path / "nope.yaml"))

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "weights.txt"
        path.write_text("turnover=1")
        with pytest.raises(ValueError, match="Unsupported"):
            load_weights(str(path))


class TestRecalculateAll:
    def test_updates_changed_scores(self, services, store, admin_user):
        services.company.update_settings(CompanySettingsUpdate(
            turnover_criteria="5 Cr", business_sectors=["road"], certifications=["ISO 9001"],
        ), admin_user)
        matching = make_tender(store, title="Road repair", ai_score=0)
        other = make_tender(store, title="Catering", ai_score=0)

        updated = services.scoring.recalculate_all(admin_user)

        assert updated == 2
        assert store.get(TENDERS, matching.id)["ai_score"] > store.get(TENDERS, other.id)["ai_score"]
        assert services.scoring.recalculate_all(admin_user) == 0

    def test_endpoint_admin_only(self, client, manager_headers, admin_headers):
        assert client.post("/api/tenders/recalculate-scores", headers=manager_headers).status_code == 403
        resp = client.post("/api/tenders/recalculate-scores", headers=admin_headers)
        assert resp.json() == {"message": "AI scores recalculated", "updated": 0}
