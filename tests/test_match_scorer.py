"""Tests for job page scoring and location back-fill."""

from __future__ import annotations

from careerscout.agents.match_scorer import resolve_location, score_job
from careerscout.models.criteria import SearchCriteria
from careerscout.models.job import JobPageSnapshot
from careerscout.models.policy import MatchPolicy

URL = "https://acme.com/jobs/123"


def _criteria(**kwargs) -> SearchCriteria:
    data = {"roles": ("Data Engineer",), "cities": ("London",)}
    data.update(kwargs)
    return SearchCriteria(**data)


class TestScoreJob:
    """Test suite for accept/reject decisions."""

    def test_title_and_city_match_accepted(self) -> None:
        snapshot = JobPageSnapshot(
            title="Senior Data Engineer — London",
            body_text="As a data engineer you will... Our data engineer team... data engineer tooling.",
        )
        decision = score_job(snapshot, URL, _criteria(), MatchPolicy())

        assert decision.accepted is True
        assert decision.role_match is True
        assert decision.city_match is True
        assert decision.negative is False

    def test_negative_filter_overrides_everything(self) -> None:
        snapshot = JobPageSnapshot(
            title="Meet our Engineering Team",
            body_text="Data Engineer in London. Data Engineer. Data Engineer.",
        )
        decision = score_job(snapshot, URL, _criteria(), MatchPolicy())

        assert decision.accepted is False
        assert decision.negative is True

    def test_negative_term_in_url(self) -> None:
        snapshot = JobPageSnapshot(title="Data Engineer", body_text="London")
        decision = score_job(snapshot, "https://acme.com/stories/data-engineer-life", _criteria(), MatchPolicy())
        assert decision.accepted is False
        assert decision.negative is True

    def test_negative_terms_are_whole_words(self) -> None:
        snapshot = JobPageSnapshot(title="Data Engineer, Meetings Platform", body_text="Based in London")
        decision = score_job(snapshot, URL, _criteria(), MatchPolicy())
        assert decision.accepted is True

    def test_body_mentions_twice_is_enough(self) -> None:
        snapshot = JobPageSnapshot(
            title="Platform role",
            body_text="We need a Data Engineer in London. The data engineer will own pipelines.",
        )
        decision = score_job(snapshot, URL, _criteria(), MatchPolicy())
        assert decision.accepted is True
        assert "2x" in decision.reasons[0]

    def test_single_body_mention_not_enough(self) -> None:
        snapshot = JobPageSnapshot(title="Platform role", body_text="Work with a data engineer in London.")
        decision = score_job(snapshot, URL, _criteria(), MatchPolicy())
        assert decision.accepted is False
        assert decision.role_match is False

    def test_expanded_roles_used(self) -> None:
        criteria = _criteria(expanded_roles=("ETL Developer",))
        snapshot = JobPageSnapshot(title="ETL Developer", body_text="London office")
        assert score_job(snapshot, URL, criteria, MatchPolicy()).accepted is True

    def test_city_required_when_requested(self) -> None:
        snapshot = JobPageSnapshot(title="Data Engineer", body_text="Based in Berlin")
        decision = score_job(snapshot, URL, _criteria(), MatchPolicy())
        assert decision.accepted is False
        assert decision.city_match is False

    def test_city_from_location_field(self) -> None:
        snapshot = JobPageSnapshot(title="Data Engineer", body_text="Hybrid", location="London, UK")
        assert score_job(snapshot, URL, _criteria(), MatchPolicy()).accepted is True

    def test_no_cities_is_vacuous(self) -> None:
        snapshot = JobPageSnapshot(title="Data Engineer", body_text="Anywhere")
        assert score_job(snapshot, URL, _criteria(cities=()), MatchPolicy()).accepted is True

    def test_seniority_advisory_by_default(self) -> None:
        snapshot = JobPageSnapshot(title="Data Engineer", body_text="London")
        decision = score_job(snapshot, URL, _criteria(seniority="Staff"), MatchPolicy())

        assert decision.accepted is True
        assert decision.seniority_match is False
        assert any("advisory" in r for r in decision.reasons)

    def test_seniority_mandatory_policy(self) -> None:
        snapshot = JobPageSnapshot(title="Data Engineer", body_text="London")
        decision = score_job(snapshot, URL, _criteria(seniority="Staff"), MatchPolicy(require_seniority=True))
        assert decision.accepted is False

    def test_seniority_found_with_mandatory_policy(self) -> None:
        snapshot = JobPageSnapshot(title="Staff Data Engineer", body_text="London")
        decision = score_job(snapshot, URL, _criteria(seniority="Staff"), MatchPolicy(require_seniority=True))
        assert decision.accepted is True
        assert decision.seniority_match is True


class TestResolveLocation:
    def test_explicit_location_wins(self) -> None:
        snapshot = JobPageSnapshot(title="x", body_text="Paris", location="London, UK")
        assert resolve_location(snapshot, _criteria(), MatchPolicy()) == "London, UK"

    def test_requested_city_found_in_body(self) -> None:
        snapshot = JobPageSnapshot(title="x", body_text="Our london office")
        assert resolve_location(snapshot, _criteria(), MatchPolicy()) == "London"

    def test_known_city_found_in_body(self) -> None:
        snapshot = JobPageSnapshot(title="x", body_text="Join us in Amsterdam")
        assert resolve_location(snapshot, _criteria(), MatchPolicy()) == "Amsterdam"

    def test_unknown_location_not_assumed(self) -> None:
        snapshot = JobPageSnapshot(title="x", body_text="Great benefits")
        assert resolve_location(snapshot, _criteria(), MatchPolicy()) == "Location not specified"

    def test_first_city_default_when_enabled(self) -> None:
        snapshot = JobPageSnapshot(title="x", body_text="Great benefits")
        policy = MatchPolicy(default_location_to_first_city=True)
        assert resolve_location(snapshot, _criteria(), policy) == "London"
