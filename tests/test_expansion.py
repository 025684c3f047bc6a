"""Tests for company-set and role expansion."""

from __future__ import annotations

from careerscout.agents.expansion import expand_companies, expand_roles
from careerscout.errors import ServiceError
from tests.fakes import DownClient, ScriptedClient


class TestExpandCompanies:
    """Test suite for seed company expansion."""

    def test_service_down_returns_seed_list(self) -> None:
        result = expand_companies(["Acme"], ["Data Engineer"], DownClient())

        assert result.value == ["Acme"]
        assert result.fell_back is True

    def test_seeds_first_then_suggestions(self) -> None:
        client = ScriptedClient({"similar companies": '{"companies": ["Globex", "Initech"]}'})
        result = expand_companies(["Acme", "Umbrella"], ["Data Engineer"], client)

        assert result.value == ["Acme", "Umbrella", "Globex", "Initech"]
        assert result.fell_back is False

    def test_deduplicated_case_and_whitespace(self) -> None:
        client = ScriptedClient({"similar companies": '["acme", "  Globex ", "GLOBEX", "Initech"]'})
        result = expand_companies(["Acme"], ["Data Engineer"], client)

        assert result.value == ["Acme", "Globex", "Initech"]

    def test_truncated_to_cap(self) -> None:
        suggestions = ", ".join(f'"Company {i}"' for i in range(30))
        client = ScriptedClient({"similar companies": f'{{"companies": [{suggestions}]}}'})
        result = expand_companies(["Acme"], ["Data Engineer"], client, max_companies=15)

        assert len(result.value) == 15
        assert result.value[0] == "Acme"

    def test_unparseable_response_falls_back(self) -> None:
        client = ScriptedClient({"similar companies": "I'd suggest Globex and Initech."})
        result = expand_companies(["Acme", "Umbrella"], ["Data Engineer"], client)

        assert result.value == ["Acme", "Umbrella"]
        assert result.fell_back is True

    def test_prompt_mentions_seeds_and_roles(self) -> None:
        client = ScriptedClient({"similar companies": '{"companies": []}'})
        expand_companies(["Acme"], ["Data Engineer"], client)

        assert "Acme" in client.calls[0]["user"]
        assert "Data Engineer" in client.calls[0]["user"]


class TestExpandRoles:
    def test_originals_kept_first(self) -> None:
        client = ScriptedClient({"similar job titles": '{"expandedRoles": ["ETL Developer", "Big Data Engineer"]}'})
        result = expand_roles(["Data Engineer"], client)

        assert result.value == ("Data Engineer", "ETL Developer", "Big Data Engineer")

    def test_service_error_returns_originals(self) -> None:
        client = ScriptedClient({"similar job titles": ServiceError("401 Unauthorized")})
        result = expand_roles(["Data Engineer", "Analytics Engineer"], client)

        assert result.value == ("Data Engineer", "Analytics Engineer")
        assert result.fell_back is True

    def test_degenerate_expansion_keeps_originals(self) -> None:
        """A model that drops or only repeats the originals never loses them."""
        client = ScriptedClient({"similar job titles": '{"expandedRoles": ["data engineer"]}'})
        result = expand_roles(["Data Engineer"], client)

        assert result.value == ("Data Engineer",)

    def test_suggestions_capped(self) -> None:
        client = ScriptedClient({"similar job titles": '["A1 Engineer", "B2 Engineer", "C3 Engineer", "D4 Engineer"]'})
        result = expand_roles(["Data Engineer"], client, max_suggestions=2)

        assert result.value == ("Data Engineer", "A1 Engineer", "B2 Engineer")

    def test_zero_suggestions_skips_service(self) -> None:
        client = DownClient()
        result = expand_roles(["Data Engineer"], client, max_suggestions=0)

        assert result.value == ("Data Engineer",)
        assert client.calls == 0
