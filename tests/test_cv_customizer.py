"""Tests for template CV loading and per-job CV customization."""

from __future__ import annotations

from pathlib import Path

from careerscout.agents.cv_customizer import (
    DEFAULT_TEMPLATE_CV,
    UNAVAILABLE_CHANGE,
    customize_cv,
    load_template_cv,
)
from careerscout.models.job import JobListing
from tests.fakes import DownClient, ScriptedClient

TEMPLATE = "Jane Doe\nSummary: Engineer with 6 years of Python and SQL.\nExperience: ..."


def _listing() -> JobListing:
    return JobListing(
        title="Senior Data Engineer",
        location="London",
        description="Build batch and streaming pipelines on Spark.",
        url="https://acme.com/jobs/1",
    )


class TestCustomizeCv:
    """Test suite for CV customization."""

    def test_successful_customization(self) -> None:
        client = ScriptedClient(
            {
                "Senior Data Engineer at Acme": (
                    '{"customizedCv": "Jane Doe\\nSummary: Data engineer focused on Spark.", '
                    '"changes": ["Rewrote summary", "Highlighted Spark"]}'
                )
            }
        )
        result = customize_cv(_listing(), "Acme", TEMPLATE, client)

        assert result.fell_back is False
        assert result.value.cv.startswith("Jane Doe")
        assert result.value.changes == ["Rewrote summary", "Highlighted Spark"]

    def test_service_failure_returns_template_unchanged(self) -> None:
        result = customize_cv(_listing(), "Acme", TEMPLATE, DownClient())

        assert result.fell_back is True
        assert result.value.cv == TEMPLATE
        assert result.value.changes == [UNAVAILABLE_CHANGE]
        assert "Acme" in result.reason

    def test_missing_cv_field_falls_back(self) -> None:
        client = ScriptedClient({"Senior Data Engineer": '{"changes": ["Rewrote summary"]}'})
        result = customize_cv(_listing(), "Acme", TEMPLATE, client)

        assert result.fell_back is True
        assert result.value.cv == TEMPLATE

    def test_empty_changes_get_a_default_entry(self) -> None:
        client = ScriptedClient({"Senior Data Engineer": '{"customizedCv": "Tailored text", "changes": []}'})
        result = customize_cv(_listing(), "Acme", TEMPLATE, client)

        assert result.value.changes == ["Tailored CV for the role"]

    def test_template_truncated_in_prompt(self) -> None:
        client = ScriptedClient({"Senior Data Engineer": '{"customizedCv": "x"}'})
        long_template = "A" * 1000 + "B" * 1000
        customize_cv(_listing(), "Acme", long_template, client, max_template_chars=1000)

        prompt = client.calls[0]["user"]
        assert "A" * 1000 in prompt
        assert "B" not in prompt.split("Original CV:")[1].split("Rewrite the summary")[0]


class TestLoadTemplateCv:
    def test_text_file(self, tmp_path: Path) -> None:
        path = tmp_path / "cv.txt"
        path.write_text(TEMPLATE)
        assert load_template_cv(str(path)) == TEMPLATE.strip()

    def test_missing_file_uses_default(self, tmp_path: Path) -> None:
        assert load_template_cv(str(tmp_path / "nope.txt")) == DEFAULT_TEMPLATE_CV

    def test_no_path_uses_default(self) -> None:
        assert load_template_cv(None) == DEFAULT_TEMPLATE_CV

    def test_empty_file_uses_default(self, tmp_path: Path) -> None:
        path = tmp_path / "cv.md"
        path.write_text("   \n")
        assert load_template_cv(str(path)) == DEFAULT_TEMPLATE_CV

    def test_docx_file(self, tmp_path: Path) -> None:
        import docx

        path = tmp_path / "cv.docx"
        document = docx.Document()
        document.add_paragraph("Jane Doe")
        document.add_paragraph("Data engineer with Spark experience")
        document.save(str(path))

        text = load_template_cv(str(path))
        assert "Jane Doe" in text
        assert "Spark experience" in text

    def test_corrupt_pdf_uses_default(self, tmp_path: Path) -> None:
        path = tmp_path / "cv.pdf"
        path.write_bytes(b"not really a pdf")
        assert load_template_cv(str(path)) == DEFAULT_TEMPLATE_CV
