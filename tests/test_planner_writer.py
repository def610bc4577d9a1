"""Tests for the SEO plan and content generation stages."""

import json

import pytest

from agents.planner_agent import generate_seo_plan
from agents.writer_agent import LENGTH_GUIDE, generate_blog_content, resolve_target_words
from app.errors import ResponseParseError
from models.plan_models import SeoPlan
from models.serp_models import SerpAnalysis


class TestLengthMapping:
    @pytest.mark.parametrize(
        "label, expected",
        [
            ("Short (800-1,500 words)", "1200 words"),
            ("Medium (1,500-2,500 words)", "2000 words"),
            ("Long (2,500-4,000 words)", "3200 words"),
            ("Extra Long (4,000+ words)", "4500 words"),
            ("", "2000 words"),
            (None, "2000 words"),
            ("Long", "2000 words"),
        ],
    )
    def test_resolve_target_words(self, label, expected):
        assert resolve_target_words(label) == expected

    def test_table_has_exactly_four_entries(self):
        assert len(LENGTH_GUIDE) == 4


class TestPlanner:
    def test_prompt_embeds_inputs_and_defaults(self, gateway, google_provider, sample_analysis, sample_plan):
        google_provider.payloads = [sample_plan]

        plan = generate_seo_plan(
            "best crm",
            ["crm pricing", "crm for startups"],
            SerpAnalysis.model_validate(sample_analysis),
            None,
            None,
            None,
            llm=gateway,
        )

        prompt = google_provider.requests[0].prompt
        assert "- Secondary Keywords: crm pricing, crm for startups" in prompt
        assert "- Target Audience: General" in prompt
        assert "- Content Length: Medium" in prompt
        assert '"contentType": "Listicle (78%)"' in prompt
        assert plan.suggested_title == sample_plan["suggestedTitle"]
        assert plan.keyword_distribution["lsi"]["target"] == 18

    def test_plan_is_returned_as_is(self, gateway, google_provider):
        google_provider.payloads = [{"suggestedTitle": "Only a title", "keywordDistribution": {"primary": {"target": 7.5}}}]

        plan = generate_seo_plan("best crm", [], None, "Founders", "Long (2,500-4,000 words)", None, llm=gateway)

        assert plan.to_payload() == {
            "suggestedTitle": "Only a title",
            "keywordDistribution": {"primary": {"target": 7.5}},
        }

    def test_unexpected_field_types_are_returned_unchanged(self, gateway, google_provider):
        raw = {
            "structure": {"intro": {"description": "Hook", "wordCount": 200}},
            "keywordDistribution": {"primary": {"target": "10-12", "placement": "Title and H1"}},
            "competitiveAdvantages": "pricing comparison",
        }
        google_provider.payloads = [raw]

        plan = generate_seo_plan("best crm", None, None, None, None, None, llm=gateway)

        assert plan.to_payload() == raw

    def test_unusual_analysis_is_embedded_verbatim(self, gateway, google_provider):
        analysis = SerpAnalysis.model_validate(
            {"keyElements": "x", "competitiveAdvantages": "Add a table", "recommendedStructure": [{"h2": "Intro"}]}
        )

        generate_seo_plan("best crm", None, analysis, None, None, None, llm=gateway)

        prompt = google_provider.requests[0].prompt
        assert '"competitiveAdvantages": "Add a table"' in prompt
        assert '"keyElements": "x"' in prompt
        assert '"h2": "Intro"' in prompt

    def test_missing_analysis_renders_null(self, gateway, openai_provider):
        generate_seo_plan("best crm", None, None, None, None, "gpt-4o-mini", llm=gateway)

        prompt = openai_provider.requests[0].prompt
        assert "- SERP Analysis: null" in prompt
        assert "- Secondary Keywords: None" in prompt


class TestWriter:
    def test_prompt_follows_plan_and_length(self, gateway, google_provider, sample_plan, sample_content):
        google_provider.payloads = [sample_content]

        content = generate_blog_content(
            "best crm",
            ["crm pricing"],
            SeoPlan.model_validate(sample_plan),
            "Mention free tiers",
            "Small business owners",
            "Extra Long (4,000+ words)",
            None,
            llm=gateway,
        )

        request = google_provider.requests[0]
        assert "- Target length: 4500 words" in request.prompt
        assert "- Additional context: Mention free tiers" in request.prompt
        assert "- Target audience: Small business owners" in request.prompt
        assert json.dumps(sample_plan["suggestedTitle"]) in request.prompt
        assert "expert content writer" in request.system_prompt
        assert content.to_payload() == sample_content

    def test_self_reported_metrics_are_not_checked(self, gateway, google_provider):
        google_provider.payloads = [{"title": "T", "wordCount": "about 2,000", "seoScore": 140}]

        content = generate_blog_content("best crm", None, None, None, None, None, None, llm=gateway)

        assert content.word_count == "about 2,000"
        assert content.seo_score == 140
        assert "- Additional context: None" in google_provider.requests[0].prompt

    def test_unexpected_section_shapes_are_returned_unchanged(self, gateway, google_provider):
        raw = {
            "title": "T",
            "sections": [
                {"heading": "H", "content": ["para 1", "para 2"], "subheadings": "none"},
                "Closing thoughts",
            ],
            "readingTime": "9 min",
        }
        google_provider.payloads = [raw]

        content = generate_blog_content("best crm", None, None, None, None, None, None, llm=gateway)

        assert content.to_payload() == raw

    def test_parse_error_propagates(self, gateway, google_provider):
        google_provider.payloads = ["{broken"]

        with pytest.raises(ResponseParseError):
            generate_blog_content("best crm", None, None, None, None, None, None, llm=gateway)
