"""Tests for quick search templates."""

from __future__ import annotations

from datetime import date

from repo_finder.templates import get_template, get_templates


def test_all_templates_present():
    assert set(get_templates()) == {"trending", "beginner", "active", "small", "hacktoberfest"}


def test_date_qualifiers_are_relative():
    templates = get_templates(today=date(2025, 3, 15))
    assert templates["trending"].params.keywords == "created:>2025-03-08"
    assert templates["active"].params.keywords == "pushed:>2025-03-08"


def test_beginner_template_filters():
    params = get_template("beginner").params
    assert params.require_good_first_issues is True
    assert params.min_forks == 10
    assert params.max_results == 30


def test_get_template_case_insensitive_and_language_override():
    template = get_template("Hacktoberfest", language="Rust")
    assert template is not None
    assert template.params.language == "Rust"
    assert template.params.min_stars == 50


def test_get_template_unknown():
    assert get_template("nope") is None
