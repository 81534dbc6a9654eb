from dataclasses import replace

import pytest

from src.app.service.prompt_builder import ExtractionPromptBuilder


def test_generic_variant_renders_placeholder_rule(prompt_config):
    builder = ExtractionPromptBuilder(prompt_config)

    assert '"[image]"' in builder.prompt_text
    assert builder.prompt_text.startswith("Analyze this image and extract multiple-choice questions")
    assert "5." not in builder.prompt_text


def test_template_braces_are_rendered_as_json(prompt_config):
    """Les accolades doublées du gabarit doivent sortir comme du JSON littéral."""
    prompt_text = ExtractionPromptBuilder(prompt_config).prompt_text

    assert '{ "text": "string", "isCorrect": boolean }' in prompt_text
    assert "{{" not in prompt_text
    assert "{placeholder_rule}" not in prompt_text


def test_extra_rules_are_numbered_after_base_rules(prompt_config):
    stamp_config = replace(
        prompt_config,
        variant="stamp",
        placeholder_rule='If a stamp image appears before a question, replace it with "[stamp]".',
        extra_rules=(
            'If there is no reference text, set "referenceText" to an empty string "".',
            "Clone the text exactly as written. Do not translate it.",
        ),
    )
    prompt_text = ExtractionPromptBuilder(stamp_config).prompt_text

    assert '"[stamp]"' in prompt_text
    assert '5. If there is no reference text' in prompt_text
    assert prompt_text.endswith("6. Clone the text exactly as written. Do not translate it.")


def test_missing_template_file_raises(prompt_config):
    with pytest.raises(FileNotFoundError):
        ExtractionPromptBuilder(replace(prompt_config, extraction_file="missing.txt"))
