"""Unit tests for rule catalog construction, ordering, and single-rule application."""

from __future__ import annotations

from dataclasses import replace
import re

import pytest

from modernizer.errors import RuleCatalogError
from modernizer.models.datatypes import Rule
from modernizer.text.context import ContextResolver
from modernizer.text.rules import DEFAULT_RULES, RuleCatalog, apply_rule, default_catalog


def test_default_catalog_order_is_stable() -> None:
    """Structural rules must precede value rules in a fixed, versioned order."""

    assert default_catalog().rule_ids == (
        "call-shape.completion",
        "call-shape.chat-completion",
        "call-shape.embedding",
        "access-path.dot",
        "access-path.subscript",
        "prompt.messages",
        "model.identifier",
        "model.identifier-short",
        "parameter.max-tokens",
        "parameter.engine",
    )


def test_catalog_sorts_rules_by_order_then_id() -> None:
    """Construction order should not matter; `(order, id)` defines execution."""

    shuffled = RuleCatalog(reversed(DEFAULT_RULES))

    assert shuffled.rule_ids == default_catalog().rule_ids


def test_catalog_rejects_duplicate_rule_ids() -> None:
    """Two rules with the same id make traces ambiguous and are rejected."""

    rule = DEFAULT_RULES[0]

    with pytest.raises(RuleCatalogError, match="Duplicate rule id"):
        RuleCatalog([rule, replace(rule, order=99)])


def test_catalog_without_removes_rules_and_rejects_unknown_ids() -> None:
    """Reduced catalogs drop named rules; unknown ids are reported."""

    catalog = default_catalog().without("parameter.engine")

    assert "parameter.engine" not in catalog.rule_ids
    assert len(catalog) == len(default_catalog()) - 1
    assert catalog.apply_all('engine: "gpt-4.1"') == 'engine: "gpt-4.1"'
    with pytest.raises(RuleCatalogError, match="Unknown rule id"):
        default_catalog().without("no-such-rule")


def test_catalog_get_returns_rule_or_raises() -> None:
    """Rules can be fetched by id for focused testing."""

    assert default_catalog().get("access-path.dot").order == 20
    with pytest.raises(RuleCatalogError):
        default_catalog().get("missing")


def test_context_sensitive_rule_requires_callable_replacement() -> None:
    """A fixed replacement cannot consult context and is rejected."""

    with pytest.raises(ValueError, match="context-sensitive"):
        Rule(
            rule_id="bad",
            pattern=re.compile("x"),
            replacement="y",
            order=1,
            context_sensitive=True,
        )


def test_apply_rule_records_offsets_of_each_rewrite() -> None:
    """Every substitution should be recorded against the pre-rule text."""

    rule = default_catalog().get("parameter.max-tokens")
    text = "a(max_tokens=1)\nb(max_tokens = 2)"

    rewritten, records = apply_rule(rule, text, ContextResolver())

    assert rewritten == "a(max_completion_tokens=1)\nb(max_completion_tokens = 2)"
    assert [(item.start, item.end) for item in records] == [(2, 12), (18, 28)]
    assert {item.original for item in records} == {"max_tokens"}


def test_apply_rule_skips_matches_whose_context_rejects_rewrite() -> None:
    """Context predicates returning the original text leave no trace record."""

    rule = default_catalog().get("prompt.messages")
    text = 'template = PromptTemplate(prompt="Summarize")'

    rewritten, records = apply_rule(rule, text, ContextResolver())

    assert rewritten == text
    assert records == []


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ("openai.Completion.create(x)", "openai.chat.completions.create(x)"),
        ("client.completions.create (x)", "client.chat.completions.create (x)"),
        ("self.client.completions.create(x)", "self.client.chat.completions.create(x)"),
        ("openai.ChatCompletion.create(x)", "openai.chat.completions.create(x)"),
        ("openai.Embedding.create(x)", "openai.embeddings.create(x)"),
        ("client.chat.completions.create(x)", "client.chat.completions.create(x)"),
        ("openai.embeddings.create(x)", "openai.embeddings.create(x)"),
    ],
)
def test_call_shape_rules_rewrite_only_legacy_prefixes(source: str, expected: str) -> None:
    """Call-shape rewrites replace the invocation prefix and keep arguments verbatim."""

    assert default_catalog().apply_all(source) == expected


@pytest.mark.parametrize(
    "source",
    [
        "response.choices[0].text",
        'response["choices"][0]["text"]',
        "response['choices'][0]['text']",
    ],
)
def test_access_path_rules_recognize_both_syntaxes(source: str) -> None:
    """Dot and subscript access are the same logical legacy path."""

    assert default_catalog().apply_all(source) == "response.choices[0].message.content"


def test_access_path_rule_keeps_receiver_and_index() -> None:
    """Receiver expression and index should survive the rewrite."""

    source = "print(result.data.choices[i].text.strip())"

    assert (
        default_catalog().apply_all(source)
        == "print(result.data.choices[i].message.content.strip())"
    )


def test_prompt_rule_rewrites_python_kwarg_inside_chat_call() -> None:
    """Keyword prompts inside chat calls become one user message."""

    source = 'client.chat.completions.create(model="gpt-4.1", prompt="Say hi")'

    assert default_catalog().apply_all(source) == (
        'client.chat.completions.create(model="gpt-4.1", '
        'messages=[{"role": "user", "content": "Say hi"}])'
    )


def test_prompt_rule_rewrites_object_key_with_original_quotes() -> None:
    """Object-literal prompts keep their quote style inside the message list."""

    source = "openai.chat.completions.create({ prompt: 'Hi there' })"

    assert default_catalog().apply_all(source) == (
        "openai.chat.completions.create({ messages: [{ role: 'user', content: 'Hi there' }] })"
    )


def test_prompt_rule_rewrites_quoted_dict_key_inside_chat_call() -> None:
    """Quoted `"prompt"` keys are rewritten with the same key quoting."""

    source = 'client.chat.completions.create(**{"prompt": "Hi", "n": 1})'

    assert default_catalog().apply_all(source) == (
        'client.chat.completions.create('
        '**{"messages": [{"role": "user", "content": "Hi"}], "n": 1})'
    )


@pytest.mark.parametrize(
    "literal",
    [
        '"""Summarize this"""',
        "'''Line one\n\"quoted\" line two'''",
        r'"Say \"hi\" now"',
        r"'It\'s fine'",
    ],
)
def test_prompt_rule_keeps_whole_string_literal(literal: str) -> None:
    """Triple-quoted and escaped prompts move into the message intact."""

    catalog = default_catalog()
    source = f"openai.Completion.create(model=\"gpt-4.1\", prompt={literal})"

    once = catalog.apply_all(source)

    assert once == (
        'openai.chat.completions.create(model="gpt-4.1", '
        f'messages=[{{"role": "user", "content": {literal}}}])'
    )
    assert catalog.apply_all(once) == once


def test_prompt_rule_leaves_unterminated_single_line_string_alone() -> None:
    """A one-line string is never closed by a quote on a later line."""

    source = 'client.chat.completions.create(prompt="open\nmodel="gpt-4.1")'

    assert default_catalog().apply_all(source) == source


def test_prompt_rule_ignores_plain_assignments() -> None:
    """A top-level `prompt = "..."` variable is not part of any chat call."""

    source = 'prompt = "Tell me a joke"\n'

    assert default_catalog().apply_all(source) == source


def test_engine_rule_requires_literal_value_or_sdk_call() -> None:
    """`engine` is renamed for literal values or inside `.create(` calls only."""

    catalog = default_catalog()

    assert (
        catalog.apply_all("openai.Completion.create(engine=ENGINE_NAME)")
        == "openai.chat.completions.create(model=ENGINE_NAME)"
    )
    assert catalog.apply_all("self.engine = build_engine()") == "self.engine = build_engine()"
    assert catalog.apply_all("engine: it computes.") == "engine: it computes."
    assert catalog.apply_all('"engine": "gpt-4.1-mini"') == '"model": "gpt-4.1-mini"'


def test_engine_rule_ignores_engine_inside_string_values() -> None:
    """Only keys are renamed; `engine:` inside message text stays as written."""

    source = (
        'client.chat.completions.create(model="gpt-4.1", messages=['
        '{"role": "user", "content": "Which engine: V8 or SpiderMonkey?"}])'
    )

    assert default_catalog().apply_all(source) == source
    assert (
        default_catalog().apply_all('openai.Completion.create(\n    engine = "davinci",\n)')
        == 'openai.chat.completions.create(\n    model = "gpt-4.1",\n)'
    )


def test_max_tokens_rule_skips_comparisons_and_attributes() -> None:
    """Only key/keyword uses of `max_tokens` are renamed."""

    catalog = default_catalog()

    assert catalog.apply_all("if max_tokens == 5:") == "if max_tokens == 5:"
    assert catalog.apply_all("settings.max_tokens = 5") == "settings.max_tokens = 5"
    assert catalog.apply_all('{"max_tokens": 5}') == '{"max_completion_tokens": 5}'


def test_short_model_names_require_model_or_engine_key() -> None:
    """Ambiguous short names like `ada` are only remapped as parameter values."""

    catalog = default_catalog()

    assert catalog.apply_all('name = "ada"') == 'name = "ada"'
    assert catalog.apply_all("model='curie'") == "model='gpt-4.1-mini'"


def test_parameter_and_model_groups_are_order_independent() -> None:
    """Parameter renames and model remaps commute, so swapping groups is safe."""

    source = (
        'openai.Completion.create(engine="davinci", max_tokens=10)\n'
        'openai.Completion.create({ engine: "text-ada-001", max_tokens: 3 })\n'
    )
    swapped = RuleCatalog(
        replace(rule, order=rule.order + 30)
        if rule.rule_id.startswith("model.")
        else rule
        for rule in DEFAULT_RULES
    )

    assert swapped.rule_ids[-2:] == ("model.identifier", "model.identifier-short")
    assert swapped.apply_all(source) == default_catalog().apply_all(source)
    assert 'model="gpt-4.1", max_completion_tokens=10' in default_catalog().apply_all(source)
