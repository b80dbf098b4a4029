"""Rule catalog for legacy SDK usage rewrites.

Responsibilities:
- Declare the ordered legacy-to-modern rewrite rules.
- Apply one rule over a text and record each substitution.
- Keep the catalog immutable so it can be shared across concurrent calls.

Rule families run structural rewrites (call shape, access path) before
value-level rewrites (model identifiers, parameter names).
"""

from __future__ import annotations

import re
from typing import Iterable, Iterator

from ..errors import RuleCatalogError
from ..models.datatypes import AppliedRewrite, ContextWindow, Rule
from . import model_mapper
from .context import ContextResolver, classify_intent, enclosing_call


# Bare or dotted receiver that is not itself the tail of a longer expression.
_RECEIVER = r"(?<![\w.])(?P<recv>[A-Za-z_][\w.]*?)"
_KEY_SEPARATOR = r"[\"']?\s*(?::|=(?!=))"

# Quoted string literal: triple-quoted bodies may span lines, others may not.
_STRING_LITERAL = (
    r"(?P<string>(?P<quote>(?P<triple>\"\"\"|''')|[\"'])"
    r"(?:\\.|(?!(?P=quote))(?(triple)[^\\]|[^\\\n]))*?"
    r"(?P=quote))"
)

_CHAT_COMPLETION_CALL = "chat.completions.create"


def _quoted_alternation(names: Iterable[str]) -> str:
    """Build a longest-first alternation so prefixes never shadow full names."""

    ordered = sorted(names, key=lambda name: (-len(name), name))
    return "|".join(re.escape(name) for name in ordered)


def _remap_quoted_model(match: re.Match[str], window: ContextWindow) -> str:
    """Replace a quoted legacy model with the decision-table choice for its context."""

    modern = model_mapper.model_for_intent(match.group("model"), classify_intent(window.text))
    quote = match.group("quote")
    return f"{match.group('prefix') or ''}{quote}{modern}{quote}"


def _prompt_to_messages(match: re.Match[str], window: ContextWindow) -> str:
    """Wrap a single prompt string into a one-message chat list."""

    callee = enclosing_call(window.source, window.start)
    if callee is None or not callee.endswith(_CHAT_COMPLETION_CALL):
        return match.group(0)

    key_quote = match.group("key_quote")
    separator = match.group("sep")
    content = match.group("string")
    if key_quote:
        q = key_quote
        return f"{q}messages{q}{separator}[{{{q}role{q}: {q}user{q}, {q}content{q}: {content}}}]"
    if "=" in separator:
        return f'messages{separator}[{{"role": "user", "content": {content}}}]'
    quote = match.group("quote")[0]
    return f"messages{separator}[{{ role: {quote}user{quote}, content: {content} }}]"


def _rename_engine(match: re.Match[str], window: ContextWindow) -> str:
    """Rename `engine` when it carries a literal model or sits inside an SDK call."""

    key_quote = match.group("key_quote")
    literal = match.group("literal") or ""
    renamed = f"{match.group('lead')}{key_quote}model{key_quote}{match.group('sep')}{literal}"
    if literal:
        return renamed
    # The lead may itself be the call's `(`, so resolve from the key.
    callee = enclosing_call(window.source, match.start("key_quote"))
    if callee is not None and callee.endswith(".create"):
        return renamed
    return match.group(0)


_LONG_LEGACY_MODELS = [
    mapping.legacy_model
    for mapping in model_mapper.all_mappings()
    if mapping.legacy_model not in model_mapper.SHORT_LEGACY_MODELS
]


DEFAULT_RULES: tuple[Rule, ...] = (
    Rule(
        rule_id="call-shape.completion",
        pattern=re.compile(
            _RECEIVER + r"(?<!\bchat)\.(?:Completion|completions)\.create(?P<gap>\s*)\("
        ),
        replacement=r"\g<recv>.chat.completions.create\g<gap>(",
        order=10,
        description="Rewrite one-shot completion calls to chat completion calls.",
    ),
    Rule(
        rule_id="call-shape.chat-completion",
        pattern=re.compile(_RECEIVER + r"\.ChatCompletion\.create(?P<gap>\s*)\("),
        replacement=r"\g<recv>.chat.completions.create\g<gap>(",
        order=11,
        description="Rewrite module-level ChatCompletion calls to client chat calls.",
    ),
    Rule(
        rule_id="call-shape.embedding",
        pattern=re.compile(_RECEIVER + r"\.Embedding\.create(?P<gap>\s*)\("),
        replacement=r"\g<recv>.embeddings.create\g<gap>(",
        order=12,
        description="Rewrite module-level Embedding calls to client embedding calls.",
    ),
    Rule(
        rule_id="access-path.dot",
        pattern=re.compile(
            _RECEIVER + r"\.choices\[(?P<index>\s*\w+\s*)\]\.text\b"
        ),
        replacement=r"\g<recv>.choices[\g<index>].message.content",
        order=20,
        description="Rewrite `.choices[N].text` to `.choices[N].message.content`.",
    ),
    Rule(
        rule_id="access-path.subscript",
        pattern=re.compile(
            _RECEIVER
            + r"\[(?P<q1>[\"'])choices(?P=q1)\]"
            + r"\[(?P<index>\s*\w+\s*)\]"
            + r"\[(?P<q2>[\"'])text(?P=q2)\]"
        ),
        replacement=r"\g<recv>.choices[\g<index>].message.content",
        order=21,
        description="Rewrite `[\"choices\"][N][\"text\"]` to `.choices[N].message.content`.",
    ),
    Rule(
        rule_id="prompt.messages",
        pattern=re.compile(
            r"(?<![\w\"'.])(?P<key_quote>[\"']?)prompt(?P=key_quote)"
            r"(?P<sep>\s*(?::|=(?!=))\s*)" + _STRING_LITERAL,
            re.DOTALL,
        ),
        replacement=_prompt_to_messages,
        order=30,
        context_sensitive=True,
        description="Wrap a chat call's `prompt` string into a single user message.",
    ),
    Rule(
        rule_id="model.identifier",
        pattern=re.compile(
            r"(?P<prefix>)(?P<quote>[\"'])(?P<model>"
            + _quoted_alternation(_LONG_LEGACY_MODELS)
            + r")(?P=quote)"
        ),
        replacement=_remap_quoted_model,
        order=40,
        context_sensitive=True,
        description="Remap quoted legacy model identifiers by usage intent.",
    ),
    Rule(
        rule_id="model.identifier-short",
        pattern=re.compile(
            r"(?P<prefix>(?<![\w.])(?:model|engine)" + _KEY_SEPARATOR + r"\s*)"
            r"(?P<quote>[\"'])(?P<model>"
            + _quoted_alternation(model_mapper.SHORT_LEGACY_MODELS)
            + r")(?P=quote)"
        ),
        replacement=_remap_quoted_model,
        order=41,
        context_sensitive=True,
        description="Remap short legacy model names assigned to `model`/`engine`.",
    ),
    Rule(
        rule_id="parameter.max-tokens",
        pattern=re.compile(r"(?<![\w.])max_tokens(?=" + _KEY_SEPARATOR + r")"),
        replacement="max_completion_tokens",
        order=50,
        description="Rename `max_tokens` to `max_completion_tokens`.",
    ),
    Rule(
        rule_id="parameter.engine",
        pattern=re.compile(
            r"(?P<lead>(?:^|[(,{])\s*)(?P<key_quote>[\"']?)engine(?P=key_quote)"
            r"(?P<sep>\s*(?::|=(?!=))\s*)(?P<literal>[\"'])?",
            re.MULTILINE,
        ),
        replacement=_rename_engine,
        order=51,
        context_sensitive=True,
        description="Rename the `engine` parameter to `model`.",
    ),
)


def apply_rule(
    rule: Rule,
    text: str,
    resolver: ContextResolver,
) -> tuple[str, list[AppliedRewrite]]:
    """Apply one rule over `text` in a single left-to-right pass.

    Returns:
        Rewritten text and one record per match whose replacement differs
        from the matched text.
    """

    pieces: list[str] = []
    records: list[AppliedRewrite] = []
    cursor = 0
    for match in rule.pattern.finditer(text):
        original = match.group(0)
        if isinstance(rule.replacement, str):
            replacement = match.expand(rule.replacement)
        else:
            window = resolver.window(text, match.start(), match.end())
            replacement = rule.replacement(match, window)
        if replacement == original:
            continue
        pieces.append(text[cursor : match.start()])
        pieces.append(replacement)
        cursor = match.end()
        records.append(
            AppliedRewrite(
                rule_id=rule.rule_id,
                start=match.start(),
                end=match.end(),
                original=original,
                replacement=replacement,
            )
        )

    if not records:
        return text, records
    pieces.append(text[cursor:])
    return "".join(pieces), records


class RuleCatalog:
    """Immutable, ordered collection of rewrite rules."""

    def __init__(self, rules: Iterable[Rule]) -> None:
        """Initialize from rules, sorted by `(order, rule_id)`.

        Raises:
            RuleCatalogError: If two rules share an identifier.
        """

        ordered = tuple(sorted(rules, key=lambda rule: (rule.order, rule.rule_id)))
        seen: set[str] = set()
        duplicates: set[str] = set()
        for rule in ordered:
            if rule.rule_id in seen:
                duplicates.add(rule.rule_id)
            seen.add(rule.rule_id)
        if duplicates:
            raise RuleCatalogError(
                f"Duplicate rule id(s): {', '.join(sorted(duplicates))}."
            )
        self._rules = ordered

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    @property
    def rule_ids(self) -> tuple[str, ...]:
        return tuple(rule.rule_id for rule in self._rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def get(self, rule_id: str) -> Rule:
        """Return the rule registered under `rule_id`."""

        for rule in self._rules:
            if rule.rule_id == rule_id:
                return rule
        raise RuleCatalogError(f"Unknown rule id: {rule_id}.")

    def without(self, *rule_ids: str) -> RuleCatalog:
        """Return a new catalog excluding the given rule ids.

        Raises:
            RuleCatalogError: If any id is not part of this catalog.
        """

        unknown = sorted(set(rule_ids).difference(self.rule_ids))
        if unknown:
            raise RuleCatalogError(f"Unknown rule id(s): {', '.join(unknown)}.")
        excluded = set(rule_ids)
        return RuleCatalog(rule for rule in self._rules if rule.rule_id not in excluded)

    def apply_all(self, text: str, resolver: ContextResolver | None = None) -> str:
        """Apply every rule once, in order, to the cumulative text."""

        active_resolver = resolver or ContextResolver()
        current = text
        for rule in self._rules:
            current, _ = apply_rule(rule, current, active_resolver)
        return current


_DEFAULT_CATALOG = RuleCatalog(DEFAULT_RULES)


def default_catalog() -> RuleCatalog:
    """Return the shared read-only default catalog."""

    return _DEFAULT_CATALOG
