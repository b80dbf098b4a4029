"""Shared pytest fixtures for the full Modernizer test suite."""

from __future__ import annotations

import pytest


@pytest.fixture
def legacy_js_snippet() -> str:
    """Provide a legacy one-shot completion call written as a JS object literal."""

    return """
        const response = openai.Completion.create({
          engine: "text-davinci-003",
          prompt: "Hello world",
          max_tokens: 100
        });
        const text = response.choices[0].text;
    """


@pytest.fixture
def legacy_python_snippet() -> str:
    """Provide a legacy module-level completion call with keyword arguments."""

    return (
        'response = openai.Completion.create(engine="text-davinci-003", '
        'prompt="Say hi", max_tokens=5)\n'
        'print(response["choices"][0]["text"])\n'
    )


@pytest.fixture
def modern_js_snippet() -> str:
    """Provide a fully current chat completion call and access path."""

    return """
        const response = await openai.chat.completions.create({
          model: "gpt-4.1",
          messages: [{ role: "user", content: "Hello" }],
          max_completion_tokens: 100
        });
        const content = response.choices[0].message.content;
    """
