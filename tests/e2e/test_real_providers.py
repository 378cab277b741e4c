# tests/e2e/test_real_providers.py
"""
End-to-end tests for LLM providers with real API calls.

These tests require valid API credentials set in environment variables:
- ANTHROPIC_API_KEY: Anthropic API key
- OPENAI_API_KEY: OpenAI API key
- GOOGLE_ACCESS_TOKEN, GOOGLE_PROJECT_ID: Vertex AI access token and project

Run with: pytest tests/e2e/ -m e2e -v
"""
import os

import pytest

from sage_review.models.review import ReviewOptions
from sage_review.providers.factory import create_provider
from sage_review.review.findings import parse_findings
from sage_review.review.prompts import SYSTEM_PROMPT, build_user_prompt


SIMPLE_DIFF = """--- a/db.py
+++ b/db.py
@@ -1,2 +1,3 @@
 def find_user(cursor, name):
-    pass
+    cursor.execute(f"SELECT * FROM users WHERE name = '{name}'")
+    return cursor.fetchone()
"""


async def run_review(provider_name, api_key, **options):
    provider = create_provider(provider_name, api_key, options=options)
    response = await provider.review(
        SYSTEM_PROMPT,
        build_user_prompt(1, "acme/widgets", ["db.py"], SIMPLE_DIFF),
        ReviewOptions(max_tokens=4000),
    )

    assert response.text
    assert response.usage.input_tokens > 0
    findings = parse_findings(response.text)
    assert isinstance(findings, list)
    cost = provider.calculate_cost(response.usage, response.model)
    assert cost > 0
    print(f"\n{provider.get_name()} ({response.model}): {len(findings)} findings, ${cost:.4f}")
    return findings


@pytest.mark.asyncio
async def test_anthropic_real_review():
    api_key = os.environ.get("ANTHROPIC_API_KEY")
    if not api_key:
        pytest.skip("ANTHROPIC_API_KEY not set")

    await run_review("anthropic", api_key)


@pytest.mark.asyncio
async def test_openai_real_review():
    api_key = os.environ.get("OPENAI_API_KEY")
    if not api_key:
        pytest.skip("OPENAI_API_KEY not set")

    await run_review("openai", api_key)


@pytest.mark.asyncio
async def test_google_real_review():
    token = os.environ.get("GOOGLE_ACCESS_TOKEN")
    project_id = os.environ.get("GOOGLE_PROJECT_ID")
    if not token or not project_id:
        pytest.skip("GOOGLE_ACCESS_TOKEN or GOOGLE_PROJECT_ID not set")

    await run_review("google", token, project_id=project_id)
