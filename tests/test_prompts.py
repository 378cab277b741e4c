# tests/test_prompts.py
from sage_review.review.prompts import SYSTEM_PROMPT, build_user_prompt


def test_build_user_prompt_includes_context():
    prompt = build_user_prompt(
        pr_number=42,
        repository="acme/widgets",
        files=["src/main.py", "src/util.py"],
        diff="+ print('world')",
    )

    assert "# Pull Request #42" in prompt
    assert "acme/widgets" in prompt
    assert "src/main.py\nsrc/util.py" in prompt
    assert "```diff\n+ print('world')\n```" in prompt


def test_diff_with_braces_is_embedded_verbatim():
    diff = "+data = {'key': f'{value}'}"
    assert diff in build_user_prompt(1, "acme/widgets", ["a.py"], diff)


def test_system_prompt_requests_json_findings():
    for field in ("severity", "file", "line", "title", "description", "suggestion"):
        assert f'"{field}"' in SYSTEM_PROMPT
    for severity in ("CRITICAL", "HIGH", "MEDIUM", "LOW"):
        assert severity in SYSTEM_PROMPT
