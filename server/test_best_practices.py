"""Tests for the best-practices analyzer."""

import pytest

from scoring.analyzers import analyze_best_practices
from scoring.schemas import SEVERITY_ORDER, Severity

INDEX_TS = "try {\n  run();\n} catch (e) {\n  report(e);\n}\n"


@pytest.fixture
def furnished(make_files):
    """A repository with every piece of project furniture in place."""
    def build(drop: tuple[str, ...] = (), **overrides: str):
        contents = {
            "README.md": "x" * 1200,
            ".gitignore": "node_modules\n",
            "package.json": "{}",
            "LICENSE": "MIT",
            "tsconfig.json": "{}",
            "src/index.ts": INDEX_TS,
            "src/app.spec.ts": 'describe("app", () => {})',
        }
        contents.update(overrides)
        return make_files(*((p, c) for p, c in contents.items() if p not in drop))
    return build


def test_furnished_repository_scores_full(furnished):
    result = analyze_best_practices(furnished())

    assert result.score == 100
    assert result.issues == []


def test_empty_selection_scores_ten():
    result = analyze_best_practices([])

    assert result.score == 10
    assert [i.message for i in result.issues] == [
        "No .gitignore file found",
        "No README.md file found",
        "No error handling patterns detected",
        "No test files detected - testing is critical",
        "No LICENSE file found",
        "No dependency/package management file found",
    ]


@pytest.mark.parametrize(
    "length, expected_score, severity",
    [(200, 85, Severity.WARNING), (600, 92, Severity.INFO)],
)
def test_short_readme(furnished, length, expected_score, severity):
    result = analyze_best_practices(furnished(**{"README.md": "x" * length}))

    assert result.score == expected_score
    assert [i.severity for i in result.issues] == [severity]


def test_typescript_without_tsconfig(furnished):
    result = analyze_best_practices(furnished(drop=("tsconfig.json",)))

    assert result.score == 88
    assert result.issues[0].message == "TypeScript files without tsconfig.json"


def test_env_usage_needs_example_file(furnished):
    config = "export const key = process.env.API_KEY;"

    missing = analyze_best_practices(furnished(**{"src/config.ts": config}))
    documented = analyze_best_practices(furnished(**{"src/config.ts": config, ".env.example": "API_KEY="}))

    assert missing.score == 88
    assert missing.issues[0].message == "Uses environment variables but no .env.example file"
    assert documented.score == 100


def test_test_calls_count_as_tests(furnished):
    files = furnished(drop=("src/app.spec.ts",), **{"src/math.ts": 'it("adds", () => {})'})

    assert analyze_best_practices(files).score == 100


def test_unguarded_async_code(make_files):
    files = make_files(("jobs.js", "async function a() {}\nasync function b() {}\nasync function c() {}\n"))

    messages = [i.message for i in analyze_best_practices(files).issues]

    assert "Async code lacks proper error handling" in messages


def test_guarded_python_async_code(furnished):
    worker = (
        "async def fetch_all(client):\n"
        "    try:\n"
        "        return await client.get()\n"
        "    except TimeoutError:\n"
        "        return None\n"
    )

    result = analyze_best_practices(furnished(**{"worker.py": worker}))

    assert result.score == 100


def test_issues_sorted_by_severity_then_message(make_files):
    result = analyze_best_practices(make_files(("main.py", "print('hi')")))

    order = [(i.severity, i.message) for i in result.issues]
    assert order == sorted(order, key=lambda pair: (["critical", "warning", "info"].index(pair[0].value), pair[1]))


def test_score_floors_at_zero(make_files):
    files = make_files(("src/app.ts", "const key = process.env.KEY;\nasync function load() {}\n"))

    result = analyze_best_practices(files)

    # Every check fails: 124 points of deductions
    assert result.score == 0
    assert len(result.issues) == 9
    keys = [(SEVERITY_ORDER[i.severity], i.message) for i in result.issues]
    assert keys == sorted(keys)
