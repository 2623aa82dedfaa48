"""Tests for the deterministic file selector."""

import random

from scoring.file_selector import MAX_SELECTED_FILES, file_priority, select_files
from scoring.schemas import TreeEntry


def blobs(*paths: str) -> list[TreeEntry]:
    return [TreeEntry(path=p, type="blob") for p in paths]


def test_ranks_by_priority_then_path():
    listing = blobs(
        "app.py",
        "docs/guide.md",
        "lib/util.js",
        "package.json",
        "README.md",
        "src/components/Button.tsx",
        "src/index.ts",
    )

    assert select_files(listing) == [
        "README.md",
        "package.json",
        "src/index.ts",
        "src/components/Button.tsx",
        "lib/util.js",
        "app.py",
        "docs/guide.md",
    ]


def test_drops_directories_and_unrecognized_files():
    listing = [
        TreeEntry(path="src", type="tree"),
        TreeEntry(path="logo.png", type="blob"),
        TreeEntry(path="src/main.go", type="blob"),
    ]

    assert select_files(listing) == ["src/main.go"]


def test_drops_noise_and_test_directories():
    listing = blobs(
        "node_modules/react/index.js",
        "dist/bundle.js",
        "build/out.js",
        "public/app.min.js",
        "vendor/lib.go",
        "pkg/__pycache__/mod.py",
        ".git/config.json",
        "coverage/report.json",
        "test/helpers.js",
        "tests/test_app.py",
        "src/__tests__/app.test.ts",
        "src/app.ts",
    )

    assert select_files(listing) == ["src/app.ts"]


def test_caps_at_twenty_paths():
    listing = blobs(*(f"src/f{i:02d}.ts" for i in range(30)))

    selected = select_files(listing)

    assert len(selected) == MAX_SELECTED_FILES
    assert selected[0] == "src/f00.ts"
    assert selected[-1] == "src/f19.ts"


def test_same_listing_in_any_order_gives_same_selection():
    paths = [f"pkg{i % 4}/mod{i}.{ext}" for i, ext in enumerate(["py", "ts", "js", "go", "rs", "md"] * 6)]
    listing = blobs(*paths)
    shuffled = listing[:]
    random.Random(7).shuffle(shuffled)

    assert select_files(listing) == select_files(shuffled)


def test_duplicate_entries_selected_once():
    assert select_files(blobs("main.py", "main.py")) == ["main.py"]


def test_priorities():
    assert file_priority("Dockerfile") == 100
    assert file_priority("backend/package.json") == 100
    assert file_priority("index.ts") == 89
    assert file_priority("src/app.jsx") == 83
    assert file_priority("src/app.py") == 78
    assert file_priority("cmd/main.rs") == 73
    assert file_priority("App.kt") == 69
    assert file_priority("config/settings.yaml") == 58
    # Depth bonus floors at zero
    assert file_priority("a/b/c/d/e/f/g/h/i/j/deep.py") == 70
