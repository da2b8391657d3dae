import json

import pytest

from dir2prompt.output_strategies.json_strategy import JSONOutputStrategy


def render(strategy, tree, files, request):
    parts = [strategy.format_start(), strategy.format_tree(tree)]
    for path, content, binary in files:
        parts.append(strategy.format_file(path, content, binary))
    parts.append(strategy.format_request(request))
    parts.append(strategy.format_end())
    return "".join(parts)


@pytest.fixture
def json_strategy():
    return JSONOutputStrategy()


def test_document_is_valid_json(json_strategy):
    document = render(
        json_strategy,
        "├── a\n│   └── x.txt\n└── b.txt\n",
        [("/p/a/x.txt", "hi", False), ("/p/b.txt", "[Binary file]", True)],
        'Explain "this"',
    )
    data = json.loads(document)
    assert data == {
        "file_tree": "├── a\n│   └── x.txt\n└── b.txt\n",
        "files": [
            {"path": "/p/a/x.txt", "content": "hi", "binary": False},
            {"path": "/p/b.txt", "content": "[Binary file]", "binary": True},
        ],
        "user_request": 'Explain "this"',
    }


def test_no_files(json_strategy):
    data = json.loads(render(json_strategy, "", [], "nothing"))
    assert data["files"] == []


def test_strategy_is_reusable(json_strategy):
    render(json_strategy, "", [("/p/one", "1", False)], "first")
    data = json.loads(render(json_strategy, "", [("/p/two", "2", False)], "second"))
    assert [entry["path"] for entry in data["files"]] == ["/p/two"]


def test_non_ascii_is_kept(json_strategy):
    document = render(json_strategy, "", [("/p/ü.txt", "✓", False)], "ok")
    assert "✓" in document
    assert json.loads(document)["files"][0]["path"] == "/p/ü.txt"
