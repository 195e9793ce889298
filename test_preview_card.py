import json

import pytest

from scripts.preview_card import main, preview_card


REQUEST = {
    "card": {
        "id": "card-1",
        "scheduler": {
            "state": "review",
            "due_at": "2025-01-01T00:00:00Z",
            "interval_ms": 3 * 86_400_000,
        },
    },
    "now": "2025-01-01T00:00:00Z",
    "config": {
        "request_retention": 0.9,
        "learning_steps": ["1m", "10m"],
        "relearning_steps": ["10m"],
    },
}


@pytest.fixture
def request_file(tmp_path):
    path = tmp_path / "request.json"
    path.write_text(json.dumps(REQUEST), encoding="utf-8")
    return str(path)


def test_preview_table(request_file, capsys):
    preview_card(request_file)

    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "=" * 60
    assert lines[1].startswith("Card card-1 (review)")
    rows = {line.split()[0]: line for line in lines[3:]}
    assert list(rows) == ["again", "hard", "good", "easy"]
    assert "1 day" in rows["again"]
    assert "648,000,000 ms" in rows["good"]
    assert "due 2025-01-08T12:00:00Z" in rows["good"]


def test_preview_json(request_file, capsys):
    preview_card(request_file, as_json=True)

    data = json.loads(capsys.readouterr().out)
    assert data["success"] is True
    assert data["intervals"]["good"] == {
        "due_at": "2025-01-08T12:00:00Z",
        "interval_ms": 648_000_000,
        "label": "1 weeks",
    }


def test_commit_prints_card_and_event(request_file, capsys):
    preview_card(request_file, commit="again")

    data = json.loads(capsys.readouterr().out)
    assert data["card"]["scheduler"]["state"] == "relearning"
    assert data["card"]["lapses"] == 1
    assert data["event"]["interval_after_ms"] == 86_400_000


def test_main_parses_arguments(request_file, capsys, monkeypatch):
    monkeypatch.setattr("sys.argv", ["preview_card", request_file, "--model", "forgetting_curve", "--json"])

    main()

    data = json.loads(capsys.readouterr().out)
    assert data["intervals"]["again"]["interval_ms"] == 86_400_000
