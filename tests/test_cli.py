import json

import pytest

import dedup
from src.app.selector.errors import InvalidInput
from src.app.selector.loader import extract_vectors, load_vectors


def _write(tmp_path, payload, name="vectors.json"):
    p = tmp_path / name
    p.write_text(json.dumps(payload), encoding="utf-8")
    return str(p)


def test_extract_vectors_formats():
    vecs = [[1, 0], [0, 1]]
    assert extract_vectors(vecs) == vecs
    assert extract_vectors({"embeddings": vecs}) == vecs
    assert extract_vectors({"vectors": vecs}) == vecs
    # embeddings-API style payload, restored to input order
    api = {"data": [{"index": 1, "embedding": [0, 1]}, {"index": 0, "embedding": [1, 0]}]}
    assert extract_vectors(api) == vecs


@pytest.mark.parametrize("payload", ["nope", 3, {"data": [{"vector": [1]}]}, {"other": []}])
def test_extract_vectors_rejects_unknown_shapes(payload):
    with pytest.raises(InvalidInput):
        extract_vectors(payload)


def test_load_vectors_rejects_bad_json(tmp_path):
    p = tmp_path / "broken.json"
    p.write_text("[[1, 0],", encoding="utf-8")
    with pytest.raises(InvalidInput, match="not valid JSON"):
        load_vectors(str(p))


def test_cli_select_fixed_k(tmp_path, capsys):
    path = _write(tmp_path, [[1, 0], [1, 0], [0, 1]])
    assert dedup.main(["select", "--input", path, "--k", "2"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["indices"] == [0, 2]
    assert out["k"] == 2


def test_cli_select_automatic(tmp_path, capsys):
    path = _write(tmp_path, {"embeddings": [[1, 0, 0], [0, 1, 0], [0, 0, 1]]})
    assert dedup.main(["select", "--input", path, "--ratio", "0.2"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["indices"] == [0, 1, 2]
    assert len(out["gains"]) == 3


def test_cli_reports_invalid_k(tmp_path, capsys):
    path = _write(tmp_path, [[1, 0], [0, 1]])
    assert dedup.main(["select", "--input", path, "--k", "5"]) == 2
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Invalid k value: 5" in captured.err


def test_cli_reports_missing_file(tmp_path, capsys):
    assert dedup.main(["select", "--input", str(tmp_path / "missing.json")]) == 2
    assert "cannot read" in capsys.readouterr().err
