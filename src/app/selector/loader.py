from typing import Any, List
import json
import sys

from src.app.selector.errors import InvalidInput


def extract_vectors(payload: Any) -> List[List[float]]:
    """
    Accepts a bare list of vectors, {"embeddings": [...]}, {"vectors": [...]},
    or an embeddings-API response {"data": [{"embedding": [...]}, ...]}.
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in ("embeddings", "vectors"):
            if key in payload:
                return payload[key]
        data = payload.get("data")
        if isinstance(data, list):
            try:
                # embeddings APIs may return items out of order; "index" restores input order
                items = sorted(data, key=lambda item: item.get("index", 0)) if all("index" in d for d in data) else data
                return [item["embedding"] for item in items]
            except (KeyError, TypeError, AttributeError):
                raise InvalidInput("Invalid response format: every data item needs an 'embedding'")
    raise InvalidInput("Invalid input format: expected a list of vectors or an embeddings payload")


def load_vectors(path: str) -> List[List[float]]:
    if path == "-":
        raw = sys.stdin.read()
    else:
        with open(path, "r", encoding="utf-8") as f:
            raw = f.read()
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidInput(f"Input is not valid JSON: {e}")
    return extract_vectors(payload)
