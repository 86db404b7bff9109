#!/usr/bin/env python3
"""API smoke test against a running server"""

import json
import sys
import requests

BASE_URL = "http://localhost:8000"

SAMPLE_MARKUP = "# Two Sum\\n\\n- use a **hash map**\\n- one pass\\n\\n```python\\nseen = {}\\n```"


def check_health():
    print("=== Health Check ===")
    r = requests.get(f"{BASE_URL}/")
    print(f"  GET / → {r.status_code}")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] in ("ok", "degraded")
    print(f"  Response: {data}")

    r = requests.get(f"{BASE_URL}/health")
    print(f"  GET /health → {r.status_code}")
    assert r.status_code == 200
    print()


def check_render():
    print("=== Render ===")
    r = requests.post(
        f"{BASE_URL}/api/markup/render",
        json={"text": SAMPLE_MARKUP, "format": "html"},
    )
    print(f"  POST /api/markup/render → {r.status_code}")
    assert r.status_code == 200
    data = r.json()
    types = [block["type"] for block in data.get("blocks", [])]
    print(f"  Blocks: {types}")
    assert types[0] == "heading"
    assert "code_block" in types
    print(f"  HTML: {(data.get('html') or '')[:100]}...")
    print()


def check_normalize():
    print("=== Normalize ===")
    r = requests.post(
        f"{BASE_URL}/api/markup/normalize",
        json={"text": 'print(\\"a\\")\\nprint(\\"b\\")', "mode": "text"},
    )
    print(f"  POST /api/markup/normalize → {r.status_code}")
    data = r.json()
    assert data.get("text") == 'print("a")\nprint("b")'
    print(f"  Text: {data.get('text')!r}")
    print()


def check_manifest():
    print("=== Solution Manifest ===")
    r = requests.get(f"{BASE_URL}/api/solutions/manifest")
    print(f"  GET /api/solutions/manifest → {r.status_code}")
    data = r.json()
    if r.status_code == 200:
        print(f"  Problems with solutions: {data.get('total_with_solutions')}")
    else:
        print(f"  Error: {data.get('error')}")
    print()


def check_stats():
    print("=== Stats ===")
    r = requests.get(f"{BASE_URL}/api/stats")
    print(f"  GET /api/stats → {r.status_code}")
    data = r.json()
    print(f"  Stats: {json.dumps(data.get('stats', {}), indent=2, ensure_ascii=False)}")
    print()


def main():
    print(f"Smoke testing PrepDeck markup service at {BASE_URL}\n")

    try:
        check_health()
        check_render()
        check_normalize()
        check_manifest()
        check_stats()
        print("All checks passed!")
    except requests.ConnectionError:
        print(f"ERROR: Cannot connect to {BASE_URL}. Is the server running?")
        sys.exit(1)
    except AssertionError as e:
        print(f"CHECK FAILED: {e}")
        sys.exit(1)
    except Exception as e:
        print(f"ERROR: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
