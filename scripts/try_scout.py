#!/usr/bin/env python3
"""
Scout resumes through the API, auto-arrange them into a formation and ask for a synergy review.
Run with the API already up: uvicorn talent_scout.api:app --reload --port 8000

  export OPENAI_API_KEY=your-openai-api-key-here
  python3 scripts/try_scout.py resumes/alice.pdf resumes/bob.txt --formation microservices
"""
from __future__ import annotations

import argparse
import base64
import json
import sys
from pathlib import Path

import httpx

BASE = "http://127.0.0.1:8000"

_MIME = {
    ".pdf": "application/pdf",
    ".txt": "text/plain",
    ".md": "text/plain",
}


def _scout_payload(path: Path) -> dict[str, str]:
    mime = _MIME.get(path.suffix.lower())
    if mime is None:
        raise SystemExit(f"{path}: only PDF and plain-text resumes are supported here")
    if mime == "application/pdf":
        return {"filename": path.name, "mime_type": mime, "data": base64.b64encode(path.read_bytes()).decode("ascii")}
    return {"filename": path.name, "mime_type": mime, "text": path.read_text(encoding="utf-8")}


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("resumes", nargs="+", type=Path)
    parser.add_argument("--formation", default="cross-functional")
    parser.add_argument("--base-url", default=BASE)
    args = parser.parse_args()

    client = httpx.Client(base_url=args.base_url, timeout=120.0)
    try:
        for path in args.resumes:
            r = client.post("/roster/scout", json=_scout_payload(path))
            if r.status_code != 200:
                print(f"{path.name}: {r.status_code} {r.json().get('detail')}", file=sys.stderr)
                continue
            card = r.json()["candidate"]
            print(f"Scouted {card['name']} ({card['position']}) OVR {card['overall']}")

        client.post("/squad/formation", json={"formation_id": args.formation}).raise_for_status()

        arranged = client.post("/squad/auto-arrange")
        arranged.raise_for_status()
        squad = arranged.json()
        print(f"\n--- Lineup ({squad['formation']['name']}) ---")
        for slot in squad["formation"]["slots"]:
            occupant = squad["lineup"]["slots"].get(slot["id"])
            print(f"  {slot['label']:<16} {occupant['name'] if occupant else '-'}")
        report = squad.get("report") or {}
        for dropped in report.get("dropped", []):
            print(f"  (dropped {dropped['slot_id']} -> {dropped['candidate_id']}: {dropped['reason']})")
        print(f"  Squad OVR: {squad['stats']['overall']}")

        if squad["stats"]["player_count"] == 0:
            return
        review = client.post("/squad/analyze")
        review.raise_for_status()
        print("\n--- Synergy (POST /squad/analyze) ---")
        print(json.dumps(review.json()["evaluation"], indent=2))
    finally:
        client.close()


if __name__ == "__main__":
    main()
