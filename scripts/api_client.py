"""Lightweight REST client for the cupbench API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def load_roster(path: Path) -> dict:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Invalid roster JSON: {exc}") from exc
    if isinstance(payload, list):
        return {"players": payload}
    return payload


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the cupbench REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("roster", type=Path, nargs="?", help="Roster JSON to evaluate")
    parser.add_argument("--team-id", default=None, help="Team identifier sent with the roster")
    parser.add_argument("--weak-links", action="store_true", help="Only fetch Critical and High players")
    parser.add_argument("--list-benchmarks", action="store_true", help="List role benchmarks and exit")
    parser.add_argument("--get-benchmark", metavar="ROLE", help="Fetch one role benchmark and exit")
    parser.add_argument("--reload", action="store_true", help="Ask the server to reload benchmarks from disk")
    parser.add_argument("--compare", nargs=2, metavar=("ROLE", "PPG"), help="Compare a PPG value to a role")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url) as client:
        if args.reload:
            resp = client.post("/benchmarks/reload")
            if resp.status_code == 503:
                raise SystemExit(f"reload failed: {resp.json().get('detail')}")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
        if args.list_benchmarks:
            resp = client.get("/benchmarks")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
        if args.get_benchmark:
            resp = client.get(f"/benchmarks/{args.get_benchmark}")
            if resp.status_code == 404:
                raise SystemExit(f"no benchmark for role {args.get_benchmark}")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
        if args.compare:
            role, ppg = args.compare
            resp = client.post("/players/compare", json={"role": role, "points_per_game": float(ppg)})
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
        if args.roster is None:
            if not (args.reload or args.list_benchmarks or args.get_benchmark or args.compare):
                raise SystemExit("a roster file is required unless using a benchmark option")
            return

        body = load_roster(args.roster)
        if args.team_id:
            body["team_id"] = args.team_id
        endpoint = "/rosters/weak-links" if args.weak_links else "/rosters/evaluate"
        resp = client.post(endpoint, json=body)
        if resp.status_code == 503:
            raise SystemExit(f"benchmarks unavailable: {resp.json().get('detail')}")
        resp.raise_for_status()
        payload = resp.json()
        if args.weak_links:
            print(f"{len(payload['weak_links'])} weak links out of {payload['evaluated']} evaluated players")
            for score in payload["weak_links"]:
                print(f"  [{score['severity']}] {score['explanation']}")
        else:
            print("Summary:", json.dumps(payload["summary"], indent=2))
            print(f"Received {len(payload['scores'])} scores, {len(payload['excluded'])} excluded")


if __name__ == "__main__":
    main()
