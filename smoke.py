# smoke.py — end-to-end run against a local League History API
import json
import time

import requests

BASE = "http://127.0.0.1:8000"


def post(path, data=None):
    r = requests.post(BASE + path, json=data)
    r.raise_for_status()
    return r.json()


def put(path, data):
    r = requests.put(BASE + path, json=data)
    r.raise_for_status()
    return r.json()


def patch(path, data):
    r = requests.patch(BASE + path, json=data)
    r.raise_for_status()
    return r.json()


def get(path):
    r = requests.get(BASE + path)
    r.raise_for_status()
    return r.json()


# unique year-like key so reruns don't collide with the 409 on create
year = f"smoke-{time.time_ns()}"

print("=== 1) create season ===")
teams = [
    {"id": "bulls", "display_name": "Bulls", "owner_name": "Alice"},
    {"id": "bears", "display_name": "Bears", "owner_name": "Bob"},
    {"id": "hawks", "display_name": "Hawks", "owner_name": "Cara"},
    {"id": "wolves", "display_name": "Wolves", "owner_name": "Dev"},
]
post(f"/api/seasons/{year}", {"teams": teams})

print("=== 2) weekly scores ===")
week_scores = {
    1: [("bulls", 110.2, "bears", 98.4), ("hawks", 87.0, "wolves", 101.3)],
    2: [("bulls", 95.5, "hawks", 120.1), ("bears", 100.0, "wolves", 100.0)],
    3: [("bulls", 130.0, "wolves", 90.2), ("bears", 99.9, "hawks", 105.5)],
}
for wk, games in week_scores.items():
    matchups = [
        {"team_a": a, "score_a": sa, "team_b": b, "score_b": sb, "phase": "regular"}
        for a, sa, b, sb in games
    ]
    res = put(f"/api/seasons/{year}/weeks/{wk}", {"matchups": matchups})
    print(f"week {wk}: warnings={res['warnings']}")

print("=== 3) playoff weeks ===")
print(post(f"/api/seasons/{year}/playoff-weeks"))

print("=== 4) outputs ===")
standings = get(f"/api/seasons/{year}/standings")
weeks = get(f"/api/seasons/{year}/weeks")
records = get("/api/records/all-time")

print("\n-- standings --\n", json.dumps(standings, indent=2))
print("\n-- weeks --\n", json.dumps(sorted(weeks["weeks"].keys(), key=int)))
print("\n-- all-time --\n", json.dumps(records, indent=2))
