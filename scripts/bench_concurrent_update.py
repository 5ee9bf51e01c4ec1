#!/usr/bin/env python3
"""Benchmark optimistic concurrency: N writers race on the same version.

Creates one document, then fires --writers concurrent PUTs that all carry the
same expected_version. Exactly one should succeed; the rest should get 409.
Repeats for --rounds rounds, each round starting from the version the winner
produced.

Usage:
  Anonymous (no Keycloak):
    export API_URL=http://localhost:8000
    uv run python scripts/bench_concurrent_update.py [--writers 10] [--rounds 20]

  With Keycloak:
    export KEYCLOAK_URL=http://localhost:8080 KEYCLOAK_REALM=protoledger
    export KEYCLOAK_CLIENT_ID=protoledger-api KEYCLOAK_CLIENT_SECRET=protoledger-api-secret
    export BENCH_USER=testuser BENCH_PASSWORD=testpass
    uv run python scripts/bench_concurrent_update.py --auth
"""
from __future__ import annotations

import argparse
import asyncio
import os
import statistics
import sys
import time

import httpx


def get_token(
    keycloak_url: str,
    realm: str,
    client_id: str,
    client_secret: str,
    username: str,
    password: str,
) -> str:
    url = f"{keycloak_url.rstrip('/')}/realms/{realm}/protocol/openid-connect/token"
    r = httpx.post(
        url,
        data={
            "grant_type": "password",
            "client_id": client_id,
            "client_secret": client_secret,
            "username": username,
            "password": password,
        },
        headers={"Content-Type": "application/x-www-form-urlencoded"},
        timeout=30.0,
    )
    r.raise_for_status()
    return r.json()["access_token"]


async def _put(
    client: httpx.AsyncClient,
    url: str,
    writer: int,
    round_no: int,
    expected_version: int,
) -> tuple[int, float, dict]:
    t0 = time.perf_counter()
    r = await client.put(
        url,
        json={
            "text_blob": f"<p>round {round_no} writer {writer}</p>",
            "structured_payload": {"round": round_no, "writer": writer},
            "expected_version": expected_version,
        },
    )
    return r.status_code, time.perf_counter() - t0, r.json() if r.content else {}


async def run(args: argparse.Namespace, api_url: str, headers: dict[str, str]) -> int:
    async with httpx.AsyncClient(timeout=60.0, headers=headers) as client:
        r = await client.post(
            f"{api_url}/v1/documents",
            json={"text_blob": "<p>start</p>", "structured_payload": {"round": 0}},
        )
        r.raise_for_status()
        doc = r.json()
        doc_url = f"{api_url}/v1/documents/{doc['id']}"
        version = doc["version"]

        latencies: list[float] = []
        wins = conflicts = errors = bad_rounds = 0
        start_total = time.perf_counter()
        for round_no in range(1, args.rounds + 1):
            results = await asyncio.gather(
                *(_put(client, doc_url, w, round_no, version) for w in range(args.writers))
            )
            round_wins = 0
            for status, elapsed, body in results:
                latencies.append(elapsed)
                if status == 200:
                    round_wins += 1
                    version = body["version"]
                elif status == 409:
                    conflicts += 1
                else:
                    errors += 1
            wins += round_wins
            if round_wins != 1:
                bad_rounds += 1
        total_elapsed = time.perf_counter() - start_total

        r = await client.get(f"{doc_url}/versions", params={"limit": 1})
        r.raise_for_status()
        snapshots = r.json()["total"]

    n = len(latencies)
    p50 = statistics.median(latencies) * 1000
    p95 = sorted(latencies)[int(n * 0.95) - 1] * 1000 if n >= 20 else p50
    summary = (
        f"Concurrent update benchmark (writers={args.writers}, rounds={args.rounds})\n"
        f"  Accepted: {wins}, conflicts (409): {conflicts}, errors: {errors}\n"
        f"  Rounds without exactly one winner: {bad_rounds}\n"
        f"  Final version: {version}, snapshots: {snapshots}\n"
        f"  Latency: p50={p50:.1f} ms, p95={p95:.1f} ms\n"
        f"  Total time: {total_elapsed:.2f} s\n"
    )
    print(summary)

    try:
        os.makedirs(os.path.dirname(args.output) or ".", exist_ok=True)
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(summary)
        print(f"Wrote {args.output}")
    except OSError:
        pass

    # Every accepted write archives exactly one snapshot
    return 0 if bad_rounds == 0 and errors == 0 and snapshots == wins else 1


def main() -> int:
    parser = argparse.ArgumentParser(description="Benchmark concurrent versioned updates")
    parser.add_argument("--writers", type=int, default=10, help="Concurrent writers per round")
    parser.add_argument("--rounds", type=int, default=20, help="Number of rounds")
    parser.add_argument("--auth", action="store_true", help="Authenticate via Keycloak")
    parser.add_argument(
        "--output", type=str, default="/results/bench_concurrent_update.txt", help="Output file path"
    )
    args = parser.parse_args()

    api_url = os.environ.get("API_URL", "http://localhost:8000").rstrip("/")
    headers = {"Content-Type": "application/json"}
    if args.auth:
        print("Getting token...")
        token = get_token(
            os.environ.get("KEYCLOAK_URL", "http://localhost:8080"),
            os.environ.get("KEYCLOAK_REALM", "protoledger"),
            os.environ.get("KEYCLOAK_CLIENT_ID", "protoledger-api"),
            os.environ.get("KEYCLOAK_CLIENT_SECRET", "protoledger-api-secret"),
            os.environ.get("BENCH_USER", "testuser"),
            os.environ.get("BENCH_PASSWORD", "testpass"),
        )
        headers["Authorization"] = f"Bearer {token}"

    return asyncio.run(run(args, api_url, headers))


if __name__ == "__main__":
    sys.exit(main())
