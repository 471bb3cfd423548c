#!/usr/bin/env python3
# This project was developed with assistance from AI tools.
"""Live smoke suite for the Rekro Rentals API.

Validates health, profile and completeness, the application lifecycle,
snapshots, and RFC 7807 error bodies against a running server instance.

Prerequisites:
  - API server running on localhost:8000 with AUTH_DISABLED=true
  - At least one property in the catalog (pass its id with --property-id)

Usage:
  ./scripts/live-tests.py --property-id 1
  ./scripts/live-tests.py --property-id 1 --section form
"""

import argparse
import asyncio
import sys

import httpx

from rekro_api.client import ApplicationsClient
from rekro_api.core.errors import AuthorizationError
from rekro_api.services.form_session import RentalFormSession

BASE = "http://localhost:8000"
HEADERS = {"Origin": "http://localhost:3000"}

# ---------------------------------------------------------------------------
# Test runner
# ---------------------------------------------------------------------------

PASS = 0
FAIL = 0
ERRORS: list[str] = []
SECTION = ""


def section(name: str):
    global SECTION
    SECTION = name
    print(f"\n{'=' * 60}")
    print(f"  {name}")
    print(f"{'=' * 60}\n")


def ok(name: str, passed: bool, detail: str = ""):
    global PASS, FAIL
    if passed:
        PASS += 1
        print(f"  PASS  {name}")
    else:
        FAIL += 1
        msg = f"[{SECTION}] {name}: {detail}" if detail else f"[{SECTION}] {name}"
        ERRORS.append(msg)
        print(f"  FAIL  {name} -- {detail}")


def has_keys(d: dict, *keys: str) -> bool:
    return all(k in d for k in keys)


# ---------------------------------------------------------------------------
# 1. Health
# ---------------------------------------------------------------------------

async def test_health(c: httpx.AsyncClient):
    section("Health")

    r = await c.get("/health/")
    ok("GET /health/ returns 200", r.status_code == 200)
    data = r.json()
    ok("contains API service", any(s.get("name") == "API" for s in data))
    ok("database is healthy",
       any(s.get("name") == "Database" and s.get("status") == "healthy" for s in data))


# ---------------------------------------------------------------------------
# 2. Profile and completeness
# ---------------------------------------------------------------------------

async def test_profile(c: httpx.AsyncClient):
    section("Profile and Completeness")

    r = await c.get("/api/profile/")
    ok("GET /api/profile/ returns 200", r.status_code == 200)
    ok("profile has intent and documents", has_keys(r.json(), "intent", "documents"))

    r = await c.patch("/api/profile/", json={"is_citizen": True, "preferred_locality": "Carlton"})
    ok("PATCH profile returns 200", r.status_code == 200)

    r = await c.put("/api/profile/documents/passport", json={"path": "live/passport.pdf"})
    ok("register passport returns 200", r.status_code == 200)

    r = await c.get("/api/profile/completion")
    ok("GET completion returns 200", r.status_code == 200)
    report = r.json()
    ok("report has five sections", len(report.get("sections", [])) == 5)
    residency = next((s for s in report["sections"] if s["id"] == "visa-details"), {})
    ok("residency complete for citizen with passport", residency.get("percentage") == 100,
       f"got {residency.get('percentage')}")

    r = await c.put("/api/profile/documents/selfie", json={"path": "x.png"})
    ok("unknown document type returns 400", r.status_code == 400)


# ---------------------------------------------------------------------------
# 3. Application lifecycle
# ---------------------------------------------------------------------------

async def test_application_lifecycle(c: httpx.AsyncClient, property_id: int):
    section("Application Lifecycle")

    payload = {
        "property_id": property_id,
        "application_type": "individual",
        "move_in_date": "2026-12-01",
        "rental_duration": 12,
        "proposed_rent": 400,
        "inclusions": {"bills": {"selected": True, "price": 20}},
    }
    r = await c.post("/api/applications/", json=payload)
    ok("create returns 201", r.status_code == 201, f"status={r.status_code}")
    if r.status_code != 201:
        return
    created = r.json()
    app_id = created["id"]
    ok("created app is submitted", created.get("status") == "submitted")
    ok("submitted_at is set", created.get("submitted_at") is not None)

    r = await c.post("/api/applications/", json={**payload, "id": app_id, "rental_duration": 6})
    ok("update returns 200", r.status_code == 200)
    ok("duration updated", r.json().get("rental_duration") == 6)

    r = await c.post(f"/api/applications/{app_id}/submit", json={"note": "live"})
    # The dev user's profile may be incomplete; both outcomes are valid here
    ok("submit returns 200 or 400", r.status_code in (200, 400), f"status={r.status_code}")
    if r.status_code == 200:
        ok("snapshot embeds current duration",
           r.json()["snapshot"]["snapshot"]["lease"]["rentalDuration"] == 6)

    r = await c.post(f"/api/applications/{app_id}/snapshots", json={"note": "manual"})
    ok("create snapshot returns 201", r.status_code == 201)

    r = await c.get(f"/api/applications/{app_id}/snapshots")
    ok("list snapshots returns 200", r.status_code == 200)
    ids = [s["id"] for s in r.json().get("data", [])]
    ok("snapshots newest first", ids == sorted(ids, reverse=True))

    r = await c.patch(f"/api/applications/{app_id}/status", json={"status": "approved"})
    ok("applicant cannot change status", r.status_code == 403)

    r = await c.post(f"/api/applications/{app_id}/withdraw", json={})
    ok("unconfirmed withdraw returns 400", r.status_code == 400)

    r = await c.post(f"/api/applications/{app_id}/withdraw", json={"confirm": True})
    ok("withdraw returns 200", r.status_code == 200)
    ok("status is withdrawn", r.json().get("status") == "withdrawn")

    r = await c.post(f"/api/applications/{app_id}/withdraw", json={"confirm": True})
    ok("second withdraw returns 422", r.status_code == 422)


# ---------------------------------------------------------------------------
# 4. Rental form session (auto-save through the client)
# ---------------------------------------------------------------------------

async def test_form_session(property_id: int):
    section("Rental Form Session")

    async with ApplicationsClient(BASE) as client:
        session = RentalFormSession(client, property_id=property_id, debounce_seconds=0.2)
        session.edit(rental_duration=9, proposed_rent="410")
        session.edit(message="Saved by the live suite")
        await asyncio.sleep(0.5)
        ok("debounced edits saved", session.application is not None)
        ok("no unsaved changes after save", not session.has_unsaved_changes)

        if session.application is not None:
            session.edit(rental_duration=3)
            ok("edit marks form dirty", session.has_unsaved_changes)
            saved = await session.save_now()
            ok("save_now persists edit", saved.rental_duration == 3)

            withdrawn = await session.withdraw(confirm=True)
            ok("session withdraw", withdrawn.status.value == "withdrawn")

        try:
            await client.update_status(999999, "approved")
            ok("reviewer-only route rejects applicant", False, "no error raised")
        except AuthorizationError:
            ok("reviewer-only route rejects applicant", True)
        await session.aclose()


# ---------------------------------------------------------------------------
# 5. Error handling
# ---------------------------------------------------------------------------

async def test_error_handling(c: httpx.AsyncClient):
    section("Error Handling (RFC 7807)")

    r = await c.get("/api/applications/99999")
    ok("404 status code", r.status_code == 404)
    body = r.json()
    ok("404 has problem fields", has_keys(body, "type", "title", "status", "detail"))
    ok("404 status field", body.get("status") == 404)

    r = await c.post("/api/applications/", json={"rental_duration": 12})
    ok("missing property returns 400", r.status_code == 400)

    r = await c.get("/api/nonexistent")
    ok("non-existent route returns 404", r.status_code == 404)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

async def main():
    parser = argparse.ArgumentParser(description="Live smoke suite for the Rekro Rentals API")
    parser.add_argument("--property-id", type=int, required=True,
                        help="Existing catalog property to apply for")
    parser.add_argument("--section", choices=["rest", "form", "all"], default="all",
                        help="Which sections to run")
    args = parser.parse_args()

    print("=" * 60)
    print("  LIVE TEST SUITE -- Rekro Rentals API")
    print("=" * 60)

    async with httpx.AsyncClient(base_url=BASE, headers=HEADERS, timeout=15) as c:
        try:
            r = await c.get("/health/")
            if r.status_code != 200:
                print(f"\n  Server returned {r.status_code} on /health/ -- is it running?")
                sys.exit(2)
        except httpx.ConnectError:
            print("\n  Cannot connect to server at localhost:8000 -- is it running?")
            sys.exit(2)

        if args.section in ("rest", "all"):
            await test_health(c)
            await test_profile(c)
            await test_application_lifecycle(c, args.property_id)
            await test_error_handling(c)

    if args.section in ("form", "all"):
        await test_form_session(args.property_id)

    print(f"\n{'=' * 60}")
    print(f"  RESULTS: {PASS} passed, {FAIL} failed")
    print(f"{'=' * 60}")

    if ERRORS:
        print("\nFailures:")
        for e in ERRORS:
            print(f"  - {e}")

    sys.exit(0 if FAIL == 0 else 1)


if __name__ == "__main__":
    asyncio.run(main())
