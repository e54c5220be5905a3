#!/usr/bin/env python3
"""
Seed script: creates demo users, wishlists and items via the API (no direct DB).
Needs a running API and an admin account (see scripts/create_admin.py) to
approve the new registrations. Some users reserve each other's items so the
lifecycle shows up in the UI.
  python scripts/seed_data.py --admin-email admin@example.com --admin-password s3cret
  python scripts/seed_data.py --users 20 --items-per-wishlist 8
"""

import argparse
import random

import httpx

API_BASE = "http://localhost:8000/api/v1"

WISHLISTS = ["Birthday", "Holidays", "Housewarming", "Just because"]

ITEMS = [
    ("Mechanical keyboard", 89.0), ("Wireless mouse", 25.5), ("Bluetooth headphones", 120.0),
    ("27 inch monitor", 249.0), ("Coffee maker", 65.0), ("Electric kettle", 35.0),
    ("Air fryer", 99.0), ("Backpack", 55.0), ("Smart watch", 199.0), ("Power bank", 30.0),
    ("Python cookbook", 42.0), ("Board game", 38.0), ("Yoga mat", 20.0), ("Plant pot", 15.0),
    ("Desk lamp", 45.0), ("Tripod", 27.0), ("Cast iron pan", 48.0), ("Puzzle 1000 pcs", 18.0),
]

PASSWORD = "password123"


def login(client: httpx.Client, email: str, password: str) -> dict | None:
    r = client.post("/auth/login", json={"email": email, "password": password})
    if r.status_code != 200:
        return None
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


def main():
    ap = argparse.ArgumentParser(description="Seed users, wishlists and items via API")
    ap.add_argument("--users", type=int, default=10, help="Number of users to create")
    ap.add_argument("--wishlists-per-user", type=int, default=2)
    ap.add_argument("--items-per-wishlist", type=int, default=5)
    ap.add_argument("--admin-email", required=True)
    ap.add_argument("--admin-password", required=True)
    ap.add_argument("--base-url", default=API_BASE, help="API base URL")
    args = ap.parse_args()

    errors = []
    sessions = []
    item_ids = []

    with httpx.Client(base_url=args.base_url, timeout=30.0) as client:
        admin_headers = login(client, args.admin_email, args.admin_password)
        if not admin_headers:
            raise SystemExit(f"Admin login failed for {args.admin_email}")

        # 1) Register and approve
        print(f"Registering {args.users} users...")
        for i in range(args.users):
            email = f"user{i + 1}@example.com"
            r = client.post(
                "/auth/register",
                json={"email": email, "password": PASSWORD, "name": f"User {i + 1}"},
            )
            if r.status_code == 201:
                user_id = r.json()["user"]["id"]
                approve = client.post(f"/users/{user_id}/approve", headers=admin_headers)
                if approve.status_code != 200:
                    errors.append(f"Approve {email}: {approve.status_code}")
            elif r.status_code != 409:
                errors.append(f"Register {email}: {r.status_code} {r.text[:80]}")
                continue
            headers = login(client, email, PASSWORD)
            if headers:
                sessions.append((email, headers))
            else:
                errors.append(f"Login {email} failed")

        # 2) Wishlists and items
        print(f"Creating wishlists for {len(sessions)} users...")
        for email, headers in sessions:
            for name in random.sample(WISHLISTS, k=min(args.wishlists_per_user, len(WISHLISTS))):
                r = client.post("/wishlists", headers=headers, json={"name": name})
                if r.status_code != 201:
                    errors.append(f"Wishlist {email}: {r.status_code}")
                    continue
                wishlist_id = r.json()["id"]
                for title, price in random.sample(ITEMS, k=min(args.items_per_wishlist, len(ITEMS))):
                    r2 = client.post(
                        "/items",
                        headers=headers,
                        json={"wishlist_id": wishlist_id, "name": title, "price": price},
                    )
                    if r2.status_code == 201:
                        item_ids.append(r2.json()["id"])
                    else:
                        errors.append(f"Item {email}: {r2.status_code}")

        # 3) A few reservations and purchases between friends
        reserved = purchased = 0
        for item_id in random.sample(item_ids, k=len(item_ids) // 4):
            _, headers = random.choice(sessions)
            if random.random() < 0.5:
                reserved += client.post(f"/items/{item_id}/reserve", headers=headers).status_code == 200
            else:
                purchased += client.put(f"/items/{item_id}/purchase", headers=headers).status_code == 200

    print(f"\nDone. Users: {len(sessions)}, Items: {len(item_ids)}, "
          f"Reserved: {reserved}, Purchased: {purchased}")
    if errors:
        print(f"Errors ({len(errors)}):")
        for e in errors[:15]:
            print("  ", e)
        if len(errors) > 15:
            print("  ... and", len(errors) - 15, "more")


if __name__ == "__main__":
    main()
