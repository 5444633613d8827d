#!/usr/bin/env python3
"""
run_demo.py - End-to-end demo for the shipping tracker API
- Registers/logs in a customer
- Creates a shipment and looks it up by tracking code (public)
- Advances the shipment until it is Delivered
- Lists the customer's shipments
"""

import argparse
import json
import os
import uuid
from typing import Any, Dict, List, Optional

import requests


class DemoRunner:
    def __init__(self, base_url: str):
        self.api_url = base_url.rstrip("/")
        self.email = f"demo-{uuid.uuid4().hex[:8]}@example.com"
        self.password = "P@ssw0rd!"
        self.token: Optional[str] = None

    # ---------- helpers ----------
    def show_step(self, title: str):
        print(f"\n=== {title} ===")

    def mask_token(self, token: Optional[str]) -> str:
        if not token:
            return "<none>"
        return token if len(token) <= 12 else f"{token[:8]}...{token[-6:]}"

    def auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    def call_api(
        self,
        method: str,
        path: str,
        data: Optional[Any] = None,
        auth: bool = False,
        expected_status: List[int] = [200],
        quiet: bool = False,
    ) -> Dict[str, Any]:
        url = f"{self.api_url}{path}"
        headers = self.auth_headers() if auth else {}
        if not quiet:
            print(f"\n-> {method} {url}")
            if auth:
                print(f"   Authorization: Bearer {self.mask_token(self.token)}")
            if data is not None:
                print(f"   Body: {json.dumps(data, indent=2)}")
        try:
            resp = requests.request(method, url, headers=headers, json=data, timeout=10)
        except requests.exceptions.RequestException as e:
            print(f"   Error: \033[91m{e}\033[0m")
            return {"status": None, "data": None, "error": str(e)}

        color = "\033[92m" if resp.status_code in expected_status else "\033[93m"
        try:
            js = resp.json()
        except ValueError:
            js = None
        if not quiet:
            print(f"   Status: {color}{resp.status_code}\033[0m")
            if js is not None:
                print(json.dumps(js, indent=2))
        return {"status": resp.status_code, "data": js}

    # ---------- flow ----------
    def run_demo(self):
        print("Starting Shipping Tracker Demo")
        print("=" * 50)

        self.show_step("Customer: register")
        self.call_api("POST", "/register", {"name": "Demo", "email": self.email, "password": self.password})
        self.show_step("Customer: login")
        r = self.call_api("POST", "/login", {"email": self.email, "password": self.password})
        self.token = (r.get("data") or {}).get("token")
        if not self.token:
            print("\033[91mLogin failed, stopping.\033[0m")
            return

        self.show_step("Customer: create shipment")
        r = self.call_api(
            "POST",
            "/shipments",
            {"toName": "Bob", "toAddress": "1 Rd", "weight": "2.5", "service": "Express"},
            auth=True,
        )
        tracking = ((r.get("data") or {}).get("shipment") or {}).get("tracking")
        if not tracking:
            print("\033[91mShipment creation failed, stopping.\033[0m")
            return
        print(f"Tracking code: {tracking}")

        self.show_step("Public: track shipment")
        self.call_api("GET", f"/shipments/{tracking}")

        self.show_step("Advance shipment to Delivered")
        status = None
        while status != "Delivered":
            r = self.call_api("POST", f"/shipments/{tracking}/advance", auth=True, quiet=True)
            shipment = (r.get("data") or {}).get("shipment")
            if not shipment:
                print(f"\033[91mAdvance failed ({r.get('status')}), stopping.\033[0m")
                return
            status = shipment["status"]
            print(f"  - {status}")

        self.show_step("Customer: my shipments")
        self.call_api("GET", "/my-shipments", auth=True)

        self.show_step("Unknown tracking code")
        self.call_api("GET", "/shipments/NOPE000000", expected_status=[404])

        print("\n\033[92m=== DEMO COMPLETE ===\033[0m")


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--base-url", default=os.getenv("TRACKER_API_URL", "http://localhost:4000/api"))
    args = ap.parse_args()
    DemoRunner(args.base_url).run_demo()


if __name__ == "__main__":
    main()
