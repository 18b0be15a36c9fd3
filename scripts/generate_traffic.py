#!/usr/bin/env python3
"""
Traffic generator for the marketplace API.
Simulates shoppers browsing the catalog, searching, filling the cart,
checking out and booking providers.

The API serves a single placeholder identity, so every simulated shopper
shares the same cart and order history.
"""

import random
import threading
import time
from datetime import datetime, timedelta

import requests

API_URL = "http://localhost:8000"

SEARCH_TERMS = ["kente", "bronze", "carpenter", "hair", "pottery", "cleaning", "drum", "electric"]
SPECIALTIES = ["carpenter", "stylist", "electrician"]
CITIES = ["Lagos", "Abuja", "Ibadan", "Port Harcourt"]
SHIPPING_FEE = 2000

# Weight for actions
ACTION_WEIGHTS = {
    "browse": 0.35,
    "search": 0.2,
    "add_to_cart": 0.25,
    "checkout": 0.1,
    "book": 0.05,
    "view_orders": 0.05,
}


def log(message):
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    print(f"[{timestamp}] {message}")


class Shopper:
    def __init__(self, shopper_id):
        self.shopper_id = shopper_id
        self.products = []
        self.providers = []

    def _get(self, path, **params):
        return requests.get(f"{API_URL}{path}", params=params or None, timeout=5)

    def fetch_catalog(self):
        try:
            featured = random.random() < 0.3
            response = self._get("/api/products", **({"featured": "true"} if featured else {}))
            if response.status_code == 200:
                self.products = response.json()
            response = self._get("/api/providers", **({"category": random.choice(SPECIALTIES)}
                                                      if random.random() < 0.5 else {}))
            if response.status_code == 200:
                self.providers = response.json()
            log(f"Shopper {self.shopper_id}: Fetched {len(self.products)} products, "
                f"{len(self.providers)} providers")
            return True
        except requests.RequestException as e:
            log(f"Shopper {self.shopper_id}: Failed to fetch catalog - {e}")
        return False

    def browse(self):
        if not self.products:
            self.fetch_catalog()
        if not self.products:
            return False

        product = random.choice(self.products)
        try:
            response = self._get(f"/api/products/{product['id']}")
            if response.status_code == 200:
                log(f"Shopper {self.shopper_id}: Browsing {product['name']}")
                return True
        except requests.RequestException as e:
            log(f"Shopper {self.shopper_id}: Failed to browse product - {e}")
        return False

    def search(self):
        term = random.choice(SEARCH_TERMS)
        scope = random.choice(["all", "services", "products", "providers"])
        try:
            response = self._get("/api/search", q=term, type=scope)
            if response.status_code == 200:
                hits = sum(len(v) for v in response.json().values())
                log(f"Shopper {self.shopper_id}: Searched '{term}' in {scope} - {hits} hits")
                return True
        except requests.RequestException as e:
            log(f"Shopper {self.shopper_id}: Search failed - {e}")
        return False

    def add_to_cart(self):
        if not self.products:
            self.fetch_catalog()
        if not self.products:
            return False

        product = random.choice(self.products)
        try:
            response = requests.post(
                f"{API_URL}/api/cart",
                json={"productId": product["id"], "quantity": random.randint(1, 3)},
                timeout=5
            )
            if response.status_code == 201:
                log(f"Shopper {self.shopper_id}: Added {product['name']} to cart")
                return True
            log(f"Shopper {self.shopper_id}: Failed to add to cart - {response.status_code}")
        except requests.RequestException as e:
            log(f"Shopper {self.shopper_id}: Failed to add to cart - {e}")
        return False

    def checkout(self):
        try:
            summary = self._get("/api/cart/summary").json()
            if not summary["items"]:
                return False
            response = requests.post(
                f"{API_URL}/api/orders",
                json={
                    "total": summary["totalPrice"] + SHIPPING_FEE,
                    "shippingAddress": f"{random.randint(1, 99)} Marina Road, {random.choice(CITIES)}",
                },
                timeout=10
            )
            if response.status_code == 201:
                order = response.json()
                log(f"Shopper {self.shopper_id}: Checkout successful - Order {order['id']}")
                return True
            log(f"Shopper {self.shopper_id}: Checkout failed - {response.status_code}")
        except requests.RequestException as e:
            log(f"Shopper {self.shopper_id}: Checkout failed - {e}")
        return False

    def book(self):
        if not self.providers:
            self.fetch_catalog()
        if not self.providers:
            return False

        provider = random.choice(self.providers)
        scheduled = datetime.now() + timedelta(days=random.randint(1, 14))
        try:
            response = requests.post(
                f"{API_URL}/api/bookings",
                json={
                    "providerId": provider["id"],
                    "serviceDescription": f"{provider['specialty']} visit",
                    "scheduledDate": scheduled.replace(microsecond=0).isoformat(),
                    "totalCost": provider["rate"],
                },
                timeout=5
            )
            if response.status_code == 201:
                log(f"Shopper {self.shopper_id}: Booked {provider['businessName']}")
                return True
        except requests.RequestException as e:
            log(f"Shopper {self.shopper_id}: Booking failed - {e}")
        return False

    def view_orders(self):
        try:
            response = self._get("/api/orders")
            if response.status_code == 200:
                log(f"Shopper {self.shopper_id}: Viewing {len(response.json())} orders")
                return True
        except requests.RequestException as e:
            log(f"Shopper {self.shopper_id}: Failed to view orders - {e}")
        return False

    def random_action(self):
        action = random.choices(
            list(ACTION_WEIGHTS.keys()),
            weights=list(ACTION_WEIGHTS.values())
        )[0]
        return getattr(self, action)()


def shopper_session(shopper_id, duration_seconds):
    shopper = Shopper(shopper_id)
    end_time = time.time() + duration_seconds

    shopper.fetch_catalog()
    while time.time() < end_time:
        shopper.random_action()
        time.sleep(random.uniform(0.3, 1.2))


def generate_traffic(num_concurrent_users=5, session_duration=60):
    """Generate traffic with multiple concurrent shoppers"""
    log(f"Starting traffic generation with {num_concurrent_users} concurrent shoppers")
    log(f"Session duration: {session_duration} seconds")

    threads = []
    try:
        while True:
            while len([t for t in threads if t.is_alive()]) < num_concurrent_users:
                thread = threading.Thread(
                    target=shopper_session,
                    args=(f"shopper_{random.randint(1000, 9999)}", session_duration)
                )
                thread.start()
                threads.append(thread)
                time.sleep(random.uniform(0.5, 2))

            threads = [t for t in threads if t.is_alive()]
            time.sleep(5)

    except KeyboardInterrupt:
        log("\nStopping traffic generation...")
        for thread in threads:
            thread.join(timeout=10)
        log("Traffic generation stopped")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Generate traffic for the marketplace API")
    parser.add_argument("--users", type=int, default=5, help="Number of concurrent shoppers (default: 5)")
    parser.add_argument("--duration", type=int, default=60, help="Session duration in seconds (default: 60)")
    parser.add_argument("--url", type=str, default=API_URL, help="API URL (default: http://localhost:8000)")

    args = parser.parse_args()
    API_URL = args.url

    log("=" * 60)
    log("Marketplace Traffic Generator")
    log("=" * 60)
    log(f"API URL: {API_URL}")
    generate_traffic(args.users, args.duration)
