"""
Locust Load Test Suite

Start the API with STRIPE_USE_STUB=true so no real checkout sessions are created.

Run scenarios:
  locust -f locustfile.py --tags replay     # Test idempotent booking writes
  locust -f locustfile.py --tags checkout   # Test checkout throughput
  locust -f locustfile.py --tags edge       # Test bad input
  locust -f locustfile.py                   # All tests
"""

import random
import string
from locust import HttpUser, task, between, tag

MOVIES = ["Dune", "Arrival", "Interstellar", "Parasite", "RRR", "Jawan"]

# Shared state
SESSION_IDS = []


def random_user_id():
    return "u_" + "".join(random.choices(string.ascii_lowercase, k=8))


class ReplayUser(HttpUser):
    """
    TEST 1: Idempotency - many clients post the same checkout session

    Run: locust -f locustfile.py --tags replay -u 100 -r 50 --run-time 30s

    After test, verify:
      SELECT checkout_session_id, COUNT(*) FROM bookings
      GROUP BY checkout_session_id HAVING COUNT(*) > 1;
    Should return no rows
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        self.user_id = random_user_id()
        resp = self.client.post("/payment", json={
            "amount": 250,
            "movieTitle": random.choice(MOVIES),
            "userId": self.user_id,
        })
        if resp.status_code == 200:
            SESSION_IDS.append(resp.json()["sessionId"])

    @tag("replay")
    @task
    def record_shared_session(self):
        """All users race to record a booking for the same few sessions."""
        if not SESSION_IDS:
            return

        with self.client.post("/api/bookings",
            json={
                "userId": self.user_id,
                "movieTitle": "Dune",
                "amount": 250,
                "checkoutSessionId": random.choice(SESSION_IDS[:5]),
            },
            name="/api/bookings [replay]",
            catch_response=True
        ) as resp:
            if resp.status_code in (200, 201):
                resp.success()
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class CheckoutUser(HttpUser):
    """
    TEST 2: Checkout throughput

    Run: locust -f locustfile.py --tags checkout -u 100 -r 20 --run-time 60s

    Compare P95/P99 of /payment against payment_gateway_latency_seconds
    on /metrics to separate gateway time from our own overhead.
    """
    wait_time = between(0.1, 0.5)

    @tag("checkout")
    @task(5)
    def start_checkout(self):
        self.client.post("/payment", json={
            "amount": round(random.uniform(100, 600), 2),
            "movieTitle": random.choice(MOVIES),
            "userId": random_user_id(),
        })

    @tag("checkout")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    System should NOT crash, return proper error codes.
    """
    wait_time = between(0.5, 1.5)

    def _expect(self, resp, codes):
        if resp.status_code in codes:
            resp.success()
        else:
            resp.failure(f"Expected {codes}, got {resp.status_code}")

    @tag("edge")
    @task
    def missing_booking_fields(self):
        with self.client.post("/api/bookings",
            json={"movieTitle": "Dune"},
            catch_response=True
        ) as resp:
            self._expect(resp, [400])

    @tag("edge")
    @task
    def negative_amount(self):
        with self.client.post("/api/bookings",
            json={"userId": "u1", "movieTitle": "Dune", "amount": -5},
            catch_response=True
        ) as resp:
            self._expect(resp, [400])

    @tag("edge")
    @task
    def zero_checkout_amount(self):
        with self.client.post("/payment",
            json={"amount": 0},
            catch_response=True
        ) as resp:
            self._expect(resp, [400])

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post("/api/bookings",
            data="not json at all",
            headers={"Content-Type": "application/json"},
            catch_response=True
        ) as resp:
            self._expect(resp, [400])

    @tag("edge")
    @task
    def unsigned_webhook(self):
        with self.client.post("/api/webhooks/stripe",
            data="{}",
            catch_response=True
        ) as resp:
            self._expect(resp, [400, 500])


class RealisticUser(HttpUser):
    """
    TEST 4: Realistic mixed workload

    Run: locust -f locustfile.py -u 200 -r 20 --run-time 120s

    Checkout, then record the booking the way the front end does after
    the success redirect, then look at past bookings.
    """
    wait_time = between(1, 3)

    def on_start(self):
        self.user_id = random_user_id()

    @task(10)
    def buy_ticket(self):
        movie = random.choice(MOVIES)
        amount = random.choice([180, 250, 320])
        resp = self.client.post("/payment", json={
            "amount": amount,
            "movieTitle": movie,
            "userId": self.user_id,
        })
        if resp.status_code != 200:
            return
        self.client.post("/api/bookings", json={
            "userId": self.user_id,
            "movieTitle": movie,
            "amount": amount,
            "checkoutSessionId": resp.json()["sessionId"],
        })

    @task(5)
    def my_bookings(self):
        self.client.get("/api/bookings", params={"userId": self.user_id},
            name="/api/bookings?userId")
