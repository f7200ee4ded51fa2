"""
Load profile for the API: mostly health probes, some welcome-page hits.

Run: locust -f locustfile.py --host http://localhost:8080
"""

from locust import HttpUser, between, task


class ApiUser(HttpUser):
    wait_time = between(1, 2)

    @task(3)
    def health(self):
        with self.client.get("/health", catch_response=True) as resp:
            if resp.status_code != 200 or resp.text != '{"status":"ok"}':
                resp.failure(f"unexpected health response: {resp.status_code} {resp.text!r}")

    @task
    def home(self):
        self.client.get("/")
