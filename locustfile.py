from locust import HttpUser, task, between
import random

# Small pools so the same IPs/devices recur and the fraud rules get exercised
IPS = [f"203.0.113.{i}" for i in range(40)]
DEVICES = [f"device-{i}" for i in range(60)]
PAYERS = [f"payer-{i}" for i in range(30)]


class FraudWatchUser(HttpUser):
    wait_time = between(1, 2)

    @task(5)
    def submit_transaction(self):
        self.client.post(
            "/api/transactions",
            json={
                "amount": round(random.uniform(1, 2000), 2),
                "ip": random.choice(IPS),
                "deviceId": random.choice(DEVICES),
                "payerId": random.choice(PAYERS),
            },
        )

    @task(1)
    def list_fraud_reports(self):
        self.client.get("/api/fraud-reports")
