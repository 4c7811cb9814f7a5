"""Integration tests for the identity endpoints via TestClient."""

import re

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from caviar.identity.api import router as identity_router
from caviar.notifications.channel import get_channel
from caviar.shared.http import register_error_handlers


@pytest.fixture()
def client():
    app = FastAPI()
    register_error_handlers(app)
    app.include_router(identity_router)
    return TestClient(app)


def _latest_code(telegram_id):
    return re.search(r"\d{6}", get_channel("telegram").messages_for(telegram_id)[-1]).group(0)


class TestIdentityApi:
    def test_register(self, client):
        response = client.post("/users", json={"telegram_id": 7001, "first_name": "Roman"})
        assert response.status_code == 201
        assert response.json()["user_id"]

    def test_register_requires_contact(self, client):
        response = client.post("/users", json={"first_name": "Roman"})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_INPUT"

    def test_login_round_trip(self, client):
        client.post("/users", json={"telegram_id": 7001, "first_name": "Roman"})

        assert client.post("/auth/otp/request", json={"telegram_id": 7001}).status_code == 200

        response = client.post("/auth/otp/verify", json={"telegram_id": 7001, "code": _latest_code(7001)})
        assert response.status_code == 200
        assert response.json()["first_name"] == "Roman"

    def test_request_for_unknown_user(self, client):
        response = client.post("/auth/otp/request", json={"telegram_id": 1})
        assert response.status_code == 404

    def test_wrong_code_is_unauthorized(self, client):
        client.post("/users", json={"telegram_id": 7001})
        client.post("/auth/otp/request", json={"telegram_id": 7001})
        wrong = "111111" if _latest_code(7001) == "000000" else "000000"

        response = client.post("/auth/otp/verify", json={"telegram_id": 7001, "code": wrong})
        assert response.status_code == 401
        assert response.json() == {"error": {"code": "UNAUTHORIZED", "message": "invalid OTP code"}}

    def test_duplicate_chat_account(self, client):
        client.post("/users", json={"telegram_id": 7001})
        response = client.post("/users", json={"telegram_id": 7001})
        assert response.status_code == 400
