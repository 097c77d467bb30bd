"""Balance storage and insufficient-funds handling."""
import uuid
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from reelstack.config import settings
from reelstack.errors import ErrorCode, GameError
from reelstack.validators import validate_funds


PLAYER_ID = "test-player-wallet"
BALANCE_KEY = f"balance:player:{PLAYER_ID}"


def make_spin_request(bet_amount: float = 1.00) -> dict:
    return {"clientRequestId": str(uuid.uuid4()), "betAmount": bet_amount}


class TestInsufficientFunds:

    def test_spin_rejected_when_balance_below_bet(
        self, client_with_mock_redis: TestClient, mock_redis
    ):
        mock_redis._store[BALANCE_KEY] = "0.05"

        response = client_with_mock_redis.post(
            "/spin", headers={"X-Player-Id": PLAYER_ID}, json=make_spin_request(0.10)
        )

        assert response.status_code == 402
        error = response.json()["error"]
        assert error["code"] == "INSUFFICIENT_FUNDS"
        assert error["recoverable"] is True
        assert mock_redis._store[BALANCE_KEY] == "0.05"

    def test_exact_balance_is_enough(self, client_with_mock_redis: TestClient, mock_redis):
        mock_redis._store[BALANCE_KEY] = "0.10"
        response = client_with_mock_redis.post(
            "/spin", headers={"X-Player-Id": PLAYER_ID}, json=make_spin_request(0.10)
        )
        assert response.status_code == 200
        assert response.json()["balance"] == pytest.approx(
            response.json()["outcome"]["totalWin"]
        )

    def test_rejection_emits_telemetry(
        self, client_with_mock_redis: TestClient, mock_redis, recording_sink
    ):
        mock_redis._store[BALANCE_KEY] = "0"
        request = make_spin_request(1.00)
        client_with_mock_redis.post("/spin", headers={"X-Player-Id": PLAYER_ID}, json=request)

        rejected = recording_sink.named("spin_rejected")
        assert len(rejected) == 1
        assert rejected[0]["reason"] == "INSUFFICIENT_FUNDS"
        assert rejected[0]["client_request_id"] == request["clientRequestId"]

    def test_lock_released_after_rejection(
        self, client_with_mock_redis: TestClient, mock_redis
    ):
        mock_redis._store[BALANCE_KEY] = "0"
        client_with_mock_redis.post(
            "/spin", headers={"X-Player-Id": PLAYER_ID}, json=make_spin_request()
        )
        assert f"lock:player:{PLAYER_ID}" not in mock_redis._store


class TestBalanceStorage:

    @pytest.mark.asyncio
    async def test_new_player_gets_starting_balance(self, redis_service_with_mock):
        balance = await redis_service_with_mock.get_balance("new-player")
        assert balance == settings.starting_balance

    @pytest.mark.asyncio
    async def test_balance_round_trips_as_exact_decimal(self, redis_service_with_mock, mock_redis):
        await redis_service_with_mock.save_balance("p1", Decimal("199.30"))

        assert mock_redis._store["balance:player:p1"] == "199.30"
        assert await redis_service_with_mock.get_balance("p1") == Decimal("199.30")


class TestValidateFunds:

    def test_accepts_covered_bet(self):
        validate_funds(Decimal("1.00"), Decimal("1"))

    def test_rejects_uncovered_bet(self):
        with pytest.raises(GameError) as exc_info:
            validate_funds(Decimal("0.99"), Decimal("1"))
        assert exc_info.value.code == ErrorCode.INSUFFICIENT_FUNDS
        assert exc_info.value.status_code == 402
