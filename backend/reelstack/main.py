"""Reelstack FastAPI application."""
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from reelstack.config import game_config, settings
from reelstack.config_hash import get_config_hash
from reelstack.errors import ErrorCode, GameError
from reelstack.logic.engine import GameEngine
from reelstack.middleware import ErrorHandlerMiddleware, PlayerIdMiddleware
from reelstack.protocol import InitResponse, SpinRequest, SpinResponse
from reelstack.redis_service import redis_service
from reelstack.telemetry import (
    InitServedEvent,
    SpinProcessedEvent,
    SpinRejectedEvent,
    telemetry_service,
)
from reelstack.validators import validate_funds, validate_spin_request


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage Redis connection lifecycle."""
    await redis_service.connect()
    yield
    await redis_service.close()


app = FastAPI(
    title="Reelstack",
    version="0.1.0",
    description="Payline slot game server",
    debug=settings.debug,
    lifespan=lifespan,
)

app.add_middleware(ErrorHandlerMiddleware)
app.add_middleware(PlayerIdMiddleware)

# Game engine instance; ProductionRNG keeps no shared seed state
engine = GameEngine(game_config)


@app.get("/health")
async def health() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}


@app.get("/init")
async def init(request: Request) -> dict:
    """Return game configuration and the player's current balance."""
    player_id = request.state.player_id
    balance = await redis_service.get_balance(player_id)

    response = InitResponse(balance=float(balance))

    telemetry_service.emit_init_served(
        InitServedEvent(
            player_id=player_id,
            balance=float(balance),
            config_hash=get_config_hash(),
        )
    )

    return response.model_dump()


@app.post("/spin")
async def spin(request: Request, body: SpinRequest) -> dict:
    """
    Run one spin for the player.

    Implements:
    - Request validation
    - Idempotency (same clientRequestId returns cached response)
    - Per-player locking (ROUND_IN_PROGRESS on concurrent spin)
    - Balance debit before the grid is generated, payout credit after
    """
    player_id = request.state.player_id

    # 1) Validate request
    validate_spin_request(body)

    payload = {"betAmount": str(body.betAmount.normalize())}

    # 2) Fast path: replayed request, no telemetry on replay
    cached = await redis_service.check_idempotency(
        player_id, body.clientRequestId, payload
    )
    if cached is not None:
        return cached

    lock_start = time.monotonic()
    try:
        async with redis_service.player_lock(player_id) as lock_metrics:
            # 3) Re-check inside lock (slow path - correctness)
            cached = await redis_service.check_idempotency(
                player_id, body.clientRequestId, payload
            )
            if cached is not None:
                return cached

            # 4) Debit
            balance = await redis_service.get_balance(player_id)
            validate_funds(balance, body.betAmount)
            balance -= body.betAmount

            # 5) Evaluate
            result = engine.spin(body.betAmount)

            # 6) Credit
            balance += result.total_win
            await redis_service.save_balance(player_id, balance)

            round_id = str(uuid.uuid4())
            response_dict = SpinResponse.from_result(round_id, result, balance).model_dump()

            await redis_service.store_idempotency(
                player_id, body.clientRequestId, payload, response_dict
            )

            telemetry_service.emit_spin_processed(
                SpinProcessedEvent(
                    player_id=player_id,
                    client_request_id=body.clientRequestId,
                    round_id=round_id,
                    bet_amount=float(result.bet_amount),
                    total_win=float(result.total_win),
                    win_line_count=len(result.win_lines),
                    bonus_triggered=result.bonus_triggered,
                    balance_after=float(balance),
                    lock_acquire_ms=lock_metrics.acquire_ms,
                    config_hash=get_config_hash(),
                )
            )

            return response_dict

    except GameError as e:
        if e.code in (ErrorCode.ROUND_IN_PROGRESS, ErrorCode.INSUFFICIENT_FUNDS):
            telemetry_service.emit_spin_rejected(
                SpinRejectedEvent(
                    player_id=player_id,
                    client_request_id=body.clientRequestId,
                    reason=e.code.value,
                    lock_acquire_ms=(time.monotonic() - lock_start) * 1000,
                )
            )
        raise
