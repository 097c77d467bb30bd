"""Request validators."""
from decimal import Decimal

from reelstack.config import settings
from reelstack.errors import ErrorCode, GameError
from reelstack.protocol import SpinRequest


def validate_bet(request: SpinRequest) -> None:
    """Raises INVALID_BET if betAmount not in allowedBets."""
    if request.betAmount not in settings.allowed_bets:
        raise GameError(
            ErrorCode.INVALID_BET,
            f"Bet amount {request.betAmount} not allowed. "
            f"Allowed: {[str(bet) for bet in settings.allowed_bets]}",
        )


def validate_funds(balance: Decimal, bet_amount: Decimal) -> None:
    """Raises INSUFFICIENT_FUNDS if the balance cannot cover the bet."""
    if balance < bet_amount:
        raise GameError(
            ErrorCode.INSUFFICIENT_FUNDS,
            f"Balance {balance} is lower than bet {bet_amount}.",
        )


def validate_spin_request(request: SpinRequest) -> None:
    """Run all stateless validations on spin request."""
    validate_bet(request)
