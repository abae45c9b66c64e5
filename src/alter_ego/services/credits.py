"""Credit ledger for paid generations."""

import logging
from dataclasses import dataclass, field

from alter_ego.services.notifications import Notifier
from alter_ego.services.storage import (
    CREDITS_KEY,
    UNLIMITED_KEY,
    KeyValueStore,
    load_value,
    save_value,
)

DEFAULT_CREDITS = 18

_logger = logging.getLogger(__name__)


@dataclass
class CreditLedger:
    """Integer credit balance with an unlimited (pro) override.

    ``debit`` does not re-check the balance; callers gate it with
    ``can_afford`` so that a debit and its refund always cancel out.
    """

    store: KeyValueStore
    notifier: Notifier
    default_credits: int = DEFAULT_CREDITS
    credit_packs: dict[str, int] = field(default_factory=dict)
    pro_sku: str | None = None
    balance: int = field(init=False, default=0)
    is_unlimited: bool = field(init=False, default=False)

    def __post_init__(self) -> None:
        self.balance = self.default_credits

    def hydrate(self) -> None:
        """Load the balance and unlimited flag, falling back to defaults."""
        balance = load_value(self.store, CREDITS_KEY)
        if isinstance(balance, int) and not isinstance(balance, bool):
            self.balance = balance
        else:
            if balance is not None:
                _logger.warning("Ignoring invalid stored credits: %r", balance)
            self.balance = self.default_credits
        unlimited = load_value(self.store, UNLIMITED_KEY)
        self.is_unlimited = unlimited if isinstance(unlimited, bool) else False

    def can_afford(self, cost: int) -> bool:
        return self.is_unlimited or self.balance >= cost

    def debit(self, cost: int) -> None:
        if self.is_unlimited:
            return
        self.balance -= cost
        self._persist_balance()

    def credit(self, amount: int) -> None:
        """Return credits to the balance, used for cancellation refunds."""
        if self.is_unlimited:
            return
        self.balance += amount
        self._persist_balance()

    def grant(self, amount: int) -> None:
        """Add purchased credits, regardless of the unlimited flag."""
        self.balance += amount
        self._persist_balance()

    def purchase(self, sku: str) -> int:
        """Apply a verified purchase and return the credits it added."""
        if self.pro_sku is not None and sku == self.pro_sku:
            self.set_unlimited(True)
            self.notifier.success("Welcome to PRO!")
            return 0
        amount = self.credit_packs.get(sku)
        if amount is None:
            _logger.warning("Unknown purchase sku: %s", sku)
            return 0
        self.grant(amount)
        self.notifier.success(f"{amount} credits added!")
        return amount

    def set_unlimited(self, is_unlimited: bool) -> None:
        self.is_unlimited = is_unlimited
        save_value(
            self.store,
            UNLIMITED_KEY,
            is_unlimited,
            self.notifier,
            "Could not save your subscription status.",
        )

    def _persist_balance(self) -> None:
        save_value(
            self.store,
            CREDITS_KEY,
            self.balance,
            self.notifier,
            "Could not save your credit balance.",
        )
