"""Blackjack table rules."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TableRules:
    """
    House rules applied by the round state machine.

    The defaults reproduce the classic table: the dealer draws below 17
    and a tied total goes to the dealer.
    """

    # Dealer keeps drawing while below this total
    dealer_stand_threshold: int = 17

    # Target total; above it a pile is bust
    blackjack_total: int = 21

    # Equal unbusted totals resolve in the dealer's favor
    ties_go_to_dealer: bool = True

    def __post_init__(self) -> None:
        if self.dealer_stand_threshold < 1:
            raise ValueError("Dealer stand threshold must be positive")
        if self.dealer_stand_threshold > self.blackjack_total:
            raise ValueError("Dealer stand threshold cannot exceed the blackjack total")

    @classmethod
    def from_config(cls) -> "TableRules":
        """Build rules from the application configuration."""
        from config import config

        return cls(
            dealer_stand_threshold=config.game.dealer_stand_threshold,
            ties_go_to_dealer=config.game.ties_go_to_dealer,
        )
