"""HTTP server for the blackjack game."""
