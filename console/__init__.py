"""Terminal front end for the blackjack server."""
