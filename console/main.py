"""Main entry point for the terminal blackjack client."""

import asyncio
import logging
import sys

from config import config
from console.client import GameServerClient
from console.display import ConsoleDisplay
from core.errors import GameError
from core.game import BlackjackTable, GameState
from core.rules import TableRules


PROMPTS = {
    GameState.PLAYER_TURN: "[h]it, [s]tand or [q]uit: ",
    GameState.ROUND_RESOLVED: "[r]etry dealing the next round or [q]uit: ",
}


async def _ask(prompt: str) -> str:
    """Read a line without blocking the event loop."""
    return (await asyncio.to_thread(input, prompt)).strip().lower()


class Application:
    """Prompt loop around one table."""

    def __init__(self, table: BlackjackTable) -> None:
        self.table = table
        self.running = True

    async def _step(self) -> None:
        state = self.table.state

        if state == GameState.AWAITING_ENTRY:
            name = await _ask("Game name: ")
            await self.table.enter(name)
            return

        choice = await _ask(PROMPTS.get(state, "> "))
        if choice in ("q", "quit"):
            self.running = False
        elif state == GameState.PLAYER_TURN and choice in ("h", "hit"):
            await self.table.hit()
        elif state == GameState.PLAYER_TURN and choice in ("s", "stand"):
            await self.table.stand()
        elif state == GameState.ROUND_RESOLVED and choice in ("r", "retry"):
            await self.table.start_next_round()

    async def run(self) -> None:
        """Main application loop."""
        while self.running:
            try:
                await self._step()
            except GameError as e:
                print(f"Request failed ({e.kind}): {e.detail}")
            except ValueError as e:
                print(f"Unusable server response: {e}")
            except (EOFError, KeyboardInterrupt):
                self.running = False


async def _main() -> None:
    display = ConsoleDisplay()
    async with GameServerClient() as server:
        table = BlackjackTable(server, display, rules=TableRules.from_config())
        await Application(table).run()


def main() -> None:
    """Entry point for the console client."""
    logging.basicConfig(level=config.log_level, stream=sys.stderr)
    asyncio.run(_main())


if __name__ == "__main__":
    main()
