"""First-in, first-out matchmaking of players grouped in brackets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Hashable, List, Optional, Set, Tuple

from gamechain.common import Bracket, BracketCounter, EventLog, MatchMaker


@dataclass
class BracketRange:
    """Start and end counters of a bracket's queue."""

    start: BracketCounter = 0
    end: BracketCounter = 0


@dataclass(frozen=True)
class Queued:
    """A player was queued for a match."""

    account_id: Hashable


@dataclass(frozen=True)
class Matched:
    """Players were matched and removed from the queue."""

    players: Tuple[Hashable, ...]


class MatchMaking(MatchMaker):
    """Queues players per bracket and matches them in arrival order."""

    def __init__(self, events: Optional[EventLog] = None) -> None:
        self.events = events if events is not None else EventLog()
        self._ranges: Dict[Bracket, BracketRange] = {}
        self._players: Dict[Bracket, Dict[BracketCounter, Hashable]] = {}
        self._queued: Set[Hashable] = set()

    def _range(self, bracket: Bracket) -> BracketRange:
        return self._ranges.setdefault(bracket, BracketRange())

    def enqueue(self, account_id, bracket: Bracket) -> bool:
        """Queue an account in a bracket; False if it is queued anywhere already."""
        if self.is_queued(account_id):
            return False
        bracket_range = self._range(bracket)
        self._players.setdefault(bracket, {})[bracket_range.end] = account_id
        bracket_range.end += 1
        self._queued.add(account_id)
        self.events.deposit(Queued(account_id))
        return True

    def clear_queue(self, bracket: Bracket) -> None:
        """Remove every player queued in a bracket."""
        for account_id in self._players.pop(bracket, {}).values():
            self._queued.discard(account_id)

    def is_queued(self, account_id) -> bool:
        """Whether the account is queued in any bracket."""
        return account_id in self._queued

    def queued_players(self, bracket: Bracket) -> List[Hashable]:
        """Players queued in a bracket, in arrival order."""
        slots = self._players.get(bracket, {})
        return [slots[counter] for counter in sorted(slots)]

    def try_match(self, bracket: Bracket, number_required: int) -> Optional[List[Hashable]]:
        """Take up to ``number_required`` players from the front of a bracket.

        Returns None when fewer players than required are queued.
        """
        if not 0 <= number_required <= 255:
            raise ValueError("number_required must be in 0..=255")
        slots = self._players.get(bracket, {})
        if len(slots) < number_required:
            return None

        start = self._range(bracket).start
        players: List[Hashable] = []
        for offset in range(number_required):
            player = slots.pop(start + offset, None)
            if player is None:
                continue
            self._queued.discard(player)
            players.append(player)
        if not slots:
            self._players.pop(bracket, None)

        self._range(bracket).start += len(players)
        self.events.deposit(Matched(tuple(players)))
        return players