"""Per-player rating state for the lifetime of a replay run."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Callable, Iterator, Mapping

from ratingbench.core.exceptions import CapacityExceededError
from ratingbench.core.types import PlayerId


class RatingStore:
    """
    Mapping from player id to that player's current rating state.

    Players are added lazily with ``default_factory()`` on first lookup and
    never removed. States are immutable values; the store only swaps them.
    """

    def __init__(
        self,
        default_factory: Callable[[], Any],
        max_players: int | None = None,
    ):
        """
        Initialize the store.

        Args:
            default_factory: Builds the state of a never-seen player
            max_players: Player budget; adding a player beyond it raises
                CapacityExceededError (None = unbounded)
        """
        if max_players is not None and max_players < 1:
            raise ValueError(f"max_players must be positive, got {max_players}")
        self.default_factory = default_factory
        self.max_players = max_players
        self._states: dict[PlayerId, Any] = {}

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, player: object) -> bool:
        return player in self._states

    def __iter__(self) -> Iterator[PlayerId]:
        return iter(self._states)

    def get(self, player: PlayerId) -> Any | None:
        """Current state, without creating one."""
        return self._states.get(player)

    def ensure_capacity(self, *players: PlayerId) -> None:
        """Raise CapacityExceededError if adding ``players`` would overflow."""
        if self.max_players is None:
            return
        new_players = [p for p in dict.fromkeys(players) if p not in self]
        if len(self._states) + len(new_players) > self.max_players:
            raise CapacityExceededError(self.max_players, new_players[-1])

    def get_or_create(self, player: PlayerId) -> Any:
        """Current state of ``player``, inserting the default if unseen."""
        state = self._states.get(player)
        if state is None:
            self.ensure_capacity(player)
            state = self.default_factory()
            self._states[player] = state
        return state

    def set(self, player: PlayerId, state: Any) -> None:
        """Replace the stored state of ``player``."""
        if player not in self._states:
            self.ensure_capacity(player)
        self._states[player] = state

    def set_pair(
        self, white: PlayerId, white_state: Any, black: PlayerId, black_state: Any
    ) -> None:
        """Replace the states of both players of a game in one write."""
        self.ensure_capacity(white, black)
        self._states.update(((white, white_state), (black, black_state)))

    def snapshot(self) -> Mapping[PlayerId, Any]:
        """Read-only copy of every player's state."""
        return MappingProxyType(dict(self._states))
