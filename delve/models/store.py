"""Entity store: ordered arena of entities addressed by integer index.

Index ``PLAYER`` (0) is the player for the whole session. Nothing may remove or
replace it; those are programming errors and are guarded with assertions.
Combat needs two entities from the same store at once, which ``pair`` provides
after checking the indices are distinct.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from .entities import Entity

PLAYER = 0


class EntityStore:
    def __init__(self, entities: Optional[Iterable[Entity]] = None):
        self._entities: List[Entity] = list(entities or [])

    # ------------------------------------------------------------------
    # Sequence protocol
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[Entity]:
        return iter(self._entities)

    def __getitem__(self, index: int) -> Entity:
        return self._entities[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EntityStore):
            return NotImplemented
        return self._entities == other._entities

    def __repr__(self) -> str:
        return f"<EntityStore size={len(self._entities)}>"

    @property
    def player(self) -> Entity:
        return self._entities[PLAYER]

    def indices(self) -> range:
        """Snapshot of valid indices; safe to iterate while entities mutate in place."""
        return range(len(self._entities))

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def append(self, entity: Entity) -> int:
        self._entities.append(entity)
        return len(self._entities) - 1

    def remove(self, index: int) -> Entity:
        """Remove and return the entity at ``index``, keeping the order of the rest."""
        assert index != PLAYER, "the player cannot be removed from the entity store"
        return self._entities.pop(index)

    def truncate_to_player(self) -> None:
        player = self._entities[PLAYER]
        del self._entities[PLAYER + 1 :]
        assert self._entities[PLAYER] is player

    def pair(self, first: int, second: int) -> Tuple[Entity, Entity]:
        """Return two distinct entities for an interaction such as an attack.

        Raises ValueError when both indices name the same entity: an entity can
        not be its own combat partner.
        """
        if first == second:
            raise ValueError(f"pair() needs two distinct indices, got {first} twice")
        return self._entities[first], self._entities[second]

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def blocking_at(self, x: int, y: int) -> bool:
        return any(e.blocks and e.pos() == (x, y) for e in self._entities)

    def is_blocked(self, x: int, y: int, game_map) -> bool:
        """Terrain or a blocking entity occupies (x, y)."""
        if game_map.is_blocked(x, y):
            return True
        return self.blocking_at(x, y)

    def fighter_at(self, x: int, y: int) -> Optional[int]:
        for index, e in enumerate(self._entities):
            if e.fighter is not None and e.pos() == (x, y):
                return index
        return None

    def item_at(self, x: int, y: int) -> Optional[int]:
        for index, e in enumerate(self._entities):
            if e.item is not None and e.pos() == (x, y):
                return index
        return None

    def named_at(self, name: str, x: int, y: int) -> Optional[int]:
        for index, e in enumerate(self._entities):
            if e.name == name and e.pos() == (x, y):
                return index
        return None

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def to_list(self) -> List[Dict[str, Any]]:
        return [e.to_dict() for e in self._entities]

    @classmethod
    def from_list(cls, rows: List[Dict[str, Any]]) -> "EntityStore":
        store = cls(Entity.from_dict(r) for r in rows)
        assert len(store) > 0 and store.player.is_player, "saved entity list must start with the player"
        return store


__all__ = ["EntityStore", "PLAYER"]
