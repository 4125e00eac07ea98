"""
Position history: the ordered log of applied moves.

Each record keeps the move in SAN, who played it, the squares it touched
(for last-move highlighting) and the FEN of the resulting position. The log
is append-only except for truncate_last(), which undo uses to drop a whole
turn pair from the tail.
"""

from dataclasses import dataclass

from engine.rules import AppliedMove, Side


@dataclass(frozen=True)
class LastMove:
    """Origin and destination of the most recent move, for highlighting."""

    origin: str
    destination: str


@dataclass(frozen=True)
class MoveRecord:
    notation: str
    mover: Side
    origin: str
    destination: str
    fen: str

    @classmethod
    def from_applied(cls, applied: AppliedMove) -> "MoveRecord":
        return cls(
            notation=applied.san,
            mover=applied.mover,
            origin=applied.origin,
            destination=applied.destination,
            fen=applied.fen,
        )

    @property
    def last_move(self) -> LastMove:
        return LastMove(origin=self.origin, destination=self.destination)


class PositionHistory:
    """
    Oldest-first list of MoveRecords.

    After a completed human/computer turn pair the length is even. An odd
    length is only expected mid-turn or when the game ended on the human's
    ply.
    """

    def __init__(self) -> None:
        self._records: list[MoveRecord] = []

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self):
        return iter(self._records)

    def append(self, record: MoveRecord) -> None:
        self._records.append(record)

    def truncate_last(self, n: int) -> int:
        """
        Remove up to n records from the tail.

        Returns:
            How many records were actually removed (0 if history was empty).
        """
        if n < 0:
            raise ValueError(f"cannot truncate a negative count: {n}")
        removed = min(n, len(self._records))
        if removed:
            del self._records[-removed:]
        return removed

    def tail(self) -> MoveRecord | None:
        return self._records[-1] if self._records else None

    def all(self) -> tuple[MoveRecord, ...]:
        return tuple(self._records)

    def clear(self) -> None:
        self._records.clear()

    @property
    def last_move(self) -> LastMove | None:
        """Marker derived from the tail record; None when history is empty."""
        record = self.tail()
        return record.last_move if record is not None else None
