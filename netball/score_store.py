"""In-memory store of official quarter scores."""

import logging
from collections import defaultdict
from typing import Iterable, Optional

from .schemas import ScoreRecord

logger = logging.getLogger('netball.score_store')


class ScoreStore:
    """Official scores keyed by (game, team, quarter).

    This is the authoritative match ledger; stat records are only a fallback.
    """

    def __init__(self, records: Optional[Iterable[ScoreRecord]] = None):
        self._records: dict[tuple[int, int, int], ScoreRecord] = {}
        if records:
            self.load(records)

    def load(self, records: Iterable[ScoreRecord]) -> int:
        count = 0
        for record in records:
            self._records[record.key] = record
            count += 1
        logger.debug(f'Loaded {count} score records')
        return count

    def upsert_score(self, game_id: int, team_id: int, quarter: int, score: int) -> ScoreRecord:
        """
        Create or replace a team's official score for one quarter.

        Raises:
            ValueError: If quarter is outside 1-4 or score is negative
        """
        record = ScoreRecord(game_id=game_id, team_id=team_id, quarter=quarter, score=score)
        self._records[record.key] = record
        logger.debug(f'Score game {game_id} team {team_id} Q{quarter} = {score}')
        return record

    def get_scores(self, game_id: int) -> list[ScoreRecord]:
        return [r for r in self._records.values() if r.game_id == game_id]

    def delete_game(self, game_id: int) -> int:
        keys = [k for k in self._records if k[0] == game_id]
        for key in keys:
            del self._records[key]
        return len(keys)

    def scores_by_game(self) -> dict[int, list[ScoreRecord]]:
        grouped: dict[int, list[ScoreRecord]] = defaultdict(list)
        for record in self._records.values():
            grouped[record.game_id].append(record)
        return dict(grouped)

    def __len__(self) -> int:
        return len(self._records)
