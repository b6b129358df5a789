"""Constants and enumerations for netball roster and statistics handling."""

from enum import Enum


class Position(str, Enum):
    """Court positions, declared in court order."""

    GS = 'GS'
    GA = 'GA'
    WA = 'WA'
    C = 'C'
    WD = 'WD'
    GD = 'GD'
    GK = 'GK'


class PositionGroup(str, Enum):
    """Court units a position belongs to."""

    ATTACK = 'attack'
    MID = 'mid'
    DEFENSE = 'defense'


class GameStatus(str, Enum):
    """Lifecycle status of a game."""

    UPCOMING = 'upcoming'
    IN_PROGRESS = 'in-progress'
    COMPLETED = 'completed'
    FORFEIT_WIN = 'forfeit-win'
    FORFEIT_LOSS = 'forfeit-loss'
    BYE = 'bye'
    ABANDONED = 'abandoned'


QUARTERS = (1, 2, 3, 4)

# Statuses that finish a game (a result exists)
COMPLETED_STATUSES = frozenset(
    {GameStatus.COMPLETED, GameStatus.FORFEIT_WIN, GameStatus.FORFEIT_LOSS}
)

# Statuses whose games carry statistics unless the game says otherwise
STATISTICS_STATUSES = frozenset(
    {GameStatus.COMPLETED, GameStatus.FORFEIT_WIN, GameStatus.FORFEIT_LOSS}
)

# Goals awarded in the first quarter of a forfeited game
FORFEIT_GOALS = 10

# Raw counters carried by every stat record, in display order
STAT_COUNTERS = (
    'goals_for',
    'goals_against',
    'missed_goals',
    'rebounds',
    'intercepts',
    'bad_pass',
    'handling_error',
    'pick_up',
    'infringement',
)

# Counters that mean something for each court unit
GROUP_COUNTERS = {
    PositionGroup.ATTACK: (
        'goals_for',
        'missed_goals',
        'rebounds',
        'intercepts',
        'bad_pass',
        'handling_error',
        'infringement',
    ),
    PositionGroup.MID: (
        'intercepts',
        'bad_pass',
        'handling_error',
        'pick_up',
        'infringement',
    ),
    PositionGroup.DEFENSE: (
        'goals_against',
        'rebounds',
        'intercepts',
        'bad_pass',
        'handling_error',
        'pick_up',
        'infringement',
    ),
}

RECONCILIATION_STRATEGIES = ('home-priority', 'away-priority', 'higher', 'lower', 'average')
