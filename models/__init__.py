# models/__init__.py

from .user import User
from .event import Event
from .team import Team
from .criterion import Criterion
from .score import Score
from .team_judge import TeamJudge, ASSIGNMENT_STATUSES
from .leaderboard_entry import LeaderboardEntry
