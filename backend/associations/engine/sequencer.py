from typing import Sequence, Tuple

from .models import Contestant, Team


def build_order(teams: Sequence[Team], players_per_team: int) -> Tuple[Contestant, ...]:
    """Build the round-robin contestant order across teams.

    Teams are visited 0, 1, ..., N-1, 0, 1, ... and the player index moves
    forward each time the cycle returns to team 0, so contestant ``k`` is
    ``teams[k % N].players[(k // N) % len(team.players)]``. With more than
    one team, two consecutive contestants never share a team.

    The order has ``len(teams) * players_per_team`` entries and is never
    rebuilt; callers wrap their cursor around it. Every team must have at
    least one player.
    """
    team_count = len(teams)
    order = []
    for k in range(team_count * players_per_team):
        team_pos = k % team_count
        team = teams[team_pos]
        player = team.players[(k // team_count) % len(team.players)]
        order.append(Contestant(
            name=player.name,
            id=player.id,
            team_index=team_pos + 1,
            team_color_id=team.color_id,
            team=team,
        ))
    return tuple(order)
