from typing import Any, Dict, Iterable, List, Optional


class Scoreboard:
    """Leaderboard-facing team points, fed by score updates pushed from outside.

    Merging an update never touches the contestant order, the word pool or
    the timer.
    """

    def __init__(self, teams: Optional[Iterable[Any]] = None):
        self._teams: Dict[str, Dict[str, Any]] = {}
        for team in teams or ():
            self._teams[team.color_id] = {
                'colorId': team.color_id,
                'players': [p.to_dict() for p in team.players],
                'points': 0,
            }

    def merge(self, teams: Iterable[Dict[str, Any]]) -> None:
        for update in teams:
            color_id = update.get('colorId', update.get('color'))
            if color_id is None:
                continue
            entry = self._teams.setdefault(str(color_id), {'colorId': str(color_id), 'players': [], 'points': 0})
            if 'points' in update:
                entry['points'] = int(update.get('points') or 0)
            if 'players' in update:
                entry['players'] = [dict(p) for p in update['players']]

    def standings(self) -> List[Dict[str, Any]]:
        return sorted((dict(t) for t in self._teams.values()), key=lambda t: t['points'], reverse=True)
