import pytest

from associations.engine.models import Player, Team
from associations.engine.sequencer import build_order


def make_teams(team_count, size):
    return [
        Team(color_id=f'c{t}', players=tuple(Player(name=f't{t}p{p}', id=f't{t}p{p}') for p in range(size)))
        for t in range(team_count)
    ]


@pytest.mark.parametrize('team_count', [2, 3, 4])
@pytest.mark.parametrize('players_per_team', [1, 2, 3])
def test_no_two_consecutive_contestants_share_a_team(team_count, players_per_team):
    order = build_order(make_teams(team_count, players_per_team), players_per_team)
    assert len(order) == team_count * players_per_team
    for prev, cur in zip(order, order[1:]):
        assert prev.team_index != cur.team_index
    # wrapping around the order keeps the property too
    assert order[-1].team_index != order[0].team_index


@pytest.mark.parametrize('team_count,players_per_team', [(2, 2), (3, 2), (2, 3), (4, 1)])
def test_every_player_appears_once_per_cycle(team_count, players_per_team):
    teams = make_teams(team_count, players_per_team)
    order = build_order(teams, players_per_team)
    ids = [c.id for c in order]
    assert sorted(ids) == sorted(p.id for t in teams for p in t.players)


def test_round_robin_layout_and_team_context():
    teams = make_teams(2, 2)
    order = build_order(teams, 2)
    assert [c.id for c in order] == ['t0p0', 't1p0', 't0p1', 't1p1']
    assert [c.team_index for c in order] == [1, 2, 1, 2]
    assert order[1].team_color_id == 'c1'
    assert order[1].team is teams[1]


def test_smaller_team_wraps_its_players():
    teams = [make_teams(1, 3)[0], Team(color_id='solo', players=(Player(name='Solo', id='solo'),))]
    order = build_order(teams, 3)
    assert [c.id for c in order if c.team_index == 2] == ['solo', 'solo', 'solo']
    assert [c.id for c in order if c.team_index == 1] == ['t0p0', 't0p1', 't0p2']
