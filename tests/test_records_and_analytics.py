import json

from tarneeb.analytics import round_statistics
from tarneeb.game import GameEngine
from tarneeb.records import GameRecord, to_record
from tarneeb.rules_schema import EngineConfig, GameMode, RuleSet
from tarneeb.scoring import score_round


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        self.now += 0.25
        return self.now


def test_record_of_finished_game():
    config = EngineConfig(rules=RuleSet(max_rounds=1), seed=9, auto_advance_rounds=True)
    engine = GameEngine(config, clock=FakeClock())
    game = engine.initialize_default_game("North(AI)/South(AI)", "East(AI)/West(AI)")

    record = to_record(game)

    assert record.game_id == game.id
    assert record.team1_name == "North(AI)/South(AI)"
    assert record.winning_team_id == game.winning_team_id
    assert record.total_rounds == game.total_rounds
    assert record.game_mode == "contract"
    assert record.duration_ms == 250
    assert record.player_count == 4
    assert (record.team1_score, record.team2_score) == tuple(team.score for team in game.teams)


def test_record_round_trips_through_json():
    engine = GameEngine(EngineConfig(seed=9))
    game = engine.initialize_default_game("Alice", "Bob")

    record = to_record(game)
    data = json.loads(record.model_dump_json())

    assert data["winning_team_id"] is None
    assert data["duration_ms"] == 0
    assert GameRecord.model_validate(data) == record


def sample_result():
    return score_round(
        RuleSet.for_mode(GameMode.TARNEEB_41),
        round_number=3,
        player_teams={0: 1, 1: 1, 2: 2, 3: 2},
        player_bids={0: 4, 1: 3, 2: 3, 3: 2},
        player_tricks={0: 6, 1: 3, 2: 2, 3: 2},
        contract_player=0,
        contract_amount=4,
        prior_scores={1: 10, 2: 10},
    )


def test_round_statistics():
    stats = round_statistics(sample_result())

    assert stats.round_number == 3
    assert stats.bid_success_rate == 0.5
    assert stats.total_bids == 12
    assert stats.trick_difference == 5
    assert stats.is_dominant
    assert not stats.is_close
    assert stats.best_player == 0
    assert stats.most_accurate_bidder == 1
    assert stats.leading_team == 1


def test_round_statistics_summary():
    summary = round_statistics(sample_result()).summary()

    assert summary.splitlines()[0] == "Round #3"
    assert "Bid success rate: 50%" in summary
    assert "Dominant win: True" in summary
    assert "Best player: seat 0" in summary
