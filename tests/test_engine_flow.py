from bots.base import BotStrategy
from tarneeb.cards import Card, Rank, Suit
from tarneeb.errors import ErrorKind
from tarneeb.game import BidAction, GameEngine
from tarneeb.rules_schema import EngineConfig, RuleSet
from tarneeb.state import GamePhase

TEAM1 = "Alice/Charlie(AI)"
TEAM2 = "Bob/David(AI)"


def new_engine(seed=7, **rules):
    return GameEngine(EngineConfig(rules=RuleSet(**rules), seed=seed))


def start_scenario(seed=7):
    engine = new_engine(seed)
    game = engine.initialize_default_game(TEAM1, TEAM2)
    assert game is not None
    return engine, game


def bid_to_play(engine, game):
    assert engine.place_bid(game, 0, 3)
    assert engine.place_bid(game, 2, 4)
    assert game.phase is GamePhase.PLAYING


def suit_cards(suit, ranks=None):
    return [Card(rank, suit) for rank in (ranks or list(Rank))]


def test_roster_parsing_and_seating():
    engine, game = start_scenario()

    assert [player.name for player in game.players] == ["Alice", "Charlie", "Bob", "David"]
    assert [player.is_ai for player in game.players] == [False, True, False, True]
    assert [player.team_id for player in game.players] == [1, 1, 2, 2]
    assert all(len(player.hand) == 13 for player in game.players)
    assert game.phase is GamePhase.BIDDING
    assert engine.current_turn() == 0


def test_scenario_bob_team_holds_contract():
    engine, game = start_scenario()

    assert engine.place_bid(game, 0, 3)
    assert [(bid.player_id, bid.amount) for bid in game.current_round.bids] == [(0, 3), (1, 3)]
    assert engine.current_turn() == 2

    assert engine.place_bid(game, 2, 4)

    assert game.phase is GamePhase.PLAYING
    assert [bid.amount for bid in game.current_round.bids] == [3, 3, 4, 4]
    assert game.current_round.contract_player == 2
    assert game.current_round.contract_amount == 4
    assert game.team_of(game.current_round.contract_player).id == 2
    assert engine.current_turn() == 0

    view = engine.snapshot()
    assert view.phase is GamePhase.PLAYING
    assert view.contract_team == 2
    assert view.valid_cards == tuple(game.players[0].hand)


def test_every_offered_bid_is_accepted():
    engine, game = start_scenario()
    offered = engine.get_valid_bids(0)
    assert offered == list(range(2, 14))

    for amount in offered:
        engine, game = start_scenario()
        assert engine.place_bid(game, 0, amount)
        assert engine.errors.get() is None
        assert engine.get_valid_bids(2)[0] == amount


def test_out_of_turn_bid_rejected():
    engine, game = start_scenario()
    version = engine.state.version

    assert not engine.place_bid(game, 2, 4)

    error = engine.errors.get()
    assert error.kind is ErrorKind.NOT_YOUR_TURN
    assert error.player_index == 2
    assert engine.state.version == version
    assert game.current_round.bids == []


def test_illegal_bid_amount_rejected():
    engine, game = start_scenario()

    assert not engine.place_bid(game, 0, 1)
    assert engine.errors.get().kind is ErrorKind.ILLEGAL_BID
    assert not engine.place_bid(game, 0, 14)
    assert game.current_round.bids == []


def test_off_suit_play_rejected_and_hand_unchanged():
    engine, game = start_scenario()
    bid_to_play(engine, game)

    alice, charlie, bob, david = game.players
    alice.hand = sorted(suit_cards(Suit.CLUBS, list(Rank)[1:]) + [Card(Rank.TWO, Suit.HEARTS)])
    charlie.hand = sorted(suit_cards(Suit.DIAMONDS))
    bob.hand = sorted([Card(Rank.TWO, Suit.CLUBS)] + suit_cards(Suit.SPADES, list(Rank)[:-1]))
    david.hand = sorted(suit_cards(Suit.HEARTS, list(Rank)[1:]) + [Card(Rank.ACE, Suit.SPADES)])

    assert engine.play_card(game, 0, Card(Rank.KING, Suit.CLUBS))
    assert engine.current_turn() == 2
    assert engine.get_valid_cards(2) == [Card(Rank.TWO, Suit.CLUBS)]

    before = list(bob.hand)
    assert not engine.play_card(game, 2, Card(Rank.KING, Suit.SPADES))
    error = engine.errors.get()
    assert error.kind is ErrorKind.ILLEGAL_MOVE
    assert "follow" in error.message
    assert bob.hand == before
    assert engine.current_turn() == 2

    assert engine.play_card(game, 2, Card(Rank.TWO, Suit.CLUBS))
    assert len(bob.hand) == 12


def test_card_not_in_hand_rejected():
    engine, game = start_scenario()
    bid_to_play(engine, game)

    missing = game.players[1].hand[0]
    assert not engine.play_card(game, 0, missing)
    assert engine.errors.get().kind is ErrorKind.ILLEGAL_MOVE
    assert len(game.players[0].hand) == 13


def test_play_during_bidding_is_illegal_move():
    engine, game = start_scenario()
    card = game.players[0].hand[0]

    assert not engine.play_card(game, 0, card)
    assert engine.errors.get().kind is ErrorKind.ILLEGAL_MOVE
    assert not engine.next_round(game)
    assert engine.errors.get().kind is ErrorKind.ILLEGAL_MOVE


def test_foreign_game_not_started():
    _, game = start_scenario()
    other = new_engine()

    assert not other.place_bid(game, 0, 3)
    assert other.errors.get().kind is ErrorKind.GAME_NOT_STARTED
    assert other.get_valid_bids(0) == []
    assert other.current_turn() is None


def test_clear_error_is_idempotent():
    engine, game = start_scenario()
    engine.place_bid(game, 3, 2)
    assert engine.errors.get() is not None

    engine.clear_error()
    version = engine.errors.version
    engine.clear_error()

    assert engine.errors.get() is None
    assert engine.errors.version == version


def test_success_keeps_pending_error():
    engine, game = start_scenario()
    engine.place_bid(game, 3, 2)

    assert engine.place_bid(game, 0, 2)
    assert engine.errors.get().kind is ErrorKind.NOT_YOUR_TURN


def test_invalid_rosters_rejected():
    engine = new_engine()

    assert engine.initialize_default_game("", "Bob") is None
    assert engine.errors.get().kind is ErrorKind.INVALID_CONFIGURATION
    assert engine.initialize_default_game("Alice/Bob/Carol", "Dan") is None
    assert engine.initialize_default_game("Alice", "alice") is None
    assert engine.game is None

    strict = GameEngine(EngineConfig(fill_with_ai=False))
    assert strict.initialize_default_game("Alice", "Bob/Dan") is None
    assert strict.errors.get().kind is ErrorKind.INVALID_CONFIGURATION


def test_start_game_from_setup_dict():
    engine = new_engine()
    setup = {
        "team1": {"name": "Red", "players": [{"name": "Ann"}, {"name": "Ben", "is_ai": True}]},
        "team2": {"name": "Blue", "players": [{"name": "Cat"}, {"name": "Dov", "is_ai": True}]},
    }

    game = engine.start_game(setup)
    assert game is not None
    assert [team.name for team in game.teams] == ["Red", "Blue"]

    assert engine.start_game({"team1": {"name": "Red", "players": []}}) is None
    assert engine.errors.get().kind is ErrorKind.INVALID_CONFIGURATION


def test_select_next_action_only_for_ai():
    engine, game = start_scenario()

    assert engine.select_next_action(game, 0) is None
    engine.place_bid(game, 0, 5)
    assert engine.select_next_action(game, 1) is None

    game.players[2].is_ai = True
    action = engine.select_next_action(game, 2)
    assert action == BidAction(2, 5)


class OutOfRangeBidder(BotStrategy):
    def offer_bid(self, game, player, valid_bids):
        return 1


class WrongHandPlayer(BotStrategy):
    def play_card(self, game, player, legal):
        return game.players[game.next_seat(player)].hand[0]


def test_rejected_bot_bid_is_recorded():
    engine = GameEngine(EngineConfig(seed=7), bot=OutOfRangeBidder())
    game = engine.initialize_default_game(TEAM1, TEAM2)

    assert engine.place_bid(game, 0, 3)

    error = engine.errors.get()
    assert error.kind is ErrorKind.ILLEGAL_BID
    assert error.player_index == 1
    assert [(bid.player_id, bid.amount) for bid in game.current_round.bids] == [(0, 3)]
    assert engine.current_turn() == 1


def test_rejected_bot_play_is_recorded():
    engine = GameEngine(EngineConfig(seed=7), bot=WrongHandPlayer())
    game = engine.initialize_default_game(TEAM1, TEAM2)
    bid_to_play(engine, game)

    assert engine.play_card(game, 0, engine.get_valid_cards(0)[0])

    error = engine.errors.get()
    assert error.kind is ErrorKind.ILLEGAL_MOVE
    assert error.player_index == 1
    assert len(game.players[1].hand) == 13
    assert len(game.current_round.current_trick.plays) == 1
    assert engine.current_turn() == 1


def test_float_bid_rejected_by_engine():
    engine, game = start_scenario()

    assert not engine.place_bid(game, 0, 3.0)
    assert engine.errors.get().kind is ErrorKind.ILLEGAL_BID
    assert game.current_round.bids == []
