import threading
import time

from tarneeb.game import GameEngine
from tarneeb.observable import StateSlot
from tarneeb.rules_schema import EngineConfig
from tarneeb.state import GamePhase


def test_slot_delivers_in_publish_order():
    slot = StateSlot()
    seen = []
    unsubscribe = slot.subscribe(seen.append)

    slot.set(1)
    slot.set(2)
    unsubscribe()
    slot.set(3)

    assert seen == [None, 1, 2]
    assert slot.get() == 3
    assert slot.version == 3


def test_subscribe_without_replay():
    slot = StateSlot(initial="ready")
    seen = []
    slot.subscribe(seen.append, replay=False)

    assert seen == []
    slot.set("go")
    assert seen == ["go"]


def test_engine_publishes_each_transition():
    engine = GameEngine(EngineConfig(seed=2))
    views = []
    engine.state.subscribe(views.append, replay=False)

    game = engine.initialize_default_game("Alice/Charlie(AI)", "Bob/David(AI)")
    assert [view.phase for view in views] == [GamePhase.BIDDING]
    assert views[-1].valid_bids == tuple(range(2, 14))

    engine.place_bid(game, 0, 3)
    engine.place_bid(game, 2, 4)

    phases = [view.phase for view in views]
    assert phases[-1] is GamePhase.PLAYING
    assert phases.index(GamePhase.PLAYING) == len(phases) - 1
    assert [len(view.bids) for view in views[:-1]] == [0, 1, 2, 3, 4]
    assert engine.state.version == len(views)


def test_views_are_frozen_snapshots():
    engine = GameEngine(EngineConfig(seed=2))
    game = engine.initialize_default_game("Alice/Charlie(AI)", "Bob/David(AI)")
    before = engine.snapshot()

    engine.place_bid(game, 0, 4)

    assert before.bids == ()
    assert before.current_player == 0
    assert engine.snapshot().highest_bid == 4
    assert engine.snapshot() is not before


def test_error_slot_notifies_observers():
    engine = GameEngine(EngineConfig(seed=2))
    game = engine.initialize_default_game("Alice/Charlie(AI)", "Bob/David(AI)")
    errors = []
    engine.errors.subscribe(errors.append, replay=False)

    engine.place_bid(game, 1, 2)
    engine.clear_error()

    assert errors[0].player_index == 1
    assert errors[1] is None


def test_concurrent_bidders_see_whole_transitions():
    engine = GameEngine(EngineConfig(seed=8))
    game = engine.initialize_default_game("Ann/Ben", "Cat/Dov")
    views = []
    first_version = engine.state.version
    engine.state.subscribe(views.append, replay=False)
    start = threading.Barrier(4)
    placed = []

    def bidder(seat):
        start.wait()
        deadline = time.monotonic() + 10
        while time.monotonic() < deadline:
            if any(bid.player_id == seat for bid in engine.snapshot().bids):
                return
            valid = engine.get_valid_bids(seat)
            if valid:
                placed.append(engine.place_bid(game, seat, valid[0]))
            else:
                engine.place_bid(game, len(game.players), 2)

    threads = [threading.Thread(target=bidder, args=(seat,)) for seat in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert placed == [True, True, True, True]
    counts = [len(view.bids) for view in views]
    assert counts == sorted(counts)
    assert counts == [1, 2, 3, 4, 4]
    for view in views:
        if view.phase is GamePhase.BIDDING:
            assert view.current_player == len(view.bids)
    assert views[-1].phase is GamePhase.PLAYING
    assert engine.state.version == first_version + len(views)
