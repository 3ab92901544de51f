"""
example from: http://www.glicko.net/glicko/glicko2.pdf
"""
import math
import itertools
import pytest
import numpy as np
from skillrate import Glicko2, Glicko2Config, InvalidInputError, NumericDivergenceError, RatingPeriodResults


def glickman_example(tau=0.5, **kwargs):
    model = Glicko2(initial_volatility=0.06, tau=tau, **kwargs)
    players = [
        model.create_rating(rating=1500.0, rating_deviation=200.0),  # the main player of the example
        model.create_rating(rating=1400.0, rating_deviation=30.0),
        model.create_rating(rating=1550.0, rating_deviation=100.0),
        model.create_rating(rating=1700.0, rating_deviation=300.0),
        model.create_rating(),  # registered but sits the period out
    ]
    results = RatingPeriodResults()
    results.add_participant(players[4])
    return model, results, players


def add_example_results(results, players, order=(0, 1, 2)):
    matches = [
        (players[0], players[1]),  # player 0 beats player 1
        (players[2], players[0]),  # player 2 beats player 0
        (players[3], players[0]),  # player 3 beats player 0
    ]
    for idx in order:
        results.add_result(*matches[idx])


def test_scaling():
    _, _, players = glickman_example()
    assert players[0].mu == pytest.approx(0.0, abs=1e-5)
    assert players[0].phi == pytest.approx(1.1513, abs=1e-4)


def test_glicko2():
    model, results, players = glickman_example()
    add_example_results(results, players)
    model.update_ratings(results)
    assert players[0].rating == pytest.approx(1464.06, abs=0.01)
    assert players[0].rating_deviation == pytest.approx(151.52, abs=0.01)
    assert players[0].volatility == pytest.approx(0.05999, abs=1e-4)
    assert players[0].num_results == 3


def test_intermediate_quantities():
    # Glickman rounds to 4 decimal places at each step of the example
    model, results, players = glickman_example()
    add_example_results(results, players)
    match_results = list(results.results_for(players[0]))
    gs, probs, scores = model.opponent_terms(players[0], match_results)
    assert gs == pytest.approx([0.9955, 0.9531, 0.7242], abs=1e-4)
    assert probs == pytest.approx([0.639, 0.432, 0.303], abs=1e-3)
    assert list(scores) == [1.0, 0.0, 0.0]
    v = model.compute_v(gs, probs)
    delta = v * model.compute_grad(gs, probs, scores)
    assert v == pytest.approx(1.7785, abs=1e-3)
    assert delta == pytest.approx(-0.4834, abs=1e-3)
    sigma_prime = model.get_sigma_prime(phi=players[0].phi, delta=delta, v=v, sigma=0.06)
    assert sigma_prime == pytest.approx(0.05999, abs=1e-5)


def test_passive_decay():
    model, results, players = glickman_example()
    add_example_results(results, players)
    model.update_ratings(results)
    assert players[4].rating == model.default_rating
    assert players[4].volatility == model.default_volatility
    assert players[4].rating_deviation > model.default_rating_deviation
    assert players[4].num_results == 0


def test_opponents_are_rated_against_pre_period_values():
    model, results, players = glickman_example()
    expected = model.expected_score(players[1], players[0])
    add_example_results(results, players)
    model.update_ratings(results)
    # player 1 lost their only match, so they drop and their volatility barely moves
    assert players[1].rating < 1400.0
    assert players[1].num_results == 1
    assert players[2].rating > 1550.0
    assert players[3].rating > 1700.0
    assert 0.0 < expected < 0.5


@pytest.mark.parametrize('order', list(itertools.permutations(range(3))))
def test_order_independence(order):
    model, results, players = glickman_example()
    add_example_results(results, players)
    model.update_ratings(results)

    other_model, other_results, other_players = glickman_example()
    add_example_results(other_results, other_players, order=order)
    other_model.update_ratings(other_results)

    for player, other_player in zip(players, other_players):
        assert player.rating == other_player.rating
        assert player.rating_deviation == other_player.rating_deviation
        assert player.volatility == other_player.volatility


def test_compute_updates_does_not_touch_ratings():
    model, results, players = glickman_example()
    add_example_results(results, players)
    before = [(p.rating, p.rating_deviation, p.volatility) for p in players]
    updates = model.compute_updates(results)
    assert [(p.rating, p.rating_deviation, p.volatility) for p in players] == before
    assert len(results) == 3
    assert set(updates) == set(players)
    model.commit(updates)
    assert players[0].rating == pytest.approx(1464.06, abs=0.01)


def test_results_cleared_then_passive_only():
    model, results, players = glickman_example()
    add_example_results(results, players)
    model.update_ratings(results)
    assert len(results) == 0

    before = [(p.rating, p.rating_deviation, p.volatility, p.num_results) for p in players]
    model.update_ratings(results)
    for player, (rating, rating_dev, volatility, num_results) in zip(players, before):
        assert player.rating == pytest.approx(rating, abs=1e-9)
        assert player.volatility == volatility
        assert player.num_results == num_results
        expected_rd = math.sqrt(rating_dev**2.0 + (volatility * 173.7178) ** 2.0)
        assert player.rating_deviation == pytest.approx(expected_rd, rel=1e-12)
        assert player.rating_deviation > rating_dev


def test_draw_between_equals_leaves_rating():
    model = Glicko2()
    player_1 = model.create_rating()
    player_2 = model.create_rating()
    results = RatingPeriodResults()
    results.add_draw(player_1, player_2)
    model.update_ratings(results)
    assert player_1.rating == pytest.approx(1500.0, abs=1e-9)
    assert player_2.rating == pytest.approx(1500.0, abs=1e-9)
    assert player_1.rating_deviation < 350.0


def test_solver_terminates_over_plausible_range():
    model = Glicko2(tau=0.5)
    opponent_ratings = [1300.0, 1500.0, 1800.0]
    for rating_dev in np.linspace(30.0, 500.0, num=8):
        for volatility in np.linspace(0.01, 0.1, num=5):
            for rating in (1000.0, 1500.0, 2200.0):
                for won in (True, False):
                    player = model.create_rating(rating=rating, rating_deviation=rating_dev, volatility=volatility)
                    opponents = [model.create_rating(rating=r, rating_deviation=rating_dev) for r in opponent_ratings]
                    results = RatingPeriodResults()
                    for opponent in opponents:
                        if won:
                            results.add_result(player, opponent)
                        else:
                            results.add_result(opponent, player)
                    state = model.compute_new_state(player, list(results.results_for(player)))
                    assert math.isfinite(state.sigma) and state.sigma > 0.0
                    assert math.isfinite(state.phi) and state.phi > 0.0
                    assert math.isfinite(state.mu)


def test_iteration_cap_raises():
    model, results, players = glickman_example(max_iterations=1)
    add_example_results(results, players)
    with pytest.raises(NumericDivergenceError):
        model.update_ratings(results)
    # nothing was committed
    assert players[0].rating == 1500.0
    assert len(results) == 3


def test_degenerate_variance_raises():
    model = Glicko2()
    player = model.create_rating(rating=1500.0, rating_deviation=50.0)
    opponent = model.create_rating(rating=1_000_000.0, rating_deviation=50.0)
    results = RatingPeriodResults()
    results.add_result(opponent, player)
    with pytest.raises(NumericDivergenceError):
        model.update_ratings(results)


def test_defaults_and_config():
    model = Glicko2(initial_volatility=0.05, tau=0.3, initial_rating=1200.0, initial_rd=250.0)
    assert model.default_rating == 1200.0
    assert model.default_rating_deviation == 250.0
    assert model.default_volatility == 0.05
    rating = model.create_rating(rating_deviation=100.0)
    assert (rating.rating, rating.rating_deviation, rating.volatility) == (1200.0, 100.0, 0.05)

    clone = Glicko2.from_config(model.config)
    assert clone.config == model.config
    assert Glicko2().config == Glicko2Config()


@pytest.mark.parametrize('kwargs', [{'tau': 0.0}, {'epsilon': -1e-6}, {'initial_rd': 0.0}, {'max_iterations': 0}])
def test_invalid_config(kwargs):
    with pytest.raises(InvalidInputError):
        Glicko2(**kwargs)


def test_expected_score_and_predict_agree():
    model, _, players = glickman_example()
    matchups = np.array([[0, 1], [0, 2], [0, 3], [1, 0]])
    probs = model.predict(players, matchups)
    for (idx_1, idx_2), prob in zip(matchups, probs):
        assert prob == pytest.approx(model.expected_score(players[idx_1], players[idx_2]), rel=1e-12)
    assert model.expected_score(players[4], model.create_rating()) == pytest.approx(0.5)


def test_solver_settings_come_from_config():
    model = Glicko2(tau=0.3, epsilon=1e-8, max_iterations=50)
    assert (model.tau, model.epsilon, model.max_iterations) == (0.3, 1e-8, 50)
    assert model.tau2 == pytest.approx(0.09)
    with pytest.raises(AttributeError):
        model.tau = 0.9
    assert model.config.tau == 0.3


class ScriptedGlicko2(Glicko2):
    """replaces the volatility objective with a fixed function of x"""

    def __init__(self, objective, **kwargs):
        super().__init__(**kwargs)
        self.objective = objective
        self.evaluated = []

    def f(self, x, delta2, phi2, v, a):
        self.evaluated.append(x)
        return self.objective(x)


# with sigma=1, phi=1, v=1 and delta=0 the solve starts from A = 0 and brackets at B = -0.5 when tau = 0.5


def test_solver_stops_on_exact_root():
    model = ScriptedGlicko2(lambda x: -x - 0.25, tau=0.5)
    sigma_prime = model.get_sigma_prime(phi=1.0, delta=0.0, v=1.0, sigma=1.0)
    assert sigma_prime == pytest.approx(math.exp(-0.125))
    assert model.evaluated[-1] == -0.25


def test_solver_bisects_when_secant_is_flat():
    def objective(x):
        if x in (0.0, -0.5):
            return 1.0
        return -x - 0.25

    model = ScriptedGlicko2(objective, tau=0.5)
    sigma_prime = model.get_sigma_prime(phi=1.0, delta=0.0, v=1.0, sigma=1.0)
    # f(A) == f(B) so the first step is the midpoint, which happens to be the root
    assert model.evaluated[-1] == -0.25
    assert sigma_prime == pytest.approx(math.exp(-0.125))
