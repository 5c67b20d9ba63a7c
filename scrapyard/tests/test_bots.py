"""
Tests for the action generator and autopilot policies.
"""

import pytest

from ..bots import FirstLegalPolicy, GreedyPolicy, HeuristicEvaluator, RandomPolicy
from ..engine_core.action import Action, ActionType
from ..engine_core.action_generator import ActionGenerator, legal_actions
from ..engine_core.state import GameMode, Position
from ..session import SessionManager


class TestActionGenerator:

    def test_exploration_actions(self, state, catalog):
        actions = legal_actions(catalog, state)

        assert Action.move(-1, 0) in actions
        assert Action.move(0, -1) in actions
        assert Action.interact() not in actions
        assert not any(a.action_type == ActionType.COMBAT_SKILL for a in actions)
        assert Action.repair() not in actions

    def test_affordable_modules(self, state, catalog):
        state.player.scrap = 120
        actions = ActionGenerator(catalog).generate(state)
        modules = {a.payload.module_id for a in actions if a.action_type == ActionType.BUY_MODULE}
        assert modules == {"hull_plating", "scanner"}

    def test_interact_offered_at_pod(self, state, catalog):
        state.player.position = Position(30, 30)
        assert Action.interact() in legal_actions(catalog, state)

    def test_combat_actions(self, state, catalog, nanite, start_combat):
        start_combat(state, nanite)
        actions = legal_actions(catalog, state)

        assert Action.combat_skill("LASER_SHOT") in actions
        assert Action.combat_skill("HACK") in actions
        assert Action.combat_shield() in actions
        assert Action.combat_recruit() in actions
        assert Action.move(-1, 0) not in actions

    def test_no_recruit_against_boss(self, state, catalog, nanite, start_combat):
        nanite.is_boss = True
        start_combat(state, nanite)
        assert Action.combat_recruit() not in legal_actions(catalog, state)

    def test_no_actions_when_over(self, state, catalog):
        state.mode = GameMode.GAME_OVER
        assert legal_actions(catalog, state) == []

    def test_generated_actions_apply(self, state, catalog, reducer):
        """Every generated exploration action is accepted by the reducer."""
        state.player.scrap = 500
        state.player.active_bot.set_hp(60)
        for action in legal_actions(catalog, state):
            result = reducer.apply(state, action)
            assert result.error_code != "WRONG_MODE"
            assert result.success, (action, result.error)


class TestPolicies:

    def test_random_policy(self, state, catalog):
        actions = legal_actions(catalog, state)
        decision = RandomPolicy(seed=1).select_action(state, actions)
        assert decision.action in actions

    def test_first_legal_policy(self, state, catalog):
        actions = legal_actions(catalog, state)
        assert FirstLegalPolicy().select_action(state, actions).action == actions[0]

    def test_empty_legal_actions(self, state):
        with pytest.raises(ValueError):
            RandomPolicy().select_action(state, [])

    def test_greedy_takes_quest_progress(self, state, catalog, reducer):
        state.player.position = Position(30, 30)
        policy = GreedyPolicy(reducer, seed=1)

        decision = policy.select_action(state, legal_actions(catalog, state))

        assert decision.action == Action.interact()

    def test_evaluator_terminal_states(self, state):
        evaluator = HeuristicEvaluator()
        state.mode = GameMode.VICTORY
        assert evaluator.evaluate(state).total_score == float("inf")
        state.mode = GameMode.GAME_OVER
        assert evaluator.evaluate(state).total_score == float("-inf")


class TestAutoplay:
    """Soak tests: unattended play keeps the state consistent."""

    @pytest.mark.parametrize("seed", [1, 2, 3])
    def test_random_soak(self, catalog, seed):
        manager = SessionManager(catalog=catalog)
        session = manager.create_session(seed=seed)
        generator = ActionGenerator(catalog)
        policy = RandomPolicy(seed=seed)

        for _ in range(300):
            if session.state.is_over:
                break
            legal = generator.generate(session.state)
            session.submit(policy.select_action(session.state, legal).action)
            session.settle()

            player = session.state.player
            assert len(player.team) <= 3
            for bot in player.all_bots:
                assert 0 <= bot.hp <= bot.max_hp
                assert bot.is_defeated == (bot.hp == 0)
                assert len(bot.active_skills) <= 3
                assert not set(bot.active_skills) & set(bot.stored_skills)
            if session.state.mode == GameMode.EXPLORING:
                assert not player.active_bot.is_defeated
