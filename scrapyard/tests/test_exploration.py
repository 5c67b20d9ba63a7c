"""
Tests for exploration: movement, hazards, encounters, POIs, the quest
chain and camp management.
"""

import pytest

from ..engine_core.action import Action
from ..engine_core.exploration import (
    DERELICT_CLASSES,
    available_interaction,
    interaction_target,
)
from ..engine_core.state import (
    POI, Facing, GameMode, Position, QuestStage, Terrain,
)
from .helpers import ScriptedRandom


POD = Position(30, 30)


class TestMovement:
    """Tests for single-step movement."""

    def test_step_updates_position_and_facing(self, state, reducer):
        result = reducer.apply(state, Action.move(-1, 0))

        assert result.success
        player = result.new_state.player
        assert player.position == Position(1, 2)
        assert player.facing == Facing.LEFT
        assert player.stats.steps == 1
        assert result.new_state.turn_number == 1

        assert state.player.position == Position(2, 2)
        assert state.turn_number == 0

    def test_wall_turns_but_does_not_move(self, state, reducer, tile_finder):
        wall = tile_finder.terrain(Terrain.WALL)
        state.player.position = wall.offset(-1, 0)

        result = reducer.apply(state, Action.move(1, 0))

        assert not result.success
        assert result.error == "Path blocked."
        assert result.error_code == "INVALID_ACTION"
        assert result.halt_travel
        assert result.new_state.player.position == wall.offset(-1, 0)
        assert result.new_state.player.facing == Facing.RIGHT
        assert result.new_state.player.stats.steps == 0

    @pytest.mark.parametrize("dx,dy", [(1, 1), (0, 0), (2, 0)])
    def test_invalid_step(self, state, reducer, dx, dy):
        result = reducer.apply(state, Action.move(dx, dy))
        assert result.error_code == "INVALID_ACTION"
        assert result.new_state is None


class TestHazards:
    """Tests for acid pools."""

    def test_acid_damages_active_bot(self, state, reducer, tile_finder):
        acid = tile_finder.terrain(Terrain.ACID_POOL)
        state.player.position = acid.offset(-1, 0)

        result = reducer.apply(state, Action.move(1, 0))

        new = result.new_state
        assert result.success
        assert new.player.position == acid
        assert new.player.active_bot.hp == 90
        assert new.player.stats.damage_taken == 10
        assert new.message == "WARNING: Corrosive Environment Detected."

    def test_acid_disables_and_switches(self, state, reducer, tile_finder, make_bot):
        acid = tile_finder.terrain(Terrain.ACID_POOL)
        state.player.position = acid.offset(-1, 0)
        state.player.team.append(make_bot("tank", "Tanky"))
        state.player.active_bot.set_hp(10)

        result = reducer.apply(state, Action.move(1, 0))

        new = result.new_state
        assert new.player.team[0].is_defeated
        assert new.player.active_slot == 1
        assert new.player.stats.bots_lost == 1
        assert result.halt_travel
        assert new.mode == GameMode.EXPLORING

    def test_disabled_unit_ends_step(self, state, reducer, tile_finder, make_bot):
        """No encounter roll on the step that knocked the active bot out."""
        acid = tile_finder.terrain(Terrain.ACID_POOL)
        state.player.position = acid.offset(-1, 0)
        state.player.team.append(make_bot("tank", "Tanky"))
        state.player.active_bot.set_hp(10)
        state.rng = ScriptedRandom(0.0)

        result = reducer.apply(state, Action.move(1, 0))

        new = result.new_state
        assert new.mode == GameMode.EXPLORING
        assert new.encounter is None
        assert new.player.active_slot == 1
        assert not any(e.message.startswith("ALERT: ") for e in result.events)

    def test_acid_wipe_is_game_over(self, state, reducer, tile_finder):
        acid = tile_finder.terrain(Terrain.ACID_POOL)
        state.player.position = acid.offset(-1, 0)
        state.player.active_bot.set_hp(10)

        result = reducer.apply(state, Action.move(1, 0))

        assert result.new_state.mode == GameMode.GAME_OVER
        assert reducer.apply(result.new_state, Action.move(-1, 0)).error_code == "WRONG_MODE"


class TestEncounters:
    """Tests for random encounters."""

    def test_encounter_roll_starts_combat(self, state, reducer):
        state.rng = ScriptedRandom(0.0)

        result = reducer.apply(state, Action.move(-1, 0))

        new = result.new_state
        assert new.mode == GameMode.COMBAT
        assert new.enemy.enemy_type in {"SCRAP_DRONE", "HEAVY_MECH"}
        assert new.enemy.hp == new.enemy.max_hp
        assert result.halt_travel
        assert any(m.message.startswith("ALERT: ") for m in result.events)

    def test_encounter_chance(self, state, reducer, catalog):
        exploration = reducer.exploration
        far = Position(2, 2)

        assert exploration.encounter_chance(state, far) == pytest.approx(0.08)
        assert exploration.encounter_chance(state, POD.offset(3, 3)) == 0.0

        state.player.active_bot.modules.append(catalog.new_module("scanner"))
        assert exploration.encounter_chance(state, far) == pytest.approx(0.048)

        state.player.active_bot.set_hp(0)
        assert exploration.encounter_chance(state, far) == 0.0

    def test_spawn_table_by_level(self, state, reducer):
        """Higher-level bots meet the full roster with scaled hp."""
        state.player.active_bot.level = 4
        seen = set()
        for _ in range(200):
            enemy = reducer.exploration.generate_enemy(state)
            seen.add(enemy.enemy_type)
            if enemy.enemy_type == "JUNKER_BEHEMOTH":
                assert enemy.max_hp == 240
        assert seen == {"SCRAP_DRONE", "HEAVY_MECH", "NANITE_SWARM", "JUNKER_BEHEMOTH"}


class TestPOIs:
    """Tests for caches, derelicts and NPCs."""

    def test_cache_gives_scrap_once(self, state, reducer, tile_finder):
        cache = tile_finder.poi(POI.CACHE)
        state.player.position = cache

        result = reducer.apply(state, Action.interact())

        new = result.new_state
        assert 20 <= new.player.scrap <= 69
        assert new.player.stats.scrap_collected == new.player.scrap
        assert new.player.is_visited(cache)
        assert new.message.startswith("Cache opened: Found ")

    def test_cache_can_hold_quest_part(self, state, reducer, tile_finder):
        cache = tile_finder.poi(POI.CACHE)
        state.player.position = cache
        state.player.quest.stage = QuestStage.GATHER_PARTS
        state.rng = ScriptedRandom(0.0)

        result = reducer.apply(state, Action.interact())

        new = result.new_state
        assert new.player.quest.parts_found == 1
        assert new.player.find_item("hyperdrive_part").count == 1
        assert new.player.scrap == 0
        assert new.message == "Found Hyperdrive Flux! (1/3)"

    def test_derelict_salvage_when_poor(self, state, reducer, tile_finder):
        derelict = tile_finder.poi(POI.DERELICT)
        state.player.position = derelict
        state.player.scrap = 40

        result = reducer.apply(state, Action.interact())

        new = result.new_state
        assert new.player.scrap == 55
        assert len(new.player.team) == 1
        assert new.player.is_visited(derelict)
        assert new.message == "Need 50 Scrap to repair. Salvaged parts instead."

    def test_derelict_repair(self, state, reducer, tile_finder, catalog):
        derelict = tile_finder.poi(POI.DERELICT)
        state.player.position = derelict
        state.player.scrap = 60

        result = reducer.apply(state, Action.interact())

        new = result.new_state
        assert new.player.scrap == 10
        assert len(new.player.team) == 2
        recruit = new.player.team[1]
        assert recruit.bot_class in DERELICT_CLASSES
        assert recruit.name in catalog.unique_names
        assert recruit.hp == recruit.max_hp
        assert new.player.stats.bots_recruited == 1
        assert new.message == f"Recruited {recruit.name}. Joined squad!"

    def test_npc_hint(self, state, reducer, tile_finder, catalog):
        npc = tile_finder.poi(POI.NPC)
        state.player.position = npc

        result = reducer.apply(state, Action.interact())

        new = result.new_state
        assert new.message.startswith("NPC: ")
        assert new.player.is_visited(npc)

    def test_visited_pois_are_inert(self, state, tile_finder):
        derelict = tile_finder.poi(POI.DERELICT)
        state.player.position = derelict
        assert interaction_target(state) == (derelict, POI.DERELICT)
        assert available_interaction(state) == "Repair Derelict"

        state.player.mark_visited(derelict)
        target = interaction_target(state)
        assert target is None or target[0] != derelict

    def test_faced_tile_before_neighbors(self, state, world, tile_finder):
        """With nothing underfoot, the faced tile wins."""
        cache = tile_finder.poi(POI.CACHE)
        state.player.position = cache.offset(-1, 0)
        state.player.facing = Facing.RIGHT
        if interaction_target(state)[0] == state.player.position:
            pytest.skip("Cache neighbor is itself a POI")

        assert interaction_target(state) == (cache, POI.CACHE)

    def test_nothing_to_interact(self, state, reducer):
        result = reducer.apply(state, Action.interact())
        assert result.error == "Nothing to interact with."
        assert result.error_code == "INVALID_ACTION"


class TestQuestChain:
    """Tests for the escape-pod quest."""

    def test_first_pod_visit(self, state, reducer):
        state.player.position = POD

        result = reducer.apply(state, Action.interact())

        new = result.new_state
        assert new.player.quest.stage == QuestStage.GATHER_PARTS
        assert new.player.stats.quests_completed == 1
        assert new.message == "Pod Systems Critical. Needs 3 Hyperdrive Flux parts."

    def test_pod_reports_missing_parts(self, state, reducer):
        state.player.position = POD
        state.player.quest.stage = QuestStage.GATHER_PARTS
        state.player.quest.parts_found = 1

        result = reducer.apply(state, Action.interact())

        new = result.new_state
        assert new.player.quest.stage == QuestStage.GATHER_PARTS
        assert new.message == "Needs Hyperdrive Flux. Found: 1/3"

    def test_installing_parts_starts_guardian_fight(self, state, reducer, catalog):
        state.player.position = POD
        state.player.quest.stage = QuestStage.GATHER_PARTS
        state.player.quest.parts_found = 3
        state.player.add_item(catalog.new_item("hyperdrive_part", count=3))
        assert available_interaction(state) == "Install Parts"

        result = reducer.apply(state, Action.interact())

        new = result.new_state
        assert new.player.quest.stage == QuestStage.DEFEAT_GUARDIAN
        assert new.player.stats.quests_completed == 1
        assert new.player.find_item("hyperdrive_part") is None
        assert new.mode == GameMode.COMBAT
        assert new.enemy.is_boss
        assert new.enemy.max_hp == 500
        intro = next(e for e in result.events if e.message == "WARNING: CORE GUARDIAN DETECTED")
        assert intro.delay_ms == 2000
        assert result.lock_ms == 2000

    def test_guardian_proximity_trigger(self, state, reducer):
        state.player.position = POD.offset(0, -1)
        state.player.quest.stage = QuestStage.GATHER_PARTS
        state.player.quest.parts_found = 3

        result = reducer.apply(state, Action.move(0, -1))

        new = result.new_state
        assert new.player.position == Position(30, 28)
        assert new.mode == GameMode.COMBAT
        assert new.enemy.is_boss
        assert new.player.quest.stage == QuestStage.DEFEAT_GUARDIAN

    def test_dormant_guardian(self, state, reducer):
        state.player.position = Position(30, 27)

        result = reducer.apply(state, Action.interact())

        assert result.error_code == "INVALID_ACTION"
        assert "dormant" in result.error

    def test_launch(self, state, reducer, catalog):
        state.player.position = POD
        state.player.quest.stage = QuestStage.REPAIR_POD
        state.player.quest.has_omni_tool = True
        state.player.add_item(catalog.new_item("omni_tool"))
        assert available_interaction(state) == "Launch Escape Pod"

        result = reducer.apply(state, Action.interact())

        new = result.new_state
        assert new.mode == GameMode.VICTORY
        assert new.player.quest.stage == QuestStage.COMPLETED
        assert new.player.stats.quests_completed == 1
        assert new.message == "Launch sequence initiated. The Escape Pod has launched."

    def test_quest_never_regresses(self, state):
        from ..engine_core.exploration import advance_quest

        state.player.quest.stage = QuestStage.REPAIR_POD
        with pytest.raises(ValueError):
            advance_quest(state, QuestStage.GATHER_PARTS)
        with pytest.raises(ValueError):
            advance_quest(state, QuestStage.REPAIR_POD)


class TestCamp:
    """Tests for squad and loadout management outside combat."""

    def test_switch_active_bot(self, state, reducer, make_bot):
        state.player.team.append(make_bot("tank", "Tanky"))
        result = reducer.apply(state, Action.switch_bot(1))
        assert result.new_state.player.active_slot == 1

        state.player.team[1].set_hp(0)
        assert reducer.apply(state, Action.switch_bot(1)).error_code == "INVALID_ACTION"
        assert reducer.apply(state, Action.switch_bot(5)).error_code == "INVALID_ACTION"

    def test_cannot_bench_last_bot(self, state, reducer):
        result = reducer.apply(state, Action.swap_reserve(0, None))
        assert result.error == "Cannot send last bot to reserves!"

    def test_deploy_and_bench(self, state, reducer, make_bot):
        state.player.reserves.append(make_bot("tank", "Tanky"))

        deployed = reducer.apply(state, Action.swap_reserve(None, 0)).new_state
        assert [b.name for b in deployed.player.team] == ["Scout-01", "Tanky"]
        assert deployed.player.reserves == []

        benched = reducer.apply(deployed, Action.swap_reserve(0, None)).new_state
        assert [b.name for b in benched.player.team] == ["Tanky"]
        assert [b.name for b in benched.player.reserves] == ["Scout-01"]
        assert benched.player.active_slot == 0

    def test_exchange_keeps_active_bot(self, state, reducer, make_bot):
        player = state.player
        player.team.append(make_bot("b2", "Two"))
        player.reserves.append(make_bot("b3", "Three"))
        player.active_slot = 1

        new = reducer.apply(state, Action.swap_reserve(0, 0)).new_state

        assert [b.name for b in new.player.team] == ["Three", "Two"]
        assert [b.name for b in new.player.reserves] == ["Scout-01"]
        assert new.player.active_bot.name == "Two"

    def test_squad_full(self, state, reducer, make_bot):
        state.player.team.extend([make_bot("b2", "Two"), make_bot("b3", "Three")])
        state.player.reserves.append(make_bot("b4", "Four"))

        result = reducer.apply(state, Action.swap_reserve(None, 0))

        assert result.error == "Squad full (Max 3)."

    def test_squad_needs_operational_bot(self, state, reducer, make_bot):
        state.player.team.append(make_bot("b2", "Two", hp=0))

        result = reducer.apply(state, Action.swap_reserve(0, None))

        assert result.error == "Squad needs at least one operational bot."

    def test_equip_and_unequip(self, state, reducer):
        bot = state.player.active_bot
        bot.stored_skills.append("GRENADE")

        equipped = reducer.apply(state, Action.equip_skill("GRENADE", to_active=True)).new_state
        assert equipped.player.active_bot.active_skills == ["LASER_SHOT", "HACK", "GRENADE"]
        assert equipped.player.active_bot.stored_skills == []

        unequipped = reducer.apply(equipped, Action.equip_skill("HACK", to_active=False)).new_state
        assert unequipped.player.active_bot.active_skills == ["LASER_SHOT", "GRENADE"]
        assert unequipped.player.active_bot.stored_skills == ["HACK"]

    def test_ram_full(self, state, reducer):
        bot = state.player.active_bot
        bot.active_skills.append("ZAP")
        bot.stored_skills.append("GRENADE")

        result = reducer.apply(state, Action.equip_skill("GRENADE", to_active=True))

        assert result.error == "Skill RAM full (Max 3)."

    def test_use_item_on_squad_member(self, state, reducer, make_bot):
        state.player.team.append(make_bot("tank", "Tanky", hp=40))

        result = reducer.apply(state, Action.use_item("repair_kit", 1))

        new = result.new_state
        assert new.player.team[1].hp == 90
        assert new.player.find_item("repair_kit").count == 1
        assert new.message == "Used Repair Kit on Tanky."

    def test_buy_module(self, state, reducer):
        state.player.scrap = 200

        result = reducer.apply(state, Action.buy_module("hull_plating"))

        new = result.new_state
        bot = new.player.active_bot
        assert new.player.scrap == 100
        assert bot.max_hp == 150
        assert bot.hp == 100
        assert new.player.stats.modules_installed == 1
        assert new.message == "Installed Titanium Plating on Scout-01."

        again = reducer.apply(new, Action.buy_module("hull_plating"))
        assert again.error_code == "INVALID_ACTION"

    def test_buy_module_rejections(self, state, reducer):
        state.player.scrap = 50
        assert reducer.apply(state, Action.buy_module("hull_plating")).error == "Not enough scrap (50/100)."
        assert reducer.apply(state, Action.buy_module("warp_drive")).error_code == "INVALID_ACTION"

    def test_repair(self, state, reducer):
        state.player.scrap = 20
        state.player.active_bot.set_hp(50)

        new = reducer.apply(state, Action.repair()).new_state

        assert new.player.active_bot.hp == 70
        assert new.player.scrap == 5
        assert new.player.stats.healing_done == 20

    def test_repair_rejections(self, state, reducer):
        state.player.scrap = 20
        assert reducer.apply(state, Action.repair()).error == "Scout-01 needs no repairs"

        state.player.active_bot.set_hp(50)
        state.player.scrap = 10
        assert reducer.apply(state, Action.repair()).error == "Not enough scrap (10/15)."
