"""Test World state management."""
import random

import numpy as np
import pytest

from pocketrok.core.world import World, Resources, Camp, FogOfWar, generate_camps, compute_rates


class TestWorld:
    """Tests for World class."""

    def test_world_starting_resources(self, world):
        assert world.resources == Resources(food=200, wood=200, stone=100, gold=50)

    def test_world_starting_levels_and_army(self, world):
        assert set(world.buildings) == {"cityhall", "farm", "lumber", "quarry", "gold", "barracks"}
        assert all(level == 1 for level in world.buildings.values())
        assert world.army == {"infantry": 0, "archer": 0, "cavalry": 0}
        assert world.total_army == 0

    def test_world_starting_rates(self, world):
        assert world.rates == Resources(food=40, wood=40, stone=30, gold=15)

    def test_world_seeds_camps(self, world):
        assert len(world.camps) == 8
        positions = {c.pos for c in world.camps.values()}
        assert len(positions) == 8
        for camp in world.camps.values():
            assert 4 <= camp.x <= 18
            assert 2 <= camp.y <= 13
            assert 12 <= camp.strength <= 40

    def test_same_seed_same_camps(self):
        a = World(rng=random.Random(5))
        b = World(rng=random.Random(5))
        assert list(a.camps.values()) == list(b.camps.values())

    def test_scout_start_revealed(self, world):
        assert world.scout_pos == (2, 2)
        assert world.fog.revealed_count == 25
        assert world.is_revealed(0, 0)
        assert world.is_revealed(4, 4)
        assert not world.is_revealed(5, 2)

    def test_visible_camps_only_on_revealed_cells(self, world):
        world.camps = {
            1: Camp(id=1, x=3, y=3, strength=20),
            2: Camp(id=2, x=15, y=10, strength=20),
        }
        assert [c.id for c in world.visible_camps()] == [1]

    def test_get_camp_at(self, world):
        world.camps = {1: Camp(id=1, x=6, y=4, strength=12)}
        assert world.get_camp_at(6, 4).id == 1
        assert world.get_camp_at(4, 6) is None

    def test_remove_camp(self, world):
        camp_id = next(iter(world.camps))
        world.remove_camp(camp_id)
        assert camp_id not in world.camps
        assert world.get_camp(camp_id) is None


class TestResources:
    """Tests for Resources value type."""

    def test_covers(self):
        pool = Resources(food=100, wood=50, stone=0, gold=5)
        assert pool.covers(Resources(food=100, wood=50))
        assert not pool.covers(Resources(food=100.5))
        assert not pool.covers(Resources(stone=1))

    def test_subtract_floored(self):
        pool = Resources(food=100, wood=100, stone=100, gold=100)
        pool.subtract_floored(Resources(food=10.9, wood=0.5, stone=3, gold=99.99))
        assert pool == Resources(food=90, wood=100, stone=97, gold=1)

    def test_scaled_and_add(self):
        pool = Resources(food=1)
        pool.add(Resources(food=40, gold=15).scaled(0.5))
        assert pool == Resources(food=21, gold=7.5)

    def test_from_dict_fills_missing(self):
        assert Resources.from_dict({"gold": 5}) == Resources(gold=5)


class TestRates:
    """Tests for production rate derivation."""

    def test_rates_follow_levels(self):
        levels = {"cityhall": 3, "farm": 3, "lumber": 2, "quarry": 1, "gold": 2, "barracks": 1}
        assert compute_rates(levels) == Resources(food=120, wood=80, stone=30, gold=30)

    def test_rates_are_pure(self):
        levels = {"cityhall": 2, "farm": 2, "lumber": 1, "quarry": 2, "gold": 1, "barracks": 2}
        assert compute_rates(levels) == compute_rates(levels)
        assert levels == {"cityhall": 2, "farm": 2, "lumber": 1, "quarry": 2, "gold": 1, "barracks": 2}


class TestFogOfWar:
    """Tests for FogOfWar class."""

    def test_fog_hidden_initially(self):
        fog = FogOfWar(20, 15)
        assert fog.revealed_count == 0
        assert not fog.fully_revealed

    def test_reveal_square(self):
        fog = FogOfWar(20, 15)
        newly = fog.reveal(10, 7, 2)
        assert len(newly) == 25
        assert fog.is_revealed(8, 5) and fog.is_revealed(12, 9)
        assert not fog.is_revealed(13, 7)

    def test_reveal_clipped_at_corner(self):
        fog = FogOfWar(20, 15)
        newly = fog.reveal(0, 0, 2)
        assert newly == {(x, y) for x in range(3) for y in range(3)}

    def test_reveal_is_idempotent(self):
        fog = FogOfWar(20, 15)
        fog.reveal(5, 5, 2)
        once = fog.grid.copy()
        assert fog.reveal(5, 5, 2) == set()
        assert np.array_equal(fog.grid, once)

    def test_reveal_never_hides(self):
        fog = FogOfWar(20, 15)
        fog.reveal(5, 5, 2)
        fog.reveal(6, 6, 0)
        assert fog.is_revealed(3, 3)

    def test_out_of_bounds_not_revealed(self):
        fog = FogOfWar(20, 15)
        fog.grid[:, :] = True
        assert not fog.is_revealed(-1, 0)
        assert not fog.is_revealed(20, 0)
        assert not fog.is_revealed(0, 15)

    def test_nearest_hidden_tie_breaks_row_major(self):
        fog = FogOfWar(5, 5)
        fog.reveal(2, 2, 1)
        # (2,0), (0,2), (4,2), (2,4) are all at distance 2
        assert fog.nearest_hidden(2, 2) == (2, 0)

    def test_nearest_hidden_prefers_closer(self):
        fog = FogOfWar(20, 15)
        fog.reveal(2, 2, 2)
        assert fog.nearest_hidden(2, 2) == (5, 2)

    def test_nearest_hidden_none_when_revealed(self):
        fog = FogOfWar(4, 3)
        fog.grid[:, :] = True
        assert fog.nearest_hidden(1, 1) is None
        assert fog.fully_revealed

    def test_load_rows_rejects_bad_shape(self):
        fog = FogOfWar(3, 2)
        assert not fog.load_rows([[True, False, True]])
        assert not fog.load_rows([[True, False], [True, False]])
        assert not fog.load_rows([[1, 0, 1], [0, 0, 0]])
        assert fog.load_rows([[True, False, True], [False, False, True]])
        assert fog.to_rows() == [[True, False, True], [False, False, True]]


class TestCampGeneration:
    """Tests for camp placement."""

    def test_camps_distinct_and_in_range(self):
        camps = generate_camps(random.Random(1), count=20, x_range=(0, 4), y_range=(0, 3),
                               strength_range=(1, 2))
        assert len({c.pos for c in camps}) == 20
        assert [c.id for c in camps] == list(range(1, 21))

    def test_too_many_camps(self):
        with pytest.raises(ValueError):
            generate_camps(random.Random(1), count=5, x_range=(0, 1), y_range=(0, 0),
                           strength_range=(1, 2))

    def test_camp_losses_floor_at_zero(self):
        camp = Camp(id=1, x=0, y=0, strength=10)
        assert camp.take_losses(4) == 6
        assert camp.take_losses(82) == 0
        assert not camp.alive
