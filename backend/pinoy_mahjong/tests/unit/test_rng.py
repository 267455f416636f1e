import pytest

from pinoy_mahjong.logic.rng import (
    AI_DOMAIN,
    DEALER_DOMAIN,
    RNG_VERSION,
    SEED_BYTES,
    WALL_DOMAIN,
    TileRng,
    choose_dealer,
    generate_seed,
)


class TestGenerateSeed:
    def test_hex_of_expected_length(self):
        seed = generate_seed()
        assert len(seed) == SEED_BYTES * 2
        int(seed, 16)

    def test_seeds_differ(self):
        assert generate_seed() != generate_seed()


class TestTileRng:
    def test_same_seed_same_stream(self):
        a = TileRng.from_seed("table-7")
        b = TileRng.from_seed("table-7")
        assert [a.next_uint64() for _ in range(5)] == [b.next_uint64() for _ in range(5)]

    def test_domains_give_independent_streams(self):
        streams = [TileRng.from_seed("table-7", domain) for domain in (WALL_DOMAIN, DEALER_DOMAIN, AI_DOMAIN)]
        firsts = {rng.next_uint64() for rng in streams}
        assert len(firsts) == 3

    def test_empty_seed_rejected(self):
        with pytest.raises(ValueError, match="non-empty"):
            TileRng.from_seed("")

    def test_outputs_are_64_bit(self):
        rng = TileRng.from_seed("bits")
        assert all(0 <= rng.next_uint64() < 1 << 64 for _ in range(100))

    def test_below_stays_in_range(self):
        rng = TileRng.from_seed("range")
        values = [rng.below(6) for _ in range(600)]
        assert min(values) == 0
        assert max(values) == 5

    @pytest.mark.parametrize("bound", [0, -1, (1 << 64) + 1])
    def test_below_rejects_bad_bounds(self, bound):
        with pytest.raises(ValueError, match="bound"):
            TileRng.from_seed("range").below(bound)

    def test_shuffle_is_permutation_and_copies(self):
        items = list(range(20))
        shuffled = TileRng.from_seed("perm").shuffle(items)
        assert sorted(shuffled) == items
        assert items == list(range(20))
        assert shuffled != items


class TestChooseDealer:
    def test_deterministic(self):
        assert choose_dealer("seed-a") == choose_dealer("seed-a")

    def test_in_range(self):
        assert {choose_dealer(f"seed-{i}") for i in range(50)} <= {0, 1, 2, 3}

    def test_all_seats_reachable(self):
        assert {choose_dealer(f"seed-{i}") for i in range(200)} == {0, 1, 2, 3}


def test_rng_version_names_the_generator():
    assert "pcg64dxsm" in RNG_VERSION
