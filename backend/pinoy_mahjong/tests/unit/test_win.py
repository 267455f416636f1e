from pinoy_mahjong.logic.enums import AmbitionType, Flower, HandType, MeldType
from pinoy_mahjong.logic.tiles import FlowerTile
from pinoy_mahjong.logic.win import (
    find_standard_decomposition,
    is_escalera,
    is_siete_pares,
    is_winning_hand,
)
from pinoy_mahjong.tests.conftest import SIETE_PARES_HAND, STANDARD_HAND, make_meld, make_tiles

FLOWER = FlowerTile(id="flower-plum", flower=Flower.PLUM)


class TestStandardWin:
    def test_five_triplets_and_a_pair(self):
        win = is_winning_hand(make_tiles(**STANDARD_HAND), [], [])
        assert win.is_valid
        assert win.hand_type == HandType.STANDARD
        assert AmbitionType.TODAS in win.ambitions

    def test_runs_and_honors(self):
        hand = make_tiles(circles="123456", bamboos="789", winds="EEE", dragons="RR", characters="234")
        win = is_winning_hand(hand, [], [FLOWER])
        assert win.is_valid
        assert win.breakdown == {"Basic Win": 1.0}
        assert win.total_payout == 1.0

    def test_no_flowers_bonus(self):
        win = is_winning_hand(make_tiles(**STANDARD_HAND), [], [])
        assert win.breakdown == {"Basic Win": 1.0, "No Flowers": 0.25}
        assert win.total_payout == 1.25
        assert AmbitionType.NO_FLOWERS_END in win.ambitions

    def test_with_exposed_melds(self):
        melds = [make_meld(MeldType.PUNG, make_tiles(winds="SSS"))]
        hand = make_tiles(circles="123789", bamboos="456999", dragons="GG")
        win = is_winning_hand(hand, melds, [FLOWER])
        assert win.is_valid
        assert AmbitionType.ALL_UP not in win.ambitions

    def test_all_up_for_concealed_melds(self):
        melds = [make_meld(MeldType.PUNG, make_tiles(winds="SSS"), is_concealed=True)]
        hand = make_tiles(circles="123789", bamboos="456999", dragons="GG")
        win = is_winning_hand(hand, melds, [FLOWER])
        assert win.breakdown["All Up"] == 0.25

    def test_missing_pair(self):
        hand = make_tiles(circles="111222333", bamboos="444555", characters="12")
        assert not is_winning_hand(hand, [], []).is_valid

    def test_wrong_tile_count(self):
        hand = make_tiles(circles="111222333", bamboos="444555", characters="111")
        assert not is_winning_hand(hand, [], []).is_valid
        assert not is_winning_hand(make_tiles(circles="11"), [], []).is_valid

    def test_seventeen_tile_precondition_counts_meld_tiles(self):
        melds = [make_meld(MeldType.PUNG, make_tiles(winds="SSS"))]
        # 17 concealed tiles plus a meld is 20 in total
        assert not is_winning_hand(make_tiles(**STANDARD_HAND), melds, []).is_valid

    def test_decomposition_backtracks(self):
        # 112233 must be read as two runs, not a pair followed by leftovers
        hand = make_tiles(circles="112233", bamboos="789", characters="555", dragons="WWW", winds="NN")
        decomposition = find_standard_decomposition(hand, 0)
        assert decomposition is not None
        assert len(decomposition.sets) == 5

    def test_decomposition_rejects_wrong_length(self):
        assert find_standard_decomposition(make_tiles(**STANDARD_HAND), 1) is None


class TestSietePares:
    def test_seven_pairs_and_a_triplet(self):
        win = is_winning_hand(make_tiles(**SIETE_PARES_HAND), [], [FLOWER])
        assert win.is_valid
        assert win.hand_type == HandType.SIETE_PARES
        assert win.total_payout == 1.5
        assert win.breakdown == {"Basic Win": 1.0, "Siete Pares": 0.5}

    def test_trio_may_be_a_run(self):
        hand = make_tiles(circles="115599", bamboos="2288", characters="3377")
        hand += make_tiles(bamboos="456")
        assert is_siete_pares(hand)

    def test_four_of_a_kind_counts_as_two_pairs(self):
        hand = make_tiles(circles="11115599", bamboos="22", characters="3377", winds="EEE")
        assert is_siete_pares(hand)

    def test_needs_the_trio(self):
        hand = make_tiles(circles="115599", bamboos="2288", characters="3377", winds="EES")
        assert not is_siete_pares(hand)

    def test_wrong_length(self):
        assert not is_siete_pares(make_tiles(circles="1155", winds="EEE"))

    def test_not_checked_with_melds(self):
        melds = [make_meld(MeldType.CHOW, make_tiles(characters="123"))]
        hand = make_tiles(circles="115599", bamboos="2288", characters="3377")
        assert not is_winning_hand(hand, melds, []).is_valid


class TestEscalera:
    def test_three_chows_one_suit(self):
        melds = [
            make_meld(MeldType.CHOW, make_tiles(circles="123")),
            make_meld(MeldType.CHOW, make_tiles(circles="456")),
            make_meld(MeldType.CHOW, make_tiles(circles="789")),
        ]
        assert is_escalera(melds)

    def test_mixed_suits(self):
        melds = [
            make_meld(MeldType.CHOW, make_tiles(circles="123")),
            make_meld(MeldType.CHOW, make_tiles(bamboos="456")),
            make_meld(MeldType.CHOW, make_tiles(circles="789")),
        ]
        assert not is_escalera(melds)

    def test_too_few_chows(self):
        melds = [make_meld(MeldType.CHOW, make_tiles(circles="123"))]
        assert not is_escalera(melds)

    def test_escalera_bonus_on_win(self):
        melds = [
            make_meld(MeldType.CHOW, make_tiles(circles="123"), index=0),
            make_meld(MeldType.CHOW, make_tiles(circles="456"), index=1),
            make_meld(MeldType.CHOW, make_tiles(circles="789"), index=2),
        ]
        hand = make_tiles(bamboos="222", dragons="RRR", winds="EE")
        win = is_winning_hand(hand, melds, [FLOWER])
        assert win.is_valid
        assert AmbitionType.ESCALERA in win.ambitions
        assert win.total_payout == 1.5
