from app.domain.listing import candidate_from_raw
from app.domain.ranking import pack_result, select_candidates, street_score, strict_filter, widen_by_town
from app.domain.text import phonetic_code
from app.domain.types import LookupQuery, Market

from conftest import listing


def _cands(*recs, market=Market.sales):
    return [candidate_from_raw(r, market) for r in recs]


def test_strict_filter_requires_town_street_and_price():
    cands = _cands(
        listing("A", "Station Road", "Coalville", 205000),
        listing("B", "Station Road", "Loughborough", 205000),
        listing("C", "High Street", "Coalville", 205000),
        listing("D", "Station Road", "Coalville", 400000),
        listing("E", "Station Road", "Colville", None),
    )
    q = LookupQuery(street="Station Road", town="Coalville", price="200000")
    assert [c.ref_id for c in strict_filter(cands, q)] == ["A", "E"]


def test_strict_filter_skips_fields_not_supplied():
    cands = _cands(listing("A", "Station Road", "Coalville", 1), listing("B", "Mill Lane", "Ibstock", 2))
    assert [c.ref_id for c in strict_filter(cands, LookupQuery())] == ["A", "B"]
    assert [c.ref_id for c in strict_filter(cands, LookupQuery(town="ibstock"))] == ["B"]


def _town_shortlist():
    recs = [listing(f"F{i}", "Stationary Road", "Coalville", 200000, number=i) for i in range(14)]
    recs.append(listing("N1", "Staton Road", "Coalville", 200000))
    recs.append(listing("E1", "Station Road", "Coalville", 200000))
    recs.append(listing("X1", "Station Road", "Ibstock", 200000))
    return _cands(*recs)


def test_widening_caps_at_twelve_best_first():
    q = LookupQuery(street="Station Road", town="Coalville")
    out = widen_by_town(_town_shortlist(), q)
    assert len(out) == 12
    # exact (-1 with phonetic bonus), one typo (0), then the F* listings (2) in upstream order
    assert [c.ref_id for c in out[:4]] == ["E1", "N1", "F0", "F1"]
    assert all(c.town == "Coalville" for c in out)


def test_widening_limit_is_tunable():
    q = LookupQuery(street="Station Road", town="Coalville")
    assert [c.ref_id for c in widen_by_town(_town_shortlist(), q, limit=2)] == ["E1", "N1"]


def test_widening_needs_a_town():
    q = LookupQuery(street="Station Road")
    assert widen_by_town(_town_shortlist(), q) == []


def test_widening_revalidates_street_and_price():
    cands = _cands(
        listing("A", "Mill Lane", "Coalville", 200000),
        listing("B", "Staton Road", "Coalville", 900000),
    )
    q = LookupQuery(street="Station Road", town="Coalville", price="200000")
    assert widen_by_town(cands, q) == []


def test_select_uses_strict_result_when_non_empty():
    cands = _cands(*[listing(f"S{i}", "Station Road", "Coalville", 200000, number=i) for i in range(20)])
    q = LookupQuery(street="Station Road", town="Coalville")
    # strict matches are not capped
    assert len(select_candidates(cands, q)) == 20


def test_select_falls_back_only_with_town():
    cands = _cands(listing("A", "Mill Lane", "Coalville", 1))
    assert select_candidates(cands, LookupQuery(street="Station Road")) == []
    assert select_candidates(cands, LookupQuery(street="Station Road", town="Coalville")) == []


def test_pack_result_counts_markets():
    sales = _cands(listing("S1", "Station Road", "Coalville", 1))
    lettings = _cands(listing("L1", "Station Road", "Coalville", 2), market=Market.lettings)
    res = pack_result(sales + lettings, transient=False)
    assert res.sales_count == 1
    assert res.lettings_count == 1
    assert res.markets_present == {Market.sales, Market.lettings}
    assert res.transient is False

    empty = pack_result([], transient=True)
    assert empty.empty and empty.transient
    assert empty.markets_present == frozenset()


def test_street_score_bonus_for_dropped_vowel():
    # vowels separate the two T's, so all three share S335
    assert phonetic_code("Station Road") == phonetic_code("Staton Road") == phonetic_code("Stationary Road") == "S335"
    assert street_score("station road", "Station Road") == -1
    assert street_score("station road", "Staton Road") == 0
    assert street_score("station road", "Stationary Road") == 2
