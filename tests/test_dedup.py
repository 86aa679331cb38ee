import itertools

from dedup import Deduplicator
from normalize import normalize_row


def ev(desc, ts="2024/06/10 08:00:00", status="Blocked", **extra):
    row = {"Date/Time": ts, "Event Description": desc, "Status": status}
    row.update(extra)
    return normalize_row(row)


def test_first_instance_wins_in_encounter_order():
    a1 = ev("ID=1 drop", Rule="r1")
    b = ev("accept", Rule="r2")
    a2 = ev("ID=2 drop", Rule="r1")
    d = Deduplicator()

    assert d.add(a1) is True
    assert d.add(b) is True
    assert d.add(a2) is False
    assert list(d) == [a1, b]
    assert len(d) == 2
    assert d.duplicates == 1
    assert a2 in d


def test_extend_consumes_lazily_and_counts_new():
    d = Deduplicator()
    gen = (ev("drop", Seq=str(i % 3)) for i in range(9))
    assert d.extend(gen) == 3
    assert d.duplicates == 6


def test_result_is_a_true_set_regardless_of_order():
    events = [
        ev("drop", Rule="r1"),
        ev("ID=9 drop", Rule="r1"),
        ev("drop", Rule="r2"),
        ev("drop", ts="2024/06/10 09:00:00", Rule="r1"),
        ev("drop", status="Allowed", Rule="r1"),
    ]
    expected = set(events)
    for perm in itertools.permutations(events):
        d = Deduplicator()
        d.extend(perm)
        out = list(d)
        assert len(out) == len(set(out))
        assert set(out) == expected
        assert len(out) == 4
