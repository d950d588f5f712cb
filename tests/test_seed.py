from flightdesk import seed
from flightdesk.db.session import Storage
from flightdesk.models.flight import Flight


def test_seed_fills_empty_catalog_once(db):
    assert seed.run(db) == len(seed.SAMPLE_FLIGHTS)
    assert seed.run(db) == 0
    assert db.query(Flight).count() == len(seed.SAMPLE_FLIGHTS)


def test_seed_skips_unmigrated_database(tmp_path):
    empty = Storage(f"sqlite:///{tmp_path / 'empty.db'}")
    with empty.session_scope() as s:
        assert seed.run(s) == 0
    empty.dispose()
