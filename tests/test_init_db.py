from rxdesk.db.init_db import DEFAULT_VOCABULARY, seed_vocabulary
from rxdesk.models import MiscItem


def test_seed_vocabulary_is_idempotent(db):
    db.add(MiscItem(type="frequency", name="1-0-1"))
    db.commit()

    total = sum(len(v) for v in DEFAULT_VOCABULARY.values())
    assert seed_vocabulary(db) == total - 1
    assert seed_vocabulary(db) == 0
    assert db.query(MiscItem).count() == total
