"""
Concurrent node-set mutations against one task, each thread with its own session.

The ownership check is slowed down so that, without per-task locking, both
threads would read the node set before either writes.
"""

import threading
import time

import pytest

from taskline.database import SessionLocal
from taskline.errors import ValidationError
from taskline.services import ordering
from taskline.services import tasks as task_service


@pytest.fixture
def slow_authorize(monkeypatch):
    original = task_service.authorize_task

    def slow(*args, **kwargs):
        task = original(*args, **kwargs)
        time.sleep(0.2)
        return task

    monkeypatch.setattr(task_service, "authorize_task", slow)


def _run_together(*calls):
    """Start every call at once on its own thread and session; return results or exceptions."""
    barrier = threading.Barrier(len(calls))
    outcomes = [None] * len(calls)

    def worker(index, call):
        session = SessionLocal()
        try:
            barrier.wait(timeout=5)
            outcomes[index] = call(session)
        except Exception as exc:
            outcomes[index] = exc
        finally:
            session.close()

    threads = [threading.Thread(target=worker, args=(i, call)) for i, call in enumerate(calls)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)
    return outcomes


def test_concurrent_deletes_keep_one_node(db, make_user, slow_authorize):
    user_id = make_user()
    task = task_service.create_task(db, user_id, "Race")
    first_id = task.nodes[0].id
    second_id = task_service.insert_node_after(db, user_id, task.id, first_id).id
    task_id = task.id
    # Release the fixture session's transaction before the workers start
    db.rollback()

    outcomes = _run_together(
        lambda s: task_service.delete_node(s, user_id, first_id),
        lambda s: task_service.delete_node(s, user_id, second_id),
    )

    assert sum(o is None for o in outcomes) == 1
    assert sum(isinstance(o, ValidationError) for o in outcomes) == 1
    assert len(ordering.ordered_nodes(db, task_id)) == 1


def test_concurrent_inserts_keep_orders_unique_and_anchored(db, make_user, slow_authorize):
    user_id = make_user()
    task = task_service.create_task(db, user_id, "Race")
    a_id = task.nodes[0].id
    b_id = task_service.insert_node_after(db, user_id, task.id, a_id).id
    task_id = task.id
    db.rollback()

    after_b, after_a = _run_together(
        lambda s: task_service.insert_node_after(s, user_id, task_id, b_id).id,
        lambda s: task_service.insert_node_after(s, user_id, task_id, a_id).id,
    )

    assert isinstance(after_b, str), after_b
    assert isinstance(after_a, str), after_a
    nodes = ordering.ordered_nodes(db, task_id)
    orders = [n.order for n in nodes]
    assert len(orders) == len(set(orders))
    # Whichever insert ran first, each new node sits right after its anchor
    assert [n.id for n in nodes] == [a_id, after_a, b_id, after_b]
