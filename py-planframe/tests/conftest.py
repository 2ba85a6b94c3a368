"""Shared fixtures for planframe tests."""

import pytest

from planframe import Session, SessionConfig


@pytest.fixture
def session():
    """A session with a small, deterministic configuration."""
    s = Session(SessionConfig(target_partitions=2, batch_size=1024, max_workers=2))
    yield s
    s.close()


@pytest.fixture
def r(session):
    """R(id:int, name:string) with rows (1,"a"), (2,"b"), (3,"c")."""
    return session.from_pydict({"id": [1, 2, 3], "name": ["a", "b", "c"]}, name="r")


@pytest.fixture
def r2(session):
    """R2(id:int, score:float) sharing ids 2 and 3 with R."""
    return session.from_pydict(
        {"id": [2, 3, 4], "score": [20.0, 30.0, 40.0]}, name="r2"
    )


@pytest.fixture
def employees(session):
    """Ten employees across three departments, one with a null salary."""
    return session.from_pylist(
        [
            {"emp_id": 1, "dept": "eng", "name": "Alice", "salary": 120},
            {"emp_id": 2, "dept": "eng", "name": "Bob", "salary": 100},
            {"emp_id": 3, "dept": "eng", "name": "Carol", "salary": 110},
            {"emp_id": 4, "dept": "ops", "name": "Dan", "salary": 80},
            {"emp_id": 5, "dept": "ops", "name": "Eve", "salary": 90},
            {"emp_id": 6, "dept": "ops", "name": "Frank", "salary": None},
            {"emp_id": 7, "dept": "sales", "name": "Grace", "salary": 70},
            {"emp_id": 8, "dept": "sales", "name": "Heidi", "salary": 75},
            {"emp_id": 9, "dept": "sales", "name": "Ivan", "salary": 70},
            {"emp_id": 10, "dept": "sales", "name": "Judy", "salary": 95},
        ],
        name="employees",
    )
