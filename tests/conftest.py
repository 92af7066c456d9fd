import pytest

from pdptw.parsing import parse_instance, parse_solution

INSTANCE_TEXT = """NAME : tiny instance
LOCATION : test-city
COMMENT : three node sample
TYPE : PDPTW
SIZE : 3
DISTRIBUTION : custom
DEPOT : central
ROUTE-TIME : 100
TIME-WINDOW : 100
CAPACITY : 10
NODES
0 42.000000 2.000000 0 0 100 0 0 0
1 42.010000 2.010000 5 0 50 2 0 2
2 42.020000 2.020000 -5 10 60 2 1 0
EDGES
0 3 4
3 0 5
4 5 0
EOF
"""

INSTANCE_NO_EDGES_TEXT = """NAME : tiny instance
LOCATION : test-city
TYPE : PDPTW
SIZE : 3
CAPACITY : 10
NODES
0 42.000000 2.000000 0 0 100 0 0 0
1 42.010000 2.010000 5 0 50 2 0 2
2 42.020000 2.020000 -5 10 60 2 1 0
EOF
"""

SOLUTION_TEXT = """Instance name : tiny instance
Authors       : Test Author
Date          : 2024-01-01
Reference     : unit tests
Solution
Route 1 : 1 2
"""


@pytest.fixture
def instance():
    return parse_instance(INSTANCE_TEXT)


@pytest.fixture
def solution(instance):
    return parse_solution(SOLUTION_TEXT, instance)


@pytest.fixture
def instance_text():
    return INSTANCE_TEXT


@pytest.fixture
def instance_no_edges_text():
    return INSTANCE_NO_EDGES_TEXT


@pytest.fixture
def solution_text():
    return SOLUTION_TEXT
