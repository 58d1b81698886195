"""Fixtures shared by the table tests.

The employee rows are deliberately small but cover the interesting cases:
several departments, an accented name, a missing salary and duplicated
status values.
"""

import pytest

from dtable.column import ColumnList, DtColumn


EMPLOYEES = [
    (1, "Alice Johnson", "Engineering", "Active", 95000),
    (2, "Bob Smith", "Marketing", "Active", 65000),
    (3, "Carol Díaz", "Engineering", "Inactive", 105000),
    (4, "Dan Brown", "HR", "Active", 55000),
    (5, "Eve Adams", "Engineering", "Active", 120000),
    (6, "Frank Moore", "Sales", "Inactive", 70000),
    (7, "Grace Lee", "Engineering", "Active", 88000),
    (8, "Henry Ford", "Sales", "Active", 72000),
    (9, "Ivy Chen", "HR", "Inactive", 58000),
    (10, "Jack White", "Marketing", "Active", 61000),
    (11, "Kate Green", "Engineering", "Active", None),
    (12, "Liam Scott", "Sales", "Active", 69000),
    (13, "Mia Young", "Marketing", "Inactive", 63000),
    (14, "Noah King", "Engineering", "Inactive", 99000),
    (15, "Olivia Hall", "HR", "Active", 57000),
]


@pytest.fixture
def rows():
    return [
        {
            "id": id_,
            "name": name,
            "department": department,
            "status": status,
            "salary": salary,
        }
        for id_, name, department, status, salary in EMPLOYEES
    ]


@pytest.fixture
def column_defs():
    return [
        {"key": "id", "name": "ID", "searchable": False},
        {"key": "name", "name": "Name"},
        {"key": "department", "name": "Department"},
        {"key": "status", "name": "Status"},
        {"key": "salary", "name": "Salary"},
    ]


@pytest.fixture
def columns(column_defs):
    return ColumnList(columns=[DtColumn(**c) for c in column_defs])


@pytest.fixture
def numbered_rows():
    return [{"n": i, "label": f"Row {i}"} for i in range(1, 26)]
