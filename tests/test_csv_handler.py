from __future__ import annotations

import pytest

from csv_handler import (
    export_expenses_to_csv,
    export_settlements_to_csv,
    import_expenses_from_csv,
    import_settlements_from_csv,
)
from errors import InvalidInputError


def test_expenses_survive_csv(group, tmp_path):
    path = str(tmp_path / "expenses.csv")
    export_expenses_to_csv(group.expenses, path)
    assert import_expenses_from_csv(path) == group.expenses


def test_settlements_survive_csv(group, tmp_path):
    path = str(tmp_path / "settlements.csv")
    export_settlements_to_csv(group.settlements, path)
    assert import_settlements_from_csv(path) == group.settlements


def test_expense_csv_layout(group, tmp_path):
    path = tmp_path / "expenses.csv"
    export_expenses_to_csv(group.expenses, str(path))
    lines = path.read_text(encoding="utf-8").splitlines()

    assert lines[0].startswith("id,group_id,date,description,category,amount,paid_by,split_type")
    assert "m2:15.0;m3:25.0" in lines[2]
    assert "m1;m2;m3" in lines[1]


def test_unknown_split_type_in_csv(tmp_path):
    path = tmp_path / "expenses.csv"
    path.write_text(
        "id,group_id,date,description,category,amount,paid_by,split_type,split_among,split_details,notes\n"
        "e1,g,2024-01-01,Lunch,,10,m1,shares,m1;m2,,\n",
        encoding="utf-8",
    )
    with pytest.raises(InvalidInputError):
        import_expenses_from_csv(str(path))


def test_short_rows_fill_missing_fields(tmp_path):
    path = tmp_path / "expenses.csv"
    path.write_text(
        "id,group_id,date,description,category,amount,paid_by,split_type,split_among,split_details,notes\n"
        "e1,g,2024-01-01,Lunch,,10,m1,equal,m1;m2\n",
        encoding="utf-8",
    )
    [e] = import_expenses_from_csv(str(path))
    assert e.split_among == ["m1", "m2"]
    assert e.split_details == ()
    assert e.notes == ""

    path.write_text(
        "id,group_id,date,description,category,amount,paid_by,split_type,split_among,split_details,notes\n"
        "e2,g,2024-01-01,Lunch,,10,m1,equal\n",
        encoding="utf-8",
    )
    with pytest.raises(InvalidInputError):
        import_expenses_from_csv(str(path))
