import json

import load_data
from core.store import RentRollStore

EXPORT = "\n".join([
    "Rent Roll", "Maple Court", "As of 01/31/2025", "", "", "",
    "Unit,Name,TYPE,SQ FT,AUTOBILL,DEPOSIT,MOVED IN,LEASE ENDS,STATUS",
    '101,Ada Lovelace,1x1.1,750,"$1,200.00",$500.00,01/01/2023,03/15/2025,O',
    "102,VACANT,2x2.1,1000,$1300.00,,,,VR",
]) + "\n"


def test_convert_then_load(tmp_path, capsys):
    csv_path = tmp_path / "rent_roll.csv"
    csv_path.write_text(EXPORT, encoding="utf-8")
    jsonl_path = tmp_path / "rent_roll.jsonl"
    db_path = tmp_path / "rent_roll.db"

    assert load_data.main(["convert", str(csv_path), str(jsonl_path)]) == 0
    assert load_data.main(["load", str(jsonl_path), "--db", str(db_path)]) == 0
    assert "Converted 2 rent roll records" in capsys.readouterr().out

    with RentRollStore(db_path) as store:
        assert store.count() == 2


def test_load_bad_status_writes_nothing(tmp_path, capsys):
    jsonl_path = tmp_path / "bad.jsonl"
    jsonl_path.write_text("\n".join(json.dumps(r) for r in [
        {"Unit": 1, "Name": "A", "TYPE": "1x1.1", "STATUS": "O"},
        {"Unit": 2, "Name": "B", "TYPE": "1x1.1", "STATUS": "ZZ"},
    ]), encoding="utf-8")
    db_path = tmp_path / "rent_roll.db"

    assert load_data.main(["load", str(jsonl_path), "--db", str(db_path)]) == 1
    assert "nothing was written" in capsys.readouterr().err

    with RentRollStore(db_path) as store:
        assert store.count() == 0


def test_load_missing_file_reports_error(tmp_path, capsys):
    db_path = tmp_path / "rent_roll.db"
    code = load_data.main(["load", str(tmp_path / "absent.jsonl"), "--db", str(db_path)])
    assert code == 1
    assert "❌ Load failed" in capsys.readouterr().err


def test_load_malformed_line_reports_error(tmp_path, capsys):
    jsonl_path = tmp_path / "broken.jsonl"
    jsonl_path.write_text('{"Unit": 1, "Name": "A", "TYPE": "1x1.1", "STATUS": "O"}\n{"Unit": 2,\n',
                          encoding="utf-8")
    db_path = tmp_path / "rent_roll.db"

    assert load_data.main(["load", str(jsonl_path), "--db", str(db_path)]) == 1
    assert "❌ Load failed" in capsys.readouterr().err
    with RentRollStore(db_path) as store:
        assert store.count() == 0


def test_convert_missing_csv_reports_error(tmp_path, capsys):
    code = load_data.main(["convert", str(tmp_path / "absent.csv"), str(tmp_path / "out.jsonl")])
    assert code == 1
    assert "❌ Conversion failed" in capsys.readouterr().err
