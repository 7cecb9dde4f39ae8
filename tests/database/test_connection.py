from unittest.mock import patch

from src.qr_attendance.qr_attendance.database.connection import DBConfig, DatabaseConnection


def test_from_dict_defaults():
    config = DBConfig.from_dict({"password": "pw"})

    assert config.host == "localhost"
    assert config.port == 3306
    assert config.database == "qr_attendance"
    assert config.charset == "utf8mb4"


def test_connect_uses_schema_charset():
    conn = DatabaseConnection(DBConfig.from_dict({"host": "db", "port": "3307"}))

    with patch("mysql.connector.connect") as connect:
        conn.connect()
        conn.connect(with_database=False)

    first, second = (c.kwargs for c in connect.call_args_list)
    assert first["host"] == "db"
    assert first["port"] == 3307
    assert first["charset"] == "utf8mb4"
    assert first["collation"] == "utf8mb4_unicode_ci"
    assert first["database"] == "qr_attendance"
    assert "database" not in second


def test_get_instance_follows_config_changes():
    a = DatabaseConnection.get_instance(DBConfig.from_dict({"database": "one"}))
    assert DatabaseConnection.get_instance(DBConfig.from_dict({"database": "one"})) is a

    b = DatabaseConnection.get_instance(DBConfig.from_dict({"database": "two"}))
    assert b is not a
    assert b.config.database == "two"
