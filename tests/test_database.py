"""
Tests for engine configuration.
"""

from linkeun_api.config import Settings
from linkeun_api.database import connect_args


def test_mysql_statements_are_bounded_by_operation_timeout():
    """Test PyMySQL gets connect, read and write timeouts from settings."""
    settings = Settings(database_url="mysql+pymysql://app:pw@db:3306/zoo", operation_timeout=2.5)
    assert connect_args(settings) == {
        "connect_timeout": 2.5,
        "read_timeout": 2.5,
        "write_timeout": 2.5,
    }


def test_sqlite_lock_wait_is_bounded():
    """Test SQLite waits on locks no longer than the operation timeout."""
    args = connect_args(Settings(database_url="sqlite://", operation_timeout=3.0))
    assert args == {"check_same_thread": False, "timeout": 3.0}
