"""core.config 环境变量映射测试"""

from taskrelay.core.config import (
    DEFAULT_STORE_TIMEOUT_S,
    DEFAULT_TASK_LIST_NAME,
    get_db_path,
    get_store_timeout_s,
    get_task_list_name,
)


class TestDbPath:
    def test_default_under_data_dir(self, monkeypatch):
        monkeypatch.delenv("TASKRELAY_DB_PATH", raising=False)
        monkeypatch.setenv("TASKRELAY_DATA_DIR", "/var/lib/taskrelay")
        assert get_db_path() == "/var/lib/taskrelay/sqlite/taskrelay.db"

    def test_explicit_path(self, monkeypatch):
        monkeypatch.setenv("TASKRELAY_DB_PATH", "/tmp/x.db")
        assert get_db_path() == "/tmp/x.db"


class TestTaskListName:
    def test_default(self, monkeypatch):
        monkeypatch.delenv("TASKRELAY_TASK_LIST_NAME", raising=False)
        assert get_task_list_name() == DEFAULT_TASK_LIST_NAME

    def test_empty_falls_back(self, monkeypatch):
        monkeypatch.setenv("TASKRELAY_TASK_LIST_NAME", "")
        assert get_task_list_name() == DEFAULT_TASK_LIST_NAME

    def test_override(self, monkeypatch):
        monkeypatch.setenv("TASKRELAY_TASK_LIST_NAME", "ops")
        assert get_task_list_name() == "ops"


class TestStoreTimeout:
    def test_default(self, monkeypatch):
        monkeypatch.delenv("TASKRELAY_STORE_TIMEOUT_S", raising=False)
        assert get_store_timeout_s() == DEFAULT_STORE_TIMEOUT_S

    def test_override(self, monkeypatch):
        monkeypatch.setenv("TASKRELAY_STORE_TIMEOUT_S", "0.5")
        assert get_store_timeout_s() == 0.5

    def test_invalid_falls_back(self, monkeypatch):
        """非法值回退到默认值，不阻塞启动"""
        monkeypatch.setenv("TASKRELAY_STORE_TIMEOUT_S", "soon")
        assert get_store_timeout_s() == DEFAULT_STORE_TIMEOUT_S

    def test_non_positive_falls_back(self, monkeypatch):
        monkeypatch.setenv("TASKRELAY_STORE_TIMEOUT_S", "-1")
        assert get_store_timeout_s() == DEFAULT_STORE_TIMEOUT_S
