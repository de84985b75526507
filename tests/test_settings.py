import json

from todo_api.generate_openapi import generate_openapi
from todo_api.settings import get_settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in (
            "PERSISTENCE_BACKEND",
            "SQLITE_DB_PATH",
            "SUPABASE_URL",
            "SUPABASE_KEY",
            "SUPABASE_TABLE",
            "ID_GENERATION",
            "CORS_ALLOW_ORIGINS",
            "API_PREFIX",
            "LOG_LEVEL",
        ):
            monkeypatch.delenv(name, raising=False)

        settings = get_settings()

        assert settings.persistence_backend == "memory"
        assert settings.sqlite_db_path == "./data/todos.db"
        assert settings.supabase_url is None
        assert settings.supabase_key is None
        assert settings.supabase_table == "todos"
        assert settings.id_generation == "core"
        assert settings.cors_allow_origins == ["http://localhost:3000"]
        assert settings.api_prefix == "/api"
        assert settings.log_level == "INFO"

    def test_unknown_choices_fall_back(self, monkeypatch):
        monkeypatch.setenv("PERSISTENCE_BACKEND", "mongodb")
        monkeypatch.setenv("ID_GENERATION", "random")

        settings = get_settings()

        assert settings.persistence_backend == "memory"
        assert settings.id_generation == "core"

    def test_parsing(self, monkeypatch):
        monkeypatch.setenv("PERSISTENCE_BACKEND", " Supabase ")
        monkeypatch.setenv("SUPABASE_URL", " https://abc.supabase.co ")
        monkeypatch.setenv("ID_GENERATION", "BACKEND")
        monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://a.test, http://b.test,")
        monkeypatch.setenv("API_PREFIX", "v1/")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        settings = get_settings()

        assert settings.persistence_backend == "supabase"
        assert settings.supabase_url == "https://abc.supabase.co"
        assert settings.id_generation == "backend"
        assert settings.cors_allow_origins == ["http://a.test", "http://b.test"]
        assert settings.api_prefix == "/v1"
        assert settings.log_level == "DEBUG"

    def test_wildcard_origins(self, monkeypatch):
        monkeypatch.setenv("CORS_ALLOW_ORIGINS", "*")
        assert get_settings().cors_allow_origins == ["*"]


class TestOpenAPI:
    def test_generate_openapi_writes_schema(self, tmp_path):
        out = generate_openapi(tmp_path / "interfaces" / "openapi.json")

        schema = json.loads(out.read_text(encoding="utf-8"))
        assert "/api/todos" in schema["paths"]
        assert "/api/todos/{todo_id}/toggle" in schema["paths"]
        assert {t["name"] for t in schema["tags"]} >= {"health", "todos"}
        views = [s for name, s in schema["components"]["schemas"].items() if name.startswith("TodoView")]
        assert views
        assert set(views[0]["properties"]) == {"id", "title", "isCompleted", "createdAt"}
