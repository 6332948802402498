from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # PostgreSQL; DATABASE_URL wins when set (sqlite:// works for local runs)
    db_host: str = "localhost"
    db_port: int = 5432
    db_username: str = "postgres"
    db_password: str = "postgres"
    db_name: str = "supply_chain"
    database_url: str | None = None

    # Language model used for recommendations, routes and news extraction
    llm_provider: str = "anthropic"
    llm_max_tokens: int = 1024
    llm_timeout_seconds: float = 120.0
    anthropic_api_key: str | None = None
    anthropic_model: str = "claude-3-5-sonnet-20241022"
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"
    openai_base_url: str | None = None
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3"

    # Web search (SerpAPI) used by the event scanner
    serpapi_api_key: str | None = None
    serpapi_base_url: str = "https://serpapi.com/search.json"
    search_timeout_seconds: float = 15.0
    search_max_results: int = 5

    # Spreadsheet uploads
    upload_max_bytes: int = 10 * 1024 * 1024

    # Insert demo suppliers/products/shipments for a fresh database
    seed_demo_data: bool = True

    jwt_secret: str = "dev-secret-change-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expire_days: int = 7
    password_hash_rounds: int = 12
    demo_user_password: str = "demo-password"

    port: int = 8000
    env: str = "development"
    frontend_url: str = "http://localhost:3000"

    model_config = {"env_file": ".env", "extra": "ignore", "env_file_encoding": "utf-8"}

    def get_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        return (
            f"postgresql://{self.db_username}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )


settings = Settings()
