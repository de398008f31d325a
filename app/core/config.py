"""
Configurações da aplicação usando Pydantic Settings
"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Configurações da aplicação"""

    # API Settings
    app_name: str = "AgroInsight Backend API"
    debug: bool = False
    log_level: str = "INFO"

    # Upload Settings
    max_file_size_mb: int = 50

    # Análise
    raw_data_preview_rows: int = 100
    type_inference_sample_size: int = 100
    test_data_max_rows: int = 10000

    # CORS Configuration
    cors_allowed_origins: str = ""

    def get_cors_allowed_origins(self) -> List[str]:
        """
        Retorna lista de origins permitidas para CORS.
        Se não configurado, permite todas as origins para desenvolvimento.
        """
        if self.cors_allowed_origins:
            return [origin.strip() for origin in self.cors_allowed_origins.split(",")]
        return ["*"]  # Fallback para desenvolvimento

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


# Instância global das configurações
settings = Settings()
