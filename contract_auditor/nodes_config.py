from typing import Tuple, Type, List
from box import Box
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, PyprojectTomlConfigSettingsSource, SettingsConfigDict
from pathlib import Path

class Settings(BaseSettings):
    model_config:SettingsConfigDict = SettingsConfigDict(
        arbitrary_types_allowed=True,
        cli_parse_args=False,
        cli_prog_name='contract-auditor',
        pyproject_toml_depth=1,
        pyproject_toml_table_header=('tool', 'contract-auditor'),
        toml_file='pyproject.toml',
        extra='ignore',
        env_file='.env',
        env_file_encoding='utf-8',
        env_ignore_empty=True,
        use_enum_values=True,
        strict=False
    )

    # Core project settings
    id: str = "default"
    base_dir: str = str(Path.cwd())
    output: str = str(Path.cwd() / "reports")

    # Generation backend
    AUDIT_MODEL: str = "gpt-4-turbo-preview"
    AUDIT_MODEL_PROVIDER: str = "openai"  # Options: openai, ollama
    AUDIT_MODEL_BASE_URL: str = ""
    AUDIT_TEMPERATURE: float = 0.2
    OPENAI_API_KEY: str = ""

    # Performance settings
    REQUEST_TIMEOUT: float = 300.0
    MAX_RETRIES: int = 3
    PASS_TIMEOUT: float = 600.0  # 0 disables the per-pass timeout

    # Library resolution
    LIBRARY_BASE_DIR: str = str(Path.cwd())
    LIBRARY_REMAPPINGS: List[str] = [
        "@openzeppelin/=node_modules/@openzeppelin/",
    ]
    MAX_RESOLVED_LIBRARIES: int = 512

    # Remote repository intake
    REMOTE_REPOSITORIES_ENABLED: bool = True
    REPOSITORY_IGNORE_FOLDERS: str = "test,tests,lib,node_modules,script"
    MAX_REPOSITORY_FILES: int = 200
    GIT_COMMAND: str = "git"

    # Web interface settings
    WEB_HOST: str = "0.0.0.0"
    WEB_PORT: int = 8000

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""
    LLM_LOG_DIR: str = ""  # empty disables the LLM interaction sinks

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            PyprojectTomlConfigSettingsSource(settings_cls),
        )

# Global settings instance
config = Box(Settings().model_dump(), frozen_box=False)
