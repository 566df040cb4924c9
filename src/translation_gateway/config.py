"""
Configuration Management

번역 게이트웨이 설정 관리
"""

import os
import yaml
from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from pathlib import Path
import logging

from .errors import ConfigurationError


@dataclass
class GitHubConfig:
    """GitHub API 설정"""
    api_base_url: str = "https://api.github.com"
    api_version: str = "2022-11-28"
    timeout_seconds: int = 30
    rate_limit_floor: int = 10


@dataclass
class RepositoryConfig:
    """번역 저장소 공통 규칙"""
    owner: Optional[str] = None
    stable_branch: str = "main"
    key_branch_prefix: Optional[str] = None
    reviewers_path: str = "reviewers.json"


@dataclass
class SyncConfig:
    """브랜치 동기화 설정"""
    max_workers: int = 8
    exact_approval_match: bool = False


@dataclass
class ServerConfig:
    """HTTP 서버 설정"""
    host: str = "0.0.0.0"
    port: int = 5000
    cors_origins: str = "*"


@dataclass
class LoggingConfig:
    """로깅 설정"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class AppConfig:
    """전체 애플리케이션 설정"""
    github: GitHubConfig = field(default_factory=GitHubConfig)
    repository: RepositoryConfig = field(default_factory=RepositoryConfig)
    sync: SyncConfig = field(default_factory=SyncConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    debug: bool = False

    @classmethod
    def from_env(cls) -> "AppConfig":
        """환경 변수에서 설정 로드"""
        return cls(
            github=GitHubConfig(
                api_base_url=os.getenv("GITHUB_API_URL", "https://api.github.com"),
                api_version=os.getenv("GITHUB_API_VERSION", "2022-11-28"),
                timeout_seconds=int(os.getenv("GITHUB_TIMEOUT", "30")),
                rate_limit_floor=int(os.getenv("GITHUB_RATE_LIMIT_FLOOR", "10")),
            ),
            repository=RepositoryConfig(
                owner=os.getenv("GITHUB_OWNER"),
                stable_branch=os.getenv("GITHUB_STABLE_BRANCH", "main"),
                key_branch_prefix=os.getenv("GITHUB_KEY_BRANCH") or None,
                reviewers_path=os.getenv("REVIEWERS_PATH", "reviewers.json"),
            ),
            sync=SyncConfig(
                max_workers=int(os.getenv("SYNC_MAX_WORKERS", "8")),
                exact_approval_match=_env_flag("EXACT_APPROVAL_MATCH"),
            ),
            server=ServerConfig(
                host=os.getenv("SERVER_HOST", "0.0.0.0"),
                port=int(os.getenv("SERVER_PORT", "5000")),
                cors_origins=os.getenv("CORS_ORIGINS", "*"),
            ),
            logging=LoggingConfig(
                level=os.getenv("LOG_LEVEL", "INFO"),
                format=os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
                file_path=os.getenv("LOG_FILE"),
                max_file_size=int(os.getenv("LOG_MAX_SIZE", str(10 * 1024 * 1024))),
                backup_count=int(os.getenv("LOG_BACKUP_COUNT", "5")),
            ),
            debug=_env_flag("DEBUG"),
        )

    @classmethod
    def from_yaml(cls, config_path: str) -> "AppConfig":
        """YAML 파일에서 설정 로드"""
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_file, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        return cls(
            github=GitHubConfig(**config_data.get('github', {})),
            repository=RepositoryConfig(**config_data.get('repository', {})),
            sync=SyncConfig(**config_data.get('sync', {})),
            server=ServerConfig(**config_data.get('server', {})),
            logging=LoggingConfig(**config_data.get('logging', {})),
            debug=config_data.get('debug', False),
        )

    def validate(self) -> None:
        """설정 유효성 검사"""
        errors = []

        if not self.repository.owner:
            errors.append("GitHub owner is not set (GITHUB_OWNER)")

        if not self.repository.stable_branch:
            errors.append("Stable branch name cannot be empty")

        if self.sync.max_workers <= 0:
            errors.append("Worker count must be positive")

        if self.github.timeout_seconds <= 0:
            errors.append("GitHub timeout must be positive")

        if not 0 < self.server.port < 65536:
            errors.append(f"Invalid server port: {self.server.port}")

        valid_log_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if self.logging.level.upper() not in valid_log_levels:
            errors.append(f"Invalid log level: {self.logging.level}")

        if errors:
            raise ConfigurationError(f"Configuration validation failed: {'; '.join(errors)}")

    def to_dict(self) -> Dict[str, Any]:
        """설정을 딕셔너리로 변환"""
        return {
            'github': {
                'api_base_url': self.github.api_base_url,
                'api_version': self.github.api_version,
                'timeout_seconds': self.github.timeout_seconds,
                'rate_limit_floor': self.github.rate_limit_floor,
            },
            'repository': {
                'owner': self.repository.owner,
                'stable_branch': self.repository.stable_branch,
                'key_branch_prefix': self.repository.key_branch_prefix,
                'reviewers_path': self.repository.reviewers_path,
            },
            'sync': {
                'max_workers': self.sync.max_workers,
                'exact_approval_match': self.sync.exact_approval_match,
            },
            'server': {
                'host': self.server.host,
                'port': self.server.port,
                'cors_origins': self.server.cors_origins,
            },
            'logging': {
                'level': self.logging.level,
                'format': self.logging.format,
                'file_path': self.logging.file_path,
                'max_file_size': self.logging.max_file_size,
                'backup_count': self.logging.backup_count,
            },
            'debug': self.debug,
        }


class ConfigManager:
    """설정 관리자"""

    def __init__(self, config: Optional[AppConfig] = None):
        self._config = config or AppConfig.from_env()
        self._config.validate()
        self._setup_logging()

    @property
    def config(self) -> AppConfig:
        """현재 설정 반환"""
        return self._config

    def update_config(self, **kwargs) -> None:
        """Replace individual settings, e.g. ``update_config(**{'sync.max_workers': 4})``"""
        config_dict = self._config.to_dict()

        for key, value in kwargs.items():
            if '.' in key:
                section, name = key.split('.', 1)
                if section in config_dict:
                    config_dict[section][name] = value
            else:
                config_dict[key] = value

        self._config = AppConfig(
            github=GitHubConfig(**config_dict['github']),
            repository=RepositoryConfig(**config_dict['repository']),
            sync=SyncConfig(**config_dict['sync']),
            server=ServerConfig(**config_dict['server']),
            logging=LoggingConfig(**config_dict['logging']),
            debug=config_dict['debug'],
        )

        self._config.validate()
        self._setup_logging()

    def _setup_logging(self) -> None:
        """로깅 설정"""
        logging.basicConfig(
            level=getattr(logging, self._config.logging.level.upper()),
            format=self._config.logging.format,
        )

        if self._config.logging.file_path:
            from logging.handlers import RotatingFileHandler

            handler = RotatingFileHandler(
                self._config.logging.file_path,
                maxBytes=self._config.logging.max_file_size,
                backupCount=self._config.logging.backup_count,
            )
            handler.setFormatter(logging.Formatter(self._config.logging.format))
            logging.getLogger().addHandler(handler)


_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Active configuration manager, created from the environment on first use"""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def get_config() -> AppConfig:
    """현재 설정 반환"""
    return get_config_manager().config


def update_config(**kwargs) -> None:
    """설정 업데이트"""
    get_config_manager().update_config(**kwargs)
