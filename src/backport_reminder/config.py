"""
Configuration Management

리마인더 실행 설정 관리
"""

import os
import yaml
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional, Dict, Any, Mapping, List, Tuple
from pathlib import Path
import logging


DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
VALID_LOG_LEVELS = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}


class ConfigurationError(ValueError):
    """Required configuration is missing or cannot be parsed."""


@dataclass(frozen=True)
class GitHubConfig:
    """GitHub API 설정"""
    token: Optional[str] = None
    repository: str = ""
    api_base_url: str = "https://api.github.com"
    timeout_seconds: int = 30
    user_agent: str = "backport-pending-reminder-script"
    rate_limit_margin_seconds: float = 1.0
    max_rate_limit_retries: Optional[int] = None

    @property
    def owner(self) -> str:
        return self.repository.split('/', 1)[0]

    @property
    def repo(self) -> str:
        parts = self.repository.split('/', 1)
        return parts[1] if len(parts) == 2 else ""


@dataclass(frozen=True)
class ReminderConfig:
    """리마인더 정책 설정"""
    label_name: str = "backport-pending"
    target_branch: str = "master"
    remind_after: int = 7
    remind_every: int = 7
    marker: str = "[backport-pending-reminder]"
    time_unit: timedelta = timedelta(days=1)
    post_delay_seconds: float = 0.2
    dry_run: bool = False
    automation_login_markers: Tuple[str, ...] = ("github-actions", "[bot]")


@dataclass(frozen=True)
class LoggingConfig:
    """로깅 설정"""
    level: str = "INFO"
    format: str = DEFAULT_LOG_FORMAT
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


@dataclass(frozen=True)
class AppConfig:
    """전체 실행 설정"""
    github: GitHubConfig
    reminder: ReminderConfig = field(default_factory=ReminderConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        """환경 변수에서 설정 로드"""
        env = os.environ if environ is None else environ
        errors: List[str] = []

        config = cls(
            github=GitHubConfig(
                token=env.get("GITHUB_TOKEN") or None,
                repository=env.get("GITHUB_REPOSITORY", ""),
                api_base_url=env.get("GITHUB_API_URL", "https://api.github.com"),
                timeout_seconds=_parse_int(env, "GITHUB_TIMEOUT", 30, errors),
                rate_limit_margin_seconds=_parse_float(env, "RATE_LIMIT_MARGIN", 1.0, errors),
                max_rate_limit_retries=_parse_optional_int(env, "RATE_LIMIT_MAX_RETRIES", errors),
            ),
            reminder=ReminderConfig(
                label_name=env.get("LABEL_NAME") or "backport-pending",
                target_branch=env.get("TARGET_BRANCH") or "master",
                remind_after=_parse_int(env, "REMIND_AFTER_DAYS", 7, errors),
                remind_every=_parse_int(env, "REMIND_EVERY_DAYS", 7, errors),
                marker=env.get("MARKER") or "[backport-pending-reminder]",
                time_unit=timedelta(seconds=_parse_float(env, "REMINDER_TIME_UNIT_SECONDS", 86400.0, errors)),
                post_delay_seconds=_parse_float(env, "REMINDER_POST_DELAY", 0.2, errors),
                dry_run=env.get("DRY_RUN", "false").lower() == "true",
            ),
            logging=LoggingConfig(
                level=env.get("LOG_LEVEL", "INFO"),
                format=env.get("LOG_FORMAT", DEFAULT_LOG_FORMAT),
                file_path=env.get("LOG_FILE") or None,
                max_file_size=_parse_int(env, "LOG_MAX_SIZE", 10 * 1024 * 1024, errors),
                backup_count=_parse_int(env, "LOG_BACKUP_COUNT", 5, errors),
            ),
        )

        if errors:
            raise ConfigurationError(f"Configuration validation failed: {'; '.join(errors)}")
        return config

    @classmethod
    def from_yaml(cls, config_path: str, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        """YAML 파일에서 설정 로드"""
        env = os.environ if environ is None else environ
        config_file = Path(config_path)
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_path}")

        with open(config_file, 'r', encoding='utf-8') as f:
            try:
                config_data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Cannot parse config file {config_path}: {e}") from e

        if not isinstance(config_data, dict):
            raise ConfigurationError(f"Invalid config file {config_path}: top level must be a mapping")

        github_data = _section(config_data, 'github', config_path)
        # 토큰은 파일보다 환경 변수에서 받는 것을 기본으로 함 (null 도 미설정으로 취급)
        if github_data.get('token') is None:
            github_data['token'] = env.get("GITHUB_TOKEN") or None
        if github_data.get('repository') is None:
            github_data['repository'] = env.get("GITHUB_REPOSITORY", "")

        reminder_data = _section(config_data, 'reminder', config_path)
        if 'time_unit_seconds' in reminder_data:
            raw = reminder_data.pop('time_unit_seconds')
            try:
                reminder_data['time_unit'] = timedelta(seconds=float(raw))
            except (TypeError, ValueError, OverflowError) as e:
                raise ConfigurationError(
                    f"Invalid config file {config_path}: time_unit_seconds must be a number, got {raw!r}"
                ) from e
        if 'automation_login_markers' in reminder_data:
            markers = reminder_data['automation_login_markers']
            if not isinstance(markers, (list, tuple)):
                raise ConfigurationError(
                    f"Invalid config file {config_path}: automation_login_markers must be a list, got {markers!r}"
                )
            reminder_data['automation_login_markers'] = tuple(markers)

        try:
            return cls(
                github=GitHubConfig(**github_data),
                reminder=ReminderConfig(**reminder_data),
                logging=LoggingConfig(**_section(config_data, 'logging', config_path)),
            )
        except TypeError as e:
            raise ConfigurationError(f"Invalid config file {config_path}: {e}") from e

    @classmethod
    def load(cls, config_path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        """설정 로드 후 검증"""
        env = os.environ if environ is None else environ
        path = config_path or env.get("REMINDER_CONFIG")
        config = cls.from_yaml(path, env) if path else cls.from_env(env)
        config.validate()
        return config

    def validate(self) -> None:
        """설정 유효성 검사"""
        # 타입 오류가 있으면 값 비교 전에 중단
        errors = _type_errors(self)
        if errors:
            raise ConfigurationError(f"Configuration validation failed: {'; '.join(errors)}")

        # GitHub 토큰 필수 확인
        if not self.github.token:
            errors.append("GITHUB_TOKEN is required")

        if not self.github.owner or not self.github.repo or '/' in self.github.repo:
            errors.append(f"Cannot parse OWNER/REPO from GITHUB_REPOSITORY: {self.github.repository!r}")

        if self.reminder.remind_after < 0 or self.reminder.remind_every < 0:
            errors.append("Reminder thresholds must be non-negative")

        if self.reminder.time_unit <= timedelta(0):
            errors.append("Time unit must be positive")

        if not self.reminder.marker:
            errors.append("Marker cannot be empty")

        if self.github.max_rate_limit_retries is not None and self.github.max_rate_limit_retries < 0:
            errors.append("Rate limit retry budget must be non-negative")

        if self.logging.level.upper() not in VALID_LOG_LEVELS:
            errors.append(f"Invalid log level: {self.logging.level}")

        if errors:
            raise ConfigurationError(f"Configuration validation failed: {'; '.join(errors)}")

    def to_dict(self) -> Dict[str, Any]:
        """설정을 딕셔너리로 변환"""
        return {
            'github': {
                'repository': self.github.repository,
                'api_base_url': self.github.api_base_url,
                'timeout_seconds': self.github.timeout_seconds,
                'user_agent': self.github.user_agent,
                'rate_limit_margin_seconds': self.github.rate_limit_margin_seconds,
                'max_rate_limit_retries': self.github.max_rate_limit_retries,
                # 보안상 토큰은 제외
            },
            'reminder': {
                'label_name': self.reminder.label_name,
                'target_branch': self.reminder.target_branch,
                'remind_after': self.reminder.remind_after,
                'remind_every': self.reminder.remind_every,
                'marker': self.reminder.marker,
                'time_unit_seconds': self.reminder.time_unit.total_seconds(),
                'post_delay_seconds': self.reminder.post_delay_seconds,
                'dry_run': self.reminder.dry_run,
                'automation_login_markers': list(self.reminder.automation_login_markers),
            },
            'logging': {
                'level': self.logging.level,
                'format': self.logging.format,
                'file_path': self.logging.file_path,
                'max_file_size': self.logging.max_file_size,
                'backup_count': self.logging.backup_count,
            },
        }


def setup_logging(config: LoggingConfig) -> None:
    """로깅 설정"""
    logging.basicConfig(
        level=getattr(logging, config.level.upper()),
        format=config.format,
    )

    # 파일 로깅이 설정된 경우 로테이션 설정
    if config.file_path:
        from logging.handlers import RotatingFileHandler

        handler = RotatingFileHandler(
            config.file_path,
            maxBytes=config.max_file_size,
            backupCount=config.backup_count,
        )
        handler.setFormatter(logging.Formatter(config.format))
        logging.getLogger().addHandler(handler)


def _parse_int(env: Mapping[str, str], name: str, default: int, errors: List[str]) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        errors.append(f"{name} must be an integer, got {raw!r}")
        return default


def _parse_optional_int(env: Mapping[str, str], name: str, errors: List[str]) -> Optional[int]:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError:
        errors.append(f"{name} must be an integer, got {raw!r}")
        return None


def _parse_float(env: Mapping[str, str], name: str, default: float, errors: List[str]) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        errors.append(f"{name} must be a number, got {raw!r}")
        return default


def _section(config_data: Dict[str, Any], name: str, config_path: str) -> Dict[str, Any]:
    section = config_data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"Invalid config file {config_path}: '{name}' must be a mapping")
    return dict(section)


_NUMBER = (int, float)
_NONE = type(None)

# 섹션별 필드 타입: (허용 타입, 오류 메시지용 설명)
_FIELD_TYPES = {
    'github': {
        'token': ((str, _NONE), "a string"),
        'repository': ((str,), "a string"),
        'api_base_url': ((str,), "a string"),
        'timeout_seconds': (_NUMBER, "a number"),
        'user_agent': ((str,), "a string"),
        'rate_limit_margin_seconds': (_NUMBER, "a number"),
        'max_rate_limit_retries': ((int, _NONE), "an integer"),
    },
    'reminder': {
        'label_name': ((str,), "a string"),
        'target_branch': ((str,), "a string"),
        'remind_after': ((int,), "an integer"),
        'remind_every': ((int,), "an integer"),
        'marker': ((str,), "a string"),
        'time_unit': ((timedelta,), "a duration"),
        'post_delay_seconds': (_NUMBER, "a number"),
        'dry_run': ((bool,), "a boolean"),
        'automation_login_markers': ((tuple,), "a list of strings"),
    },
    'logging': {
        'level': ((str,), "a string"),
        'format': ((str,), "a string"),
        'file_path': ((str, _NONE), "a string"),
        'max_file_size': ((int,), "an integer"),
        'backup_count': ((int,), "an integer"),
    },
}


def _type_errors(config: AppConfig) -> List[str]:
    errors = []
    for section_name, fields in _FIELD_TYPES.items():
        section = getattr(config, section_name)
        for name, (types, expected) in fields.items():
            value = getattr(section, name)
            # bool 은 int 의 하위 타입이므로 따로 거름
            wrong_bool = isinstance(value, bool) and bool not in types
            if wrong_bool or not isinstance(value, types):
                errors.append(f"{section_name}.{name} must be {expected}, got {value!r}")

    markers = config.reminder.automation_login_markers
    if isinstance(markers, tuple) and not all(isinstance(m, str) for m in markers):
        errors.append(f"reminder.automation_login_markers must be a list of strings, got {list(markers)!r}")
    return errors
