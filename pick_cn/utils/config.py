"""Configuration management for pick-cn."""

import json
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml

from ..extractors import EXTRACTORS, ExtractionOptions

CONFIG_FILE_NAME = '.pick-cn.yml'
API_CONFIG_FILE_NAME = 'api-config.json'
DEFAULT_OUTPUT_NAME = 'Chinese-To-English.json'

DEFAULT_EXTENSIONS = ['.js', '.jsx', '.ts', '.tsx', '.mjs', '.cjs']
DEFAULT_EXCLUDE = [
    'node_modules/', 'dist/', 'build/', '.git/', 'coverage/', '*.min.js',
]

TRANSLATION_PROVIDERS = ('baidu', 'youdao', 'google', 'doubao')

DOUBAO_DEFAULT_URL = 'https://ark.cn-beijing.volces.com/api/v3/bots/chat/completions'
DOUBAO_DEFAULT_MODEL = 'doubao-pro-32k'


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__(f"Configuration validation failed: {'; '.join(errors)}")


class ConfigValidationWarning:
    """Represents a configuration warning (non-fatal)."""

    def __init__(self, message: str):
        self.message = message

    def __str__(self):
        return self.message


@dataclass
class ProjectConfig:
    """Project configuration."""
    name: str = "Unnamed Project"


@dataclass
class PathsConfig:
    """Where to scan and where to write."""
    source: str = "."
    # Output directory; empty means the source directory.
    target: str = ""
    output: str = DEFAULT_OUTPUT_NAME
    extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    exclude: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE))


@dataclass
class ExtractionConfig:
    """Extraction method and per-construct options."""
    method: str = "ast"  # ast | regex
    options: Dict[str, bool] = field(default_factory=dict)

    def build_options(self) -> ExtractionOptions:
        return ExtractionOptions.from_dict(self.options)


@dataclass
class TranslationConfig:
    """Translation settings."""
    enabled: bool = True
    provider: str = "baidu"  # baidu | youdao | google | doubao
    # Legacy api-config.json location; empty means <source>/api-config.json.
    api_config: str = ""


# Legacy api-config.json uses camelCase keys.
_CAMEL_CASE_KEYS = {
    'appId': 'app_id',
    'secretKey': 'secret_key',
    'appKey': 'app_key',
    'appSecret': 'app_secret',
    'apiKey': 'api_key',
}


def _normalize_keys(data: Mapping[str, Any]) -> Dict[str, str]:
    return {_CAMEL_CASE_KEYS.get(key, key): value for key, value in data.items()}


class _Credentials:
    """Helpers shared by the per-provider credential records."""

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]):
        data = _normalize_keys(data or {})
        known = {f.name for f in fields(cls)}
        return cls(**{k: str(v) for k, v in data.items() if k in known and v})

    def merged_with(self, other):
        """Return a copy where fields ``other`` sets explicitly win."""
        values = asdict(self)
        defaults = asdict(type(other)())
        values.update({k: v for k, v in asdict(other).items() if v and v != defaults[k]})
        return type(self)(**values)

    @property
    def is_configured(self) -> bool:
        return all(getattr(self, name) for name in self.REQUIRED)


@dataclass
class BaiduCredentials(_Credentials):
    app_id: str = ""
    secret_key: str = ""

    REQUIRED = ('app_id', 'secret_key')


@dataclass
class YoudaoCredentials(_Credentials):
    app_key: str = ""
    app_secret: str = ""

    REQUIRED = ('app_key', 'app_secret')


@dataclass
class GoogleCredentials(_Credentials):
    api_key: str = ""

    REQUIRED = ('api_key',)


@dataclass
class DoubaoCredentials(_Credentials):
    api_key: str = ""
    model: str = DOUBAO_DEFAULT_MODEL
    url: str = DOUBAO_DEFAULT_URL

    REQUIRED = ('api_key',)


# Environment variable -> (provider, field)
ENVIRONMENT_VARIABLES = {
    'BAIDU_TRANSLATE_APP_ID': ('baidu', 'app_id'),
    'BAIDU_TRANSLATE_SECRET_KEY': ('baidu', 'secret_key'),
    'YOUDAO_TRANSLATE_APP_KEY': ('youdao', 'app_key'),
    'YOUDAO_TRANSLATE_APP_SECRET': ('youdao', 'app_secret'),
    'GOOGLE_TRANSLATE_API_KEY': ('google', 'api_key'),
    'DOUBAO_API_KEY': ('doubao', 'api_key'),
}


@dataclass
class CredentialsConfig:
    """
    Credentials for every translation provider.

    Built once at startup and passed to translator constructors; providers
    never read the environment themselves.
    """
    baidu: BaiduCredentials = field(default_factory=BaiduCredentials)
    youdao: YoudaoCredentials = field(default_factory=YoudaoCredentials)
    google: GoogleCredentials = field(default_factory=GoogleCredentials)
    doubao: DoubaoCredentials = field(default_factory=DoubaoCredentials)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'CredentialsConfig':
        data = data or {}
        return cls(
            baidu=BaiduCredentials.from_dict(data.get('baidu')),
            youdao=YoudaoCredentials.from_dict(data.get('youdao')),
            google=GoogleCredentials.from_dict(data.get('google')),
            doubao=DoubaoCredentials.from_dict(data.get('doubao')),
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'CredentialsConfig':
        environ = os.environ if environ is None else environ
        data: Dict[str, Dict[str, str]] = {}
        for variable, (provider, name) in ENVIRONMENT_VARIABLES.items():
            value = environ.get(variable)
            if value:
                data.setdefault(provider, {})[name] = value
        return cls.from_dict(data)

    @classmethod
    def from_api_config(cls, path: Path) -> 'CredentialsConfig':
        """
        Load a legacy ``api-config.json`` file.

        Raises:
            ConfigValidationError: If the file is unreadable or not a JSON object
        """
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except OSError as e:
            raise ConfigValidationError([f"Cannot read {path}: {e}"]) from e
        except json.JSONDecodeError as e:
            raise ConfigValidationError([f"Invalid JSON in {path}: {e}"]) from e
        if not isinstance(data, dict):
            raise ConfigValidationError([f"{path} must contain a JSON object"])
        return cls.from_dict(data)

    @classmethod
    def resolve(
        cls,
        config: Optional['Config'] = None,
        api_config_path: Optional[Path] = None,
        source_dir: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> 'CredentialsConfig':
        """
        Merge every credential source, highest precedence last:
        environment, ``.pick-cn.yml``, ``<source>/api-config.json``,
        explicit ``--api-config`` file.
        """
        credentials = cls.from_env(environ)

        if config is not None:
            credentials = credentials.merged_with(config.credentials)
            if api_config_path is None and config.translation.api_config:
                api_config_path = Path(config.translation.api_config)

        if source_dir is not None:
            project_file = Path(source_dir) / API_CONFIG_FILE_NAME
            if project_file.is_file():
                credentials = credentials.merged_with(cls.from_api_config(project_file))

        if api_config_path is not None:
            credentials = credentials.merged_with(cls.from_api_config(Path(api_config_path)))

        return credentials

    def merged_with(self, other: 'CredentialsConfig') -> 'CredentialsConfig':
        return CredentialsConfig(
            baidu=self.baidu.merged_with(other.baidu),
            youdao=self.youdao.merged_with(other.youdao),
            google=self.google.merged_with(other.google),
            doubao=self.doubao.merged_with(other.doubao),
        )

    def for_provider(self, provider: str):
        return getattr(self, provider)

    def to_dict(self) -> Dict[str, Dict[str, str]]:
        return {name: asdict(getattr(self, name)) for name in TRANSLATION_PROVIDERS}


@dataclass
class Config:
    """Main configuration class."""
    project: ProjectConfig = field(default_factory=ProjectConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    translation: TranslationConfig = field(default_factory=TranslationConfig)
    credentials: CredentialsConfig = field(default_factory=CredentialsConfig)

    @classmethod
    def from_file(cls, config_path: Optional[Path] = None) -> 'Config':
        """Load configuration from YAML; defaults when no file exists."""
        if config_path is None:
            config_path = Path.cwd() / CONFIG_FILE_NAME

            if not config_path.exists():
                return cls()

        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Config':
        return cls(
            project=ProjectConfig(**data.get('project') or {}),
            paths=PathsConfig(**data.get('paths') or {}),
            extraction=ExtractionConfig(**data.get('extraction') or {}),
            translation=TranslationConfig(**data.get('translation') or {}),
            credentials=CredentialsConfig.from_dict(data.get('credentials')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'project': asdict(self.project),
            'paths': asdict(self.paths),
            'extraction': {
                'method': self.extraction.method,
                'options': dict(self.extraction.options),
            },
            'translation': asdict(self.translation),
            'credentials': self.credentials.to_dict(),
        }

    def save(self, config_path: Optional[Path] = None):
        """Save configuration to YAML file."""
        if config_path is None:
            config_path = Path.cwd() / CONFIG_FILE_NAME

        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False, allow_unicode=True)

    @property
    def output_path(self) -> Path:
        """Mapping file location: ``target`` directory, else the source directory."""
        directory = Path(self.paths.target or self.paths.source)
        return directory / self.paths.output

    def validate(self, raise_on_error: bool = False) -> Tuple[List[str], List[ConfigValidationWarning]]:
        """
        Validate configuration and return errors and warnings.

        Args:
            raise_on_error: If True, raise ConfigValidationError on validation errors

        Returns:
            Tuple of (errors, warnings) lists
        """
        errors = []
        warnings = []

        if self.extraction.method not in EXTRACTORS:
            errors.append(
                f"Invalid extraction method '{self.extraction.method}'. "
                f"Valid options: {', '.join(EXTRACTORS)}"
            )

        try:
            self.extraction.build_options()
        except ValueError as e:
            errors.append(str(e))

        if self.translation.provider not in TRANSLATION_PROVIDERS:
            errors.append(
                f"Invalid translation provider '{self.translation.provider}'. "
                f"Valid options: {', '.join(TRANSLATION_PROVIDERS)}"
            )
        elif self.translation.enabled and not self.credentials.for_provider(self.translation.provider).is_configured:
            warnings.append(ConfigValidationWarning(
                f"No credentials for '{self.translation.provider}' in {CONFIG_FILE_NAME}; "
                f"environment or {API_CONFIG_FILE_NAME} must provide them"
            ))

        if not self.paths.output:
            errors.append("paths.output cannot be empty")
        elif not self.paths.output.endswith('.json'):
            warnings.append(ConfigValidationWarning(
                f"Output file '{self.paths.output}' does not end with .json"
            ))

        if not self.paths.extensions:
            errors.append("paths.extensions cannot be empty")
        for ext in self.paths.extensions:
            if not ext.startswith('.'):
                errors.append(f"Invalid extension '{ext}': must start with '.'")

        if not Path(self.paths.source).exists():
            warnings.append(ConfigValidationWarning(
                f"Source path does not exist: {self.paths.source}"
            ))

        if raise_on_error and errors:
            raise ConfigValidationError(errors)

        return errors, warnings


def create_default_config(provider: str = 'baidu') -> Config:
    """Create default configuration for a translation provider."""
    config = Config()
    config.translation.provider = provider
    return config
