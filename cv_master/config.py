"""YAML config loading and validation."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_SESSION_SECRET = "dev-secret-change-me-in-production"


@dataclass
class GatewayConfig:
    api_key: str = ""
    model: str = "gpt-4o-mini"
    analyze_temperature: float = 0.2
    optimize_temperature: float = 0.4
    timeout_seconds: float = 120.0
    max_retries: int = 0  # single attempt; retry is user-initiated
    response_language: str = "English"


@dataclass
class IntakeConfig:
    max_upload_bytes: int = 5 * 1024 * 1024


@dataclass
class WebConfig:
    host: str = "127.0.0.1"
    port: int = 8000
    session_secret: str = DEFAULT_SESSION_SECRET
    default_theme: str = "light"
    poll_interval_seconds: int = 2
    max_sessions: int = 500


@dataclass
class AppConfig:
    gateway: GatewayConfig = field(default_factory=GatewayConfig)
    intake: IntakeConfig = field(default_factory=IntakeConfig)
    web: WebConfig = field(default_factory=WebConfig)
    log_dir: str = "logs"


def load_config(config_path: Optional[str] = "config.yaml") -> AppConfig:
    """Load and validate configuration from YAML file.

    Passing ``None`` skips the file and builds the config from defaults and
    environment variables only.
    """
    raw: dict = {}
    if config_path is not None:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                "Copy config.example.yaml to config.yaml and fill in your settings."
            )
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

    config = AppConfig()

    # Gateway (env vars take precedence)
    gateway_raw = raw.get("gateway", {})
    config.gateway = GatewayConfig(
        api_key=os.environ.get("OPENAI_API_KEY", gateway_raw.get("api_key", "")),
        model=os.environ.get("CV_MASTER_MODEL", gateway_raw.get("model", "gpt-4o-mini")),
        analyze_temperature=float(gateway_raw.get("analyze_temperature", 0.2)),
        optimize_temperature=float(gateway_raw.get("optimize_temperature", 0.4)),
        timeout_seconds=float(gateway_raw.get("timeout_seconds", 120.0)),
        max_retries=int(gateway_raw.get("max_retries", 0)),
        response_language=gateway_raw.get("response_language", "English"),
    )

    # Intake
    intake_raw = raw.get("intake", {})
    config.intake = IntakeConfig(
        max_upload_bytes=int(intake_raw.get("max_upload_bytes", 5 * 1024 * 1024)),
    )

    # Web
    web_raw = raw.get("web", {})
    config.web = WebConfig(
        host=web_raw.get("host", "127.0.0.1"),
        port=int(web_raw.get("port", 8000)),
        session_secret=os.environ.get("SESSION_SECRET") or web_raw.get("session_secret") or DEFAULT_SESSION_SECRET,
        default_theme=web_raw.get("default_theme", "light"),
        poll_interval_seconds=int(web_raw.get("poll_interval_seconds", 2)),
        max_sessions=int(web_raw.get("max_sessions", 500)),
    )

    config.log_dir = raw.get("log_dir", "logs")

    return config


def validate_config(config: AppConfig) -> list[str]:
    """Return list of validation warnings (empty = OK)."""
    warnings = []

    if not config.gateway.api_key:
        warnings.append("No OpenAI API key configured - analysis and optimization will fail")

    if config.web.session_secret == DEFAULT_SESSION_SECRET:
        warnings.append("Using the default session secret - set SESSION_SECRET in production")

    for name in ("analyze_temperature", "optimize_temperature"):
        value = getattr(config.gateway, name)
        if not 0.0 <= value <= 2.0:
            warnings.append(f"gateway.{name} = {value} is outside the supported range 0.0-2.0")

    if config.gateway.analyze_temperature > config.gateway.optimize_temperature:
        warnings.append("Analysis temperature is higher than optimization temperature - results may vary between runs")

    if config.web.default_theme not in ("light", "dark"):
        warnings.append(f"Unknown default theme '{config.web.default_theme}' - falling back to light")

    return warnings
