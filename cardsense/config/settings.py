"""Application settings loader from YAML configuration."""
import yaml
from decimal import Decimal
from pathlib import Path
from typing import Optional
from dataclasses import dataclass

from cardsense.utils.exceptions import ConfigError

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class AppSettings:
    """Application-wide settings loaded from config.yaml."""
    
    # App info
    app_name: str
    app_version: str
    
    # Logging
    log_level: str
    log_dir: Optional[str]
    log_max_file_size_mb: int
    log_backup_count: int
    
    # Parsing
    min_line_length: int
    min_description_length: int
    description_max_length: int
    credit_limit_min: Decimal
    credit_limit_max: Decimal
    
    # Analysis
    default_credit_limit: Decimal
    rewards_rate: Decimal
    high_value_threshold: Decimal
    top_categories: int
    max_insights: int
    max_monthly_periods: int
    
    # Recommendation
    utilization_ceiling: Decimal
    
    # Processing
    max_concurrent_documents: int
    abort_on_failure: bool
    
    @classmethod
    def load(cls, config_path: Path = None) -> "AppSettings":
        """Load settings from YAML file."""
        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH
        config_path = Path(config_path)
        
        if not config_path.exists():
            raise ConfigError(f"Configuration file not found: {config_path}")
        
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}")
        
        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file is empty or malformed: {config_path}")
        
        try:
            return cls(
                app_name=config["app"]["name"],
                app_version=str(config["app"]["version"]),
                log_level=config["logging"]["level"],
                log_dir=config["logging"].get("dir"),
                log_max_file_size_mb=config["logging"]["max_file_size_mb"],
                log_backup_count=config["logging"]["backup_count"],
                min_line_length=config["parsing"]["min_line_length"],
                min_description_length=config["parsing"]["min_description_length"],
                description_max_length=config["parsing"]["description_max_length"],
                credit_limit_min=_decimal(config["parsing"]["credit_limit_min"]),
                credit_limit_max=_decimal(config["parsing"]["credit_limit_max"]),
                default_credit_limit=_decimal(config["analysis"]["default_credit_limit"]),
                rewards_rate=_decimal(config["analysis"]["rewards_rate"]),
                high_value_threshold=_decimal(config["analysis"]["high_value_threshold"]),
                top_categories=config["analysis"]["top_categories"],
                max_insights=config["analysis"]["max_insights"],
                max_monthly_periods=config["analysis"]["max_monthly_periods"],
                utilization_ceiling=_decimal(config["recommendation"]["utilization_ceiling"]),
                max_concurrent_documents=config["processing"]["max_concurrent_documents"],
                abort_on_failure=bool(config["processing"]["abort_on_failure"])
            )
        except KeyError as e:
            raise ConfigError(f"Missing configuration key {e} in {config_path}")
    
    def validate(self) -> tuple[bool, str]:
        """Validate configuration values."""
        if self.log_level.upper() not in LOG_LEVELS:
            return False, f"Unknown log level: {self.log_level}"

        if self.min_line_length < 1 or self.min_description_length < 1:
            return False, "Minimum line and description lengths must be at least 1"
        
        if self.description_max_length < self.min_description_length:
            return False, "Description max length must not be below the minimum description length"
        
        if self.credit_limit_min <= 0 or self.credit_limit_min > self.credit_limit_max:
            return False, "Credit limit bounds must be positive with min <= max"
        
        if self.default_credit_limit <= 0:
            return False, "Default credit limit must be positive"
        
        if not 0 < self.utilization_ceiling <= 100:
            return False, "Utilization ceiling must be within (0, 100]"
        
        if self.top_categories < 1 or self.max_insights < 1 or self.max_monthly_periods < 1:
            return False, "Category, insight and period counts must be at least 1"
        
        if self.max_concurrent_documents < 1:
            return False, "Max concurrent documents must be at least 1"
        
        return True, "Configuration is valid"


def _decimal(value) -> Decimal:
    """Convert YAML numbers to Decimal without float artifacts."""
    return Decimal(str(value))


# Global settings instance
_settings: Optional[AppSettings] = None


def get_settings() -> AppSettings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = AppSettings.load()
    return _settings


def use_settings(settings: AppSettings) -> AppSettings:
    """Install settings as the global instance."""
    global _settings
    _settings = settings
    return _settings


def reset_settings() -> None:
    """Drop the global instance so the next call reloads from disk."""
    global _settings
    _settings = None
