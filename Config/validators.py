# Config/validators.py
"""
Configuration validation system.

Validates the constants in Config/constants_core.py and the values read from
the environment with:
- Type correctness (int, str)
- Range constraints (min/max values)
- Address format (0x + 40 hex digits)

Usage:
    from Config.validators import validate_all_config

    # At startup
    validate_all_config()  # Raises ConfigError if invalid

    # Or get a validation report
    report = validate_all_config(raise_on_error=False)
    if not report:
        print(report.format_report())
"""

from __future__ import annotations
import re
from typing import Any, Optional, List, Tuple

from .exceptions import ConfigError


_ADDRESS_PATTERN = re.compile(r'^0x[0-9a-fA-F]{40}$')


def is_address(value: Any) -> bool:
    """True for a 0x-prefixed, 40 hex digit address (checksum not enforced)."""
    return isinstance(value, str) and bool(_ADDRESS_PATTERN.match(value))


# ============================================================================
# Validation Rule System
# ============================================================================

class ValidationRule:
    """Base class for validation rules."""

    def __init__(self, key: str, description: str):
        self.key = key
        self.description = description

    def validate(self, value: Any) -> Optional[str]:
        """
        Validate a value.

        Returns:
            None if valid
            Error message string if invalid
        """
        raise NotImplementedError


class TypeRule(ValidationRule):
    """Validates value is correct type."""

    def __init__(self, key: str, expected_type: type, description: str = ""):
        super().__init__(key, description or f"Must be {expected_type.__name__}")
        self.expected_type = expected_type

    def validate(self, value: Any) -> Optional[str]:
        # bool is an int subclass but never a valid count of decimals
        if self.expected_type is int and isinstance(value, bool):
            return "Expected int, got bool"
        if not isinstance(value, self.expected_type):
            return f"Expected {self.expected_type.__name__}, got {type(value).__name__}"
        return None


class RangeRule(ValidationRule):
    """Validates an integer value is within an inclusive range."""

    def __init__(self, key: str, min_val: Optional[int] = None, max_val: Optional[int] = None,
                 description: str = ""):
        self.min_val = min_val
        self.max_val = max_val

        if not description:
            parts = []
            if min_val is not None:
                parts.append(f">= {min_val}")
            if max_val is not None:
                parts.append(f"<= {max_val}")
            description = " and ".join(parts) if parts else "no range constraint"

        super().__init__(key, description)

    def validate(self, value: Any) -> Optional[str]:
        try:
            num = int(value)
        except (TypeError, ValueError):
            return f"Cannot convert to integer: {value!r}"

        if self.min_val is not None and num < self.min_val:
            return f"Must be >= {self.min_val}, got {num}"
        if self.max_val is not None and num > self.max_val:
            return f"Must be <= {self.max_val}, got {num}"
        return None


class ChoiceRule(ValidationRule):
    """Validates value is one of allowed choices."""

    def __init__(self, key: str, choices: List[Any], description: str = ""):
        self.choices = choices
        desc = description or f"Must be one of: {', '.join(str(c) for c in choices)}"
        super().__init__(key, desc)

    def validate(self, value: Any) -> Optional[str]:
        if value not in self.choices:
            return f"Must be one of {self.choices}, got {value!r}"
        return None


class AddressRule(ValidationRule):
    """Validates value is a 20-byte hex address."""

    def __init__(self, key: str, description: str = ""):
        super().__init__(key, description or "0x-prefixed 40 hex digit address")

    def validate(self, value: Any) -> Optional[str]:
        if not is_address(value):
            return f"Not a valid address: {value!r}"
        return None


# ============================================================================
# Rules
# ============================================================================

CORE_RULES = [
    AddressRule("GHST_CONTRACT_ADDRESS", "GHST token contract"),
    AddressRule("CONTRACT_ADDRESS", "Aavegotchi diamond"),

    TypeRule("DEFAULT_TOKEN_DECIMALS", int, "Default ERC-20 decimals"),
    RangeRule("DEFAULT_TOKEN_DECIMALS", min_val=0, max_val=77),

    TypeRule("MAX_TOKEN_DECIMALS", int),
    RangeRule("MAX_TOKEN_DECIMALS", min_val=0, max_val=77),

    TypeRule("BALANCE_DISPLAY_PLACES", int),
    RangeRule("BALANCE_DISPLAY_PLACES", min_val=0, max_val=18),

    TypeRule("ADDRESS_DISPLAY_CHARS", int),
    RangeRule("ADDRESS_DISPLAY_CHARS", min_val=3, max_val=42),
]

ENVIRONMENT_RULES = [
    AddressRule("ghst_contract_address"),
    AddressRule("escrow_contract_address"),
    RangeRule("default_token_decimals", min_val=0, max_val=77),
    ChoiceRule("log_level", ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
]


# ============================================================================
# Validation Engine
# ============================================================================

class ConfigReport:
    """Result of a config validation pass."""

    def __init__(self):
        self.errors: List[Tuple[str, str]] = []  # (key, error_message)
        self.warnings: List[Tuple[str, str]] = []  # (key, warning_message)

    def add_error(self, key: str, message: str):
        self.errors.append((key, message))

    def add_warning(self, key: str, message: str):
        self.warnings.append((key, message))

    def merge(self, other: 'ConfigReport'):
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def __bool__(self) -> bool:
        return self.is_valid

    def format_report(self, include_warnings: bool = True) -> str:
        """Format validation result as human-readable report."""
        lines = []

        if self.errors:
            lines.append("VALIDATION ERRORS:")
            for key, msg in self.errors:
                lines.append(f"  ❌ {key}: {msg}")

        if include_warnings and self.warnings:
            if lines:
                lines.append("")
            lines.append("VALIDATION WARNINGS:")
            for key, msg in self.warnings:
                lines.append(f"  ⚠️  {key}: {msg}")

        if not self.errors and not self.warnings:
            lines.append("✅ All validation checks passed!")

        return "\n".join(lines)


def validate_config_dict(config: dict, rules: List[ValidationRule]) -> ConfigReport:
    """
    Validate a config dictionary against a set of rules.

    Args:
        config: Dictionary of config values
        rules: List of validation rules

    Returns:
        ConfigReport with errors/warnings
    """
    report = ConfigReport()

    for rule in rules:
        if rule.key not in config:
            report.add_warning(rule.key, "Not found in config (using default)")
            continue

        error = rule.validate(config[rule.key])
        if error:
            report.add_error(rule.key, error)

    return report


def validate_core_constants() -> ConfigReport:
    """Validate constants from Config.constants_core."""
    from . import constants_core as cc

    config = {
        "GHST_CONTRACT_ADDRESS": cc.GHST_CONTRACT_ADDRESS,
        "CONTRACT_ADDRESS": cc.CONTRACT_ADDRESS,
        "DEFAULT_TOKEN_DECIMALS": cc.DEFAULT_TOKEN_DECIMALS,
        "MAX_TOKEN_DECIMALS": cc.MAX_TOKEN_DECIMALS,
        "BALANCE_DISPLAY_PLACES": cc.BALANCE_DISPLAY_PLACES,
        "ADDRESS_DISPLAY_CHARS": cc.ADDRESS_DISPLAY_CHARS,
    }
    return validate_config_dict(config, CORE_RULES)


def validate_environment(environment) -> ConfigReport:
    """Validate the values an Environment resolves from .env / os.environ."""
    report = ConfigReport()
    config = {}
    for rule in ENVIRONMENT_RULES:
        try:
            config[rule.key] = getattr(environment, rule.key)
        except ConfigError as e:
            report.add_error(rule.key, str(e))

    report.merge(validate_config_dict(config, [r for r in ENVIRONMENT_RULES if r.key in config]))
    return report


def validate_all_config(raise_on_error: bool = True, verbose: bool = False,
                        environment=None) -> Optional[ConfigReport]:
    """
    Validate all configuration.

    Args:
        raise_on_error: If True, raise ConfigError on validation failure
        verbose: If True, print validation report even if successful
        environment: Environment to check; defaults to Config.environment.env

    Returns:
        ConfigReport if raise_on_error=False
        None if raise_on_error=True (raises on error instead)

    Raises:
        ConfigError: If validation fails and raise_on_error=True
    """
    if environment is None:
        from .environment import env as environment

    report = validate_core_constants()
    report.merge(validate_environment(environment))

    if verbose:
        print("\n" + "=" * 60)
        print("CONFIG VALIDATION REPORT")
        print("=" * 60)
        print(report.format_report())
        print("=" * 60 + "\n")

    if not report.is_valid and raise_on_error:
        raise ConfigError(f"Config validation failed:\n{report.format_report(include_warnings=False)}")

    return report if not raise_on_error else None
