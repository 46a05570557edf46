"""Provisioning run configuration values."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Final

from .env import env_flag, optional_env_var

DEFAULT_PROVIDER: Final[str] = "Asurion"
DEFAULT_SERVICE_CODE_TYPE: Final[str] = "Payroll"
DEFAULT_KIND: Final[str] = "Equipment"


@dataclass(frozen=True, slots=True)
class ProvisioningConfig:
    """Names of the reference rows a run hangs off, plus naming/debug switches.

    ``default_kind`` is used for records that carry no type of their own. It names
    the part type (lower-cased) and the line-item type. ``pay_grade_type`` falls
    back to ``default_kind`` when unset.
    """

    provider_name: str = DEFAULT_PROVIDER
    service_code_type: str = DEFAULT_SERVICE_CODE_TYPE
    default_kind: str = DEFAULT_KIND
    pay_grade_type: str | None = None
    verbose_names: bool = False
    debug: bool = False

    @property
    def effective_pay_grade_type(self) -> str:
        return self.pay_grade_type or self.default_kind

    def with_overrides(self, **changes: object) -> ProvisioningConfig:
        """Return a copy with every non-``None`` value in ``changes`` applied."""

        applied = {key: value for key, value in changes.items() if value is not None}
        return replace(self, **applied)  # type: ignore[arg-type]


def get_provisioning_config() -> ProvisioningConfig:
    return ProvisioningConfig(
        provider_name=optional_env_var("SCPROV_PROVIDER", DEFAULT_PROVIDER) or DEFAULT_PROVIDER,
        service_code_type=optional_env_var("SCPROV_SERVICE_CODE_TYPE", DEFAULT_SERVICE_CODE_TYPE)
        or DEFAULT_SERVICE_CODE_TYPE,
        default_kind=optional_env_var("SCPROV_DEFAULT_KIND", DEFAULT_KIND) or DEFAULT_KIND,
        pay_grade_type=optional_env_var("SCPROV_PAY_GRADE_TYPE"),
        verbose_names=env_flag("SCPROV_VERBOSE_NAMES"),
        debug=env_flag("SCPROV_DEBUG"),
    )
