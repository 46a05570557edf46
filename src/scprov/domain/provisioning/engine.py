"""Onboard one code at a time: part, line item, service code and their links."""

from __future__ import annotations

from logging import Logger, getLogger
from typing import TYPE_CHECKING

from scprov.domain.model import EntityKind, LookupKind
from scprov.domain.provisioning.context import ProvisionedCode, RunContext
from scprov.domain.provisioning.errors import SetupError
from scprov.domain.provisioning.kinds import TemplateContext
from scprov.domain.provisioning.ledger import ProvisioningLedger
from scprov.domain.provisioning.resolver import EntityResolver, Resolution

if TYPE_CHECKING:
    from decimal import Decimal
    from uuid import UUID

    from scprov.config import ProvisioningConfig
    from scprov.domain.ports.unit_of_work import ProvisioningRepositories

log = getLogger(__name__)


class ProvisioningEngine:
    """Runs the fixed creation sequence for each record against a run context.

    The provider and the service-code type are looked up on construction, so a
    misconfigured engine fails with ``SetupError`` before any run starts. The
    engine itself keeps no per-run state; that lives in ``RunContext``.
    """

    def __init__(
        self,
        repositories: ProvisioningRepositories,
        config: ProvisioningConfig,
        *,
        logger: Logger | None = None,
    ) -> None:
        self._repositories = repositories
        self._config = config
        self._log = logger or log
        self._debug_enabled = config.debug
        self._resolver = EntityResolver(repositories.entities, logger=self._log)
        self._templates: dict[str, TemplateContext] = {}

        self.provider_id = self._require(LookupKind.SERVICE_PROVIDER, config.provider_name)
        self._service_code_type_id = self._require(
            LookupKind.SERVICE_CODE_TYPE, config.service_code_type.lower()
        )

    @property
    def config(self) -> ProvisioningConfig:
        return self._config

    @property
    def debug(self) -> bool:
        return self._debug_enabled

    def set_debug(self, enabled: bool) -> None:  # noqa: FBT001
        self._debug_enabled = enabled

    def start_run(self) -> RunContext:
        return RunContext(ledger=ProvisioningLedger(self._repositories.entities, logger=self._log))

    def process(
        self,
        run: RunContext,
        code: str,
        cost: Decimal,
        kind_hint: str | None = None,
    ) -> ProvisionedCode:
        """Find or create every row for ``code`` and record its cost for pricing.

        Purely additive. A ``CreationError`` part-way leaves the rows created so
        far in ``run.ledger``; unwinding them is up to the caller.
        """

        template = self.template_for(kind_hint or self._config.default_kind)
        self._trace("process(%s, %s)", code, cost)

        part = self._resolve(run, template, EntityKind.PART, {"number": code}, {"name": code})
        line_item = self._resolve(
            run, template, EntityKind.LINE_ITEM, {"description": self.line_item_name(code)}
        )
        line_item_part = self._resolve(
            run,
            template,
            EntityKind.LINE_ITEM_PART,
            {"line_item_id": line_item.handle, "part_id": part.handle},
        )
        service_code = self._resolve(
            run,
            template,
            EntityKind.SERVICE_CODE,
            {
                "description": self.service_code_description(code),
                "short_name": self.service_code_short_name(code),
            },
        )
        line_item_service_code = self._resolve(
            run,
            template,
            EntityKind.LINE_ITEM_SERVICE_CODE,
            {"service_code_id": service_code.handle, "line_item_id": line_item.handle},
        )
        run.pricing.record(line_item.handle, cost)

        provisioned = ProvisionedCode(
            code=code,
            cost=cost,
            part=part,
            line_item=line_item,
            line_item_part=line_item_part,
            service_code=service_code,
            line_item_service_code=line_item_service_code,
        )
        run.provisioned.append(provisioned)
        return provisioned

    def _resolve(
        self,
        run: RunContext,
        template: TemplateContext,
        kind: EntityKind,
        natural_key: dict[str, object],
        extra: dict[str, object] | None = None,
    ) -> Resolution:
        resolution = self._resolver.resolve(
            kind, natural_key, extra, template=template, ledger=run.ledger
        )
        self._trace(
            "%s %s %s", "created" if resolution.was_created else "found", kind, resolution.handle
        )
        return resolution

    def template_for(self, kind_hint: str) -> TemplateContext:
        """Resolve (once per hint) the reference rows the default templates need."""

        template = self._templates.get(kind_hint)
        if template is None:
            template = TemplateContext(
                part_category_id=self._require(
                    LookupKind.PART_CATEGORY, self._config.provider_name
                ),
                part_type_id=self._require(LookupKind.PART_TYPE, kind_hint.lower()),
                line_item_type_id=self._require(LookupKind.LINE_ITEM_TYPE, kind_hint),
                service_code_type_id=self._service_code_type_id,
            )
            self._templates[kind_hint] = template
        return template

    # Verbose names only decorate descriptions; identity still comes from the code.
    def line_item_name(self, code: str) -> str:
        return f"item: {code}" if self._config.verbose_names else code

    def service_code_description(self, code: str) -> str:
        return f"Service Code: {code}" if self._config.verbose_names else code

    def service_code_short_name(self, code: str) -> str:
        return f"sc: {code}" if self._config.verbose_names else code

    def _require(self, lookup: LookupKind, name: str) -> UUID:
        handle = self._repositories.lookups.find_named(lookup, name)
        if handle is None:
            raise SetupError(lookup, name)
        return handle

    def _trace(self, message: str, *args: object) -> None:
        if self._debug_enabled:
            self._log.debug(message, *args)
