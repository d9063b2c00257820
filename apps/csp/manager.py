from __future__ import annotations

import logging

from .builder import PolicyBuilder
from .conf import RequestConfig, get_builder_factory
from .constants import DEFAULT_REPORT_URI, DIRECTIVE_POSTFIX, SCRIPT_SRC
from .exceptions import InvalidConfiguration

logger = logging.getLogger(__name__)


class PolicyManager:
    """Owns the header builder for one request.

    The middleware creates one manager per request and attaches it to the
    request as ``request.csp``; renderers receive it explicitly and register
    their sources through ``get_builder()``.
    """

    def __init__(self, builder_factory=None):
        self._builder_factory = builder_factory
        self._builder: PolicyBuilder | None = None

    def get_builder(self) -> PolicyBuilder:
        if self._builder is None:
            self._builder = self._create_builder()
        return self._builder

    def reset_builder(self) -> None:
        """Replace the builder; references to the old one go stale."""
        self._builder = self._create_builder()

    def _create_builder(self) -> PolicyBuilder:
        factory = self._builder_factory or get_builder_factory()
        instance = factory()
        if not isinstance(instance, PolicyBuilder):
            name = getattr(factory, '__qualname__', repr(factory))
            module = getattr(factory, '__module__', None)
            if module:
                name = f'{module}.{name}'
            raise InvalidConfiguration(
                f'The class "{name}" must implement the interface PolicyBuilder',
                1505944587,
            )
        return instance

    def apply_configuration(self, config: RequestConfig) -> None:
        """Merge configured sources into the builder.

        Order is part of the contract: admin preview, additional sources,
        presets. Sources registered by content afterwards are appended.
        """
        if not config.enabled:
            return

        builder = self.get_builder()

        if config.admin_preview:
            builder.reset_directive(SCRIPT_SRC)
            builder.add_source_expression(SCRIPT_SRC, 'unsafe-inline')
            builder.add_source_expression(SCRIPT_SRC, 'unsafe-eval')

        for prefix, sources in config.additional_sources.items():
            for source in sources:
                builder.add_source_expression(prefix + DIRECTIVE_POSTFIX, source)

        for prefix, source in config.enabled_preset_rules():
            builder.add_source_expression(prefix + DIRECTIVE_POSTFIX, source)

        builder.use_report_only(config.report_only)
        if config.report_uri:
            builder.set_report_uri(config.report_uri)
        elif config.report_only:
            builder.set_report_uri(DEFAULT_REPORT_URI)

        logger.debug(
            'CSP configuration applied: report_only=%s admin_preview=%s',
            config.report_only, config.admin_preview,
        )

    def extract_headers(self) -> str:
        name, value = self.get_builder().serialize()
        if not value:
            return ''
        return f'{name}: {value}'
