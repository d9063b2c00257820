from __future__ import annotations

import logging
import re
from urllib.parse import urlsplit

from django.utils.html import escape

from .attributes import DataAttribute
from .constants import CHILD_SRC, FRAME_SRC, SANDBOX_VALUES
from .exceptions import InvalidValue

logger = logging.getLogger(__name__)

_SRC_ATTRIBUTE = re.compile(r'src="(.*?)"')
_LEADING_INTEGER = re.compile(r'\s*([+-]?\d+)')


class EmbeddedFrame:
    """An ``<iframe>`` whose host is allowed in ``frame-src`` and ``child-src``."""

    def __init__(
        self,
        src,
        css_class='',
        name='',
        width=0,
        height=0,
        sandbox='',
        allow_full_screen=False,
        allow_payment_request=False,
        data_attributes='',
    ):
        self.src = src
        self.css_class = css_class or ''
        self.name = name or ''
        self.width = width
        self.height = height
        self.sandbox = sandbox
        self.allow_full_screen = allow_full_screen
        self.allow_payment_request = allow_payment_request
        self.data_attributes = data_attributes

    @property
    def src(self) -> str:
        return self._src

    @src.setter
    def src(self, src):
        if not src:
            raise InvalidValue('Src must be set', 1505656675)
        try:
            host = urlsplit(src).hostname
        except ValueError:
            host = None
        if not host:
            raise InvalidValue(
                f'Host cannot be extracted from the src value "{src}"',
                1505632671,
            )
        self._src = src
        self._src_host = host

    @property
    def src_host(self) -> str:
        return self._src_host

    @property
    def width(self) -> int:
        return self._width

    @width.setter
    def width(self, width):
        self._width = self._ensure_dimension('Width', width)

    @property
    def height(self) -> int:
        return self._height

    @height.setter
    def height(self, height):
        self._height = self._ensure_dimension('Height', height)

    @staticmethod
    def _ensure_dimension(label, value) -> int:
        # Leading integer only: "640px" is 640, "100.5" is 100, "wide" is 0.
        match = _LEADING_INTEGER.match('' if value is None else str(value))
        dimension = int(match.group(1)) if match else 0
        if dimension < 0:
            raise InvalidValue(
                f'{label} should be a positive integer or zero, "{value}" given',
                1505632672,
            )
        return dimension

    @property
    def sandbox(self) -> list[str]:
        return self._sandbox

    @sandbox.setter
    def sandbox(self, sandbox):
        # Comma separated list, e.g. "allow-forms, allow-scripts"
        values = []
        for value in (sandbox or '').split(','):
            value = str(escape(value)).strip()
            if not value:
                continue
            if value not in SANDBOX_VALUES:
                raise InvalidValue(
                    f'Not allowed value "{value}" for the attribute sandbox.',
                    1505656673,
                )
            values.append(value)
        self._sandbox = values

    @property
    def allow_full_screen(self) -> bool:
        return self._allow_full_screen

    @allow_full_screen.setter
    def allow_full_screen(self, value):
        self._allow_full_screen = bool(value)

    @property
    def allow_payment_request(self) -> bool:
        return self._allow_payment_request

    @allow_payment_request.setter
    def allow_payment_request(self, value):
        self._allow_payment_request = bool(value)

    @property
    def data_attributes(self) -> list[DataAttribute]:
        return self._data_attributes

    @data_attributes.setter
    def data_attributes(self, definition):
        # A malformed definition leaves the frame without data attributes.
        try:
            self._data_attributes = DataAttribute.generate_attributes_from_string(definition) or []
        except InvalidValue as exc:
            logger.debug('Ignoring data attributes %r: %s', definition, exc)
            self._data_attributes = []

    def register_src_host(self, policy) -> None:
        """Allow the frame's host for CSP level 1 and level 2+ user agents."""
        if not self.src_host:
            return
        builder = policy.get_builder()
        builder.add_source_expression(FRAME_SRC, self.src_host)
        builder.add_source_expression(CHILD_SRC, self.src_host)

    def generate_html_tag(self, policy) -> str:
        attributes = []
        if self.src:
            self.register_src_host(policy)
            attributes.append(('src', escape(self.src)))
        if self.name:
            attributes.append(('name', escape(self.name)))
        if self.css_class:
            attributes.append(('class', escape(self.css_class)))
        if self.width:
            attributes.append(('width', self.width))
        if self.height:
            attributes.append(('height', self.height))
        if self.sandbox:
            attributes.append(('sandbox', ' '.join(self.sandbox)))
        if self.allow_full_screen:
            attributes.append(('allowfullscreen', None))
        if self.allow_payment_request:
            attributes.append(('allowpaymentrequest', None))
        for attribute in self.data_attributes:
            attributes.append((attribute.name, attribute.value))

        rendered = ' '.join(
            f'{name}="{value}"' if value else name
            for name, value in attributes
        )
        return f'<iframe {rendered}></iframe>'

    @classmethod
    def parse_src_from_html(cls, html) -> EmbeddedFrame:
        """Build a frame from the first ``src="..."`` found in ``html``.

        Only that single attribute is read; this is not a markup parser.
        """
        match = _SRC_ATTRIBUTE.search(html or '')
        return cls(match.group(1) if match else '')


def generate_iframe_tag_from_config(conf, policy) -> str:
    """Render an iframe from a content-authoring dict (``src``, ``class``, ...)."""
    frame = EmbeddedFrame(
        conf.get('src', ''),
        css_class=conf.get('class', ''),
        name=conf.get('name', ''),
        width=conf.get('width', 0),
        height=conf.get('height', 0),
        sandbox=conf.get('sandbox', ''),
        allow_full_screen=conf.get('allowFullScreen', False),
        allow_payment_request=conf.get('allowPaymentRequest', False),
        data_attributes=conf.get('dataAttributes', ''),
    )
    return frame.generate_html_tag(policy)
