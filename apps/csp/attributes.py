from __future__ import annotations

import re

from django.utils.html import escape

from .exceptions import InvalidValue

DATA_PREFIX = 'data-'
DEFINITION_SEPARATOR = ';'
NAME_VALUE_SEPARATOR = ':'

_XML_NAME = re.compile(r'^[^\W\d][\w.\-]*$')
_FORBIDDEN = re.compile(r'[;<>\s]')


class DataAttribute:
    """A custom ``data-*`` attribute rendered on an iframe.

    Names are canonicalised to lower case with a ``data-`` prefix; values
    are HTML escaped every time they are set.
    """

    def __init__(self, name, value=None):
        self.name = name
        self.value = value

    def __repr__(self):
        return f'DataAttribute({self.name!r}, {self.value!r})'

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, raw):
        name = str(escape(raw or '')).strip()
        if (
            not name
            or _FORBIDDEN.search(name)
            or not _XML_NAME.match(name)
            or name.lower().startswith('xml')
        ):
            raise InvalidValue(
                'Name should be a valid xml name, must not start with "xml" '
                f'and semicolons are not allowed, "{raw}" given',
                15057512312,
            )
        name = name.lower()
        if not name.startswith(DATA_PREFIX):
            name = DATA_PREFIX + name
        self._name = name

    @property
    def value(self) -> str | None:
        return self._value

    @value.setter
    def value(self, raw):
        self._value = None if raw is None else str(escape(raw))

    @staticmethod
    def generate_attribute_from_string(definition) -> DataAttribute | None:
        """Parse ``name: value``; only the first colon separates the two."""
        definition = (definition or '').strip()
        if not definition:
            return None
        name, separator, value = definition.partition(NAME_VALUE_SEPARATOR)
        return DataAttribute(name, value.strip() if separator else None)

    @staticmethod
    def generate_attributes_from_string(definition) -> list[DataAttribute] | None:
        """Parse ``a: 1; b: 2; c`` into attributes, skipping blank segments."""
        if not definition:
            return None
        attributes = []
        for segment in definition.split(DEFINITION_SEPARATOR):
            attribute = DataAttribute.generate_attribute_from_string(segment)
            if attribute is not None:
                attributes.append(attribute)
        return attributes
