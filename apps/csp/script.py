from __future__ import annotations

import base64
import hashlib

from .constants import HASH_TYPES, SCRIPT_SRC, SHA_256
from .exceptions import InvalidValue


def hash_script(script: str, hash_method: str = SHA_256) -> str:
    """Return the quoted CSP hash source for ``script``, e.g. ``'sha256-...'``."""
    digest = hashlib.new(hash_method, script.encode('utf-8')).digest()
    return "'%s-%s'" % (hash_method, base64.b64encode(digest).decode('ascii'))


class InlineScript:
    """An inline ``<script>`` whose body is allowed by its hash."""

    def __init__(self, script, hash_method=SHA_256, trim_script=True):
        if hash_method not in HASH_TYPES:
            raise InvalidValue(
                f'Only the values "{HASH_TYPES[0]}" and "{HASH_TYPES[1]}" '
                f'are supported, "{hash_method}" given',
                1505745612,
            )
        self.hash_method = hash_method
        self.trim_script = bool(trim_script)
        script = script or ''
        # The hash must cover exactly the bytes that end up in the page.
        self.script = script.strip() if self.trim_script else script

    @property
    def hash(self) -> str:
        return hash_script(self.script, self.hash_method)

    def generate_html_tag(self, policy) -> str:
        policy.get_builder().add_source_expression(SCRIPT_SRC, self.hash)
        return f'<script>{self.script}</script>'
