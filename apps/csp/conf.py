from __future__ import annotations

from dataclasses import dataclass, field

from django.conf import settings
from django.utils.module_loading import import_string

from .exceptions import InvalidConfiguration

DEFAULT_BUILDER = 'apps.csp.builder.ContentSecurityPolicyHeaderBuilder'

# Rule values are either a whitespace separated string or a list of tokens.
BUILT_IN_PRESETS = {
    'google_analytics': {
        'enabled': False,
        'rules': {
            'script': 'www.google-analytics.com stats.g.doubleclick.net https://stats.g.doubleclick.net',
            'img': 'www.google-analytics.com stats.g.doubleclick.net https://stats.g.doubleclick.net',
        },
    },
    'google_fonts': {
        'enabled': False,
        'rules': {
            'style': 'fonts.googleapis.com',
            'font': 'fonts.gstatic.com',
        },
    },
    'youtube': {
        'enabled': False,
        'rules': {
            'frame': 'www.youtube.com www.youtube-nocookie.com',
            'child': 'www.youtube.com www.youtube-nocookie.com',
        },
    },
    'vimeo': {
        'enabled': False,
        'rules': {
            'frame': 'player.vimeo.com',
            'child': 'player.vimeo.com',
        },
    },
}

DEFAULTS = {
    'ENABLED': False,
    'REPORT_ONLY': False,
    'REPORT_URI': '',
    'ADDITIONAL_SOURCES': {},
    'PRESETS': {},
    'BUILDER': DEFAULT_BUILDER,
    'ADMIN_PREVIEW_PARAM': 'preview',
}


def csp_settings() -> dict:
    return {**DEFAULTS, **getattr(settings, 'CSP', {})}


def get_presets(configured: dict) -> dict:
    """Merge configured presets over the built-in ones, key by key."""
    presets = {name: dict(preset) for name, preset in BUILT_IN_PRESETS.items()}
    for name, preset in (configured or {}).items():
        presets[name] = {**presets.get(name, {}), **preset}
    return presets


def get_builder_factory():
    path = csp_settings()['BUILDER']
    if callable(path):
        return path
    try:
        return import_string(path)
    except ImportError as exc:
        raise InvalidConfiguration(
            f'The header builder "{path}" cannot be imported: {exc}',
            1505944587,
        ) from exc


def _as_tokens(sources) -> list[str]:
    if isinstance(sources, str):
        return sources.split()
    return [token for token in sources or () if token]


@dataclass
class RequestConfig:
    """Settings that apply to the policy of one request."""

    enabled: bool = False
    report_only: bool = False
    report_uri: str = ''
    additional_sources: dict = field(default_factory=dict)
    presets: dict = field(default_factory=dict)
    admin_preview: bool = False

    @classmethod
    def from_settings(cls, admin_preview=False) -> RequestConfig:
        conf = csp_settings()
        return cls(
            enabled=bool(conf['ENABLED']),
            report_only=bool(conf['REPORT_ONLY']),
            report_uri=conf['REPORT_URI'] or '',
            additional_sources={
                prefix: _as_tokens(sources)
                for prefix, sources in (conf['ADDITIONAL_SOURCES'] or {}).items()
            },
            presets=get_presets(conf['PRESETS']),
            admin_preview=admin_preview,
        )

    @classmethod
    def from_request(cls, request) -> RequestConfig:
        param = csp_settings()['ADMIN_PREVIEW_PARAM']
        user = getattr(request, 'user', None)
        admin_preview = bool(
            user is not None
            and user.is_authenticated
            and user.is_staff
            and param
            and param in request.GET
        )
        return cls.from_settings(admin_preview=admin_preview)

    def enabled_preset_rules(self):
        """Yield ``(directive prefix, token)`` for every enabled preset."""
        for preset in self.presets.values():
            if not preset.get('enabled'):
                continue
            for prefix, sources in (preset.get('rules') or {}).items():
                for token in _as_tokens(sources):
                    yield prefix, token
