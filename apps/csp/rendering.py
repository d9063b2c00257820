"""Players for online media (YouTube, Vimeo) rendered as iframes.

The player is an ``EmbeddedFrame``, so its dimensions are validated and its
host is registered in the policy like any other iframe.
"""

from __future__ import annotations

import abc
import re

from .exceptions import InvalidValue
from .iframe import EmbeddedFrame


class OnlineMediaRenderer(abc.ABC):
    priority = 1
    url_pattern: re.Pattern

    def get_priority(self) -> int:
        return self.priority

    def get_media_id(self, url) -> str | None:
        match = self.url_pattern.search(url or '')
        return match.group('media_id') if match else None

    def can_render(self, url) -> bool:
        return self.get_media_id(url) is not None

    @abc.abstractmethod
    def get_embed_url(self, media_id, **options) -> str:
        ...

    def render(self, url, policy, width=0, height=0, **options) -> str:
        frame = EmbeddedFrame(
            self.get_embed_url(self.get_media_id(url), **options),
            width=width,
            height=height,
            allow_full_screen=True,
        )
        return frame.generate_html_tag(policy)


class YouTubeRenderer(OnlineMediaRenderer):
    priority = 10
    url_pattern = re.compile(
        r'(?:youtube(?:-nocookie)?\.com/(?:watch\?(?:.*&)?v=|embed/|v/|shorts/)|youtu\.be/)'
        r'(?P<media_id>[\w-]+)'
    )

    def get_embed_url(self, media_id, no_cookie=False, **options):
        host = 'www.youtube-nocookie.com' if no_cookie else 'www.youtube.com'
        return f'https://{host}/embed/{media_id}'


class VimeoRenderer(OnlineMediaRenderer):
    priority = 10
    url_pattern = re.compile(r'vimeo\.com/(?:video/)?(?P<media_id>\d+)')

    def get_embed_url(self, media_id, **options):
        return f'https://player.vimeo.com/video/{media_id}'


RENDERERS = [YouTubeRenderer(), VimeoRenderer()]


def get_renderer(url) -> OnlineMediaRenderer | None:
    candidates = [renderer for renderer in RENDERERS if renderer.can_render(url)]
    if not candidates:
        return None
    return max(candidates, key=lambda renderer: renderer.get_priority())


def render_online_media(url, policy, **options) -> str:
    renderer = get_renderer(url)
    if renderer is None:
        raise InvalidValue(f'No renderer available for "{url}"', 1505982201)
    return renderer.render(url, policy, **options)
