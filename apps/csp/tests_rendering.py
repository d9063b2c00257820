from django.test import SimpleTestCase

from .builder import ContentSecurityPolicyHeaderBuilder
from .exceptions import InvalidValue
from .manager import PolicyManager
from .rendering import (
    OnlineMediaRenderer,
    VimeoRenderer,
    YouTubeRenderer,
    get_renderer,
    render_online_media,
)


class OnlineMediaRendererTest(SimpleTestCase):
    """Ensure media players render as iframes and allow their host."""

    def setUp(self):
        self.policy = PolicyManager(ContentSecurityPolicyHeaderBuilder)
        self.policy.reset_builder()

    def test_youtube_priority_is_ten(self):
        self.assertEqual(YouTubeRenderer().get_priority(), 10)

    def test_youtube_media_ids(self):
        renderer = YouTubeRenderer()
        for url in [
            'https://www.youtube.com/watch?v=test',
            'https://www.youtube.com/watch?feature=share&v=test',
            'https://youtu.be/test',
            'https://www.youtube.com/embed/test',
        ]:
            with self.subTest(url=url):
                self.assertEqual(renderer.get_media_id(url), 'test')

    def test_youtube_renders_iframe_and_registers_host(self):
        html = YouTubeRenderer().render('https://youtu.be/test', self.policy, width=100, height=100)
        self.assertEqual(
            html,
            '<iframe src="https://www.youtube.com/embed/test" width="100" height="100" '
            'allowfullscreen></iframe>',
        )
        self.assertEqual(
            self.policy.get_builder().serialize().value,
            'frame-src www.youtube.com; child-src www.youtube.com;',
        )

    def test_youtube_no_cookie_host(self):
        YouTubeRenderer().render('https://youtu.be/test', self.policy, no_cookie=True)
        self.assertEqual(
            self.policy.get_builder().serialize().value,
            'frame-src www.youtube-nocookie.com; child-src www.youtube-nocookie.com;',
        )

    def test_vimeo_registers_player_host(self):
        html = render_online_media('https://vimeo.com/76979871', self.policy)
        self.assertIn('src="https://player.vimeo.com/video/76979871"', html)
        self.assertEqual(
            self.policy.get_builder().serialize().value,
            'frame-src player.vimeo.com; child-src player.vimeo.com;',
        )

    def test_negative_width_raises_without_registering_host(self):
        with self.assertRaises(InvalidValue) as ctx:
            render_online_media('https://youtu.be/test', self.policy, width=-5)
        self.assertEqual(ctx.exception.code, 1505632672)
        self.assertEqual(self.policy.extract_headers(), '')

    def test_non_numeric_width_omitted(self):
        html = render_online_media('https://youtu.be/test', self.policy, width='wide', height=315)
        self.assertEqual(
            html,
            '<iframe src="https://www.youtube.com/embed/test" height="315" allowfullscreen></iframe>',
        )

    def test_renderer_without_embed_url_cannot_be_created(self):
        class IncompleteRenderer(OnlineMediaRenderer):
            pass

        with self.assertRaises(TypeError):
            IncompleteRenderer()

    def test_get_renderer(self):
        self.assertIsInstance(get_renderer('https://vimeo.com/1'), VimeoRenderer)
        self.assertIsNone(get_renderer('https://example.com/video.mp4'))

    def test_unknown_media_raises(self):
        with self.assertRaises(InvalidValue) as ctx:
            render_online_media('https://example.com/video.mp4', self.policy)
        self.assertEqual(ctx.exception.code, 1505982201)
        self.assertEqual(self.policy.extract_headers(), '')
