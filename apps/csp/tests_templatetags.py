from django.core.exceptions import ImproperlyConfigured
from django.template import Context, Template
from django.test import RequestFactory, SimpleTestCase

from .builder import ContentSecurityPolicyHeaderBuilder
from .manager import PolicyManager

SHA256_HASH = "'sha256-gPMJwWBMWDx0Cm7ZygJKZIU2vZpiYvzUQjl5Rh37hKs='"


class CspTagsTest(SimpleTestCase):
    """Ensure template tags render content and register it in the request policy."""

    def setUp(self):
        self.request = RequestFactory().get('/')
        self.request.csp = PolicyManager(ContentSecurityPolicyHeaderBuilder)
        self.request.csp.reset_builder()

    def render(self, source, **context):
        template = Template('{% load csp_tags %}' + source)
        return template.render(Context({'request': self.request, **context}))

    def test_inline_script_is_trimmed_and_hashed(self):
        html = self.render('{% inlinescript %}\n  var foo = "314"\n{% endinlinescript %}')
        self.assertEqual(html, '<script>var foo = "314"</script>')
        self.assertEqual(
            self.request.csp.extract_headers(),
            f'Content-Security-Policy: script-src {SHA256_HASH};',
        )

    def test_inline_script_options(self):
        html = self.render(
            '{% inlinescript hashMethod="sha512" trimScript=False %} x(); {% endinlinescript %}'
        )
        self.assertEqual(html, '<script> x(); </script>')
        self.assertIn("script-src 'sha512-", self.request.csp.extract_headers())

    def test_inline_script_with_bad_hash_method_renders_nothing(self):
        html = self.render(
            '{% inlinescript hashMethod="md5" %}x();{% endinlinescript %}'
            '{% iframe src="https://www.youtube.com/embed/test" %}'
        )
        self.assertEqual(html, '<iframe src="https://www.youtube.com/embed/test"></iframe>')
        self.assertEqual(
            self.request.csp.get_builder().serialize().value,
            'frame-src www.youtube.com; child-src www.youtube.com;',
        )

    def test_iframe_tag(self):
        html = self.render(
            '{% iframe src=url class="video" width=640 height=360 '
            'sandbox="allow-scripts,allow-same-origin" allowFullScreen=True '
            'dataAttributes="ratio: 16:9" %}',
            url='https://www.youtube.com/embed/test',
        )
        self.assertEqual(
            html,
            '<iframe src="https://www.youtube.com/embed/test" class="video" width="640" '
            'height="360" sandbox="allow-scripts allow-same-origin" allowfullscreen '
            'data-ratio="16:9"></iframe>',
        )

    def test_invalid_iframe_renders_nothing(self):
        html = self.render('{% iframe src="https://example.com" sandbox="evil-token" %}')
        self.assertEqual(html, '')
        self.assertEqual(self.request.csp.extract_headers(), '')

    def test_media_embed(self):
        html = self.render('{% media_embed "https://youtu.be/test" width=560 height=315 %}')
        self.assertIn('src="https://www.youtube.com/embed/test"', html)
        self.assertEqual(
            self.request.csp.get_builder().serialize().value,
            'frame-src www.youtube.com; child-src www.youtube.com;',
        )

    def test_media_embed_with_non_numeric_width(self):
        html = self.render(
            '{% media_embed "https://youtu.be/test" width="wide" %}'
            '{% iframe src="https://www.example.com/" %}'
        )
        self.assertEqual(
            html,
            '<iframe src="https://www.youtube.com/embed/test" allowfullscreen></iframe>'
            '<iframe src="https://www.example.com/"></iframe>',
        )

    def test_media_embed_with_negative_width_renders_nothing(self):
        html = self.render(
            '{% media_embed "https://youtu.be/test" width=-5 %}'
            '{% iframe src="https://www.example.com/" %}'
        )
        self.assertEqual(html, '<iframe src="https://www.example.com/"></iframe>')
        self.assertEqual(
            self.request.csp.get_builder().serialize().value,
            'frame-src www.example.com; child-src www.example.com;',
        )

    def test_inline_script_trim_flag_from_string(self):
        for flag in ['"0"', '"false"', '""', '0']:
            with self.subTest(flag=flag):
                html = self.render(
                    '{% inlinescript trimScript=' + flag + ' %} x(); {% endinlinescript %}'
                )
                self.assertEqual(html, '<script> x(); </script>')

    def test_missing_policy_raises(self):
        template = Template('{% load csp_tags %}{% iframe src="https://example.com" %}')
        with self.assertRaises(ImproperlyConfigured):
            template.render(Context({'request': RequestFactory().get('/')}))
