from django.test import SimpleTestCase

from .builder import ContentSecurityPolicyHeaderBuilder
from .constants import SANDBOX_VALUES
from .exceptions import InvalidValue
from .iframe import EmbeddedFrame, generate_iframe_tag_from_config
from .manager import PolicyManager


class EmbeddedFrameValidationTest(SimpleTestCase):
    """Ensure invalid iframe fields are rejected when the frame is built."""

    def assertInvalid(self, code, *args, **kwargs):
        with self.assertRaises(InvalidValue) as ctx:
            EmbeddedFrame(*args, **kwargs)
        self.assertEqual(ctx.exception.code, code)
        return ctx.exception

    def test_src_required(self):
        self.assertInvalid(1505656675, '')

    def test_src_must_have_host(self):
        exc = self.assertInvalid(1505632671, 'www.google.de')
        self.assertIn('"www.google.de"', str(exc))

    def test_src_host_extracted(self):
        frame = EmbeddedFrame('https://www.youtube.com/embed/test?rel=0')
        self.assertEqual(frame.src_host, 'www.youtube.com')

    def test_scheme_relative_src(self):
        self.assertEqual(EmbeddedFrame('//player.vimeo.com/video/1').src_host, 'player.vimeo.com')

    def test_negative_width_raises(self):
        exc = self.assertInvalid(1505632672, 'https://example.com', width=-1)
        self.assertEqual(str(exc), 'Width should be a positive integer or zero, "-1" given')

    def test_negative_height_raises(self):
        self.assertInvalid(1505632672, 'https://example.com', height='-20')

    def test_negative_dimension_with_suffix_raises(self):
        self.assertInvalid(1505632672, 'https://example.com', width='-5px')

    def test_dimensions_coerced(self):
        frame = EmbeddedFrame('https://example.com', width='100', height='')
        self.assertEqual(frame.width, 100)
        self.assertEqual(frame.height, 0)

    def test_dimensions_use_leading_integer(self):
        for value, expected in [('100.5', 100), ('640px', 640), (' 42 ', 42), ('wide', 0), (None, 0)]:
            with self.subTest(value=value):
                self.assertEqual(EmbeddedFrame('https://example.com', width=value).width, expected)

    def test_not_allowed_sandbox_value_raises(self):
        exc = self.assertInvalid(1505656673, 'https://example.com', sandbox='allow-forms, evil-token')
        self.assertEqual(str(exc), 'Not allowed value "evil-token" for the attribute sandbox.')

    def test_every_sandbox_value_accepted(self):
        for value in SANDBOX_VALUES:
            with self.subTest(value=value):
                self.assertEqual(EmbeddedFrame('https://example.com', sandbox=value).sandbox, [value])

    def test_sandbox_empty_tokens_skipped(self):
        frame = EmbeddedFrame('https://example.com', sandbox=' allow-forms,, allow-scripts ,')
        self.assertEqual(frame.sandbox, ['allow-forms', 'allow-scripts'])

    def test_flags_truthy_coerced(self):
        frame = EmbeddedFrame('https://example.com', allow_full_screen=1, allow_payment_request='')
        self.assertIs(frame.allow_full_screen, True)
        self.assertIs(frame.allow_payment_request, False)

    def test_invalid_data_attributes_degrade_to_empty_list(self):
        frame = EmbeddedFrame('https://example.com', data_attributes='ok: 1; a<b>c: 2')
        self.assertEqual(frame.data_attributes, [])

    def test_setter_revalidates_src(self):
        frame = EmbeddedFrame('https://example.com')
        with self.assertRaises(InvalidValue):
            frame.src = 'not a url'
        self.assertEqual(frame.src_host, 'example.com')


class EmbeddedFrameRenderingTest(SimpleTestCase):
    """Ensure iframe markup is generated and its host is allowed."""

    def setUp(self):
        self.policy = PolicyManager(ContentSecurityPolicyHeaderBuilder)
        self.policy.reset_builder()

    def test_registers_host_in_frame_and_child_src(self):
        EmbeddedFrame('https://www.youtube.com/embed/test').generate_html_tag(self.policy)
        self.assertEqual(
            self.policy.get_builder().serialize().value,
            'frame-src www.youtube.com; child-src www.youtube.com;',
        )

    def test_minimal_tag(self):
        html = EmbeddedFrame('https://www.google.de').generate_html_tag(self.policy)
        self.assertEqual(html, '<iframe src="https://www.google.de"></iframe>')

    def test_attribute_order(self):
        frame = EmbeddedFrame(
            'https://www.google.de/?a=1&b=2',
            css_class='test test2',
            name='test',
            width=100,
            height=50,
            sandbox='allow-scripts,allow-forms',
            allow_full_screen=True,
            allow_payment_request=True,
            data_attributes='test: test1; flag',
        )
        self.assertEqual(
            frame.generate_html_tag(self.policy),
            '<iframe src="https://www.google.de/?a=1&amp;b=2" name="test" class="test test2" '
            'width="100" height="50" sandbox="allow-scripts allow-forms" allowfullscreen '
            'allowpaymentrequest data-test="test1" data-flag></iframe>',
        )

    def test_name_and_class_escaped(self):
        frame = EmbeddedFrame('https://example.com', css_class='"><b>', name='<i>')
        self.assertEqual(
            frame.generate_html_tag(self.policy),
            '<iframe src="https://example.com" name="&lt;i&gt;" class="&quot;&gt;&lt;b&gt;"></iframe>',
        )

    def test_parse_src_from_html_uses_first_src(self):
        frame = EmbeddedFrame.parse_src_from_html(
            '<iframe src="https://player.vimeo.com/video/1"></iframe><img src="https://img.example.com/a.png">'
        )
        self.assertEqual(frame.src_host, 'player.vimeo.com')

    def test_parse_src_from_html_without_src_raises(self):
        with self.assertRaises(InvalidValue):
            EmbeddedFrame.parse_src_from_html('<iframe></iframe>')

    def test_generate_from_config(self):
        html = generate_iframe_tag_from_config({
            'src': 'https://maps.example.com/embed',
            'class': 'map',
            'width': '300',
            'sandbox': 'allow-scripts',
            'allowFullScreen': '1',
            'dataAttributes': 'zoom: 4',
        }, self.policy)
        self.assertEqual(
            html,
            '<iframe src="https://maps.example.com/embed" class="map" width="300" '
            'sandbox="allow-scripts" allowfullscreen data-zoom="4"></iframe>',
        )
        self.assertEqual(
            self.policy.extract_headers(),
            'Content-Security-Policy: frame-src maps.example.com; child-src maps.example.com;',
        )
