from django.test import SimpleTestCase

from .builder import ContentSecurityPolicyHeaderBuilder
from .constants import SHA_512
from .exceptions import InvalidValue
from .manager import PolicyManager
from .script import InlineScript, hash_script

SCRIPT = 'var foo = "314"'
SHA256_HASH = "'sha256-gPMJwWBMWDx0Cm7ZygJKZIU2vZpiYvzUQjl5Rh37hKs='"
SHA512_HASH = (
    "'sha512-gqJ6LLaGT566XoMMIbnXj8qX7PZLJBPRQ+iLa0i6dp9SKcBVf8+PeiGsq1mGb/"
    "07i6lDr1CvTL0d7EoRnBGNVg=='"
)


class HashScriptTest(SimpleTestCase):
    """Ensure script hashes match the values browsers compute."""

    def test_sha256(self):
        self.assertEqual(hash_script(SCRIPT), SHA256_HASH)

    def test_sha512(self):
        self.assertEqual(hash_script(SCRIPT, SHA_512), SHA512_HASH)


class InlineScriptTest(SimpleTestCase):
    """Ensure inline scripts render and register their hash."""

    def setUp(self):
        self.policy = PolicyManager(ContentSecurityPolicyHeaderBuilder)
        self.policy.reset_builder()

    def test_generates_trimmed_script(self):
        script = InlineScript('    \n        alert("fine");    \n        ')
        self.assertEqual(
            script.generate_html_tag(self.policy),
            '<script>alert("fine");</script>',
        )

    def test_no_trim_keeps_whitespace(self):
        body = '    \n        alert("fine");    \n        '
        script = InlineScript(body, trim_script=False)
        self.assertEqual(script.generate_html_tag(self.policy), f'<script>{body}</script>')

    def test_hash_covers_trimmed_body(self):
        self.assertEqual(InlineScript(f'  {SCRIPT}\n').hash, SHA256_HASH)
        self.assertNotEqual(InlineScript(f'  {SCRIPT}\n', trim_script=False).hash, SHA256_HASH)

    def test_unsupported_hash_method_raises(self):
        with self.assertRaises(InvalidValue) as ctx:
            InlineScript('alert("fine")', 'test')
        self.assertEqual(
            str(ctx.exception),
            'Only the values "sha256" and "sha512" are supported, "test" given',
        )
        self.assertEqual(ctx.exception.code, 1505745612)

    def test_sha256_added_to_header(self):
        InlineScript(SCRIPT).generate_html_tag(self.policy)
        self.assertEqual(
            self.policy.extract_headers(),
            f'Content-Security-Policy: script-src {SHA256_HASH};',
        )

    def test_sha512_added_to_header(self):
        InlineScript(SCRIPT, SHA_512).generate_html_tag(self.policy)
        self.assertEqual(
            self.policy.extract_headers(),
            f'Content-Security-Policy: script-src {SHA512_HASH};',
        )

    def test_rendering_twice_registers_hash_once(self):
        script = InlineScript(SCRIPT)
        script.generate_html_tag(self.policy)
        script.generate_html_tag(self.policy)
        self.assertEqual(
            self.policy.get_builder().serialize().value,
            f'script-src {SHA256_HASH};',
        )
