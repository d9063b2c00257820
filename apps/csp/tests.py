from django.contrib.auth.models import AnonymousUser, User
from django.test import RequestFactory, SimpleTestCase, override_settings

from .builder import ContentSecurityPolicyHeaderBuilder, PolicyBuilder
from .conf import RequestConfig
from .constants import (
    CHILD_SRC,
    FRAME_SRC,
    IMG_SRC,
    REPORT_ONLY_HEADER_NAME,
    SCRIPT_SRC,
)
from .exceptions import InvalidConfiguration
from .manager import PolicyManager
from .script import InlineScript

GOOGLE_ANALYTICS = 'www.google-analytics.com stats.g.doubleclick.net https://stats.g.doubleclick.net'


class NotABuilder:
    pass


class HeaderBuilderTest(SimpleTestCase):
    """Ensure sources serialize once per directive, in first-seen order."""

    def setUp(self):
        self.builder = ContentSecurityPolicyHeaderBuilder()

    def test_empty_builder_has_empty_value(self):
        name, value = self.builder.serialize()
        self.assertEqual(name, 'Content-Security-Policy')
        self.assertEqual(value, '')

    def test_duplicates_are_suppressed_in_first_seen_order(self):
        for source in ['b.example.com', 'a.example.com', 'b.example.com', 'a.example.com']:
            self.builder.add_source_expression(SCRIPT_SRC, source)
        self.assertEqual(
            self.builder.serialize().value,
            'script-src b.example.com a.example.com;',
        )

    def test_directives_keep_first_use_order(self):
        self.builder.add_source_expression(IMG_SRC, 'img.example.com')
        self.builder.add_source_expression(SCRIPT_SRC, 'js.example.com')
        self.builder.add_source_expression(IMG_SRC, 'cdn.example.com')
        self.assertEqual(
            self.builder.serialize().value,
            'img-src img.example.com cdn.example.com; script-src js.example.com;',
        )

    def test_keywords_are_quoted(self):
        self.builder.add_source_expression(SCRIPT_SRC, 'self')
        self.builder.add_source_expression(SCRIPT_SRC, "'self'")
        self.builder.add_source_expression(SCRIPT_SRC, 'unsafe-inline')
        self.builder.add_source_expression(SCRIPT_SRC, 'https:')
        self.assertEqual(
            self.builder.serialize().value,
            "script-src 'self' 'unsafe-inline' https:;",
        )

    def test_blank_expressions_are_ignored(self):
        self.builder.add_source_expression(SCRIPT_SRC, '  ')
        self.assertEqual(self.builder.serialize().value, '')

    def test_reset_directive_clears_only_that_directive(self):
        self.builder.add_source_expression(SCRIPT_SRC, 'js.example.com')
        self.builder.add_source_expression(IMG_SRC, 'img.example.com')
        self.builder.reset_directive(SCRIPT_SRC)
        self.assertEqual(self.builder.serialize().value, 'img-src img.example.com;')
        self.assertEqual(self.builder.directives, {IMG_SRC: ['img.example.com']})

    def test_report_uri_is_last(self):
        self.builder.set_report_uri('/report/')
        self.builder.add_source_expression(FRAME_SRC, 'www.youtube.com')
        self.builder.add_source_expression(CHILD_SRC, 'www.youtube.com')
        self.assertEqual(
            self.builder.serialize().value,
            'frame-src www.youtube.com; child-src www.youtube.com; report-uri /report/;',
        )

    def test_report_uri_alone_gives_empty_value(self):
        self.builder.set_report_uri('/report/')
        self.assertEqual(self.builder.serialize().value, '')

    def test_report_only_switches_header_name(self):
        self.builder.use_report_only(True)
        self.assertEqual(self.builder.serialize().name, REPORT_ONLY_HEADER_NAME)


class PolicyManagerTest(SimpleTestCase):
    """Ensure the manager hands out, replaces and validates builders."""

    def setUp(self):
        self.policy = PolicyManager(ContentSecurityPolicyHeaderBuilder)
        self.policy.reset_builder()

    def test_builder_instance_created(self):
        self.assertIsInstance(self.policy.get_builder(), PolicyBuilder)

    def test_same_builder_returned(self):
        self.assertIs(self.policy.get_builder(), self.policy.get_builder())

    def test_reset_builder_creates_new_builder(self):
        builder1 = self.policy.get_builder()
        self.policy.reset_builder()
        self.assertIsNot(self.policy.get_builder(), builder1)

    def test_extract_headers_empty_by_default(self):
        self.assertEqual(self.policy.extract_headers(), '')

    def test_extract_headers_formats_name_and_value(self):
        self.policy.get_builder().add_source_expression(SCRIPT_SRC, 'self')
        self.assertEqual(
            self.policy.extract_headers(),
            "Content-Security-Policy: script-src 'self';",
        )

    def test_invalid_builder_class_raises_on_reset(self):
        policy = PolicyManager(NotABuilder)
        with self.assertRaises(InvalidConfiguration) as ctx:
            policy.reset_builder()
        self.assertEqual(ctx.exception.code, 1505944587)
        self.assertIn('apps.csp.tests.NotABuilder', str(ctx.exception))
        self.assertIn('must implement the interface PolicyBuilder', str(ctx.exception))

    @override_settings(CSP={'BUILDER': 'apps.csp.tests.NotABuilder'})
    def test_invalid_builder_from_settings_raises(self):
        with self.assertRaises(InvalidConfiguration):
            PolicyManager().reset_builder()

    @override_settings(CSP={'BUILDER': 'apps.csp.missing.Builder'})
    def test_unimportable_builder_raises(self):
        with self.assertRaises(InvalidConfiguration):
            PolicyManager().get_builder()

    @override_settings(CSP={})
    def test_default_builder_from_settings(self):
        self.assertIsInstance(
            PolicyManager().get_builder(), ContentSecurityPolicyHeaderBuilder,
        )


@override_settings(CSP={})
class ApplyConfigurationTest(SimpleTestCase):
    """Ensure configured sources merge in a fixed order."""

    def setUp(self):
        self.policy = PolicyManager()
        self.policy.reset_builder()

    def apply(self, admin_preview=False, **conf):
        with self.settings(CSP=conf):
            config = RequestConfig.from_settings(admin_preview=admin_preview)
        self.policy.apply_configuration(config)
        return self.policy.extract_headers()

    def test_does_nothing_if_disabled(self):
        headers = self.apply(
            ENABLED=False,
            ADDITIONAL_SOURCES={'script': ['self']},
            PRESETS={'google_analytics': {'enabled': True}},
        )
        self.assertEqual(headers, '')

    def test_adds_enabled_presets(self):
        headers = self.apply(ENABLED=True, PRESETS={'google_analytics': {'enabled': True}})
        self.assertEqual(
            headers,
            f'Content-Security-Policy: script-src {GOOGLE_ANALYTICS}; img-src {GOOGLE_ANALYTICS};',
        )

    def test_disabled_presets_are_skipped(self):
        headers = self.apply(ENABLED=True, PRESETS={'google_analytics': {'enabled': False}})
        self.assertEqual(headers, '')

    def test_custom_preset_with_list_rules(self):
        headers = self.apply(ENABLED=True, PRESETS={
            'maps': {'enabled': True, 'rules': {'frame': ['maps.example.com']}},
        })
        self.assertEqual(headers, 'Content-Security-Policy: frame-src maps.example.com;')

    def test_additional_sources_come_before_presets(self):
        headers = self.apply(
            ENABLED=True,
            ADDITIONAL_SOURCES={'script': ['self', 'www.test.de']},
            PRESETS={'google_analytics': {'enabled': True}},
        )
        self.assertEqual(
            headers,
            f"Content-Security-Policy: script-src 'self' www.test.de {GOOGLE_ANALYTICS}; "
            f'img-src {GOOGLE_ANALYTICS};',
        )

    def test_report_only_generates_default_uri(self):
        headers = self.apply(
            ENABLED=True,
            REPORT_ONLY=True,
            ADDITIONAL_SOURCES={'script': ['self', 'www.test.de']},
        )
        self.assertEqual(
            headers,
            "Content-Security-Policy-Report-Only: script-src 'self' www.test.de; "
            'report-uri /csp/report/;',
        )

    def test_configured_report_uri_is_used(self):
        headers = self.apply(
            ENABLED=True,
            REPORT_URI='/test/',
            ADDITIONAL_SOURCES={'img': ['self']},
        )
        self.assertEqual(
            headers,
            "Content-Security-Policy: img-src 'self'; report-uri /test/;",
        )

    def test_admin_preview_replaces_script_src(self):
        self.policy.get_builder().add_source_expression(SCRIPT_SRC, 'early.example.com')
        headers = self.apply(
            ENABLED=True,
            admin_preview=True,
            ADDITIONAL_SOURCES={'script': ['self']},
        )
        self.assertEqual(
            headers,
            "Content-Security-Policy: script-src 'unsafe-inline' 'unsafe-eval' 'self';",
        )

    def test_content_registrations_come_after_configuration(self):
        self.apply(
            ENABLED=True,
            ADDITIONAL_SOURCES={'script': ['self']},
            PRESETS={'vimeo': {'enabled': True}},
        )
        InlineScript('var foo = "314"').generate_html_tag(self.policy)
        builder = self.policy.get_builder()
        builder.add_source_expression(FRAME_SRC, 'www.youtube.com')
        self.assertEqual(
            builder.serialize().value,
            "script-src 'self' 'sha256-gPMJwWBMWDx0Cm7ZygJKZIU2vZpiYvzUQjl5Rh37hKs='; "
            'frame-src player.vimeo.com www.youtube.com; child-src player.vimeo.com;',
        )


@override_settings(CSP={'ENABLED': True})
class RequestConfigTest(SimpleTestCase):
    """Ensure request settings and admin preview are read correctly."""

    def setUp(self):
        self.factory = RequestFactory()

    def test_admin_preview_for_staff_with_param(self):
        request = self.factory.get('/', {'preview': '1'})
        request.user = User(username='editor', is_staff=True)
        self.assertTrue(RequestConfig.from_request(request).admin_preview)

    def test_no_admin_preview_without_param(self):
        request = self.factory.get('/')
        request.user = User(username='editor', is_staff=True)
        self.assertFalse(RequestConfig.from_request(request).admin_preview)

    def test_no_admin_preview_for_non_staff(self):
        request = self.factory.get('/', {'preview': '1'})
        request.user = User(username='visitor', is_staff=False)
        self.assertFalse(RequestConfig.from_request(request).admin_preview)

    def test_no_admin_preview_for_anonymous(self):
        request = self.factory.get('/', {'preview': '1'})
        request.user = AnonymousUser()
        self.assertFalse(RequestConfig.from_request(request).admin_preview)

    def test_presets_merge_over_built_ins(self):
        with self.settings(CSP={'ENABLED': True, 'PRESETS': {'youtube': {'enabled': True}}}):
            config = RequestConfig.from_settings()
        self.assertTrue(config.presets['youtube']['enabled'])
        self.assertIn('rules', config.presets['youtube'])
        self.assertFalse(config.presets['vimeo']['enabled'])
