from django.contrib.auth.models import User
from django.http import HttpResponse
from django.template import engines
from django.test import RequestFactory, SimpleTestCase, override_settings

from config.middleware import ContentSecurityPolicyMiddleware

from .manager import PolicyManager

ENABLED = {
    'ENABLED': True,
    'ADDITIONAL_SOURCES': {'script': ['self']},
}

PAGE = (
    '{% load csp_tags %}'
    '{% inlinescript %} var foo = "314" {% endinlinescript %}'
    '{% iframe src="https://www.youtube.com/embed/test" %}'
)


def render_page(request):
    template = engines['django'].from_string(PAGE)
    return HttpResponse(template.render({}, request))


class ContentSecurityPolicyMiddlewareTest(SimpleTestCase):
    """Ensure every response carries the policy built while rendering it."""

    def setUp(self):
        self.factory = RequestFactory()

    def process(self, request, view=render_page):
        return ContentSecurityPolicyMiddleware(view)(request)

    @override_settings(CSP=ENABLED)
    def test_header_lists_configuration_then_content(self):
        response = self.process(self.factory.get('/'))
        self.assertEqual(
            response['Content-Security-Policy'],
            "script-src 'self' 'sha256-gPMJwWBMWDx0Cm7ZygJKZIU2vZpiYvzUQjl5Rh37hKs='; "
            'frame-src www.youtube.com; child-src www.youtube.com;',
        )

    @override_settings(CSP={'ENABLED': False})
    def test_no_header_when_disabled(self):
        response = self.process(self.factory.get('/'))
        self.assertNotIn('Content-Security-Policy', response)
        self.assertIn('<script>var foo = "314"</script>', response.content.decode())

    @override_settings(CSP={'ENABLED': True})
    def test_no_header_when_nothing_registered(self):
        response = self.process(self.factory.get('/'), view=lambda request: HttpResponse('ok'))
        self.assertNotIn('Content-Security-Policy', response)

    @override_settings(CSP={**ENABLED, 'REPORT_ONLY': True})
    def test_report_only_header(self):
        response = self.process(self.factory.get('/'))
        self.assertNotIn('Content-Security-Policy', response)
        self.assertTrue(
            response['Content-Security-Policy-Report-Only'].endswith('report-uri /csp/report/;')
        )

    @override_settings(CSP=ENABLED)
    def test_existing_header_not_overwritten(self):
        def view(request):
            response = HttpResponse('ok')
            response['Content-Security-Policy'] = "default-src 'none';"
            return response

        response = self.process(self.factory.get('/'), view=view)
        self.assertEqual(response['Content-Security-Policy'], "default-src 'none';")

    @override_settings(CSP=ENABLED)
    def test_every_request_gets_its_own_policy(self):
        seen = []

        def view(request):
            seen.append(request.csp)
            return render_page(request)

        first = self.process(self.factory.get('/'), view=view)
        second = self.process(self.factory.get('/'), view=view)
        self.assertIsInstance(seen[0], PolicyManager)
        self.assertIsNot(seen[0], seen[1])
        self.assertEqual(first['Content-Security-Policy'], second['Content-Security-Policy'])

    @override_settings(CSP=ENABLED)
    def test_admin_preview_for_staff(self):
        request = self.factory.get('/', {'preview': '1'})
        request.user = User(username='editor', is_staff=True)
        response = self.process(request)
        self.assertTrue(
            response['Content-Security-Policy'].startswith(
                "script-src 'unsafe-inline' 'unsafe-eval' 'self' 'sha256-"
            )
        )


@override_settings(CSP={'ENABLED': True})
class IframePreviewViewTest(SimpleTestCase):
    """Ensure the preview endpoint renders valid iframes only."""

    def test_preview_renders_iframe_and_header(self):
        response = self.client.get('/csp/iframe/preview/', {
            'src': 'https://www.youtube.com/embed/test',
            'width': '560',
        })
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.content.decode(),
            '<iframe src="https://www.youtube.com/embed/test" width="560"></iframe>',
        )
        self.assertEqual(
            response['Content-Security-Policy'],
            'frame-src www.youtube.com; child-src www.youtube.com;',
        )

    def test_invalid_preview_returns_400(self):
        response = self.client.get('/csp/iframe/preview/', {
            'src': 'https://www.youtube.com/embed/test',
            'data_attributes': 'xml-test: 1',
        })
        self.assertEqual(response.status_code, 400)
        self.assertNotIn('Content-Security-Policy', response)

    def test_preview_requires_get(self):
        response = self.client.post('/csp/iframe/preview/')
        self.assertEqual(response.status_code, 405)

    def test_health_check(self):
        response = self.client.get('/health/')
        self.assertEqual(response.json(), {'status': 'ok'})
