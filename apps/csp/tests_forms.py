from django.test import SimpleTestCase

from .forms import IframeForm


class IframeFormTest(SimpleTestCase):
    """Ensure authors get errors for invalid iframe fields."""

    def test_valid_form_builds_config(self):
        form = IframeForm({
            'src': 'https://www.google.de',
            'name': 'test',
            'css_class': 'test test2',
            'width': '100',
            'height': '50',
            'sandbox': ['allow-scripts', 'allow-forms'],
            'allow_full_screen': 'on',
            'data_attributes': 'test: test1',
        })
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.to_config(), {
            'src': 'https://www.google.de',
            'class': 'test test2',
            'name': 'test',
            'width': 100,
            'height': 50,
            'sandbox': 'allow-scripts,allow-forms',
            'allowFullScreen': True,
            'allowPaymentRequest': False,
            'dataAttributes': 'test: test1',
        })

    def test_invalid_data_attribute_reported(self):
        form = IframeForm({'src': 'https://www.google.de', 'data_attributes': '<b>a<d>value'})
        self.assertFalse(form.is_valid())
        self.assertEqual(
            form.errors['data_attributes'],
            ['Name should be a valid xml name, must not start with "xml" and semicolons '
             'are not allowed, "<b>a<d>value" given'],
        )

    def test_unknown_sandbox_value_rejected(self):
        form = IframeForm({'src': 'https://www.google.de', 'sandbox': ['evil-token']})
        self.assertFalse(form.is_valid())
        self.assertIn('sandbox', form.errors)

    def test_negative_width_rejected(self):
        form = IframeForm({'src': 'https://www.google.de', 'width': '-1'})
        self.assertFalse(form.is_valid())
        self.assertIn('width', form.errors)

    def test_src_required(self):
        form = IframeForm({})
        self.assertFalse(form.is_valid())
        self.assertIn('src', form.errors)
